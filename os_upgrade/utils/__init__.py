"""
Utility functions and helper modules.

Provides JSON serialization for progress events and per-run log sinks.
"""

from .json_utils import safe_json_serialize
from .run_log import build_log_path, configure_console_logging, run_log_sink

__all__ = [
    "build_log_path",
    "configure_console_logging",
    "run_log_sink",
    "safe_json_serialize",
]
