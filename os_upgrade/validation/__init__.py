"""
Validation package for the upgrade orchestration system.

Contains the compatibility checks run before an upgrade and the reboot gate
decision run afterwards.
"""

from .compatibility_evaluator import CompatibilityEvaluator, round_gb
from .reboot_evaluator import RebootSignalEvaluator

__all__ = ["CompatibilityEvaluator", "RebootSignalEvaluator", "round_gb"]
