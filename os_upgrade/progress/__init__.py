"""
Progress reporting package.

Provides JSON line events on stdout for the deployment tool that invokes
the upgrade and reboot gate phases.
"""

from .event_sender import EventEmitter

__all__ = ["EventEmitter"]
