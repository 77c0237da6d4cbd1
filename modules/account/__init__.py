"""
Account module.

Hosts the sign-in and profile flows around the process-wide session slot.
"""

from .controller import AccountController

__all__ = ["AccountController"]
