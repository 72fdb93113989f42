"""
Database models package.
"""

from ledger_api.models.user import User
from ledger_api.models.script_status import ScriptStatus

__all__ = ["User", "ScriptStatus"]
