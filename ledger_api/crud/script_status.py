"""
CRUD operations for ScriptStatus model.
"""

from sqlalchemy.orm import Session
from ledger_api.models.script_status import ScriptStatus


def set_status(db: Session, script: str, status: str) -> int:
    """
    Update the status of an existing script row.

    Rows are never inserted here; an unknown script updates nothing.

    Returns:
        Number of rows matched (0 or 1)
    """
    updated = (
        db.query(ScriptStatus)
        .filter(ScriptStatus.script == script)
        .update({ScriptStatus.status: status}, synchronize_session=False)
    )
    db.commit()
    return updated

