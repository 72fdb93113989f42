from sqlalchemy import Column, String
from ledger_api.core.database import Base


class ScriptStatus(Base):
    """
    Latest reported status of a scraper script, one row per script.

    Rows are seeded outside this service and only ever updated in place.
    """
    __tablename__ = "scripts_status"

    script = Column(String(255), primary_key=True)
    status = Column(String(255), nullable=True)

    def __repr__(self):
        return f"<ScriptStatus(script='{self.script}', status='{self.status}')>"
