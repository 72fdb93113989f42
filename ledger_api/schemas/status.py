"""
Pydantic schemas for script status events.
"""

from pydantic import BaseModel


class StatusEvent(BaseModel):
    """
    Status update posted by a scraper.

    Any extra fields are kept and broadcast to subscribers verbatim.
    """
    script: str
    status: str

    class Config:
        extra = "allow"
