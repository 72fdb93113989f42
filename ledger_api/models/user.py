"""
User model for dashboard accounts.
"""

from sqlalchemy import Column, Integer, String, Text
from ledger_api.core.database import Base


class User(Base):
    """
    Dashboard user account.

    The hash lives in the "password" column, the name used by the existing
    database.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    username = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column("password", String(255), nullable=False)

    # Free-form list of scraper tasks assigned to the user
    tasks = Column(Text, nullable=True, default="")

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}')>"
