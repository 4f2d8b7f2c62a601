"""ORM model for submitted issue reports."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Text, func

from app.models.base import Base


class Issue(Base):
    """
    Free-text issue report. user_id is null for legacy anonymous submissions
    and for issues whose author account was deleted.
    """

    __tablename__ = "issue_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    issue_text = Column(Text, nullable=False)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        index=True,
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=True,
        onupdate=func.now(),
    )
