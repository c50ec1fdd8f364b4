"""SQLAlchemy model for the todos table."""

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import expression

from taskboard.infrastructure.database import Base
from taskboard.utils import utc_now_naive


class TodoModel(Base):
    """Database representation for user todos."""

    __tablename__ = "todos"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    completed = Column(
        Boolean,
        nullable=False,
        default=False,
        server_default=expression.false(),
    )
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    due_date = Column(DateTime, nullable=True)
    tags = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, nullable=False, default=utc_now_naive)
    updated_at = Column(
        DateTime, nullable=False, default=utc_now_naive, onupdate=utc_now_naive
    )

    user = relationship("UserModel", back_populates="todos", lazy="joined")


__all__ = ["TodoModel"]
