"""Chat database model."""

from datetime import datetime

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from agentchat.core.database import Base, Timestamp, new_id, utc_now


class Chat(Base):
    """Conversation thread owned by a user, optionally bound to one agent."""

    __tablename__ = "chats"
    __table_args__ = (Index("ix_chats_owner_id_updated_at", "owner_id", "updated_at"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    owner_id: Mapped[str] = mapped_column(
        ForeignKey("users.id"), nullable=False, index=True
    )
    agent_id: Mapped[str | None] = mapped_column(
        ForeignKey("agents.id", ondelete="SET NULL"), nullable=True, index=True
    )
    created_at: Mapped[datetime] = mapped_column(Timestamp, default=utc_now)
    # Written explicitly on every new message, so no onupdate here.
    updated_at: Mapped[datetime] = mapped_column(Timestamp, default=utc_now)
