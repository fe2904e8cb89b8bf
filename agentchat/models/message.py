"""Chat message database model."""

import enum
from datetime import datetime

from sqlalchemy import BigInteger, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from agentchat.core.database import Base, Timestamp, new_id, utc_now


class SenderKind(str, enum.Enum):
    """Who authored a message."""

    USER = "user"
    AGENT = "agent"


class Message(Base):
    """Append-only entry in a chat transcript."""

    __tablename__ = "messages"
    __table_args__ = (Index("ix_messages_chat_id_created_at", "chat_id", "created_at"),)

    # Insertion order; breaks created_at ties in transcripts and previews.
    seq: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
    )
    id: Mapped[str] = mapped_column(
        String(36), unique=True, nullable=False, default=new_id
    )
    chat_id: Mapped[str] = mapped_column(
        ForeignKey("chats.id", ondelete="CASCADE"), nullable=False
    )
    # Null for agent-authored messages.
    author_id: Mapped[str | None] = mapped_column(
        ForeignKey("users.id"), nullable=True
    )
    sender_kind: Mapped[str] = mapped_column(String(10), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(Timestamp, default=utc_now)
