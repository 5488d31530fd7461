from sqlalchemy import ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column

from bureauto.db.base import Base


class Chat(Base):
    """A buyer contacting the seller about an advertisement."""

    __tablename__ = "chats"

    advertisement_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("advertisements.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
