from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from bureauto.db.base import Base


class StatusType(Base):
    """Lookup table for advertisement status codes (see services.status)."""

    __tablename__ = "status_types"

    description: Mapped[str] = mapped_column(String(50), nullable=False)
