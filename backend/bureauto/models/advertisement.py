from datetime import datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bureauto.db.base import Base
from bureauto.services.status import AdvertisementStatus


class Advertisement(Base):
    __tablename__ = "advertisements"
    __table_args__ = (
        CheckConstraint("value >= 0", name="value_non_negative"),
        CheckConstraint("status_id IN (1, 2, 3, 4)", name="status_known"),
    )

    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    manufacturer_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("manufacturers.id"), nullable=True, index=True
    )
    status_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("status_types.id"),
        nullable=False,
        index=True,
        default=AdvertisementStatus.ACTIVE,
        server_default=str(int(AdvertisementStatus.ACTIVE)),
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    model_description: Mapped[str] = mapped_column(String(255), nullable=False)
    brand_description: Mapped[str | None] = mapped_column(String(255), nullable=True)
    value: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    year_manufacture: Mapped[int] = mapped_column(Integer, nullable=False)
    year_model: Mapped[int] = mapped_column(Integer, nullable=False)
    views: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    # Seconds accumulated across closed pauses
    total_stopped: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    paused_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    images: Mapped[str | None] = mapped_column(String(512), nullable=True)

    # Relationships
    user = relationship("User", lazy="selectin")
    manufacturer = relationship("Manufacturer", lazy="selectin")
    status_type = relationship("StatusType", lazy="selectin")
