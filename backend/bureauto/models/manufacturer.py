from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from bureauto.db.base import Base


class Manufacturer(Base):
    __tablename__ = "manufacturers"

    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
