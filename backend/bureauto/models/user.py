from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from bureauto.db.base import Base


class User(Base):
    __tablename__ = "users"

    nickname: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    is_cpf_document: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default="true"
    )
