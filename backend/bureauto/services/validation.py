"""Per-row validation for the bulk advertisement import."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bureauto.models.manufacturer import Manufacturer

REQUIRED_COLUMNS: tuple[str, ...] = (
    "adv_man_cod",
    "modelo",
    "ano_fabricacao",
    "ano_modelo",
    "marca",
    "valor",
)

MIN_YEAR = 1900


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    error: str | None = None


class RowValidator(Protocol):
    async def validate(self, row: dict[str, str]) -> ValidationResult: ...


def parse_value(raw: str) -> Decimal:
    """Parse a price written with a comma decimal separator ("45000,50")."""
    try:
        value = Decimal(str(raw).strip().replace(",", "."))
    except InvalidOperation:
        raise ValueError(f"Valor inválido: {raw}")
    if not value.is_finite() or value < 0:
        raise ValueError(f"Valor inválido: {raw}")
    return value


def _parse_int(raw: str) -> int | None:
    raw = str(raw).strip()
    return int(raw) if raw.isdigit() else None


class AdvertisementValidator:
    """Checks one CSV row before it becomes an advertisement."""

    def __init__(self, db: AsyncSession, today: date | None = None):
        self.db = db
        self.today = today or date.today()
        self._known_manufacturers: dict[int, bool] = {}

    async def _manufacturer_exists(self, manufacturer_id: int) -> bool:
        if manufacturer_id not in self._known_manufacturers:
            result = await self.db.execute(
                select(Manufacturer.id).where(Manufacturer.id == manufacturer_id)
            )
            self._known_manufacturers[manufacturer_id] = result.scalar_one_or_none() is not None
        return self._known_manufacturers[manufacturer_id]

    async def validate(self, row: dict[str, str]) -> ValidationResult:
        for column in REQUIRED_COLUMNS:
            if not str(row.get(column) or "").strip():
                return ValidationResult(False, f"Campo obrigatório ausente: {column}")

        manufacturer_id = _parse_int(row["adv_man_cod"])
        if manufacturer_id is None or not await self._manufacturer_exists(manufacturer_id):
            return ValidationResult(False, f"Fabricante não encontrado: {row['adv_man_cod']}")

        year_manufacture = _parse_int(row["ano_fabricacao"])
        if year_manufacture is None or not MIN_YEAR <= year_manufacture <= self.today.year + 1:
            return ValidationResult(False, f"Ano de fabricação inválido: {row['ano_fabricacao']}")

        year_model = _parse_int(row["ano_modelo"])
        if year_model is None or not year_manufacture <= year_model <= year_manufacture + 1:
            return ValidationResult(False, f"Ano do modelo inválido: {row['ano_modelo']}")

        try:
            parse_value(row["valor"])
        except ValueError as exc:
            return ValidationResult(False, str(exc))

        return ValidationResult(True)
