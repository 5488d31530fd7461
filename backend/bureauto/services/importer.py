"""Bulk advertisement import from ``;``-delimited files."""

import asyncio
import logging
import os
from pathlib import Path

from sqlalchemy.ext.asyncio import AsyncSession

from bureauto.models.advertisement import Advertisement
from bureauto.services.advertisement import invalidate_filter_cache
from bureauto.services.status import AdvertisementStatus
from bureauto.services.validation import AdvertisementValidator, RowValidator, parse_value
from bureauto.utils.csv_codec import parse_rows, unparse_rows

logger = logging.getLogger(__name__)

REJECTION_COLUMN = "motivo"


def _row_to_advertisement(row: dict[str, str], user_id: int) -> Advertisement:
    return Advertisement(
        user_id=user_id,
        manufacturer_id=int(row["adv_man_cod"]),
        status_id=AdvertisementStatus.ACTIVE,
        model_description=row["modelo"].strip(),
        year_manufacture=int(row["ano_fabricacao"]),
        year_model=int(row["ano_modelo"]),
        brand_description=row["marca"].strip(),
        value=parse_value(row["valor"]),
    )


def _remove_file(path: str) -> None:
    try:
        os.unlink(path)
    except OSError as exc:
        logger.warning("Could not delete import file %s: %s", path, exc)


async def import_advertisements(
    db: AsyncSession,
    file_path: str,
    user_id: int,
    validator: RowValidator | None = None,
) -> str:
    """Import every row of the file for ``user_id``.

    Rows are validated one by one in file order and the accepted ones are
    committed together. The uploaded file is deleted afterwards. Returns the rejected rows (with a ``motivo``
    column) as ``;``-delimited text, or "" when every row was accepted.

    Raises OSError if the file cannot be read and ParseError if it is not
    valid delimited text.
    """
    text = await asyncio.to_thread(Path(file_path).read_text, encoding="utf-8")
    validator = validator or AdvertisementValidator(db)

    rejected: list[dict[str, str]] = []
    imported = 0
    try:
        for row in parse_rows(text):
            try:
                result = await validator.validate(row)
                if result.valid:
                    advertisement = _row_to_advertisement(row, user_id)
            except Exception as exc:
                logger.warning("Import row rejected by an error: %s", exc)
                rejected.append({**row, REJECTION_COLUMN: str(exc)})
                continue

            if not result.valid:
                rejected.append({**row, REJECTION_COLUMN: result.error or ""})
                continue

            db.add(advertisement)
            imported += 1

        if imported:
            await db.commit()
            await invalidate_filter_cache()
    finally:
        _remove_file(file_path)

    logger.info(
        "Import for user %s finished: %d imported, %d rejected",
        user_id, imported, len(rejected),
    )
    return unparse_rows(rejected)
