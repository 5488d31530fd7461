import logging
from collections.abc import Iterable
from datetime import datetime

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from bureauto.api.schemas import (
    AdvertisementCreate,
    AdvertisementFilter,
    AdvertisementUpdate,
    FilterOptions,
)
from bureauto.core.cache import cache_delete, cache_get, cache_set, make_cache_key
from bureauto.core.config import settings
from bureauto.db.base import utcnow
from bureauto.db.predicates import apply_predicate
from bureauto.models.advertisement import Advertisement
from bureauto.models.manufacturer import Manufacturer
from bureauto.services.filters import compile_filters, parse_filters
from bureauto.services.status import (
    OWNER_STATUSES,
    PUBLIC_STATUSES,
    AdvertisementAction,
    AdvertisementStatus,
    validate_transition,
)

logger = logging.getLogger(__name__)

_FILTER_OPTIONS_KEY = make_cache_key("advertisements", "filters")


async def invalidate_filter_cache() -> None:
    await cache_delete(_FILTER_OPTIONS_KEY)


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------


async def create_advertisement(
    db: AsyncSession, user_id: int, data: AdvertisementCreate
) -> Advertisement:
    advertisement = Advertisement(user_id=user_id, **data.model_dump())
    if advertisement.status_id == AdvertisementStatus.PAUSED:
        advertisement.paused_at = utcnow()
    db.add(advertisement)
    await db.commit()
    await db.refresh(advertisement)
    await invalidate_filter_cache()
    logger.info("Advertisement %s created for user %s", advertisement.id, user_id)
    return advertisement


async def edit_advertisement(
    db: AsyncSession, data: AdvertisementUpdate
) -> Advertisement | None:
    """Overwrite the fields present in ``data``. Returns None when the id is unknown."""
    result = await db.execute(select(Advertisement).where(Advertisement.id == data.id))
    advertisement = result.scalar_one_or_none()
    if advertisement is None:
        return None

    for field, value in data.model_dump(exclude_unset=True, exclude={"id"}).items():
        setattr(advertisement, field, value)
    await db.commit()
    await db.refresh(advertisement)
    await invalidate_filter_cache()
    return advertisement


def _close_pause(advertisement: Advertisement, now: datetime) -> None:
    """Fold the running pause into total_stopped."""
    if advertisement.paused_at is None:
        return
    paused_at = advertisement.paused_at
    if paused_at.tzinfo is None:
        paused_at = paused_at.replace(tzinfo=now.tzinfo)
    elapsed = max(0, round((now - paused_at).total_seconds()))
    advertisement.total_stopped = (advertisement.total_stopped or 0) + elapsed
    advertisement.paused_at = None


def apply_transition(advertisement: Advertisement, action: str, now: datetime | None = None) -> None:
    """Move the advertisement to its next status, keeping pause bookkeeping in sync.

    Raises InvalidTransitionError if the action is not allowed from the current status.
    """
    new_status = validate_transition(advertisement.status_id, action)
    now = now or utcnow()
    if advertisement.status_id == AdvertisementStatus.PAUSED:
        _close_pause(advertisement, now)
    if new_status == AdvertisementStatus.PAUSED:
        advertisement.paused_at = now
    advertisement.status_id = new_status


async def change_status(
    db: AsyncSession, advertisement_id: int, user_id: int, action: str
) -> Advertisement | None:
    result = await db.execute(
        select(Advertisement).where(
            Advertisement.id == advertisement_id,
            Advertisement.user_id == user_id,
        )
    )
    advertisement = result.scalar_one_or_none()
    if advertisement is None:
        return None

    previous = advertisement.status_id
    apply_transition(advertisement, action)
    await db.commit()
    await db.refresh(advertisement)
    await invalidate_filter_cache()
    logger.info(
        "Advertisement %s status %s -> %s",
        advertisement_id, previous, advertisement.status_id,
    )
    return advertisement


async def delete_advertisement(
    db: AsyncSession, advertisement_id: int, user_id: int
) -> Advertisement | None:
    """Soft delete: mark as Removed. No-op (None) if missing or already Removed."""
    result = await db.execute(
        select(Advertisement).where(
            Advertisement.id == advertisement_id,
            Advertisement.user_id == user_id,
            Advertisement.status_id != AdvertisementStatus.REMOVED,
        )
    )
    advertisement = result.scalar_one_or_none()
    if advertisement is None:
        return None

    apply_transition(advertisement, AdvertisementAction.REMOVE)
    await db.commit()
    await db.refresh(advertisement)
    await invalidate_filter_cache()
    logger.info("Advertisement %s removed by user %s", advertisement_id, user_id)
    return advertisement


async def increment_views(db: AsyncSession, advertisement_id: int) -> int:
    """Atomically bump the view counter. Returns the number of rows touched (0 or 1)."""
    result = await db.execute(
        update(Advertisement)
        .where(Advertisement.id == advertisement_id)
        .values(views=Advertisement.views + 1)
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    return result.rowcount


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


async def get_all_advertisements(
    db: AsyncSession, page: int = 1, items: int = 20
) -> list[Advertisement]:
    result = await db.execute(
        select(Advertisement)
        .where(Advertisement.status_id.in_(PUBLIC_STATUSES))
        .order_by(Advertisement.id.desc())
        .offset((page - 1) * items)
        .limit(items)
    )
    return list(result.scalars().all())


async def search_advertisements(
    db: AsyncSession, raw_filters: str | dict | AdvertisementFilter | None
) -> list[Advertisement]:
    """Public search. Raises FilterParseError for malformed filters."""
    filters = parse_filters(raw_filters)
    query = apply_predicate(select(Advertisement), compile_filters(filters))
    query = query.order_by(Advertisement.id.desc())
    if filters.skip is not None:
        query = query.offset(filters.skip)
    if filters.take is not None:
        query = query.limit(filters.take)
    result = await db.execute(query)
    return list(result.scalars().all())


async def get_advertisement(db: AsyncSession, advertisement_id: int) -> Advertisement | None:
    """Public detail, only for Active advertisements."""
    result = await db.execute(
        select(Advertisement).where(
            Advertisement.id == advertisement_id,
            Advertisement.status_id.in_(PUBLIC_STATUSES),
        )
    )
    return result.scalar_one_or_none()


async def get_my_advertisement(
    db: AsyncSession, advertisement_id: int, user_id: int
) -> Advertisement | None:
    result = await db.execute(
        select(Advertisement).where(
            Advertisement.id == advertisement_id,
            Advertisement.user_id == user_id,
            Advertisement.status_id.in_(OWNER_STATUSES),
        )
    )
    return result.scalar_one_or_none()


async def get_advertisements_by_user(db: AsyncSession, user_id: int) -> list[Advertisement]:
    result = await db.execute(
        select(Advertisement)
        .where(
            Advertisement.user_id == user_id,
            Advertisement.status_id.in_(OWNER_STATUSES),
        )
        .order_by(Advertisement.id.desc())
    )
    return list(result.scalars().all())


async def count_active_advertisements(db: AsyncSession) -> int:
    result = await db.execute(
        select(func.count(Advertisement.id)).where(
            Advertisement.status_id == AdvertisementStatus.ACTIVE
        )
    )
    return result.scalar() or 0


async def get_value_bounds(db: AsyncSession) -> tuple:
    """(min, max) value over Active advertisements; (None, None) when there are none."""
    result = await db.execute(
        select(func.min(Advertisement.value), func.max(Advertisement.value)).where(
            Advertisement.status_id == AdvertisementStatus.ACTIVE
        )
    )
    low, high = result.one()
    return low, high


async def _load_filter_options(db: AsyncSession) -> FilterOptions:
    active = Advertisement.status_id == AdvertisementStatus.ACTIVE
    low, high = await get_value_bounds(db)

    years = await db.execute(
        select(Advertisement.year_manufacture, Advertisement.year_model)
        .where(active)
        .group_by(Advertisement.year_manufacture, Advertisement.year_model)
        .order_by(Advertisement.year_manufacture, Advertisement.year_model)
    )
    models = await db.execute(
        select(Advertisement.model_description)
        .where(active)
        .group_by(Advertisement.model_description)
        .order_by(Advertisement.model_description)
    )
    brands = await db.execute(
        select(Manufacturer.name)
        .join(Advertisement, Advertisement.manufacturer_id == Manufacturer.id)
        .where(active)
        .group_by(Manufacturer.name)
        .order_by(Manufacturer.name)
    )

    return FilterOptions.model_validate({
        "brand": {"brands": [name for (name,) in brands.all()]},
        "model": {"models": [model for (model,) in models.all()]},
        "year_model": {"year_models": [f"{man}-{mod}" for man, mod in years.all()]},
        "value": {"min": low, "max": high},
    })


async def get_filter_options(db: AsyncSession) -> FilterOptions:
    """Search drop-down values across every Active advertisement (cached)."""
    cached = await cache_get(_FILTER_OPTIONS_KEY)
    if cached is not None:
        return FilterOptions.model_validate_json(cached)

    options = await _load_filter_options(db)
    await cache_set(_FILTER_OPTIONS_KEY, options.model_dump_json(), ttl=settings.cache_filters_ttl)
    return options


def build_filter_options(advertisements: Iterable[Advertisement]) -> FilterOptions:
    """Search drop-down values restricted to a result set, in first-seen order."""
    brands: dict[str, None] = {}
    models: dict[str, None] = {}
    years: dict[str, None] = {}
    values = []
    for advertisement in advertisements:
        if advertisement.manufacturer is not None:
            brands[advertisement.manufacturer.name] = None
        models[advertisement.model_description] = None
        years[f"{advertisement.year_manufacture}-{advertisement.year_model}"] = None
        values.append(advertisement.value)

    return FilterOptions.model_validate({
        "brand": {"brands": list(brands)},
        "model": {"models": list(models)},
        "year_model": {"year_models": list(years)},
        "value": {"min": min(values, default=None), "max": max(values, default=None)},
    })
