"""Dashboard reports for sellers and administrators.

Every report returns fixed defaults when there is nothing to aggregate
instead of dividing by zero.
"""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from bureauto.api.schemas import (
    CategoryReportItem,
    SoldReport,
    StatusReportItem,
    ViewContactReport,
)
from bureauto.db.base import utcnow
from bureauto.models.advertisement import Advertisement
from bureauto.models.chat import Chat
from bureauto.models.status_type import StatusType
from bureauto.services.status import OWNER_STATUSES, SALE_BASE_STATUSES, AdvertisementStatus
from bureauto.utils.dates import format_duration_pt, seconds_to_time_duration


NOT_FOUND_LABEL = "Não encontrado"

# (column, label) pairs for the best-seller report
SOLD_CATEGORIES = (
    (Advertisement.brand_description, "Marca mais vendida"),
    (Advertisement.model_description, "Modelo mais vendido"),
    (Advertisement.year_model, "Ano do modelo mais vendido"),
)


def _round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def views_per_contact(total_views: int, total_contacts: int) -> ViewContactReport:
    if not total_views:
        return ViewContactReport(total_views=0, total_contacts=0, report=0)
    if not total_contacts:
        return ViewContactReport(total_views=total_views, total_contacts=0, report=0)
    report = _round_half_up(Decimal(total_views) / Decimal(total_contacts))
    return ViewContactReport(total_views=total_views, total_contacts=total_contacts, report=report)


async def get_view_contact_report(db: AsyncSession, user_id: int | None = None) -> ViewContactReport:
    """Average views per contact, for one seller or (user_id=None) the whole site."""
    views_q = select(func.coalesce(func.sum(Advertisement.views), 0))
    if user_id is not None:
        views_q = views_q.where(Advertisement.user_id == user_id)
    total_views = int((await db.execute(views_q)).scalar() or 0)
    if not total_views:
        return views_per_contact(0, 0)

    contacts_q = select(func.count(Chat.id))
    if user_id is not None:
        contacts_q = contacts_q.where(
            Chat.advertisement_id.in_(
                select(Advertisement.id).where(Advertisement.user_id == user_id)
            )
        )
    total_contacts = int((await db.execute(contacts_q)).scalar() or 0)
    return views_per_contact(total_views, total_contacts)


async def get_status_report(db: AsyncSession) -> list[StatusReportItem]:
    result = await db.execute(
        select(StatusType.description, func.count(Advertisement.id))
        .select_from(Advertisement)
        .join(StatusType, Advertisement.status_id == StatusType.id)
        .group_by(StatusType.id, StatusType.description)
        .order_by(StatusType.id)
    )
    return [StatusReportItem(status=status, total=total) for status, total in result.all()]


def sold_percentage(sold: int, total: int) -> str:
    if not total:
        return "0,00%"
    return f"{sold / total * 100:.2f}%".replace(".", ",")


async def get_sold_report(db: AsyncSession, user_id: int | None = None) -> SoldReport:
    """Share of sold advertisements among the Active + Sold ones."""
    sold_q = select(func.count(Advertisement.id)).where(
        Advertisement.status_id == AdvertisementStatus.SOLD
    )
    total_q = select(func.count(Advertisement.id)).where(
        Advertisement.status_id.in_(SALE_BASE_STATUSES)
    )
    if user_id is not None:
        sold_q = sold_q.where(Advertisement.user_id == user_id)
        total_q = total_q.where(Advertisement.user_id == user_id)

    sold = (await db.execute(sold_q)).scalar() or 0
    total = (await db.execute(total_q)).scalar() or 0
    return SoldReport(sold=sold, percentage=sold_percentage(sold, total))


async def get_sold_by_category_report(
    db: AsyncSession, user_id: int | None = None
) -> list[CategoryReportItem]:
    """Most sold brand, model and model year."""
    report = []
    for column, label in SOLD_CATEGORIES:
        total_sold = func.count(column).label("total_sold")
        query = (
            select(column, total_sold)
            .where(Advertisement.status_id == AdvertisementStatus.SOLD)
            .group_by(column)
            .order_by(desc(total_sold))
            .limit(1)
        )
        if user_id is not None:
            query = query.where(Advertisement.user_id == user_id)

        top = (await db.execute(query)).first()
        if top is None or top[0] is None:
            report.append(CategoryReportItem(category=label, result=NOT_FOUND_LABEL))
        else:
            report.append(CategoryReportItem(category=label, result=str(top[0])))
    return report


def average_listing_seconds(
    created: list[datetime], total_stopped: int, now: datetime
) -> int:
    """Mean time online: (sum of ages - paused seconds) / count, never negative."""
    if not created:
        return 0
    ages = 0.0
    for created_at in created:
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=now.tzinfo)
        ages += (now - created_at).total_seconds()
    average = (round(ages) - total_stopped) / len(created)
    return max(0, round(average))


async def get_time_report(
    db: AsyncSession, user_id: int, now: datetime | None = None
) -> str:
    """Average time the seller's Active/Paused advertisements have been listed."""
    result = await db.execute(
        select(Advertisement.created_at, Advertisement.total_stopped).where(
            Advertisement.user_id == user_id,
            Advertisement.status_id.in_(OWNER_STATUSES),
        )
    )
    rows = result.all()
    created = [created_at for created_at, _ in rows]
    total_stopped = sum(stopped or 0 for _, stopped in rows)

    average = average_listing_seconds(created, total_stopped, now or utcnow())
    return format_duration_pt(seconds_to_time_duration(average))
