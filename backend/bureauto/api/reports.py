from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from bureauto.api.schemas import (
    CategoryReportItem,
    SoldReport,
    StatusReportItem,
    TimeReport,
    ViewContactReport,
)
from bureauto.core.deps import get_db
from bureauto.services import reports as reports_svc

router = APIRouter(prefix="/reports", tags=["reports"])


# ---------------------------------------------------------------------------
# Seller dashboard
# ---------------------------------------------------------------------------


@router.get("/users/{user_id}/views-contacts", response_model=ViewContactReport)
async def user_view_contact(user_id: int, db: AsyncSession = Depends(get_db)):
    return await reports_svc.get_view_contact_report(db, user_id)


@router.get("/users/{user_id}/sold", response_model=SoldReport)
async def user_sold(user_id: int, db: AsyncSession = Depends(get_db)):
    return await reports_svc.get_sold_report(db, user_id)


@router.get("/users/{user_id}/sold-by-category", response_model=list[CategoryReportItem])
async def user_sold_by_category(user_id: int, db: AsyncSession = Depends(get_db)):
    return await reports_svc.get_sold_by_category_report(db, user_id)


@router.get("/users/{user_id}/time", response_model=TimeReport)
async def user_time(user_id: int, db: AsyncSession = Depends(get_db)):
    return TimeReport(report=await reports_svc.get_time_report(db, user_id))


# ---------------------------------------------------------------------------
# Admin dashboard
# ---------------------------------------------------------------------------


@router.get("/admin/views-contacts", response_model=ViewContactReport)
async def admin_view_contact(db: AsyncSession = Depends(get_db)):
    return await reports_svc.get_view_contact_report(db)


@router.get("/admin/status", response_model=list[StatusReportItem])
async def admin_status(db: AsyncSession = Depends(get_db)):
    return await reports_svc.get_status_report(db)


@router.get("/admin/sold", response_model=SoldReport)
async def admin_sold(db: AsyncSession = Depends(get_db)):
    return await reports_svc.get_sold_report(db)


@router.get("/admin/sold-by-category", response_model=list[CategoryReportItem])
async def admin_sold_by_category(db: AsyncSession = Depends(get_db)):
    return await reports_svc.get_sold_by_category_report(db)
