from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from bureauto.api.schemas import (
    AdvertisementCountResponse,
    AdvertisementDetailResponse,
    AdvertisementPage,
    AdvertisementResponse,
    AdvertisementUpdate,
    FilterOptions,
    ViewIncrementResponse,
)
from bureauto.core.deps import get_db
from bureauto.services import advertisement as advertisement_svc

router = APIRouter(prefix="/advertisements", tags=["advertisements"])


@router.get("", response_model=AdvertisementPage)
async def list_advertisements(
    page: int = Query(default=1, ge=1),
    items: int = Query(default=20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    advertisements = await advertisement_svc.get_all_advertisements(db, page=page, items=items)
    filters = await advertisement_svc.get_filter_options(db)
    return AdvertisementPage(items=advertisements, filters=filters)


@router.get("/count", response_model=AdvertisementCountResponse)
async def count_advertisements(db: AsyncSession = Depends(get_db)):
    total = await advertisement_svc.count_active_advertisements(db)
    return AdvertisementCountResponse(total_ads=total)


@router.get("/values")
async def value_bounds(db: AsyncSession = Depends(get_db)) -> list:
    low, high = await advertisement_svc.get_value_bounds(db)
    return [low, high]


@router.get("/filters", response_model=FilterOptions)
async def filter_options(db: AsyncSession = Depends(get_db)):
    return await advertisement_svc.get_filter_options(db)


@router.get("/search/{filters}", response_model=AdvertisementPage)
async def search_advertisements(filters: str, db: AsyncSession = Depends(get_db)):
    advertisements = await advertisement_svc.search_advertisements(db, filters)
    return AdvertisementPage(
        items=advertisements,
        filters=advertisement_svc.build_filter_options(advertisements),
    )


@router.put("/edit", response_model=AdvertisementResponse)
async def edit_advertisement(data: AdvertisementUpdate, db: AsyncSession = Depends(get_db)):
    advertisement = await advertisement_svc.edit_advertisement(db, data)
    if advertisement is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Advertisement not found")
    return advertisement


@router.get("/{advertisement_id}", response_model=AdvertisementDetailResponse)
async def get_advertisement(advertisement_id: int, db: AsyncSession = Depends(get_db)):
    advertisement = await advertisement_svc.get_advertisement(db, advertisement_id)
    if advertisement is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Advertisement not found")
    return AdvertisementDetailResponse.from_advertisement(advertisement)


@router.post("/{advertisement_id}/views", response_model=ViewIncrementResponse)
async def increment_views(advertisement_id: int, db: AsyncSession = Depends(get_db)):
    affected = await advertisement_svc.increment_views(db, advertisement_id)
    if not affected:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Advertisement not found")
    return ViewIncrementResponse(affected=affected)
