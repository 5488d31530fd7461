from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from bureauto.api.schemas import (
    AdvertisementCreate,
    AdvertisementResponse,
    StatusActionsResponse,
)
from bureauto.core.deps import get_db
from bureauto.services import advertisement as advertisement_svc
from bureauto.services.status import AdvertisementAction, get_available_actions

router = APIRouter(prefix="/users/{user_id}/advertisements", tags=["owner"])


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Advertisement not found")


@router.post("", response_model=AdvertisementResponse, status_code=status.HTTP_201_CREATED)
async def create_advertisement(
    user_id: int, data: AdvertisementCreate, db: AsyncSession = Depends(get_db)
):
    return await advertisement_svc.create_advertisement(db, user_id, data)


@router.get("", response_model=list[AdvertisementResponse])
async def list_my_advertisements(user_id: int, db: AsyncSession = Depends(get_db)):
    return await advertisement_svc.get_advertisements_by_user(db, user_id)


@router.get("/{advertisement_id}", response_model=AdvertisementResponse)
async def get_my_advertisement(
    user_id: int, advertisement_id: int, db: AsyncSession = Depends(get_db)
):
    advertisement = await advertisement_svc.get_my_advertisement(db, advertisement_id, user_id)
    if advertisement is None:
        raise _not_found()
    return advertisement


@router.delete("/{advertisement_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_advertisement(
    user_id: int, advertisement_id: int, db: AsyncSession = Depends(get_db)
):
    advertisement = await advertisement_svc.delete_advertisement(db, advertisement_id, user_id)
    if advertisement is None:
        raise _not_found()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{advertisement_id}/{action}", response_model=StatusActionsResponse)
async def change_status(
    user_id: int,
    advertisement_id: int,
    action: AdvertisementAction,
    db: AsyncSession = Depends(get_db),
):
    advertisement = await advertisement_svc.change_status(db, advertisement_id, user_id, action)
    if advertisement is None:
        raise _not_found()
    return StatusActionsResponse(
        advertisement=advertisement,
        available_actions=get_available_actions(advertisement.status_id),
    )
