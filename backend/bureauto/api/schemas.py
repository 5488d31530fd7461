import re
from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bureauto.services.status import AdvertisementStatus

# ASCII digits only
_YEAR_RANGE = re.compile(r"\s*[0-9]+\s*-\s*[0-9]+\s*")


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


class ManufacturerResponse(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}


class StatusTypeResponse(BaseModel):
    id: int
    description: str

    model_config = {"from_attributes": True}


# ---------------------------------------------------------------------------
# Advertisement
# ---------------------------------------------------------------------------


class AdvertisementCreate(BaseModel):
    manufacturer_id: int | None = None
    status_id: AdvertisementStatus = AdvertisementStatus.ACTIVE
    description: str | None = None
    model_description: str = Field(..., min_length=1, max_length=255)
    brand_description: str | None = Field(default=None, max_length=255)
    value: Decimal = Field(..., ge=0)
    year_manufacture: int
    year_model: int
    images: str | None = None


class AdvertisementUpdate(BaseModel):
    """Partial overwrite; only fields the client sent are applied."""

    id: int
    manufacturer_id: int | None = None
    description: str | None = None
    model_description: str | None = Field(default=None, min_length=1, max_length=255)
    brand_description: str | None = Field(default=None, max_length=255)
    value: Decimal | None = Field(default=None, ge=0)
    year_manufacture: int | None = None
    year_model: int | None = None
    images: str | None = None

    @field_validator("model_description", "value", "year_manufacture", "year_model")
    @classmethod
    def _not_null(cls, v):
        # Omitted fields keep their value; an explicit null cannot be stored
        if v is None:
            raise ValueError("field cannot be null")
        return v


class AdvertisementResponse(BaseModel):
    id: int
    user_id: int
    manufacturer_id: int | None
    status_id: int
    description: str | None
    model_description: str
    brand_description: str | None
    value: Decimal
    year_manufacture: int
    year_model: int
    views: int
    total_stopped: int
    images: str | None
    created_at: datetime
    manufacturer: ManufacturerResponse | None = None
    status_type: StatusTypeResponse | None = None

    model_config = {"from_attributes": True}


class AdvertisementDetailResponse(AdvertisementResponse):
    nickname: str | None = None
    is_cpf_document: bool | None = None

    @classmethod
    def from_advertisement(cls, advertisement: Any) -> "AdvertisementDetailResponse":
        data = AdvertisementResponse.model_validate(advertisement).model_dump()
        user = advertisement.user
        return cls(
            **data,
            nickname=user.nickname if user else None,
            is_cpf_document=user.is_cpf_document if user else None,
        )


class AdvertisementFilter(BaseModel):
    """Search criteria as sent by the client, camelCase keys included."""

    term: str | None = None
    brand: str | None = None
    model: str | None = None
    year_man_model: str | None = Field(default=None, alias="yearManModel")
    value_min_max: tuple[Decimal, Decimal] | None = Field(default=None, alias="valueMinMax")
    skip: int | None = Field(default=None, ge=0)
    take: int | None = Field(default=None, ge=1)

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("year_man_model")
    @classmethod
    def _check_year_range(cls, v: str | None) -> str | None:
        if not v:
            return v
        if not _YEAR_RANGE.fullmatch(v):
            raise ValueError("yearManModel must look like '<manufactureYear>-<modelYear>'")
        return v

    @property
    def year_bounds(self) -> tuple[int, int] | None:
        if not self.year_man_model:
            return None
        manufacture, model = self.year_man_model.split("-")
        return int(manufacture), int(model)


class BrandOptions(BaseModel):
    brands: list[str] = []


class ModelOptions(BaseModel):
    models: list[str] = []


class YearModelOptions(BaseModel):
    year_models: list[str] = Field(default=[], serialization_alias="yearModels")


class ValueBounds(BaseModel):
    min: Decimal | None = None
    max: Decimal | None = None


class FilterOptions(BaseModel):
    """Values the client offers in its search drop-downs."""

    brand: BrandOptions = Field(default_factory=BrandOptions)
    model: ModelOptions = Field(default_factory=ModelOptions)
    year_model: YearModelOptions = Field(default_factory=YearModelOptions, serialization_alias="yearModel")
    value: ValueBounds = Field(default_factory=ValueBounds)


class AdvertisementPage(BaseModel):
    items: list[AdvertisementResponse]
    filters: FilterOptions


class ViewIncrementResponse(BaseModel):
    affected: int


class AdvertisementCountResponse(BaseModel):
    total_ads: int


class StatusActionsResponse(BaseModel):
    advertisement: AdvertisementResponse
    available_actions: list[str]


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------


class ViewContactReport(BaseModel):
    total_views: int = Field(serialization_alias="totalViews")
    total_contacts: int = Field(serialization_alias="totalContacts")
    report: int


class StatusReportItem(BaseModel):
    status: str
    total: int


class SoldReport(BaseModel):
    sold: int
    percentage: str


class CategoryReportItem(BaseModel):
    category: str
    result: str


class TimeReport(BaseModel):
    report: str
