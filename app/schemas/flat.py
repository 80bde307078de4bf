"""
Flat schemas for API request/response validation.
Field aliases match the stored document (camelCase) field names.
"""
from datetime import date
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.utils.validators import validate_date_available, validate_year_built


class FlatCreate(BaseModel):
    """Schema for listing a new flat. The owner is the authenticated user."""

    model_config = ConfigDict(populate_by_name=True)

    ad_title: str = Field(..., min_length=5, max_length=60, alias="adTitle")
    city: str = Field(..., min_length=2, max_length=100)
    street_name: str = Field(..., min_length=2, max_length=200, alias="streetName")
    street_number: int = Field(..., gt=0, alias="streetNumber")
    area_size: float = Field(..., gt=0, alias="areaSize")
    has_ac: bool = Field(default=False, alias="hasAC")
    year_built: int = Field(..., alias="yearBuilt")
    rent_price: float = Field(..., gt=0, alias="rentPrice")
    date_available: date = Field(..., alias="dateAvailable")
    image: Optional[str] = Field(None, max_length=2048, description="Image URL or storage key")

    @field_validator("year_built")
    @classmethod
    def check_year_built(cls, v: int) -> int:
        return validate_year_built(v)

    @field_validator("date_available")
    @classmethod
    def check_date_available(cls, v: date) -> date:
        return validate_date_available(v)


class FlatUpdate(BaseModel):
    """Schema for editing a flat. Only provided fields change."""

    model_config = ConfigDict(populate_by_name=True)

    ad_title: Optional[str] = Field(None, min_length=5, max_length=60, alias="adTitle")
    city: Optional[str] = Field(None, min_length=2, max_length=100)
    street_name: Optional[str] = Field(None, min_length=2, max_length=200, alias="streetName")
    street_number: Optional[int] = Field(None, gt=0, alias="streetNumber")
    area_size: Optional[float] = Field(None, gt=0, alias="areaSize")
    has_ac: Optional[bool] = Field(None, alias="hasAC")
    year_built: Optional[int] = Field(None, alias="yearBuilt")
    rent_price: Optional[float] = Field(None, gt=0, alias="rentPrice")
    date_available: Optional[date] = Field(
        None,
        alias="dateAvailable",
        description="Checked against the stored date by FlatService.update_flat"
    )
    image: Optional[str] = Field(None, max_length=2048)

    @field_validator("year_built")
    @classmethod
    def check_year_built(cls, v: Optional[int]) -> Optional[int]:
        return validate_year_built(v) if v is not None else v


class FlatResponse(BaseModel):
    """A stored flat."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    owner_id: str = Field(..., alias="ownerID")
    ad_title: str = Field(..., alias="adTitle")
    city: str
    street_name: str = Field(..., alias="streetName")
    street_number: int = Field(..., alias="streetNumber")
    area_size: float = Field(..., alias="areaSize")
    has_ac: bool = Field(default=False, alias="hasAC")
    year_built: int = Field(..., alias="yearBuilt")
    rent_price: float = Field(..., alias="rentPrice")
    date_available: date = Field(..., alias="dateAvailable")
    image: Optional[str] = None


class FlatListResponse(BaseModel):
    items: List[FlatResponse]
    count: int
