"""
Pydantic models for API request/response serialization.
"""
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, Field, model_validator

from motoscout.models import ListingRecord, SearchFilters


class SearchFiltersIn(BaseModel):
    """Search criteria. Accepts English names or the Italian form keys."""
    brand: Optional[str] = Field(None, validation_alias=AliasChoices("brand", "marca"))
    model: Optional[str] = Field(None, validation_alias=AliasChoices("model", "modello"))
    min_price: Optional[float] = Field(None, ge=0, allow_inf_nan=False, validation_alias=AliasChoices("min_price", "prezzoMin"))
    max_price: Optional[float] = Field(None, ge=0, allow_inf_nan=False, validation_alias=AliasChoices("max_price", "prezzoMax"))
    min_year: Optional[int] = Field(None, ge=1900, validation_alias=AliasChoices("min_year", "annoMin"))
    max_year: Optional[int] = Field(None, ge=1900, validation_alias=AliasChoices("max_year", "annoMax"))
    max_mileage: Optional[float] = Field(
        None, ge=0, allow_inf_nan=False, validation_alias=AliasChoices("max_mileage", "chilometraggioMax")
    )
    region: Optional[str] = Field(None, validation_alias=AliasChoices("region", "regione"))

    @model_validator(mode="after")
    def check_ranges(self):
        if self.min_price is not None and self.max_price is not None and self.max_price < self.min_price:
            raise ValueError("max_price must be greater than or equal to min_price")
        if self.min_year is not None and self.max_year is not None and self.max_year < self.min_year:
            raise ValueError("max_year must be greater than or equal to min_year")
        return self

    def to_filters(self) -> SearchFilters:
        return SearchFilters.from_dict(self.model_dump(exclude_none=True))


class ListingOut(BaseModel):
    """Output model for listing data."""
    title: str
    price: str
    brand: str = ""
    model: str = ""
    year: Optional[str] = None
    mileage: Optional[str] = None
    location: Optional[str] = None
    image: Optional[str] = None
    link: str
    source: str

    @classmethod
    def from_record(cls, record: ListingRecord) -> "ListingOut":
        return cls(**record.to_dict())


class SearchResponse(BaseModel):
    """Either data or error is set, never both."""
    success: bool
    data: Optional[List[ListingOut]] = None
    error: Optional[str] = None


class ApiKeyIn(BaseModel):
    api_key: str


class ApiKeyStatus(BaseModel):
    configured: bool


class ApiKeyValidation(BaseModel):
    valid: bool


class SourceOut(BaseModel):
    name: str
    search_url: str
