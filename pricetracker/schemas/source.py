"""Pydantic schemas for scrape targets and the records produced from them."""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Source(BaseModel):
    """A tracked URL plus its site-type tag, optionally linked to a catalog product."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str = Field(..., min_length=1, description="Source identifier")
    url: str = Field(..., min_length=1, description="Product page URL")
    type: str = Field(..., description="Site tag used to pick an extractor", examples=["dia"])
    name: str = Field("", description="Display name shown in progress messages")
    product_id: Optional[str] = Field(None, description="Linked catalog product")

    @property
    def label(self) -> str:
        """Human readable label used in progress events."""
        return self.name or self.url


# Matches the VARCHAR(500) name column of the ingest store
NAME_MAX_LENGTH = 500


class ScrapedRecord(BaseModel):
    """One timestamped observation of a product from one source.

    Records are append-only: the core creates exactly one per successful
    extraction and hands it to a persistence collaborator.
    """

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: Optional[str] = None
    product_id: Optional[str] = None
    source_id: str
    name: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH)
    price: str = Field(..., min_length=1, max_length=100)
    url: str
    image: Optional[str] = None
    scraped_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
