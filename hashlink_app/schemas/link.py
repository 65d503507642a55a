from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import datetime
from hashlink_app.config import settings


class LinkCreate(BaseModel):
    """
    Payload for creating a link.

    original_url is a plain string on purpose: scheme-less input such as
    "example.com/page" is accepted and the model normalizes it.
    """
    original_url: str = Field(..., min_length=1, description="Destination URL to shorten")
    hash: Optional[str] = Field(
        None,
        min_length=settings.hash_min_length,
        max_length=settings.hash_max_length,
        description="Custom hash (stored camelCased)",
    )
    creator_id: Optional[int] = Field(None, description="ID of the user creating the link")


class LinkUpdate(BaseModel):
    original_url: Optional[str] = Field(None, min_length=1)
    hash: Optional[str] = Field(
        None,
        min_length=settings.hash_min_length,
        max_length=settings.hash_max_length,
    )


class LinkResponse(BaseModel):
    """
    Serializes the SQLAlchemy Link model.

    hash_id, shortened_url and branded_url are properties on the model,
    read through from_attributes like any column.
    """
    id: int
    hash: Optional[str] = None
    hash_id: str
    original_url: str
    creator_id: Optional[int] = None
    shortened_url: str
    branded_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
