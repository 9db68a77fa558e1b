"""Pydantic schemas for the resources API."""

from pydantic import BaseModel, ConfigDict


class ResourceUploaded(BaseModel):
    url: str
    type: str
    name: str
    size: int

    model_config = ConfigDict(from_attributes=True)
