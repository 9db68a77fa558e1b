"""Pydantic schemas for the auth API."""

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)

    model_config = ConfigDict(extra="forbid")


class TokenResponse(BaseModel):
    token: str


class SessionInfo(BaseModel):
    username: str
    expires_at: datetime = Field(validation_alias=AliasChoices("expires_at", "expiresAt"), serialization_alias="expiresAt")
