"""Pydantic schemas for the memos API."""

from typing import List

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from memobbs.memos.models import Visibility


class ResourceRef(BaseModel):
    """An attachment embedded in a memo."""

    url: str = Field(min_length=1)
    name: str = Field(min_length=1)
    type: str = Field(min_length=1)
    size: int = Field(ge=0)

    model_config = ConfigDict(from_attributes=True, extra="ignore")


class MemoContent(BaseModel):
    raw: str
    html: str
    text: str


class MemoBase(BaseModel):
    content: str = Field(min_length=1, description="Raw Markdown content")
    resources: List[ResourceRef] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, tags: List[str]) -> List[str]:
        seen = []
        for tag in tags:
            tag = tag.strip()
            if tag and tag not in seen:
                seen.append(tag)
        return seen


class MemoCreate(MemoBase):
    pass


class MemoUpdate(MemoBase):
    """Full replacement of content, resources and tags."""

    pass


class MemoRead(BaseModel):
    id: str
    content: MemoContent
    resources: List[ResourceRef]
    tags: List[str]
    visibility: Visibility
    user_id: str = Field(validation_alias=AliasChoices("user_id", "userId"), serialization_alias="userId")
    created_at: str = Field(validation_alias=AliasChoices("created_at", "createdAt"), serialization_alias="createdAt")
    updated_at: str = Field(validation_alias=AliasChoices("updated_at", "updatedAt"), serialization_alias="updatedAt")

    model_config = ConfigDict(from_attributes=True)


class MemoDeleted(BaseModel):
    message: str

