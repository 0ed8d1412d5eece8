"""Pydantic models for the admin API."""

from __future__ import annotations

from typing import Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ApiResponse(BaseModel):
    success: bool
    message: Optional[str] = None
    error: Optional[str] = None
    data: Any = None


class SynonymUploadRequest(_CamelModel):
    synonyms: Optional[str] = Field(default=None, description="Synonym rules, one per line; empty clears the slot")
    synonym_slot: Literal["1", "2"] = Field(default="1", alias="synonymSlot")
    language_routing: str = Field(default="standard", alias="languageRouting", min_length=1)


class SynonymUploadResponse(BaseModel):
    success: bool
    message: str


class SynonymErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None


class ContentSearchRequest(_CamelModel):
    query: Optional[str] = Field(default=None, description="Full-text search term")
    limit: int = Field(default=10, description="Maximum results; clamped to 1-50")


class CollectionCreateRequest(_CamelModel):
    title: Optional[str] = None
    is_active: bool = Field(default=True, alias="isActive")


class CollectionUpdateRequest(_CamelModel):
    id: Optional[str] = None
    title: Optional[str] = None
    is_active: Optional[bool] = Field(default=None, alias="isActive")


class CollectionDeleteRequest(_CamelModel):
    id: Optional[str] = None


class PinnedItemCreateRequest(_CamelModel):
    collection_id: Optional[str] = Field(default=None, alias="collectionId")
    phrases: Optional[Union[str, List[str]]] = Field(
        default=None,
        description="Search phrases as a newline-separated string or a list",
    )
    target_key: Optional[str] = Field(default=None, alias="targetKey")
    language: str = "en"
    priority: int = 1
    is_active: bool = Field(default=True, alias="isActive")


class PinnedItemDeleteRequest(_CamelModel):
    collection_id: Optional[str] = Field(default=None, alias="collectionId")
    item_id: Optional[str] = Field(default=None, alias="itemId")


class LocaleEntry(_CamelModel):
    locale: str
    backend_locale: str = Field(serialization_alias="backendLocale")
    fallback_chain: List[str] = Field(serialization_alias="fallbackChain")


class LocalesResponse(_CamelModel):
    default_locale: str = Field(serialization_alias="defaultLocale")
    fallback_type: str = Field(serialization_alias="fallbackType")
    locales: List[LocaleEntry]
