"""
Pydantic models for OpnForm API types and the host-facing dropdown contract.
"""
from __future__ import annotations
from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class Credential(BaseModel):
    """API key plus optional base URL override, as supplied by the host."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    api_key: str = Field(alias="apiKey", min_length=1)
    base_api_url: Optional[str] = Field(default=None, alias="baseApiUrl")

    @field_validator("base_api_url")
    @classmethod
    def _blank_url_is_default(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip()


class Workspace(BaseModel):
    """Workspace model."""
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    name: str


class Form(BaseModel):
    """Form model."""
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    title: str
    slug: Optional[str] = None


class PageMeta(BaseModel):
    """Laravel-style pagination block."""
    model_config = ConfigDict(populate_by_name=True)

    current_page: Optional[int] = None
    last_page: Optional[int] = None
    per_page: Optional[int] = None
    from_: Optional[int] = Field(default=None, alias="from")
    to: Optional[int] = None
    total: Optional[int] = None


class FormPage(BaseModel):
    """One page of a workspace's form listing."""
    meta: Optional[PageMeta] = None
    data: Optional[List[Form]] = None

    @property
    def is_last(self) -> bool:
        # A page without meta is the only page
        if self.meta is None:
            return True
        # So is one whose meta lacks the page bounds
        if self.meta.current_page is None or self.meta.last_page is None:
            return True
        return self.meta.current_page >= self.meta.last_page


class IntegrationData(BaseModel):
    """Provider-specific settings stored on a form integration."""
    webhook_url: Optional[str] = None
    provider_url: Optional[str] = None


class FormIntegration(BaseModel):
    """Integration attached to a form."""
    id: int
    integration_id: str
    status: Optional[str] = None
    data: Optional[IntegrationData] = None

    @field_validator("data", mode="before")
    @classmethod
    def _ignore_foreign_data(cls, v: Any) -> Any:
        # Other providers store arbitrary shapes here
        return v if isinstance(v, dict) else None


class IntegrationCreate(BaseModel):
    """Request body for registering a webhook integration."""
    integration_id: str
    status: str = "active"
    data: IntegrationData


class OpnformResponse(BaseModel):
    """Raw response: status code plus parsed body."""
    status: int
    body: Any = None


class DropdownOption(BaseModel):
    label: str
    value: str


class DropdownState(BaseModel):
    """What the host renders for a dropdown property."""
    disabled: bool
    placeholder: str
    options: List[DropdownOption] = Field(default_factory=list)

    @classmethod
    def unavailable(cls, placeholder: str) -> "DropdownState":
        return cls(disabled=True, placeholder=placeholder, options=[])
