"""
API Schemas Module

This module defines Pydantic models for request/response validation.
"""

from typing import Any

from pydantic import BaseModel, Field


class CheckoutRequest(BaseModel):
    """Order intent to translate into a gateway checkout."""

    order: str
    account: str
    options: dict[str, Any] = Field(default_factory=dict)
    # semantic key -> value, e.g. {"description": "...", "customer": {"email": "..."}}
    fields: dict[str, Any] = Field(default_factory=dict)
    line_items: list[dict[str, Any]] = Field(default_factory=list)


class CheckoutForm(BaseModel):
    """What the storefront needs to send the customer to the gateway."""

    service: str
    service_url: str
    method: str
    fields: dict[str, str | list[str]]


class ErrorOut(BaseModel):
    detail: str
    error: str
    gateway: str | None = None
