"""
schemas/integration.py — Invoicing match / reconcile / link payloads

Called by: routers/integration.py
Depends on: pydantic
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator


class LinkRequest(BaseModel):
    external_customer_id: str

    @field_validator("external_customer_id", mode="before")
    @classmethod
    def id_not_blank(cls, v) -> str:
        v = str(v).strip() if v is not None else ""
        if not v:
            raise ValueError("external_customer_id is required")
        return v


class MatchResponse(BaseModel):
    matched: bool
    company_id: str
    external_customer_id: str | None = None
    customer_name: str | None = None
    score: int | None = None
    best_score: int | None = None


class ReconcileItem(BaseModel):
    external_customer_id: str
    customer_name: str = ""
    company_id: str | None = None
    company_name: str | None = None
    score: int = 0
    status: Literal["suggested", "unmatched", "linked"]


class LinkResponse(BaseModel):
    company_id: str
    external_customer_id: str
    updated_fields: dict = Field(default_factory=dict)
    changes: list[str] = Field(default_factory=list)
    enrichment_skipped: bool = False


class UnlinkResponse(BaseModel):
    company_id: str
    unlinked: bool
