from __future__ import annotations

from pydantic import BaseModel, Field


class IssueFields(BaseModel):
    """Identity fields accepted by the issuer, from a JSON body, form body or query."""

    identity: str | None = Field(default=None, description="User or session name")
    validity_ms: str | None = Field(default=None, description="Requested validity in ms")


class ValidateQuery(BaseModel):
    token: str | None = None
    ts: str | None = None
    u: str | None = None
    exp: str | None = None
    key: str | None = None
