"""
models — API Request/Response Schemas

Pydantic models for the serialis HTTP API. Frameworks travel either as
explicit argument/attack lists or as ASPARTIX / TGF text; semantics are
given by their tags (e.g. "PR", "GR", "R_GR").
"""

from __future__ import annotations

import uuid
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from serialis.argumentation import (
    ArgumentationFramework,
    InferenceMode,
    parse_apx,
    parse_tgf,
)


def _request_id() -> str:
    return f"srl_req_{uuid.uuid4().hex[:8]}"


# ── Request Models ───────────────────────────────────────────────

class FrameworkInput(BaseModel):
    """A framework as lists, or as apx / tgf text (exactly one form)."""
    arguments: list[str] = Field(default_factory=list)
    attacks: list[tuple[str, str]] = Field(default_factory=list)
    apx: Optional[str] = None
    tgf: Optional[str] = None

    @field_validator("arguments")
    @classmethod
    def validate_arguments(cls, v: list[str]) -> list[str]:
        if any(not name.strip() for name in v):
            raise ValueError("argument names must be non-empty")
        return v

    @model_validator(mode="after")
    def validate_single_form(self) -> "FrameworkInput":
        forms = [
            bool(self.arguments or self.attacks),
            self.apx is not None,
            self.tgf is not None,
        ]
        if sum(forms) > 1:
            raise ValueError("give either arguments/attacks, apx or tgf, not several")
        return self

    def to_framework(self) -> ArgumentationFramework:
        if self.apx is not None:
            return parse_apx(self.apx)
        if self.tgf is not None:
            return parse_tgf(self.tgf)
        return ArgumentationFramework(self.arguments, self.attacks)


class ExtensionsRequest(BaseModel):
    framework: FrameworkInput
    semantics: str = "PR"


class AnalysisRequest(ExtensionsRequest):
    include_graph: bool = True
    include_sequences: bool = False


class QueryRequest(ExtensionsRequest):
    argument: str = Field(..., min_length=1)
    inference: InferenceMode = InferenceMode.SCEPTICAL


class RankingRequest(BaseModel):
    framework: FrameworkInput
    semantics: str = "R_GR"


# ── Response Models ──────────────────────────────────────────────

class ExtensionsResponse(BaseModel):
    request_id: str = Field(default_factory=_request_id)
    semantics: str
    extensions: list[list[str]] = Field(default_factory=list)
    num_extensions: int = 0
    framework_hash: str = ""
    elapsed_ms: float = 0.0


class InitialSetsSummary(BaseModel):
    unattacked: list[list[str]] = Field(default_factory=list)
    unchallenged: list[list[str]] = Field(default_factory=list)
    challenged: list[list[str]] = Field(default_factory=list)


class AnalysisResponse(BaseModel):
    request_id: str = Field(default_factory=_request_id)
    semantics: str
    extensions: list[list[str]] = Field(default_factory=list)
    initial_sets: InitialSetsSummary = Field(default_factory=InitialSetsSummary)
    num_states: int = 0
    num_sub_analyses: int = 0
    graph: Optional[dict] = None
    sequences: Optional[dict[str, list[list[list[str]]]]] = None
    framework_hash: str = ""
    elapsed_ms: float = 0.0


class QueryResponse(BaseModel):
    request_id: str = Field(default_factory=_request_id)
    semantics: str
    argument: str
    inference: InferenceMode
    accepted: bool
    framework_hash: str = ""
    elapsed_ms: float = 0.0


class RankingResponse(BaseModel):
    request_id: str = Field(default_factory=_request_id)
    semantics: str
    ranks: list[list[list[str]]] = Field(default_factory=list)
    num_ranks: int = 0
    framework_hash: str = ""
    elapsed_ms: float = 0.0


class SemanticsListResponse(BaseModel):
    serialisable: list[str] = Field(default_factory=list)
    ranking: list[str] = Field(default_factory=list)


class HealthComponent(BaseModel):
    status: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.3.0"
    uptime_seconds: int = 0
    components: dict[str, HealthComponent] = Field(default_factory=dict)
