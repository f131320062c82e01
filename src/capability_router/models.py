# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Pydantic v2 data models for the capability router.

Descriptors are created at registration and live for the process lifetime.
Profiles, scores and decisions are created fresh for every routing call.
History records are appended after an outcome is known and only leave the
store through capacity eviction.

All models are immutable (``frozen=True``) after construction.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from capability_router.enums import (
    EnumAffinityLevel,
    EnumComplexity,
    EnumHealthStatus,
    EnumRoutingErrorKind,
    EnumUrgency,
)


def _utc_now() -> datetime:
    return datetime.now(UTC)


class ModelHandlerDescriptor(BaseModel):
    """Declared capability metadata for one specialist handler.

    Attributes:
        handler_id: Unique identifier. Registering the same id again replaces
            the earlier descriptor.
        description: Human-readable summary of what the handler does.
        capabilities: Capability tags (lowercased).
        tools: Tool tags (lowercased).
        domain_affinity: Fit per domain area in the range [0.0, 1.0].
        task_affinity: Task types the handler declares itself primary or
            secondary for.
        complexity_adjustment: Score multiplier per complexity level.
            Missing levels use 1.0.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    handler_id: str = Field(..., min_length=1)
    description: str = ""
    capabilities: frozenset[str] = Field(default_factory=frozenset)
    tools: frozenset[str] = Field(default_factory=frozenset)
    domain_affinity: dict[str, float] = Field(default_factory=dict)
    task_affinity: dict[str, EnumAffinityLevel] = Field(default_factory=dict)
    complexity_adjustment: dict[EnumComplexity, float] = Field(default_factory=dict)

    @field_validator("capabilities", "tools", mode="before")
    @classmethod
    def normalize_tags(cls, v: object) -> object:
        """Lowercase and strip tags so matching is case-insensitive."""
        if isinstance(v, (list, tuple, set, frozenset)):
            return frozenset(str(tag).strip().lower() for tag in v if str(tag).strip())
        return v

    @field_validator("domain_affinity")
    @classmethod
    def affinity_in_range(cls, v: dict[str, float]) -> dict[str, float]:
        """Require every domain affinity to lie in [0.0, 1.0]."""
        for domain, value in v.items():
            if not 0.0 <= value <= 1.0:
                msg = f"domain_affinity[{domain!r}] must be in [0, 1], got {value}"
                raise ValueError(msg)
        return {domain.lower(): value for domain, value in v.items()}

    @field_validator("task_affinity")
    @classmethod
    def lowercase_task_types(
        cls, v: dict[str, EnumAffinityLevel]
    ) -> dict[str, EnumAffinityLevel]:
        return {task_type.lower(): level for task_type, level in v.items()}

    @field_validator("complexity_adjustment")
    @classmethod
    def adjustment_positive(
        cls, v: dict[EnumComplexity, float]
    ) -> dict[EnumComplexity, float]:
        """Require complexity multipliers to be strictly positive."""
        for level, value in v.items():
            if value <= 0:
                msg = f"complexity_adjustment[{level}] must be > 0, got {value}"
                raise ValueError(msg)
        return v

    @property
    def tags(self) -> frozenset[str]:
        """Union of capability and tool tags."""
        return self.capabilities | self.tools

    def affinity_for(self, task_type: str) -> EnumAffinityLevel | None:
        return self.task_affinity.get(task_type.lower())

    def complexity_multiplier(self, complexity: EnumComplexity) -> float:
        return self.complexity_adjustment.get(complexity, 1.0)


class ModelTaskProfile(BaseModel):
    """Structured view of a task description.

    Attributes:
        task_types: Candidate task types, strongest match first (max 3).
        domains: Every domain area with at least one keyword match.
        complexity: Estimated complexity (default medium).
        urgency: Estimated urgency (default medium).
        keywords: Table keywords found in the text, first-seen order.
        technologies: Technologies mentioned in the text.
        multi_handler_candidate: True when the task spans more than two task
            types or more than two domains.
    """

    model_config = ConfigDict(frozen=True)

    task_types: list[str] = Field(..., min_length=1)
    domains: list[str] = Field(default_factory=list)
    complexity: EnumComplexity = EnumComplexity.MEDIUM
    urgency: EnumUrgency = EnumUrgency.MEDIUM
    keywords: list[str] = Field(default_factory=list)
    technologies: list[str] = Field(default_factory=list)
    multi_handler_candidate: bool = False

    @property
    def primary_task_type(self) -> str:
        return self.task_types[0]


class ModelScore(BaseModel):
    """Fit of one handler for one task profile."""

    model_config = ConfigDict(frozen=True)

    handler_id: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    reasoning: str
    estimated_efficiency: float = Field(default=0.0, ge=0.0)
    breakdown: dict[str, float] = Field(default_factory=dict)


class ModelAlternative(BaseModel):
    """A runner-up handler reported alongside a routing decision."""

    model_config = ConfigDict(frozen=True)

    handler_id: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    reasoning: str


class ModelRoutingDecision(BaseModel):
    """The selected handler for a task, with its runners-up."""

    model_config = ConfigDict(frozen=True)

    selected_handler_id: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    reasoning: str = ""
    alternatives: list[ModelAlternative] = Field(default_factory=list)
    task_profile: ModelTaskProfile
    meets_threshold: bool = True
    timestamp: datetime = Field(default_factory=_utc_now)


class ModelExecutionOutcome(BaseModel):
    """What happened when a decision was dispatched.

    Attributes:
        success: True when the primary or the fallback handler returned.
        duration_ms: Wall time of the whole dispatch, fallback included.
        error_kind: Set on failure, or to HANDLER_EXECUTION_ERROR when the
            fallback recovered a primary failure.
        fallback_used: True when the fallback handler was invoked.
        handled_by: Handler that produced the result, if any.
        error_messages: Error messages in the order they occurred.
    """

    model_config = ConfigDict(frozen=True)

    success: bool
    duration_ms: float = Field(..., ge=0.0)
    error_kind: EnumRoutingErrorKind | None = None
    fallback_used: bool = False
    handled_by: str | None = None
    error_messages: list[str] = Field(default_factory=list)


class ModelHistoryRecord(BaseModel):
    """A dispatched decision paired with its outcome."""

    model_config = ConfigDict(frozen=True)

    decision: ModelRoutingDecision
    outcome: ModelExecutionOutcome
    timestamp: datetime = Field(default_factory=_utc_now)


class ModelRoutingResult(BaseModel):
    """Everything ``CapabilityRouter.route()`` hands back to the caller.

    When the fallback produced ``result``, ``primary_error`` carries the
    message of the failure it recovered from.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    decision: ModelRoutingDecision
    outcome: ModelExecutionOutcome
    result: Any = None
    primary_error: str | None = None


class ModelHandlerPerformance(BaseModel):
    """Per-handler execution figures derived from history."""

    model_config = ConfigDict(frozen=True)

    executions: int = 0
    successes: int = 0
    success_rate: float = 0.0
    average_duration_ms: float = 0.0


class ModelStatsSnapshot(BaseModel):
    """Aggregate routing statistics over the current history window.

    Rates are fractions in [0.0, 1.0]. An empty history yields zeros.
    """

    model_config = ConfigDict(frozen=True)

    total_routes: int = 0
    success_rate: float = 0.0
    average_confidence: float = 0.0
    usage_per_handler: dict[str, int] = Field(default_factory=dict)
    fallback_rate: float = 0.0
    average_duration_ms: float = 0.0
    handler_performance: dict[str, ModelHandlerPerformance] = Field(
        default_factory=dict
    )


class ModelHandlerHealth(BaseModel):
    """Health of a single registered handler."""

    model_config = ConfigDict(frozen=True)

    handler_id: str
    status: EnumHealthStatus
    error: str | None = None
    capabilities: list[str] = Field(default_factory=list)
    tools: list[str] = Field(default_factory=list)


class ModelHealthSnapshot(BaseModel):
    """Router health with a per-handler breakdown."""

    model_config = ConfigDict(frozen=True)

    status: EnumHealthStatus
    handler_count: int = 0
    handlers: dict[str, ModelHandlerHealth] = Field(default_factory=dict)
    checked_at: datetime = Field(default_factory=_utc_now)


__all__ = [
    "ModelAlternative",
    "ModelExecutionOutcome",
    "ModelHandlerDescriptor",
    "ModelHandlerHealth",
    "ModelHandlerPerformance",
    "ModelHealthSnapshot",
    "ModelHistoryRecord",
    "ModelRoutingDecision",
    "ModelRoutingResult",
    "ModelScore",
    "ModelStatsSnapshot",
    "ModelTaskProfile",
]
