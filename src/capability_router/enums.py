# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Enums shared across the capability router.

Example:
    >>> EnumComplexity("high")
    <EnumComplexity.HIGH: 'high'>
    >>> EnumAffinityLevel.PRIMARY == "primary"
    True
"""

from __future__ import annotations

from enum import StrEnum


class EnumComplexity(StrEnum):
    """Estimated complexity of a task, extracted from its description."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class EnumUrgency(StrEnum):
    """Estimated urgency of a task, extracted from its description."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class EnumAffinityLevel(StrEnum):
    """How strongly a handler declares itself for a task type.

    Attributes:
        PRIMARY: The handler is the declared first choice for the task type.
        SECONDARY: The handler can take the task type but is not the first choice.
    """

    PRIMARY = "primary"
    SECONDARY = "secondary"


class EnumRoutingErrorKind(StrEnum):
    """Error taxonomy for routing and dispatch.

    Attributes:
        EMPTY_REGISTRY: No handlers registered. Fatal for the call, never retried.
        HANDLER_EXECUTION_ERROR: Primary handler failed. Recovered by the fallback.
        COMPLETE_ROUTING_FAILURE: Primary and fallback both failed.
        CANCELLED: The caller cancelled the dispatch before a handler returned.
        CONFIGURATION_ERROR: Handler catalogue or router configuration is invalid.
    """

    EMPTY_REGISTRY = "empty_registry"
    HANDLER_EXECUTION_ERROR = "handler_execution_error"
    COMPLETE_ROUTING_FAILURE = "complete_routing_failure"
    CANCELLED = "cancelled"
    CONFIGURATION_ERROR = "configuration_error"


class EnumHealthStatus(StrEnum):
    """Health of a single handler or of the router as a whole."""

    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


__all__ = [
    "EnumAffinityLevel",
    "EnumComplexity",
    "EnumHealthStatus",
    "EnumRoutingErrorKind",
    "EnumUrgency",
]
