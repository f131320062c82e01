# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Error handling for the capability router.

Only two conditions surface to a caller of ``CapabilityRouter.route()``:

- ``EmptyRegistryError``: nothing is registered, so nothing can be selected.
- ``CompleteRoutingFailureError``: the selected handler and the fallback
  handler both raised.

A failing primary handler on its own is absorbed by the fallback path and
only shows up as outcome metadata. Catalogue problems raise
``RegistryConfigurationError`` at load time, never during routing.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from capability_router.enums import EnumRoutingErrorKind

if TYPE_CHECKING:
    from capability_router.models import ModelExecutionOutcome, ModelRoutingDecision


class RoutingError(Exception):
    """Base exception for routing operations.

    Attributes:
        code: Error kind from EnumRoutingErrorKind
        message: Human-readable error message
        details: Additional error context for logging and debugging
    """

    def __init__(
        self,
        code: EnumRoutingErrorKind,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(code={self.code}, message={self.message}, "
            f"details={self.details})"
        )


class EmptyRegistryError(RoutingError):
    """Raised when a routing call is made with no registered handlers."""

    def __init__(self, message: str = "No handlers registered") -> None:
        super().__init__(EnumRoutingErrorKind.EMPTY_REGISTRY, message)


class CompleteRoutingFailureError(RoutingError):
    """Raised when both the selected handler and the fallback handler fail.

    Both underlying messages are preserved, together with the decision that
    was dispatched and the failure outcome that was recorded in history.
    """

    def __init__(
        self,
        primary_error: str,
        fallback_error: str,
        decision: ModelRoutingDecision | None = None,
        outcome: ModelExecutionOutcome | None = None,
    ) -> None:
        self.primary_error = primary_error
        self.fallback_error = fallback_error
        self.decision = decision
        self.outcome = outcome
        super().__init__(
            EnumRoutingErrorKind.COMPLETE_ROUTING_FAILURE,
            "Both routing and fallback failed "
            f"(primary: {primary_error}; fallback: {fallback_error})",
            details={
                "primary_error": primary_error,
                "fallback_error": fallback_error,
                "selected_handler_id": (
                    decision.selected_handler_id if decision else None
                ),
            },
        )


class RegistryConfigurationError(RoutingError):
    """Raised when a handler catalogue or router configuration is invalid."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(EnumRoutingErrorKind.CONFIGURATION_ERROR, message, details)


__all__ = [
    "CompleteRoutingFailureError",
    "EmptyRegistryError",
    "RegistryConfigurationError",
    "RoutingError",
]
