# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Execution Dispatcher.

Runs the selected handler and applies fallback-on-error:

    primary ok                     -> success
    primary fails, fallback ok     -> success, fallback_used=True,
                                      result annotated with the primary error
    primary fails, fallback fails  -> CompleteRoutingFailureError
    cancelled during either call   -> cancelled record, CancelledError re-raised

Every dispatched decision appends exactly one history record. There are no
retries beyond the single fallback attempt and no engine-side timeout;
callers bound latency with ``asyncio.timeout()``.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

from capability_router.enums import EnumRoutingErrorKind
from capability_router.errors import CompleteRoutingFailureError
from capability_router.history import HistoryStore
from capability_router.models import (
    ModelExecutionOutcome,
    ModelHistoryRecord,
    ModelRoutingDecision,
    ModelRoutingResult,
)
from capability_router.protocols import HandlerExecutor
from capability_router.registry import CapabilityRegistry

logger = logging.getLogger(__name__)

NO_FALLBACK_MESSAGE = "no fallback handler configured"


def _describe(error: BaseException) -> str:
    return str(error) or type(error).__name__


class ExecutionDispatcher:
    """
    Invoke handlers for routing decisions and record outcomes.

    The fallback is either a registered handler (``fallback_handler_id``) or a
    standalone executor (``fallback_executor``); a standalone executor takes
    precedence and is reported under ``fallback_handler_id`` or "fallback".
    """

    def __init__(
        self,
        registry: CapabilityRegistry,
        history: HistoryStore,
        fallback_handler_id: str | None = None,
        fallback_executor: HandlerExecutor | None = None,
    ):
        self.registry = registry
        self.history = history
        self.fallback_handler_id = fallback_handler_id
        self.fallback_executor = fallback_executor

    def _resolve_fallback(self) -> tuple[str | None, HandlerExecutor | None]:
        if self.fallback_executor is not None:
            return self.fallback_handler_id or "fallback", self.fallback_executor
        if self.fallback_handler_id is None:
            return None, None
        return self.fallback_handler_id, self.registry.get_executor(
            self.fallback_handler_id
        )

    async def _invoke(
        self, handler_id: str, executor: HandlerExecutor | None, task: Any
    ) -> Any:
        if executor is None:
            raise LookupError(f"No executor registered for handler {handler_id}")
        return await executor.execute(task)

    async def dispatch(self, decision: ModelRoutingDecision, task: Any) -> ModelRoutingResult:
        """
        Execute ``task`` with the selected handler, falling back once on error.

        Args:
            decision: Decision produced by the selector
            task: Opaque task passed to the handler

        Returns:
            ModelRoutingResult with outcome and handler result

        Raises:
            CompleteRoutingFailureError: If primary and fallback both fail
            asyncio.CancelledError: If the caller cancels; a cancelled record
                is appended first
        """
        start = time.perf_counter()
        primary_id = decision.selected_handler_id
        fallback_attempted = False
        errors: list[str] = []

        try:
            try:
                result = await self._invoke(
                    primary_id, self.registry.get_executor(primary_id), task
                )
            except Exception as e:
                primary_error = _describe(e)
                errors.append(primary_error)
                logger.warning(
                    f"Handler {primary_id} failed, trying fallback",
                    exc_info=True,
                    extra={
                        "handler_id": primary_id,
                        "error_type": type(e).__name__,
                    },
                )
            else:
                outcome = ModelExecutionOutcome(
                    success=True,
                    duration_ms=self._elapsed_ms(start),
                    handled_by=primary_id,
                )
                self._record(decision, outcome)
                return ModelRoutingResult(decision=decision, outcome=outcome, result=result)

            fallback_id, fallback_executor = self._resolve_fallback()
            if fallback_id is None:
                fallback_error = NO_FALLBACK_MESSAGE
            else:
                fallback_attempted = True
                try:
                    result = await self._invoke(fallback_id, fallback_executor, task)
                except Exception as e:
                    fallback_error = _describe(e)
                else:
                    outcome = ModelExecutionOutcome(
                        success=True,
                        duration_ms=self._elapsed_ms(start),
                        error_kind=EnumRoutingErrorKind.HANDLER_EXECUTION_ERROR,
                        fallback_used=True,
                        handled_by=fallback_id,
                        error_messages=errors,
                    )
                    self._record(decision, outcome)
                    logger.info(
                        f"Fallback {fallback_id} recovered failure of {primary_id}",
                        extra={"handler_id": primary_id, "fallback_id": fallback_id},
                    )
                    return ModelRoutingResult(
                        decision=decision,
                        outcome=outcome,
                        result=result,
                        primary_error=primary_error,
                    )

            errors.append(fallback_error)
            outcome = ModelExecutionOutcome(
                success=False,
                duration_ms=self._elapsed_ms(start),
                error_kind=EnumRoutingErrorKind.COMPLETE_ROUTING_FAILURE,
                fallback_used=fallback_attempted,
                error_messages=errors,
            )
            self._record(decision, outcome)
            logger.error(
                f"Both routing and fallback failed for {primary_id}",
                extra={
                    "handler_id": primary_id,
                    "fallback_id": fallback_id,
                    "primary_error": primary_error,
                    "fallback_error": fallback_error,
                },
            )
            raise CompleteRoutingFailureError(
                primary_error=primary_error,
                fallback_error=fallback_error,
                decision=decision,
                outcome=outcome,
            )

        except asyncio.CancelledError:
            outcome = ModelExecutionOutcome(
                success=False,
                duration_ms=self._elapsed_ms(start),
                error_kind=EnumRoutingErrorKind.CANCELLED,
                fallback_used=fallback_attempted,
                error_messages=[*errors, "dispatch cancelled"],
            )
            self._record(decision, outcome)
            logger.warning(
                f"Dispatch to {primary_id} cancelled",
                extra={"handler_id": primary_id, "fallback_attempted": fallback_attempted},
            )
            raise

    def _record(self, decision: ModelRoutingDecision, outcome: ModelExecutionOutcome) -> None:
        self.history.append(ModelHistoryRecord(decision=decision, outcome=outcome))

    @staticmethod
    def _elapsed_ms(start: float) -> float:
        return max((time.perf_counter() - start) * 1000, 0.0)


__all__ = [
    "NO_FALLBACK_MESSAGE",
    "ExecutionDispatcher",
]
