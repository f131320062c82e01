# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Read-only views over routing history and registered handlers.

StatsAggregator recomputes every figure from a fresh history snapshot on each
call; nothing is cached. HealthChecker asks each handler's executor for its
optional self-check. Neither view raises.
"""

from __future__ import annotations

import inspect
import logging
from collections import Counter

from capability_router.enums import EnumHealthStatus
from capability_router.history import HistoryStore
from capability_router.models import (
    ModelHandlerHealth,
    ModelHandlerPerformance,
    ModelHealthSnapshot,
    ModelStatsSnapshot,
)
from capability_router.protocols import SupportsHealthCheck
from capability_router.registry import CapabilityRegistry

logger = logging.getLogger(__name__)


class StatsAggregator:
    """Aggregate routing statistics over the history window."""

    def __init__(self, history: HistoryStore):
        self.history = history

    def stats(self) -> ModelStatsSnapshot:
        """
        Compute statistics from the current history snapshot.

        Returns:
            ModelStatsSnapshot; an empty history yields all-zero rates
        """
        records = self.history.snapshot()
        total = len(records)
        if total == 0:
            return ModelStatsSnapshot()

        successes = sum(1 for r in records if r.outcome.success)
        fallbacks = sum(1 for r in records if r.outcome.fallback_used)
        total_confidence = sum(r.decision.confidence for r in records)
        total_duration = sum(r.outcome.duration_ms for r in records)
        usage = Counter(r.decision.selected_handler_id for r in records)

        # Per-handler figures are attributed to the selected handler
        performance: dict[str, ModelHandlerPerformance] = {}
        for handler_id, executions in usage.items():
            handler_records = [
                r for r in records if r.decision.selected_handler_id == handler_id
            ]
            handler_successes = sum(1 for r in handler_records if r.outcome.success)
            performance[handler_id] = ModelHandlerPerformance(
                executions=executions,
                successes=handler_successes,
                success_rate=handler_successes / executions,
                average_duration_ms=(
                    sum(r.outcome.duration_ms for r in handler_records) / executions
                ),
            )

        return ModelStatsSnapshot(
            total_routes=total,
            success_rate=successes / total,
            average_confidence=total_confidence / total,
            usage_per_handler=dict(usage),
            fallback_rate=fallbacks / total,
            average_duration_ms=total_duration / total,
            handler_performance=performance,
        )


class HealthChecker:
    """Report per-handler and aggregate router health."""

    def __init__(self, registry: CapabilityRegistry):
        self.registry = registry

    async def check(self) -> ModelHealthSnapshot:
        """
        Run every handler's self-check.

        A handler is healthy unless its executor is missing or its
        ``health_check()`` raises. The router is healthy iff at least one
        handler is registered and at least one handler is healthy.
        """
        handlers: dict[str, ModelHandlerHealth] = {}

        for descriptor in self.registry.descriptors():
            executor = self.registry.get_executor(descriptor.handler_id)
            status = EnumHealthStatus.HEALTHY
            error = None

            if executor is None:
                status = EnumHealthStatus.UNHEALTHY
                error = "no executor registered"
            elif isinstance(executor, SupportsHealthCheck):
                try:
                    result = executor.health_check()
                    if inspect.isawaitable(result):
                        await result
                except Exception as e:
                    status = EnumHealthStatus.UNHEALTHY
                    error = str(e) or type(e).__name__

            if status == EnumHealthStatus.UNHEALTHY:
                logger.warning(
                    f"Handler {descriptor.handler_id} unhealthy: {error}",
                    extra={"handler_id": descriptor.handler_id},
                )

            handlers[descriptor.handler_id] = ModelHandlerHealth(
                handler_id=descriptor.handler_id,
                status=status,
                error=error,
                capabilities=sorted(descriptor.capabilities),
                tools=sorted(descriptor.tools),
            )

        reachable = any(h.status == EnumHealthStatus.HEALTHY for h in handlers.values())
        return ModelHealthSnapshot(
            status=EnumHealthStatus.HEALTHY if reachable else EnumHealthStatus.UNHEALTHY,
            handler_count=len(handlers),
            handlers=handlers,
        )


__all__ = [
    "HealthChecker",
    "StatsAggregator",
]
