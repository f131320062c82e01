# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""
Capability Router
=================

Main orchestration component that ties the routing pipeline together.

Flow:
1. Analyze the task description into a task profile
2. Score every registered handler against the profile
3. Rank scores and select the best handler (ties: registration order)
4. Dispatch to the selected handler, falling back once on error
5. Record the outcome in the bounded history

Stats and health are read-only views available at any time.
"""

from __future__ import annotations

import logging
from typing import Any

from capability_router.analyzer import TaskAnalyzer
from capability_router.config import ConfigCapabilityRouter, get_config
from capability_router.dispatcher import ExecutionDispatcher
from capability_router.errors import EmptyRegistryError
from capability_router.history import HistoryStore
from capability_router.models import (
    ModelHandlerDescriptor,
    ModelHealthSnapshot,
    ModelRoutingDecision,
    ModelRoutingResult,
    ModelStatsSnapshot,
)
from capability_router.protocols import HandlerExecutor
from capability_router.registry import CapabilityRegistry
from capability_router.scoring import ScoringEngine
from capability_router.selector import Selector
from capability_router.stats import HealthChecker, StatsAggregator

logger = logging.getLogger(__name__)

# Fallback specialist for the packaged catalogue
DEFAULT_FALLBACK_HANDLER_ID = "frontend"


class CapabilityRouter:
    """
    Route free-text tasks to registered specialist handlers.

    Analyzer, scorer and selector are stateless and safe to share between
    concurrent ``route()`` calls; the history store is the only shared
    mutable state and is lock-protected.
    """

    def __init__(
        self,
        registry: CapabilityRegistry | None = None,
        config: ConfigCapabilityRouter | None = None,
        analyzer: TaskAnalyzer | None = None,
        scorer: ScoringEngine | None = None,
        history: HistoryStore | None = None,
        fallback_executor: HandlerExecutor | None = None,
    ):
        """
        Initialize router.

        Args:
            registry: Handler registry (default: loaded from
                ``config.registry_path`` when set, else empty)
            config: Router configuration (default: environment via get_config())
            analyzer: Task analyzer (default: built-in keyword tables)
            scorer: Scoring engine (default: analyzer's task-type keywords)
            history: History store (default: ``config.history_capacity``)
            fallback_executor: Standalone fallback executor, used instead of
                looking up ``config.fallback_handler_id`` in the registry
        """
        self.config = config or get_config()

        if registry is None:
            registry = (
                CapabilityRegistry.from_yaml(self.config.registry_path)
                if self.config.registry_path is not None
                else CapabilityRegistry()
            )
        self.registry = registry

        self.analyzer = analyzer or TaskAnalyzer()
        self.scorer = scorer or ScoringEngine(self.analyzer.task_type_keywords)
        self.selector = Selector(
            min_confidence=self.config.min_confidence,
            max_alternatives=self.config.max_alternatives,
        )
        self.history = (
            history if history is not None else HistoryStore(self.config.history_capacity)
        )
        self.dispatcher = ExecutionDispatcher(
            registry=self.registry,
            history=self.history,
            fallback_handler_id=self.config.fallback_handler_id,
            fallback_executor=fallback_executor,
        )
        self.stats_aggregator = StatsAggregator(self.history)
        self.health_checker = HealthChecker(self.registry)

        if (
            fallback_executor is None
            and self.config.fallback_handler_id is not None
            and self.config.fallback_handler_id not in self.registry
        ):
            logger.warning(
                f"Fallback handler {self.config.fallback_handler_id} is not registered yet",
                extra={"fallback_handler_id": self.config.fallback_handler_id},
            )

        logger.info(
            "CapabilityRouter initialized",
            extra={
                "handler_count": len(self.registry),
                "history_capacity": self.history.capacity,
                "fallback_handler_id": self.config.fallback_handler_id,
            },
        )

    @classmethod
    def with_defaults(
        cls,
        config: ConfigCapabilityRouter | None = None,
        executors: dict[str, HandlerExecutor] | None = None,
    ) -> CapabilityRouter:
        """
        Build a router over the packaged five-specialist catalogue.

        Unless the configuration names one, failures fall back to the
        ``frontend`` specialist.

        Args:
            config: Router configuration (default: environment via get_config())
            executors: Executors to bind, keyed by handler id
        """
        config = config or get_config()
        if config.fallback_handler_id is None:
            config = config.model_copy(
                update={"fallback_handler_id": DEFAULT_FALLBACK_HANDLER_ID}
            )

        registry = CapabilityRegistry.with_defaults()
        for handler_id, executor in (executors or {}).items():
            registry.bind_executor(handler_id, executor)
        return cls(registry=registry, config=config)

    def register(
        self,
        descriptor: ModelHandlerDescriptor,
        executor: HandlerExecutor | None = None,
    ) -> None:
        """Register a handler; a duplicate id replaces the earlier one."""
        self.registry.register(descriptor, executor)

    def decide(self, text: str) -> ModelRoutingDecision:
        """
        Analyze, score and select without dispatching.

        Args:
            text: Free-text task description

        Returns:
            ModelRoutingDecision for the best-fit handler

        Raises:
            EmptyRegistryError: If no handlers are registered
        """
        profile = self.analyzer.analyze(text)
        scores = self.scorer.score_all(profile, self.registry.descriptors())
        decision = self.selector.select(scores, profile)

        logger.info(
            f"Routed request to {decision.selected_handler_id}",
            extra={
                "user_request": (text or "")[:100],
                "top_handler": decision.selected_handler_id,
                "confidence": decision.confidence,
                "primary_task_type": profile.primary_task_type,
                "total_candidates": len(scores),
            },
        )
        return decision

    async def route(self, text: str, task: Any = None) -> ModelRoutingResult:
        """
        Route a task to the best handler and execute it.

        Args:
            text: Free-text task description used for routing
            task: Opaque task handed to the handler (defaults to ``text``)

        Returns:
            ModelRoutingResult with decision, outcome and handler result

        Raises:
            EmptyRegistryError: If no handlers are registered (nothing recorded)
            CompleteRoutingFailureError: If primary and fallback both fail
                (a failure record is appended)
        """
        try:
            decision = self.decide(text)
        except EmptyRegistryError:
            logger.error(
                "Routing failed: no handlers registered",
                extra={"user_request": (text or "")[:100]},
            )
            raise

        return await self.dispatcher.dispatch(decision, text if task is None else task)

    def stats(self) -> ModelStatsSnapshot:
        """Aggregate statistics over the current history window."""
        return self.stats_aggregator.stats()

    async def health_check(self) -> ModelHealthSnapshot:
        """Per-handler and aggregate health."""
        return await self.health_checker.check()

    def available_handlers(self) -> list[str]:
        """Registered handler ids in registration order."""
        return self.registry.handler_ids()

    def get_handler(self, handler_id: str) -> ModelHandlerDescriptor | None:
        return self.registry.get(handler_id)


__all__ = [
    "DEFAULT_FALLBACK_HANDLER_ID",
    "CapabilityRouter",
]
