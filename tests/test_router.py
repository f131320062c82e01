# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT
"""End-to-end tests for CapabilityRouter.

Covers the routing scenarios: best-fit selection, empty text, tie-break by
registration order, fallback, complete failure, history bounds and
concurrent routing.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import pytest

from capability_router.errors import CompleteRoutingFailureError, EmptyRegistryError
from capability_router.models import ModelHandlerDescriptor
from capability_router.registry import CapabilityRegistry
from capability_router.router import CapabilityRouter

pytestmark = pytest.mark.unit

LOGIN_FORM = "Create a beautiful login form with modern design"


class TestDecide:
    """Selection without dispatch."""

    def test_login_form_routes_to_frontend(self, make_router) -> None:
        decision = make_router().decide(LOGIN_FORM)

        assert decision.task_profile.primary_task_type == "ui-design"
        assert decision.selected_handler_id == "frontend"
        assert decision.confidence > 0.8
        assert [a.handler_id for a in decision.alternatives] == ["backend"]
        assert "Strong fit for ui-design" in decision.reasoning

    def test_empty_text_still_selects_a_handler(self, make_router) -> None:
        decision = make_router().decide("")

        assert decision.task_profile.task_types == ["general"]
        # Identical scores, so the first registered handler wins
        assert decision.selected_handler_id == "frontend"

    def test_tie_goes_to_first_registered(self, make_config) -> None:
        router = CapabilityRouter(registry=CapabilityRegistry(), config=make_config())
        for handler_id in ("second-choice", "first-choice"):
            router.register(
                ModelHandlerDescriptor(
                    handler_id=handler_id, task_affinity={"ui-design": "primary"}
                )
            )

        decision = router.decide("design a ui")

        assert decision.selected_handler_id == "second-choice"
        assert decision.alternatives[0].confidence == decision.confidence

    def test_decisions_are_deterministic(self, make_router) -> None:
        router = make_router()
        first = router.decide(LOGIN_FORM)
        second = router.decide(LOGIN_FORM)

        assert first.selected_handler_id == second.selected_handler_id
        assert first.confidence == second.confidence
        assert first.alternatives == second.alternatives
        assert first.task_profile == second.task_profile

    def test_empty_registry_raises(self, make_config) -> None:
        router = CapabilityRouter(registry=CapabilityRegistry(), config=make_config())
        with pytest.raises(EmptyRegistryError):
            router.decide(LOGIN_FORM)

    def test_low_confidence_is_flagged(self, make_router) -> None:
        decision = make_router(min_confidence=0.99).decide("")
        assert decision.meets_threshold is False

    def test_default_catalogue_routing(self, make_config) -> None:
        router = CapabilityRouter(registry=CapabilityRegistry.with_defaults(), config=make_config())

        assert router.decide(LOGIN_FORM).selected_handler_id == "frontend"
        assert router.decide("").selected_handler_id == "frontend"
        assert router.decide("deploy to production").selected_handler_id == "deployment"


class TestRoute:
    """Full route(): selection, dispatch and history."""

    @pytest.mark.asyncio
    async def test_route_executes_selected_handler(self, make_router) -> None:
        router = make_router()

        result = await router.route(LOGIN_FORM)

        assert result.outcome.success is True
        assert result.outcome.handled_by == "frontend"
        assert result.result == {"handled_by": "frontend", "task": LOGIN_FORM}
        assert len(router.history) == 1

    @pytest.mark.asyncio
    async def test_explicit_task_is_passed_through(self, make_router) -> None:
        payload = {"ticket": 42}
        result = await make_router().route("api endpoint", payload)
        assert result.result == {"handled_by": "backend", "task": payload}

    @pytest.mark.asyncio
    async def test_empty_registry_records_nothing(self, make_config) -> None:
        router = CapabilityRouter(registry=CapabilityRegistry(), config=make_config())

        with pytest.raises(EmptyRegistryError):
            await router.route(LOGIN_FORM)

        assert router.history.snapshot() == []
        assert router.stats().total_routes == 0

    @pytest.mark.asyncio
    async def test_fallback_scenario(self, make_router, fake_executor) -> None:
        router = make_router(
            {"frontend": fake_executor("frontend", error=RuntimeError("render failed"))},
            fallback_handler_id="backend",
        )

        result = await router.route(LOGIN_FORM)

        assert result.outcome.success is True
        assert result.outcome.fallback_used is True

    @pytest.mark.asyncio
    async def test_complete_failure_scenario(self, make_router, fake_executor) -> None:
        router = make_router(
            {
                "frontend": fake_executor("frontend", error=RuntimeError("render failed")),
                "backend": fake_executor("backend", error=RuntimeError("api down")),
            },
            fallback_handler_id="backend",
        )

        with pytest.raises(CompleteRoutingFailureError, match="render failed"):
            await router.route(LOGIN_FORM)

        record = router.history.snapshot()[-1]
        assert record.outcome.success is False
        assert record.outcome.error_messages == ["render failed", "api down"]

    @pytest.mark.asyncio
    async def test_history_keeps_most_recent_records(self, make_router) -> None:
        router = make_router(history_capacity=100)

        for _ in range(50):
            await router.route("design ui")
        for _ in range(100):
            await router.route("api endpoint")

        snapshot = router.history.snapshot()
        assert len(snapshot) == 100
        assert {r.decision.selected_handler_id for r in snapshot} == {"backend"}
        assert router.stats().usage_per_handler == {"backend": 100}

    @pytest.mark.asyncio
    async def test_concurrent_routes(self, make_router) -> None:
        router = make_router()
        texts = ["design ui", "api endpoint"] * 10

        results = await asyncio.gather(*(router.route(text) for text in texts))

        assert [r.decision.selected_handler_id for r in results] == ["frontend", "backend"] * 10
        assert len(router.history) == 20
        assert router.stats().usage_per_handler == {"frontend": 10, "backend": 10}


class TestConstruction:
    def test_registry_loaded_from_config_path(self, tmp_path: Path, make_config) -> None:
        path = tmp_path / "handlers.yaml"
        path.write_text(
            "handlers:\n  docs:\n    capabilities: [documentation]\n",
            encoding="utf-8",
        )

        router = CapabilityRouter(config=make_config(registry_path=path))

        assert router.available_handlers() == ["docs"]
        assert router.get_handler("docs").capabilities == frozenset({"documentation"})
        assert router.get_handler("missing") is None

    def test_no_registry_path_starts_empty(self, make_config) -> None:
        assert CapabilityRouter(config=make_config()).available_handlers() == []

    def test_history_capacity_from_config(self, make_router) -> None:
        assert make_router(history_capacity=7).history.capacity == 7

    @pytest.mark.asyncio
    async def test_default_router_falls_back_to_frontend(
        self, make_config, fake_executor
    ) -> None:
        frontend = fake_executor("frontend")
        router = CapabilityRouter.with_defaults(
            config=make_config(),
            executors={
                "frontend": frontend,
                "deployment": fake_executor("deployment", error=RuntimeError("no host")),
            },
        )

        result = await router.route("deploy to production")

        assert router.config.fallback_handler_id == "frontend"
        assert result.decision.selected_handler_id == "deployment"
        assert result.outcome.fallback_used is True
        assert result.outcome.handled_by == "frontend"
        assert frontend.calls == ["deploy to production"]

    def test_default_router_keeps_configured_fallback(self, make_config) -> None:
        router = CapabilityRouter.with_defaults(
            config=make_config(fallback_handler_id="testing")
        )
        assert router.config.fallback_handler_id == "testing"
        assert len(router.available_handlers()) == 5

    def test_unregistered_fallback_is_logged(self, make_router, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="capability_router.router"):
            make_router(fallback_handler_id="ghost")
        assert "ghost" in caplog.text
