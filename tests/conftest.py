# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Shared fixtures for capability router tests.

Provides:
- FakeExecutor: scriptable handler executor (success, failure, blocking)
- Handler descriptors for a small frontend/backend registry
- Router factories with explicit configuration (no environment reads)
"""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from capability_router.config import ConfigCapabilityRouter
from capability_router.models import ModelHandlerDescriptor
from capability_router.registry import CapabilityRegistry
from capability_router.router import CapabilityRouter


class FakeExecutor:
    """Handler executor that records calls and fails on demand."""

    def __init__(
        self,
        name: str,
        error: Exception | None = None,
        health_error: Exception | None = None,
        block: bool = False,
    ) -> None:
        self.name = name
        self.error = error
        self.health_error = health_error
        self.block = block
        self.calls: list[Any] = []
        self.started = asyncio.Event()

    async def execute(self, task: Any) -> Any:
        self.calls.append(task)
        self.started.set()
        if self.block:
            await asyncio.Event().wait()
        if self.error is not None:
            raise self.error
        return {"handled_by": self.name, "task": task}

    async def health_check(self) -> None:
        if self.health_error is not None:
            raise self.health_error


class PlainExecutor:
    """Executor without a health_check method."""

    async def execute(self, task: Any) -> Any:
        return task


@pytest.fixture
def fake_executor() -> type[FakeExecutor]:
    """Provide the FakeExecutor class to tests."""
    return FakeExecutor


@pytest.fixture
def plain_executor() -> PlainExecutor:
    return PlainExecutor()


@pytest.fixture
def frontend_descriptor() -> ModelHandlerDescriptor:
    return ModelHandlerDescriptor(
        handler_id="frontend",
        description="UI specialist",
        capabilities=["ui-design", "visual-design"],
        tools=["css"],
        domain_affinity={"frontend": 0.95},
        task_affinity={"ui-design": "primary"},
    )


@pytest.fixture
def backend_descriptor() -> ModelHandlerDescriptor:
    return ModelHandlerDescriptor(
        handler_id="backend",
        description="API specialist",
        capabilities=["api-development"],
        tools=["express"],
        domain_affinity={"backend": 0.95},
        task_affinity={"api-development": "primary", "authentication": "primary"},
    )


@pytest.fixture
def make_config():
    """Build a configuration without reading the environment."""

    def _make(**overrides: Any) -> ConfigCapabilityRouter:
        values: dict[str, Any] = {
            "history_capacity": 100,
            "fallback_handler_id": None,
            "min_confidence": 0.0,
            "max_alternatives": 2,
            "registry_path": None,
        }
        values.update(overrides)
        return ConfigCapabilityRouter(**values)

    return _make


@pytest.fixture
def make_router(make_config, frontend_descriptor, backend_descriptor):
    """Build a router over the frontend/backend registry.

    Executors default to succeeding FakeExecutors; pass ``executors`` to
    override per handler id.
    """

    def _make(
        executors: dict[str, Any] | None = None,
        **config_overrides: Any,
    ) -> CapabilityRouter:
        executors = executors or {}
        registry = CapabilityRegistry()
        for descriptor in (frontend_descriptor, backend_descriptor):
            registry.register(
                descriptor,
                executors.get(descriptor.handler_id, FakeExecutor(descriptor.handler_id)),
            )
        return CapabilityRouter(registry=registry, config=make_config(**config_overrides))

    return _make
