# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Capability Router - route free-text tasks to specialist handlers.

Selects the best-fit handler for a task description with a confidence
score, falls back once on handler failure, and keeps a bounded history for
statistics and health reporting.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from capability_router.analyzer import TaskAnalyzer
from capability_router.config import ConfigCapabilityRouter, get_config
from capability_router.enums import (
    EnumAffinityLevel,
    EnumComplexity,
    EnumHealthStatus,
    EnumRoutingErrorKind,
    EnumUrgency,
)
from capability_router.errors import (
    CompleteRoutingFailureError,
    EmptyRegistryError,
    RegistryConfigurationError,
    RoutingError,
)
from capability_router.models import (
    ModelExecutionOutcome,
    ModelHandlerDescriptor,
    ModelHealthSnapshot,
    ModelHistoryRecord,
    ModelRoutingDecision,
    ModelRoutingResult,
    ModelScore,
    ModelStatsSnapshot,
    ModelTaskProfile,
)
from capability_router.protocols import HandlerExecutor
from capability_router.registry import CapabilityRegistry
from capability_router.router import CapabilityRouter

try:
    __version__ = version("capability-router")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

__all__ = [
    "CapabilityRegistry",
    "CapabilityRouter",
    "CompleteRoutingFailureError",
    "ConfigCapabilityRouter",
    "EmptyRegistryError",
    "EnumAffinityLevel",
    "EnumComplexity",
    "EnumHealthStatus",
    "EnumRoutingErrorKind",
    "EnumUrgency",
    "HandlerExecutor",
    "ModelExecutionOutcome",
    "ModelHandlerDescriptor",
    "ModelHealthSnapshot",
    "ModelHistoryRecord",
    "ModelRoutingDecision",
    "ModelRoutingResult",
    "ModelScore",
    "ModelStatsSnapshot",
    "ModelTaskProfile",
    "RegistryConfigurationError",
    "RoutingError",
    "TaskAnalyzer",
    "get_config",
]
