# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Handler execution protocol.

Every handler, the fallback included, implements the same single-method
interface. The router treats both the task and the result as opaque.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class HandlerExecutor(Protocol):
    """Protocol for the work a registered handler performs.

    Implementations raise to signal failure. Latency is unbounded from the
    router's point of view; callers bound it with ``asyncio.timeout()``.
    """

    async def execute(self, task: Any) -> Any:
        """Perform the task and return an opaque result."""
        ...


@runtime_checkable
class SupportsHealthCheck(Protocol):
    """Optional self-check exposed by a handler executor.

    A plain ``def health_check()`` is accepted too; the health checker only
    awaits the result when it is awaitable.
    """

    async def health_check(self) -> None:
        """Raise when the handler cannot currently take work."""
        ...


__all__ = [
    "HandlerExecutor",
    "SupportsHealthCheck",
]
