# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Capability Registry.

Holds the registered handler descriptors, in registration order, together
with the executor bound to each one. Descriptors can be registered in code
or loaded from a YAML catalogue:

    handlers:
      frontend:
        description: UI and styling specialist
        capabilities: [ui-design, styling, component]
        tools: [react, css]
        domain_affinity: {frontend: 0.95, testing: 0.3}
        task_affinity: {ui-design: primary, authentication: secondary}
        complexity_adjustment: {high: 0.9, medium: 1.1}

Registration order matters: it is the tie-break when two handlers score
identically.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from capability_router.errors import RegistryConfigurationError
from capability_router.models import ModelHandlerDescriptor
from capability_router.protocols import HandlerExecutor

logger = logging.getLogger(__name__)

DEFAULT_CATALOGUE = "default_handlers.yaml"


def parse_handler_descriptors(document: Any, source: str = "<memory>") -> list[ModelHandlerDescriptor]:
    """Build descriptors from an already-parsed catalogue document.

    Args:
        document: Mapping with a top-level ``handlers`` mapping of id -> fields
        source: Where the document came from, for error messages

    Returns:
        Descriptors in catalogue order

    Raises:
        RegistryConfigurationError: If the document does not match the schema
    """
    if not isinstance(document, dict) or not isinstance(document.get("handlers"), dict):
        raise RegistryConfigurationError(
            f"Handler catalogue {source} must contain a 'handlers' mapping",
            details={"source": source},
        )

    descriptors = []
    for handler_id, fields in document["handlers"].items():
        fields = fields or {}
        if not isinstance(fields, dict):
            raise RegistryConfigurationError(
                f"Handler {handler_id!r} in {source} must be a mapping",
                details={"source": source, "handler_id": handler_id},
            )
        bad_keys = [key for key in fields if not isinstance(key, str) or key == "handler_id"]
        if bad_keys:
            raise RegistryConfigurationError(
                f"Handler {handler_id!r} in {source} has invalid fields: {bad_keys!r}",
                details={"source": source, "handler_id": handler_id, "fields": bad_keys},
            )
        try:
            descriptors.append(
                ModelHandlerDescriptor.model_validate(
                    {**fields, "handler_id": str(handler_id)}
                )
            )
        except ValidationError as e:
            raise RegistryConfigurationError(
                f"Invalid handler {handler_id!r} in {source}: {e.error_count()} error(s)",
                details={"source": source, "handler_id": handler_id, "errors": e.errors()},
            ) from e
    return descriptors


def load_handler_descriptors(path: str | Path) -> list[ModelHandlerDescriptor]:
    """Load descriptors from a YAML handler catalogue.

    Raises:
        FileNotFoundError: If the catalogue does not exist
        RegistryConfigurationError: If the YAML or its schema is invalid
    """
    try:
        with open(path, encoding="utf-8") as f:
            document = yaml.safe_load(f)
    except FileNotFoundError:
        logger.error(f"Handler catalogue not found: {path}")
        raise
    except yaml.YAMLError as e:
        logger.error(
            f"Invalid YAML in handler catalogue: {path}",
            exc_info=True,
            extra={"yaml_error": str(e)},
        )
        raise RegistryConfigurationError(
            f"Invalid YAML in handler catalogue {path}",
            details={"source": str(path), "yaml_error": str(e)},
        ) from e

    return parse_handler_descriptors(document, source=str(path))


def load_default_descriptors() -> list[ModelHandlerDescriptor]:
    """Load the packaged catalogue of the five built-in specialists."""
    text = (
        resources.files("capability_router")
        .joinpath(DEFAULT_CATALOGUE)
        .read_text(encoding="utf-8")
    )
    return parse_handler_descriptors(yaml.safe_load(text), source=DEFAULT_CATALOGUE)


class CapabilityRegistry:
    """
    Registered handlers and their executors.

    Iteration and ``descriptors()`` follow registration order. Re-registering
    an id replaces the descriptor (and executor, when one is given) but keeps
    the id's original position.
    """

    def __init__(self, descriptors: list[ModelHandlerDescriptor] | None = None):
        self._descriptors: dict[str, ModelHandlerDescriptor] = {}
        self._executors: dict[str, HandlerExecutor] = {}
        self._lock = threading.Lock()

        for descriptor in descriptors or []:
            self.register(descriptor)

    @classmethod
    def from_yaml(cls, path: str | Path) -> CapabilityRegistry:
        """Create a registry from a YAML handler catalogue."""
        registry = cls(load_handler_descriptors(path))
        logger.info(
            f"Loaded handler catalogue from {path}",
            extra={"handler_count": len(registry)},
        )
        return registry

    @classmethod
    def with_defaults(cls) -> CapabilityRegistry:
        """Create a registry holding the built-in specialist descriptors."""
        return cls(load_default_descriptors())

    def register(
        self,
        descriptor: ModelHandlerDescriptor,
        executor: HandlerExecutor | None = None,
    ) -> None:
        """
        Register a handler (last write wins for duplicate ids).

        Args:
            descriptor: Capability metadata for the handler
            executor: Optional executor; an existing executor is kept when omitted
        """
        with self._lock:
            replaced = descriptor.handler_id in self._descriptors
            self._descriptors[descriptor.handler_id] = descriptor
            if executor is not None:
                self._executors[descriptor.handler_id] = executor

        logger.info(
            f"{'Replaced' if replaced else 'Registered'} handler {descriptor.handler_id}",
            extra={
                "handler_id": descriptor.handler_id,
                "has_executor": executor is not None,
                "replaced": replaced,
            },
        )

    def bind_executor(self, handler_id: str, executor: HandlerExecutor) -> None:
        """Attach an executor to an already registered handler.

        Raises:
            KeyError: If no handler with this id is registered
        """
        with self._lock:
            if handler_id not in self._descriptors:
                raise KeyError(handler_id)
            self._executors[handler_id] = executor

    def get(self, handler_id: str) -> ModelHandlerDescriptor | None:
        with self._lock:
            return self._descriptors.get(handler_id)

    def get_executor(self, handler_id: str) -> HandlerExecutor | None:
        with self._lock:
            return self._executors.get(handler_id)

    def descriptors(self) -> list[ModelHandlerDescriptor]:
        """Registered descriptors in registration order."""
        with self._lock:
            return list(self._descriptors.values())

    def handler_ids(self) -> list[str]:
        with self._lock:
            return list(self._descriptors)

    def __len__(self) -> int:
        with self._lock:
            return len(self._descriptors)

    def __contains__(self, handler_id: object) -> bool:
        with self._lock:
            return handler_id in self._descriptors

    def __iter__(self) -> Iterator[ModelHandlerDescriptor]:
        return iter(self.descriptors())


__all__ = [
    "CapabilityRegistry",
    "load_default_descriptors",
    "load_handler_descriptors",
    "parse_handler_descriptors",
]
