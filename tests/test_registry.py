# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT
"""Tests for CapabilityRegistry and YAML handler catalogues."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from capability_router.enums import EnumAffinityLevel, EnumComplexity, EnumRoutingErrorKind
from capability_router.errors import RegistryConfigurationError
from capability_router.models import ModelHandlerDescriptor
from capability_router.registry import (
    CapabilityRegistry,
    load_default_descriptors,
    load_handler_descriptors,
    parse_handler_descriptors,
)

pytestmark = pytest.mark.unit

CATALOGUE = """
handlers:
  ui:
    description: UI work
    capabilities: [UI-Design, Styling]
    tools: [react]
    domain_affinity: {frontend: 0.9}
    task_affinity: {ui-design: primary, styling: secondary}
    complexity_adjustment: {low: 1.2}
  api:
    capabilities: [api-development]
"""


class TestDescriptor:
    def test_tags_are_lowercased(self) -> None:
        descriptor = ModelHandlerDescriptor(handler_id="x", capabilities=["UI-Design "])
        assert descriptor.capabilities == frozenset({"ui-design"})

    def test_affinity_out_of_range_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ModelHandlerDescriptor(handler_id="x", domain_affinity={"frontend": 1.5})

    def test_non_positive_complexity_adjustment_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ModelHandlerDescriptor(handler_id="x", complexity_adjustment={"low": 0})

    def test_empty_id_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ModelHandlerDescriptor(handler_id="")

    def test_descriptor_is_immutable(self) -> None:
        descriptor = ModelHandlerDescriptor(handler_id="x")
        with pytest.raises(ValidationError):
            descriptor.handler_id = "y"  # type: ignore[misc]

    def test_complexity_multiplier_defaults_to_one(self) -> None:
        descriptor = ModelHandlerDescriptor(
            handler_id="x", complexity_adjustment={"high": 1.1}
        )
        assert descriptor.complexity_multiplier(EnumComplexity.HIGH) == 1.1
        assert descriptor.complexity_multiplier(EnumComplexity.LOW) == 1.0


class TestRegistry:
    def test_registration_order_is_preserved(self) -> None:
        registry = CapabilityRegistry()
        for handler_id in ("b", "a", "c"):
            registry.register(ModelHandlerDescriptor(handler_id=handler_id))
        assert registry.handler_ids() == ["b", "a", "c"]
        assert len(registry) == 3
        assert "a" in registry
        assert [d.handler_id for d in registry] == ["b", "a", "c"]

    def test_duplicate_id_replaces_descriptor(self, fake_executor) -> None:
        registry = CapabilityRegistry()
        first = fake_executor("first")
        registry.register(ModelHandlerDescriptor(handler_id="a", description="old"), first)
        registry.register(ModelHandlerDescriptor(handler_id="b"))
        registry.register(ModelHandlerDescriptor(handler_id="a", description="new"))

        assert registry.get("a").description == "new"
        assert registry.handler_ids() == ["a", "b"]
        # Executor kept when the replacement does not bring one
        assert registry.get_executor("a") is first

    def test_bind_executor(self, fake_executor) -> None:
        registry = CapabilityRegistry([ModelHandlerDescriptor(handler_id="a")])
        executor = fake_executor("a")
        registry.bind_executor("a", executor)
        assert registry.get_executor("a") is executor

    def test_bind_executor_unknown_handler(self, fake_executor) -> None:
        with pytest.raises(KeyError):
            CapabilityRegistry().bind_executor("missing", fake_executor("x"))

    def test_unknown_lookup_returns_none(self) -> None:
        registry = CapabilityRegistry()
        assert registry.get("missing") is None
        assert registry.get_executor("missing") is None


class TestCatalogue:
    def test_from_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "handlers.yaml"
        path.write_text(CATALOGUE, encoding="utf-8")

        registry = CapabilityRegistry.from_yaml(path)

        assert registry.handler_ids() == ["ui", "api"]
        ui = registry.get("ui")
        assert ui.capabilities == frozenset({"ui-design", "styling"})
        assert ui.affinity_for("ui-design") == EnumAffinityLevel.PRIMARY
        assert ui.affinity_for("styling") == EnumAffinityLevel.SECONDARY
        assert ui.complexity_multiplier(EnumComplexity.LOW) == 1.2

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_handler_descriptors(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("handlers: [unclosed", encoding="utf-8")
        with pytest.raises(RegistryConfigurationError) as exc_info:
            load_handler_descriptors(path)
        assert exc_info.value.code == EnumRoutingErrorKind.CONFIGURATION_ERROR

    def test_missing_handlers_mapping(self) -> None:
        with pytest.raises(RegistryConfigurationError, match="handlers"):
            parse_handler_descriptors({"agents": {}})

    def test_invalid_handler_fields(self) -> None:
        document = {"handlers": {"x": {"domain_affinity": {"frontend": 2.0}}}}
        with pytest.raises(RegistryConfigurationError) as exc_info:
            parse_handler_descriptors(document)
        assert exc_info.value.details["handler_id"] == "x"

    def test_handler_id_field_in_entry_rejected(self) -> None:
        document = {"handlers": {"a": {"handler_id": "b"}}}
        with pytest.raises(RegistryConfigurationError) as exc_info:
            parse_handler_descriptors(document)
        assert exc_info.value.details["fields"] == ["handler_id"]

    def test_non_string_field_name_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "handlers.yaml"
        path.write_text("handlers:\n  a:\n    1: x\n", encoding="utf-8")
        with pytest.raises(RegistryConfigurationError) as exc_info:
            load_handler_descriptors(path)
        assert exc_info.value.details["fields"] == [1]

    def test_handler_with_no_fields(self) -> None:
        descriptors = parse_handler_descriptors({"handlers": {"bare": None}})
        assert descriptors[0].handler_id == "bare"

    def test_default_catalogue(self) -> None:
        descriptors = load_default_descriptors()
        assert [d.handler_id for d in descriptors] == [
            "frontend",
            "backend",
            "database",
            "deployment",
            "testing",
        ]
        frontend = descriptors[0]
        assert frontend.affinity_for("ui-design") == EnumAffinityLevel.PRIMARY
        assert frontend.domain_affinity["frontend"] == 0.95

    def test_with_defaults(self) -> None:
        assert len(CapabilityRegistry.with_defaults()) == 5
