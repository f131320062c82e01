# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Task Analyzer.

Turns a free-text task description into a ModelTaskProfile using static
keyword tables. Matching is a case-insensitive substring test, so results
are deterministic and need no external NLP.

Analysis never fails: text with no recognisable task type (including empty
text) produces the ``general`` task type with medium complexity and urgency.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import ClassVar

from capability_router.enums import EnumComplexity, EnumUrgency
from capability_router.models import ModelTaskProfile

logger = logging.getLogger(__name__)

GENERAL_TASK_TYPE = "general"


class TaskAnalyzer:
    """
    Extract task types, domains, complexity and urgency from a description.

    Tables are class attributes and can be replaced per instance through the
    constructor. Declaration order is significant: it breaks ties between
    task types with the same match count.
    """

    MAX_TASK_TYPES = 3

    # Keyword patterns per task type, in tie-break order
    TASK_TYPE_KEYWORDS: ClassVar[Mapping[str, tuple[str, ...]]] = MappingProxyType(
        {
            "ui-design": ("ui", "design", "interface", "visual", "frontend", "component"),
            "api-development": ("api", "endpoint", "backend", "server", "rest", "graphql"),
            "database-design": ("database", "data", "model", "schema", "storage", "query"),
            "deployment": ("deploy", "host", "publish", "production", "launch", "live"),
            "testing": ("test", "qa", "bug", "quality", "validate", "check"),
            "authentication": ("auth", "login", "user", "security", "permission"),
            "performance": ("performance", "speed", "optimize", "fast", "slow"),
            "styling": ("style", "css", "theme", "responsive", "mobile"),
        }
    )

    DOMAIN_KEYWORDS: ClassVar[Mapping[str, tuple[str, ...]]] = MappingProxyType(
        {
            "frontend": ("ui", "frontend", "client", "browser", "component", "design"),
            "backend": ("backend", "server", "api", "service", "logic"),
            "database": ("database", "data", "storage", "query", "model"),
            "devops": ("deploy", "host", "production", "infrastructure", "ci/cd"),
            "testing": ("test", "qa", "quality", "bug", "validate"),
        }
    )

    TECHNOLOGY_KEYWORDS: ClassVar[Mapping[str, tuple[str, ...]]] = MappingProxyType(
        {
            "react": ("react", "jsx", "component"),
            "nodejs": ("node", "express", "npm"),
            "database": ("sql", "mongodb", "database", "db"),
            "testing": ("jest", "cypress", "playwright", "test"),
            "deployment": ("vercel", "netlify", "heroku", "docker"),
        }
    )

    # Tiers are checked high -> medium -> low; first tier with a match wins
    COMPLEXITY_KEYWORDS: ClassVar[Mapping[EnumComplexity, tuple[str, ...]]] = MappingProxyType(
        {
            EnumComplexity.HIGH: (
                "enterprise",
                "scale",
                "complex",
                "advanced",
                "multiple",
                "integration",
            ),
            EnumComplexity.MEDIUM: ("some", "moderate", "intermediate", "several"),
            EnumComplexity.LOW: ("simple", "basic", "quick", "easy", "small"),
        }
    )

    URGENCY_KEYWORDS: ClassVar[Mapping[EnumUrgency, tuple[str, ...]]] = MappingProxyType(
        {
            EnumUrgency.HIGH: ("urgent", "asap", "immediately", "critical", "emergency"),
            EnumUrgency.MEDIUM: ("soon", "important", "priority"),
            EnumUrgency.LOW: ("when possible", "eventually", "future"),
        }
    )

    def __init__(
        self,
        task_type_keywords: Mapping[str, tuple[str, ...]] | None = None,
        domain_keywords: Mapping[str, tuple[str, ...]] | None = None,
    ):
        """
        Initialize analyzer.

        Args:
            task_type_keywords: Replacement task-type table (declaration order
                is the tie-break order)
            domain_keywords: Replacement domain table
        """
        self.task_type_keywords = MappingProxyType(
            dict(task_type_keywords or self.TASK_TYPE_KEYWORDS)
        )
        self.domain_keywords = MappingProxyType(
            dict(domain_keywords or self.DOMAIN_KEYWORDS)
        )

    @staticmethod
    def _matches(keywords: tuple[str, ...], text: str) -> list[str]:
        return [kw for kw in keywords if kw.lower() in text]

    def keywords_for(self, task_type: str) -> tuple[str, ...]:
        """Keywords that signal ``task_type`` (empty for unknown task types)."""
        return tuple(self.task_type_keywords.get(task_type, ()))

    def analyze(self, text: str) -> ModelTaskProfile:
        """
        Build a task profile from a description.

        Args:
            text: Free-text task description (may be empty)

        Returns:
            ModelTaskProfile with task types ranked by match count
        """
        text_lower = (text or "").lower()
        found_keywords: list[str] = []

        # Score each task type by total keyword occurrences
        candidates: list[tuple[str, int]] = []
        for task_type, task_keywords in self.task_type_keywords.items():
            matched = self._matches(task_keywords, text_lower)
            if matched:
                occurrences = sum(text_lower.count(kw.lower()) for kw in matched)
                candidates.append((task_type, occurrences))
                found_keywords.extend(matched)

        # Stable sort keeps table order for equal counts
        candidates.sort(key=lambda c: c[1], reverse=True)
        task_types = [task_type for task_type, _ in candidates[: self.MAX_TASK_TYPES]]
        if not task_types:
            task_types = [GENERAL_TASK_TYPE]

        domains = []
        for domain, domain_keywords in self.domain_keywords.items():
            matched = self._matches(domain_keywords, text_lower)
            if matched:
                domains.append(domain)
                found_keywords.extend(matched)

        technologies = [
            tech
            for tech, tech_keywords in self.TECHNOLOGY_KEYWORDS.items()
            if self._matches(tech_keywords, text_lower)
        ]

        profile = ModelTaskProfile(
            task_types=task_types,
            domains=domains,
            complexity=self._first_tier(
                self.COMPLEXITY_KEYWORDS, text_lower, EnumComplexity.MEDIUM
            ),
            urgency=self._first_tier(
                self.URGENCY_KEYWORDS, text_lower, EnumUrgency.MEDIUM
            ),
            keywords=list(dict.fromkeys(found_keywords)),
            technologies=technologies,
            multi_handler_candidate=len(candidates) > 2 or len(domains) > 2,
        )

        logger.debug(
            f"Analyzed task: primary={profile.primary_task_type}",
            extra={
                "task_types": profile.task_types,
                "domains": profile.domains,
                "complexity": profile.complexity.value,
                "urgency": profile.urgency.value,
                "multi_handler_candidate": profile.multi_handler_candidate,
            },
        )
        return profile

    def _first_tier(self, tiers, text_lower, default):
        for level, indicators in tiers.items():
            if self._matches(indicators, text_lower):
                return level
        return default


__all__ = [
    "GENERAL_TASK_TYPE",
    "TaskAnalyzer",
]
