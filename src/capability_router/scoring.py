# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""
Scoring Engine
==============

Calculates how well a registered handler fits a task profile.

Score Components (weights relative to one secondary task type):
1. Task-type fit - primary task type x2, every other task type x1
   (declared primary 0.95, declared secondary 0.80, tag overlap 0.60, base 0.20)
2. Domain affinity - x0.5 per profile domain (default affinity 0.20)
3. Capability overlap - x0.3, fraction of profile keywords found in the
   handler's capability and tool tags

The weighted average is multiplied by 1.2 when any task-type fit reached
primary level, then by the handler's complexity multiplier, and clamped to
[0.0, 1.0].
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping

from capability_router.analyzer import TaskAnalyzer
from capability_router.enums import EnumAffinityLevel
from capability_router.models import ModelHandlerDescriptor, ModelScore, ModelTaskProfile


class ScoringEngine:
    """
    Score handlers against a task profile.

    Stateless: the same profile and descriptor always yield the same score,
    and scoring never raises.
    """

    # Task-type fit levels
    FIT_PRIMARY = 0.95
    FIT_SECONDARY = 0.80
    FIT_TAG_OVERLAP = 0.60
    FIT_BASE = 0.20

    # Component weights
    WEIGHT_PRIMARY_TASK = 2.0
    WEIGHT_TASK = 1.0
    WEIGHT_DOMAIN = 0.5
    WEIGHT_CAPABILITY = 0.3

    DEFAULT_DOMAIN_AFFINITY = 0.2
    PRIMARY_MATCH_THRESHOLD = 0.90
    PRIMARY_MATCH_BOOST = 1.2
    EFFICIENCY_FACTOR = 0.9
    STRONG_FIT_THRESHOLD = 0.7

    def __init__(self, task_type_keywords: Mapping[str, Iterable[str]] | None = None):
        """
        Initialize scoring engine.

        Args:
            task_type_keywords: Keywords per task type, used for tag overlap.
                Defaults to the analyzer's table.
        """
        self.task_type_keywords = (
            task_type_keywords
            if task_type_keywords is not None
            else TaskAnalyzer.TASK_TYPE_KEYWORDS
        )

    @staticmethod
    def _tag_vocabulary(handler: ModelHandlerDescriptor) -> frozenset[str]:
        """Tags plus their hyphen/underscore/dot separated parts."""
        vocabulary = set(handler.tags)
        for tag in handler.tags:
            vocabulary.update(part for part in re.split(r"[-_.\s]+", tag) if part)
        return frozenset(vocabulary)

    def score(self, profile: ModelTaskProfile, handler: ModelHandlerDescriptor) -> ModelScore:
        """
        Calculate the confidence that ``handler`` fits ``profile``.

        Args:
            profile: Analyzed task
            handler: Registered handler descriptor

        Returns:
            ModelScore with breakdown and reasoning
        """
        vocabulary = self._tag_vocabulary(handler)
        reasons: list[str] = []
        weighted_sum = 0.0
        total_weight = 0.0

        # 1. Task-type fit
        task_sum = 0.0
        primary_match = False
        for index, task_type in enumerate(profile.task_types):
            fit = self._task_type_fit(handler, task_type, vocabulary)
            weight = self.WEIGHT_PRIMARY_TASK if index == 0 else self.WEIGHT_TASK
            task_sum += fit * weight
            total_weight += weight

            if fit >= self.PRIMARY_MATCH_THRESHOLD:
                primary_match = True
            if fit > self.STRONG_FIT_THRESHOLD:
                reasons.append(f"Strong fit for {task_type}")
        weighted_sum += task_sum

        # 2. Domain affinity
        domain_sum = 0.0
        for domain in profile.domains:
            affinity = handler.domain_affinity.get(domain, self.DEFAULT_DOMAIN_AFFINITY)
            domain_sum += affinity * self.WEIGHT_DOMAIN
            total_weight += self.WEIGHT_DOMAIN
            if affinity > self.STRONG_FIT_THRESHOLD:
                reasons.append(f"{domain} domain affinity")
        weighted_sum += domain_sum

        # 3. Capability overlap
        overlap = self._capability_overlap(profile.keywords, vocabulary)
        weighted_sum += overlap * self.WEIGHT_CAPABILITY
        total_weight += self.WEIGHT_CAPABILITY
        if overlap > 0.5:
            reasons.append("relevant capabilities")

        if total_weight == 0:
            return ModelScore(
                handler_id=handler.handler_id,
                confidence=0.0,
                reasoning=f"{handler.handler_id} evaluation",
            )

        average = weighted_sum / total_weight
        boost = self.PRIMARY_MATCH_BOOST if primary_match else 1.0
        complexity_multiplier = handler.complexity_multiplier(profile.complexity)
        confidence = min(max(average * boost * complexity_multiplier, 0.0), 1.0)

        return ModelScore(
            handler_id=handler.handler_id,
            confidence=confidence,
            reasoning=", ".join(reasons) or f"{handler.handler_id} evaluation",
            estimated_efficiency=confidence * self.EFFICIENCY_FACTOR,
            breakdown={
                "task_types": task_sum,
                "domains": domain_sum,
                "capability_overlap": overlap,
                "weighted_average": average,
                "primary_boost": boost,
                "complexity_multiplier": complexity_multiplier,
            },
        )

    def score_all(
        self,
        profile: ModelTaskProfile,
        handlers: Iterable[ModelHandlerDescriptor],
    ) -> list[ModelScore]:
        """Score every handler, preserving the given (registration) order."""
        return [self.score(profile, handler) for handler in handlers]

    def _task_type_fit(
        self,
        handler: ModelHandlerDescriptor,
        task_type: str,
        vocabulary: frozenset[str],
    ) -> float:
        affinity = handler.affinity_for(task_type)
        if affinity == EnumAffinityLevel.PRIMARY:
            return self.FIT_PRIMARY
        if affinity == EnumAffinityLevel.SECONDARY:
            return self.FIT_SECONDARY

        terms = [task_type, *self.task_type_keywords.get(task_type, ())]
        if any(term.lower() in vocabulary for term in terms):
            return self.FIT_TAG_OVERLAP
        return self.FIT_BASE

    @staticmethod
    def _capability_overlap(keywords: list[str], vocabulary: frozenset[str]) -> float:
        """Fraction of profile keywords present in the handler's tags (0.0 when none)."""
        if not keywords:
            return 0.0
        matches = sum(1 for kw in keywords if kw.lower() in vocabulary)
        return matches / len(keywords)


__all__ = [
    "ScoringEngine",
]
