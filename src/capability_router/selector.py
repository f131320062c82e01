# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Selector - rank handler scores and pick the winner.

Ties on the top confidence go to the handler registered first: scores
arrive in registration order and the sort is stable.
"""

from __future__ import annotations

import logging

from capability_router.errors import EmptyRegistryError
from capability_router.models import (
    ModelAlternative,
    ModelRoutingDecision,
    ModelScore,
    ModelTaskProfile,
)

logger = logging.getLogger(__name__)


class Selector:
    """Turn a list of scores into a routing decision."""

    def __init__(self, min_confidence: float = 0.0, max_alternatives: int = 2):
        """
        Initialize selector.

        Args:
            min_confidence: Threshold below which a decision is flagged (it is
                still returned and dispatched)
            max_alternatives: Number of runner-up handlers to report
        """
        self.min_confidence = min_confidence
        self.max_alternatives = max_alternatives

    def select(
        self, scores: list[ModelScore], profile: ModelTaskProfile
    ) -> ModelRoutingDecision:
        """
        Pick the highest-confidence handler.

        Args:
            scores: One score per registered handler, in registration order
            profile: Profile the scores were computed for

        Returns:
            ModelRoutingDecision with up to ``max_alternatives`` alternatives

        Raises:
            EmptyRegistryError: If there are no scores
        """
        if not scores:
            raise EmptyRegistryError()

        ranked = sorted(scores, key=lambda s: s.confidence, reverse=True)
        selected = ranked[0]
        alternatives = [
            ModelAlternative(
                handler_id=score.handler_id,
                confidence=score.confidence,
                reasoning=score.reasoning,
            )
            for score in ranked[1 : 1 + self.max_alternatives]
        ]

        meets_threshold = selected.confidence >= self.min_confidence
        if not meets_threshold:
            logger.warning(
                f"Selected {selected.handler_id} below confidence threshold",
                extra={
                    "handler_id": selected.handler_id,
                    "confidence": selected.confidence,
                    "min_confidence": self.min_confidence,
                },
            )

        logger.debug(
            f"Selected: {selected.handler_id} (confidence: {selected.confidence:.1%})",
            extra={"alternatives": [a.handler_id for a in alternatives]},
        )

        return ModelRoutingDecision(
            selected_handler_id=selected.handler_id,
            confidence=selected.confidence,
            reasoning=selected.reasoning,
            alternatives=alternatives,
            task_profile=profile,
            meets_threshold=meets_threshold,
        )


__all__ = [
    "Selector",
]
