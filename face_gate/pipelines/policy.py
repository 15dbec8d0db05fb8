"""
Verification Policy

Combines per-reference similarities into a single accept/reject decision.

With at least `min_reference_count` references, a submission must both reach
`best_sim_min_multi` on its best reference and reach `match_threshold` on at
least `min_reference_count` references. With fewer references (but at least
one) only the best similarity counts, against the stricter
`best_sim_min_single`. No references means no match.
"""

from typing import Optional, Dict, Any, Sequence
from dataclasses import dataclass

import numpy as np

from face_gate.core.config import VerificationSettings
from face_gate.core.logger import get_logger

from .similarity import cosine_similarity

logger = get_logger(__name__)


# Reported as bestSimilarity when there was nothing to compare against
NO_REFERENCE_SIMILARITY = -1.0
NO_VALID_REFERENCES = "no_valid_references"


@dataclass(frozen=True)
class PolicyThresholds:
    """Threshold parameters of the verification policy."""
    min_reference_count: int = 2
    match_threshold: float = 0.88
    best_sim_min_multi: float = 0.92
    best_sim_min_single: float = 0.95

    def __post_init__(self):
        if self.min_reference_count < 1:
            raise ValueError("min_reference_count must be at least 1")
        for name in ("match_threshold", "best_sim_min_multi", "best_sim_min_single"):
            value = getattr(self, name)
            if not -1.0 <= value <= 1.0:
                raise ValueError(f"{name} must be within [-1, 1], got {value}")

    @classmethod
    def from_settings(cls, config: VerificationSettings) -> "PolicyThresholds":
        return cls(
            min_reference_count=config.min_reference_count,
            match_threshold=config.match_threshold,
            best_sim_min_multi=config.best_sim_min_multi,
            best_sim_min_single=config.best_sim_min_single,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "minReferenceCount": self.min_reference_count,
            "matchThreshold": self.match_threshold,
            "bestSimMinMulti": self.best_sim_min_multi,
            "bestSimMinSingle": self.best_sim_min_single,
        }


@dataclass
class VerificationDecision:
    """Result of one verification."""
    matched: bool
    best_similarity: float
    match_count: int
    compared_with: int
    threshold: Optional[float] = None
    best_min: Optional[float] = None
    reason: Optional[str] = None
    rule: Optional[str] = None  # "multi", "single", or None without references

    def to_response(self) -> Dict[str, Any]:
        """Convert to API response format."""
        if self.reason is not None:
            return {
                "match": self.matched,
                "bestSimilarity": self.best_similarity,
                "matchCount": self.match_count,
                "comparedWith": self.compared_with,
                "reason": self.reason,
            }
        return {
            "match": self.matched,
            "bestSimilarity": self.best_similarity,
            "matchCount": self.match_count,
            "comparedWith": self.compared_with,
            "threshold": self.threshold,
            "bestMin": self.best_min,
        }


class VerificationPolicy:
    """Accept/reject rule over a reference set."""

    def __init__(self, thresholds: Optional[PolicyThresholds] = None):
        self.thresholds = thresholds or PolicyThresholds()

    def decide(
        self,
        submitted: np.ndarray,
        references: Sequence[np.ndarray],
    ) -> VerificationDecision:
        """
        Decide whether `submitted` belongs to the identity behind `references`.

        Args:
            submitted: Validated 128-dim descriptor
            references: Validated descriptors of the target identity

        Returns:
            VerificationDecision with the thresholds that were applied
        """
        t = self.thresholds

        if not references:
            return VerificationDecision(
                matched=False,
                best_similarity=NO_REFERENCE_SIMILARITY,
                match_count=0,
                compared_with=0,
                reason=NO_VALID_REFERENCES,
            )

        similarities = [cosine_similarity(submitted, ref) for ref in references]
        best_similarity = max(similarities)
        match_count = sum(1 for sim in similarities if sim >= t.match_threshold)

        use_multi_rule = len(references) >= t.min_reference_count
        if use_multi_rule:
            best_min = t.best_sim_min_multi
            matched = best_similarity >= best_min and match_count >= t.min_reference_count
        else:
            best_min = t.best_sim_min_single
            matched = best_similarity >= best_min

        logger.debug(
            f"Compared with {len(references)} references "
            f"({'multi' if use_multi_rule else 'single'} rule): "
            f"best={best_similarity:.4f}, matches={match_count}"
        )

        return VerificationDecision(
            matched=bool(matched),
            best_similarity=best_similarity,
            match_count=match_count,
            compared_with=len(references),
            threshold=t.match_threshold,
            best_min=best_min,
            rule="multi" if use_multi_rule else "single",
        )


__all__ = [
    "NO_REFERENCE_SIMILARITY",
    "NO_VALID_REFERENCES",
    "PolicyThresholds",
    "VerificationDecision",
    "VerificationPolicy",
]
