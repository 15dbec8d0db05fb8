"""
Verification Pipeline

Orchestrates one verification: validate the submitted descriptor, load the
target identity's references, and apply the policy. Nothing is kept between
calls.
"""

from typing import Any, Optional

from face_gate.core.config import VerificationSettings
from face_gate.core.exceptions import InvalidDescriptorError
from face_gate.core.logger import get_logger
from face_gate.db.store import IdentityStore

from .descriptor import validate_descriptor
from .policy import PolicyThresholds, VerificationDecision, VerificationPolicy
from .references import ReferenceRepository

logger = get_logger(__name__)


class VerificationService:
    """
    Verifies submitted descriptors against one configured identity.

    Args:
        repository: Source of reference descriptors
        target_identity: The only identity whose references are compared
        policy: Accept/reject rule (default thresholds if None)
    """

    def __init__(
        self,
        repository: ReferenceRepository,
        target_identity: str,
        policy: Optional[VerificationPolicy] = None,
    ):
        if not target_identity:
            raise ValueError("target_identity must be a non-empty name")
        self.repository = repository
        self.target_identity = target_identity
        self.policy = policy or VerificationPolicy()

    @classmethod
    def from_settings(cls, store: IdentityStore, config: VerificationSettings) -> "VerificationService":
        return cls(
            repository=ReferenceRepository(store),
            target_identity=config.target_identity,
            policy=VerificationPolicy(PolicyThresholds.from_settings(config)),
        )

    @property
    def thresholds(self) -> PolicyThresholds:
        return self.policy.thresholds

    def verify(self, raw_descriptor: Any) -> VerificationDecision:
        """
        Verify one submitted descriptor.

        Args:
            raw_descriptor: Untrusted descriptor from the request body

        Returns:
            VerificationDecision (a no-match with reason "no_valid_references"
            when nothing valid is enrolled)

        Raises:
            InvalidDescriptorError: If the descriptor is malformed; storage is
                not touched in that case
            StorageUnavailableError: If the references could not be loaded
        """
        result = validate_descriptor(raw_descriptor)
        if not result.is_valid:
            logger.info(f"Rejected submitted descriptor: {result.error}")
            raise InvalidDescriptorError(details=result.error)

        references = self.repository.load_references(self.target_identity)
        decision = self.policy.decide(result.descriptor, references)

        logger.info(
            f"Verification {'matched' if decision.matched else 'rejected'}: "
            f"best={decision.best_similarity:.4f} matches={decision.match_count} "
            f"compared={decision.compared_with}"
            + (f" rule={decision.rule}" if decision.rule else "")
            + (f" reason={decision.reason}" if decision.reason else "")
        )
        return decision


__all__ = ["VerificationService"]
