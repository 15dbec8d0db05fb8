"""
Pipelines Module

Business logic for descriptor validation, reference loading, similarity
scoring and the verification decision. Separates the decision engine from
API route handling.
"""

from .descriptor import (
    DESCRIPTOR_DIMENSION,
    DescriptorResult,
    validate_descriptor,
    parse_descriptor_text,
    decode_stored_descriptor,
)
from .similarity import cosine_similarity
from .references import (
    RetrievalStep,
    RetrievalStrategy,
    ReferenceRepository,
)
from .policy import (
    NO_REFERENCE_SIMILARITY,
    NO_VALID_REFERENCES,
    PolicyThresholds,
    VerificationDecision,
    VerificationPolicy,
)
from .verification import VerificationService

__all__ = [
    # Descriptor validation
    "DESCRIPTOR_DIMENSION",
    "DescriptorResult",
    "validate_descriptor",
    "parse_descriptor_text",
    "decode_stored_descriptor",
    # Similarity
    "cosine_similarity",
    # References
    "RetrievalStep",
    "RetrievalStrategy",
    "ReferenceRepository",
    # Policy
    "NO_REFERENCE_SIMILARITY",
    "NO_VALID_REFERENCES",
    "PolicyThresholds",
    "VerificationDecision",
    "VerificationPolicy",
    # Service
    "VerificationService",
]
