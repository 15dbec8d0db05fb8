"""
Descriptor Validation Pipeline

Normalizes untrusted face descriptors, whether submitted by a client or read
back from storage, into 128-dim float64 vectors. Malformed input is an
expected case and is reported through DescriptorResult, never raised.
"""

import json
import numbers
from typing import Any, Optional
from dataclasses import dataclass

import numpy as np


# Constants
DESCRIPTOR_DIMENSION = 128


@dataclass(frozen=True)
class DescriptorResult:
    """Outcome of validating one raw descriptor."""
    descriptor: Optional[np.ndarray] = None
    error: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        return self.descriptor is not None

    @classmethod
    def invalid(cls, reason: str) -> "DescriptorResult":
        return cls(descriptor=None, error=reason)


def _is_real_number(value: Any) -> bool:
    # bool is an int subclass but never a valid coordinate
    return isinstance(value, numbers.Real) and not isinstance(value, (bool, np.bool_))


def validate_descriptor(raw: Any) -> DescriptorResult:
    """
    Validate a native descriptor sequence.

    Args:
        raw: Untrusted value, expected to be a list, tuple or 1-D array
             of exactly 128 finite real numbers

    Returns:
        DescriptorResult holding a read-only float64 array, or the reason
        the input was rejected
    """
    if isinstance(raw, np.ndarray):
        if raw.ndim != 1:
            return DescriptorResult.invalid(f"expected a 1-D array, got {raw.ndim}-D")
        values = raw.tolist()
    elif isinstance(raw, (list, tuple)):
        values = raw
    else:
        return DescriptorResult.invalid(f"expected an array, got {type(raw).__name__}")

    if len(values) != DESCRIPTOR_DIMENSION:
        return DescriptorResult.invalid(
            f"expected {DESCRIPTOR_DIMENSION} values, got {len(values)}"
        )

    for index, value in enumerate(values):
        if not _is_real_number(value):
            return DescriptorResult.invalid(
                f"value at index {index} is not a number ({type(value).__name__})"
            )

    try:
        descriptor = np.array(values, dtype=np.float64)
    except (OverflowError, TypeError, ValueError) as e:
        return DescriptorResult.invalid(f"values cannot be represented as floats: {e}")

    if not np.isfinite(descriptor).all():
        bad_index = int(np.flatnonzero(~np.isfinite(descriptor))[0])
        return DescriptorResult.invalid(f"value at index {bad_index} is not finite")

    descriptor.setflags(write=False)
    return DescriptorResult(descriptor=descriptor)


def parse_descriptor_text(text: Any) -> DescriptorResult:
    """
    Decode a text-serialized descriptor (JSON array, which also covers the
    pgvector text form) and validate the result.
    """
    if not isinstance(text, str) or not text.strip():
        return DescriptorResult.invalid("empty or non-text serialized descriptor")

    try:
        decoded = json.loads(text)
    except ValueError as e:
        return DescriptorResult.invalid(f"serialized descriptor is not valid JSON: {e}")

    return validate_descriptor(decoded)


def decode_stored_descriptor(value: Any) -> DescriptorResult:
    """
    Normalize a stored descriptor in either storage encoding.

    Native sequences are validated directly; strings are parsed first.
    Anything else is invalid.
    """
    if isinstance(value, str):
        return parse_descriptor_text(value)
    if value is None:
        return DescriptorResult.invalid("no stored descriptor")
    return validate_descriptor(value)


__all__ = [
    "DESCRIPTOR_DIMENSION",
    "DescriptorResult",
    "validate_descriptor",
    "parse_descriptor_text",
    "decode_stored_descriptor",
]
