"""
Database Models and Type Definitions

Type definitions for identity rows. These are not ORM models but rather
TypedDict classes for type hints and documentation purposes.
"""

from typing import TypedDict, Optional, Any, List, Union


class IdentityRow(TypedDict, total=False):
    """
    One stored identity row, as returned by either retrieval path.

    The raw table path fills `embedding` (native array or text, depending on
    the column type); the pre-joined path fills `embedding_text`.
    """
    id: Union[int, str]
    name: str
    embedding: Optional[Any]
    embedding_text: Optional[str]


IdentityRows = List[IdentityRow]


def row_name(row: IdentityRow) -> Optional[str]:
    """Identity name of a row, or None if missing or not a string."""
    name = row.get("name")
    return name if isinstance(name, str) else None


def row_id(row: IdentityRow) -> str:
    """Printable row identifier for logs."""
    return str(row.get("id", "unknown"))


__all__ = [
    "IdentityRow",
    "IdentityRows",
    "row_name",
    "row_id",
]
