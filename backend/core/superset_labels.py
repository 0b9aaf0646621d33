"""
Superset display labels.

Exercises performed back-to-back share a superset group id. Each group gets
a single uppercase letter ("A", "B", ...) in the order the group first
appears when exercises are sorted by ordinal position.
"""
from typing import Dict, Iterable, Optional, Protocol
import string


SUPERSET_PALETTE = [
    "#30D158",  # tint
    "#5E5CE6",  # indigo
    "#FF9F0A",  # orange
    "#007AFF",  # blue
    "#FF375F",  # pink
]

MAX_SUPERSET_LABELS = len(string.ascii_uppercase)


class SupersetLabelOverflowError(ValueError):
    """Raised when a session holds more superset groups than single letters."""


class SupersetGroupable(Protocol):
    """Anything that can take part in superset grouping."""

    @property
    def superset_id(self) -> Optional[str]: ...

    @property
    def order(self) -> int: ...


def superset_labels(exercises: Iterable[SupersetGroupable]) -> Dict[str, str]:
    """
    Map each superset group id to a display letter.

    Exercises are sorted by ``order`` (ties keep input order) and letters
    are handed out on first sight of each group id. Exercises without a
    group id are skipped.

    Args:
        exercises: Routine or session exercises

    Returns:
        Mapping of superset_id -> letter

    Raises:
        SupersetLabelOverflowError: If there are more than 26 distinct groups
    """
    labels: Dict[str, str] = {}

    for exercise in sorted(exercises, key=lambda e: e.order):
        group_id = exercise.superset_id
        if group_id is None or group_id in labels:
            continue
        if len(labels) >= MAX_SUPERSET_LABELS:
            raise SupersetLabelOverflowError(
                f"Cannot label more than {MAX_SUPERSET_LABELS} superset groups"
            )
        labels[group_id] = string.ascii_uppercase[len(labels)]

    return labels


def superset_color(letter: str) -> str:
    """
    Palette colour for a superset letter, cycling every five letters.

    Unknown input falls back to the first colour.
    """
    if not letter or letter[0] not in string.ascii_uppercase:
        return SUPERSET_PALETTE[0]
    index = ord(letter[0]) - ord("A")
    return SUPERSET_PALETTE[index % len(SUPERSET_PALETTE)]
