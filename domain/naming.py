"""
Collision-safe names for duplicated entities.

A copy of "Week 1" is named "Week 1 (Copy)". If that name is already taken
among the destination's siblings, a counter is added: "Week 1 (Copy 2)",
"Week 1 (Copy 3)", and so on. Copying a copy nests the suffix
("Week 1 (Copy) (Copy)") rather than reusing an existing name.
"""

from typing import Iterable, Optional

COPY_SUFFIX = "Copy"


def copy_name(base: str, number: int = 1) -> str:
    """Name of the ``number``-th copy of ``base`` (1 = unnumbered)."""
    if number <= 1:
        return f"{base} ({COPY_SUFFIX})"
    return f"{base} ({COPY_SUFFIX} {number})"


def disambiguate(
    source_name: Optional[str],
    sibling_names: Iterable[Optional[str]],
    default_name: str = COPY_SUFFIX,
) -> str:
    """
    Generate a copy name that no sibling already uses.

    Args:
        source_name: Name of the entity being duplicated
        sibling_names: Every existing name at the destination level
        default_name: Base used when the source has no name

    Returns:
        "<name> (Copy)" or the first free "<name> (Copy N)" with N >= 2

    Examples:
        >>> disambiguate("Week 1", {"Week 1"})
        'Week 1 (Copy)'
        >>> disambiguate("Week 1", {"Week 1", "Week 1 (Copy)"})
        'Week 1 (Copy 2)'
        >>> disambiguate(None, [], default_name="Week")
        'Week (Copy)'
    """
    base = (source_name or "").strip() or default_name
    taken = {name.strip() for name in sibling_names if name}

    number = 1
    candidate = copy_name(base, number)
    while candidate in taken:
        number += 1
        candidate = copy_name(base, number)
    return candidate
