"""
Value objects returned by cascade operations.

- MappingNode: old-id -> new-id correspondence for a duplicated subtree
- CascadeCounts: descendant counts shown before a cascade delete
"""

from collections import Counter
from typing import Dict, Iterator, List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from domain.models.entities import EntityKind


class MappingNode(BaseModel):
    """
    One duplicated document and the copies of its children.

    The tree mirrors the source subtree, children in source order, down to
    the Set level.

    Examples:
        >>> node = MappingNode(kind=EntityKind.SET, old_id="s1", new_id="s9")
        >>> node.model_dump(by_alias=True)["oldId"]
        's1'
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    kind: EntityKind
    old_id: str
    new_id: str
    children: List["MappingNode"] = Field(default_factory=list)

    def iter_nodes(self) -> Iterator["MappingNode"]:
        """Yield this node and every descendant, depth-first."""
        yield self
        for child in self.children:
            yield from child.iter_nodes()

    def count_by_kind(self) -> Dict[EntityKind, int]:
        return dict(Counter(node.kind for node in self.iter_nodes()))

    def old_ids(self) -> List[str]:
        return [node.old_id for node in self.iter_nodes()]

    def new_ids(self) -> List[str]:
        return [node.new_id for node in self.iter_nodes()]


class CascadeCounts(BaseModel):
    """
    Number of descendants below a scope, by level.

    Used in confirmation dialogs to tell the user how much a cascade delete
    will remove. Levels at or above the scope are always zero.
    """

    model_config = ConfigDict(frozen=True)

    workouts: int = Field(default=0, ge=0)
    exercises: int = Field(default=0, ge=0)
    sets: int = Field(default=0, ge=0)

    @classmethod
    def zero(cls) -> "CascadeCounts":
        return cls()

    @property
    def total_items(self) -> int:
        return self.workouts + self.exercises + self.sets

    @property
    def has_items(self) -> bool:
        return self.total_items > 0

    def summary(self) -> str:
        """
        Human-readable summary, e.g. "3 workouts, 9 exercises, 27 sets".

        Zero levels are left out; an empty subtree gives an empty string.
        """
        parts = []
        for label, value in (
            ("workout", self.workouts),
            ("exercise", self.exercises),
            ("set", self.sets),
        ):
            if value > 0:
                parts.append(f"{value} {label}{'s' if value > 1 else ''}")
        return ", ".join(parts)
