"""
Entity models for the program tree.

Program -> Week -> Workout -> Exercise -> Set

Documents are stored with camelCase keys (``orderIndex``, ``userId``); the
models expose snake_case attributes and accept either spelling on input.
Unknown keys are ignored, so validating a document through a model keeps
only the fields that model declares.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ServerTimestamp:
    """Sentinel asking the store to stamp its own time at write."""

    _instance: Optional["ServerTimestamp"] = None

    def __new__(cls) -> "ServerTimestamp":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = ServerTimestamp()


class EntityKind(str, Enum):
    """Levels of the program tree, outermost first."""

    PROGRAM = "program"
    WEEK = "week"
    WORKOUT = "workout"
    EXERCISE = "exercise"
    SET = "set"

    @property
    def collection(self) -> str:
        """Store collection name for documents of this kind."""
        return _COLLECTIONS[self]

    @property
    def order_field(self) -> str:
        """Document field siblings of this kind are ordered by."""
        return _ORDER_FIELDS[self]

    @property
    def child(self) -> Optional["EntityKind"]:
        return _CHILDREN.get(self)

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @property
    def link_field(self) -> str:
        """Field that children use to reference a parent of this kind."""
        return f"{self.value}Id"


_COLLECTIONS = {
    EntityKind.PROGRAM: "programs",
    EntityKind.WEEK: "weeks",
    EntityKind.WORKOUT: "workouts",
    EntityKind.EXERCISE: "exercises",
    EntityKind.SET: "sets",
}

_ORDER_FIELDS = {
    EntityKind.PROGRAM: "createdAt",
    EntityKind.WEEK: "order",
    EntityKind.WORKOUT: "orderIndex",
    EntityKind.EXERCISE: "orderIndex",
    EntityKind.SET: "setNumber",
}

_CHILDREN = {
    EntityKind.PROGRAM: EntityKind.WEEK,
    EntityKind.WEEK: EntityKind.WORKOUT,
    EntityKind.WORKOUT: EntityKind.EXERCISE,
    EntityKind.EXERCISE: EntityKind.SET,
}


class ExerciseType(str, Enum):
    """How an exercise's sets are measured."""

    STRENGTH = "strength"
    CARDIO = "cardio"
    TIME_BASED = "time-based"
    BODYWEIGHT = "bodyweight"
    CUSTOM = "custom"

    @classmethod
    def parse(cls, value: Optional[str]) -> "ExerciseType":
        """
        Parse a stored exercise type.

        Older documents spell the time-based type as ``timeBased`` or
        ``timebased``. Missing and unrecognised values fall back to CUSTOM,
        which keeps every populated metric.

        Examples:
            >>> ExerciseType.parse("timeBased")
            <ExerciseType.TIME_BASED: 'time-based'>
            >>> ExerciseType.parse(None)
            <ExerciseType.CUSTOM: 'custom'>
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return cls.CUSTOM
        normalized = value.strip().lower()
        if normalized in ("time-based", "timebased", "time_based"):
            return cls.TIME_BASED
        try:
            return cls(normalized)
        except ValueError:
            return cls.CUSTOM


class TreeDocument(BaseModel):
    """Fields shared by every document in the tree."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    user_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Program(TreeDocument):
    """Top-level training program."""

    name: Optional[str] = None
    description: Optional[str] = None
    is_archived: bool = False


class Week(TreeDocument):
    """A week within a program."""

    program_id: Optional[str] = None
    name: Optional[str] = None
    notes: Optional[str] = None
    order: Optional[int] = None


class Workout(TreeDocument):
    """A workout within a week."""

    program_id: Optional[str] = None
    week_id: Optional[str] = None
    name: Optional[str] = None
    day_of_week: Optional[int] = Field(
        default=None, ge=1, le=7, description="1=Monday, 7=Sunday"
    )
    order_index: Optional[int] = None
    notes: Optional[str] = None


class Exercise(TreeDocument):
    """An exercise within a workout."""

    program_id: Optional[str] = None
    week_id: Optional[str] = None
    workout_id: Optional[str] = None
    name: Optional[str] = None
    exercise_type: ExerciseType = ExerciseType.CUSTOM
    order_index: Optional[int] = None
    notes: Optional[str] = None

    @field_validator("exercise_type", mode="before")
    @classmethod
    def parse_exercise_type(cls, v):
        """Accept legacy spellings; unknown types become custom."""
        return ExerciseType.parse(v)


# Structural (non-Set) models by kind
STRUCTURAL_MODELS = {
    EntityKind.PROGRAM: Program,
    EntityKind.WEEK: Week,
    EntityKind.WORKOUT: Workout,
    EntityKind.EXERCISE: Exercise,
}
