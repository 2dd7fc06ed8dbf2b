"""
Exercise set variants.

A set's metrics depend on its exercise's type. Each variant declares only the
metric fields that make sense for that type, so validating a stored set
through the variant for a given type discards metrics that belong to other
types (e.g. a ``weight`` left on a set whose exercise is now cardio).

| variant        | metrics                                  |
|----------------|------------------------------------------|
| StrengthSet    | reps, weight, rest_time                  |
| CardioSet      | duration, distance                       |
| TimeBasedSet   | duration, distance                       |
| BodyweightSet  | reps, rest_time                          |
| CustomSet      | reps, weight, duration, distance, rest_time |
"""

from datetime import datetime
from typing import Annotated, Any, ClassVar, Dict, List, Literal, Optional, Tuple, Type, Union

from pydantic import Field, TypeAdapter, field_validator

from domain.models.entities import ExerciseType, TreeDocument


class SetBase(TreeDocument):
    """Fields every set carries regardless of exercise type."""

    METRIC_FIELDS: ClassVar[Tuple[str, ...]] = ()

    program_id: Optional[str] = None
    week_id: Optional[str] = None
    workout_id: Optional[str] = None
    exercise_id: Optional[str] = None
    set_number: int = 1
    checked: bool = False
    notes: Optional[str] = None
    completed_at: Optional[datetime] = None

    @field_validator(
        "set_number", "reps", "duration", "rest_time", mode="before", check_fields=False
    )
    @classmethod
    def truncate_whole_number_fields(cls, value: Any) -> Any:
        # Older clients stored these as doubles
        if isinstance(value, float):
            return int(value)
        return value

    def metrics(self) -> Dict[str, Any]:
        """Populated metric fields keyed by attribute name."""
        return {
            name: getattr(self, name)
            for name in self.METRIC_FIELDS
            if getattr(self, name) is not None
        }

    def metric_errors(self) -> List[str]:
        """
        Problems with this set's metrics for its exercise type.

        Returns:
            List of error messages (empty if the set is consistent)
        """
        errors: List[str] = []
        if self.set_number <= 0:
            errors.append("setNumber must be positive")
        for name, value in self.metrics().items():
            if value < 0:
                errors.append(f"{name} must not be negative")
        errors.extend(self._type_errors())
        return errors

    def _type_errors(self) -> List[str]:
        return []


def _positive(value: Optional[float]) -> bool:
    return value is not None and value > 0


class StrengthSet(SetBase):
    METRIC_FIELDS: ClassVar[Tuple[str, ...]] = ("reps", "weight", "rest_time")

    exercise_type: Literal["strength"] = "strength"
    reps: Optional[int] = None
    weight: Optional[float] = None
    rest_time: Optional[int] = None

    def _type_errors(self) -> List[str]:
        if not _positive(self.reps):
            return ["reps is required for strength sets"]
        return []


class CardioSet(SetBase):
    METRIC_FIELDS: ClassVar[Tuple[str, ...]] = ("duration", "distance")

    exercise_type: Literal["cardio"] = "cardio"
    duration: Optional[int] = None
    distance: Optional[float] = None

    def _type_errors(self) -> List[str]:
        if not _positive(self.duration):
            return ["duration is required for cardio sets"]
        return []


class TimeBasedSet(SetBase):
    METRIC_FIELDS: ClassVar[Tuple[str, ...]] = ("duration", "distance")

    exercise_type: Literal["time-based"] = "time-based"
    duration: Optional[int] = None
    distance: Optional[float] = None

    def _type_errors(self) -> List[str]:
        if not _positive(self.duration):
            return ["duration is required for time-based sets"]
        return []


class BodyweightSet(SetBase):
    METRIC_FIELDS: ClassVar[Tuple[str, ...]] = ("reps", "rest_time")

    exercise_type: Literal["bodyweight"] = "bodyweight"
    reps: Optional[int] = None
    rest_time: Optional[int] = None

    def _type_errors(self) -> List[str]:
        if not _positive(self.reps):
            return ["reps is required for bodyweight sets"]
        return []


class CustomSet(SetBase):
    METRIC_FIELDS: ClassVar[Tuple[str, ...]] = (
        "reps",
        "weight",
        "duration",
        "distance",
        "rest_time",
    )

    exercise_type: Literal["custom"] = "custom"
    reps: Optional[int] = None
    weight: Optional[float] = None
    duration: Optional[int] = None
    distance: Optional[float] = None
    rest_time: Optional[int] = None

    def _type_errors(self) -> List[str]:
        if not any(_positive(v) for v in (self.reps, self.duration, self.distance)):
            return ["custom sets need at least one of reps, duration or distance"]
        return []


ExerciseSet = Annotated[
    Union[StrengthSet, CardioSet, TimeBasedSet, BodyweightSet, CustomSet],
    Field(discriminator="exercise_type"),
]

SET_VARIANTS: Dict[ExerciseType, Type[SetBase]] = {
    ExerciseType.STRENGTH: StrengthSet,
    ExerciseType.CARDIO: CardioSet,
    ExerciseType.TIME_BASED: TimeBasedSet,
    ExerciseType.BODYWEIGHT: BodyweightSet,
    ExerciseType.CUSTOM: CustomSet,
}

_exercise_set_adapter: TypeAdapter = TypeAdapter(ExerciseSet)


def set_for_type(data: Dict[str, Any], exercise_type: ExerciseType) -> SetBase:
    """
    Validate a stored set as the variant for ``exercise_type``.

    The set's own ``exerciseType`` key (if any) is ignored; the owning
    exercise decides which metrics apply.
    """
    variant = SET_VARIANTS[exercise_type]
    payload = {
        k: v for k, v in data.items() if k not in ("exerciseType", "exercise_type")
    }
    return variant.model_validate(payload)


def parse_set(data: Dict[str, Any]) -> SetBase:
    """Validate a stored set using its own ``exerciseType`` tag."""
    tag = ExerciseType.parse(data.get("exerciseType", data.get("exercise_type")))
    return _exercise_set_adapter.validate_python({**data, "exerciseType": tag.value})
