"""
Scopes: the single Week, Workout or Exercise an operation is anchored on.

ScopeRef locates a scope by its full ancestor chain. ScopeSelection is the
shape confirmation dialogs send when asking for cascade counts: exactly one
target id plus the ids of the currently selected ancestors.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from application.exceptions import InvalidScopeError
from domain import paths
from domain.models import EntityKind

SCOPE_KINDS = (EntityKind.WEEK, EntityKind.WORKOUT, EntityKind.EXERCISE)


@dataclass(frozen=True)
class ScopeRef:
    """
    Reference to one Week, Workout or Exercise.

    The kind is the deepest id supplied. Ancestor ids are required because
    documents are addressed by path.

    Usage:
        >>> scope = ScopeRef.workout("u1", "p1", "w1", "wo1")
        >>> scope.kind
        <EntityKind.WORKOUT: 'workout'>
        >>> scope.document_path
        'users/u1/programs/p1/weeks/w1/workouts/wo1'
    """

    user_id: str
    program_id: str
    week_id: str
    workout_id: Optional[str] = None
    exercise_id: Optional[str] = None

    def __post_init__(self) -> None:
        for label, value in (
            ("user_id", self.user_id),
            ("program_id", self.program_id),
            ("week_id", self.week_id),
        ):
            if not value:
                raise InvalidScopeError(f"{label} is required")
        if self.exercise_id and not self.workout_id:
            raise InvalidScopeError("exercise scope requires workout_id")
        for value in (self.user_id, self.program_id, self.week_id,
                      self.workout_id, self.exercise_id):
            if value and "/" in value:
                raise InvalidScopeError(f"Invalid id: {value!r}")

    @classmethod
    def week(cls, user_id: str, program_id: str, week_id: str) -> "ScopeRef":
        return cls(user_id, program_id, week_id)

    @classmethod
    def workout(
        cls, user_id: str, program_id: str, week_id: str, workout_id: str
    ) -> "ScopeRef":
        if not workout_id:
            raise InvalidScopeError("workout_id is required")
        return cls(user_id, program_id, week_id, workout_id)

    @classmethod
    def exercise(
        cls,
        user_id: str,
        program_id: str,
        week_id: str,
        workout_id: str,
        exercise_id: str,
    ) -> "ScopeRef":
        if not exercise_id:
            raise InvalidScopeError("exercise_id is required")
        return cls(user_id, program_id, week_id, workout_id, exercise_id)

    @property
    def kind(self) -> EntityKind:
        if self.exercise_id:
            return EntityKind.EXERCISE
        if self.workout_id:
            return EntityKind.WORKOUT
        return EntityKind.WEEK

    @property
    def entity_id(self) -> str:
        return self.exercise_id or self.workout_id or self.week_id

    @property
    def document_path(self) -> str:
        if self.kind is EntityKind.EXERCISE:
            return paths.exercise_path(
                self.user_id, self.program_id, self.week_id,
                self.workout_id, self.exercise_id,
            )
        if self.kind is EntityKind.WORKOUT:
            return paths.workout_path(
                self.user_id, self.program_id, self.week_id, self.workout_id
            )
        return paths.week_path(self.user_id, self.program_id, self.week_id)

    @property
    def parent_collection_path(self) -> str:
        return paths.parent_collection(self.document_path)

    def parent_links(self) -> Dict[str, str]:
        """
        Link fields a document placed beside this scope should carry.

        A copy of a workout lives in the same week, so it links to the same
        user, program and week as the source.
        """
        links = {"userId": self.user_id, "programId": self.program_id}
        if self.kind in (EntityKind.WORKOUT, EntityKind.EXERCISE):
            links["weekId"] = self.week_id
        if self.kind is EntityKind.EXERCISE:
            links["workoutId"] = self.workout_id
        return links


@dataclass(frozen=True)
class ScopeSelection:
    """
    A counting request as sent by a confirmation dialog.

    Exactly one of ``week_id``, ``workout_id``, ``exercise_id`` names the
    target. ``selected_week_id`` and ``selected_workout_id`` identify the
    ancestors the user is currently viewing and are needed to address
    workouts and exercises.
    """

    user_id: str
    program_id: str
    week_id: Optional[str] = None
    workout_id: Optional[str] = None
    exercise_id: Optional[str] = None
    selected_week_id: Optional[str] = None
    selected_workout_id: Optional[str] = None

    def resolve(self) -> ScopeRef:
        """
        Turn the selection into a ScopeRef.

        Raises:
            InvalidScopeError: If zero or several targets are given, or a
                required ancestor is missing
        """
        targets = [t for t in (self.week_id, self.workout_id, self.exercise_id) if t]
        if len(targets) != 1:
            raise InvalidScopeError(
                f"Exactly one of week_id, workout_id, exercise_id is required "
                f"(got {len(targets)})"
            )

        if self.exercise_id:
            if not self.selected_week_id or not self.selected_workout_id:
                raise InvalidScopeError("exercise selection requires selected week and workout")
            return ScopeRef.exercise(
                self.user_id, self.program_id, self.selected_week_id,
                self.selected_workout_id, self.exercise_id,
            )
        if self.workout_id:
            if not self.selected_week_id:
                raise InvalidScopeError("workout selection requires selected week")
            return ScopeRef.workout(
                self.user_id, self.program_id, self.selected_week_id, self.workout_id
            )
        return ScopeRef.week(self.user_id, self.program_id, self.week_id)


def sibling_collection(
    level: EntityKind,
    user_id: str,
    program_id: str,
    week_id: Optional[str] = None,
    workout_id: Optional[str] = None,
    exercise_id: Optional[str] = None,
) -> str:
    """
    Collection path holding the siblings of ``level`` under the given parent.

    Weeks need only the program; workouts need the week; exercises the
    workout; sets the exercise.

    Raises:
        InvalidScopeError: If a required parent id is missing
    """
    if not user_id or not program_id:
        raise InvalidScopeError("user_id and program_id are required")
    if level is EntityKind.WEEK:
        return paths.child_collection(paths.program_path(user_id, program_id), level)
    if level not in (EntityKind.WORKOUT, EntityKind.EXERCISE, EntityKind.SET):
        raise InvalidScopeError(f"Cannot list siblings of {level.value}")

    # Parent of a workout is a week scope, of an exercise a workout scope...
    parent_ids = {
        EntityKind.WORKOUT: (week_id,),
        EntityKind.EXERCISE: (week_id, workout_id),
        EntityKind.SET: (week_id, workout_id, exercise_id),
    }[level]
    if not all(parent_ids):
        raise InvalidScopeError(f"Missing parent id for {level.value} siblings")
    parent = ScopeRef(user_id, program_id, *parent_ids)
    return paths.child_collection(parent.document_path, level)
