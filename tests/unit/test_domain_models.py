"""
Unit tests for domain models.

Tests for:
- EntityKind and ExerciseType
- Structural entities (Week, Workout, Exercise)
- Set variants and metric validation
- MappingNode and CascadeCounts
"""

import pytest
from pydantic import ValidationError

from domain.models import (
    CardioSet,
    CascadeCounts,
    CustomSet,
    EntityKind,
    Exercise,
    ExerciseType,
    MappingNode,
    StrengthSet,
    TimeBasedSet,
    Workout,
    parse_set,
    set_for_type,
)


# =============================================================================
# EntityKind Tests
# =============================================================================


@pytest.mark.unit
class TestEntityKind:
    def test_hierarchy(self):
        assert EntityKind.PROGRAM.child is EntityKind.WEEK
        assert EntityKind.WEEK.child is EntityKind.WORKOUT
        assert EntityKind.WORKOUT.child is EntityKind.EXERCISE
        assert EntityKind.EXERCISE.child is EntityKind.SET
        assert EntityKind.SET.child is None

    @pytest.mark.parametrize(
        "kind,field",
        [
            (EntityKind.WEEK, "order"),
            (EntityKind.WORKOUT, "orderIndex"),
            (EntityKind.EXERCISE, "orderIndex"),
            (EntityKind.SET, "setNumber"),
        ],
    )
    def test_order_fields(self, kind, field):
        assert kind.order_field == field

    def test_link_field(self):
        assert EntityKind.WORKOUT.link_field == "workoutId"

    def test_collection(self):
        assert EntityKind.EXERCISE.collection == "exercises"


# =============================================================================
# ExerciseType Tests
# =============================================================================


@pytest.mark.unit
class TestExerciseType:
    @pytest.mark.parametrize("raw", ["time-based", "timeBased", "timebased", "TIME-BASED"])
    def test_time_based_spellings(self, raw):
        assert ExerciseType.parse(raw) is ExerciseType.TIME_BASED

    def test_known_values(self):
        assert ExerciseType.parse("strength") is ExerciseType.STRENGTH
        assert ExerciseType.parse("Cardio") is ExerciseType.CARDIO

    @pytest.mark.parametrize("raw", [None, "", "yoga", 3])
    def test_unknown_values_fall_back_to_custom(self, raw):
        assert ExerciseType.parse(raw) is ExerciseType.CUSTOM

    def test_exercise_model_parses_type(self):
        exercise = Exercise.model_validate({"name": "Row", "exerciseType": "timeBased"})
        assert exercise.exercise_type is ExerciseType.TIME_BASED

    def test_exercise_model_defaults_to_custom(self):
        assert Exercise.model_validate({"name": "Row"}).exercise_type is ExerciseType.CUSTOM


# =============================================================================
# Structural entity Tests
# =============================================================================


@pytest.mark.unit
class TestWorkout:
    def test_accepts_camel_case(self):
        workout = Workout.model_validate({"name": "Push", "orderIndex": 2, "dayOfWeek": 3})
        assert workout.order_index == 2
        assert workout.day_of_week == 3

    def test_day_of_week_range(self):
        with pytest.raises(ValidationError):
            Workout.model_validate({"dayOfWeek": 8})

    def test_unknown_fields_ignored(self):
        workout = Workout.model_validate({"name": "Push", "legacyField": 1})
        assert "legacyField" not in workout.model_dump(by_alias=True)


# =============================================================================
# Set variant Tests
# =============================================================================


@pytest.mark.unit
class TestSetVariants:
    STORED = {
        "setNumber": 1,
        "reps": 10,
        "weight": 60,
        "restTime": 90,
        "duration": 30,
        "distance": 1.5,
    }

    def test_strength_keeps_only_strength_metrics(self):
        strength = set_for_type(self.STORED, ExerciseType.STRENGTH)
        assert isinstance(strength, StrengthSet)
        assert strength.metrics() == {"reps": 10, "weight": 60.0, "rest_time": 90}

    def test_cardio_keeps_only_cardio_metrics(self):
        cardio = set_for_type(self.STORED, ExerciseType.CARDIO)
        assert isinstance(cardio, CardioSet)
        assert cardio.metrics() == {"duration": 30, "distance": 1.5}
        assert not hasattr(cardio, "weight")

    def test_custom_keeps_everything(self):
        custom = set_for_type(self.STORED, ExerciseType.CUSTOM)
        assert isinstance(custom, CustomSet)
        assert set(custom.metrics()) == {"reps", "weight", "rest_time", "duration", "distance"}

    def test_own_tag_is_ignored(self):
        stored = {**self.STORED, "exerciseType": "cardio"}
        assert isinstance(set_for_type(stored, ExerciseType.STRENGTH), StrengthSet)

    def test_parse_set_uses_own_tag(self):
        assert isinstance(parse_set({"exerciseType": "timeBased", "duration": 60}), TimeBasedSet)

    def test_parse_set_without_tag_is_custom(self):
        assert isinstance(parse_set({"reps": 5}), CustomSet)

    def test_whole_number_fields_truncate_doubles(self):
        stored = {"setNumber": 2.0, "reps": 8.5, "weight": 62.5, "restTime": 90.0}
        strength = set_for_type(stored, ExerciseType.STRENGTH)
        assert strength.set_number == 2
        assert strength.metrics() == {"reps": 8, "weight": 62.5, "rest_time": 90}

    def test_cardio_duration_truncates(self):
        assert set_for_type({"duration": 45.9}, ExerciseType.CARDIO).duration == 45


@pytest.mark.unit
class TestMetricErrors:
    def test_valid_strength_set(self):
        assert StrengthSet(set_number=1, reps=5, weight=100).metric_errors() == []

    def test_strength_requires_reps(self):
        errors = StrengthSet(set_number=1, weight=100).metric_errors()
        assert errors == ["reps is required for strength sets"]

    def test_cardio_requires_duration(self):
        assert CardioSet(set_number=1, distance=5).metric_errors()

    def test_negative_metric(self):
        errors = CardioSet(set_number=1, duration=60, distance=-1).metric_errors()
        assert "distance must not be negative" in errors

    def test_set_number_must_be_positive(self):
        errors = CustomSet(set_number=0, reps=1).metric_errors()
        assert "setNumber must be positive" in errors

    def test_custom_needs_one_primary_metric(self):
        assert CustomSet(set_number=1, weight=20).metric_errors()
        assert CustomSet(set_number=1, distance=3).metric_errors() == []


# =============================================================================
# Result model Tests
# =============================================================================


@pytest.mark.unit
class TestMappingNode:
    def _tree(self) -> MappingNode:
        return MappingNode(
            kind=EntityKind.WORKOUT,
            old_id="wo1",
            new_id="wo9",
            children=[
                MappingNode(
                    kind=EntityKind.EXERCISE,
                    old_id="e1",
                    new_id="e9",
                    children=[
                        MappingNode(kind=EntityKind.SET, old_id="s1", new_id="s9"),
                        MappingNode(kind=EntityKind.SET, old_id="s2", new_id="s8"),
                    ],
                )
            ],
        )

    def test_iter_nodes_is_depth_first(self):
        assert self._tree().old_ids() == ["wo1", "e1", "s1", "s2"]

    def test_count_by_kind(self):
        assert self._tree().count_by_kind() == {
            EntityKind.WORKOUT: 1,
            EntityKind.EXERCISE: 1,
            EntityKind.SET: 2,
        }

    def test_serializes_camel_case(self):
        dumped = self._tree().model_dump(by_alias=True, mode="json")
        assert dumped["oldId"] == "wo1"
        assert dumped["kind"] == "workout"
        assert dumped["children"][0]["children"][1]["newId"] == "s8"


@pytest.mark.unit
class TestCascadeCounts:
    def test_zero(self):
        counts = CascadeCounts.zero()
        assert counts.total_items == 0
        assert counts.has_items is False
        assert counts.summary() == ""

    def test_summary(self):
        counts = CascadeCounts(workouts=3, exercises=9, sets=27)
        assert counts.total_items == 39
        assert counts.summary() == "3 workouts, 9 exercises, 27 sets"

    def test_summary_singular_and_skips_zero(self):
        assert CascadeCounts(exercises=1, sets=1).summary() == "1 exercise, 1 set"

    def test_negative_rejected(self):
        with pytest.raises(ValidationError):
            CascadeCounts(sets=-1)

    def test_frozen(self):
        counts = CascadeCounts(sets=1)
        with pytest.raises(ValidationError):
            counts.sets = 2
