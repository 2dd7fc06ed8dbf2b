"""
Unit tests for domain/naming.py
"""

import pytest

from domain.naming import copy_name, disambiguate


@pytest.mark.unit
class TestCopyName:
    def test_first_copy_is_unnumbered(self):
        assert copy_name("Week 1") == "Week 1 (Copy)"

    def test_later_copies_are_numbered(self):
        assert copy_name("Week 1", 2) == "Week 1 (Copy 2)"
        assert copy_name("Week 1", 7) == "Week 1 (Copy 7)"


@pytest.mark.unit
class TestDisambiguate:
    def test_free_name_gets_copy_suffix(self):
        assert disambiguate("Week 1", {"Week 1"}) == "Week 1 (Copy)"

    def test_taken_copy_name_gets_counter(self):
        assert disambiguate("Week 1", {"Week 1", "Week 1 (Copy)"}) == "Week 1 (Copy 2)"

    def test_counter_skips_every_taken_number(self):
        siblings = {"Push", "Push (Copy)", "Push (Copy 2)", "Push (Copy 3)"}
        assert disambiguate("Push", siblings) == "Push (Copy 4)"

    def test_copy_of_copy_nests_suffix(self):
        siblings = {"Leg Day", "Leg Day (Copy)"}
        assert disambiguate("Leg Day (Copy)", siblings) == "Leg Day (Copy) (Copy)"

    def test_never_returns_a_sibling_name(self):
        siblings = {"A", "A (Copy)", "A (Copy 2)"}
        assert disambiguate("A", siblings) not in siblings

    def test_missing_name_uses_default(self):
        assert disambiguate(None, [], default_name="Week") == "Week (Copy)"

    def test_blank_name_uses_default(self):
        assert disambiguate("   ", ["Workout (Copy)"], default_name="Workout") == "Workout (Copy 2)"

    def test_name_is_stripped(self):
        assert disambiguate("  Week 1 ", []) == "Week 1 (Copy)"

    def test_none_siblings_are_ignored(self):
        assert disambiguate("Week 1", [None, "Week 1"]) == "Week 1 (Copy)"

    def test_accepts_any_iterable(self):
        names = (n for n in ["Week 1", "Week 1 (Copy)"])
        assert disambiguate("Week 1", names) == "Week 1 (Copy 2)"
