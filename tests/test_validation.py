"""Tests for tree consistency validation."""

from dataclasses import replace

import pytest
from conftest import TODAY, person

from kinship.config import ValidatorSettings
from kinship.validation import dedupe_issues, validate_person, validate_tree


def issues_for(result, person_id, field=None):
    return [
        i
        for i in result.issues
        if i.person_id == person_id and (field is None or i.field == field)
    ]


def couple(**kwargs):
    """A connected, fully filled-in pair so only the rule under test fires."""
    a = person("a", spouses=["b"], **kwargs)
    b = person("b", gender="female", spouses=["a"])
    return [a, b]


class TestEmptyAndClean:
    def test_empty_tree(self):
        result = validate_tree([], today=TODAY)
        assert result.to_dict() == {"hasErrors": False, "hasWarnings": False, "issues": []}

    def test_clean_family_has_no_issues(self, family):
        result = validate_tree(family.values(), today=TODAY)
        # granny and grandma have no dates, names and genders are set
        assert result.issues == ()
        assert not result.has_errors
        assert not result.has_warnings

    def test_none_fails_fast(self):
        with pytest.raises(ValueError):
            validate_tree(None)


class TestIdentityFields:
    @pytest.mark.parametrize(
        "gender, shown", [(None, "not set"), ("other", "other"), ("unknown", "unknown")]
    )
    def test_unusable_gender(self, gender, shown):
        result = validate_tree(couple(gender=gender), today=TODAY)
        [issue] = issues_for(result, "a", "gender")
        assert issue.severity == "error"
        assert issue.message == f'Gender is "{shown}"'

    @pytest.mark.parametrize("first_name", ["", "   ", "New Person"])
    def test_missing_or_placeholder_first_name(self, first_name):
        result = validate_tree(couple(first_name=first_name), today=TODAY)
        [issue] = issues_for(result, "a", "firstName")
        assert issue.severity == "warning"
        assert result.has_warnings
        assert not result.has_errors

    def test_person_name_falls_back_to_unknown(self):
        result = validate_tree(couple(first_name="", last_name="Smith"), today=TODAY)
        assert issues_for(result, "a", "firstName")[0].person_name == "Unknown Smith"


class TestDates:
    def test_birth_after_death_is_one_death_date_error(self):
        result = validate_tree(couple(birth_date="1950", death_date="1940"), today=TODAY)
        errors = [i for i in issues_for(result, "a", "deathDate") if i.severity == "error"]
        assert len(errors) == 1
        assert errors[0].message == "Death date is before birth date"

    def test_birth_after_death_in_same_year(self):
        result = validate_tree(
            couple(birth_date="10 JUN 1950", death_date="1 JAN 1950"), today=TODAY
        )
        assert [i.message for i in issues_for(result, "a")] == ["Death date is before birth date"]

    def test_negative_lifespan(self):
        result = validate_tree(couple(birth_date="1950", death_date="1940"), today=TODAY)
        [issue] = issues_for(result, "a", "birthDate")
        assert issue.message == "Negative lifespan detected"
        assert issue.severity == "error"

    def test_long_lifespan_warning(self):
        result = validate_tree(couple(birth_date="1800", death_date="1921"), today=TODAY)
        [issue] = issues_for(result, "a", "deathDate")
        assert issue.severity == "warning"
        assert issue.message == "Lived 121 years (unusually long lifespan)"

    def test_lifespan_at_limit_is_fine(self):
        result = validate_tree(couple(birth_date="1800", death_date="1920"), today=TODAY)
        assert issues_for(result, "a") == []

    def test_lifespan_needs_both_dates_parseable(self):
        result = validate_tree(
            couple(birth_date="1700", death_date="sometime in 1900"), today=TODAY
        )
        assert issues_for(result, "a") == []

    def test_future_dates(self):
        result = validate_tree(
            couple(birth_date="2027-01-01", death_date="2030-05-05"), today=TODAY
        )
        messages = {(i.field, i.message) for i in issues_for(result, "a")}
        assert ("birthDate", "Birth date is in the future") in messages
        assert ("deathDate", "Death date is in the future") in messages

    def test_month_precision_dates_are_checked(self):
        result = validate_tree(couple(birth_date="1990-05", death_date="1980-03"), today=TODAY)
        messages = [i.message for i in issues_for(result, "a")]
        assert "Death date is before birth date" in messages
        assert "Negative lifespan detected" in messages

    def test_month_precision_future_birth(self):
        result = validate_tree(couple(birth_date="2030-06"), today=TODAY)
        [issue] = issues_for(result, "a", "birthDate")
        assert issue.message == "Birth date is in the future"

    def test_out_of_order_future_death_is_one_death_date_error(self):
        result = validate_tree(couple(birth_date="2031", death_date="2030"), today=TODAY)
        errors = [i for i in issues_for(result, "a", "deathDate") if i.severity == "error"]
        assert [i.message for i in errors] == ["Death date is before birth date"]

    def test_today_is_not_future(self):
        result = validate_tree(couple(birth_date="2026-10-18"), today=TODAY)
        assert issues_for(result, "a") == []


class TestParents:
    def family_with_gap(self, parent_birth, child_birth, **parent_kwargs):
        return [
            person("p", gender="female", birth_date=parent_birth, **parent_kwargs),
            person("c", parents=["p"], birth_date=child_birth),
        ]

    def test_eleven_year_gap_is_an_error(self):
        result = validate_tree(self.family_with_gap("1900", "1911"), today=TODAY)
        [issue] = issues_for(result, "c", "parentId1")
        assert issue.severity == "error"
        assert issue.message == 'Parent "P" was only 11 years old at birth'

    def test_twelve_year_gap_is_fine(self):
        result = validate_tree(self.family_with_gap("1900", "1912"), today=TODAY)
        assert issues_for(result, "c", "parentId1") == []

    def test_gap_uses_years_only(self):
        # 11 years and 11 months apart, but 12 calendar years
        result = validate_tree(
            self.family_with_gap("31 DEC 1900", "1 JAN 1912"), today=TODAY
        )
        assert issues_for(result, "c", "parentId1") == []

    def test_second_parent_slot(self):
        people = [
            person("p1", birth_date="1900"),
            person("p2", gender="female", birth_date="1905"),
            person("c", parents=["p1", "p2"], birth_date="1915"),
        ]
        result = validate_tree(people, today=TODAY)
        assert issues_for(result, "c", "parentId1") == []
        [issue] = issues_for(result, "c", "parentId2")
        assert "10 years old" in issue.message

    def test_born_after_mother_died(self):
        result = validate_tree(
            self.family_with_gap("1870", "1901", death_date="1900"), today=TODAY
        )
        [issue] = issues_for(result, "c", "birthDate")
        assert issue.message == 'Born after mother "P" died'

    def test_born_in_year_mother_died(self):
        result = validate_tree(
            self.family_with_gap("1870", "1900", death_date="1900"), today=TODAY
        )
        assert issues_for(result, "c", "birthDate") == []

    def test_father_death_is_not_checked(self):
        people = [
            person("p", birth_date="1870", death_date="1900"),
            person("c", parents=["p"], birth_date="1901"),
        ]
        assert validate_tree(people, today=TODAY).issues == ()

    def test_custom_minimum_parent_age(self):
        result = validate_tree(
            self.family_with_gap("1900", "1914"),
            today=TODAY,
            settings=ValidatorSettings(min_parent_age=16),
        )
        assert len(issues_for(result, "c", "parentId1")) == 1


class TestReferences:
    def test_dangling_spouse(self):
        result = validate_tree([person("a", spouses=["ghost"])], today=TODAY)
        assert [(i.field, i.severity) for i in result.issues] == [("spouseIds", "error")]

    def test_several_dangling_spouses_report_once(self):
        result = validate_tree([person("a", spouses=["ghost", "phantom"])], today=TODAY)
        assert len(issues_for(result, "a", "spouseIds")) == 1

    def test_dangling_parents(self):
        result = validate_tree(
            [person("a", parents=["ghost1", "ghost2"])], today=TODAY
        )
        fields = {i.field for i in issues_for(result, "a")}
        assert fields == {"parentId1", "parentId2"}

    def test_own_spouse(self):
        result = validate_tree([person("a", spouses=["a"])], today=TODAY)
        [issue] = issues_for(result, "a", "spouseIds")
        assert issue.message == "Person is listed as their own spouse"

    def test_own_parent(self):
        result = validate_tree([person("a", parents=[None, "a"])], today=TODAY)
        messages = [i.message for i in issues_for(result, "a", "parentId1")]
        assert "Person is listed as their own parent" in messages


class TestConnections:
    def test_isolated_person(self):
        result = validate_tree([person("loner")], today=TODAY)
        [issue] = result.issues
        assert issue.field == "relationships"
        assert issue.severity == "warning"

    def test_referenced_parent_is_connected(self):
        # parent has no fields of its own pointing anywhere
        people = [person("p"), person("c", parents=["p"])]
        assert validate_tree(people, today=TODAY).issues == ()

    def test_stale_children_list_counts_as_connection(self):
        assert validate_tree([person("p", children=["gone"])], today=TODAY).issues == ()


class TestParentCycles:
    def test_two_person_cycle(self):
        people = [person("a", parents=["b"]), person("b", parents=["a"])]
        result = validate_tree(people, today=TODAY)
        ancestry = [i for i in result.issues if i.field == "ancestry"]
        assert [i.person_id for i in ancestry] == ["a", "b"]
        assert all(i.severity == "error" for i in ancestry)

    def test_self_parent_is_not_a_cycle_issue(self):
        result = validate_tree([person("a", parents=["a"])], today=TODAY)
        assert not [i for i in result.issues if i.field == "ancestry"]


class TestDedupe:
    def test_no_repeated_triples(self):
        people = [
            person("a", gender=None, spouses=["x", "y", "a"], parents=["a", "a"]),
        ]
        result = validate_tree(people, today=TODAY)
        keys = [i.key for i in result.issues]
        assert len(keys) == len(set(keys))

    def test_dedupe_keeps_first(self):
        first = validate_tree([person("a", spouses=["x"])], today=TODAY).issues[0]
        second = replace(first, suggested_fix="other")
        assert dedupe_issues([first, second]) == (first,)


class TestValidatePerson:
    def test_single_person(self, family):
        records = list(family.values()) + [person("kid", parents=["ann"], birth_date="2000")]
        updated = [
            replace(p, birth_date="1995") if p.id == "ann" else p
            for p in records
        ]
        issues = validate_person(updated[-1], updated, today=TODAY)
        assert [i.field for i in issues] == ["parentId1"]

    def test_accepts_editor_records(self):
        records = [
            {"id": "m", "firstName": "New Person", "gender": "female", "childrenIds": ["k"]},
            {"id": "k", "firstName": "Kai", "gender": "male", "parentId1": "m"},
        ]
        result = validate_tree(records, today=TODAY)
        assert result.to_dict()["issues"] == [
            {
                "personId": "m",
                "personName": "New Person",
                "field": "firstName",
                "severity": "warning",
                "message": "Missing or default first name",
                "suggestedFix": "Edit this person and enter their first name",
            }
        ]

    def test_numeric_ids_and_dates_from_json(self):
        records = [
            {"id": 1, "firstName": "Ma", "gender": "female", "birthDate": 1950},
            {"id": 2, "firstName": "Kid", "gender": "male", "parentId1": 1, "birthDate": 1980},
        ]
        assert validate_tree(records, today=TODAY).issues == ()

    def test_numeric_parent_gap_is_still_checked(self):
        records = [
            {"id": 1, "firstName": "Ma", "gender": "female", "birthDate": 1950},
            {"id": 2, "firstName": "Kid", "gender": "male", "parentId1": 1, "birthDate": 1955},
        ]
        result = validate_tree(records, today=TODAY)
        assert [(i.person_id, i.field) for i in result.issues] == [("2", "parentId1")]
