"""Consistency checks for family tree data.

Each rule looks at one person against the rest of the snapshot and reports
chronologically or structurally impossible entries. Nothing here raises for bad
data; problems come back as ValidationIssue records.
"""

import logging
from collections.abc import Iterable, Mapping
from datetime import date
from typing import Any

from kinship.config import ValidatorSettings, settings as default_settings
from kinship.dates import extract_year, is_future, parse_date_string
from kinship.graph import find_parent_cycles, index_people
from kinship.models import (
    UNSET_GENDERS,
    Person,
    Severity,
    ValidationIssue,
    ValidationResult,
    coerce_people,
    coerce_person,
)

logger = logging.getLogger(__name__)

PersonLike = Person | Mapping[str, Any]


def _issue(
    person: Person, field: str, severity: Severity, message: str, suggested_fix: str
) -> ValidationIssue:
    return ValidationIssue(
        person_id=person.id,
        person_name=person.full_name,
        field=field,
        severity=severity,
        message=message,
        suggested_fix=suggested_fix,
    )


def _check_identity_fields(person: Person, cfg: ValidatorSettings) -> list[ValidationIssue]:
    issues = []

    if person.gender in UNSET_GENDERS:
        issues.append(
            _issue(
                person,
                "gender",
                "error",
                f'Gender is "{person.gender or "not set"}"',
                "Edit this person and select either Male or Female as their gender",
            )
        )

    first_name = person.first_name.strip()
    if not first_name or first_name == cfg.placeholder_first_name:
        issues.append(
            _issue(
                person,
                "firstName",
                "warning",
                "Missing or default first name",
                "Edit this person and enter their first name",
            )
        )

    return issues


def _check_dates(person: Person, cfg: ValidatorSettings, today: date) -> list[ValidationIssue]:
    issues = []
    birth = parse_date_string(person.birth_date)
    death = parse_date_string(person.death_date)

    # ISO format (YYYY-MM-DD) can be compared as strings
    death_before_birth = bool(birth and death and birth > death)
    if death_before_birth:
        issues.append(
            _issue(
                person,
                "deathDate",
                "error",
                "Death date is before birth date",
                "Correct the birth or death date",
            )
        )

    if birth and death:
        birth_year = extract_year(person.birth_date)
        death_year = extract_year(person.death_date)
        if birth_year is not None and death_year is not None:
            lifespan = death_year - birth_year
            if lifespan > cfg.max_lifespan:
                issues.append(
                    _issue(
                        person,
                        "deathDate",
                        "warning",
                        f"Lived {lifespan} years (unusually long lifespan)",
                        "Verify birth and death dates are correct",
                    )
                )
            elif lifespan < 0:
                issues.append(
                    _issue(
                        person,
                        "birthDate",
                        "error",
                        "Negative lifespan detected",
                        "Death date must be after birth date",
                    )
                )

    if birth and is_future(birth, today):
        issues.append(
            _issue(
                person,
                "birthDate",
                "error",
                "Birth date is in the future",
                "Enter a valid past date",
            )
        )
    # An out-of-order death date already carries its one deathDate error
    if death and not death_before_birth and is_future(death, today):
        issues.append(
            _issue(
                person,
                "deathDate",
                "error",
                "Death date is in the future",
                "Enter a valid past date or remove if person is alive",
            )
        )

    return issues


def _check_parents(
    person: Person, people_by_id: Mapping[str, Person], cfg: ValidatorSettings
) -> list[ValidationIssue]:
    """Parent age gap and mother-died-before-birth, using year tokens only."""
    issues = []
    child_year = extract_year(person.birth_date)
    if child_year is None:
        return issues

    for field, parent_id in (("parentId1", person.parent_id1), ("parentId2", person.parent_id2)):
        parent = people_by_id.get(parent_id) if parent_id else None
        if parent is None:
            continue

        parent_year = extract_year(parent.birth_date)
        if parent_year is not None:
            age_gap = child_year - parent_year
            if age_gap < cfg.min_parent_age:
                issues.append(
                    _issue(
                        person,
                        field,
                        "error",
                        f'Parent "{parent.full_name}" was only {age_gap} years old at birth',
                        "Verify parent-child relationship and birth dates",
                    )
                )

        if parent.is_female:
            death_year = extract_year(parent.death_date)
            if death_year is not None and child_year > death_year:
                issues.append(
                    _issue(
                        person,
                        "birthDate",
                        "error",
                        f'Born after mother "{parent.full_name}" died',
                        "Check birth date or mother assignment",
                    )
                )

    return issues


def _check_references(person: Person, people_by_id: Mapping[str, Person]) -> list[ValidationIssue]:
    """Dangling ids and self references."""
    issues = []

    for spouse_id in person.spouse_ids:
        if spouse_id not in people_by_id:
            issues.append(
                _issue(
                    person,
                    "spouseIds",
                    "error",
                    "References a spouse that no longer exists",
                    "Remove the orphaned spouse reference",
                )
            )

    for field, parent_id in (("parentId1", person.parent_id1), ("parentId2", person.parent_id2)):
        if parent_id and parent_id not in people_by_id:
            issues.append(
                _issue(
                    person,
                    field,
                    "error",
                    "References a parent that no longer exists",
                    "Remove or reassign the parent reference",
                )
            )

    if person.id in person.spouse_ids:
        issues.append(
            _issue(
                person,
                "spouseIds",
                "error",
                "Person is listed as their own spouse",
                "Remove self-reference from spouse list",
            )
        )
    if person.id in person.parent_ids:
        issues.append(
            _issue(
                person,
                "parentId1",
                "error",
                "Person is listed as their own parent",
                "Remove self-reference from parent fields",
            )
        )

    return issues


def _check_connected(person: Person, referenced_parents: set[str]) -> list[ValidationIssue]:
    if person.parent_ids or person.spouse_ids or person.children_ids:
        return []
    if person.id in referenced_parents:
        return []
    return [
        _issue(
            person,
            "relationships",
            "warning",
            "This person has no connections to anyone in the tree",
            "Add parent, spouse, or child relationships to connect this person to the family tree",
        )
    ]


def _referenced_parents(people: Iterable[Person]) -> set[str]:
    """Ids that someone other than themselves lists as a parent."""
    return {pid for p in people for pid in p.parent_ids if pid != p.id}


def _validate(
    person: Person,
    people_by_id: Mapping[str, Person],
    referenced_parents: set[str],
    cfg: ValidatorSettings,
    today: date,
) -> list[ValidationIssue]:
    return [
        *_check_identity_fields(person, cfg),
        *_check_dates(person, cfg, today),
        *_check_parents(person, people_by_id, cfg),
        *_check_references(person, people_by_id),
        *_check_connected(person, referenced_parents),
    ]


def _cycle_issues(
    people: list[Person], people_by_id: Mapping[str, Person]
) -> list[ValidationIssue]:
    issues = []
    for cycle in find_parent_cycles(people):
        for person_id in sorted(cycle):
            issues.append(
                _issue(
                    people_by_id[person_id],
                    "ancestry",
                    "error",
                    "Person is their own ancestor through a parent cycle",
                    "Check the parent links of everyone in this loop and remove the wrong one",
                )
            )
    return issues


def dedupe_issues(issues: Iterable[ValidationIssue]) -> tuple[ValidationIssue, ...]:
    """Keep the first issue per (person, field, message)."""
    seen: set[tuple[str, str, str]] = set()
    unique = []
    for issue in issues:
        if issue.key in seen:
            continue
        seen.add(issue.key)
        unique.append(issue)
    return tuple(unique)


def validate_person(
    person: PersonLike,
    all_people: Iterable[PersonLike],
    *,
    today: date | None = None,
    settings: ValidatorSettings | None = None,
) -> list[ValidationIssue]:
    """
    Run the per-person rules for one person against the whole tree.

    Parent cycles are a whole-tree property and are only reported by validate_tree.
    """
    person = coerce_person(person)
    people = coerce_people(all_people)
    return _validate(
        person,
        index_people(people),
        _referenced_parents(people),
        settings or default_settings,
        today or date.today(),
    )


def validate_tree(
    all_people: Iterable[PersonLike],
    *,
    today: date | None = None,
    settings: ValidatorSettings | None = None,
) -> ValidationResult:
    """
    Validate an entire family tree for:
    - Missing gender and placeholder names
    - Date ordering, implausible lifespans and future dates
    - Parents too young at birth, children born after their mother died
    - Dangling and self references
    - People with no connections, and parent cycles

    Args:
        all_people: Every person in the tree (Person objects or editor records)
        today: Reference date for future-date checks (defaults to today)
        settings: Rule thresholds (defaults to the environment-driven settings)

    Returns:
        A ValidationResult with duplicate issues removed.

    Raises:
        ValueError: If all_people is None.
    """
    people = coerce_people(all_people)
    cfg = settings or default_settings
    today = today or date.today()

    people_by_id = index_people(people)
    referenced_parents = _referenced_parents(people)

    issues: list[ValidationIssue] = []
    for person in people:
        issues.extend(_validate(person, people_by_id, referenced_parents, cfg, today))
    issues.extend(_cycle_issues(people, people_by_id))

    result = ValidationResult(issues=dedupe_issues(issues))
    logger.debug(
        "Validated %d people: %d issue(s), errors=%s, warnings=%s",
        len(people),
        len(result.issues),
        result.has_errors,
        result.has_warnings,
    )
    return result
