"""Data classes for family tree entities and engine results."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Literal

Severity = Literal["error", "warning"]

FEMALE = "female"
# Values the validator treats as "no usable gender"
UNSET_GENDERS = (None, "", "other", "unknown")

# camelCase keys used by the tree editor's records
_RECORD_KEYS = {
    "first_name": "firstName",
    "last_name": "lastName",
    "parent_id1": "parentId1",
    "parent_id2": "parentId2",
    "spouse_ids": "spouseIds",
    "children_ids": "childrenIds",
    "birth_date": "birthDate",
    "death_date": "deathDate",
}


def _text(value: Any) -> str | None:
    """Blank -> None, anything else (e.g. numeric ids or years from JSON) -> str."""
    if value is None or value == "":
        return None
    return str(value)


@dataclass(frozen=True)
class Person:
    id: str
    first_name: str = ""
    last_name: str | None = None
    gender: str | None = None
    parent_id1: str | None = None
    parent_id2: str | None = None
    spouse_ids: tuple[str, ...] = ()
    children_ids: tuple[str, ...] = ()
    birth_date: str | None = None  # free-form, e.g. "25 NOV 1954" or "1954-11-25"
    death_date: str | None = None

    @classmethod
    def from_dict(cls, record: Mapping[str, Any]) -> "Person":
        """Build a Person from a tree editor record (camelCase or snake_case keys)."""
        person_id = record.get("id")
        if person_id is None:
            raise ValueError(f"Person record has no id: {dict(record)!r}")

        def get(name: str) -> Any:
            value = record.get(_RECORD_KEYS.get(name, name))
            return record.get(name) if value is None else value

        return cls(
            id=str(person_id),
            first_name=get("first_name") or "",
            last_name=get("last_name"),
            gender=get("gender"),
            parent_id1=_text(get("parent_id1")),
            parent_id2=_text(get("parent_id2")),
            spouse_ids=tuple(str(s) for s in get("spouse_ids") or ()),
            children_ids=tuple(str(c) for c in get("children_ids") or ()),
            birth_date=_text(get("birth_date")),
            death_date=_text(get("death_date")),
        )

    @property
    def parent_ids(self) -> tuple[str, ...]:
        """Recorded parent ids, in slot order, skipping empty slots."""
        return tuple(p for p in (self.parent_id1, self.parent_id2) if p)

    @property
    def display_name(self) -> str:
        """First and last name, as shown in relationship explanations."""
        return f"{self.first_name} {self.last_name or ''}".strip()

    @property
    def full_name(self) -> str:
        """Like display_name, but falls back to "Unknown" for a blank first name."""
        return f"{self.first_name or 'Unknown'} {self.last_name or ''}".strip()

    @property
    def is_female(self) -> bool:
        return self.gender == FEMALE


def coerce_person(person: "Person | Mapping[str, Any]") -> Person:
    """Accept either a Person or a raw record mapping."""
    if person is None:
        raise ValueError("person must not be None")
    if isinstance(person, Person):
        return person
    return Person.from_dict(person)


def coerce_people(people: Iterable["Person | Mapping[str, Any]"]) -> list[Person]:
    """Coerce a whole person set, failing fast on a missing set."""
    if people is None:
        raise ValueError("all_people must not be None")
    return [coerce_person(p) for p in people]


@dataclass(frozen=True)
class Relationship:
    """Verdict describing how person2 relates to person1."""

    relationship: str
    explanation: str
    path_description: str | None = None
    # (g1, g2): generations from each person up to the common ancestor
    generations: tuple[int, int] | None = None

    def to_dict(self) -> dict[str, str]:
        result = {"relationship": self.relationship, "explanation": self.explanation}
        if self.path_description is not None:
            result["pathDescription"] = self.path_description
        return result


@dataclass(frozen=True)
class ValidationIssue:
    person_id: str
    person_name: str
    field: str
    severity: Severity
    message: str
    suggested_fix: str

    @property
    def key(self) -> tuple[str, str, str]:
        return (self.person_id, self.field, self.message)

    def to_dict(self) -> dict[str, str]:
        return {
            "personId": self.person_id,
            "personName": self.person_name,
            "field": self.field,
            "severity": self.severity,
            "message": self.message,
            "suggestedFix": self.suggested_fix,
        }


@dataclass(frozen=True)
class ValidationResult:
    issues: tuple[ValidationIssue, ...] = ()

    @property
    def has_errors(self) -> bool:
        return any(i.severity == "error" for i in self.issues)

    @property
    def has_warnings(self) -> bool:
        return any(i.severity == "warning" for i in self.issues)

    def to_dict(self) -> dict[str, Any]:
        return {
            "hasErrors": self.has_errors,
            "hasWarnings": self.has_warnings,
            "issues": [i.to_dict() for i in self.issues],
        }
