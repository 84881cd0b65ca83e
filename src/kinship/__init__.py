"""Kinship resolution and consistency checks over a family tree snapshot."""

from kinship.config import ValidatorSettings
from kinship.graph import build_ancestors
from kinship.models import Person, Relationship, ValidationIssue, ValidationResult
from kinship.relationship import classify, find_relationship
from kinship.validation import validate_person, validate_tree

__all__ = [
    "Person",
    "Relationship",
    "ValidationIssue",
    "ValidationResult",
    "ValidatorSettings",
    "build_ancestors",
    "classify",
    "find_relationship",
    "validate_person",
    "validate_tree",
]
