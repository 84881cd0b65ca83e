"""Relationship classification between two people in a family tree.

Works from each person's ancestor index: direct lineage first, then the closest
shared ancestor (siblings, aunts/uncles, nieces/nephews, cousins), then the same
questions asked through person1's spouses for in-law and step relationships.
Labels always describe person2 from person1's point of view.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from kinship.graph import (
    ancestors_of,
    are_spouses,
    closest_common_ancestor,
    index_people,
    spouses_of,
)
from kinship.labels import (
    BY_MARRIAGE,
    cousin_label,
    gendered,
    grand_prefix,
    great_prefix,
    ordinal,
    removed_text,
)
from kinship.models import Person, Relationship, coerce_people, coerce_person

logger = logging.getLogger(__name__)

SAME_PERSON = "Same Person"
SPOUSE = "Spouse"
NOT_RELATED = "Not Directly Related"
EXTENDED_BY_MARRIAGE = "Extended Family" + BY_MARRIAGE

PersonLike = Person | Mapping[str, Any]


def _generations(n: int) -> str:
    return f"{n} generation" if n == 1 else f"{n} generations"


def _shared_path(name1: str, name2: str, ancestor_name: str, g1: int, g2: int) -> str:
    return (
        f"{name1} is {_generations(g1)} below {ancestor_name}; "
        f"{name2} is {_generations(g2)} below {ancestor_name}"
    )


# ============================================================================
# Blood relationships
# ============================================================================


def _ancestor(ancestor: Person, generations: int, name1: str, name2: str) -> Relationship:
    """person2 is `generations` steps above person1."""
    female = ancestor.is_female
    if generations == 1:
        label = gendered(female, "Mother", "Father")
        explanation = f"{name2} is {name1}'s {label.lower()}."
    elif generations == 2:
        label = gendered(female, "Grandmother", "Grandfather")
        explanation = f"{name2} is {name1}'s {label.lower()}."
    else:
        label = great_prefix(generations - 2) + gendered(female, "Grandmother", "Grandfather")
        explanation = f"{name2} is {name1}'s {label.lower()} ({generations} generations up)."

    return Relationship(
        relationship=label,
        explanation=explanation,
        path_description=f"{name2} is {_generations(generations)} above {name1}",
        generations=(generations, 0),
    )


def _descendant(descendant: Person, generations: int, name1: str, name2: str) -> Relationship:
    """person2 is `generations` steps below person1."""
    female = descendant.is_female
    if generations == 1:
        label = gendered(female, "Daughter", "Son")
        explanation = f"{name2} is {name1}'s {label.lower()}."
    elif generations == 2:
        label = gendered(female, "Granddaughter", "Grandson")
        explanation = f"{name2} is {name1}'s {label.lower()}."
    else:
        label = great_prefix(generations - 2) + gendered(female, "Granddaughter", "Grandson")
        explanation = f"{name2} is {name1}'s {label.lower()} ({generations} generations down)."

    return Relationship(
        relationship=label,
        explanation=explanation,
        path_description=f"{name2} is {_generations(generations)} below {name1}",
        generations=(0, generations),
    )


def _collateral_label(g1: int, g2: int, female: bool) -> str:
    """Label for two people sharing an ancestor g1 / g2 generations up."""
    if g1 == 1 and g2 == 1:
        return gendered(female, "Sister", "Brother")
    if g2 == 1 and g1 >= 2:
        aunt = gendered(female, "Aunt", "Uncle")
        return aunt if g1 == 2 else great_prefix(g1 - 2) + aunt
    if g1 == 1 and g2 >= 2:
        niece = gendered(female, "Niece", "Nephew")
        return niece if g2 == 2 else grand_prefix(g2 - 2) + niece
    return cousin_label(g1, g2)


def _collateral(
    g1: int, g2: int, name1: str, name2: str, ancestor_name: str, female: bool
) -> Relationship:
    label = _collateral_label(g1, g2, female)

    if g1 == 1 and g2 == 1:
        explanation = f"{name1} and {name2} are siblings (share parent {ancestor_name})."
    elif g1 == 1 or g2 == 1:
        explanation = f"{name2} is {name1}'s {label.lower()}. They share ancestor {ancestor_name}."
    else:
        explanation = (
            f"{name1} and {name2} are {label.lower()}s. They share ancestor {ancestor_name}."
            if g1 == g2
            else f"{name1} and {name2} are {ordinal(min(g1, g2) - 1).lower()} cousins "
            f"{removed_text(abs(g1 - g2)).lower()}. They share ancestor {ancestor_name}."
        )

    return Relationship(
        relationship=label,
        explanation=explanation,
        path_description=_shared_path(name1, name2, ancestor_name, g1, g2),
        generations=(g1, g2),
    )


# ============================================================================
# Relationships through a spouse
# ============================================================================


def _in_law_ancestor(
    ancestor: Person, generations: int, name1: str, name2: str, spouse_name: str
) -> Relationship:
    """person2 is an ancestor of person1's spouse."""
    female = ancestor.is_female
    if generations == 1:
        label = gendered(female, "Mother", "Father") + "-in-Law"
        detail = f"parent of spouse {spouse_name}"
    elif generations == 2:
        label = gendered(female, "Grandmother", "Grandfather") + "-in-Law"
        detail = f"grandparent of spouse {spouse_name}"
    else:
        # Deeper in-law ancestors are not graded further
        label = gendered(female, "Grandmother", "Grandfather") + "-in-Law"
        detail = f"{generations} generations up from spouse {spouse_name}"

    return Relationship(
        relationship=label,
        explanation=f"{name2} is {name1}'s {label.lower()} ({detail}).",
        path_description=(
            f"Through spouse {spouse_name}: "
            f"{name2} is {_generations(generations)} above {spouse_name}"
        ),
        generations=(generations, 0),
    )


def _step_descendant(
    descendant: Person, generations: int, name1: str, name2: str, spouse_name: str
) -> Relationship:
    """person2 descends from person1's spouse."""
    female = descendant.is_female
    if generations == 1:
        label = "Step-" + gendered(female, "Daughter", "Son")
        detail = f"child of spouse {spouse_name}"
    elif generations == 2:
        label = "Step-" + gendered(female, "Granddaughter", "Grandson")
        detail = f"grandchild of spouse {spouse_name}"
    elif generations == 3:
        label = "Step-Great-" + gendered(female, "Granddaughter", "Grandson")
        detail = f"great-grandchild of spouse {spouse_name}"
    else:
        label = (
            "Step-"
            + great_prefix(generations - 2)
            + gendered(female, "Granddaughter", "Grandson")
        )
        detail = f"{generations} generations through spouse {spouse_name}"

    return Relationship(
        relationship=label,
        explanation=f"{name2} is {name1}'s {label.lower()} ({detail}).",
        path_description=(
            f"Through spouse {spouse_name}: "
            f"{name2} is {_generations(generations)} below {spouse_name}"
        ),
        generations=(0, generations),
    )


def _in_law_collateral_label(g1: int, g2: int, female: bool) -> str:
    """By-marriage label where g1 is the spouse's distance to the shared ancestor."""
    if g1 == 1 and g2 == 1:
        return gendered(female, "Sister", "Brother") + "-in-Law"
    if g1 == 1 and g2 >= 2:
        niece = gendered(female, "Niece", "Nephew")
        depth = g2 - 2
        if depth == 0:
            prefix = ""
        elif depth == 2:
            prefix = "Great-Grand-"
        else:
            prefix = grand_prefix(depth)
        return prefix + niece + BY_MARRIAGE
    if g2 == 1 and g1 >= 2:
        aunt = gendered(female, "Aunt", "Uncle")
        prefix = "" if g1 == 2 else great_prefix(g1 - 2)
        return prefix + aunt + BY_MARRIAGE
    if g1 >= 2 and g2 >= 2:
        return cousin_label(g1, g2) + BY_MARRIAGE
    return EXTENDED_BY_MARRIAGE


def _in_law_collateral(
    g1: int, g2: int, name1: str, name2: str, spouse_name: str, ancestor_name: str, female: bool
) -> Relationship:
    label = _in_law_collateral_label(g1, g2, female)

    if label == EXTENDED_BY_MARRIAGE:
        explanation = f"{name2} is related to {name1} by marriage through spouse {spouse_name}."
    elif g1 == 1 and g2 == 1:
        explanation = (
            f"{name2} is {name1}'s {label.lower()} (sibling of spouse {spouse_name})."
        )
    else:
        kin = label.removesuffix(BY_MARRIAGE).lower()
        explanation = f"{name2} is {name1}'s {kin} by marriage (through spouse {spouse_name})."

    return Relationship(
        relationship=label,
        explanation=explanation,
        path_description=(
            f"Through spouse {spouse_name}: "
            + _shared_path(spouse_name, name2, ancestor_name, g1, g2)
        ),
        generations=(g1, g2),
    )


def _ancestor_name(ancestor_id: str, people_by_id: Mapping[str, Person]) -> str:
    ancestor = people_by_id.get(ancestor_id)
    return ancestor.display_name if ancestor else "common ancestor"


def _through_spouses(
    person1: Person,
    person2: Person,
    ancestors2: Mapping[str, int],
    people_by_id: Mapping[str, Person],
    name1: str,
    name2: str,
) -> Relationship | None:
    """
    Look for person2 via person1's spouses, in recorded order.

    The first spouse that yields any relationship wins, even if a later spouse
    would give a closer one.
    """
    for spouse in spouses_of(person1, people_by_id):
        spouse_name = spouse.first_name
        spouse_ancestors = ancestors_of(spouse, people_by_id)

        if person2.id in spouse_ancestors:
            return _in_law_ancestor(
                person2, spouse_ancestors[person2.id], name1, name2, spouse_name
            )

        if spouse.id in ancestors2:
            return _step_descendant(person2, ancestors2[spouse.id], name1, name2, spouse_name)

        common = closest_common_ancestor(spouse_ancestors, ancestors2)
        if common is not None:
            ancestor_id, g1, g2 = common
            return _in_law_collateral(
                g1,
                g2,
                name1,
                name2,
                spouse_name,
                _ancestor_name(ancestor_id, people_by_id),
                person2.is_female,
            )

    return None


# ============================================================================
# Public API
# ============================================================================


def classify(
    person1: PersonLike, person2: PersonLike, all_people: Iterable[PersonLike]
) -> Relationship:
    """
    Classify how person2 is related to person1.

    Args:
        person1: The reference person (Person or tree editor record)
        person2: The person being described
        all_people: Every person in the tree

    Returns:
        A Relationship verdict. "Not Directly Related" is a normal outcome.

    Raises:
        ValueError: If either person or the person set is None.
    """
    person1 = coerce_person(person1)
    person2 = coerce_person(person2)
    people_by_id = index_people(coerce_people(all_people))

    name1 = person1.display_name
    name2 = person2.display_name

    if person1.id == person2.id:
        return Relationship(relationship=SAME_PERSON, explanation="These are the same person.")

    if are_spouses(person1, person2):
        return Relationship(relationship=SPOUSE, explanation=f"{name1} and {name2} are married.")

    ancestors1 = ancestors_of(person1, people_by_id)
    ancestors2 = ancestors_of(person2, people_by_id)

    if person2.id in ancestors1:
        logger.debug("%s is an ancestor of %s", person2.id, person1.id)
        return _ancestor(person2, ancestors1[person2.id], name1, name2)

    if person1.id in ancestors2:
        logger.debug("%s is a descendant of %s", person2.id, person1.id)
        return _descendant(person2, ancestors2[person1.id], name1, name2)

    common = closest_common_ancestor(ancestors1, ancestors2)
    if common is not None:
        ancestor_id, g1, g2 = common
        logger.debug("Closest common ancestor %s at (%d, %d)", ancestor_id, g1, g2)
        return _collateral(
            g1, g2, name1, name2, _ancestor_name(ancestor_id, people_by_id), person2.is_female
        )

    by_marriage = _through_spouses(person1, person2, ancestors2, people_by_id, name1, name2)
    if by_marriage is not None:
        return by_marriage

    return Relationship(
        relationship=NOT_RELATED,
        explanation=(
            f"Could not determine a direct family relationship between {name1} and {name2}. "
            "They may be distantly related or not related."
        ),
    )


def find_relationship(
    person1: PersonLike, person2: PersonLike, all_people: Iterable[PersonLike]
) -> dict[str, str]:
    """Classify and render the verdict as {relationship, explanation, pathDescription?}."""
    return classify(person1, person2, all_people).to_dict()
