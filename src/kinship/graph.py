"""Graph traversal primitives shared by the classifier and the validator."""

import logging
from collections import deque
from collections.abc import Iterable, Mapping

import networkx as nx

from kinship.models import Person, coerce_people

logger = logging.getLogger(__name__)


def index_people(people: Iterable[Person]) -> dict[str, Person]:
    """Map person id -> Person. A repeated id keeps the last record."""
    return {p.id: p for p in people}


def build_ancestors(
    person_id: str, people: Mapping[str, Person] | Iterable[Person]
) -> dict[str, int]:
    """
    Collect every ancestor reachable through parent links, with its generation distance.

    Breadth-first from the person's parents (generation 1). An id is recorded the first
    time it is dequeued and never expanded again, so the generation kept for an ancestor
    reachable through several lines is the shortest one, and parent cycles terminate.

    Parent ids that do not resolve to anyone in the snapshot are recorded at the
    generation where they were reached but cannot be expanded further.

    Args:
        person_id: The person whose ancestry is wanted
        people: The full snapshot, either keyed by id or as a list of people

    Returns:
        A dict of ancestor id -> generation (1 = parent, 2 = grandparent, ...).
        Empty if the person is not in the snapshot.
    """
    people_by_id = people if isinstance(people, Mapping) else index_people(coerce_people(people))

    person = people_by_id.get(person_id)
    if person is None:
        return {}
    return ancestors_of(person, people_by_id)


def ancestors_of(person: Person, people_by_id: Mapping[str, Person]) -> dict[str, int]:
    """Like build_ancestors, seeded from a Person that need not be in the snapshot."""
    ancestors: dict[str, int] = {}
    queue: deque[tuple[str, int]] = deque((pid, 1) for pid in person.parent_ids)
    while queue:
        ancestor_id, generation = queue.popleft()
        if ancestor_id in ancestors:
            continue
        ancestors[ancestor_id] = generation

        ancestor = people_by_id.get(ancestor_id)
        if ancestor is None:
            continue
        for parent_id in ancestor.parent_ids:
            if parent_id not in ancestors:
                queue.append((parent_id, generation + 1))

    return ancestors


def closest_common_ancestor(
    ancestors1: Mapping[str, int], ancestors2: Mapping[str, int]
) -> tuple[str, int, int] | None:
    """
    Pick the common ancestor minimising the summed generation distance.

    Equal sums are broken by the smaller generation gap, then the smaller distance
    from the first person, then the ancestor id, so the answer never depends on
    dict ordering.

    Returns:
        (ancestor_id, g1, g2) or None when the two indices share nobody.
    """
    shared = ancestors1.keys() & ancestors2.keys()
    if not shared:
        return None

    def rank(ancestor_id: str) -> tuple[int, int, int, str]:
        g1, g2 = ancestors1[ancestor_id], ancestors2[ancestor_id]
        return (g1 + g2, abs(g1 - g2), g1, ancestor_id)

    best = min(shared, key=rank)
    return best, ancestors1[best], ancestors2[best]


def are_spouses(a: Person, b: Person) -> bool:
    """Spouse lists may be one-sided, so either direction counts."""
    return b.id in a.spouse_ids or a.id in b.spouse_ids


def spouses_of(person: Person, people_by_id: Mapping[str, Person]) -> list[Person]:
    """Resolve a person's spouse ids in recorded order, skipping dangling ones."""
    return [people_by_id[sid] for sid in person.spouse_ids if sid in people_by_id]


def build_parent_graph(people: Iterable[Person]) -> nx.DiGraph:
    """
    Build a NetworkX directed graph of parent -> child links.

    Every person is a node. References to ids outside the snapshot are left out,
    so the graph only ever holds real people.
    """
    G = nx.DiGraph()
    people = list(people)
    G.add_nodes_from(p.id for p in people)
    for p in people:
        for parent_id in p.parent_ids:
            if parent_id in G:
                G.add_edge(parent_id, p.id)
    return G


def find_parent_cycles(people: Iterable[Person]) -> list[set[str]]:
    """
    Find groups of people who are (transitively) each other's ancestors.

    Returns the strongly connected components of the parent graph that contain more
    than one person, ordered by their smallest id. Self-parenting is not a cycle here;
    the validator reports it separately.
    """
    components = [
        c for c in nx.strongly_connected_components(build_parent_graph(people)) if len(c) > 1
    ]
    if components:
        logger.debug("Found %d parent cycle(s)", len(components))
    return sorted(components, key=min)
