"""Shared family tree fixtures."""

from datetime import date

import pytest

from kinship.models import Person

# Fixed reference date so future-date checks don't drift
TODAY = date(2026, 10, 18)


def person(pid, gender="male", parents=(), spouses=(), children=(), **kwargs):
    """Shorthand Person builder: first name defaults to the id."""
    parents = tuple(parents) + (None, None)
    return Person(
        id=pid,
        first_name=kwargs.pop("first_name", pid.capitalize()),
        gender=gender,
        parent_id1=parents[0],
        parent_id2=parents[1],
        spouse_ids=tuple(spouses),
        children_ids=tuple(children),
        **kwargs,
    )


@pytest.fixture
def family():
    """
    Four generations under one couple:

        grandpa + grandma
           |-- dad (+ mom) -- ann, bob -- bob's son carl -- carl's daughter dora
           |-- aunt ------- cora -- cora's son eli
    plus mom's parents (granny) and mom's brother (mike) with his daughter (mia).
    """
    people = [
        person("grandpa", spouses=["grandma"]),
        person("grandma", gender="female", spouses=["grandpa"]),
        person("granny", gender="female"),
        person("dad", parents=["grandpa", "grandma"], spouses=["mom"]),
        person("mom", gender="female", parents=["granny"], spouses=["dad"]),
        person("mike", parents=["granny"]),
        person("mia", gender="female", parents=["mike"]),
        person("aunt", gender="female", parents=["grandpa", "grandma"]),
        person("ann", gender="female", parents=["dad", "mom"]),
        person("bob", parents=["dad", "mom"]),
        person("carl", parents=["bob"]),
        person("dora", gender="female", parents=["carl"]),
        person("cora", gender="female", parents=["aunt"]),
        person("eli", parents=["cora"]),
    ]
    return {p.id: p for p in people}
