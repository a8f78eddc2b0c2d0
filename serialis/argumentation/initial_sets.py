"""
Initial sets of an argumentation framework (Thimm 2022).

An initial set is a non-empty admissible set that is minimal with respect
to set inclusion among all non-empty admissible sets. Each initial set S
falls into exactly one category:

- unattacked:   no argument of the framework attacks S
- unchallenged: S is attacked, but not by any other initial set
- challenged:   some other initial set attacks S

Initial sets are found by defence-driven growth instead of a power-set
scan. Starting from a singleton {a}, the growth picks the first member
with an attacker b that the set does not counter-attack and branches over
every attacker c of b that keeps the set conflict-free. Leaves are
admissible. Any minimal admissible set M containing a is reached by the
branch that always picks defenders from M, so the minimal leaves are
exactly the initial sets.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .models import Argument, ArgumentationFramework, Extension

logger = logging.getLogger("serialis.argumentation.initial_sets")


@dataclass(frozen=True)
class InitialSetPartition:
    """The three categories of initial sets of one framework."""
    unattacked: tuple[Extension, ...] = field(default_factory=tuple)
    unchallenged: tuple[Extension, ...] = field(default_factory=tuple)
    challenged: tuple[Extension, ...] = field(default_factory=tuple)

    @property
    def all(self) -> tuple[Extension, ...]:
        return self.unattacked + self.unchallenged + self.challenged

    def is_empty(self) -> bool:
        return not (self.unattacked or self.unchallenged or self.challenged)

    def to_dict(self) -> dict[str, list[list[str]]]:
        return {
            "unattacked": [ext.names for ext in self.unattacked],
            "unchallenged": [ext.names for ext in self.unchallenged],
            "challenged": [ext.names for ext in self.challenged],
        }


def _sort_key(ext: Extension) -> tuple[int, list[str]]:
    return (len(ext), ext.names)


def _undefended_attacker(
    af: ArgumentationFramework, candidate: frozenset[Argument]
) -> Argument | None:
    """First attacker of a member that candidate does not counter-attack."""
    for member in sorted(candidate):
        for attacker in sorted(af.attackers(member)):
            if not af.is_attacked_by(attacker, candidate):
                return attacker
    return None


def _admissible_supersets(
    af: ArgumentationFramework, seed: Argument, seen: set[frozenset[Argument]]
) -> list[frozenset[Argument]]:
    found: list[frozenset[Argument]] = []
    stack: list[frozenset[Argument]] = [frozenset([seed])]
    while stack:
        candidate = stack.pop()
        if candidate in seen:
            continue
        seen.add(candidate)

        attacker = _undefended_attacker(af, candidate)
        if attacker is None:
            found.append(candidate)
            continue

        for defender in sorted(af.attackers(attacker), reverse=True):
            grown = candidate | {defender}
            if grown not in seen and af.is_conflict_free(grown):
                stack.append(grown)
    return found


def initial_sets(af: ArgumentationFramework) -> list[Extension]:
    """All initial sets of af, sorted by size and then by argument names."""
    seen: set[frozenset[Argument]] = set()
    candidates: set[frozenset[Argument]] = set()
    for arg in sorted(af.arguments):
        if arg in af.attackers(arg):
            continue
        candidates.update(_admissible_supersets(af, arg, seen))

    minimal = [
        c for c in candidates
        if not any(other < c for other in candidates)
    ]
    result = sorted((Extension(c) for c in minimal), key=_sort_key)
    logger.debug(
        f"{len(result)} initial sets from {len(candidates)} admissible candidates "
        f"over {len(af)} arguments"
    )
    return result


def partition_initial_sets(af: ArgumentationFramework) -> InitialSetPartition:
    """Compute and classify the initial sets of af."""
    sets = initial_sets(af)
    unattacked: list[Extension] = []
    unchallenged: list[Extension] = []
    challenged: list[Extension] = []

    for s in sets:
        attackers = af.attackers_of_set(s)
        if not attackers:
            unattacked.append(s)
        elif any(other != s and af.set_attacks(other, s) for other in sets):
            challenged.append(s)
        else:
            unchallenged.append(s)

    return InitialSetPartition(
        unattacked=tuple(unattacked),
        unchallenged=tuple(unchallenged),
        challenged=tuple(challenged),
    )
