"""
Classical Extension Computation — Dung (1995)

Direct, non-serialised definitions of the standard semantics:
- Conflict-freeness, admissibility, completeness, stability checks
- Grounded extension as least fixpoint of the characteristic function
- Brute-force enumeration of admissible/complete/preferred/stable sets

The serialisable reasoners never call the enumerators; they exist as an
independent reference the serialised results can be checked against, and
the predicates are shared with the ranking reasoner.

Computational complexity:
- Grounded: O(|Args|³) — polynomial
- Enumerations: O(2^|Args|) — limited to small frameworks
"""

from __future__ import annotations

import logging
from itertools import combinations
from typing import Iterable

from .errors import FrameworkTooLargeError
from .models import Argument, ArgumentationFramework, Extension

logger = logging.getLogger("serialis.argumentation.engine")

MAX_ENUMERATION_ARGUMENTS = 16


class ArgumentationEngine:
    """
    Reference implementation of the extension-based semantics.

    Follows Dung's characteristic function F:
        F(S) = { a ∈ Args | S defends a }

    The grounded extension is the least fixpoint of F.
    """

    def __init__(self, max_arguments: int = MAX_ENUMERATION_ARGUMENTS):
        self.max_arguments = max_arguments

    # ── Grounded Extension ──────────────────────────────────────

    def grounded_extension(self, af: ArgumentationFramework) -> Extension:
        """
        Compute the grounded extension via iterative fixpoint.

        Algorithm:
            S₀ = ∅
            Sₙ₊₁ = F(Sₙ)
            Stop when Sₙ₊₁ = Sₙ
        """
        current = Extension()
        while True:
            nxt = af.faf(current)
            if nxt == current:
                return current
            current = nxt

    # ── Predicates ──────────────────────────────────────────────

    def is_conflict_free(self, af: ArgumentationFramework,
                         candidate: Iterable[Argument]) -> bool:
        return af.is_conflict_free(candidate)

    def is_admissible(self, af: ArgumentationFramework,
                      candidate: Iterable[Argument]) -> bool:
        """
        S is admissible iff:
        1. S is conflict-free
        2. S defends all its members
        """
        members = set(candidate)
        if not af.is_conflict_free(members):
            return False
        return all(af.defends(members, a) for a in members)

    def is_complete(self, af: ArgumentationFramework,
                    candidate: Iterable[Argument]) -> bool:
        """S is complete iff S is admissible and S = F(S)."""
        members = Extension(candidate)
        return self.is_admissible(af, members) and af.faf(members) == members

    def is_stable(self, af: ArgumentationFramework,
                  candidate: Iterable[Argument]) -> bool:
        """S is stable iff S is conflict-free and attacks every outsider."""
        members = Extension(candidate)
        if not af.is_conflict_free(members):
            return False
        return (af.arguments - members) <= af.attacked_by_set(members)

    # ── Enumeration (small frameworks only) ─────────────────────

    def _check_size(self, af: ArgumentationFramework) -> None:
        if len(af) > self.max_arguments:
            logger.warning(
                f"Refusing exhaustive enumeration over {len(af)} arguments"
            )
            raise FrameworkTooLargeError(len(af), self.max_arguments)

    def admissible_sets(self, af: ArgumentationFramework) -> set[Extension]:
        self._check_size(af)
        arg_list = sorted(af.arguments)
        found: set[Extension] = set()
        for size in range(len(arg_list) + 1):
            for combo in combinations(arg_list, size):
                if self.is_admissible(af, combo):
                    found.add(Extension(combo))
        return found

    def complete_extensions(self, af: ArgumentationFramework) -> set[Extension]:
        return {s for s in self.admissible_sets(af) if af.faf(s) == s}

    def preferred_extensions(self, af: ArgumentationFramework) -> set[Extension]:
        """Maximal admissible sets w.r.t. set inclusion."""
        admissible = self.admissible_sets(af)
        return {
            s for s in admissible
            if not any(s < other for other in admissible)
        }

    def stable_extensions(self, af: ArgumentationFramework) -> set[Extension]:
        return {s for s in self.admissible_sets(af) if self.is_stable(af, s)}
