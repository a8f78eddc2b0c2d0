"""
Extension Ranking Reasoner

Ranks every subset of a framework's arguments. Each ranking semantics is
an ordered list of base functions; two candidates are compared by the
first base function whose outputs differ:

    f(A) ⊊ f(B)  →  A '<' B   (A is ranked better)
    f(A) ⊋ f(B)  →  A '>' B   (A is ranked worse)
    f(A) = f(B)  →  try the next base function
    otherwise    →  incomparable (None)

When all base functions tie, R_GR prefers the smaller candidate and R_PR
the larger one; the other semantics leave the pair at '='.

The resulting relation is sorted topologically (Kahn) starting from the
worst candidates. Walking that order, a candidate better than some member
of the open rank starts a new rank; the ranks are then reversed. Every
subset is enumerated, so this is a tool for small frameworks only.
"""

from __future__ import annotations

import logging
from collections import deque
from itertools import combinations
from typing import Callable, Optional, Union

from .errors import FrameworkTooLargeError, UnsupportedSemanticsError
from .models import ArgumentationFramework, Attack, Extension, RankingSemantics

logger = logging.getLogger("serialis.argumentation.ranking")

Sign = Optional[str]
BaseFunction = Callable[[Extension, ArgumentationFramework], frozenset]
ComparisonMap = dict[tuple[Extension, Extension], Sign]

DEFAULT_MAX_ARGUMENTS = 10

_INVERSE: dict[Sign, Sign] = {"<": ">", ">": "<", "=": "=", None: None}


# ── Base functions ──────────────────────────────────────────────

def conflicts(ext: Extension, af: ArgumentationFramework) -> frozenset[Attack]:
    """Attacks between members of ext."""
    return frozenset(
        att for att in af.attacks
        if att.attacker in ext and att.attacked in ext
    )


def undefended(ext: Extension, af: ArgumentationFramework) -> Extension:
    """Members of ext with an outside attacker that ext does not attack."""
    return Extension(
        arg for arg in ext
        if any(
            attacker not in ext and not af.is_attacked_by(attacker, ext)
            for attacker in af.attackers(arg)
        )
    )


def unattacked(ext: Extension, af: ArgumentationFramework) -> Extension:
    """Arguments outside ext that ext does not attack."""
    return Extension(
        arg for arg in af.arguments
        if arg not in ext and not af.is_attacked_by(arg, ext)
    )


def defended_not_in(ext: Extension, af: ArgumentationFramework) -> Extension:
    """
    Arguments outside ext reached by iterating the characteristic function
    from ext while never admitting an attacker of ext.
    """
    ext_minus = af.attackers_of_set(ext)
    closure = Extension(ext)
    while True:
        grown = (closure | af.faf(closure)) - ext_minus
        if grown == closure:
            break
        closure = grown
    return closure - ext


BASE_FUNCTIONS: dict[RankingSemantics, tuple[BaseFunction, ...]] = {
    RankingSemantics.R_CF: (conflicts,),
    RankingSemantics.R_AD: (conflicts, undefended),
    RankingSemantics.R_PR: (conflicts, undefended),
    RankingSemantics.R_CO: (conflicts, undefended, defended_not_in),
    RankingSemantics.R_GR: (conflicts, undefended, defended_not_in),
    RankingSemantics.R_SST: (conflicts, undefended, defended_not_in, unattacked),
}


def _subset_sign(a: frozenset, b: frozenset) -> Sign:
    if a < b:
        return "<"
    if a > b:
        return ">"
    if a == b:
        return "="
    return None


class ExtensionRankingReasoner:
    """
    Orders all subsets of a framework w.r.t. a ranking semantics.

    get_models returns the ranks best-first: ranks[0] holds the best
    candidates. Two candidates in one rank are either tied or incomparable.
    """

    def __init__(
        self,
        semantics: Union[str, RankingSemantics],
        max_arguments: int = DEFAULT_MAX_ARGUMENTS,
    ):
        supported = [s.value for s in BASE_FUNCTIONS]
        try:
            self.semantics = RankingSemantics.parse(semantics)
        except UnsupportedSemanticsError:
            raise UnsupportedSemanticsError(semantics, supported) from None
        if self.semantics not in BASE_FUNCTIONS:
            raise UnsupportedSemanticsError(self.semantics, supported)
        self.base_functions = BASE_FUNCTIONS[self.semantics]
        self.max_arguments = max_arguments

    # ── Pairwise comparison ─────────────────────────────────────

    def _fallback(self, a: Extension, b: Extension) -> Sign:
        if self.semantics == RankingSemantics.R_GR:
            sign = _subset_sign(a, b)
            return sign if sign != "=" else None
        if self.semantics == RankingSemantics.R_PR:
            sign = _subset_sign(a, b)
            return _INVERSE[sign] if sign != "=" else None
        return "="

    def _compare_values(
        self, a: Extension, b: Extension,
        values_a: tuple[frozenset, ...], values_b: tuple[frozenset, ...],
    ) -> Sign:
        for fa, fb in zip(values_a, values_b):
            sign = _subset_sign(fa, fb)
            if sign != "=":
                return sign
        return self._fallback(a, b)

    def _values(self, ext: Extension, af: ArgumentationFramework) -> tuple[frozenset, ...]:
        return tuple(f(ext, af) for f in self.base_functions)

    def compare(self, a: Extension, b: Extension, af: ArgumentationFramework) -> Sign:
        """Sign of a relative to b: '<' better, '>' worse, '=' tie, None incomparable."""
        a, b = Extension(a), Extension(b)
        return self._compare_values(a, b, self._values(a, af), self._values(b, af))

    def comparison_signs(
        self, candidates: list[Extension], af: ArgumentationFramework
    ) -> ComparisonMap:
        """
        Sign for every unordered pair of candidates, keyed by (earlier, later)
        in candidate order; the reversed key is never stored.
        """
        values = {ext: self._values(ext, af) for ext in candidates}
        signs: ComparisonMap = {}
        for a, b in combinations(candidates, 2):
            signs[(a, b)] = self._compare_values(a, b, values[a], values[b])
        return signs

    @staticmethod
    def get_sign(signs: ComparisonMap, a: Extension, b: Extension) -> Sign:
        if (a, b) in signs:
            return signs[(a, b)]
        if (b, a) in signs:
            return _INVERSE[signs[(b, a)]]
        return None

    # ── Ranking ─────────────────────────────────────────────────

    def _candidates(self, af: ArgumentationFramework) -> list[Extension]:
        # Largest first: the all-arguments candidate seeds the sort.
        args = sorted(af.arguments)
        out = []
        for size in range(len(args), -1, -1):
            out.extend(Extension(combo) for combo in combinations(args, size))
        return out

    def _topological_order(
        self, candidates: list[Extension], signs: ComparisonMap
    ) -> list[Extension]:
        """Kahn's algorithm from the worst candidates towards the best."""
        better: dict[Extension, list[Extension]] = {c: [] for c in candidates}
        worse_count: dict[Extension, int] = {c: 0 for c in candidates}
        for (a, b), sign in signs.items():
            if sign == ">":
                better[a].append(b)
                worse_count[b] += 1
            elif sign == "<":
                better[b].append(a)
                worse_count[a] += 1

        queue = deque(c for c in candidates if worse_count[c] == 0)
        order: list[Extension] = []
        while queue:
            current = queue.popleft()
            order.append(current)
            for child in better[current]:
                worse_count[child] -= 1
                if worse_count[child] == 0:
                    queue.append(child)
        return order

    def _split_ranks(
        self, order: list[Extension], signs: ComparisonMap
    ) -> list[list[Extension]]:
        """Split a worst-first order into ranks, worst rank first."""
        ranks: list[list[Extension]] = []
        rank: list[Extension] = []
        for ext in order:
            if any(self.get_sign(signs, member, ext) == ">" for member in rank):
                ranks.append(rank)
                rank = []
            rank.append(ext)
        if rank:
            ranks.append(rank)
        return ranks

    def get_models(self, af: ArgumentationFramework) -> list[list[Extension]]:
        """All subsets of af's arguments, partitioned into ranks (best first)."""
        if len(af) > self.max_arguments:
            logger.warning(
                f"{self.semantics.value}: {len(af)} arguments exceed limit {self.max_arguments}"
            )
            raise FrameworkTooLargeError(len(af), self.max_arguments)

        candidates = self._candidates(af)
        signs = self.comparison_signs(candidates, af)
        order = self._topological_order(candidates, signs)
        if len(order) != len(candidates):
            raise RuntimeError(
                f"{self.semantics.value}: comparison relation is cyclic "
                f"({len(order)} of {len(candidates)} candidates sorted)"
            )
        ranks = self._split_ranks(order, signs)
        ranks.reverse()
        logger.debug(
            f"{self.semantics.value}: {len(candidates)} candidates in {len(ranks)} ranks"
        )
        return ranks

    def get_model(self, af: ArgumentationFramework) -> list[Extension]:
        """The best rank."""
        return self.get_models(af)[0]
