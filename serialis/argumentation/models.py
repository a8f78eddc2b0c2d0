"""
Argumentation Framework Models — Dung's Abstract Argumentation

Implements the formal structures from:
- Dung (1995): On the acceptability of arguments
- Thimm (2022): Revisiting initial sets in abstract argumentation
- Bengel & Thimm (2022): Serialisable semantics for abstract argumentation

A framework AF = (Args, Att) is built once and then treated as a value:
reductions and restrictions always return new (frozen) frameworks, so a
framework can be shared between search branches and used as a key in the
per-call memoization tables of the reasoners.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Union

from .errors import InvalidFrameworkError, UnsupportedSemanticsError


class Semantics(str, Enum):
    """Extension semantics tags (the usual ICCMA/ProBo abbreviations)."""
    ADMISSIBLE = "ADM"
    COMPLETE = "CO"
    GROUNDED = "GR"
    PREFERRED = "PR"
    STABLE = "ST"
    UNCHALLENGED = "UC"
    STRONGLY_ADMISSIBLE = "SAD"
    # Known tags without a serialisation; reasoners reject them.
    CONFLICT_FREE = "CF"
    STAGE = "STG"
    SEMI_STABLE = "SST"
    IDEAL = "ID"
    CF2 = "CF2"

    @classmethod
    def parse(cls, value: Union[str, "Semantics"]) -> "Semantics":
        """Accept a member, its tag ("PR") or its name ("preferred")."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip()
            for member in cls:
                if key.upper() == member.value or key.upper() == member.name:
                    return member
        raise UnsupportedSemanticsError(value, [m.value for m in cls])


class RankingSemantics(str, Enum):
    """Extension ranking semantics (orderings over all subsets)."""
    R_CF = "R_CF"
    R_AD = "R_AD"
    R_CO = "R_CO"
    R_GR = "R_GR"
    R_PR = "R_PR"
    R_SST = "R_SST"

    @classmethod
    def parse(cls, value: Union[str, "RankingSemantics"]) -> "RankingSemantics":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().upper()
            if not key.startswith("R_"):
                key = f"R_{key}"
            for member in cls:
                if key == member.value:
                    return member
        raise UnsupportedSemanticsError(value, [m.value for m in cls])


class InferenceMode(str, Enum):
    """How a set of extensions answers a query about one argument."""
    SCEPTICAL = "sceptical"   # member of every extension
    CREDULOUS = "credulous"   # member of at least one extension


@dataclass(frozen=True, order=True)
class Argument:
    """
    An atomic argument. Identity, hashing and ordering are by name only.
    """
    name: str

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise InvalidFrameworkError(f"Argument name must be a non-empty string, got {self.name!r}")

    def __str__(self):
        return self.name

    def __repr__(self):
        return f"Arg({self.name})"


ArgumentLike = Union[Argument, str]


def as_argument(value: ArgumentLike) -> Argument:
    return value if isinstance(value, Argument) else Argument(value)


@dataclass(frozen=True, order=True)
class Attack:
    """
    An attack relation: if (a, b) is an attack, argument 'a' attacks 'b'.
    """
    attacker: Argument
    attacked: Argument

    def __str__(self):
        return f"({self.attacker},{self.attacked})"


class Extension(frozenset):
    """
    An immutable, unordered set of arguments.

    Set operators return Extensions again, so results of set algebra can be
    used directly as graph labels and dictionary keys.
    """

    def __new__(cls, arguments: Iterable[ArgumentLike] = ()):
        return super().__new__(cls, (as_argument(a) for a in arguments))

    def __sub__(self, other):
        return Extension(frozenset.__sub__(self, frozenset(other)))

    def __or__(self, other):
        return Extension(frozenset.__or__(self, frozenset(other)))

    def __and__(self, other):
        return Extension(frozenset.__and__(self, frozenset(other)))

    def union(self, *others):
        return Extension(frozenset.union(self, *others))

    def difference(self, *others):
        return Extension(frozenset.difference(self, *others))

    def restrict(self, af: "ArgumentationFramework") -> "Extension":
        """Drop every member that is not an argument of af."""
        return Extension(frozenset.__and__(self, af.arguments))

    @property
    def names(self) -> list[str]:
        return [a.name for a in sorted(self)]

    @property
    def size(self) -> int:
        return len(self)

    def __str__(self):
        return "{" + ",".join(self.names) + "}"

    def __repr__(self):
        return f"Extension({self})"


EMPTY_EXTENSION = Extension()


class ArgumentationFramework:
    """
    Dung's Abstract Argumentation Framework (AAF).

    AF = (Args, Attacks) where:
    - Args is a finite set of arguments
    - Attacks ⊆ Args × Args is a binary attack relation

    Arguments and attacks can be added until freeze() is called. Every
    attack must connect two arguments already in the framework.
    """

    def __init__(
        self,
        arguments: Iterable[ArgumentLike] = (),
        attacks: Iterable[tuple[ArgumentLike, ArgumentLike] | Attack] = (),
    ):
        self._arguments: set[Argument] = set()
        self._attacks: set[Attack] = set()
        self._attackers: dict[Argument, set[Argument]] = {}
        self._attacked: dict[Argument, set[Argument]] = {}
        self._frozen = False
        self._hash: int | None = None

        for arg in arguments:
            self.add_argument(arg)
        for attack in attacks:
            if isinstance(attack, Attack):
                self.add_attack(attack.attacker, attack.attacked)
            else:
                attacker, attacked = attack
                self.add_attack(attacker, attacked)

    # ── Construction ────────────────────────────────────────────

    def _check_mutable(self) -> None:
        if self._frozen:
            raise InvalidFrameworkError("Framework is frozen and cannot be modified")

    def add_argument(self, arg: ArgumentLike) -> Argument:
        self._check_mutable()
        arg = as_argument(arg)
        if arg not in self._arguments:
            self._arguments.add(arg)
            self._attackers[arg] = set()
            self._attacked[arg] = set()
        return arg

    def add_attack(self, attacker: ArgumentLike, attacked: ArgumentLike) -> Attack:
        self._check_mutable()
        attacker, attacked = as_argument(attacker), as_argument(attacked)
        missing = [a.name for a in (attacker, attacked) if a not in self._arguments]
        if missing:
            raise InvalidFrameworkError(
                f"Attack ({attacker},{attacked}) refers to unknown argument(s): {', '.join(missing)}"
            )
        attack = Attack(attacker, attacked)
        self._attacks.add(attack)
        self._attackers[attacked].add(attacker)
        self._attacked[attacker].add(attacked)
        return attack

    def freeze(self) -> "ArgumentationFramework":
        self._frozen = True
        return self

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def frozen(self) -> "ArgumentationFramework":
        """Return self if already frozen, otherwise a frozen copy."""
        if self._frozen:
            return self
        return ArgumentationFramework(self._arguments, self._attacks).freeze()

    @classmethod
    def from_names(
        cls,
        arguments: Iterable[str],
        attacks: Iterable[tuple[str, str]] = (),
    ) -> "ArgumentationFramework":
        return cls(arguments, attacks)

    # ── Structure ───────────────────────────────────────────────

    @property
    def arguments(self) -> Extension:
        return Extension(self._arguments)

    @property
    def attacks(self) -> frozenset[Attack]:
        return frozenset(self._attacks)

    def argument(self, name: str) -> Argument:
        arg = Argument(name)
        if arg not in self._arguments:
            raise KeyError(name)
        return arg

    def __len__(self):
        return len(self._arguments)

    def __iter__(self):
        return iter(sorted(self._arguments))

    def __contains__(self, item):
        if isinstance(item, str):
            item = Argument(item)
        return item in self._arguments or item in self._attacks

    def is_empty(self) -> bool:
        return not self._arguments

    # ── Attack queries ──────────────────────────────────────────

    def attackers(self, arg: ArgumentLike) -> frozenset[Argument]:
        """All arguments that attack the given argument."""
        return frozenset(self._attackers.get(as_argument(arg), ()))

    def attacked_by(self, arg: ArgumentLike) -> frozenset[Argument]:
        """All arguments attacked by the given argument."""
        return frozenset(self._attacked.get(as_argument(arg), ()))

    def attackers_of_set(self, candidate: Iterable[Argument]) -> Extension:
        """S⁻: every argument attacking some member of candidate."""
        out: set[Argument] = set()
        for arg in candidate:
            out |= self._attackers.get(arg, set())
        return Extension(out)

    def attacked_by_set(self, candidate: Iterable[Argument]) -> Extension:
        """S⁺: every argument attacked by some member of candidate."""
        out: set[Argument] = set()
        for arg in candidate:
            out |= self._attacked.get(arg, set())
        return Extension(out)

    def is_attacked_by(self, arg: ArgumentLike, candidate: Iterable[Argument]) -> bool:
        """Check if arg is attacked by any member of candidate."""
        return not self._attackers.get(as_argument(arg), set()).isdisjoint(candidate)

    def set_attacks(self, attackers: Iterable[Argument], targets: Iterable[Argument]) -> bool:
        """True if some member of attackers attacks some member of targets."""
        targets = set(targets)
        return any(not self._attacked.get(a, set()).isdisjoint(targets) for a in attackers)

    def is_conflict_free(self, candidate: Iterable[Argument]) -> bool:
        """No member of candidate attacks a member of candidate."""
        members = set(candidate)
        return all(self._attacked.get(a, set()).isdisjoint(members) for a in members)

    def defends(self, candidate: Iterable[Argument], arg: ArgumentLike) -> bool:
        """
        candidate defends arg if every attacker of arg is attacked by
        some member of candidate.
        """
        members = set(candidate)
        return all(
            not self._attackers[attacker].isdisjoint(members)
            for attacker in self._attackers.get(as_argument(arg), ())
        )

    def faf(self, candidate: Iterable[Argument]) -> Extension:
        """Characteristic function F(S) = { a ∈ Args | S defends a }."""
        members = set(candidate)
        return Extension(a for a in self._arguments if self.defends(members, a))

    def unattacked(self) -> Extension:
        return Extension(a for a in self._arguments if not self._attackers[a])

    # ── Derived frameworks ──────────────────────────────────────

    def restrict(self, arguments: Iterable[ArgumentLike]) -> "ArgumentationFramework":
        """The sub-framework induced by the given arguments (frozen)."""
        keep = {as_argument(a) for a in arguments} & self._arguments
        attacks = [
            att for att in self._attacks
            if att.attacker in keep and att.attacked in keep
        ]
        return ArgumentationFramework(keep, attacks).freeze()

    def reduct(self, candidate: Iterable[Argument]) -> "ArgumentationFramework":
        """
        The S-reduct AF^S: restriction to Args \\ (S ∪ S⁺).
        """
        members = Extension(candidate)
        removed = members | self.attacked_by_set(members)
        return self.restrict(self._arguments - removed)

    # ── Value semantics ─────────────────────────────────────────

    def __eq__(self, other):
        if not isinstance(other, ArgumentationFramework):
            return NotImplemented
        return self._arguments == other._arguments and self._attacks == other._attacks

    def __hash__(self):
        if self._frozen and self._hash is not None:
            return self._hash
        value = hash((frozenset(self._arguments), frozenset(self._attacks)))
        if self._frozen:
            self._hash = value
        return value

    def __repr__(self):
        return f"AF(<{len(self._arguments)} args, {len(self._attacks)} attacks>)"

    def __str__(self):
        args = ",".join(a.name for a in sorted(self._arguments))
        atts = ",".join(str(att) for att in sorted(self._attacks))
        return f"<{{{args}}},{{{atts}}}>"

    def to_dict(self) -> dict:
        return {
            "arguments": [a.name for a in sorted(self._arguments)],
            "attacks": [
                [att.attacker.name, att.attacked.name]
                for att in sorted(self._attacks)
            ],
            "stats": {
                "num_arguments": len(self._arguments),
                "num_attacks": len(self._attacks),
            },
        }


@dataclass(frozen=True)
class TransitionState:
    """
    A state (AF', S) of the serialisation transition system.

    framework is the (possibly reduced) framework still to be processed,
    extension the arguments accepted so far. The root state of a search is
    (AF, ∅); choosing an initial set S' of AF' moves to (AF'^S', S ∪ S').
    """
    framework: ArgumentationFramework
    extension: Extension = EMPTY_EXTENSION

    @classmethod
    def initial(cls, framework: ArgumentationFramework) -> "TransitionState":
        return cls(framework.frozen(), EMPTY_EXTENSION)

    def next(self, initial_set: Iterable[Argument]) -> "TransitionState":
        initial_set = Extension(initial_set)
        return TransitionState(
            self.framework.reduct(initial_set),
            self.extension | initial_set,
        )

    def __str__(self):
        return f"({self.framework}, {self.extension})"
