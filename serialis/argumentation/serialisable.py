"""
Serialisable Extension Reasoner — Bengel & Thimm (2022)

Extensions are built step by step: starting in the state (AF, ∅), a
selection function α(UA, UC, C) picks some initial sets of the current
framework, each choice S' moves the search to (AF^S', S ∪ S'), and a
termination function β decides whether the accumulated extension of a
visited state is accepted.

Every supported semantics is one (α, β) pair:

    ADM   α = UA ∪ UC ∪ C    β = always
    CO    α = UA ∪ UC ∪ C    β = UA(AF') = ∅
    GR    α = UA             β = UA(AF') = ∅
    PR    α = UA ∪ UC ∪ C    β = IS(AF') = ∅
    ST    α = UA ∪ UC ∪ C    β = AF' has no arguments
    UC    α = UA ∪ UC        β = UA(AF') ∪ UC(AF') = ∅
    SAD   α = UA             β = always

The search is depth-first over an explicit stack. Visited states and the
result set belong to a single get_models call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Sequence, Union

from .errors import UnsupportedSemanticsError
from .initial_sets import InitialSetPartition, partition_initial_sets
from .models import (
    ArgumentationFramework,
    ArgumentLike,
    Extension,
    InferenceMode,
    Semantics,
    TransitionState,
    as_argument,
)

logger = logging.getLogger("serialis.argumentation.serialisable")

SelectionFunction = Callable[
    [Sequence[Extension], Sequence[Extension], Sequence[Extension]],
    Sequence[Extension],
]
TerminationFunction = Callable[[TransitionState, InitialSetPartition], bool]


# ── Selection functions ─────────────────────────────────────────

def select_all(unattacked, unchallenged, challenged) -> tuple[Extension, ...]:
    return tuple(unattacked) + tuple(unchallenged) + tuple(challenged)


def select_unattacked(unattacked, unchallenged, challenged) -> tuple[Extension, ...]:
    return tuple(unattacked)


def select_unattacked_or_unchallenged(unattacked, unchallenged, challenged) -> tuple[Extension, ...]:
    return tuple(unattacked) + tuple(unchallenged)


# ── Termination functions ───────────────────────────────────────

def always(state: TransitionState, partition: InitialSetPartition) -> bool:
    return True


def no_unattacked_initial_set(state: TransitionState, partition: InitialSetPartition) -> bool:
    return not partition.unattacked


def no_initial_set(state: TransitionState, partition: InitialSetPartition) -> bool:
    return partition.is_empty()


def no_unattacked_or_unchallenged_initial_set(state: TransitionState, partition: InitialSetPartition) -> bool:
    return not partition.unattacked and not partition.unchallenged


def no_arguments_left(state: TransitionState, partition: InitialSetPartition) -> bool:
    return state.framework.is_empty()


@dataclass(frozen=True)
class Serialisation:
    """The (selection, termination) pair defining one serialised semantics."""
    selection: SelectionFunction
    termination: TerminationFunction


SERIALISATIONS: dict[Semantics, Serialisation] = {
    Semantics.ADMISSIBLE: Serialisation(select_all, always),
    Semantics.COMPLETE: Serialisation(select_all, no_unattacked_initial_set),
    Semantics.GROUNDED: Serialisation(select_unattacked, no_unattacked_initial_set),
    Semantics.PREFERRED: Serialisation(select_all, no_initial_set),
    Semantics.STABLE: Serialisation(select_all, no_arguments_left),
    Semantics.UNCHALLENGED: Serialisation(
        select_unattacked_or_unchallenged, no_unattacked_or_unchallenged_initial_set
    ),
    Semantics.STRONGLY_ADMISSIBLE: Serialisation(select_unattacked, always),
}

SUPPORTED_SEMANTICS: tuple[Semantics, ...] = tuple(SERIALISATIONS)


def resolve_serialisation(semantics: Union[str, Semantics]) -> tuple[Semantics, Serialisation]:
    """Map a tag to its serialisation or fail with UnsupportedSemanticsError."""
    supported = [s.value for s in SUPPORTED_SEMANTICS]
    try:
        tag = Semantics.parse(semantics)
    except UnsupportedSemanticsError:
        raise UnsupportedSemanticsError(semantics, supported) from None
    if tag not in SERIALISATIONS:
        raise UnsupportedSemanticsError(tag, supported)
    return tag, SERIALISATIONS[tag]


class SerialisableExtensionReasoner:
    """
    Computes the extensions of a semantics via its serialised transition
    system.

    The reasoner keeps no state between calls; one instance can serve
    concurrent get_models calls on different frameworks.
    """

    def __init__(self, semantics: Union[str, Semantics]):
        self.semantics, self._serialisation = resolve_serialisation(semantics)

    def selection_function(
        self,
        unattacked: Sequence[Extension],
        unchallenged: Sequence[Extension],
        challenged: Sequence[Extension],
    ) -> Sequence[Extension]:
        """Select the initial sets to branch on."""
        return self._serialisation.selection(unattacked, unchallenged, challenged)

    def termination_function(
        self, state: TransitionState, partition: InitialSetPartition | None = None
    ) -> bool:
        """Whether the extension of state is accepted."""
        if partition is None:
            partition = partition_initial_sets(state.framework)
        return self._serialisation.termination(state, partition)

    def get_models(self, af: ArgumentationFramework) -> set[Extension]:
        """All extensions of af reachable by the serialisation."""
        result: set[Extension] = set()
        visited: set[TransitionState] = set()
        stack: list[TransitionState] = [TransitionState.initial(af)]

        while stack:
            state = stack.pop()
            if state in visited:
                continue
            visited.add(state)

            partition = partition_initial_sets(state.framework)
            if self._serialisation.termination(state, partition):
                result.add(state.extension)

            selected = self.selection_function(
                partition.unattacked, partition.unchallenged, partition.challenged
            )
            for initial_set in reversed(tuple(selected)):
                successor = state.next(initial_set)
                if successor not in visited:
                    stack.append(successor)

        logger.debug(
            f"{self.semantics.value}: {len(result)} extensions, "
            f"{len(visited)} states over {len(af)} arguments"
        )
        return result

    def get_model(self, af: ArgumentationFramework) -> Extension | None:
        """One extension (smallest, then by names), or None if there is none."""
        models = self.get_models(af)
        if not models:
            return None
        return min(models, key=lambda ext: (len(ext), ext.names))

    def query(
        self,
        af: ArgumentationFramework,
        argument: ArgumentLike,
        inference: Union[str, InferenceMode] = InferenceMode.SCEPTICAL,
    ) -> bool:
        """
        Sceptical: argument belongs to every extension.
        Credulous: argument belongs to at least one extension.
        """
        arg = as_argument(argument)
        mode = InferenceMode(inference)
        models = self.get_models(af)
        if mode == InferenceMode.SCEPTICAL:
            return all(arg in ext for ext in models)
        return any(arg in ext for ext in models)

    def __repr__(self):
        return f"{type(self).__name__}({self.semantics.value})"


def get_serialisable_reasoner(semantics: Union[str, Semantics]) -> SerialisableExtensionReasoner:
    """Create a reasoner for the given semantics tag."""
    return SerialisableExtensionReasoner(semantics)


class StandardEquivalence:
    """
    Two frameworks are standard-equivalent w.r.t. a reasoner if the
    reasoner returns the same set of extensions for both.
    """

    description = "standardEQ"

    def __init__(self, reasoner: SerialisableExtensionReasoner):
        self.reasoner = reasoner

    def is_equivalent(self, af1: ArgumentationFramework, af2: ArgumentationFramework) -> bool:
        return self.reasoner.get_models(af1) == self.reasoner.get_models(af2)

    def are_equivalent(self, frameworks: Iterable[ArgumentationFramework]) -> bool:
        frameworks = list(frameworks)
        if not frameworks:
            return True
        first = self.reasoner.get_models(frameworks[0])
        return all(self.reasoner.get_models(af) == first for af in frameworks[1:])
