"""
Serialisable reasoning with analysis.

Same transition system as SerialisableExtensionReasoner, but every visited
state is recorded in a SerialisationGraph (a networkx DiGraph): nodes are
TransitionStates, an edge parent → child carries the initial set that was
chosen in its "initial_set" attribute. Each state's analysis is built from
the analyses of its children, merging their graphs into its own.

References:
- Thimm (2022), Revisiting initial sets in abstract argumentation.
  Argument & Computation 13, 325–360.
- Bengel & Thimm (2022), Serialisable semantics for abstract argumentation.
  COMMA 2022.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Union

import networkx as nx

from .initial_sets import partition_initial_sets
from .models import ArgumentationFramework, Extension, Semantics, TransitionState
from .serialisable import SerialisableExtensionReasoner

logger = logging.getLogger("serialis.argumentation.analysis")


class SerialisationGraph(nx.DiGraph):
    """
    Derivation graph of a serialisation process.

    Graph-level attributes: root (TransitionState), semantics, extensions.
    Node attributes: extension, accepted, remaining (arguments left).
    Edge attribute: initial_set.
    """

    @property
    def root(self) -> TransitionState | None:
        return self.graph.get("root")

    @property
    def semantics(self) -> Semantics | None:
        return self.graph.get("semantics")

    @property
    def extensions(self) -> frozenset[Extension]:
        return self.graph.get("extensions", frozenset())

    def add_state(self, state: TransitionState, accepted: bool = False) -> None:
        if self.root is None:
            self.graph["root"] = state
        self.add_node(
            state,
            extension=state.extension,
            accepted=accepted,
            remaining=len(state.framework),
        )

    def merge(
        self,
        parent: TransitionState,
        sub_graph: "SerialisationGraph",
        initial_set: Extension,
    ) -> None:
        """Copy sub_graph into this graph and link parent to its root."""
        self.add_nodes_from(sub_graph.nodes(data=True))
        self.add_edges_from(sub_graph.edges(data=True))
        self.add_edge(parent, sub_graph.root, initial_set=initial_set)

    def children(self, state: TransitionState) -> list[TransitionState]:
        return sorted(self.successors(state), key=lambda s: (len(s.extension), s.extension.names))

    def leaves(self) -> set[TransitionState]:
        return {node for node in self.nodes if self.out_degree(node) == 0}

    def accepted_states(self) -> set[TransitionState]:
        return {node for node, accepted in self.nodes(data="accepted") if accepted}

    def serialisation_sequences(self, state: TransitionState) -> list[list[Extension]]:
        """
        Every sequence of initial sets leading from the root to state.
        """
        if state not in self:
            raise ValueError(f"State {state} is not part of this graph")
        if state == self.root:
            return [[]]
        sequences = []
        for path in nx.all_simple_paths(self, self.root, state):
            sequences.append([
                self.edges[u, v]["initial_set"] for u, v in zip(path, path[1:])
            ])
        return sorted(sequences, key=lambda seq: [ext.names for ext in seq])

    def to_dict(self) -> dict:
        index = {
            node: i for i, node in enumerate(
                sorted(self.nodes, key=lambda s: (len(s.extension), s.extension.names, len(s.framework)))
            )
        }
        return {
            "root": index.get(self.root),
            "semantics": self.semantics.value if self.semantics else None,
            "nodes": [
                {
                    "id": i,
                    "extension": node.extension.names,
                    "remaining_arguments": node.framework.arguments.names,
                    "accepted": bool(self.nodes[node].get("accepted")),
                }
                for node, i in sorted(index.items(), key=lambda item: item[1])
            ],
            "edges": [
                {
                    "source": index[u],
                    "target": index[v],
                    "initial_set": data["initial_set"].names,
                }
                for u, v, data in sorted(self.edges(data=True), key=lambda e: (index[e[0]], index[e[1]]))
            ],
        }


@dataclass(frozen=True, eq=False)
class TransitionStateAnalysis:
    """Result of analysing one transition state and everything below it."""
    framework: ArgumentationFramework
    extension: Extension
    semantics: Semantics
    graph: SerialisationGraph
    root: TransitionState
    extensions: frozenset[Extension] = field(default_factory=frozenset)
    sub_analyses: tuple["TransitionStateAnalysis", ...] = field(default_factory=tuple)

    @property
    def state(self) -> TransitionState:
        return self.root

    def to_dict(self, include_graph: bool = True) -> dict:
        out = {
            "semantics": self.semantics.value,
            "framework": self.framework.to_dict(),
            "extension": self.extension.names,
            "extensions": sorted(ext.names for ext in self.extensions),
            "num_states": self.graph.number_of_nodes(),
            "num_sub_analyses": len(self.sub_analyses),
        }
        if include_graph:
            out["graph"] = self.graph.to_dict()
        return out


class SerialisableExtensionReasonerWithAnalysis(SerialisableExtensionReasoner):
    """
    Serialisable reasoner that also returns the derivation graph and the
    per-branch sub-analyses of the search.
    """

    def get_models_with_analysis(self, af: ArgumentationFramework) -> TransitionStateAnalysis:
        visited: set[TransitionState] = set()
        computed: dict[TransitionState, TransitionStateAnalysis] = {}
        analysis = self._analyse(TransitionState.initial(af), visited, computed)
        analysis.graph.graph["extensions"] = analysis.extensions
        logger.info(
            f"{self.semantics.value}: {len(analysis.extensions)} extensions, "
            f"{analysis.graph.number_of_nodes()} states"
        )
        return analysis

    def _analyse(
        self,
        state: TransitionState,
        visited: set[TransitionState],
        computed: dict[TransitionState, TransitionStateAnalysis],
    ) -> TransitionStateAnalysis | None:
        if state in visited:
            # None while the state is still being expanded further up.
            return computed.get(state)
        visited.add(state)

        partition = partition_initial_sets(state.framework)
        accepted = self._serialisation.termination(state, partition)

        graph = SerialisationGraph(semantics=self.semantics)
        graph.add_state(state, accepted=accepted)
        found: set[Extension] = {state.extension} if accepted else set()
        sub_analyses: list[TransitionStateAnalysis] = []

        selected = self.selection_function(
            partition.unattacked, partition.unchallenged, partition.challenged
        )
        for initial_set in selected:
            sub = self._analyse(state.next(initial_set), visited, computed)
            if sub is None:
                continue
            sub_analyses.append(sub)
            found |= sub.extensions
            graph.merge(state, sub.graph, initial_set)

        analysis = TransitionStateAnalysis(
            framework=state.framework,
            extension=state.extension,
            semantics=self.semantics,
            graph=graph,
            root=state,
            extensions=frozenset(found),
            sub_analyses=tuple(sub_analyses),
        )
        graph.graph["extensions"] = analysis.extensions
        computed[state] = analysis
        return analysis


def get_analysis_reasoner(semantics: Union[str, Semantics]) -> SerialisableExtensionReasonerWithAnalysis:
    """Create an analysing reasoner for the given semantics tag."""
    return SerialisableExtensionReasonerWithAnalysis(semantics)
