"""
Serialisable reasoning tests:
- Extensions per semantics on small hand-checked frameworks
- Agreement with the classical definitions on generated frameworks
- Derivation graph of the analysing reasoner
- Standard equivalence and the example finder
"""
import pytest


def _af(arguments, attacks=()):
    from serialis.argumentation import ArgumentationFramework
    return ArgumentationFramework(arguments, attacks)


def _ext(*names):
    from serialis.argumentation import Extension
    return Extension(names)


def _models(semantics, af):
    from serialis.argumentation import get_serialisable_reasoner
    return get_serialisable_reasoner(semantics).get_models(af)


def _generated(count=10, seed=7, n=5, p=0.3):
    from serialis.argumentation import FrameworkGenerator, GenerationParameters
    generator = FrameworkGenerator(GenerationParameters(n, p), seed=seed)
    return [generator.next() for _ in range(count)]


CHAIN = (["a", "b", "c", "d", "e"], [("a", "b"), ("b", "c"), ("c", "d"), ("d", "e")])
MUTUAL = (["a", "b"], [("a", "b"), ("b", "a")])
ODD_CYCLE = (["a", "b", "c"], [("a", "b"), ("b", "c"), ("c", "a")])


# ── Reasoner construction ──────────────────────────────────────

class TestReasonerConstruction:
    def test_unknown_tag_fails_fast(self):
        from serialis.argumentation import UnsupportedSemanticsError, get_serialisable_reasoner
        with pytest.raises(UnsupportedSemanticsError):
            get_serialisable_reasoner("XYZ")

    def test_known_tag_without_serialisation(self):
        from serialis.argumentation import UnsupportedSemanticsError, get_serialisable_reasoner
        with pytest.raises(UnsupportedSemanticsError) as info:
            get_serialisable_reasoner("CF")
        assert "PR" in info.value.supported

    def test_error_is_a_value_error(self):
        from serialis.argumentation import get_serialisable_reasoner
        with pytest.raises(ValueError):
            get_serialisable_reasoner("SST")

    def test_semantics_tag_is_resolved(self):
        from serialis.argumentation import Semantics, get_serialisable_reasoner
        assert get_serialisable_reasoner("gr").semantics is Semantics.GROUNDED
        assert get_serialisable_reasoner(Semantics.STABLE).semantics is Semantics.STABLE

    def test_selection_function(self):
        from serialis.argumentation import get_serialisable_reasoner
        ua, uc, c = (_ext("a"),), (_ext("b"),), (_ext("c"),)
        assert tuple(get_serialisable_reasoner("GR").selection_function(ua, uc, c)) == ua
        assert tuple(get_serialisable_reasoner("UC").selection_function(ua, uc, c)) == ua + uc
        assert tuple(get_serialisable_reasoner("PR").selection_function(ua, uc, c)) == ua + uc + c

    def test_termination_function(self):
        from serialis.argumentation import TransitionState, get_serialisable_reasoner
        root = TransitionState.initial(_af(*CHAIN))
        assert get_serialisable_reasoner("ADM").termination_function(root) is True
        assert get_serialisable_reasoner("CO").termination_function(root) is False
        assert get_serialisable_reasoner("ST").termination_function(root) is False
        done = root.next(_ext("a")).next(_ext("c")).next(_ext("e"))
        assert get_serialisable_reasoner("ST").termination_function(done) is True


# ── Extensions ─────────────────────────────────────────────────

class TestSerialisableExtensions:
    def test_chain(self):
        """a → b → c → d → e: every semantics settles on {a, c, e}"""
        af = _af(*CHAIN)
        for tag in ("GR", "CO", "PR", "ST"):
            assert _models(tag, af) == {_ext("a", "c", "e")}
        assert _models("ADM", af) == {_ext(), _ext("a"), _ext("a", "c"), _ext("a", "c", "e")}

    def test_mutual_attack(self):
        af = _af(*MUTUAL)
        assert _models("ST", af) == {_ext("a"), _ext("b")}
        assert _models("PR", af) == {_ext("a"), _ext("b")}
        assert _models("GR", af) == {_ext()}
        assert _models("CO", af) == {_ext(), _ext("a"), _ext("b")}
        assert _models("UC", af) == {_ext()}

    def test_odd_cycle_has_no_stable_extension(self):
        af = _af(*ODD_CYCLE)
        assert _models("ST", af) == set()
        assert _models("PR", af) == {_ext()}
        assert _models("GR", af) == {_ext()}

    def test_unchallenged_initial_set(self):
        """a ↔ b, b → b: {a} is unchallenged"""
        af = _af(["a", "b"], [("a", "b"), ("b", "a"), ("b", "b")])
        assert _models("UC", af) == {_ext("a")}
        assert _models("GR", af) == {_ext()}
        assert _models("PR", af) == {_ext("a")}
        assert _models("ST", af) == {_ext("a")}

    def test_strong_admissibility(self):
        af = _af(*CHAIN)
        assert _models("SAD", af) == {_ext(), _ext("a"), _ext("a", "c"), _ext("a", "c", "e")}
        assert _models("SAD", _af(*MUTUAL)) == {_ext()}

    def test_empty_framework(self):
        from serialis.argumentation import SUPPORTED_SEMANTICS
        for tag in SUPPORTED_SEMANTICS:
            assert _models(tag, _af([])) == {_ext()}

    def test_get_model(self):
        from serialis.argumentation import get_serialisable_reasoner
        assert get_serialisable_reasoner("PR").get_model(_af(*MUTUAL)) == _ext("a")
        assert get_serialisable_reasoner("ST").get_model(_af(*ODD_CYCLE)) is None

    def test_query(self):
        from serialis.argumentation import InferenceMode, get_serialisable_reasoner
        reasoner = get_serialisable_reasoner("PR")
        af = _af(*MUTUAL)
        assert reasoner.query(af, "a", InferenceMode.CREDULOUS) is True
        assert reasoner.query(af, "a", InferenceMode.SCEPTICAL) is False
        assert reasoner.query(_af(*CHAIN), "c", "sceptical") is True
        assert reasoner.query(_af(*CHAIN), "b", "credulous") is False

    def test_results_are_repeatable(self):
        from serialis.argumentation import get_serialisable_reasoner
        reasoner = get_serialisable_reasoner("CO")
        for af in _generated(count=5, seed=3):
            assert reasoner.get_models(af) == reasoner.get_models(af)

    def test_one_reasoner_serves_concurrent_calls(self):
        from concurrent.futures import ThreadPoolExecutor

        from serialis.argumentation import ExtensionRankingReasoner, get_serialisable_reasoner
        reasoner = get_serialisable_reasoner("PR")
        ranking = ExtensionRankingReasoner("R_GR")
        frameworks = _generated(count=8, seed=21, n=4, p=0.35)

        expected_models = [reasoner.get_models(af) for af in frameworks]
        expected_ranks = [ranking.get_models(af) for af in frameworks]
        with ThreadPoolExecutor(max_workers=4) as pool:
            models = list(pool.map(reasoner.get_models, frameworks))
            ranks = list(pool.map(ranking.get_models, frameworks))

        assert models == expected_models
        assert [[set(r) for r in rs] for rs in ranks] == [[set(r) for r in rs] for rs in expected_ranks]

    def test_input_framework_is_not_modified(self):
        af = _af(*CHAIN)
        before = (af.arguments, af.attacks)
        _models("PR", af)
        assert (af.arguments, af.attacks) == before
        assert not af.is_frozen


# ── Agreement with the classical definitions ───────────────────

class TestClassicalAgreement:
    def _engine(self):
        from serialis.argumentation import ArgumentationEngine
        return ArgumentationEngine()

    def test_grounded_is_least_fixpoint(self):
        engine = self._engine()
        for af in _generated(seed=1):
            assert _models("GR", af) == {engine.grounded_extension(af)}

    def test_admissible_extensions(self):
        engine = self._engine()
        for af in _generated(seed=2):
            models = _models("ADM", af)
            for ext in models:
                assert engine.is_admissible(af, ext)
            assert models == engine.admissible_sets(af)

    def test_complete_extensions(self):
        engine = self._engine()
        for af in _generated(seed=4):
            assert _models("CO", af) == engine.complete_extensions(af)

    def test_preferred_extensions(self):
        engine = self._engine()
        for af in _generated(seed=5, p=0.4):
            assert _models("PR", af) == engine.preferred_extensions(af)

    def test_stable_extensions_leave_empty_reduct(self):
        engine = self._engine()
        for af in _generated(seed=6, p=0.4):
            models = _models("ST", af)
            for ext in models:
                assert af.reduct(ext).is_empty()
            assert models == engine.stable_extensions(af)

    def test_grounded_is_contained_in_every_complete(self):
        for af in _generated(seed=8):
            (grounded,) = _models("GR", af)
            assert all(grounded <= ext for ext in _models("CO", af))


# ── Analysis ───────────────────────────────────────────────────

class TestAnalysis:
    def _analyse(self, semantics, af):
        from serialis.argumentation import get_analysis_reasoner
        return get_analysis_reasoner(semantics).get_models_with_analysis(af)

    def test_chain_graph(self):
        from serialis.argumentation import TransitionState
        af = _af(*CHAIN)
        analysis = self._analyse("GR", af)
        graph = analysis.graph

        assert analysis.root == TransitionState.initial(af)
        assert graph.root == analysis.root
        assert analysis.extensions == frozenset({_ext("a", "c", "e")})
        assert graph.number_of_nodes() == 4
        assert graph.number_of_edges() == 3
        labels = sorted(str(data["initial_set"]) for _, _, data in graph.edges(data=True))
        assert labels == ["{a}", "{c}", "{e}"]

    def test_chain_sequences(self):
        analysis = self._analyse("GR", _af(*CHAIN))
        graph = analysis.graph
        (final,) = graph.accepted_states()
        assert final.extension == _ext("a", "c", "e")
        assert graph.leaves() == {final}
        assert graph.serialisation_sequences(final) == [[_ext("a"), _ext("c"), _ext("e")]]
        assert graph.serialisation_sequences(graph.root) == [[]]

    def test_unknown_state_has_no_sequences(self):
        from serialis.argumentation import TransitionState
        analysis = self._analyse("GR", _af(*CHAIN))
        with pytest.raises(ValueError):
            analysis.graph.serialisation_sequences(TransitionState.initial(_af(*MUTUAL)))

    def test_mutual_attack_branches(self):
        analysis = self._analyse("CO", _af(*MUTUAL))
        graph = analysis.graph
        assert graph.number_of_nodes() == 3
        assert len(analysis.sub_analyses) == 2
        assert {child.extension for child in graph.children(graph.root)} == {_ext("a"), _ext("b")}
        assert {s.extension for s in graph.accepted_states()} == {_ext(), _ext("a"), _ext("b")}

    def test_sub_analyses_root_at_children(self):
        analysis = self._analyse("PR", _af(*MUTUAL))
        for sub in analysis.sub_analyses:
            assert analysis.graph.has_edge(analysis.root, sub.root)
            assert sub.extensions <= analysis.extensions

    def test_shared_states_are_merged(self):
        """a and b both unattacked: {a,b} is reached via {a} and via {b}"""
        analysis = self._analyse("GR", _af(["a", "b"]))
        graph = analysis.graph
        (final,) = [s for s in graph.nodes if s.extension == _ext("a", "b")]
        assert graph.in_degree(final) == 2
        assert len(graph.serialisation_sequences(final)) == 2
        assert analysis.extensions == frozenset({_ext("a", "b")})

    def test_agrees_with_plain_reasoner(self):
        from serialis.argumentation import SUPPORTED_SEMANTICS
        for af in _generated(count=6, seed=9, p=0.35):
            for tag in SUPPORTED_SEMANTICS:
                assert set(self._analyse(tag, af).extensions) == _models(tag, af)

    def test_to_dict(self):
        data = self._analyse("GR", _af(*CHAIN)).to_dict()
        assert data["semantics"] == "GR"
        assert data["extensions"] == [["a", "c", "e"]]
        assert data["num_states"] == 4
        graph = data["graph"]
        assert graph["root"] == 0
        assert len(graph["nodes"]) == 4
        assert [e["initial_set"] for e in graph["edges"]] == [["a"], ["c"], ["e"]]


# ── Equivalence & Examples ─────────────────────────────────────

class TestEquivalenceAndExamples:
    def test_standard_equivalence(self):
        from serialis.argumentation import StandardEquivalence, get_serialisable_reasoner
        eq = StandardEquivalence(get_serialisable_reasoner("GR"))
        # both have grounded extension {a}
        assert eq.is_equivalent(_af(["a"]), _af(["a", "b"], [("a", "b")]))
        assert not eq.is_equivalent(_af(["a"]), _af(*MUTUAL))
        assert eq.are_equivalent([])
        assert eq.are_equivalent([_af(["a"]), _af(["a"]), _af(["a", "b"], [("a", "b")])])

    def test_generator_is_seeded(self):
        assert _generated(count=3, seed=42) == _generated(count=3, seed=42)

    def test_generator_probability_bounds(self):
        from serialis.argumentation import FrameworkGenerator, GenerationParameters
        none = FrameworkGenerator(GenerationParameters(4, 0.0), seed=1).next()
        full = FrameworkGenerator(GenerationParameters(4, 1.0), seed=1).next()
        assert none.attacks == frozenset()
        assert len(full.attacks) == 4 * 3
        assert all(att.attacker != att.attacked for att in full.attacks)
        assert [a.name for a in full] == ["a1", "a2", "a3", "a4"]

    def test_generation_parameters_are_validated(self):
        from serialis.argumentation import GenerationParameters
        with pytest.raises(ValueError):
            GenerationParameters(3, 1.5)
        with pytest.raises(ValueError):
            GenerationParameters(-1, 0.5)

    def test_example_finder(self):
        from serialis.argumentation import Semantics, SerialisabilityExampleFinder
        finder = SerialisabilityExampleFinder(number_of_arguments=4, attack_probability=0.3, seed=5)
        examples = finder.find_examples_for_semantics(["GR", "PR"], count=2)
        assert len(examples) == 2
        for af, analyses in examples:
            assert len(af) == 4
            assert set(analyses) == {Semantics.GROUNDED, Semantics.PREFERRED}
            assert len(analyses[Semantics.GROUNDED].extensions) == 1

        single = finder.find_example("ST", number_of_arguments=3)
        assert len(single.framework) == 3
