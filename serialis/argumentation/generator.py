"""
Random frameworks and serialisation examples.

FrameworkGenerator draws frameworks with arguments a1..an where each
ordered pair is an attack with a fixed probability.
SerialisabilityExampleFinder runs the analysing reasoner on generated
frameworks, e.g. to collect derivation graphs for teaching material.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Iterable, Union

from .analysis import TransitionStateAnalysis, get_analysis_reasoner
from .models import ArgumentationFramework, Semantics

logger = logging.getLogger("serialis.argumentation.generator")

DEFAULT_NUMBER_OF_ARGUMENTS = 5
DEFAULT_ATTACK_PROBABILITY = 0.5


@dataclass
class GenerationParameters:
    number_of_arguments: int = DEFAULT_NUMBER_OF_ARGUMENTS
    attack_probability: float = DEFAULT_ATTACK_PROBABILITY
    avoid_self_attacks: bool = True

    def __post_init__(self):
        if self.number_of_arguments < 0:
            raise ValueError("number_of_arguments must be >= 0")
        if not 0.0 <= self.attack_probability <= 1.0:
            raise ValueError("attack_probability must be within [0, 1]")


class FrameworkGenerator:
    """Erdős–Rényi style generator for argumentation frameworks."""

    def __init__(
        self,
        parameters: GenerationParameters | None = None,
        seed: int | None = None,
    ):
        self.parameters = parameters or GenerationParameters()
        self._rng = random.Random(seed)

    def set_seed(self, seed: int) -> None:
        self._rng.seed(seed)

    def next(self, number_of_arguments: int | None = None) -> ArgumentationFramework:
        n = self.parameters.number_of_arguments if number_of_arguments is None else number_of_arguments
        names = [f"a{i}" for i in range(1, n + 1)]
        af = ArgumentationFramework(names)
        for attacker in names:
            for attacked in names:
                if attacker == attacked and self.parameters.avoid_self_attacks:
                    continue
                if self._rng.random() < self.parameters.attack_probability:
                    af.add_attack(attacker, attacked)
        return af.freeze()

    def __iter__(self):
        while True:
            yield self.next()


class SerialisabilityExampleFinder:
    """Analyses of randomly generated frameworks."""

    def __init__(
        self,
        number_of_arguments: int = DEFAULT_NUMBER_OF_ARGUMENTS,
        attack_probability: float = DEFAULT_ATTACK_PROBABILITY,
        avoid_self_attacks: bool = True,
        seed: int | None = None,
    ):
        self.parameters = GenerationParameters(
            number_of_arguments=number_of_arguments,
            attack_probability=attack_probability,
            avoid_self_attacks=avoid_self_attacks,
        )
        self.generator = FrameworkGenerator(self.parameters, seed=seed)

    def find_example(
        self,
        semantics: Union[str, Semantics],
        number_of_arguments: int | None = None,
    ) -> TransitionStateAnalysis:
        reasoner = get_analysis_reasoner(semantics)
        return reasoner.get_models_with_analysis(self.generator.next(number_of_arguments))

    def find_examples(
        self,
        semantics: Union[str, Semantics],
        count: int,
        number_of_arguments: int | None = None,
    ) -> list[TransitionStateAnalysis]:
        reasoner = get_analysis_reasoner(semantics)
        return [
            reasoner.get_models_with_analysis(self.generator.next(number_of_arguments))
            for _ in range(count)
        ]

    def find_examples_for_semantics(
        self,
        semantics: Iterable[Union[str, Semantics]],
        count: int,
        number_of_arguments: int | None = None,
    ) -> list[tuple[ArgumentationFramework, dict[Semantics, TransitionStateAnalysis]]]:
        """One framework per example, analysed under every given semantics."""
        reasoners = [get_analysis_reasoner(s) for s in semantics]
        results = []
        for _ in range(count):
            af = self.generator.next(number_of_arguments)
            results.append((
                af,
                {r.semantics: r.get_models_with_analysis(af) for r in reasoners},
            ))
        logger.info(f"Generated {len(results)} examples for {len(reasoners)} semantics")
        return results
