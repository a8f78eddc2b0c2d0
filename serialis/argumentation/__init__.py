"""Argumentation core — serialisable semantics for Dung's AAF."""
from .analysis import (
    SerialisableExtensionReasonerWithAnalysis,
    SerialisationGraph,
    TransitionStateAnalysis,
    get_analysis_reasoner,
)
from .engine import ArgumentationEngine
from .errors import (
    ArgumentationError,
    FrameworkParseError,
    FrameworkTooLargeError,
    InvalidFrameworkError,
    UnsupportedSemanticsError,
)
from .formats import parse_apx, parse_framework, parse_tgf, write_apx, write_tgf
from .generator import FrameworkGenerator, GenerationParameters, SerialisabilityExampleFinder
from .initial_sets import InitialSetPartition, initial_sets, partition_initial_sets
from .models import (
    Argument,
    ArgumentationFramework,
    Attack,
    Extension,
    InferenceMode,
    RankingSemantics,
    Semantics,
    TransitionState,
)
from .ranking import ExtensionRankingReasoner
from .serialisable import (
    SUPPORTED_SEMANTICS,
    SerialisableExtensionReasoner,
    StandardEquivalence,
    get_serialisable_reasoner,
)

__all__ = [
    "ArgumentationEngine",
    "Argument",
    "ArgumentationFramework",
    "Attack",
    "Extension",
    "InferenceMode",
    "RankingSemantics",
    "Semantics",
    "TransitionState",
    "InitialSetPartition",
    "initial_sets",
    "partition_initial_sets",
    "SUPPORTED_SEMANTICS",
    "SerialisableExtensionReasoner",
    "StandardEquivalence",
    "get_serialisable_reasoner",
    "SerialisableExtensionReasonerWithAnalysis",
    "SerialisationGraph",
    "TransitionStateAnalysis",
    "get_analysis_reasoner",
    "ExtensionRankingReasoner",
    "FrameworkGenerator",
    "GenerationParameters",
    "SerialisabilityExampleFinder",
    "parse_apx",
    "parse_tgf",
    "parse_framework",
    "write_apx",
    "write_tgf",
    "ArgumentationError",
    "FrameworkParseError",
    "FrameworkTooLargeError",
    "InvalidFrameworkError",
    "UnsupportedSemanticsError",
]
