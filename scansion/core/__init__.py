"""Core meter classification and scansion components."""

from .analysis import MeterAnalyzer, PoemAnalysis, format_poem_analysis
from .classifier import (
    ClassificationEvidence,
    HypothesisScore,
    MeterClassifier,
    PoemClassification,
)
from .errors import DictionaryLoadError, ScansionError, StoreNotInitializedError, StoreWriteError
from .lexicon import FUNCTION_WORDS, tokenize_line
from .meters import METER_BASES, MeterBase, MeterHypothesis, line_name
from .pronunciations import DEFAULT_STORE, Pronunciation, PronunciationStore, StoreState
from .resolver import LineProfile, StressResolver, WordStress, first_success
from .scanner import LineScanner, LineScanResult

__all__ = [
    "ClassificationEvidence",
    "DEFAULT_STORE",
    "DictionaryLoadError",
    "FUNCTION_WORDS",
    "HypothesisScore",
    "LineProfile",
    "LineScanResult",
    "LineScanner",
    "METER_BASES",
    "MeterAnalyzer",
    "MeterBase",
    "MeterClassifier",
    "MeterHypothesis",
    "PoemAnalysis",
    "PoemClassification",
    "Pronunciation",
    "PronunciationStore",
    "ScansionError",
    "StoreNotInitializedError",
    "StoreState",
    "StoreWriteError",
    "StressResolver",
    "WordStress",
    "first_success",
    "format_poem_analysis",
    "line_name",
    "tokenize_line",
]
