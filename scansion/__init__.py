"""Poem meter classification and line scansion.

The module-level functions work against :data:`DEFAULT_STORE`, the
process-wide pronunciation store, unless a ``store`` is passed explicitly::

    import scansion

    scansion.load_dictionary()
    analysis = scansion.analyze_poem(text)
    print(scansion.format_poem_analysis(analysis))
"""

from __future__ import annotations

from typing import Iterable, List, Mapping, Optional

from .config import DEFAULT_SETTINGS, ClassifierSettings
from .core import (
    DEFAULT_STORE,
    ClassificationEvidence,
    DictionaryLoadError,
    LineScanResult,
    MeterAnalyzer,
    PoemAnalysis,
    PoemClassification,
    Pronunciation,
    PronunciationStore,
    ScansionError,
    StoreNotInitializedError,
    StoreWriteError,
    format_poem_analysis,
)
from .core.pronunciations import DictionarySource

_DEFAULT_ANALYZER: Optional[MeterAnalyzer] = None


def _analyzer(
    store: Optional[PronunciationStore] = None,
    settings: Optional[ClassifierSettings] = None,
) -> MeterAnalyzer:
    global _DEFAULT_ANALYZER

    if store is None and settings is None:
        if _DEFAULT_ANALYZER is None:
            _DEFAULT_ANALYZER = MeterAnalyzer(DEFAULT_STORE, DEFAULT_SETTINGS)
        return _DEFAULT_ANALYZER
    return MeterAnalyzer(store, settings)


def load_dictionary(
    source: DictionarySource = None, *, store: Optional[PronunciationStore] = None
) -> None:
    """Load the pronouncing dictionary once; concurrent callers share the load."""

    (store if store is not None else DEFAULT_STORE).load(source)


def inject_dictionary(
    mapping: Mapping[str, Iterable[object]],
    *,
    replace: bool = False,
    store: Optional[PronunciationStore] = None,
) -> None:
    (store if store is not None else DEFAULT_STORE).inject(mapping, replace=replace)


def classify_poem(
    text: str,
    *,
    settings: Optional[ClassifierSettings] = None,
    store: Optional[PronunciationStore] = None,
) -> PoemClassification:
    return _analyzer(store, settings).classify_poem(text)


def scan_line(
    line: str,
    classification: PoemClassification,
    *,
    settings: Optional[ClassifierSettings] = None,
    store: Optional[PronunciationStore] = None,
) -> LineScanResult:
    return _analyzer(store, settings).scan_line(line, classification)


def analyze_poem(
    text: str,
    *,
    settings: Optional[ClassifierSettings] = None,
    store: Optional[PronunciationStore] = None,
) -> PoemAnalysis:
    return _analyzer(store, settings).analyze_poem(text)


def syllable_count_of(word: str, *, store: Optional[PronunciationStore] = None) -> int:
    return _analyzer(store).syllable_count_of(word)


def stress_of(word: str, *, store: Optional[PronunciationStore] = None) -> List[int]:
    return _analyzer(store).stress_of(word)


__all__ = [
    "ClassificationEvidence",
    "ClassifierSettings",
    "DEFAULT_SETTINGS",
    "DEFAULT_STORE",
    "DictionaryLoadError",
    "LineScanResult",
    "MeterAnalyzer",
    "PoemAnalysis",
    "PoemClassification",
    "Pronunciation",
    "PronunciationStore",
    "ScansionError",
    "StoreNotInitializedError",
    "StoreWriteError",
    "analyze_poem",
    "classify_poem",
    "format_poem_analysis",
    "inject_dictionary",
    "load_dictionary",
    "scan_line",
    "stress_of",
    "syllable_count_of",
]
