"""Whole-poem analysis: classification plus per-line scansion."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from scansion.config import DEFAULT_SETTINGS, ClassifierSettings
from scansion.utils.observability import get_logger

from .classifier import MeterClassifier, PoemClassification
from .pronunciations import DEFAULT_STORE, DictionarySource, PronunciationStore
from .resolver import StressResolver
from .scanner import LineScanner, LineScanResult


@dataclass(frozen=True)
class PoemAnalysis:
    classification: PoemClassification
    lines: Tuple[LineScanResult, ...]
    texts: Tuple[str, ...] = ()

    @property
    def overall_accuracy(self) -> float:
        """Share of scanned lines that follow the detected meter."""

        if not self.lines:
            return 0.0
        return sum(1 for line in self.lines if line.follows_meter) / len(self.lines)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "classification": self.classification.to_dict(),
            "overall_accuracy": self.overall_accuracy,
            "lines": [
                dict(line.to_dict(), text=self.texts[index] if index < len(self.texts) else "")
                for index, line in enumerate(self.lines)
            ],
        }


class MeterAnalyzer:
    """Resolver, classifier and scanner wired to one store and one settings object."""

    def __init__(
        self,
        store: Optional[PronunciationStore] = None,
        settings: Optional[ClassifierSettings] = None,
    ) -> None:
        self.store = store if store is not None else DEFAULT_STORE
        self.settings = settings or DEFAULT_SETTINGS
        self.resolver = StressResolver(self.store, settings=self.settings)
        self.classifier = MeterClassifier(self.resolver, self.settings)
        self.scanner = LineScanner(self.resolver, self.settings)
        self._logger = get_logger(__name__).bind(component="meter_analyzer")

    def load_dictionary(self, source: DictionarySource = None) -> None:
        self.store.load(source)

    def inject_dictionary(self, mapping: Mapping[str, Iterable[object]], *, replace: bool = False) -> None:
        self.store.inject(mapping, replace=replace)

    def stress_of(self, word: str) -> List[int]:
        return self.resolver.stress_of(word)

    def syllable_count_of(self, word: str) -> int:
        return self.resolver.syllable_count_of(word)

    def classify_poem(self, text: str) -> PoemClassification:
        return self.classifier.classify(text)

    def scan_line(self, line: str, classification: PoemClassification) -> LineScanResult:
        return self.scanner.scan(line, classification)

    def analyze_poem(self, text: str) -> PoemAnalysis:
        classification = self.classifier.classify(text)
        texts = tuple(line for line in (text or "").splitlines() if line.strip())
        results = tuple(self.scanner.scan(line, classification) for line in texts)
        analysis = PoemAnalysis(classification, results, texts)
        self._logger.debug(
            "Poem analysed",
            context={
                "meter": classification.meter_name,
                "lines": len(results),
                "overall_accuracy": round(analysis.overall_accuracy, 3),
            },
        )
        return analysis


def format_poem_analysis(analysis: PoemAnalysis) -> str:
    """Render a plain-text report: header, then one row per scanned line."""

    classification = analysis.classification
    parts: List[str] = []
    parts.append(f"Detected meter: {classification.meter_name}")
    if classification.is_metrical:
        parts.append(f"Confidence: {classification.confidence * 100:.1f}%")
        parts.append(f"Regularity: {classification.regularity_score}%")
    parts.append(f"Lines following meter: {analysis.overall_accuracy * 100:.1f}%")
    parts.append("")

    for index, line in enumerate(analysis.lines, start=1):
        status = "✓" if line.follows_meter else "✗"
        if line.deviation and line.deviation != "free_verse":
            status += f" ({line.deviation})"
        parts.append(f"{index}. {line.pattern} {status}")

    return "\n".join(parts)


__all__ = ["MeterAnalyzer", "PoemAnalysis", "format_poem_analysis"]
