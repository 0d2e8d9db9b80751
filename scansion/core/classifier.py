"""Poem-level meter classification.

Every ``(base, feet)`` hypothesis is scored by the share of syllable
positions whose stress agrees with its best alignment, line by line. The best
foot count of each base competes for the poem; the winner is metrical when
its score and its line-length regularity clear the configured thresholds.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from scansion.config import DEFAULT_SETTINGS, ClassifierSettings
from scansion.utils.observability import (
    add_span_attributes,
    create_counter,
    get_logger,
    start_span,
)

from .meters import (
    METER_BASES,
    METER_BASES_BY_NAME,
    LineFit,
    MeterBase,
    MeterHypothesis,
    compare_prefix,
    fit_line,
    foot_names,
    resolve_pattern,
    segment_feet,
)
from .pronunciations import PronunciationStore
from .resolver import LineProfile, StressResolver

FREE_VERSE = "free verse"

_CLASSIFIED = create_counter(
    "scansion_poems_classified_total",
    "Poems classified, by result.",
    ("result",),
)


@dataclass(frozen=True)
class ClassificationEvidence:
    iambic_score: float = 0.0
    trochaic_score: float = 0.0
    anapestic_score: float = 0.0
    dactylic_score: float = 0.0
    free_verse_score: float = 0.0
    reasoning: Tuple[str, ...] = ()

    def score_for(self, base: str) -> float:
        return float(getattr(self, f"{base}_score", 0.0))


@dataclass(frozen=True)
class PoemClassification:
    meter_base: Optional[str]
    foot_count: Optional[int]
    confidence: float
    is_metrical: bool
    regularity_score: int
    # Read-only views, left out of the hash.
    syllable_distribution: Mapping[int, int] = field(hash=False)
    foot_type_distribution: Mapping[str, int] = field(hash=False)
    evidence: ClassificationEvidence

    @property
    def hypothesis(self) -> Optional[MeterHypothesis]:
        if not self.is_metrical or self.meter_base is None or not self.foot_count:
            return None
        return MeterHypothesis(METER_BASES_BY_NAME[self.meter_base], self.foot_count)

    @property
    def meter_name(self) -> str:
        hypothesis = self.hypothesis
        return hypothesis.name if hypothesis else FREE_VERSE

    @property
    def nominal_syllables(self) -> Optional[int]:
        hypothesis = self.hypothesis
        return hypothesis.nominal_syllables if hypothesis else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "meter_base": self.meter_base,
            "foot_count": self.foot_count,
            "meter_name": self.meter_name,
            "confidence": self.confidence,
            "is_metrical": self.is_metrical,
            "regularity_score": self.regularity_score,
            "syllable_distribution": dict(self.syllable_distribution),
            "foot_type_distribution": dict(self.foot_type_distribution),
            "evidence": {
                "iambic_score": self.evidence.iambic_score,
                "trochaic_score": self.evidence.trochaic_score,
                "anapestic_score": self.evidence.anapestic_score,
                "dactylic_score": self.evidence.dactylic_score,
                "free_verse_score": self.evidence.free_verse_score,
                "reasoning": list(self.evidence.reasoning),
            },
        }


@dataclass
class HypothesisScore:
    """Aggregate agreement of a poem with one hypothesis."""

    hypothesis: MeterHypothesis
    matches: int = 0
    compared: int = 0
    events: int = 0
    regularity: int = 0
    fits: List[Tuple[LineProfile, Optional[LineFit]]] = field(default_factory=list)

    @property
    def score(self) -> float:
        return self.matches / self.compared if self.compared else 0.0


def _read_only(mapping: Mapping[Any, int]) -> Mapping[Any, int]:
    return MappingProxyType(dict(mapping))


def _percent(part: int, whole: int) -> int:
    return int(round(100.0 * part / whole)) if whole else 0


class MeterClassifier:
    """Classify a poem's dominant meter from the stresses of its lines."""

    def __init__(
        self,
        resolver: Optional[StressResolver] = None,
        settings: Optional[ClassifierSettings] = None,
        store: Optional[PronunciationStore] = None,
        bases: Sequence[MeterBase] = METER_BASES,
    ) -> None:
        self.settings = settings or DEFAULT_SETTINGS
        self.resolver = resolver or StressResolver(store, settings=self.settings)
        self.bases = tuple(bases)
        self._logger = get_logger(__name__).bind(component="meter_classifier")

    # Hypothesis scoring ------------------------------------------------------
    def score_hypothesis(
        self,
        hypothesis: MeterHypothesis,
        scored: Sequence[LineProfile],
        profiles: Sequence[LineProfile],
    ) -> HypothesisScore:
        result = HypothesisScore(hypothesis)
        for profile in scored:
            fit = fit_line(hypothesis, profile)
            result.fits.append((profile, fit))
            if fit is not None:
                result.matches += fit.matches
                # Slots dropped by contracted feet still count as compared.
                result.compared += profile.syllable_count + fit.alignment.dropped
                result.events += fit.alignment.events
            else:
                matches, denominator = compare_prefix(hypothesis, profile)
                result.matches += matches
                result.compared += denominator

        nominal = hypothesis.nominal_syllables
        within = sum(1 for profile in profiles if abs(profile.syllable_count - nominal) <= 1)
        result.regularity = _percent(within, len(profiles))
        return result

    def best_for_base(
        self,
        base: MeterBase,
        scored: Sequence[LineProfile],
        profiles: Sequence[LineProfile],
        dominant: int,
    ) -> HypothesisScore:
        candidates = [
            self.score_hypothesis(MeterHypothesis(base, feet), scored, profiles)
            for feet in range(1, self.settings.max_feet + 1)
        ]
        return min(
            candidates,
            key=lambda item: (
                -item.score,
                item.events,
                abs(item.hypothesis.nominal_syllables - dominant),
                item.hypothesis.feet,
            ),
        )

    def pick_winner(self, bests: Sequence[HypothesisScore]) -> HypothesisScore:
        """Highest score; near-ties go to fewer substitutions, then base order."""

        top = max(item.score for item in bests)
        contenders = [
            (item.events, order, item)
            for order, item in enumerate(bests)
            if top - item.score <= self.settings.tie_epsilon
        ]
        return min(contenders, key=lambda entry: entry[:2])[2]

    # Classification ----------------------------------------------------------
    def profile_poem(self, text: str) -> List[LineProfile]:
        profiles = [self.resolver.profile_line(line) for line in (text or "").splitlines() if line.strip()]
        return [profile for profile in profiles if profile.syllable_count]

    def is_short_line_poem(self, profiles: Sequence[LineProfile]) -> bool:
        counts = [profile.syllable_count for profile in profiles]
        average = sum(counts) / len(counts)
        short = sum(1 for count in counts if count <= 4)
        return (
            average < self.settings.short_line_average
            and short / len(counts) > self.settings.short_line_ratio
        )

    def classify(self, text: str) -> PoemClassification:
        self.resolver.store.require_ready()
        with start_span("scansion.classify") as span:
            profiles = self.profile_poem(text)
            add_span_attributes(span, {"lines": len(profiles)})
            if not profiles:
                _CLASSIFIED.labels(result="empty").inc()
                return self._empty_classification()

            classification = self._classify_profiles(profiles)
            add_span_attributes(
                span,
                {
                    "meter": classification.meter_name,
                    "confidence": classification.confidence,
                    "regularity": classification.regularity_score,
                },
            )

        _CLASSIFIED.labels(result="metrical" if classification.is_metrical else "free_verse").inc()
        self._logger.info(
            "Poem classified",
            context={
                "meter": classification.meter_name,
                "confidence": round(classification.confidence, 3),
                "regularity": classification.regularity_score,
                "lines": len(profiles),
            },
        )
        return classification

    def _empty_classification(self) -> PoemClassification:
        return PoemClassification(
            meter_base=None,
            foot_count=None,
            confidence=0.0,
            is_metrical=False,
            regularity_score=0,
            syllable_distribution=_read_only({}),
            foot_type_distribution=_read_only({}),
            evidence=ClassificationEvidence(reasoning=("No resolvable lines",)),
        )

    def _classify_profiles(self, profiles: Sequence[LineProfile]) -> PoemClassification:
        settings = self.settings
        counts = Counter(profile.syllable_count for profile in profiles)
        dominant, dominant_lines = counts.most_common(1)[0]
        scored = [p for p in profiles if p.syllable_count >= settings.min_line_syllables]

        bests = [self.best_for_base(base, scored, profiles, dominant) for base in self.bases]
        winner = self.pick_winner(bests)
        best_regularity = max(item.regularity for item in bests)
        free_verse_score = 1.0 - best_regularity / 100.0
        short_lines = self.is_short_line_poem(profiles)

        is_metrical = (
            bool(scored)
            and winner.score >= settings.min_confidence
            and winner.regularity >= settings.min_regularity
            and not short_lines
        )

        reasoning: List[str] = [
            f"{item.hypothesis.base.name.capitalize()}: {item.score:.0%} stress agreement "
            f"as {item.hypothesis.name}"
            for item in bests
        ]
        reasoning.append(
            f"Most common line length: {dominant} syllables ({dominant_lines} of {len(profiles)} lines)"
        )

        foot_types: Dict[str, int] = {}
        if is_metrical:
            foot_types = self._foot_type_distribution(winner)
            reasoning.append(self._regularity_reason(winner, profiles))
            reasoning.extend(self._substitution_reasons(winner))
        elif not scored:
            reasoning.append(
                f"No line reaches {settings.min_line_syllables} syllables; nothing to scan metrically"
            )
        elif short_lines:
            average = sum(p.syllable_count for p in profiles) / len(profiles)
            reasoning.append(
                f"Lines are short and uneven (average {average:.1f} syllables); read as free verse"
            )
        elif winner.score < settings.min_confidence:
            reasoning.append(
                f"Best stress agreement {winner.score:.0%} is below the "
                f"{settings.min_confidence:.0%} needed for a regular meter"
            )
        else:
            reasoning.append(
                f"Only {winner.regularity}% of lines fit {winner.hypothesis.name}; "
                f"{settings.min_regularity}% needed for a regular meter"
            )

        scores = {item.hypothesis.base.name: round(item.score, 4) for item in bests}
        evidence = ClassificationEvidence(
            iambic_score=scores.get("iambic", 0.0),
            trochaic_score=scores.get("trochaic", 0.0),
            anapestic_score=scores.get("anapestic", 0.0),
            dactylic_score=scores.get("dactylic", 0.0),
            free_verse_score=round(free_verse_score, 4),
            reasoning=tuple(reasoning),
        )

        return PoemClassification(
            meter_base=winner.hypothesis.base.name if is_metrical else None,
            foot_count=winner.hypothesis.feet if is_metrical else None,
            confidence=round(winner.score if is_metrical else free_verse_score, 4),
            is_metrical=is_metrical,
            regularity_score=winner.regularity,
            syllable_distribution=_read_only(dict(sorted(counts.items()))),
            foot_type_distribution=_read_only(foot_types),
            evidence=evidence,
        )

    def _foot_type_distribution(self, winner: HypothesisScore) -> Dict[str, int]:
        tally: Counter = Counter()
        foot_length = winner.hypothesis.base.foot_length
        for profile, fit in winner.fits:
            if fit is None:
                continue
            pattern = resolve_pattern(fit.alignment.template, profile)
            tally.update(foot_names(segment_feet(pattern, fit.alignment, foot_length)))
            tally.update(fit.alignment.labels)
        return dict(tally.most_common())

    def _regularity_reason(self, winner: HypothesisScore, profiles: Sequence[LineProfile]) -> str:
        hypothesis = winner.hypothesis
        within = sum(
            1
            for profile in profiles
            if abs(profile.syllable_count - hypothesis.nominal_syllables) <= 1
        )
        return (
            f"{within} of {len(profiles)} lines fall within one syllable of "
            f"{hypothesis.nominal_syllables} syllables with {hypothesis.base.name} alternation"
        )

    def _substitution_reasons(self, winner: HypothesisScore) -> List[str]:
        labels: Counter = Counter()
        for _, fit in winner.fits:
            if fit is not None:
                labels.update(fit.alignment.labels)
        reasons = []
        for label, count in sorted(labels.items()):
            noun = "line shows" if count == 1 else "lines show"
            reasons.append(f"{count} {noun} {label.replace('_', ' ')}")
        return reasons


__all__ = [
    "ClassificationEvidence",
    "FREE_VERSE",
    "HypothesisScore",
    "MeterClassifier",
    "PoemClassification",
]
