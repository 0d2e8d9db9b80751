"""Per-line scansion under a poem's classification."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from scansion.config import DEFAULT_SETTINGS, ClassifierSettings

from .classifier import PoemClassification
from .meters import fit_line, match_template, resolve_pattern
from .pronunciations import PronunciationStore
from .resolver import LineProfile, StressResolver


@dataclass(frozen=True)
class LineScanResult:
    """Scansion of one line.

    ``raw_pattern`` is the purely lexical stress string; ``pattern`` is the
    same line after flexible syllables took the stress their metrical slot
    asks for. Both are exactly ``syllable_count`` characters long.
    """

    pattern: str
    raw_pattern: str
    syllable_count: int
    substitutions: Tuple[str, ...] = ()
    mismatches: Tuple[int, ...] = ()
    foot_count: int = 0
    follows_meter: bool = True
    deviation: Optional[str] = None

    def to_dict(self) -> Dict[str, object]:
        return {
            "pattern": self.pattern,
            "raw_pattern": self.raw_pattern,
            "syllable_count": self.syllable_count,
            "substitutions": list(self.substitutions),
            "mismatches": list(self.mismatches),
            "foot_count": self.foot_count,
            "follows_meter": self.follows_meter,
            "deviation": self.deviation,
        }


class LineScanner:
    def __init__(
        self,
        resolver: Optional[StressResolver] = None,
        settings: Optional[ClassifierSettings] = None,
        store: Optional[PronunciationStore] = None,
    ) -> None:
        self.settings = settings or DEFAULT_SETTINGS
        self.resolver = resolver or StressResolver(store, settings=self.settings)

    def scan(self, line: str, classification: PoemClassification) -> LineScanResult:
        self.resolver.store.require_ready()
        return self.scan_profile(self.resolver.profile_line(line), classification)

    def scan_profile(
        self, profile: LineProfile, classification: PoemClassification
    ) -> LineScanResult:
        raw = profile.raw_pattern
        count = profile.syllable_count
        if not count:
            return LineScanResult("", "", 0, follows_meter=False)

        hypothesis = classification.hypothesis
        if hypothesis is None:
            return LineScanResult(
                pattern=raw,
                raw_pattern=raw,
                syllable_count=count,
                foot_count=math.ceil(count / 2),
                deviation="free_verse",
            )

        fit = fit_line(hypothesis, profile)
        if fit is None:
            _, mismatches = match_template(hypothesis.template, profile)
            return LineScanResult(
                pattern=resolve_pattern(hypothesis.template, profile),
                raw_pattern=raw,
                syllable_count=count,
                mismatches=mismatches,
                foot_count=math.ceil(count / hypothesis.base.foot_length),
                follows_meter=False,
                deviation="irregular",
            )

        labels = fit.alignment.labels
        if labels:
            deviation: Optional[str] = labels[0]
        else:
            deviation = "substitution" if fit.mismatches else None
        return LineScanResult(
            pattern=resolve_pattern(fit.alignment.template, profile),
            raw_pattern=raw,
            syllable_count=count,
            substitutions=labels,
            mismatches=fit.mismatches,
            foot_count=hypothesis.feet,
            follows_meter=len(fit.mismatches) <= self.settings.max_line_mismatch_ratio * count,
            deviation=deviation,
        )


__all__ = ["LineScanResult", "LineScanner"]
