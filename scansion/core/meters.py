"""Meter bases, hypotheses and line alignments.

A template is a string over ``u`` (unstressed slot) and ``/`` (stressed
slot). A hypothesis ``(base, feet)`` has the template ``foot * feet``; the
alignments of a hypothesis are the template and its recognised variants
(inverted first foot, feminine ending, anacrusis, headless line, for
falling meters catalexis, and for triple meters feet contracted to two
syllables), each of which a line of matching length may be
scanned against.
"""

from __future__ import annotations

from dataclasses import dataclass
from itertools import combinations
from typing import Dict, List, Optional, Sequence, Tuple

from .resolver import LineProfile

STRESSED = "/"
UNSTRESSED = "u"

FOOT_NAMES: Dict[str, str] = {
    "u/": "iamb",
    "/u": "trochee",
    "//": "spondee",
    "uu": "pyrrhic",
    "uu/": "anapest",
    "/uu": "dactyl",
    "u/u": "amphibrach",
    "/u/": "cretic",
    "u//": "bacchius",
    "//u": "antibacchius",
    "///": "molossus",
    "uuu": "tribrach",
}

LINE_NAMES: Dict[int, str] = {
    1: "monometer",
    2: "dimeter",
    3: "trimeter",
    4: "tetrameter",
    5: "pentameter",
    6: "hexameter",
    7: "heptameter",
    8: "octameter",
}


def line_name(feet: int) -> str:
    return LINE_NAMES.get(feet, f"{feet}-foot")


@dataclass(frozen=True)
class MeterBase:
    """A foot type that can dominate a poem."""

    name: str
    foot: str
    foot_name: str
    # Trailing syllables a regular (catalectic) line may drop.
    catalectic_cuts: Tuple[int, ...] = ()
    # Two-syllable stand-in for a non-final foot (spondee or trochee for a
    # dactyl, iamb for an anapest).
    contracted_foot: str = ""

    @property
    def foot_length(self) -> int:
        return len(self.foot)

    @property
    def is_duple(self) -> bool:
        return self.foot_length == 2


# Tie-break precedence is the tuple order.
METER_BASES: Tuple[MeterBase, ...] = (
    MeterBase("iambic", "u/", "iamb"),
    MeterBase("trochaic", "/u", "trochee", catalectic_cuts=(1,)),
    MeterBase("anapestic", "uu/", "anapest", contracted_foot="u/"),
    MeterBase("dactylic", "/uu", "dactyl", catalectic_cuts=(1, 2), contracted_foot="/u"),
)

METER_BASES_BY_NAME: Dict[str, MeterBase] = {base.name: base for base in METER_BASES}


@dataclass(frozen=True)
class MeterHypothesis:
    base: MeterBase
    feet: int

    @property
    def template(self) -> str:
        return self.base.foot * self.feet

    @property
    def nominal_syllables(self) -> int:
        return self.base.foot_length * self.feet

    @property
    def name(self) -> str:
        return f"{self.base.name} {line_name(self.feet)}"


@dataclass(frozen=True)
class Alignment:
    """One concrete slot template a line can be scanned against.

    ``offset`` is where the first full foot starts relative to the template:
    ``1`` after an anacrusis syllable, ``-1`` when a headless line lacks the
    opening slot.
    """

    template: str
    labels: Tuple[str, ...] = ()
    events: int = 0
    offset: int = 0
    # Unstressed slots removed by contracted feet.
    dropped: int = 0
    # Lengths of the complete feet, when they are not all the same.
    foot_lengths: Tuple[int, ...] = ()


@dataclass(frozen=True)
class LineFit:
    alignment: Alignment
    matches: int
    mismatches: Tuple[int, ...]


def _shapes(hypothesis: MeterHypothesis) -> List[Tuple[str, Tuple[str, ...]]]:
    template = hypothesis.template
    shapes = [(template, ())]
    for cut in hypothesis.base.catalectic_cuts:
        if len(template) > cut:
            shapes.append((template[:-cut], ("catalexis",)))
    return shapes


def _contracted(hypothesis: MeterHypothesis, length: int) -> List[Alignment]:
    """Alignments where some non-final feet lose one unstressed syllable."""

    base = hypothesis.base
    if not base.contracted_foot:
        return []

    found: List[Alignment] = []
    for cut in (0,) + base.catalectic_cuts:
        count = hypothesis.nominal_syllables - cut - length
        if count < 1 or count > hypothesis.feet - 1:
            continue
        for chosen in combinations(range(hypothesis.feet - 1), count):
            feet = [
                base.contracted_foot if index in chosen else base.foot
                for index in range(hypothesis.feet)
            ]
            template = "".join(feet)
            complete = feet
            if cut:
                template = template[:-cut]
                complete = feet[:-1]
            found.append(
                Alignment(
                    template,
                    ("contraction",) + (("catalexis",) if cut else ()),
                    events=count,
                    dropped=count,
                    foot_lengths=tuple(len(foot) for foot in complete),
                )
            )
    return found


def candidate_alignments(hypothesis: MeterHypothesis, length: int) -> List[Alignment]:
    """Return the alignments of ``hypothesis`` exactly ``length`` slots long.

    Catalectic shapes count as regular (no substitution event); every other
    variant costs one event, and each contracted foot costs one. Order is
    deterministic and, among alignments with the same template, only the one
    with fewest events is kept.
    """

    found: Dict[str, Alignment] = {}
    order: List[str] = []

    def offer(alignment: Alignment) -> None:
        if len(alignment.template) != length:
            return
        existing = found.get(alignment.template)
        if existing is None:
            order.append(alignment.template)
            found[alignment.template] = alignment
        elif alignment.events < existing.events:
            found[alignment.template] = alignment

    for shape, labels in _shapes(hypothesis):
        offer(Alignment(shape, labels))
        if hypothesis.base.is_duple and len(shape) >= 2:
            inverted = shape[1] + shape[0] + shape[2:]
            offer(Alignment(inverted, labels + ("inversion",), 1))
        if shape.endswith(STRESSED):
            offer(Alignment(shape + UNSTRESSED, labels + ("feminine_ending",), 1))
        offer(Alignment(UNSTRESSED + shape, labels + ("anacrusis",), 1, offset=1))
        if shape.startswith(UNSTRESSED) and len(shape) > 1:
            offer(Alignment(shape[1:], labels + ("headless",), 1, offset=-1))

    for alignment in _contracted(hypothesis, length):
        offer(alignment)

    return [found[template] for template in order]


def slot_agrees(slot: str, stressed: bool, flexible: bool) -> bool:
    return flexible or stressed == (slot == STRESSED)


def match_template(template: str, profile: LineProfile) -> Tuple[int, Tuple[int, ...]]:
    """Compare ``profile`` with ``template`` over their common prefix.

    Returns the number of agreeing positions and the positions where a
    fixed-stress syllable disagrees with its slot.
    """

    matches = 0
    mismatches: List[int] = []
    for index, (slot, stressed, flexible) in enumerate(
        zip(template, profile.stressed, profile.flexible)
    ):
        if slot_agrees(slot, stressed, flexible):
            matches += 1
        else:
            mismatches.append(index)
    return matches, tuple(mismatches)


def fit_line(hypothesis: MeterHypothesis, profile: LineProfile) -> Optional[LineFit]:
    """Best alignment of ``profile`` under ``hypothesis``, if any fits its length.

    Most agreeing positions wins, then fewest substitution events, then
    candidate order.
    """

    best: Optional[LineFit] = None
    for alignment in candidate_alignments(hypothesis, profile.syllable_count):
        matches, mismatches = match_template(alignment.template, profile)
        if (
            best is None
            or matches > best.matches
            or (matches == best.matches and alignment.events < best.alignment.events)
        ):
            best = LineFit(alignment, matches, mismatches)
    return best


def compare_prefix(hypothesis: MeterHypothesis, profile: LineProfile) -> Tuple[int, int]:
    """Agreement for a line no alignment fits: ``(matches, denominator)``."""

    matches, _ = match_template(hypothesis.template, profile)
    return matches, max(profile.syllable_count, hypothesis.nominal_syllables)


def resolve_pattern(template: str, profile: LineProfile) -> str:
    """Flexible syllables take their slot's value; fixed ones keep their own."""

    symbols: List[str] = []
    for index, (stressed, flexible) in enumerate(zip(profile.stressed, profile.flexible)):
        if flexible and index < len(template):
            symbols.append(template[index])
        else:
            symbols.append(STRESSED if stressed else UNSTRESSED)
    return "".join(symbols)


def segment_feet(pattern: str, alignment: Alignment, foot_length: int) -> List[str]:
    """Split ``pattern`` into the full feet implied by ``alignment``."""

    start = alignment.offset if alignment.offset >= 0 else foot_length + alignment.offset
    if alignment.foot_lengths:
        feet: List[str] = []
        for size in alignment.foot_lengths:
            if start + size > len(pattern):
                break
            feet.append(pattern[start : start + size])
            start += size
        return feet
    return [
        pattern[index : index + foot_length]
        for index in range(start, len(pattern) - foot_length + 1, foot_length)
    ]


def foot_names(feet: Sequence[str]) -> List[str]:
    return [FOOT_NAMES[foot] for foot in feet if foot in FOOT_NAMES]


__all__ = [
    "Alignment",
    "FOOT_NAMES",
    "LINE_NAMES",
    "LineFit",
    "METER_BASES",
    "METER_BASES_BY_NAME",
    "MeterBase",
    "MeterHypothesis",
    "candidate_alignments",
    "compare_prefix",
    "fit_line",
    "foot_names",
    "line_name",
    "match_template",
    "resolve_pattern",
    "segment_feet",
]
