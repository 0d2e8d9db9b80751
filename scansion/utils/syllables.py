"""Spelling-based syllable and stress estimation for out-of-dictionary words."""

from __future__ import annotations

import re
from typing import List, Optional


__all__ = ["estimate_syllable_count", "estimate_stress_pattern"]


_VOWEL_GROUP_PATTERN = re.compile(r"[aeiouy]+")
# "ia"/"io" inside a vowel run are usually two nuclei (li-on, pi-a-no) except
# in the -tion/-sion/-cial/-gion family.
_HIATUS_PATTERN = re.compile(r"(?<![tscgx])(?=(ia|io))")
_NON_LETTERS = re.compile(r"[^a-z]")
_SIBILANT_ENDINGS = ("s", "z", "x", "ch", "sh", "c", "g")
_SECOND_STRESS_PREFIXES = ("be", "de", "dis", "en", "ex", "in", "mis", "pre", "re", "un")


def _letters(word: str) -> str:
    return _NON_LETTERS.sub("", word.lower())


def estimate_syllable_count(word: str) -> int:
    """Estimate the number of syllables in ``word`` from its spelling."""

    normalized = _letters(word)
    count = len(_VOWEL_GROUP_PATTERN.findall(normalized))

    if (
        count > 1
        and normalized.endswith("e")
        and not normalized.endswith("le")
        and not normalized.endswith("ee")
    ):
        count -= 1

    if count > 1 and normalized.endswith("ed") and normalized[-3:-2] not in ("t", "d"):
        count -= 1

    if count > 1 and normalized.endswith("es"):
        stem = normalized[:-2]
        if not stem.endswith(_SIBILANT_ENDINGS):
            count -= 1

    count += len(_HIATUS_PATTERN.findall(normalized))

    return max(1, count)


def estimate_stress_pattern(word: str, syllable_count: Optional[int] = None) -> List[int]:
    """Return a default stress sequence (1 stressed, 0 unstressed) for ``word``.

    English defaults: disyllables take initial stress unless they open with a
    common unstressed prefix, trisyllables in ``-ity``/``-tion``/``-sion``
    stress the middle syllable, and longer words stress the antepenult.
    """

    normalized = _letters(word)
    count = syllable_count if syllable_count is not None else estimate_syllable_count(word)

    if count <= 0:
        return []
    if count == 1:
        return [1]

    if count == 2:
        for prefix in _SECOND_STRESS_PREFIXES:
            if normalized.startswith(prefix) and len(normalized) > len(prefix) + 2:
                return [0, 1]
        return [1, 0]

    if count == 3:
        if normalized.endswith(("ity", "tion", "sion")):
            return [0, 1, 0]
        return [1, 0, 0]

    pattern = [0] * count
    pattern[count - 3] = 1
    return pattern
