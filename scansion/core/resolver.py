"""Word-to-stress resolution with dictionary lookup and heuristic fallbacks.

Resolution is an ordered list of strategies. Each strategy receives the
normalised word and the pronunciation store and returns a
:class:`WordStress` or ``None``; :func:`first_success` walks the list and
keeps the first answer. The default order is:

``dictionary`` -> ``apostrophe`` -> ``possessive`` -> ``un_prefix`` -> ``spelling``
"""

from __future__ import annotations

import re
import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from scansion.config import DEFAULT_SETTINGS, ClassifierSettings
from scansion.utils.observability import create_counter, get_logger
from scansion.utils.syllables import estimate_stress_pattern, estimate_syllable_count

from .lexicon import FUNCTION_WORDS, tokenize_line
from .pronunciations import DEFAULT_STORE, PronunciationStore, normalize_word

_LETTERS = re.compile(r"[a-z]")

_RESOLUTIONS = create_counter(
    "scansion_word_resolutions_total",
    "Words resolved to stress patterns, by resolving strategy.",
    ("source",),
)


@dataclass(frozen=True)
class WordStress:
    """Stress sequence chosen for one word and where it came from."""

    word: str
    stresses: Tuple[int, ...]
    source: str
    ambiguous: bool = False

    @property
    def syllable_count(self) -> int:
        return len(self.stresses)


Strategy = Callable[[str, PronunciationStore], Optional[WordStress]]


def resolve_from_dictionary(word: str, store: PronunciationStore) -> Optional[WordStress]:
    """Use the fullest dictionary pronunciation; the first one wins a tie."""

    pronunciations = store.lookup(word)
    if not pronunciations:
        return None
    fullest = max(pronunciations, key=lambda pron: pron.syllable_count)
    if not fullest.syllable_count:
        return None
    return WordStress(word, fullest.stresses, "dictionary")


def resolve_without_apostrophes(word: str, store: PronunciationStore) -> Optional[WordStress]:
    if "'" not in word:
        return None
    found = resolve_from_dictionary(word.replace("'", ""), store)
    return WordStress(word, found.stresses, "apostrophe") if found else None


def resolve_possessive(word: str, store: PronunciationStore) -> Optional[WordStress]:
    if not word.endswith("'s") or len(word) <= 2:
        return None
    found = resolve_from_dictionary(word[:-2], store)
    return WordStress(word, found.stresses, "possessive") if found else None


def resolve_un_prefix(word: str, store: PronunciationStore) -> Optional[WordStress]:
    """``un`` + a known word: the prefix adds one unstressed syllable."""

    if not word.startswith("un") or len(word) < 5:
        return None
    found = resolve_from_dictionary(word[2:], store)
    if found is None:
        return None
    return WordStress(word, (0,) + found.stresses, "un_prefix")


def resolve_from_spelling(word: str, store: PronunciationStore) -> Optional[WordStress]:
    if not _LETTERS.search(word):
        return None
    count = estimate_syllable_count(word)
    stresses = tuple(estimate_stress_pattern(word, count))
    return WordStress(word, stresses, "spelling", ambiguous=True)


DEFAULT_STRATEGIES: Tuple[Strategy, ...] = (
    resolve_from_dictionary,
    resolve_without_apostrophes,
    resolve_possessive,
    resolve_un_prefix,
    resolve_from_spelling,
)


def first_success(
    strategies: Sequence[Strategy], word: str, store: PronunciationStore
) -> Optional[WordStress]:
    for strategy in strategies:
        result = strategy(word, store)
        if result is not None:
            return result
    return None


@dataclass(frozen=True)
class LineProfile:
    """Per-syllable stress facts for one line of verse."""

    text: str
    words: Tuple[WordStress, ...]
    stresses: Tuple[int, ...]
    flexible: Tuple[bool, ...]

    @property
    def syllable_count(self) -> int:
        return len(self.stresses)

    @property
    def stressed(self) -> Tuple[bool, ...]:
        return tuple(stress > 0 for stress in self.stresses)

    @property
    def raw_pattern(self) -> str:
        return "".join("/" if stress > 0 else "u" for stress in self.stresses)


class StressResolver:
    """Resolve words to stress sequences against a pronunciation store.

    Results are cached per resolver in a bounded LRU map. The cache is
    dropped whenever the store's contents are replaced.
    """

    def __init__(
        self,
        store: Optional[PronunciationStore] = None,
        strategies: Sequence[Strategy] = DEFAULT_STRATEGIES,
        settings: Optional[ClassifierSettings] = None,
    ) -> None:
        self.store = store if store is not None else DEFAULT_STORE
        self.strategies = tuple(strategies)
        self._settings = settings or DEFAULT_SETTINGS
        self._max_cache_entries = self._settings.resolver_cache_size
        self._cache_lock = threading.RLock()
        self._cache: "OrderedDict[str, WordStress]" = OrderedDict()
        self._cache_generation = -1
        self._logger = get_logger(__name__).bind(component="stress_resolver")

    def clear_cached_results(self) -> None:
        with self._cache_lock:
            self._cache.clear()

    def resolve(self, word: str) -> WordStress:
        """Resolve ``word``; a token without letters resolves to no syllables."""

        self.store.require_ready()
        key = normalize_word(word)
        if not _LETTERS.search(key):
            return WordStress(key, (), "empty")

        with self._cache_lock:
            if self._cache_generation != self.store.generation:
                self._cache.clear()
                self._cache_generation = self.store.generation
            cached = self._cache.get(key)
            if cached is not None:
                self._cache.move_to_end(key)
                return cached

        result = first_success(self.strategies, key, self.store)
        if result is None:
            result = WordStress(key, (), "unresolved")
        _RESOLUTIONS.labels(source=result.source).inc()
        if result.ambiguous:
            self._logger.debug(
                "Word stress estimated from spelling",
                context={"word": key, "syllables": result.syllable_count},
            )

        with self._cache_lock:
            self._cache[key] = result
            while len(self._cache) > max(self._max_cache_entries, 0):
                self._cache.popitem(last=False)
        return result

    def stress_of(self, word: str) -> List[int]:
        return list(self.resolve(word).stresses)

    def syllable_count_of(self, word: str) -> int:
        return self.resolve(word).syllable_count

    def profile_line(self, line: str) -> LineProfile:
        """Resolve every word of ``line`` and mark the flexible syllables.

        A syllable is flexible when it is a monosyllabic function word or
        belongs to a word whose stress was only estimated from spelling.
        """

        words: List[WordStress] = []
        stresses: List[int] = []
        flexible: List[bool] = []
        for token in tokenize_line(line):
            resolved = self.resolve(token)
            if not resolved.stresses:
                continue
            words.append(resolved)
            stresses.extend(resolved.stresses)
            is_function = resolved.syllable_count == 1 and resolved.word in FUNCTION_WORDS
            flexible.extend([is_function or resolved.ambiguous] * resolved.syllable_count)
        return LineProfile(
            text=line,
            words=tuple(words),
            stresses=tuple(stresses),
            flexible=tuple(flexible),
        )


__all__ = [
    "DEFAULT_STRATEGIES",
    "LineProfile",
    "Strategy",
    "StressResolver",
    "WordStress",
    "first_success",
    "resolve_from_dictionary",
    "resolve_from_spelling",
    "resolve_possessive",
    "resolve_un_prefix",
    "resolve_without_apostrophes",
]
