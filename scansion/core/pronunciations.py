"""Pronunciation store backed by a CMU-format pronouncing dictionary."""

from __future__ import annotations

import enum
import re
import threading
import time
from concurrent.futures import Future
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

import pronouncing

from scansion.utils.observability import (
    create_counter,
    create_histogram,
    get_logger,
    record_exception,
    start_span,
)

from .errors import DictionaryLoadError, StoreNotInitializedError, StoreWriteError

_WORD_VARIANT_PATTERN = re.compile(r"\(\d+\)$")
_NORMALIZE_PATTERN = re.compile(r"[^a-z'-]")
_STRESS_DIGIT_PATTERN = re.compile(r"[012]$")

DictionarySource = Union[str, Path, Iterable[str], None]
PronunciationMap = Dict[str, Tuple["Pronunciation", ...]]

_LOADS = create_counter(
    "scansion_dictionary_loads_total",
    "Pronouncing dictionary load attempts by outcome.",
    ("outcome",),
)
_LOAD_SECONDS = create_histogram(
    "scansion_dictionary_load_seconds",
    "Time spent parsing the pronouncing dictionary.",
)


def normalize_word(word: str) -> str:
    """Lowercase ``word`` and drop characters outside ``[a-z'-]``."""

    return _NORMALIZE_PATTERN.sub("", (word or "").lower())


def _strip_variant(word: str) -> str:
    return _WORD_VARIANT_PATTERN.sub("", word).lower()


@dataclass(frozen=True)
class Pronunciation:
    """One dictionary pronunciation: ARPAbet phones plus per-syllable stress."""

    word: str
    phones: Tuple[str, ...]
    stresses: Tuple[int, ...]

    @classmethod
    def from_phones(cls, word: str, phones: Union[str, Sequence[str]]) -> "Pronunciation":
        """Build a pronunciation, reading stresses off the vowel phones."""

        phone_list = phones.split() if isinstance(phones, str) else list(phones)
        phone_tuple = tuple(phone.strip().upper() for phone in phone_list if phone.strip())
        digits = pronouncing.stresses(" ".join(phone_tuple))
        return cls(
            word=normalize_word(word),
            phones=phone_tuple,
            stresses=tuple(int(digit) for digit in digits),
        )

    @property
    def syllable_count(self) -> int:
        return len(self.stresses)

    @property
    def vowel_count(self) -> int:
        return sum(1 for phone in self.phones if _STRESS_DIGIT_PATTERN.search(phone))


def parse_dictionary_lines(lines: Iterable[str]) -> PronunciationMap:
    """Parse CMU dictionary text lines into ``word -> pronunciations``.

    ``;;;`` comments and blank lines are skipped, a trailing ``# comment`` on
    an entry is ignored, and ``WORD(1)`` style variants are appended to the
    base word's list in file order.
    """

    logger = get_logger(__name__).bind(component="dictionary_parser")
    entries: Dict[str, List[Pronunciation]] = {}
    skipped = 0

    for raw_line in lines:
        entry = raw_line.split("#", 1)[0].strip() if "#" in raw_line else raw_line.strip()
        if not entry or entry.startswith(";;;"):
            continue

        parts = entry.split()
        if len(parts) < 2:
            skipped += 1
            continue

        raw_word, *phones = parts
        word = _strip_variant(raw_word)
        if not word:
            skipped += 1
            continue

        entries.setdefault(word, []).append(Pronunciation.from_phones(word, phones))

    if skipped:
        logger.debug("Skipped malformed dictionary entries", context={"skipped": skipped})

    return {word: tuple(prons) for word, prons in entries.items()}


def _default_dictionary_lines() -> Iterator[str]:
    """Yield the CMU dictionary bundled with :mod:`pronouncing` as text lines."""

    pronouncing.init_cmu()
    for word, phones in pronouncing.pronunciations:
        yield f"{word} {phones}"


def _coerce_entries(word: str, values: Iterable[object]) -> Tuple[Pronunciation, ...]:
    coerced: List[Pronunciation] = []
    for value in values:
        if isinstance(value, Pronunciation):
            coerced.append(value)
        elif isinstance(value, Sequence):
            coerced.append(Pronunciation.from_phones(word, value))  # type: ignore[arg-type]
        else:
            raise TypeError(f"Unsupported pronunciation value for {word!r}: {value!r}")
    return tuple(coerced)


class StoreState(enum.Enum):
    EMPTY = "empty"
    LOADING = "loading"
    READY = "ready"


class PronunciationStore:
    """Process-wide, read-mostly map from normalised words to pronunciations.

    The store is written exactly once, either by :meth:`load` or by
    :meth:`inject`; only an explicit ``inject(..., replace=True)`` swaps the
    map afterwards. Concurrent ``load`` calls coordinate through a single
    one-shot future: the first caller parses, every other caller waits on the
    same future and sees the same populated store (or the same error).
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._state = StoreState.EMPTY
        self._pending: Optional[Future] = None
        self._entries: PronunciationMap = {}
        self._generation = 0
        self._source_label: Optional[str] = None
        self.parse_count = 0
        self._logger = get_logger(__name__).bind(component="pronunciation_store")

    # State -------------------------------------------------------------------
    @property
    def state(self) -> StoreState:
        return self._state

    @property
    def is_loaded(self) -> bool:
        return self._state is StoreState.READY

    @property
    def generation(self) -> int:
        """Incremented whenever the backing map is replaced."""

        return self._generation

    @property
    def source_label(self) -> Optional[str]:
        return self._source_label

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, word: object) -> bool:
        return isinstance(word, str) and normalize_word(word) in self._entries

    # Population --------------------------------------------------------------
    def load(self, source: DictionarySource = None) -> None:
        """Parse ``source`` into the store unless it is already loaded.

        ``source`` may be a path, an iterable of dictionary lines, or ``None``
        for the CMU dictionary shipped with :mod:`pronouncing`. Raises
        :class:`DictionaryLoadError` when the source cannot be read or yields
        no entries.
        """

        with self._lock:
            if self._state is StoreState.READY:
                return
            pending = self._pending
            owner = pending is None
            if owner:
                pending = Future()
                self._pending = pending
                self._state = StoreState.LOADING

        if not owner:
            # Re-raises the owner's DictionaryLoadError, if any.
            pending.result()
            return

        try:
            entries, label = self._parse_source(source)
        except DictionaryLoadError as exc:
            with self._lock:
                self._state = StoreState.EMPTY
                self._pending = None
            pending.set_exception(exc)
            raise

        with self._lock:
            self._install(entries, label)
            self._pending = None
        pending.set_result(None)

    def inject(self, mapping: Mapping[str, Iterable[object]], *, replace: bool = False) -> None:
        """Install a pre-built ``word -> pronunciations`` map, bypassing load.

        Values may be :class:`Pronunciation` objects, phone strings such as
        ``"K AH0 M P EH1 R"`` or phone sequences.

        Raises :class:`StoreWriteError` while a load is in progress, and when
        the store is already populated unless ``replace`` is set.
        """

        entries: PronunciationMap = {}
        for word, values in mapping.items():
            key = normalize_word(word)
            if not key:
                continue
            entries[key] = entries.get(key, ()) + _coerce_entries(key, values)

        with self._lock:
            if self._state is StoreState.LOADING:
                raise StoreWriteError(
                    "Cannot inject pronunciations while a dictionary load is running"
                )
            if self._state is StoreState.READY and not replace:
                raise StoreWriteError(
                    f"Pronunciation store already populated from {self._source_label}; "
                    "pass replace=True to swap the map"
                )
            self._install(entries, "injected")
        self._logger.info(
            "Pronunciation map injected",
            context={"words": len(entries), "generation": self._generation},
        )

    def _install(self, entries: PronunciationMap, label: str) -> None:
        self._entries = entries
        self._source_label = label
        self._generation += 1
        self._state = StoreState.READY

    def _parse_source(self, source: DictionarySource) -> Tuple[PronunciationMap, str]:
        label = "pronouncing" if source is None else (
            str(source) if isinstance(source, (str, Path)) else type(source).__name__
        )
        started = time.perf_counter()

        with start_span("scansion.dictionary.load", {"source": label}) as span:
            try:
                if source is None:
                    entries = parse_dictionary_lines(_default_dictionary_lines())
                elif isinstance(source, (str, Path)):
                    with Path(source).open("r", encoding="utf-8") as handle:
                        entries = parse_dictionary_lines(handle)
                else:
                    entries = parse_dictionary_lines(source)
                self.parse_count += 1
            except (OSError, UnicodeDecodeError, ValueError) as exc:
                record_exception(span, exc)
                _LOADS.labels(outcome="error").inc()
                self._logger.error(
                    "Pronouncing dictionary could not be read",
                    context={"source": label, "error": str(exc)},
                )
                raise DictionaryLoadError(f"Cannot load pronouncing dictionary from {label}") from exc

            if not entries:
                error = DictionaryLoadError(f"No pronunciations parsed from {label}")
                record_exception(span, error)
                _LOADS.labels(outcome="empty").inc()
                raise error

        elapsed = time.perf_counter() - started
        _LOAD_SECONDS.observe(elapsed)
        _LOADS.labels(outcome="loaded").inc()
        self._logger.info(
            "Pronunciation dictionary loaded",
            context={"source": label, "words": len(entries), "seconds": round(elapsed, 3)},
        )
        return entries, label

    # Queries -----------------------------------------------------------------
    def require_ready(self) -> None:
        if self._state is not StoreState.READY:
            raise StoreNotInitializedError()

    def lookup(self, word: str) -> Tuple[Pronunciation, ...]:
        """Return the pronunciations of ``word``; ``()`` for unknown words."""

        self.require_ready()
        key = normalize_word(word)
        if not key:
            return ()
        return self._entries.get(key, ())


DEFAULT_STORE = PronunciationStore()

__all__ = [
    "DEFAULT_STORE",
    "DictionarySource",
    "Pronunciation",
    "PronunciationStore",
    "StoreState",
    "normalize_word",
    "parse_dictionary_lines",
]
