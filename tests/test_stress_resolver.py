import pytest

from scansion.core import PronunciationStore, StoreNotInitializedError, StressResolver, WordStress
from scansion.core.lexicon import tokenize_line
from scansion.core.resolver import first_success, resolve_from_dictionary, resolve_from_spelling


def test_fullest_pronunciation_wins(store):
    resolver = StressResolver(store)

    assert resolver.stress_of("every") == [1, 0, 0]
    assert resolver.syllable_count_of("fire") == 2
    # The three-syllable reading is listed second in the dictionary.
    assert resolver.syllable_count_of("temperate") == 3


def test_equal_length_pronunciations_keep_store_order():
    store = PronunciationStore()
    store.inject({"record": ["R EH1 K ER0 D", "R IH0 K AO1 R D"]})

    assert StressResolver(store).stress_of("record") == [1, 0]


def test_apostrophe_contraction_retries_without_apostrophe():
    store = PronunciationStore()
    store.inject({"owst": ["OW1 S T"]})

    resolved = StressResolver(store).resolve("ow'st")

    assert resolved.source == "apostrophe"
    assert resolved.stresses == (1,)
    assert not resolved.ambiguous


def test_possessive_resolves_base_word(store):
    resolved = StressResolver(store).resolve("Heaven's")

    assert resolved.source == "possessive"
    assert resolved.stresses == (1, 0)


def test_un_prefix_adds_unstressed_syllable(store):
    resolved = StressResolver(store).resolve("untrimmed")

    assert resolved.source == "un_prefix"
    assert resolved.stresses == (0, 1)


def test_un_prefix_needs_a_real_base_word(store):
    resolved = StressResolver(store).resolve("unit")

    assert resolved.source == "spelling"
    assert resolved.syllable_count == 2


def test_neologism_falls_back_to_spelling(store):
    resolver = StressResolver(store)
    resolved = resolver.resolve("blorptastic")

    assert resolved.source == "spelling"
    assert resolved.ambiguous
    assert resolver.syllable_count_of("blorptastic") == 3
    assert resolver.syllable_count_of("zzyzx") >= 1


def test_letterless_tokens_have_no_syllables(store):
    resolver = StressResolver(store)

    assert resolver.syllable_count_of("...") == 0
    assert resolver.stress_of("") == []


def test_resolver_requires_ready_store():
    with pytest.raises(StoreNotInitializedError):
        StressResolver(PronunciationStore()).stress_of("day")


def test_cache_is_dropped_when_store_contents_change():
    store = PronunciationStore()
    store.inject({"foo": ["F UW1"]})
    resolver = StressResolver(store)
    assert resolver.stress_of("foo") == [1]

    store.inject({"foo": ["F UW1 B AA0"]}, replace=True)

    assert resolver.stress_of("foo") == [1, 0]


def test_first_success_respects_strategy_order(store):
    def always(word, _store):
        return WordStress(word, (0, 0, 0), "custom")

    assert first_success([resolve_from_dictionary, always], "day", store).source == "dictionary"
    assert first_success([always, resolve_from_dictionary], "day", store).source == "custom"
    assert first_success([resolve_from_dictionary], "blorptastic", store) is None
    assert resolve_from_spelling("...", store) is None


def test_profile_line_marks_function_words_flexible(store):
    profile = StressResolver(store).profile_line("Shall I compare thee")

    assert profile.raw_pattern == "//u//"
    assert profile.flexible == (True, True, False, False, True)
    assert profile.syllable_count == 5


def test_profile_line_treats_estimated_words_as_flexible(store):
    profile = StressResolver(store).profile_line("complexion dimm'd")

    assert profile.syllable_count == 4
    assert profile.flexible == (False, False, False, True)


def test_tokenize_line_handles_dashes_hyphens_and_contractions():
    assert tokenize_line("Tyger Tyger, burning bright,") == ["Tyger", "Tyger", "burning", "bright"]
    assert tokenize_line("the sea-wave—and e’er “so”") == ["the", "sea", "wave", "and", "e'er", "so"]
    assert tokenize_line("'Tis thou ow'st -- 42") == ["Tis", "thou", "ow'st"]
