import dataclasses

import pytest

from scansion.config import ClassifierSettings
from scansion.core import (
    METER_BASES,
    HypothesisScore,
    MeterClassifier,
    MeterHypothesis,
    PronunciationStore,
    StoreNotInitializedError,
)
from scansion.core.meters import (
    METER_BASES_BY_NAME,
    candidate_alignments,
    fit_line,
    line_name,
    segment_feet,
)
from scansion.core.resolver import LineProfile


def test_sonnet_18_is_iambic_pentameter(store, sonnet_18):
    result = MeterClassifier(store=store).classify(sonnet_18)

    assert result.meter_base == "iambic"
    assert result.foot_count == 5
    assert result.is_metrical
    assert result.meter_name == "iambic pentameter"
    assert result.nominal_syllables == 10
    assert result.regularity_score == 100
    assert result.confidence >= 0.75
    assert result.evidence.iambic_score > result.evidence.trochaic_score
    assert result.evidence.iambic_score > result.evidence.dactylic_score
    assert result.evidence.score_for("iambic") == result.evidence.iambic_score
    assert sum(result.syllable_distribution.values()) == 14
    assert max(result.syllable_distribution, key=result.syllable_distribution.get) == 10
    assert max(result.foot_type_distribution, key=result.foot_type_distribution.get) == "iamb"
    assert any(
        "14 of 14 lines fall within one syllable of 10 syllables with iambic alternation" in reason
        for reason in result.evidence.reasoning
    )


def test_the_tyger_is_trochaic(store, the_tyger):
    result = MeterClassifier(store=store).classify(the_tyger)

    assert result.meter_base == "trochaic"
    assert result.foot_count == 4
    assert result.is_metrical
    assert result.evidence.trochaic_score > result.evidence.iambic_score
    assert result.foot_type_distribution.get("catalexis", 0) >= 1
    assert result.foot_type_distribution.get("trochee", 0) > result.foot_type_distribution.get("iamb", 0)


def test_red_wheelbarrow_is_free_verse(store, red_wheelbarrow):
    result = MeterClassifier(store=store).classify(red_wheelbarrow)

    assert not result.is_metrical
    assert result.meter_base is None
    assert result.foot_count is None
    assert result.meter_name == "free verse"
    assert result.confidence == result.evidence.free_verse_score
    assert result.foot_type_distribution == {}
    assert any("short" in reason for reason in result.evidence.reasoning)


@pytest.mark.parametrize("text", ["", "\n   \n\t\n", "... !!"])
def test_empty_poem_is_unmetered_with_zero_confidence(store, text):
    result = MeterClassifier(store=store).classify(text)

    assert not result.is_metrical
    assert result.confidence == 0.0
    assert result.syllable_distribution == {}
    assert result.foot_type_distribution == {}
    assert result.regularity_score == 0


def test_classify_requires_ready_store():
    with pytest.raises(StoreNotInitializedError):
        MeterClassifier(store=PronunciationStore()).classify("Shall I compare thee")


def test_thresholds_come_from_settings(store, sonnet_18):
    strict = ClassifierSettings(min_confidence=0.99)

    result = MeterClassifier(store=store, settings=strict).classify(sonnet_18)

    assert not result.is_metrical
    assert result.confidence == result.evidence.free_verse_score == 0.0
    assert result.regularity_score == 100


def _score(base, matches, events, feet=4):
    return HypothesisScore(MeterHypothesis(base, feet), matches=matches, compared=100, events=events)


def test_exact_ties_follow_base_precedence(store):
    classifier = MeterClassifier(store=store)
    iambic, trochaic, anapestic, dactylic = METER_BASES

    bests = [_score(dactylic, 90, 0), _score(iambic, 90, 0), _score(trochaic, 90, 0)]
    reordered = sorted(bests, key=lambda item: METER_BASES.index(item.hypothesis.base))

    assert classifier.pick_winner(reordered).hypothesis.base is iambic


def test_near_ties_prefer_fewer_substitutions(store):
    classifier = MeterClassifier(store=store)
    iambic, trochaic, _, _ = METER_BASES

    winner = classifier.pick_winner([_score(iambic, 90, 8), _score(trochaic, 89, 0)])
    assert winner.hypothesis.base is trochaic

    winner = classifier.pick_winner([_score(iambic, 90, 8), _score(trochaic, 80, 0)])
    assert winner.hypothesis.base is iambic


def test_candidate_alignments_cover_substitutions():
    iambic, trochaic, _, dactylic = METER_BASES

    pentameter = {a.template: a.labels for a in candidate_alignments(MeterHypothesis(iambic, 5), 10)}
    assert pentameter == {"u/u/u/u/u/": (), "/uu/u/u/u/": ("inversion",)}

    feminine = candidate_alignments(MeterHypothesis(iambic, 5), 11)
    assert [a.labels for a in feminine] == [("feminine_ending",), ("anacrusis",)]

    headless = candidate_alignments(MeterHypothesis(iambic, 4), 7)
    assert [(a.template, a.events) for a in headless] == [("/u/u/u/", 1)]

    catalectic = candidate_alignments(MeterHypothesis(trochaic, 4), 7)
    assert (catalectic[0].template, catalectic[0].labels, catalectic[0].events) == (
        "/u/u/u/",
        ("catalexis",),
        0,
    )

    assert [a.template for a in candidate_alignments(MeterHypothesis(dactylic, 2), 4)] == ["/uu/", "/u/u"]


def test_line_names():
    assert line_name(5) == "pentameter"
    assert line_name(1) == "monometer"
    assert line_name(9) == "9-foot"


def test_to_dict_is_plain_data(store, the_tyger):
    data = MeterClassifier(store=store).classify(the_tyger).to_dict()

    assert data["meter_name"] == "trochaic tetrameter"
    assert set(data["evidence"]) == {
        "iambic_score",
        "trochaic_score",
        "anapestic_score",
        "dactylic_score",
        "free_verse_score",
        "reasoning",
    }
    assert isinstance(data["evidence"]["reasoning"], list)


def test_classification_is_read_only_and_hashable(store, sonnet_18):
    result = MeterClassifier(store=store).classify(sonnet_18)

    with pytest.raises(TypeError):
        result.syllable_distribution[99] = 1
    with pytest.raises(TypeError):
        result.foot_type_distribution["iamb"] = 0
    with pytest.raises(dataclasses.FrozenInstanceError):
        result.evidence.iambic_score = 0.0

    assert 99 not in result.syllable_distribution
    assert result.evidence.score_for("iambic") == result.evidence.iambic_score
    assert result.evidence.score_for("amphibrachic") == 0.0
    assert hash(result) == hash(MeterClassifier(store=store).classify(sonnet_18))
    assert result.to_dict()["syllable_distribution"] == dict(result.syllable_distribution)


def _profile(pattern):
    stresses = tuple(1 if slot == "/" else 0 for slot in pattern)
    return LineProfile(pattern, (), stresses, (False,) * len(stresses))


# Evangeline's opening lines; the later ones replace dactyls with two-syllable feet.
EVANGELINE = (
    "/uu/uu/uu/uu/uu/u",
    "/uu/uu/u/uu/uu/u",
    "/u/uu/uu/u/uu/u",
    "/u/u/u/u/uu/u",
)


def test_contracted_feet_fit_dactylic_hexameter():
    dactylic = METER_BASES_BY_NAME["dactylic"]
    profile = _profile(EVANGELINE[3])

    fit = fit_line(MeterHypothesis(dactylic, 6), profile)

    assert fit.alignment.template == EVANGELINE[3]
    assert fit.mismatches == ()
    assert fit.alignment.labels == ("contraction", "catalexis")
    assert fit.alignment.events == fit.alignment.dropped == 4
    assert segment_feet(EVANGELINE[3], fit.alignment, 3) == ["/u", "/u", "/u", "/u", "/uu"]


def test_contracted_feet_keep_dactylic_ahead_of_trochaic(store):
    classifier = MeterClassifier(store=store)
    profiles = [_profile(pattern) for pattern in EVANGELINE]
    dactylic = METER_BASES_BY_NAME["dactylic"]
    trochaic = METER_BASES_BY_NAME["trochaic"]

    best_dactylic = classifier.best_for_base(dactylic, profiles, profiles, 17)
    best_trochaic = classifier.best_for_base(trochaic, profiles, profiles, 17)

    assert best_dactylic.hypothesis.feet == 6
    # Every contracted foot still counts its dropped slot as compared.
    assert best_dactylic.score == pytest.approx(61 / 68)
    assert best_dactylic.score > best_trochaic.score + 0.1
    assert classifier.pick_winner([best_trochaic, best_dactylic]) is best_dactylic


def test_duple_meters_have_no_contraction():
    iambic = METER_BASES_BY_NAME["iambic"]

    alignments = candidate_alignments(MeterHypothesis(iambic, 5), 8)

    assert all("contraction" not in alignment.labels for alignment in alignments)
