from scansion.core import MeterAnalyzer


def test_sonnet_18_scans_as_iambic_pentameter(cmu_store, sonnet_18):
    analyzer = MeterAnalyzer(cmu_store)
    classification = analyzer.classify_poem(sonnet_18)

    assert classification.is_metrical
    assert (classification.meter_base, classification.foot_count) == ("iambic", 5)

    result = analyzer.scan_line("Shall I compare thee to a summer's day?", classification)
    assert result.pattern == "u/u/u/u/u/"
    assert result.follows_meter


def test_the_tyger_scans_as_catalectic_trochaic(cmu_store, the_tyger):
    analyzer = MeterAnalyzer(cmu_store)
    classification = analyzer.classify_poem(the_tyger)

    assert classification.meter_base == "trochaic"

    result = analyzer.scan_line("Tyger Tyger, burning bright,", classification)
    assert result.pattern == "/u/u/u/"
    assert result.mismatches == ()
    assert "catalexis" in result.substitutions


def test_red_wheelbarrow_is_free_verse(cmu_store, red_wheelbarrow):
    classification = MeterAnalyzer(cmu_store).classify_poem(red_wheelbarrow)

    assert not classification.is_metrical
    assert classification.meter_base is None
    assert classification.foot_count is None


def test_longest_pronunciation_is_preferred(cmu_store):
    analyzer = MeterAnalyzer(cmu_store)

    assert {len(pron.stresses) for pron in cmu_store.lookup("every")} == {2, 3}
    assert analyzer.stress_of("every") == [1, 0, 0]
    assert analyzer.syllable_count_of("fire") == 2
