import scansion
from scansion import PronunciationStore, format_poem_analysis


def test_analyze_poem_scans_every_non_blank_line(analyzer, sonnet_18):
    analysis = analyzer.analyze_poem(sonnet_18)

    assert analysis.classification.meter_name == "iambic pentameter"
    assert len(analysis.lines) == 14
    assert analysis.texts[0] == "Shall I compare thee to a summer's day?"
    assert 0.8 <= analysis.overall_accuracy < 1.0


def test_overall_accuracy_of_empty_poem_is_zero(analyzer):
    analysis = analyzer.analyze_poem("")

    assert analysis.lines == ()
    assert analysis.overall_accuracy == 0.0


def test_report_for_metrical_poem(analyzer, sonnet_18):
    report = format_poem_analysis(analyzer.analyze_poem(sonnet_18))
    rows = report.splitlines()

    assert rows[0] == "Detected meter: iambic pentameter"
    assert rows[1].startswith("Confidence: ")
    assert rows[2] == "Regularity: 100%"
    assert rows[3].startswith("Lines following meter: ")
    assert rows[4] == ""
    assert rows[5] == "1. u/u/u/u/u/ ✓"
    assert rows[6] == "2. u///u///uu ✗ (substitution)"
    assert len(rows) == 5 + 14


def test_report_for_free_verse(analyzer, red_wheelbarrow):
    report = format_poem_analysis(analyzer.analyze_poem(red_wheelbarrow))

    assert report.startswith("Detected meter: free verse\nLines following meter: 100.0%\n\n")
    assert "Confidence" not in report
    assert "free_verse" not in report


def test_module_level_functions_accept_an_explicit_store(mini_dict_path, the_tyger):
    store = PronunciationStore()
    scansion.load_dictionary(mini_dict_path, store=store)

    classification = scansion.classify_poem(the_tyger, store=store)
    result = scansion.scan_line("Tyger Tyger, burning bright,", classification, store=store)

    assert classification.meter_base == "trochaic"
    assert result.pattern == "/u/u/u/"
    assert scansion.syllable_count_of("symmetry", store=store) == 3
    assert scansion.stress_of("immortal", store=store) == [2, 1, 0]
    assert scansion.analyze_poem(the_tyger, store=store).classification == classification


def test_inject_dictionary_supports_custom_environments():
    store = PronunciationStore()
    scansion.inject_dictionary({"glimmer": ["G L IH1 M ER0"]}, store=store)

    assert scansion.stress_of("glimmer", store=store) == [1, 0]
    assert scansion.syllable_count_of("glimmering", store=store) >= 1
