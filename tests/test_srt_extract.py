from extractor.srt_extract import (extract_vocabulary, extract_words, find_example_sentence, parse_srt,
                                   sort_by_frequency, word_frequency)

SRT = (
    "\ufeff1\r\n"
    "00:00:01,000 --> 00:00:03,000\r\n"
    "<i>Serendipity</i> brought us here.\r\n"
    "\r\n"
    "2\r\n"
    "00:00:04,000 --> 00:00:06,000\r\n"
    "(door slams)\r\n"
    "\r\n"
    "3\r\n"
    "00:00:07,000 --> 00:00:09,000\r\n"
    "[music playing] The Harbor was quiet,\r\n"
    "and the harbor lights were dim.\r\n"
    "\r\n"
    "4\r\n"
    "orphan line\r\n"
)


def test_parse_srt_cleans_markup_and_cues():
    sentences = parse_srt(SRT)

    assert sentences == [
        "Serendipity brought us here.",
        "The Harbor was quiet, and the harbor lights were dim.",
    ]


def test_parse_srt_empty():
    assert parse_srt("") == []
    assert parse_srt("   \n\n ") == []


def test_extract_words_filters_and_dedupes():
    words = extract_words(["The Harbor was quiet, and the harbor lights were dim.", "Go to the harbor now"])

    assert words == ["harbor", "quiet", "lights", "dim", "now"]


def test_extract_vocabulary_keeps_first_casing_for_display():
    words, display = extract_vocabulary(["Serendipity here", "serendipity again"])

    assert words == ["serendipity", "here", "again"]
    assert display["serendipity"] == "Serendipity"


def test_word_frequency_and_sort():
    sentences = ["harbor lights", "Harbor dim", "lights harbor quiet"]
    freq = word_frequency(sentences)

    assert freq["harbor"] == 3
    assert freq["lights"] == 2
    assert sort_by_frequency(["quiet", "lights", "harbor", "dim"], freq) == ["harbor", "lights", "quiet", "dim"]


def test_find_example_sentence_prefers_long_sentences():
    sentences = ["Harbor!", "We walked along the harbor at night.", "harbors everywhere"]

    assert find_example_sentence("harbor", sentences) == "We walked along the harbor at night."
    assert find_example_sentence("harbor", ["Harbor!"]) == "Harbor!"
    assert find_example_sentence("dock", sentences) is None
