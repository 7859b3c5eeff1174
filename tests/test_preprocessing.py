"""
Tests for the text preprocessing transformations.

These tests validate that:

- each per-document transformation does what its name says
- the chain built from config/data.yaml runs in the documented order
- corpus-level and Series-level helpers leave their inputs untouched

Stopword assertions only use words present in both the NLTK list and the
scikit-learn fallback list, so they hold whether or not the NLTK corpus has
been downloaded.
"""

from __future__ import annotations

import copy

import pandas as pd
import pytest

from postmining.data.corpus import Corpus
from postmining.features.preprocessing import (
    build_transformations,
    get_stopwords,
    preprocess_corpus,
    preprocess_series,
    preprocess_text,
    remove_numbers,
    remove_punctuation,
    remove_words,
    stem_document,
    strip_whitespace,
    to_lower,
    trace_preprocessing,
)


def test_to_lower_makes_all_characters_lowercase():
    text = to_lower("Hello WORLD, ÉCOLE")
    assert text == text.lower()
    assert text == "hello world, école"


def test_remove_punctuation_ascii_and_unicode():
    assert remove_punctuation("Hello, world!!!") == "Hello world"
    assert remove_punctuation("don't") == "dont"
    assert remove_punctuation("café… «ok»") == "café ok"


def test_remove_punctuation_with_replacement():
    assert remove_punctuation("state-of-the-art", replacement=" ") == "state of the art"


def test_remove_numbers():
    assert remove_numbers("100 years, 3D printers") == " years, D printers"


def test_strip_whitespace_collapses_and_trims():
    assert strip_whitespace("  a \t b\n\nc  ") == "a b c"


def test_remove_words_matches_whole_words_only():
    assert strip_whitespace(remove_words("the cat and the hat", {"the", "and"})) == "cat hat"
    assert remove_words("there the", {"the"}) == "there "
    assert remove_words("unchanged", set()) == "unchanged"


def test_get_stopwords_contains_common_words_and_extras():
    words = get_stopwords("english", extra=["University"])
    for w in ("the", "and", "is", "of", "for"):
        assert w in words
    assert "university" in words


@pytest.mark.parametrize("algorithm", ["snowball", "porter"])
def test_stem_document_maps_consisting_to_consist(algorithm):
    assert stem_document("consisting", algorithm=algorithm) == "consist"
    assert stem_document("  documents   consisting ", algorithm=algorithm) == "document consist"


def test_stem_document_rejects_unknown_algorithm():
    with pytest.raises(ValueError):
        stem_document("words", algorithm="lancaster")


def test_build_transformations_default_order(data_cfg):
    names = [name for name, _ in build_transformations(data_cfg)]
    assert names == [
        "lowercase",
        "remove_stopwords",
        "remove_punctuation",
        "strip_whitespace",
        "stem",
    ]


def test_build_transformations_respects_disabled_steps(data_cfg):
    cfg = copy.deepcopy(data_cfg)
    cfg["preprocessing"]["stemming"]["enabled"] = False
    cfg["preprocessing"]["stopwords"]["enabled"] = False
    cfg["preprocessing"]["remove_numbers"] = True

    names = [name for name, _ in build_transformations(cfg)]
    assert names == ["lowercase", "remove_punctuation", "remove_numbers", "strip_whitespace"]


def test_preprocess_text_full_chain(data_cfg):
    assert preprocess_text("The Documents are CONSISTING of words!", data_cfg) == "document consist word"


def test_preprocess_text_basic_cleanup(data_cfg):
    raw_text = "HELLO WORLD!!! This is a TEST message with URL: http://example.com"
    processed = preprocess_text(raw_text, data_cfg)

    assert isinstance(processed, str)
    assert processed.strip() != ""
    assert "HELLO" not in processed
    assert "hello" in processed
    assert "!" not in processed
    assert "  " not in processed


def test_trace_preprocessing_records_every_step(data_cfg):
    stages = trace_preprocessing("The Cats, running!", data_cfg)

    assert stages[0] == ("original", "The Cats, running!")
    assert [name for name, _ in stages[1:]] == [name for name, _ in build_transformations(data_cfg)]
    assert stages[1][1] == "the cats, running!"
    assert stages[-1][1] == "cat run"


def test_preprocess_corpus_returns_new_corpus(data_cfg):
    corpus = Corpus(["The Cats are RUNNING.", "Dogs barked!"], meta=pd.DataFrame({"likes": [3, 5]}))
    processed = preprocess_corpus(corpus, data_cfg)

    assert processed.content == ["cat run", "dog bark"]
    assert corpus.content == ["The Cats are RUNNING.", "Dogs barked!"]
    assert processed.meta["likes"].tolist() == [3, 5]


def test_preprocess_series(data_cfg):
    series = pd.Series(["Running FAST!", None])
    out = preprocess_series(series, data_cfg)

    assert out.tolist() == ["run fast", ""]


class _MissingStopwordCorpus:
    def words(self, language):
        raise LookupError(f"Resource stopwords/{language} not found.")


def test_get_stopwords_falls_back_for_english_only(monkeypatch):
    import postmining.features.preprocessing as preprocessing

    monkeypatch.setattr(preprocessing, "nltk_stopwords", _MissingStopwordCorpus())

    words = get_stopwords("english")
    assert "the" in words
    assert "and" in words

    with pytest.raises(LookupError):
        get_stopwords("french")
