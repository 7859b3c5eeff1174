"""
Text preprocessing transformations for the posts walkthrough.

Each transformation maps one document string to another string, so the
chain can be applied to a whole Corpus with `Corpus.map`:

- lowercasing
- stopword removal
- punctuation removal
- number removal (off by default)
- whitespace collapsing
- stemming

Stopword lists and stemmers come from NLTK. Which steps run, and with
which options, is driven by the "preprocessing" section of
config/data.yaml, so the walkthrough can be tweaked without changing this
code.
"""

from __future__ import annotations

import functools
import logging
import re
import string
import unicodedata
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Tuple

import pandas as pd
from nltk.corpus import stopwords as nltk_stopwords
from nltk.stem import PorterStemmer, SnowballStemmer
from sklearn.feature_extraction.text import ENGLISH_STOP_WORDS as SKLEARN_EN_STOPWORDS

from postmining.data.corpus import Corpus


Transformation = Tuple[str, Callable[[str], str]]

_WHITESPACE_RE = re.compile(r"\s+")
_NUMBER_RE = re.compile(r"\d+")


# ---------------------------------------------------------------------------
# Casing, punctuation, numbers, whitespace
# ---------------------------------------------------------------------------


def to_lower(text: str) -> str:
    """Lowercase every character of the document."""
    return text.lower()


def _is_punctuation(ch: str) -> bool:
    return ch in string.punctuation or unicodedata.category(ch).startswith("P")


def remove_punctuation(text: str, replacement: str = "") -> str:
    """
    Remove punctuation characters from a document.

    Both ASCII punctuation (``string.punctuation``) and Unicode punctuation
    categories are removed. By default characters are deleted, so
    "don't" becomes "dont"; pass ``replacement=" "`` to split on them
    instead.
    """
    return "".join(replacement if _is_punctuation(ch) else ch for ch in text)


def remove_numbers(text: str) -> str:
    """Delete runs of digits."""
    return _NUMBER_RE.sub("", text)


def strip_whitespace(text: str) -> str:
    """Collapse runs of whitespace into a single space and trim the ends."""
    return _WHITESPACE_RE.sub(" ", text).strip()


# ---------------------------------------------------------------------------
# Stopwords
# ---------------------------------------------------------------------------


def get_stopwords(
    language: str = "english",
    extra: Optional[Iterable[str]] = None,
) -> Set[str]:
    """
    Build a set of stopwords for the given language.

    We prefer the NLTK stopword corpus, falling back to scikit-learn's
    English stopwords when the corpus has not been downloaded.

    Users may need to call:
        nltk.download("stopwords")

    Parameters
    ----------
    language : str
        Language name, e.g. "english".
    extra : Optional[Iterable[str]]
        Additional words to treat as stopwords (lowercased).

    Returns
    -------
    Set[str]
        Set of stopwords.
    """
    lang = (language or "english").lower()

    try:
        words = set(nltk_stopwords.words(lang))
    except LookupError:
        if lang != "english":
            raise
        words = set(SKLEARN_EN_STOPWORDS)

    if extra:
        words.update(w.lower() for w in extra)
    return words


@functools.lru_cache(maxsize=32)
def _compile_word_pattern(words: Tuple[str, ...]) -> "re.Pattern[str]":
    # Longest first so that alternation never stops at a shorter prefix.
    ordered = sorted(words, key=len, reverse=True)
    return re.compile(r"\b(?:" + "|".join(re.escape(w) for w in ordered) + r")\b")


def remove_words(text: str, words: Iterable[str]) -> str:
    """
    Remove whole-word occurrences of `words` from a document.

    Matching is case-sensitive, so lowercase the text first when the word
    list is lowercase. Surrounding spaces are left in place; collapse them
    with `strip_whitespace`.
    """
    key = tuple(sorted(set(words)))
    if not key:
        return text
    return _compile_word_pattern(key).sub("", text)


# ---------------------------------------------------------------------------
# Stemming
# ---------------------------------------------------------------------------


@functools.lru_cache(maxsize=8)
def _build_stemmer(algorithm: str = "snowball", language: str = "english"):
    """
    Build a stemmer with a .stem(token) method.

    Parameters
    ----------
    algorithm : str
        "snowball" or "porter".
    language : str
        Language for the Snowball stemmer.
    """
    algo = (algorithm or "snowball").lower()
    if algo == "snowball":
        return SnowballStemmer(language)
    if algo == "porter":
        return PorterStemmer()
    raise ValueError(f"Unknown stemming algorithm: {algorithm!r} (expected 'snowball' or 'porter').")


def stem_document(
    text: str,
    algorithm: str = "snowball",
    language: str = "english",
) -> str:
    """
    Stem every whitespace-separated token of a document.

    >>> stem_document("consisting of documents")
    'consist of document'
    """
    stemmer = _build_stemmer(algorithm, language)
    return " ".join(stemmer.stem(token) for token in text.split())


# ---------------------------------------------------------------------------
# Transformation chain
# ---------------------------------------------------------------------------


def build_transformations(config: Dict[str, Any]) -> List[Transformation]:
    """
    Build the ordered list of (name, callable) preprocessing steps.

    The order is fixed: lowercase, stopwords, punctuation, numbers,
    whitespace, stemming. Each step is included only when enabled in the
    "preprocessing" section of the data config.

    Parameters
    ----------
    config : Dict[str, Any]
        Full data configuration (as returned by `load_data_config`).

    Returns
    -------
    List[Tuple[str, Callable[[str], str]]]
        Steps to apply in order.
    """
    cfg = config.get("preprocessing", {}) or {}
    steps: List[Transformation] = []

    if bool(cfg.get("lowercase", True)):
        steps.append(("lowercase", to_lower))

    sw_cfg = cfg.get("stopwords", {}) or {}
    if bool(sw_cfg.get("enabled", True)):
        stopword_set = get_stopwords(
            language=sw_cfg.get("language", "english"),
            extra=sw_cfg.get("extra") or None,
        )
        steps.append(("remove_stopwords", functools.partial(remove_words, words=stopword_set)))

    if bool(cfg.get("remove_punctuation", True)):
        steps.append(("remove_punctuation", remove_punctuation))

    if bool(cfg.get("remove_numbers", False)):
        steps.append(("remove_numbers", remove_numbers))

    if bool(cfg.get("strip_whitespace", True)):
        steps.append(("strip_whitespace", strip_whitespace))

    stem_cfg = cfg.get("stemming", {}) or {}
    if bool(stem_cfg.get("enabled", True)):
        steps.append(
            (
                "stem",
                functools.partial(
                    stem_document,
                    algorithm=stem_cfg.get("algorithm", "snowball"),
                    language=stem_cfg.get("language", "english"),
                ),
            )
        )

    return steps


def preprocess_text(text: str, config: Dict[str, Any]) -> str:
    """
    Run a single document through the full preprocessing chain.
    """
    if not isinstance(text, str):
        text = str(text)
    for _, fn in build_transformations(config):
        text = fn(text)
    return text


def trace_preprocessing(text: str, config: Dict[str, Any]) -> List[Tuple[str, str]]:
    """
    Return the document after each preprocessing step, starting with the
    raw input under the name "original".
    """
    stages = [("original", text)]
    for name, fn in build_transformations(config):
        text = fn(text)
        stages.append((name, text))
    return stages


def preprocess_corpus(
    corpus: Corpus,
    config: Dict[str, Any],
    logger: Optional[logging.Logger] = None,
) -> Corpus:
    """
    Apply the preprocessing chain to every document of a corpus.

    Returns a new Corpus; the input corpus is left untouched.
    """
    for name, fn in build_transformations(config):
        corpus = corpus.map(fn)
        if logger is not None:
            logger.debug("Applied %s to %d documents.", name, len(corpus))
    return corpus


def preprocess_series(series: pd.Series, config: Dict[str, Any]) -> pd.Series:
    """
    Apply the preprocessing chain to a pandas Series of raw text.
    """
    steps = build_transformations(config)

    def _run(text: str) -> str:
        for _, fn in steps:
            text = fn(text)
        return text

    return series.fillna("").astype(str).apply(_run)
