"""
Popularity analysis: split posts by like count and compare their terms.
"""

from __future__ import annotations

from typing import Tuple

import pandas as pd

from postmining.data.corpus import Corpus
from postmining.features.document_term import DocumentTermMatrix, term_frequencies


def split_by_likes(
    corpus: Corpus,
    quantile: float = 0.75,
    likes_column: str = "likes",
) -> Tuple[Corpus, Corpus]:
    """
    Split a corpus into (popular, other) posts.

    Posts whose likes are at or above the given quantile of the corpus'
    like counts are considered popular.

    Raises
    ------
    KeyError
        If the corpus metadata has no `likes_column`.
    ValueError
        If `quantile` is outside [0, 1].
    """
    if likes_column not in corpus.meta.columns:
        raise KeyError(
            f"Likes column '{likes_column}' not found in corpus metadata. "
            f"Available columns: {list(corpus.meta.columns)}"
        )
    if not 0 <= quantile <= 1:
        raise ValueError(f"quantile must be within [0, 1], got {quantile}.")

    likes = pd.to_numeric(corpus.meta[likes_column], errors="coerce").fillna(0)
    threshold = likes.quantile(quantile)
    popular_mask = (likes >= threshold).to_numpy()

    return corpus[popular_mask], corpus[~popular_mask]


def compare_top_terms(
    popular_dtm: DocumentTermMatrix,
    other_dtm: DocumentTermMatrix,
    top_k: int = 20,
) -> pd.DataFrame:
    """
    Side-by-side totals for the most frequent terms of both groups.

    The table holds the union of each group's top `top_k` terms, with
    columns "term", "popular" and "other" (0 when a group lacks the term),
    sorted by "popular" then "other", both descending.
    """
    popular = term_frequencies(popular_dtm)
    other = term_frequencies(other_dtm)

    terms = list(dict.fromkeys(popular.head(top_k).index.tolist() + other.head(top_k).index.tolist()))

    table = pd.DataFrame(
        {
            "term": terms,
            "popular": [float(popular.get(t, 0)) for t in terms],
            "other": [float(other.get(t, 0)) for t in terms],
        }
    )
    table = table.sort_values(["popular", "other", "term"], ascending=[False, False, True])
    return table.reset_index(drop=True)
