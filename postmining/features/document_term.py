"""
Document-term matrix construction, weighting and inspection.

This module provides helpers to:
- build a term-count document-term matrix (DTM) from a preprocessed Corpus
  with scikit-learn's CountVectorizer
- re-weight a count matrix with tf-idf via scikit-learn's TfidfTransformer
- summarize, filter and inspect a DTM (frequent terms, sparse-term
  removal, term associations, dense DataFrame views)
- persist and reload a DTM with joblib

Options for matrix construction and weighting live in the "dtm" and
"tfidf" sections of config/data.yaml.
"""

from __future__ import annotations

import functools
import math
import os
from typing import Any, Dict, List, Optional, Sequence

import joblib
import numpy as np
import pandas as pd
from scipy import sparse as sp
from sklearn.feature_extraction.text import CountVectorizer, TfidfTransformer

from postmining.data.corpus import Corpus
from postmining.utils.common import ensure_dir_exists


WEIGHT_TF = "term frequency (tf)"
WEIGHT_TFIDF = "term frequency - inverse document frequency (tf-idf)"

DEFAULT_DTM_FILENAME = "document_term_matrix.joblib"


class DocumentTermMatrix:
    """
    Sparse document-by-term matrix with document ids and term labels.

    Rows follow the order of the corpus the matrix was built from; columns
    are sorted alphabetically.
    """

    def __init__(
        self,
        matrix: Any,
        doc_ids: Sequence[Any],
        terms: Sequence[str],
        weighting: str = WEIGHT_TF,
    ) -> None:
        matrix = sp.csr_matrix(matrix)
        if matrix.shape != (len(doc_ids), len(terms)):
            raise ValueError(
                f"Matrix shape {matrix.shape} does not match "
                f"{len(doc_ids)} documents x {len(terms)} terms."
            )
        self.matrix = matrix
        self.doc_ids = list(doc_ids)
        self.terms = list(terms)
        self.weighting = weighting

    @property
    def shape(self):
        return self.matrix.shape

    @property
    def n_docs(self) -> int:
        return self.matrix.shape[0]

    @property
    def n_terms(self) -> int:
        return self.matrix.shape[1]

    @property
    def nnz(self) -> int:
        return int(self.matrix.count_nonzero())

    @property
    def sparsity(self) -> float:
        """Share of cells that are zero (0.0 for an empty matrix)."""
        cells = self.n_docs * self.n_terms
        if cells == 0:
            return 0.0
        return 1.0 - self.nnz / cells

    @property
    def max_term_length(self) -> int:
        return max((len(t) for t in self.terms), default=0)

    def summary(self) -> str:
        cells = self.n_docs * self.n_terms
        return "\n".join(
            [
                repr(self),
                f"Non-/sparse entries: {self.nnz}/{cells - self.nnz}",
                f"Sparsity           : {round(self.sparsity * 100)}%",
                f"Maximal term length: {self.max_term_length}",
                f"Weighting          : {self.weighting}",
            ]
        )

    def __repr__(self) -> str:
        return f"<<DocumentTermMatrix (documents: {self.n_docs}, terms: {self.n_terms})>>"


# ---------------------------------------------------------------------------
# Construction and weighting
# ---------------------------------------------------------------------------


def _whitespace_analyzer(
    doc: str,
    min_length: int = 3,
    max_length: Optional[int] = None,
) -> List[str]:
    """
    Split an already preprocessed document on whitespace and keep tokens
    whose length lies within [min_length, max_length].
    """
    upper = math.inf if max_length is None else max_length
    return [tok for tok in doc.split() if min_length <= len(tok) <= upper]


def _build_count_vectorizer(config: Dict[str, Any]) -> CountVectorizer:
    """
    Construct a CountVectorizer from the "dtm" section of the data config.

    Preprocessing (casing, stopwords, stemming) already happened on the
    corpus, so the analyzer only tokenizes and applies the word-length
    bounds.
    """
    dtm_cfg = config.get("dtm", {}) or {}
    analyzer = functools.partial(
        _whitespace_analyzer,
        min_length=int(dtm_cfg.get("min_word_length", 3)),
        max_length=dtm_cfg.get("max_word_length"),
    )
    return CountVectorizer(
        analyzer=analyzer,
        min_df=dtm_cfg.get("min_df", 1),
        max_df=dtm_cfg.get("max_df", 1.0),
    )


def build_document_term_matrix(
    corpus: Corpus,
    config: Dict[str, Any],
) -> DocumentTermMatrix:
    """
    Build a term-count document-term matrix from a (preprocessed) corpus.

    Parameters
    ----------
    corpus : Corpus
        Corpus whose documents have been through the preprocessing chain.
    config : Dict[str, Any]
        Full data configuration (the "dtm" section is used).

    Returns
    -------
    DocumentTermMatrix
        Matrix of raw term counts. If no token survives the length bounds
        and the min_df/max_df pruning, the matrix has zero columns.
    """
    vectorizer = _build_count_vectorizer(config)
    documents = corpus.content
    empty = DocumentTermMatrix(
        sp.csr_matrix((len(documents), 0), dtype=np.int64),
        corpus.ids,
        [],
        weighting=WEIGHT_TF,
    )

    if not any(vectorizer.analyzer(doc) for doc in documents):
        return empty

    try:
        counts = vectorizer.fit_transform(documents)
    except ValueError:
        # min_df/max_df pruned every term, or the corpus is smaller than min_df.
        return empty

    terms = vectorizer.get_feature_names_out().tolist()
    return DocumentTermMatrix(counts, corpus.ids, terms, weighting=WEIGHT_TF)


def weight_tfidf(dtm: DocumentTermMatrix, config: Dict[str, Any]) -> DocumentTermMatrix:
    """
    Re-weight a term-count matrix with tf-idf.

    The options (norm, smooth_idf, sublinear_tf) come from the "tfidf"
    section of the data config and are passed to TfidfTransformer.

    Raises
    ------
    ValueError
        If the matrix is already weighted.
    """
    if dtm.weighting != WEIGHT_TF:
        raise ValueError(
            f"tf-idf weighting expects a term-count matrix, got weighting {dtm.weighting!r}."
        )

    if dtm.n_docs == 0 or dtm.n_terms == 0:
        return DocumentTermMatrix(
            dtm.matrix.astype(float), dtm.doc_ids, dtm.terms, weighting=WEIGHT_TFIDF
        )

    tfidf_cfg = config.get("tfidf", {}) or {}
    norm = tfidf_cfg.get("norm", "l2")
    transformer = TfidfTransformer(
        norm=None if norm in (None, "none") else norm,
        use_idf=True,
        smooth_idf=bool(tfidf_cfg.get("smooth_idf", True)),
        sublinear_tf=bool(tfidf_cfg.get("sublinear_tf", False)),
    )
    weighted = transformer.fit_transform(dtm.matrix)
    return DocumentTermMatrix(weighted, dtm.doc_ids, dtm.terms, weighting=WEIGHT_TFIDF)


# ---------------------------------------------------------------------------
# Term statistics and filtering
# ---------------------------------------------------------------------------


def term_frequencies(dtm: DocumentTermMatrix) -> pd.Series:
    """
    Column sums of the matrix, sorted descending (ties alphabetically).

    For a count matrix these are corpus-wide term frequencies; for a tf-idf
    matrix they are summed weights.
    """
    totals = np.asarray(dtm.matrix.sum(axis=0)).ravel()
    freqs = pd.Series(totals, index=pd.Index(dtm.terms, name="term"), name="frequency")
    return freqs.sort_index().sort_values(ascending=False, kind="mergesort")


def find_freq_terms(
    dtm: DocumentTermMatrix,
    lowfreq: float = 0,
    highfreq: float = math.inf,
) -> List[str]:
    """
    Terms whose total frequency lies within [lowfreq, highfreq], in
    alphabetical order.
    """
    freqs = term_frequencies(dtm)
    mask = (freqs >= lowfreq) & (freqs <= highfreq)
    return sorted(freqs.index[mask].tolist())


def _select_terms(dtm: DocumentTermMatrix, keep: np.ndarray) -> DocumentTermMatrix:
    columns = np.flatnonzero(keep)
    return DocumentTermMatrix(
        dtm.matrix[:, columns],
        dtm.doc_ids,
        [dtm.terms[i] for i in columns],
        weighting=dtm.weighting,
    )


def remove_sparse_terms(dtm: DocumentTermMatrix, sparse: float) -> DocumentTermMatrix:
    """
    Drop terms that are missing from too many documents.

    A term is kept when it occurs in more than ``n_docs * (1 - sparse)``
    documents, i.e. when its own sparsity is below `sparse`.

    Raises
    ------
    ValueError
        If `sparse` is not strictly between 0 and 1.
    """
    if not 0 < sparse < 1:
        raise ValueError(f"sparse must be in the open interval (0, 1), got {sparse}.")

    doc_freq = np.asarray((dtm.matrix > 0).sum(axis=0)).ravel()
    keep = doc_freq > dtm.n_docs * (1 - sparse)
    return _select_terms(dtm, keep)


def find_assocs(dtm: DocumentTermMatrix, term: str, corlimit: float) -> pd.Series:
    """
    Terms whose Pearson correlation with `term` across documents is at
    least `corlimit`.

    Correlations are rounded to two decimals before filtering. Terms with
    constant columns have no defined correlation and are skipped.

    Raises
    ------
    KeyError
        If `term` is not in the vocabulary.
    """
    try:
        col = dtm.terms.index(term)
    except ValueError:
        raise KeyError(f"Term '{term}' not found in document-term matrix.") from None

    dense = dtm.matrix.toarray().astype(float)
    centered = dense - dense.mean(axis=0)
    x = centered[:, col]

    with np.errstate(divide="ignore", invalid="ignore"):
        num = x @ centered
        den = np.sqrt((x ** 2).sum()) * np.sqrt((centered ** 2).sum(axis=0))
        corr = num / den

    assocs = pd.Series(corr, index=pd.Index(dtm.terms, name="term"), name=term)
    assocs = assocs.drop(term).dropna().round(2)
    assocs = assocs[assocs >= corlimit]
    return assocs.sort_index().sort_values(ascending=False, kind="mergesort")


# ---------------------------------------------------------------------------
# Dense views
# ---------------------------------------------------------------------------


def to_dataframe(dtm: DocumentTermMatrix, transpose: bool = False) -> pd.DataFrame:
    """
    Dense DataFrame with documents as rows and terms as columns
    (terms as rows when `transpose` is True).
    """
    df = pd.DataFrame(
        dtm.matrix.toarray(),
        index=pd.Index(dtm.doc_ids, name="document"),
        columns=pd.Index(dtm.terms, name="term"),
    )
    return df.T if transpose else df


def inspect(
    dtm: DocumentTermMatrix,
    docs: Optional[Sequence[int]] = None,
    terms: Optional[Sequence[str]] = None,
) -> pd.DataFrame:
    """
    Dense slice of the matrix.

    Parameters
    ----------
    dtm : DocumentTermMatrix
        Matrix to inspect.
    docs : Optional[Sequence[int]]
        Row positions to show (all rows when None).
    terms : Optional[Sequence[str]]
        Terms to show (all terms when None). Unknown terms raise KeyError.
    """
    rows = list(range(dtm.n_docs)) if docs is None else list(docs)

    if terms is None:
        cols = list(range(dtm.n_terms))
    else:
        lookup = {t: i for i, t in enumerate(dtm.terms)}
        missing = [t for t in terms if t not in lookup]
        if missing:
            raise KeyError(f"Terms not found in document-term matrix: {missing}")
        cols = [lookup[t] for t in terms]

    block = dtm.matrix[rows][:, cols].toarray()
    return pd.DataFrame(
        block,
        index=pd.Index([dtm.doc_ids[r] for r in rows], name="document"),
        columns=pd.Index([dtm.terms[c] for c in cols], name="term"),
    )


# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------


def save_document_term_matrix(
    dtm: DocumentTermMatrix,
    artifacts_dir: str,
    filename: str = DEFAULT_DTM_FILENAME,
) -> str:
    """
    Persist a document-term matrix with joblib and return the file path.
    """
    ensure_dir_exists(artifacts_dir)
    path = os.path.join(artifacts_dir, filename)
    joblib.dump(dtm, path)
    return path


def load_document_term_matrix(
    artifacts_dir: str,
    filename: str = DEFAULT_DTM_FILENAME,
) -> DocumentTermMatrix:
    """
    Load a previously saved document-term matrix.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    """
    path = os.path.join(artifacts_dir, filename)
    if not os.path.exists(path):
        raise FileNotFoundError(f"Document-term matrix not found at: {path}")

    dtm: DocumentTermMatrix = joblib.load(path)
    return dtm
