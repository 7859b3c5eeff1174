"""
End-to-end tests for the walkthrough on the bundled sample posts.

Outputs are redirected to tmp_path through a generated run config, so the
test never writes into the project tree.
"""

from __future__ import annotations

import copy
import os

import pandas as pd

from postmining.features.document_term import (
    WEIGHT_TF,
    WEIGHT_TFIDF,
    build_document_term_matrix,
    load_document_term_matrix,
)
from postmining.pipeline.walkthrough import run_walkthrough
from postmining.utils.common import load_run_config


def _run_config(tmp_path):
    cfg = load_run_config("config/run.yaml")
    cfg["paths"] = {
        "results_dir": str(tmp_path / "results"),
        "figures_dir": str(tmp_path / "figures"),
        "artifacts_dir": str(tmp_path / "artifacts"),
        "logs_dir": str(tmp_path / "logs"),
    }
    cfg["logging"]["to_file"] = False
    cfg["plots"]["wordcloud"].update({"width": 200, "height": 100})
    return cfg


def test_run_walkthrough_smoke(tmp_path, write_yaml):
    run_config_path = write_yaml("run.yaml", _run_config(tmp_path))

    results = run_walkthrough(
        data_config_path="config/data.yaml",
        run_config_path=run_config_path,
    )

    corpus = results["corpus"]
    dtm = results["dtm"]
    tfidf = results["tfidf"]

    assert len(corpus) == 20
    assert all(doc == doc.lower() for doc in corpus)
    assert dtm.n_docs == 20
    assert dtm.weighting == WEIGHT_TF
    assert tfidf.weighting == WEIGHT_TFIDF
    assert tfidf.terms == dtm.terms

    # "consisting" appears in two posts and is stemmed.
    assert "consist" in dtm.terms
    assert "consisting" not in dtm.terms
    assert "the" not in dtm.terms

    freqs = results["frequencies"]
    assert freqs.is_monotonic_decreasing
    assert freqs["consist"] == 2

    comparison = results["comparison"]
    assert list(comparison.columns) == ["term", "popular", "other"]

    for name in (
        "term_frequencies",
        "tfidf_weights",
        "wordcloud_frequencies",
        "wordcloud_tfidf",
        "likes_distribution",
    ):
        assert os.path.exists(results["figures"][name])

    saved = pd.read_csv(tmp_path / "results" / "term_frequencies.csv", index_col=0)
    assert saved.iloc[:, 0].sum() == freqs.sum()
    assert os.path.exists(tmp_path / "results" / "tfidf_weights.csv")
    assert os.path.exists(tmp_path / "results" / "popular_vs_other.csv")

    loaded = load_document_term_matrix(str(tmp_path / "artifacts"))
    assert loaded.terms == dtm.terms


def test_run_walkthrough_removes_sparse_terms(tmp_path, write_yaml, data_cfg):
    cfg = copy.deepcopy(data_cfg)
    cfg["dtm"]["sparse"] = 0.9

    results = run_walkthrough(
        data_config_path=write_yaml("data.yaml", cfg),
        run_config_path=write_yaml("run.yaml", _run_config(tmp_path)),
    )

    dtm = results["dtm"]
    full = build_document_term_matrix(results["corpus"], data_cfg)
    assert dtm.n_docs == 20
    assert dtm.n_terms < full.n_terms
    assert results["tfidf"].terms == dtm.terms

    # With 20 posts and sparse=0.9 a term must occur in more than 2 of them.
    doc_freq = (dtm.matrix > 0).sum(axis=0)
    assert (doc_freq > 2).all()


def test_run_walkthrough_with_empty_vocabulary(tmp_path, write_yaml, data_cfg):
    cfg = copy.deepcopy(data_cfg)
    cfg["dtm"]["min_word_length"] = 50

    results = run_walkthrough(
        data_config_path=write_yaml("data.yaml", cfg),
        run_config_path=write_yaml("run.yaml", _run_config(tmp_path)),
    )

    assert results["dtm"].shape == (20, 0)
    assert results["frequencies"].empty
    assert results["comparison"].empty
    assert set(results["figures"]) == {"likes_distribution"}
