"""
End-to-end text-mining walkthrough over the posts CSV.

The run goes through the steps of the tutorial in order:

- load the posts and wrap them in a Corpus (likes kept as metadata)
- apply the preprocessing chain (lowercase, stopwords, punctuation,
  whitespace, stemming)
- build a term-count document-term matrix, optionally dropping sparse terms
- compute corpus-wide term frequencies
- re-weight the matrix with tf-idf and sum the weights per term
- compare the vocabulary of popular posts against the rest
- draw bar charts, word clouds and a likes histogram
- write tables under the results directory and persist the matrix

This module is callable both as a library function and as a standalone
script (via `python -m postmining.pipeline.walkthrough`).
"""

from __future__ import annotations

import os
from typing import Any, Dict, Optional

import pandas as pd

from postmining.analysis.likes import compare_top_terms, split_by_likes
from postmining.data.corpus import Corpus
from postmining.data.datasets import DEFAULT_DATA_CONFIG_PATH, load_data_config, load_posts
from postmining.features.document_term import (
    build_document_term_matrix,
    remove_sparse_terms,
    save_document_term_matrix,
    term_frequencies,
    weight_tfidf,
)
from postmining.features.preprocessing import preprocess_corpus, trace_preprocessing
from postmining.utils.common import (
    DEFAULT_RUN_CONFIG_PATH,
    ensure_dir_exists,
    get_logger,
    load_run_config,
    log_file_path,
)
from postmining.visualization.plots import (
    plot_likes_distribution,
    plot_term_frequencies,
    plot_wordcloud,
)


# ---------------------------------------------------------------------------
# Figures
# ---------------------------------------------------------------------------


def _draw_figures(
    posts: pd.DataFrame,
    frequencies: pd.Series,
    tfidf_weights: pd.Series,
    run_cfg: Dict[str, Any],
    logger,
) -> Dict[str, str]:
    """
    Draw every figure of the walkthrough and return name -> file path.

    Figures with nothing to show are skipped with a warning.
    """
    paths_cfg = run_cfg.get("paths", {}) or {}
    plots_cfg = run_cfg.get("plots", {}) or {}
    cloud_cfg = plots_cfg.get("wordcloud", {}) or {}

    figures_dir = paths_cfg.get("figures_dir", "outputs/figures")
    ensure_dir_exists(figures_dir)

    top_k = int(plots_cfg.get("top_k", 20))
    show = bool(plots_cfg.get("show", False))
    figures: Dict[str, str] = {}

    if (frequencies > 0).any():
        path = os.path.join(figures_dir, "term_frequencies.png")
        plot_term_frequencies(
            frequencies,
            top_k=top_k,
            title=f"Top {top_k} terms by frequency",
            out_path=path,
            show=show,
        )
        figures["term_frequencies"] = path

        path = os.path.join(figures_dir, "wordcloud_frequencies.png")
        plot_wordcloud(frequencies, title="Term frequencies", out_path=path, show=show, **cloud_cfg)
        figures["wordcloud_frequencies"] = path
    else:
        logger.warning("No term frequencies available; skipping frequency figures.")

    if (tfidf_weights > 0).any():
        path = os.path.join(figures_dir, "tfidf_weights.png")
        plot_term_frequencies(
            tfidf_weights,
            top_k=top_k,
            title=f"Top {top_k} terms by summed tf-idf",
            ylabel="Summed tf-idf",
            out_path=path,
            show=show,
        )
        figures["tfidf_weights"] = path

        path = os.path.join(figures_dir, "wordcloud_tfidf.png")
        plot_wordcloud(tfidf_weights, title="tf-idf weights", out_path=path, show=show, **cloud_cfg)
        figures["wordcloud_tfidf"] = path
    else:
        logger.warning("No tf-idf weights available; skipping tf-idf figures.")

    if not posts.empty:
        path = os.path.join(figures_dir, "likes_distribution.png")
        plot_likes_distribution(
            posts,
            bins=int(plots_cfg.get("likes_bins", 30)),
            out_path=path,
            show=show,
        )
        figures["likes_distribution"] = path

    for name, path in figures.items():
        logger.info("Saved figure '%s' to %s", name, path)

    return figures


# ---------------------------------------------------------------------------
# Walkthrough
# ---------------------------------------------------------------------------


def run_walkthrough(
    data_config_path: str = DEFAULT_DATA_CONFIG_PATH,
    run_config_path: str = DEFAULT_RUN_CONFIG_PATH,
) -> Dict[str, Any]:
    """
    Run the full walkthrough and return its intermediate results.

    Parameters
    ----------
    data_config_path : str
        Path to config/data.yaml.
    run_config_path : str
        Path to config/run.yaml.

    Returns
    -------
    Dict[str, Any]
        Keys: "corpus" (preprocessed Corpus), "dtm" (term counts),
        "tfidf" (tf-idf weighted DTM), "frequencies", "tfidf_weights",
        "comparison" (popular vs other table) and "figures"
        (name -> saved path).
    """
    data_cfg = load_data_config(data_config_path)
    run_cfg = load_run_config(run_config_path)

    logger = get_logger(
        name="walkthrough",
        config=run_cfg,
        log_file_suffix="walkthrough",
    )
    if bool((run_cfg.get("logging", {}) or {}).get("to_file", False)):
        logger.info("Writing log to %s", log_file_path(run_cfg, "walkthrough"))

    paths_cfg = run_cfg.get("paths", {}) or {}
    results_dir = paths_cfg.get("results_dir", "outputs/results")
    ensure_dir_exists(results_dir)

    # Load posts and build the raw corpus
    posts = load_posts(config_path=data_config_path)
    logger.info("Loaded %d posts from %s", len(posts), data_cfg["dataset"].get("path"))

    raw_corpus = Corpus.from_dataframe(posts, text_column="text")
    logger.info("%r", raw_corpus)

    if len(raw_corpus) > 0:
        for step, text in trace_preprocessing(raw_corpus[0], data_cfg):
            logger.info("%-20s %s", step, text)

    # Preprocessing chain
    corpus = preprocess_corpus(raw_corpus, data_cfg, logger=logger)
    logger.info("Preprocessed %d documents.", len(corpus))

    # Term-count matrix
    dtm = build_document_term_matrix(corpus, data_cfg)
    logger.info("Term-count matrix:\n%s", dtm.summary())

    sparse = (data_cfg.get("dtm", {}) or {}).get("sparse")
    if sparse is not None:
        dtm = remove_sparse_terms(dtm, float(sparse))
        logger.info("After removing sparse terms (sparse=%s):\n%s", sparse, dtm.summary())

    frequencies = term_frequencies(dtm)
    logger.info("Most frequent terms:\n%s", frequencies.head(10).to_string())

    # tf-idf weighting
    tfidf = weight_tfidf(dtm, data_cfg)
    tfidf_weights = term_frequencies(tfidf).rename("tfidf")
    logger.info("tf-idf matrix:\n%s", tfidf.summary())
    logger.info("Highest summed tf-idf weights:\n%s", tfidf_weights.head(10).to_string())

    # Popular vs other posts
    analysis_cfg = run_cfg.get("analysis", {}) or {}
    popular, other = split_by_likes(
        corpus,
        quantile=float(analysis_cfg.get("popular_quantile", 0.75)),
    )
    comparison = compare_top_terms(
        build_document_term_matrix(popular, data_cfg),
        build_document_term_matrix(other, data_cfg),
        top_k=int(analysis_cfg.get("compare_top_k", 20)),
    )
    logger.info(
        "Popular posts: %d, other posts: %d. Top terms compared:\n%s",
        len(popular),
        len(other),
        comparison.head(10).to_string(index=False),
    )

    # Figures
    figures = _draw_figures(posts, frequencies, tfidf_weights, run_cfg, logger)

    # Tables and artifacts
    save_cfg = run_cfg.get("save", {}) or {}
    if bool(save_cfg.get("save_tables", True)):
        frequencies.to_csv(os.path.join(results_dir, "term_frequencies.csv"))
        tfidf_weights.to_csv(os.path.join(results_dir, "tfidf_weights.csv"))
        comparison.to_csv(os.path.join(results_dir, "popular_vs_other.csv"), index=False)
        logger.info("Saved term tables to %s", results_dir)

    if bool(save_cfg.get("save_dtm", True)):
        artifacts_dir = paths_cfg.get("artifacts_dir", "outputs/artifacts")
        dtm_path = save_document_term_matrix(dtm, artifacts_dir)
        logger.info("Saved document-term matrix to %s", dtm_path)

    logger.info("Walkthrough completed.")

    return {
        "corpus": corpus,
        "dtm": dtm,
        "tfidf": tfidf,
        "frequencies": frequencies,
        "tfidf_weights": tfidf_weights,
        "comparison": comparison,
        "figures": figures,
    }


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main(
    data_config_path: Optional[str] = None,
    run_config_path: Optional[str] = None,
) -> None:
    """
    Main entry point when running this module as a script.
    """
    run_walkthrough(
        data_config_path=data_config_path or DEFAULT_DATA_CONFIG_PATH,
        run_config_path=run_config_path or DEFAULT_RUN_CONFIG_PATH,
    )


if __name__ == "__main__":
    main()
