"""
Dataset loading utilities for the social-media posts CSV.

This module is responsible for:
- reading the data configuration from config/data.yaml
- loading the raw CSV file into a pandas DataFrame
- normalizing the message and like-count columns to standard names
  ("text", "likes")
- applying basic cleaning (drop NA messages, drop duplicates) as configured

The resulting DataFrame is ready to be wrapped in a Corpus.
"""

from __future__ import annotations

import os
from typing import Any, Dict

import pandas as pd

from postmining.utils.common import load_yaml


DEFAULT_DATA_CONFIG_PATH = "config/data.yaml"

REQUIRED_SECTIONS = ("dataset", "preprocessing", "dtm", "tfidf")


def load_data_config(config_path: str = DEFAULT_DATA_CONFIG_PATH) -> Dict[str, Any]:
    """
    Load and return the full data configuration dictionary.

    Parameters
    ----------
    config_path : str, optional
        Path to the data YAML configuration file.

    Returns
    -------
    Dict[str, Any]
        Dictionary containing the "dataset", "preprocessing", "dtm" and
        "tfidf" sections.

    Raises
    ------
    KeyError
        If one of the required sections is missing.
    """
    cfg = load_yaml(config_path)

    for section in REQUIRED_SECTIONS:
        if section not in cfg:
            raise KeyError(f'Missing "{section}" section in data config: {config_path}')

    return cfg


def load_posts(config_path: str = DEFAULT_DATA_CONFIG_PATH) -> pd.DataFrame:
    """
    Load the posts CSV according to the configuration.

    This function:
    - reads the CSV specified in config/data.yaml
    - ensures the message and like-count columns exist
    - optionally drops rows without a message and duplicate messages
    - renames the columns to "text" and "likes"
    - coerces likes to integers (missing or invalid values become 0)

    Parameters
    ----------
    config_path : str, optional
        Path to the data YAML configuration file.

    Returns
    -------
    pd.DataFrame
        DataFrame with columns ["text", "likes", ...] and a fresh index.

    Raises
    ------
    FileNotFoundError
        If the dataset CSV file cannot be found.
    ValueError
        If required columns are missing, or if the CSV already has a
        "text"/"likes" column besides the configured ones.
    """
    cfg = load_data_config(config_path)
    dataset_cfg = cfg["dataset"]

    csv_path = dataset_cfg.get("path", "data/raw/posts_sample.csv")
    text_column = dataset_cfg.get("text_column", "message")
    likes_column = dataset_cfg.get("likes_column", "likes_count")
    drop_duplicates = bool(dataset_cfg.get("drop_duplicates", True))
    drop_na_text = bool(dataset_cfg.get("drop_na_text", True))
    encoding = dataset_cfg.get("encoding", "utf-8")

    if not os.path.exists(csv_path):
        raise FileNotFoundError(f"Posts CSV not found at: {csv_path}")

    df = pd.read_csv(csv_path, encoding=encoding)

    missing_cols = [col for col in (text_column, likes_column) if col not in df.columns]
    if missing_cols:
        raise ValueError(
            f"Missing required column(s) in posts CSV: {missing_cols}. "
            f"Available columns: {list(df.columns)}"
        )

    clashes = [
        target
        for source, target in ((text_column, "text"), (likes_column, "likes"))
        if source != target and target in df.columns
    ]
    if clashes:
        raise ValueError(
            f"Posts CSV already has column(s) {clashes}, which would clash with the "
            f"renamed '{text_column}'/'{likes_column}' columns."
        )

    if drop_na_text:
        df = df.dropna(subset=[text_column])

    if drop_duplicates:
        df = df.drop_duplicates(subset=[text_column], keep="first")

    df = df.rename(columns={text_column: "text", likes_column: "likes"})

    df["text"] = df["text"].fillna("").astype(str)
    df["likes"] = pd.to_numeric(df["likes"], errors="coerce").fillna(0).astype(int)

    return df.reset_index(drop=True)
