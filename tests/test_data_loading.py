"""
Tests for configuration and posts loading.

These tests validate that:

- config/data.yaml can be loaded and contains the required sections
- the bundled sample CSV loads into the standard "text"/"likes" layout
- missing files, sections and columns fail with informative errors
"""

from __future__ import annotations

import pandas as pd
import pytest

from postmining.data.datasets import load_data_config, load_posts


def test_load_data_config_has_required_keys():
    cfg = load_data_config("config/data.yaml")

    for section in ("dataset", "preprocessing", "dtm", "tfidf"):
        assert section in cfg

    assert cfg["dataset"]["text_column"] == "message"
    assert cfg["dataset"]["likes_column"] == "likes_count"


def test_load_data_config_missing_section(write_yaml):
    path = write_yaml("data.yaml", {"dataset": {}, "preprocessing": {}})
    with pytest.raises(KeyError, match="dtm"):
        load_data_config(path)


def test_load_posts_sample():
    df = load_posts(config_path="config/data.yaml")

    assert not df.empty
    assert "text" in df.columns
    assert "likes" in df.columns
    assert "message" not in df.columns
    assert pd.api.types.is_integer_dtype(df["likes"])

    # One empty message and one duplicate are dropped from the 22 rows.
    assert len(df) == 20
    assert df["text"].is_unique
    assert df.index.tolist() == list(range(20))


def test_load_posts_coerces_likes_and_keeps_duplicates_when_disabled(tmp_path, data_cfg, write_yaml):
    csv_path = tmp_path / "posts.csv"
    pd.DataFrame(
        {
            "message": ["Hello there", "Hello there", None],
            "likes_count": [3, "n/a", 7],
        }
    ).to_csv(csv_path, index=False)

    cfg = dict(data_cfg)
    cfg["dataset"] = dict(data_cfg["dataset"], path=str(csv_path), drop_duplicates=False)
    df = load_posts(write_yaml("data.yaml", cfg))

    assert df["text"].tolist() == ["Hello there", "Hello there"]
    assert df["likes"].tolist() == [3, 0]


def test_load_posts_missing_column(tmp_path, data_cfg, write_yaml):
    csv_path = tmp_path / "posts.csv"
    pd.DataFrame({"message": ["Hi"], "reactions": [1]}).to_csv(csv_path, index=False)

    cfg = dict(data_cfg)
    cfg["dataset"] = dict(data_cfg["dataset"], path=str(csv_path))

    with pytest.raises(ValueError, match="likes_count"):
        load_posts(write_yaml("data.yaml", cfg))


def test_load_posts_missing_file(tmp_path, data_cfg, write_yaml):
    cfg = dict(data_cfg)
    cfg["dataset"] = dict(data_cfg["dataset"], path=str(tmp_path / "nope.csv"))

    with pytest.raises(FileNotFoundError):
        load_posts(write_yaml("data.yaml", cfg))


def test_load_posts_rejects_existing_target_columns(tmp_path, data_cfg, write_yaml):
    csv_path = tmp_path / "posts.csv"
    pd.DataFrame(
        {"message": ["Hi"], "text": ["already here"], "likes_count": [1]}
    ).to_csv(csv_path, index=False)

    cfg = dict(data_cfg)
    cfg["dataset"] = dict(data_cfg["dataset"], path=str(csv_path))

    with pytest.raises(ValueError, match="text"):
        load_posts(write_yaml("data.yaml", cfg))


def test_load_posts_accepts_standard_column_names(tmp_path, data_cfg, write_yaml):
    csv_path = tmp_path / "posts.csv"
    pd.DataFrame({"text": ["Hi there"], "likes": [4]}).to_csv(csv_path, index=False)

    cfg = dict(data_cfg)
    cfg["dataset"] = dict(
        data_cfg["dataset"], path=str(csv_path), text_column="text", likes_column="likes"
    )
    df = load_posts(write_yaml("data.yaml", cfg))

    assert list(df.columns) == ["text", "likes"]
    assert df["likes"].tolist() == [4]
