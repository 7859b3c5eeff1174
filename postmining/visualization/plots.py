"""
Plotting utilities for the posts walkthrough.

This module provides helpers to visualize:

- the most frequent (or highest tf-idf) terms as a bar chart
- term weights as a word cloud (layout by the `wordcloud` package)
- the distribution of likes across posts

Every helper returns the Matplotlib (fig, ax) pair, optionally saves the
figure to `out_path`, and either shows or closes it depending on `show`.
"""

from __future__ import annotations

from typing import Mapping, Optional, Tuple, Union

import matplotlib.pyplot as plt
import pandas as pd
from wordcloud import WordCloud


Frequencies = Union[pd.Series, Mapping[str, float]]


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _as_series(freqs: Frequencies) -> pd.Series:
    if isinstance(freqs, pd.Series):
        return freqs.astype(float)
    return pd.Series(dict(freqs), dtype=float)


def _finish(fig, out_path: Optional[str], show: bool) -> None:
    if out_path is not None:
        fig.savefig(out_path, dpi=300, bbox_inches="tight")

    if show:
        plt.show()
    else:
        plt.close(fig)


# ---------------------------------------------------------------------------
# Term frequency bar chart
# ---------------------------------------------------------------------------


def plot_term_frequencies(
    freqs: Frequencies,
    top_k: int = 20,
    title: Optional[str] = None,
    ylabel: str = "Frequency",
    figsize: Tuple[float, float] = (10.0, 6.0),
    rotate_xticks: int = 45,
    out_path: Optional[str] = None,
    show: bool = True,
):
    """
    Plot a bar chart of the `top_k` terms by frequency or weight.

    Parameters
    ----------
    freqs : pd.Series or Mapping[str, float]
        Term -> frequency (or summed tf-idf weight).
    top_k : int
        Number of terms to show, highest first.
    title : Optional[str]
        Title for the plot. If None, a default is constructed.
    ylabel : str
        Label of the y-axis.
    figsize : Tuple[float, float]
        Figure size in inches.
    rotate_xticks : int
        Rotation angle for x-axis tick labels.
    out_path : Optional[str]
        If provided, save the figure to this path (e.g., PNG).
    show : bool
        If True, call plt.show(). If False, close the figure after saving.

    Returns
    -------
    (fig, ax)
        Matplotlib Figure and Axes objects.
    """
    series = _as_series(freqs)
    if series.empty:
        raise ValueError("No term frequencies to plot.")

    top = series.sort_values(ascending=False, kind="mergesort")
    if top_k is not None and top_k > 0:
        top = top.head(top_k)

    fig, ax = plt.subplots(figsize=figsize)
    positions = range(len(top))
    ax.bar(positions, top.values)

    ax.set_xticks(list(positions))
    ax.set_xticklabels(top.index.astype(str), rotation=rotate_xticks, ha="right")
    ax.set_xlabel("Term")
    ax.set_ylabel(ylabel)
    ax.set_title(title or f"Top {len(top)} terms")

    fig.tight_layout()
    _finish(fig, out_path, show)
    return fig, ax


# ---------------------------------------------------------------------------
# Word cloud
# ---------------------------------------------------------------------------


def plot_wordcloud(
    freqs: Frequencies,
    max_words: int = 100,
    width: int = 800,
    height: int = 400,
    background_color: str = "white",
    colormap: str = "viridis",
    random_state: Optional[int] = 42,
    title: Optional[str] = None,
    figsize: Tuple[float, float] = (10.0, 5.0),
    out_path: Optional[str] = None,
    show: bool = True,
):
    """
    Render term weights as a word cloud.

    Terms with non-positive weight are dropped before layout.

    Returns
    -------
    (fig, ax)
        Matplotlib Figure and Axes objects.
    """
    series = _as_series(freqs)
    series = series[series > 0]
    if series.empty:
        raise ValueError("No positive term weights to draw in a word cloud.")

    cloud = WordCloud(
        width=width,
        height=height,
        max_words=max_words,
        background_color=background_color,
        colormap=colormap,
        random_state=random_state,
    ).generate_from_frequencies(series.to_dict())

    fig, ax = plt.subplots(figsize=figsize)
    ax.imshow(cloud, interpolation="bilinear")
    ax.axis("off")
    if title:
        ax.set_title(title)

    fig.tight_layout()
    _finish(fig, out_path, show)
    return fig, ax


# ---------------------------------------------------------------------------
# Likes histogram
# ---------------------------------------------------------------------------


def plot_likes_distribution(
    posts: pd.DataFrame,
    likes_column: str = "likes",
    bins: int = 30,
    title: Optional[str] = None,
    figsize: Tuple[float, float] = (8.0, 5.0),
    out_path: Optional[str] = None,
    show: bool = True,
):
    """
    Histogram of likes per post.

    Returns
    -------
    (fig, ax)
        Matplotlib Figure and Axes objects.
    """
    if likes_column not in posts.columns:
        raise ValueError(
            f"Column '{likes_column}' not found. Available columns: {list(posts.columns)}"
        )

    likes = pd.to_numeric(posts[likes_column], errors="coerce").dropna()
    if likes.empty:
        raise ValueError("No like counts to plot.")

    fig, ax = plt.subplots(figsize=figsize)
    ax.hist(likes, bins=bins, edgecolor="black")
    ax.set_xlabel("Likes")
    ax.set_ylabel("Posts")
    ax.set_title(title or "Distribution of likes per post")

    fig.tight_layout()
    _finish(fig, out_path, show)
    return fig, ax
