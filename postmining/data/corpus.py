"""
A small corpus container: ordered text documents plus per-document metadata.

Documents are plain strings; metadata is a pandas DataFrame whose rows line
up with the documents. Transformations never mutate a corpus in place:
`Corpus.map` and `Corpus.filter` return new corpora, so every stage of the
walkthrough can be inspected side by side.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Iterator, List, Optional, Sequence, Union

import numpy as np
import pandas as pd


class Corpus:
    """Ordered collection of text documents with aligned metadata."""

    def __init__(
        self,
        documents: Iterable[Any],
        meta: Optional[pd.DataFrame] = None,
        ids: Optional[Sequence[Any]] = None,
    ) -> None:
        self._documents: List[str] = [str(doc) for doc in documents]
        n_docs = len(self._documents)

        if meta is None:
            meta = pd.DataFrame(index=range(n_docs))
        elif len(meta) != n_docs:
            raise ValueError(
                f"Metadata has {len(meta)} rows but the corpus has {n_docs} documents."
            )
        self._meta = meta.reset_index(drop=True)

        if ids is None:
            ids = list(range(n_docs))
        elif len(ids) != n_docs:
            raise ValueError(
                f"Got {len(ids)} document ids for {n_docs} documents."
            )
        self._ids = list(ids)

    @classmethod
    def from_dataframe(
        cls,
        df: pd.DataFrame,
        text_column: str = "text",
        meta_columns: Optional[Sequence[str]] = None,
    ) -> "Corpus":
        """
        Build a corpus from one text column of a DataFrame.

        Every other column becomes metadata unless `meta_columns` narrows
        the selection. Document ids are taken from an "id" column when the
        frame has one, otherwise from the row position.
        """
        if text_column not in df.columns:
            raise KeyError(
                f"Text column '{text_column}' not found in DataFrame. "
                f"Available columns: {list(df.columns)}"
            )

        if meta_columns is None:
            meta_columns = [c for c in df.columns if c not in (text_column, "id")]
        meta = df.loc[:, list(meta_columns)].copy()

        ids = df["id"].tolist() if "id" in df.columns else None
        return cls(df[text_column].fillna("").tolist(), meta=meta, ids=ids)

    # ------------------------------------------------------------------
    # Container protocol
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._documents)

    def __iter__(self) -> Iterator[str]:
        return iter(self._documents)

    def __getitem__(self, key: Union[int, slice, Sequence[int], Sequence[bool], np.ndarray]):
        if isinstance(key, (int, np.integer)):
            return self._documents[key]

        if isinstance(key, slice):
            positions = list(range(len(self)))[key]
        else:
            arr = np.asarray(key)
            if arr.dtype == bool:
                if len(arr) != len(self):
                    raise IndexError(
                        f"Boolean mask of length {len(arr)} does not match "
                        f"corpus of length {len(self)}."
                    )
                positions = np.flatnonzero(arr).tolist()
            else:
                positions = arr.astype(int).tolist()

        return self._subset(positions)

    def __repr__(self) -> str:
        return f"<<Corpus>> documents: {len(self)}, metadata: {list(self._meta.columns)}"

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def content(self) -> List[str]:
        return list(self._documents)

    @property
    def meta(self) -> pd.DataFrame:
        return self._meta

    @property
    def ids(self) -> List[Any]:
        return list(self._ids)

    # ------------------------------------------------------------------
    # Transformations
    # ------------------------------------------------------------------

    def map(self, fn: Callable[..., str], *args: Any, **kwargs: Any) -> "Corpus":
        """
        Apply `fn(document, *args, **kwargs)` to every document and return
        a new corpus with the same metadata and ids.
        """
        transformed = [fn(doc, *args, **kwargs) for doc in self._documents]
        return Corpus(transformed, meta=self._meta.copy(), ids=self._ids)

    def filter(self, predicate: Callable[[str, pd.Series], bool]) -> "Corpus":
        """
        Keep the documents for which `predicate(text, meta_row)` is true.
        """
        positions = [
            i
            for i, doc in enumerate(self._documents)
            if predicate(doc, self._meta.iloc[i])
        ]
        return self._subset(positions)

    def inspect(self, n: int = 5) -> pd.DataFrame:
        """
        Return the first `n` documents alongside their metadata.
        """
        head = self._meta.head(n).copy()
        head.insert(0, "text", self._documents[:n])
        if "id" not in head.columns:
            head.insert(0, "id", self._ids[:n])
        return head

    def _subset(self, positions: List[int]) -> "Corpus":
        return Corpus(
            [self._documents[i] for i in positions],
            meta=self._meta.iloc[positions].copy(),
            ids=[self._ids[i] for i in positions],
        )
