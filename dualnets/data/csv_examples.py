"""Load training examples from CSV files."""

from __future__ import annotations

from pathlib import Path
from typing import List, Sequence

import numpy as np
import pandas as pd

from ..core.types import Example


def load_csv_examples(
    path: str | Path, target_cols: Sequence[str] | str | None = None
) -> List[Example]:
    """Read ``path`` with every non-target column as an input.

    Without ``target_cols`` the last column is the target.
    """

    df = pd.read_csv(path)
    if df.shape[1] < 2:
        raise ValueError(f"CSV {path} needs at least one input and one target column")
    if target_cols is None:
        targets = [df.columns[-1]]
    elif isinstance(target_cols, str):
        targets = [target_cols]
    else:
        targets = list(target_cols)
    missing = [col for col in targets if col not in df.columns]
    if missing:
        raise KeyError(f"Target columns {missing!r} not found in CSV")
    y = df[targets].to_numpy(dtype=np.float64)
    X = df.drop(columns=targets).to_numpy(dtype=np.float64)
    return [
        Example(inputs=tuple(float(v) for v in row_x), targets=tuple(float(v) for v in row_y))
        for row_x, row_y in zip(X, y)
    ]


__all__ = ["load_csv_examples"]
