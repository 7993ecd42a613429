# pupil_filter/io.py
from __future__ import annotations

from pathlib import Path
from typing import Union

import pandas as pd

PathLike = Union[str, Path]


def _is_tsv(path: PathLike) -> bool:
    return Path(path).suffix.lower() in (".tsv", ".txt")


def read_table(path: PathLike) -> pd.DataFrame:
    """
    Read a recording.

    - .tsv/.txt: Tobii export (tab separator, comma decimal)
    - everything else: plain CSV
    """
    if _is_tsv(path):
        return pd.read_csv(path, sep="\t", decimal=",", low_memory=False)
    return pd.read_csv(path, low_memory=False)


def write_table(df: pd.DataFrame, path: PathLike) -> None:
    """
    Write the processed table; format follows the suffix like read_table.
    """
    if _is_tsv(path):
        df.to_csv(path, sep="\t", index=False, decimal=",")
    else:
        df.to_csv(path, index=False)
