"""
CSV retrieval and row extraction for the grant export.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional

import pandas as pd

from granthub.config import DATA_SOURCE


RowsAndErrors = tuple[list[dict[str, Optional[str]]], list[str]]


def _describe(source) -> str:
    if isinstance(source, (str, Path)):
        name = str(source)
        return name if len(name) <= 80 else name[:77] + "..."
    return type(source).__name__


def _header_names(cells) -> list[str]:
    """Header cells as column names, de-duplicated the way pandas does it."""
    names: list[str] = []
    seen: dict[str, int] = {}
    for i, cell in enumerate(cells):
        name = cell if cell else f"Unnamed: {i}"
        if name in seen:
            seen[name] += 1
            name = f"{name}.{seen[name]}"
        else:
            seen[name] = 0
        names.append(name)
    return names


def read_grant_csv(source) -> pd.DataFrame:
    """Read the export with every cell as text.

    Header names are kept verbatim (including trailing spaces) and empty
    cells stay as "" instead of NaN. The header is read as an ordinary row,
    so a data row with more fields than the header raises ParserError
    instead of being taken as an implicit index column.
    """
    raw = pd.read_csv(
        source,
        header=None,
        index_col=False,
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=True,
    )
    # Short rows still come back as NaN
    raw = raw.fillna("")
    df = raw.iloc[1:].reset_index(drop=True)
    df.columns = _header_names(raw.iloc[0].tolist())
    return df


def frame_to_rows(df: pd.DataFrame) -> list[dict[str, Optional[str]]]:
    """DataFrame -> list of row dicts, skipping rows whose cells are all blank."""
    if df.empty:
        return []
    blank = df.apply(lambda col: col.str.strip() == "").all(axis=1)
    return df[~blank].to_dict("records")


def fetch_rows(source=DATA_SOURCE) -> RowsAndErrors:
    """Load raw rows from a CSV path, URL or file-like object.

    Read/parse failures are returned in the error list rather than raised, so
    the caller decides how to surface them.
    """
    print(f"Loading grant data from {_describe(source)}...")
    try:
        df = read_grant_csv(source)
    except pd.errors.EmptyDataError:
        print("  Source is empty — starting with empty dataset")
        return [], []
    except (pd.errors.ParserError, OSError, UnicodeDecodeError, ValueError) as exc:
        print(f"  Warning: could not read grant data: {exc}")
        return [], [str(exc)]

    rows = frame_to_rows(df)
    print(f"  {len(rows):,} rows, {len(df.columns)} columns")
    return rows, []
