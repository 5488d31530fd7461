"""Delimited text <-> list of header-keyed rows, backed by pandas."""

import io

import pandas as pd

from bureauto.core.errors import ParseError

DEFAULT_DELIMITER = ";"


def parse_rows(text: str, delimiter: str = DEFAULT_DELIMITER) -> list[dict[str, str]]:
    """Decode text with a header row into a list of dicts.

    Every cell is kept as a string (empty cells become ""), header names are
    trimmed and blank lines are skipped.
    """
    if not text.strip():
        return []
    try:
        df = pd.read_csv(
            io.StringIO(text),
            sep=delimiter,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            index_col=False,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        raise ParseError(f"Malformed delimited file: {exc}") from exc

    df.columns = [str(c).strip() for c in df.columns]
    # Short rows come back as NaN even with keep_default_na off
    df = df.fillna("")
    return df.to_dict(orient="records")


def unparse_rows(rows: list[dict], delimiter: str = DEFAULT_DELIMITER) -> str:
    """Encode rows back into delimited text with a header row.

    Columns follow first-seen key order; an empty list gives "".
    """
    if not rows:
        return ""
    columns: list[str] = []
    for row in rows:
        for key in row:
            if key not in columns:
                columns.append(key)
    df = pd.DataFrame(rows, columns=columns)
    return df.to_csv(sep=delimiter, index=False, lineterminator="\n").rstrip("\n")
