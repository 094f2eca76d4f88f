from __future__ import annotations

import logging
from typing import List, Optional

import pandas as pd

from flight_delay.exceptions import IngestionError
from flight_delay.filesystem import FileSystem, LocalFileSystem

logger = logging.getLogger(__name__)


def read_table(path: str, names: Optional[List[str]] = None, fs: Optional[FileSystem] = None) -> pd.DataFrame:
    """Read a comma delimited, multi part dataset into one DataFrame.

    Every value is kept as text; empty cells become "". Zero length parts are
    skipped. Without ``names`` the first row of each part is its header,
    otherwise ``names`` are assigned by position and no header is consumed.
    Parts with differing columns are appended as a union of columns.
    """
    fs = fs or LocalFileSystem()
    frames = []
    for part in fs.list_parts(path):
        if part.size == 0:
            logger.info("Skipping empty part %s", part.path)
            continue
        try:
            with fs.open(part.path) as stream:
                frame = pd.read_csv(
                    stream,
                    header=None if names is not None else 0,
                    names=names,
                    index_col=False if names is not None else None,
                    dtype=str,
                    keep_default_na=False,
                )
        except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as exc:
            raise IngestionError(part.path, str(exc)) from exc
        frames.append(frame)

    if not frames:
        logger.info("No data under %s", path)
        return pd.DataFrame(columns=names or [], dtype=str)

    table = pd.concat(frames, ignore_index=True, sort=False).fillna("")
    logger.info("Read %d rows, %d columns from %d parts of %s",
                len(table), len(table.columns), len(frames), path)
    return table
