"""
Binary storage of weight tables.

Layout, little-endian: a uint32 number of tables, then for every table a uint64 length
followed by that many float32 weights, in table order.
"""

from __future__ import annotations

import logging
from pathlib import Path

from numpy import array, dtype, fromfile, ndarray

logger = logging.getLogger(__name__)

COUNT_TYPE = dtype('<u4')
LENGTH_TYPE = dtype('<u8')
WEIGHT_TYPE = dtype('<f4')


class WeightFileError(RuntimeError):
    """Raised when a weight file cannot be loaded into the allocated tables."""


def save_weights(path: str | Path, tables: list[ndarray]) -> None:
    """
    Write weight tables to a file.

    Parameters
    ----------
    path : str | Path
        Destination file, overwritten.
    tables : list[ndarray]
        Flat weight tables, written in list order.
    """
    with open(path, 'wb') as stream:
        array([len(tables)], dtype=COUNT_TYPE).tofile(stream)
        for table in tables:
            array([table.size], dtype=LENGTH_TYPE).tofile(stream)
            table.astype(WEIGHT_TYPE, copy=False).tofile(stream)
    logger.info('Saved %d weight tables to %s.', len(tables), path)


def _read(stream, kind: dtype, count: int, path: str | Path) -> ndarray:
    values = fromfile(stream, dtype=kind, count=count)
    if values.size != count:
        raise WeightFileError(f'{path}: truncated file, expected {count} values of {kind}, got {values.size}')
    return values


def load_weights(path: str | Path, tables: list[ndarray]) -> None:
    """
    Fill allocated weight tables from a file.

    Parameters
    ----------
    path : str | Path
        Source file.
    tables : list[ndarray]
        Tables to fill in place.

    Raises
    ------
    WeightFileError
        If the file is missing, truncated, or declares a different number or size of tables.

    Notes
    -----
    The whole file is read and checked before any table is modified.
    """
    try:
        stream = open(path, 'rb')
    except OSError as error:
        raise WeightFileError(f'{path}: cannot open weight file ({error})') from error

    with stream:
        count = int(_read(stream, COUNT_TYPE, 1, path)[0])
        if count != len(tables):
            raise WeightFileError(f'{path}: file holds {count} tables, expected {len(tables)}')

        loaded = []
        for index, table in enumerate(tables):
            length = int(_read(stream, LENGTH_TYPE, 1, path)[0])
            if length != table.size:
                raise WeightFileError(f'{path}: table {index} holds {length} weights, expected {table.size}')
            loaded.append(_read(stream, WEIGHT_TYPE, length, path))

    for table, values in zip(tables, loaded):
        table[:] = values
    logger.info('Loaded %d weight tables from %s.', len(tables), path)
