"""
Writer: samples and frames as polars tables, written to Parquet or CSV.

No other module should call df.write_parquet / df.write_csv directly.
"""

import logging
from pathlib import Path
from typing import List, Optional, Sequence, Union

import numpy as np
import polars as pl

from curveframe.core.types import CurveSamples, FrenetFrame


logger = logging.getLogger(__name__)


SUPPORTED_SUFFIXES = {'.parquet': 'parquet', '.csv': 'csv'}

FRAME_COLUMNS = [
    'index', 't', 's', 'x', 'y', 'z',
    'T_x', 'T_y', 'T_z',
    'N_x', 'N_y', 'N_z',
    'B_x', 'B_y', 'B_z',
    'curvature', 'torsion',
]


def arc_length_scale(samples: CurveSamples) -> float:
    """Factor converting unscaled s to physical arc length: (t_max - t_min) / (N - 1)."""
    t = np.asarray(samples.t)
    return float((t[-1] - t[0]) / (len(t) - 1))


def frames_to_dataframe(
    frames: Sequence[FrenetFrame],
    physical_scale: Optional[float] = None,
) -> pl.DataFrame:
    """
    One row per frame.

    Args:
        frames: Output of compute_frames
        physical_scale: If given, add s_physical = s * physical_scale

    Returns:
        DataFrame with FRAME_COLUMNS (+ s_physical)
    """
    rows = []
    for f in frames:
        rows.append({
            'index': f.index,
            't': f.t,
            's': f.s,
            'x': f.position.x,
            'y': f.position.y,
            'z': f.position.z,
            'T_x': f.tangent.x,
            'T_y': f.tangent.y,
            'T_z': f.tangent.z,
            'N_x': f.normal.x,
            'N_y': f.normal.y,
            'N_z': f.normal.z,
            'B_x': f.binormal.x,
            'B_y': f.binormal.y,
            'B_z': f.binormal.z,
            'curvature': f.curvature,
            'torsion': f.torsion,
        })

    schema = {c: (pl.Int64 if c == 'index' else pl.Float64) for c in FRAME_COLUMNS}
    df = pl.DataFrame(rows, schema=schema)

    if physical_scale is not None:
        df = df.with_columns((pl.col('s') * physical_scale).alias('s_physical'))

    return df


def samples_to_dataframe(samples: CurveSamples) -> pl.DataFrame:
    """Sample arrays as columns: t, s, x..z, dx..dz, d2x..d2z, d3x..d3z."""
    data = {
        't': np.asarray(samples.t, dtype=float),
        's': np.asarray(samples.s, dtype=float),
    }
    for prefix, arr in (('', samples.r), ('d', samples.r1), ('d2', samples.r2), ('d3', samples.r3)):
        arr = np.asarray(arr, dtype=float)
        for col, axis in enumerate('xyz'):
            data[f'{prefix}{axis}'] = arr[:, col]
    return pl.DataFrame(data)


def _safe_write(df: pl.DataFrame, path: Path, fmt: str) -> bool:
    """
    Guard against writing tables with no columns.

    Returns True if a file was written, False if skipped.
    """
    if df is None:
        return False

    if len(df.columns) == 0:
        logger.warning("Skipped %s (empty schema, 0 columns)", path)
        return False

    if fmt == 'csv':
        df.write_csv(str(path))
    else:
        df.write_parquet(str(path))
    return True


def write_table(
    df: pl.DataFrame,
    path: Union[str, Path],
    fmt: Optional[str] = None,
) -> Optional[Path]:
    """
    Write a table, choosing the format from the suffix unless fmt is given.

    Args:
        df: DataFrame to write (None or empty-schema -> skip)
        path: Output file
        fmt: 'parquet' or 'csv' (from suffix if not provided)

    Returns:
        Path to written file, or None if skipped
    """
    path = Path(path)

    if fmt is None:
        fmt = SUPPORTED_SUFFIXES.get(path.suffix.lower())
        if fmt is None:
            raise ValueError(
                f"Cannot infer format from {path.name!r}; use one of {sorted(SUPPORTED_SUFFIXES)}"
            )
    if fmt not in SUPPORTED_SUFFIXES.values():
        raise ValueError(f"Unsupported format {fmt!r}")

    path.parent.mkdir(parents=True, exist_ok=True)

    if not _safe_write(df, path, fmt):
        return None

    logger.info("Wrote %s (%d rows)", path, len(df))
    return path


def write_frames(
    frames: List[FrenetFrame],
    path: Union[str, Path],
    physical_scale: Optional[float] = None,
    fmt: Optional[str] = None,
) -> Optional[Path]:
    """frames_to_dataframe + write_table."""
    return write_table(frames_to_dataframe(frames, physical_scale), path, fmt=fmt)
