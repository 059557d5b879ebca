"""
curveframe I/O

    presets.py  - Preset catalog (presets.yaml) -> CurveDefinitions
    writer.py   - Samples / frames -> polars tables -> Parquet or CSV
"""

from curveframe.io.presets import get_preset, load_presets
from curveframe.io.writer import (
    arc_length_scale,
    frames_to_dataframe,
    samples_to_dataframe,
    write_frames,
    write_table,
)

__all__ = [
    'get_preset',
    'load_presets',
    'arc_length_scale',
    'frames_to_dataframe',
    'samples_to_dataframe',
    'write_frames',
    'write_table',
]
