"""
Tests for the preset catalog and table writers.
"""

import math

import numpy as np
import polars as pl
import pytest

from curveframe.core.frenet import compute_frames
from curveframe.core.sampler import sample_curve
from curveframe.core.symbolic import compile_curve
from curveframe.io import (
    arc_length_scale,
    frames_to_dataframe,
    get_preset,
    load_presets,
    samples_to_dataframe,
    write_frames,
    write_table,
)
from curveframe.io.presets import resolve_bound
from curveframe.io.writer import FRAME_COLUMNS
from curveframe.validation import InvalidDefinitionError, PresetError


class TestPresets:
    """Test the preset catalog."""

    def test_bundled_catalog(self):
        presets = load_presets()
        assert list(presets) == [
            'helix', 'circle', 'parabola', 'twisted_cubic', 'sine_wave', 'lissajous',
        ]
        helix = presets['helix']
        assert helix.name == 'Helix'
        assert helix.z_expr == 'lambda * t / (2*pi)'
        assert helix.t_min == 0.0
        assert helix.t_max == pytest.approx(6 * math.pi)
        assert presets['sine_wave'].t_min == pytest.approx(-4 * math.pi)
        assert presets['circle'].z_expr == '0'

    @pytest.mark.parametrize('key', [
        'helix', 'circle', 'parabola', 'twisted_cubic', 'sine_wave', 'lissajous',
    ])
    def test_every_preset_runs(self, key):
        definition = get_preset(key)
        samples = sample_curve(compile_curve(definition), 64, 1.0)
        frames = compute_frames(samples)
        assert len(frames) == 64
        assert np.all(np.isfinite([f.curvature for f in frames]))

    def test_lookup_by_display_name(self):
        assert get_preset('Figure-8 Lissajous').name == 'Figure-8 Lissajous'
        assert get_preset('  HELIX ').name == 'Helix'

    def test_unknown_preset(self):
        with pytest.raises(PresetError, match='Available'):
            get_preset('klein bottle')
        with pytest.raises(KeyError):
            get_preset('klein bottle')

    def test_custom_catalog(self, tmp_path):
        path = tmp_path / 'mine.yaml'
        path.write_text(
            "presets:\n"
            "  ramp:\n"
            "    x: t\n"
            "    y: 2*t\n"
            "    z: 0\n"
            "    t_min: -1\n"
            "    t_max: pi/2\n"
        )
        ramp = load_presets(path)['ramp']
        assert ramp.name == 'ramp'
        assert ramp.z_expr == '0'
        assert ramp.t_max == pytest.approx(math.pi / 2)

    def test_missing_key(self, tmp_path):
        path = tmp_path / 'bad.yaml'
        path.write_text("presets:\n  half:\n    x: t\n    t_min: 0\n    t_max: 1\n")
        with pytest.raises(PresetError, match='missing'):
            load_presets(path)

    def test_reversed_interval(self, tmp_path):
        path = tmp_path / 'bad.yaml'
        path.write_text("presets:\n  back:\n    x: t\n    y: t\n    z: t\n    t_min: 1\n    t_max: 0\n")
        with pytest.raises(InvalidDefinitionError, match="t_min must be < t_max"):
            load_presets(path)

    def test_no_presets_section(self, tmp_path):
        path = tmp_path / 'empty.yaml'
        path.write_text("other: 1\n")
        with pytest.raises(PresetError):
            load_presets(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_presets(tmp_path / 'nope.yaml')

    def test_resolve_bound(self):
        assert resolve_bound(3) == 3.0
        assert resolve_bound('6*pi') == pytest.approx(6 * math.pi)
        assert resolve_bound('-pi^2') == pytest.approx(-math.pi**2)
        with pytest.raises(ValueError):
            resolve_bound('t')
        with pytest.raises(ValueError):
            resolve_bound(True)


class TestTables:
    """Test frame and sample tables and their files."""

    @pytest.fixture
    def result(self, circle):
        samples = sample_curve(compile_curve(circle), 12, 1.0)
        return samples, compute_frames(samples)

    def test_frames_to_dataframe(self, result):
        samples, frames = result
        df = frames_to_dataframe(frames)
        assert df.columns == FRAME_COLUMNS
        assert df.height == 12
        assert df['index'].to_list() == list(range(12))
        np.testing.assert_allclose(df['curvature'].to_numpy(), 1.0, rtol=1e-9)
        np.testing.assert_array_equal(df['s'].to_numpy(), samples.s)

    def test_physical_arc_length(self, result):
        samples, frames = result
        scale = arc_length_scale(samples)
        assert scale == pytest.approx(2 * math.pi / 11)
        df = frames_to_dataframe(frames, physical_scale=scale)
        assert df['s_physical'][-1] == pytest.approx(2 * math.pi, rel=1e-12)

    def test_samples_to_dataframe(self, result):
        samples, _ = result
        df = samples_to_dataframe(samples)
        assert df.columns == [
            't', 's', 'x', 'y', 'z', 'dx', 'dy', 'dz',
            'd2x', 'd2y', 'd2z', 'd3x', 'd3y', 'd3z',
        ]
        np.testing.assert_array_equal(df['d2x'].to_numpy(), samples.r2[:, 0])

    def test_parquet_round_trip(self, result, tmp_path):
        _, frames = result
        path = write_frames(frames, tmp_path / 'out' / 'frames.parquet')
        assert path.exists()
        back = pl.read_parquet(path)
        assert back.columns == FRAME_COLUMNS
        assert back.height == 12

    def test_csv(self, result, tmp_path):
        _, frames = result
        path = write_frames(frames, tmp_path / 'frames.csv')
        back = pl.read_csv(path)
        assert back.height == 12
        assert 'torsion' in back.columns

    def test_unknown_suffix(self, result, tmp_path):
        _, frames = result
        with pytest.raises(ValueError, match='infer format'):
            write_frames(frames, tmp_path / 'frames.txt')

    def test_explicit_format(self, result, tmp_path):
        _, frames = result
        path = write_frames(frames, tmp_path / 'frames.dat', fmt='csv')
        assert pl.read_csv(path).height == 12

    def test_empty_schema_skipped(self, tmp_path):
        assert write_table(pl.DataFrame(), tmp_path / 'nothing.parquet') is None
        assert not (tmp_path / 'nothing.parquet').exists()
