"""
curveframe Runner
=================

Chains the three engines in order. Pure orchestration, no computation here.

    compile_curve  ->  sample_curve  ->  compute_frames

Usage:
    python -m curveframe --preset helix --morph 2 -o helix.parquet
    python -m curveframe --x "cos(t)" --y "sin(t)" --z "0" --t-min 0 --t-max 2*pi
    python -m curveframe --list-presets
"""

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import numpy as np

from curveframe.config import get_config
from curveframe.core.frenet import compute_frames
from curveframe.core.sampler import sample_curve
from curveframe.core.symbolic import CompiledCurve, SymbolicBackend, compile_curve
from curveframe.core.types import CurveDefinition, CurveSamples, FrenetFrame
from curveframe.io.presets import get_preset, load_presets, resolve_bound
from curveframe.io.writer import arc_length_scale, write_frames
from curveframe.validation.errors import CurveFrameError, InvalidDefinitionError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    """Everything one pipeline run produced. Freshly allocated per run."""
    compiled: CompiledCurve
    samples: CurveSamples
    frames: List[FrenetFrame]
    morph_value: float

    @property
    def definition(self) -> CurveDefinition:
        return self.compiled.definition


def run(
    definition: CurveDefinition,
    sample_count: Optional[int] = None,
    morph_value: Optional[float] = None,
    backend: Optional[SymbolicBackend] = None,
) -> PipelineResult:
    """
    Run compile -> sample -> frames for one curve and one morph value.

    Args:
        definition: Curve to process
        sample_count: Samples N >= 2 (from config if not provided)
        morph_value: Value bound to lambda / λ (from config if not provided)
        backend: Symbolic backend (SymPy if not provided)

    Returns:
        PipelineResult

    Raises:
        CurveCompileError, InvalidSampleCount, InvalidMorphValue,
        EvaluationError, InvalidSamplesError
    """
    if morph_value is None:
        morph_value = get_config().get_float('sampling.morph_value', 1.0)

    compiled = compile_curve(definition, backend=backend)
    samples = sample_curve(compiled, sample_count, morph_value)
    frames = compute_frames(samples)

    logger.info("%s: %d frames, s[-1]=%g", definition.name, len(frames), samples.s[-1])

    return PipelineResult(
        compiled=compiled,
        samples=samples,
        frames=frames,
        morph_value=float(morph_value),
    )


def _definition_from_args(args) -> CurveDefinition:
    if args.preset:
        return get_preset(args.preset)

    exprs = (args.x, args.y, args.z)
    if any(e is None for e in exprs):
        raise InvalidDefinitionError(
            args.name, "give --preset, or all of --x, --y, --z",
        )
    if args.t_min is None or args.t_max is None:
        raise InvalidDefinitionError(args.name, "--t-min and --t-max are required with --x/--y/--z")

    try:
        t_min = resolve_bound(args.t_min)
        t_max = resolve_bound(args.t_max)
    except (ValueError, TypeError) as e:
        raise InvalidDefinitionError(args.name, f"bad interval: {e}") from e

    return CurveDefinition(args.name, args.x, args.y, args.z, t_min, t_max)


def _print_summary(result: PipelineResult, output: Optional[Path]) -> None:
    d = result.definition
    curvature = np.array([f.curvature for f in result.frames])
    torsion = np.array([f.torsion for f in result.frames])
    finite = np.isfinite(curvature)

    print("=" * 70)
    print(f"CURVE: {d.name}")
    print("=" * 70)
    print(f"x(t) = {d.x_expr}")
    print(f"y(t) = {d.y_expr}")
    print(f"z(t) = {d.z_expr}")
    print(f"t in [{d.t_min:g}, {d.t_max:g}], lambda = {result.morph_value:g}")
    print(f"Samples:   {len(result.samples)}")
    print(f"Arc length (unscaled): {result.samples.s[-1]:.6g}")
    if finite.any():
        print(f"Curvature: min={curvature[finite].min():.6g} max={curvature[finite].max():.6g}")
    print(f"Torsion:   min={torsion.min():.6g} max={torsion.max():.6g}")
    n_flat = sum(1 for f in result.frames if f.is_degenerate)
    if n_flat:
        print(f"Degenerate normals: {n_flat}")
    if output is not None:
        print(f"  -> {output} ({len(result.frames)} rows)")
    print()


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point. Returns a process exit code."""
    config = get_config()

    parser = argparse.ArgumentParser(
        description="Frenet-Serret frames of a parametric space curve",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Expressions use t, lambda (or λ), pi, e and functions like sin, cos, exp.

Usage:
  python -m curveframe --preset helix --morph 2 -o helix.parquet
  python -m curveframe --x "cos(t)" --y "sin(t)" --z "t/5" --t-min 0 --t-max "4*pi"
"""
    )
    parser.add_argument('--preset', help='Preset key or name (see --list-presets)')
    parser.add_argument('--list-presets', action='store_true', help='List presets and exit')
    parser.add_argument('--name', default='Custom', help='Name for a custom curve')
    parser.add_argument('--x', help='x(t) expression')
    parser.add_argument('--y', help='y(t) expression')
    parser.add_argument('--z', help='z(t) expression')
    parser.add_argument('--t-min', help='Start of parameter interval (number or expression in pi)')
    parser.add_argument('--t-max', help='End of parameter interval (number or expression in pi)')
    parser.add_argument('--samples', type=int, default=None,
                        help=f"Sample count (default: {config.get('sampling.sample_count')})")
    parser.add_argument('--morph', type=float, default=None,
                        help=f"Morph value lambda (default: {config.get('sampling.morph_value')})")
    parser.add_argument('-o', '--output',
                        help=f"Write frames to .parquet or .csv (no suffix: {config.get('output.format')})")
    parser.add_argument('--physical-arc-length', action='store_true',
                        default=config.get('output.physical_arc_length', False),
                        help='Add s_physical = s * (t_max - t_min) / (N - 1) to the output table')
    parser.add_argument('-q', '--quiet', action='store_true', help='Suppress output')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=str(config.get('logging.level', 'WARNING')).upper(),
        format='%(levelname)s %(name)s: %(message)s',
    )

    try:
        if args.list_presets:
            for key, d in load_presets().items():
                print(f"{key:<15} {d.name:<20} x={d.x_expr}  y={d.y_expr}  z={d.z_expr}")
            return 0

        definition = _definition_from_args(args)
        result = run(definition, sample_count=args.samples, morph_value=args.morph)

        output = None
        if args.output:
            path = Path(args.output)
            if not path.suffix:
                path = path.with_suffix('.' + config.get('output.format', 'parquet'))
            scale = arc_length_scale(result.samples) if args.physical_arc_length else None
            output = write_frames(result.frames, path, physical_scale=scale)
    except (CurveFrameError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if not args.quiet:
        _print_summary(result, output)

    return 0


if __name__ == '__main__':
    sys.exit(main())
