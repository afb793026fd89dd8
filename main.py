from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any

import numpy as np
from PIL import Image

from transformtoy_core.core import (
    BACKWARD,
    DEFAULT_CONFIG,
    FORWARD,
    FrameRateController,
    InvalidModeError,
    ProgramValidationError,
    ToyConfig,
    compile_program,
    decode_command_list,
    find_program,
    has_stack_commands,
    load_config,
    load_program_list,
    parse_program_text,
    run_playback,
)
from transformtoy_core.render import RasterSurface, TimelineView, side_by_side

LOGGER = logging.getLogger("transformtoy")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="transformtoy")
    parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--config", type=Path, default=None, help="TOML config file.")
    sub = parser.add_subparsers(dest="command", required=True)

    validate = sub.add_parser("validate", help="Validate a program and report every bad instruction.")
    _add_program_args(validate)

    trace = sub.add_parser("trace", help="Print the execution trace at a position.")
    _add_program_args(trace)
    _add_position_args(trace)

    render = sub.add_parser("render", help="Render a position to PNG.")
    _add_program_args(render)
    _add_position_args(render)
    render.add_argument("--out", type=Path, required=True)
    render.add_argument("--final", action="store_true", help="Add the final-result panel on the right.")

    play = sub.add_parser("play", help="Play the whole program headlessly and write PNG frames.")
    _add_program_args(play)
    play.add_argument("--backward", action="store_true")
    play.add_argument("--out-dir", type=Path, required=True)
    play.add_argument("--fps", type=int, default=60)
    play.add_argument("--present-fps", type=int, default=10, help="Rate at which frames are written.")
    play.add_argument("--max-frames", type=int, default=10_000)
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")
    config = load_config(args.config) if args.config is not None else DEFAULT_CONFIG
    raws = _load_raws(args.program, args.title)

    if args.command == "validate":
        decoded = decode_command_list(raws, policy="skip")
        for message in decoded.report.messages():
            print(message)
        if not decoded.report.ok:
            raise SystemExit(1)
        print(f"ok: {len(decoded.commands)} commands")
        return

    if args.command == "trace":
        view = _build_view(raws, config, args.policy, BACKWARD if args.backward else FORWARD)
        result = view.draw(args.param)
        print(result.text())
        return

    if args.command == "render":
        view = _build_view(raws, config, args.policy, BACKWARD if args.backward else FORWARD)
        view.draw(args.param)
        pixels = _pixels(view)
        if args.final:
            final_view = TimelineView(view.timeline, config, direction=view.direction, final_result=True)
            final_view.draw_final()
            pixels = side_by_side(pixels, _pixels(final_view), gap=8)
        Image.fromarray(pixels).save(args.out)
        print(f"wrote {args.out}")
        return

    if args.command == "play":
        direction = BACKWARD if args.backward else FORWARD
        view = _build_view(raws, config, args.policy, direction)
        args.out_dir.mkdir(parents=True, exist_ok=True)
        scheduler = view.make_scheduler()
        scheduler.play(backward=direction == BACKWARD)

        def write_frame(frame: int, now_ms: float, value: float) -> None:
            out = args.out_dir / f"frame_{frame:04d}.png"
            Image.fromarray(_pixels(view)).save(out)
            LOGGER.info("frame %d at %.1fms (param=%.3f) -> %s", frame, now_ms, value, out)

        ticks = run_playback(
            scheduler,
            FrameRateController(target_fps=args.fps, present_fps=args.present_fps),
            max_frames=args.max_frames,
            on_present=write_frame,
        )
        print(f"play complete: ticks={ticks} final_param={scheduler.value:.3f}")
        return

    raise RuntimeError(f"unsupported command: {args.command}")


def _add_program_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("program", type=Path, help="JSON program, JSON program list, or .txt source.")
    parser.add_argument("--title", default=None, help="Program title to pick from a list file.")
    parser.add_argument("--policy", choices=["skip", "strict"], default="skip")


def _add_position_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--param", type=float, default=0.0)
    parser.add_argument("--backward", action="store_true")


def _load_raws(path: Path, title: str | None) -> list[tuple[Any, ...]]:
    if path.suffix == ".txt":
        try:
            return parse_program_text(path.read_text(encoding="utf-8"))
        except ProgramValidationError as exc:
            for err in exc.errors:
                print(f"line {err.index}: {err.detail}")
            raise SystemExit(1) from exc
    program = find_program(load_program_list(path), title)
    return list(program.transformations)


def _build_view(raws: list[tuple[Any, ...]], config: ToyConfig, policy: str, direction: int) -> TimelineView:
    if direction == BACKWARD and has_stack_commands(raws):
        print("error: backward playback is not available for programs containing save/restore")
        raise SystemExit(2)
    try:
        timeline = compile_program(
            raws, policy=policy, default_fill=config.default_fill, default_stroke=config.default_stroke
        )
    except ProgramValidationError as exc:
        for err in exc.errors:
            print(err)
        raise SystemExit(1) from exc
    surface = RasterSurface(config.canvas_size, config.canvas_size)
    try:
        return TimelineView(timeline, config, surface=surface, direction=direction)
    except InvalidModeError as exc:
        print(f"error: {exc}")
        raise SystemExit(2) from exc


def _pixels(view: TimelineView) -> np.ndarray:
    surface = view.surface
    if not isinstance(surface, RasterSurface):
        raise TypeError("view is not backed by a raster surface")
    return surface.pixels


if __name__ == "__main__":
    main()
