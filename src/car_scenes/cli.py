from __future__ import annotations

import argparse
import json
import sys
import time
from dataclasses import replace
from pathlib import Path
from typing import Any, Sequence

from .config import (
    RuntimeConfig,
    load_runtime_config,
    normalize_log_format,
    normalize_log_level,
    validate_plot_area,
)
from .drawing import Layout
from .ingestion import DatasetLoadError, DatasetLoader, EmptyDatasetError
from .logging_config import configure_logging, get_logger, log_event
from .surface import SvgSurface


PROJECT_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_ARTIFACTS_DIR = PROJECT_ROOT / "artifacts"
DEFAULT_STORY_OUTPUT = DEFAULT_ARTIFACTS_DIR / "cars_story.html"
DEFAULT_RUN_ID = "cars-story"


def _get_story_builder() -> type[Any]:
    try:
        from .reporting import StoryBuilder
    except ImportError as exc:
        raise RuntimeError(
            "Story dependencies are missing. Install with: pip install car-scenes"
        ) from exc
    return StoryBuilder


def _resolve_optional_arg(args: argparse.Namespace, name: str, fallback: Any) -> Any:
    value = getattr(args, name, None)
    return fallback if value is None else value


def _resolve_runtime_config(args: argparse.Namespace) -> RuntimeConfig:
    runtime = load_runtime_config()
    log_level = normalize_log_level(_resolve_optional_arg(args, "log_level", runtime.log_level))
    log_format = normalize_log_format(_resolve_optional_arg(args, "log_format", runtime.log_format))
    svg_width = int(_resolve_optional_arg(args, "width", runtime.svg_width))
    svg_height = int(_resolve_optional_arg(args, "height", runtime.svg_height))
    if svg_width <= 0 or svg_height <= 0:
        raise ValueError("--width and --height must be > 0.")
    validate_plot_area(svg_width, svg_height, runtime.margins)
    return replace(
        runtime,
        log_level=log_level,
        log_format=log_format,
        data_path=str(_resolve_optional_arg(args, "data", runtime.data_path)),
        output_format=str(_resolve_optional_arg(args, "format", runtime.output_format)),
        svg_width=svg_width,
        svg_height=svg_height,
    )


def _resolve_path(path: Path | str) -> Path:
    return Path(path).expanduser().resolve()


def _load_records(runtime: RuntimeConfig) -> tuple[Any, ...]:
    return DatasetLoader(_resolve_path(runtime.data_path)).load_records()


def _cmd_render(args: argparse.Namespace, runtime: RuntimeConfig, logger: Any) -> int:
    started = time.perf_counter()
    output_path = _resolve_path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    StoryBuilder = _get_story_builder()
    from .reporting import DEFAULT_TITLE, save_error_page

    title = args.title or DEFAULT_TITLE
    try:
        records = _load_records(runtime)
    except DatasetLoadError as exc:
        out = save_error_page(
            output_path,
            str(exc),
            title=title,
            empty=isinstance(exc, EmptyDatasetError),
        )
        log_event(
            logger,
            "error",
            "error_page_written",
            run_id=args.run_id,
            output_path=str(out),
            error=str(exc),
        )
        return 1

    metadata: dict[str, Any] = {"run_id": args.run_id, "title": title}
    builder = StoryBuilder(
        records,
        layout=Layout.from_config(runtime),
        output_format=runtime.output_format,
        metadata=metadata,
        tooltip_offset=runtime.tooltip_offset,
    )
    out = builder.save_report(output_path)
    elapsed = time.perf_counter() - started
    log_event(
        logger,
        "info",
        "story_written",
        run_id=args.run_id,
        output_path=str(out),
        output_format=runtime.output_format,
        scenes=len(builder.snapshots()),
        story_size_kb=round(out.stat().st_size / 1024.0, 1),
        elapsed_sec=round(elapsed, 3),
    )
    return 0


def _cmd_describe(args: argparse.Namespace, runtime: RuntimeConfig, logger: Any) -> int:
    from .reporting import describe_story

    records = _load_records(runtime)
    summary = describe_story(records, layout=Layout.from_config(runtime))
    json.dump(summary, sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")
    return 0


def _cmd_scene(args: argparse.Namespace, runtime: RuntimeConfig, logger: Any) -> int:
    from .navigation import build_controller

    records = _load_records(runtime)
    layout = Layout.from_config(runtime)
    surface = SvgSurface(layout)
    controller = build_controller(records, surface, layout=layout, tooltip_offset=runtime.tooltip_offset)
    controller.start()
    if not 0 <= args.index <= controller.last_scene:
        raise ValueError(f"--index must be between 0 and {controller.last_scene}.")
    while controller.current_scene < args.index:
        controller.next()

    output_path = _resolve_path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(surface.plot_svg(), encoding="utf-8")
    annotation_path = output_path.with_name(f"{output_path.stem}.annotation{output_path.suffix}")
    annotation_path.write_text(surface.annotation_svg(), encoding="utf-8")
    log_event(
        logger,
        "info",
        "scene_written",
        run_id=args.run_id,
        scene_index=controller.current_scene,
        output_path=str(output_path),
        annotation_path=str(annotation_path),
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--run-id",
        type=str,
        default=DEFAULT_RUN_ID,
        help=f"Run identifier for logs/story metadata. Default: {DEFAULT_RUN_ID}",
    )
    common.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).",
    )
    common.add_argument(
        "--log-format",
        type=str,
        default=None,
        help="Override log format (auto, json, console).",
    )
    common.add_argument(
        "--data",
        type=Path,
        default=None,
        help="Path to the cars CSV (Make, Fuel, EngineCylinders, AverageHighwayMPG, AverageCityMPG).",
    )
    common.add_argument(
        "--width",
        type=int,
        default=None,
        help="SVG surface width override in pixels.",
    )
    common.add_argument(
        "--height",
        type=int,
        default=None,
        help="SVG surface height override in pixels.",
    )

    parser = argparse.ArgumentParser(
        prog="car-scenes",
        description="Render navigable chart scenes over the cars dataset.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    parser_render = subparsers.add_parser(
        "render", parents=[common], description="Write the three-scene HTML story."
    )
    parser_render.add_argument(
        "--output",
        type=Path,
        default=DEFAULT_STORY_OUTPUT,
        help=f"Output HTML path. Default: {DEFAULT_STORY_OUTPUT}",
    )
    parser_render.add_argument(
        "--format",
        choices=["svg", "plotly"],
        default=None,
        help="Scene rendering format override.",
    )
    parser_render.add_argument(
        "--title",
        type=str,
        default=None,
        help="Page title override.",
    )
    parser_render.set_defaults(handler=_cmd_render)

    parser_describe = subparsers.add_parser(
        "describe",
        parents=[common],
        description="Print per-scene legend, annotation and color counts as JSON.",
    )
    parser_describe.set_defaults(handler=_cmd_describe)

    parser_scene = subparsers.add_parser(
        "scene", parents=[common], description="Write a single scene as SVG."
    )
    parser_scene.add_argument(
        "--index",
        type=int,
        required=True,
        help="Scene index (0 = base, 1 = high efficiency, 2 = fuel type).",
    )
    parser_scene.add_argument(
        "--output",
        type=Path,
        required=True,
        help="Output SVG path; the annotation strip is written beside it.",
    )
    parser_scene.set_defaults(handler=_cmd_scene)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    try:
        runtime = _resolve_runtime_config(args)
    except ValueError as exc:
        parser.error(str(exc))
    effective_log_format = configure_logging(runtime.log_level, runtime.log_format)
    logger = get_logger("car_scenes.cli")
    log_event(
        logger,
        "info",
        "command_start",
        run_id=args.run_id,
        command=args.command,
        log_level=runtime.log_level,
        log_format=effective_log_format,
    )

    try:
        return int(args.handler(args, runtime, logger))
    except KeyboardInterrupt:
        log_event(
            logger,
            "warning",
            "command_interrupted",
            run_id=args.run_id,
            command=args.command,
        )
        return 130
    except (DatasetLoadError, ValueError, RuntimeError, OSError) as exc:
        log_event(
            logger,
            "error",
            "command_failed",
            run_id=args.run_id,
            command=args.command,
            error=str(exc),
        )
        return 1
