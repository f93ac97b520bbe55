from __future__ import annotations

import argparse
import json
import logging
import math
from pathlib import Path

from toggleplot import (
    FrameQueue,
    MemoryContainer,
    ToggleChart,
    ViewerConfig,
    compute_boundary,
    init,
    load_config,
    load_dataset,
)


def main() -> None:
    parser = argparse.ArgumentParser(prog="toggleplot")
    parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render a dataset headlessly and write the resulting markup.")
    render.add_argument("dataset", type=Path)
    render.add_argument("--config", type=Path, default=None, help="TOML file with a [viewer] table.")
    render.add_argument("--width", type=float, default=640.0)
    render.add_argument("--height", type=float, default=720.0)
    render.add_argument(
        "--toggle",
        action="append",
        default=[],
        metavar="SERIES_ID",
        help="Toggle a series before writing output. Repeatable; applied in order.",
    )
    render.add_argument("--out", type=Path, default=None, help="Output file. Default: stdout.")

    inspect = sub.add_parser("inspect", help="Print series ids, names and the value boundary.")
    inspect.add_argument("dataset", type=Path)
    inspect.add_argument("--config", type=Path, default=None)
    args = parser.parse_args()

    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")
    config = load_config(args.config) if args.config is not None else ViewerConfig()

    if args.command == "render":
        container = MemoryContainer(width=args.width, height=args.height)
        frames = FrameQueue()
        controller = init(container, load_dataset(args.dataset), scheduler=frames, config=config)
        known = {series.id for series in controller.state.charts}
        unknown = [series_id for series_id in args.toggle if series_id not in known]
        if unknown:
            parser.error(f"unknown series id for --toggle: {', '.join(unknown)}")
        now = 0.0
        for series_id in args.toggle:
            controller.patch(ToggleChart(series_id))
            now = frames.run_until_idle(now, fps=config.target_fps, max_frames=config.max_frames)
            now += config.frame_interval_ms
        if args.out is None:
            print(container.content)
        else:
            args.out.write_text(container.content, encoding="utf-8")
            print(f"wrote {args.out} renders={controller.render_count} frames={frames.frames_run}")
        return

    if args.command == "inspect":
        container = MemoryContainer(width=640.0, height=720.0)
        controller = init(container, load_dataset(args.dataset), scheduler=FrameQueue(), config=config)
        state = controller.state
        boundary = compute_boundary(state.charts)
        summary = {
            "points": int(state.timeline.size),
            "series": [{"id": s.id, "name": s.name, "color": s.color} for s in state.charts],
            "boundary": list(boundary) if all(math.isfinite(v) for v in boundary) else None,
        }
        print(json.dumps(summary, indent=2))
        return

    raise RuntimeError(f"unsupported command: {args.command}")


if __name__ == "__main__":
    main()
