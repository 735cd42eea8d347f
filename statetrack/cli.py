from __future__ import annotations

import argparse
from collections.abc import Sequence
import json
import logging
from pathlib import Path
import sys

from statetrack.config import PlotConfig, load_plot_config
from statetrack.host import Plot
from statetrack.plugin import StateTrackPlugin
from statetrack.reducer import reduce_samples


def build_plot(config: PlotConfig, *, width: int | None = None, height: int | None = None) -> Plot:
    return Plot(
        [dict(s) for s in config.series],
        width=width or config.width,
        height=height or config.height,
        title=config.title,
        plugins=[StateTrackPlugin(style=config.style)],
        options=config.axis_options(),
    )


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="statetrack")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render a plot config (TOML) with its state tracks to PNG.")
    render.add_argument("config", type=Path)
    render.add_argument("--out", type=Path, required=True)
    render.add_argument("--width", type=int, default=None, help="Override [plot].width.")
    render.add_argument("--height", type=int, default=None, help="Override [plot].height.")

    reduce = sub.add_parser("reduce", help="Print the reduced state-change points of each state series as JSON.")
    reduce.add_argument("config", type=Path)
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    config = load_plot_config(args.config)

    if args.command == "render":
        plot = build_plot(config, width=args.width, height=args.height)
        surface = plot.new_surface()
        plot.draw(surface)
        out = surface.save_png(args.out)
        print(f"wrote {out}")
        return 0

    payload = [
        {
            "label": s.get("label") or s.get("state_label", ""),
            "points": [[p.position, p.state] for p in reduce_samples(s["data"])],
        }
        for s in config.state_series()
    ]
    json.dump(payload, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
