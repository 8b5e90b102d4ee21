"""CLI entrypoints for the activity pruner."""

from __future__ import annotations

import argparse
import json
import logging

from .config import default_project_config, resolve_input_file, resolve_output_dir
from .describe import generate_activity_description
from .export import write_results
from .intervals import ExclusionRange, ranges_from_efforts
from .pipeline import prune_activity
from .selection import parse_efforts
from .streams import load_activity_json


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Cut segment efforts out of an activity and rebuild its laps and summary."
    )
    parser.add_argument(
        "--input",
        default=None,
        help="Path to activity JSON with activity/streams/segment_efforts (default: from config).",
    )
    parser.add_argument(
        "--segments",
        default=None,
        type=parse_segment_positions,
        help="Comma-separated positions of segment efforts to remove, e.g. 0,2.",
    )
    parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        type=parse_index_range,
        metavar="START:END",
        help="Inclusive sample index range to remove; may be repeated.",
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory for events.json, laps.csv and summary.json (default: from config).",
    )
    parser.add_argument("--imperial", action="store_true", help="Describe in miles and feet.")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING).")
    return parser


def parse_segment_positions(text: str) -> list[int]:
    try:
        return [int(item) for item in text.split(",") if item.strip()]
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected comma-separated integers, got {text!r}") from None


def parse_index_range(text: str) -> ExclusionRange:
    start, sep, end = text.partition(":")
    if not sep:
        raise argparse.ArgumentTypeError(f"Expected START:END, got {text!r}")
    return ExclusionRange(int(start), int(end))


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    config = default_project_config()
    input_path = resolve_input_file(args.input)
    activity = load_activity_json(input_path)

    ranges = list(args.exclude)
    if args.segments:
        ranges.extend(ranges_from_efforts(parse_efforts(activity.segment_efforts), args.segments))
    if not ranges:
        parser.error("nothing to remove: pass --segments and/or --exclude")

    result = prune_activity(
        activity.samples,
        ranges,
        activity_type=activity.activity_type,
        file_ids=activity.file_ids,
        device_infos=activity.device_infos,
        settings=config.pruning,
    )
    description = generate_activity_description(
        result.summary,
        use_imperial=args.imperial,
        original_description=activity.description,
    )
    paths = write_results(
        result,
        resolve_output_dir(args.output_dir),
        input_path=input_path,
        description=description,
    )

    summary = result.summary.as_dict()
    summary["input_path"] = str(input_path)
    summary["description"] = description
    summary["artifacts"] = {key: str(path) for key, path in paths.items()}
    print(json.dumps(summary, indent=2))


if __name__ == "__main__":
    main()
