"""Command-line entry point over a JSON history document.

Usage:
    strength-engine recommend history.json [--trial-run] [--date 2024-03-04]
    strength-engine preview history.json --days 7
    strength-engine upcoming history.json
    strength-engine volume history.json --date 2024-03-06

``recommend`` writes through the store unless ``--trial-run``; pass
``--output`` to save the updated document.
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import date, timedelta

from strength_engine.config import EngineConfig
from strength_engine.engine import RecommendationEngine
from strength_engine.exceptions import StrengthEngineError
from strength_engine.math.cycle import upcoming_workouts
from strength_engine.math.stimulus import volume_check
from strength_engine.serialization import (
    dump_store,
    load_store,
    read_document,
    recommendation_to_dict,
    to_json_string,
    write_document,
)

logger = logging.getLogger(__name__)


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an ISO date: {value!r}") from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="strength-engine", description="Strength training recommendations")
    parser.add_argument("--verbose", action="store_true", help="Log debug detail")
    sub = parser.add_subparsers(dest="command", required=True)

    def add_common(p: argparse.ArgumentParser) -> None:
        p.add_argument("history", help="Path to the JSON history document")
        p.add_argument("--date", type=_parse_date, default=None, help="Day to prescribe (default: today)")
        p.add_argument("--bodyweight", type=float, default=None, help="Bodyweight for this run")

    recommend = sub.add_parser("recommend", help="Prescribe one day")
    add_common(recommend)
    recommend.add_argument("--trial-run", action="store_true", help="Do not write anything back")
    recommend.add_argument("--output", default=None, help="Write the updated history document here")

    preview = sub.add_parser("preview", help="Trial-run prescriptions for the coming days")
    add_common(preview)
    preview.add_argument("--days", type=int, default=7, help="Number of days to preview")

    upcoming = sub.add_parser("upcoming", help="Planned workouts in the current cycle")
    add_common(upcoming)
    upcoming.add_argument("--days", type=int, default=14, help="Days ahead to list")

    volume = sub.add_parser("volume", help="Weekly stimulus and volume warnings")
    add_common(volume)
    return parser


def _recommend(args: argparse.Namespace, engine: RecommendationEngine) -> None:
    store = load_store(read_document(args.history))
    today = args.date or date.today()
    result = engine.recommend_from_store(store, today, trial_run=args.trial_run, bodyweight=args.bodyweight)
    print(to_json_string(recommendation_to_dict(result)))
    if args.output and not args.trial_run:
        write_document(args.output, dump_store(store))
        logger.info("Wrote updated history to %s", args.output)


def _preview(args: argparse.Namespace, engine: RecommendationEngine) -> None:
    store = load_store(read_document(args.history))
    start = args.date or date.today()
    dates = [start + timedelta(days=i) for i in range(max(args.days, 0))]
    results = engine.preview_from_store(store, start, dates, args.bodyweight)
    print(to_json_string([recommendation_to_dict(r)["prescription"] for r in results]))


def _upcoming(args: argparse.Namespace, engine: RecommendationEngine) -> None:
    store = load_store(read_document(args.history))
    today = args.date or date.today()
    print(to_json_string(upcoming_workouts(store.get_active_cycle(), today, args.days)))


def _volume(args: argparse.Namespace, engine: RecommendationEngine) -> None:
    store = load_store(read_document(args.history))
    today = args.date or date.today()
    monday = today - timedelta(days=today.weekday())
    week_sets = [s for s in store.list_sets() if monday <= s.performed_on <= today]
    print(to_json_string(volume_check(week_sets, store.list_movements())))


_COMMANDS = {
    "recommend": _recommend,
    "preview": _preview,
    "upcoming": _upcoming,
    "volume": _volume,
}


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        engine = RecommendationEngine(EngineConfig.from_env())
        _COMMANDS[args.command](args, engine)
    except FileNotFoundError as exc:
        logger.error("History document not found: %s", exc.filename)
        return 1
    except StrengthEngineError as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
