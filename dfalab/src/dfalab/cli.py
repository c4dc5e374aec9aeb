"""Command-line front end: `dfalab check` and `dfalab run`."""

from __future__ import annotations

import logging
import sys
from argparse import ArgumentParser
from typing import Optional, Sequence

from dfalab.core.config import ParserConfig, SessionConfig, SimulationConfig, ValidatorConfig
from dfalab.core.errors import ParseError
from dfalab.core.parser import check_syntax
from dfalab.core.session import Session
from dfalab.io.files import read_definition_file

logger = logging.getLogger(__name__)


def build_parser() -> ArgumentParser:
    common = ArgumentParser(add_help=False)
    common.add_argument("-v", "--verbose", help="Log debug output", action="store_true")
    common.add_argument("--strict", help="Reject automata with missing transitions", action="store_true")
    common.add_argument("--comment", help="Comment marker character", default="#")

    ap = ArgumentParser(prog="dfalab", description="Validate DFA definitions and run input files against them.")
    sub = ap.add_subparsers(dest="command", required=True)

    check = sub.add_parser("check", parents=[common], help="Check a definition file")
    check.add_argument("definition", help="Path to a .dfa file")

    run = sub.add_parser("run", parents=[common], help="Run an input file against a definition")
    run.add_argument("definition", help="Path to a .dfa file")
    run.add_argument("input", help="Path to a .in file")
    run.add_argument("-w", "--workers", help="Worker threads for the batch", type=int, default=1)
    run.add_argument("--save", help="Write VALID/INVALID lines next to the input as .out", action="store_true")
    run.add_argument("--json", help="Write the full report as JSON to this path")
    run.add_argument("--csv", help="Write the report table as CSV to this path")
    run.add_argument("--plot", help="Save a summary bar chart to this path")
    run.add_argument("--progress", help="Show a progress bar", action="store_true")
    return ap


def _session_config(args) -> SessionConfig:
    return SessionConfig(
        parser=ParserConfig(comment_marker=args.comment),
        validator=ValidatorConfig(strict=args.strict),
        simulation=SimulationConfig(max_workers=getattr(args, "workers", 1)),
    )


def _check(args, config: SessionConfig) -> int:
    definition = read_definition_file(args.definition)
    result = check_syntax(definition.content, config.parser, config.validator)
    for issue in result.errors:
        print(f"error: {issue}")
    for issue in result.warnings:
        print(f"warning: {issue}")
    if result.ok:
        print(f"{definition.filename}: ok")
    return 0 if result.ok else 1


def _run(args, config: SessionConfig) -> int:
    session = Session(config)
    try:
        session.load_definition_file(args.definition)
    except ParseError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    for issue in session.active.warnings:
        print(f"warning: {issue}", file=sys.stderr)

    batch = session.load_input_file(args.input)
    summary = session.run_batch(progress=args.progress)
    report = summary.report

    for idx, (line, verdict) in enumerate(zip(batch.lines, report.verdicts), start=1):
        status = "VALID" if verdict.accepted else "INVALID"
        detail = f"  ({verdict.error})" if verdict.error is not None else ""
        print(f"{idx}: {line!r} {status} [{' '.join(verdict.trace)}]{detail}")
    print(f"accepted={summary.accepted} rejected={summary.rejected} errored={summary.errored} total={summary.total}")

    if args.save:
        print(f"wrote {session.save_output(report)}")
    if args.json:
        from dfalab.io.serialization import save_report_json

        save_report_json(report, args.json)
    if args.csv:
        from dfalab.io.serialization import report_to_frame

        report_to_frame(report, batch).to_csv(args.csv, index=False)
    if args.plot:
        import matplotlib

        matplotlib.use("Agg")
        from dfalab.viz.plotting import plot_batch_summary, save_fig

        ax = plot_batch_summary(summary)
        save_fig(ax.figure, args.plot)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        config = _session_config(args)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    try:
        if args.command == "check":
            return _check(args, config)
        return _run(args, config)
    except (FileNotFoundError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
