# recruit_core/cli.py
"""
Batch runner for the recruiting assessment core.

Sub-commands:
- recommend: templates, descriptions and key areas for a role/industry
- filter: filter a results file, optionally writing a CSV
- report: build a candidate's comprehensive report as JSON
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger

from .catalog_build import load_template_catalog
from .config import (
    LOG_DIR,
    LOG_LEVEL,
    LOG_ROTATION,
    RECOMMENDATIONS_PATH,
    REPORTS_PATH,
    RESULTS_PATH,
    TEMPLATES_PATH,
    AssessmentResult,
    DateRange,
    ResultsFilter,
)
from .recommend import recommend
from .results import ReportNotFoundError, build_report, filter_results, results_frame
from .seed import load_recommendation_tables, load_reports, load_results


def configure_logging(level: str = LOG_LEVEL, log_dir: Optional[Path] = LOG_DIR) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level)
    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        logger.add(log_dir / "recruit_core.log", level="DEBUG", rotation=LOG_ROTATION)


def write_results_csv(results: List[AssessmentResult], out_path: Path) -> None:
    """One row per result; list fields are joined with '; '."""
    df = results_frame(results)
    for col in ("strengths", "areas_for_improvement"):
        df[col] = df[col].apply(lambda items: "; ".join(items) if isinstance(items, list) else "")
    out_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(out_path, index=False)


def _cmd_recommend(args: argparse.Namespace) -> int:
    catalog = load_template_catalog(Path(args.catalog))
    tables = load_recommendation_tables(Path(args.tables))
    rec = recommend(args.role, args.industry, catalog, tables)
    if args.json:
        print(rec.model_dump_json(by_alias=True, indent=2))
        return 0
    print(f"Role: {rec.role_description}")
    print(f"Industry: {rec.industry_description}")
    print(f"Key areas: {', '.join(rec.key_areas) or '-'}")
    for t in rec.templates:
        print(f"{t.id}\t{t.type}\t{t.duration} min\t{t.title}")
    print(f"{len(rec.templates)} templates")
    return 0


def _cmd_filter(args: argparse.Namespace) -> int:
    results = load_results(Path(args.results))
    date_range = None
    if args.start or args.end:
        if not (args.start and args.end):
            print("--start and --end must be given together", file=sys.stderr)
            return 2
        date_range = DateRange(start=args.start, end=args.end)
    flt = ResultsFilter(
        candidate_id=args.candidate,
        assessment_type=args.type,
        status=args.status,
        date_range=date_range,
    )
    matched = filter_results(results, flt)
    if args.out:
        out = Path(args.out)
        write_results_csv(matched, out)
        print(f"Wrote {len(matched)} rows to {out}")
        return 0
    for r in matched:
        print(f"{r.id}\t{r.candidate_id}\t{r.assessment_id}\t{r.status}\t{r.score:g}\t{r.submitted_at}")
    print(f"{len(matched)} of {len(results)} results")
    return 0


def _cmd_report(args: argparse.Namespace) -> int:
    results = load_results(Path(args.results))
    summary = None
    if args.reports:
        for seeded in load_reports(results, Path(args.reports)):
            if seeded.candidate_id == args.candidate:
                summary = seeded
                break
    try:
        report = build_report(
            args.candidate,
            results,
            args.campaign,
            summary,
            report_id=summary.id if summary is not None else None,
        )
    except ReportNotFoundError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1
    print(json.dumps(report.model_dump(by_alias=True), indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="recruit-core")
    ap.add_argument("--log-level", default=LOG_LEVEL)
    ap.add_argument("--log-dir", default=str(LOG_DIR), help="directory for the log file ('' to disable)")
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("recommend", help="recommended templates for a role/industry")
    p.add_argument("--role", default="")
    p.add_argument("--industry", default="")
    p.add_argument("--catalog", default=str(TEMPLATES_PATH), help="template catalog file")
    p.add_argument("--tables", default=str(RECOMMENDATIONS_PATH), help="recommendation tables JSON")
    p.add_argument("--json", action="store_true", help="print JSON instead of a table")
    p.set_defaults(func=_cmd_recommend)

    p = sub.add_parser("filter", help="filter assessment results")
    p.add_argument("--results", default=str(RESULTS_PATH))
    p.add_argument("--candidate", default=None)
    p.add_argument("--type", default=None, help="assessment id prefix")
    p.add_argument("--status", default=None, choices=["completed", "in_progress", "pending"])
    p.add_argument("--start", default=None)
    p.add_argument("--end", default=None)
    p.add_argument("--out", default=None, help="optional CSV output file")
    p.set_defaults(func=_cmd_filter)

    p = sub.add_parser("report", help="comprehensive report for one candidate")
    p.add_argument("--candidate", required=True)
    p.add_argument("--campaign", required=True)
    p.add_argument("--results", default=str(RESULTS_PATH))
    p.add_argument("--reports", default=str(REPORTS_PATH), help="seeded report summaries ('' to skip)")
    p.set_defaults(func=_cmd_report)
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, Path(args.log_dir) if args.log_dir else None)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
