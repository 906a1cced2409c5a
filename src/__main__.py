"""Command-line entry point for the resume screener."""

import argparse
import json
import sys
from pathlib import Path

import yaml

from src import __version__
from src.config.settings import Settings
from src.utils.logging import configure_logging

ELIGIBILITY_CHOICES = ["all", "Eligible", "Potential Fit", "Not a Fit", "Error"]
SORT_CHOICES = ["score", "name"]


def _read_text(path: Path | None) -> str:
    if path is None:
        return ""
    return path.read_text(encoding="utf-8")


def _load_mapping(path: Path) -> dict:
    raw = path.read_text(encoding="utf-8")
    try:
        data = json.loads(raw) if path.suffix.lower() == ".json" else yaml.safe_load(raw)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ValueError(f"Invalid analysis file: {path}") from e
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"Analysis must be a mapping/dict: {path}")
    return data


def _resolve_filters(value: str | None) -> str | None:
    """Accept either a path to a JSON file or an inline JSON string."""
    if not value:
        return None
    if value.lstrip().startswith("{"):
        return value
    candidate = Path(value)
    if candidate.suffix.lower() == ".json" or candidate.is_file():
        return candidate.read_text(encoding="utf-8")
    return value


def _write_json(path: Path, payload: object) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="resume-screener",
        description="Score resumes against a job description and screening filters",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m src score --analysis alice.json --resume alice.txt --jd job.txt
  python -m src batch candidates.json --jd job.txt --filters filters.json --csv out.csv
  python -m src weights --reload
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Set the log level (overrides settings)",
    )
    parser.add_argument(
        "--weights-file",
        type=Path,
        default=None,
        help="YAML/JSON file with category weights (overrides ATS_WEIGHTS_FILE)",
    )

    subparsers = parser.add_subparsers(
        dest="mode",
        title="modes",
        description="Available commands",
    )

    score_parser = subparsers.add_parser(
        "score",
        help="Score a single candidate",
    )
    score_parser.add_argument(
        "--analysis",
        type=Path,
        required=True,
        help="Path to the extracted analysis (JSON/YAML)",
    )
    score_parser.add_argument(
        "--resume",
        type=Path,
        default=None,
        help="Path to the plain-text resume",
    )
    score_parser.add_argument(
        "--jd",
        type=Path,
        default=None,
        help="Path to the plain-text job description",
    )
    score_parser.add_argument(
        "--filters",
        default=None,
        help="Screening filters: path to a JSON file or an inline JSON object",
    )
    score_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the raw result as JSON",
    )

    batch_parser = subparsers.add_parser(
        "batch",
        help="Score and rank many candidates",
    )
    batch_parser.add_argument(
        "candidates",
        type=Path,
        help="Candidates file (JSON/YAML list) or directory of candidate files",
    )
    batch_parser.add_argument(
        "--jd",
        type=Path,
        default=None,
        help="Path to the plain-text job description",
    )
    batch_parser.add_argument(
        "--filters",
        default=None,
        help="Screening filters: path to a JSON file or an inline JSON object",
    )
    batch_parser.add_argument(
        "--min-score",
        type=float,
        default=None,
        help="Only report candidates at or above this score (overrides filters.minScore)",
    )
    batch_parser.add_argument(
        "--eligibility",
        choices=ELIGIBILITY_CHOICES,
        default="all",
        help="Only report candidates in this tier",
    )
    batch_parser.add_argument(
        "--sort",
        choices=SORT_CHOICES,
        default="score",
        help="Order reported candidates by ATS score or name (default: score)",
    )
    batch_parser.add_argument(
        "--direction",
        choices=["asc", "desc"],
        default="desc",
        help="Sort direction (default: desc)",
    )
    batch_parser.add_argument(
        "--out",
        type=Path,
        default=None,
        help="Report path (default: <output_dir>/screening_report.json)",
    )
    batch_parser.add_argument(
        "--csv",
        type=Path,
        default=None,
        help="Also export the reported candidates as CSV",
    )

    weights_parser = subparsers.add_parser(
        "weights",
        help="Show the active category weights",
    )
    weights_parser.add_argument(
        "--reload",
        action="store_true",
        help="Re-read the weight sources before printing",
    )

    return parser


def main(args: list[str] | None = None) -> int:
    """Main entry point for the application.

    Args:
        args: Command line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = create_parser()
    parsed = parser.parse_args(args)

    try:
        settings = Settings()
    except Exception as e:
        print(f"Error loading settings: {e}", file=sys.stderr)
        return 1

    log_level = parsed.log_level or settings.log_level
    logger = configure_logging(level=log_level)

    if parsed.mode is None:
        parser.print_help()
        return 0

    from src.screening.config import WeightConfig
    from src.screening.service import EligibilityEngine

    weight_config = WeightConfig(weights_file=parsed.weights_file or settings.weights_file)
    engine = EligibilityEngine(weight_config=weight_config)

    logger.info(f"resume-screener v{__version__} running {parsed.mode}")

    if parsed.mode == "weights":
        weights = (
            weight_config.reload_weights()
            if parsed.reload
            else weight_config.get_weights()
        )
        print(json.dumps(weights.to_dict(), indent=2))
        return 0

    if parsed.mode == "score":
        from src.screening.models import AnalysisResult

        try:
            analysis = _load_mapping(parsed.analysis)
            resume_text = _read_text(parsed.resume)
            job_description = _read_text(parsed.jd)
            filters = _resolve_filters(parsed.filters)
        except (OSError, ValueError) as e:
            logger.error(str(e))
            print(f"Error: {e}", file=sys.stderr)
            return 1

        result = engine.compute_eligibility(
            AnalysisResult.from_raw(analysis), resume_text, filters, job_description
        )
        if parsed.json:
            print(json.dumps(result.to_dict(), indent=2))
        else:
            name = analysis.get("name")
            print(engine.format_result(result, name=str(name) if name else None))
        return 0

    if parsed.mode == "batch":
        from src.screening.batch import (
            build_screening_report,
            export_csv,
            load_candidates,
        )
        from src.screening.models import FilterCriteria

        try:
            candidates = load_candidates(parsed.candidates)
            job_description = _read_text(parsed.jd)
            filters = _resolve_filters(parsed.filters)
        except (OSError, ValueError) as e:
            logger.error(str(e))
            print(f"Error: {e}", file=sys.stderr)
            return 1

        criteria = FilterCriteria.from_raw(filters)
        if parsed.min_score is not None:
            criteria = criteria.model_copy(update={"min_score": parsed.min_score})

        report = build_screening_report(
            candidates=candidates,
            job_description=job_description,
            filters=criteria,
            engine=engine,
            eligibility=parsed.eligibility,
            sort=parsed.sort,
            direction=parsed.direction,
        )

        report_path = parsed.out or settings.output_dir / "screening_report.json"
        _write_json(report_path, report)
        print(f"Wrote: {report_path}")

        if parsed.csv is not None:
            export_csv(report["items"], parsed.csv)
            print(f"Wrote: {parsed.csv}")

        summary = report["summary"]
        counts = summary["counts"]
        print(
            "Candidates: "
            f"total={summary['total']} reported={len(report['items'])} "
            f"eligible={counts.get('Eligible', 0)} "
            f"potential={counts.get('Potential Fit', 0)} "
            f"not_a_fit={counts.get('Not a Fit', 0)} "
            f"errors={counts.get('Error', 0)}"
        )
        return 0

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
