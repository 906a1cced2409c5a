"""Batch screening: score many candidates, rank, filter and export."""

from __future__ import annotations

import csv
import json
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import yaml

from src.screening.models import ELIGIBLE, NOT_A_FIT, POTENTIAL_FIT, FilterCriteria
from src.screening.service import EligibilityEngine
from src.utils.logging import get_logger

logger = get_logger("screening.batch")

ERROR_ELIGIBILITY = "Error"

CSV_HEADERS = [
    "Name",
    "Email",
    "ATS_Score",
    "Eligibility",
    "Found_Keywords",
    "Missing_Keywords",
    "Skills",
    "Soft_Skills",
]

_CANDIDATE_SUFFIXES = {".json", ".yaml", ".yml"}


def load_candidates(path: Path) -> list[dict[str, Any]]:
    """Load candidate records from a file or directory.

    Supported inputs:
    - A JSON/YAML list of candidate records
    - A JSON/YAML mapping with a `candidates` (or `items`) list
    - A JSON/YAML mapping describing a single candidate
    - A directory of such files (searched recursively, in sorted order)

    Each record holds the extracted analysis fields plus `resumeText`.
    """
    if path.is_dir():
        candidates: list[dict[str, Any]] = []
        for child in sorted(path.rglob("*")):
            if child.is_file() and child.suffix.lower() in _CANDIDATE_SUFFIXES:
                candidates.extend(load_candidates(child))
        return candidates

    if not path.exists():
        raise FileNotFoundError(f"Candidates file not found: {path}")

    raw = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() == ".json":
            data = json.loads(raw)
        else:
            data = yaml.safe_load(raw)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ValueError(f"Invalid candidates file: {path}") from e

    if isinstance(data, dict):
        for key in ("candidates", "items"):
            if isinstance(data.get(key), list):
                data = data[key]
                break
        else:
            data = [data]

    if not isinstance(data, list):
        raise ValueError(f"Candidates file must contain a list or mapping: {path}")
    return [dict(item) for item in data if isinstance(item, dict)]


def _error_record(record: dict[str, Any], index: int, message: str) -> dict[str, Any]:
    return {
        **record,
        "name": record.get("name") or f"candidate-{index + 1}",
        "email": record.get("email") or "N/A",
        "atsScore": 0,
        "eligibility": ERROR_ELIGIBILITY,
        "error": True,
        "message": message,
    }


def screen_candidates(
    candidates: Iterable[Mapping[str, Any]],
    *,
    job_description: str = "",
    filters: FilterCriteria | dict[str, Any] | str | None = None,
    engine: EligibilityEngine | None = None,
) -> list[dict[str, Any]]:
    """Score every candidate and return the records ranked by `atsScore`.

    Each output record is the candidate's own fields (minus `resumeText`)
    overlaid with the eligibility result. A candidate that fails to score is
    reported with eligibility "Error" and does not stop the batch.
    """
    engine = engine or EligibilityEngine()
    criteria = FilterCriteria.from_raw(filters)

    results: list[dict[str, Any]] = []
    for index, candidate in enumerate(candidates):
        if not isinstance(candidate, Mapping):
            results.append(_error_record({}, index, "Candidate record is not a mapping"))
            continue

        record = dict(candidate)
        resume_text = record.pop("resumeText", "")
        if record.get("error"):
            # Upstream extraction already failed for this candidate.
            results.append(
                _error_record(record, index, str(record.get("message") or "Analysis failed"))
            )
            continue

        try:
            enriched = engine.compute_eligibility(
                record, resume_text, criteria, job_description
            )
        except Exception as e:
            logger.warning(f"Eligibility computation failed for candidate {index + 1}: {e}")
            results.append(_error_record(record, index, str(e)))
            continue

        results.append({**record, **enriched.to_dict()})

    results.sort(key=lambda item: item.get("atsScore") or 0, reverse=True)
    logger.info(f"Screened {len(results)} candidate(s)")
    return results


def sort_results(
    results: list[dict[str, Any]], column: str = "score", direction: str = "desc"
) -> list[dict[str, Any]]:
    """Return results sorted by `score` or `name` (stable)."""
    if column == "name":

        def key(item: dict[str, Any]) -> Any:
            return str(item.get("name") or "").lower()

    else:

        def key(item: dict[str, Any]) -> Any:
            return item.get("atsScore") or 0

    return sorted(results, key=key, reverse=direction == "desc")


def filter_results(
    results: Iterable[dict[str, Any]],
    *,
    min_score: float = 0,
    eligibility: str | None = None,
    keyword: str = "",
    required_skills: Iterable[str] = (),
) -> list[dict[str, Any]]:
    """Apply the results-table filters.

    - keyword: substring of name, email or any extracted skill
    - eligibility: exact tier (None or "all" keeps every tier)
    - min_score: minimum `atsScore`
    - required_skills: candidate must list every one of them
    """
    keyword = keyword.strip().lower()
    required = [skill.strip().lower() for skill in required_skills if skill.strip()]

    filtered: list[dict[str, Any]] = []
    for item in results:
        skills = [str(skill).lower() for skill in item.get("extractedSkills") or []]

        if keyword and not (
            keyword in str(item.get("name") or "").lower()
            or keyword in str(item.get("email") or "").lower()
            or any(keyword in skill for skill in skills)
        ):
            continue
        if eligibility and eligibility != "all" and item.get("eligibility") != eligibility:
            continue
        if (item.get("atsScore") or 0) < min_score:
            continue
        if required and not all(skill in skills for skill in required):
            continue
        filtered.append(item)
    return filtered


def summarize_results(results: list[dict[str, Any]]) -> dict[str, Any]:
    counts: dict[str, int] = {
        ELIGIBLE: 0,
        POTENTIAL_FIT: 0,
        NOT_A_FIT: 0,
        ERROR_ELIGIBILITY: 0,
    }
    scores: list[float] = []

    for item in results:
        tier = str(item.get("eligibility"))
        counts[tier] = counts.get(tier, 0) + 1
        if tier != ERROR_ELIGIBILITY:
            scores.append(float(item.get("atsScore") or 0))

    return {
        "total": len(results),
        "scored": len(scores),
        "counts": counts,
        "avg_score": sum(scores) / len(scores) if scores else 0.0,
        "top_score": max(scores) if scores else 0.0,
    }


def build_screening_report(
    *,
    candidates: Iterable[Mapping[str, Any]],
    job_description: str = "",
    filters: FilterCriteria | dict[str, Any] | str | None = None,
    engine: EligibilityEngine | None = None,
    eligibility: str | None = None,
    sort: str = "score",
    direction: str = "desc",
) -> dict[str, Any]:
    """Screen candidates and build a JSON-serializable report.

    `filters.min_score` and `eligibility` narrow the reported items, which
    are ordered by `sort` and `direction`. The summary always covers every
    screened candidate.
    """
    criteria = FilterCriteria.from_raw(filters)
    results = screen_candidates(
        candidates, job_description=job_description, filters=criteria, engine=engine
    )
    items = filter_results(
        results, min_score=criteria.min_score, eligibility=eligibility
    )
    items = sort_results(items, column=sort, direction=direction)
    return {
        "summary": summarize_results(results),
        "filters": criteria.to_dict(),
        "items": items,
    }


def export_csv(results: Iterable[dict[str, Any]], path: Path) -> Path:
    """Write results to a CSV file with the results-table columns."""

    def _joined(item: dict[str, Any], key: str) -> str:
        return "; ".join(str(value) for value in item.get(key) or [])

    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(CSV_HEADERS)
        for item in results:
            writer.writerow(
                [
                    item.get("name") or "N/A",
                    item.get("email") or "N/A",
                    item.get("atsScore") or 0,
                    item.get("eligibility") or "N/A",
                    _joined(item, "foundKeywords"),
                    _joined(item, "missingKeywords"),
                    _joined(item, "extractedSkills"),
                    _joined(item, "extractedSoftSkills"),
                ]
            )
    return path
