"""Tests for batch screening."""

from __future__ import annotations

import csv
import json

import pytest


def _candidate(name: str, skills: list[str], resume: str, **extra) -> dict:
    return {
        "name": name,
        "email": f"{name.lower()}@example.com",
        "extractedSkills": skills,
        "resumeText": resume,
        **extra,
    }


@pytest.fixture
def candidates() -> list[dict]:
    return [
        _candidate("Bob", ["excel"], "Retail sales associate"),
        _candidate("Alice", ["python", "sql", "aws"], "Python SQL AWS engineer, 6 years"),
        _candidate("Carol", ["python"], "Python developer, 2 years"),
    ]


class TestLoadCandidates:
    """Test load_candidates."""

    def test_load_candidates_json_list(self, tmp_path, candidates):
        from src.screening.batch import load_candidates

        path = tmp_path / "candidates.json"
        path.write_text(json.dumps(candidates), encoding="utf-8")

        assert load_candidates(path) == candidates

    def test_load_candidates_wrapped_mapping(self, tmp_path, candidates):
        from src.screening.batch import load_candidates

        path = tmp_path / "batch.json"
        path.write_text(json.dumps({"candidates": candidates}), encoding="utf-8")

        assert [c["name"] for c in load_candidates(path)] == ["Bob", "Alice", "Carol"]

    def test_load_candidates_single_yaml_record(self, tmp_path):
        from src.screening.batch import load_candidates

        path = tmp_path / "alice.yaml"
        path.write_text("name: Alice\nextractedSkills: [python]\n", encoding="utf-8")

        assert load_candidates(path) == [{"name": "Alice", "extractedSkills": ["python"]}]

    def test_load_candidates_directory(self, tmp_path):
        from src.screening.batch import load_candidates

        (tmp_path / "b.json").write_text('{"name": "B"}', encoding="utf-8")
        nested = tmp_path / "nested"
        nested.mkdir()
        (nested / "a.yaml").write_text("name: A\n", encoding="utf-8")
        (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")

        names = [c["name"] for c in load_candidates(tmp_path)]

        assert names == ["B", "A"]

    def test_load_candidates_missing_file_raises(self, tmp_path):
        from src.screening.batch import load_candidates

        with pytest.raises(FileNotFoundError):
            load_candidates(tmp_path / "missing.json")

    def test_load_candidates_invalid_file_raises(self, tmp_path):
        from src.screening.batch import load_candidates

        path = tmp_path / "bad.json"
        path.write_text("{oops", encoding="utf-8")

        with pytest.raises(ValueError):
            load_candidates(path)


class TestScreenCandidates:
    """Test screen_candidates."""

    def test_screen_candidates_ranks_by_score(self, engine, candidates):
        from src.screening.batch import screen_candidates

        results = screen_candidates(
            candidates,
            job_description="Python SQL AWS engineer",
            filters={"requiredSkills": ["python", "sql"]},
            engine=engine,
        )

        assert [r["name"] for r in results] == ["Alice", "Carol", "Bob"]
        scores = [r["atsScore"] for r in results]
        assert scores == sorted(scores, reverse=True)

    def test_screen_candidates_merges_result_over_record(self, engine, candidates):
        from src.screening.batch import screen_candidates

        results = screen_candidates(candidates[:1], engine=engine)
        record = results[0]

        assert record["name"] == "Bob"
        assert record["extractedSkills"] == ["excel"]
        assert "resumeText" not in record
        assert record["eligibilityScore"] == record["atsScore"]
        assert "eligibilityBreakdown" in record

    def test_screen_candidates_keeps_upstream_errors(self, engine):
        from src.screening.batch import screen_candidates

        results = screen_candidates(
            [{"name": "broken.pdf", "error": True, "message": "Failed to parse PDF file."}],
            engine=engine,
        )

        assert results[0]["eligibility"] == "Error"
        assert results[0]["atsScore"] == 0
        assert results[0]["message"] == "Failed to parse PDF file."

    def test_screen_candidates_does_not_abort_on_failure(self, candidates):
        from src.screening.batch import screen_candidates

        class ExplodingEngine:
            def compute_eligibility(self, analysis, *args, **kwargs):
                if analysis.get("name") == "Alice":
                    raise RuntimeError("boom")
                from src.screening.config import WeightConfig
                from src.screening.service import EligibilityEngine

                return EligibilityEngine(WeightConfig(env_file=None)).compute_eligibility(
                    analysis, *args, **kwargs
                )

        results = screen_candidates(candidates, engine=ExplodingEngine())  # type: ignore[arg-type]

        by_name = {r["name"]: r for r in results}
        assert by_name["Alice"]["eligibility"] == "Error"
        assert by_name["Alice"]["message"] == "boom"
        assert by_name["Bob"]["eligibility"] != "Error"
        assert results[-1]["name"] == "Alice"

    def test_screen_candidates_non_mapping_record(self, engine):
        from src.screening.batch import screen_candidates

        results = screen_candidates(["not a record"], engine=engine)  # type: ignore[list-item]

        assert results[0]["eligibility"] == "Error"
        assert results[0]["name"] == "candidate-1"


class TestSortAndFilterResults:
    """Test sort_results and filter_results."""

    @pytest.fixture
    def results(self) -> list[dict]:
        return [
            {"name": "bob", "email": "bob@example.com", "atsScore": 40,
             "eligibility": "Not a Fit", "extractedSkills": ["Excel"]},
            {"name": "Alice", "email": "alice@corp.io", "atsScore": 80,
             "eligibility": "Eligible", "extractedSkills": ["Python", "SQL"]},
            {"name": "Carol", "email": "carol@example.com", "atsScore": 60,
             "eligibility": "Potential Fit", "extractedSkills": ["Python"]},
        ]

    def test_sort_results_by_score_and_name(self, results):
        from src.screening.batch import sort_results

        by_score = sort_results(results)
        by_name = sort_results(results, column="name", direction="asc")

        assert [r["name"] for r in by_score] == ["Alice", "Carol", "bob"]
        assert [r["name"] for r in by_name] == ["Alice", "bob", "Carol"]

    def test_filter_results_min_score(self, results):
        from src.screening.batch import filter_results

        assert [r["name"] for r in filter_results(results, min_score=60)] == [
            "Alice",
            "Carol",
        ]

    def test_filter_results_eligibility(self, results):
        from src.screening.batch import filter_results

        assert [r["name"] for r in filter_results(results, eligibility="Eligible")] == [
            "Alice"
        ]
        assert len(filter_results(results, eligibility="all")) == 3

    def test_filter_results_keyword(self, results):
        from src.screening.batch import filter_results

        assert [r["name"] for r in filter_results(results, keyword="corp")] == ["Alice"]
        assert [r["name"] for r in filter_results(results, keyword="EXC")] == ["bob"]

    def test_filter_results_required_skills(self, results):
        from src.screening.batch import filter_results

        filtered = filter_results(results, required_skills=["python", " sql "])

        assert [r["name"] for r in filtered] == ["Alice"]


class TestReport:
    """Test summarize_results, build_screening_report and export_csv."""

    def test_summarize_results(self):
        from src.screening.batch import summarize_results

        summary = summarize_results(
            [
                {"eligibility": "Eligible", "atsScore": 80},
                {"eligibility": "Not a Fit", "atsScore": 40},
                {"eligibility": "Error", "atsScore": 0},
            ]
        )

        assert summary["total"] == 3
        assert summary["scored"] == 2
        assert summary["counts"]["Eligible"] == 1
        assert summary["counts"]["Potential Fit"] == 0
        assert summary["counts"]["Error"] == 1
        assert summary["avg_score"] == 60.0
        assert summary["top_score"] == 80.0

    def test_build_screening_report_applies_min_score(self, engine, candidates):
        from src.screening.batch import build_screening_report

        report = build_screening_report(
            candidates=candidates,
            job_description="Python SQL AWS engineer",
            filters={"minScore": 101},
            engine=engine,
        )

        assert report["summary"]["total"] == 3
        assert report["items"] == []
        assert report["filters"]["minScore"] == 101

    def test_build_screening_report_sorts_items(self, engine, candidates):
        from src.screening.batch import build_screening_report

        by_name = build_screening_report(
            candidates=candidates, engine=engine, sort="name", direction="asc"
        )
        by_score_asc = build_screening_report(
            candidates=candidates,
            job_description="Python SQL AWS engineer",
            filters={"requiredSkills": ["python", "sql"]},
            engine=engine,
            direction="asc",
        )

        assert [item["name"] for item in by_name["items"]] == ["Alice", "Bob", "Carol"]
        assert [item["name"] for item in by_score_asc["items"]] == ["Bob", "Carol", "Alice"]

    def test_export_csv(self, tmp_path):
        from src.screening.batch import CSV_HEADERS, export_csv

        path = export_csv(
            [
                {
                    "name": "Alice, PhD",
                    "atsScore": 80,
                    "eligibility": "Eligible",
                    "extractedSkills": ["python", "sql"],
                }
            ],
            tmp_path / "out" / "results.csv",
        )

        with path.open(encoding="utf-8", newline="") as f:
            rows = list(csv.reader(f))

        assert rows[0] == CSV_HEADERS
        assert rows[1] == [
            "Alice, PhD",
            "N/A",
            "80",
            "Eligible",
            "",
            "",
            "python; sql",
            "",
        ]
