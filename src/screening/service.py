"""Eligibility scoring service."""

from __future__ import annotations

from typing import Any

from src.screening.config import WeightConfig, get_weight_config
from src.screening.matchers import (
    extract_job_keywords,
    extract_years,
    match_terms,
    normalize_terms,
    round_half_up,
    score_education,
    score_experience,
)
from src.screening.models import (
    ELIGIBLE,
    NOT_A_FIT,
    POTENTIAL_FIT,
    AnalysisResult,
    EligibilityBreakdown,
    EligibilityResult,
    FilterCriteria,
)
from src.utils.logging import get_logger

logger = get_logger("screening.service")

ELIGIBLE_THRESHOLD = 75
POTENTIAL_FIT_THRESHOLD = 50

MAX_PREFERRED_BONUS = 10
BLACKLIST_PENALTY_PER_TERM = 25
MAX_BLACKLIST_PENALTY = 50

# Extracted-skill breadth that earns the full skill ratio when no required
# skills are given.
SKILL_BREADTH_CAP = 8

KEYWORD_SHARE = 0.7
SKILL_SHARE = 0.3


def eligibility_for_score(score: int) -> str:
    """Map a composite score to its eligibility tier."""
    if score >= ELIGIBLE_THRESHOLD:
        return ELIGIBLE
    if score >= POTENTIAL_FIT_THRESHOLD:
        return POTENTIAL_FIT
    return NOT_A_FIT


class EligibilityEngine:
    """Scores a candidate against filters and a job description.

    The engine holds no per-call state; `compute_eligibility` reads the
    weight snapshot once and is safe to call from several threads.
    """

    def __init__(self, weight_config: WeightConfig | None = None) -> None:
        self.weight_config = weight_config or get_weight_config()

    def compute_eligibility(
        self,
        analysis: AnalysisResult | dict[str, Any] | None,
        resume_text: str | None = "",
        filters: FilterCriteria | dict[str, Any] | str | None = None,
        job_description: str | None = "",
    ) -> EligibilityResult:
        """Compute the composite score, verdict and breakdown for one candidate.

        Missing or malformed inputs resolve to their defaults; this never
        raises for bad input.
        """
        analysis = AnalysisResult.from_raw(analysis)
        criteria = FilterCriteria.from_raw(filters)
        resume_lower = str(resume_text or "").lower()
        weights = self.weight_config.get_weights()

        skills = [skill.lower() for skill in analysis.extracted_skills]
        skill_set = frozenset(skills)
        degrees = [entry.degree.lower() for entry in analysis.extracted_education]

        years = extract_years(analysis.extracted_experience, str(resume_text or ""))
        exp_score = score_experience(years, criteria.experience)
        edu_score = score_education(degrees, criteria.min_education)

        cert_score = 100
        required_certs = normalize_terms(criteria.required_certs)
        if required_certs:
            matched = match_terms(required_certs, resume_lower, skill_set)
            cert_score = round_half_up(len(matched) / len(required_certs) * 100)

        location_score = 100
        if criteria.location.strip():
            location = criteria.location.lower()
            location_score = 100 if location in resume_lower else 30

        preferred_bonus = 0
        preferred = normalize_terms(criteria.preferred_keywords)
        if preferred:
            matched = match_terms(preferred, resume_lower, skill_set)
            preferred_bonus = min(
                MAX_PREFERRED_BONUS,
                round_half_up(len(matched) / len(preferred) * MAX_PREFERRED_BONUS),
            )

        # Blacklisted terms only count when they appear in the resume text.
        blacklist_penalty = 0
        blacklist = normalize_terms(criteria.blacklist)
        if blacklist:
            found = match_terms(blacklist, resume_lower)
            if found:
                blacklist_penalty = min(
                    MAX_BLACKLIST_PENALTY, len(found) * BLACKLIST_PENALTY_PER_TERM
                )

        job_keywords = extract_job_keywords(job_description or "")
        matched_keywords = match_terms(job_keywords, resume_lower, skill_set)
        keyword_ratio = (
            len(matched_keywords) / len(job_keywords) if job_keywords else 0
        )

        required_skills = normalize_terms(criteria.required_skills)
        if required_skills:
            matched = match_terms(required_skills, resume_lower, skill_set)
            skill_ratio = len(matched) / len(required_skills)
        else:
            skill_ratio = min(1, len(skills) / SKILL_BREADTH_CAP) if skills else 0

        skills_score = round_half_up(
            (keyword_ratio * KEYWORD_SHARE + skill_ratio * SKILL_SHARE) * 100
        )

        raw_score = (
            skills_score * weights.skills
            + exp_score * weights.experience
            + edu_score * weights.education
            + cert_score * weights.certs
            + location_score * weights.location
        ) / 100

        adjusted = raw_score + preferred_bonus - blacklist_penalty
        score = round_half_up(max(0.0, min(100.0, adjusted)))
        eligibility = eligibility_for_score(score)

        logger.debug(
            f"eligibility={eligibility} score={score} raw={raw_score:.2f} "
            f"years={years} keywords={len(matched_keywords)}/{len(job_keywords)}"
        )

        return EligibilityResult(
            eligibility=eligibility,  # type: ignore[arg-type]
            eligibility_score=score,
            ats_score=score,
            eligibility_breakdown=EligibilityBreakdown(
                skills_score=skills_score,
                keyword_match_count=len(matched_keywords),
                keyword_total=len(job_keywords),
                exp_score=exp_score,
                edu_score=edu_score,
                cert_score=cert_score,
                location_score=location_score,
                preferred_bonus=preferred_bonus,
                blacklist_penalty=blacklist_penalty,
                weights=weights,
                years_of_experience=years,
                job_keywords=job_keywords,
                matched_keywords=matched_keywords,
            ),
        )

    def format_result(self, result: EligibilityResult, name: str | None = None) -> str:
        """Format an EligibilityResult for CLI output."""
        breakdown = result.eligibility_breakdown
        weights = breakdown.weights

        lines: list[str] = []
        if name:
            lines.append(f"Candidate: {name}")
        lines.append(f"Eligibility: {result.eligibility} (score={result.ats_score})")
        lines.append(
            "Scores: "
            f"skills={breakdown.skills_score} "
            f"experience={breakdown.exp_score} "
            f"education={breakdown.edu_score} "
            f"certs={breakdown.cert_score} "
            f"location={breakdown.location_score}"
        )
        lines.append(
            f"Adjustments: preferred_bonus=+{breakdown.preferred_bonus} "
            f"blacklist_penalty=-{breakdown.blacklist_penalty}"
        )
        lines.append(
            f"Job keywords matched: {breakdown.keyword_match_count}/{breakdown.keyword_total}"
        )
        if breakdown.matched_keywords:
            lines.append(f"Matched: {', '.join(breakdown.matched_keywords)}")
        lines.append(f"Years of experience: {breakdown.years_of_experience}")
        lines.append(
            "Weights: "
            f"skills={weights.skills:g} experience={weights.experience:g} "
            f"education={weights.education:g} certs={weights.certs:g} "
            f"location={weights.location:g}"
        )
        return "\n".join(lines)


def compute_eligibility(
    analysis: AnalysisResult | dict[str, Any] | None,
    resume_text: str | None = "",
    filters: FilterCriteria | dict[str, Any] | str | None = None,
    job_description: str | None = "",
    *,
    weight_config: WeightConfig | None = None,
) -> EligibilityResult:
    """Score one candidate with the given (or default) weight configuration."""
    engine = EligibilityEngine(weight_config=weight_config)
    return engine.compute_eligibility(analysis, resume_text, filters, job_description)
