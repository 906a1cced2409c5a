"""Text heuristics used by eligibility scoring.

These are deliberately simple pattern matches. Their exact shapes (regexes,
first-match-wins ordering, rounding) define the scores, so keep them stable.
"""

from __future__ import annotations

import math
import re
from collections.abc import Collection, Iterable, Sequence

from src.screening.models import ExtractedExperience

# "5+ years", "5 year"
_DURATION_YEARS_RE = re.compile(r"([0-9]+)\+?\s*year")
# "3-5 years" (upper bound wins)
_DURATION_RANGE_RE = re.compile(r"([0-9]+)\s*-\s*([0-9]+)\s*years")
_RESUME_YEARS_RE = re.compile(r"([0-9]+)\+?\s*years?", re.IGNORECASE)

# Checked highest tier first. The short alternatives ("ms", "bs", "ba", "m.")
# match inside other words too; scores depend on that.
_EDUCATION_TIERS: tuple[tuple[re.Pattern[str], int], ...] = (
    (re.compile(r"phd|doctor", re.IGNORECASE), 95),
    (re.compile(r"master|m.sc|ms|m\.|msc", re.IGNORECASE), 85),
    (re.compile(r"bachelor|b\.sc|bs|b\.|ba", re.IGNORECASE), 75),
)
_EDUCATION_FALLBACK = 50

# (minimum tier score, multiplier applied when the candidate is below it)
_EDUCATION_PENALTIES: dict[str, tuple[int, float]] = {
    "bachelor": (75, 0.6),
    "master": (85, 0.5),
    "phd": (95, 0.4),
}

_TOKEN_SPLIT_RE = re.compile(r"[^a-z0-9+.#\-]+")

JOB_KEYWORD_STOPWORDS = frozenset(
    {
        "and", "or", "the", "a", "an", "to", "for", "with", "of", "in", "on",
        "is", "are", "by", "that", "this", "as", "be", "from", "at", "we",
        "you", "will", "can",
    }
)
MAX_JOB_KEYWORDS = 20
MAX_YEARS_DIGITS = 9


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward +infinity (42.5 -> 43)."""
    return math.floor(value + 0.5)


def normalize_terms(terms: Iterable[object]) -> list[str]:
    """Lowercase terms and drop empty ones."""
    normalized = (str(term).lower() for term in terms)
    return [term for term in normalized if term]


def match_terms(
    terms: Sequence[str],
    resume_text: str,
    skills: Collection[str] = (),
) -> list[str]:
    """Return the terms found in the resume text or among the skills.

    Terms and `resume_text` are expected lowercase. Resume text matches by
    substring, skills by exact membership.
    """
    return [term for term in terms if term in resume_text or term in skills]


def _parse_years(digits: str) -> int:
    """Parse a run of digits; implausibly long runs saturate at 10**9."""
    if len(digits) > MAX_YEARS_DIGITS:
        return 10**MAX_YEARS_DIGITS
    return int(digits)


def extract_years(experience: Sequence[ExtractedExperience], resume_text: str) -> int:
    """Estimate years of experience.

    Entry durations are scanned in order and the first match wins; the
    resume text is only consulted when no duration matches.
    """
    for entry in experience:
        duration = entry.duration
        if not duration:
            continue
        match = _DURATION_YEARS_RE.search(duration)
        if match:
            return _parse_years(match.group(1))
        match = _DURATION_RANGE_RE.search(duration)
        if match:
            return _parse_years(match.group(2))

    match = _RESUME_YEARS_RE.search(resume_text)
    if match:
        return _parse_years(match.group(1))
    return 0


def score_experience(years: int, level: str = "any") -> int:
    """Score years of experience, then adjust for the requested level."""
    score = 50
    if years > 0:
        score = min(100, round_half_up(min(years, 10) / 10 * 100))

    if level == "junior":
        if years <= 2:
            score = max(score, 95)
        elif years <= 4:
            score = round_half_up(score * 0.7)
        else:
            score = round_half_up(score * 0.4)
    elif level == "mid":
        if 3 <= years <= 6:
            score = max(score, 95)
        else:
            score = round_half_up(score * 0.7)
    elif level == "senior":
        if years >= 7:
            score = max(score, 95)
        else:
            score = round_half_up(score * 0.6)
    return score


def score_education(degrees: Sequence[str], min_education: str = "any") -> int:
    """Score the highest recognised degree, penalised below `min_education`."""
    degree_text = " ".join(degrees)
    score = _EDUCATION_FALLBACK
    for pattern, tier_score in _EDUCATION_TIERS:
        if pattern.search(degree_text):
            score = tier_score
            break

    penalty = _EDUCATION_PENALTIES.get(min_education)
    if penalty is not None:
        required, multiplier = penalty
        if score < required:
            score = round_half_up(score * multiplier)
    return score


def extract_job_keywords(
    job_description: str, limit: int = MAX_JOB_KEYWORDS
) -> list[str]:
    """Return the most frequent keywords of a job description.

    Ties keep first-seen order: counts live in an insertion-ordered dict and
    the sort is stable.
    """
    text = str(job_description or "").lower()
    counts: dict[str, int] = {}
    for token in _TOKEN_SPLIT_RE.split(text):
        token = token.strip()
        if len(token) < 2 or token in JOB_KEYWORD_STOPWORDS:
            continue
        counts[token] = counts.get(token, 0) + 1

    ranked = sorted(counts, key=lambda token: counts[token], reverse=True)
    return ranked[:limit]
