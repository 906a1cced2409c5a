"""Deterministic eligibility screening for candidate resumes.

Public API:
    - EligibilityEngine: Scores one candidate against filters and a job description
    - compute_eligibility: Convenience wrapper around EligibilityEngine
    - WeightConfig: Owns the active category weights (atomic reload)
    - screen_candidates / build_screening_report: Batch scoring and ranking
"""

from src.screening.batch import (
    build_screening_report,
    export_csv,
    filter_results,
    load_candidates,
    screen_candidates,
)
from src.screening.config import (
    WeightConfig,
    WeightSettings,
    get_weight_config,
    reset_weight_config,
)
from src.screening.models import (
    AnalysisResult,
    EligibilityBreakdown,
    EligibilityResult,
    FilterCriteria,
    Weights,
)
from src.screening.service import (
    EligibilityEngine,
    compute_eligibility,
    eligibility_for_score,
)

__all__ = [
    "EligibilityEngine",
    "compute_eligibility",
    "eligibility_for_score",
    "WeightConfig",
    "WeightSettings",
    "get_weight_config",
    "reset_weight_config",
    "AnalysisResult",
    "FilterCriteria",
    "Weights",
    "EligibilityBreakdown",
    "EligibilityResult",
    "screen_candidates",
    "build_screening_report",
    "filter_results",
    "load_candidates",
    "export_csv",
]
