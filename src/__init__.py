"""Resume screener: deterministic eligibility scoring for candidate resumes."""

__version__ = "0.1.0"
