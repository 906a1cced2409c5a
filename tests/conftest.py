"""Pytest configuration and shared fixtures."""

import pytest

WEIGHT_ENV_VARS = [
    "ATS_WEIGHT_SKILLS",
    "ATS_WEIGHT_EXPERIENCE",
    "ATS_WEIGHT_EDUCATION",
    "ATS_WEIGHT_CERTS",
    "ATS_WEIGHT_LOCATION",
    "ATS_WEIGHTS_FILE",
]


@pytest.fixture(autouse=True)
def clean_weight_env(monkeypatch):
    """Isolate tests from ATS_WEIGHT_* variables and cached singletons."""
    from src.config.settings import reset_settings
    from src.screening.config import reset_weight_config

    for var in WEIGHT_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    reset_settings()
    reset_weight_config()
    yield
    reset_settings()
    reset_weight_config()


@pytest.fixture
def weight_config():
    """Weight configuration with defaults only (no .env file)."""
    from src.screening.config import WeightConfig

    return WeightConfig(env_file=None)


@pytest.fixture
def engine(weight_config):
    from src.screening.service import EligibilityEngine

    return EligibilityEngine(weight_config=weight_config)


@pytest.fixture
def sample_analysis() -> dict:
    """Extracted analysis for a mid-level full-stack candidate."""
    return {
        "name": "Alice Example",
        "email": "alice@example.com",
        "extractedSkills": ["react", "node.js", "aws", "graphql"],
        "extractedSoftSkills": ["communication", "teamwork"],
        "extractedEducation": [
            {
                "degree": "Bachelor of Science",
                "institution": "Example University",
                "year": "2018",
            }
        ],
        "extractedExperience": [
            {
                "title": "Software Engineer",
                "company": "Acme",
                "duration": "2019-2024 (5 years)",
            }
        ],
        "foundKeywords": ["react", "graphql"],
        "missingKeywords": ["kubernetes"],
    }


@pytest.fixture
def sample_resume_text() -> str:
    return (
        "Alice Example\n"
        "Experience: 5 years at Acme\n"
        "Skills: React, Node.js, AWS, GraphQL\n"
        "Education: BSc Computer Science"
    )


@pytest.fixture
def sample_job_description() -> str:
    return (
        "Senior Software Engineer - React, GraphQL, AWS\n\n"
        "We are looking for a senior engineer with experience in React, GraphQL, "
        "Kubernetes and AWS. 5+ years of experience preferred."
    )


@pytest.fixture
def sample_filters() -> dict:
    return {
        "minScore": 60,
        "experience": "mid",
        "location": "",
        "requiredSkills": ["React", "GraphQL"],
        "minEducation": "bachelor",
        "requiredCerts": [],
        "preferredKeywords": ["Kubernetes"],
        "blacklist": [],
    }
