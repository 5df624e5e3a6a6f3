"""Shared test data."""

from datetime import datetime, timezone

FIXED_NOW = datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc)

SAMPLE_INSIGHT = {
    "salary_ranges": [
        {"role": "Software Engineer", "min": 80000, "max": 160000, "median": 120000, "location": "US"},
        {"role": "Data Engineer", "min": 85000, "max": 150000, "median": 115000, "location": "US"},
    ],
    "growth_rate": 12.5,
    "demand_level": "HIGH",
    "top_skills": ["Python", "SQL", "Cloud"],
    "market_outlook": "POSITIVE",
    "key_trends": ["AI adoption", "Remote work"],
    "recommended_skills": ["Kubernetes", "MLOps"],
}
