"""
Configuration settings for the Sales Intelligence Engine
"""

import os

from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# LLM CONFIGURATION (OpenRouter)
# =============================================================================

LLM_CONFIG = {
    "provider": os.getenv("LLM_PROVIDER", "openrouter"),  # openrouter, openai
    "model": os.getenv("LLM_MODEL", "openai/gpt-4-turbo"),  # OpenRouter model format
    "api_key": os.getenv("OPENROUTER_API_KEY", ""),
    "base_url": os.getenv("LLM_BASE_URL", "https://openrouter.ai/api/v1"),
    "max_tokens": 1000,
    "temperature": 0.7,
    # OpenRouter specific headers
    "site_url": os.getenv("OPENROUTER_SITE_URL", "http://localhost:8000"),
    "app_name": os.getenv("OPENROUTER_APP_NAME", "Sales Intelligence Engine"),
}

# =============================================================================
# CONTACT SCORE DEFAULT
# =============================================================================

_seed = os.getenv("CONTACT_SCORE_SEED", "")

CONTACT_SCORE_CONFIG = {
    "mode": os.getenv("CONTACT_SCORE_MODE", "random"),  # random, fixed
    "fixed_value": int(os.getenv("CONTACT_SCORE_FIXED", "50")),
    "seed": int(_seed) if _seed.strip().lstrip("-").isdigit() else None,
    "min": 1,
    "max": 100,
}

# =============================================================================
# DEFAULT SCORING
# =============================================================================

DEFAULT_SCORING = {
    "ideal_size_min": 50,
    "ideal_size_max": 500,
    "ideal_size_points": 30,
    "acceptable_size_min": 10,
    "acceptable_size_max": 1000,
    "acceptable_size_points": 20,
    "other_size_points": 10,
    "decision_maker_points": 15,
    "email_completeness_points": 20,
    "industry_points": 15,
    "geography_points": 10,
    "max_score": 100,
}

TECH_INDUSTRY_KEYWORDS = [
    "technology",
    "software",
    "saas",
    "tech",
    "digital",
    "it",
    "information",
]

US_COUNTRY_NAMES = ["United States", "USA"]

# Seniorities that count toward the decision-maker bonus in the score
SCORING_DECISION_SENIORITIES = ["C-Suite", "VP"]

# Seniorities that count toward a record's decision-maker total
DECISION_MAKER_SENIORITIES = ["C-Suite", "VP", "Director"]

DEFAULT_PRIORITY_THRESHOLDS = {
    "high_min_score": 70,
    "high_min_decision_makers": 2,
    "medium_min_score": 50,
    "medium_min_decision_makers": 1,
}

# =============================================================================
# COMPANY SIZE BUCKETS
# =============================================================================

# (exclusive upper bound, label); the last bucket is open-ended
COMPANY_SIZE_BUCKETS = [
    (50, "Small (1-49)"),
    (200, "Medium (50-199)"),
    (1000, "Large (200-999)"),
    (None, "Enterprise (1000+)"),
]

TOP_INDUSTRIES_LIMIT = 5

# =============================================================================
# SOURCE COLUMN SYNONYMS
# =============================================================================

COMPANY_FIELD_SYNONYMS = {
    "id": ["id"],
    "name": ["name", "company_name", "company"],
    "website": ["website", "url"],
    "industry": ["industry", "sector"],
    "employee_count": ["employee_count", "employees"],
    "revenue": ["revenue"],
    "founded": ["founded"],
    "city": ["city"],
    "state": ["state", "province"],
    "country": ["country"],
    "zip_code": ["zip_code", "postal_code"],
    "phone": ["phone", "telephone"],
    "description": ["description"],
    "linkedin_url": ["linkedin_url", "linkedin"],
    "crunchbase_url": ["crunchbase_url", "crunchbase"],
    "technologies": ["technologies"],
    "funding": ["funding"],
    "last_updated": ["last_updated", "updated_at"],
}

PERSON_FIELD_SYNONYMS = {
    "id": ["id"],
    "first_name": ["first_name", "firstname"],
    "last_name": ["last_name", "lastname"],
    "full_name": ["full_name", "name"],
    "title": ["title", "job_title", "position"],
    "company": ["company", "company_name"],
    "email": ["email"],
    "phone": ["phone", "telephone"],
    "linkedin_url": ["linkedin_url", "linkedin"],
    "department": ["department"],
    "seniority": ["seniority", "level"],
    "location": ["location"],
    "last_updated": ["last_updated", "updated_at"],
    "decision_maker": ["decision_maker"],
    "contact_score": ["contact_score"],
}

TRUTHY_STRINGS = ["true", "yes", "1"]

# =============================================================================
# MAP FALLBACK COORDINATES
# =============================================================================

FALLBACK_COORDINATES = [
    (40.7128, -74.0060),   # New York
    (34.0522, -118.2437),  # Los Angeles
    (41.8781, -87.6298),   # Chicago
    (29.7604, -95.3698),   # Houston
    (33.4484, -112.0740),  # Phoenix
    (39.7392, -104.9903),  # Denver
    (37.7749, -122.4194),  # San Francisco
    (47.6062, -122.3321),  # Seattle
    (25.7617, -80.1918),   # Miami
    (32.7767, -96.7970),   # Dallas
]

MAP_POINT_LIMIT = 10

# =============================================================================
# JOB POSTINGS
# =============================================================================

# Matched case-insensitively against posting descriptions
JOB_SKILL_KEYWORDS = [
    "JavaScript", "TypeScript", "React", "Vue", "Angular", "Node.js", "Python",
    "Java", "C++", "C#", "Go", "Rust", "PHP", "Ruby", "Swift", "Kotlin", "Scala",
    "Django", "Flask", "Express", "MongoDB", "PostgreSQL", "MySQL", "Redis",
    "AWS", "Azure", "GCP", "Docker", "Kubernetes", "Git", "CI/CD", "REST",
    "GraphQL", "Microservices", "Machine Learning", "AI", "Data Science",
]

JOB_SKILL_LIMIT = 5
JOB_POSTING_LIMIT = 10
