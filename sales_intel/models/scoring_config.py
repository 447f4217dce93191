"""
Sales Fit Scoring Configuration Models
"""

from typing import List, Optional
from pydantic import BaseModel, Field

from ..config.settings import (
    DEFAULT_SCORING,
    DEFAULT_PRIORITY_THRESHOLDS,
    TECH_INDUSTRY_KEYWORDS,
    US_COUNTRY_NAMES,
    SCORING_DECISION_SENIORITIES,
    DECISION_MAKER_SENIORITIES,
)


class CompanySizeBands(BaseModel):
    """Employee count bands and the points each one earns"""
    ideal_min: int = DEFAULT_SCORING["ideal_size_min"]
    ideal_max: int = DEFAULT_SCORING["ideal_size_max"]
    ideal_points: int = DEFAULT_SCORING["ideal_size_points"]
    acceptable_min: int = DEFAULT_SCORING["acceptable_size_min"]
    acceptable_max: int = DEFAULT_SCORING["acceptable_size_max"]
    acceptable_points: int = DEFAULT_SCORING["acceptable_size_points"]
    other_points: int = DEFAULT_SCORING["other_size_points"]


class ContactCriteria(BaseModel):
    """Contact-derived scoring"""
    decision_maker_points: int = DEFAULT_SCORING["decision_maker_points"]
    decision_seniorities: List[str] = Field(
        default_factory=lambda: list(SCORING_DECISION_SENIORITIES)
    )
    # Wider set used for the decision-maker count behind priority tiers
    decision_maker_seniorities: List[str] = Field(
        default_factory=lambda: list(DECISION_MAKER_SENIORITIES)
    )
    email_completeness_points: int = DEFAULT_SCORING["email_completeness_points"]


class IndustryAffinity(BaseModel):
    """Substring keywords matched case-insensitively against industry"""
    keywords: List[str] = Field(default_factory=lambda: list(TECH_INDUSTRY_KEYWORDS))
    points: int = DEFAULT_SCORING["industry_points"]


class Geography(BaseModel):
    """Exact, case-sensitive country matches"""
    preferred_countries: List[str] = Field(default_factory=lambda: list(US_COUNTRY_NAMES))
    points: int = DEFAULT_SCORING["geography_points"]


class PriorityThresholds(BaseModel):
    """Thresholds for priority tiers"""
    high_min_score: int = DEFAULT_PRIORITY_THRESHOLDS["high_min_score"]
    high_min_decision_makers: int = DEFAULT_PRIORITY_THRESHOLDS["high_min_decision_makers"]
    medium_min_score: int = DEFAULT_PRIORITY_THRESHOLDS["medium_min_score"]
    medium_min_decision_makers: int = DEFAULT_PRIORITY_THRESHOLDS["medium_min_decision_makers"]


class ScoringConfig(BaseModel):
    """Complete sales fit scoring configuration"""
    name: str = "Default Sales Fit"
    company_size: CompanySizeBands = Field(default_factory=CompanySizeBands)
    contacts: ContactCriteria = Field(default_factory=ContactCriteria)
    industry: IndustryAffinity = Field(default_factory=IndustryAffinity)
    geography: Geography = Field(default_factory=Geography)
    thresholds: PriorityThresholds = Field(default_factory=PriorityThresholds)
    max_score: int = DEFAULT_SCORING["max_score"]


def create_default_scoring_config(
    industry_keywords: Optional[List[str]] = None,
    preferred_countries: Optional[List[str]] = None,
) -> ScoringConfig:
    """
    Factory function to create a scoring config with sensible defaults
    """
    config = ScoringConfig()

    if industry_keywords:
        config.industry.keywords = industry_keywords

    if preferred_countries:
        config.geography.preferred_countries = preferred_countries

    return config
