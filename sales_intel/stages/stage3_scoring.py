"""
Stage 3: Sales Fit Scoring
==========================
Linear, additive scoring so every point can be explained to a sales rep.

Components:
- Company size (30 / 20 / 10 points by employee band)
- Decision makers (15 points each, C-Suite, VP or flagged)
- Contact completeness (up to 20 points for email coverage)
- Industry affinity (15 points for technology keywords)
- Geography (10 points for US companies)

The sum is truncated to an integer and capped at 100, not rescaled.
Truncation keeps the priority tiers exact: an integer score reaches a
threshold only when the fractional sum does.
"""

import math
from typing import Iterable, Optional, Sequence

from ..models.schemas import Company, Person, Priority, ScoreBreakdown
from ..models.scoring_config import ScoringConfig
from ..config.settings import DECISION_MAKER_SENIORITIES


def is_decision_maker(
    contact: Person, seniorities: Iterable[str] = DECISION_MAKER_SENIORITIES
) -> bool:
    """Flagged explicitly, or holding one of the decision-maker seniorities"""
    if contact.decision_maker:
        return True
    return contact.seniority is not None and contact.seniority.value in seniorities


def count_decision_makers(
    contacts: Sequence[Person], seniorities: Iterable[str] = DECISION_MAKER_SENIORITIES
) -> int:
    seniorities = set(seniorities)
    return sum(1 for contact in contacts if is_decision_maker(contact, seniorities))


def average_contact_score(contacts: Sequence[Person]) -> float:
    if not contacts:
        return 0
    return sum(contact.contact_score or 0 for contact in contacts) / len(contacts)


class SalesFitScoringStage:
    """
    Stage 3: Calculate the sales fit score and priority tier for a company.
    """

    def __init__(self, config: Optional[ScoringConfig] = None):
        """
        Initialize with scoring configuration or use defaults.
        """
        self.config = config or ScoringConfig()

    def score(self, company: Company, contacts: Sequence[Person]) -> int:
        """Sales fit score in [0, max_score]"""
        return self.finalize(self.breakdown(company, contacts))

    def finalize(self, breakdown: ScoreBreakdown) -> int:
        total = math.floor(breakdown.raw_total)
        return max(0, min(total, self.config.max_score))

    def decision_maker_count(self, contacts: Sequence[Person]) -> int:
        """Contacts counting toward the priority tier"""
        return count_decision_makers(contacts, self.config.contacts.decision_maker_seniorities)

    def breakdown(self, company: Company, contacts: Sequence[Person]) -> ScoreBreakdown:
        """Points per component before the cap"""
        size = self._score_company_size(company)
        decision_makers = self._score_decision_makers(contacts)
        completeness = self._score_contact_completeness(contacts)
        industry = self._score_industry(company)
        geography = self._score_geography(company)

        return ScoreBreakdown(
            company_size=size,
            decision_makers=decision_makers,
            contact_completeness=round(completeness, 2),
            industry=industry,
            geography=geography,
            raw_total=size + decision_makers + completeness + industry + geography,
        )

    def classify(self, score: int, decision_maker_count: int) -> Priority:
        """First matching tier wins"""
        t = self.config.thresholds
        if score >= t.high_min_score and decision_maker_count >= t.high_min_decision_makers:
            return Priority.HIGH
        if score >= t.medium_min_score and decision_maker_count >= t.medium_min_decision_makers:
            return Priority.MEDIUM
        return Priority.LOW

    def _score_company_size(self, company: Company) -> int:
        bands = self.config.company_size
        count = company.employee_count
        # Zero employees is treated like a missing count
        if not count:
            return 0
        if bands.ideal_min <= count <= bands.ideal_max:
            return bands.ideal_points
        if bands.acceptable_min <= count <= bands.acceptable_max:
            return bands.acceptable_points
        return bands.other_points

    def _score_decision_makers(self, contacts: Sequence[Person]) -> int:
        criteria = self.config.contacts
        qualifying = [
            contact for contact in contacts
            if contact.decision_maker
            or (contact.seniority is not None and contact.seniority.value in criteria.decision_seniorities)
        ]
        return len(qualifying) * criteria.decision_maker_points

    def _score_contact_completeness(self, contacts: Sequence[Person]) -> float:
        if not contacts:
            return 0
        with_email = sum(1 for contact in contacts if contact.email)
        return with_email * self.config.contacts.email_completeness_points / len(contacts)

    def _score_industry(self, company: Company) -> int:
        if not company.industry:
            return 0
        industry = company.industry.lower()
        affinity = self.config.industry
        if any(keyword.lower() in industry for keyword in affinity.keywords):
            return affinity.points
        return 0

    def _score_geography(self, company: Company) -> int:
        geo = self.config.geography
        if company.country in geo.preferred_countries:
            return geo.points
        return 0


# =============================================================================
# Convenience Functions
# =============================================================================

def calculate_sales_fit_score(company: Company, contacts: Sequence[Person]) -> int:
    return SalesFitScoringStage().score(company, contacts)


def calculate_priority(score: int, decision_maker_count: int) -> Priority:
    return SalesFitScoringStage().classify(score, decision_maker_count)
