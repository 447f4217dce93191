"""
Stage 4: Aggregation & Filtering
================================
Pure views over the merged dataset for the presentation layer:
- Dashboard statistics (totals, distributions)
- Multi-criteria filtering (AND across criteria, OR within one)
- Filter options (distinct values present in the data)
"""

from collections import Counter
from typing import Iterable, List, Optional, Sequence, Tuple

from ..models.schemas import (
    MergedRecord,
    DashboardStats,
    FilterCriteria,
    FilterOptions,
    IndustryCount,
    LocationCount,
    RoleCount,
    Priority,
)
from ..config.settings import COMPANY_SIZE_BUCKETS, TOP_INDUSTRIES_LIMIT


def company_size_bucket(employee_count: Optional[int]) -> Optional[str]:
    """Size label for an employee count; None when the count is unknown"""
    if not employee_count:
        return None
    for upper, label in COMPANY_SIZE_BUCKETS:
        if upper is None or employee_count < upper:
            return label
    return None


def _ranked(counts: Counter) -> List[Tuple[str, int]]:
    # Counter keeps first-seen order and sorted() is stable
    return sorted(counts.items(), key=lambda item: item[1], reverse=True)


# =============================================================================
# STATISTICS
# =============================================================================

def generate_dashboard_stats(records: Sequence[MergedRecord]) -> DashboardStats:
    """Summary statistics for the dashboard header and charts"""
    total = len(records)
    if total == 0:
        return DashboardStats()

    industries: Counter = Counter()
    states: Counter = Counter()
    roles: Counter = Counter()

    for record in records:
        company = record.company
        if company.industry:
            industries[company.industry] += 1
        if company.state:
            states[company.state] += 1
        for contact in record.contacts:
            role = contact.seniority.value if contact.seniority else "Unknown"
            roles[role] += 1

    return DashboardStats(
        total_companies=total,
        total_contacts=sum(record.contact_count for record in records),
        high_priority_count=sum(1 for record in records if record.priority == Priority.HIGH),
        average_company_size=sum(record.company.employee_count or 0 for record in records) / total,
        top_industries=[
            IndustryCount(industry=name, count=count)
            for name, count in _ranked(industries)[:TOP_INDUSTRIES_LIMIT]
        ],
        geographic_distribution=[
            LocationCount(location=name, count=count) for name, count in _ranked(states)
        ],
        contact_role_distribution=[
            RoleCount(role=name, count=count) for name, count in _ranked(roles)
        ],
    )


# =============================================================================
# FILTERING
# =============================================================================

def _matches(record: MergedRecord, criteria: FilterCriteria) -> bool:
    company = record.company

    if criteria.company_size:
        if company_size_bucket(company.employee_count) not in criteria.company_size:
            return False

    if criteria.industries:
        if not company.industry or company.industry not in criteria.industries:
            return False

    if criteria.locations:
        if not company.state or company.state not in criteria.locations:
            return False

    if criteria.seniority:
        wanted = set(criteria.seniority)
        if not any(contact.seniority in wanted for contact in record.contacts):
            return False

    if criteria.priority:
        if record.priority not in criteria.priority:
            return False

    if criteria.search_term:
        term = criteria.search_term.lower()
        in_company = term in company.name.lower()
        in_contacts = any(
            term in contact.full_name.lower() or term in contact.title.lower()
            for contact in record.contacts
        )
        if not in_company and not in_contacts:
            return False

    return True


def filter_merged_data(
    records: Iterable[MergedRecord], criteria: Optional[FilterCriteria] = None
) -> List[MergedRecord]:
    """Records satisfying every given criterion, in input order"""
    if criteria is None:
        return list(records)
    return [record for record in records if _matches(record, criteria)]


# =============================================================================
# FILTER OPTIONS
# =============================================================================

def _range(values: List[int]) -> List[int]:
    return [min(values), max(values)] if values else []


def generate_filter_options(records: Sequence[MergedRecord]) -> FilterOptions:
    """Distinct values to populate the filter panel"""
    sizes = set()
    industries = set()
    locations = set()
    seniority = set()
    contact_scores: List[int] = []
    fit_scores: List[int] = []

    for record in records:
        company = record.company
        bucket = company_size_bucket(company.employee_count)
        if bucket:
            sizes.add(bucket)
        if company.industry:
            industries.add(company.industry)
        if company.state:
            locations.add(company.state)
        for contact in record.contacts:
            if contact.seniority:
                seniority.add(contact.seniority.value)
            if contact.contact_score is not None:
                contact_scores.append(contact.contact_score)
        fit_scores.append(record.sales_fit_score)

    return FilterOptions(
        company_size=sorted(sizes),
        industries=sorted(industries),
        locations=sorted(locations),
        seniority=sorted(seniority),
        contact_score_range=_range(contact_scores),
        sales_fit_score_range=_range(fit_scores),
    )
