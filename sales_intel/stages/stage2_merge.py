"""
Stage 2: Dataset Merge
======================
Joins companies and people on normalized company name.

- People are indexed by normalized employer name before the company pass
- Companies with no matched contacts are dropped
- Each surviving company is scored (Stage 3) and the result is ordered by
  sales fit score, descending, keeping input order for ties
"""

import logging
from collections import defaultdict
from typing import Dict, List, Optional, Sequence

from ..models.schemas import Company, Person, MergedRecord
from .name_normalizer import NameNormalizer
from .stage3_scoring import (
    SalesFitScoringStage,
    average_contact_score,
)

logger = logging.getLogger(__name__)


class DatasetMergeStage:
    """
    Stage 2: Build one MergedRecord per company with at least one contact.
    """

    def __init__(
        self,
        scoring: Optional[SalesFitScoringStage] = None,
        normalizer: Optional[NameNormalizer] = None,
    ):
        self.scoring = scoring or SalesFitScoringStage()
        self.normalizer = normalizer or NameNormalizer()

    def index_people(self, people: Sequence[Person]) -> Dict[str, List[Person]]:
        """Group people by normalized company, preserving dataset order"""
        index: Dict[str, List[Person]] = defaultdict(list)
        for person in people:
            key = self.normalizer(person.company)
            if key:
                index[key].append(person)
        return index

    def process(
        self, companies: Sequence[Company], people: Sequence[Person]
    ) -> List[MergedRecord]:
        """
        Merge the two datasets.

        A company is kept iff at least one person shares its normalized
        name. Names that normalize to "" (blank or punctuation only) are
        not join keys: such companies and people never match anything.

        Args:
            companies: Ingested companies
            people: Ingested people

        Returns:
            MergedRecords sorted by sales fit score (stable)
        """
        index = self.index_people(people)
        merged = []

        for company in companies:
            key = self.normalizer(company.name)
            contacts = index.get(key, []) if key else []
            if not contacts:
                continue
            merged.append(self.build_record(company, contacts))

        logger.info(
            "Merged %d/%d companies with %d people (%d companies without contacts)",
            len(merged), len(companies), len(people), len(companies) - len(merged),
        )

        # sorted() is stable with reverse=True, so ties keep company order
        return sorted(merged, key=lambda record: record.sales_fit_score, reverse=True)

    def build_record(self, company: Company, contacts: Sequence[Person]) -> MergedRecord:
        contacts = list(contacts)
        decision_makers = self.scoring.decision_maker_count(contacts)
        breakdown = self.scoring.breakdown(company, contacts)
        score = self.scoring.finalize(breakdown)

        return MergedRecord(
            company=company,
            contacts=contacts,
            contact_count=len(contacts),
            decision_maker_count=decision_makers,
            average_contact_score=average_contact_score(contacts),
            sales_fit_score=score,
            priority=self.scoring.classify(score, decision_makers),
            score_breakdown=breakdown,
        )


def merge_datasets(
    companies: Sequence[Company], people: Sequence[Person]
) -> List[MergedRecord]:
    """Merge with default scoring and name normalization"""
    return DatasetMergeStage().process(companies, people)
