"""
Sales Intelligence Engine - Main Orchestrator
=============================================
Holds the current companies and people datasets and serves views over
their merge:
  Stage 1: Record Ingestion → Stage 2: Dataset Merge (with Stage 3 scoring)
  → Stage 4: Aggregation & Filtering, Stage 5: Company Assistant on demand

Loading either dataset replaces it wholesale and bumps a generation
counter; the merge is recomputed lazily once per generation, so a result
computed for an older generation is never served.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional

from .models.schemas import (
    Company,
    Person,
    MergedRecord,
    DashboardStats,
    FilterCriteria,
    FilterOptions,
    MapPoint,
    AssistantAnswer,
    IngestSummary,
    JobPostingsResult,
)
from .models.scoring_config import ScoringConfig
from .stages.stage1_ingest import RecordIngestionStage, ContactScorePolicy
from .stages.stage2_merge import DatasetMergeStage
from .stages.stage3_scoring import SalesFitScoringStage
from .stages.stage4_analytics import (
    generate_dashboard_stats,
    filter_merged_data,
    generate_filter_options,
)
from .stages.stage5_assistant import CompanyAssistantStage
from .geocoding import Geocoder, GeocodeCache, generate_map_data
from .jobs import JobListingSource, find_job_postings
from .io_utils import export_records_csv


class SalesIntelligenceEngine:
    """
    Main engine that owns the datasets and orchestrates all stages.
    """

    def __init__(
        self,
        scoring_config: Optional[ScoringConfig] = None,
        contact_score_policy: Optional[ContactScorePolicy] = None,
        assistant: Optional[CompanyAssistantStage] = None,
        geocoder: Optional[Geocoder] = None,
        job_source: Optional[JobListingSource] = None,
    ):
        """
        Initialize the engine.

        Args:
            scoring_config: Sales fit scoring configuration (defaults if omitted)
            contact_score_policy: Default for missing contact scores
            assistant: Company assistant (built from LLM_CONFIG if omitted)
            geocoder: Optional geocoding collaborator for map data
            job_source: Optional job search collaborator
        """
        self.config = scoring_config or ScoringConfig()

        self.ingestion = RecordIngestionStage(contact_score_policy)
        self.merger = DatasetMergeStage(SalesFitScoringStage(self.config))
        self.assistant = assistant or CompanyAssistantStage()
        self.geocoder = geocoder
        self.geocode_cache = GeocodeCache()
        self.job_source = job_source

        self.companies: List[Company] = []
        self.people: List[Person] = []
        self.generation = 0
        self._merged: List[MergedRecord] = []
        self._merged_generation = 0

        self.stats = self._empty_stats()

    # =========================================================================
    # Dataset loading
    # =========================================================================

    def load_companies(self, rows: Iterable[Mapping[str, Any]]) -> IngestSummary:
        """Replace the companies dataset with freshly ingested rows"""
        result = self.ingestion.process_companies(rows)
        self.companies = result.records
        self.stats["companies_loaded"] = result.kept_rows
        self.stats["companies_dropped"] = result.dropped_rows
        self._bump_generation()
        return IngestSummary(
            total_rows=result.total_rows,
            kept_rows=result.kept_rows,
            dropped_rows=result.dropped_rows,
        )

    def load_people(self, rows: Iterable[Mapping[str, Any]]) -> IngestSummary:
        """Replace the people dataset with freshly ingested rows"""
        result = self.ingestion.process_people(rows)
        self.people = result.records
        self.stats["people_loaded"] = result.kept_rows
        self.stats["people_dropped"] = result.dropped_rows
        self._bump_generation()
        return IngestSummary(
            total_rows=result.total_rows,
            kept_rows=result.kept_rows,
            dropped_rows=result.dropped_rows,
        )

    def update_config(self, new_config: ScoringConfig):
        """Swap the scoring configuration; the merge is recomputed on next read"""
        self.config = new_config
        self.merger = DatasetMergeStage(SalesFitScoringStage(new_config))
        self._bump_generation()

    def _bump_generation(self):
        self.generation += 1
        self.stats["generation"] = self.generation

    # =========================================================================
    # Views
    # =========================================================================

    def merged(self) -> List[MergedRecord]:
        """Merged records for the current datasets"""
        if self._merged_generation != self.generation:
            self._merged = self.merger.process(self.companies, self.people)
            self._merged_generation = self.generation
            self.stats["merges_computed"] += 1
            self.stats["merged_companies"] = len(self._merged)
        return self._merged

    def dashboard_stats(self) -> DashboardStats:
        return generate_dashboard_stats(self.merged())

    def filter(self, criteria: Optional[FilterCriteria] = None) -> List[MergedRecord]:
        return filter_merged_data(self.merged(), criteria)

    def filter_options(self) -> FilterOptions:
        return generate_filter_options(self.merged())

    def map_data(self, criteria: Optional[FilterCriteria] = None) -> List[MapPoint]:
        return generate_map_data(
            self.filter(criteria), geocoder=self.geocoder, cache=self.geocode_cache
        )

    def export_csv(self, criteria: Optional[FilterCriteria] = None) -> str:
        return export_records_csv(self.filter(criteria))

    def find_record(self, company_id: str) -> Optional[MergedRecord]:
        for record in self.merged():
            if record.company.id == company_id:
                return record
        return None

    def ask(self, company_id: str, question: str) -> Optional[AssistantAnswer]:
        """Ask the assistant about a merged company; None if it is not merged"""
        record = self.find_record(company_id)
        if record is None:
            return None
        self.stats["questions_answered"] += 1
        return self.assistant.process(record, question)

    def job_postings(self, company_id: str) -> Optional[JobPostingsResult]:
        """Open roles for a merged company; None if it is not merged"""
        record = self.find_record(company_id)
        if record is None:
            return None
        self.stats["job_searches"] += 1
        return find_job_postings(record, self.job_source)

    # =========================================================================
    # Diagnostics
    # =========================================================================

    def get_stats(self) -> Dict[str, Any]:
        """Get engine statistics"""
        stats = self.stats.copy()
        stats["geocode_cache_size"] = len(self.geocode_cache)
        stats["llm_enabled"] = self.assistant.llm_enabled
        stats["job_source_configured"] = self.job_source is not None
        return stats

    def reset(self):
        """Drop both datasets"""
        self.companies = []
        self.people = []
        self.geocode_cache.clear()
        self.stats = self._empty_stats()
        self._bump_generation()

    @staticmethod
    def _empty_stats() -> Dict[str, Any]:
        return {
            "companies_loaded": 0,
            "companies_dropped": 0,
            "people_loaded": 0,
            "people_dropped": 0,
            "generation": 0,
            "merges_computed": 0,
            "merged_companies": 0,
            "questions_answered": 0,
            "job_searches": 0,
        }
