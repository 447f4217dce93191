"""
Pydantic schemas for the Sales Intelligence Engine
"""

from enum import Enum
from typing import List, Dict, Optional, Any
from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# ENUMS
# =============================================================================

class Seniority(str, Enum):
    """Contact seniority level"""
    C_SUITE = "C-Suite"
    VP = "VP"
    DIRECTOR = "Director"
    MANAGER = "Manager"
    SENIOR = "Senior"
    MID_LEVEL = "Mid-Level"
    JUNIOR = "Junior"


class Priority(str, Enum):
    """Account priority tier"""
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


PRIORITY_RANK = {Priority.LOW: 0, Priority.MEDIUM: 1, Priority.HIGH: 2}


# =============================================================================
# SOURCE RECORDS
# =============================================================================

class Company(BaseModel):
    """One business entity from the companies dataset"""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    website: Optional[str] = None
    industry: Optional[str] = None
    employee_count: Optional[int] = None
    revenue: Optional[str] = None
    founded: Optional[int] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    zip_code: Optional[str] = None
    phone: Optional[str] = None
    description: Optional[str] = None
    linkedin_url: Optional[str] = None
    crunchbase_url: Optional[str] = None
    technologies: List[str] = Field(default_factory=list)
    funding: Optional[str] = None
    last_updated: Optional[str] = None


class Person(BaseModel):
    """One contact from the people dataset"""
    model_config = ConfigDict(frozen=True)

    id: str
    first_name: str = ""
    last_name: str = ""
    full_name: str
    title: str = ""
    company: str = ""  # free-text employer name, used as the join key
    email: Optional[str] = None
    phone: Optional[str] = None
    linkedin_url: Optional[str] = None
    department: Optional[str] = None
    seniority: Optional[Seniority] = None
    location: Optional[str] = None
    last_updated: Optional[str] = None
    decision_maker: bool = False
    contact_score: Optional[int] = None


# =============================================================================
# INGESTION RESULTS
# =============================================================================

class IngestSummary(BaseModel):
    """Row counts for one ingestion pass"""
    total_rows: int = 0
    kept_rows: int = 0
    dropped_rows: int = 0


class CompanyIngestResult(IngestSummary):
    records: List[Company] = Field(default_factory=list)


class PersonIngestResult(IngestSummary):
    records: List[Person] = Field(default_factory=list)


# =============================================================================
# MERGE & SCORING RESULTS
# =============================================================================

class ScoreBreakdown(BaseModel):
    """Points contributed by each sales fit component"""
    company_size: int = 0
    decision_makers: int = 0
    contact_completeness: float = 0
    industry: int = 0
    geography: int = 0
    raw_total: float = 0


class MergedRecord(BaseModel):
    """A company joined with its matched contacts and derived scores"""
    company: Company
    contacts: List[Person]
    contact_count: int
    decision_maker_count: int
    average_contact_score: float
    sales_fit_score: int
    priority: Priority
    score_breakdown: Optional[ScoreBreakdown] = None


# =============================================================================
# AGGREGATION & FILTERING
# =============================================================================

class IndustryCount(BaseModel):
    industry: str
    count: int


class LocationCount(BaseModel):
    location: str
    count: int


class RoleCount(BaseModel):
    role: str
    count: int


class DashboardStats(BaseModel):
    """Summary statistics over a merged dataset"""
    total_companies: int = 0
    total_contacts: int = 0
    high_priority_count: int = 0
    average_company_size: float = 0
    top_industries: List[IndustryCount] = Field(default_factory=list)
    geographic_distribution: List[LocationCount] = Field(default_factory=list)
    contact_role_distribution: List[RoleCount] = Field(default_factory=list)


class FilterCriteria(BaseModel):
    """Multi-criteria filter; empty lists and blank search apply no filtering"""
    company_size: List[str] = Field(default_factory=list)
    industries: List[str] = Field(default_factory=list)
    locations: List[str] = Field(default_factory=list)
    seniority: List[Seniority] = Field(default_factory=list)
    priority: List[Priority] = Field(default_factory=list)
    search_term: Optional[str] = None


class FilterOptions(BaseModel):
    """Distinct values available to each filter"""
    company_size: List[str] = Field(default_factory=list)
    industries: List[str] = Field(default_factory=list)
    locations: List[str] = Field(default_factory=list)
    seniority: List[str] = Field(default_factory=list)
    contact_score_range: List[int] = Field(default_factory=list)
    sales_fit_score_range: List[int] = Field(default_factory=list)


# =============================================================================
# PRESENTATION COLLABORATORS
# =============================================================================

class MapPoint(BaseModel):
    """A company placed on the map"""
    lat: float
    lng: float
    company: Company
    contact_count: int
    priority: Priority
    approximate: bool = False


class AssistantAnswer(BaseModel):
    """Answer to a question about one company"""
    company_id: str
    company_name: str
    question: str
    answer: str
    source: str = "rules"  # llm, rules
    error: Optional[str] = None
    processing_time_ms: float = 0
    tokens_used: Optional[int] = None


class JobPosting(BaseModel):
    """An open role at a company"""
    id: str
    title: str
    company: str
    location: str = ""
    description: str = ""
    url: str = ""
    posted_date: Optional[str] = None
    salary: Optional[str] = None
    job_type: Optional[str] = None
    experience: Optional[str] = None
    skills: List[str] = Field(default_factory=list)


class JobPostingsResult(BaseModel):
    """Open roles for one merged company"""
    company_id: str
    company_name: str
    jobs: List[JobPosting] = Field(default_factory=list)
    error: Optional[str] = None


# =============================================================================
# API REQUEST SCHEMAS
# =============================================================================

class DatasetRowsRequest(BaseModel):
    """Raw rows produced by a tabular parser"""
    rows: List[Dict[str, Any]]


class DatasetLoadResponse(BaseModel):
    kind: str
    total_rows: int
    kept_rows: int
    dropped_rows: int
    merged_companies: int


class AskRequest(BaseModel):
    """Question about one merged company"""
    company_id: str
    question: str = Field(..., min_length=1)
