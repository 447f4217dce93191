"""
Open job postings for merged companies.

Job search is an external collaborator: anything with a
``search(company_name)`` method returning JobPostings. A missing source or a
failed search yields an empty list with an error string, never an exception.
"""

import logging
from typing import List, Optional, Protocol, Sequence

from .models.schemas import JobPosting, JobPostingsResult, MergedRecord
from .config.settings import JOB_POSTING_LIMIT, JOB_SKILL_KEYWORDS, JOB_SKILL_LIMIT

logger = logging.getLogger(__name__)


class JobListingSource(Protocol):
    def search(self, company_name: str) -> Sequence[JobPosting]:
        ...


def extract_skills(
    description: str,
    keywords: Sequence[str] = JOB_SKILL_KEYWORDS,
    limit: int = JOB_SKILL_LIMIT,
) -> List[str]:
    """Known skills mentioned in a posting, in keyword order"""
    text = description.lower()
    return [skill for skill in keywords if skill.lower() in text][:limit]


def find_job_postings(
    record: MergedRecord,
    source: Optional[JobListingSource] = None,
    limit: int = JOB_POSTING_LIMIT,
) -> JobPostingsResult:
    """
    Look up open roles for a merged company.

    Postings without skills get them extracted from the description.
    """
    company = record.company
    result = JobPostingsResult(company_id=company.id, company_name=company.name)

    if source is None:
        result.error = "No job listing source configured"
        return result

    try:
        postings = list(source.search(company.name))
    except Exception as e:
        logger.warning("Job search failed for %s: %s", company.name, e)
        result.error = f"Job search unavailable: {str(e)[:100]}"
        return result

    result.jobs = [
        posting if posting.skills
        else posting.model_copy(update={"skills": extract_skills(posting.description)})
        for posting in postings[:limit]
    ]
    return result
