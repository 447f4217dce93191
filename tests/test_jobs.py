import logging

import pytest

from sales_intel.jobs import extract_skills, find_job_postings
from sales_intel.models.schemas import JobPosting
from sales_intel.stages.stage2_merge import merge_datasets


class StaticJobSource:
    def __init__(self, postings=None, fail=False):
        self.postings = postings or []
        self.fail = fail
        self.queries = []

    def search(self, company_name):
        self.queries.append(company_name)
        if self.fail:
            raise ConnectionError("job board returned 503")
        return self.postings


@pytest.fixture
def record(make_company, make_person):
    (record,) = merge_datasets([make_company("Acme Inc")], [make_person("Ada", "Acme Inc")])
    return record


def test_extract_skills_in_keyword_order_and_limited():
    description = "We use python, Docker and Kubernetes on AWS with PostgreSQL and Redis."

    assert extract_skills(description) == ["Python", "PostgreSQL", "Redis", "AWS", "Docker"]
    assert extract_skills(description, limit=2) == ["Python", "PostgreSQL"]
    assert extract_skills("") == []


def test_no_source_configured(record):
    result = find_job_postings(record)

    assert result.company_id == record.company.id
    assert result.jobs == []
    assert result.error == "No job listing source configured"


def test_postings_get_skills_from_description(record):
    source = StaticJobSource([
        JobPosting(id="1", title="Backend Engineer", company="Acme Inc",
                   description="Flask and PostgreSQL services"),
        JobPosting(id="2", title="SRE", company="Acme Inc", description="Terraform",
                   skills=["Terraform"]),
    ])

    result = find_job_postings(record, source)

    assert source.queries == ["Acme Inc"]
    assert result.error is None
    assert [job.skills for job in result.jobs] == [["Flask", "PostgreSQL"], ["Terraform"]]


def test_postings_are_limited(record):
    source = StaticJobSource([
        JobPosting(id=str(i), title="Engineer", company="Acme Inc") for i in range(15)
    ])

    assert len(find_job_postings(record, source).jobs) == 10
    assert len(find_job_postings(record, source, limit=3).jobs) == 3


def test_failed_search_degrades_to_error(record, caplog):
    with caplog.at_level(logging.WARNING, logger="sales_intel.jobs"):
        result = find_job_postings(record, StaticJobSource(fail=True))

    assert result.jobs == []
    assert result.error == "Job search unavailable: job board returned 503"
    assert "Job search failed for Acme Inc" in caplog.text
