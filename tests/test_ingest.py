import random

import pytest

from sales_intel.models.schemas import Seniority
from sales_intel.stages.stage1_ingest import (
    ContactScorePolicy,
    FieldRule,
    RecordIngestionStage,
    canonical_row,
    ingest_companies,
    ingest_people,
    parse_int,
    resolve,
    source_column,
)


# -----------------------------------------------------------------------------
# Field rules
# -----------------------------------------------------------------------------

def test_first_non_empty_synonym_wins():
    rules = [source_column("name"), source_column("company_name"), source_column("company")]
    assert resolve({"name": "", "company_name": "Globex", "company": "Other"}, rules) == "Globex"
    assert resolve({"name": "  ", "company": "Other"}, rules) == "Other"
    assert resolve({}, rules) is None


def test_custom_rule_runs_after_columns():
    rules = [source_column("a"), FieldRule(lambda row: True, lambda row: "fallback")]
    assert resolve({"a": "x"}, rules) == "x"
    assert resolve({"a": None}, rules) == "fallback"


def test_canonical_row_normalizes_headers():
    row = canonical_row({" Company Name ": "Acme", "EMAIL": "a@b.c"})
    assert row == {"company_name": "Acme", "email": "a@b.c"}


@pytest.mark.parametrize("raw, expected", [
    ("120", 120),
    (" 120 ", 120),
    ("120.0", 120),
    ("1,200", 1200),
    (45, 45),
    (45.9, 45),
    ("abc", None),
    ("", None),
    (None, None),
    (float("nan"), None),
    (True, None),
])
def test_parse_int(raw, expected):
    assert parse_int(raw) == expected


# -----------------------------------------------------------------------------
# Companies
# -----------------------------------------------------------------------------

def test_company_synonyms_and_types(company_rows):
    companies = ingest_companies(company_rows)

    acme, globex, initech, lonely = companies
    assert acme.name == "Acme Inc"
    assert acme.employee_count == 120
    assert acme.industry == "Software"
    assert globex.name == "Globex"
    assert globex.industry == "Manufacturing"
    assert initech.country == "USA"
    assert lonely.employee_count is None


def test_company_ids_default_to_row_index():
    companies = ingest_companies([
        {"name": "A"},
        {"description": "nothing useful"},
        {"id": "custom", "name": "C"},
        {"name": "D"},
    ])
    assert [c.id for c in companies] == ["company-0", "custom", "company-3"]


def test_company_kept_with_only_website_or_industry():
    companies = ingest_companies([
        {"website": "https://example.com"},
        {"sector": "Retail"},
        {"name": "   ", "city": "Paris"},
    ])
    assert len(companies) == 2
    assert companies[0].name == ""
    assert companies[0].website == "https://example.com"


def test_company_drop_count_is_reported():
    result = RecordIngestionStage().process_companies([{"name": "A"}, {"city": "X"}, {}])
    assert result.total_rows == 3
    assert result.kept_rows == 1
    assert result.dropped_rows == 2


def test_company_numeric_fields_and_technologies():
    (company,) = ingest_companies([{
        "name": "Acme",
        "employees": "-4",
        "founded": "1999",
        "technologies": "Python, React, ,AWS",
        "province": "Ontario",
        "postal_code": "M5V",
        "updated_at": "2024-01-01",
    }])
    assert company.employee_count is None
    assert company.founded == 1999
    assert company.technologies == ["Python", "React", "AWS"]
    assert company.state == "Ontario"
    assert company.zip_code == "M5V"
    assert company.last_updated == "2024-01-01"


def test_unparsable_employee_count_is_absent_not_zero():
    (company,) = ingest_companies([{"name": "Acme", "employee_count": "lots"}])
    assert company.employee_count is None


def test_ingestion_logs_counts(caplog):
    with caplog.at_level("INFO"):
        ingest_companies([{"name": "A"}, {}])
    assert "Ingested 1/2 company rows (1 dropped)" in caplog.messages


# -----------------------------------------------------------------------------
# People
# -----------------------------------------------------------------------------

def test_people_synonyms_and_validity(people_rows, fixed_scores):
    people = ingest_people(people_rows, fixed_scores)

    assert [p.full_name for p in people] == [
        "Ada Lovelace", "Bob Builder", "Hans Gruber", "Peter Gibbons",
    ]
    bob = people[1]
    assert bob.first_name == "Bob"
    assert bob.last_name == "Builder"
    assert bob.seniority == Seniority.VP
    assert people[2].company == "Globex"
    assert people[3].decision_maker is True


def test_person_needs_company_or_title(fixed_scores):
    stage = RecordIngestionStage(fixed_scores)
    result = stage.process_people([
        {"full_name": "Title Only", "title": "CTO"},
        {"full_name": "Company Only", "company": "Acme"},
        {"full_name": "Neither"},
        {"company": "Acme", "title": "Nameless"},
    ])
    assert [p.full_name for p in result.records] == ["Title Only", "Company Only"]
    assert result.dropped_rows == 2


def test_person_ids_default_to_row_index(fixed_scores):
    people = ingest_people(
        [{"full_name": "Nobody"}, {"full_name": "A", "company": "X"}], fixed_scores
    )
    assert people[0].id == "person-1"


@pytest.mark.parametrize("raw, expected", [
    ("true", True),
    ("TRUE", True),
    ("yes", True),
    ("1", True),
    (True, True),
    ("false", False),
    ("no", False),
    (False, False),
    ("", False),
])
def test_decision_maker_flag(raw, expected, fixed_scores):
    (person,) = ingest_people(
        [{"full_name": "A", "company": "X", "decision_maker": raw}], fixed_scores
    )
    assert person.decision_maker is expected


def test_seniority_is_case_insensitive_and_unknown_is_absent(fixed_scores):
    people = ingest_people([
        {"full_name": "A", "company": "X", "seniority": "c-suite"},
        {"full_name": "B", "company": "X", "level": "Director"},
        {"full_name": "C", "company": "X", "seniority": "Intern"},
    ], fixed_scores)
    assert [p.seniority for p in people] == [Seniority.C_SUITE, Seniority.DIRECTOR, None]


# -----------------------------------------------------------------------------
# Contact score default
# -----------------------------------------------------------------------------

def test_missing_contact_score_uses_fixed_policy(fixed_scores):
    (person,) = ingest_people([{"full_name": "A", "company": "X"}], fixed_scores)
    assert person.contact_score == 50


def test_random_policy_is_reproducible_with_injected_rng():
    rows = [{"full_name": f"P{i}", "company": "X"} for i in range(20)]
    first = ingest_people(rows, ContactScorePolicy(rng=random.Random(7)))
    second = ingest_people(rows, ContactScorePolicy(rng=random.Random(7)))

    scores = [p.contact_score for p in first]
    assert scores == [p.contact_score for p in second]
    assert all(1 <= s <= 100 for s in scores)


def test_source_contact_score_is_kept_and_clamped(fixed_scores):
    people = ingest_people([
        {"full_name": "A", "company": "X", "contact_score": "88"},
        {"full_name": "B", "company": "X", "contact_score": "150"},
        {"full_name": "C", "company": "X", "contact_score": "0"},
    ], fixed_scores)
    assert [p.contact_score for p in people] == [88, 100, 1]


def test_unknown_policy_mode_is_rejected():
    with pytest.raises(ValueError):
        ContactScorePolicy(mode="median")
