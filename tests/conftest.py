import sys
from pathlib import Path

import pytest

# Ensure `sales_intel` is importable when running pytest from the repo root.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sales_intel.config import settings
from sales_intel.models.schemas import Company, Person
from sales_intel.stages.stage1_ingest import ContactScorePolicy


@pytest.fixture(autouse=True)
def no_llm_key(monkeypatch):
    monkeypatch.setitem(settings.LLM_CONFIG, "api_key", "")


@pytest.fixture
def fixed_scores():
    return ContactScorePolicy(mode="fixed", fixed_value=50)


@pytest.fixture
def make_company():
    counter = {"n": 0}

    def _make(name, **fields):
        counter["n"] += 1
        fields.setdefault("id", f"c{counter['n']}")
        return Company(name=name, **fields)

    return _make


@pytest.fixture
def make_person():
    counter = {"n": 0}

    def _make(full_name, company, **fields):
        counter["n"] += 1
        fields.setdefault("id", f"p{counter['n']}")
        fields.setdefault("contact_score", 50)
        return Person(full_name=full_name, company=company, **fields)

    return _make


@pytest.fixture
def company_rows():
    return [
        {"name": "Acme Inc", "employee_count": "120", "industry": "Software",
         "country": "United States", "state": "CA", "city": "San Francisco"},
        {"company_name": "Globex", "employee_count": "5000", "sector": "Manufacturing",
         "country": "Germany", "state": "Bavaria"},
        {"name": "Initech", "employee_count": "30", "industry": "IT Services",
         "country": "USA", "state": "TX"},
        {"name": "Lonely Corp", "industry": "Retail"},
    ]


@pytest.fixture
def people_rows():
    return [
        {"full_name": "Ada Lovelace", "company": "ACME, Inc.", "title": "CEO",
         "seniority": "C-Suite", "email": "ada@acme.com", "contact_score": "90"},
        {"first_name": "Bob", "last_name": "Builder", "company": "acme inc", "title": "VP Sales",
         "seniority": "VP", "contact_score": "70"},
        {"name": "Hans Gruber", "company_name": "Globex", "title": "Engineer",
         "seniority": "Senior", "email": "hans@globex.de", "contact_score": "40"},
        {"full_name": "Peter Gibbons", "company": "Initech", "title": "Programmer",
         "decision_maker": "true", "email": "peter@initech.com", "contact_score": "60"},
        {"full_name": "No Employer", "title": ""},
    ]
