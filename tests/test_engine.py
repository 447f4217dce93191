import pytest

from sales_intel.engine import SalesIntelligenceEngine
from sales_intel.models.schemas import FilterCriteria, JobPosting, Priority
from sales_intel.models.scoring_config import create_default_scoring_config


@pytest.fixture
def engine(fixed_scores, company_rows, people_rows):
    engine = SalesIntelligenceEngine(contact_score_policy=fixed_scores)
    engine.load_companies(company_rows)
    engine.load_people(people_rows)
    return engine


def test_end_to_end_merge(engine):
    merged = engine.merged()

    assert [r.company.name for r in merged] == ["Acme Inc", "Initech", "Globex"]
    acme = merged[0]
    assert [c.full_name for c in acme.contacts] == ["Ada Lovelace", "Bob Builder"]
    assert acme.sales_fit_score == 95
    assert acme.priority == Priority.HIGH


def test_load_reports_drops(fixed_scores, people_rows):
    engine = SalesIntelligenceEngine(contact_score_policy=fixed_scores)
    summary = engine.load_people(people_rows)

    assert summary.total_rows == 5
    assert summary.dropped_rows == 1
    assert engine.get_stats()["people_dropped"] == 1


def test_merge_is_recomputed_once_per_generation(engine):
    first = engine.merged()
    assert engine.merged() is first
    assert engine.get_stats()["merges_computed"] == 1

    engine.load_people([{"full_name": "Zed", "company": "Lonely Corp", "title": "Owner"}])

    names = [r.company.name for r in engine.merged()]
    assert names == ["Lonely Corp"]
    assert engine.get_stats()["merges_computed"] == 2


def test_reload_replaces_dataset_wholesale(engine):
    engine.load_companies([{"name": "Globex"}])
    assert [r.company.name for r in engine.merged()] == ["Globex"]


def test_views_delegate_to_merged_data(engine):
    assert engine.dashboard_stats().total_companies == 3
    assert engine.filter() == engine.merged()
    assert [r.company.name for r in engine.filter(FilterCriteria(locations=["TX"]))] == ["Initech"]
    assert engine.filter_options().locations == ["Bavaria", "CA", "TX"]
    assert len(engine.map_data()) == 3
    assert engine.export_csv().startswith("company_id,")


def test_update_config_rescores(engine):
    before = engine.merged()[0].sales_fit_score
    engine.update_config(create_default_scoring_config(preferred_countries=["Germany"]))

    acme = next(r for r in engine.merged() if r.company.name == "Acme Inc")
    assert acme.sales_fit_score == before - 10


def test_ask_known_and_unknown_company(engine):
    acme_id = engine.merged()[0].company.id

    answer = engine.ask(acme_id, "Which industry?")
    assert answer.company_name == "Acme Inc"
    assert engine.ask("missing", "Anything?") is None
    assert engine.get_stats()["questions_answered"] == 1


def test_reset_clears_everything(engine):
    engine.merged()
    engine.reset()

    assert engine.merged() == []
    stats = engine.get_stats()
    assert stats["companies_loaded"] == 0
    assert stats["generation"] == engine.generation


def test_job_postings_for_merged_company(fixed_scores, company_rows, people_rows):
    class OneJobSource:
        def search(self, company_name):
            return [JobPosting(id="j1", title="Engineer", company=company_name)]

    engine = SalesIntelligenceEngine(contact_score_policy=fixed_scores, job_source=OneJobSource())
    engine.load_companies(company_rows)
    engine.load_people(people_rows)
    acme = engine.merged()[0]

    result = engine.job_postings(acme.company.id)

    assert [job.company for job in result.jobs] == ["Acme Inc"]
    assert engine.job_postings("missing") is None
    assert engine.get_stats()["job_searches"] == 1
    assert engine.get_stats()["job_source_configured"] is True
