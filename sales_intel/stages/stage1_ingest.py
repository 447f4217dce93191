"""
Stage 1: Record Ingestion
=========================
Turns untyped rows from a tabular parser into Company and Person records.

Each target field is resolved from an ordered list of rules; the first rule
whose predicate accepts the row supplies the value. Rows that fail the
validity check are dropped and counted, never raised.
"""

import logging
import math
import random
import re
from typing import Any, Callable, Dict, Iterable, List, Mapping, NamedTuple, Optional

from ..models.schemas import (
    Company,
    Person,
    Seniority,
    CompanyIngestResult,
    PersonIngestResult,
)
from ..config.settings import (
    COMPANY_FIELD_SYNONYMS,
    PERSON_FIELD_SYNONYMS,
    CONTACT_SCORE_CONFIG,
    TRUTHY_STRINGS,
)

logger = logging.getLogger(__name__)

Row = Mapping[str, Any]

_LEADING_INT = re.compile(r"^[+-]?\d+")
_SENIORITY_LOOKUP = {s.value.lower(): s for s in Seniority}


# =============================================================================
# FIELD RULES
# =============================================================================

class FieldRule(NamedTuple):
    """One way of producing a field value from a raw row"""
    predicate: Callable[[Row], bool]
    extractor: Callable[[Row], Any]


def _is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, float) and math.isnan(value):
        return False
    if isinstance(value, bool):
        return True
    return str(value).strip() != ""


def source_column(column: str) -> FieldRule:
    """Rule that takes the value of a single source column when non-empty"""
    return FieldRule(
        predicate=lambda row: _is_present(row.get(column)),
        extractor=lambda row: row.get(column),
    )


def resolve(row: Row, rules: Iterable[FieldRule]) -> Any:
    """Return the value of the first matching rule, or None"""
    for rule in rules:
        if rule.predicate(row):
            return rule.extractor(row)
    return None


def _rules_for(synonyms: Dict[str, List[str]]) -> Dict[str, List[FieldRule]]:
    return {
        field: [source_column(column) for column in columns]
        for field, columns in synonyms.items()
    }


COMPANY_RULES = _rules_for(COMPANY_FIELD_SYNONYMS)
PERSON_RULES = _rules_for(PERSON_FIELD_SYNONYMS)


def _name_parts(row: Row) -> str:
    first = _as_text(resolve(row, PERSON_RULES["first_name"])) or ""
    last = _as_text(resolve(row, PERSON_RULES["last_name"])) or ""
    return f"{first} {last}".strip()


full_name_from_parts = FieldRule(
    predicate=lambda row: _name_parts(row) != "",
    extractor=_name_parts,
)

PERSON_RULES["full_name"].append(full_name_from_parts)


# =============================================================================
# VALUE COERCION
# =============================================================================

def canonical_row(row: Row) -> Dict[str, Any]:
    """Strip, lowercase and underscore column headers; first header wins"""
    out: Dict[str, Any] = {}
    for key, value in row.items():
        column = str(key).strip().lower().replace(" ", "_")
        out.setdefault(column, value)
    return out


def _as_text(value: Any) -> Optional[str]:
    if not _is_present(value):
        return None
    return str(value).strip()


def parse_int(value: Any) -> Optional[int]:
    """Parse a leading integer; anything unparsable is absent, not zero"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    text = str(value).strip().replace(",", "")
    match = _LEADING_INT.match(text)
    return int(match.group()) if match else None


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in TRUTHY_STRINGS


def _as_list(value: Any) -> List[str]:
    if isinstance(value, (list, tuple)):
        items = value
    else:
        text = _as_text(value)
        items = text.split(",") if text else []
    return [str(item).strip() for item in items if str(item).strip()]


def _as_seniority(value: Any) -> Optional[Seniority]:
    text = _as_text(value)
    if not text:
        return None
    return _SENIORITY_LOOKUP.get(text.lower())


# =============================================================================
# CONTACT SCORE DEFAULT
# =============================================================================

class ContactScorePolicy:
    """
    Supplies a contact score when the source row has none.

    "random" mode draws a uniform integer in [min, max] from the injected
    random source; "fixed" mode always returns the configured neutral value.
    """

    def __init__(
        self,
        mode: str = "random",
        fixed_value: int = 50,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        low: int = 1,
        high: int = 100,
    ):
        if mode not in ("random", "fixed"):
            raise ValueError(f"Unknown contact score mode: {mode}")
        self.mode = mode
        self.low = low
        self.high = high
        self.fixed_value = self.clamp(fixed_value)
        self.rng = rng or random.Random(seed)

    @classmethod
    def from_settings(cls) -> "ContactScorePolicy":
        return cls(
            mode=CONTACT_SCORE_CONFIG["mode"],
            fixed_value=CONTACT_SCORE_CONFIG["fixed_value"],
            seed=CONTACT_SCORE_CONFIG["seed"],
            low=CONTACT_SCORE_CONFIG["min"],
            high=CONTACT_SCORE_CONFIG["max"],
        )

    def clamp(self, score: int) -> int:
        return max(self.low, min(self.high, score))

    def assign(self) -> int:
        if self.mode == "fixed":
            return self.fixed_value
        return self.rng.randint(self.low, self.high)


# =============================================================================
# STAGE
# =============================================================================

class RecordIngestionStage:
    """
    Stage 1: Convert raw rows into typed records and drop invalid ones.
    """

    def __init__(self, contact_score_policy: Optional[ContactScorePolicy] = None):
        self.contact_scores = contact_score_policy or ContactScorePolicy.from_settings()

    def process_companies(self, rows: Iterable[Row]) -> CompanyIngestResult:
        """
        Build Company records.

        A row is kept iff it has a name, a website or an industry.
        """
        records = []
        total = 0
        for index, raw in enumerate(rows):
            total += 1
            company = self._build_company(canonical_row(raw), index)
            if company.name or company.website or company.industry:
                records.append(company)

        result = CompanyIngestResult(
            total_rows=total,
            kept_rows=len(records),
            dropped_rows=total - len(records),
            records=records,
        )
        logger.info(
            "Ingested %d/%d company rows (%d dropped)",
            result.kept_rows, result.total_rows, result.dropped_rows,
        )
        return result

    def process_people(self, rows: Iterable[Row]) -> PersonIngestResult:
        """
        Build Person records.

        A row is kept iff it has a full name and either a company or a title.
        """
        records = []
        total = 0
        for index, raw in enumerate(rows):
            total += 1
            person = self._build_person(canonical_row(raw), index)
            if person is not None:
                records.append(person)

        result = PersonIngestResult(
            total_rows=total,
            kept_rows=len(records),
            dropped_rows=total - len(records),
            records=records,
        )
        logger.info(
            "Ingested %d/%d people rows (%d dropped)",
            result.kept_rows, result.total_rows, result.dropped_rows,
        )
        return result

    def _build_company(self, row: Dict[str, Any], index: int) -> Company:
        def text(field: str) -> Optional[str]:
            return _as_text(resolve(row, COMPANY_RULES[field]))

        employee_count = parse_int(resolve(row, COMPANY_RULES["employee_count"]))
        if employee_count is not None and employee_count < 0:
            employee_count = None

        return Company(
            id=text("id") or f"company-{index}",
            name=text("name") or "",
            website=text("website"),
            industry=text("industry"),
            employee_count=employee_count,
            revenue=text("revenue"),
            founded=parse_int(resolve(row, COMPANY_RULES["founded"])),
            city=text("city"),
            state=text("state"),
            country=text("country"),
            zip_code=text("zip_code"),
            phone=text("phone"),
            description=text("description"),
            linkedin_url=text("linkedin_url"),
            crunchbase_url=text("crunchbase_url"),
            technologies=_as_list(resolve(row, COMPANY_RULES["technologies"])),
            funding=text("funding"),
            last_updated=text("last_updated"),
        )

    def _build_person(self, row: Dict[str, Any], index: int) -> Optional[Person]:
        def text(field: str) -> Optional[str]:
            return _as_text(resolve(row, PERSON_RULES[field]))

        full_name = text("full_name") or ""
        company = text("company") or ""
        title = text("title") or ""
        if not full_name or not (company or title):
            return None

        # Only kept rows draw from the random source
        contact_score = parse_int(resolve(row, PERSON_RULES["contact_score"]))
        if contact_score is None:
            contact_score = self.contact_scores.assign()
        else:
            contact_score = self.contact_scores.clamp(contact_score)

        return Person(
            id=text("id") or f"person-{index}",
            first_name=text("first_name") or "",
            last_name=text("last_name") or "",
            full_name=full_name,
            title=title,
            company=company,
            email=text("email"),
            phone=text("phone"),
            linkedin_url=text("linkedin_url"),
            department=text("department"),
            seniority=_as_seniority(resolve(row, PERSON_RULES["seniority"])),
            location=text("location"),
            last_updated=text("last_updated"),
            decision_maker=_as_bool(resolve(row, PERSON_RULES["decision_maker"])),
            contact_score=contact_score,
        )


# =============================================================================
# Convenience Functions
# =============================================================================

def ingest_companies(rows: Iterable[Row]) -> List[Company]:
    """Ingest company rows and return only the kept records"""
    return RecordIngestionStage().process_companies(rows).records


def ingest_people(
    rows: Iterable[Row], contact_score_policy: Optional[ContactScorePolicy] = None
) -> List[Person]:
    """Ingest people rows and return only the kept records"""
    return RecordIngestionStage(contact_score_policy).process_people(rows).records
