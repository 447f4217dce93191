"""
Tabular file reading and CSV export.
"""

import io
import logging
from typing import Any, Dict, List, Sequence, Union

import pandas as pd

from .models.schemas import MergedRecord

logger = logging.getLogger(__name__)

CSV_EXTENSIONS = (".csv",)
EXCEL_EXTENSIONS = (".xlsx", ".xls")


EXPORT_COLUMNS = [
    "company_id",
    "company_name",
    "website",
    "industry",
    "employee_count",
    "city",
    "state",
    "country",
    "contact_count",
    "decision_maker_count",
    "average_contact_score",
    "sales_fit_score",
    "priority",
    "contacts",
]


class UnsupportedFileError(ValueError):
    """Raised for uploads that are neither CSV nor Excel"""


class UnreadableFileError(ValueError):
    """Raised when a workbook cannot be parsed"""


def read_table(source: Union[bytes, str], filename: str) -> List[Dict[str, Any]]:
    """
    Parse an uploaded spreadsheet into untyped rows.

    Every cell is read as text; blank cells become "". Only the first sheet
    of an Excel workbook is read.
    """
    name = filename.lower()
    if isinstance(source, str):
        source = source.encode("utf-8")

    if name.endswith(CSV_EXTENSIONS):
        df = pd.read_csv(
            io.BytesIO(source), dtype=str, keep_default_na=False, skip_blank_lines=True
        )
    elif name.endswith(EXCEL_EXTENSIONS):
        # openpyxl reads .xlsx, xlrd reads legacy .xls
        try:
            df = pd.read_excel(io.BytesIO(source), sheet_name=0, dtype=str)
        except ImportError:
            raise
        except Exception as e:
            raise UnreadableFileError(f"Could not read workbook {filename}: {e}") from e
        df = df.fillna("")
    else:
        raise UnsupportedFileError(
            "Unsupported file format. Please use CSV, XLSX, or XLS files."
        )

    df.columns = df.columns.astype(str).str.strip()
    logger.info("Parsed %s: %d rows", filename, len(df))
    return df.to_dict(orient="records")


def records_to_frame(records: Sequence[MergedRecord]) -> pd.DataFrame:
    """One row per merged company"""
    rows = []
    for record in records:
        company = record.company
        rows.append({
            "company_id": company.id,
            "company_name": company.name,
            "website": company.website or "",
            "industry": company.industry or "",
            "employee_count": company.employee_count if company.employee_count is not None else "",
            "city": company.city or "",
            "state": company.state or "",
            "country": company.country or "",
            "contact_count": record.contact_count,
            "decision_maker_count": record.decision_maker_count,
            "average_contact_score": round(record.average_contact_score, 1),
            "sales_fit_score": record.sales_fit_score,
            "priority": record.priority.value,
            "contacts": "; ".join(contact.full_name for contact in record.contacts),
        })
    return pd.DataFrame(rows, columns=EXPORT_COLUMNS)


def export_records_csv(records: Sequence[MergedRecord]) -> str:
    """Render merged records as CSV text"""
    return records_to_frame(records).to_csv(index=False)
