"""
Write harvested leads to disk: a CSV for spreadsheets and a JSON run summary.
"""

import json
from datetime import datetime
from pathlib import Path

import pandas as pd

from models import NOT_AVAILABLE, FilterSpec, Lead

LEAD_COLUMNS = ["name", "title", "company", "location", "profileUrl", "email", "phone"]


def sanitize_csv_cell(value) -> str:
    """Sanitize a cell value to prevent CSV injection attacks.

    Excel and other spreadsheet apps can execute formulas if a cell starts
    with certain characters. This function prefixes dangerous values with
    a single quote to prevent execution. Profile headlines are free text
    written by strangers, so this matters here.

    Args:
        value: The cell value to sanitize

    Returns:
        Sanitized string safe for CSV export
    """
    if not isinstance(value, str):
        return value
    dangerous_chars = ('=', '+', '-', '@', '\t', '\r')
    if value.startswith(dangerous_chars):
        return "'" + value
    return value


def sanitize_dataframe_for_csv(df: pd.DataFrame) -> pd.DataFrame:
    """Sanitize all string columns in a DataFrame for safe CSV export."""
    df = df.copy()
    for col in df.columns:
        if df[col].dtype == 'object':
            df[col] = df[col].apply(sanitize_csv_cell)
    return df


def leads_to_dataframe(leads: list[Lead]) -> pd.DataFrame:
    if not leads:
        return pd.DataFrame(columns=LEAD_COLUMNS)
    return pd.DataFrame([lead.to_dict() for lead in leads], columns=LEAD_COLUMNS)


def export_leads(leads: list[Lead], output_dir: Path, run_id: str) -> Path:
    """Save leads to leads_<run_id>.csv in output_dir.

    Returns:
        Path to the created file
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    filepath = output_dir / f"leads_{run_id}.csv"
    sanitize_dataframe_for_csv(leads_to_dataframe(leads)).to_csv(filepath, index=False)
    return filepath


def summarize_leads(leads: list[Lead]) -> dict:
    """Contact coverage counts for a batch of leads."""
    df = leads_to_dataframe(leads)
    total = len(df)
    if total == 0:
        return {"total": 0, "with_email": 0, "with_phone": 0, "with_any_contact": 0, "unique_companies": 0}

    with_email = int((df["email"] != NOT_AVAILABLE).sum())
    with_phone = int((df["phone"] != NOT_AVAILABLE).sum())
    companies = df.loc[df["company"] != NOT_AVAILABLE, "company"]
    return {
        "total": total,
        "with_email": with_email,
        "with_phone": with_phone,
        "with_any_contact": sum(1 for lead in leads if lead.has_contact()),
        "unique_companies": int(companies.nunique()),
    }


def export_run_summary(
    leads: list[Lead],
    filter_spec: FilterSpec,
    output_dir: Path,
    run_id: str,
    started_at: datetime,
) -> Path:
    """Export run metadata and coverage stats to JSON.

    Returns:
        Path to the created file
    """
    finished_at = datetime.now()
    export_data = {
        "metadata": {
            "run_id": run_id,
            "started": started_at.isoformat(),
            "finished": finished_at.isoformat(),
            "duration_seconds": round((finished_at - started_at).total_seconds(), 1),
        },
        "filter": {
            "job_title": filter_spec.job_title,
            "location": filter_spec.location,
            "max_leads": filter_spec.max_leads,
        },
        "summary": summarize_leads(leads),
    }

    output_dir.mkdir(parents=True, exist_ok=True)
    filepath = output_dir / f"run_summary_{run_id}.json"
    with open(filepath, 'w', encoding='utf-8') as f:
        json.dump(export_data, f, indent=2)
    return filepath
