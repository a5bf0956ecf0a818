"""
Tests for CSV/JSON export and CLI argument handling.
Run with: python -m pytest tests/test_export.py -v
"""

import json
import sys
import tempfile
from datetime import datetime
from pathlib import Path

import pandas as pd

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from export import (
    LEAD_COLUMNS,
    export_leads,
    export_run_summary,
    leads_to_dataframe,
    sanitize_csv_cell,
    summarize_leads,
)
from lead_harvester import main, parse_args
from models import NOT_AVAILABLE, FilterSpec, Lead


def make_lead(name, company="Sunrun", email=NOT_AVAILABLE, phone=NOT_AVAILABLE):
    return Lead(name, "Designer", company, "Austin, Texas", f"https://www.linkedin.com/in/{name.lower()}",
                email, phone)


class TestSanitizeCsvCell:
    def test_formula_prefixed(self):
        assert sanitize_csv_cell("=HYPERLINK(\"http://evil\")") == "'=HYPERLINK(\"http://evil\")"
        assert sanitize_csv_cell("+1 512 555 0134") == "'+1 512 555 0134"
        assert sanitize_csv_cell("@handle") == "'@handle"

    def test_plain_values_untouched(self):
        assert sanitize_csv_cell("Solar Designer") == "Solar Designer"
        assert sanitize_csv_cell(42) == 42


class TestExportLeads:
    def test_csv_columns_and_rows(self):
        leads = [make_lead("Ana", email="ana@sunrun.com"), make_lead("Bo", company=NOT_AVAILABLE)]
        with tempfile.TemporaryDirectory() as tmpdir:
            path = export_leads(leads, Path(tmpdir) / "nested", "20250101_120000")
            assert path.name == "leads_20250101_120000.csv"
            df = pd.read_csv(path)
        assert list(df.columns) == LEAD_COLUMNS
        assert df["email"].tolist() == ["ana@sunrun.com", NOT_AVAILABLE]

    def test_empty_export_has_header(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = export_leads([], Path(tmpdir), "run")
            header = path.read_text(encoding="utf-8").strip()
        assert header == ",".join(LEAD_COLUMNS)

    def test_dataframe_for_no_leads(self):
        assert list(leads_to_dataframe([]).columns) == LEAD_COLUMNS


class TestRunSummary:
    def test_summary_counts(self):
        leads = [
            make_lead("Ana", email="ana@sunrun.com"),
            make_lead("Bo", phone="(512) 555-0134"),
            make_lead("Cy", company="Tesla"),
            make_lead("Di", company=NOT_AVAILABLE),
        ]
        assert summarize_leads(leads) == {
            "total": 4,
            "with_email": 1,
            "with_phone": 1,
            "with_any_contact": 2,
            "unique_companies": 2,
        }

    def test_summary_empty(self):
        assert summarize_leads([])["total"] == 0

    def test_summary_file(self):
        spec = FilterSpec(job_title="Solar Designer", location="Texas", max_leads=5)
        with tempfile.TemporaryDirectory() as tmpdir:
            path = export_run_summary([make_lead("Ana")], spec, Path(tmpdir), "run", datetime.now())
            data = json.loads(path.read_text(encoding="utf-8"))
        assert data["filter"] == {"job_title": "Solar Designer", "location": "Texas", "max_leads": 5}
        assert data["summary"]["total"] == 1
        assert data["metadata"]["run_id"] == "run"


class TestCli:
    def test_defaults(self):
        args = parse_args(["--title", "Solar Designer"])
        assert args.location == "United States"
        assert args.max_leads == 25
        assert args.output_dir is None

    def test_invalid_max_leads_exits_before_browser(self):
        assert main(["--title", "Solar Designer", "--max-leads", "0"]) == 2
