"""Tests for the report sinks"""

import csv
import json
from datetime import datetime, timedelta, timezone

import pytest
from rich.console import Console

from azure_quick_review.core.engine import RecommendationEngine
from azure_quick_review.core.filters import Filters
from azure_quick_review.core.models import ScanContext, ScanError, ScanReport, ServiceResult
from azure_quick_review.sinks import (
    CsvSink,
    JsonSink,
    TableSink,
    create_sink,
    mask_resource_id,
    mask_subscription_id,
)

from .fakes import SUB_ID, FakeVaultScanner, vault


@pytest.fixture
def report():
    resource = vault("secrets")
    recommendations = RecommendationEngine().evaluate(
        FakeVaultScanner().get_recommendations(), resource, ScanContext(filters=Filters())
    )
    started = datetime(2024, 1, 1, tzinfo=timezone.utc)
    return ScanReport(
        started_at=started,
        finished_at=started + timedelta(seconds=5),
        results=[ServiceResult(
            subscription_id=SUB_ID, subscription_name="Primary", resource_group="rg",
            location="westeurope", type=resource.type, service_name=resource.name,
            recommendations=recommendations, id=resource.id,
        )],
        errors=[ScanError(subscription_id=SUB_ID, message="boom", scanner="st")],
    )


def test_mask_subscription_id_keeps_last_seven_characters():
    assert mask_subscription_id(SUB_ID) == "xxxxxxxx-xxxx-xxxx-xxxx-xxxxx0000001"
    assert mask_subscription_id(SUB_ID, mask=False) == SUB_ID
    assert SUB_ID not in mask_resource_id(f"/subscriptions/{SUB_ID}/resourcegroups/rg", SUB_ID)


def test_json_sink_writes_masked_report(tmp_path, report):
    path = tmp_path / "out" / "report.json"

    JsonSink(str(path)).write(report)

    document = json.loads(path.read_text())
    assert document["summary"] == {"resources": 1, "findings": 2, "errors": 1}
    result = document["results"][0]
    assert result["subscription_id"].startswith("xxxxxxxx-")
    assert SUB_ID not in result["resource_id"]
    assert set(result["recommendations"]) == {"kv-001", "kv-002", "kv-003"}
    assert document["errors"][0]["scanner"] == "st"


def test_csv_sink_writes_one_row_per_result(tmp_path, report):
    path = tmp_path / "report.csv"

    CsvSink(str(path), mask=False).write(report)

    with open(path, newline="") as f:
        rows = list(csv.DictReader(f))
    assert [row["recommendation_id"] for row in rows] == ["kv-001", "kv-002", "kv-003"]
    assert rows[0]["subscription_id"] == SUB_ID
    assert rows[2]["result"] == "99.99%"
    assert rows[2]["recommendation_type"] == "SLA"


def test_table_sink_lists_findings(report):
    console = Console(record=True, width=200)

    TableSink(console=console).write(report)

    output = console.export_text()
    assert "kv-001" in output
    assert "kv-002" in output
    assert "kv-003" not in output
    assert "Errors: 1" in output


def test_create_sink_by_format(tmp_path):
    assert isinstance(create_sink("json", str(tmp_path / "a.json")), JsonSink)
    assert isinstance(create_sink("CSV"), CsvSink)
    assert isinstance(create_sink("table"), TableSink)
