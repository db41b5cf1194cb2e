"""CLI smoke tests"""

import asyncio
import os
import signal
import sys
import threading
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from typer.testing import CliRunner

from azure_quick_review import __version__
from azure_quick_review.cli import main as cli
from azure_quick_review.core.models import ScanReport

from .fakes import AZQR_VARIABLES

runner = CliRunner()


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in AZQR_VARIABLES:
        monkeypatch.delenv(name, raising=False)


def test_version():
    result = runner.invoke(cli.app, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_scanners_lists_registry_keys():
    result = runner.invoke(cli.app, ["scanners"])
    assert result.exit_code == 0
    for key in ("aks", "kv", "sql", "st"):
        assert key in result.output


def test_rules_for_one_service():
    result = runner.invoke(cli.app, ["rules", "--service", "kv"])
    assert result.exit_code == 0
    assert "kv-001" in result.output
    assert "st-001" not in result.output


def test_rules_for_unknown_service_fails():
    result = runner.invoke(cli.app, ["rules", "--service", "nope"])
    assert result.exit_code == 1


def test_scan_rejects_bad_configuration():
    result = runner.invoke(cli.app, ["scan", "--format", "html"])
    assert result.exit_code == 1
    assert "Unsupported output format" in result.output


def test_scan_requires_subscription_for_bare_resource_group():
    result = runner.invoke(cli.app, ["scan", "-g", "rg-app"])
    assert result.exit_code == 1


def test_scan_passes_filters_to_the_scan(monkeypatch):
    captured = {}

    async def fake_run_scan(config, filters, cancel):
        captured["config"] = config
        captured["filters"] = filters
        return ScanReport(started_at=datetime.now(timezone.utc), finished_at=datetime.now(timezone.utc))

    monkeypatch.setattr(cli, "run_scan", fake_run_scan)

    result = runner.invoke(cli.app, [
        "scan", "-s", "00000000-0000-0000-0000-000000000001", "-g", "rg-app",
        "--services", "kv", "--workers", "2", "--no-mask",
    ])

    assert result.exit_code == 0, result.output
    assert captured["config"].services == ["kv"]
    assert captured["config"].parallel_workers == 2
    assert captured["config"].mask_subscriptions is False
    assert captured["filters"].include_subscriptions == {"00000000-0000-0000-0000-000000000001"}
    assert captured["filters"].include_resource_groups == {
        "/subscriptions/00000000-0000-0000-0000-000000000001/resourcegroups/rg-app"
    }


def test_cancelled_scan_exits_130(monkeypatch):
    async def cancelled_scan(config, filters, cancel):
        return ScanReport(started_at=datetime.now(timezone.utc), cancelled=True)

    monkeypatch.setattr(cli, "run_scan", cancelled_scan)

    result = runner.invoke(cli.app, ["scan", "-s", "00000000-0000-0000-0000-000000000001"])
    assert result.exit_code == 130


def test_cancel_handler_routes_sigint_to_event():
    loop = MagicMock()
    cancel = threading.Event()

    assert cli.install_cancel_handler(loop, cancel) is True

    sig, callback = loop.add_signal_handler.call_args.args
    assert sig == signal.SIGINT
    callback()
    assert cancel.is_set()


def test_cancel_handler_falls_back_without_signal_support():
    loop = MagicMock()
    loop.add_signal_handler.side_effect = NotImplementedError

    assert cli.install_cancel_handler(loop, threading.Event()) is False


@pytest.mark.skipif(sys.platform == "win32", reason="event loop signal handlers are POSIX only")
@pytest.mark.asyncio
async def test_sigint_during_scan_returns_cancelled_report(monkeypatch):
    async def interrupted_scan(config, filters, cancel):
        os.kill(os.getpid(), signal.SIGINT)
        for _ in range(100):
            if cancel.is_set():
                break
            await asyncio.sleep(0.01)
        return ScanReport(started_at=datetime.now(timezone.utc), cancelled=cancel.is_set())

    monkeypatch.setattr(cli, "_run_scan", interrupted_scan)
    cancel = threading.Event()

    report = await cli.run_scan(None, None, cancel)

    assert report.cancelled is True
    assert signal.getsignal(signal.SIGINT) is signal.default_int_handler
