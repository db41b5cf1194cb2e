#!/usr/bin/env python3
"""Command-line interface for Azure Quick Review"""

import asyncio
import signal
import sys
import threading
from typing import List, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from .. import __version__
from ..core.errors import ConfigurationError
from ..core.filters import Filters, load_filters
from ..core.models import ScanConfiguration, ScanReport
from ..core.orchestrator import ScanOrchestrator, select_subscriptions
from ..core.registry import build_registry
from ..sinks import create_sink
from ..utils.config import ConfigurationLoader
from ..utils.logger import set_verbosity, setup_logger

app = typer.Typer(
    name="azqr",
    help="🔍 Azure Quick Review - compliance scanner for Azure resources",
    add_completion=False
)

console = Console()


def resource_group_ids(resource_groups: List[str], subscription_ids: List[str]) -> List[str]:
    """Expand bare resource group names against the selected subscriptions"""

    ids = []
    for rg in resource_groups:
        if rg.lower().startswith("/subscriptions/"):
            ids.append(rg)
            continue
        if not subscription_ids:
            raise ConfigurationError(f"Resource group '{rg}' requires --subscription or a full resource group id")
        ids.extend(f"/subscriptions/{sub}/resourceGroups/{rg}" for sub in subscription_ids)
    return ids


def build_filters(config: ScanConfiguration) -> Filters:
    filters = load_filters(config.filters_file)
    for sub_id in config.subscription_ids:
        filters.add_subscription(sub_id)
    for rg_id in resource_group_ids(config.resource_groups, config.subscription_ids):
        filters.add_resource_group(rg_id)
    return filters


def install_cancel_handler(loop: asyncio.AbstractEventLoop, cancel: threading.Event) -> bool:
    """Route SIGINT to the cancel event so the scan unwinds and sinks still write"""

    try:
        loop.add_signal_handler(signal.SIGINT, cancel.set)
    except (NotImplementedError, RuntimeError):
        # not available on Windows event loops, KeyboardInterrupt handling applies
        setup_logger("cli").debug("SIGINT handler not supported by this event loop")
        return False
    return True


async def run_scan(config: ScanConfiguration, filters: Filters, cancel: threading.Event) -> ScanReport:
    loop = asyncio.get_running_loop()
    installed = install_cancel_handler(loop, cancel)
    try:
        return await _run_scan(config, filters, cancel)
    finally:
        if installed:
            loop.remove_signal_handler(signal.SIGINT)


async def _run_scan(config: ScanConfiguration, filters: Filters, cancel: threading.Event) -> ScanReport:
    from ..auth.manager import AuthenticationManager

    auth_manager = AuthenticationManager()
    if filters.include_subscriptions:
        credential = await asyncio.get_running_loop().run_in_executor(None, auth_manager.get_credential)
        available = {}
    else:
        available = await auth_manager.get_accessible_subscriptions()
        credential = auth_manager.credential

    subscriptions = select_subscriptions(filters, available)
    if not subscriptions:
        raise ConfigurationError("No subscriptions to scan")

    orchestrator = ScanOrchestrator(
        build_registry(),
        config=config,
        credential=credential,
        sinks=[create_sink(config.output_format, config.output_file, config.mask_subscriptions, console)],
    )
    return await orchestrator.scan(subscriptions, filters, cancel)


@app.command()
def scan(
    subscription_ids: Optional[List[str]] = typer.Option(
        None, "--subscription", "-s",
        help="Subscription IDs to scan (if not specified, scans all accessible)"
    ),
    resource_groups: Optional[List[str]] = typer.Option(
        None, "--resource-group", "-g",
        help="Resource groups to scan (name with --subscription, or full resource group id)"
    ),
    services: Optional[List[str]] = typer.Option(
        None, "--services",
        help="Scanner keys to run (see 'azqr scanners'); all when omitted"
    ),
    filters_file: Optional[str] = typer.Option(
        None, "--filters", "-e",
        help="YAML filters file with include/exclude rules"
    ),
    config_file: Optional[str] = typer.Option(
        None, "--config", "-c",
        help="YAML configuration file"
    ),
    parallel_workers: Optional[int] = typer.Option(
        None, "--workers",
        help="Number of subscriptions scanned in parallel"
    ),
    plugin_workers: Optional[int] = typer.Option(
        None, "--plugin-workers",
        help="Number of scanners run in parallel per subscription"
    ),
    output_format: Optional[str] = typer.Option(
        None, "--format", "-f",
        help="Output format: table, json, csv"
    ),
    output_file: Optional[str] = typer.Option(
        None, "--output", "-o",
        help="Output file path"
    ),
    mask: Optional[bool] = typer.Option(
        None, "--mask/--no-mask",
        help="Mask subscription ids in the output"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v",
        help="Enable verbose logging"
    )
):
    """🔍 Scan Azure subscriptions for best-practice compliance"""

    set_verbosity(verbose)
    logger = setup_logger("cli")
    cancel = threading.Event()

    try:
        config = ConfigurationLoader().load_configuration(
            config_file,
            subscription_ids=subscription_ids or None,
            resource_groups=resource_groups or None,
            services=services or None,
            filters_file=filters_file,
            parallel_workers=parallel_workers,
            plugin_workers=plugin_workers,
            output_format=output_format,
            output_file=output_file,
            mask_subscriptions=mask,
        )
        filters = build_filters(config)

        console.print("\n🚀 Starting Azure Quick Review scan...\n")

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True
        ) as progress:
            progress.add_task("Scanning Azure resources...", total=None)
            report = asyncio.run(run_scan(config, filters, cancel))

    except KeyboardInterrupt:
        cancel.set()
        console.print("\n❌ Scan cancelled by user.", style="red")
        sys.exit(130)
    except ConfigurationError as e:
        console.print(f"\n❌ {e}", style="red")
        sys.exit(1)
    except Exception as e:
        logger.debug("Scan failed", exc_info=True)
        console.print(f"\n❌ Scan failed: {e}", style="red")
        sys.exit(1)

    if report.cancelled:
        console.print("\n❌ Scan cancelled, results are partial.", style="red")
        sys.exit(130)
    if report.errors:
        console.print("\n⚠️  Scan completed with errors. Check logs for details.", style="yellow")
    else:
        console.print(
            f"\n✅ Scan completed! {report.findings} findings across {report.resources} resources.",
            style="green"
        )


@app.command()
def scanners():
    """📦 List available scanners"""

    table = Table(title="Available Scanners")
    table.add_column("Key", style="cyan")
    table.add_column("Resource Types", style="blue")
    table.add_column("Plugins", style="green")

    for info in build_registry().scanner_info():
        table.add_row(info.key, "\n".join(info.resource_types), str(info.scanner_count))

    console.print(table)


@app.command()
def rules(
    service: Optional[str] = typer.Option(
        None, "--service",
        help="Only show recommendations of this scanner key"
    )
):
    """📋 List recommendations"""

    registry = build_registry()
    try:
        selected = registry.resolve([service] if service else None)
    except ConfigurationError as e:
        console.print(f"❌ {e}", style="red")
        sys.exit(1)

    table = Table(title="Recommendations")
    table.add_column("Id", style="cyan")
    table.add_column("Resource Type", style="blue")
    table.add_column("Category", style="magenta")
    table.add_column("Impact", style="yellow")
    table.add_column("Recommendation")

    for plugins in selected.values():
        for plugin in plugins:
            for rec_id, rec in sorted(plugin.all_recommendations().items()):
                table.add_row(rec_id, rec.resource_type, rec.category.value, rec.impact.value, rec.recommendation)

    console.print(table)


@app.command()
def list_subscriptions():
    """📋 List accessible Azure subscriptions"""

    try:
        from ..auth.manager import AuthenticationManager

        console.print("🔍 Discovering accessible Azure subscriptions...\n")

        async def get_subscriptions():
            auth_manager = AuthenticationManager()
            return await auth_manager.get_accessible_subscriptions()

        subscriptions = asyncio.run(get_subscriptions())

        if subscriptions:
            table = Table(title="Accessible Azure Subscriptions")
            table.add_column("Subscription ID", style="cyan")
            table.add_column("Name", style="green")

            for sub_id, name in subscriptions.items():
                table.add_row(sub_id, name)

            console.print(table)
            console.print(f"\n📊 Total: {len(subscriptions)} accessible subscriptions")
        else:
            console.print("❌ No accessible subscriptions found.", style="red")

    except Exception as e:
        console.print(f"❌ Failed to list subscriptions: {e}", style="red")
        sys.exit(1)


@app.command()
def version():
    """📝 Show version information"""

    version_info = {
        "Azure Quick Review": __version__,
        "Python": sys.version.split()[0],
        "Platform": sys.platform
    }

    panel_content = "\n".join([f"{k}: {v}" for k, v in version_info.items()])
    console.print(Panel(panel_content, title="Version Information", expand=False))


def main():
    """Main entry point"""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n❌ Interrupted by user.", style="red")
        sys.exit(130)
    except ConfigurationError as e:
        console.print(f"\n❌ {e}", style="red")
        sys.exit(1)


if __name__ == "__main__":
    main()
