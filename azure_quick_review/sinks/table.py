"""Console table sink"""

from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..core.interfaces import IResultSink
from ..core.models import ScanReport
from .base import mask_subscription_id

IMPACT_COLORS = {
    'High': 'red',
    'Medium': 'yellow',
    'Low': 'green',
}


class TableSink(IResultSink):
    """Render non-compliant findings and a summary panel"""

    def __init__(self, console: Optional[Console] = None, mask: bool = True, limit: int = 50):
        self.console = console or Console()
        self.mask = mask
        self.limit = limit

    def write(self, report: ScanReport) -> None:
        summary_content = (
            f"⏱️  Duration: {report.duration_seconds:.2f} seconds\n"
            f"📊 Resources Scanned: {report.resources}\n"
            f"🎯 Findings: {report.findings}"
        )
        if report.errors:
            summary_content += f"\n⚠️  Errors: {len(report.errors)}"
        if report.skipped:
            summary_content += f"\n⏭️  Skipped: {len(report.skipped)}"
        if report.cancelled:
            summary_content += "\n❌ Scan was cancelled, results are partial"

        self.console.print(Panel(summary_content, title="📋 Scan Summary", expand=False))

        findings = [
            (result, rec)
            for result in report.results
            for rec in sorted(result.findings, key=lambda r: r.recommendation_id)
        ]
        if not findings:
            self.console.print("No findings.", style="green")
        else:
            table = Table(title="🎯 Findings")
            table.add_column("Subscription", style="magenta")
            table.add_column("Resource Group", style="blue")
            table.add_column("Service", style="cyan")
            table.add_column("Id")
            table.add_column("Impact")
            table.add_column("Recommendation")
            table.add_column("Result")

            for result, rec in findings[:self.limit]:
                color = IMPACT_COLORS.get(rec.impact.value, 'white')
                table.add_row(
                    mask_subscription_id(result.subscription_id, self.mask),
                    result.resource_group,
                    result.service_name,
                    rec.recommendation_id,
                    f"[{color}]{rec.impact.value}[/{color}]",
                    rec.recommendation,
                    rec.result,
                )

            self.console.print(table)
            if len(findings) > self.limit:
                self.console.print(f"\n... and {len(findings) - self.limit} more findings")

        if report.errors:
            self.console.print("\n⚠️  Errors encountered during scan:", style="yellow")
            for error in report.errors[:5]:
                scope = f"{error.scanner} " if error.scanner else ""
                sub = mask_subscription_id(error.subscription_id, self.mask)
                self.console.print(f"  • {scope}{sub}: {error.message}", style="red")
            if len(report.errors) > 5:
                self.console.print(f"  ... and {len(report.errors) - 5} more errors")
