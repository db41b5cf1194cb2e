"""Result sinks for scan reports"""

from .base import mask_resource_id, mask_subscription_id, report_rows
from .file import CsvSink, JsonSink
from .table import TableSink


def create_sink(output_format: str, output_file=None, mask: bool = True, console=None):
    """Build the sink for an output format name"""

    output_format = output_format.lower()
    if output_format == "json":
        return JsonSink(output_file or "azqr_report.json", mask=mask)
    if output_format == "csv":
        return CsvSink(output_file or "azqr_report.csv", mask=mask)
    return TableSink(console=console, mask=mask)


__all__ = [
    "CsvSink",
    "JsonSink",
    "TableSink",
    "create_sink",
    "mask_resource_id",
    "mask_subscription_id",
    "report_rows",
]
