"""File-based result sinks"""

import csv
import json
from pathlib import Path

from ..core.interfaces import IResultSink
from ..core.models import ScanReport
from ..utils.logger import setup_logger
from .base import mask_subscription_id, report_rows, service_dict

CSV_COLUMNS = [
    'subscription_id', 'subscription_name', 'resource_group', 'location', 'type', 'service_name',
    'resource_id', 'recommendation_id', 'category', 'impact', 'recommendation', 'recommendation_type',
    'not_compliant', 'result', 'learn_more_url',
]


class JsonSink(IResultSink):
    """Write the whole report as a JSON document"""

    def __init__(self, path: str, mask: bool = True):
        self.logger = setup_logger(self.__class__.__name__)
        self.path = Path(path)
        self.mask = mask

    def write(self, report: ScanReport) -> None:
        document = {
            'started_at': report.started_at.isoformat(),
            'finished_at': report.finished_at.isoformat() if report.finished_at else None,
            'cancelled': report.cancelled,
            'summary': {
                'resources': report.resources,
                'findings': report.findings,
                'errors': len(report.errors),
            },
            'results': [service_dict(result, self.mask) for result in report.results],
            'errors': [
                {
                    'subscription_id': mask_subscription_id(error.subscription_id, self.mask),
                    'scanner': error.scanner,
                    'message': error.message,
                }
                for error in report.errors + report.skipped
            ],
        }

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w') as f:
            json.dump(document, f, indent=2)
        self.logger.info(f"Results exported to: {self.path}")


class CsvSink(IResultSink):
    """Write one CSV row per recommendation result"""

    def __init__(self, path: str, mask: bool = True):
        self.logger = setup_logger(self.__class__.__name__)
        self.path = Path(path)
        self.mask = mask

    def write(self, report: ScanReport) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w', newline='') as f:
            writer = csv.DictWriter(f, fieldnames=CSV_COLUMNS, extrasaction='ignore')
            writer.writeheader()
            for row in report_rows(report, self.mask):
                writer.writerow(row)
        self.logger.info(f"Results exported to: {self.path}")
