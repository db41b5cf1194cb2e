"""Main orchestrator for Azure Quick Review scans"""

import asyncio
import copy
import threading
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence

from azure.core.exceptions import HttpResponseError

from .errors import ScanCancelledError, should_skip_error
from .filters import Filters
from .interfaces import IIndexer, IResultSink, IScannerPlugin
from .models import (
    ScanConfiguration,
    ScanContext,
    ScanError,
    ScannerConfig,
    ScanReport,
    ServiceResult,
)
from .registry import ScannerRegistry
from ..utils.logger import setup_logger


def select_subscriptions(filters: Filters, available: Mapping[str, str]) -> Dict[str, str]:
    """Included subscriptions when any are listed, else every available one; excluded ones removed"""

    if filters.include_subscriptions:
        names = {sub_id.lower(): name for sub_id, name in available.items()}
        candidates = {sub_id: names.get(sub_id, sub_id) for sub_id in sorted(filters.include_subscriptions)}
    else:
        candidates = dict(available)

    return {
        sub_id: name for sub_id, name in candidates.items()
        if not filters.is_subscription_excluded(sub_id)
    }


def apply_filters(result: ServiceResult, filters: Filters) -> Optional[ServiceResult]:
    """Drop excluded services and excluded recommendation entries"""

    if filters.is_service_excluded(result.resource_id):
        return None
    if filters.exclude_recommendations:
        result.recommendations = {
            key: value for key, value in result.recommendations.items()
            if not filters.is_recommendation_excluded(key)
        }
    return result


class ScanOrchestrator:
    """Runs scanner plugins across subscriptions

    Per subscription the indexes are built first and frozen into a ScanContext;
    plugins then run concurrently, each on its own copy so that init state is
    never shared between subscriptions.
    """

    def __init__(
        self,
        registry: ScannerRegistry,
        config: Optional[ScanConfiguration] = None,
        credential: Any = None,
        client_options: Optional[Mapping[str, Any]] = None,
        indexers: Optional[Sequence[IIndexer]] = None,
        sinks: Optional[Sequence[IResultSink]] = None,
    ):
        self.logger = setup_logger(self.__class__.__name__)
        self.registry = registry
        self.config = config or ScanConfiguration()
        self.credential = credential
        self.client_options = dict(client_options or {})
        if indexers is None:
            from ..indexers import default_indexers
            indexers = default_indexers()
        self.indexers = list(indexers)
        self.sinks = list(sinks or [])

    def resolve_plugins(self, filters: Filters) -> Dict[str, List[IScannerPlugin]]:
        plugins = self.registry.resolve(self.config.services)
        return {key: value for key, value in plugins.items() if not filters.is_scanner_excluded(key)}

    async def scan(
        self,
        subscriptions: Mapping[str, str],
        filters: Optional[Filters] = None,
        cancel: Optional[threading.Event] = None,
    ) -> ScanReport:
        """Scan the given subscriptions (id -> display name) and write the report to the sinks"""

        filters = filters or Filters()
        cancel = cancel or threading.Event()
        report = ScanReport(started_at=datetime.now(timezone.utc))

        plugins = self.resolve_plugins(filters)
        targets = select_subscriptions(filters, subscriptions)
        self.logger.info(
            f"Starting scan of {len(targets)} subscription(s) with scanners: {', '.join(plugins) or 'none'}"
        )

        semaphore = asyncio.Semaphore(self.config.parallel_workers)

        async def scan_subscription(sub_id: str, name: str):
            async with semaphore:
                if cancel.is_set():
                    return
                try:
                    await self._scan_single_subscription(sub_id, name, plugins, filters, cancel, report)
                except ScanCancelledError:
                    report.cancelled = True
                except Exception as e:
                    self.logger.error(f"Error scanning subscription {sub_id}: {e}")
                    report.errors.append(ScanError(subscription_id=sub_id, message=str(e)))

        await asyncio.gather(*(scan_subscription(sub_id, name) for sub_id, name in targets.items()))

        report.cancelled = report.cancelled or cancel.is_set()
        report.finished_at = datetime.now(timezone.utc)
        self.logger.info(
            f"Scan completed: {report.resources} resources, {report.findings} findings, "
            f"{len(report.errors)} errors"
        )

        for sink in self.sinks:
            sink.write(report)
        return report

    async def build_context(self, config: ScannerConfig, filters: Filters) -> ScanContext:
        """Build every index concurrently and freeze them into a ScanContext"""

        indexes = await asyncio.gather(*(indexer.build(config) for indexer in self.indexers))
        by_name = {indexer.name: index for indexer, index in zip(self.indexers, indexes)}
        return ScanContext(
            filters=filters,
            diagnostics_settings=by_name.get("diagnostics_settings"),
            private_endpoints=by_name.get("private_endpoints"),
            public_ips=by_name.get("public_ips"),
        )

    async def _scan_single_subscription(
        self,
        sub_id: str,
        name: str,
        plugins: Mapping[str, List[IScannerPlugin]],
        filters: Filters,
        cancel: threading.Event,
        report: ScanReport,
    ) -> None:
        self.logger.debug(f"Scanning subscription: {sub_id}")

        config = ScannerConfig(
            subscription_id=sub_id,
            subscription_name=name,
            credential=self.credential,
            client_options=self.client_options,
            cancel=cancel,
        )
        scan_context = await self.build_context(config, filters)

        plugin_semaphore = asyncio.Semaphore(self.config.plugin_workers)
        abandoned = threading.Event()

        async def run_plugin(key: str, plugin: IScannerPlugin) -> List[ServiceResult]:
            async with plugin_semaphore:
                if cancel.is_set():
                    raise ScanCancelledError("scan cancelled")
                if abandoned.is_set():
                    return []

                instance = copy.copy(plugin)
                try:
                    instance.init(config)
                    return await instance.scan(scan_context)
                except ScanCancelledError:
                    raise
                except Exception as e:
                    if isinstance(e, HttpResponseError) and should_skip_error(e):
                        report.skipped.append(ScanError(
                            subscription_id=sub_id, scanner=instance.key, message=str(e.message)
                        ))
                        return []
                    self.logger.error(f"Scanner {instance.key} failed for subscription {sub_id}: {e}")
                    abandoned.set()
                    raise

        tasks = [run_plugin(key, plugin) for key, group in plugins.items() for plugin in group]
        outcomes = await asyncio.gather(*tasks, return_exceptions=True)

        cancelled = False
        failure: Optional[BaseException] = None
        for outcome in outcomes:
            if isinstance(outcome, ScanCancelledError):
                cancelled = True
            elif isinstance(outcome, BaseException):
                failure = failure or outcome
            else:
                for result in outcome:
                    kept = apply_filters(result, filters)
                    if kept is not None:
                        report.results.append(kept)

        if failure is not None:
            raise failure
        if cancelled:
            raise ScanCancelledError("scan cancelled")
