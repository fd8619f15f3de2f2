from __future__ import annotations
import fnmatch
from contextlib import nullcontext
from dataclasses import dataclass, field
from typing import Any, Callable, ContextManager, Iterable, List, Optional, Sequence, Tuple
from ..errors import FetchError
from ..metrics.correlate import NamespaceTotals, PodRecord, PodSpec, ResourceTotals, correlate_pod
from ..metrics.units import MemoryFormatter
from ..util import logging as log

NAMESPACE_HEADER = ['Namespace', 'Pod Count', 'CPU Usage', 'CPU Request', 'CPU Limit', 'Mem Usage', 'Mem Request', 'Mem Limit']
POD_HEADER = ['Pod', 'Container', 'CPU Usage', 'CPU Request', 'CPU Limit', 'Mem Usage', 'Mem Request', 'Mem Limit']
TOTAL_LABEL = 'Total'

Tracker = Callable[[Sequence[Any], str], ContextManager[Iterable[Any]]]


def _no_tracking(items: Sequence[Any], label: str) -> ContextManager[Iterable[Any]]:
    return nullcontext(items)


@dataclass
class AggregationResult:
    rows: List[List[str]]
    errors: List[FetchError] = field(default_factory=list)
    title: Optional[str] = None

    @property
    def header(self) -> List[str]:
        return self.rows[0]

    @property
    def body(self) -> List[List[str]]:
        return self.rows[1:]


def resource_cells(totals: ResourceTotals, fmt: MemoryFormatter) -> List[str]:
    return [
        fmt.cpu(totals.usage.cpu),
        fmt.cpu(totals.requests.cpu),
        fmt.cpu(totals.limits.cpu),
        fmt.memory(totals.usage.memory),
        fmt.memory(totals.requests.memory),
        fmt.memory(totals.limits.memory),
    ]


class AggregationEngine:
    """Fetches, correlates and totals one snapshot of the cluster.

    Fetches run one at a time in listing order. A failed fetch is kept in
    the engine's error list and its work item is skipped.
    """

    def __init__(self, source, formatter: MemoryFormatter | None = None, track: Tracker | None = None,
                 exclude_namespaces: Iterable[str] = ()):
        self.source = source
        self.formatter = formatter or MemoryFormatter()
        self.track = track or _no_tracking
        self.exclude_namespaces = list(exclude_namespaces)
        self.errors: List[FetchError] = []

    def _fetch(self, fn: Callable[..., Any], *args: Any) -> Tuple[Any, Optional[FetchError]]:
        try:
            return fn(*args), None
        except FetchError as e:
            return None, e

    def _collect(self, fn: Callable[..., Any], *args: Any, default: Any = None) -> Any:
        data, error = self._fetch(fn, *args)
        if error is not None:
            log.debug('fetch failed', operation=error.operation, target=error.target, reason=error.reason)
            self.errors.append(error)
            return default
        return data

    def is_namespace_excluded(self, namespace: str) -> bool:
        return any(fnmatch.fnmatch(namespace, pat) for pat in self.exclude_namespaces)

    def _pod_record(self, namespace: str, pod: PodSpec) -> Optional[PodRecord]:
        samples = self._collect(self.source.get_pod_metrics, namespace, pod.name)
        if samples is None:
            return None
        return correlate_pod(pod, samples)

    def namespace_totals(self, namespace: str) -> NamespaceTotals:
        totals = NamespaceTotals(namespace)
        pods = self._collect(self.source.list_pods, namespace, default=[])
        for pod in pods:
            totals.add_pod(self._pod_record(namespace, pod))
        return totals

    def list_namespaces_report(self) -> AggregationResult:
        self.errors = []
        rows = [list(NAMESPACE_HEADER)]
        namespaces = self._collect(self.source.list_namespaces, default=[])
        selected = [ns for ns in namespaces if not self.is_namespace_excluded(ns)]
        if len(selected) != len(namespaces):
            log.info('namespaces excluded', excluded=len(namespaces) - len(selected))
        with self.track(selected, 'Running') as items:
            for ns in items:
                totals = self.namespace_totals(ns)
                if totals.pod_count == 0:
                    log.debug('namespace has no pods, omitted', namespace=ns)
                    continue
                rows.append([ns, str(totals.pod_count)] + resource_cells(totals.resources, self.formatter))
        log.info('namespace report built', namespaces=len(rows) - 1, errors=len(self.errors))
        return AggregationResult(rows=rows, errors=list(self.errors))

    def namespace_report(self, namespace: str) -> AggregationResult:
        self.errors = []
        rows = [list(POD_HEADER)]
        grand = ResourceTotals()
        pods = self._collect(self.source.list_pods, namespace, default=[])
        with self.track(pods, 'Running') as items:
            for pod in items:
                record = self._pod_record(namespace, pod)
                if record is None:
                    continue
                for c in record.containers:
                    single = ResourceTotals(usage=c.usage, requests=c.requests, limits=c.limits)
                    rows.append([record.name, c.name] + resource_cells(single, self.formatter))
                    grand.add(c)
        rows.append([TOTAL_LABEL, ''] + resource_cells(grand, self.formatter))
        log.info('pod report built', namespace=namespace, containers=len(rows) - 2, errors=len(self.errors))
        return AggregationResult(rows=rows, errors=list(self.errors), title=f'Metrics for Namespace: {namespace}')
