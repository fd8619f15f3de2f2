import sys, os
import pytest

# Make the project root importable when the package is not installed.
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from kram.errors import FetchError
from kram.metrics.correlate import ContainerSpec, PodSpec, ResourcePair, UsageSample

MIB = 1024 * 1024


class FakeSource:
    """In-memory listing source; names in fail_* raise FetchError."""

    def __init__(self, pods=None, metrics=None, namespaces=None, fail_namespaces=False,
                 fail_pods=(), fail_metrics=()):
        self.pods = pods or {}
        self.metrics = metrics or {}
        self.namespaces = namespaces if namespaces is not None else list(self.pods.keys())
        self.fail_namespaces = fail_namespaces
        self.fail_pods = set(fail_pods)
        self.fail_metrics = set(fail_metrics)
        self.calls = []

    def list_namespaces(self):
        self.calls.append(('list_namespaces',))
        if self.fail_namespaces:
            raise FetchError('list namespaces', 'cluster', '403 Forbidden')
        return list(self.namespaces)

    def list_pods(self, namespace):
        self.calls.append(('list_pods', namespace))
        if namespace in self.fail_pods:
            raise FetchError('list pods', namespace, '500 Internal Server Error')
        return list(self.pods.get(namespace, []))

    def get_pod_metrics(self, namespace, pod):
        self.calls.append(('get_pod_metrics', namespace, pod))
        if (namespace, pod) in self.fail_metrics:
            raise FetchError('get pod metrics', f'{namespace}/{pod}', '404 Not Found')
        return list(self.metrics.get((namespace, pod), []))


def make_pod(name, *containers):
    """containers: (name, (req_cpu, req_mem), (lim_cpu, lim_mem))"""
    return PodSpec(name, tuple(
        ContainerSpec(c, ResourcePair(*req), ResourcePair(*lim)) for c, req, lim in containers
    ))


def make_usage(*samples):
    return [UsageSample(n, ResourcePair(cpu, mem)) for n, cpu, mem in samples]


@pytest.fixture
def prod_source():
    """Namespace 'prod' with two single-container pods and an empty 'idle' namespace."""
    pods = {
        'prod': [
            make_pod('web-1', ('app', (200, 100 * MIB), (300, 150 * MIB))),
            make_pod('web-2', ('app', (200, 100 * MIB), (300, 150 * MIB))),
        ],
        'idle': [],
    }
    metrics = {
        ('prod', 'web-1'): make_usage(('app', 100, 50 * MIB)),
        ('prod', 'web-2'): make_usage(('app', 100, 50 * MIB)),
    }
    return FakeSource(pods=pods, metrics=metrics, namespaces=['idle', 'prod'])
