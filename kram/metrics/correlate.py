"""Records built from the pod listing and the metrics listing.

A pod's declared containers and its live usage samples come from two
independent API calls. They are joined by container name: a usage sample
without a declared container, or a declared container without a usage
sample, produces no record.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence


@dataclass(frozen=True)
class ResourcePair:
    """CPU in milli-units and memory in bytes."""
    cpu: int = 0
    memory: int = 0

    def __post_init__(self):
        if self.cpu < 0 or self.memory < 0:
            raise ValueError(f'resource quantities cannot be negative: cpu={self.cpu} memory={self.memory}')

    def __add__(self, other: 'ResourcePair') -> 'ResourcePair':
        return ResourcePair(self.cpu + other.cpu, self.memory + other.memory)

    @classmethod
    def zero(cls) -> 'ResourcePair':
        return cls(0, 0)


@dataclass(frozen=True)
class ContainerSpec:
    name: str
    requests: ResourcePair = ResourcePair()
    limits: ResourcePair = ResourcePair()


@dataclass(frozen=True)
class PodSpec:
    name: str
    containers: Sequence[ContainerSpec] = ()


@dataclass(frozen=True)
class UsageSample:
    name: str
    usage: ResourcePair = ResourcePair()


@dataclass(frozen=True)
class ContainerRecord:
    name: str
    usage: ResourcePair
    requests: ResourcePair
    limits: ResourcePair


@dataclass
class ResourceTotals:
    usage: ResourcePair = ResourcePair()
    requests: ResourcePair = ResourcePair()
    limits: ResourcePair = ResourcePair()

    def add(self, record: ContainerRecord) -> None:
        self.usage += record.usage
        self.requests += record.requests
        self.limits += record.limits


@dataclass
class PodRecord:
    name: str
    containers: List[ContainerRecord] = field(default_factory=list)

    def totals(self) -> ResourceTotals:
        acc = ResourceTotals()
        for c in self.containers:
            acc.add(c)
        return acc


@dataclass
class NamespaceTotals:
    name: str
    pod_count: int = 0
    resources: ResourceTotals = field(default_factory=ResourceTotals)

    def add_pod(self, record: Optional[PodRecord]) -> None:
        """Count a listed pod; record is None when its metrics could not be fetched."""
        self.pod_count += 1
        if record is None:
            return
        for c in record.containers:
            self.resources.add(c)


def find_container(containers: Iterable[ContainerSpec], name: str) -> Optional[ContainerSpec]:
    for c in containers:
        if c.name == name:
            return c
    return None


def correlate_pod(pod: PodSpec, samples: Iterable[UsageSample]) -> PodRecord:
    """Join usage samples to declared containers, keeping sample order."""
    record = PodRecord(pod.name)
    for sample in samples:
        spec = find_container(pod.containers, sample.name)
        if spec is None:
            continue
        record.containers.append(ContainerRecord(
            name=sample.name,
            usage=sample.usage,
            requests=spec.requests,
            limits=spec.limits,
        ))
    return record
