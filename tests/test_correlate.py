import pytest
from conftest import make_pod, make_usage, MIB
from kram.metrics.correlate import (
    ContainerRecord, NamespaceTotals, PodRecord, ResourcePair, ResourceTotals, correlate_pod,
)


def test_only_matching_names_produce_records():
    pod = make_pod('p', ('A', (10, 1), (20, 2)), ('B', (30, 3), (40, 4)))
    samples = make_usage(('A', 5, 100), ('C', 7, 700))
    record = correlate_pod(pod, samples)
    assert [c.name for c in record.containers] == ['A']
    a = record.containers[0]
    assert a.usage == ResourcePair(5, 100)
    assert a.requests == ResourcePair(10, 1)
    assert a.limits == ResourcePair(20, 2)


def test_record_order_follows_samples():
    pod = make_pod('p', ('a', (0, 0), (0, 0)), ('b', (0, 0), (0, 0)))
    record = correlate_pod(pod, make_usage(('b', 1, 1), ('a', 2, 2)))
    assert [c.name for c in record.containers] == ['b', 'a']


def test_first_declared_container_wins_on_duplicate_names():
    pod = make_pod('p', ('a', (1, 1), (1, 1)), ('a', (9, 9), (9, 9)))
    record = correlate_pod(pod, make_usage(('a', 0, 0)))
    assert record.containers[0].requests == ResourcePair(1, 1)


def test_no_samples_gives_empty_record():
    record = correlate_pod(make_pod('p', ('a', (1, 1), (1, 1))), [])
    assert record.name == 'p'
    assert record.containers == []


def test_resource_pair_rejects_negative_and_adds():
    with pytest.raises(ValueError):
        ResourcePair(-1, 0)
    assert ResourcePair(1, 2) + ResourcePair(3, 4) == ResourcePair(4, 6)
    assert ResourcePair.zero() == ResourcePair(0, 0)


def test_namespace_totals_sum_all_pods():
    totals = NamespaceTotals('prod')
    for name in ('web-1', 'web-2'):
        pod = make_pod(name, ('app', (200, 100 * MIB), (300, 150 * MIB)))
        totals.add_pod(correlate_pod(pod, make_usage(('app', 100, 50 * MIB))))
    assert totals.pod_count == 2
    assert totals.resources.usage == ResourcePair(200, 100 * MIB)
    assert totals.resources.requests == ResourcePair(400, 200 * MIB)
    assert totals.resources.limits == ResourcePair(600, 300 * MIB)


def test_pod_without_metrics_counts_but_adds_nothing():
    totals = NamespaceTotals('ns')
    totals.add_pod(None)
    assert totals.pod_count == 1
    assert totals.resources == ResourceTotals()


def test_pod_record_totals():
    record = PodRecord('p', [
        ContainerRecord('a', ResourcePair(1, 10), ResourcePair(2, 20), ResourcePair(3, 30)),
        ContainerRecord('b', ResourcePair(4, 40), ResourcePair(5, 50), ResourcePair(6, 60)),
    ])
    totals = record.totals()
    assert totals.usage == ResourcePair(5, 50)
    assert totals.requests == ResourcePair(7, 70)
    assert totals.limits == ResourcePair(9, 90)
