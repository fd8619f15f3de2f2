"""Kubernetes quantity strings to integer CPU milli-units and memory bytes."""
from __future__ import annotations
from decimal import Decimal, ROUND_CEILING
from typing import Any, Dict, Optional
from kubernetes.utils import parse_quantity


def _ceil(value: Decimal) -> int:
    return int(value.to_integral_value(rounding=ROUND_CEILING))


def cpu_to_milli(val: Optional[Any]) -> int:
    """Convert a CPU quantity ('250m', '1', '1234567n') to millicores, rounding up."""
    if val is None or val == '':
        return 0
    milli = _ceil(parse_quantity(val) * 1000)
    if milli < 0:
        raise ValueError(f'negative cpu quantity: {val}')
    return milli


def mem_to_bytes(val: Optional[Any]) -> int:
    """Convert a memory quantity ('128Mi', '1G', '12345Ki') to bytes, rounding up."""
    if val is None or val == '':
        return 0
    size = _ceil(parse_quantity(val))
    if size < 0:
        raise ValueError(f'negative memory quantity: {val}')
    return size


def resource_list(resources: Optional[Dict[str, Any]]) -> tuple[int, int]:
    """Return (cpu_milli, memory_bytes) for a requests/limits/usage mapping."""
    resources = resources or {}
    return cpu_to_milli(resources.get('cpu')), mem_to_bytes(resources.get('memory'))
