"""Human readable CPU and memory strings.

CPU is always shown as raw millicores. Memory is scaled with either binary
(1024) or decimal (1000) prefixes; a single run sticks to one of them.
"""
from __future__ import annotations
from typing import Dict, List, Tuple

BINARY = 'binary'
DECIMAL = 'decimal'

_SCALES: Dict[str, Tuple[int, List[str]]] = {
    BINARY: (1024, ['B', 'KiB', 'MiB', 'GiB', 'TiB', 'PiB', 'EiB', 'ZiB', 'YiB']),
    DECIMAL: (1000, ['B', 'kB', 'MB', 'GB', 'TB', 'PB', 'EB', 'ZB', 'YB']),
}
MEMORY_FORMATS = tuple(_SCALES.keys())


def format_cpu(milli: int) -> str:
    if milli < 0:
        raise ValueError(f'cpu quantity cannot be negative: {milli}')
    return f'{milli} m'


def format_memory(size: int, mode: str = BINARY) -> str:
    if size < 0:
        raise ValueError(f'memory quantity cannot be negative: {size}')
    try:
        base, suffixes = _SCALES[mode]
    except KeyError:
        raise ValueError(f'Unknown memory format: {mode}. Available: {", ".join(MEMORY_FORMATS)}') from None
    value = float(size)
    i = 0
    while value >= base and i < len(suffixes) - 1:
        value /= base
        i += 1
    return '%.4g%s' % (value, suffixes[i])


class MemoryFormatter:
    """Formats every quantity of one run with the same memory scale."""

    def __init__(self, mode: str = BINARY):
        if mode not in _SCALES:
            raise ValueError(f'Unknown memory format: {mode}. Available: {", ".join(MEMORY_FORMATS)}')
        self.mode = mode

    def cpu(self, milli: int) -> str:
        return format_cpu(milli)

    def memory(self, size: int) -> str:
        return format_memory(size, self.mode)
