"""Cosmetic progress output on stderr.

The spinner runs on its own thread and only ever writes to the terminal.
stop() waits for that thread to exit, so nothing it prints can interleave
with the table that follows.
"""
from __future__ import annotations
import sys
import threading
from contextlib import nullcontext
from typing import Any, ContextManager, Iterable, Optional, Sequence
import click

FRAMES = ('|', '/', '-', '\\')
INTERVAL = 0.1
CLEAR_LINE = '\r\x1b[2K'


def is_interactive(stream=None) -> bool:
    stream = stream or sys.stderr
    isatty = getattr(stream, 'isatty', None)
    return bool(isatty and isatty())


class Spinner:
    def __init__(self, message: str, enabled: bool = True, interval: float = INTERVAL):
        self.message = message
        self.enabled = enabled
        self.interval = interval
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def _run(self) -> None:
        i = 0
        while not self._stop.is_set():
            click.echo(f'\r{FRAMES[i]} {self.message}', nl=False, err=True)
            i = (i + 1) % len(FRAMES)
            self._stop.wait(self.interval)

    def start(self) -> 'Spinner':
        if self.enabled and self._thread is None:
            self._thread = threading.Thread(target=self._run, name='kram-spinner', daemon=True)
            self._thread.start()
        return self

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def stop(self, final_message: Optional[str] = None, ok: bool = True) -> None:
        """Cancel the animation and wait until the thread has acknowledged it."""
        if self._thread is None:
            return
        self._stop.set()
        self._thread.join()
        self._thread = None
        click.echo(CLEAR_LINE, nl=False, err=True)
        if final_message:
            mark = click.style('✓', fg='green') if ok else click.style('✗', fg='red')
            click.echo(f'{mark} {final_message}', err=True)

    def __enter__(self) -> 'Spinner':
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()


def make_tracker(enabled: bool):
    """Return a tracker for AggregationEngine: a stderr progress bar or a pass-through."""
    def track(items: Sequence[Any], label: str) -> ContextManager[Iterable[Any]]:
        if not enabled or not items:
            return nullcontext(items)
        return click.progressbar(items, label=label, file=sys.stderr, show_pos=True)
    return track
