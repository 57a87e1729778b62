"""Scope timing written out as a Chrome trace-event JSON file."""

from __future__ import annotations

import functools
import threading
import time
from dataclasses import dataclass
from typing import IO, Any, Callable, Optional, TypeVar

_F = TypeVar("_F", bound=Callable[..., Any])


@dataclass(frozen=True)
class ProfileResult:
    """One timed scope: start on the monotonic clock and duration, in microseconds."""

    name: str
    start: float
    elapsed: int
    thread_id: int


class Instrumentor:
    """Writes profile results of the current session to a trace file."""

    def __init__(self) -> None:
        self._stream: Optional[IO[str]] = None
        self._session_name: Optional[str] = None
        self._profile_count = 0
        self._lock = threading.Lock()

    @property
    def session_name(self) -> Optional[str]:
        return self._session_name

    @property
    def active(self) -> bool:
        return self._stream is not None

    def begin_session(self, name: str, file_path: str = "results.json") -> None:
        """Open ``file_path`` and start a session; an open session is ended first."""
        with self._lock:
            if self._stream is not None:
                self._close_locked()
            self._stream = open(file_path, "w", encoding="utf-8")
            self._stream.write('{"otherData": {},"traceEvents":[')
            self._stream.flush()
            self._session_name = name

    def end_session(self) -> None:
        with self._lock:
            if self._stream is not None:
                self._close_locked()

    def _close_locked(self) -> None:
        assert self._stream is not None
        self._stream.write("]}")
        self._stream.flush()
        self._stream.close()
        self._stream = None
        self._session_name = None
        self._profile_count = 0

    def write_profile(self, result: ProfileResult) -> None:
        """Append one complete event; ignored when no session is open."""
        with self._lock:
            if self._stream is None:
                return
            name = result.name.replace('"', "'")
            prefix = "," if self._profile_count > 0 else ""
            self._profile_count += 1
            self._stream.write(
                f'{prefix}{{"cat":"function",'
                f'"dur":{int(result.elapsed)},'
                f'"name":"{name}",'
                f'"ph":"X",'
                f'"pid":0,'
                f'"tid":{result.thread_id},'
                f'"ts":{result.start:.3f}}}'
            )
            self._stream.flush()


_instrumentor = Instrumentor()


def get_instrumentor() -> Instrumentor:
    """The process-wide instrumentor."""
    return _instrumentor


class InstrumentationTimer:
    """Times a scope from construction until ``stop`` or the end of a ``with`` block."""

    def __init__(self, name: str, instrumentor: Optional[Instrumentor] = None) -> None:
        self.name = name
        self._instrumentor = instrumentor if instrumentor is not None else get_instrumentor()
        self.stopped = False
        self._start_ns = time.perf_counter_ns()

    def stop(self) -> ProfileResult:
        end_ns = time.perf_counter_ns()
        result = ProfileResult(
            name=self.name,
            start=self._start_ns / 1000.0,
            elapsed=end_ns // 1000 - self._start_ns // 1000,
            thread_id=threading.get_ident(),
        )
        self._instrumentor.write_profile(result)
        self.stopped = True
        return result

    def __enter__(self) -> "InstrumentationTimer":
        return self

    def __exit__(self, *args: Any) -> None:
        if not self.stopped:
            self.stop()


def profile_scope(name: str) -> InstrumentationTimer:
    """A timer for a named scope, reporting to the process-wide instrumentor."""
    return InstrumentationTimer(name)


def profile_function(func: _F) -> _F:
    """Decorate ``func`` so each call is timed under its qualified name."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        with InstrumentationTimer(func.__qualname__):
            return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]