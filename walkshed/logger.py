from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from time import perf_counter
from typing import TYPE_CHECKING, Any, Iterator

if TYPE_CHECKING:
    from .graph.model import Graph


class LoggingMode(str, Enum):
    """Supported logging verbosity for the reachability pipeline."""

    NONE = "none"
    INFO = "info"
    DEBUG = "debug"

    @classmethod
    def from_value(cls, value: LoggingMode | str | None) -> LoggingMode:
        """Normalize arbitrary user input into a `LoggingMode`."""
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.NONE
        try:
            return cls(value.lower())
        except ValueError as exc:
            valid = ", ".join(mode.value for mode in cls)
            msg = f"Invalid logging mode: {value!r}. Expected one of {{{valid}}}."
            raise ValueError(msg) from exc


@dataclass(slots=True)
class Logger:
    """Minimal logger that emits deterministic phase updates.

    Per-person searches may run on pool threads, so lines are written under a
    lock and lines from worker threads carry a `thread=` tag.
    """

    mode: LoggingMode = LoggingMode.NONE
    _lock: threading.Lock = field(
        default_factory=threading.Lock,
        repr=False,
        compare=False,
    )

    @property
    def is_info_enabled(self) -> bool:  # noqa: D102
        return self.mode in (LoggingMode.INFO, LoggingMode.DEBUG)

    @property
    def is_debug_enabled(self) -> bool:  # noqa: D102
        return self.mode is LoggingMode.DEBUG

    def info(self, message: str, **context: Any) -> None:  # noqa: ANN401, D102
        if self.is_info_enabled:
            self._emit("INFO", message, context)

    def debug(self, message: str, **context: Any) -> None:  # noqa: ANN401, D102
        if self.is_debug_enabled:
            self._emit("DEBUG", message, context)

    def graph_stats(self, graph: Graph) -> None:
        """Log the size of the loaded walking network."""
        if not self.is_info_enabled:
            return
        self.info(
            "graph.stats",
            intersections=len(graph.intersections),
            roads=len(graph.roads),
            amenities=len(graph.amenities),
            crs=graph.mercator.crs,
        )

    @contextmanager
    def phase(self, name: str, **details: Any) -> Iterator[None]:  # noqa: ANN401
        """Emit deterministic start/done messages for a logical phase."""
        if not self.is_info_enabled:
            yield
            return

        self.info(f"{name}.start", **details)
        start = perf_counter()
        try:
            yield
        except Exception as exc:
            self.info(f"{name}.failed", error=str(exc))
            raise
        else:
            self.info(f"{name}.complete", **details)
            if self.is_debug_enabled:
                elapsed = perf_counter() - start
                self.debug(f"{name}.elapsed", seconds=f"{elapsed:.3f}")

    def _emit(self, level: str, message: str, context: dict[str, Any]) -> None:
        parts = [f"[{level}]\t{message}"]
        extras = "\t".join(
            f"{key}={value}" for key, value in context.items() if value is not None
        )
        if extras:
            parts.append(extras)
        current = threading.current_thread()
        if current is not threading.main_thread():
            parts.append(f"thread={current.name}")
        line = "\t".join(parts)
        with self._lock:
            print(line, flush=True)
