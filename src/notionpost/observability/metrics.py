"""Metrics hook protocol and its no-op default.

The transport and the client report counters and timings through a
:class:`MetricsHook`.  Without one, :class:`NoopMetricsHook` discards
every data point so call sites never need ``None`` checks.

Emitted metric names:

* ``notionpost.requests_total``         -- counter, tagged method/path/status
* ``notionpost.request_duration_ms``    -- timing, tagged method/path/status
* ``notionpost.blocks_fetched_total``   -- counter
* ``notionpost.posts_listed_total``     -- counter
* ``notionpost.backfill_failures_total``-- counter
* ``notionpost.render_duration_ms``     -- timing, tagged target
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetricsHook(Protocol):
    """Anything with ``increment`` and ``timing`` can receive metrics.

    *tags* is a flat ``str -> str`` mapping; backends translate it into
    their own labelling scheme.
    """

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Add *value* to the counter *name*."""
        ...

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Record a duration of *ms* milliseconds under *name*."""
        ...


class NoopMetricsHook:
    """Metrics backend that drops everything."""

    __slots__ = ()

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass
