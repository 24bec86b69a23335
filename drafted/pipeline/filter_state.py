"""Filter state transitions and search-input debouncing.

All criteria changes go through ``reduce_filters`` so the session can tell,
at dispatch time, whether the criteria actually changed (and the page must
go back to 1).
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator

from drafted.core.schemas import SELECTION_FIELDS, FilterCriteria, VideoFilter

logger = logging.getLogger(__name__)


def _check_selection_field(field: str) -> str:
    if field not in SELECTION_FIELDS:
        msg = f"unknown filter field '{field}', expected one of {list(SELECTION_FIELDS)}"
        raise ValueError(msg)
    return field


class SetSearchQuery(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["set_search_query"] = "set_search_query"
    query: str


class ToggleSelection(BaseModel):
    """Add ``value`` to a multi-select dimension, or remove it if present."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["toggle_selection"] = "toggle_selection"
    field: str
    value: str

    @field_validator("field")
    @classmethod
    def field_is_selection(cls, v: str) -> str:
        return _check_selection_field(v)


class SetSelection(BaseModel):
    """Replace a multi-select dimension wholesale."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["set_selection"] = "set_selection"
    field: str
    values: frozenset[str] = frozenset()

    @field_validator("field")
    @classmethod
    def field_is_selection(cls, v: str) -> str:
        return _check_selection_field(v)


class SetVideoFilter(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["set_video_filter"] = "set_video_filter"
    video_filter: VideoFilter


class ClearFilters(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["clear_filters"] = "clear_filters"


FilterAction = SetSearchQuery | ToggleSelection | SetSelection | SetVideoFilter | ClearFilters


def reduce_filters(criteria: FilterCriteria, action: FilterAction) -> FilterCriteria:
    """Return the criteria that result from applying ``action``."""
    if isinstance(action, SetSearchQuery):
        return criteria.model_copy(update={"search_query": action.query})
    if isinstance(action, ToggleSelection):
        current: frozenset[str] = getattr(criteria, action.field)
        if action.value in current:
            updated = current - {action.value}
        else:
            updated = current | {action.value}
        return criteria.model_copy(update={action.field: updated})
    if isinstance(action, SetSelection):
        return criteria.model_copy(update={action.field: frozenset(action.values)})
    if isinstance(action, SetVideoFilter):
        return criteria.model_copy(update={"video_filter": VideoFilter(action.video_filter)})
    if isinstance(action, ClearFilters):
        return FilterCriteria()
    msg = f"unsupported filter action: {action!r}"
    raise TypeError(msg)


class SearchDebouncer:
    """Single-shot cancelable timer between search keystrokes and the filter.

    Each ``arm`` cancels the pending timer and starts a new one, so only the
    last value typed within ``delay_s`` reaches ``callback``.

    Usage::

        debouncer = SearchDebouncer(0.3, on_query)
        debouncer.arm("sta")
        debouncer.arm("stanford")   # "sta" never fires
    """

    def __init__(self, delay_s: float, callback: Callable[[str], None]) -> None:
        self._delay_s = delay_s
        self._callback = callback
        self._handle: asyncio.TimerHandle | None = None
        self._value: str | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def arm(self, value: str) -> None:
        """(Re)start the timer for ``value``. Requires a running event loop."""
        self.cancel()
        loop = asyncio.get_running_loop()
        self._value = value
        self._handle = loop.call_later(self._delay_s, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
        self._handle = None
        self._value = None

    def flush(self) -> None:
        """Fire the pending value now, if any."""
        if self._handle is not None:
            self._handle.cancel()
            self._fire()

    def _fire(self) -> None:
        value = self._value
        self._handle = None
        self._value = None
        if value is not None:
            logger.debug("Search query settled: %r", value)
            self._callback(value)
