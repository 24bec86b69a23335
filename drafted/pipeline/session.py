"""DashboardSession: wires the candidate source, filters, paging, selection and export.

Data flow:
  1. Source fetch → collection snapshot (+ stats, computed once per load)
  2. Criteria dispatch → filtered view (memoised on collection version + criteria)
  3. Paginator → visible page
  4. Selection / export / clipboard act on the filtered view

Async failures (fetch, clipboard, export sink) are caught here and turned
into ``error`` or an outcome notice; filtering and paging stay synchronous.
"""

import logging
from datetime import date

from pydantic import BaseModel

from drafted.adapters.base import CandidateSource, Clipboard, ExportSink, SourceFilters
from drafted.core.config import DashboardConfig, ExportConfig, SourceConfig
from drafted.core.schemas import (
    Candidate,
    CandidateStats,
    FilterCriteria,
    MajorCount,
    UniversityCount,
    VideoFilter,
)
from drafted.pipeline.export import candidates_to_csv, export_filename
from drafted.pipeline.filter_state import (
    ClearFilters,
    FilterAction,
    SearchDebouncer,
    SetSearchQuery,
    SetSelection,
    SetVideoFilter,
    ToggleSelection,
    reduce_filters,
)
from drafted.pipeline.matcher import SpokenLanguageIndex, filter_candidates
from drafted.pipeline.pagination import PageWindow, Paginator
from drafted.pipeline.selection import SelectionSet
from drafted.pipeline.stats import get_candidate_stats, get_major_options, get_university_options
from drafted.profile.languages import (
    get_culture_tags,
    get_programming_languages,
    get_supported_languages,
)

logger = logging.getLogger(__name__)

NO_CANDIDATES_TO_EXPORT = "No candidates to export"
NO_CANDIDATES_SELECTED = "No candidates selected"
EXPORT_FAILED = "Failed to export CSV. Please try again."
COPY_FAILED = "Failed to copy emails to clipboard"


class ActionOutcome(BaseModel):
    """Result of a bulk action (export or clipboard copy)."""

    ok: bool
    count: int = 0
    filename: str | None = None
    location: str | None = None
    notice: str | None = None


class FilterOptions(BaseModel):
    """Choices offered by the filter panel."""

    programming_languages: list[str]
    spoken_languages: list[str]
    culture_tags: list[str]
    universities: list[UniversityCount]
    majors: list[MajorCount]
    graduation_years: list[str]


class DashboardSession:
    """One recruiter's view over the candidate collection.

    Usage::

        session = DashboardSession(source)
        await session.load()
        session.toggle_filter("programming_langs", "Python")
        rows = session.visible_page()
    """

    def __init__(
        self,
        source: CandidateSource,
        config: DashboardConfig | None = None,
        source_config: SourceConfig | None = None,
        export_config: ExportConfig | None = None,
        clipboard: Clipboard | None = None,
    ) -> None:
        self._source = source
        self._config = config or DashboardConfig()
        self._source_config = source_config or SourceConfig()
        self._export_config = export_config or ExportConfig()
        self._clipboard = clipboard

        self._candidates: list[Candidate] = []
        self._collection_version = 0
        self._spoken_index = SpokenLanguageIndex()
        self._criteria = FilterCriteria()
        self._memo_key: tuple[int, FilterCriteria] | None = None
        self._memo_filtered: list[Candidate] = []

        self._paginator: Paginator[Candidate] = Paginator(self._config.page_size)
        self._selection = SelectionSet()
        self._debouncer = SearchDebouncer(
            self._config.search_debounce_ms / 1000, self.set_search_query,
        )
        self._search_input = ""

        self._request_seq = 0
        self._snapshot_hint: SourceFilters | None = None
        self.stats: CandidateStats | None = None
        self.error: str | None = None
        self.is_loading = False

    # -- loading -----------------------------------------------------------

    def _source_hint(self) -> SourceFilters:
        return SourceFilters(has_video1=self._criteria.video_filter is not VideoFilter.ANY)

    @property
    def needs_reload(self) -> bool:
        """True when the snapshot was pre-filtered more narrowly than the criteria allow.

        A snapshot fetched with the video1 hint lacks candidates without a first
        video, so switching the video filter back to ``any`` requires a new load.
        """
        if self._snapshot_hint is None:
            return False
        return self._snapshot_hint.has_video1 and not self._source_hint().has_video1

    async def load(self) -> bool:
        """Fetch the collection, passing the video1 hint when a video filter is set."""
        return await self._fetch(self._source_hint(), None, force_refresh=False)

    async def reload_if_needed(self) -> bool:
        """Run ``load()`` if the current snapshot no longer covers the criteria.

        Returns True if a load ran and succeeded.
        """
        if not self.needs_reload:
            return False
        return await self.load()

    async def refresh(self) -> bool:
        """Re-fetch everything, bypassing the source cache."""
        return await self._fetch(SourceFilters(), self._source_config.refresh_limit, force_refresh=True)

    async def _fetch(self, filters: SourceFilters, limit: int | None, force_refresh: bool) -> bool:
        self._request_seq += 1
        request_id = self._request_seq
        self.is_loading = True
        try:
            candidates = await self._source.fetch_candidates(filters, limit, force_refresh)
        except Exception as e:
            if request_id == self._request_seq:
                logger.error("Error loading candidates: %s", e)
                self.error = str(e) or e.__class__.__name__
                self.is_loading = False
            return False

        if request_id != self._request_seq:
            logger.debug("Discarding stale candidate load #%d", request_id)
            return False

        self._replace_collection(candidates)
        self._snapshot_hint = filters
        self.stats = get_candidate_stats(candidates)
        self.error = None
        self.is_loading = False
        return True

    def _replace_collection(self, candidates: list[Candidate]) -> None:
        self._candidates = list(candidates)
        self._collection_version += 1
        self._spoken_index.reset()
        self._paginator.set_items(self.filtered)

    # -- filters -----------------------------------------------------------

    @property
    def criteria(self) -> FilterCriteria:
        return self._criteria

    @property
    def has_active_filters(self) -> bool:
        return self._criteria.has_active_filters

    @property
    def search_input(self) -> str:
        """Raw search text, ahead of the debounced query."""
        return self._search_input

    def dispatch(self, action: FilterAction) -> bool:
        """Apply a filter action. Returns True if the criteria changed.

        A change sends the paginator back to page 1.
        """
        updated = reduce_filters(self._criteria, action)
        if updated == self._criteria:
            return False
        self._criteria = updated
        self._paginator.reset()
        self._paginator.set_items(self.filtered)
        return True

    def type_search(self, text: str) -> None:
        """Record a keystroke; the query applies after the debounce delay."""
        self._search_input = text
        self._debouncer.arm(text)

    def set_search_query(self, query: str) -> bool:
        self._search_input = query
        return self.dispatch(SetSearchQuery(query=query))

    def toggle_filter(self, field: str, value: str) -> bool:
        return self.dispatch(ToggleSelection(field=field, value=value))

    def set_filter(self, field: str, values: set[str] | frozenset[str] | list[str]) -> bool:
        return self.dispatch(SetSelection(field=field, values=frozenset(values)))

    def set_video_filter(self, video_filter: VideoFilter | str) -> bool:
        """Set the video filter. Check ``needs_reload`` afterwards, or use
        ``apply_video_filter`` to reload in one step.
        """
        return self.dispatch(SetVideoFilter(video_filter=VideoFilter(video_filter)))

    async def apply_video_filter(self, video_filter: VideoFilter | str) -> bool:
        """Set the video filter and reload if the snapshot no longer covers it."""
        changed = self.set_video_filter(video_filter)
        await self.reload_if_needed()
        return changed

    def clear_filters(self) -> bool:
        """Reset every criterion. Resetting the video filter may set ``needs_reload``."""
        self._debouncer.cancel()
        self._search_input = ""
        changed = self.dispatch(ClearFilters())
        self._paginator.reset()
        return changed

    def filter_options(self) -> FilterOptions:
        return FilterOptions(
            programming_languages=get_programming_languages(),
            spoken_languages=get_supported_languages(),
            culture_tags=get_culture_tags(),
            universities=get_university_options(self._candidates)[:self._config.university_option_limit],
            majors=get_major_options(self._candidates)[:self._config.major_option_limit],
            graduation_years=self._config.graduation_years,
        )

    # -- views -------------------------------------------------------------

    @property
    def all_candidates(self) -> list[Candidate]:
        return list(self._candidates)

    @property
    def total_count(self) -> int:
        return len(self._candidates)

    @property
    def filtered(self) -> list[Candidate]:
        """The filtered collection, recomputed only when collection or criteria change."""
        key = (self._collection_version, self._criteria)
        if key != self._memo_key:
            self._memo_filtered = filter_candidates(
                self._candidates, self._criteria, self._spoken_index,
            )
            self._memo_key = key
        return self._memo_filtered

    @property
    def filtered_count(self) -> int:
        return len(self.filtered)

    # -- pagination --------------------------------------------------------

    @property
    def current_page(self) -> int:
        return self._paginator.current_page

    @property
    def page_size(self) -> int:
        return self._paginator.page_size

    @property
    def total_pages(self) -> int:
        return self._paginator.total_pages

    @property
    def has_prev_page(self) -> bool:
        return self._paginator.has_prev_page

    @property
    def has_next_page(self) -> bool:
        return self._paginator.has_next_page

    def visible_page(self) -> list[Candidate]:
        return self._paginator.visible_page()

    def set_page(self, page: int) -> int:
        return self._paginator.set_page(page)

    def set_page_size(self, page_size: int) -> None:
        self._paginator.set_page_size(page_size)

    def next_page(self) -> int:
        return self._paginator.next_page()

    def prev_page(self) -> int:
        return self._paginator.prev_page()

    def page_window(self) -> PageWindow:
        return self._paginator.page_window()

    def display_range(self) -> tuple[int, int]:
        return self._paginator.display_range()

    # -- selection ---------------------------------------------------------

    @property
    def selected_ids(self) -> frozenset[str]:
        return self._selection.ids

    def toggle_selection(self, candidate_id: str) -> bool:
        return self._selection.toggle(candidate_id)

    def select_all_filtered(self) -> None:
        self._selection.select_all(self.filtered)

    def deselect_all(self) -> None:
        self._selection.clear()

    def selected_list(self) -> list[Candidate]:
        return self._selection.selected_list(self.filtered)

    # -- bulk actions ------------------------------------------------------

    async def export_filtered(self, sink: ExportSink, today: date | None = None) -> ActionOutcome:
        return await self._export(self.filtered, sink, selected=False, today=today)

    async def export_selected(self, sink: ExportSink, today: date | None = None) -> ActionOutcome:
        return await self._export(self.selected_list(), sink, selected=True, today=today)

    async def _export(
        self,
        candidates: list[Candidate],
        sink: ExportSink,
        selected: bool,
        today: date | None,
    ) -> ActionOutcome:
        if not candidates:
            notice = NO_CANDIDATES_SELECTED if selected else NO_CANDIDATES_TO_EXPORT
            return ActionOutcome(ok=False, notice=notice)

        filename = export_filename(self._export_config.filename_prefix, selected, today)
        content = candidates_to_csv(candidates)
        try:
            location = await sink.deliver(filename, content)
        except Exception as e:
            logger.error("Error exporting CSV: %s", e)
            return ActionOutcome(ok=False, filename=filename, notice=EXPORT_FAILED)

        logger.info("Exported %d candidates to CSV", len(candidates))
        return ActionOutcome(ok=True, count=len(candidates), filename=filename, location=location)

    async def copy_email(self, candidate: Candidate) -> ActionOutcome:
        return await self._copy([candidate.email])

    async def copy_selected_emails(self) -> ActionOutcome:
        emails = [c.email for c in self.selected_list() if c.email]
        if not emails:
            return ActionOutcome(ok=False, notice=NO_CANDIDATES_SELECTED)
        return await self._copy(emails)

    async def _copy(self, emails: list[str]) -> ActionOutcome:
        if self._clipboard is None:
            return ActionOutcome(ok=False, notice=COPY_FAILED)
        try:
            await self._clipboard.write_text(", ".join(emails))
        except Exception as e:
            logger.error("Error copying emails: %s", e)
            return ActionOutcome(ok=False, notice=COPY_FAILED)
        return ActionOutcome(ok=True, count=len(emails))
