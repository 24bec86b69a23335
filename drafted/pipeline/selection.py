"""Candidate selection for bulk actions.

The selection is a set of candidate ids kept apart from filtering and
paging: ids are never pruned when their candidate leaves the filtered view,
they just stop showing up in ``selected_list`` until it comes back.
"""

from collections.abc import Iterable

from drafted.core.schemas import Candidate


class SelectionSet:
    """Set of selected candidate ids."""

    def __init__(self) -> None:
        self._ids: set[str] = set()

    def __contains__(self, candidate_id: object) -> bool:
        return candidate_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    @property
    def ids(self) -> frozenset[str]:
        return frozenset(self._ids)

    def toggle(self, candidate_id: str) -> bool:
        """Flip membership of ``candidate_id``. Returns True if now selected."""
        if candidate_id in self._ids:
            self._ids.discard(candidate_id)
            return False
        self._ids.add(candidate_id)
        return True

    def select_all(self, candidates: Iterable[Candidate]) -> None:
        """Replace the selection with exactly the ids of ``candidates``."""
        self._ids = {c.id for c in candidates}

    def clear(self) -> None:
        self._ids = set()

    def selected_list(self, filtered: Iterable[Candidate]) -> list[Candidate]:
        """Selected candidates among ``filtered``, in filtered order."""
        return [c for c in filtered if c.id in self._ids]
