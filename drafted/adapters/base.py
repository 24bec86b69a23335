"""Abstract interfaces for the dashboard's external collaborators."""

from abc import ABC, abstractmethod

from pydantic import BaseModel

from drafted.core.schemas import Candidate


class SourceFilters(BaseModel):
    """Coarse pre-filter hints a source may apply before client-side filtering."""

    has_video1: bool = False


class CandidateSourceError(Exception):
    """Raised when a candidate source cannot deliver the collection."""


class CandidateSource(ABC):
    """Supplies the full candidate collection to the dashboard."""

    @abstractmethod
    async def fetch_candidates(
        self,
        filters: SourceFilters | None = None,
        limit: int | None = None,
        force_refresh: bool = False,
    ) -> list[Candidate]:
        """Return candidates, newest first, at most ``limit`` of them."""


class Clipboard(ABC):
    """Destination for copied email addresses."""

    @abstractmethod
    async def write_text(self, text: str) -> None:
        """Place ``text`` on the clipboard."""


class ExportSink(ABC):
    """Destination for a finished CSV document."""

    @abstractmethod
    async def deliver(self, filename: str, content: str) -> str:
        """Hand over ``content`` under ``filename``. Returns where it went."""
