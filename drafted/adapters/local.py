"""Local stand-ins for the browser clipboard and file download."""

import logging
import sys
from pathlib import Path
from typing import TextIO

from drafted.adapters.base import Clipboard, ExportSink

logger = logging.getLogger(__name__)


class DirectorySink(ExportSink):
    """Writes exported CSV documents into a directory as UTF-8 files."""

    def __init__(self, output_dir: str | Path) -> None:
        self._output_dir = Path(output_dir)

    async def deliver(self, filename: str, content: str) -> str:
        self._output_dir.mkdir(parents=True, exist_ok=True)
        path = self._output_dir / filename
        with path.open("w", encoding="utf-8", newline="") as f:
            f.write(content)
        logger.info("Wrote %s", path)
        return str(path)


class StreamClipboard(Clipboard):
    """Prints copied text to a stream (stdout by default)."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    async def write_text(self, text: str) -> None:
        stream = self._stream or sys.stdout
        stream.write(text + "\n")
        stream.flush()
