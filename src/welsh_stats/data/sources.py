"""Input sources that hand readable text streams to the parsers."""

from pathlib import Path
from typing import Protocol, TextIO, runtime_checkable

import structlog
from attrs import define, field

logger = structlog.get_logger(__name__)


@runtime_checkable
class InputSource(Protocol):
    """Anything that can be identified and opened as a text stream."""

    @property
    def identifier(self) -> str: ...

    def open(self) -> TextIO: ...


@define(slots=True, frozen=True)
class InputFile:
    """A dataset stored on the local filesystem."""

    path: Path = field(converter=Path)
    encoding: str = "utf-8"

    @property
    def identifier(self) -> str:
        return str(self.path)

    def open(self) -> TextIO:
        """Open the file for reading; the caller is responsible for closing it."""
        logger.debug("source.open", path=self.identifier)
        return self.path.open("r", encoding=self.encoding, newline="")


__all__ = ["InputFile", "InputSource"]
