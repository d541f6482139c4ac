"""Console output abstraction.

Commands print through `ConsoleProtocol` so they can be tested with
`MockConsole`. This is the only module that imports rich.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Protocol

__all__ = [
    "Style",
    "ConsoleProtocol",
    "RichConsole",
    "MockConsole",
    "OutputRecord",
]


class Style(Enum):
    """Text styles for console output."""

    DEFAULT = auto()
    ERROR = auto()  # Red, error message
    DIM = auto()  # Hints
    KEY = auto()  # Field names in key/value listings

    def __str__(self) -> str:
        return self.name.lower()


class ConsoleProtocol(Protocol):
    """Interface for styled console output."""

    def print(self, message: str, style: Style = Style.DEFAULT) -> None: ...

    def field(self, name: str, value: str) -> None:
        """Print one `name: value` line of a listing."""
        ...

    def error(self, message: str) -> None: ...


class RichConsole:
    """Console implementation using rich."""

    def __init__(self) -> None:
        from rich.console import Console

        # No auto-highlighting of numbers inside version strings
        self._console = Console(highlight=False)
        self._err_console = Console(stderr=True, highlight=False)
        self._style_map = {
            Style.DEFAULT: "",
            Style.ERROR: "red bold",
            Style.DIM: "dim",
            Style.KEY: "cyan",
        }

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        rich_style = self._style_map.get(style, "")
        if rich_style:
            self._console.print(message, style=rich_style, markup=False)
        else:
            self._console.print(message, markup=False)

    def field(self, name: str, value: str) -> None:
        from rich.text import Text

        line = Text(f"{name}: ", style=self._style_map[Style.KEY])
        line.append(value)
        self._console.print(line)

    def error(self, message: str) -> None:
        from rich.text import Text

        line = Text("error: ", style=self._style_map[Style.ERROR])
        line.append(message)
        self._err_console.print(line)


@dataclass
class OutputRecord:
    """A single output record for MockConsole."""

    message: str
    style: Style


def _empty_outputs() -> list[OutputRecord]:
    return []


@dataclass
class MockConsole:
    """Console implementation that captures output for testing."""

    outputs: list[OutputRecord] = field(default_factory=_empty_outputs)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self.outputs.append(OutputRecord(message, style))

    def field(self, name: str, value: str) -> None:
        self.outputs.append(OutputRecord(f"{name}: {value}", Style.KEY))

    def error(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"error: {message}", Style.ERROR))

    # Test helper methods

    @property
    def messages(self) -> list[str]:
        return [o.message for o in self.outputs]

    @property
    def text(self) -> str:
        return "\n".join(self.messages)

    def has_error(self) -> bool:
        return any(o.style == Style.ERROR for o in self.outputs)

    def find(self, substring: str) -> list[OutputRecord]:
        """Find all outputs containing a substring."""
        return [o for o in self.outputs if substring in o.message]
