"""Shared test configuration and fixtures."""

from pathlib import Path
from xml.sax.handler import ContentHandler

import pytest
from dotenv import load_dotenv

from textcsv.config import TextAndCSVConfig
from textcsv.pipeline import TextAndCSVParser

# Load .env from project root for all tests
root = Path(__file__).parent.parent.resolve()
load_dotenv(root / ".env")


class RecordingHandler(ContentHandler):
    """Content handler that keeps every SAX event as a tuple."""

    def __init__(self):
        super().__init__()
        self.events: list[tuple] = []

    def startDocument(self):
        self.events.append(("startDocument",))

    def endDocument(self):
        self.events.append(("endDocument",))

    def startElement(self, name, attrs):
        self.events.append(("start", name, dict(attrs)))

    def endElement(self, name):
        self.events.append(("end", name))

    def characters(self, content):
        # Merge adjacent character events so chunking does not matter to tests
        if self.events and self.events[-1][0] == "chars":
            self.events[-1] = ("chars", self.events[-1][1] + content)
        else:
            self.events.append(("chars", content))

    def rows(self) -> list[list[str]]:
        """Rebuild the emitted table as a list of rows of cell text."""
        rows: list[list[str]] = []
        cell: str | None = None
        for event in self.events:
            if event[0] == "start" and event[1] == "tr":
                rows.append([])
            elif event[0] == "start" and event[1] == "td":
                cell = ""
            elif event[0] == "chars" and cell is not None:
                cell += event[1]
            elif event[0] == "end" and event[1] == "td":
                rows[-1].append(cell)
                cell = None
        return rows

    def text_of(self, name: str) -> str:
        """Concatenated character data inside every *name* element."""
        depth = 0
        parts: list[str] = []
        for event in self.events:
            if event[0] == "start" and event[1] == name:
                depth += 1
            elif event[0] == "end" and event[1] == name:
                depth -= 1
            elif event[0] == "chars" and depth:
                parts.append(event[1])
        return "".join(parts)

    def element_names(self) -> list[str]:
        return [event[1] for event in self.events if event[0] == "start"]

    def is_balanced(self) -> bool:
        stack: list[str] = []
        for event in self.events:
            if event[0] == "start":
                stack.append(event[1])
            elif event[0] == "end":
                if not stack or stack.pop() != event[1]:
                    return False
        return not stack and self.events[-1] == ("endDocument",)


def utf8_detector(sample: bytes) -> str:
    """Deterministic stand-in for chardet."""
    return "UTF-8"


@pytest.fixture
def handler() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def config() -> TextAndCSVConfig:
    return TextAndCSVConfig()


@pytest.fixture
def parser(config) -> TextAndCSVParser:
    return TextAndCSVParser(config, encoding_detector=utf8_detector)
