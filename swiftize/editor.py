"""Source editor command glue.

Adapts the text conversion to a line based editor buffer: the buffer is
read as one document and fully replaced with the generated output.
"""

import logging
from typing import List, Optional

from swiftize.jsontoswift import JsonToSwift

logger = logging.getLogger(__name__)


class SourceTextBuffer:
    """The lines of an editor document."""

    def __init__(self, lines: Optional[List[str]] = None):
        self.lines: List[str] = list(lines) if lines else []

    @property
    def text(self) -> str:
        return '\n'.join(self.lines)

    def replace(self, text: str) -> None:
        self.lines = text.split('\n')


class SourceEditorCommand:
    """Replaces a buffer holding a JSON document with generated Swift structs."""

    def __init__(self, **options):
        self.converter = JsonToSwift(**options)

    def perform(self, buffer: SourceTextBuffer) -> None:
        buffer.replace(self.converter.convert(buffer.text))


class SourceEditorExtension:
    """Host lifecycle hooks."""

    def did_finish_launching(self) -> None:
        logger.info("JSON to Swift extension has loaded")
