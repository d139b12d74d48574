"""
Hack Assembly Line Classifier
=============================

This module splits Hack assembly source into classified lines. Hack
assembly has exactly one statement per line, so the "lexer" works a line
at a time rather than producing a token stream.

Line Kinds
----------
- IGNORABLE: blank lines, comments, anything not starting with a
  printable instruction character
- LABEL: ``(NAME)`` declares a jump target
- INSTRUCTION: everything else, handed to the parser verbatim

Only spaces count as indentation. After the spaces, a line is ignorable
when its first character is a control character (tab included), lies
above ``'z'`` in ASCII, or is the comment marker ``/``.

Labels
------
The label name is every character after ``(`` up to the closing ``)``.
A missing ``)`` is tolerated: the rest of the line becomes the name.
Names longer than the configured identifier length are truncated. A name
starting with a digit is rejected, since "@1ABC" could never refer to it.

Example
-------
>>> from hackasm.assembler.lexer import LineClassifier
>>> classifier = LineClassifier("Loop.asm")
>>> classifier.classify("(LOOP)", 1).label
'LOOP'
>>> classifier.classify("   D=M // load", 2).text
'D=M // load'
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterable, Iterator, Optional
import logging

from hackasm.config import AssemblerConfig
from hackasm.errors import AssemblySyntaxError, SourceLocation

logger = logging.getLogger(__name__)


# Comment marker; "//" in practice but one slash is enough to skip the line
COMMENT_CHAR = "/"
LABEL_OPEN = "("
LABEL_CLOSE = ")"

# Highest character that can start an instruction
LAST_INSTRUCTION_CHAR = "z"


class LineKind(Enum):
    """Classification of a source line."""
    IGNORABLE = auto()
    LABEL = auto()
    INSTRUCTION = auto()


@dataclass(frozen=True)
class SourceLine:
    """
    One classified line of source.

    Attributes:
        kind: Line classification
        text: Line with leading spaces and line terminator removed
        line: Line number (1-indexed)
        column: Column of the first significant character (1-indexed)
        filename: Name of the source file
        label: Label name for LABEL lines, None otherwise
    """
    kind: LineKind
    text: str
    line: int
    column: int
    filename: str
    label: Optional[str] = None

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)

    @property
    def original(self) -> str:
        """The line as written, indentation included."""
        return " " * (self.column - 1) + self.text

    @property
    def is_instruction(self) -> bool:
        return self.kind is LineKind.INSTRUCTION

    @property
    def is_label(self) -> bool:
        return self.kind is LineKind.LABEL


class LineClassifier:
    """
    Classifies raw source lines.

    Usage:
        classifier = LineClassifier("Prog.asm")
        for line in classifier.classify_all(open("Prog.asm")):
            ...

    Attributes:
        filename: Name of the source file (for error reporting)
        config: Limits for line and identifier length
    """

    def __init__(self, filename: str = "<input>",
                 config: Optional[AssemblerConfig] = None):
        self.filename = filename
        self.config = config or AssemblerConfig()

    def classify_all(self, lines: Iterable[str]) -> Iterator[SourceLine]:
        """Classify every line, numbering from 1."""
        for number, raw in enumerate(lines, start=1):
            yield self.classify(raw, number)

    def classify(self, raw: str, line_number: int) -> SourceLine:
        """
        Classify one raw line.

        Args:
            raw: Line text, with or without its line terminator
            line_number: 1-indexed line number for diagnostics

        Returns:
            The classified SourceLine

        Raises:
            AssemblySyntaxError: Overlong statement line, empty label, label
                starting with a digit, or overlong label name in strict mode
        """
        body = raw.rstrip("\r\n")
        text = body.lstrip(" ")
        column = len(body) - len(text) + 1

        if not text or self._is_ignorable(text[0]):
            return SourceLine(LineKind.IGNORABLE, text, line_number, column, self.filename)

        if len(body) > self.config.max_line_length:
            raise AssemblySyntaxError(
                f"line is {len(body)} characters long "
                f"(limit {self.config.max_line_length})",
                location=SourceLocation(self.filename, line_number,
                                        self.config.max_line_length + 1),
                source_line=body,
            )

        if text[0] == LABEL_OPEN:
            label = self._label_name(text, body, line_number, column)
            return SourceLine(LineKind.LABEL, text, line_number, column,
                              self.filename, label=label)

        return SourceLine(LineKind.INSTRUCTION, text, line_number, column, self.filename)

    @staticmethod
    def _is_ignorable(first: str) -> bool:
        return first < " " or first > LAST_INSTRUCTION_CHAR or first == COMMENT_CHAR

    def _label_name(self, text: str, body: str, line_number: int, column: int) -> str:
        location = SourceLocation(self.filename, line_number, column)
        end = text.find(LABEL_CLOSE)
        if end < 0:
            name = text[1:].rstrip()
            logger.warning(f"{location}: unterminated label '{name}'")
        else:
            name = text[1:end]

        if not name:
            raise AssemblySyntaxError(
                "empty label name",
                location=location,
                source_line=body,
            )

        if name[0].isdigit():
            raise AssemblySyntaxError(
                f"label '{name}' starts with a digit",
                location=location,
                source_line=body,
                hint="labels cannot start with a digit",
            )

        return truncate_identifier(name, self.config, location, body)


def truncate_identifier(
    name: str,
    config: AssemblerConfig,
    location: Optional[SourceLocation] = None,
    source_line: Optional[str] = None,
) -> str:
    """
    Apply the identifier length limit.

    Overlong names are cut to config.max_identifier_length, or rejected
    when config.strict_identifiers is set.

    Raises:
        AssemblySyntaxError: In strict mode, for names over the limit
    """
    limit = config.max_identifier_length
    if len(name) <= limit:
        return name

    if config.strict_identifiers:
        raise AssemblySyntaxError(
            f"identifier '{name}' is longer than {limit} characters",
            location=location,
            source_line=source_line,
        )

    logger.warning(f"{location or '<input>'}: identifier '{name}' truncated to {limit} characters")
    return name[:limit]
