"""Parser for the concept map DSL.

The DSL has two statement forms::

    software -- implements -> functionality

    software:
    A computer program or system
    ---

Parsing fails fast: the first malformed statement aborts the whole parse and
is reported as a single :class:`~cartograph.models.ParseError`. Orphaned and
missing definitions are reported as non-fatal warnings after a successful
parse.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Dict, Iterator, List, Set, Tuple, Union

from .models import ParsedDeclarations, ParseError, ParseWarning, Predicate

logger = logging.getLogger(__name__)

PREDICATE_PATTERN = re.compile(r"^(.*?)--(.*?)->(.*)$")
DEFINITION_TERMINATOR = "---"
RESERVED_TOKENS = ("--", "->")


class DSLSyntaxError(Exception):
    """Raised by the scanner on the first malformed statement."""

    def __init__(self, line: int, message: str) -> None:
        super().__init__(message)
        self.line = line
        self.message = message


@dataclass(frozen=True)
class Definition:
    concept: str
    text: str


Statement = Union[Predicate, Definition]


# ===================================================================
# Statement scanning
# ===================================================================

def parse_predicate(line: str, line_number: int) -> Predicate:
    """Parse a single ``source -- relationship -> target`` line."""
    if "\n" in line:
        raise DSLSyntaxError(
            line_number,
            f"Newlines not allowed in predicate components on line {line_number}",
        )

    match = PREDICATE_PATTERN.match(line)
    if not match:
        raise DSLSyntaxError(line_number, f"Invalid predicate syntax on line {line_number}: {line}")

    source, relationship, target = (part.strip() for part in match.groups())
    if not source or not relationship or not target:
        raise DSLSyntaxError(
            line_number,
            f"Empty components not allowed in predicate on line {line_number}",
        )

    for label, value in (("source concept", source), ("relationship", relationship), ("target concept", target)):
        if any(token in value for token in RESERVED_TOKENS):
            raise DSLSyntaxError(
                line_number,
                f"Invalid tokens in {label} on line {line_number}: {value}",
            )

    return Predicate(source=source, relationship=relationship, target=target)


def scan_statements(lines: List[str]) -> Iterator[Tuple[int, Statement]]:
    """Yield ``(line_number, statement)`` pairs in source order.

    Raises :class:`DSLSyntaxError` on the first malformed statement. Callers
    decide whether to stop there; the scanner itself keeps no result state.
    """
    defined: Set[str] = set()
    i = 0
    while i < len(lines):
        line = lines[i].strip()
        line_number = i + 1

        if not line:
            i += 1
            continue

        if not line.endswith(":"):
            yield line_number, parse_predicate(line, line_number)
            i += 1
            continue

        concept = line[:-1].strip()
        if not concept:
            raise DSLSyntaxError(line_number, f"Empty concept name in definition on line {line_number}")
        if concept in defined:
            raise DSLSyntaxError(
                line_number,
                f"Duplicate definition for concept '{concept}' on line {line_number}",
            )

        i += 1
        body: List[str] = []
        while i < len(lines) and lines[i].strip() != DEFINITION_TERMINATOR:
            body.append(lines[i])
            i += 1

        if i >= len(lines):
            raise DSLSyntaxError(
                line_number,
                f"Missing definition terminator '{DEFINITION_TERMINATOR}' for concept "
                f"'{concept}' starting on line {line_number}",
            )

        defined.add(concept)
        yield line_number, Definition(concept, "\n".join(body).strip())
        i += 1  # skip the terminator


# ===================================================================
# Public entry point
# ===================================================================

def parse_dsl(text: str) -> ParsedDeclarations:
    """Parse concept map DSL text into declarations, failing fast on errors."""
    predicates: Dict[Predicate, int] = {}
    definitions: Dict[str, str] = {}
    definition_lines: Dict[str, int] = {}

    try:
        for line_number, statement in scan_statements(text.split("\n")):
            if isinstance(statement, Definition):
                definitions[statement.concept] = statement.text
                definition_lines[statement.concept] = line_number
            else:
                predicates.setdefault(statement, line_number)
    except DSLSyntaxError as exc:
        logger.debug("DSL parse aborted at line %d: %s", exc.line, exc.message)
        return ParsedDeclarations(
            errors=[ParseError(line=exc.line, column=1, message=exc.message, kind="syntax")],
        )

    warnings = _definition_warnings(predicates, definitions, definition_lines)
    logger.debug(
        "Parsed %d predicates, %d definitions, %d warnings",
        len(predicates), len(definitions), len(warnings),
    )
    return ParsedDeclarations(
        predicates=list(predicates),
        definitions=definitions,
        warnings=warnings,
    )


def _definition_warnings(
    predicates: Dict[Predicate, int],
    definitions: Dict[str, str],
    definition_lines: Dict[str, int],
) -> List[ParseWarning]:
    # concept -> first line referencing it
    referenced: Dict[str, int] = {}
    for predicate, line_number in predicates.items():
        referenced.setdefault(predicate.source, line_number)
        referenced.setdefault(predicate.target, line_number)

    warnings: List[ParseWarning] = []
    for concept in definitions:
        if concept not in referenced:
            warnings.append(ParseWarning(
                line=definition_lines[concept],
                column=1,
                message=f"Definition for '{concept}' exists but concept is not used in any predicates",
                kind="orphaned_definition",
            ))

    for concept, line_number in referenced.items():
        if concept not in definitions:
            warnings.append(ParseWarning(
                line=line_number,
                column=1,
                message=f"Concept '{concept}' used in predicates but has no definition",
                kind="missing_definition",
            ))
    return warnings
