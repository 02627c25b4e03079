import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

from yscan._cursor import BufferedCursor
from yscan._format import DirectiveType, FormatSpec, Specifier
from yscan._readers import (
    ReadFailure,
    ReadOutcome,
    read_char,
    read_double,
    read_int32,
    read_int64,
    read_token,
    read_uint32,
    read_uint64,
)
from yscan._settings import ScannerSettings

logger = logging.getLogger(__name__)

EOF = -1
BAD_FORMAT = -2


class ScanOutcome(str, Enum):
    COMPLETE = "COMPLETE"
    STOPPED = "STOPPED"
    BAD_FORMAT = "BAD_FORMAT"


@dataclass
class Slot:
    """
    Output destination for one conversion, left untouched when the scan stops before reaching it
    """

    value: Any = None


@dataclass(frozen=True)
class ScanResult:
    count: int
    outcome: ScanOutcome
    values: Tuple[Any, ...] = ()
    failure: Optional[ReadFailure] = None
    error_message: Optional[str] = None

    @property
    def status(self) -> int:
        if self.outcome == ScanOutcome.BAD_FORMAT:
            return BAD_FORMAT
        if self.outcome == ScanOutcome.STOPPED and self.count == 0:
            return EOF
        return self.count

    def __bool__(self) -> bool:
        return self.outcome == ScanOutcome.COMPLETE


READERS: Dict[Specifier, Callable[[BufferedCursor], ReadOutcome]] = {
    Specifier.INT32: read_int32,
    Specifier.UINT32: read_uint32,
    Specifier.INT64: read_int64,
    Specifier.UINT64: read_uint64,
    Specifier.DOUBLE: read_double,
    Specifier.CHAR: read_char,
}


def decode_outcome(outcome: ReadOutcome, settings: ScannerSettings) -> ReadOutcome:
    if not outcome.ok or not settings.decode or not isinstance(outcome.value, bytes):
        return outcome
    try:
        return ReadOutcome(outcome.value.decode(settings.encoding, settings.errors))
    except UnicodeDecodeError as exc:
        logger.debug("Unable to decode %r: %s", outcome.value, exc)
        return ReadOutcome(failure=ReadFailure.DECODE)


def convert(cursor: BufferedCursor, specifier: Specifier, settings: ScannerSettings) -> ReadOutcome:
    if specifier == Specifier.TOKEN:
        outcome = read_token(cursor, settings.token_capacity)
    else:
        outcome = READERS[specifier](cursor)
    # a single byte may be part of a multi-byte character, %c hands it out raw
    if specifier == Specifier.CHAR:
        return outcome
    return decode_outcome(outcome, settings)


def dispatch(
    cursor: BufferedCursor, spec: FormatSpec, settings: ScannerSettings, slots: Sequence[Slot] = ()
) -> ScanResult:
    values = []
    skip_pending = False
    for directive in spec.directives:
        if directive.type == DirectiveType.WHITESPACE:
            skip_pending = True
            continue
        if directive.type == DirectiveType.LITERAL:
            # literals are not matched against the input
            skip_pending = False
            continue

        specifier = directive.specifier
        assert specifier is not None
        if skip_pending and specifier.honors_whitespace_skip:
            cursor.skip_whitespace()
        skip_pending = False

        outcome = convert(cursor, specifier, settings)
        if not outcome.ok:
            logger.debug(
                "Scan '%s' stopped at %s (position %d) after %d conversions: %s",
                spec.fmt,
                directive.text,
                directive.position,
                len(values),
                outcome.failure,
            )
            return ScanResult(len(values), ScanOutcome.STOPPED, tuple(values), outcome.failure)

        if slots:
            slots[len(values)].value = outcome.value
        values.append(outcome.value)

    return ScanResult(len(values), ScanOutcome.COMPLETE, tuple(values))
