import sys
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from yscan._cursor import EOF, WHITESPACE, BufferedCursor

INT32_MIN = -(1 << 31)
INT32_MAX = (1 << 31) - 1
UINT32_MAX = (1 << 32) - 1
INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1
UINT64_MAX = (1 << 64) - 1

# far outside the double range once the mantissa digits are accounted for
MAX_EXPONENT = 100_000

PLUS = ord("+")
MINUS = ord("-")
DOT = ord(".")
ZERO = ord("0")
NINE = ord("9")
EXPONENT_MARKERS = (ord("e"), ord("E"))
LINE_TERMINATORS = (ord("\n"), ord("\r"))
CR = ord("\r")
LF = ord("\n")


class ReadFailure(str, Enum):
    END_OF_STREAM = "END_OF_STREAM"
    MISMATCH = "MISMATCH"
    CAPACITY = "CAPACITY"
    DECODE = "DECODE"


@dataclass(frozen=True)
class ReadOutcome:
    value: Any = None
    failure: Optional[ReadFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


AT_END = ReadOutcome(failure=ReadFailure.END_OF_STREAM)
MISMATCH = ReadOutcome(failure=ReadFailure.MISMATCH)
OVER_CAPACITY = ReadOutcome(failure=ReadFailure.CAPACITY)


def __is_digit(byte: int) -> bool:
    return ZERO <= byte <= NINE


def __read_integer(cursor: BufferedCursor, minimum: int, maximum: int) -> ReadOutcome:
    cursor.skip_whitespace()
    first = cursor.peek()
    if first == EOF:
        return AT_END

    digit_offset = 0
    if first in (PLUS, MINUS):
        if first == MINUS and minimum == 0:
            return MISMATCH
        digit_offset = 1
    # the sign stays in the stream when no digit follows it
    if not __is_digit(cursor.lookahead(digit_offset)):
        return MISMATCH
    if digit_offset:
        cursor.consume()

    negative = first == MINUS
    limit = -minimum if negative else maximum
    value = 0
    overflow = False
    while __is_digit(cursor.peek()):
        digit = cursor.consume() - ZERO
        if overflow:
            continue
        value = value * 10 + digit
        if value > limit:
            overflow = True

    if overflow:
        return ReadOutcome(minimum if negative else maximum)
    return ReadOutcome(-value if negative else value)


def read_int32(cursor: BufferedCursor) -> ReadOutcome:
    return __read_integer(cursor, INT32_MIN, INT32_MAX)


def read_uint32(cursor: BufferedCursor) -> ReadOutcome:
    return __read_integer(cursor, 0, UINT32_MAX)


def read_int64(cursor: BufferedCursor) -> ReadOutcome:
    return __read_integer(cursor, INT64_MIN, INT64_MAX)


def read_uint64(cursor: BufferedCursor) -> ReadOutcome:
    return __read_integer(cursor, 0, UINT64_MAX)


def __consume_digits(cursor: BufferedCursor) -> bytes:
    digits = bytearray()
    while __is_digit(cursor.peek()):
        digits.append(cursor.consume())
    return bytes(digits)


def __consume_exponent(cursor: BufferedCursor, limit: int) -> int:
    exponent = 0
    while __is_digit(cursor.peek()):
        digit = cursor.consume() - ZERO
        if exponent <= limit:
            exponent = exponent * 10 + digit
    return min(exponent, limit)


def read_double(cursor: BufferedCursor) -> ReadOutcome:
    """
    Decimal floating point number with an optional exponent.
    Results beyond the double range saturate to the largest finite double of the same sign.
    """
    cursor.skip_whitespace()
    first = cursor.peek()
    if first == EOF:
        return AT_END

    sign_offset = 1 if first in (PLUS, MINUS) else 0
    lead = cursor.lookahead(sign_offset)
    if not (__is_digit(lead) or lead == DOT):
        return MISMATCH
    if sign_offset:
        cursor.consume()

    integer_part = __consume_digits(cursor)
    fraction_part = b""
    if cursor.peek() == DOT:
        cursor.consume()
        fraction_part = __consume_digits(cursor)

    exponent = 0
    if cursor.peek() in EXPONENT_MARKERS:
        exponent_sign = cursor.lookahead(1)
        digit_offset = 2 if exponent_sign in (PLUS, MINUS) else 1
        # "5e" or "5e+x" ends the number before the marker
        if __is_digit(cursor.lookahead(digit_offset)):
            for _ in range(digit_offset):
                cursor.consume()
            # long mantissas shift the decimal point, so the cap grows with them
            exponent = __consume_exponent(cursor, MAX_EXPONENT + len(integer_part) + len(fraction_part))
            if exponent_sign == MINUS:
                exponent = -exponent

    literal = b"%s.%se%d" % (integer_part or b"0", fraction_part or b"0", exponent)
    value = float(literal.decode("ascii"))
    if value == float("inf"):
        value = sys.float_info.max
    return ReadOutcome(-value if first == MINUS else value)


def read_token(cursor: BufferedCursor, capacity: Optional[int] = None) -> ReadOutcome:
    """
    Whitespace delimited token, a token longer than capacity is consumed but reported as a failure
    """
    cursor.skip_whitespace()
    if cursor.peek() == EOF:
        return AT_END

    token = bytearray()
    overflow = False
    while True:
        byte = cursor.peek()
        if byte == EOF or byte in WHITESPACE:
            break
        cursor.consume()
        if capacity is not None and len(token) >= capacity:
            overflow = True
            continue
        token.append(byte)

    if overflow:
        return OVER_CAPACITY
    return ReadOutcome(bytes(token))


def read_char(cursor: BufferedCursor) -> ReadOutcome:
    byte = cursor.consume()
    if byte == EOF:
        return AT_END
    return ReadOutcome(bytes((byte,)))


def read_line(cursor: BufferedCursor, capacity: Optional[int] = None) -> ReadOutcome:
    """
    Bytes up to the next line terminator, which is consumed but not returned.
    Bytes past capacity are consumed and dropped.
    """
    byte = cursor.consume()
    if byte == EOF:
        return AT_END

    line = bytearray()
    while byte != EOF and byte not in LINE_TERMINATORS:
        if capacity is None or len(line) < capacity:
            line.append(byte)
        byte = cursor.consume()
    if byte == CR and cursor.peek() == LF:
        cursor.consume()
    return ReadOutcome(bytes(line))


def read_nonempty_line(cursor: BufferedCursor, capacity: Optional[int] = None) -> ReadOutcome:
    while cursor.peek() in LINE_TERMINATORS:
        cursor.consume()
    return read_line(cursor, capacity)
