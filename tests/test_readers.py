import sys

import pytest

from yscan._cursor import EOF, BufferedCursor
from yscan._readers import (
    INT32_MAX,
    INT32_MIN,
    INT64_MAX,
    INT64_MIN,
    UINT32_MAX,
    UINT64_MAX,
    ReadFailure,
    read_char,
    read_double,
    read_int32,
    read_int64,
    read_line,
    read_nonempty_line,
    read_token,
    read_uint32,
    read_uint64,
)
from yscan.sources import MemorySource


def cursor_for(data: bytes, capacity: int = 4) -> BufferedCursor:
    return BufferedCursor(MemorySource(data), capacity=capacity)


@pytest.mark.parametrize(
    "data,result",
    [
        (b"42", 42),
        (b"-7", -7),
        (b"+15", 15),
        (b"007", 7),
        (b"-0", 0),
        (b"  \n\t 2147483647", INT32_MAX),
        (b"-2147483648", INT32_MIN),
        (b"2147483648", INT32_MAX),
        (b"-2147483649", INT32_MIN),
        (b"99999999999", INT32_MAX),
        (b"-99999999999999999999999999", INT32_MIN),
    ],
)
def test_read_int32(data: bytes, result: int) -> None:
    """It should read 32-bit integers and saturate values out of range"""
    outcome = read_int32(cursor_for(data))

    assert outcome.ok
    assert outcome.value == result


@pytest.mark.parametrize(
    "data,result",
    [
        (b"9223372036854775807", INT64_MAX),
        (b"-9223372036854775808", INT64_MIN),
        (b"9223372036854775808", INT64_MAX),
        (b"-9223372036854775809", INT64_MIN),
        (b"123456789012345678901234567890", INT64_MAX),
        (b"0", 0),
    ],
)
def test_read_int64(data: bytes, result: int) -> None:
    """It should read 64-bit integers and saturate values out of range"""
    outcome = read_int64(cursor_for(data))

    assert outcome.ok
    assert outcome.value == result


@pytest.mark.parametrize("digits", range(1, 20))
@pytest.mark.parametrize("sign", ["", "+", "-"])
def test_read_int64_exact(digits: int, sign: str) -> None:
    """It should reproduce every value that fits into 64 bits exactly"""
    text = sign + "1234567890123456789"[:digits]

    outcome = read_int64(cursor_for(text.encode()))

    assert outcome.value == int(text)


@pytest.mark.parametrize(
    "data,result",
    [
        (b"123", 123),
        (b"+5", 5),
        (b"4294967295", UINT32_MAX),
        (b"2147483648", 2147483648),
        (b"4294967296", UINT32_MAX),
    ],
)
def test_read_uint32(data: bytes, result: int) -> None:
    """It should read unsigned 32-bit integers and saturate values out of range"""
    assert read_uint32(cursor_for(data)).value == result


@pytest.mark.parametrize(
    "data,result",
    [
        (b"18446744073709551615", UINT64_MAX),
        (b"9223372036854775808", 9223372036854775808),
        (b"18446744073709551616", UINT64_MAX),
    ],
)
def test_read_uint64(data: bytes, result: int) -> None:
    """It should read unsigned 64-bit integers and saturate values out of range"""
    assert read_uint64(cursor_for(data)).value == result


def test_overflow_consumes_whole_numeral() -> None:
    """It should leave the cursor after all digits of a saturated number"""
    cursor = cursor_for(b"99999999999999999999999 5")

    assert read_int32(cursor).value == INT32_MAX
    assert read_int32(cursor).value == 5


@pytest.mark.parametrize("reader", [read_uint32, read_uint64])
def test_unsigned_rejects_minus(reader) -> None:
    """It should refuse a negative number for unsigned conversions and leave the sign in place"""
    cursor = cursor_for(b"-5")

    outcome = reader(cursor)

    assert outcome.failure == ReadFailure.MISMATCH
    assert cursor.peek() == ord("-")


@pytest.mark.parametrize(
    "data,next_byte",
    [
        (b"abc", ord("a")),
        (b"-x", ord("-")),
        (b"+", ord("+")),
        (b"  -  1", ord("-")),
    ],
)
def test_integer_mismatch_is_not_destructive(data: bytes, next_byte: int) -> None:
    """It should fail without consuming the offending token"""
    cursor = cursor_for(data)

    outcome = read_int32(cursor)

    assert not outcome.ok
    assert outcome.failure == ReadFailure.MISMATCH
    assert outcome.value is None
    assert cursor.peek() == next_byte


@pytest.mark.parametrize("data", [b"", b"   ", b"\n\t\r\n"])
def test_integer_end_of_stream(data: bytes) -> None:
    """It should report the end of stream when no token is left"""
    assert read_int64(cursor_for(data)).failure == ReadFailure.END_OF_STREAM


def test_sign_on_buffer_boundary() -> None:
    """It should read a number whose sign and digits land in different buffer loads"""
    assert read_int32(cursor_for(b"   -12")).value == -12


@pytest.mark.parametrize(
    "data,result",
    [
        (b"3.14", 3.14),
        (b"-2.718", -2.718),
        (b"0.0", 0.0),
        (b"42", 42.0),
        (b"1.23e4", 12300.0),
        (b"-5.67e-8", -5.67e-8),
        (b".5", 0.5),
        (b"5.", 5.0),
        (b"+1E+3", 1000.0),
        (b"1e-400", 0.0),
        (b"1e400", sys.float_info.max),
        (b"-1e400", -sys.float_info.max),
        (b"1e99999999999999999999", sys.float_info.max),
    ],
)
def test_read_double(data: bytes, result: float) -> None:
    """It should read decimal numbers with optional fraction and exponent"""
    outcome = read_double(cursor_for(data))

    assert outcome.ok
    assert outcome.value == pytest.approx(result, rel=1e-12)


@pytest.mark.parametrize(
    "data,result",
    [
        (b"1" + b"0" * 100_005 + b"e-100010", 1e-5),
        (b"0." + b"0" * 100_005 + b"1e100010", 1e4),
    ],
)
def test_double_long_mantissa_exponent(data: bytes, result: float) -> None:
    """It should apply large exponents that are balanced by a long mantissa"""
    cursor = cursor_for(data, capacity=1024)

    outcome = read_double(cursor)

    assert outcome.ok
    assert outcome.value == pytest.approx(result, rel=1e-12)
    assert cursor.peek() == EOF


@pytest.mark.parametrize("data", [b"5ex", b"5e+x", b"5E-"])
def test_double_incomplete_exponent(data: bytes) -> None:
    """It should stop before an exponent marker without digits"""
    cursor = cursor_for(data)

    assert read_double(cursor).value == 5.0
    assert cursor.peek() in (ord("e"), ord("E"))


@pytest.mark.parametrize("data,next_byte", [(b"abc", ord("a")), (b"-abc", ord("-")), (b"+e5", ord("+"))])
def test_double_mismatch(data: bytes, next_byte: int) -> None:
    """It should fail without consuming the offending token"""
    cursor = cursor_for(data)

    assert read_double(cursor).failure == ReadFailure.MISMATCH
    assert cursor.peek() == next_byte


def test_double_end_of_stream() -> None:
    """It should report the end of stream when no token is left"""
    assert read_double(cursor_for(b" \n")).failure == ReadFailure.END_OF_STREAM


def test_read_token() -> None:
    """It should split tokens on whitespace"""
    cursor = cursor_for(b"hello   world\n")

    assert read_token(cursor).value == b"hello"
    assert read_token(cursor).value == b"world"
    assert read_token(cursor).failure == ReadFailure.END_OF_STREAM


def test_read_long_token_across_refills() -> None:
    """It should assemble a token longer than the buffer"""
    cursor = cursor_for(b"abcdefghij klm")

    assert read_token(cursor).value == b"abcdefghij"
    assert read_token(cursor).value == b"klm"


def test_token_capacity() -> None:
    """It should refuse a token longer than the capacity but still consume it"""
    cursor = cursor_for(b"hello world")

    assert read_token(cursor, capacity=3).failure == ReadFailure.CAPACITY
    assert read_token(cursor, capacity=5).value == b"world"


def test_read_char() -> None:
    """It should read raw bytes including whitespace"""
    cursor = cursor_for(b" a\n")

    assert read_char(cursor).value == b" "
    assert read_char(cursor).value == b"a"
    assert read_char(cursor).value == b"\n"
    assert read_char(cursor).failure == ReadFailure.END_OF_STREAM


def test_read_line_terminators() -> None:
    """It should accept LF, CR and CRLF as line terminators"""
    cursor = cursor_for(b"first\r\nsecond\rthird\nfourth")

    lines = [read_line(cursor).value for _ in range(4)]

    assert lines == [b"first", b"second", b"third", b"fourth"]
    assert read_line(cursor).failure == ReadFailure.END_OF_STREAM


def test_read_empty_lines() -> None:
    """It should return empty lines"""
    cursor = cursor_for(b"\n\nx")

    assert read_line(cursor).value == b""
    assert read_line(cursor).value == b""
    assert read_line(cursor).value == b"x"


def test_read_line_capacity() -> None:
    """It should truncate a long line and continue with the next one"""
    cursor = cursor_for(b"abcdef\nxy")

    assert read_line(cursor, capacity=3).value == b"abc"
    assert read_line(cursor, capacity=3).value == b"xy"


def test_read_nonempty_line() -> None:
    """It should skip blank lines before the next line"""
    cursor = cursor_for(b"\n\r\n  spaced\n\nnext")

    assert read_nonempty_line(cursor).value == b"  spaced"
    assert read_nonempty_line(cursor).value == b"next"
    assert read_nonempty_line(cursor).failure == ReadFailure.END_OF_STREAM
    assert cursor.peek() == EOF
