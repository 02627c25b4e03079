import logging
from dataclasses import dataclass
from types import TracebackType
from typing import Any, Callable, Iterator, Optional, Tuple, Type, Union

from yscan._cursor import BufferedCursor
from yscan._dispatch import ScanOutcome, ScanResult, Slot, decode_outcome, dispatch
from yscan._format import compile_format
from yscan._readers import (
    ReadOutcome,
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
from yscan._settings import ScannerSettings
from yscan.errors import InvalidFormatError, ScanArgumentsError
from yscan.sources import ByteSource, StreamSource, open_source

logger = logging.getLogger(__name__)

Text = Union[str, bytes]


@dataclass(frozen=True)
class ScannerStats:
    refills: int
    consumed: int
    exhausted: bool


class Scanner:
    """
    Scanning session over one byte source.

    scan() converts whitespace delimited fields described by a format string:

        with Scanner.open("numbers.txt") as scanner:
            for n, x, name in scanner.scan_iter("%d %lf %s"):
                ...

    Data problems (end of input, a token of the wrong shape) never raise, the scan stops and
    ScanResult reports how many conversions succeeded before it.
    """

    settings: ScannerSettings
    source: ByteSource
    cursor: BufferedCursor

    def __init__(self, source: Any, settings: Optional[ScannerSettings] = None) -> None:
        self.settings = settings if settings is not None else ScannerSettings()
        self.source = open_source(source, self.settings.encoding)
        self.cursor = BufferedCursor(self.source, self.settings.buffer_size)

    @classmethod
    def from_bytes(
        cls, data: Union[bytes, bytearray, memoryview, str], settings: Optional[ScannerSettings] = None
    ) -> "Scanner":
        return cls(data, settings)

    @classmethod
    def open(cls, path: Any, settings: Optional[ScannerSettings] = None) -> "Scanner":
        # pylint: disable=consider-using-with
        stream = open(path, "rb", buffering=0)
        return cls(StreamSource(stream, close_stream=True), settings)

    def __enter__(self) -> "Scanner":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_value: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        self.close()

    def close(self) -> None:
        self.source.close()

    @property
    def exhausted(self) -> bool:
        return self.cursor.exhausted

    def at_eof(self) -> bool:
        return self.cursor.at_eof()

    def stats(self) -> ScannerStats:
        return ScannerStats(refills=self.cursor.refills, consumed=self.cursor.consumed, exhausted=self.cursor.exhausted)

    def scan(self, fmt: str, *slots: Slot) -> ScanResult:
        try:
            spec = compile_format(fmt)
        except InvalidFormatError as exc:
            logger.debug("Rejected format: %s", exc.message)
            return ScanResult(0, ScanOutcome.BAD_FORMAT, error_message=exc.message)

        if slots and len(slots) != spec.arity:
            raise ScanArgumentsError(expected=spec.arity, received=len(slots))
        return dispatch(self.cursor, spec, self.settings, slots)

    def scan_iter(self, fmt: str) -> Iterator[Tuple[Any, ...]]:
        """
        Yield converted values for as long as every conversion of the format succeeds
        """
        spec = compile_format(fmt)
        if spec.arity == 0:
            raise InvalidFormatError(fmt=fmt, position=0, error_message="format has no conversions to repeat")

        while True:
            result = dispatch(self.cursor, spec, self.settings)
            if not result:
                return
            yield result.values

    def read_int(self) -> Optional[int]:
        return self.__read(read_int32)

    def read_uint(self) -> Optional[int]:
        return self.__read(read_uint32)

    def read_int64(self) -> Optional[int]:
        return self.__read(read_int64)

    def read_uint64(self) -> Optional[int]:
        return self.__read(read_uint64)

    def read_float(self) -> Optional[float]:
        return self.__read(read_double)

    def read_token(self, capacity: Optional[int] = None) -> Optional[Text]:
        return self.__read(read_token, capacity if capacity is not None else self.settings.token_capacity)

    def read_char(self) -> Optional[bytes]:
        outcome = read_char(self.cursor)
        return outcome.value if outcome.ok else None

    def read_line(self, capacity: Optional[int] = None) -> Optional[Text]:
        return self.__read(read_line, capacity if capacity is not None else self.settings.line_capacity)

    def read_nonempty_line(self, capacity: Optional[int] = None) -> Optional[Text]:
        return self.__read(read_nonempty_line, capacity if capacity is not None else self.settings.line_capacity)

    def __read(self, reader: Callable[..., ReadOutcome], *args: Any) -> Any:
        outcome = decode_outcome(reader(self.cursor, *args), self.settings)
        return outcome.value if outcome.ok else None
