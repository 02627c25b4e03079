import codecs
from dataclasses import dataclass
from typing import List, Optional

from yscan.errors import InvalidScannerConfig

DEFAULT_BUFFER_SIZE = 1 << 22
# lookahead() needs room for a sign, a marker and one digit
MIN_BUFFER_SIZE = 4


@dataclass(frozen=True)
class ScannerSettings:
    buffer_size: int = DEFAULT_BUFFER_SIZE
    token_capacity: Optional[int] = None
    line_capacity: Optional[int] = None
    decode: bool = True
    encoding: str = "utf-8"
    errors: str = "surrogateescape"

    def __post_init__(self) -> None:
        validate_settings(self)


def __is_capacity(value: Optional[int]) -> bool:
    return value is None or (isinstance(value, int) and not isinstance(value, bool) and value >= 0)


def validate_settings(settings: ScannerSettings) -> None:
    errors: List[str] = []
    if not isinstance(settings.buffer_size, int) or isinstance(settings.buffer_size, bool):
        errors += ["buffer_size should be an integer"]
    elif settings.buffer_size < MIN_BUFFER_SIZE:
        errors += [f"buffer_size should be at least {MIN_BUFFER_SIZE} bytes"]
    if not __is_capacity(settings.token_capacity):
        errors += ["token_capacity should be None or a non-negative integer"]
    if not __is_capacity(settings.line_capacity):
        errors += ["line_capacity should be None or a non-negative integer"]
    if not isinstance(settings.decode, bool):
        errors += ["decode should be bool"]
    if not isinstance(settings.encoding, str):
        errors += ["encoding should be a string"]
    else:
        try:
            codecs.lookup(settings.encoding)
        except LookupError:
            errors += [f"unknown encoding {settings.encoding!r}"]
    if not isinstance(settings.errors, str):
        errors += ["errors should be a string"]

    if errors:
        raise InvalidScannerConfig(errors)
