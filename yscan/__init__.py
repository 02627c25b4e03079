from yscan._dispatch import BAD_FORMAT, EOF, ScanOutcome, ScanResult, Slot
from yscan._format import FormatSpec, Specifier, compile_format
from yscan._readers import (
    INT32_MAX,
    INT32_MIN,
    INT64_MAX,
    INT64_MIN,
    UINT32_MAX,
    UINT64_MAX,
    ReadFailure,
)
from yscan._settings import ScannerSettings
from yscan.scanner import Scanner, ScannerStats
from yscan.sources import ByteSource, MemorySource, StreamSource
