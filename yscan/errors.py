from typing import List


class YScanError(Exception):
    message: str

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class YScanValueError(YScanError, ValueError):
    pass


class YScanTypeError(YScanError, TypeError):
    pass


class InvalidScannerConfig(YScanValueError):
    def __init__(self, errors: List[str]) -> None:
        super().__init__(f"Invalid scanner settings - {', '.join(errors)}")


class InvalidFormatError(YScanValueError):
    fmt: str
    position: int

    def __init__(self, fmt: str, position: int, error_message: str) -> None:
        super().__init__(message=f"Invalid format '{fmt}': {error_message} at position {position}")
        self.fmt = fmt
        self.position = position


class InvalidSourceError(YScanTypeError):
    def __init__(self, source: object) -> None:
        super().__init__(f"Unsupported byte source type: {type(source).__name__}")


class ScanArgumentsError(YScanTypeError):
    def __init__(self, expected: int, received: int) -> None:
        super().__init__(f"Format expects {expected} output slots, {received} given")
