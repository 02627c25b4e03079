from abc import ABC, abstractmethod
import io
from typing import Any, Optional, Union

from yscan.errors import InvalidSourceError

__all__ = ["ByteSource", "MemorySource", "StreamSource", "open_source"]

BytesLike = Union[bytes, bytearray, memoryview]


class ByteSource(ABC):
    """
    Readable stream of bytes, consumed in bulk by the scanner buffer
    """

    name: str = ""

    @abstractmethod
    def readinto(self, buffer: memoryview) -> int:
        """
        Fill the beginning of buffer, return the number of bytes written, 0 means the source is exhausted
        """
        raise NotImplementedError

    def close(self) -> None:
        pass


class MemorySource(ByteSource):
    name = "memory"

    def __init__(self, data: BytesLike) -> None:
        self.__data = memoryview(bytes(data))
        self.__offset = 0

    def readinto(self, buffer: memoryview) -> int:
        chunk = self.__data[self.__offset : self.__offset + len(buffer)]
        size = len(chunk)
        buffer[:size] = chunk
        self.__offset += size
        return size

    @property
    def remaining(self) -> int:
        return len(self.__data) - self.__offset


class StreamSource(ByteSource):
    name = "stream"

    stream: Any
    text_stream: Optional[io.TextIOBase]

    def __init__(self, stream: Any, close_stream: bool = False) -> None:
        self.text_stream = None
        if isinstance(stream, io.TextIOBase):
            if not hasattr(stream, "buffer"):
                raise InvalidSourceError(stream)
            # the wrapper closes its buffer when collected, so it has to outlive this source
            self.text_stream = stream
            stream = stream.buffer
        self.stream = stream
        self.close_stream = close_stream

    def readinto(self, buffer: memoryview) -> int:
        readinto = getattr(self.stream, "readinto", None)
        if readinto is not None:
            # non-blocking streams answer None when no data is ready
            return readinto(buffer) or 0

        data = self.stream.read(len(buffer))
        if not data:
            return 0
        size = len(data)
        buffer[:size] = data
        return size

    def close(self) -> None:
        if self.close_stream:
            (self.text_stream or self.stream).close()


def open_source(source: Any, encoding: str = "utf-8") -> ByteSource:
    if isinstance(source, ByteSource):
        return source
    if isinstance(source, (bytes, bytearray, memoryview)):
        return MemorySource(source)
    if isinstance(source, str):
        return MemorySource(source.encode(encoding))
    if hasattr(source, "readinto") or hasattr(source, "read"):
        return StreamSource(source)
    raise InvalidSourceError(source)
