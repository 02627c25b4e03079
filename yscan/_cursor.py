import logging

from yscan._settings import DEFAULT_BUFFER_SIZE
from yscan.sources import ByteSource

logger = logging.getLogger(__name__)

EOF = -1
WHITESPACE = frozenset(b" \t\n\r\f\v")


class BufferedCursor:
    """
    Fixed size byte buffer over a byte source with a read position, the only reader of the source
    """

    source: ByteSource
    buffer: bytearray
    read_pos: int
    valid_len: int
    exhausted: bool
    refills: int
    consumed: int

    def __init__(self, source: ByteSource, capacity: int = DEFAULT_BUFFER_SIZE) -> None:
        self.source = source
        self.buffer = bytearray(capacity)
        self.__view = memoryview(self.buffer)
        self.read_pos = 0
        self.valid_len = 0
        self.exhausted = False
        self.refills = 0
        self.consumed = 0

    @property
    def capacity(self) -> int:
        return len(self.buffer)

    def refill(self) -> None:
        """
        Reload the drained buffer from the source, once exhausted the source is never asked again
        """
        if self.exhausted:
            self.valid_len = self.read_pos
            return

        size = self.__read(self.__view)
        if size == 0:
            self.exhausted = True
            return
        self.read_pos = 0
        self.valid_len = size

    def peek(self) -> int:
        if self.read_pos >= self.valid_len:
            self.refill()
            if self.read_pos >= self.valid_len:
                return EOF
        return self.buffer[self.read_pos]

    def consume(self) -> int:
        if self.read_pos >= self.valid_len:
            self.refill()
            if self.read_pos >= self.valid_len:
                return EOF
        byte = self.buffer[self.read_pos]
        self.read_pos += 1
        self.consumed += 1
        return byte

    def lookahead(self, offset: int) -> int:
        """
        Byte at offset positions past the cursor without consuming anything.
        The unread tail is moved to the front of the buffer when the window crosses its end.
        """
        if offset == 0:
            return self.peek()
        if not 0 < offset < self.capacity:
            raise ValueError(f"lookahead offset must be between 0 and {self.capacity - 1}")

        while self.read_pos + offset >= self.valid_len:
            if self.read_pos >= self.valid_len:
                self.refill()
                if self.read_pos >= self.valid_len:
                    return EOF
                continue
            if self.exhausted:
                return EOF
            self.__compact()
            size = self.__read(self.__view[self.valid_len :])
            if size == 0:
                self.exhausted = True
                return EOF
            self.valid_len += size
        return self.buffer[self.read_pos + offset]

    def skip_whitespace(self) -> None:
        buffer = self.buffer
        while True:
            if self.read_pos >= self.valid_len:
                self.refill()
                if self.read_pos >= self.valid_len:
                    return
            position = self.read_pos
            end = self.valid_len
            while position < end and buffer[position] in WHITESPACE:
                position += 1
            self.consumed += position - self.read_pos
            self.read_pos = position
            if position < end:
                return

    def at_eof(self) -> bool:
        self.skip_whitespace()
        return self.peek() == EOF

    def __compact(self) -> None:
        tail = self.valid_len - self.read_pos
        self.buffer[:tail] = self.buffer[self.read_pos : self.valid_len]
        self.read_pos = 0
        self.valid_len = tail

    def __read(self, view: memoryview) -> int:
        self.refills += 1
        try:
            size = self.source.readinto(view)
        except (OSError, ValueError) as exc:
            # ValueError: the stream was closed underneath the scanner
            logger.warning("Reading from %s source failed, treating it as exhausted: %s", self.source.name, exc)
            size = 0
        if not size:
            logger.debug("Byte source %s exhausted after %d bytes", self.source.name, self.consumed)
            return 0
        return size
