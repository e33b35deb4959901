"""Stream plumbing between a child process and its observers.

Each of the child's output pipes is drained by a StreamTee thread that fans
every chunk out to up to three destinations:

- a CaptureBuffer (always), read back after the child exits
- a live echo stream (unless hidden), usually the host terminal
- a StreamChannel (only when hooks apply), consumed by the hook scanner

The child's stdin is wrapped in an InputWriter so the two hook scanners can
share it.
"""

import logging
import threading
from typing import BinaryIO

logger = logging.getLogger(__name__)

# Bytes requested from the child's pipe per read
PIPE_READ_SIZE = 4096


class CaptureBuffer:
    """Append-only accumulator of everything a child wrote to one stream."""

    def __init__(self) -> None:
        self._data = bytearray()
        self._lock = threading.Lock()

    def append(self, chunk: bytes) -> None:
        with self._lock:
            self._data.extend(chunk)

    def getvalue(self) -> bytes:
        """Return a copy of the captured bytes. Does not drain the buffer."""
        with self._lock:
            return bytes(self._data)

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)


class StreamChannel:
    """In-memory pipe from a StreamTee to a hook scanner.

    Writes never block. read() blocks until bytes are available or the channel
    is closed; after close it drains what is left and then returns b"".
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._buffer = bytearray()
        self._closed = False
        self._cond = threading.Condition()

    @property
    def closed(self) -> bool:
        with self._cond:
            return self._closed

    def write(self, chunk: bytes) -> None:
        with self._cond:
            if self._closed:
                raise ValueError(f"write to closed {self.name} channel")
            self._buffer.extend(chunk)
            self._cond.notify_all()

    def read(self, size: int) -> bytes:
        """Read up to `size` bytes, blocking until data arrives or the channel closes.

        Returns:
            Up to `size` bytes, or b"" once the channel is closed and drained
        """
        with self._cond:
            while not self._buffer and not self._closed:
                self._cond.wait()
            chunk = bytes(self._buffer[:size])
            del self._buffer[:size]
            return chunk

    def close(self) -> None:
        """Close the channel, waking any blocked reader.

        Raises:
            ValueError: If the channel was already closed
        """
        with self._cond:
            if self._closed:
                raise ValueError(f"{self.name} channel closed twice")
            self._closed = True
            self._cond.notify_all()
        logger.debug("Closed %s channel", self.name)


class StreamTee:
    """Thread draining one child output pipe into its destinations.

    The thread exits when the pipe reaches end-of-file. It does not close the
    channel; that is the exit supervisor's job.
    """

    def __init__(
        self,
        name: str,
        source: BinaryIO,
        capture: CaptureBuffer,
        echo: BinaryIO | None,
        channel: StreamChannel | None,
    ) -> None:
        self.name = name
        self._source = source
        self._capture = capture
        self._echo = echo
        self._channel = channel
        self._thread = threading.Thread(target=self._pump, name=f"tee-{name}", daemon=True)

    def start(self) -> None:
        self._thread.start()

    def join(self, timeout: float | None = None) -> None:
        self._thread.join(timeout)

    def is_alive(self) -> bool:
        return self._thread.is_alive()

    def _write_echo(self, chunk: bytes) -> None:
        assert self._echo is not None
        try:
            self._echo.write(chunk)
            self._echo.flush()
        except (OSError, ValueError) as e:
            # Capture and hooks carry on without the echo
            logger.warning("failed to echo %s, echo disabled (%s)", self.name, e)
            self._echo = None

    def _pump(self) -> None:
        try:
            while True:
                chunk = self._source.read(PIPE_READ_SIZE)
                if not chunk:
                    break
                self._capture.append(chunk)
                if self._echo is not None:
                    self._write_echo(chunk)
                if self._channel is not None:
                    self._channel.write(chunk)
        finally:
            self._source.close()
        logger.debug("%s reached end of stream (%d bytes)", self.name, len(self._capture))


class InputWriter:
    """Serialized writer for the child's stdin.

    Both hook scanners may write at any time; the lock keeps each response
    contiguous on the wire.
    """

    def __init__(self, sink: BinaryIO) -> None:
        self._sink = sink
        self._lock = threading.Lock()

    @property
    def closed(self) -> bool:
        return self._sink.closed

    def write(self, data: bytes) -> None:
        """Write all of `data` to the child's stdin.

        Raises:
            OSError: If the pipe is broken or closed
            ValueError: If the writer has been closed
        """
        with self._lock:
            view = memoryview(data)
            while view:
                # Raw pipes may accept only part of a large write
                written = self._sink.write(view)
                view = view[written:]
            self._sink.flush()

    def close(self) -> None:
        with self._lock:
            if not self._sink.closed:
                self._sink.close()
