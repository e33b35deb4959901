"""Hook engine: react to output patterns by writing into the child's stdin.

One scanner runs per output stream. Matching is substring containment over
whatever bytes a single read returns, so a pattern split across two reads is
not guaranteed to be detected.
"""

import logging
from collections.abc import Sequence
from typing import Protocol

from devops.command.types import InputHook

logger = logging.getLogger(__name__)

# Bytes requested from a stream channel per scan iteration
HOOK_READ_SIZE = 4096


class ChunkReader(Protocol):
    def read(self, size: int) -> bytes: ...


class ResponseWriter(Protocol):
    def write(self, data: bytes) -> None: ...


def _fire_matching(
    chunk: bytes, hooks: Sequence[InputHook], writer: ResponseWriter, stream_name: str
) -> int:
    fired = 0
    for hook in hooks:
        if hook.on not in chunk:
            continue
        try:
            writer.write(hook.send)
        except (OSError, ValueError) as e:
            logger.warning(
                "failed to write hook response to stdin (%s hook %r): %s", stream_name, hook.on, e
            )
            continue
        logger.debug("%s hook %r fired, sent %d bytes", stream_name, hook.on, len(hook.send))
        fired += 1
    return fired


def scan_hooks(
    reader: ChunkReader,
    stream_hooks: Sequence[InputHook],
    stdany_hooks: Sequence[InputHook],
    writer: ResponseWriter,
    *,
    stream_name: str,
    read_size: int = HOOK_READ_SIZE,
) -> int:
    """Scan a stream until end-of-stream, writing hook responses on matches.

    For each chunk, every matching stdany hook fires first, in order, followed
    by every matching stream-specific hook, in order. Hooks are not mutually
    exclusive. A failed write is logged and scanning continues.

    Args:
        reader: Source of output chunks; returns b"" at end-of-stream
        stream_hooks: Hooks scoped to this stream
        stdany_hooks: Hooks scoped to either stream
        writer: The child's stdin
        stream_name: "stdout" or "stderr", for logging
        read_size: Maximum bytes per read

    Returns:
        Number of hook responses successfully written
    """
    fired = 0
    while True:
        chunk = reader.read(read_size)
        if not chunk:
            logger.debug("%s scanner finished, %d hook(s) fired", stream_name, fired)
            return fired
        fired += _fire_matching(chunk, stdany_hooks, writer, stream_name)
        fired += _fire_matching(chunk, stream_hooks, writer, stream_name)
