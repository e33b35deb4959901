"""Tests for the hook scanning loop."""

import logging

import pytest

from devops.command.hooks import scan_hooks
from devops.command.types import InputHook


class _ChunkSource:
    """Reader returning predetermined chunks, then end-of-stream."""

    def __init__(self, chunks: list[bytes]) -> None:
        self._chunks = list(chunks)
        self.read_sizes: list[int] = []

    def read(self, size: int) -> bytes:
        self.read_sizes.append(size)
        if not self._chunks:
            return b""
        return self._chunks.pop(0)


class _RecordingWriter:
    def __init__(self, fail_on: bytes | None = None) -> None:
        self.writes: list[bytes] = []
        self._fail_on = fail_on

    def write(self, data: bytes) -> None:
        if data == self._fail_on:
            raise BrokenPipeError("child closed stdin")
        self.writes.append(data)


def test_stdany_hooks_fire_before_stream_hooks() -> None:
    writer = _RecordingWriter()

    fired = scan_hooks(
        _ChunkSource([b"PROMPT> "]),
        stream_hooks=[InputHook(on=b"PROMPT", send=b"out\n")],
        stdany_hooks=[InputHook(on=b"PROMPT", send=b"any\n")],
        writer=writer,
        stream_name="stdout",
    )

    assert writer.writes == [b"any\n", b"out\n"]
    assert fired == 2


def test_all_matching_hooks_fire_in_table_order() -> None:
    writer = _RecordingWriter()
    hooks = [
        InputHook(on=b"user", send=b"1"),
        InputHook(on=b"nomatch", send=b"2"),
        InputHook(on=b"name", send=b"3"),
    ]

    scan_hooks(
        _ChunkSource([b"username: "]),
        stream_hooks=hooks,
        stdany_hooks=[],
        writer=writer,
        stream_name="stdout",
    )

    assert writer.writes == [b"1", b"3"]


def test_hooks_fire_again_on_later_chunks() -> None:
    writer = _RecordingWriter()

    fired = scan_hooks(
        _ChunkSource([b"Continue?", b"nothing here", b"Continue?"]),
        stream_hooks=[InputHook(on=b"Continue?", send=b"y\n")],
        stdany_hooks=[],
        writer=writer,
        stream_name="stderr",
    )

    assert writer.writes == [b"y\n", b"y\n"]
    assert fired == 2


def test_pattern_split_across_reads_is_not_detected() -> None:
    writer = _RecordingWriter()

    scan_hooks(
        _ChunkSource([b"PRO", b"MPT"]),
        stream_hooks=[InputHook(on=b"PROMPT", send=b"y\n")],
        stdany_hooks=[],
        writer=writer,
        stream_name="stdout",
    )

    assert writer.writes == []


def test_write_failure_is_logged_and_scanning_continues(
    caplog: pytest.LogCaptureFixture,
) -> None:
    caplog.set_level(logging.WARNING, logger="devops.command.hooks")
    writer = _RecordingWriter(fail_on=b"boom\n")

    fired = scan_hooks(
        _ChunkSource([b"first", b"second"]),
        stream_hooks=[
            InputHook(on=b"first", send=b"boom\n"),
            InputHook(on=b"first", send=b"after\n"),
            InputHook(on=b"second", send=b"again\n"),
        ],
        stdany_hooks=[],
        writer=writer,
        stream_name="stdout",
    )

    assert writer.writes == [b"after\n", b"again\n"]
    assert fired == 2
    assert "failed to write hook response to stdin" in caplog.text


def test_read_size_is_passed_to_reader() -> None:
    source = _ChunkSource([b"x"])

    scan_hooks(source, [], [], _RecordingWriter(), stream_name="stdout", read_size=64)

    assert source.read_sizes == [64, 64]
