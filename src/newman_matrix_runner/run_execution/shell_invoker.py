"""Shell invocation of the test tool with concurrent output draining."""

from __future__ import annotations

import logging
import os
import signal
import subprocess
import threading
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, wait
from typing import IO, Protocol

from .run_contracts import InvocationOutcome

OutputSink = Callable[[str], None]
PopenFactory = Callable[..., subprocess.Popen]

_LOGGER = logging.getLogger(__name__)
_IS_POSIX = os.name == "posix"


class CommandInvoker(Protocol):  # pylint: disable=too-few-public-methods
    """Protocol for runners that execute one command line."""

    def invoke(self, command: str, output_sink: OutputSink) -> InvocationOutcome: ...


class ShellCommandInvoker:  # pylint: disable=too-few-public-methods
    """Run commands through the system shell and stream both output streams.

    Standard output and standard error are drained by two worker threads while the
    calling thread blocks on the child, so a full pipe buffer never stalls the child.
    """

    def __init__(
        self,
        *,
        timeout_seconds: float | None = None,
        popen_factory: PopenFactory | None = None,
    ) -> None:
        self._timeout_seconds = timeout_seconds
        self._popen_factory = popen_factory or subprocess.Popen

    def invoke(self, command: str, output_sink: OutputSink) -> InvocationOutcome:
        try:
            process = self._popen_factory(
                command,
                shell=True,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
                bufsize=1,
                start_new_session=_IS_POSIX,
            )
        except OSError as exc:
            _LOGGER.debug("Failed to launch %r", command, exc_info=True)
            return InvocationOutcome.launch_failed(exc)

        sink_lock = threading.Lock()
        deadline = _deadline(self._timeout_seconds)
        with process, ThreadPoolExecutor(max_workers=2, thread_name_prefix="drain") as executor:
            drains = [
                executor.submit(_drain_stream, process.stdout, output_sink, sink_lock),
                executor.submit(_drain_stream, process.stderr, output_sink, sink_lock),
            ]
            try:
                exit_code = process.wait(timeout=self._timeout_seconds)
                # Background children of the tool can keep both pipes open after the shell exits.
                _, still_draining = wait(drains, timeout=_remaining(deadline))
            except subprocess.TimeoutExpired:
                still_draining = set(drains)
            except BaseException:
                _terminate_process(process)
                raise
            if still_draining:
                _LOGGER.debug("Timed out after %s seconds: %r", self._timeout_seconds, command)
                _terminate_process(process)
                wait(drains)
                return InvocationOutcome.timed_out(self._timeout_seconds or 0)
            for drain in drains:
                drain.result()
        return InvocationOutcome.from_exit_code(exit_code)


def _deadline(timeout_seconds: float | None) -> float | None:
    if timeout_seconds is None:
        return None
    return time.monotonic() + timeout_seconds


def _remaining(deadline: float | None) -> float | None:
    if deadline is None:
        return None
    return max(0.0, deadline - time.monotonic())


def _drain_stream(
    stream: IO[str] | None, output_sink: OutputSink, sink_lock: threading.Lock
) -> None:
    if stream is None:
        return
    for line in stream:
        with sink_lock:
            output_sink(line.rstrip("\r\n"))


def _terminate_process(process: subprocess.Popen) -> None:
    """Kill the child and everything the shell started on its behalf.

    The process group is killed even when the shell itself has already exited.
    """
    if _IS_POSIX:
        try:
            os.killpg(process.pid, signal.SIGKILL)
        except ProcessLookupError:
            pass
    elif process.poll() is None:
        process.kill()
    process.wait()
