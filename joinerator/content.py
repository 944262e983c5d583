"""Input providers, output consumers and the processing loop.

A provider supplies successive input strings and reports whether more
are available; a consumer accepts successive output strings. The loop
feeds each input through the transformers and the engine and hands the
result to the consumer. In watch mode it keeps polling the provider
after it runs dry instead of returning.
"""

from __future__ import annotations

import sys
import time
from collections import deque
from collections.abc import Callable, Iterable
from typing import Protocol, TextIO

import pyperclip
import structlog

from .engine import Joinerator
from .transform import apply_transformers

logger = structlog.get_logger(__name__)

# Watch mode polling interval (seconds)
POLL_INTERVAL = 0.01

# Extra clipboard read attempts before giving up
CLIPBOARD_TRIES = 10


class Provider(Protocol):
    def provide(self) -> str: ...

    def has_more(self) -> bool: ...


class Consumer(Protocol):
    def consume(self, text: str) -> None: ...


class StringProvider:
    """Provides a fixed sequence of strings, e.g. command line values."""

    def __init__(self, values: Iterable[str]):
        self._values = deque(values)

    def provide(self) -> str:
        if not self._values:
            raise LookupError("No more data.")
        return self._values.popleft()

    def has_more(self) -> bool:
        return bool(self._values)


class StdinProvider:
    """Provides the contents of a text stream.

    The first call reads the stream to its end. Afterwards ``has_more``
    blocks for another line, which is kept and prefixed to the next read.
    """

    def __init__(self, stream: TextIO | None = None):
        self._stream = stream if stream is not None else sys.stdin
        self._buffer = ""

    def provide(self) -> str:
        data = self._buffer + self._stream.read()
        self._buffer = ""
        return data

    def has_more(self) -> bool:
        line = self._stream.readline()
        self._buffer += line
        return len(line) > 0


class StdoutConsumer:
    """Writes results to a text stream."""

    def __init__(self, stream: TextIO | None = None):
        self._stream = stream if stream is not None else sys.stdout

    def consume(self, text: str) -> None:
        self._stream.write(text)
        self._stream.flush()


class NullConsumer:
    """Discards results."""

    def consume(self, text: str) -> None:
        pass


class ListConsumer:
    """Collects results in memory."""

    def __init__(self) -> None:
        self.results: list[str] = []

    def consume(self, text: str) -> None:
        self.results.append(text)


class Clipboard:
    """System clipboard that remembers the last text it read or wrote.

    Reads are retried a few times since some platforms fail
    intermittently. A change is reported only when the clipboard holds
    something other than the remembered text, so the joinerator's own
    output is never picked up again as new input.
    """

    def __init__(
        self,
        paste: Callable[[], str] | None = None,
        copy: Callable[[str], None] | None = None,
        tries: int = CLIPBOARD_TRIES,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._paste = paste if paste is not None else pyperclip.paste
        self._copy = copy if copy is not None else pyperclip.copy
        self._tries = tries
        self._sleep = sleep
        self._seen = ""

    def _read(self) -> str:
        error: pyperclip.PyperclipException | None = None
        for _ in range(self._tries + 1):
            try:
                return self._paste()
            except pyperclip.PyperclipException as e:
                error = e
                self._sleep(POLL_INTERVAL)
        raise error

    def get(self) -> str:
        self._seen = self._read()
        return self._seen

    def set(self, text: str) -> None:
        self._copy(text)
        self._seen = self._read()

    def has_changed(self) -> bool:
        return self._read() != self._seen


class ClipboardProvider:
    """Provides the clipboard contents; has more whenever they change."""

    def __init__(self, clipboard: Clipboard):
        self._clipboard = clipboard

    def provide(self) -> str:
        return self._clipboard.get()

    def has_more(self) -> bool:
        return self._clipboard.has_changed()


class ClipboardConsumer:
    """Copies results to the clipboard."""

    def __init__(self, clipboard: Clipboard):
        self._clipboard = clipboard

    def consume(self, text: str) -> None:
        self._clipboard.set(text)


def run_loop(
    engine: Joinerator,
    provider: Provider,
    consumer: Consumer,
    transformers: Iterable[str] = (),
    verbose: bool = False,
    watch: bool = False,
    poll_interval: float = POLL_INTERVAL,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """Process every input the provider supplies.

    Args:
        engine: Configured engine.
        provider: Input source.
        consumer: Output destination.
        transformers: Transformer names applied before the engine, in order.
        verbose: Log each input and output.
        watch: Keep polling the provider once it is exhausted.
        poll_interval: Seconds between polls in watch mode.
        sleep: Sleep function used between polls.

    Returns:
        Number of inputs processed.

    Raises:
        Exception: Provider and consumer errors propagate unchanged.
    """
    names = tuple(transformers)
    processed = 0
    more = True

    while more:
        text = provider.provide()
        transformed = apply_transformers(text, names, engine.rng)
        result = engine.process(transformed)

        if verbose:
            logger.info("processed", input=text, output=result)

        consumer.consume(result)
        processed += 1
        more = provider.has_more()

        while watch and not more:
            sleep(poll_interval)
            more = provider.has_more()

    return processed
