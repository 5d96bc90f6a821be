"""Terminal host that renders prompters with ``input()`` and ``print()``."""

from __future__ import annotations

import asyncio
import sys
from typing import Any, Callable, Sequence, TextIO

import config
from wizard.prompters.host import ViewPrompterFactory
from wizard.prompters.items import DataItem, InputConfig, PickerConfig

InputFn = Callable[[str], str]


class _ConsoleIO:
    """Blocking line I/O moved off the event loop."""

    def __init__(self, input_fn: InputFn, stream: TextIO, back_keyword: str) -> None:
        self.input_fn = input_fn
        self.stream = stream
        self.back_keyword = back_keyword

    def write(self, text: str = "") -> None:
        self.stream.write(text + "\n")
        self.stream.flush()

    async def read(self, prompt: str) -> str | None:
        """Return the stripped line, or ``None`` on EOF or the back keyword."""

        try:
            line = await asyncio.to_thread(self.input_fn, prompt)
        except EOFError:
            return None
        line = line.strip()
        if line == self.back_keyword:
            return None
        return line


class ConsolePickerView:
    def __init__(self, io: _ConsoleIO) -> None:
        self._io = io
        self._config = PickerConfig()
        self._items: tuple[DataItem[Any], ...] = ()
        self._active: DataItem[Any] | None = None
        self._idle = asyncio.Event()
        self._idle.set()

    def show(self, config: PickerConfig) -> None:
        self._config = config
        self._io.write()
        if config.display_title:
            self._io.write(config.display_title)

    def set_items(self, items: Sequence[DataItem[Any]]) -> None:
        self._items = tuple(items)

    def set_busy(self, busy: bool) -> None:
        if busy:
            self._io.write("Loading...")
            self._idle.clear()
        else:
            self._idle.set()

    def set_active(self, item: DataItem[Any] | None) -> None:
        self._active = item

    async def choose(self) -> DataItem[Any] | None:
        await self._idle.wait()
        if not self._items:
            self._io.write(f"  {self._config.no_items_label}")
        for number, item in enumerate(self._items, start=1):
            marker = "*" if item is self._active else " "
            line = f" {marker}{number}) {item.label}"
            if item.description:
                line += f"  {item.description}"
            self._io.write(line)

        hint = f"Select 1-{len(self._items)}" if self._items else "Nothing to select"
        while True:
            answer = await self._io.read(f"{hint} ('{self._io.back_keyword}' to go back): ")
            if answer is None:
                return None
            if not answer and self._active is not None:
                return self._active
            if answer.isdigit() and 1 <= int(answer) <= len(self._items):
                return self._items[int(answer) - 1]
            for item in self._items:
                if item.label == answer:
                    return item
            self._io.write(f"Invalid choice: {answer!r}")

    def close(self) -> None:
        return None


class ConsoleInputView:
    def __init__(self, io: _ConsoleIO) -> None:
        self._io = io
        self._config = InputConfig()

    def show(self, config: InputConfig) -> None:
        self._config = config
        self._io.write()
        if config.display_title:
            self._io.write(config.display_title)

    def set_validation_message(self, message: str | None) -> None:
        if message:
            self._io.write(f"! {message}")

    async def submit(self) -> str | None:
        label = self._config.prompt or self._config.placeholder or "Value"
        if self._config.value and not self._config.password:
            label = f"{label} [{self._config.value}]"
        answer = await self._io.read(f"{label} ('{self._io.back_keyword}' to go back): ")
        if answer is None:
            return None
        if not answer and self._config.value:
            return self._config.value
        return answer

    def close(self) -> None:
        return None


class ConsoleHost(ViewPrompterFactory):
    """Prompter factory rendering on a terminal."""

    def __init__(
        self,
        *,
        input_fn: InputFn = input,
        stream: TextIO | None = None,
        back_keyword: str | None = None,
    ) -> None:
        self._io = _ConsoleIO(
            input_fn,
            stream or sys.stdout,
            back_keyword or config.BACK_KEYWORD,
        )

    def new_picker_view(self) -> ConsolePickerView:
        return ConsolePickerView(self._io)

    def new_input_view(self) -> ConsoleInputView:
        return ConsoleInputView(self._io)


__all__ = ["ConsoleHost", "ConsoleInputView", "ConsolePickerView"]
