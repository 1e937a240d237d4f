# snaptext/ui/terminal.py
from __future__ import annotations
from typing import Callable, Optional, Sequence, TextIO
import sys

from snaptext.model import ImageSource

ReadLine = Callable[[str], str]


class TerminalView:
    """
    ScreenView that renders to a text stream and reads menu choices from read_line.
    """

    def __init__(self, stream: Optional[TextIO] = None, read_line: ReadLine = input):
        self._stream = stream or sys.stdout
        self._read_line = read_line

    def _write(self, line: str) -> None:
        print(line, file=self._stream, flush=True)

    def show_source_menu(
        self,
        options: Sequence[ImageSource],
        on_select: Callable[[Optional[ImageSource]], None],
    ) -> None:
        for i, option in enumerate(options, start=1):
            self._write(f"  {i}) {option.label}")
        try:
            answer = self._read_line("Source: ").strip()
        except EOFError:
            answer = ""
        on_select(_match_option(answer, options))

    def show_image(self, uri: str) -> None:
        self._write(f"[image] {uri}")

    def show_text(self, text: str) -> None:
        self._write("[text]")
        self._write(text)

    def show_toast(self, message: str) -> None:
        self._write(f"[!] {message}")


def _match_option(answer: str, options: Sequence[ImageSource]) -> Optional[ImageSource]:
    if answer.isdigit():
        idx = int(answer)
        return options[idx - 1] if 1 <= idx <= len(options) else None
    for option in options:
        if answer.lower() in (option.label.lower(), option.value):
            return option
    return None


class TerminalProgressIndicator:
    def __init__(self, stream: Optional[TextIO] = None, title: str = "Please wait"):
        self._stream = stream or sys.stdout
        self.title = title
        self.message: Optional[str] = None
        self._showing = False

    @property
    def is_showing(self) -> bool:
        return self._showing

    def show(self, message: str) -> None:
        self._showing = True
        self.set_message(message)

    def set_message(self, message: str) -> None:
        self.message = message
        if self._showing:
            print(f"{self.title}: {message}...", file=self._stream, flush=True)

    def dismiss(self) -> None:
        self._showing = False
        self.message = None
