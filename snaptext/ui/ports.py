from __future__ import annotations
from typing import Callable, Optional, Protocol, Sequence

from snaptext.model import ImageSource


class ScreenView(Protocol):
    """The single screen: source menu, image area, text area, transient notifications."""
    def show_source_menu(
        self,
        options: Sequence[ImageSource],
        on_select: Callable[[Optional[ImageSource]], None],
    ) -> None: ...
    def show_image(self, uri: str) -> None: ...
    def show_text(self, text: str) -> None: ...
    def show_toast(self, message: str) -> None: ...


class ProgressIndicator(Protocol):
    """Blocking modal shown while an image is prepared and recognized."""
    @property
    def is_showing(self) -> bool: ...
    def show(self, message: str) -> None: ...
    def set_message(self, message: str) -> None: ...
    def dismiss(self) -> None: ...
