"""Shared pytest fixtures for snaptext tests.

Fakes stand in for every external capability so the controller can be driven
without a camera, a terminal or Tesseract. Every capability hands back a plain
pending Future that the test resolves by hand.
"""

from concurrent.futures import Future
from typing import List, Optional, Tuple

import numpy as np
import pytest

from snaptext.config import SnaptextConfig
from snaptext.controller import CaptureRecognizeController
from snaptext.errors import ImageDecodeError
from snaptext.model import ImageSource, InputImage, Permission
from snaptext.ui.looper import EventLoop


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeView:
    def __init__(self) -> None:
        self.menu_answer: Optional[ImageSource] = None
        self.menus: List[List[ImageSource]] = []
        self.images: List[str] = []
        self.texts: List[str] = []
        self.toasts: List[str] = []

    def show_source_menu(self, options, on_select) -> None:
        self.menus.append(list(options))
        on_select(self.menu_answer)

    def show_image(self, uri: str) -> None:
        self.images.append(uri)

    def show_text(self, text: str) -> None:
        self.texts.append(text)

    def show_toast(self, message: str) -> None:
        self.toasts.append(message)


class FakeIndicator:
    def __init__(self) -> None:
        self.messages: List[str] = []
        self.dismissals = 0
        self._showing = False

    @property
    def is_showing(self) -> bool:
        return self._showing

    def show(self, message: str) -> None:
        self._showing = True
        self.messages.append(message)

    def set_message(self, message: str) -> None:
        self.messages.append(message)

    def dismiss(self) -> None:
        self._showing = False
        self.dismissals += 1


class FakePermissions:
    def __init__(self) -> None:
        self.granted = set()
        self.requests: List[Tuple[tuple, int, Future]] = []

    def is_granted(self, permission: Permission) -> bool:
        return permission in self.granted

    def request(self, permissions, request_code) -> Future:
        future: Future = Future()
        self.requests.append((tuple(permissions), request_code, future))
        return future


class FakeCaptureStore:
    def __init__(self) -> None:
        self.issued: List[str] = []

    def new_output_location(self) -> str:
        uri = f"file:///captures/IMG_{len(self.issued) + 1}.jpg"
        self.issued.append(uri)
        return uri


class FakeCamera:
    def __init__(self) -> None:
        self.captures: List[Tuple[str, Future]] = []

    def capture(self, output_uri: str) -> Future:
        future: Future = Future()
        self.captures.append((output_uri, future))
        return future


class FakeGallery:
    def __init__(self) -> None:
        self.picks: List[Tuple[str, Future]] = []

    def pick(self, mime_filter: str) -> Future:
        future: Future = Future()
        self.picks.append((mime_filter, future))
        return future


class FakeDecoder:
    def __init__(self) -> None:
        self.error: Optional[str] = None
        self.decoded: List[str] = []

    def decode(self, uri: str) -> InputImage:
        if self.error is not None:
            raise ImageDecodeError(self.error)
        self.decoded.append(uri)
        return InputImage(pixels=np.zeros((4, 6, 3), dtype=np.uint8), uri=uri)


class FakeRecognizer:
    def __init__(self) -> None:
        self.calls: List[Tuple[InputImage, Future]] = []

    def process(self, image: InputImage) -> Future:
        future: Future = Future()
        self.calls.append((image, future))
        return future

    @property
    def last_future(self) -> Future:
        return self.calls[-1][1]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def loop(clock) -> EventLoop:
    return EventLoop(clock=clock)


@pytest.fixture
def view() -> FakeView:
    return FakeView()


@pytest.fixture
def indicator() -> FakeIndicator:
    return FakeIndicator()


@pytest.fixture
def permissions() -> FakePermissions:
    return FakePermissions()


@pytest.fixture
def capture_store() -> FakeCaptureStore:
    return FakeCaptureStore()


@pytest.fixture
def camera() -> FakeCamera:
    return FakeCamera()


@pytest.fixture
def gallery() -> FakeGallery:
    return FakeGallery()


@pytest.fixture
def decoder() -> FakeDecoder:
    return FakeDecoder()


@pytest.fixture
def recognizer() -> FakeRecognizer:
    return FakeRecognizer()


@pytest.fixture
def config() -> SnaptextConfig:
    return SnaptextConfig(recognition_timeout=10.0)


@pytest.fixture
def controller(
    view, indicator, loop, permissions, capture_store, camera, gallery, decoder, recognizer, config
) -> CaptureRecognizeController:
    """Controller wired to fakes.

    Yields:
        CaptureRecognizeController, closed on teardown
    """
    ctrl = CaptureRecognizeController(
        view=view,
        indicator=indicator,
        loop=loop,
        permissions=permissions,
        capture_store=capture_store,
        camera=camera,
        gallery=gallery,
        decoder=decoder,
        recognizer=recognizer,
        config=config,
    )
    yield ctrl
    ctrl.close()
