# snaptext/cli.py
from __future__ import annotations
from dataclasses import replace
from typing import Callable, List, Optional, TextIO
import argparse
import sys

from snaptext import __version__
from snaptext.app import SnaptextApp
from snaptext.config import SnaptextConfig, load_config
from snaptext.errors import ConfigError
from snaptext.logging import set_level
from snaptext.ui.terminal import TerminalProgressIndicator, TerminalView

HELP = """Commands:
  take       take a photo or pick an image
  recognize  extract text from the selected image
  show       print the selected image and recognized text
  help       show this message
  quit       exit"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="snaptext",
        description="Capture or pick an image and extract its printed text.",
    )
    parser.add_argument("--config", help="YAML config file")
    parser.add_argument("--lang", help="Tesseract language(s), e.g. 'eng' or 'eng+deu'")
    parser.add_argument("--camera-index", type=int, help="OpenCV camera device index")
    parser.add_argument("--capture-dir", help="directory for captured photos")
    parser.add_argument("--timeout", type=float, help="recognition timeout in seconds, 0 disables it")
    parser.add_argument("--grant-all", action="store_true", help="grant camera and storage access up front")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def resolve_config(args: argparse.Namespace) -> SnaptextConfig:
    config = load_config(args.config) if args.config else SnaptextConfig()
    config = config.with_overrides(
        lang=args.lang,
        camera_index=args.camera_index,
        capture_dir=args.capture_dir,
    )
    if args.timeout is not None:
        config = replace(config, recognition_timeout=args.timeout or None)
    return config


def run_shell(app: SnaptextApp, read_line: Callable[[str], str], stream: TextIO) -> None:
    controller = app.controller
    print(HELP, file=stream)
    while True:
        try:
            command = read_line("snaptext> ").strip().lower()
        except EOFError:
            break

        if command in ("q", "quit", "exit"):
            break
        elif command in ("t", "take"):
            controller.choose_image_source()
        elif command in ("r", "recognize"):
            controller.recognize_text()
        elif command in ("s", "show"):
            print(f"image: {controller.image_uri or '-'}", file=stream)
            print(f"text:  {controller.recognized_text if controller.recognized_text is not None else '-'}", file=stream)
        elif command in ("h", "help", "?"):
            print(HELP, file=stream)
        elif command:
            print(f"Unknown command '{command}'. Type 'help'.", file=stream)

        app.wait_idle()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    set_level(args.log_level)

    try:
        config = resolve_config(args)
    except ConfigError as e:
        print(f"snaptext: {e}", file=sys.stderr)
        return 2

    stream = sys.stdout
    with SnaptextApp(
        config,
        view=TerminalView(stream, input),
        indicator=TerminalProgressIndicator(stream),
        read_line=input,
        grant_all=args.grant_all,
    ) as app:
        try:
            run_shell(app, input, stream)
        except KeyboardInterrupt:
            print(file=stream)
    return 0


if __name__ == "__main__":
    sys.exit(main())
