from __future__ import annotations
from pathlib import Path
from typing import Union
from urllib.parse import urlparse
from urllib.request import url2pathname


def path_to_uri(path: Union[str, Path]) -> str:
    return Path(path).expanduser().resolve().as_uri()


def uri_to_path(uri: str) -> Path:
    """
    Resolve an image reference to a local path.
    Accepts file:// URIs and bare filesystem paths (including Windows drive paths).
    """
    parsed = urlparse(uri)
    if parsed.scheme == "file":
        return Path(url2pathname(parsed.path))
    # "C:\\img.png" parses with a one-letter scheme
    if parsed.scheme == "" or len(parsed.scheme) == 1:
        return Path(uri).expanduser()
    raise ValueError(f"Unsupported image reference scheme '{parsed.scheme}'")
