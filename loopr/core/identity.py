"""Stable identity for a video, used to namespace everything persisted about it.

A ``VideoIdentity`` is derived from the video's storage location. Local paths are
resolved and expressed as ``file://`` URIs; remote locations keep their URL with
the scheme and host lowercased. The ``key`` is the SHA-256 hex digest of that
normalized location, so it is filesystem and settings-key safe and does not
collide the way character-replaced URL strings do.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from pathlib import Path
from typing import Union
from urllib.parse import urlsplit, urlunsplit


@dataclass(frozen=True)
class VideoIdentity:
    location: str
    key: str

    @classmethod
    def from_location(cls, location: Union[str, Path]) -> "VideoIdentity":
        normalized = normalize_location(location)
        digest = hashlib.sha256(normalized.encode("utf-8")).hexdigest()
        return cls(location=normalized, key=digest)

    def __str__(self) -> str:
        return self.location


def normalize_location(location: Union[str, Path]) -> str:
    text = str(location)
    if "://" in text:
        parts = urlsplit(text)
        return urlunsplit(
            (
                parts.scheme.lower(),
                parts.netloc.lower(),
                parts.path,
                parts.query,
                parts.fragment,
            )
        )
    return Path(text).expanduser().resolve().as_uri()


__all__ = ["VideoIdentity", "normalize_location"]
