"""Description of the artifact a catalog was built from."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Scheme(Enum):
    IMAGE = "image"
    DIRECTORY = "dir"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ImageMetadata:
    """Container image that was scanned.

    :ivar user_input: the image reference as given by the user
        (e.g. ``alpine:3.12``)
    """

    user_input: str
    image_id: str = ""
    manifest_digest: str = ""
    media_type: str = ""
    tags: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class SourceMetadata:
    scheme: Scheme
    image_metadata: ImageMetadata | None = None
    path: str | None = None

    @property
    def user_input(self) -> str:
        """Return the string the user gave to identify the scanned artifact."""
        if self.scheme == Scheme.IMAGE:
            return self.image_metadata.user_input if self.image_metadata else ""
        return self.path or ""

    @classmethod
    def from_image(cls, user_input: str, **kwargs: str) -> SourceMetadata:
        return cls(
            scheme=Scheme.IMAGE,
            image_metadata=ImageMetadata(user_input=user_input, **kwargs),
        )

    @classmethod
    def from_directory(cls, path: str) -> SourceMetadata:
        return cls(scheme=Scheme.DIRECTORY, path=path)
