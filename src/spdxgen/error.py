"""Errors raised by spdxgen.

All errors derive from :class:`SpdxGenError` so that drivers can report any
failure of the library with a single ``except`` clause.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import List, Optional


class SpdxGenError(Exception):
    """Exception raised by functions defined in spdxgen."""

    def __init__(self, message: str | List[str], origin: Optional[str] = None):
        """Initialize a SpdxGenError.

        Several messages can be stacked on the same error, the last one being
        the one displayed.

        :param message: the exception message, or a list of messages
        :param origin: the name of the function, class, or module having raised
            the exception
        """
        super().__init__(message, origin)
        self.origin = origin
        self.messages: List[str] = []
        if message is not None:
            if isinstance(message, str):
                self.messages.append(message)
            else:
                self.messages.extend(message)

    def __iadd__(self, other: str | List[str] | SpdxGenError) -> SpdxGenError:
        """Stack messages on the current instance.

        :param other: a message, a list of messages or a SpdxGenError
        """
        if isinstance(other, SpdxGenError):
            self.messages.extend(other.messages)
        elif isinstance(other, str):
            self.messages.append(other)
        else:
            self.messages.extend(other)
        return self

    def __str__(self) -> str:
        error_msg = self.messages[-1] if self.messages else self.__class__.__name__
        if self.origin:
            return f"{self.origin}: {error_msg}\n"
        return error_msg


class UnknownLicenseError(SpdxGenError):
    """A license string does not name a single known SPDX license."""

    def __init__(self, license_text: str, reason: str, origin: Optional[str] = None):
        super().__init__(f"unknown license {license_text!r}: {reason}", origin)
        self.license_text = license_text


class PresenterError(SpdxGenError):
    """The SPDX document could not be rendered or written.

    When raised, no document has been produced.
    """


class SnapshotError(SpdxGenError):
    """A catalog snapshot file cannot be loaded."""
