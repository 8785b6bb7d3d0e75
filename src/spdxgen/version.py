"""Build information of the running application."""

from __future__ import annotations

from dataclasses import dataclass
from importlib.metadata import PackageNotFoundError, version

APPLICATION_NAME = "spdxgen"
VALUE_NOT_PROVIDED = "[not provided]"


@dataclass(frozen=True)
class VersionInfo:
    application: str
    version: str

    @property
    def tool_name(self) -> str:
        """Return the name of the tool as recorded in documents it creates."""
        return f"{self.application}-{self.version}"

    @classmethod
    def from_build(cls, application: str = APPLICATION_NAME) -> VersionInfo:
        """Return the version information of the installed distribution.

        :param application: name of the distribution
        """
        try:
            return cls(application, version(application))
        except PackageNotFoundError:
            return cls(application, VALUE_NOT_PROVIDED)
