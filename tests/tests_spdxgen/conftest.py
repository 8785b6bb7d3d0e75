from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

import pytest

from spdxgen.config import Config
from spdxgen.error import UnknownLicenseError
from spdxgen.license import LicenseLookup
from spdxgen.presenter import SPDXConfig
from spdxgen.version import VersionInfo

if TYPE_CHECKING:
    from typing import Iterator


class FakeLicenseLookup(LicenseLookup):
    """License lookup knowing a fixed set of licenses."""

    KNOWN = {"mit": "MIT", "apache-2.0": "Apache-2.0", "gpl-2.0-only": "GPL-2.0-only"}

    def __init__(self) -> None:
        super().__init__()
        self.queries: list[str] = []

    def resolve(self, license_text: str) -> str:
        self.queries.append(license_text)
        try:
            return self.KNOWN[license_text.lower()]
        except KeyError:
            raise UnknownLicenseError(license_text, "not in the test list") from None


@pytest.fixture
def license_lookup() -> FakeLicenseLookup:
    return FakeLicenseLookup()


@pytest.fixture
def version_info() -> VersionInfo:
    return VersionInfo("spdxgen", "1.2.3")


@pytest.fixture
def fixed_clock():
    return lambda: datetime(2021, 1, 28, 14, 23, 5, tzinfo=timezone.utc)


@pytest.fixture
def spdx_config() -> SPDXConfig:
    return SPDXConfig()


@pytest.fixture(autouse=True)
def reset_config() -> Iterator[None]:
    Config.reset()
    yield
    Config.reset()
