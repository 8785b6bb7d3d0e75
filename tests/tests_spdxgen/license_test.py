from __future__ import annotations

import pytest

from spdxgen.error import UnknownLicenseError
from spdxgen.license import (
    LicenseId,
    LicenseLookup,
    NoAssertion,
    NoLicense,
    build_spdx_list_licensing,
    classify,
)


@pytest.fixture(scope="module")
def spdx_lookup() -> LicenseLookup:
    return LicenseLookup()


def test_classification_strings():
    assert str(NoLicense()) == "NONE"
    assert str(NoAssertion()) == "NOASSERTION"
    assert str(LicenseId("MIT")) == "MIT"
    assert LicenseId("MIT") == LicenseId("MIT")
    assert NoLicense() != NoAssertion()


@pytest.mark.parametrize(
    "license_text, identifier",
    [
        ("MIT", "MIT"),
        ("Apache-2.0", "Apache-2.0"),
        ("GPL-2.0-only", "GPL-2.0-only"),
        # case insensitive
        ("mit", "MIT"),
        ("apache-2.0", "Apache-2.0"),
        # deprecated identifiers
        ("GPL-2.0", "GPL-2.0-only"),
        ("GPL-2.0+", "GPL-2.0-or-later"),
        ("LGPL-2.1", "LGPL-2.1-only"),
    ],
)
def test_resolve_known_license(spdx_lookup, license_text, identifier):
    assert spdx_lookup.resolve(license_text) == identifier


@pytest.mark.parametrize(
    "license_text",
    [
        "totally-bogus-license",
        "",
        # expressions
        "MIT OR Apache-2.0",
        "GPL-2.0-only AND MIT",
        "GPL-2.0-only WITH Classpath-exception-2.0",
        # exception used alone
        "Classpath-exception-2.0",
        # outside of the SPDX license list
        "LicenseRef-scancode-public-domain",
        "LicenseRef-Commercial",
        "LicenseRef-GPL-2.0",
        # informal aliases
        "GPL",
        "GPL 2.0",
        "BSD-2",
    ],
)
def test_resolve_unknown_license(spdx_lookup, license_text):
    with pytest.raises(UnknownLicenseError) as err:
        spdx_lookup.resolve(license_text)
    assert err.value.license_text == license_text
    assert err.value.origin == "LicenseLookup.resolve"
    assert repr(license_text) in str(err.value)


def test_spdx_list_licensing():
    licensing = build_spdx_list_licensing(
        [
            {
                "spdx_license_key": "GPL-2.0-only",
                "other_spdx_license_keys": ["GPL-2.0", "GPL 2.0", "LicenseRef-GPL-2.0"],
                "is_exception": False,
            },
            {
                "spdx_license_key": "LicenseRef-scancode-public-domain",
                "other_spdx_license_keys": [],
                "is_exception": False,
            },
            {"spdx_license_key": "", "other_spdx_license_keys": []},
        ]
    )
    lookup = LicenseLookup(licensing)

    assert lookup.resolve("gpl-2.0") == "GPL-2.0-only"
    for license_text in (
        "GPL 2.0",
        "LicenseRef-GPL-2.0",
        "LicenseRef-scancode-public-domain",
    ):
        with pytest.raises(UnknownLicenseError):
            lookup.resolve(license_text)


def test_licensing_created_once():
    lookup = LicenseLookup()
    assert lookup.licensing is lookup.licensing


def test_classify(license_lookup):
    assert classify([], license_lookup) == NoLicense()
    assert license_lookup.queries == []

    assert classify(["MIT"], license_lookup) == LicenseId("MIT")
    assert classify(["mit", "bogus"], license_lookup) == LicenseId("MIT")
    assert license_lookup.queries == ["MIT", "mit"]

    with pytest.raises(UnknownLicenseError):
        classify(["bogus", "MIT"], license_lookup)
