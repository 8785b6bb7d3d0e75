"""License identifier lookup.

Package managers declare licenses as free text. :class:`LicenseLookup` maps
such a string to the identifier of the SPDX license list when it names a
single license, using the license list bundled with ``license-expression``.

The outcome of the lookup for a package is a :data:`LicenseClassification`:

- :class:`NoLicense` when the package declares no license (rendered ``NONE``)
- :class:`NoAssertion` when a license is declared but cannot be identified
  (rendered ``NOASSERTION``)
- :class:`LicenseId` for an identified license

These classes are only turned into SPDX strings when a document is rendered,
so that a package declaring the license text ``"NONE"`` is not mistaken for a
package without license.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from license_expression import (
    ExpressionError,
    LicenseSymbol,
    Licensing,
    get_license_index,
)

from spdxgen.error import UnknownLicenseError
from spdxgen.spdx import NOASSERTION, NONE_VALUE

if TYPE_CHECKING:
    from typing import Any, Mapping, Optional, Sequence


@dataclass(frozen=True)
class NoLicense:
    def __str__(self) -> str:
        return NONE_VALUE


@dataclass(frozen=True)
class NoAssertion:
    def __str__(self) -> str:
        return NOASSERTION


@dataclass(frozen=True)
class LicenseId:
    identifier: str

    def __str__(self) -> str:
        return self.identifier


LicenseClassification = Union[NoLicense, NoAssertion, LicenseId]

LICENSE_REF_PREFIX = "LicenseRef-"

DEPRECATED_SPDX_IDS = frozenset(
    (
        "AGPL-1.0",
        "AGPL-3.0",
        "BSD-2-Clause-FreeBSD",
        "BSD-2-Clause-NetBSD",
        "bzip2-1.0.5",
        "eCos-2.0",
        "GFDL-1.1",
        "GFDL-1.2",
        "GFDL-1.3",
        "GPL-1.0",
        "GPL-1.0+",
        "GPL-2.0",
        "GPL-2.0+",
        "GPL-2.0-with-autoconf-exception",
        "GPL-2.0-with-bison-exception",
        "GPL-2.0-with-classpath-exception",
        "GPL-2.0-with-font-exception",
        "GPL-2.0-with-GCC-exception",
        "GPL-3.0",
        "GPL-3.0+",
        "GPL-3.0-with-autoconf-exception",
        "GPL-3.0-with-GCC-exception",
        "LGPL-2.0",
        "LGPL-2.0+",
        "LGPL-2.1",
        "LGPL-2.1+",
        "LGPL-3.0",
        "LGPL-3.0+",
        "Net-SNMP",
        "Nokia-Qt-exception-1.1",
        "Nunit",
        "StandardML-NJ",
        "wxWindows",
    )
)
"""Identifiers deprecated by the SPDX license list, still accepted as aliases
of the identifier replacing them."""


def build_spdx_list_licensing(
    license_index: Optional[list[Mapping[str, Any]]] = None
) -> Licensing:
    """Return a licensing database limited to the SPDX license list.

    The license index bundled with ``license-expression`` also describes
    licenses outside of the SPDX list (as ``LicenseRef-scancode-*`` keys)
    and informal aliases such as ``GPL``. Both are left out: the only
    aliases kept are deprecated SPDX identifiers.

    :param license_index: entries of a ScanCode license index, the bundled
        one if not set
    """
    if license_index is None:
        license_index = get_license_index()

    symbols = []
    for lic in license_index:
        key = lic.get("spdx_license_key")
        if not key or key.startswith(LICENSE_REF_PREFIX):
            continue
        symbols.append(
            LicenseSymbol(
                key=key,
                aliases=tuple(
                    alias
                    for alias in lic.get("other_spdx_license_keys") or []
                    if alias in DEPRECATED_SPDX_IDS
                ),
                is_exception=lic.get("is_exception", False),
            )
        )
    return Licensing(symbols)


class LicenseLookup:
    """Find SPDX license identifiers.

    Only single licenses of the SPDX license list are accepted: expressions
    combining licenses (AND, OR) or adding an exception (WITH) are reported
    as unknown, and so are ``LicenseRef-`` identifiers.
    """

    def __init__(self, licensing: Optional[Licensing] = None) -> None:
        """Initialize a LicenseLookup.

        :param licensing: the licensing database to use. Building the SPDX
            one is slow, it is therefore created on first use when not
            provided.
        """
        self.__licensing = licensing

    @property
    def licensing(self) -> Licensing:
        if self.__licensing is None:
            self.__licensing = build_spdx_list_licensing()
        return self.__licensing

    def resolve(self, license_text: str) -> str:
        """Return the SPDX identifier of a license.

        The match is case insensitive and deprecated identifiers are mapped to
        their current name (e.g. ``mit`` gives ``MIT``).

        :param license_text: a license as declared by a package
        :raise UnknownLicenseError: if *license_text* is not the name of a
            single known license
        """
        origin = "LicenseLookup.resolve"
        try:
            parsed = self.licensing.parse(license_text, validate=True)
        except ExpressionError as err:
            raise UnknownLicenseError(license_text, str(err), origin=origin) from err

        if parsed is None:
            raise UnknownLicenseError(license_text, "empty license", origin=origin)
        if not isinstance(parsed, LicenseSymbol):
            raise UnknownLicenseError(
                license_text, "not a single license identifier", origin=origin
            )
        if parsed.is_exception:
            raise UnknownLicenseError(
                license_text, "license exception used alone", origin=origin
            )
        if parsed.key.startswith(LICENSE_REF_PREFIX):
            raise UnknownLicenseError(
                license_text, "not in the SPDX license list", origin=origin
            )
        return parsed.key


def classify(licenses: Sequence[str], lookup: LicenseLookup) -> LicenseClassification:
    """Classify the licenses declared by a package.

    Only the first license is considered.

    :param licenses: the license strings declared by a package
    :param lookup: the lookup used to identify the first license
    :return: :class:`NoLicense` if *licenses* is empty, the identified
        license otherwise
    :raise UnknownLicenseError: if the first license cannot be identified.
        Callers degrading to :class:`NoAssertion` catch it.
    """
    if not licenses:
        return NoLicense()
    return LicenseId(lookup.resolve(licenses[0]))
