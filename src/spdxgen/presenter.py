"""Present a package catalog as an SPDX 2.2 tag:value document.

The document describes every package of the catalog:

- its identifier is ``Package-<type>-<name>``. It is not unique when the
  catalog contains several packages with the same type and name, in which
  case the last one is kept;
- its declared license is the first license of the package when it can be
  identified, NONE when the package has no license and NOASSERTION
  otherwise. Concluded license, download location and copyright are
  NOASSERTION;
- when the package metadata knows which files the package installed,
  FilesAnalyzed is true and each file is described with the file path as
  identifier. Files owned by several packages are described once per
  package.

No checksum and no package verification code are computed.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, ClassVar

import spdxgen.log
from spdxgen.config import ConfigSection
from spdxgen.error import PresenterError, UnknownLicenseError
from spdxgen.license import LicenseLookup, NoAssertion, classify
from spdxgen.pkg import FileOwnerMetadata
from spdxgen.spdx import (
    NOASSERTION,
    SPDXID,
    Document,
    File,
    FileCopyrightText,
    FileName,
    FilesAnalyzed,
    InvalidSPDX,
    LicenseConcluded,
    LicenseInfoInFile,
    Organization,
    Package,
    PackageCopyrightText,
    PackageDownloadLocation,
    PackageLicenseConcluded,
    PackageLicenseDeclared,
    PackageName,
    PackageVersion,
    Tool,
)
from spdxgen.version import VersionInfo

if TYPE_CHECKING:
    from typing import Callable, Optional, TextIO

    from spdxgen.license import LicenseClassification
    from spdxgen.pkg import Catalog, Package as CatalogPackage
    from spdxgen.source import SourceMetadata

logger = spdxgen.log.getLogger("presenter")


@dataclass
class SPDXConfig(ConfigSection):
    title: ClassVar[str] = "spdx"

    organization: str = "Anchore, Inc"
    namespace_prefix: str = "https://anchore.com/syft/image/"


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


class SPDXPresenter:
    """SPDX presentation of a catalog.

    :ivar catalog: the packages to describe
    :ivar src_metadata: the artifact the catalog was built from
    """

    def __init__(
        self,
        catalog: Catalog,
        src_metadata: SourceMetadata,
        license_lookup: Optional[LicenseLookup] = None,
        version_info: Optional[VersionInfo] = None,
        clock: Callable[[], datetime] = utc_now,
        config: Optional[SPDXConfig] = None,
    ) -> None:
        """Initialize a presenter.

        :param catalog: the packages to describe
        :param src_metadata: the artifact the catalog was built from; its
            user input names the document
        :param license_lookup: used to identify package licenses
        :param version_info: the tool recorded as creator of the document,
            the installed spdxgen if not set
        :param clock: returns the creation date of the documents
        :param config: organization and namespace settings, read from the
            ``[spdx]`` configuration section if not set
        """
        self.catalog = catalog
        self.src_metadata = src_metadata
        self.license_lookup = license_lookup or LicenseLookup()
        self.version_info = version_info or VersionInfo.from_build()
        self.clock = clock
        self.config = config or SPDXConfig.load()

    def present(self, output: TextIO) -> None:
        """Write the SPDX document of the catalog to *output*.

        :param output: a text stream
        :raise PresenterError: if the document cannot be rendered or written.
            In that case no document has been produced.
        """
        try:
            self.document().write(output)
        except InvalidSPDX as err:
            raise PresenterError(
                ["invalid SPDX document", *err.messages],
                origin="SPDXPresenter.present",
            ) from err
        except OSError as err:
            raise PresenterError(
                f"cannot write SPDX document: {err}", origin="SPDXPresenter.present"
            ) from err

    def document(self) -> Document:
        """Return the SPDX document describing the catalog."""
        user_input = self.src_metadata.user_input
        return Document(
            document_name=user_input,
            document_namespace=f"{self.config.namespace_prefix}{user_input}",
            creators=[
                Organization(self.config.organization),
                Tool(self.version_info.tool_name),
            ],
            created=self.clock(),
            packages=self.packages(),
        )

    def packages(self) -> dict[SPDXID, Package]:
        """Return the SPDX packages of the catalog indexed by identifier."""
        results: dict[SPDXID, Package] = {}

        for p in spdxgen.log.progress_bar(
            self.catalog.enumerate(),
            total=self.catalog.package_count,
            desc="SPDX packages",
            leave=False,
        ):
            spdx_id = SPDXID(f"Package-{p.type}-{p.name}")
            if spdx_id in results:
                spdxgen.log.debug("%s already describes another package", spdx_id)

            files_analyzed, files = self.package_files(p)
            results[spdx_id] = Package(
                name=PackageName(p.name),
                spdx_id=spdx_id,
                version=PackageVersion(p.version),
                download_location=PackageDownloadLocation(NOASSERTION),
                files_analyzed=FilesAnalyzed(files_analyzed),
                license_concluded=PackageLicenseConcluded(NoAssertion()),
                license_declared=PackageLicenseDeclared(self.package_license(p)),
                copyright_text=PackageCopyrightText(NOASSERTION),
                files=files,
            )
        return results

    def package_license(self, p: CatalogPackage) -> LicenseClassification:
        """Return the license classification of a package.

        A license that cannot be identified is reported as a warning and
        gives NOASSERTION.
        """
        try:
            return classify(p.licenses, self.license_lookup)
        except UnknownLicenseError as err:
            logger.warning(
                "unable to parse SPDX license for package=%s : %s",
                p,
                err.messages[-1],
            )
            return NoAssertion()

    def package_files(self, p: CatalogPackage) -> tuple[bool, list[File]]:
        """Return whether the files of a package were analyzed and its files.

        Only packages whose metadata lists the files they own have their
        files analyzed.
        """
        if not isinstance(p.metadata, FileOwnerMetadata):
            return False, []

        return True, [
            File(
                name=FileName(path),
                spdx_id=SPDXID(path, verbatim=True),
                checksum=[],
                license_concluded=LicenseConcluded(NoAssertion()),
                license_info_in_file=[LicenseInfoInFile(NoAssertion())],
                copyright_text=FileCopyrightText(NOASSERTION),
            )
            for path in p.metadata.owned_files()
        ]
