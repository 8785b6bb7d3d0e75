"""SPDX 2.2 documents and their tag:value encoding.

This is following the specification from https://spdx.github.io/spdx-spec/v2.2.2/

Each SPDX tag is represented by a class deriving from :class:`SPDXEntry`.
Entries are grouped in sections (:class:`DocumentInformation`,
:class:`CreationInformation`, :class:`Package` and :class:`File`), which
render the entries they hold in the order of their fields, skipping the
optional ones set to :const:`None`. For instance::

    >>> from spdxgen.spdx import Document, Organization, Tool
    >>> doc = Document(
    ...     document_name="alpine:3.12",
    ...     document_namespace="https://example.com/alpine:3.12",
    ...     creators=[Organization("ACME"), Tool("spdxgen-1.0.0")],
    ... )
    >>> print("\\n".join(doc.to_tagvalue()))  # doctest: +SKIP
"""

from __future__ import annotations

from abc import ABCMeta, abstractmethod
from dataclasses import dataclass, field, fields
from datetime import datetime, timezone

from typing import TYPE_CHECKING

from spdxgen.error import SpdxGenError

if TYPE_CHECKING:
    from typing import Literal, Optional, TextIO, Union

    from spdxgen.license import LicenseClassification

NOASSERTION: Literal["NOASSERTION"] = "NOASSERTION"
"""Indicates that the preparer of the SPDX document is not making any assertion
regarding the value of this field.
"""
NONE_VALUE: Literal["NONE"] = "NONE"
"""Indicates that the preparer of the SPDX document believes that there is no
value for the field. This value should only be used if there is sufficient
evidence to support this assertion."""

if TYPE_CHECKING:
    MAYBE_STR = Union[str, Literal["NOASSERTION"], Literal["NONE"]]

CREATED_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


class InvalidSPDX(SpdxGenError):
    """Raise an exception when the SPDX document cannot be generated."""

    pass


class SPDXEntry(metaclass=ABCMeta):
    """Describe an SPDX Entry."""

    @property
    def entry_key(self) -> str:
        """Name of the SPDXEntry as visible in the SPDX tag:value report."""
        return self.__class__.__name__

    @abstractmethod
    def __str__(self) -> str:
        pass

    def __format__(self, format_spec: str) -> str:
        return self.__str__()

    def __eq__(self, other: object) -> bool:
        return type(other) is type(self) and str(other) == str(self)

    def __hash__(self) -> int:
        return hash((type(self).__name__, str(self)))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({str(self)!r})"

    def to_tagvalue(self) -> str:
        """Return a valid tag:value line."""
        return f"{self.entry_key}: {self}"


class SPDXEntryStr(SPDXEntry):
    """Describe an SPDX Entry accepting a string."""

    def __init__(self, value: str) -> None:
        self.value = value

    def __str__(self) -> str:
        return self.value


class SPDXEntryMaybeStr(SPDXEntry):
    """Describe an SPDX Entry accepting a string, NOASSERTION, or NONE."""

    def __init__(self, value: MAYBE_STR) -> None:
        self.value = value

    def __str__(self) -> str:
        return self.value


class SPDXEntryMaybeStrMultilines(SPDXEntryMaybeStr):
    def to_tagvalue(self) -> str:
        """Return the content that can span to multiple lines.

        In tag:value format multiple lines are delimited by <text>...</text>.
        """
        if self.value in (NOASSERTION, NONE_VALUE):
            return f"{self.entry_key}: {self.value}"
        else:
            return f"{self.entry_key}: <text>{self}</text>"


class SPDXEntryBool(SPDXEntry):
    """Describe an SPDX Entry accepting a boolean."""

    def __init__(self, value: bool) -> None:
        self.value: bool = value

    def __str__(self) -> str:
        return "true" if self.value else "false"


class SPDXEntryLicense(SPDXEntry):
    """Describe an SPDX Entry holding a license classification.

    The classification is only converted to its SPDX string (a license
    identifier, NONE or NOASSERTION) when rendered.
    """

    def __init__(self, value: LicenseClassification) -> None:
        self.value = value

    def __str__(self) -> str:
        return str(self.value)


@dataclass
class SPDXSection:
    """Describe an SPDX section."""

    def to_tagvalue(self) -> list[str]:
        """Generate a chunk of an SPDX tag:value document.

        Return a list of SPDX lines
        """
        output = []
        for fd in fields(self):
            section_field = self.__dict__[fd.name]
            if section_field is None:
                continue
            if isinstance(section_field, list):
                for extra_field in section_field:
                    if isinstance(extra_field, SPDXEntry):
                        output.append(extra_field.to_tagvalue())
            elif isinstance(section_field, SPDXEntry):
                output.append(section_field.to_tagvalue())

        return output


class SPDXVersion(SPDXEntryStr):
    """Provide the SPDX version used to generate the document.

    See 6.1 `SPDX version field
    <https://spdx.github.io/spdx-spec/v2.2.2/document-creation-information/#61-spdx-version-field>`_.
    """

    VERSION: str = "SPDX-2.2"


class DataLicense(SPDXEntryStr):
    """License of the SPDX Metadata.

    See 6.2 `Data license field
    <https://spdx.github.io/spdx-spec/v2.2.2/document-creation-information/#62-data-license-field>`_.
    """

    LICENSE: str = "CC0-1.0"


class SPDXID(SPDXEntryStr):
    """Identify an SPDX element (document, package or file).

    See 6.3 `SPDX identifier field
    <https://spdx.github.io/spdx-spec/v2.2.2/document-creation-information/#63-spdx-identifier-field>`_,
    7.2 `Package SPDX identifier field
    <https://spdx.github.io/spdx-spec/v2.2.2/package-information/#72-package-spdx-identifier-field>`_
    and 8.2 `File SPDX identifier field
    <https://spdx.github.io/spdx-spec/v2.2.2/file-information/#82-file-spdx-identifier-field>`_.

    The value is kept verbatim: characters that the SPDX specification
    does not allow in identifiers (such as ``/`` in a file path) are not
    removed, and the caller is responsible for uniqueness.
    """

    PREFIX: str = "SPDXRef-"
    DEFAULT_ID: str = "DOCUMENT"

    def __init__(self, value: str, verbatim: bool = False) -> None:
        """Initialize an SPDXID.

        :param value: the identifier, with or without the ``SPDXRef-`` prefix
        :param verbatim: if True, *value* is used as is even if it starts
            with ``SPDXRef-`` (e.g. for a file path)
        """
        if not verbatim and value.startswith(self.PREFIX):
            value = value[len(self.PREFIX) :]
        super().__init__(value)

    def __str__(self) -> str:
        return f"{self.PREFIX}{self.value}"

    def __lt__(self, other: SPDXID) -> bool:
        return self.value < other.value


class DocumentName(SPDXEntryStr):
    """Identify name of this document.

    See 6.4 `Document name field
    <https://spdx.github.io/spdx-spec/v2.2.2/document-creation-information/#64-document-name-field>`_.
    """


class DocumentNamespace(SPDXEntryStr):
    """Provide a URI identifying this document.

    See 6.5 `SPDX document namespace field
    <https://spdx.github.io/spdx-spec/v2.2.2/document-creation-information/#65-spdx-document-namespace-field>`_.
    """


class Entity(SPDXEntryStr):
    """Represent an Entity (Organization, Person, Tool)."""

    def to_tagvalue(self) -> str:
        return f"{self.entry_key}: {self.value}"

    def __str__(self) -> str:
        return self.to_tagvalue()


class Organization(Entity):
    """Identify an organization by its name."""


class Person(Entity):
    """Identify a person by its name."""


class Tool(Entity):
    """Identify a tool by its name and version."""


class EntityRef(SPDXEntry):
    """Reference an Entity.

    Accept NOASSERTION as a valid value.
    """

    def __init__(self, value: Entity | Literal["NOASSERTION"]) -> None:
        """Initialize an EntityRef.

        :param value: an Entity object or NOASSERTION
        """
        self.value = value

    def __str__(self) -> str:
        if self.value == NOASSERTION:
            return NOASSERTION
        return self.value.to_tagvalue()


class Creator(EntityRef):
    """Identify who (or what, in the case of a tool) created the SPDX document.

    See 6.8 `Creator field
    <https://spdx.github.io/spdx-spec/v2.2.2/document-creation-information/#68-creator-field>`_.
    """


class Created(SPDXEntryStr):
    """Identify when the SPDX document was originally created.

    See 6.9 `Created field
    <https://spdx.github.io/spdx-spec/v2.2.2/document-creation-information/#69-created-field>`_.
    """

    @classmethod
    def from_datetime(cls, date: datetime) -> Created:
        """Initialize a :class:`Created` from a :class:`datetime`.

        The date is converted to UTC. A naive *date* is considered as being
        already in UTC.

        :param date: creation date of the document
        """  # noqa RST304
        if date.tzinfo is None:
            date = date.replace(tzinfo=timezone.utc)
        return cls(date.astimezone(timezone.utc).strftime(CREATED_FORMAT))


class PackageName(SPDXEntryStr):
    """Identify the full name of the package.

    See 7.1 `Package name field
    <https://spdx.github.io/spdx-spec/v2.2.2/package-information/#71-package-name-field>`_
    """


class PackageVersion(SPDXEntryStr):
    """Identify the version of the package.

    See 7.3 `Package version field
    <https://spdx.github.io/spdx-spec/v2.2.2/package-information/#73-package-version-field>`_
    """


class PackageSupplier(EntityRef):
    """Identify the actual distribution source for the package.

    See 7.5 `Package supplier field
    <https://spdx.github.io/spdx-spec/v2.2.2/package-information/#75-package-supplier-field>`_
    """


class PackageDownloadLocation(SPDXEntryMaybeStr):
    """Identifies the download location of the package.

    See 7.7 `Package download location field
    <https://spdx.github.io/spdx-spec/v2.2.2/package-information/#77-package-download-location-field>`_
    """


class FilesAnalyzed(SPDXEntryBool):
    """Indicates whether the file content of this package have been analyzed.

    See 7.8 `Files analyzed field
    <https://spdx.github.io/spdx-spec/v2.2.2/package-information/#78-files-analyzed-field>`_
    """


class PackageVerificationCode(SPDXEntryStr):
    """Identify the package from the content of its files.

    See 7.9 `Package verification code field
    <https://spdx.github.io/spdx-spec/v2.2.2/package-information/#79-package-verification-code-field>`_

    :ivar excluded_files: files not taken into account to compute the code
    """

    def __init__(self, value: str, excluded_files: Optional[list[str]] = None):
        super().__init__(value)
        self.excluded_files = excluded_files or []

    def __str__(self) -> str:
        if self.excluded_files:
            return f"{self.value} (excludes: {' '.join(self.excluded_files)})"
        return self.value


class Checksum(SPDXEntryStr, metaclass=ABCMeta):
    """Base class of the checksum entries."""

    @property
    @abstractmethod
    def algorithm(self) -> str:
        pass

    def __str__(self) -> str:
        return "{0}: {1}".format(self.algorithm, self.value)


class PackageChecksum(Checksum, metaclass=ABCMeta):
    """Provide a mechanism that permits unique identification of the package.

    See 7.10 `Package checksum field
    <https://spdx.github.io/spdx-spec/v2.2.2/package-information/#710-package-checksum-field>`_
    """

    entry_key = "PackageChecksum"


class FileChecksum(Checksum, metaclass=ABCMeta):
    """Provide a unique identifier to match analysis information on each file.

    See 8.4 `File checksum field
    <https://spdx.github.io/spdx-spec/v2.2.2/file-information/#84-file-checksum-field>`_
    """

    entry_key = "FileChecksum"


class PackageSHA256(PackageChecksum):
    algorithm = "SHA256"


class FileSHA1(FileChecksum):
    algorithm = "SHA1"


class PackageLicenseConcluded(SPDXEntryLicense):
    """Contain the license concluded as governing the package.

    See 7.13 `Concluded license field
    <https://spdx.github.io/spdx-spec/v2.2.2/package-information/#713-concluded-license-field>`_
    """


class PackageLicenseDeclared(SPDXEntryLicense):
    """Contain the license having been declared by the authors of the package.

    See 7.15 `Declared license field
    <https://spdx.github.io/spdx-spec/v2.2.2/package-information/#715-declared-license-field>`_
    """


class PackageCopyrightText(SPDXEntryMaybeStrMultilines):
    """Identify the copyright holders of the package.

    See 7.17 `Copyright text field
    <https://spdx.github.io/spdx-spec/v2.2.2/package-information/#717-copyright-text-field>`_
    """


class PackageComment(SPDXEntryMaybeStrMultilines):
    """Record general comments about the package being described.

    See 7.20 `Package comment field
    <https://spdx.github.io/spdx-spec/v2.2.2/package-information/#720-package-comment-field>`_
    """


class FileName(SPDXEntryStr):
    """Identify the full path and filename of a file.

    See 8.1 `File name field
    <https://spdx.github.io/spdx-spec/v2.2.2/file-information/#81-file-name-field>`_
    """


class LicenseConcluded(SPDXEntryLicense):
    """Contain the license concluded as governing the file.

    See 8.5 `Concluded license field
    <https://spdx.github.io/spdx-spec/v2.2.2/file-information/#85-concluded-license-field>`_
    """


class LicenseInfoInFile(SPDXEntryLicense):
    """Contain a license information actually found in the file.

    See 8.6 `License information in file field
    <https://spdx.github.io/spdx-spec/v2.2.2/file-information/#86-license-information-in-file-field>`_
    """


class FileCopyrightText(SPDXEntryMaybeStrMultilines):
    """Identify the copyright holders of the file.

    See 8.8 `Copyright text field
    <https://spdx.github.io/spdx-spec/v2.2.2/file-information/#88-copyright-text-field>`_
    """


@dataclass
class File(SPDXSection):
    """Describe a file of a package.

    See `8 File information section
    <https://spdx.github.io/spdx-spec/v2.2.2/file-information/>`_

    :ivar FileName name: path of the file, relative to the root of the
        package, or absolute for files installed on a system.
    :ivar SPDXID spdx_id: identifier of the file in the document.
    :ivar list[FileChecksum] checksum: checksums of the file content.
        SPDX 2.2 mandates a SHA1 checksum, files described without one
        are accepted as no content was analyzed.
    :ivar LicenseConcluded license_concluded: license governing the file,
        NOASSERTION when no analysis was done.
    :ivar list[LicenseInfoInFile] license_info_in_file: licenses found in the
        file, at least one value (possibly NOASSERTION).
    :ivar FileCopyrightText copyright_text: copyright notices found in the
        file.
    """  # noqa RST304

    name: FileName
    spdx_id: SPDXID
    checksum: list[FileChecksum]
    license_concluded: LicenseConcluded
    license_info_in_file: list[LicenseInfoInFile]
    copyright_text: FileCopyrightText = field(
        default_factory=lambda: FileCopyrightText(NOASSERTION)
    )

    def __post_init__(self) -> None:
        if not self.license_info_in_file:
            raise InvalidSPDX(
                f"file {self.spdx_id} must have at least one LicenseInfoInFile",
                origin="File",
            )


@dataclass
class Package(SPDXSection):
    """Describe a package.

    If the SPDX information describes a package, the following fields shall be
    included per package. See `7 Package information section
    <https://spdx.github.io/spdx-spec/v2.2.2/package-information/>`_

    :ivar PackageName name: the full name of the package.
    :ivar SPDXID spdx_id: identifier of the package in the document.
    :ivar PackageVersion version: the version of the package.
    :ivar PackageDownloadLocation download_location: the URL or VCS location
        the package can be downloaded from, or NONE/NOASSERTION.
    :ivar FilesAnalyzed files_analyzed: whether the file content of the package
        has been subjected to analysis. If ``False``, the package shall not
        contain any files: building a :class:`Package` with files and
        ``files_analyzed`` set to ``False`` raises :exc:`InvalidSPDX`.
    :ivar PackageLicenseConcluded license_concluded: the license the SPDX
        document creator has concluded as governing the package.
    :ivar PackageLicenseDeclared license_declared: the license declared by the
        authors of the package.
    :ivar PackageCopyrightText copyright_text: the copyright holders of the
        package.
    :ivar PackageVerificationCode | None verification_code: a code computed
        from the files of the package. Only meaningful when files were
        analyzed.
    :ivar PackageSupplier | None supplier: the distribution source of the
        package, left to :const:`None` when nothing is asserted.
    :ivar list[PackageChecksum] checksum: checksums of the package archive.
    :ivar PackageComment | None comment: free form comment on the package.
    :ivar list[File] files: the files of the package, rendered after the
        package entries and sorted by identifier.
    """  # noqa RST304

    name: PackageName
    spdx_id: SPDXID
    version: PackageVersion
    download_location: PackageDownloadLocation
    files_analyzed: FilesAnalyzed
    license_concluded: PackageLicenseConcluded
    license_declared: PackageLicenseDeclared
    copyright_text: PackageCopyrightText
    supplier: PackageSupplier | None = field(default=None)
    verification_code: PackageVerificationCode | None = field(default=None)
    checksum: list[PackageChecksum] = field(default_factory=list)
    comment: PackageComment | None = field(default=None)
    files: list[File] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.files and not self.files_analyzed.value:
            raise InvalidSPDX(
                f"package {self.spdx_id} has files but FilesAnalyzed is false",
                origin="Package",
            )

    def to_tagvalue(self) -> list[str]:
        """Generate the package lines followed by its files."""
        output = [f"##### Package: {self.name}", ""] + super().to_tagvalue()
        for f in sorted(self.files, key=lambda f: f.spdx_id):
            output += [""] + f.to_tagvalue()
        return output


@dataclass
class DocumentInformation(SPDXSection):
    """Describe the SPDX Document."""

    document_name: DocumentName
    document_namespace: DocumentNamespace
    version: SPDXVersion = field(
        default_factory=lambda: SPDXVersion(SPDXVersion.VERSION)
    )
    data_license: DataLicense = field(
        default_factory=lambda: DataLicense(DataLicense.LICENSE)
    )
    spdx_id: SPDXID = field(default_factory=lambda: SPDXID(SPDXID.DEFAULT_ID))

    def to_tagvalue(self) -> list[str]:
        # Mandatory order of the document header
        return [
            e.to_tagvalue()
            for e in (
                self.version,
                self.data_license,
                self.spdx_id,
                self.document_name,
                self.document_namespace,
            )
        ]


@dataclass
class CreationInformation(SPDXSection):
    """Document where and by whom the SPDX document has been created."""

    creators: list[Creator]
    created: Created


class Document:
    """Describe the SPDX Document."""

    def __init__(
        self,
        document_name: str,
        document_namespace: str,
        creators: list[Entity],
        created: datetime | None = None,
        packages: dict[SPDXID, Package] | None = None,
    ) -> None:
        """Initialize the SPDX Document.

        :param document_name: The name of this document.
        :param document_namespace: The URI identifying this document.
        :param creators: A list of Entity objects, considered as the creators
            of this document. It must contain at least one :class:`Tool`.
        :param created: Creation date of the document, now if not set.
        :param packages: The packages described by the document, indexed by
            their identifier.

        :raise InvalidSPDX: if *creators* does not contain a Tool
        """  # noqa RST304
        if not any(isinstance(c, Tool) for c in creators):
            raise InvalidSPDX("a Tool creator is mandatory", origin="Document")
        if created is None:
            created = datetime.now(tz=timezone.utc)

        self.doc_info = DocumentInformation(
            document_name=DocumentName(document_name),
            document_namespace=DocumentNamespace(document_namespace),
        )
        self.creation_info = CreationInformation(
            creators=[Creator(c) for c in creators],
            created=Created.from_datetime(created),
        )
        self.packages: dict[SPDXID, Package] = dict(packages or {})

    @property
    def spdx_id(self) -> SPDXID:
        """Return the Document SPDXID."""
        return self.doc_info.spdx_id

    def add_package(self, package: Package) -> SPDXID:
        """Add a new Package to the document.

        :param package: An already created :class:`Package`
        :return: the package SPDX_ID
        :raise InvalidSPDX: if a package with the same identifier is already
            part of the document
        """  # noqa RST304
        if package.spdx_id in self.packages:
            raise InvalidSPDX(
                f"A package with the same SPDXID {package.spdx_id}"
                " has already been added",
                origin="Document.add_package",
            )
        self.packages[package.spdx_id] = package
        return package.spdx_id

    def to_tagvalue(self) -> list[str]:
        """Generate a list of tag:value lines describing the SPDX document.

        Packages appear sorted by identifier so that the output does not
        depend on the order in which they were added.
        """
        output: list[str] = []
        is_first_section = True

        def add_section(section: str) -> None:
            nonlocal is_first_section
            nonlocal output
            if not is_first_section:
                output += [""]
            is_first_section = False
            output += [f"##### {section}", ""]

        add_section("Document Information")
        output += self.doc_info.to_tagvalue()

        add_section("Creation Info")
        output += self.creation_info.to_tagvalue()

        for spdx_id in sorted(self.packages):
            output += [""] + self.packages[spdx_id].to_tagvalue()

        return output

    def write(self, stream: TextIO) -> None:
        """Write the tag:value document to *stream*.

        The whole document is rendered before anything is written.

        :param stream: a text stream
        """
        content = "\n".join(self.to_tagvalue()) + "\n"
        stream.write(content)
