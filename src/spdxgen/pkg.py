"""Package catalog.

A :class:`Catalog` is the inventory produced by a scan: a set of
:class:`Package` objects, each one optionally carrying a metadata object
whose class depends on the ecosystem the package was found in.

Only some metadata classes know which files the package installed. They all
derive from :class:`FileOwnerMetadata`, so that consumers can select them by
class instead of probing for an attribute::

    if isinstance(package.metadata, FileOwnerMetadata):
        files = package.metadata.owned_files()
"""

from __future__ import annotations

from abc import ABCMeta, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, ClassVar

import spdxgen.log

if TYPE_CHECKING:
    from typing import Iterator


class PackageType(Enum):
    """Ecosystem in which a package was found."""

    APK = "apk"
    DEB = "deb"
    RPM = "rpm"
    PYTHON = "python"
    NPM = "npm"
    GEM = "gem"
    JAVA = "java-archive"
    JENKINS_PLUGIN = "jenkins-plugin"
    GO_MODULE = "go-module"
    RUST = "rust-crate"
    UNKNOWN = "UnknownPackage"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_str(cls, value: str | None) -> PackageType:
        """Return the package type named *value*, UNKNOWN if there is none."""
        for pkg_type in cls:
            if pkg_type.value == value:
                return pkg_type
        return cls.UNKNOWN


class PackageMetadata:
    """Ecosystem specific data attached to a package."""

    metadata_type: ClassVar[str] = "UnknownMetadata"


class FileOwnerMetadata(PackageMetadata, metaclass=ABCMeta):
    """Metadata of a package that knows the files it installed."""

    @abstractmethod
    def owned_files(self) -> list[str]:
        """Return the sorted list of the absolute paths owned by the package."""
        pass


def _paths_of(records: list) -> list[str]:
    return sorted({record.path for record in records if record.path})


@dataclass(frozen=True)
class Digest:
    algorithm: str
    value: str


@dataclass(frozen=True)
class DpkgFileRecord:
    path: str
    md5: str = ""
    is_config_file: bool = False


@dataclass
class DpkgMetadata(FileOwnerMetadata):
    """Entry of a dpkg status file."""

    metadata_type: ClassVar[str] = "DpkgMetadata"

    package: str
    source: str = ""
    version: str = ""
    architecture: str = ""
    maintainer: str = ""
    installed_size: int = 0
    files: list[DpkgFileRecord] = field(default_factory=list)

    def owned_files(self) -> list[str]:
        return _paths_of(self.files)


@dataclass(frozen=True)
class RpmdbFileRecord:
    path: str
    mode: int = 0
    size: int = 0
    sha256: str = ""


@dataclass
class RpmdbMetadata(FileOwnerMetadata):
    """Entry of an RPM database."""

    metadata_type: ClassVar[str] = "RpmdbMetadata"

    name: str
    version: str = ""
    epoch: int | None = None
    arch: str = ""
    release: str = ""
    source_rpm: str = ""
    size: int = 0
    license: str = ""
    vendor: str = ""
    files: list[RpmdbFileRecord] = field(default_factory=list)

    def owned_files(self) -> list[str]:
        return _paths_of(self.files)


@dataclass(frozen=True)
class ApkFileRecord:
    path: str
    owner_uid: str = ""
    owner_gid: str = ""
    permissions: str = ""
    checksum: str = ""


@dataclass
class ApkMetadata(FileOwnerMetadata):
    """Entry of an Alpine installed database."""

    metadata_type: ClassVar[str] = "ApkMetadata"

    package: str
    origin_package: str = ""
    maintainer: str = ""
    version: str = ""
    license: str = ""
    architecture: str = ""
    url: str = ""
    description: str = ""
    files: list[ApkFileRecord] = field(default_factory=list)

    def owned_files(self) -> list[str]:
        return _paths_of(self.files)


@dataclass(frozen=True)
class PythonFileRecord:
    path: str
    digest: Digest | None = None
    size: str = ""


@dataclass
class PythonPackageMetadata(FileOwnerMetadata):
    """Metadata of an installed Python distribution (from its RECORD file)."""

    metadata_type: ClassVar[str] = "PythonPackageMetadata"

    name: str
    version: str = ""
    license: str = ""
    author: str = ""
    author_email: str = ""
    platform: str = ""
    site_packages_root_path: str = ""
    top_level_packages: list[str] = field(default_factory=list)
    files: list[PythonFileRecord] = field(default_factory=list)

    def owned_files(self) -> list[str]:
        return _paths_of(self.files)


@dataclass
class NpmPackageJSONMetadata(PackageMetadata):
    metadata_type: ClassVar[str] = "NpmPackageJsonMetadata"

    name: str = ""
    version: str = ""
    author: str = ""
    homepage: str = ""
    description: str = ""
    url: str = ""
    licenses: list[str] = field(default_factory=list)


@dataclass
class GemMetadata(PackageMetadata):
    metadata_type: ClassVar[str] = "GemMetadata"

    name: str = ""
    version: str = ""
    homepage: str = ""
    authors: list[str] = field(default_factory=list)
    licenses: list[str] = field(default_factory=list)


@dataclass
class JavaMetadata(PackageMetadata):
    metadata_type: ClassVar[str] = "JavaMetadata"

    virtual_path: str = ""
    group_id: str = ""
    artifact_id: str = ""
    manifest: dict[str, str] = field(default_factory=dict)


@dataclass
class CargoPackageMetadata(PackageMetadata):
    metadata_type: ClassVar[str] = "RustCargoPackageMetadata"

    name: str = ""
    version: str = ""
    source: str = ""
    checksum: str = ""
    dependencies: list[str] = field(default_factory=list)


METADATA_CLASSES: dict[str, type[PackageMetadata]] = {
    cls.metadata_type: cls
    for cls in (
        DpkgMetadata,
        RpmdbMetadata,
        ApkMetadata,
        PythonPackageMetadata,
        NpmPackageJSONMetadata,
        GemMetadata,
        JavaMetadata,
        CargoPackageMetadata,
    )
}
"""Metadata classes indexed by their metadata type name."""


@dataclass
class Package:
    """A package found by a scan.

    :ivar name: the package name
    :ivar version: the package version, as found (no normalization)
    :ivar type: ecosystem of the package
    :ivar licenses: raw license strings, as declared by the package
    :ivar metadata: ecosystem specific metadata, or None
    :ivar found_by: name of the cataloger that found the package
    :ivar language: language of the package, if relevant
    :ivar locations: paths where evidence of the package was found
    :ivar id: identifier assigned by the catalog
    """

    name: str
    version: str
    type: PackageType = PackageType.UNKNOWN
    licenses: list[str] = field(default_factory=list)
    metadata: PackageMetadata | None = None
    found_by: str = ""
    language: str = ""
    locations: list[str] = field(default_factory=list)
    id: int | None = field(default=None, compare=False)

    def __str__(self) -> str:
        return f"Pkg(type={self.type}, name={self.name}, version={self.version})"


class Catalog:
    """An ordered collection of packages.

    Packages are enumerated in insertion order. The catalog is meant to be
    filled once and then read: no method removes a package.
    """

    def __init__(self, packages: list[Package] | None = None) -> None:
        self.__packages: dict[int, Package] = {}
        self.__next_id = 0
        for p in packages or []:
            self.add(p)

    def add(self, package: Package) -> Package:
        """Add a package to the catalog.

        :param package: the package to add; its id is set by the catalog
        :return: the added package
        """
        package.id = self.__next_id
        self.__next_id += 1
        self.__packages[package.id] = package
        spdxgen.log.debug("catalog: add %s", package)
        return package

    def package(self, package_id: int) -> Package | None:
        """Return the package with the given catalog id, if any."""
        return self.__packages.get(package_id)

    def enumerate(self, *types: PackageType) -> Iterator[Package]:
        """Yield the packages of the catalog.

        :param types: restrict to packages of these types (all packages if
            not set)
        """
        for p in self.__packages.values():
            if not types or p.type in types:
                yield p

    def sorted(self, *types: PackageType) -> list[Package]:
        """Return the packages sorted by name, version and type."""
        return sorted(
            self.enumerate(*types), key=lambda p: (p.name, p.version, p.type.value)
        )

    @property
    def package_count(self) -> int:
        return len(self.__packages)

    def __len__(self) -> int:
        return self.package_count

    def __iter__(self) -> Iterator[Package]:
        return self.enumerate()
