"""Load a catalog snapshot file.

A snapshot is a YAML (or JSON) document describing the scanned source and
the packages found in it::

    source:
      scheme: image
      user_input: alpine:3.12
    packages:
      - name: curl
        version: 7.68.0
        type: deb
        licenses: [MIT]
        metadata_type: DpkgMetadata
        metadata:
          package: curl
          files:
            - path: /usr/bin/curl

``metadata_type`` selects the metadata class, see
:data:`spdxgen.pkg.METADATA_CLASSES`. Files of the file owner metadata are
lists of mappings whose keys are the attributes of the corresponding file
record class.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import yaml

import spdxgen.log
from spdxgen.error import SnapshotError
from spdxgen.pkg import (
    METADATA_CLASSES,
    ApkFileRecord,
    ApkMetadata,
    Catalog,
    Digest,
    DpkgFileRecord,
    DpkgMetadata,
    Package,
    PackageType,
    PythonFileRecord,
    PythonPackageMetadata,
    RpmdbFileRecord,
    RpmdbMetadata,
)
from spdxgen.source import ImageMetadata, Scheme, SourceMetadata

if TYPE_CHECKING:
    from typing import Any
    from spdxgen.pkg import PackageMetadata

FILE_RECORD_CLASSES: dict[type, type] = {
    DpkgMetadata: DpkgFileRecord,
    RpmdbMetadata: RpmdbFileRecord,
    ApkMetadata: ApkFileRecord,
    PythonPackageMetadata: PythonFileRecord,
}


def get_list(data: dict, key: str, origin: str) -> list:
    """Return the list value of *key*, [] if *key* is missing.

    A single string is accepted as a one element list.

    :raise SnapshotError: if the value is neither a list nor a string (a key
        present with a null value included)
    """
    if key not in data:
        return []
    value = data[key]
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        raise SnapshotError(
            f"{key} must be a list, got {type(value).__name__}", origin=origin
        )
    return value


def load_source(data: Any) -> SourceMetadata:
    """Return the source metadata described by the ``source`` mapping."""
    if not isinstance(data, dict):
        raise SnapshotError("source must be a mapping", origin="load_source")

    scheme_name = data.get("scheme", Scheme.IMAGE.value)
    if scheme_name == Scheme.IMAGE.value:
        return SourceMetadata(
            scheme=Scheme.IMAGE,
            image_metadata=ImageMetadata(
                user_input=str(data.get("user_input", "")),
                image_id=str(data.get("image_id", "")),
                manifest_digest=str(data.get("manifest_digest", "")),
                media_type=str(data.get("media_type", "")),
                tags=[str(t) for t in get_list(data, "tags", "load_source")],
            ),
        )
    elif scheme_name == Scheme.DIRECTORY.value:
        return SourceMetadata(scheme=Scheme.DIRECTORY, path=str(data.get("path", "")))
    raise SnapshotError(f"unknown source scheme {scheme_name!r}", origin="load_source")


def load_file_record(record_cls: type, data: Any) -> Any:
    """Return a file record from a path or a mapping of its attributes.

    :raise TypeError: if *data* does not describe a record
    :raise ValueError: if the path of the record is not a string
    """
    if isinstance(data, str):
        return record_cls(path=data)
    data = dict(data)
    if not isinstance(data.get("path"), str):
        raise ValueError(f"file path must be a string, got {data.get('path')!r}")
    if record_cls is PythonFileRecord and isinstance(data.get("digest"), dict):
        data["digest"] = Digest(**data["digest"])
    return record_cls(**data)


def load_metadata(metadata_type: Any, data: Any) -> PackageMetadata:
    """Return the package metadata of the given type.

    :param metadata_type: name of the metadata class
    :param data: a mapping of the metadata class attributes
    """
    origin = "load_metadata"
    if not isinstance(metadata_type, str) or metadata_type not in METADATA_CLASSES:
        raise SnapshotError(f"unknown metadata type {metadata_type!r}", origin=origin)
    metadata_cls = METADATA_CLASSES[metadata_type]

    if data is not None and not isinstance(data, dict):
        raise SnapshotError(
            f"invalid {metadata_type}: metadata must be a mapping", origin=origin
        )

    record_cls = FILE_RECORD_CLASSES.get(metadata_cls)
    try:
        kwargs = dict(data or {})
        if kwargs.get("files") is None:
            kwargs.pop("files", None)
        elif record_cls is not None:
            kwargs["files"] = [
                load_file_record(record_cls, f)
                for f in get_list(kwargs, "files", origin)
            ]
        return metadata_cls(**kwargs)
    except (TypeError, ValueError) as err:
        raise SnapshotError(f"invalid {metadata_type}: {err}", origin=origin) from err


def load_package(data: Any) -> Package:
    """Return the catalog package described by a ``packages`` item."""
    origin = "load_package"
    if not isinstance(data, dict) or "name" not in data:
        raise SnapshotError(f"invalid package entry {data!r}", origin=origin)

    metadata = None
    if data.get("metadata_type"):
        metadata = load_metadata(data["metadata_type"], data.get("metadata"))

    return Package(
        name=str(data["name"]),
        version=str(data.get("version", "")),
        type=PackageType.from_str(data.get("type")),
        licenses=[str(lic) for lic in get_list(data, "licenses", origin)],
        metadata=metadata,
        found_by=str(data.get("found_by", "")),
        language=str(data.get("language", "")),
        locations=[str(loc) for loc in get_list(data, "locations", origin)],
    )


def load_snapshot(filename: str) -> tuple[Catalog, SourceMetadata]:
    """Load a catalog snapshot file.

    :param filename: path to the snapshot
    :return: the catalog and the source metadata of the snapshot
    :raise SnapshotError: if the file cannot be read or is invalid
    """
    try:
        with open(filename) as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as err:
        raise SnapshotError(
            f"cannot load {filename}: {err}", origin="load_snapshot"
        ) from err

    if not isinstance(data, dict):
        raise SnapshotError(
            f"{filename}: expecting a mapping at top level", origin="load_snapshot"
        )

    src_metadata = load_source(data.get("source", {}))
    catalog = Catalog()
    for package_data in data.get("packages") or []:
        catalog.add(load_package(package_data))

    spdxgen.log.debug(
        "%s: %d packages from %s", filename, catalog.package_count, src_metadata
    )
    return catalog, src_metadata
