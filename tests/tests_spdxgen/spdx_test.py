from __future__ import annotations

from datetime import datetime, timedelta, timezone
import io

import pytest

from spdxgen.license import LicenseId, NoAssertion, NoLicense
from spdxgen.spdx import (
    NOASSERTION,
    NONE_VALUE,
    SPDXID,
    Created,
    Creator,
    Document,
    File,
    FileCopyrightText,
    FileName,
    FileSHA1,
    FilesAnalyzed,
    InvalidSPDX,
    LicenseConcluded,
    LicenseInfoInFile,
    Organization,
    Package,
    PackageComment,
    PackageCopyrightText,
    PackageDownloadLocation,
    PackageLicenseConcluded,
    PackageLicenseDeclared,
    PackageName,
    PackageSHA256,
    PackageSupplier,
    PackageVerificationCode,
    PackageVersion,
    Person,
    Tool,
)


def make_file(path: str) -> File:
    return File(
        name=FileName(path),
        spdx_id=SPDXID(path, verbatim=True),
        checksum=[],
        license_concluded=LicenseConcluded(NoAssertion()),
        license_info_in_file=[LicenseInfoInFile(NoAssertion())],
    )


def make_package(name: str, files_analyzed: bool = False, **kwargs) -> Package:
    return Package(
        name=PackageName(name),
        spdx_id=SPDXID(f"Package-deb-{name}"),
        version=PackageVersion("1.0"),
        download_location=PackageDownloadLocation(NOASSERTION),
        files_analyzed=FilesAnalyzed(files_analyzed),
        license_concluded=PackageLicenseConcluded(NoAssertion()),
        license_declared=PackageLicenseDeclared(NoLicense()),
        copyright_text=PackageCopyrightText(NOASSERTION),
        **kwargs,
    )


def make_document(**kwargs) -> Document:
    return Document(
        document_name="alpine:3.12",
        document_namespace="https://example.com/alpine:3.12",
        creators=[Organization("ACME"), Tool("spdxgen-1.0.0")],
        created=datetime(2021, 1, 28, 14, 23, 5, tzinfo=timezone.utc),
        **kwargs,
    )


def test_entries():
    assert PackageName("curl").to_tagvalue() == "PackageName: curl"
    assert FilesAnalyzed(True).to_tagvalue() == "FilesAnalyzed: true"
    assert FilesAnalyzed(False).to_tagvalue() == "FilesAnalyzed: false"
    assert (
        PackageDownloadLocation(NONE_VALUE).to_tagvalue()
        == "PackageDownloadLocation: NONE"
    )
    assert (
        PackageComment("a comment").to_tagvalue()
        == "PackageComment: <text>a comment</text>"
    )
    assert (
        PackageCopyrightText(NOASSERTION).to_tagvalue()
        == "PackageCopyrightText: NOASSERTION"
    )
    assert PackageSHA256("abcd").to_tagvalue() == "PackageChecksum: SHA256: abcd"
    assert FileSHA1("0123").to_tagvalue() == "FileChecksum: SHA1: 0123"
    assert (
        PackageVerificationCode("d6a7", ["./package.spdx"]).to_tagvalue()
        == "PackageVerificationCode: d6a7 (excludes: ./package.spdx)"
    )


def test_license_entries():
    assert (
        PackageLicenseDeclared(LicenseId("MIT")).to_tagvalue()
        == "PackageLicenseDeclared: MIT"
    )
    assert (
        PackageLicenseDeclared(NoLicense()).to_tagvalue()
        == "PackageLicenseDeclared: NONE"
    )
    assert (
        PackageLicenseConcluded(NoAssertion()).to_tagvalue()
        == "PackageLicenseConcluded: NOASSERTION"
    )
    assert PackageLicenseDeclared(NoLicense()) == PackageLicenseDeclared(NoLicense())
    assert PackageLicenseDeclared(NoLicense()) != PackageLicenseConcluded(NoLicense())


def test_entities():
    assert Creator(Organization("ACME")).to_tagvalue() == "Creator: Organization: ACME"
    assert Creator(Tool("spdxgen-1.0.0")).to_tagvalue() == "Creator: Tool: spdxgen-1.0.0"
    assert Creator(Person("John Doe")).to_tagvalue() == "Creator: Person: John Doe"
    assert PackageSupplier(NOASSERTION).to_tagvalue() == "PackageSupplier: NOASSERTION"


def test_spdx_id():
    assert str(SPDXID("Package-deb-curl")) == "SPDXRef-Package-deb-curl"
    assert SPDXID("SPDXRef-DOCUMENT") == SPDXID("DOCUMENT")
    assert SPDXID("SPDXRef-DOCUMENT").value == "DOCUMENT"

    # File paths are kept verbatim
    assert str(SPDXID("/usr/lib/some dir/a.so")) == "SPDXRef-/usr/lib/some dir/a.so"
    assert sorted([SPDXID("b"), SPDXID("a")]) == [SPDXID("a"), SPDXID("b")]
    assert len({SPDXID("a"), SPDXID("SPDXRef-a")}) == 1

    verbatim = SPDXID("SPDXRef-notes.txt", verbatim=True)
    assert verbatim.value == "SPDXRef-notes.txt"
    assert str(verbatim) == "SPDXRef-SPDXRef-notes.txt"
    assert verbatim != SPDXID("SPDXRef-notes.txt")


def test_created():
    date = datetime(2021, 1, 28, 14, 23, 5, 123456, tzinfo=timezone.utc)
    assert str(Created.from_datetime(date)) == "2021-01-28T14:23:05Z"

    # Converted to UTC
    cet = timezone(timedelta(hours=1))
    date = datetime(2021, 1, 28, 15, 23, 5, tzinfo=cet)
    assert str(Created.from_datetime(date)) == "2021-01-28T14:23:05Z"

    naive = datetime(2021, 1, 28, 14, 23, 5)
    assert str(Created.from_datetime(naive)) == "2021-01-28T14:23:05Z"


def test_file():
    f = make_file("/usr/bin/curl")
    assert f.to_tagvalue() == [
        "FileName: /usr/bin/curl",
        "SPDXID: SPDXRef-/usr/bin/curl",
        "LicenseConcluded: NOASSERTION",
        "LicenseInfoInFile: NOASSERTION",
        "FileCopyrightText: NOASSERTION",
    ]

    with pytest.raises(InvalidSPDX) as err:
        File(
            name=FileName("/usr/bin/curl"),
            spdx_id=SPDXID("/usr/bin/curl"),
            checksum=[],
            license_concluded=LicenseConcluded(NoAssertion()),
            license_info_in_file=[],
        )
    assert "LicenseInfoInFile" in str(err.value)


def test_file_checksum():
    f = File(
        name=FileName("./a.txt"),
        spdx_id=SPDXID("a"),
        checksum=[FileSHA1("0123")],
        license_concluded=LicenseConcluded(LicenseId("MIT")),
        license_info_in_file=[
            LicenseInfoInFile(LicenseId("MIT")),
            LicenseInfoInFile(LicenseId("Apache-2.0")),
        ],
        copyright_text=FileCopyrightText("Copyright ACME"),
    )
    assert f.to_tagvalue() == [
        "FileName: ./a.txt",
        "SPDXID: SPDXRef-a",
        "FileChecksum: SHA1: 0123",
        "LicenseConcluded: MIT",
        "LicenseInfoInFile: MIT",
        "LicenseInfoInFile: Apache-2.0",
        "FileCopyrightText: <text>Copyright ACME</text>",
    ]


def test_package():
    pkg = make_package(
        "curl",
        files_analyzed=True,
        files=[make_file("/usr/bin/curl"), make_file("/etc/curl.conf")],
    )
    assert pkg.to_tagvalue() == [
        "##### Package: curl",
        "",
        "PackageName: curl",
        "SPDXID: SPDXRef-Package-deb-curl",
        "PackageVersion: 1.0",
        "PackageDownloadLocation: NOASSERTION",
        "FilesAnalyzed: true",
        "PackageLicenseConcluded: NOASSERTION",
        "PackageLicenseDeclared: NONE",
        "PackageCopyrightText: NOASSERTION",
        "",
        "FileName: /etc/curl.conf",
        "SPDXID: SPDXRef-/etc/curl.conf",
        "LicenseConcluded: NOASSERTION",
        "LicenseInfoInFile: NOASSERTION",
        "FileCopyrightText: NOASSERTION",
        "",
        "FileName: /usr/bin/curl",
        "SPDXID: SPDXRef-/usr/bin/curl",
        "LicenseConcluded: NOASSERTION",
        "LicenseInfoInFile: NOASSERTION",
        "FileCopyrightText: NOASSERTION",
    ]


def test_package_optional_fields():
    pkg = make_package(
        "curl",
        supplier=PackageSupplier(Organization("Debian")),
        checksum=[PackageSHA256("abcd")],
        comment=PackageComment("built from source"),
    )
    lines = pkg.to_tagvalue()
    assert "PackageSupplier: Organization: Debian" in lines
    assert "PackageChecksum: SHA256: abcd" in lines
    assert lines[-1] == "PackageComment: <text>built from source</text>"


def test_package_files_not_analyzed():
    with pytest.raises(InvalidSPDX) as err:
        make_package("curl", files_analyzed=False, files=[make_file("/usr/bin/curl")])
    assert "FilesAnalyzed is false" in str(err.value)
    assert err.value.origin == "Package"


def test_document():
    doc = make_document()
    assert doc.to_tagvalue() == [
        "##### Document Information",
        "",
        "SPDXVersion: SPDX-2.2",
        "DataLicense: CC0-1.0",
        "SPDXID: SPDXRef-DOCUMENT",
        "DocumentName: alpine:3.12",
        "DocumentNamespace: https://example.com/alpine:3.12",
        "",
        "##### Creation Info",
        "",
        "Creator: Organization: ACME",
        "Creator: Tool: spdxgen-1.0.0",
        "Created: 2021-01-28T14:23:05Z",
    ]
    assert str(doc.spdx_id) == "SPDXRef-DOCUMENT"


def test_document_requires_tool():
    with pytest.raises(InvalidSPDX) as err:
        Document(
            document_name="alpine:3.12",
            document_namespace="https://example.com/alpine:3.12",
            creators=[Organization("ACME")],
        )
    assert "Tool" in str(err.value)


def test_document_default_created():
    before = datetime.now(tz=timezone.utc).replace(microsecond=0)
    doc = Document(
        document_name="alpine:3.12",
        document_namespace="https://example.com/alpine:3.12",
        creators=[Tool("spdxgen-1.0.0")],
    )
    created = datetime.strptime(
        doc.creation_info.created.value, "%Y-%m-%dT%H:%M:%SZ"
    ).replace(tzinfo=timezone.utc)
    assert created >= before
    assert created - before < timedelta(seconds=10)


def test_document_package_order():
    doc = make_document()
    for name in ("zlib", "bash", "curl"):
        doc.add_package(make_package(name))

    lines = doc.to_tagvalue()
    names = [line for line in lines if line.startswith("PackageName: ")]
    assert names == ["PackageName: bash", "PackageName: curl", "PackageName: zlib"]

    # Each package is preceded by an empty line
    for i, line in enumerate(lines):
        if line.startswith("##### Package"):
            assert lines[i - 1] == ""


def test_document_duplicated_package():
    doc = make_document()
    assert doc.add_package(make_package("curl")) == SPDXID("Package-deb-curl")
    with pytest.raises(InvalidSPDX):
        doc.add_package(make_package("curl"))


def test_document_write():
    doc = make_document(packages={SPDXID("Package-deb-curl"): make_package("curl")})
    output = io.StringIO()
    doc.write(output)

    content = output.getvalue()
    assert content.endswith("PackageCopyrightText: NOASSERTION\n")
    assert content == "\n".join(doc.to_tagvalue()) + "\n"
