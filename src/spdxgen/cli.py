"""The spdxgen command line.

Render the SPDX tag:value document of a catalog snapshot::

    spdxgen snapshot.yaml -o image.spdx
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

import spdxgen.log
from spdxgen.error import SpdxGenError
from spdxgen.main import Main
from spdxgen.presenter import SPDXPresenter
from spdxgen.snapshot import load_snapshot
from spdxgen.version import VersionInfo

if TYPE_CHECKING:
    from typing import Optional

logger = spdxgen.log.getLogger("cli")


def main(args: Optional[list[str]] = None) -> int:
    """Run the spdxgen command line.

    :param args: the command line arguments, ``sys.argv[1:]`` if not set
    :return: the exit status
    """
    m = Main(name="spdxgen")
    m.argument_parser.add_argument(
        "snapshot", nargs="?", help="catalog snapshot file (YAML or JSON)"
    )
    m.argument_parser.add_argument(
        "-o",
        "--output",
        metavar="FILE",
        help="write the SPDX document to FILE instead of the standard output",
    )
    m.argument_parser.add_argument(
        "--version", help="show spdxgen version", action="store_true"
    )
    m.parse_args(args)

    if TYPE_CHECKING:
        assert m.args is not None

    version_info = VersionInfo.from_build()
    if m.args.version:
        print(version_info.tool_name)
        return 0
    if m.args.snapshot is None:
        m.argument_parser.error("the snapshot file is required")

    try:
        catalog, src_metadata = load_snapshot(m.args.snapshot)
        presenter = SPDXPresenter(catalog, src_metadata, version_info=version_info)
        if m.args.output is None:
            presenter.present(sys.stdout)
        else:
            with open(m.args.output, "w") as f:
                presenter.present(f)
    except SpdxGenError as err:
        logger.error(str(err).strip())
        return 1
    except OSError as err:
        logger.error(f"cannot open {m.args.output}: {err}")
        return 1

    logger.info(
        "%d packages written to %s",
        catalog.package_count,
        m.args.output or "standard output",
    )
    return 0


def run() -> None:
    """Entry point of the spdxgen console script."""
    sys.exit(main())
