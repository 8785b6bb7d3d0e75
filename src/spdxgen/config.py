"""Read the spdxgen configuration files.

The configuration is written in TOML. Each consumer declares the section it
reads as a dataclass deriving from :class:`ConfigSection`, for instance the
``[spdx]`` section used by the presenter::

    [spdx]
    organization = "ACME"
    namespace_prefix = "https://sbom.acme.example/image/"
"""

from __future__ import annotations

from dataclasses import fields, dataclass
import logging
import os
from typing import TYPE_CHECKING, get_type_hints, ClassVar

from tomlkit import parse
from tomlkit.exceptions import TOMLKitError
from typeguard import check_type, TypeCheckError

if TYPE_CHECKING:
    from typing import Any, Type, TypeVar

    T = TypeVar("T", bound="ConfigSection")


def known_config_files() -> list[str]:
    """Return the configuration files read, in loading order.

    ``SPDXGEN_CONFIG`` replaces the default locations when set.
    """
    if "SPDXGEN_CONFIG" in os.environ:
        return [os.environ["SPDXGEN_CONFIG"]]
    return [
        os.path.join(
            os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config")),
            "spdxgen.toml",
        ),
        os.path.expanduser("~/spdxgen.toml"),
    ]


@dataclass
class ConfigSection:
    title: ClassVar[str]

    @classmethod
    def load(cls: Type[T]) -> T:
        """Load a section of the configuration file.

        To load a new section, subclass ConfigSection and document the
        fields that you expect to parse, e.g.::

            @dataclass
            class MyConfig(ConfigSection):
                title = "my_config_subsection"
                option : str = "default value"

        my_config = MyConfig.load()

        Values whose type does not match the field annotation are reported
        and the field default is kept.
        """
        schema = get_type_hints(cls)
        cls_fields = {f.name: schema[f.name] for f in fields(cls)}
        kwargs: dict[str, Any] = {}

        for k, v in Config.load_section(cls.title).items():
            if k not in cls_fields:
                continue
            try:
                check_type(v, cls_fields[k])
            except TypeCheckError as err:
                logging.error(f"{cls.title}.{k}: {err}")
            else:
                kwargs[k] = v

        return cls(**kwargs)


class Config:
    """Load the spdxgen configuration files and expose their sections.

    :cvar data: merged content of all the configuration files loaded
    """

    data: ClassVar[dict] = {}

    @classmethod
    def load_section(cls, section: str) -> dict:
        """Load a configuration section content.

        :param section: if contains "." nested subsection will be found. For
            instance "spdx.creators" will return the section:

            [spdx]
              [spdx.creators]
        :return: the configuration dict
        """
        if not cls.data:
            cls.load()

        result = cls.data
        for subsection in section.split("."):
            result = result.get(subsection, {})

        return result

    @classmethod
    def load_file(cls, filename: str) -> None:
        """Load one configuration file.

        Parsing errors are logged and leave the configuration unchanged.

        :param filename: configuration file to load
        """
        with open(filename) as f:
            try:
                cls.data.update(parse(f.read()).unwrap())
            except TOMLKitError as e:
                logging.error(f"{filename}: {e}")

    @classmethod
    def load(cls) -> None:
        """Load the known configuration files.

        This method is called automatically the first time a section is
        requested.
        """
        for config_file in known_config_files():
            if os.path.isfile(config_file):
                cls.load_file(config_file)

    @classmethod
    def reset(cls) -> None:
        """Forget everything loaded so far."""
        cls.data = {}
