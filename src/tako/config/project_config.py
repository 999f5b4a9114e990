"""
Project configuration files.

Two files are read from a contract project:

    Tako.toml   - optional tako settings

        [package]
        name = "counter"
        version = "0.1.0"

        [contract]
        entry = "entrypoint"
        abi_version = "1.0"

        [build]
        target = "tbpfv3-tos-tos"   # default: derived from --arch
        opt_level = "z"

    Cargo.toml  - the crate manifest; only [package].name is used, to
                  predict the artifact file name
"""

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from tako.errors import ConfigError

CONFIG_FILE = "Tako.toml"
MANIFEST_FILE = "Cargo.toml"


@dataclass
class PackageConfig:
    name: str = ""
    version: str = ""


@dataclass
class ContractConfig:
    entry: str = "entrypoint"
    abi_version: str = "1.0"


@dataclass
class BuildConfig:
    # None derives the target from --arch
    target: Optional[str] = None
    opt_level: str = "z"


@dataclass
class TakoConfig:
    """
    Contents of a Tako.toml file.

    Missing sections and keys fall back to their defaults.

    Usage:
        config = TakoConfig.load_from_file(Path("Tako.toml"))
        print(config.build.target)
    """

    package: PackageConfig = field(default_factory=PackageConfig)
    contract: ContractConfig = field(default_factory=ContractConfig)
    build: BuildConfig = field(default_factory=BuildConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TakoConfig":
        """
        Build a config from parsed TOML data.

        Raises:
            ConfigError: If a section is not a table or has unknown keys
        """
        sections = {
            "package": PackageConfig,
            "contract": ContractConfig,
            "build": BuildConfig,
        }
        values = {}
        for name, section_cls in sections.items():
            table = data.get(name, {})
            if not isinstance(table, dict):
                raise ConfigError(f"[{name}] must be a table")
            try:
                values[name] = section_cls(**table)
            except TypeError as e:
                raise ConfigError(f"Invalid [{name}] section: {e}") from e
        return cls(**values)

    @classmethod
    def load_from_file(cls, path: Path) -> "TakoConfig":
        """
        Load a Tako.toml file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ConfigError: If the file cannot be parsed
        """
        content = Path(path).read_text(encoding="utf-8")
        try:
            data = tomllib.loads(content)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Failed to parse {path}: {e}") from e
        return cls.from_dict(data)

    @classmethod
    def load_from_dir(cls, project_dir: Path) -> Optional["TakoConfig"]:
        """Load <project_dir>/Tako.toml, or None when the project has none."""
        path = Path(project_dir) / CONFIG_FILE
        if not path.exists():
            return None
        return cls.load_from_file(path)


def get_package_name(project_dir: Optional[Path] = None) -> Optional[str]:
    """
    Get the artifact base name declared in Cargo.toml.

    Cargo replaces '-' with '_' in library file names, so "my-thing"
    becomes "my_thing". This is best effort: a missing or unparsable
    manifest, or one without [package].name, yields None.
    """
    manifest = (Path(project_dir) if project_dir else Path.cwd()) / MANIFEST_FILE
    try:
        data = tomllib.loads(manifest.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError):
        return None

    package = data.get("package")
    if not isinstance(package, dict):
        return None
    name = package.get("name")
    if not isinstance(name, str) or not name:
        return None
    return name.replace("-", "_")
