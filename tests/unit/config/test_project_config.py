"""Unit tests for Tako.toml and Cargo.toml reading."""

import pytest

from tako.config.project_config import TakoConfig, get_package_name
from tako.errors import ConfigError


class TestTakoConfig:
    """Tests for TakoConfig."""

    def test_defaults(self):
        config = TakoConfig()
        assert config.build.target is None
        assert config.build.opt_level == "z"
        assert config.contract.entry == "entrypoint"
        assert config.contract.abi_version == "1.0"

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "Tako.toml"
        path.write_text(
            "[package]\n"
            'name = "counter"\n'
            'version = "0.1.0"\n'
            "\n"
            "[build]\n"
            'target = "tbpfv2-tos-tos"\n'
        )

        config = TakoConfig.load_from_file(path)

        assert config.package.name == "counter"
        assert config.package.version == "0.1.0"
        assert config.build.target == "tbpfv2-tos-tos"
        assert config.contract.entry == "entrypoint"

    def test_load_from_dir_without_file(self, tmp_path):
        assert TakoConfig.load_from_dir(tmp_path) is None

    def test_load_from_dir(self, tmp_path):
        (tmp_path / "Tako.toml").write_text('[contract]\nabi_version = "2.0"\n')
        assert TakoConfig.load_from_dir(tmp_path).contract.abi_version == "2.0"

    def test_invalid_toml(self, tmp_path):
        path = tmp_path / "Tako.toml"
        path.write_text("[build\n")

        with pytest.raises(ConfigError, match="Failed to parse"):
            TakoConfig.load_from_file(path)

    def test_unknown_key(self):
        with pytest.raises(ConfigError, match=r"Invalid \[build\] section"):
            TakoConfig.from_dict({"build": {"linker": "ld"}})

    def test_section_must_be_table(self):
        with pytest.raises(ConfigError, match=r"\[package\] must be a table"):
            TakoConfig.from_dict({"package": "counter"})

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            TakoConfig.load_from_file(tmp_path / "Tako.toml")


class TestGetPackageName:
    """Tests for get_package_name()."""

    def test_hyphens_become_underscores(self, tmp_path):
        (tmp_path / "Cargo.toml").write_text('[package]\nname = "my-thing"\nversion = "0.1.0"\n')
        assert get_package_name(tmp_path) == "my_thing"

    def test_ignores_other_sections(self, tmp_path):
        (tmp_path / "Cargo.toml").write_text(
            '[lib]\nname = "not_this"\n\n[package]\nname = "counter"\n'
        )
        assert get_package_name(tmp_path) == "counter"

    def test_missing_manifest(self, tmp_path):
        assert get_package_name(tmp_path) is None

    def test_workspace_manifest(self, tmp_path):
        (tmp_path / "Cargo.toml").write_text('[workspace]\nmembers = ["a"]\n')
        assert get_package_name(tmp_path) is None

    def test_unparsable_manifest(self, tmp_path):
        (tmp_path / "Cargo.toml").write_text("[package\n")
        assert get_package_name(tmp_path) is None

    def test_defaults_to_cwd(self, tmp_path, monkeypatch):
        (tmp_path / "Cargo.toml").write_text('[package]\nname = "erc20"\n')
        monkeypatch.chdir(tmp_path)
        assert get_package_name() == "erc20"
