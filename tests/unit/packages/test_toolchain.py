"""Unit tests for platform-tools discovery."""

from pathlib import Path

import pytest

from tako.packages.toolchain import (
    EXE_SUFFIX,
    FilesystemToolchainRepository,
    PlatformTools,
    ToolchainSource,
    cache_dir,
    expected_locations,
    find_installed_versions,
    find_platform_tools,
    home_dir,
    is_installed,
    platform_tools_path,
    rust_bin_path,
    version_sort_key,
)


def install(cache_root, version, rustc=True, cargo=True):
    """Create a fake <cache>/<version>/platform-tools tree."""
    rust_bin = rust_bin_path(version, cache_root)
    rust_bin.mkdir(parents=True)
    if rustc:
        (rust_bin / f"rustc{EXE_SUFFIX}").write_text("")
    if cargo:
        (rust_bin / f"cargo{EXE_SUFFIX}").write_text("")
    return rust_bin


@pytest.fixture
def repo(tmp_path):
    home = tmp_path / "home"
    home.mkdir()
    return FilesystemToolchainRepository(
        home=home, cache_root=tmp_path / "cache", system_root=tmp_path / "system"
    )


class TestPaths:
    """Tests for cache and home path helpers."""

    def test_home_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOME", str(tmp_path))
        assert home_dir() == tmp_path

    def test_home_from_userprofile(self, monkeypatch, tmp_path):
        monkeypatch.delenv("HOME", raising=False)
        monkeypatch.setenv("USERPROFILE", str(tmp_path))
        assert home_dir() == tmp_path

    def test_default_cache_dir(self, monkeypatch, tmp_path):
        monkeypatch.delenv("TAKO_CACHE_DIR", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))
        assert cache_dir() == tmp_path / ".cache" / "tos"

    def test_cache_dir_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv("TAKO_CACHE_DIR", str(tmp_path / "elsewhere"))
        assert cache_dir() == tmp_path / "elsewhere"

    def test_versioned_layout(self, tmp_path):
        assert platform_tools_path("v1.52", tmp_path) == tmp_path / "v1.52" / "platform-tools"
        assert rust_bin_path("v1.52", tmp_path) == (
            tmp_path / "v1.52" / "platform-tools" / "rust" / "bin"
        )


class TestInstalledVersions:
    """Tests for version enumeration."""

    def test_sort_key_is_numeric(self):
        versions = ["v1.9", "v1.52", "v1.10", "v2.0"]
        assert sorted(versions, key=version_sort_key) == ["v1.9", "v1.10", "v1.52", "v2.0"]

    def test_newest_first(self, tmp_path):
        for version in ("v1.9", "v1.52", "v1.10"):
            install(tmp_path, version)
        (tmp_path / "stray-file").write_text("")
        (tmp_path / "not-a-version").mkdir()

        assert find_installed_versions(tmp_path) == ["v1.52", "v1.10", "v1.9"]

    def test_missing_cache(self, tmp_path):
        assert find_installed_versions(tmp_path / "missing") == []

    def test_is_installed(self, tmp_path):
        install(tmp_path, "v1.52")
        install(tmp_path, "v1.51", cargo=False)

        assert is_installed("v1.52", tmp_path) is True
        assert is_installed("v1.51", tmp_path) is False
        assert is_installed("v1.50", tmp_path) is False


class TestFilesystemToolchainRepository:
    """Tests for FilesystemToolchainRepository.locate()."""

    def test_requested_version(self, repo):
        install(repo.cache_root, "v1.52")
        install(repo.cache_root, "v1.60")

        tools = repo.locate("v1.52")

        assert tools.version == "v1.52"
        assert tools.source is ToolchainSource.VERSIONED_CACHE
        assert tools.llvm_bin == platform_tools_path("v1.52", repo.cache_root) / "llvm" / "bin"

    def test_falls_back_to_newest_installed(self, repo):
        install(repo.cache_root, "v1.9")
        install(repo.cache_root, "v1.41")

        assert repo.locate("v1.52").version == "v1.41"

    def test_skips_versions_without_rustc(self, repo):
        install(repo.cache_root, "v1.41")
        install(repo.cache_root, "v2.0", rustc=False)

        assert repo.locate().version == "v1.41"

    def test_rustc_without_cargo_is_found(self, repo):
        install(repo.cache_root, "v1.52", cargo=False)

        tools = repo.locate("v1.52")

        assert tools is not None
        assert tools.is_valid() is False

    @pytest.mark.parametrize(
        "relative",
        [
            "tos-network/platform-tools",
            "tos-network/platform-tools/out",
            ".tos/platform-tools",
        ],
    )
    def test_legacy_locations(self, repo, relative):
        rust_bin = repo.home / relative / "rust" / "bin"
        rust_bin.mkdir(parents=True)
        (rust_bin / f"rustc{EXE_SUFFIX}").write_text("")

        tools = repo.locate("v1.52")

        assert tools.source is ToolchainSource.LEGACY
        assert tools.version == "unknown"
        assert tools.rust_bin == rust_bin
        assert tools.display_path() == str(rust_bin)

    def test_versioned_cache_beats_legacy(self, repo):
        legacy = repo.home / ".tos" / "platform-tools" / "rust" / "bin"
        legacy.mkdir(parents=True)
        (legacy / f"rustc{EXE_SUFFIX}").write_text("")
        install(repo.cache_root, "v1.40")

        assert repo.locate("v1.52").source is ToolchainSource.VERSIONED_CACHE

    def test_nothing_installed(self, repo):
        (repo.cache_root / "v1.52" / "platform-tools" / "rust" / "bin").mkdir(parents=True)
        assert repo.locate("v1.52") is None
        assert repo.locate() is None

    def test_system_wide_location_is_searched_last(self, repo):
        rust_bin = repo.system_root / "rust" / "bin"
        rust_bin.mkdir(parents=True)
        (rust_bin / f"rustc{EXE_SUFFIX}").write_text("")

        tools = repo.locate("v1.52")

        assert tools.source is ToolchainSource.LEGACY
        assert tools.llvm_bin == repo.system_root / "llvm" / "bin"

    def test_default_system_root(self, tmp_path):
        repository = FilesystemToolchainRepository(home=tmp_path, cache_root=tmp_path)
        assert repository.system_root == Path("/usr/local/tos/platform-tools")
        assert repository.legacy_candidates()[-1][0] == repository.system_root / "rust" / "bin"


class TestFindPlatformTools:
    """Tests for find_platform_tools()."""

    def test_uses_given_repository(self, static_repository, make_platform_tools):
        tools = make_platform_tools()
        repository = static_repository(tools)

        assert find_platform_tools("v1.52", repository) is tools
        assert repository.requested == ["v1.52"]

    def test_default_repository_honours_cache_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("TAKO_CACHE_DIR", str(tmp_path / "cache"))
        install(tmp_path / "cache", "v1.52")

        tools = find_platform_tools("v1.52")

        assert tools.rust_bin == rust_bin_path("v1.52", tmp_path / "cache")


class TestPlatformTools:
    """Tests for PlatformTools paths."""

    def test_tool_paths(self, tmp_path):
        tools = PlatformTools(
            version="v1.52",
            rust_bin=tmp_path / "rust",
            llvm_bin=tmp_path / "llvm",
            source=ToolchainSource.VERSIONED_CACHE,
        )

        assert tools.cargo == tmp_path / "rust" / f"cargo{EXE_SUFFIX}"
        assert tools.llvm_objcopy == tmp_path / "llvm" / f"llvm-objcopy{EXE_SUFFIX}"
        assert tools.display_path() == "~/.cache/tos/v1.52/platform-tools"


def test_expected_locations():
    locations = expected_locations()
    assert len(locations) == 3
    assert locations[0].startswith("~/.cache/tos/")
