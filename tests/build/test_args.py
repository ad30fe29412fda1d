"""
Tests for GN argument assembly.
"""

from pathlib import Path

import pytest

from v8kit.build.args import GnArgs, assemble_gn_args, gn_string, gn_value
from v8kit.core.context import BuildContext, EnvironmentClass
from v8kit.core.platform import HostPlatform
from v8kit.toolchain.locator import ToolchainPath

BUILDING = EnvironmentClass(is_trybuild=False, is_cargo_doc=False, is_rls=False)


def _context(platform=HostPlatform.LINUX, is_debug=True):
    return BuildContext(BUILDING, platform, is_debug)


@pytest.fixture
def downloaded():
    return ToolchainPath(Path("/t/debug/clang"), "downloaded")


@pytest.fixture
def system():
    return ToolchainPath(Path("/opt/llvm"), "system")


class TestGnValue:
    def test_bool(self):
        assert gn_value(True) == "true"
        assert gn_value(False) == "false"

    def test_int(self):
        assert gn_value(2) == "2"

    def test_path(self):
        assert gn_value(Path("/opt/llvm")) == f'"{Path("/opt/llvm")}"'

    def test_escaping(self):
        assert gn_string('C:\\tools\\"x"$y') == '"C:\\\\tools\\\\\\"x\\"\\$y"'


class TestGnArgs:
    def test_order_and_repeats_kept(self):
        args = GnArgs()
        args.set("treat_warnings_as_errors", False)
        args.set("treat_warnings_as_errors", False)
        args.extend_raw(["is_debug=true"])

        assert args.as_list() == [
            "treat_warnings_as_errors=false",
            "treat_warnings_as_errors=false",
            "is_debug=true",
        ]
        assert len(args) == 3
        assert "is_debug" in args

    def test_render(self):
        args = GnArgs()
        args.set("is_debug", False)
        args.extend_raw(["symbol_level=0", "v8_enable_i18n_support=false"])

        assert args.render() == "is_debug=false symbol_level=0 v8_enable_i18n_support=false"


class TestAssembleGnArgs:
    def test_linux_debug_downloaded_clang(self, downloaded):
        args = assemble_gn_args(_context(), downloaded)

        assert args.as_list() == [
            "is_debug=true",
            f"clang_base_path={gn_string(downloaded.path)}",
        ]

    def test_release(self, downloaded):
        args = assemble_gn_args(_context(is_debug=False), downloaded)
        assert args.as_list()[0] == "is_debug=false"

    def test_windows_never_debug(self, downloaded):
        args = assemble_gn_args(_context(HostPlatform.WINDOWS, is_debug=True), downloaded)

        assert args.as_list()[0] == "is_debug=false"
        assert "cc_wrapper" not in args
        assert "treat_warnings_as_errors" not in args

    def test_system_clang_flags(self, system):
        args = assemble_gn_args(_context(), system)

        assert args.as_list() == [
            "is_debug=true",
            f"clang_base_path={gn_string(system.path)}",
            "treat_warnings_as_errors=false",
            "clang_use_chrome_plugins=false",
        ]

    def test_sccache(self, downloaded):
        sccache = Path("/usr/bin/sccache")
        args = assemble_gn_args(_context(), downloaded, sccache_path=sccache)

        assert args.as_list()[-1] == f"cc_wrapper={gn_string(sccache)}"
        assert "treat_warnings_as_errors" not in args

    def test_windows_sccache_system_clang(self, system):
        sccache = Path("C:/sccache/sccache.exe")
        args = assemble_gn_args(
            _context(HostPlatform.WINDOWS), system, sccache_path=sccache
        )

        assert args.keys() == [
            "is_debug",
            "clang_base_path",
            "treat_warnings_as_errors",
            "clang_use_chrome_plugins",
            "cc_wrapper",
            "treat_warnings_as_errors",
        ]

    def test_user_args_last_and_verbatim(self, downloaded):
        args = assemble_gn_args(
            _context(),
            downloaded,
            sccache_path=Path("/usr/bin/sccache"),
            extra_args=["is_debug=false", "not even valid"],
        )

        assert args.as_list()[-2:] == ["is_debug=false", "not even valid"]
        assert args.as_list()[0] == "is_debug=true"
