"""
Tests for cargo directive output.
"""

import io
from pathlib import Path

from v8kit.build.directives import (
    CargoWarning,
    DirectiveWriter,
    LinkSearchDirective,
    RerunIfChanged,
    link_directives,
    rerun_if_env_changed,
)
from v8kit.core.platform import HostPlatform


class TestLinkDirectives:
    def test_unix(self):
        for platform in (HostPlatform.LINUX, HostPlatform.MACOS):
            assert [str(d) for d in link_directives(platform)] == [
                "cargo:rustc-link-lib=static=rusty_v8"
            ]

    def test_windows(self):
        assert [str(d) for d in link_directives(HostPlatform.WINDOWS)] == [
            "cargo:rustc-link-lib=static=rusty_v8",
            "cargo:rustc-link-lib=dylib=winmm",
            "cargo:rustc-link-lib=dylib=dbghelp",
        ]

    def test_platforms_differ_only_by_system_libraries(self):
        linux = {str(d) for d in link_directives(HostPlatform.LINUX)}
        windows = {str(d) for d in link_directives(HostPlatform.WINDOWS)}

        assert windows - linux == {
            "cargo:rustc-link-lib=dylib=winmm",
            "cargo:rustc-link-lib=dylib=dbghelp",
        }
        assert linux - windows == set()


class TestDirectiveFormatting:
    def test_link_search(self):
        path = Path("/t/out/gn_out/obj")
        assert str(LinkSearchDirective(path)) == f"cargo:rustc-link-search=native={path}"

    def test_rerun_if_changed(self):
        path = Path("/src/v8/include/v8.h")
        assert str(RerunIfChanged(path)) == f"cargo:rerun-if-changed={path}"

    def test_rerun_if_env_changed(self):
        assert [str(d) for d in rerun_if_env_changed(["GN_ARGS", "SCCACHE"])] == [
            "cargo:rerun-if-env-changed=GN_ARGS",
            "cargo:rerun-if-env-changed=SCCACHE",
        ]

    def test_warning(self):
        assert str(CargoWarning("Not using sccache")) == "cargo:warning=Not using sccache"


class TestDirectiveWriter:
    def test_writes_lines(self):
        stream = io.StringIO()
        writer = DirectiveWriter(stream)

        writer.emit_all(link_directives(HostPlatform.LINUX))
        writer.warning("Not using sccache")

        assert stream.getvalue().splitlines() == [
            "cargo:rustc-link-lib=static=rusty_v8",
            "cargo:warning=Not using sccache",
        ]
        assert writer.written == stream.getvalue().splitlines()

    def test_defaults_to_stdout(self, capsys):
        DirectiveWriter().emit(RerunIfChanged(Path("build.rs")))

        assert capsys.readouterr().out == "cargo:rerun-if-changed=build.rs\n"
