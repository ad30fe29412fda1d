"""
Tests for v8kit.core.config: settings resolution and the YAML defaults file.
"""

from pathlib import Path

import pytest

from v8kit.core.config import (
    CONFIG_FILE_NAME,
    Settings,
    load_env_defaults,
    load_yaml_config,
)
from v8kit.core.exceptions import ConfigurationError


class TestSettingsAccessors:
    def test_unset_values(self):
        settings = Settings.from_environ({})

        assert settings.profile is None
        assert settings.out_dir is None
        assert settings.manifest_dir is None
        assert settings.clang_base_path is None
        assert settings.sccache is None
        assert settings.gn is None
        assert settings.ninja is None
        assert settings.gn_args == []
        assert settings.gn_ninja_binaries_url is None
        assert settings.gn_ninja_binaries_sha256 is None
        assert settings.config_file is None

    def test_paths(self):
        settings = Settings.from_environ(
            {
                "OUT_DIR": "/t/out",
                "CARGO_MANIFEST_DIR": "/src",
                "CLANG_BASE_PATH": "/opt/llvm",
                "SCCACHE": "/usr/bin/sccache",
            }
        )

        assert settings.out_dir == Path("/t/out")
        assert settings.manifest_dir == Path("/src")
        assert settings.clang_base_path == Path("/opt/llvm")
        assert settings.sccache == Path("/usr/bin/sccache")

    def test_archive_source(self):
        settings = Settings.from_environ(
            {
                "GN_NINJA_BINARIES_URL": "https://mirror.example/gn",
                "GN_NINJA_BINARIES_SHA256": "ab" * 32,
            }
        )

        assert settings.gn_ninja_binaries_url == "https://mirror.example/gn"
        assert settings.gn_ninja_binaries_sha256 == "ab" * 32

    def test_gn_args_split_on_whitespace(self):
        settings = Settings.from_environ(
            {"GN_ARGS": "  v8_enable_i18n_support=false\tsymbol_level=0\n use_goma=true "}
        )
        assert settings.gn_args == [
            "v8_enable_i18n_support=false",
            "symbol_level=0",
            "use_goma=true",
        ]

    def test_is_set_distinguishes_empty_from_missing(self):
        settings = Settings.from_environ({"DENO_TRYBUILD": ""})
        assert settings.is_set("DENO_TRYBUILD") is True
        assert settings.is_set("RUSTDOCFLAGS") is False

    def test_empty_sccache_is_unset(self):
        assert Settings.from_environ({"SCCACHE": ""}).sccache is None

    def test_input_mapping_not_modified(self):
        environ = {"PROFILE": "debug"}
        settings = Settings.from_environ(environ)
        assert settings.environ is not environ


class TestConfigFile:
    def test_manifest_config_provides_defaults(self, tmp_path):
        (tmp_path / CONFIG_FILE_NAME).write_text(
            "env:\n  CLANG_BASE_PATH: /opt/llvm-17\n  GN_ARGS: symbol_level=0\n"
        )

        settings = Settings.from_environ({"CARGO_MANIFEST_DIR": str(tmp_path)})

        assert settings.clang_base_path == Path("/opt/llvm-17")
        assert settings.gn_args == ["symbol_level=0"]
        assert settings.config_file == tmp_path / CONFIG_FILE_NAME

    def test_environment_wins_over_file(self, tmp_path):
        (tmp_path / CONFIG_FILE_NAME).write_text("env:\n  GN: /from/file/gn\n")

        settings = Settings.from_environ(
            {"CARGO_MANIFEST_DIR": str(tmp_path), "GN": "/from/env/gn"}
        )

        assert settings.gn == "/from/env/gn"

    def test_v8kit_config_variable(self, tmp_path):
        config = tmp_path / "custom.yaml"
        config.write_text("env:\n  SCCACHE: /opt/sccache\n")

        settings = Settings.from_environ({"V8KIT_CONFIG": str(config)})

        assert settings.sccache == Path("/opt/sccache")
        assert settings.config_file == config

    def test_explicit_config_file_must_exist(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            Settings.from_environ({}, config_file=tmp_path / "missing.yaml")

    def test_explicit_config_file_beats_manifest(self, tmp_path):
        (tmp_path / CONFIG_FILE_NAME).write_text("env:\n  GN: /manifest/gn\n")
        explicit = tmp_path / "explicit.yaml"
        explicit.write_text("env:\n  GN: /explicit/gn\n")

        settings = Settings.from_environ(
            {"CARGO_MANIFEST_DIR": str(tmp_path)}, config_file=explicit
        )

        assert settings.gn == "/explicit/gn"

    def test_values_are_stringified(self, tmp_path):
        config = tmp_path / "v.yaml"
        config.write_text("env:\n  DENO_TRYBUILD: 1\n  GN_ARGS: true\n  SCCACHE: null\n")

        defaults = load_env_defaults(config)

        assert defaults == {"DENO_TRYBUILD": "1", "GN_ARGS": "true"}

    def test_unknown_variable_rejected(self, tmp_path):
        config = tmp_path / "v.yaml"
        config.write_text("env:\n  CLANG_BASE: /opt/llvm\n")

        with pytest.raises(ConfigurationError, match="CLANG_BASE"):
            load_env_defaults(config)

    def test_unknown_section_rejected(self, tmp_path):
        config = tmp_path / "v.yaml"
        config.write_text("toolchain: llvm-18\n")

        with pytest.raises(ConfigurationError, match="toolchain"):
            load_env_defaults(config)

    def test_env_must_be_mapping(self, tmp_path):
        config = tmp_path / "v.yaml"
        config.write_text("env:\n  - GN\n")

        with pytest.raises(ConfigurationError, match="must be a mapping"):
            load_env_defaults(config)

    def test_invalid_yaml(self, tmp_path):
        config = tmp_path / "v.yaml"
        config.write_text("env: [unclosed\n")

        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_yaml_config(config)

    def test_empty_file(self, tmp_path):
        config = tmp_path / "v.yaml"
        config.write_text("")

        assert load_yaml_config(config) == {}
        assert load_env_defaults(config) == {}

    def test_optional_missing_file(self, tmp_path):
        assert load_yaml_config(tmp_path / "nope.yaml") == {}
