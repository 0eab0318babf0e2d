"""Unit tests for GeneratorSettings — defaults, environment, validation."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from bundled_roots.config import GeneratorSettings


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    for name in ("INPUT_PATH", "OUTPUT_PATH", "COMPRESSION_LEVEL", "LOG_LEVEL", "FORMATTER"):
        monkeypatch.delenv(f"BUNDLED_ROOTS_{name}", raising=False)


class TestDefaults:
    def test_defaults(self) -> None:
        settings = GeneratorSettings()
        assert settings.input_path == Path("certs.pem")
        assert settings.output_path == Path("root_darwin_arm64.go")
        assert settings.command == "bundled-roots-gen"
        assert settings.compression_level == 9
        assert settings.formatter == "canonical"
        assert settings.verify_round_trip is True
        assert settings.log_level == "WARNING"


class TestOverrides:
    def test_environment_variables(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BUNDLED_ROOTS_INPUT_PATH", "export/roots.pem")
        monkeypatch.setenv("BUNDLED_ROOTS_COMPRESSION_LEVEL", "6")
        settings = GeneratorSettings()
        assert settings.input_path == Path("export/roots.pem")
        assert settings.compression_level == 6

    def test_init_argument_beats_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """
        GIVEN BUNDLED_ROOTS_OUTPUT_PATH in the environment
        WHEN settings are built with an explicit output_path (the --output flag)
        THEN the explicit value wins.
        """
        monkeypatch.setenv("BUNDLED_ROOTS_OUTPUT_PATH", "from_env.go")
        settings = GeneratorSettings(output_path=Path("from_flag.go"))
        assert settings.output_path == Path("from_flag.go")

    def test_dotenv_file(self, tmp_path: Path) -> None:
        (tmp_path / ".env").write_text("BUNDLED_ROOTS_FORMATTER=gofmt\n")
        assert GeneratorSettings().formatter == "gofmt"

    def test_log_level_is_normalized(self) -> None:
        assert GeneratorSettings(log_level=" debug ").log_level == "DEBUG"


class TestValidation:
    @pytest.mark.parametrize("level", [0, 10])
    def test_compression_level_range(self, level: int) -> None:
        with pytest.raises(ValidationError):
            GeneratorSettings(compression_level=level)

    def test_unknown_formatter(self) -> None:
        with pytest.raises(ValidationError):
            GeneratorSettings(formatter="clang-format")

    def test_unknown_log_level(self) -> None:
        with pytest.raises(ValidationError, match="Unknown log level"):
            GeneratorSettings(log_level="CHATTY")

    @pytest.mark.parametrize("path", ["", "."])
    def test_output_path_must_name_a_file(self, path: str) -> None:
        with pytest.raises(ValidationError, match="must name a file"):
            GeneratorSettings(output_path=Path(path))
