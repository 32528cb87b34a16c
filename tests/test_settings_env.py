"""Tests for settings, path resolution and the filesystem collaborator."""

from pathlib import Path

import pytest

from blot.env import Environment, current_environment, use_environment
from blot.exceptions import ConfigurationError, FilesystemError
from blot.filesystem import LocalFileSystem
from blot.settings import BlotSettings

_VARS = (
    "BLOT_ROOT",
    "BLOT_LOG_LEVEL",
    "BLOT_FAKER_LOCALE",
    "BLOT_FAKER_SEED",
    "BLOT_MAX_INCLUDE_DEPTH",
    "BLOT_HTTP_TIMEOUT",
    "BLOT_HTTP_RPM",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_settings_defaults(tmp_path: Path, clean_env):
    settings = BlotSettings(tmp_path)
    assert settings.root == tmp_path
    assert settings.log_level == "INFO"
    assert settings.faker_locale == "en_US"
    assert settings.faker_seed is None
    assert settings.max_include_depth == 32
    assert settings.http_timeout == 30
    assert settings.http_rpm == 600


def test_settings_read_environment(tmp_path: Path, clean_env):
    clean_env.setenv("BLOT_LOG_LEVEL", "debug")
    clean_env.setenv("BLOT_FAKER_SEED", "7")
    clean_env.setenv("BLOT_FAKER_LOCALE", "sv_SE")
    clean_env.setenv("BLOT_MAX_INCLUDE_DEPTH", "4")
    settings = BlotSettings(tmp_path)
    assert settings.log_level == "DEBUG"
    assert settings.faker_seed == 7
    assert settings.faker_locale == "sv_SE"
    assert settings.max_include_depth == 4


def test_settings_root_from_environment(tmp_path: Path, clean_env):
    clean_env.setenv("BLOT_ROOT", str(tmp_path))
    assert BlotSettings().root == tmp_path


def test_settings_load_dotenv_file(tmp_path: Path, clean_env):
    # Registered so monkeypatch unsets the value load_dotenv writes.
    clean_env.setenv("BLOT_HTTP_RPM", "1")
    (tmp_path / ".env").write_text("BLOT_HTTP_RPM=120\n", encoding="utf-8")
    assert BlotSettings(tmp_path).http_rpm == 120


@pytest.mark.parametrize(
    "name, value", [("BLOT_FAKER_SEED", "abc"), ("BLOT_MAX_INCLUDE_DEPTH", "0")]
)
def test_settings_reject_bad_numbers(tmp_path: Path, clean_env, name, value):
    clean_env.setenv(name, value)
    with pytest.raises(ConfigurationError) as excinfo:
        BlotSettings(tmp_path)
    assert excinfo.value.context["variable"] == name


def test_environment_uri():
    env = Environment("/srv/docs")
    assert env.uri("api/a.apib") == Path("/srv/docs/api/a.apib")
    assert env.uri("/abs/a.apib") == Path("/abs/a.apib")


def test_current_environment_is_lazy_and_replaceable(tmp_path: Path, clean_env):
    clean_env.setenv("BLOT_ROOT", str(tmp_path))
    assert current_environment().root == tmp_path
    other = Environment("/elsewhere")
    use_environment(other)
    assert current_environment() is other
    assert LocalFileSystem().environment is other


@pytest.mark.asyncio
async def test_filesystem_write_then_read(tmp_path: Path):
    fs = LocalFileSystem(Environment(tmp_path))
    written = await fs.write_text("deep/dir/file.txt", "héllo")
    assert written == tmp_path / "deep" / "dir" / "file.txt"
    assert await fs.read_text("deep/dir/file.txt") == "héllo"


@pytest.mark.asyncio
async def test_filesystem_read_missing(tmp_path: Path):
    fs = LocalFileSystem(Environment(tmp_path))
    with pytest.raises(FilesystemError) as excinfo:
        await fs.read_text("missing.apib")
    assert excinfo.value.context["path"] == "missing.apib"


@pytest.mark.asyncio
async def test_filesystem_write_into_file_fails(tmp_path: Path):
    (tmp_path / "blocker").write_text("x", encoding="utf-8")
    fs = LocalFileSystem(Environment(tmp_path))
    with pytest.raises(FilesystemError):
        await fs.write_text("blocker/out.json", "{}")


@pytest.mark.asyncio
async def test_filesystem_glob_relative_and_recursive(tmp_path: Path):
    (tmp_path / "a").mkdir()
    (tmp_path / "a" / "x.apib").write_text("", encoding="utf-8")
    (tmp_path / "y.apib").write_text("", encoding="utf-8")
    fs = LocalFileSystem(Environment(tmp_path))
    assert await fs.glob("*.apib") == ["y.apib"]
    assert await fs.glob("**/*.apib") == sorted(["y.apib", str(Path("a") / "x.apib")])


@pytest.mark.asyncio
async def test_filesystem_glob_absolute(tmp_path: Path):
    (tmp_path / "z.apib").write_text("", encoding="utf-8")
    fs = LocalFileSystem(Environment("/unused"))
    assert await fs.glob(str(tmp_path / "*.apib")) == [str(tmp_path / "z.apib")]


def test_blank_numbers_fall_back_to_typed_defaults(tmp_path: Path, clean_env):
    clean_env.setenv("BLOT_HTTP_RPM", "  ")
    clean_env.setenv("BLOT_FAKER_SEED", "")
    settings = BlotSettings(tmp_path)
    assert settings.http_rpm == 600
    assert isinstance(settings.http_rpm, int)
    assert settings.faker_seed is None
