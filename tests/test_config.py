import pytest

from mirrorlist.config import DEFAULT_SOURCE_URL, REPO_ROOT, load_config


def _clear_env(monkeypatch):
    for key in ["LOG_DIR", "LOG_LEVEL", "APP_NAME", "MIRRORLIST_SOURCE_URL"]:
        monkeypatch.delenv(key, raising=False)


def test_load_config_defaults(tmp_path, monkeypatch):
    _clear_env(monkeypatch)

    config = load_config(tmp_path / "missing.env")

    assert config.log_directory is None
    assert config.log_level == "INFO"
    assert config.app_name == "mirrorlist"
    assert config.source_url == DEFAULT_SOURCE_URL


def test_load_config_reads_env_file(tmp_path, monkeypatch):
    _clear_env(monkeypatch)
    env_file = tmp_path / "test.env"
    env_file.write_text(
        "\n".join(
            [
                "# comment",
                "LOG_DIR=logs/testing",
                "LOG_LEVEL=debug",
                "APP_NAME='mirror-runner'",
                "MIRRORLIST_SOURCE_URL=https://mirrors.example/list/",
            ]
        ),
        encoding="utf-8",
    )

    config = load_config(env_file)

    assert config.log_directory == REPO_ROOT / "logs/testing"
    assert config.log_level == "DEBUG"
    assert config.app_name == "mirror-runner"
    assert config.source_url == "https://mirrors.example/list"


def test_load_config_prefers_environment_variables(tmp_path, monkeypatch):
    _clear_env(monkeypatch)
    env_file = tmp_path / "test.env"
    env_file.write_text(
        "\n".join(
            [
                f"LOG_DIR={tmp_path/'from_env_file'}",
                "LOG_LEVEL=info",
            ]
        ),
        encoding="utf-8",
    )

    env_log_dir = tmp_path / "from_env"
    monkeypatch.setenv("LOG_DIR", str(env_log_dir))
    monkeypatch.setenv("LOG_LEVEL", "warning")
    monkeypatch.setenv("APP_NAME", "runtime-app")

    config = load_config(env_file)

    assert config.log_directory == env_log_dir
    assert config.log_level == "WARNING"
    assert config.app_name == "runtime-app"


def test_load_config_rejects_unknown_log_level(tmp_path, monkeypatch):
    _clear_env(monkeypatch)
    monkeypatch.setenv("LOG_LEVEL", "chatty")

    with pytest.raises(ValueError):
        load_config(tmp_path / "empty.env")
