import os

from packages.env import load_env


def test_load_env_reads_explicit_file(tmp_path, monkeypatch):
    env_file = tmp_path / "board.env"
    env_file.write_text("BOARD_TEST_MARKER=from-file\n", encoding="utf-8")
    monkeypatch.setenv("BOARD_ENV_FILE", str(env_file))
    monkeypatch.chdir(tmp_path)

    try:
        assert load_env(extra_paths=[]) is True
        assert os.environ["BOARD_TEST_MARKER"] == "from-file"
    finally:
        os.environ.pop("BOARD_TEST_MARKER", None)


def test_load_env_skips_missing_files(tmp_path, monkeypatch):
    monkeypatch.delenv("BOARD_ENV_FILE", raising=False)
    monkeypatch.chdir(tmp_path)

    assert load_env(extra_paths=[tmp_path / "missing.env"]) is False
