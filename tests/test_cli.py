"""
Tests for the command-line interface.

Each test runs in a scratch working directory with a controlled environment;
no command here reaches the network.
"""

from pathlib import Path

import pytest

from indexnow_client.cli import create_parser, main, mask_api_key

from fakes import API_KEY, SITE_URL


ENV_NAMES = (
    "INDEXNOW_SITE_URL",
    "INDEXNOW_API_KEY",
    "INDEXNOW_KEY_LOCATION",
    "INDEXNOW_MAX_RETRIES",
    "INDEXNOW_BATCH_SIZE",
    "INDEXNOW_LOG_LEVEL",
    "INDEXNOW_LOG_FORMAT",
    "INDEXNOW_DEV_MODE",
    "NODE_ENV",
)


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch) -> Path:
    monkeypatch.chdir(tmp_path)
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    return tmp_path


@pytest.fixture
def configured(workdir: Path, monkeypatch) -> Path:
    monkeypatch.setenv("INDEXNOW_SITE_URL", SITE_URL)
    monkeypatch.setenv("INDEXNOW_API_KEY", API_KEY)
    monkeypatch.setenv("INDEXNOW_LOG_LEVEL", "error")
    return workdir


def build_site(root: Path) -> None:
    client_dir = root / "dist" / "client"
    for relative in ("", "about", "posts/hello"):
        page_dir = client_dir / relative
        page_dir.mkdir(parents=True, exist_ok=True)
        (page_dir / "index.html").write_text("<html></html>", encoding="utf-8")


class TestParser:

    def test_submit_flags(self) -> None:
        args = create_parser().parse_args(["submit", "https://x.example/", "-f", "-l", "zh", "-v"])

        assert args.url == "https://x.example/"
        assert args.force and args.verbose
        assert args.language == "zh"

    def test_post_build_flags(self) -> None:
        args = create_parser().parse_args(["post-build", "--dist", "out", "--dry-run"])

        assert args.dist == "out"
        assert args.dry_run
        assert not args.force

    def test_mask_api_key(self) -> None:
        assert mask_api_key(API_KEY) == "01234567..."
        assert mask_api_key("") == "(none)"


class TestMain:

    def test_no_command_prints_help(self, workdir: Path, capsys) -> None:
        assert main([]) == 0
        assert "usage: indexnow" in capsys.readouterr().out

    def test_help_command(self, workdir: Path, capsys) -> None:
        assert main(["help"]) == 0
        assert "submit-batch" in capsys.readouterr().out

    def test_unknown_command_exits_1(self, workdir: Path) -> None:
        assert main(["frobnicate"]) == 1

    def test_missing_argument_exits_1(self, workdir: Path) -> None:
        assert main(["submit"]) == 1

    def test_config_valid(self, configured: Path, capsys) -> None:
        assert main(["config"]) == 0

        out = capsys.readouterr().out
        assert f"Site URL: {SITE_URL}" in out
        assert "API key: 01234567..." in out
        assert "Valid: yes" in out

    def test_config_invalid(self, workdir: Path, capsys) -> None:
        assert main(["config", "-l", "zh"]) == 1
        assert "配置有效: 否" in capsys.readouterr().out

    def test_submit_requires_valid_config(self, workdir: Path, capsys) -> None:
        assert main(["submit", "https://x.example/"]) == 1
        assert "invalid IndexNow configuration" in capsys.readouterr().err

    def test_self_test_with_invalid_config(self, workdir: Path) -> None:
        assert main(["test"]) == 1

    def test_cache_stats(self, configured: Path, capsys) -> None:
        assert main(["cache", "--stats"]) == 0

        out = capsys.readouterr().out
        assert "Cache statistics:" in out
        assert "Size: 0 URL(s)" in out

    def test_cache_hint(self, configured: Path, capsys) -> None:
        assert main(["cache"]) == 0
        assert "--stats" in capsys.readouterr().out


class TestPostBuild:

    def test_skipped_outside_production(self, configured: Path, capsys) -> None:
        build_site(configured)

        assert main(["post-build"]) == 0
        assert "skipping" in capsys.readouterr().out

    def test_dry_run_lists_urls(self, configured: Path, capsys) -> None:
        build_site(configured)

        assert main(["post-build", "--dry-run"]) == 0

        out = capsys.readouterr().out
        assert f"1. {SITE_URL}/" in out
        assert f"{SITE_URL}/posts/hello/" in out
        assert "nothing submitted" in out

    def test_missing_build_directory_is_not_an_error(self, configured: Path, capsys) -> None:
        assert main(["post-build", "--dry-run"]) == 0
        assert "Build directory not found" in capsys.readouterr().out

    def test_submit_all_requires_build_directory(self, configured: Path, capsys) -> None:
        assert main(["submit-all"]) == 1
        assert "Build directory not found" in capsys.readouterr().err
