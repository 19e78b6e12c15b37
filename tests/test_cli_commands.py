"""
Unit Tests for CLI Commands

Tests the CLI entry points over the bundled sample collection and a
temporary content directory.

STAFF ENGINEER PATTERNS:
------------------------
1. Mock the handlers to test dispatch
2. Run real handlers against --sample for output
3. Verify exit codes
4. Test error handling
"""

import json
from unittest.mock import patch

import pytest

from blog_pipeline.cli import commands
from blog_pipeline.config import reset_config


@pytest.fixture(autouse=True)
def clean_config():
    reset_config()
    yield
    reset_config()


def run(argv):
    with patch("sys.argv", ["blog-pipeline", *argv]):
        return commands.main()


# ---------------------------------------------------------------------------
# LOAD_ENV TESTS
# ---------------------------------------------------------------------------


class TestLoadEnv:
    """Test environment loading."""

    def test_load_env_does_not_raise(self):
        """Should not raise even if dotenv missing."""
        commands._load_env()


# ---------------------------------------------------------------------------
# MAIN CLI DISPATCH TESTS
# ---------------------------------------------------------------------------


class TestMainCliDispatch:
    """Test main CLI dispatches to correct handlers."""

    @pytest.mark.parametrize(
        "command,handler",
        [
            ("show", "run_show_cli"),
            ("outline", "run_outline_cli"),
            ("related", "run_related_cli"),
            ("nav", "run_nav_cli"),
            ("list", "run_list_cli"),
            ("check", "run_check_cli"),
        ],
    )
    def test_main_dispatches(self, command, handler):
        with patch.object(commands, handler) as mock_handler:
            mock_handler.return_value = 0
            result = run([command])

        mock_handler.assert_called_once()
        assert result == 0

    def test_main_handles_keyboard_interrupt(self):
        """Main should return 130 on KeyboardInterrupt."""
        with patch.object(commands, "run_list_cli") as mock_list:
            mock_list.side_effect = KeyboardInterrupt()
            assert run(["list"]) == 130

    def test_unknown_command_exits(self):
        with pytest.raises(SystemExit):
            run(["publish"])


# ---------------------------------------------------------------------------
# COMMANDS OVER THE SAMPLE COLLECTION
# ---------------------------------------------------------------------------


class TestSampleCommands:
    """Run real handlers with --sample."""

    def test_show(self, capsys):
        assert run(["show", "python-tooling", "--sample"]) == 0
        out = capsys.readouterr().out

        assert "PYTHON TOOLING" in out
        assert "(/blogs/terminal-setup)" in out
        assert "Unresolved links: /blogs/packaging-notes" in out

    def test_show_json(self, capsys):
        assert run(["show", "hello-world", "--sample", "--json"]) == 0
        data = json.loads(capsys.readouterr().out)

        assert data["document"]["id"] == "hello-world"
        assert data["navigation"]["next"]["id"] == "terminal-setup"

    def test_show_not_found(self, capsys):
        assert run(["show", "nope", "--sample"]) == 1
        assert "not found" in capsys.readouterr().err

    def test_outline_json(self, capsys):
        assert run(["outline", "terminal-setup", "--sample", "--json"]) == 0
        anchors = [e["anchor_id"] for e in json.loads(capsys.readouterr().out)]
        assert anchors == ["setting-up-a-terminal", "installing-the-shell", "prompt"]

    def test_related_k(self, capsys):
        assert run(["related", "python-tooling", "--sample", "--json", "-k", "2"]) == 0
        ids = [r["id"] for r in json.loads(capsys.readouterr().out)]
        assert ids == ["async-python", "terminal-setup"]

    def test_related_not_found(self):
        assert run(["related", "nope", "--sample"]) == 1

    def test_nav(self, capsys):
        assert run(["nav", "terminal-setup", "--sample"]) == 0
        out = capsys.readouterr().out
        assert "Previous: hello-world" in out
        assert "Next:     python-tooling" in out

    def test_list_json(self, capsys):
        assert run(["list", "--sample", "--json"]) == 0
        ids = [d["id"] for d in json.loads(capsys.readouterr().out)]
        assert ids[0] == "async-python"
        assert len(ids) == 6

    def test_check_fails_on_sample(self, capsys):
        assert run(["check", "--sample"]) == 1
        out = capsys.readouterr().out
        assert "[malformed_metadata] broken-date" in out
        assert "[unresolved_reference] python-tooling" in out
        assert "CONTENT CHECK: FAILED" in out


# ---------------------------------------------------------------------------
# COMMANDS OVER A CONTENT DIRECTORY
# ---------------------------------------------------------------------------


class TestContentDirCommands:
    """Run real handlers against files on disk."""

    @pytest.fixture
    def content_dir(self, tmp_path):
        (tmp_path / "first.md").write_text("---\ntitle: First\ndate: 2024-01-01\n---\n# First\n")
        (tmp_path / "second.md").write_text("---\ntitle: Second\ndate: 2024-01-02\n---\n[back](/blog/first)\n")
        return tmp_path

    def test_check_passes(self, content_dir, capsys):
        assert run(["check", "--content-dir", str(content_dir)]) == 0
        assert "CONTENT CHECK: PASSED" in capsys.readouterr().out

    def test_show_unavailable(self, content_dir, capsys):
        (content_dir / "broken.md").write_bytes(b"\xff\xfe\xfa")
        assert run(["show", "broken", "--content-dir", str(content_dir)]) == 2
        assert "unavailable" in capsys.readouterr().err

    def test_outline_unavailable(self, content_dir):
        (content_dir / "broken.md").write_bytes(b"\xff\xfe\xfa")
        assert run(["outline", "broken", "--content-dir", str(content_dir)]) == 2

    def test_content_dir_from_env(self, content_dir, capsys):
        with patch.dict("os.environ", {"BLOG_CONTENT_DIR": str(content_dir)}):
            reset_config()
            assert run(["list", "--json"]) == 0
        ids = [d["id"] for d in json.loads(capsys.readouterr().out)]
        assert ids == ["second", "first"]
