"""Fast integration tests for CLI commands using CliRunner."""

import json
import os
from pathlib import Path

import pytest
from typer.testing import CliRunner

from recordkit import Database
from recordkit.cli.main import app
from recordkit.config import Config, ProjectConfig

runner = CliRunner()


class TestCLIIntegration:
    """Fast CLI integration tests using CliRunner."""

    @pytest.fixture
    def temp_project(self, temp_dir):
        """Temporary directory to run commands in."""
        return temp_dir

    def run_in_project(self, command, temp_project):
        """Run a command in the project directory."""
        original_cwd = os.getcwd()
        os.chdir(temp_project)
        try:
            return runner.invoke(app, command)
        finally:
            os.chdir(original_cwd)

    @pytest.fixture
    def snapshot_file(self, temp_project):
        """Write a Post snapshot with two records."""
        db = Database(config=ProjectConfig(), snapshot_dir=temp_project)
        db.declare_columns("Post", {"title": "string", "tags": "array"})
        db.create("Post", title="Hello", tags=["intro"])
        db.create("Post", title="Second")
        return db.serialize_to_file("Post", "posts.json")

    def test_no_command_shows_help(self, temp_project):
        result = self.run_in_project([], temp_project)
        assert result.exit_code == 0
        assert "Usage" in result.stdout

    def test_project_initialization(self, temp_project):
        """Test project initialization workflow."""
        result = self.run_in_project(["init"], temp_project)
        assert result.exit_code == 0
        assert "Initialized recordkit project" in result.stdout

        assert (temp_project / ".recordkit" / "config.toml").exists()
        assert (temp_project / ".recordkit" / "snapshots").is_dir()

        # Initializing again fails
        result = self.run_in_project(["init"], temp_project)
        assert result.exit_code == 1
        assert "already exists" in result.stdout

    def test_init_with_path(self, temp_project):
        target = temp_project / "nested"
        result = self.run_in_project(["init", str(target)], temp_project)
        assert result.exit_code == 0
        assert (target / ".recordkit" / "config.toml").exists()

    def test_version(self, temp_project):
        result = self.run_in_project(["version"], temp_project)
        assert result.exit_code == 0
        assert "recordkit version" in result.stdout

    def test_status(self, temp_project, monkeypatch):
        self.run_in_project(["init"], temp_project)
        monkeypatch.setenv("RECORDKIT_LOG_LEVEL", "info")

        result = self.run_in_project(["status"], temp_project)
        assert result.exit_code == 0
        assert "recordkit Status" in result.stdout
        assert "RecordKitDataDidChange" in result.stdout
        assert "Log level: INFO" in result.stdout
        assert "RECORDKIT_LOG_LEVEL=info" in result.stdout

    def test_status_without_project(self, temp_project):
        result = self.run_in_project(["status"], temp_project)
        assert result.exit_code == 0
        assert "defaults" in result.stdout

    def test_log_level_option(self, temp_project):
        result = self.run_in_project(["--log-level", "debug", "version"], temp_project)
        assert result.exit_code == 0

    def test_inflect_commands(self, temp_project):
        cases = [
            (["inflect", "pluralize", "person"], "people"),
            (["inflect", "singularize", "categories"], "category"),
            (["inflect", "humanize", "author_id"], "Author"),
            (["inflect", "titleize", "first_name"], "First Name"),
            (["inflect", "foreign-key", "BlogPost"], "blog_post_id"),
        ]
        for command, expected in cases:
            result = self.run_in_project(command, temp_project)
            assert result.exit_code == 0, result.stdout
            assert result.stdout.strip() == expected

    def test_inflect_uses_project_rules(self, temp_project):
        self.run_in_project(["init"], temp_project)
        config = Config(temp_project)
        project_config = config.load()
        project_config.inflections.irregular["cactus"] = "cacti"
        config.save(project_config)

        result = self.run_in_project(["inflect", "pluralize", "cactus"], temp_project)
        assert result.exit_code == 0
        assert result.stdout.strip() == "cacti"

    def test_inflect_missing_word(self, temp_project):
        result = self.run_in_project(["inflect", "pluralize"], temp_project)
        assert result.exit_code == 1
        assert "Missing argument 'WORD'" in result.stdout

    def test_snapshot_info(self, temp_project, snapshot_file):
        result = self.run_in_project(["snapshot", "info", str(snapshot_file)], temp_project)
        assert result.exit_code == 0
        assert "Snapshot of Post" in result.stdout
        assert "Records: 2" in result.stdout
        assert "Next id: 3" in result.stdout
        assert "title" in result.stdout
        assert "array" in result.stdout

    def test_snapshot_show(self, temp_project, snapshot_file):
        result = self.run_in_project(["snapshot", "show", "posts.json"], temp_project)
        assert result.exit_code == 0
        assert "Hello" in result.stdout
        assert "Second" in result.stdout

    def test_snapshot_show_limit(self, temp_project, snapshot_file):
        result = self.run_in_project(
            ["snapshot", "show", str(snapshot_file), "--limit", "1"], temp_project
        )
        assert result.exit_code == 0
        assert "Hello" in result.stdout
        assert "Second" not in result.stdout
        assert "Showing 1 of 2 records" in result.stdout

    def test_snapshot_show_json(self, temp_project, snapshot_file):
        result = self.run_in_project(
            ["snapshot", "show", str(snapshot_file), "--format", "json"], temp_project
        )
        assert result.exit_code == 0
        records = json.loads(result.stdout)
        assert [r["title"] for r in records] == ["Hello", "Second"]
        assert records[0]["tags"] == ["intro"]

    def test_snapshot_show_bad_format(self, temp_project, snapshot_file):
        result = self.run_in_project(
            ["snapshot", "show", str(snapshot_file), "--format", "xml"], temp_project
        )
        assert result.exit_code == 1
        assert "Unknown format" in result.stdout

    def test_snapshot_from_project_dir(self, temp_project):
        self.run_in_project(["init"], temp_project)
        db = Database(project_dir=temp_project)
        db.declare_columns("Post", {"title": "string"})
        db.create("Post", title="Stored")
        db.serialize_to_file("Post", "posts.json")

        # Resolved against .recordkit/snapshots
        result = self.run_in_project(["snapshot", "show", "posts.json"], temp_project)
        assert result.exit_code == 0
        assert "Stored" in result.stdout

    def test_snapshot_missing_file(self, temp_project):
        result = self.run_in_project(["snapshot", "info", "nope.json"], temp_project)
        assert result.exit_code == 1
        assert "not found" in result.stdout

    def test_snapshot_invalid_file(self, temp_project):
        (temp_project / "broken.json").write_text("{}")
        result = self.run_in_project(["snapshot", "show", "broken.json"], temp_project)
        assert result.exit_code == 1
        assert "not a valid snapshot" in result.stdout

    def test_snapshot_missing_path(self, temp_project):
        result = self.run_in_project(["snapshot", "show"], temp_project)
        assert result.exit_code == 1
        assert "Missing argument 'PATH'" in result.stdout
