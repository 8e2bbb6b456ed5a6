"""Tests for configuration management."""

import pytest
from pathlib import Path
import tempfile
import shutil

from recordkit import Database
from recordkit.config import Config, DEFAULT_CHANNEL, ProjectConfig


class TestConfig:
    """Test configuration management."""

    @pytest.fixture
    def temp_dir(self):
        """Create a temporary directory for testing."""
        temp = tempfile.mkdtemp()
        yield Path(temp)
        shutil.rmtree(temp)

    def test_defaults(self):
        config = ProjectConfig()
        assert config.snapshot_dir == ".recordkit/snapshots"
        assert config.notification_channel == DEFAULT_CHANNEL
        assert config.log_level == "WARNING"
        assert config.inflections.irregular == {}
        assert config.inflections.uncountable == []

    def test_init_project(self, temp_dir):
        """Test initializing a new project."""
        config = Config(temp_dir)

        # Should not exist initially
        assert not config.exists

        project_config = config.init_project()

        assert project_config.snapshot_dir == ".recordkit/snapshots"
        assert config.exists
        assert (temp_dir / ".recordkit" / "config.toml").exists()
        assert (temp_dir / ".recordkit" / "snapshots").is_dir()

    def test_init_project_already_exists(self, temp_dir):
        """Test initializing a project twice."""
        Config(temp_dir).init_project()

        with pytest.raises(FileExistsError):
            Config(temp_dir).init_project()

    def test_load_missing(self, temp_dir):
        with pytest.raises(FileNotFoundError):
            Config(temp_dir).load()

    def test_load_or_default_without_file(self, temp_dir):
        config = Config(temp_dir).load_or_default()
        assert config == ProjectConfig()

    def test_save_and_load(self, temp_dir):
        config = Config(temp_dir)
        project_config = ProjectConfig(
            snapshot_dir="archives",
            notification_channel="Changed",
            log_level="DEBUG",
        )
        project_config.inflections.irregular["cactus"] = "cacti"
        project_config.inflections.uncountable.append("luggage")
        config.save(project_config)

        loaded = Config(temp_dir).load()
        assert loaded.snapshot_dir == "archives"
        assert loaded.notification_channel == "Changed"
        assert loaded.log_level == "DEBUG"
        assert loaded.inflections.irregular == {"cactus": "cacti"}
        assert loaded.inflections.uncountable == ["luggage"]

    def test_save_without_config(self, temp_dir):
        with pytest.raises(ValueError):
            Config(temp_dir).save()

    def test_extra_fields_are_kept(self, temp_dir):
        (temp_dir / ".recordkit").mkdir()
        (temp_dir / ".recordkit" / "config.toml").write_text(
            'log_level = "INFO"\nowner = "team-a"\n'
        )
        loaded = Config(temp_dir).load()
        assert loaded.log_level == "INFO"
        assert loaded.owner == "team-a"

    def test_snapshot_dir_resolution(self, temp_dir):
        config = Config(temp_dir)
        assert config.snapshot_dir == temp_dir / ".recordkit" / "snapshots"

        config.save(ProjectConfig(snapshot_dir="/var/tmp/records"))
        assert Config(temp_dir).snapshot_dir == Path("/var/tmp/records")

    def test_env_overrides(self, temp_dir, monkeypatch):
        Config(temp_dir).init_project()
        monkeypatch.setenv("RECORDKIT_SNAPSHOT_DIR", "/tmp/elsewhere")
        monkeypatch.setenv("RECORDKIT_LOG_LEVEL", "debug")

        loaded = Config(temp_dir).load()
        assert loaded.snapshot_dir == "/tmp/elsewhere"
        assert loaded.log_level == "DEBUG"

        defaults = Config(temp_dir / "no-project").load_or_default()
        assert defaults.snapshot_dir == "/tmp/elsewhere"

    def test_project_dir_from_env(self, temp_dir, monkeypatch):
        monkeypatch.setenv("RECORDKIT_PROJECT_DIR", str(temp_dir))
        assert Config().project_dir == temp_dir


class TestDatabaseConfig:
    """Test how a Database picks up project configuration."""

    @pytest.fixture
    def project(self, temp_dir):
        config = Config(temp_dir)
        project_config = config.init_project()
        project_config.inflections.irregular["cactus"] = "cacti"
        project_config.notification_channel = "GardenChanged"
        config.save(project_config)
        return temp_dir

    def test_reads_project_config(self, project):
        db = Database(project_dir=project)

        assert db.config.notification_channel == "GardenChanged"
        assert db.notifier.channel == "GardenChanged"
        assert db.context.snapshot_dir == project / ".recordkit" / "snapshots"

    def test_configured_inflections_name_relations(self, project):
        db = Database(project_dir=project)
        db.declare_columns("Garden", {"name": "string"})
        db.declare_columns("Cactus", {"species": "string"})

        relation = db.declare_has_many("Garden", "Cactus")
        assert relation.accessor == "cacti"

    def test_explicit_config_wins(self, project):
        db = Database(project_dir=project, config=ProjectConfig())
        assert db.notifier.channel == DEFAULT_CHANNEL

    def test_explicit_inflection_rules(self, project):
        from recordkit.utils.inflection import InflectionRules

        db = Database(
            project_dir=project,
            inflection_rules=InflectionRules(plurals=[(r"$", "z")]),
        )
        assert db.inflector.pluralize("cactus") == "cactusz"

    def test_snapshots_land_in_project(self, project):
        db = Database(project_dir=project)
        db.declare_columns("Garden", {"name": "string"})
        db.create("Garden", name="Front")

        path = db.serialize_to_file("Garden", "gardens.json")
        assert path == project / ".recordkit" / "snapshots" / "gardens.json"
        assert path.exists()
