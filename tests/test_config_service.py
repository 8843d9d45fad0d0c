"""Unit tests for configuration loading and the configuration service."""
import json

import pytest

from config.config import AppConfig, ConfigLoader, LoggingConfig, RosterConfig, SessionConfig
from config.service import ConfigurationService, ConfigurationServiceFactory
from core.exceptions import ConfigurationError
from interpreter.classifier import CommandType

ENV_VARS = (
    "VOICE_COMMAND_TYPE",
    "VOICE_LANGUAGE",
    "VOICE_PROJECTS_FILE",
    "VOICE_TASKS_FILE",
    "VOICE_SESSION_LOG_DIR",
    "DEBUG",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config_dir(tmp_path):
    """Config directory with rosters, settings and vocabulary overrides."""
    (tmp_path / "projects.json").write_text(json.dumps({"projects": [
        {"id": "p1", "name": "Smith House", "status": "active"},
    ]}))
    (tmp_path / "tasks.json").write_text(json.dumps([
        {"id": "t1", "title": "Drywall Installation", "status": "pending"},
    ]))
    (tmp_path / "settings.json").write_text(json.dumps({
        "session": {"language": "en-GB"},
        "roster": {"project_id": "p1", "project_name": "Smith House"},
    }))
    (tmp_path / "vocabulary.json").write_text(json.dumps({
        "activity_keywords": {"drywall": ["mudding"]},
    }))
    return tmp_path


class TestConfigurationService:
    """Tests for ConfigurationService facade."""

    @pytest.fixture
    def mock_config(self):
        """Create an AppConfig for testing."""
        return AppConfig(
            session=SessionConfig(command_type="task", language="en-US"),
            roster=RosterConfig(project_id="p1", project_name="Smith House"),
            logging=LoggingConfig(session_log_dir="logs/test", session_log_enabled=False),
            projects_data=[{"id": "p1", "name": "Smith House", "status": "active"}],
            tasks_data=[{"id": "t1", "title": "Drywall Installation"}],
            debug=False,
            log_level="INFO",
        )

    def test_command_type_property(self, mock_config):
        # Arrange
        service = ConfigurationService(mock_config)

        # Assert
        assert service.command_type == CommandType.TASK

    def test_logging_properties(self, mock_config):
        service = ConfigurationService(mock_config)

        assert service.session_log_dir == "logs/test"
        assert service.session_log_enabled is False

    def test_debug_forces_debug_level(self, mock_config):
        # Arrange
        config = AppConfig(
            session=mock_config.session,
            roster=mock_config.roster,
            logging=mock_config.logging,
            debug=True,
            log_level="WARNING",
        )

        # Act
        service = ConfigurationService(config)

        # Assert
        assert service.log_level == "DEBUG"

    def test_build_contexts(self, mock_config):
        # Arrange
        service = ConfigurationService(mock_config)

        # Act
        time_entry = service.build_time_entry_context()
        task = service.build_task_context()
        daily_log = service.build_daily_log_context("2024-05-01")

        # Assert
        assert [p.id for p in time_entry.projects] == ["p1"]
        assert task.tasks[0].name == "Drywall Installation"
        assert task.project_id == "p1"
        assert daily_log.project_name == "Smith House"
        assert daily_log.date == "2024-05-01"

    def test_to_dict(self, mock_config):
        data = ConfigurationService(mock_config).to_dict()

        assert data["session"]["command_type"] == "task"
        assert data["roster"]["projects"] == 1
        assert data["log_level"] == "INFO"

    def test_raw_config(self, mock_config):
        assert ConfigurationService(mock_config).raw_config is mock_config


class TestConfigValidation:
    def test_invalid_command_type(self):
        with pytest.raises(ConfigurationError):
            SessionConfig(command_type="invoice")

    def test_empty_language(self):
        with pytest.raises(ConfigurationError):
            SessionConfig(language=" ")

    def test_invalid_log_level(self):
        with pytest.raises(ConfigurationError):
            AppConfig(session=SessionConfig(), roster=RosterConfig(), logging=LoggingConfig(), log_level="LOUD")


class TestConfigLoader:
    def test_json_files(self, config_dir):
        # Act
        config, unknown = ConfigLoader(config_dir).load([])

        # Assert
        assert unknown == []
        assert config.session.language == "en-GB"
        assert config.roster.project_id == "p1"
        assert config.projects_data[0]["name"] == "Smith House"
        assert config.tasks_data[0]["title"] == "Drywall Installation"
        assert config.vocabulary_data == {"activity_keywords": {"drywall": ["mudding"]}}

    def test_env_overrides_json(self, config_dir, monkeypatch):
        # Arrange
        monkeypatch.setenv("VOICE_LANGUAGE", "es-MX")
        monkeypatch.setenv("VOICE_COMMAND_TYPE", "Daily_Log")
        monkeypatch.setenv("DEBUG", "yes")

        # Act
        config, _ = ConfigLoader(config_dir).load([])

        # Assert
        assert config.session.language == "es-MX"
        assert config.session.command_type == "daily_log"
        assert config.debug is True

    def test_cli_overrides_env(self, config_dir, monkeypatch):
        monkeypatch.setenv("VOICE_COMMAND_TYPE", "task")

        config, unknown = ConfigLoader(config_dir).load(["--type", "time_entry", "--no-session-log", "extra"])

        assert config.session.command_type == "time_entry"
        assert config.logging.session_log_enabled is False
        assert unknown == ["extra"]

    def test_roster_path_from_cli(self, config_dir, tmp_path):
        # Arrange
        other = tmp_path / "other_projects.json"
        other.write_text(json.dumps([{"id": "p7", "name": "Lake Cabin"}]))

        # Act
        config, _ = ConfigLoader(config_dir).load(["--projects", str(other)])

        # Assert
        assert [p["id"] for p in config.projects_data] == ["p7"]

    def test_missing_files_use_defaults(self, tmp_path):
        config, _ = ConfigLoader(tmp_path).load([])

        assert config.session.command_type == "auto"
        assert config.projects_data == []
        assert config.vocabulary_data == {}

    def test_invalid_roster_file(self, tmp_path):
        (tmp_path / "projects.json").write_text(json.dumps({"projects": "Smith House"}))

        with pytest.raises(ConfigurationError):
            ConfigLoader(tmp_path).load([])

    def test_unknown_setting(self, tmp_path):
        (tmp_path / "settings.json").write_text(json.dumps({"session": {"engine": "vosk"}}))

        with pytest.raises(ConfigurationError):
            ConfigLoader(tmp_path).load([])

    def test_malformed_json_is_skipped(self, tmp_path):
        (tmp_path / "settings.json").write_text("{not json")

        config, _ = ConfigLoader(tmp_path).load([])

        assert config.session.language == "en-US"

    def test_deep_update(self):
        target = {"session": {"command_type": "auto", "language": "en-US"}}

        ConfigLoader._deep_update(target, {"session": {"language": "fr-FR"}})

        assert target == {"session": {"command_type": "auto", "language": "fr-FR"}}


class TestConfigurationServiceFactory:
    def test_create_from_args(self, config_dir):
        # Act
        service, unknown = ConfigurationServiceFactory.create_from_args(["--project-name", "Smith"], config_dir)

        # Assert
        assert service.project_name == "Smith"
        assert unknown == []

    def test_create_default_vocabulary(self, config_dir):
        service = ConfigurationServiceFactory.create_default(config_dir)

        vocabulary = service.get_vocabulary()

        assert "mudding" in vocabulary.activity_keywords["drywall"]

    def test_create_from_config(self):
        config = AppConfig(session=SessionConfig(), roster=RosterConfig(), logging=LoggingConfig())

        service = ConfigurationServiceFactory.create_from_config(config)

        assert service.command_type == CommandType.AUTO
