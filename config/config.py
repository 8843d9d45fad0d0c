"""Layered configuration for the voice command interpreter.

Implements a hierarchical configuration system with the following precedence:
1. Default values (lowest priority)
2. JSON configuration files
3. Environment variables
4. Command-line arguments (highest priority)

Configuration is deep-merged across all sources, allowing partial overrides
at any level of the configuration hierarchy.
"""
from __future__ import annotations

import argparse
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from loguru import logger

from core.exceptions import ConfigurationError

COMMAND_TYPES = ("auto", "time_entry", "daily_log", "task")
LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class SessionConfig:
    """Voice session configuration.

    Attributes:
        command_type: Forced command type, or "auto" to classify each transcript
        language: BCP-47 language tag passed to the speech source
    """
    command_type: str = "auto"
    language: str = "en-US"

    def __post_init__(self):
        if self.command_type not in COMMAND_TYPES:
            raise ConfigurationError(f"Invalid command_type: {self.command_type}")
        if not self.language or not self.language.strip():
            raise ConfigurationError("language must not be empty")


@dataclass(frozen=True)
class RosterConfig:
    """Where the project and task rosters come from.

    Attributes:
        projects_path: JSON file holding the project roster
        tasks_path: JSON file holding the task roster
        project_id: Project daily logs and tasks belong to
        project_name: Display name of that project
    """
    projects_path: str = "config/projects.json"
    tasks_path: str = "config/tasks.json"
    project_id: str = ""
    project_name: str = ""


@dataclass(frozen=True)
class LoggingConfig:
    """Session log configuration.

    Attributes:
        session_log_dir: Directory for session log files
        session_log_enabled: Write a session log for each run
    """
    session_log_dir: str = "logs/sessions"
    session_log_enabled: bool = True


@dataclass(frozen=True)
class AppConfig:
    """Complete application configuration.

    Aggregates all configuration sections and loaded JSON data.

    Attributes:
        session: Voice session settings
        roster: Roster file locations and current project
        logging: Session log settings
        vocabulary_data: Keyword table overrides (config/vocabulary.json)
        projects_data: Project roster entries
        tasks_data: Task roster entries
        debug: Debug mode flag
        log_level: Logging verbosity level
    """
    session: SessionConfig
    roster: RosterConfig
    logging: LoggingConfig

    # Loaded from JSON files
    vocabulary_data: Dict[str, Any] = field(default_factory=dict)
    projects_data: List[Dict[str, Any]] = field(default_factory=list)
    tasks_data: List[Dict[str, Any]] = field(default_factory=list)

    debug: bool = False
    log_level: str = "INFO"

    def __post_init__(self):
        if self.log_level not in LOG_LEVELS:
            raise ConfigurationError(f"Invalid log_level: {self.log_level}")


class ConfigLoader:
    """Centralized configuration loader with validation and hierarchy.

    Implements the configuration loading strategy with proper precedence
    and deep merging of nested configuration dictionaries.
    """

    def __init__(self, config_dir: Path = Path("config")):
        self.config_dir = Path(config_dir)

    def load(self, argv: List[str]) -> Tuple[AppConfig, List[str]]:
        """Load configuration with proper hierarchy: defaults → files → env → CLI.

        Args:
            argv: Command-line arguments to parse

        Returns:
            Tuple of (AppConfig instance, unknown CLI arguments)
        """
        # 1. Start with defaults
        config_dict = self._get_defaults()

        # 2. Load from JSON files (deep merge)
        json_data = self._load_json_configs()
        self._deep_update(config_dict, json_data)

        # 3. Override with environment variables (deep merge)
        env_overrides = self._load_env_overrides()
        self._deep_update(config_dict, env_overrides)

        # 4. Parse CLI arguments (highest priority, deep merge)
        cli_overrides, unknown_args = self._parse_cli_args(argv)
        self._deep_update(config_dict, cli_overrides)

        # 5. Rosters live wherever the final roster paths point
        roster = config_dict["roster"]
        config_dict["projects_data"] = self._load_roster(roster["projects_path"], "projects")
        config_dict["tasks_data"] = self._load_roster(roster["tasks_path"], "tasks")

        # 6. Build and validate final config
        config = self._build_config(config_dict)
        return config, unknown_args

    def _get_defaults(self) -> Dict[str, Any]:
        """Get default configuration values."""
        return {
            "session": {
                "command_type": "auto",
                "language": "en-US",
            },
            "roster": {
                "projects_path": str(self.config_dir / "projects.json"),
                "tasks_path": str(self.config_dir / "tasks.json"),
                "project_id": "",
                "project_name": "",
            },
            "logging": {
                "session_log_dir": "logs/sessions",
                "session_log_enabled": True,
            },
            "debug": False,
            "log_level": "INFO",
        }

    def _read_json(self, file_path: Path) -> Optional[Any]:
        """Read a JSON file, returning None when it is missing or unreadable."""
        if not file_path.exists():
            return None
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            logger.warning(f"Failed to load {file_path}: {e}")
            return None

    def _load_json_configs(self) -> Dict[str, Any]:
        """Load settings and vocabulary overrides from the config directory.

        ``settings.json`` may hold any of the default sections;
        ``vocabulary.json`` holds keyword table overrides.

        Returns:
            Dictionary containing loaded JSON data
        """
        json_configs: Dict[str, Any] = {}

        settings = self._read_json(self.config_dir / "settings.json")
        if isinstance(settings, dict):
            json_configs.update(settings)

        vocabulary = self._read_json(self.config_dir / "vocabulary.json")
        json_configs["vocabulary_data"] = vocabulary if isinstance(vocabulary, dict) else {}

        return json_configs

    def _load_roster(self, path: str, key: str) -> List[Dict[str, Any]]:
        """Load a roster file holding either a list or ``{key: [...]}``."""
        data = self._read_json(Path(path))
        if data is None:
            return []
        if isinstance(data, dict):
            data = data.get(key, [])
        if not isinstance(data, list):
            raise ConfigurationError(f"{path} must contain a list of {key}")
        return [entry for entry in data if isinstance(entry, dict)]

    def _load_env_overrides(self) -> Dict[str, Any]:
        """Load configuration overrides from environment variables.

        Supported environment variables:
        - VOICE_COMMAND_TYPE: Forced command type
        - VOICE_LANGUAGE: Speech language tag
        - VOICE_PROJECTS_FILE: Project roster JSON file
        - VOICE_TASKS_FILE: Task roster JSON file
        - VOICE_SESSION_LOG_DIR: Session log directory
        - DEBUG: Enable debug mode
        - LOG_LEVEL: Set logging level

        Returns:
            Dictionary with environment-based overrides
        """
        overrides: Dict[str, Any] = {}

        command_type = os.getenv("VOICE_COMMAND_TYPE")
        if command_type:
            overrides.setdefault("session", {})["command_type"] = command_type.strip().lower()

        language = os.getenv("VOICE_LANGUAGE")
        if language:
            overrides.setdefault("session", {})["language"] = language

        projects_file = os.getenv("VOICE_PROJECTS_FILE")
        if projects_file:
            overrides.setdefault("roster", {})["projects_path"] = projects_file

        tasks_file = os.getenv("VOICE_TASKS_FILE")
        if tasks_file:
            overrides.setdefault("roster", {})["tasks_path"] = tasks_file

        session_log_dir = os.getenv("VOICE_SESSION_LOG_DIR")
        if session_log_dir:
            overrides.setdefault("logging", {})["session_log_dir"] = session_log_dir

        # Debug and logging
        if self._env_bool("DEBUG"):
            overrides["debug"] = True

        log_level = os.getenv("LOG_LEVEL")
        if log_level:
            overrides["log_level"] = log_level.upper()

        return overrides

    def _parse_cli_args(self, argv: List[str]) -> Tuple[Dict[str, Any], List[str]]:
        """Parse CLI arguments.

        Args:
            argv: Command-line arguments

        Returns:
            Tuple of (overrides dictionary, unknown arguments)
        """
        parser = argparse.ArgumentParser(description="Contractor voice command interpreter")

        parser.add_argument(
            "--command-type", "--type",
            choices=list(COMMAND_TYPES),
            help="Force a command type instead of classifying each transcript"
        )
        parser.add_argument("--language", help="Speech language tag (e.g. en-US)")
        parser.add_argument("--projects", help="Project roster JSON file")
        parser.add_argument("--tasks", help="Task roster JSON file")
        parser.add_argument("--project-id", help="Project the daily log or task belongs to")
        parser.add_argument("--project-name", help="Display name of that project")
        parser.add_argument(
            "--no-session-log",
            action="store_true",
            help="Do not write a session log file"
        )
        parser.add_argument(
            "--debug",
            action="store_true",
            help="Enable debug mode"
        )
        parser.add_argument(
            "--log-level",
            choices=["DEBUG", "INFO", "WARNING", "ERROR"],
            help="Set logging level"
        )

        known, unknown = parser.parse_known_args(argv)

        # Build overrides from parsed arguments
        overrides: Dict[str, Any] = {}
        if known.command_type:
            overrides.setdefault("session", {})["command_type"] = known.command_type
        if known.language:
            overrides.setdefault("session", {})["language"] = known.language
        if known.projects:
            overrides.setdefault("roster", {})["projects_path"] = known.projects
        if known.tasks:
            overrides.setdefault("roster", {})["tasks_path"] = known.tasks
        if known.project_id:
            overrides.setdefault("roster", {})["project_id"] = known.project_id
        if known.project_name:
            overrides.setdefault("roster", {})["project_name"] = known.project_name
        if known.no_session_log:
            overrides.setdefault("logging", {})["session_log_enabled"] = False
        if known.debug:
            overrides["debug"] = True
        if known.log_level:
            overrides["log_level"] = known.log_level

        return overrides, unknown

    def _build_config(self, config_dict: Dict[str, Any]) -> AppConfig:
        """Build and validate the final configuration object.

        Args:
            config_dict: Merged configuration dictionary

        Returns:
            Validated AppConfig instance

        Raises:
            ConfigurationError: If configuration is invalid
        """
        try:
            session_config = SessionConfig(**config_dict.get("session", {}))
            roster_config = RosterConfig(**config_dict.get("roster", {}))
            logging_config = LoggingConfig(**config_dict.get("logging", {}))
        except TypeError as e:
            raise ConfigurationError(f"Unknown configuration option: {e}") from e

        return AppConfig(
            session=session_config,
            roster=roster_config,
            logging=logging_config,
            vocabulary_data=config_dict.get("vocabulary_data", {}),
            projects_data=config_dict.get("projects_data", []),
            tasks_data=config_dict.get("tasks_data", []),
            debug=config_dict.get("debug", False),
            log_level=config_dict.get("log_level", "INFO"),
        )

    @staticmethod
    def _env_bool(name: str, default: bool = False) -> bool:
        """Parse boolean from environment variable.

        Args:
            name: Environment variable name
            default: Default value if not set

        Returns:
            Boolean value (True for "1", "true", "yes", "y", "on")
        """
        val = os.getenv(name)
        if val is None:
            return default
        return val.strip().lower() in {"1", "true", "yes", "y", "on"}

    @staticmethod
    def _deep_update(target: Dict[str, Any], updates: Dict[str, Any]) -> None:
        """Recursively update mapping 'target' with 'updates' without clobbering nested dicts.

        Args:
            target: Dictionary to update (modified in place)
            updates: Dictionary with new values
        """
        for key, new_val in updates.items():
            if isinstance(new_val, dict) and isinstance(target.get(key), dict):
                ConfigLoader._deep_update(target[key], new_val)  # type: ignore[index]
            else:
                target[key] = new_val


__all__ = ["AppConfig", "SessionConfig", "RosterConfig", "LoggingConfig", "ConfigLoader"]
