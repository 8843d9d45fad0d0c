"""Configuration service facade for simplified configuration access.

Implements the Facade pattern to provide a clean, simple interface
to the configuration system, and builds the parser inputs (vocabulary,
contexts) the rest of the application needs from it.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from config.config import AppConfig, ConfigLoader
from interpreter.classifier import CommandType
from interpreter.models import DailyLogContext, TaskContext, TimeEntryContext
from interpreter.vocabulary import Vocabulary


class ConfigurationService:
    """Facade for application configuration management.

    Provides simplified access to configuration values without
    deep nesting and verbose attribute access. All properties
    delegate to the underlying AppConfig instance.

    Example:
        config_service = ConfigurationService(config)
        command_type = config_service.command_type  # Instead of config.session.command_type

    Attributes:
        _config: Underlying AppConfig instance
    """

    def __init__(self, config: AppConfig):
        self._config = config

    # Session configuration shortcuts
    @property
    def command_type(self) -> CommandType:
        """Get the forced command type (AUTO when classifying)."""
        return CommandType.parse(self._config.session.command_type)

    @property
    def language(self) -> str:
        """Get language setting."""
        return self._config.session.language

    # Roster configuration
    @property
    def project_id(self) -> str:
        return self._config.roster.project_id

    @property
    def project_name(self) -> str:
        return self._config.roster.project_name

    @property
    def projects(self) -> List[Dict[str, Any]]:
        """Get the project roster."""
        return self._config.projects_data

    @property
    def tasks(self) -> List[Dict[str, Any]]:
        """Get the task roster."""
        return self._config.tasks_data

    # Logging configuration
    @property
    def session_log_dir(self) -> str:
        """Get session log directory."""
        return self._config.logging.session_log_dir

    @property
    def session_log_enabled(self) -> bool:
        return self._config.logging.session_log_enabled

    # General configuration
    @property
    def debug(self) -> bool:
        """Get debug mode status."""
        return self._config.debug

    @property
    def log_level(self) -> str:
        """Get log level; debug mode forces DEBUG."""
        return "DEBUG" if self._config.debug else self._config.log_level

    # Parser inputs
    def get_vocabulary(self) -> Vocabulary:
        """Get the keyword tables with configured overrides applied."""
        return Vocabulary.from_app_config(self._config)

    def build_time_entry_context(self) -> TimeEntryContext:
        return TimeEntryContext(projects=self.projects)

    def build_task_context(self) -> TaskContext:
        return TaskContext(tasks=self.tasks, project_id=self.project_id or None)

    def build_daily_log_context(self, date: Optional[str] = None) -> DailyLogContext:
        return DailyLogContext(project_id=self.project_id, project_name=self.project_name, date=date)

    # Direct config access (for advanced use)
    @property
    def raw_config(self) -> AppConfig:
        """Get raw configuration object."""
        return self._config

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary for serialization.

        Returns:
            Dictionary representation of current configuration
        """
        return {
            "session": {
                "command_type": self.command_type.value,
                "language": self.language,
            },
            "roster": {
                "projects_path": self._config.roster.projects_path,
                "tasks_path": self._config.roster.tasks_path,
                "project_id": self.project_id,
                "project_name": self.project_name,
                "projects": len(self.projects),
                "tasks": len(self.tasks),
            },
            "logging": {
                "session_log_dir": self.session_log_dir,
                "session_log_enabled": self.session_log_enabled,
            },
            "debug": self.debug,
            "log_level": self.log_level,
        }


class ConfigurationServiceFactory:
    """Factory for creating ConfigurationService instances.

    Provides static factory methods for common creation patterns,
    encapsulating the construction logic.
    """

    @staticmethod
    def create_from_args(args: List[str], config_dir: Path = Path("config")) -> Tuple[ConfigurationService, List[str]]:
        """Create configuration service from command-line arguments.

        Args:
            args: Command-line arguments
            config_dir: Directory holding the JSON configuration files

        Returns:
            Tuple of (ConfigurationService, unknown_args)
        """
        loader = ConfigLoader(config_dir)
        config, unknown_args = loader.load(args)
        return ConfigurationService(config), unknown_args

    @staticmethod
    def create_from_config(config: AppConfig) -> ConfigurationService:
        """Create configuration service from existing config."""
        return ConfigurationService(config)

    @staticmethod
    def create_default(config_dir: Path = Path("config")) -> ConfigurationService:
        """Create configuration service with defaults and any config files."""
        loader = ConfigLoader(config_dir)
        config, _ = loader.load([])
        return ConfigurationService(config)
