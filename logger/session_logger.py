import json
import logging
import os
from datetime import datetime
from typing import Any, Dict, Optional

from loguru import logger as loguru_logger


class SessionLogger:
    """Per-run log file recording interpreted voice commands.

    Application logs emitted through loguru are mirrored into the same file,
    so a session file shows every transcript, how it was classified and the
    command it produced.

    Instances are created explicitly (``create``) and handed to whoever
    records commands.
    """

    def __init__(self, log_dir: str = "logs/sessions", auto_start: bool = True, level: str = "INFO"):
        """Initialize session logger.

        Args:
            log_dir: Directory for session logs
            auto_start: Whether to log session start automatically
            level: Minimum loguru level mirrored into the session file
        """
        self.log_dir = log_dir
        os.makedirs(self.log_dir, exist_ok=True)

        # Filename uses minute_hour_day_month_year
        timestamp = datetime.now().strftime("%M_%H_%d_%m_%Y")
        self.log_path = os.path.join(self.log_dir, f"voice_session_{timestamp}.log")

        self._py_logger = logging.getLogger(f"VoiceSessionLogger_{timestamp}_{id(self)}")
        self._py_logger.setLevel(logging.INFO)
        self._py_logger.propagate = False
        self._file_handler = logging.FileHandler(self.log_path, encoding="utf-8")
        formatter = logging.Formatter('[%(asctime)s] %(message)s', datefmt='%Y-%m-%d %H:%M:%S')
        self._file_handler.setFormatter(formatter)
        self._py_logger.handlers = [self._file_handler]

        self.level = level
        self._sink_id: Optional[int] = None
        self.attach_loguru_sink()

        self._ended: bool = False
        self.command_count = 0

        if auto_start:
            self.log("=== SESSION START ===")

    @classmethod
    def create(cls, log_dir: str = "logs/sessions", level: str = "INFO") -> "SessionLogger":
        """Create a new independent instance."""
        return SessionLogger(log_dir=log_dir, auto_start=True, level=level)

    def attach_loguru_sink(self) -> None:
        """Mirror loguru records into the session file."""
        if self._sink_id is None:
            self._sink_id = loguru_logger.add(
                self.log_path,
                format="[{time:YYYY-MM-DD HH:mm:ss}] {level}: {message}",
                level=self.level,
            )

    def detach_loguru_sink(self) -> None:
        if self._sink_id is not None:
            try:
                loguru_logger.remove(self._sink_id)
            except ValueError:
                # Already removed, e.g. by logger.remove() during reconfiguration
                pass
            finally:
                self._sink_id = None

    def log(self, message: str) -> None:
        """Log a message to the session file."""
        self._py_logger.info(message)

    def log_start(self, config: Optional[dict] = None) -> None:
        self.log("=== SESSION START ===")
        if config is not None:
            self.log_kv("Configuration", config)

    def log_kv(self, key: str, value) -> None:
        """Log a key-value pair (e.g., configuration)."""
        if isinstance(value, (dict, list)):
            value_str = json.dumps(value, indent=2, default=str)
        else:
            value_str = str(value)
        self.log(f"{key}: {value_str}")

    def log_command(self, command: Dict[str, Any]) -> None:
        """Record one interpreted voice command.

        Args:
            command: Serialized VoiceCommandResult
        """
        self.command_count += 1
        status = "OK" if command.get("success") else "FAILED"
        self.log(f"COMMAND #{self.command_count} [{command.get('type')}] {status}: {command.get('transcript')!r}")
        if command.get("success"):
            self.log_kv("  data", command.get("data"))
        else:
            self.log(f"  error: {command.get('error')}")
            for suggestion in command.get("suggestions") or ():
                self.log(f"  suggestion: {suggestion}")

    def log_end(self) -> None:
        """Mark session end (idempotent)."""
        if not self._ended:
            self._ended = True
            self.log(f"=== SESSION END ({self.command_count} commands) ===")
            self.detach_loguru_sink()
            self._file_handler.close()
            self._py_logger.removeHandler(self._file_handler)
