"""Application startup and configuration.

Command line entry point that orchestrates initialization: configuration
parsing, logging setup, context building and one voice session per
transcript.

Usage:
    voice-commands "Log 4 hours framing at Smith house"
    echo "Mark drywall installation complete" | voice-commands --type task
"""
from __future__ import annotations

import json
import sys
from typing import Iterable, List, Optional, TextIO

from loguru import logger

from app.use_cases import RecordCommandUseCase, VoiceCommandResult, VoiceCommandsContext
from config.service import ConfigurationService, ConfigurationServiceFactory
from core.exceptions import ConfigurationError
from logger.session_logger import SessionLogger
from session.controller import VoiceCommandController
from speech.source import TextSpeechSource


def configure_logging(level: str) -> None:
    """Send loguru output to stderr so stdout only carries results."""
    logger.remove()
    logger.add(sys.stderr, level=level, format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}")


def build_context(config_service: ConfigurationService) -> VoiceCommandsContext:
    return VoiceCommandsContext(
        time_entry=config_service.build_time_entry_context(),
        daily_log=config_service.build_daily_log_context(),
        task=config_service.build_task_context(),
    )


def read_transcripts(args: List[str], stream: TextIO) -> List[str]:
    """Transcripts from positional arguments, or one per line of ``stream``."""
    transcripts = []
    for arg in args:
        if arg.startswith("-"):
            logger.warning(f"Ignoring unknown option: {arg}")
            continue
        transcripts.append(arg)

    if not transcripts and not stream.isatty():
        transcripts = [line.strip() for line in stream if line.strip()]

    return transcripts


def interpret_transcripts(
    config_service: ConfigurationService,
    transcripts: Iterable[str],
    session_logger: Optional[SessionLogger] = None,
    out: Optional[TextIO] = None,
) -> List[VoiceCommandResult]:
    """Run one voice session per transcript and print each result as JSON.

    Args:
        config_service: Loaded configuration
        transcripts: Already transcribed utterances
        session_logger: Session log receiving each command, if enabled
        out: Stream receiving one JSON document per line (stdout by default)

    Returns:
        The VoiceCommandResults, in input order
    """
    out = out or sys.stdout
    results: List[VoiceCommandResult] = []
    recorder = RecordCommandUseCase(session_logger)

    def on_result(command: VoiceCommandResult) -> None:
        results.append(command)
        recorder.execute(command)
        out.write(json.dumps(command.to_dict(), default=str) + "\n")

    def on_error(message: str) -> None:
        logger.error(f"Voice session failed: {message}")

    source = TextSpeechSource(language=config_service.language)
    controller = VoiceCommandController(
        source,
        build_context(config_service),
        command_type=config_service.command_type,
        on_result=on_result,
        on_error=on_error,
        vocabulary=config_service.get_vocabulary(),
    )

    for transcript in transcripts:
        controller.start_listening()
        source.speak([transcript])

    return results


def run_application(argv: Optional[List[str]] = None) -> int:
    """Main application entry point.

    Orchestrates the startup sequence:
    1. Parse configuration from all sources (defaults, files, env, CLI)
    2. Configure logging and the session log
    3. Interpret every transcript given on the command line or stdin

    Returns:
        Process exit code: 0 when every transcript was understood
    """
    try:
        config_service, unknown_args = ConfigurationServiceFactory.create_from_args(
            sys.argv[1:] if argv is None else argv
        )
    except ConfigurationError as e:
        configure_logging("INFO")
        logger.error(f"Invalid configuration: {e}")
        return 2

    configure_logging(config_service.log_level)

    transcripts = read_transcripts(unknown_args, sys.stdin)
    if not transcripts:
        logger.error("No transcript given. Pass it as an argument or on stdin.")
        return 2

    session_logger = None
    if config_service.session_log_enabled:
        session_logger = SessionLogger.create(config_service.session_log_dir, level=config_service.log_level)
        session_logger.log_kv("Configuration", config_service.to_dict())

    try:
        results = interpret_transcripts(config_service, transcripts, session_logger)
    finally:
        if session_logger is not None:
            session_logger.log_end()

    failed = sum(1 for result in results if not result.success)
    if failed:
        logger.warning(f"{failed} of {len(results)} transcripts were not understood")
    return 0 if results and not failed else 1
