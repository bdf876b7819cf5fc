"""Main application entry point for VoiceNotes."""

import sys
import argparse
import logging
from pathlib import Path
from typing import Callable, Optional

from rich.console import Console
from rich.text import Text

from . import __version__
from .audio.capture import InputDeviceCheck
from .audio.permission import MicrophonePermission
from .config import VoiceNotesConfig
from .messages import MessageCatalog
from .models.entry import sort_newest_first
from .models.recognition import LanguageModel, RecognitionRequest
from .recognition.adapter import RecognitionAdapter
from .recognition.base import AbstractSpeechService
from .recognition.publisher import RecognitionPublisher
from .services.note_session import NoteSessionController
from .services.notifications import NotificationChannel
from .storage.entry_store import EntryStore
from .storage.preferences import Preferences
from .ui.notes_screen import NotesScreen, format_timestamp


logger = logging.getLogger(__name__)


def setup_logging(config: VoiceNotesConfig, level: str = "INFO") -> None:
    """Set up logging configuration from YAML config."""
    numeric_level = getattr(logging, str(level).upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")

    log_file_path = config.get('logging.file_path', 'data/logs/voicenotes.log')
    console_output = config.get('logging.console_output', True)

    # Create logs directory if it doesn't exist
    log_dir = Path(log_file_path).parent
    log_dir.mkdir(parents=True, exist_ok=True)

    handlers = []

    # File handler - always write to file
    file_handler = logging.FileHandler(log_file_path, encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
    )
    file_handler.setFormatter(file_formatter)
    handlers.append(file_handler)

    # Console handler - only if enabled in config
    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.WARNING)  # Only show warnings and above on console
        console_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        console_handler.setFormatter(console_formatter)
        handlers.append(console_handler)

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(numeric_level)
    for handler in handlers:
        root_logger.addHandler(handler)

    logger.info("=" * 50)
    logger.info("VoiceNotes application starting up")
    logger.info(f"Log file: {log_file_path}")
    logger.info(f"Log level set to: {level}")
    logger.info("=" * 50)


def build_request(config: VoiceNotesConfig) -> RecognitionRequest:
    return RecognitionRequest(
        language_model=LanguageModel(config.get('recognition.language_model', 'free_form')),
        language=config.get('recognition.language', 'ko-KR'),
        partial_results=bool(config.get('recognition.partial_results', False)),
    )


def build_speech_service(config: VoiceNotesConfig,
                         device_check: Callable[[], bool]) -> AbstractSpeechService:
    """Create and initialize the Google speech service from config."""
    from .recognition.google_backend import GoogleSpeechService

    service = GoogleSpeechService(
        credentials_path=config.get_google_credentials_path(),
        sample_rate=config.get('audio.sample_rate', 16000),
        chunk_size=config.get('audio.chunk_size', 1024),
        channels=config.get('audio.channels', 1),
        max_alternatives=config.get('recognition.max_alternatives', 5),
        enable_automatic_punctuation=config.get('google_cloud.enable_automatic_punctuation', True),
        speech_threshold=config.get('recognition.speech_threshold', 0.02),
        speech_timeout=config.get('recognition.speech_timeout_seconds', 5.0),
        end_silence=config.get('recognition.end_silence_seconds', 1.0),
        max_duration=config.get('recognition.max_utterance_seconds', 15.0),
        device_check=device_check,
    )
    if not service.initialize():
        logger.warning("Speech service failed to initialize; recognition will be unavailable")
    return service


class VoiceNotesApp:
    """Wires storage, recognition, controller and screen together."""

    def __init__(self, config: VoiceNotesConfig, speech_service: Optional[AbstractSpeechService] = None):
        self.config = config
        data_dir = config.get_data_directory()
        preferences_name = config.get('storage.preferences_name', 'voice_notes')

        request = build_request(config)
        self.messages = MessageCatalog(config.get('ui.locale', 'ko'))
        self.notifications = NotificationChannel(config.get('notifications.capacity', 64))
        self.device_check = InputDeviceCheck(ttl=config.get('audio.device_check_seconds', 5.0))
        self.store = EntryStore(Preferences(data_dir, preferences_name))
        self.permission = MicrophonePermission(Preferences(data_dir, "permissions"),
                                               device_check=self.device_check)

        self.speech_service = speech_service or build_speech_service(config, self.device_check)
        self.adapter = RecognitionAdapter(
            service=self.speech_service,
            request=request,
            publisher=RecognitionPublisher(),
        )
        self.controller = NoteSessionController(
            store=self.store,
            adapter=self.adapter,
            permission=self.permission,
            notifications=self.notifications,
            messages=self.messages,
        )

    def create_screen(self) -> NotesScreen:
        return NotesScreen(
            controller=self.controller,
            permission=self.permission,
            notifications=self.notifications,
            messages=self.messages,
            toast_seconds=self.config.get('ui.toast_seconds', 2.0),
        )


def print_entries(config: VoiceNotesConfig) -> None:
    """Print stored notes newest first without starting recognition."""
    data_dir = config.get_data_directory()
    store = EntryStore(Preferences(data_dir, config.get('storage.preferences_name', 'voice_notes')))
    console = Console()
    entries = sort_newest_first(store.load())
    if not entries:
        console.print(MessageCatalog(config.get('ui.locale', 'ko')).get("empty"), style="dim")
        return
    for entry in entries:
        console.print(Text.assemble((format_timestamp(entry.timestamp), "bold"), "  ", entry.text))


def main() -> None:
    """Main entry point for VoiceNotes application."""
    parser = argparse.ArgumentParser(
        description="VoiceNotes - record speech as timestamped text notes",
        epilog="Keys: Space/Enter=Start/stop recognition, q=Quit, Ctrl-Z=Pause"
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to configuration YAML file (default: looks for voicenotes.yaml)"
    )

    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set logging level (default: from config, else INFO)"
    )

    parser.add_argument(
        "--locale",
        type=str,
        help="Message locale, e.g. ko or en (overrides config)"
    )

    parser.add_argument(
        "--list",
        action="store_true",
        help="Print saved notes and exit"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"VoiceNotes v{__version__}"
    )

    args = parser.parse_args()

    try:
        config = VoiceNotesConfig(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"❌ Error: {e}")
        sys.exit(1)

    if args.locale:
        config.set('ui.locale', args.locale)

    try:
        setup_logging(config, args.log_level or config.get('logging.level', 'INFO'))

        if args.list:
            print_entries(config)
            return

        app = VoiceNotesApp(config)
    except (ValueError, OSError) as e:
        print(f"❌ Error: {e}")
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    try:
        app.create_screen().run()
    except KeyboardInterrupt:
        print("\n👋 Goodbye!")
    except Exception as e:
        print(f"❌ Error: {e}")
        logger.error(f"Application error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
