"""Unit tests for the notes screen."""

import io
import signal
import pytest
from datetime import datetime
from unittest.mock import Mock, patch

from rich.console import Console

from voicenotes.models.entry import UiState, VoiceEntry
from voicenotes.ui.notes_screen import NotesScreen, format_timestamp, render_screen


def render_text(renderable, width=80):
    console = Console(record=True, width=width, file=io.StringIO())
    console.print(renderable)
    return console.export_text()


@pytest.fixture
def controller():
    mock = Mock()
    mock.is_listening = False
    mock.state = UiState()
    mock.state_topic = "notes.state"
    return mock


@pytest.fixture
def screen(controller, notifications, messages):
    permission = Mock()
    permission.request.return_value = True
    return NotesScreen(
        controller=controller,
        permission=permission,
        notifications=notifications,
        messages=messages,
        console=Console(record=True, width=80, file=io.StringIO()),
    )


@pytest.mark.unit
class TestRenderScreen:

    def test_format_timestamp(self):
        expected = datetime.fromtimestamp(1_700_000_000).strftime("%Y-%m-%d %H:%M:%S")

        assert format_timestamp(1_700_000_000_000) == expected

    def test_empty_state(self, messages):
        text = render_text(render_screen(UiState(), messages, []))

        assert "Voice Notes" in text
        assert "Start recognition" in text
        assert "No voice notes saved yet." in text

    def test_listening_label(self, messages):
        text = render_text(render_screen(UiState(is_listening=True), messages, []))

        assert "Stop recognition" in text
        assert "Start recognition" not in text

    def test_entries_in_order_with_timestamps(self, messages):
        state = UiState(entries=(VoiceEntry("newer note", 2_000_000), VoiceEntry("older note", 1_000_000)))

        text = render_text(render_screen(state, messages, []))

        assert text.index("newer note") < text.index("older note")
        assert format_timestamp(2_000_000) in text
        assert "No voice notes saved yet." not in text

    def test_markup_in_text_is_literal(self, messages):
        state = UiState(entries=(VoiceEntry("[bold]not markup[/bold]", 1000),))

        assert "[bold]not markup[/bold]" in render_text(render_screen(state, messages, []))

    def test_toasts_rendered(self, messages):
        text = render_text(render_screen(UiState(), messages, ["Please speak"]))

        assert "Please speak" in text

    def test_korean_locale(self):
        from voicenotes.messages import MessageCatalog

        text = render_text(render_screen(UiState(), MessageCatalog("ko"), []))

        assert "인식 시작" in text


@pytest.mark.unit
class TestNotesScreenInput:

    def test_toggle_starts_after_permission(self, screen, controller):
        assert screen.handle_key(" ") is True

        screen.permission.request.assert_called_once_with(screen.prompt)
        controller.start_listening.assert_called_once()

    @pytest.mark.parametrize("key", ["\n", "\r"])
    def test_enter_also_toggles(self, screen, controller, key):
        screen.handle_key(key)

        controller.start_listening.assert_called_once()

    def test_toggle_stops_when_listening(self, screen, controller):
        controller.is_listening = True

        screen.handle_key(" ")

        controller.stop_listening.assert_called_once()
        screen.permission.request.assert_not_called()

    def test_permission_denied_shows_message(self, screen, controller, notifications, messages):
        screen.permission.request.return_value = False

        screen.handle_key(" ")

        controller.start_listening.assert_not_called()
        assert notifications.drain() == [messages.get("permission_denied")]

    def test_quit_key(self, screen):
        screen.running = True

        assert screen.handle_key("q") is False
        assert screen.running is False

    def test_other_keys_ignored(self, screen, controller):
        assert screen.handle_key("x") is True

        controller.start_listening.assert_not_called()
        controller.stop_listening.assert_not_called()


@pytest.mark.unit
class TestNotesScreenLoop:

    def test_collect_toasts(self, screen, notifications):
        notifications.send("Please speak")

        assert screen.collect_toasts() == ["Please speak"]
        assert screen.collect_toasts() == ["Please speak"]

    def test_toasts_expire(self, screen, notifications):
        screen.toast_seconds = -1.0
        notifications.send("gone")

        assert screen.collect_toasts() == []

    def test_state_change_marks_dirty(self, screen):
        screen.show([])
        assert screen._dirty is False

        screen._on_state_changed(UiState(is_listening=True))

        assert screen._dirty is True

    def test_show_renders_controller_state(self, screen, controller):
        controller.state = UiState(entries=(VoiceEntry("hello", 1000),))

        screen.show(["Please speak"])

        output = screen.console.export_text()
        assert "hello" in output
        assert "Please speak" in output

    def test_pause_then_resume(self, screen, controller):
        with patch("voicenotes.ui.notes_screen.os.kill") as mock_kill, \
                patch("voicenotes.ui.notes_screen.signal.signal") as mock_signal:
            screen.pause()
            screen.process_lifecycle()

            controller.on_pause.assert_called_once()
            mock_kill.assert_called_once()
            assert mock_kill.call_args.args[1] == signal.SIGTSTP
            mock_signal.assert_any_call(signal.SIGTSTP, signal.SIG_DFL)

            screen.resume()
            screen.process_lifecycle()

            controller.on_resume.assert_called_once()
            mock_signal.assert_any_call(signal.SIGCONT, screen._on_sigcont)

    def test_signal_handlers_queue_transitions(self, screen, controller):
        screen._on_sigcont(signal.SIGCONT, None)

        controller.on_resume.assert_not_called()
        with patch("voicenotes.ui.notes_screen.signal.signal"):
            screen.process_lifecycle()
        controller.on_resume.assert_called_once()

    def test_run_closes_controller(self, screen, controller):
        controller.start_listening.side_effect = lambda: setattr(screen, "running", False)

        with patch("voicenotes.ui.notes_screen.KeyboardInputHandler") as mock_input_class, \
                patch("voicenotes.ui.notes_screen.signal.signal"):
            screen.run()

        mock_input_class.return_value.stop.assert_called_once()
        controller.close.assert_called_once()
