"""Single-screen terminal UI for voice notes."""

import os
import time
import signal
import logging
import threading
from collections import deque
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from pubsub import pub
from rich.console import Console, Group
from rich.panel import Panel
from rich.prompt import Confirm
from rich.table import Table
from rich.text import Text
from rich.align import Align

from ..audio.permission import MicrophonePermission
from ..messages import MessageCatalog
from ..models.entry import UiState
from ..services.note_session import NoteSessionController
from ..services.notifications import NotificationChannel
from .keyboard_input import KeyboardInputHandler

logger = logging.getLogger(__name__)

TOGGLE_KEYS = (" ", "\n", "\r")
QUIT_KEYS = ("q",)


def format_timestamp(timestamp_ms: int) -> str:
    """Local wall-clock time of an entry, e.g. 2024-05-01 09:30:00."""
    return datetime.fromtimestamp(timestamp_ms / 1000).strftime("%Y-%m-%d %H:%M:%S")


def render_screen(state: UiState, messages: MessageCatalog, toasts: List[str]) -> Group:
    """Build the renderable for one frame of the screen."""
    title = Text(messages.get("title"), style="bold")

    if state.is_listening:
        button = Text(f"⏹  {messages.get('stop_label')}", style="bold red")
    else:
        button = Text(f"🎙  {messages.get('start_label')}", style="bold green")

    if state.entries:
        notes = Table(show_header=False, show_lines=True, expand=True, box=None, padding=(0, 1))
        notes.add_column("note")
        for entry in state.entries:
            notes.add_row(Panel(
                Group(Text(format_timestamp(entry.timestamp), style="bold dim"), Text(entry.text)),
                expand=True,
            ))
        body = notes
    else:
        body = Align.center(Text(messages.get("empty"), style="dim"))

    parts = [Align.center(title), Align.center(button), body]
    for toast in toasts:
        parts.append(Align.center(Text(toast, style="reverse")))
    parts.append(Text(messages.get("controls"), style="dim"))
    return Group(*parts)


class NotesScreen:
    """Renders the controller state and forwards the start/stop intent.

    Recording needs microphone permission; the screen requests it before
    starting and shows the denial message when refused. Terminal job control
    maps to the app lifecycle: Ctrl-Z pauses, ``fg`` resumes.
    """

    def __init__(self,
                 controller: NoteSessionController,
                 permission: MicrophonePermission,
                 notifications: NotificationChannel,
                 messages: MessageCatalog,
                 console: Optional[Console] = None,
                 toast_seconds: float = 2.0,
                 prompt: Optional[Callable[[], bool]] = None):
        self.controller = controller
        self.permission = permission
        self.notifications = notifications
        self.messages = messages
        self.console = console or Console()
        self.toast_seconds = toast_seconds
        self.prompt = prompt or self._prompt_permission

        self.running = False
        self._dirty = True
        self._toasts: List[Tuple[str, float]] = []
        self._lifecycle: "deque[str]" = deque()
        self._input: Optional[KeyboardInputHandler] = None
        self._input_lock = threading.Lock()
        self._prompting = False

    def _prompt_permission(self) -> bool:
        return Confirm.ask(self.messages.get("permission_prompt"), console=self.console, default=True)

    def _on_state_changed(self, state: UiState) -> None:
        self._dirty = True

    def show_toast(self, message: str) -> None:
        self._toasts.append((message, time.monotonic() + self.toast_seconds))
        self._dirty = True

    def ensure_audio_permission(self) -> None:
        """Request microphone permission, then start listening if granted."""
        self._prompting = True
        try:
            granted = self.permission.request(self.prompt)
        finally:
            self._prompting = False
            self._dirty = True
        if granted:
            self.controller.start_listening()
        else:
            self.notifications.send(self.messages.get("permission_denied"))

    def handle_key(self, key: str) -> bool:
        """Handle one keypress. Returns False when the app should quit."""
        if key in QUIT_KEYS:
            self.running = False
            return False
        if key in TOGGLE_KEYS:
            with self._input_lock:
                if self.controller.is_listening:
                    self.controller.stop_listening()
                else:
                    self.ensure_audio_permission()
        return True

    def pause(self) -> None:
        self._lifecycle.append("pause")

    def resume(self) -> None:
        self._lifecycle.append("resume")

    def _on_sigtstp(self, signum, frame) -> None:
        self.pause()

    def _on_sigcont(self, signum, frame) -> None:
        self.resume()

    def install_signal_handlers(self) -> None:
        if not hasattr(signal, "SIGTSTP") or threading.current_thread() is not threading.main_thread():
            return
        signal.signal(signal.SIGTSTP, self._on_sigtstp)
        signal.signal(signal.SIGCONT, self._on_sigcont)

    def process_lifecycle(self) -> None:
        """Apply queued pause/resume transitions on the UI thread."""
        while self._lifecycle:
            transition = self._lifecycle.popleft()
            if transition == "pause":
                self.controller.on_pause()
                if hasattr(signal, "SIGTSTP") and threading.current_thread() is threading.main_thread():
                    # Suspend for real now that recognition is stopped
                    signal.signal(signal.SIGTSTP, signal.SIG_DFL)
                    os.kill(os.getpid(), signal.SIGTSTP)
            elif transition == "resume":
                self.install_signal_handlers()
                self.controller.on_resume()
                self._dirty = True

    def collect_toasts(self) -> List[str]:
        """Pull new notifications and drop expired ones. Returns visible toasts."""
        for message in self.notifications.drain():
            self.show_toast(message)
        now = time.monotonic()
        visible = [(message, expires) for message, expires in self._toasts if expires > now]
        if len(visible) != len(self._toasts):
            self._dirty = True
        self._toasts = visible
        return [message for message, _ in visible]

    def show(self, toasts: List[str]) -> None:
        self.console.clear()
        self.console.print(render_screen(self.controller.state, self.messages, toasts))
        self._dirty = False

    def run(self) -> None:
        """Run the screen until the user quits."""
        self.running = True
        pub.subscribe(self._on_state_changed, self.controller.state_topic)
        self.install_signal_handlers()
        self._input = KeyboardInputHandler(self.handle_key)

        try:
            # Like the mobile app, ask for the microphone and start right away
            self.ensure_audio_permission()
            self._input.start()
            while self.running:
                self.process_lifecycle()
                toasts = self.collect_toasts()
                if self._dirty and not self._prompting:
                    self.show(toasts)
                time.sleep(0.05)
        finally:
            self._input.stop()
            try:
                pub.unsubscribe(self._on_state_changed, self.controller.state_topic)
            except Exception as e:
                logger.warning(f"Error during unsubscribe: {e}")
            self.controller.close()
            logger.info("NotesScreen closed")
