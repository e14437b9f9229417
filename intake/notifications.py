"""User-facing notifications for the intake flow.

The host application owns presentation (toasts, alert dialogs, a console).
The intake core only talks to a ``Notifier`` passed in by the host:

    error / success / info   -- one-shot messages
    processing / close       -- a blocking "please wait" indicator
    confirm                  -- yes/no gate before an irreversible action

``Notifier`` itself logs every message and keeps them in ``recent``; it is
the default when no presentation layer is attached. ``ConsoleNotifier``
prints to a terminal and reads confirmations from stdin.
"""

import logging
import sys
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    """A message shown to the user."""

    title: str
    message: str
    severity: str = "info"


class Notifier:
    """Logging notifier; base class for presentation-specific notifiers.

    Args:
        auto_confirm: Answer returned by ``confirm``. Defaults to False so a
                      headless caller never submits without saying so.
    """

    def __init__(self, auto_confirm: bool = False):
        self.auto_confirm = auto_confirm
        self.recent: list[Notification] = []
        self.processing_active = False

    def notify(self, note: Notification) -> None:
        self.recent.append(note)
        level = logging.ERROR if note.severity == "error" else logging.INFO
        logger.log(level, "%s: %s", note.title, note.message.replace("\n", " "))

    def error(self, title: str, message: str) -> None:
        self.notify(Notification(title, message, "error"))

    def success(self, title: str, message: str) -> None:
        self.notify(Notification(title, message, "success"))

    def info(self, title: str, message: str) -> None:
        self.notify(Notification(title, message, "info"))

    def processing(self, title: str, message: str) -> None:
        self.processing_active = True
        logger.debug("%s: %s", title, message)

    def close(self) -> None:
        self.processing_active = False

    def confirm(self, title: str, message: str,
                confirm_label: str = "OK", cancel_label: str = "Cancel") -> bool:
        logger.info("Confirmation requested (%s), auto answer: %s", title, self.auto_confirm)
        return self.auto_confirm

    @property
    def last(self) -> Notification | None:
        return self.recent[-1] if self.recent else None


class ConsoleNotifier(Notifier):
    """Terminal presentation for the command-line front end.

    Args:
        assume_yes: Skip the interactive prompt and confirm automatically.
        stream: Output stream (defaults to stdout).
    """

    def __init__(self, assume_yes: bool = False, stream=None):
        super().__init__(auto_confirm=assume_yes)
        self._stream = stream or sys.stdout

    def notify(self, note: Notification) -> None:
        super().notify(note)
        tag = {"error": "[ERROR]", "success": "[OK]"}.get(note.severity, "[INFO]")
        print(f"\n{tag} {note.title}\n{note.message}", file=self._stream)

    def processing(self, title: str, message: str) -> None:
        super().processing(title, message)
        print(f"\n{title}... {message}", file=self._stream)

    def confirm(self, title: str, message: str,
                confirm_label: str = "OK", cancel_label: str = "Cancel") -> bool:
        print(f"\n{title}\n{message}", file=self._stream)
        if self.auto_confirm:
            print(f"-> {confirm_label} (--yes)", file=self._stream)
            return True
        try:
            answer = input(f"{confirm_label}? [y/N] ({cancel_label} = N): ")
        except EOFError:
            logger.warning("No input available for confirmation, treating as %s", cancel_label)
            return False
        return answer.strip().lower() in ("y", "yes")
