"""
Action Executor - runs the action attached to an activated result.

Dispatch
────────
    OpenPath         | os.startfile / open / xdg-open
    OpenUrl          | webbrowser.open()
    CopyText         | pyperclip.copy()
    StartCompletion  | SessionManager.start() (returns before the answer)

Failures come back as `ActionOutcome(success=False, error=<message>)`;
nothing here raises to the caller.
"""
import logging
import os
import subprocess
import sys
import webbrowser
from dataclasses import dataclass
from typing import Optional

import pyperclip

from lumina.ai.session import SessionManager
from lumina.exceptions import ConfigurationError
from lumina.models import CopyText, OpenPath, OpenUrl, QueryResult, StartCompletion

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActionOutcome:
    success: bool
    message: str = ""
    error: Optional[str] = None


class ActionExecutor:

    def __init__(self, sessions: SessionManager) -> None:
        self.sessions = sessions

    async def execute(self, result: QueryResult) -> ActionOutcome:
        action = result.action
        try:
            match action:
                case OpenPath(path=path):
                    self._shell_open(path)
                    return ActionOutcome(True, "Opened")
                case OpenUrl(url=url):
                    webbrowser.open(url)
                    return ActionOutcome(True, "Opened")
                case CopyText(text=text):
                    pyperclip.copy(text)
                    return ActionOutcome(True, "Copied to clipboard")
                case StartCompletion(prompt=prompt):
                    ack = self.sessions.start(prompt)
                    return ActionOutcome(True, ack.message)
                case _:
                    raise TypeError(f"Unknown action: {action!r}")

        except ConfigurationError as e:
            logger.warning(f"⚠️ Cannot start AI response: {e}")
            return ActionOutcome(False, error=str(e))
        except Exception as e:
            logger.error(f"❌ Failed to run '{result.id}': {e}")
            return ActionOutcome(False, error=str(e))

    @staticmethod
    def _shell_open(path: str) -> None:
        """Open *path* the way the desktop file manager would."""
        if sys.platform == "win32":
            os.startfile(path)
        elif sys.platform == "darwin":
            subprocess.Popen(["open", path])
        else:
            subprocess.Popen(["xdg-open", path])
