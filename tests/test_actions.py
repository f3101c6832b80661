import unittest
from unittest.mock import MagicMock, patch

from lumina.actions import ActionExecutor
from lumina.ai.session import CompletionAck
from lumina.exceptions import ConfigurationError
from lumina.models import CopyText, OpenPath, OpenUrl, QueryResult, StartCompletion


def _result(action) -> QueryResult:
    return QueryResult(id="r", title="r", action=action, score=0.5)


class TestActionExecutor(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.sessions = MagicMock()
        self.executor = ActionExecutor(self.sessions)

    async def test_copy_text(self):
        with patch("lumina.actions.pyperclip.copy") as copy:
            outcome = await self.executor.execute(_result(CopyText(text="10")))

        copy.assert_called_once_with("10")
        self.assertTrue(outcome.success)
        self.assertEqual(outcome.message, "Copied to clipboard")

    async def test_clipboard_failure(self):
        with patch("lumina.actions.pyperclip.copy", side_effect=RuntimeError("no clipboard")):
            outcome = await self.executor.execute(_result(CopyText(text="10")))

        self.assertFalse(outcome.success)
        self.assertEqual(outcome.error, "no clipboard")

    async def test_open_path(self):
        with patch.object(ActionExecutor, "_shell_open") as shell_open:
            outcome = await self.executor.execute(
                _result(OpenPath(path="/usr/share/applications/firefox.desktop", application=True))
            )

        shell_open.assert_called_once_with("/usr/share/applications/firefox.desktop")
        self.assertEqual(outcome.message, "Opened")

    async def test_open_path_uses_xdg_open_on_linux(self):
        with patch("lumina.actions.sys.platform", "linux"), \
                patch("lumina.actions.subprocess.Popen") as popen:
            ActionExecutor._shell_open("/home/user/notes.txt")

        popen.assert_called_once_with(["xdg-open", "/home/user/notes.txt"])

    async def test_open_url(self):
        with patch("lumina.actions.webbrowser.open") as open_url:
            outcome = await self.executor.execute(_result(OpenUrl(url="https://example.com")))

        open_url.assert_called_once_with("https://example.com")
        self.assertTrue(outcome.success)

    async def test_start_completion_returns_ack(self):
        self.sessions.start.return_value = CompletionAck(sequence=3)

        outcome = await self.executor.execute(_result(StartCompletion(prompt="why")))

        self.sessions.start.assert_called_once_with("why")
        self.assertTrue(outcome.success)
        self.assertEqual(outcome.message, "AI response started")

    async def test_start_completion_without_key(self):
        self.sessions.start.side_effect = ConfigurationError("API key not configured for openrouter")

        outcome = await self.executor.execute(_result(StartCompletion(prompt="why")))

        self.assertFalse(outcome.success)
        self.assertEqual(outcome.error, "API key not configured for openrouter")


if __name__ == "__main__":
    unittest.main()
