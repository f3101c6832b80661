"""
Query result model and the closed set of actions a result can carry.
"""
import math
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# ─────────────────────────── Actions ───────────────────────────

class OpenPath(_Frozen):
    """Open a file, directory or application manifest with the OS shell."""
    kind: Literal["open_path"] = "open_path"
    path: str
    application: bool = False


class OpenUrl(_Frozen):
    kind: Literal["open_url"] = "open_url"
    url: str


class CopyText(_Frozen):
    kind: Literal["copy_text"] = "copy_text"
    text: str


class StartCompletion(_Frozen):
    """Start a streamed AI answer for `prompt`."""
    kind: Literal["start_completion"] = "start_completion"
    prompt: str


Action = Annotated[
    Union[OpenPath, OpenUrl, CopyText, StartCompletion],
    Field(discriminator="kind"),
]


# ─────────────────────────── Result ───────────────────────────

class QueryResult(_Frozen):
    """One ranked candidate shown to the user."""
    id: str
    title: str
    description: str = ""
    icon: Optional[str] = None
    action: Action
    score: float = 0.0

    @property
    def rank(self) -> float:
        """Score used for ordering; non-finite scores rank last."""
        if math.isfinite(self.score):
            return self.score
        return -math.inf
