"""Rich-based console output and the interactive chat prompt."""

from haxai.ui.console import (
    ChatPrompt,
    Console,
    console,
)

__all__ = [
    "Console",
    "console",
    "ChatPrompt",
]
