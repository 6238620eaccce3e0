"""Built-in partner note hooks."""

from learning_pass.domain.notes.hooks.kic import KicNoteHook
from learning_pass.domain.notes.hooks.neos import NeosNoteHook

__all__ = ["KicNoteHook", "NeosNoteHook"]
