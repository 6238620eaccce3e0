"""Partner note hooks: registry, protocol and the hook runner."""

from learning_pass.domain.notes.protocols import FunctionNoteHook, NoteHookProtocol
from learning_pass.domain.notes.registry import (
    NOTE_HOOK_REGISTRY,
    NoteHookError,
    get_note_hook,
    register_note_hook,
    resolve_note_hook,
    unregister_note_hook,
)
from learning_pass.domain.notes.service import apply_note_hook

__all__ = [
    "NOTE_HOOK_REGISTRY",
    "FunctionNoteHook",
    "NoteHookError",
    "NoteHookProtocol",
    "apply_note_hook",
    "get_note_hook",
    "register_note_hook",
    "resolve_note_hook",
    "unregister_note_hook",
]
