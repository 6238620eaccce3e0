"""Note hook registry.

NOTE_HOOK_REGISTRY maps a hook reference to an object implementing
NoteHookProtocol. Built-in hooks register on import; partner hooks given as
``"package.module:attribute"`` are imported once by ``resolve_note_hook`` when
partner policy is loaded, never while a customer is being converted.
"""

from __future__ import annotations

import importlib
from typing import Dict, Optional

from learning_pass.domain.notes.protocols import FunctionNoteHook, NoteHookProtocol

NOTE_HOOK_REGISTRY: Dict[str, NoteHookProtocol] = {}


class NoteHookError(LookupError):
    """Raised when a note hook reference cannot be resolved."""


def register_note_hook(name: str, hook: NoteHookProtocol) -> None:
    NOTE_HOOK_REGISTRY[name] = hook


def unregister_note_hook(name: str) -> None:
    NOTE_HOOK_REGISTRY.pop(name, None)


def get_note_hook(reference: Optional[str]) -> Optional[NoteHookProtocol]:
    if not reference:
        return None
    return NOTE_HOOK_REGISTRY.get(reference)


def resolve_note_hook(reference: str) -> NoteHookProtocol:
    """Return the hook for ``reference``, importing ``module:attribute`` references.

    Raises:
        NoteHookError: unknown name, failed import or object without ``apply``
    """
    hook = get_note_hook(reference)
    if hook is not None:
        return hook

    module_name, _, attribute = reference.partition(":")
    if not attribute:
        raise NoteHookError(
            f"Note hook '{reference}' not registered. Available: {sorted(NOTE_HOOK_REGISTRY)}"
        )
    try:
        target = getattr(importlib.import_module(module_name), attribute)
    except (ImportError, AttributeError) as exc:
        raise NoteHookError(f"Cannot import note hook '{reference}': {exc}") from exc

    if isinstance(target, type):
        target = target()
    if isinstance(target, NoteHookProtocol):
        hook = target
    elif callable(target):
        hook = FunctionNoteHook(reference, target)
    else:
        raise NoteHookError(f"Note hook '{reference}' is neither a hook nor a callable")

    register_note_hook(reference, hook)
    return hook


def _register_builtin_hooks() -> None:
    from learning_pass.domain.notes.hooks import KicNoteHook, NeosNoteHook

    register_note_hook("neos", NeosNoteHook())
    register_note_hook("kic", KicNoteHook())


_register_builtin_hooks()
