"""Note hook protocol - the contract every partner note hook implements."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Dict, Protocol, runtime_checkable

if TYPE_CHECKING:
    from learning_pass.infrastructure.settings.policy_schema import FieldPolicy


@runtime_checkable
class NoteHookProtocol(Protocol):
    """Transforms a customer record after validation, before serialization."""

    @property
    def name(self) -> str:
        """Registry key."""
        ...

    def apply(self, customer: Dict[str, Any], partner_policy: FieldPolicy) -> None:
        """Mutate ``customer`` in place (notes, USER_CATEGORYn tags ...)."""
        ...


class FunctionNoteHook:
    """Adapts a plain ``func(customer, partner_policy)`` callable to the protocol."""

    def __init__(self, name: str, func: Callable[[Dict[str, Any], FieldPolicy], None]) -> None:
        self._name = name
        self._func = func

    @property
    def name(self) -> str:
        return self._name

    def apply(self, customer: Dict[str, Any], partner_policy: FieldPolicy) -> None:
        self._func(customer, partner_policy)
