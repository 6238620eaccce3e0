"""KIC hook: marks the account as managed by branch staff."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict

if TYPE_CHECKING:
    from learning_pass.infrastructure.settings.policy_schema import FieldPolicy

KIC_NOTE = (
    "Do not alter any information on this account and refer any inquiries "
    "for account changes to the Branch Manager or Community Librarian"
)


class KicNoteHook:
    name = "kic"

    def apply(self, customer: Dict[str, Any], partner_policy: FieldPolicy) -> None:
        customer["notes"] = KIC_NOTE
