"""Runs the partner's note hook against a validated customer."""

from __future__ import annotations

from learning_pass.domain.customer.models import NormalizedCustomer
from learning_pass.domain.notes.registry import get_note_hook
from learning_pass.infrastructure.settings.policy_schema import PolicyLike, coerce_policy
from learning_pass.utils.logging import get_logger

logger = get_logger(__name__)


def apply_note_hook(customer: NormalizedCustomer, partner_policy: PolicyLike) -> NormalizedCustomer:
    """
    Return ``customer`` as transformed by the partner's note hook.

    The hook works on a copy of the record; a partner without a hook, an
    unregistered reference or a hook that raises leaves the customer unchanged.
    """
    policy = coerce_policy(partner_policy)
    reference = policy.notes.hook if policy.notes else None
    if not reference:
        return customer

    hook = get_note_hook(reference)
    if hook is None:
        logger.warning("notes.hook_not_registered", hook=reference, partner=policy.name)
        return customer

    record = customer.to_record()
    try:
        hook.apply(record, policy)
    except Exception as exc:
        logger.warning(
            "notes.hook_failed",
            hook=reference,
            partner=policy.name,
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return customer

    logger.debug("notes.hook_applied", hook=reference, partner=policy.name)
    return NormalizedCustomer.from_record(record)
