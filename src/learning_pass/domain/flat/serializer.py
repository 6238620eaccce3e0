"""
Symphony flat serializer.

Turns a validated customer into the line-oriented ``FORM=LDUSER`` document:

    *** DOCUMENT BOUNDARY ***
    FORM=LDUSER
    .USER_FIRST_NAME.   |aLewis
    ...
    .USER_ADDR1_BEGIN.
    .EMAIL.   |aexample@gmail.com
    .USER_ADDR1_END.

Inline tags are emitted as they are met. Block tags (address, extended
info) are buffered per call and written after the defaults, one
BEGIN/END pair per non-empty block.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from learning_pass.domain.customer.models import (
    CUSTOMER_FIELDS,
    EMPTY_CUSTOMER_ERROR,
    NEVER_EXPIRES,
    NormalizedCustomer,
    is_blank,
)
from learning_pass.domain.flat.tags import (
    BLOCK_ORDER,
    DATE_TAGS,
    DOCUMENT_BOUNDARY,
    FIELD_TAGS,
    FORM_TYPE,
    LIBRARY_FLAT_DEFAULTS,
    TAG_BLOCKS,
    Block,
    is_symphony_tag,
)
from learning_pass.utils.date_parser import to_ansi_date
from learning_pass.utils.logging import get_logger

logger = get_logger(__name__)

CustomerLike = Union[NormalizedCustomer, Mapping[str, Any], None]
DefaultsLike = Union[Mapping[str, Any], Iterable[Tuple[str, Any]], None]


def flat_line(tag: str, value: Any) -> str:
    return f".{tag}.   |a{value}"


@dataclass
class FlatRecord:
    """Lines of one flat document plus the errors met while building it."""

    lines: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    def stringify(self) -> str:
        if not self.lines:
            return ""
        return "\n".join(self.lines) + "\n"

    @property
    def ok(self) -> bool:
        return bool(self.lines) and not self.errors


def _default_pairs(defaults: DefaultsLike) -> List[Tuple[str, Any]]:
    if defaults is None:
        return []
    if isinstance(defaults, Mapping):
        return list(defaults.items())
    return list(defaults)


class FlatSerializer:
    """
    Build flat records.

    Args:
        library_defaults: ordered ``(tag, value)`` pairs or a mapping applied to
            every record, ``LIBRARY_FLAT_DEFAULTS`` when omitted
        tag_blocks: tag -> block routing, ``TAG_BLOCKS`` when omitted
    """

    def __init__(
        self,
        library_defaults: DefaultsLike = None,
        tag_blocks: Optional[Mapping[str, Block]] = None,
    ) -> None:
        pairs = _default_pairs(library_defaults if library_defaults is not None else LIBRARY_FLAT_DEFAULTS)
        self.library_defaults: Tuple[Tuple[str, Any], ...] = tuple(pairs)
        self.tag_blocks: Mapping[str, Block] = tag_blocks if tag_blocks is not None else TAG_BLOCKS

    def to_flat(self, customer: CustomerLike, partner_defaults: DefaultsLike = None) -> FlatRecord:
        record = self._as_record(customer)
        if not record:
            logger.warning("flat.empty_customer")
            return FlatRecord(errors=[EMPTY_CUSTOMER_ERROR])

        lines: List[str] = [DOCUMENT_BOUNDARY, FORM_TYPE]
        blocks: Dict[Block, Dict[str, str]] = {block: {} for block in BLOCK_ORDER}
        emitted = set()

        for key, value in record.items():
            tag = self._tag_for(key)
            if tag is None:
                continue
            text = self._render_value(tag, value)
            if not text:
                continue
            self._route(tag, text, lines, blocks)
            emitted.add(tag)

        for tag, value in self._merge_defaults(partner_defaults):
            if tag in emitted:
                continue
            text = self._render_value(tag, value)
            if text:
                self._route(tag, text, lines, blocks)

        for block in BLOCK_ORDER:
            entries = blocks[block]
            if not entries:
                continue
            lines.append(block.begin_line)
            lines.extend(flat_line(tag, text) for tag, text in entries.items())
            lines.append(block.end_line)

        return FlatRecord(lines=lines)

    # --- helpers ------------------------------------------------------------
    @staticmethod
    def _as_record(customer: CustomerLike) -> Dict[str, Any]:
        if customer is None:
            return {}
        if isinstance(customer, NormalizedCustomer):
            return {} if customer.is_empty() else customer.to_record()
        if not isinstance(customer, Mapping):
            return {}
        record = dict(customer)
        return {} if all(is_blank(value) for value in record.values()) else record

    @staticmethod
    def _tag_for(key: str) -> Optional[str]:
        tag = FIELD_TAGS.get(key)
        if tag is not None:
            return tag
        if is_symphony_tag(key):
            return key
        if key not in CUSTOMER_FIELDS:
            logger.warning("flat.unknown_field", field=key)
        return None

    @staticmethod
    def _render_value(tag: str, value: Any) -> str:
        if value is None:
            return ""
        if tag in DATE_TAGS:
            if isinstance(value, str) and value.strip().upper() == NEVER_EXPIRES:
                return NEVER_EXPIRES
            text = to_ansi_date(value)
            if not text and not is_blank(value):
                logger.warning("flat.invalid_date", tag=tag)
            return text
        if isinstance(value, date):
            return to_ansi_date(value)
        return str(value).strip()

    def _route(self, tag: str, text: str, lines: List[str], blocks: Dict[Block, Dict[str, str]]) -> None:
        block = self.tag_blocks.get(tag)
        if block is None:
            lines.append(flat_line(tag, text))
        else:
            blocks[block][tag] = text

    def _merge_defaults(self, partner_defaults: DefaultsLike) -> List[Tuple[str, Any]]:
        """Library defaults in order, partner values replacing or appending."""
        merged: Dict[str, Any] = dict(self.library_defaults)
        for tag, value in _default_pairs(partner_defaults):
            if not is_symphony_tag(tag):
                logger.warning("flat.unknown_default_tag", tag=tag)
                continue
            merged[tag] = value
        return list(merged.items())


def to_flat(
    customer: CustomerLike,
    partner_defaults: DefaultsLike = None,
    library_defaults: DefaultsLike = None,
) -> FlatRecord:
    """Serialize ``customer`` with the library defaults and optional partner overrides."""
    return FlatSerializer(library_defaults).to_flat(customer, partner_defaults)
