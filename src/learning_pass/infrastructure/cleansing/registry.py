"""
Field normalizer registry and discovery.

Normalizers are registered once with the ``@rule`` decorator and looked up by
name, so the customer validator can run per-field rule chains declared in
``settings/field_rules.yml`` instead of hard-wiring function calls.

A chain entry is either a rule name or ``{"name": ..., "kwargs": {...}}``:

    fields:
      city:
        - trim_whitespace
        - name: split_comma_string
          kwargs: {first: true}
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from pathlib import Path
from threading import RLock
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import yaml

logger = logging.getLogger(__name__)

FIELD_RULES_PATH = Path(__file__).resolve().parent / "settings" / "field_rules.yml"

RuleSpec = Union[str, Dict[str, Any]]


class RuleCategory(Enum):
    """Normalizer categories."""

    STRING = "string"
    NAME = "name"
    ADDRESS = "address"
    CONTACT = "contact"
    CREDENTIAL = "credential"
    DATE = "date"


@lru_cache(maxsize=None)
def _parameters(func: Callable[..., Any]) -> Tuple[frozenset, bool]:
    """Keyword names ``func`` accepts, and whether it takes ``**kwargs``."""
    try:
        params = inspect.signature(func).parameters.values()
    except (TypeError, ValueError):
        return frozenset(), False
    names = frozenset(p.name for p in params if p.kind is not inspect.Parameter.VAR_KEYWORD)
    return names, any(p.kind is inspect.Parameter.VAR_KEYWORD for p in params)


@dataclass(frozen=True)
class CleansingRule:
    """A registered normalizer and its catalogue entry."""

    name: str
    category: RuleCategory
    func: Callable[..., Any]
    description: str

    def __post_init__(self) -> None:
        if not callable(self.func):
            raise ValueError(f"Normalizer {self.name} is not callable")

    def __call__(self, value: Any, **kwargs: Any) -> Any:
        """Run the normalizer, dropping keyword arguments it does not declare."""
        names, takes_any = _parameters(self.func)
        if not takes_any:
            kwargs = {key: arg for key, arg in kwargs.items() if key in names}
        return self.func(value, **kwargs)


def parse_rule_spec(spec: Any, label: str = "chain") -> Tuple[str, Dict[str, Any]]:
    """Split a chain entry into ``(rule name, kwargs)``."""
    if isinstance(spec, str):
        return spec, {}
    if isinstance(spec, Mapping):
        name = spec.get("name")
        if not name:
            raise ValueError(f"Rule entry in '{label}' missing 'name'")
        return name, dict(spec.get("kwargs") or {})
    raise ValueError(f"Rule entry in '{label}' must be a name or a mapping, got {type(spec).__name__}")


@dataclass
class FieldRuleConfig:
    """Parsed ``field_rules.yml``."""

    fields: Dict[str, List[RuleSpec]] = field(default_factory=dict)
    default_rules: List[RuleSpec] = field(default_factory=list)
    mtime: Optional[float] = None

    def chain_for(self, name: str) -> List[RuleSpec]:
        if name in self.fields:
            return list(self.fields[name])
        return list(self.default_rules)


class CleansingRegistry:
    """
    Normalizer catalogue plus the field -> rule chain configuration.

    The field configuration is read lazily and re-read when the YAML file's
    modification time changes.
    """

    def __init__(self, field_rules_path: Path = FIELD_RULES_PATH) -> None:
        self._rules: Dict[str, CleansingRule] = {}
        self._field_rules_path = field_rules_path
        self._field_config: Optional[FieldRuleConfig] = None
        self._lock = RLock()

    # --- Catalogue ----------------------------------------------------------------
    def register(self, rule: CleansingRule) -> None:
        if rule.name in self._rules:
            logger.warning("Replacing normalizer %s", rule.name)
        self._rules[rule.name] = rule
        logger.debug("Registered normalizer %s (%s)", rule.name, rule.category.value)

    def get_rule(self, name: str) -> Optional[CleansingRule]:
        return self._rules.get(name)

    def find_by_category(self, category: RuleCategory) -> List[CleansingRule]:
        return [entry for entry in self._rules.values() if entry.category is category]

    def list_all_rules(self) -> List[CleansingRule]:
        return list(self._rules.values())

    # --- Execution ----------------------------------------------------------------
    def apply_rule(self, value: Any, rule_name: str, **kwargs: Any) -> Any:
        """Run one normalizer by name.

        Raises:
            ValueError: no normalizer is registered under ``rule_name``
        """
        entry = self._rules.get(rule_name)
        if entry is None:
            raise ValueError(f"Normalizer '{rule_name}' not registered. Available: {sorted(self._rules)}")
        return entry(value, **kwargs)

    def apply_rules(self, value: Any, rule_specs: Sequence[RuleSpec], **common_kwargs: Any) -> Any:
        """
        Run a chain of normalizers, feeding each result into the next.

        ``common_kwargs`` are offered to every rule and win over per-entry
        kwargs; each rule only receives the ones it declares.
        """
        for spec in rule_specs or ():
            name, kwargs = parse_rule_spec(spec)
            value = self.apply_rule(value, name, **{**kwargs, **common_kwargs})
        return value

    # --- Field chains -------------------------------------------------------------
    def get_field_rules(self, field_name: str) -> List[RuleSpec]:
        """Rule chain for a customer field, ``default_rules`` when unlisted."""
        return self._current_field_config().chain_for(field_name)

    def reload_field_config(self) -> None:
        with self._lock:
            self._field_config = None
        self._current_field_config()

    def _current_field_config(self) -> FieldRuleConfig:
        with self._lock:
            path = self._field_rules_path
            mtime = path.stat().st_mtime if path.exists() else None
            cached = self._field_config
            if cached is not None and cached.mtime == mtime:
                return cached
            self._field_config = self._read_field_config(path, mtime)
            return self._field_config

    def _read_field_config(self, path: Path, mtime: Optional[float]) -> FieldRuleConfig:
        if mtime is None:
            logger.debug("No field rule file at %s", path)
            return FieldRuleConfig()

        with path.open("r", encoding="utf-8") as handle:
            parsed = yaml.safe_load(handle) or {}

        fields = parsed.get("fields") or {}
        if not isinstance(fields, dict):
            raise ValueError(f"'fields' in {path.name} must be a mapping")
        config = FieldRuleConfig(
            fields={name: list(chain or []) for name, chain in fields.items()},
            default_rules=list(parsed.get("default_rules") or []),
            mtime=mtime,
        )

        for label, chain in [*config.fields.items(), ("default_rules", config.default_rules)]:
            for spec in chain:
                name, _ = parse_rule_spec(spec, label)
                if name not in self._rules:
                    raise ValueError(f"Rule '{name}' used by '{label}' is not registered")
        return config


registry = CleansingRegistry()


def rule(name: str, category: RuleCategory, description: str) -> Callable[[Callable], Callable]:
    """
    Register a function as a named normalizer.

    Example:
        @rule(
            name="normalize_email",
            category=RuleCategory.CONTACT,
            description="Accept local@domain.tld addresses",
        )
        def normalize_email(value):
            ...
    """

    def decorator(func: Callable) -> Callable:
        entry = CleansingRule(name=name, category=category, func=func, description=description)
        registry.register(entry)
        func._cleansing_rule = entry  # type: ignore[attr-defined]
        return func

    return decorator


def get_cleansing_registry() -> CleansingRegistry:
    return registry
