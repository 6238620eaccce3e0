"""
Policy file loader for Learning Pass.

The library policy lives in one YAML file (``config/library.yml``); every
partner has its own file under ``config/partners/``, keyed by file stem. Files
are read with ``yaml.safe_load`` and validated against ``FieldPolicy``. Note
hook references are resolved here, once, when a partner policy is loaded.

Malformed configuration raises ``PolicyConfigError``; this is the only place
in the package that raises for bad input.
"""

import logging
from pathlib import Path
from typing import Dict, Optional, Union

import yaml
from pydantic import ValidationError

from learning_pass.domain.notes.registry import NoteHookError, resolve_note_hook
from learning_pass.infrastructure.settings.policy_schema import FieldPolicy

logger = logging.getLogger(__name__)

POLICY_SUFFIXES = (".yml", ".yaml")

PathLike = Union[str, Path]


class PolicyConfigError(Exception):
    """Raised when a policy file cannot be loaded or is invalid."""

    pass


def load_policy_file(path: PathLike, name: Optional[str] = None) -> FieldPolicy:
    """
    Load and validate one policy file.

    Args:
        path: YAML file
        name: policy name used when the file does not set ``name``

    Returns:
        Validated FieldPolicy

    Raises:
        PolicyConfigError: missing file, invalid YAML, schema violation or an
            unresolvable note hook
    """
    config_path = Path(path)
    if not config_path.is_file():
        raise PolicyConfigError(f"Policy file not found: {path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise PolicyConfigError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise PolicyConfigError(f"Failed to read {path}: {e}") from e

    if not isinstance(data, dict):
        raise PolicyConfigError(f"Policy file {path} must contain a mapping")
    if name and not data.get("name"):
        data["name"] = name

    try:
        policy = FieldPolicy.model_validate(data)
    except ValidationError as e:
        raise PolicyConfigError(f"Invalid policy in {path}: {e}") from e

    if policy.notes and policy.notes.hook:
        try:
            resolve_note_hook(policy.notes.hook)
        except NoteHookError as e:
            raise PolicyConfigError(f"Policy {path}: {e}") from e

    logger.debug("Loaded policy %s from %s", policy.name, config_path)
    return policy


def load_library_policy(path: PathLike) -> FieldPolicy:
    """Load the library-wide policy; it must name the library."""
    policy = load_policy_file(path)
    if not policy.name:
        raise PolicyConfigError(f"Library policy {path} must set 'name'")
    if not policy.required:
        logger.warning("Library policy %s marks no fields as required", path)
    return policy


def load_partner_policies(directory: PathLike) -> Dict[str, FieldPolicy]:
    """
    Load every partner policy in ``directory``.

    Returns:
        ``{file stem: FieldPolicy}`` sorted by stem

    Raises:
        PolicyConfigError: missing directory or any invalid partner file
    """
    partners_dir = Path(directory)
    if not partners_dir.is_dir():
        raise PolicyConfigError(f"Partner directory not found: {directory}")

    policies: Dict[str, FieldPolicy] = {}
    for path in sorted(partners_dir.iterdir()):
        if path.suffix.lower() not in POLICY_SUFFIXES or not path.is_file():
            continue
        policies[path.stem] = load_policy_file(path, name=path.stem)

    logger.debug("Loaded %d partner policies from %s", len(policies), partners_dir)
    return policies
