"""
Unit tests for the policy file loader.

Covers the shipped config/ files plus error handling for missing files,
invalid YAML, schema violations and unresolvable note hooks.
"""

from pathlib import Path

import pytest

from learning_pass.domain.notes.registry import NOTE_HOOK_REGISTRY, unregister_note_hook
from learning_pass.infrastructure.settings.loader import (
    PolicyConfigError,
    load_library_policy,
    load_partner_policies,
    load_policy_file,
)

PROJECT_CONFIG = Path(__file__).parents[4] / "config"


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


@pytest.mark.unit
class TestShippedPolicies:
    """The policies under config/ must always load."""

    def test_library_policy(self):
        policy = load_library_policy(PROJECT_CONFIG / "library.yml")

        assert policy.name == "EPL"
        assert "barcode" in policy.required
        assert policy.branch.default == "EPLMNA"
        assert policy.flat_defaults["RETRNMAIL"] == "YES"
        assert policy.flat_defaults["USER_ROUTING_FLAG"] == "Y"

    def test_partner_policies(self):
        partners = load_partner_policies(PROJECT_CONFIG / "partners")

        assert {"default", "neos", "kic"} <= set(partners)
        assert partners["neos"].notes.hook == "neos"
        assert partners["neos"].barcodes.prefix == "21221800"
        assert partners["kic"].expiry.date == "NEVER"
        assert partners["kic"].flat_defaults["RETRNMAIL"] == "NO"


@pytest.mark.unit
class TestLoadPolicyFile:
    """Test suite for load_policy_file."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(PolicyConfigError, match="not found"):
            load_policy_file(tmp_path / "missing.yml")

    def test_invalid_yaml(self, tmp_path):
        path = _write(tmp_path / "bad.yml", "name: [unclosed\n")

        with pytest.raises(PolicyConfigError, match="Invalid YAML"):
            load_policy_file(path)

    def test_non_mapping(self, tmp_path):
        path = _write(tmp_path / "list.yml", "- a\n- b\n")

        with pytest.raises(PolicyConfigError, match="mapping"):
            load_policy_file(path)

    def test_schema_violation(self, tmp_path):
        path = _write(tmp_path / "age.yml", "age:\n  minimum: old\n")

        with pytest.raises(PolicyConfigError, match="Invalid policy"):
            load_policy_file(path)

    def test_unquoted_expiry_date(self, tmp_path):
        path = _write(tmp_path / "dated.yml", "expiry:\n  date: 2030-12-31\n")

        policy = load_policy_file(path)

        assert policy.expiry.date == "2030-12-31"

    def test_empty_file_is_empty_policy(self, tmp_path):
        path = _write(tmp_path / "empty.yml", "")

        policy = load_policy_file(path, name="empty")

        assert policy.name == "empty"
        assert policy.required == []

    def test_unknown_keys_ignored(self, tmp_path):
        path = _write(tmp_path / "p.yml", "name: p\nstrictChecks: true\nrequired: [email]\n")

        policy = load_policy_file(path)

        assert policy.required == ["email"]

    def test_unknown_note_hook(self, tmp_path):
        path = _write(tmp_path / "p.yml", "notes:\n  hook: no-such-hook\n")

        with pytest.raises(PolicyConfigError, match="no-such-hook"):
            load_policy_file(path)

    def test_unimportable_note_hook(self, tmp_path):
        path = _write(tmp_path / "p.yml", "notes:\n  hook: 'no_such_module.hooks:Hook'\n")

        with pytest.raises(PolicyConfigError, match="Cannot import"):
            load_policy_file(path)

    def test_dotted_note_hook_resolved_at_load(self, tmp_path):
        reference = "learning_pass.domain.notes.hooks.kic:KicNoteHook"
        path = _write(tmp_path / "p.yml", f"notes:\n  hook: '{reference}'\n")

        try:
            load_policy_file(path)
            assert reference in NOTE_HOOK_REGISTRY
        finally:
            unregister_note_hook(reference)


@pytest.mark.unit
class TestLoadLibraryPolicy:
    """Test suite for load_library_policy."""

    def test_requires_name(self, tmp_path):
        path = _write(tmp_path / "library.yml", "required: [firstName]\n")

        with pytest.raises(PolicyConfigError, match="name"):
            load_library_policy(path)


@pytest.mark.unit
class TestLoadPartnerPolicies:
    """Test suite for load_partner_policies."""

    def test_keyed_by_file_stem(self, tmp_path):
        _write(tmp_path / "alpha.yml", "required: [email]\n")
        _write(tmp_path / "beta.yaml", "name: Beta Partner\n")
        _write(tmp_path / "notes.txt", "ignored")

        partners = load_partner_policies(tmp_path)

        assert list(partners) == ["alpha", "beta"]
        assert partners["alpha"].name == "alpha"
        assert partners["beta"].name == "Beta Partner"

    def test_missing_directory(self, tmp_path):
        with pytest.raises(PolicyConfigError, match="not found"):
            load_partner_policies(tmp_path / "nowhere")

    def test_one_bad_partner_fails_load(self, tmp_path):
        _write(tmp_path / "good.yml", "name: good\n")
        _write(tmp_path / "bad.yml", "age: [1, 2\n")

        with pytest.raises(PolicyConfigError):
            load_partner_policies(tmp_path)
