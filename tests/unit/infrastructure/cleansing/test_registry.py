"""Unit tests for the normalizer registry and field rule chains."""

import pytest

from learning_pass.infrastructure.cleansing import (
    CleansingRegistry,
    CleansingRule,
    RuleCategory,
    get_cleansing_registry,
    list_available_rules,
    registry,
    rule,
)


@pytest.mark.unit
class TestCleansingRegistry:
    """Registry lookup and rule execution."""

    def test_module_registry(self) -> None:
        assert get_cleansing_registry() is registry

    def test_builtin_rules_registered(self) -> None:
        names = {entry["name"] for entry in list_available_rules()}
        assert {
            "trim_whitespace",
            "capitalize",
            "normalize_email",
            "normalize_phone",
            "normalize_postal_code",
            "normalize_password",
            "prefixed_barcode",
            "first_name",
            "last_name",
        } <= names

    def test_find_by_category(self) -> None:
        names = {r.name for r in registry.find_by_category(RuleCategory.CONTACT)}
        assert names == {"normalize_email", "normalize_phone"}

    def test_apply_rule_filters_unknown_kwargs(self) -> None:
        result = registry.apply_rule("IlikeBread", "normalize_password", password_to_pin=True, unrelated=1)
        assert result == "9880"

    def test_apply_unknown_rule_raises(self) -> None:
        with pytest.raises(ValueError, match="not registered"):
            registry.apply_rule("x", "no_such_rule")

    def test_apply_rules_in_order(self) -> None:
        assert registry.apply_rules("  hamilton,  lewis ", ["trim_whitespace", "first_name"]) == "Lewis"

    def test_apply_rules_with_mapping_spec(self) -> None:
        specs = [{"name": "split_comma_string", "kwargs": {"first": False}}]
        assert registry.apply_rules("Edmonton, AB", specs) == "AB"

    def test_mapping_spec_without_name_raises(self) -> None:
        with pytest.raises(ValueError, match="missing 'name'"):
            registry.apply_rules("x", [{"kwargs": {}}])

    def test_custom_rule_registration(self) -> None:
        @rule(name="test_upper_case", category=RuleCategory.STRING, description="Upper-case")
        def upper_case(value):
            return str(value).upper()

        assert registry.apply_rule("abc", "test_upper_case") == "ABC"
        assert upper_case._cleansing_rule.category is RuleCategory.STRING


@pytest.mark.unit
class TestFieldRules:
    """Field -> rule chain configuration from field_rules.yml."""

    def test_configured_field(self) -> None:
        assert registry.get_field_rules("email") == ["trim_whitespace", "normalize_email"]

    def test_unconfigured_field_uses_default_rules(self) -> None:
        assert registry.get_field_rules("somethingElse") == ["trim_whitespace"]

    def test_chain_normalizes_phone(self) -> None:
        chain = registry.get_field_rules("phone")
        assert registry.apply_rules(" +1(780) 242-5555 ", chain) == "1-780-242-5555"

    def test_reload_keeps_configuration(self) -> None:
        registry.reload_field_config()
        assert registry.get_field_rules("postalCode") == ["normalize_postal_code"]


@pytest.mark.unit
class TestStandaloneRegistry:
    """Registries built against their own field rule file."""

    @staticmethod
    def _registry(path):
        standalone = CleansingRegistry(field_rules_path=path)
        standalone.register(
            CleansingRule(
                name="strip",
                category=RuleCategory.STRING,
                func=lambda value: str(value).strip(),
                description="Strip",
            )
        )
        return standalone

    def test_missing_file_means_no_chains(self, tmp_path) -> None:
        standalone = self._registry(tmp_path / "absent.yml")
        assert standalone.get_field_rules("email") == []

    def test_reads_fields_and_defaults(self, tmp_path) -> None:
        path = tmp_path / "field_rules.yml"
        path.write_text("fields:\n  city: [strip]\ndefault_rules: []\n", encoding="utf-8")

        standalone = self._registry(path)

        assert standalone.get_field_rules("city") == ["strip"]
        assert standalone.get_field_rules("email") == []

    def test_unregistered_rule_in_file_raises(self, tmp_path) -> None:
        path = tmp_path / "field_rules.yml"
        path.write_text("fields:\n  city: [normalize_email]\n", encoding="utf-8")

        with pytest.raises(ValueError, match="'normalize_email' used by 'city'"):
            self._registry(path).get_field_rules("city")
