# tests/test_privilege_registry.py
import pytest
from pydantic import ValidationError

from core.exceptions import (
    DuplicatePrivilegeKeyError,
    InvalidPrivilegeMappingError,
    RegistryFrozenError,
)
from schemas.privileges import PrivilegeMappingEntry
from services.init_roles_permissions import build_privilege_registry
from services.privileges import PrivilegeMappingRegistry


def system_entry(**overrides):
    data = {
        "category": "additional_permissions",
        "parent": None,
        "key": "system",
        "roles": {
            "clear_cache": {"privileges": ["system:clear:cache"], "dependencies": []},
        },
    }
    data.update(overrides)
    return data


class TestPrivilegeMappingRegistry:

    def test_entry_dict_is_validated(self):
        registry = PrivilegeMappingRegistry()
        entry = registry.add_privilege_mapping_entry(system_entry())

        assert isinstance(entry, PrivilegeMappingEntry)
        assert registry.get_entry("system") is entry
        assert registry.get_role("system.clear_cache").privileges == ["system:clear:cache"]

    def test_duplicate_key_is_rejected(self):
        registry = PrivilegeMappingRegistry()
        registry.add_privilege_mapping_entry(system_entry())

        with pytest.raises(DuplicatePrivilegeKeyError):
            registry.add_privilege_mapping_entry(system_entry(category="permissions"))

        assert registry.get_entry("system").category == "additional_permissions"

    def test_registration_after_freeze_fails(self):
        registry = PrivilegeMappingRegistry()
        registry.freeze()

        with pytest.raises(RegistryFrozenError):
            registry.add_privilege_mapping_entry(system_entry())

    def test_unknown_parent_fails_on_freeze(self):
        registry = PrivilegeMappingRegistry()
        registry.add_privilege_mapping_entry(system_entry(parent="settings"))

        with pytest.raises(InvalidPrivilegeMappingError):
            registry.freeze()
        assert not registry.frozen

    def test_role_lookups(self):
        registry = PrivilegeMappingRegistry()
        registry.add_privilege_mapping_entry(system_entry())
        registry.add_privilege_mapping_entry(
            system_entry(key="orders", roles={"create_discounts": {"privileges": ["order:create:discount"]}})
        )

        assert registry.role_paths() == ["system.clear_cache", "orders.create_discounts"]
        assert registry.is_role_path("orders.create_discounts")
        assert not registry.is_role_path("orders.delete")
        assert registry.get_role("unknown.role") is None
        assert "orders" in registry
        assert len(registry) == 2

    @pytest.mark.parametrize(
        "overrides",
        [
            {"key": ""},
            {"key": "system.cache"},
            {"roles": {"clear.cache": {"privileges": []}}},
            {"roles": {"clear_cache": {"privileges": [""]}}},
            {"roles": {"clear_cache": {"privileges": [], "dependencies": ["no_role_part"]}}},
        ],
    )
    def test_malformed_entries_are_rejected(self, overrides):
        with pytest.raises(ValidationError):
            PrivilegeMappingRegistry().add_privilege_mapping_entry(system_entry(**overrides))


class TestDefaultContributions:

    def test_default_registry_is_frozen(self):
        registry = build_privilege_registry()

        assert registry.frozen
        assert {"payment", "product", "product_stream", "system", "orders"} <= {
            e.key for e in registry.get_privileges_mappings()
        }

    def test_product_stream_is_child_of_product(self):
        registry = build_privilege_registry()
        assert [e.key for e in registry.children_of("product")] == ["product_stream"]

    def test_payment_roles(self):
        registry = build_privilege_registry()
        editor = registry.get_role("payment.editor")

        assert editor.privileges == ["payment_method:update"]
        assert editor.dependencies == ["payment.viewer"]

    def test_custom_contributors_are_applied_in_order(self):
        registry = build_privilege_registry(
            {
                "first": lambda: [system_entry()],
                "second": lambda: [system_entry(key="orders")],
            }
        )
        assert [e.key for e in registry.get_privileges_mappings()] == ["system", "orders"]

    def test_duplicate_contribution_aborts_start_up(self):
        with pytest.raises(DuplicatePrivilegeKeyError):
            build_privilege_registry(
                {"a": lambda: [system_entry()], "b": lambda: [system_entry()]}
            )
