# tests/test_privilege_resolver.py
import pytest

from services.privileges import PrivilegeMappingRegistry, PrivilegeResolver

REQUIRED = ["language:read", "locale:read"]


def build_resolver(*entries, required=REQUIRED) -> PrivilegeResolver:
    registry = PrivilegeMappingRegistry()
    for entry in entries:
        registry.add_privilege_mapping_entry(entry)
    registry.freeze()
    return PrivilegeResolver(registry, required)


def entry(key, roles, category="additional_permissions", parent=None):
    return {"category": category, "parent": parent, "key": key, "roles": roles}


def role(privileges, dependencies=()):
    return {"privileges": list(privileges), "dependencies": list(dependencies)}


SYSTEM = entry("system", {"clear_cache": role(["system:clear:cache"])})
ORDERS = entry("orders", {"create_discounts": role(["order:create:discount"])})
PAYMENT = entry(
    "payment",
    {
        "viewer": role(["payment_method:read", "rule:read"]),
        "editor": role(["payment_method:update"], ["payment.viewer"]),
        "creator": role(["payment_method:create"], ["payment.viewer", "payment.editor"]),
    },
    category="permissions",
)


class TestFilterSelectedRoles:

    def test_without_mappings_nothing_is_selected(self):
        resolver = build_resolver()
        assert resolver.filter_selected_roles(["system:clear:cache", "system.clear_cache"]) == []

    def test_mapped_role_replaces_raw_privilege(self):
        resolver = build_resolver(SYSTEM)
        selected = resolver.filter_selected_roles(["system:clear:cache", "system.clear_cache"])

        assert "system.clear_cache" in selected
        assert "system:clear:cache" not in selected

    def test_stored_role_paths_are_selected(self):
        resolver = build_resolver(SYSTEM, ORDERS)
        selected = resolver.filter_selected_roles(["orders.create_discounts", "system.clear_cache"])

        assert selected == ["system.clear_cache", "orders.create_discounts"]
        assert "system:clear:cache" not in selected
        assert "order:create:discount" not in selected

    def test_unmapped_privilege_is_dropped(self):
        resolver = build_resolver(SYSTEM)
        assert resolver.filter_selected_roles({"order:create:discount"}) == []

    def test_role_selected_when_all_privileges_present(self):
        resolver = build_resolver(PAYMENT)
        selected = resolver.filter_selected_roles(["payment_method:read", "rule:read"])
        assert selected == ["payment.viewer"]

    def test_role_not_selected_when_privileges_partially_present(self):
        resolver = build_resolver(PAYMENT)
        assert resolver.filter_selected_roles(["payment_method:read"]) == []

    def test_result_never_contains_raw_privileges(self):
        resolver = build_resolver(SYSTEM, ORDERS, PAYMENT)
        raw = resolver.expand_selected_roles(["payment.creator", "system.clear_cache"])
        selected = resolver.filter_selected_roles(raw)

        assert all(resolver.registry.is_role_path(path) for path in selected)
        assert "payment_method:create" not in selected
        assert "system:clear:cache" not in selected


class TestExpandSelectedRoles:

    def test_save_payload_for_single_role(self):
        resolver = build_resolver(SYSTEM)
        assert resolver.expand_selected_roles(["system.clear_cache"]) == [
            "system.clear_cache",
            "system:clear:cache",
            *REQUIRED,
        ]

    def test_save_payload_for_two_roles(self):
        resolver = build_resolver(SYSTEM, ORDERS)
        expanded = resolver.expand_selected_roles({"orders.create_discounts", "system.clear_cache"})

        assert expanded == [
            "system.clear_cache",
            "system:clear:cache",
            "orders.create_discounts",
            "order:create:discount",
            *REQUIRED,
        ]

    def test_unknown_roles_are_ignored(self):
        resolver = build_resolver(SYSTEM)
        assert resolver.expand_selected_roles(["unknown.role", "system.nothing"]) == REQUIRED

    def test_required_privileges_always_present(self):
        resolver = build_resolver(SYSTEM)
        assert resolver.expand_selected_roles([]) == REQUIRED

    def test_dependencies_follow_the_role(self):
        resolver = build_resolver(PAYMENT)
        assert resolver.expand_selected_roles(["payment.editor"]) == [
            "payment.editor",
            "payment_method:update",
            "payment.viewer",
            "payment_method:read",
            "rule:read",
            *REQUIRED,
        ]

    def test_shared_dependency_expanded_once(self):
        resolver = build_resolver(PAYMENT)
        expanded = resolver.expand_selected_roles(["payment.creator", "payment.editor"])

        assert len(expanded) == len(set(expanded))
        assert expanded.count("payment_method:read") == 1

    def test_cyclic_dependencies_terminate(self):
        resolver = build_resolver(
            entry("a", {"x": role(["a:x"], ["b.y"])}),
            entry("b", {"y": role(["b:y"], ["a.x"])}),
        )
        assert resolver.expand_selected_roles(["a.x"]) == ["a.x", "a:x", "b.y", "b:y", *REQUIRED]

    def test_expansion_is_idempotent(self):
        resolver = build_resolver(SYSTEM, ORDERS, PAYMENT)
        once = resolver.expand_selected_roles(["payment.editor", "orders.create_discounts"])
        twice = resolver.expand_selected_roles(once)

        assert set(twice) == set(once)

    def test_required_privilege_not_duplicated(self):
        resolver = build_resolver(
            entry("language", {"viewer": role(["language:read"])}),
        )
        expanded = resolver.expand_selected_roles(["language.viewer"])

        assert expanded == ["language.viewer", "language:read", "locale:read"]

    @pytest.mark.parametrize(
        "selection",
        [["system.clear_cache"], ["orders.create_discounts", "system.clear_cache"], []],
    )
    def test_filter_recovers_selection_after_expansion(self, selection):
        resolver = build_resolver(SYSTEM, ORDERS)
        expanded = resolver.expand_selected_roles(selection)
        assert set(resolver.filter_selected_roles(expanded)) == set(selection)
