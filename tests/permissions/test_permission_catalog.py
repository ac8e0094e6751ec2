"""
Tests for accessctl.permissions.catalog — permission id validity and order.
"""

import pytest

from accessctl.exceptions import InvalidModule, InvalidPermissionId
from accessctl.permissions import (
    ACTIONS,
    MODULES,
    WILDCARD,
    all_permission_ids,
    all_permissions,
    is_valid_module,
    is_valid_permission_id,
    parse_permission_id,
    permission_ids_for_module,
    require_override_target,
)


class TestIsValidPermissionId:
    def test_known_pairs_are_valid(self):
        assert is_valid_permission_id("products.view")
        assert is_valid_permission_id("settings.delete")
        assert is_valid_permission_id("content.export")

    def test_wildcard_is_valid(self):
        assert is_valid_permission_id(WILDCARD)

    @pytest.mark.parametrize(
        "permission_id",
        [
            "products",
            "products.",
            ".view",
            "Products.view",
            "products.VIEW",
            "inventory.view",
            "products.publish",
            "products.view.extra",
            "",
            None,
            42,
        ],
    )
    def test_malformed_ids_are_invalid(self, permission_id):
        assert not is_valid_permission_id(permission_id)


class TestCatalogOrder:
    def test_catalog_is_full_cross_product(self):
        ids = all_permission_ids()
        assert len(ids) == len(MODULES) * len(ACTIONS) == 60
        assert len(set(ids)) == len(ids)

    def test_modules_outer_actions_inner(self):
        ids = all_permission_ids()
        assert ids[:6] == (
            "users.view",
            "users.create",
            "users.edit",
            "users.delete",
            "users.approve",
            "users.export",
        )
        assert ids[6] == "roles.view"
        assert ids[-1] == "content.export"

    def test_wildcard_not_in_concrete_ids(self):
        assert WILDCARD not in all_permission_ids()

    def test_permission_names(self):
        names = {p.id: p.name for p in all_permissions()}
        assert names["products.edit"] == "Edit Products"


class TestModuleLookup:
    def test_module_ids_in_action_order(self):
        assert permission_ids_for_module("orders") == tuple(
            f"orders.{action}" for action in ACTIONS
        )

    def test_unknown_module_rejected(self):
        assert not is_valid_module("inventory")
        with pytest.raises(InvalidModule, match="inventory"):
            permission_ids_for_module("inventory")


class TestParsing:
    def test_parse_valid(self):
        permission = parse_permission_id("payments.approve")
        assert permission.module == "payments"
        assert permission.action == "approve"
        assert permission.id == "payments.approve"

    def test_parse_rejects_wildcard(self):
        with pytest.raises(InvalidPermissionId):
            parse_permission_id(WILDCARD)

    def test_override_target_rejects_wildcard_and_garbage(self):
        assert require_override_target("users.edit") == "users.edit"
        with pytest.raises(InvalidPermissionId):
            require_override_target(WILDCARD)
        with pytest.raises(InvalidPermissionId, match="users.fly"):
            require_override_target("users.fly")
