"""
Tests for accessctl.permissions models, role registry and override store.
"""

import pytest

from accessctl.exceptions import DuplicateOverride, InvalidPermissionId
from accessctl.permissions import (
    InMemoryOverrideStore,
    InMemoryRoleRegistry,
    Override,
    Permission,
    Role,
    ensure_unique,
    find_override,
)


# ── Permission ───────────────────────────────────────────────

def test_permission_rejects_unknown_pair():
    with pytest.raises(InvalidPermissionId):
        Permission(module="warehouse", action="view")


# ── Role ─────────────────────────────────────────────────────

class TestRole:
    def test_permission_ids_normalized_to_frozenset(self):
        role = Role(
            role_id="role-manager",
            name="manager",
            permission_ids=["products.view", "products.edit", "products.view"],
        )
        assert role.permission_ids == frozenset({"products.view", "products.edit"})
        assert role.display_name == "manager"
        assert not role.is_wildcard

    def test_star_becomes_wildcard(self):
        role = Role(role_id="role-sa", name="super-admin", permission_ids=["*"])
        assert role.is_wildcard
        assert role.permission_ids == frozenset()
        assert role.grants("settings.delete")

    def test_invalid_permission_rejected(self):
        with pytest.raises(InvalidPermissionId, match="products.fly"):
            Role(role_id="r", name="r", permission_ids=["products.fly"])

    def test_string_permission_ids_rejected(self):
        with pytest.raises(ValueError):
            Role(role_id="r", name="r", permission_ids="products.view")

    def test_empty_role_id_rejected(self):
        with pytest.raises(ValueError, match="role_id"):
            Role(role_id="", name="r")

    def test_inactive_role_grants_nothing(self):
        role = Role(
            role_id="r",
            name="r",
            is_wildcard=True,
            is_active=False,
        )
        assert not role.grants("users.view")

    def test_to_dict_wildcard(self):
        role = Role(role_id="role-sa", name="super-admin", is_wildcard=True)
        assert role.to_dict()["permissions"] == ["*"]

    def test_frozen(self):
        role = Role(role_id="r", name="r")
        with pytest.raises(AttributeError):
            role.is_wildcard = True


# ── Override ─────────────────────────────────────────────────

class TestOverride:
    def test_valid_override(self):
        override = Override(permission_id="orders.view", is_allowed=True)
        assert override.to_dict() == {
            "permission_id": "orders.view",
            "is_allowed": True,
        }

    def test_wildcard_target_rejected(self):
        with pytest.raises(InvalidPermissionId):
            Override(permission_id="*", is_allowed=True)

    def test_non_bool_rejected(self):
        with pytest.raises(ValueError, match="is_allowed"):
            Override(permission_id="orders.view", is_allowed=1)

    def test_find_override_last_wins(self):
        overrides = (
            Override(permission_id="orders.view", is_allowed=True),
            Override(permission_id="orders.view", is_allowed=False),
        )
        assert find_override(overrides, "orders.view").is_allowed is False
        assert find_override(overrides, "orders.edit") is None

    def test_ensure_unique_raises_on_duplicate(self):
        with pytest.raises(DuplicateOverride, match="orders.view"):
            ensure_unique(
                [
                    Override(permission_id="orders.view", is_allowed=True),
                    Override(permission_id="orders.view", is_allowed=True),
                ]
            )


# ── Registry / Store ─────────────────────────────────────────

class TestInMemoryRoleRegistry:
    def test_lookup(self):
        role = Role(role_id="role-support", name="support")
        registry = InMemoryRoleRegistry([role])
        assert registry.get_role("role-support") is role
        assert registry.get_role("missing") is None
        assert registry.list_roles() == (role,)

    def test_duplicate_role_id_rejected(self):
        with pytest.raises(ValueError, match="Duplicate role_id"):
            InMemoryRoleRegistry(
                [Role(role_id="r", name="a"), Role(role_id="r", name="b")]
            )


class TestInMemoryOverrideStore:
    def test_load_missing_user_is_empty(self):
        assert InMemoryOverrideStore().load("user-1") == ()

    def test_save_and_load(self):
        store = InMemoryOverrideStore()
        overrides = [Override(permission_id="orders.view", is_allowed=True)]
        store.save("user-1", overrides)
        assert store.load("user-1") == tuple(overrides)
        assert store.users_with_overrides() == ("user-1",)

    def test_save_rejects_duplicates_and_keeps_state(self):
        store = InMemoryOverrideStore(
            {"user-1": [Override(permission_id="orders.view", is_allowed=True)]}
        )
        with pytest.raises(DuplicateOverride):
            store.save(
                "user-1",
                [
                    Override(permission_id="orders.edit", is_allowed=True),
                    Override(permission_id="orders.edit", is_allowed=False),
                ],
            )
        assert store.load("user-1") == (
            Override(permission_id="orders.view", is_allowed=True),
        )

    def test_save_empty_clears_user(self):
        store = InMemoryOverrideStore(
            {"user-1": [Override(permission_id="orders.view", is_allowed=True)]}
        )
        store.save("user-1", ())
        assert store.load("user-1") == ()
        assert store.users_with_overrides() == ()
