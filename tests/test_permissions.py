"""
Tests for permission helpers.
"""

from types import SimpleNamespace

from services.permissions import has_admin_permission


def test_has_admin_permission_allowlist(monkeypatch):
    monkeypatch.setattr("services.permissions.ADMIN_USER_IDS", [202])
    interaction = SimpleNamespace(user=SimpleNamespace(id=202), guild=None)

    assert has_admin_permission(interaction) is True


def test_has_admin_permission_interaction_permissions(monkeypatch):
    monkeypatch.setattr("services.permissions.ADMIN_USER_IDS", [])

    interaction = SimpleNamespace(
        user=SimpleNamespace(id=303),
        permissions=SimpleNamespace(administrator=True),
    )

    assert has_admin_permission(interaction) is True


def test_has_admin_permission_member_fallback(monkeypatch):
    monkeypatch.setattr("services.permissions.ADMIN_USER_IDS", [])

    perms = SimpleNamespace(administrator=True)
    interaction = SimpleNamespace(user=SimpleNamespace(id=404, guild_permissions=perms), guild=None)

    assert has_admin_permission(interaction) is True


def test_manage_guild_is_not_enough(monkeypatch):
    monkeypatch.setattr("services.permissions.ADMIN_USER_IDS", [])

    perms = SimpleNamespace(administrator=False, manage_guild=True)
    interaction = SimpleNamespace(
        user=SimpleNamespace(id=404, guild_permissions=perms),
        permissions=perms,
    )

    assert has_admin_permission(interaction) is False


def test_has_admin_permission_false(monkeypatch):
    monkeypatch.setattr("services.permissions.ADMIN_USER_IDS", [])
    interaction = SimpleNamespace(user=SimpleNamespace(id=505), guild=None)

    assert has_admin_permission(interaction) is False


def test_has_admin_permission_not_on_allowlist(monkeypatch):
    monkeypatch.setattr("services.permissions.ADMIN_USER_IDS", [101])
    interaction = SimpleNamespace(user=SimpleNamespace(id=202), guild=None)

    assert has_admin_permission(interaction) is False
