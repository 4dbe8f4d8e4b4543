"""Tests for accounts models and RBAC logic."""

import pytest
from django.contrib.auth import get_user_model

from accounts.models import Role

User = get_user_model()


@pytest.mark.django_db
class TestUserModel:
    def test_user_str_includes_role_display(self):
        user = User(username="test", first_name="Mert", last_name="Yilmaz", role=Role.MERCHANDISER)
        assert "Merchandiser" in str(user)

    def test_is_owner_property(self, owner_user):
        assert owner_user.is_owner is True
        assert owner_user.is_planner is False

    def test_is_planner_property(self, planner_user):
        assert planner_user.is_planner is True
        assert planner_user.is_owner is False

    def test_has_any_role_true(self, merchandiser_user):
        assert merchandiser_user.has_any_role(Role.MERCHANDISER, Role.OWNER) is True

    def test_has_any_role_false(self, planner_user):
        assert planner_user.has_any_role(Role.OWNER, Role.MERCHANDISER) is False

    def test_default_role_is_viewer(self, db):
        user = User.objects.create_user(username="newuser", password="pass")
        assert user.role == Role.VIEWER


@pytest.mark.django_db
class TestPermissions:
    def test_merchandiser_edits_costing_and_moves_cards(self, merchandiser_user):
        assert merchandiser_user.can_edit_costing is True
        assert merchandiser_user.can_move_cards is True

    def test_planner_moves_cards_only(self, planner_user):
        assert planner_user.can_edit_costing is False
        assert planner_user.can_move_cards is True

    def test_viewer_can_do_neither(self, viewer_user):
        assert viewer_user.can_edit_costing is False
        assert viewer_user.can_move_cards is False

    def test_superuser_passes_regardless_of_role(self, db):
        admin = User.objects.create_superuser(username="admin", password="pass", email="a@example.com")
        assert admin.role == Role.VIEWER
        assert admin.can_edit_costing is True
        assert admin.can_move_cards is True
