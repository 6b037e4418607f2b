import pytest
from identity.account.registration import register_user
from identity.account.role import UserRole
from identity.account.roles import GrantAdminRole, is_admin, list_admins
from protean import current_domain
from protean.exceptions import ValidationError


@pytest.fixture
def user_id():
    return register_user("owner@kwetustore.com", "admin-pass", "Store Owner")


class TestGrantAdminRole:
    def test_grant_admin_by_email(self, user_id):
        role_id = current_domain.process(GrantAdminRole(email="owner@kwetustore.com"), asynchronous=False)

        role = current_domain.repository_for(UserRole).get(role_id)
        assert role.user_id == user_id
        assert role.role == "admin"

    def test_email_lookup_is_case_insensitive(self, user_id):
        current_domain.process(GrantAdminRole(email="Owner@KwetuStore.com"), asynchronous=False)
        assert is_admin(user_id)

    def test_unknown_email_is_rejected(self):
        with pytest.raises(ValidationError) as exc:
            current_domain.process(GrantAdminRole(email="ghost@example.com"), asynchronous=False)

        assert exc.value.messages["email"] == [
            "Could not grant admin role to ghost@example.com. User may not exist."
        ]

    def test_granting_twice_keeps_one_grant(self, user_id):
        first = current_domain.process(GrantAdminRole(email="owner@kwetustore.com"), asynchronous=False)
        second = current_domain.process(GrantAdminRole(email="owner@kwetustore.com"), asynchronous=False)

        assert first == second
        assert len(list_admins()) == 1


class TestIsAdmin:
    def test_regular_user_is_not_admin(self, user_id):
        assert is_admin(user_id) is False

    def test_admin_after_grant(self, user_id):
        current_domain.process(GrantAdminRole(email="owner@kwetustore.com"), asynchronous=False)
        assert is_admin(user_id) is True

    @pytest.mark.parametrize("missing", [None, ""], ids=["none", "empty"])
    def test_missing_user_is_not_admin(self, missing):
        assert is_admin(missing) is False


class TestListAdmins:
    def test_lists_admins_with_profile_details(self, user_id):
        current_domain.process(GrantAdminRole(email="owner@kwetustore.com"), asynchronous=False)

        admins = list_admins()
        assert len(admins) == 1
        assert admins[0]["user_id"] == user_id
        assert admins[0]["email"] == "owner@kwetustore.com"
        assert admins[0]["full_name"] == "Store Owner"

    def test_newest_grant_first(self, user_id):
        register_user("manager@kwetustore.com", "admin-pass", "Manager")
        current_domain.process(GrantAdminRole(email="owner@kwetustore.com"), asynchronous=False)
        current_domain.process(GrantAdminRole(email="manager@kwetustore.com"), asynchronous=False)

        emails = [admin["email"] for admin in list_admins()]
        assert emails == ["manager@kwetustore.com", "owner@kwetustore.com"]

    def test_no_admins(self):
        assert list_admins() == []
