"""
Profile Route Tests
"""

import pytest
from unittest.mock import AsyncMock, patch

from app.services.auth_service import AuthService
from app.services.user_service import UserService
from shared.schemas import ProfileSchema

PROFILE = ProfileSchema(id="user-123", first_name="Jane", last_name="Doe")


@pytest.fixture(autouse=True)
def stored_profile():
    with patch.object(UserService, "get_profile", new=AsyncMock(return_value=PROFILE)):
        yield


def post(client, path, data, token):
    return client.post(path, data={**data, "csrfToken": token}, follow_redirects=False)


class TestProfilePage:
    def test_requires_login(self, client):
        response = client.get("/secure/profile", follow_redirects=False)
        assert response.headers["location"] == "/auth/login"

    def test_shows_profile_and_forms(self, auth_client):
        response = auth_client.get("/secure/profile")

        assert response.status_code == 200
        assert 'value="Jane"' in response.text
        assert 'value="jane@example.com"' in response.text
        assert response.text.count('name="csrfToken"') == 5

    @pytest.mark.parametrize("key, text", [
        ("profile_updated", "Profile updated successfully!"),
        ("email_updated", "Please check your email"),
        ("password_updated", "Password updated successfully"),
    ])
    def test_result_messages(self, auth_client, key, text):
        assert text in auth_client.get(f"/secure/profile?message={key}").text

    def test_unknown_message_ignored(self, auth_client):
        response = auth_client.get("/secure/profile?message=<script>")
        assert "<script>" not in response.text


class TestProfileUpdate:
    def test_success(self, auth_client, csrf_token, test_user):
        with patch.object(UserService, "update_profile", new=AsyncMock(return_value={"success": True})) as update:
            response = post(auth_client, "/secure/profile", {"first_name": "Janet", "last_name": "Doe"}, csrf_token)

        assert response.headers["location"] == "/secure/profile?message=profile_updated"
        user, data = update.await_args.args
        assert user == test_user
        assert data.first_name == "Janet"

    def test_validation_error(self, auth_client, csrf_token):
        with patch.object(UserService, "update_profile", new=AsyncMock()) as update:
            response = post(auth_client, "/secure/profile", {"first_name": "", "last_name": "Doe"}, csrf_token)

        assert response.status_code == 400
        assert "First name is required" in response.text
        update.assert_not_awaited()

    def test_backend_failure(self, auth_client, csrf_token):
        failed = {"success": False, "error": "Failed to update profile"}
        with patch.object(UserService, "update_profile", new=AsyncMock(return_value=failed)):
            response = post(auth_client, "/secure/profile", {"first_name": "A", "last_name": "B"}, csrf_token)

        assert response.status_code == 502
        assert "Failed to update profile" in response.text

    def test_requires_csrf(self, auth_client, csrf_token):
        with patch.object(UserService, "update_profile", new=AsyncMock()) as update:
            response = auth_client.post(
                "/secure/profile", data={"first_name": "A", "last_name": "B"}, follow_redirects=False
            )

        assert response.headers["location"] == "/auth/error"
        update.assert_not_awaited()


class TestEmailChange:
    def test_success(self, auth_client, csrf_token, test_user):
        result = {"success": True, "message": "Email update initiated."}
        with patch.object(AuthService, "change_email", new=AsyncMock(return_value=result)) as change:
            response = post(auth_client, "/secure/profile/email", {"email": "New@Example.com"}, csrf_token)

        assert response.headers["location"] == "/secure/profile?message=email_updated"
        change.assert_awaited_once_with(test_user, "new@example.com")

    def test_invalid_email(self, auth_client, csrf_token):
        with patch.object(AuthService, "change_email", new=AsyncMock()) as change:
            response = post(auth_client, "/secure/profile/email", {"email": "bad"}, csrf_token)

        assert response.status_code == 400
        assert "Invalid email format" in response.text
        change.assert_not_awaited()


class TestPasswordChange:
    def test_success(self, auth_client, csrf_token, test_user):
        result = {"success": True, "message": "Password updated successfully"}
        with patch.object(AuthService, "change_password", new=AsyncMock(return_value=result)) as change:
            response = post(auth_client, "/secure/profile/password", {
                "current_password": "secret1",
                "new_password": "secret2"
            }, csrf_token)

        assert response.headers["location"] == "/secure/profile?message=password_updated"
        change.assert_awaited_once_with(test_user, "secret1", "secret2")

    def test_short_new_password(self, auth_client, csrf_token):
        with patch.object(AuthService, "change_password", new=AsyncMock()) as change:
            response = post(auth_client, "/secure/profile/password", {
                "current_password": "secret1",
                "new_password": "abc"
            }, csrf_token)

        assert response.status_code == 400
        assert "New password must be at least 6 characters long" in response.text
        change.assert_not_awaited()

    def test_wrong_current_password(self, auth_client, csrf_token):
        result = {"success": False, "error": "Current password is incorrect"}
        with patch.object(AuthService, "change_password", new=AsyncMock(return_value=result)):
            response = post(auth_client, "/secure/profile/password", {
                "current_password": "wrong1",
                "new_password": "secret2"
            }, csrf_token)

        assert response.status_code == 400
        assert "Current password is incorrect" in response.text


class TestAccountDeletion:
    def test_success_signs_out(self, auth_client, csrf_token, test_user):
        with patch.object(AuthService, "delete_account", new=AsyncMock(return_value={"success": True})) as delete:
            response = post(auth_client, "/secure/profile/delete", {
                "password": "secret1",
                "confirmation_text": "DELETE MY ACCOUNT"
            }, csrf_token)

        assert response.status_code == 303
        assert response.headers["location"] == "/auth/login?deleted=1"
        delete.assert_awaited_once_with(test_user, "secret1")
        cleared = [h.lower() for h in response.headers.get_list("set-cookie") if h.startswith("sb-")]
        assert len(cleared) == 2
        assert all("max-age=0" in header for header in cleared)

    def test_confirmation_text_required(self, auth_client, csrf_token):
        with patch.object(AuthService, "delete_account", new=AsyncMock()) as delete:
            response = post(auth_client, "/secure/profile/delete", {
                "password": "secret1",
                "confirmation_text": "yes"
            }, csrf_token)

        assert response.status_code == 400
        assert "to confirm" in response.text
        delete.assert_not_awaited()

    def test_wrong_password(self, auth_client, csrf_token):
        result = {"success": False, "error": "Password is incorrect"}
        with patch.object(AuthService, "delete_account", new=AsyncMock(return_value=result)):
            response = post(auth_client, "/secure/profile/delete", {
                "password": "wrong1",
                "confirmation_text": "DELETE MY ACCOUNT"
            }, csrf_token)

        assert response.status_code == 400
        assert "Password is incorrect" in response.text
        assert not [h for h in response.headers.get_list("set-cookie") if h.startswith("sb-")]
