"""
Authentication Service
Sign-in, sign-up and account changes delegated to Supabase Auth
"""

import logging
from typing import Dict

from app.services.user_service import UserService
from app.utils.supabase_client import supabase_client
from shared.schemas.user import SignupSchema
from shared.utils.logger import get_audit_logger

logger = logging.getLogger(__name__)

DEFAULT_AUTH_ERROR = "Authentication failed. Please try again."

# Backend error fragments mapped to messages safe to show users
AUTH_ERROR_MESSAGES = {
    "Invalid login credentials": "Invalid email or password",
    "Email not confirmed": "Please verify your email address",
}


class AuthService:
    """User authentication service"""

    @staticmethod
    def map_auth_error(message: str) -> str:
        """Translate a backend auth error into a user-facing message"""
        for fragment, friendly in AUTH_ERROR_MESSAGES.items():
            if fragment in (message or ""):
                return friendly
        return DEFAULT_AUTH_ERROR

    @staticmethod
    async def login(email: str, password: str) -> Dict:
        """
        Authenticate user

        Args:
            email: User email
            password: User password

        Returns:
            dict: Authentication result with session tokens
        """
        result = await supabase_client.sign_in(email, password)
        audit = get_audit_logger()

        if not result['success']:
            logger.error(f"Login error: {result['error']}")
            audit.log_user_action(action="login", details={'email': email}, success=False)
            return {
                'success': False,
                'error': AuthService.map_auth_error(result['error'])
            }

        audit.log_user_action(action="login", user_id=result['user']['id'])
        return {
            'success': True,
            'user': result['user'],
            'session': result['session']
        }

    @staticmethod
    async def signup(signup_data: SignupSchema) -> Dict:
        """
        Register new user and create their profile

        Returns:
            dict: Registration result; ``session`` is None until the email is confirmed
        """
        result = await supabase_client.sign_up(
            signup_data.email,
            signup_data.password,
            {
                'first_name': signup_data.first_name,
                'last_name': signup_data.last_name
            }
        )

        if not result['success']:
            logger.error(f"Signup error: {result['error']}")
            get_audit_logger().log_user_action(
                action="signup", details={'email': signup_data.email}, success=False
            )
            return {
                'success': False,
                'error': 'Registration failed'
            }

        user = result['user']
        session = result.get('session')

        profile_result = await UserService.create_profile(
            user['id'],
            signup_data.first_name,
            signup_data.last_name,
            access_token=session['access_token'] if session else None
        )
        if not profile_result['success']:
            return {
                'success': False,
                'error': profile_result['error']
            }

        get_audit_logger().log_user_action(action="signup", user_id=user['id'])
        return {
            'success': True,
            'user': user,
            'session': session
        }

    @staticmethod
    async def logout(user: dict) -> Dict:
        """Sign the user out on the backend"""
        result = await supabase_client.sign_out(user['access_token'], user['refresh_token'])
        get_audit_logger().log_user_action(
            action="logout", user_id=user['id'], success=result['success']
        )
        return result

    @staticmethod
    async def verify_password(user: dict, password: str) -> bool:
        """Re-check the user's current password by signing in again"""
        result = await supabase_client.sign_in(user['email'], password)
        return bool(result['success'])

    @staticmethod
    async def change_password(user: dict, current_password: str, new_password: str) -> Dict:
        """
        Change user password

        Requires current password verification
        """
        audit = get_audit_logger()

        if not await AuthService.verify_password(user, current_password):
            audit.log_user_action(action="password_change", user_id=user['id'], success=False)
            return {
                'success': False,
                'error': 'Current password is incorrect'
            }

        result = await supabase_client.update_user(
            user['access_token'], user['refresh_token'], {'password': new_password}
        )
        if not result['success']:
            logger.error(f"Error updating password for user {user['id']}: {result['error']}")
            return {
                'success': False,
                'error': 'Failed to update password'
            }

        audit.log_user_action(action="password_change", user_id=user['id'])
        return {
            'success': True,
            'message': 'Password updated successfully'
        }

    @staticmethod
    async def change_email(user: dict, new_email: str) -> Dict:
        """Start an email change; the backend sends a confirmation email"""
        result = await supabase_client.update_user(
            user['access_token'], user['refresh_token'], {'email': new_email}
        )
        if not result['success']:
            logger.error(f"Error updating email for user {user['id']}: {result['error']}")
            return {
                'success': False,
                'error': 'Failed to update email'
            }

        get_audit_logger().log_user_action(
            action="email_change", user_id=user['id'], details={'new_email': new_email}
        )
        return {
            'success': True,
            'message': 'Email update initiated. Please check your email to confirm the change.'
        }

    @staticmethod
    async def delete_account(user: dict, password: str) -> Dict:
        """
        Permanently delete the user's account

        The password is re-verified, then the user's rows are removed and the
        auth user is deleted through the admin client.
        """
        audit = get_audit_logger()

        if not await AuthService.verify_password(user, password):
            audit.log_user_action(action="account_delete", user_id=user['id'], success=False)
            return {
                'success': False,
                'error': 'Password is incorrect'
            }

        data_result = await UserService.delete_user_data(user['id'])
        if not data_result['success']:
            return {
                'success': False,
                'error': 'Failed to delete account'
            }

        delete_result = await supabase_client.delete_user(user['id'])
        if not delete_result['success']:
            return {
                'success': False,
                'error': 'Failed to delete account'
            }

        audit.log_user_action(action="account_delete", user_id=user['id'])
        return {'success': True}
