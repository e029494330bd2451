"""
Supabase Client Configuration
Authentication and table access for the web service
"""

import asyncio
import logging
from typing import Any, Dict, Optional

from supabase import create_client, Client, ClientOptions

from app.config import settings

logger = logging.getLogger(__name__)


class SupabaseUnavailable(Exception):
    """Raised when the backend is not configured"""


def _session_payload(session) -> Optional[Dict[str, Any]]:
    if session is None:
        return None
    return {
        "access_token": session.access_token,
        "refresh_token": session.refresh_token,
        "expires_at": session.expires_at
    }


def _user_payload(user) -> Optional[Dict[str, Any]]:
    if user is None:
        return None
    return {
        "id": user.id,
        "email": user.email,
        "email_confirmed": user.email_confirmed_at is not None,
        "metadata": user.user_metadata or {}
    }


class SupabaseClient:
    """
    Supabase client wrapper

    A fresh client is built per call so that auth state from one request never
    leaks into another: anonymous clients for sign-in/sign-up, session-scoped
    clients for row-level-secured table access, and an admin client (service
    role key) for user deletion.
    """

    def __init__(self, url: Optional[str] = None, key: Optional[str] = None,
                 service_key: Optional[str] = None):
        self.url: str = settings.supabase_url if url is None else url
        self.key: str = settings.supabase_anon_key if key is None else key
        self.service_key: str = settings.supabase_service_role_key if service_key is None else service_key

        if not self.is_available():
            logger.warning("Supabase credentials not found in environment")

    def is_available(self) -> bool:
        """Check if Supabase is configured"""
        return bool(self.url and self.key)

    def _options(self) -> ClientOptions:
        return ClientOptions(auto_refresh_token=False, persist_session=False)

    def anon_client(self) -> Client:
        """Client with the public anon key and no session"""
        if not self.is_available():
            raise SupabaseUnavailable("Supabase client not available")
        return create_client(self.url, self.key, options=self._options())

    def session_client(self, access_token: str) -> Client:
        """Client whose table requests run as the signed-in user"""
        client = self.anon_client()
        client.postgrest.auth(access_token)
        return client

    def admin_client(self) -> Client:
        """
        Client with admin privileges using the service role key.
        Only for server-side operations that need elevated permissions.
        """
        if not self.url or not self.service_key:
            raise SupabaseUnavailable("Missing environment variables for Supabase admin client")
        return create_client(self.url, self.service_key, options=self._options())

    async def sign_up(self, email: str, password: str, metadata: dict = None) -> dict:
        """
        Sign up new user with Supabase Auth

        Args:
            email: User email
            password: User password
            metadata: Additional user metadata

        Returns:
            dict: Sign-up result; ``session`` is None while email confirmation is pending
        """
        client = self.anon_client()
        try:
            response = await asyncio.to_thread(client.auth.sign_up, {
                "email": email,
                "password": password,
                "options": {
                    "data": metadata or {}
                }
            })

            if response.user:
                logger.info(f"User signed up successfully: {email}")
                return {
                    "success": True,
                    "user": _user_payload(response.user),
                    "session": _session_payload(response.session)
                }

            logger.error(f"Failed to sign up user: {email}")
            return {
                "success": False,
                "error": "Failed to create account"
            }

        except Exception as e:
            logger.error(f"Supabase sign up error: {e}")
            return {
                "success": False,
                "error": str(e)
            }

    async def sign_in(self, email: str, password: str) -> dict:
        """
        Sign in user with Supabase Auth

        Args:
            email: User email
            password: User password

        Returns:
            dict: Sign-in result with session tokens
        """
        client = self.anon_client()
        try:
            response = await asyncio.to_thread(client.auth.sign_in_with_password, {
                "email": email,
                "password": password
            })

            if response.user and response.session:
                logger.info(f"User signed in successfully: {email}")
                return {
                    "success": True,
                    "user": _user_payload(response.user),
                    "session": _session_payload(response.session)
                }

            logger.error(f"Failed to sign in user: {email}")
            return {
                "success": False,
                "error": "Invalid login credentials"
            }

        except Exception as e:
            logger.error(f"Supabase sign in error: {e}")
            return {
                "success": False,
                "error": str(e)
            }

    async def get_user(self, access_token: str) -> Optional[dict]:
        """
        Resolve the user owning an access token

        Returns:
            dict or None: User info, None when the token is rejected
        """
        client = self.anon_client()
        try:
            response = await asyncio.to_thread(client.auth.get_user, access_token)
            if response and response.user:
                return _user_payload(response.user)
            return None

        except Exception as e:
            logger.info(f"Access token rejected: {e}")
            return None

    async def refresh_session(self, refresh_token: str) -> dict:
        """
        Refresh user session using refresh token

        Args:
            refresh_token: Refresh token

        Returns:
            dict: New session tokens
        """
        client = self.anon_client()
        try:
            response = await asyncio.to_thread(client.auth.refresh_session, refresh_token)

            if response.session:
                return {
                    "success": True,
                    "user": _user_payload(response.user),
                    "session": _session_payload(response.session)
                }
            return {
                "success": False,
                "error": "Failed to refresh session"
            }

        except Exception as e:
            logger.info(f"Session refresh error: {e}")
            return {
                "success": False,
                "error": str(e)
            }

    async def sign_out(self, access_token: str, refresh_token: str) -> dict:
        """Invalidate the user's session on the backend"""
        client = self.anon_client()
        try:
            await asyncio.to_thread(client.auth.set_session, access_token, refresh_token)
            await asyncio.to_thread(client.auth.sign_out)
            return {"success": True}

        except Exception as e:
            logger.error(f"Supabase sign out error: {e}")
            return {
                "success": False,
                "error": str(e)
            }

    async def update_user(self, access_token: str, refresh_token: str, attributes: dict) -> dict:
        """
        Update auth attributes (email, password) of the signed-in user

        Args:
            access_token: User access token
            refresh_token: User refresh token
            attributes: Attributes accepted by the backend's update user call

        Returns:
            dict: Update result
        """
        client = self.anon_client()
        try:
            await asyncio.to_thread(client.auth.set_session, access_token, refresh_token)
            response = await asyncio.to_thread(client.auth.update_user, attributes)
            return {
                "success": True,
                "user": _user_payload(response.user) if response else None
            }

        except Exception as e:
            logger.error(f"Supabase update user error: {e}")
            return {
                "success": False,
                "error": str(e)
            }

    async def delete_user(self, user_id: str) -> dict:
        """Delete a user with the admin client"""
        try:
            client = self.admin_client()
            await asyncio.to_thread(client.auth.admin.delete_user, user_id)
            logger.info(f"User deleted: {user_id}")
            return {"success": True}

        except Exception as e:
            logger.error(f"Supabase delete user error: {e}")
            return {
                "success": False,
                "error": str(e)
            }

    def table(self, access_token: str, name: str):
        """Query builder for a table, scoped to the user's row-level permissions"""
        return self.session_client(access_token).table(name)

    def admin_table(self, name: str):
        """Query builder for a table using the service role key"""
        return self.admin_client().table(name)

    async def execute(self, query):
        """Run a built query off the event loop"""
        return await asyncio.to_thread(query.execute)


# Global Supabase client instance
supabase_client = SupabaseClient()
