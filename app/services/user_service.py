"""
User Service
Profile records kept alongside the backend's auth users
"""

import logging
from datetime import datetime, timezone
from typing import Dict, Optional

from app.utils.supabase_client import supabase_client
from shared.schemas.user import ProfileSchema, ProfileUpdateSchema

logger = logging.getLogger(__name__)

PROFILES_TABLE = "profiles"
TASKS_TABLE = "tasks"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class UserService:
    """Profile management service"""

    @staticmethod
    async def get_profile(user: dict) -> Optional[ProfileSchema]:
        """
        Get the profile of the signed-in user

        Args:
            user: Current user from the session

        Returns:
            ProfileSchema or None when no profile row exists
        """
        try:
            query = (
                supabase_client.table(user['access_token'], PROFILES_TABLE)
                .select("*")
                .eq("id", user['id'])
                .limit(1)
            )
            response = await supabase_client.execute(query)
            if not response.data:
                return None
            return ProfileSchema.model_validate(response.data[0])

        except Exception as e:
            logger.error(f"Error fetching profile for user {user['id']}: {e}")
            return None

    @staticmethod
    async def create_profile(user_id: str, first_name: str, last_name: str,
                             access_token: Optional[str] = None) -> Dict:
        """
        Create the profile row for a newly signed-up user

        Uses the user's own session when the backend returned one, otherwise
        the admin client (email confirmation still pending).
        """
        record = {
            'id': user_id,
            'first_name': first_name,
            'last_name': last_name,
            'created_at': _now(),
            'updated_at': _now(),
        }
        try:
            if access_token:
                table = supabase_client.table(access_token, PROFILES_TABLE)
            else:
                table = supabase_client.admin_table(PROFILES_TABLE)
            await supabase_client.execute(table.insert(record))
            return {'success': True}

        except Exception as e:
            logger.error(f"Error creating profile for user {user_id}: {e}")
            return {
                'success': False,
                'error': 'Failed to create profile'
            }

    @staticmethod
    async def update_profile(user: dict, profile_data: ProfileUpdateSchema) -> Dict:
        """Update first and last name of the signed-in user"""
        try:
            query = (
                supabase_client.table(user['access_token'], PROFILES_TABLE)
                .update({
                    'first_name': profile_data.first_name,
                    'last_name': profile_data.last_name,
                    'updated_at': _now(),
                })
                .eq("id", user['id'])
            )
            await supabase_client.execute(query)
            logger.info(f"Profile updated for user {user['id']}")
            return {'success': True}

        except Exception as e:
            logger.error(f"Error updating profile for user {user['id']}: {e}")
            return {
                'success': False,
                'error': 'Failed to update profile'
            }

    @staticmethod
    async def delete_user_data(user_id: str) -> Dict:
        """Remove every row owned by a user (tasks, then profile)"""
        try:
            await supabase_client.execute(
                supabase_client.admin_table(TASKS_TABLE).delete().eq("user_id", user_id)
            )
            await supabase_client.execute(
                supabase_client.admin_table(PROFILES_TABLE).delete().eq("id", user_id)
            )
            logger.info(f"Data removed for user {user_id}")
            return {'success': True}

        except Exception as e:
            logger.error(f"Error removing data for user {user_id}: {e}")
            return {
                'success': False,
                'error': 'Failed to remove account data'
            }
