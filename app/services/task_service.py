"""
Task Service
Per-user task CRUD over the tasks table
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from app.utils.supabase_client import supabase_client
from shared.schemas.task import TaskSchema, TaskCreateSchema, TaskUpdateSchema, TaskStatus

logger = logging.getLogger(__name__)

TASKS_TABLE = "tasks"


class TaskService:
    """Task management service"""

    @staticmethod
    async def list_tasks(user: dict) -> List[TaskSchema]:
        """Get all tasks for the current user, newest first"""
        try:
            query = (
                supabase_client.table(user['access_token'], TASKS_TABLE)
                .select("*")
                .eq("user_id", user['id'])
                .order("created_at", desc=True)
            )
            response = await supabase_client.execute(query)
            return [TaskSchema.model_validate(row) for row in response.data or []]

        except Exception as e:
            logger.error(f"Error fetching tasks: {e}")
            return []

    @staticmethod
    async def get_task(user: dict, task_id: str) -> Optional[TaskSchema]:
        """Get a single task by ID"""
        try:
            query = (
                supabase_client.table(user['access_token'], TASKS_TABLE)
                .select("*")
                .eq("id", task_id)
                .eq("user_id", user['id'])
                .limit(1)
            )
            response = await supabase_client.execute(query)
            if not response.data:
                return None
            return TaskSchema.model_validate(response.data[0])

        except Exception as e:
            logger.error(f"Error fetching task with ID {task_id}: {e}")
            return None

    @staticmethod
    async def create_task(user: dict, task_data: TaskCreateSchema) -> Optional[TaskSchema]:
        """Create a new task owned by the current user"""
        try:
            record = {**task_data.to_record(), 'user_id': user['id']}
            query = supabase_client.table(user['access_token'], TASKS_TABLE).insert(record)
            response = await supabase_client.execute(query)
            if not response.data:
                return None
            logger.info(f"Task created for user {user['id']}")
            return TaskSchema.model_validate(response.data[0])

        except Exception as e:
            logger.error(f"Error creating task: {e}")
            return None

    @staticmethod
    async def update_task(user: dict, task_id: str, task_data: TaskUpdateSchema) -> Optional[TaskSchema]:
        """Update an existing task"""
        record = task_data.to_record()
        record['updated_at'] = datetime.now(timezone.utc).isoformat()
        try:
            query = (
                supabase_client.table(user['access_token'], TASKS_TABLE)
                .update(record)
                .eq("id", task_id)
                .eq("user_id", user['id'])
            )
            response = await supabase_client.execute(query)
            if not response.data:
                return None
            return TaskSchema.model_validate(response.data[0])

        except Exception as e:
            logger.error(f"Error updating task with ID {task_id}: {e}")
            return None

    @staticmethod
    async def delete_task(user: dict, task_id: str) -> bool:
        """Delete a task"""
        try:
            query = (
                supabase_client.table(user['access_token'], TASKS_TABLE)
                .delete()
                .eq("id", task_id)
                .eq("user_id", user['id'])
            )
            await supabase_client.execute(query)
            return True

        except Exception as e:
            logger.error(f"Error deleting task with ID {task_id}: {e}")
            return False

    @staticmethod
    def count_by_status(tasks: List[TaskSchema]) -> Dict[str, int]:
        """Number of tasks per status, every status present"""
        counts = {status.value: 0 for status in TaskStatus}
        for task in tasks:
            counts[task.status.value] += 1
        return counts
