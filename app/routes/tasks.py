"""
Task Routes
Per-user task list with create, edit and delete forms
"""

import logging
from typing import Dict, Optional
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import RedirectResponse

from app.services.task_service import TaskService
from app.utils.csrf import require_csrf
from app.utils.dependencies import CurrentUser
from app.utils.templating import render
from shared.schemas import (
    TaskCreateSchema, TaskUpdateSchema, TaskStatus, TaskPriority,
    validate_form_data, FORM_ERROR_KEY
)

logger = logging.getLogger(__name__)

router = APIRouter()

TASKS_URL = "/secure/tasks"

TASK_FIELDS = ("title", "description", "status", "priority", "due_date")


def _choices() -> dict:
    return {
        "statuses": list(TaskStatus),
        "priorities": list(TaskPriority)
    }


def _submitted(form) -> Dict[str, str]:
    return {name: form.get(name, "") for name in TASK_FIELDS}


async def _render_tasks(
    request: Request,
    user: dict,
    status_code: int = 200,
    errors: Optional[Dict[str, str]] = None,
    form: Optional[Dict[str, str]] = None
):
    tasks = await TaskService.list_tasks(user)
    return render(request, "secure/tasks.html", {
        "user": user,
        "tasks": tasks,
        "errors": errors or {},
        "form": form or {},
        "load_error": request.query_params.get("error"),
        **_choices()
    }, status_code=status_code)


@router.get("")
async def tasks_page(request: Request, user: CurrentUser):
    """List the user's tasks"""
    return await _render_tasks(request, user)


@router.post("", dependencies=[Depends(require_csrf)])
async def create_task(request: Request, user: CurrentUser):
    """Create a task from the new-task form"""
    form = await request.form()
    task_data, errors = validate_form_data(TaskCreateSchema, form)
    if errors:
        return await _render_tasks(request, user, 400, errors, _submitted(form))

    task = await TaskService.create_task(user, task_data)
    if task is None:
        return await _render_tasks(
            request, user, 502, {FORM_ERROR_KEY: "Failed to create task"}, _submitted(form)
        )

    return RedirectResponse(TASKS_URL, status_code=303)


@router.get("/{task_id}")
async def edit_task_page(request: Request, task_id: str, user: CurrentUser):
    """Render the edit form for one task"""
    task = await TaskService.get_task(user, task_id)
    if task is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")

    return render(request, "secure/task_edit.html", {
        "user": user,
        "task": task,
        "errors": {},
        **_choices()
    })


@router.post("/{task_id}", dependencies=[Depends(require_csrf)])
async def update_task(request: Request, task_id: str, user: CurrentUser):
    """Apply the edit form, or a single-field change from the list"""
    form = await request.form()
    task_data, errors = validate_form_data(TaskUpdateSchema, form)

    if not errors:
        updated = await TaskService.update_task(user, task_id, task_data)
        if updated is not None:
            return RedirectResponse(TASKS_URL, status_code=303)
        errors = {FORM_ERROR_KEY: "Failed to update task"}

    task = await TaskService.get_task(user, task_id)
    if task is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")

    return render(request, "secure/task_edit.html", {
        "user": user,
        "task": task,
        "errors": errors,
        **_choices()
    }, status_code=400 if FORM_ERROR_KEY not in errors else 502)


@router.post("/{task_id}/delete", dependencies=[Depends(require_csrf)])
async def delete_task(task_id: str, user: CurrentUser):
    """Delete a task"""
    if not await TaskService.delete_task(user, task_id):
        return RedirectResponse(f"{TASKS_URL}?error=delete_failed", status_code=303)
    return RedirectResponse(TASKS_URL, status_code=303)
