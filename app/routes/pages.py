"""
Page Routes
Home page and the signed-in dashboard
"""

from fastapi import APIRouter, Request

from app.services.task_service import TaskService
from app.services.user_service import UserService
from app.utils.dependencies import CurrentUser, OptionalUser
from app.utils.templating import render

router = APIRouter()

RECENT_TASKS = 5


@router.get("/")
async def home(request: Request, user: OptionalUser):
    """Landing page"""
    return render(request, "home.html", {"user": user})


@router.get("/secure/dashboard")
async def dashboard(request: Request, user: CurrentUser):
    """Greeting, task counts per status and the most recent tasks"""
    profile = await UserService.get_profile(user)
    tasks = await TaskService.list_tasks(user)
    return render(request, "secure/dashboard.html", {
        "user": user,
        "profile": profile,
        "counts": TaskService.count_by_status(tasks),
        "total": len(tasks),
        "recent_tasks": tasks[:RECENT_TASKS]
    })
