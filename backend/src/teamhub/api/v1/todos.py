"""Team todo endpoints."""

from fastapi import APIRouter
from pydantic import BaseModel, Field

from teamhub.api.dependencies import Container, ContainerDep, UserIdDep
from teamhub.todos.models import Todo

router = APIRouter(tags=["todo"])


class TodoRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)


def _todo_view(todo: Todo) -> dict:
    return {"id": todo.id, "ownerId": todo.owner_id, "title": todo.title}


@router.post("/{team_id}/todo")
async def create_todo(
    team_id: str,
    request: TodoRequest,
    user_id: str = UserIdDep,
    container: Container = ContainerDep,
):
    todo = container.todo_service.create(user_id, team_id, request.title)
    return _todo_view(todo)


@router.get("/{team_id}/todo")
async def list_todos(
    team_id: str,
    user_id: str = UserIdDep,
    container: Container = ContainerDep,
):
    todos = container.todo_service.list_todos(user_id, team_id)
    return {"list": [_todo_view(todo) for todo in todos]}


@router.get("/{team_id}/todo/{todo_id}")
async def get_todo(
    team_id: str,
    todo_id: str,
    user_id: str = UserIdDep,
    container: Container = ContainerDep,
):
    todo = container.todo_service.get(user_id, team_id, todo_id)
    return _todo_view(todo)


@router.put("/{team_id}/todo/{todo_id}")
async def update_todo(
    team_id: str,
    todo_id: str,
    request: TodoRequest,
    user_id: str = UserIdDep,
    container: Container = ContainerDep,
):
    todo = container.todo_service.update_title(user_id, team_id, todo_id, request.title)
    return _todo_view(todo)


@router.delete("/{team_id}/todo/{todo_id}")
async def delete_todo(
    team_id: str,
    todo_id: str,
    user_id: str = UserIdDep,
    container: Container = ContainerDep,
):
    container.todo_service.delete(user_id, team_id, todo_id)
    return {"success": True}
