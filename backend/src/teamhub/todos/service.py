"""Team todo service."""

from teamhub.errors import UnknownTodo
from teamhub.logging_config import get_logger
from teamhub.storage.repo import TodoRepository
from teamhub.teams.models import Role
from teamhub.teams.service import TeamService
from teamhub.todos.models import Todo

logger = get_logger(__name__)

EDITOR_ROLES = (Role.OWNER, Role.ADMIN)


class TodoService:
    """CRUD for todos owned by a team.

    Any member can read; owners and admins can write.
    """

    def __init__(self, todo_repository: TodoRepository, team_service: TeamService):
        self.todo_repository = todo_repository
        self.team_service = team_service

    def create(self, user_id: str, team_id: str, title: str) -> Todo:
        self.team_service.required_auth(user_id, team_id, EDITOR_ROLES)

        todo = self.todo_repository.create(Todo(owner_id=team_id, title=title))

        logger.info("todo_created", team_id=team_id, todo_id=todo.id)
        return todo

    def list_todos(self, user_id: str, team_id: str) -> list[Todo]:
        self.team_service.required_auth(user_id, team_id)

        return self.todo_repository.find_all_by_team_id(team_id)

    def get(self, user_id: str, team_id: str, todo_id: str) -> Todo:
        self.team_service.required_auth(user_id, team_id)

        todo = self.todo_repository.find_by_keys(team_id, todo_id)

        if todo is None:
            raise UnknownTodo(f"Incorrect TodoID {todo_id}")

        return todo

    def update_title(self, user_id: str, team_id: str, todo_id: str, title: str) -> Todo:
        self.team_service.required_auth(user_id, team_id, EDITOR_ROLES)

        todo = self.todo_repository.update_title(team_id, todo_id, title)

        if todo is None:
            raise UnknownTodo(f"Incorrect TodoID {todo_id}")

        return todo

    def delete(self, user_id: str, team_id: str, todo_id: str) -> None:
        self.team_service.required_auth(user_id, team_id, EDITOR_ROLES)

        if self.todo_repository.delete_by_keys(team_id, todo_id) is None:
            raise UnknownTodo(f"Incorrect TodoID {todo_id}")

        logger.info("todo_deleted", team_id=team_id, todo_id=todo_id)
