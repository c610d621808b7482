from typing import Any

from ..domain.entities import MAX_ID, Papel, User
from ..domain.errors import conflict, not_found, validation_error
from .dto import CreateUserInput


class IUserRepository:
    def find_all(self, papel: str | None = None) -> list[User]: ...
    def get_by_id(self, user_id: int) -> User | None: ...
    def get_by_email(self, email: str) -> User | None: ...
    def create(self, nome: str, email: str, senha: str, papel: str, foto: str | None) -> User: ...
    def update(self, user_id: int, changes: dict[str, Any]) -> User: ...
    def delete(self, user_id: int) -> None: ...


def _check_id(user_id: Any) -> int:
    # маршрут уже проверил id, но сервис может вызываться и в обход HTTP
    if isinstance(user_id, bool) or not isinstance(user_id, int) or not 0 < user_id <= MAX_ID:
        message = "invalid id, must be a positive number"
        raise validation_error([{"field": "id", "message": message}], message=message)
    return user_id


class UserService:
    def __init__(self, repo: IUserRepository):
        self.repo = repo

    def list_users(self, papel: str | None = None) -> list[User]:
        return self.repo.find_all(papel=papel)

    def get_user(self, user_id: int) -> User:
        user_id = _check_id(user_id)
        user = self.repo.get_by_id(user_id)
        if user is None:
            raise not_found("User", f"User with id {user_id} not found")
        return user

    def email_exists(self, email: str) -> bool:
        return self.repo.get_by_email(email) is not None

    def create_user(self, data: CreateUserInput) -> User:
        if self.email_exists(data.email):
            raise conflict("email", "email already registered")
        # TODO: хешировать senha, когда появится аутентификация
        return self.repo.create(
            nome=data.nome,
            email=data.email,
            senha=data.senha,
            papel=data.papel or Papel.PROFESSOR.value,
            foto=data.foto or None,
        )

    def update_user(self, user_id: int, data: dict[str, Any]) -> User:
        """Partial update: only keys present in ``data`` are written.

        ``foto: None`` clears the photo.
        """
        user_id = _check_id(user_id)
        current = self.repo.get_by_id(user_id)
        if current is None:
            raise not_found("User", f"User with id {user_id} not found")

        email = data.get("email")
        if email and email != current.email and self.email_exists(email):
            raise conflict("email", "email already in use by another user")

        return self.repo.update(user_id, dict(data))

    def delete_user(self, user_id: int) -> User:
        user_id = _check_id(user_id)
        snapshot = self.repo.get_by_id(user_id)
        if snapshot is None:
            raise not_found("User", f"User with id {user_id} not found")
        self.repo.delete(user_id)
        return snapshot
