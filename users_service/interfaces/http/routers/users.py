from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ....application.dto import CreateUserInput
from ....application.user_service import UserService
from ....infrastructure.db import get_db
from ....infrastructure.repositories import UserRepository
from ..schemas import (
    UserCreate, UserIdParams, UserListQuery, UserListResp, UserMessageResp, UserResp, UserUpdate,
)
from ..validation import body, path_params, query_params

router = APIRouter(prefix="/users", tags=["users"])


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(repo=UserRepository(db))


@router.get("", response_model=UserListResp)
def list_users(query: UserListQuery = Depends(query_params(UserListQuery)),
               service: UserService = Depends(get_user_service)):
    papel = query.papel.value if query.papel else None
    users = service.list_users(papel=papel)
    return {"success": True, "data": users, "total": len(users)}


@router.get("/{id}", response_model=UserResp)
def get_user(params: UserIdParams = Depends(path_params(UserIdParams)),
             service: UserService = Depends(get_user_service)):
    return {"success": True, "data": service.get_user(params.id)}


@router.post("", response_model=UserMessageResp, status_code=status.HTTP_201_CREATED)
def create_user(payload: UserCreate = Depends(body(UserCreate)),
                service: UserService = Depends(get_user_service)):
    # mode="json": AnyUrl -> str, Papel -> str
    user = service.create_user(CreateUserInput(**payload.model_dump(mode="json")))
    return {"success": True, "message": "user created successfully", "data": user}


@router.put("/{id}", response_model=UserMessageResp)
def update_user(params: UserIdParams = Depends(path_params(UserIdParams)),
                payload: UserUpdate = Depends(body(UserUpdate)),
                service: UserService = Depends(get_user_service)):
    changes = payload.model_dump(mode="json", exclude_unset=True)
    user = service.update_user(params.id, changes)
    return {"success": True, "message": "user updated successfully", "data": user}


@router.delete("/{id}", response_model=UserMessageResp)
def delete_user(params: UserIdParams = Depends(path_params(UserIdParams)),
                service: UserService = Depends(get_user_service)):
    user = service.delete_user(params.id)
    return {"success": True, "message": "user removed successfully", "data": user}
