from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import require_session
from app.models.user import User
from app.schemas.user import UserCreate, UserResponse
from app.services import user_service

router = APIRouter(prefix="/users", tags=["users"])


def user_to_response(user: User) -> UserResponse:
    return UserResponse(id=user.id, name=user.name, email=user.email)


@router.get("", response_model=list[UserResponse], dependencies=[Depends(require_session)])
async def list_users(db: Session = Depends(get_db)):
    return [user_to_response(u) for u in user_service.list_users(db)]


@router.post("", response_model=UserResponse, status_code=201)
async def register_user(req: UserCreate, db: Session = Depends(get_db)):
    user = user_service.create_user(db, req.name, req.email, req.credential)
    return user_to_response(user)
