from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import require_session
from app.routers.users import user_to_response
from app.schemas.auth import LoginRequest, LoginResponse
from app.schemas.user import UserResponse
from app.services.auth_service import SessionContext, auth_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
async def login(req: LoginRequest, request: Request, db: Session = Depends(get_db)):
    client_host = request.client.host if request.client else "unknown"
    # Throttle by client host so guessing cannot be spread across accounts.
    result = auth_service.authenticate(db, req.email, req.credential, throttle_key=f"login:{client_host}")
    return LoginResponse(
        token=result["token"],
        expires_in_seconds=result["expires_in_seconds"],
        user=user_to_response(result["user"]),
    )


@router.post("/logout")
async def logout(context: SessionContext = Depends(require_session)):
    auth_service.logout(context.token)
    return {"message": "Signed out"}


@router.get("/me", response_model=UserResponse)
async def me(context: SessionContext = Depends(require_session), db: Session = Depends(get_db)):
    user = auth_service.current_user(db, context)
    if user is None:
        auth_service.logout(context.token)
        raise HTTPException(status_code=401, detail="Session user no longer exists")
    return user_to_response(user)
