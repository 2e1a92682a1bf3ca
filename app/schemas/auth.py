from pydantic import BaseModel

from app.schemas.user import UserResponse


class LoginRequest(BaseModel):
    email: str
    credential: str


class LoginResponse(BaseModel):
    token: str
    expires_in_seconds: int
    user: UserResponse
