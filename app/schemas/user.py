from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    credential: str = Field(min_length=8)


class UserResponse(BaseModel):
    id: str
    name: str
    email: str
