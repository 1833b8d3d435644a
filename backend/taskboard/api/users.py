from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session
from ..db.session import get_db
from ..errors import NotFoundError
from ..services.user_service import UserService, UserNotFound

router = APIRouter(prefix="/users", tags=["users"])

class UserCreate(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

class UserOut(BaseModel):
    id: str
    username: str

@router.post("", response_model=UserOut, status_code=201)
def create_user(body: UserCreate, db: Session = Depends(get_db)):
    user = UserService(db).create(body.username, body.password)
    return UserOut(id=user.id, username=user.username)

@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: str, db: Session = Depends(get_db)):
    try:
        user = UserService(db).get_user(user_id)
    except UserNotFound:
        raise NotFoundError("USER_NOT_FOUND", "User not found")
    return UserOut(id=user.id, username=user.username)
