from fastapi import APIRouter, Depends, HTTPException, status, Header
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session
from ..db.session import get_db
from ..db import models
from ..security.principal import Principal
from ..services.auth_service import AuthService, create_access_token, decode_access_token

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/token")
async def login_for_access_token(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    user = AuthService(db).authenticate_user(form_data.username, form_data.password)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="invalid credentials")
    token = create_access_token(user.id)
    return {"access_token": token, "token_type": "bearer"}


def get_current_user_optional(db: Session = Depends(get_db), authorization: str | None = Header(None)) -> models.User | None:
    """Best-effort user retrieval; returns None if no valid bearer token."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        return None
    sub = decode_access_token(token)
    if not sub:
        return None
    return db.query(models.User).filter(models.User.id == sub).first()


def get_current_principal(user: models.User | None = Depends(get_current_user_optional)) -> Principal:
    """Principal for the request; anonymous unless a valid bearer token was sent."""
    if user is None:
        return Principal.anonymous()
    return Principal.for_user(user)
