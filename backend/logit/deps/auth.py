# logit/deps/auth.py
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from jose.exceptions import ExpiredSignatureError, JWTError

from logit.db import get_db
from logit.models import User
from logit.security import token_user_id

# Bearer token from POST /auth/login; missing tokens are reported by get_current_user
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)

def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )

def get_current_user(
    db: Session = Depends(get_db),
    token: str | None = Depends(oauth2_scheme),
) -> User:
    """Every workout query is scoped by the id of the user returned here."""
    if not token:
        raise _unauthorized("Not authenticated")
    try:
        user_id = token_user_id(token)
    except ExpiredSignatureError:
        raise _unauthorized("Token expired")
    except JWTError:
        raise _unauthorized("Not authenticated")

    user = db.get(User, user_id)
    if user is None:
        raise _unauthorized("Not authenticated")
    return user
