# logit/security.py
"""Password hashing and the bearer tokens that scope every workout query to one user."""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from passlib.context import CryptContext
from jose import jwt
from jose.exceptions import JWTError
from logit.settings import get_settings

pwd_ctx = CryptContext(schemes=["bcrypt"], deprecated="auto")

def hash_password(p: str) -> str:
    return pwd_ctx.hash(p)

def verify_password(plain: str, hashed: str) -> bool:
    # accounts created before a password was set carry an empty hash
    if not hashed:
        return False
    return pwd_ctx.verify(plain, hashed)

def create_access_token(
    sub: str,
    *,
    expires_minutes: Optional[int] = None,
    extra: Optional[Dict[str, Any]] = None,
) -> str:
    s = get_settings()
    issued = datetime.now(timezone.utc)
    lifetime = timedelta(minutes=s.ACCESS_TOKEN_EXPIRE_MINUTES if expires_minutes is None else expires_minutes)
    claims: Dict[str, Any] = {**(extra or {}), "sub": sub, "iat": int(issued.timestamp())}
    claims["exp"] = int((issued + lifetime).timestamp())
    return jwt.encode(claims, s.SECRET_KEY, algorithm=s.ALGORITHM)

def issue_login_token(user_id: int, email: str) -> str:
    return create_access_token(str(user_id), extra={"email": email})

def decode_token(token: str) -> Dict[str, Any]:
    """Signature and expiry are both enforced; expired tokens raise ExpiredSignatureError."""
    s = get_settings()
    claims = jwt.decode(token, s.SECRET_KEY, algorithms=[s.ALGORITHM], options={"verify_exp": True})
    if "exp" not in claims:
        raise JWTError("Missing exp")
    return claims

def token_user_id(token: str) -> int:
    sub = decode_token(token).get("sub")
    if sub is None or not str(sub).isdigit():
        raise JWTError("Token subject is not a user id")
    return int(sub)
