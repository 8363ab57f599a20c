from __future__ import annotations
import secrets, string
from datetime import datetime, timedelta, timezone
from typing import Any
import jwt
from passlib.context import CryptContext
from scavenger.config import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.bcrypt_rounds)

JWT_ALG = "HS256"
PASSWORD_ALPHABET = string.ascii_lowercase + string.digits

def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)

def generate_password(length: int = 8) -> str:
    """Readable random password for generated team credentials."""
    return "".join(secrets.choice(PASSWORD_ALPHABET) for _ in range(length))

def make_access_token(team_id: str, team_name: str, role: str) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": team_id,
        "name": team_name,
        "role": role,
        "type": "access",
        "iat": now.timestamp(),
        "exp": int((now + timedelta(minutes=settings.access_ttl_min)).timestamp()),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=JWT_ALG)

def decode_token(token: str) -> dict[str, Any]:
    return jwt.decode(token, settings.jwt_secret, algorithms=[JWT_ALG])
