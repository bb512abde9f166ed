# app/core/security.py
from passlib.hash import sha256_crypt


def hash_password(password: str) -> str:
    return sha256_crypt.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    # 손상된 해시 문자열이면 passlib이 ValueError
    try:
        return sha256_crypt.verify(password, hashed)
    except ValueError:
        return False
