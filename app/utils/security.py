import secrets
from argon2 import PasswordHasher
from argon2.exceptions import VerificationError, InvalidHashError

ph = PasswordHasher(time_cost=3, memory_cost=65536, parallelism=4)


def hash_credential(credential: str) -> str:
    return ph.hash(credential)


def verify_credential(stored_hash: str, credential: str) -> bool:
    try:
        return ph.verify(stored_hash, credential)
    except (VerificationError, InvalidHashError):
        return False


def generate_token() -> str:
    return secrets.token_hex(32)
