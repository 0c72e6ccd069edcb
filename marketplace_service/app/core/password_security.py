from passlib.context import CryptContext
from passlib.exc import UnknownHashError

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class PasswordSecurity:
    """Salted bcrypt hashing for admin and vendor passwords"""

    @staticmethod
    def hash_password(plain_password: str) -> str:
        return pwd_context.hash(plain_password)

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """Check a password; a malformed stored hash never verifies"""
        try:
            return pwd_context.verify(plain_password, hashed_password)
        except (UnknownHashError, ValueError):
            return False
