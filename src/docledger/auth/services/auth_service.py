from datetime import datetime, timedelta
from typing import Optional

from jose import JWTError, jwt

from docledger.config import Settings, get_settings


class AuthService:
    """Bearer tokens whose ``sub`` claim is the caller's account identity.

    Tokens are minted by whoever shares ``SECRET_KEY`` with the ledger; the
    ledger itself only checks them.
    """

    @staticmethod
    def create_access_token(subject: str, expires_delta: Optional[timedelta] = None,
                            settings: Optional[Settings] = None) -> str:
        """Creates a JWT for the given account"""
        settings = settings or get_settings()
        if expires_delta:
            expire = datetime.utcnow() + expires_delta
        else:
            expire = datetime.utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        to_encode = {"sub": subject, "exp": expire}
        return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)

    @staticmethod
    def verify_token(token: str, settings: Optional[Settings] = None) -> Optional[str]:
        """Returns the account in the token, or None if the token is invalid or expired"""
        settings = settings or get_settings()
        try:
            payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        except JWTError:
            return None
        account: Optional[str] = payload.get("sub")
        if not account:
            return None
        return account
