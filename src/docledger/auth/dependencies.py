from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from docledger.auth.services.auth_service import AuthService

security = HTTPBearer(auto_error=False)


def get_current_account(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> str:
    """Dependency that resolves the authenticated account identity"""
    account = None
    if credentials is not None:
        account = AuthService.verify_token(credentials.credentials, request.app.state.settings)
    if account is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return account
