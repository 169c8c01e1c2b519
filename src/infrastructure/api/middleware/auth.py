"""Authentication dependency for HTTP Basic credentials.

Every API router except health and metrics depends on verify_basic_auth.
The expected credentials are stored on the application state at startup.
"""

import hashlib
import secrets
from dataclasses import dataclass

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

security = HTTPBasic(auto_error=False)


@dataclass(frozen=True)
class BasicAuthCredentials:
    """Expected HTTP Basic credentials."""

    username: str
    password: str


def _digest(value: str) -> bytes:
    # Hashing first makes the comparison independent of the input length
    return hashlib.sha256(value.encode("utf-8")).digest()


def credentials_match(
    provided: HTTPBasicCredentials, expected: BasicAuthCredentials
) -> bool:
    """Compare provided credentials to the expected ones in constant time."""
    user_ok = secrets.compare_digest(
        _digest(provided.username), _digest(expected.username)
    )
    pass_ok = secrets.compare_digest(
        _digest(provided.password), _digest(expected.password)
    )
    return user_ok and pass_ok


async def verify_basic_auth(
    request: Request,
    credentials: HTTPBasicCredentials | None = Depends(security),
) -> str:
    """Verify HTTP Basic credentials.

    Args:
        request: FastAPI request object
        credentials: Credentials parsed from the Authorization header

    Returns:
        Authenticated username

    Raises:
        HTTPException: 401 if credentials are missing or wrong
    """
    expected: BasicAuthCredentials = request.app.state.auth_credentials

    if credentials is None or not credentials_match(credentials, expected):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": 'Basic realm="sli-reporting"'},
        )

    request.state.client_id = credentials.username
    return credentials.username
