"""Signup and signin endpoints."""
from fastapi import APIRouter, Depends, HTTPException, status

from api.dependencies import get_auth_service
from schemas.auth import SigninRequest, SignupRequest, SignupResponse, TokenResponse
from schemas.user import UserResponse
from services.auth_service import AuthError, AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


# Client-facing status and message per failure kind. Messages never say which
# part of the credentials was wrong.
AUTH_ERROR_RESPONSES: dict[AuthError, tuple[int, str]] = {
    AuthError.CREDENTIALS_TAKEN: (status.HTTP_403_FORBIDDEN, "Credentials taken"),
    AuthError.INVALID_CREDENTIALS: (status.HTTP_401_UNAUTHORIZED, "Invalid credentials"),
}


def auth_error_to_http(error: AuthError) -> HTTPException:
    """Translate an auth failure kind into the HTTP error returned to the client."""
    status_code, detail = AUTH_ERROR_RESPONSES[error]
    headers = (
        {"WWW-Authenticate": "Bearer"}
        if status_code == status.HTTP_401_UNAUTHORIZED
        else None
    )
    return HTTPException(status_code=status_code, detail=detail, headers=headers)


@router.post("/signup", response_model=SignupResponse, status_code=201)
async def signup(
    data: SignupRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> SignupResponse:
    """
    Register a new account.

    Returns the created user (never any password material) and an access token.
    Responds 403 if the email is already registered.
    """
    result = await auth_service.signup(data.email, data.password)
    if isinstance(result, AuthError):
        raise auth_error_to_http(result)

    user = UserResponse.model_validate(result.user)
    return SignupResponse(**user.model_dump(), access_token=result.access_token)


@router.post("/signin", response_model=TokenResponse, status_code=201)
async def signin(
    data: SigninRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    """
    Exchange email and password for an access token.

    Unknown email and wrong password produce the same 401 response.
    """
    result = await auth_service.signin(data.email, data.password)
    if isinstance(result, AuthError):
        raise auth_error_to_http(result)

    return TokenResponse(
        access_token=result.access_token,
        expires_in=int(auth_service.signer.expires_in.total_seconds()),
    )
