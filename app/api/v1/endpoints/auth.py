"""
Auth Endpoints - Admin login
"""
from fastapi import APIRouter, Depends, status

from app.schemas import LoginRequest, TokenResponse, DataResponse
from app.api.deps import auth_service, require_admin

router = APIRouter()


@router.post(
    "/login",
    response_model=DataResponse[TokenResponse],
    status_code=status.HTTP_200_OK
)
async def login(request: LoginRequest):
    """
    Exchange admin credentials for a bearer token

    **Response:**
    - access_token: send as "Authorization: Bearer <token>"
    - expires_in: seconds until the token expires

    **Errors:**
    - 401: Invalid username or password
    """
    token = auth_service.login(request)

    return DataResponse(
        success=True,
        message="Login successful",
        data=token
    )


@router.get("/me", status_code=status.HTTP_200_OK)
async def get_current_admin(current_admin: dict = Depends(require_admin)):
    """
    Identity behind the presented token

    **Authentication:**
    - Requires admin bearer token
    """
    return DataResponse(
        success=True,
        message="Token is valid",
        data={"username": current_admin["username"]}
    )
