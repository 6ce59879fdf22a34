"""
Auth Service - Admin credential verification and token issue
"""
import hmac
from typing import Protocol

from app.core.config import settings
from app.schemas.auth import LoginRequest, TokenResponse
from app.services.jwt_service import JwtService
from atams.exceptions import UnauthorizedException
from atams.logging import get_logger

logger = get_logger(__name__)


class AdminVerifier(Protocol):
    def verify(self, username: str, password: str) -> bool:
        ...


class SettingsAdminVerifier:
    """Single admin account configured through ADMIN_USERNAME / ADMIN_PASSWORD"""

    def __init__(self, username: str = None, password: str = None) -> None:
        self.username = username or settings.ADMIN_USERNAME
        self.password = password or settings.ADMIN_PASSWORD

    def verify(self, username: str, password: str) -> bool:
        # Compare both fields so timing does not reveal which one was wrong
        username_ok = hmac.compare_digest(username.encode("utf-8"), self.username.encode("utf-8"))
        password_ok = hmac.compare_digest(password.encode("utf-8"), self.password.encode("utf-8"))
        return username_ok and password_ok


class AuthService:
    def __init__(self, verifier: AdminVerifier = None, jwt_service: JwtService = None) -> None:
        self.verifier = verifier or SettingsAdminVerifier()
        self.jwt_service = jwt_service or JwtService()

    def login(self, request: LoginRequest) -> TokenResponse:
        """
        Exchange admin credentials for an access token

        Raises:
            UnauthorizedException: If the credentials do not match
        """
        if not self.verifier.verify(request.username, request.password):
            logger.warning(
                "Admin login rejected",
                extra={'extra_data': {'username': request.username}}
            )
            raise UnauthorizedException("Invalid username or password")

        token_data = self.jwt_service.generate_admin_token(request.username)

        logger.info("Admin login", extra={'extra_data': {'username': request.username}})

        return TokenResponse(
            access_token=token_data["token"],
            expires_in=token_data["expires_in"]
        )

    def authenticate(self, token: str) -> dict:
        """Decoded token payload for a valid admin token"""
        payload = self.jwt_service.verify_token(token)
        return {"username": payload["sub"], "jti": payload.get("jti")}
