"""
JWT Service for admin access token generation and validation
"""
import jwt
import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, Any

from app.core.config import settings
from atams.exceptions import UnauthorizedException

ISSUER = "student-attendance"
AUDIENCE = "admin"


class JwtService:
    def __init__(
        self,
        secret: str = None,
        algorithm: str = None,
        expire_minutes: int = None
    ) -> None:
        self.secret = secret or settings.ADMIN_JWT_SECRET
        self.algorithm = algorithm or settings.ADMIN_JWT_ALG
        self.expire_minutes = expire_minutes if expire_minutes is not None else settings.ADMIN_TOKEN_EXPIRE_MINUTES

    def generate_admin_token(self, username: str) -> Dict[str, Any]:
        """
        Generate signed admin access token

        Returns:
            dict: {token: str, expires_in: int}
        """
        now = datetime.now(timezone.utc)
        expires_in = self.expire_minutes * 60
        exp = now + timedelta(seconds=expires_in)

        payload = {
            "iss": ISSUER,
            "aud": AUDIENCE,
            "sub": username,
            "jti": str(uuid.uuid4()),
            "iat": int(now.timestamp()),
            "exp": int(exp.timestamp()),
        }

        token = jwt.encode(payload, self.secret, algorithm=self.algorithm)

        return {
            "token": token,
            "expires_in": expires_in
        }

    def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Verify and decode admin access token

        Args:
            token: JWT string from the Authorization header

        Returns:
            dict: Decoded payload

        Raises:
            UnauthorizedException: If token is invalid or expired
        """
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                audience=AUDIENCE,
                issuer=ISSUER,
                options={"require": ["exp", "iat", "sub"]}
            )
        except jwt.ExpiredSignatureError:
            raise UnauthorizedException("Token expired")
        except jwt.InvalidTokenError as e:
            raise UnauthorizedException(f"Invalid token: {str(e)}")

        return payload
