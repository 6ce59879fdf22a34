"""
API Dependencies

Process-wide collaborators shared by the endpoint modules, plus the admin
bearer-token guard.
"""
from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.core.config import settings
from app.services.auth_service import AuthService, SettingsAdminVerifier
from app.services.event_bus import EventBus
from app.services.recent_scans import RecentScanCache
from atams.exceptions import UnauthorizedException

# JWT Bearer token security
security = HTTPBearer(auto_error=False)

event_bus = EventBus(history_size=settings.EVENT_HISTORY_SIZE)
recent_scans = RecentScanCache(ttl_seconds=settings.RECENT_SCAN_TTL_SECONDS)
admin_verifier = SettingsAdminVerifier()
auth_service = AuthService(verifier=admin_verifier)


def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> dict:
    """
    Require a valid admin access token

    Raises:
        UnauthorizedException: Missing, malformed or expired token
    """
    if not credentials or credentials.scheme.lower() != "bearer":
        raise UnauthorizedException("Not authenticated")
    return auth_service.authenticate(credentials.credentials)
