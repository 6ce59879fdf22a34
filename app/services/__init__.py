from .event_bus import EventBus, EventType, Event
from .recent_scans import RecentScanCache
from .jwt_service import JwtService
from .auth_service import AuthService, AdminVerifier, SettingsAdminVerifier
from .student_service import StudentService
from .attendance_service import AttendanceService
from .cleanup_service import CleanupService

__all__ = [
    "EventBus",
    "EventType",
    "Event",
    "RecentScanCache",
    "JwtService",
    "AuthService",
    "AdminVerifier",
    "SettingsAdminVerifier",
    "StudentService",
    "AttendanceService",
    "CleanupService"
]
