from fastapi import APIRouter
from app.api.v1.endpoints import students, attendance, maintenance, sessions, auth, events, health

api_router = APIRouter()

# Register routes
api_router.include_router(health.router, prefix="/health", tags=["Health"])
api_router.include_router(auth.router, prefix="/auth", tags=["Auth"])
api_router.include_router(students.router, prefix="/students", tags=["Students"])
# Maintenance deletes live under /attendance and must precede its dynamic routes
api_router.include_router(maintenance.router, prefix="/attendance", tags=["Maintenance"])
api_router.include_router(attendance.router, prefix="/attendance", tags=["Attendance"])
api_router.include_router(sessions.router, prefix="/sessions", tags=["Sessions"])
api_router.include_router(events.router, prefix="/events", tags=["Events"])
