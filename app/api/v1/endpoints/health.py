"""
Health Endpoint - Application and database status
"""
from datetime import datetime
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.repositories.student_repository import StudentRepository

router = APIRouter()
student_repo = StudentRepository()


@router.get("", status_code=status.HTTP_200_OK)
async def health_check(db: Session = Depends(get_db)):
    """
    Liveness plus a SELECT 1 against the store

    **Response:**
    - 200 with database "connected"
    - 503 with database "disconnected"
    """
    connected = student_repo.check_database_health(db)

    return JSONResponse(
        status_code=status.HTTP_200_OK if connected else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "OK" if connected else "ERROR",
            "database": "connected" if connected else "disconnected",
            "timestamp": datetime.now().isoformat()
        }
    )
