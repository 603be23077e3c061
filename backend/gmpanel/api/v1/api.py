from fastapi import APIRouter

from gmpanel.api.v1.endpoints import audit_log, auth

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(audit_log.router, prefix="/audit", tags=["audit"])
