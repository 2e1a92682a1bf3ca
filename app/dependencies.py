from fastapi import Header, HTTPException

from app.services.auth_service import SessionContext, auth_service


async def require_session(authorization: str = Header(...)) -> SessionContext:
    if not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Missing bearer token")
    token = authorization[7:]
    context = auth_service.resolve(token)
    if context is None:
        raise HTTPException(status_code=401, detail="Session expired or invalid token")
    return context
