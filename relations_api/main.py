import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .common import app
from .config import settings
from .routers.users.endpoints import router as UsersEndpoints
from .routers.relations.friend_requests import router as FriendRequestsEndpoints
from .routers.relations.friendships import router as FriendshipsEndpoints
from .routers.relations.directed import router as DirectedRelationsEndpoints
from .services.errors import RelationshipError

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

# Include routers
app.include_router(UsersEndpoints)
app.include_router(FriendRequestsEndpoints)
app.include_router(FriendshipsEndpoints)
app.include_router(DirectedRelationsEndpoints)


@app.exception_handler(RelationshipError)
async def relationship_error_handler(request: Request, exc: RelationshipError):
    logger.info(f"{request.method} {request.url.path} rejected ({exc.status_code}): {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    fields = [{"loc": list(error["loc"]), "msg": error["msg"]} for error in exc.errors()]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": {"message": "Malformed request.", "fields": fields}}
    )

@app.get("/health")
async def health():
    return {"status": "ok"}
