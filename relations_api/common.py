import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Depends, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from firebase_admin import initialize_app, auth
from sqlalchemy.ext.asyncio import AsyncSession

from relations_api.config import settings
from relations_api.init_db import get_db
from relations_api.models import User
from relations_api.services.user_service import require_registered_user

logger = logging.getLogger(__name__)

firebase_app = None

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    global firebase_app
    if settings.environment != "development":
        try:
            from firebase_admin import credentials as fb_credentials

            cred = fb_credentials.ApplicationDefault()
            options = {'projectId': settings.firebase_project_id} if settings.firebase_project_id else None
            firebase_app = initialize_app(credential=cred, options=options)
            logger.info("Firebase initialized successfully")
        except Exception:
            logger.exception("Error initializing Firebase")
            raise
    else:
        logger.info("Running in development mode - skipping Firebase initialization")

    yield

    # Shutdown
    if firebase_app:
        firebase_app.delete()
        firebase_app = None

app = FastAPI(title="Relations API", lifespan=lifespan)
security = HTTPBearer(auto_error=False)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Dependency to get current user from token
async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
):
    if settings.environment == "development":
        uid = request.headers.get("X-Dev-User-Id", settings.dev_user_id)
        logger.debug(f"Development mode - skipping token verification for {uid}")
        return {"uid": uid}

    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authenticated"
        )

    token = credentials.credentials
    try:
        decoded_token = auth.verify_id_token(token)
        logger.debug(f"Successfully decoded token with UID: {decoded_token.get('uid')}")
        return decoded_token
    except Exception as e:
        logger.exception("Error verifying Firebase ID token")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Invalid authentication token: {str(e)}"
        )

# Dependency resolving the authenticated uid to its registered account
async def get_current_account(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> User:
    return await require_registered_user(db, current_user)
