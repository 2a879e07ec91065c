"""Auth and workspace routers"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_owner
from ...database import get_db
from ...models import User
from .schemas import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    UserResponse,
    WorkspaceResponse,
    WorkspaceUpdate,
)
from .service import WorkspaceService

logger = logging.getLogger(__name__)

auth_router = APIRouter(prefix="/auth", tags=["Authentication"])
workspace_router = APIRouter(prefix="/workspace", tags=["Workspace"])


def get_workspace_service(db: Session = Depends(get_db)) -> WorkspaceService:
    """Dependency injection for WorkspaceService"""
    return WorkspaceService(db)


# ============================================================================
# AUTH
# ============================================================================


@auth_router.post("/register", response_model=AuthResponse, status_code=201)
async def register(data: RegisterRequest, service: WorkspaceService = Depends(get_workspace_service)):
    """Register a business owner and their workspace"""
    user, token = service.register(data)
    return AuthResponse(user=UserResponse.from_user(user), token=token)


@auth_router.post("/login", response_model=AuthResponse)
async def login(data: LoginRequest, service: WorkspaceService = Depends(get_workspace_service)):
    user, token = service.login(data)
    return AuthResponse(user=UserResponse.from_user(user), token=token)


@auth_router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """Get current user profile"""
    return UserResponse.from_user(current_user)


# ============================================================================
# WORKSPACE
# ============================================================================


@workspace_router.get("", response_model=WorkspaceResponse)
async def get_workspace(
    current_user: User = Depends(get_current_user),
    service: WorkspaceService = Depends(get_workspace_service),
):
    return WorkspaceResponse.from_workspace(service.get_workspace(current_user))


@workspace_router.put("", response_model=WorkspaceResponse)
async def update_workspace(
    data: WorkspaceUpdate,
    current_user: User = Depends(require_owner),
    service: WorkspaceService = Depends(get_workspace_service),
):
    return WorkspaceResponse.from_workspace(service.update_workspace(data, current_user))


@workspace_router.post("/activate", response_model=WorkspaceResponse)
async def activate_workspace(
    current_user: User = Depends(require_owner),
    service: WorkspaceService = Depends(get_workspace_service),
):
    """Switch the workspace from SETUP to ACTIVE, opening its public pages"""
    return WorkspaceResponse.from_workspace(service.activate(current_user))
