from fastapi import Request

from drivehub.services.auth_service import AuthService
from drivehub.services.hierarchy_service import HierarchyService


def get_auth_service(request: Request) -> AuthService:
    """FastAPI dependency: the AuthService built at startup"""
    return request.app.state.auth_service


def get_hierarchy_service(request: Request) -> HierarchyService:
    """FastAPI dependency: the HierarchyService built at startup"""
    return request.app.state.hierarchy_service
