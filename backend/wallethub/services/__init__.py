"""Services for user data access and health reporting."""
from .users import UsersService, UserPage
from .app_service import AppService

__all__ = ["UsersService", "UserPage", "AppService"]
