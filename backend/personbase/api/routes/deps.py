from fastapi import Header

from personbase.services.database_manager import DatabaseManager, get_database_manager


def get_manager() -> DatabaseManager:
    """Dependency returning the process-wide database manager"""
    return get_database_manager()


def access_password_header(x_access_password: str = Header(..., description="Database access password")) -> str:
    return x_access_password


def edit_password_header(x_edit_password: str = Header(..., description="Database edit password")) -> str:
    return x_edit_password
