"""
backend/softwarepros/database/enums.py

Enumerations

Defines enumerations used across the platform:
- UserRole: Roles assigned to site accounts (Admin, Editor, User)
"""

from enum import Enum

# ---------------------------------------------------
# User Role Enumeration
# ---------------------------------------------------


class UserRole(str, Enum):
    """
    Enum representing user roles for access control.

    Values:
    - ADMIN: may manage blog posts
    - EDITOR
    - USER
    """

    ADMIN = "ADMIN"
    EDITOR = "EDITOR"
    USER = "USER"
