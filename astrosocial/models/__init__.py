"""
Models package initialization
"""

from .user import User
from .follow import UserFollow

__all__ = ["User", "UserFollow"]
