"""
Models package initialization.
This file imports all models to make them available to Alembic for autogeneration.
"""

# IMPORTANT: Utiliser la MÊME Base que celle de database.py
from sweetshop.core.database import Base

# Import all your models here so they are registered with Base.metadata
from .user import User, Role
from .sweet import Sweet

__all__ = ['Base', 'User', 'Role', 'Sweet']
