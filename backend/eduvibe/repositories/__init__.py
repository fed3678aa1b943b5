# backend/eduvibe/repositories/__init__.py
"""
Repository Pattern Implementation for EduVibe

This package provides the repository layer for data access,
separating business logic from database queries.

Key Components:
- BaseRepository: Foundation for all repositories with generic CRUD operations
- IRepository: Interface defining required methods for all repositories
- RepositoryFactory: Factory for creating repository instances
- MentorRepository: Eligible mentor pool and locked rating updates
- SessionRepository: Mentor session queries, including conflict reads

Usage:
    from eduvibe.repositories import RepositoryFactory

    repository = RepositoryFactory.create_session_repository(db)
    sessions = repository.get_sessions_for_mentor_on_date(mentor_id, session_date)
"""

from .base_repository import BaseRepository, IRepository
from .factory import RepositoryFactory
from .mentor_repository import MentorRepository
from .session_repository import SessionRepository

__all__ = [
    "BaseRepository",
    "IRepository",
    "MentorRepository",
    "RepositoryFactory",
    "SessionRepository",
]
