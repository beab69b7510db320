"""SQLAlchemy persistence for identity records."""

from flag_identity.infrastructure.persistence.user_model import UserModel

__all__ = ["UserModel"]
