"""SQLAlchemy model for the users collection."""

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from flag_store.base import DocumentBase, DocumentMixin


class UserModel(DocumentBase, DocumentMixin):
    """A registered account.

    Email and nickname are each unique across all users; the named
    constraints are what the repository reports on a duplicate write.
    """

    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
        UniqueConstraint("nickname", name="uq_users_nickname"),
    )

    email: Mapped[str] = mapped_column(String(255), nullable=False)
    nickname: Mapped[str] = mapped_column(String(64), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<UserModel(id={self.id}, email={self.email}, nickname={self.nickname})>"
