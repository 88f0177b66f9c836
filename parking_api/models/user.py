"""
Parking API — User SQLAlchemy Model
====================================

What:  ORM model for the `users` table: credentials and role.
Who:   Read by AuthService at login; the role ends up in the JWT `role` claim.

Roles:
    user:  may register cars and record entries/exits
    admin: additionally manages parking lots and reads reports
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from parking_api.database import Base

ROLE_USER = "user"
ROLE_ADMIN = "admin"


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    # Stored lower-cased; uniqueness is enforced by the database
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    full_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    # argon2 hash from passlib; the plain password is never stored
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    role: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ROLE_USER,
        server_default=text("'user'"),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
