"""User model - portfolio owner and login credential.

In practice there is a single admin account, but nothing here assumes it.
"""

from sqlalchemy import CheckConstraint, String
from sqlalchemy.orm import Mapped, mapped_column

from portfolio_api.models.base import (
    Base,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
    asset_pair_check,
    asset_public_id_column,
    asset_url_column,
)


class User(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Portfolio owner account.

    Attributes:
        id: UUID primary key.
        name: Display name shown on the portfolio.
        email: Unique login email, stored lowercase.
        password_hash: bcrypt hash. Never serialized outward.
        profile_url / profile_public_id: Hosted profile picture.
        cv_url / cv_public_id: Hosted CV document (PDF).
    """

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(asset_pair_check("profile"), name="ck_users_profile_pair"),
        CheckConstraint(asset_pair_check("cv"), name="ck_users_cv_pair"),
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    profile_url: Mapped[str | None] = asset_url_column()
    profile_public_id: Mapped[str | None] = asset_public_id_column()
    cv_url: Mapped[str | None] = asset_url_column()
    cv_public_id: Mapped[str | None] = asset_public_id_column()
