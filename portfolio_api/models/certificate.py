"""Certificate model."""

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


class Certificate(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """A certificate with a hosted scan or screenshot."""

    __tablename__ = "certificates"
    __table_args__ = (
        CheckConstraint(asset_pair_check("image"), name="ck_certificates_image_pair"),
    )

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    image_url: Mapped[str | None] = asset_url_column()
    image_public_id: Mapped[str | None] = asset_public_id_column()
