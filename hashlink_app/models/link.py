import logging
from typing import Optional

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import Session, relationship, validates
from sqlalchemy.sql import func

from hashlink_app.config import settings
from hashlink_app.database.connection import Base
from hashlink_app.exceptions import LinkValidationError, URLNormalizationError
from hashlink_app.services.hash_canonicalizer import camel_case
from hashlink_app.services.hashid_codec import get_hashid_codec
from hashlink_app.services.url_normalizer import normalize_url, url_host, url_port

logger = logging.getLogger(__name__)


class Link(Base):
    """
    A shortened link.

    Two short forms point at every link:
    - hash_id: the primary key encoded with hashids (always available)
    - hash: an optional custom hash chosen by the creator

    Both are served from the same path (/<token>), so a custom hash must
    never be something the hash id encoding could produce. Inputs are
    validated on assignment (see the @validates hooks), so creating and
    updating a link go through the same checks before anything is flushed.
    """
    __tablename__ = "links"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    # Stored in canonical (camelCase) form; unique=True also creates an index
    hash = Column(String(settings.hash_max_length), unique=True, nullable=True, index=True)
    # Stored normalized so lookups by URL are exact matches
    original_url = Column(String, nullable=False, index=True)
    creator_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    creator = relationship("User", back_populates="links")

    @validates("hash")
    def validate_hash(self, key, value):
        if not value:
            return None

        canonical = camel_case(value)
        if not canonical:
            raise LinkValidationError(f"Cannot use hash {value}")
        if not settings.hash_min_length <= len(canonical) <= settings.hash_max_length:
            raise LinkValidationError(
                f"Hash {canonical} must be between {settings.hash_min_length} "
                f"and {settings.hash_max_length} characters"
            )
        if get_hashid_codec().is_hash_id(canonical):
            logger.info("Rejected custom hash %s: collides with generated ids", canonical)
            raise LinkValidationError(f"Cannot use hash {canonical}")

        return canonical

    @validates("original_url")
    def validate_original_url(self, key, value):
        try:
            normalized = normalize_url(value)
        except URLNormalizationError as err:
            raise LinkValidationError(str(err)) from err

        domain = settings.service_host
        port = settings.service_port
        same_host = url_host(normalized) in (domain, f"www.{domain}")
        # Without an explicit port in the base URL every port counts as ours
        if same_host and port in (None, url_port(normalized)):
            logger.info("Rejected self-referencing URL %s", normalized)
            target = f"{domain}:{port}" if port else domain
            raise LinkValidationError(f"Cannot shorten {target} URLs")

        return normalized

    @property
    def hash_id(self) -> Optional[str]:
        """Hash id of the primary key (None until the link is flushed)"""
        if self.id is None:
            return None
        return get_hashid_codec().encode(self.id)

    @property
    def shortened_url(self) -> Optional[str]:
        hash_id = self.hash_id
        return f"{settings.public_base_url}/{hash_id}" if hash_id else None

    @property
    def branded_url(self) -> Optional[str]:
        return f"{settings.public_base_url}/{self.hash}" if self.hash else None

    @classmethod
    def find_by_hash_id(cls, db: Session, token: str) -> Optional["Link"]:
        """
        Find a link by the token in a short URL.

        If the token decodes as a hash id, look up the primary key,
        otherwise treat it as a custom hash. Custom hashes are stored in
        canonical form, so a miss on the literal token is retried with its
        canonical form ("Hello" finds "hello").
        """
        link_id = get_hashid_codec().decode_id(token)
        if link_id is not None:
            return db.get(cls, link_id)

        link = db.query(cls).filter(cls.hash == token).first()
        if link is None:
            canonical = camel_case(token)
            if canonical and canonical != token:
                link = db.query(cls).filter(cls.hash == canonical).first()
        return link

    @classmethod
    def find_by_url(cls, db: Session, url: str) -> Optional["Link"]:
        """Find a link by its destination, given in any equivalent form"""
        try:
            normalized = normalize_url(url)
        except URLNormalizationError as err:
            raise LinkValidationError(str(err)) from err
        return db.query(cls).filter(cls.original_url == normalized).first()

    def __repr__(self) -> str:
        return f"<Link id={self.id} hash={self.hash!r} original_url={self.original_url!r}>"
