import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hashlink_app.cache.strategies import CacheStrategy
from hashlink_app.config import settings
from hashlink_app.exceptions import LinkValidationError
from hashlink_app.models.link import Link
from hashlink_app.models.user import User

logger = logging.getLogger(__name__)


class LinkService:
    """
    Link operations on top of the Link model.

    Validation and normalization live on the model itself; this layer
    owns the transaction (commit/rollback) and keeps the redirect cache
    in step with the database.
    """

    def __init__(self, db: Session, cache: Optional[CacheStrategy] = None):
        self.db = db
        self.cache = cache

    @staticmethod
    def _cache_key(token: str) -> str:
        return f"link:{token}"

    @staticmethod
    def _tokens(link: Link) -> List[str]:
        """Every token that resolves to this link"""
        return [token for token in (link.hash_id, link.hash) if token]

    def _check_constraints(
        self,
        link_id: Optional[int],
        custom_hash: Optional[str],
        creator_id: Optional[int],
    ) -> None:
        """Raise LinkValidationError for the constraint a save would break"""
        if creator_id is not None and self.db.get(User, creator_id) is None:
            raise LinkValidationError(f"Unknown creator {creator_id}")

        if custom_hash:
            query = self.db.query(Link.id).filter(Link.hash == custom_hash)
            if link_id is not None:
                query = query.filter(Link.id != link_id)
            if query.first() is not None:
                raise LinkValidationError(f"Hash {custom_hash} is already taken")

    def _commit(self, link: Link) -> Link:
        # Values are captured up front: a rollback expires them on the instance
        link_id, custom_hash, creator_id = link.id, link.hash, link.creator_id
        try:
            self._check_constraints(link_id, custom_hash, creator_id)
        except LinkValidationError:
            self.db.rollback()
            raise

        try:
            self.db.commit()
        except IntegrityError as err:
            self.db.rollback()
            # Lost a race with a concurrent write; report what is now in the way
            try:
                self._check_constraints(link_id, custom_hash, creator_id)
            except LinkValidationError as conflict:
                raise conflict from err
            logger.warning("Unexpected integrity error saving link: %s", err.orig)
            raise LinkValidationError("Link conflicts with existing data") from err
        self.db.refresh(link)
        return link

    async def _invalidate(self, tokens: List[str]) -> None:
        if not self.cache:
            return
        for token in tokens:
            await self.cache.delete(self._cache_key(token))

    async def create_link(
        self,
        original_url: str,
        hash: Optional[str] = None,
        creator_id: Optional[int] = None,
    ) -> Link:
        """
        Create a link.

        The model normalizes the URL and canonicalizes the hash on
        construction, so invalid input raises LinkValidationError before
        anything touches the session.
        """
        link = Link(original_url=original_url, hash=hash, creator_id=creator_id)
        self.db.add(link)
        link = self._commit(link)
        logger.info("Created link %s -> %s", link.hash_id, link.original_url)
        return link

    async def get_link(self, identifier: str) -> Optional[Link]:
        """Get a link by hash id or custom hash"""
        return Link.find_by_hash_id(self.db, identifier)

    async def get_link_by_url(self, url: str) -> Optional[Link]:
        """Get a link by its destination URL (any equivalent form)"""
        return Link.find_by_url(self.db, url)

    async def update_link(
        self,
        identifier: str,
        original_url: Optional[str] = None,
        hash: Optional[str] = None,
    ) -> Optional[Link]:
        """
        Change a link's destination and/or custom hash.

        Assignments go through the same model validators as creation.
        Returns None if the link doesn't exist.
        """
        link = Link.find_by_hash_id(self.db, identifier)
        if link is None:
            return None

        stale_tokens = self._tokens(link)
        try:
            if original_url is not None:
                link.original_url = original_url
            if hash is not None:
                link.hash = hash
        except LinkValidationError:
            self.db.rollback()
            raise

        link = self._commit(link)
        await self._invalidate(stale_tokens)
        logger.info("Updated link %s", link.hash_id)
        return link

    async def delete_link(self, identifier: str) -> bool:
        """Delete a link and drop it from the cache"""
        link = Link.find_by_hash_id(self.db, identifier)
        if link is None:
            return False

        tokens = self._tokens(link)
        self.db.delete(link)
        self.db.commit()
        await self._invalidate(tokens)
        logger.info("Deleted link %s", tokens[0])
        return True

    async def resolve_original_url(self, identifier: str) -> Optional[str]:
        """
        Get the destination for a redirect using Cache-Aside pattern.

        Flow:
        1. Check cache
        2. On a miss, resolve the link through the database
        3. Cache the destination when the identifier is one of the link's
           own tokens (so update/delete can invalidate it)
        """
        cache_key = self._cache_key(identifier)

        if self.cache:
            cached_url = await self.cache.get(cache_key)
            if cached_url:
                return cached_url

        link = Link.find_by_hash_id(self.db, identifier)
        if link is None:
            return None

        if self.cache and identifier in self._tokens(link):
            await self.cache.set(cache_key, link.original_url, ttl=settings.cache_ttl)

        return link.original_url
