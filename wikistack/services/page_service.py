"""
Page service layer for WikiStack.
Contains the page queries, including tag lookup and similar-page search.
"""

from typing import Optional, List
from loguru import logger
from ..config import PAGE_LIST_LIMIT
from ..database import get_pages_collection, db_instance
from ..models.page import WikiPage


class PageService:
    """Service class for page-related operations."""

    @staticmethod
    def _to_pages(docs: List[dict]) -> List[WikiPage]:
        pages = []
        for doc in docs:
            try:
                pages.append(WikiPage.from_document(doc))
            except ValueError as e:
                logger.warning(f"Skipping unreadable page document {doc.get('_id')}: {e}")
        return pages

    @staticmethod
    async def create_page(page: WikiPage) -> Optional[WikiPage]:
        """
        Store a new, already validated page.

        Args:
            page: Page to insert

        Returns:
            The stored page carrying its new id, or None if it could not be saved
        """
        try:
            if not db_instance.is_connected:
                logger.error(f"Database not connected - cannot create page: {page.title}")
                return None

            pages_collection = get_pages_collection()
            if pages_collection is None:
                logger.error("Pages collection not available")
                return None

            result = await pages_collection.insert_one(page.to_document())
            page.id = result.inserted_id
            logger.info(f"Page created: {page.title} at {page.route} (tags: {page.tags})")
            return page
        except Exception as e:
            logger.error(f"Error creating page {page.title}: {str(e)}")
            return None

    @staticmethod
    async def get_page(url_title: str) -> Optional[WikiPage]:
        """
        Get a page by its url_title.

        Args:
            url_title: Slug derived from the page title

        Returns:
            Page or None if not found
        """
        try:
            if not db_instance.is_connected:
                logger.warning(f"Database not connected - cannot get page: {url_title}")
                return None

            pages_collection = get_pages_collection()
            if pages_collection is None:
                logger.error("Pages collection not available")
                return None

            # Slugs are not unique; the earliest page with a slug owns its route
            docs = (
                await pages_collection.find({"url_title": url_title})
                .sort("created_at", 1)
                .to_list(1)
            )
            if not docs:
                return None
            return WikiPage.from_document(docs[0])
        except Exception as e:
            logger.error(f"Error getting page {url_title}: {str(e)}")
            return None

    @staticmethod
    async def list_pages(limit: int = PAGE_LIST_LIMIT) -> List[WikiPage]:
        """Return pages, newest first."""
        try:
            if not db_instance.is_connected:
                logger.warning("Database not connected - cannot list pages")
                return []

            pages_collection = get_pages_collection()
            if pages_collection is None:
                logger.error("Pages collection not available")
                return []

            docs = await pages_collection.find().sort("created_at", -1).to_list(limit)
            return PageService._to_pages(docs)
        except Exception as e:
            logger.error(f"Error listing pages: {str(e)}")
            return []

    @staticmethod
    async def find_by_tag(tag: Optional[str] = None) -> List[WikiPage]:
        """
        Get every page carrying the given tag.

        Matching is exact and case-sensitive. No tag means no pages.
        """
        normalized = (tag or "").strip()
        if not normalized:
            return []

        try:
            if not db_instance.is_connected:
                logger.warning(f"Database not connected - cannot search tag: {normalized}")
                return []

            pages_collection = get_pages_collection()
            if pages_collection is None:
                logger.error("Pages collection not available")
                return []

            docs = (
                await pages_collection.find({"tags": {"$all": [normalized]}})
                .sort("title", 1)
                .to_list(None)
            )
            pages = PageService._to_pages(docs)
            logger.info(f"Tag search performed: {normalized!r} - found {len(pages)} results")
            return pages
        except Exception as e:
            logger.error(f"Error searching pages with tag {normalized!r}: {e}")
            return []

    @staticmethod
    async def find_similar(page: WikiPage) -> List[WikiPage]:
        """
        Get the other pages sharing at least one tag with ``page``.

        The page itself is never part of the result.
        """
        if not page.tags:
            return []

        try:
            if not db_instance.is_connected:
                logger.warning(f"Database not connected - cannot find pages similar to {page.url_title}")
                return []

            pages_collection = get_pages_collection()
            if pages_collection is None:
                logger.error("Pages collection not available")
                return []

            filt = {"tags": {"$overlap": page.tags}}
            if page.id:
                filt["_id"] = {"$ne": page.id}
            else:
                filt["url_title"] = {"$ne": page.url_title}

            docs = (
                await pages_collection.find(filt)
                .sort("title", 1)
                .to_list(None)
            )
            return PageService._to_pages(docs)
        except Exception as e:
            logger.error(f"Error finding pages similar to {page.url_title}: {e}")
            return []

    @staticmethod
    async def find_by_author(author_id: str) -> List[WikiPage]:
        """Return the pages written by a user, newest first."""
        try:
            if not db_instance.is_connected:
                logger.warning(f"Database not connected - cannot list pages for author {author_id}")
                return []

            pages_collection = get_pages_collection()
            if pages_collection is None:
                logger.error("Pages collection not available")
                return []

            docs = (
                await pages_collection.find({"author_id": author_id})
                .sort("created_at", -1)
                .to_list(None)
            )
            return PageService._to_pages(docs)
        except Exception as e:
            logger.error(f"Error listing pages for author {author_id}: {e}")
            return []

    @staticmethod
    async def count_pages() -> int:
        try:
            pages_collection = get_pages_collection()
            if pages_collection is None:
                return 0
            return await pages_collection.count_documents({})
        except Exception as e:
            logger.error(f"Error counting pages: {e}")
            return 0
