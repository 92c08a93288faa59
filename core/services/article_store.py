# =============================================================================
# core/services/article_store.py - In-Memory Article Store
# =============================================================================
# Thread-safe CRUD over Articles held in a dict keyed by integer ID.
#
# - IDs come from a counter starting at 1 and are never reused, even after
#   the article is deleted.
# - Every operation holds one lock for its whole duration, so operations are
#   linearizable and list_articles() sees a consistent snapshot.
# - Nothing is persisted; state is lost when the process exits.
#
# One store is created per application (see app.main.create_app) and
# injected into handlers, so tests can use independent instances.
# =============================================================================

import logging
import threading

from app.exceptions import NotFoundError, ValidationError
from core.models.article import Article

logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = "Invalid parameters: title and content are required"


def _validate(title: str, content: str) -> None:
    missing = [name for name, value in (("title", title), ("content", content)) if not value]
    if missing:
        raise ValidationError(MISSING_FIELDS_MESSAGE, fields=missing)


class ArticleStore:
    """
    In-memory article table with an auto-incrementing ID.

    Returned Articles are copies; mutating them doesn't touch the store.

    Example:
        store = ArticleStore()
        article = store.create("Hello", "First post")   # id=1
        store.update(article.id, "Hello", "Edited")
        store.delete(article.id)
    """

    def __init__(self):
        self._articles: dict[int, Article] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._articles)

    def create(self, title: str, content: str) -> Article:
        """
        Insert a new article under the next sequential ID.

        Raises:
            ValidationError: If title or content is empty
        """
        _validate(title, content)

        with self._lock:
            article = Article(id=self._next_id, title=title, content=content)
            self._articles[article.id] = article
            self._next_id += 1
            result = article.model_copy()

        logger.debug(f"Created article: {result.id}")
        return result

    def get(self, article_id: int) -> Article:
        """
        Fetch one article.

        Raises:
            NotFoundError: If no article has this ID
        """
        with self._lock:
            article = self._articles.get(article_id)
            if article is None:
                raise NotFoundError(article_id)
            return article.model_copy()

    def update(self, article_id: int, title: str, content: str) -> Article:
        """
        Replace title and content of an existing article. The ID is unchanged.

        Raises:
            ValidationError: If title or content is empty
            NotFoundError: If no article has this ID
        """
        _validate(title, content)

        with self._lock:
            article = self._articles.get(article_id)
            if article is None:
                raise NotFoundError(article_id)
            article.title = title
            article.content = content
            result = article.model_copy()

        logger.debug(f"Updated article: {article_id}")
        return result

    def delete(self, article_id: int) -> None:
        """
        Remove an article.

        Raises:
            NotFoundError: If no article has this ID
        """
        with self._lock:
            if self._articles.pop(article_id, None) is None:
                raise NotFoundError(article_id)

        logger.debug(f"Deleted article: {article_id}")

    def list_articles(self) -> list[Article]:
        """
        Return every stored article.

        Order is unspecified; callers must not rely on it.
        """
        with self._lock:
            return [article.model_copy() for article in self._articles.values()]
