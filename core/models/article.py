# =============================================================================
# core/models/article.py - Article Schemas
# =============================================================================
# These models define the API contract for article operations:
# - Article: An article as stored and returned to clients
# - ArticleWrite: Request body for create and update
#
# Articles live only in memory (see core/services/article_store.py) and are
# lost when the process restarts.
# =============================================================================

from pydantic import BaseModel, Field


class Article(BaseModel):
    """
    An article held by the ArticleStore.

    The id is assigned by the store and never changes or gets reused.

    Example:
        {
            "id": 1,
            "title": "Hello",
            "content": "First post"
        }
    """

    id: int = Field(
        ...,
        description="Unique article identifier, assigned by the store"
    )

    title: str = Field(
        ...,
        description="Article title"
    )

    content: str = Field(
        ...,
        description="Article body"
    )


class ArticleWrite(BaseModel):
    """
    Request body for POST /article and PUT /article/{id}.

    Both fields default to empty so a missing field reaches the store's
    validation and gets the same 400 as an empty one.

    Example:
        {
            "title": "Hello",
            "content": "First post"
        }
    """

    title: str = Field(
        default="",
        examples=["Hello"],
        description="Article title (required, non-empty)"
    )

    content: str = Field(
        default="",
        examples=["First post"],
        description="Article body (required, non-empty)"
    )
