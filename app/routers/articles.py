# =============================================================================
# app/routers/articles.py - Article CRUD Endpoints
# =============================================================================
# Translates HTTP verbs/paths into ArticleStore calls and wraps results in
# the standard envelope. Errors raised by the store are turned into
# envelope responses by the handlers in app/exceptions.py.
#
#   POST   /article         create
#   GET    /article/{id}    read
#   PUT    /article/{id}    update
#   DELETE /article/{id}    delete
#   GET    /articles        list
# =============================================================================

import re
from typing import Annotated

from fastapi import APIRouter, Path, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError as BodyValidationError

from app.dependencies import ArticleStoreDep
from app.exceptions import MalformedIdentifierError
from core.models.article import Article, ArticleWrite
from core.models.envelope import Envelope

router = APIRouter()

_ID_PATTERN = re.compile(r"[+-]?[0-9]+")

ArticleIdPath = Annotated[str, Path(description="Article ID (integer)")]


def parse_article_id(raw_id: str) -> int:
    """
    Parse a path identifier as an integer.

    An optional sign followed by ASCII digits is accepted ("7", "+7", "-7").
    Anything else, including whitespace, is malformed.

    Raises:
        MalformedIdentifierError: If raw_id is not an integer
    """
    if not _ID_PATTERN.fullmatch(raw_id):
        raise MalformedIdentifierError(raw_id)
    return int(raw_id)


# =============================================================================
# Endpoints
# =============================================================================

@router.post("/article", response_model=Envelope[Article])
def create_article(request: ArticleWrite, store: ArticleStoreDep):
    """
    Create an article.

    Both title and content are required. The new article gets the next
    sequential ID.
    """
    article = store.create(request.title, request.content)
    return Envelope(code=200, message="Article created", data=article)


@router.get("/article/{article_id}", response_model=Envelope[Article])
def get_article(article_id: ArticleIdPath, store: ArticleStoreDep):
    """Get an article by ID."""
    article = store.get(parse_article_id(article_id))
    return Envelope(code=200, message="Article fetched", data=article)


@router.put(
    "/article/{article_id}",
    response_model=Envelope[Article],
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": ArticleWrite.model_json_schema()}},
        }
    },
)
async def update_article(article_id: ArticleIdPath, request: Request, store: ArticleStoreDep):
    """
    Replace an article's title and content.

    The body is read by hand so the ID is checked first: a malformed ID
    wins over a malformed or incomplete body.
    """
    parsed_id = parse_article_id(article_id)
    try:
        payload = ArticleWrite.model_validate_json(await request.body())
    except BodyValidationError as e:
        raise RequestValidationError(e.errors()) from e
    article = store.update(parsed_id, payload.title, payload.content)
    return Envelope(code=200, message="Article updated", data=article)


@router.delete("/article/{article_id}", response_model=Envelope[None])
def delete_article(article_id: ArticleIdPath, store: ArticleStoreDep):
    """Delete an article by ID."""
    store.delete(parse_article_id(article_id))
    return Envelope(code=200, message="Article deleted", data=None)


@router.get("/articles", response_model=Envelope[list[Article]])
def list_articles(store: ArticleStoreDep):
    """
    List all articles.

    Order is not guaranteed.
    """
    return Envelope(code=200, message="Articles listed", data=store.list_articles())
