"""FastAPI application entrypoint for blog generation.

Run with:
    uvicorn blog_generator.main:app --reload
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from blog_generator import __version__
from blog_generator.config import Settings, configure_logging, load_settings
from blog_generator.errors import BlogGeneratorError
from blog_generator.generator import ArticleGenerator, get_generator
from blog_generator.models import ArticleQuery
from blog_generator.pipeline import prepare_topic
from blog_generator.schemas import (
    AppliedFilters,
    ArticleListResponse,
    ArticleOut,
    ArticleView,
    DeleteResponse,
    ErrorResponse,
    FilteredListResponse,
    FilterRequest,
    GenerateRequest,
    StatsResponse,
)
from blog_generator.store import ArticleStore, build_store, parse_date_bound
from blog_generator.structurer import block_to_dict, render_blocks_html, structure_content
from blog_generator.summarizer import reading_minutes, summarize

logger = logging.getLogger(__name__)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    429: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@contextmanager
def _translate_errors(message: str) -> Iterator[None]:
    """Let service errors through; turn anything else into a 500 with `message`."""
    try:
        yield
    except BlogGeneratorError:
        raise
    except Exception as exc:
        logger.error("%s: %s", message, exc, exc_info=True)
        raise BlogGeneratorError(message) from exc


def get_store(request: Request) -> ArticleStore:
    return request.app.state.store


def resolve_generator(request: Request) -> ArticleGenerator:
    """Build the generator on first use so the app starts without credentials."""
    state = request.app.state
    if state.generator is None:
        state.generator = get_generator(state.settings)
    return state.generator


def _generate_and_store(request: Request, payload: Optional[GenerateRequest]) -> ArticleOut:
    topic = payload.topic if payload is not None else None
    prepare_topic(topic)
    with _translate_errors("Failed to generate blog post. Please try again."):
        article = resolve_generator(request).generate(topic)
        get_store(request).add(article)
    return ArticleOut.from_article(article)


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[ArticleStore] = None,
    generator: Optional[ArticleGenerator] = None,
) -> FastAPI:
    """Build the application with one store instance for its whole lifetime."""
    settings = settings or load_settings()
    configure_logging(settings)

    app = FastAPI(
        title="Blog Generator",
        description="Generate, browse, search and delete AI-written blog posts",
        version=__version__,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
    )
    app.state.settings = settings
    app.state.store = store if store is not None else build_store(settings)
    app.state.generator = generator

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(BlogGeneratorError)
    async def handle_service_error(request: Request, exc: BlogGeneratorError):
        logger.warning(
            "%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.message
        )
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        detail = "Invalid request"
        if errors:
            first = errors[0]
            location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
            detail = f"Invalid {location or 'body'}: {first.get('msg', 'invalid value')}"
        return JSONResponse(status_code=400, content={"error": detail})

    @app.get("/health")
    def health_check(request: Request):
        """Return service liveness and the configured text backend."""
        return {
            "status": "ok",
            "version": __version__,
            "backend": request.app.state.settings.GENERATOR_BACKEND,
        }

    @app.post(
        "/generate",
        status_code=201,
        response_model=ArticleOut,
        responses=ERROR_RESPONSES,
    )
    def generate_article(request: Request, payload: Optional[GenerateRequest] = None):
        """Generate a blog post for a topic and add it to the store."""
        return _generate_and_store(request, payload)

    @app.post(
        "/articles",
        status_code=201,
        response_model=ArticleOut,
        responses=ERROR_RESPONSES,
    )
    def create_article(request: Request, payload: Optional[GenerateRequest] = None):
        """Same as `POST /generate`."""
        return _generate_and_store(request, payload)

    @app.get("/articles", response_model=ArticleListResponse, responses=ERROR_RESPONSES)
    def list_articles(
        store: ArticleStore = Depends(get_store),
        search: Optional[str] = None,
        topic: Optional[str] = None,
        sort_by: str = Query("createdAt", alias="sortBy"),
        order: str = "desc",
        limit: Optional[int] = Query(None, ge=0),
        offset: int = Query(0, ge=0),
    ):
        """List stored articles with search, topic filter, sorting and paging."""
        query = ArticleQuery(
            search=search,
            topics=(topic,) if topic else (),
            sort_by=sort_by,
            order=order,
            limit=limit,
            offset=offset,
        )
        with _translate_errors("Failed to fetch blogs"):
            result = store.list(query)
        return ArticleListResponse.from_result(result)

    @app.patch("/articles", response_model=FilteredListResponse, responses=ERROR_RESPONSES)
    def filter_articles(
        payload: Optional[FilterRequest] = None,
        store: ArticleStore = Depends(get_store),
    ):
        """Advanced filtering: several topics and an inclusive date range."""
        payload = payload or FilterRequest()
        query = ArticleQuery(
            search=payload.search,
            topics=tuple(payload.topics or ()),
            date_from=parse_date_bound(payload.date_from, "dateFrom"),
            date_to=parse_date_bound(payload.date_to, "dateTo"),
            sort_by=payload.sort_by,
            order=payload.order,
            limit=payload.limit,
            offset=payload.offset,
        )
        with _translate_errors("Failed to filter blogs"):
            result = store.list(query)
        filters = AppliedFilters(
            search=payload.search,
            topics=payload.topics,
            date_from=payload.date_from,
            date_to=payload.date_to,
            sort_by=payload.sort_by,
            order=payload.order,
        )
        return FilteredListResponse.from_result(result, filters=filters)

    @app.delete("/articles", response_model=DeleteResponse, responses=ERROR_RESPONSES)
    def delete_article(
        article_id: Optional[str] = Query(None, alias="id"),
        store: ArticleStore = Depends(get_store),
    ):
        """Hard-delete one article by id."""
        with _translate_errors("Failed to delete blog post"):
            result = store.delete(article_id)
        return DeleteResponse(
            message="Blog post deleted successfully",
            deleted_id=result.deleted_id,
            remaining_count=result.remaining_count,
        )

    @app.get("/articles/stats", response_model=StatsResponse)
    def article_stats(store: ArticleStore = Depends(get_store)):
        stats = store.stats()
        return StatsResponse(
            total_blogs=stats.total_blogs,
            unique_topics=stats.unique_topics,
            topic_distribution=stats.topic_distribution,
            latest_blog=ArticleOut.from_article(stats.latest_blog) if stats.latest_blog else None,
            oldest_blog=ArticleOut.from_article(stats.oldest_blog) if stats.oldest_blog else None,
            average_content_length=stats.average_content_length,
        )

    @app.get("/articles/{article_id}", response_model=ArticleOut, responses=ERROR_RESPONSES)
    def get_article(article_id: str, store: ArticleStore = Depends(get_store)):
        return ArticleOut.from_article(store.get(article_id))

    @app.get("/articles/{article_id}/view", response_model=ArticleView, responses=ERROR_RESPONSES)
    def view_article(article_id: str, store: ArticleStore = Depends(get_store)):
        """Structured display blocks, rendered HTML and preview for one article."""
        article = store.get(article_id)
        blocks = structure_content(article.content)
        return ArticleView(
            article=ArticleOut.from_article(article),
            preview=summarize(article.content),
            reading_minutes=reading_minutes(article.content),
            blocks=[block_to_dict(block) for block in blocks],
            html=render_blocks_html(blocks),
        )

    return app


app = create_app()


# For running directly: python -m blog_generator.main
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=app.state.settings.HOST, port=app.state.settings.PORT)
