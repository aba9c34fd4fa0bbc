"""Pydantic schemas for the blog generation API."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from blog_generator.models import Article, ListResult


class GenerateRequest(BaseModel):
    """Inbound payload for article generation.

    `topic` is typed loosely on purpose so that a missing or non-string topic is
    reported with the service's own validation message.
    """

    topic: Any = Field(default=None, description="Topic to write about (1-100 characters).")


class ArticleOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    topic: str
    content: str
    created_at: str = Field(..., alias="createdAt")

    @classmethod
    def from_article(cls, article: Article) -> "ArticleOut":
        return cls.model_validate(article.to_dict())


class ArticleListResponse(BaseModel):
    """One page of articles plus counts."""

    model_config = ConfigDict(populate_by_name=True)

    blogs: List[ArticleOut]
    total: int = Field(..., description="Matches after filtering, before paging.")
    total_blogs: int = Field(..., alias="totalBlogs", description="Unfiltered store size.")
    offset: int
    limit: int
    has_more: bool = Field(..., alias="hasMore")

    @classmethod
    def from_result(cls, result: ListResult, **extra: Any) -> "ArticleListResponse":
        return cls(
            blogs=[ArticleOut.from_article(a) for a in result.items],
            total=result.total,
            total_blogs=result.total_all,
            offset=result.offset,
            limit=result.limit,
            has_more=result.has_more,
            **extra,
        )


class FilterRequest(BaseModel):
    """Body of the advanced filter endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    search: Optional[str] = None
    topics: Optional[List[str]] = None
    date_from: Optional[str] = Field(default=None, alias="dateFrom")
    date_to: Optional[str] = Field(default=None, alias="dateTo")
    sort_by: str = Field(default="createdAt", alias="sortBy")
    order: str = "desc"
    limit: Optional[int] = Field(default=None, ge=0)
    offset: int = Field(default=0, ge=0)


class AppliedFilters(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    search: Optional[str] = None
    topics: Optional[List[str]] = None
    date_from: Optional[str] = Field(default=None, alias="dateFrom")
    date_to: Optional[str] = Field(default=None, alias="dateTo")
    sort_by: str = Field(..., alias="sortBy")
    order: str


class FilteredListResponse(ArticleListResponse):
    filters: AppliedFilters


class DeleteResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    deleted_id: str = Field(..., alias="deletedId")
    remaining_count: int = Field(..., alias="remainingCount")


class StatsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_blogs: int = Field(..., alias="totalBlogs")
    unique_topics: int = Field(..., alias="uniqueTopics")
    topic_distribution: Dict[str, int] = Field(..., alias="topicDistribution")
    latest_blog: Optional[ArticleOut] = Field(default=None, alias="latestBlog")
    oldest_blog: Optional[ArticleOut] = Field(default=None, alias="oldestBlog")
    average_content_length: int = Field(..., alias="averageContentLength")


class ArticleView(BaseModel):
    """Everything the detail page needs to render one article."""

    model_config = ConfigDict(populate_by_name=True)

    article: ArticleOut
    preview: str
    reading_minutes: int = Field(..., alias="readingMinutes")
    blocks: List[Dict[str, Any]]
    html: str


class ErrorResponse(BaseModel):
    error: str
