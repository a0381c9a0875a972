"""
Data models for the tubeai system.

This module defines the records produced during a channel analysis run and the
state object that flows through the LangGraph nodes. Result records are frozen
and serialize with camelCase aliases for the HTTP boundary.
"""

from typing import List, Optional, Annotated
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
import operator


IDEA_COUNT = 5


class _Record(BaseModel):
    """Immutable record with camelCase serialization."""
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class ChannelRef(_Record):
    """A resolved YouTube channel."""
    id: str = Field(..., description="YouTube channel ID")
    title: str = Field(..., description="Channel display title")
    description: str = Field(default="", description="Channel description")


class VideoSummary(_Record):
    """Lightweight projection of an uploaded video."""
    id: str = Field(..., description="YouTube video ID")
    title: str = Field(..., description="Video title")
    description: str = Field(default="", description="Video description")
    published_at: str = Field(default="", description="Publish time in ISO format")
    thumbnail: str = Field(default="", description="Thumbnail URL")


class NewsItem(_Record):
    """A news headline related to the channel's topics."""
    title: str
    url: str
    source: str = "Unknown"
    published_at: Optional[str] = None


class DiscussionItem(_Record):
    """A Reddit post related to the channel's topics."""
    title: str
    url: str
    subreddit: str = "unknown"
    score: int = 0
    created: Optional[float] = None


class Idea(_Record):
    """A single content idea."""
    title: str = Field(..., description="Suggested video title")
    thumb_design: str = Field(..., description="Thumbnail design description")
    video_idea: str = Field(..., description="Video concept description")

    @field_validator('title', 'thumb_design', 'video_idea')
    @classmethod
    def validate_non_empty(cls, v):
        """Ensure every idea field carries text."""
        if not v or not v.strip():
            raise ValueError('Field cannot be empty')
        return v.strip()


class AnalysisResult(_Record):
    """Aggregate result of one channel analysis run."""
    channel: ChannelRef
    videos: List[VideoSummary]
    topics: List[str]
    news: List[NewsItem] = Field(default_factory=list)
    discussion_items: List[DiscussionItem] = Field(default_factory=list)
    ideas: List[Idea]

    @field_validator('topics')
    @classmethod
    def validate_topics(cls, v):
        """Topics must be non-empty by the time a result is assembled."""
        if not v:
            raise ValueError('At least one topic is required')
        return v

    @field_validator('ideas')
    @classmethod
    def validate_ideas(cls, v):
        """A result always carries exactly IDEA_COUNT ideas."""
        if len(v) != IDEA_COUNT:
            raise ValueError(f'Expected exactly {IDEA_COUNT} ideas, got {len(v)}')
        return v


class AnalysisState(BaseModel):
    """
    State object that flows through the LangGraph workflow.

    Each node writes only the keys it owns, so parallel branches never update
    the same key; warnings are merged with operator.add.
    """
    # Input parameters
    channel_url: str = Field(..., description="Channel URL supplied by the caller")
    channel_id: Optional[str] = Field(None, description="Pre-resolved or resolved channel ID")

    # Required data
    channel: Optional[ChannelRef] = None
    videos: List[VideoSummary] = Field(default_factory=list)

    # Derived and enrichment data
    topics: List[str] = Field(default_factory=list)
    news: List[NewsItem] = Field(default_factory=list)
    discussion_items: List[DiscussionItem] = Field(default_factory=list)
    ideas: List[Idea] = Field(default_factory=list)

    # Output
    result: Optional[AnalysisResult] = None

    # Degradations recorded along the way
    warnings: Annotated[List[str], operator.add] = Field(default_factory=list)
