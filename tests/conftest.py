"""
Shared fixtures for tubeai tests.
"""

import pytest
from unittest.mock import Mock

from tubeai.config import Configuration
from tubeai.models import ChannelRef, VideoSummary, NewsItem, DiscussionItem, Idea


@pytest.fixture
def config():
    """Configuration with both required keys and no news key."""
    return Configuration(
        youtube_api_key="AIzaTestYouTubeKey1234567890",
        openai_api_key="sk-test-openai-key",
        news_api_key=None,
        request_timeout=5.0,
    )


@pytest.fixture
def channel():
    return ChannelRef(id="UCtest1234567890", title="Code With Sam", description="Programming videos")


@pytest.fixture
def sample_videos():
    """Ten recent uploads, newest first."""
    titles = [
        "Python Decorators Explained",
        "Building a REST API with FastAPI",
        "Async Python in 10 Minutes",
        "Docker for Beginners",
        "Testing with Pytest",
        "Type Hints Deep Dive",
        "Packaging Python Projects",
        "Debugging Like a Pro",
        "Python Generators Explained",
        "Concurrency Patterns",
    ]
    return [
        VideoSummary(
            id=f"vid{i:08d}",
            title=title,
            description=f"In this video we cover {title.lower()}. " * 20,
            published_at=f"2024-05-{20 - i:02d}T12:00:00Z",
        )
        for i, title in enumerate(titles)
    ]


@pytest.fixture
def sample_news():
    return [
        NewsItem(title="Python 3.13 released with free-threading", url="https://news.example.com/py313", source="Tech Daily"),
        NewsItem(title="FastAPI reaches new milestone", url="https://news.example.com/fastapi", source="Dev Weekly"),
    ]


@pytest.fixture
def sample_discussions():
    return [
        DiscussionItem(title="What is your favorite Python feature?", url="https://reddit.com/r/python/1", subreddit="python", score=420),
        DiscussionItem(title="Async vs threads in 2024", url="https://reddit.com/r/learnpython/2", subreddit="learnpython", score=120),
        DiscussionItem(title="Docker tips thread", url="https://reddit.com/r/docker/3", subreddit="docker", score=55),
    ]


@pytest.fixture
def model_ideas():
    return [
        Idea(title=f"Model Idea {i}", thumb_design=f"Thumbnail {i}", video_idea=f"Concept {i}")
        for i in range(1, 6)
    ]


@pytest.fixture
def collaborators(channel, sample_videos, sample_news, sample_discussions, model_ideas):
    """Mock collaborators that all succeed."""
    youtube = Mock()
    youtube.resolve_channel_id.return_value = channel.id
    youtube.get_channel_info.return_value = channel
    youtube.get_recent_videos.return_value = sample_videos

    news = Mock()
    news.fetch_relevant_news.return_value = sample_news

    reddit = Mock()
    reddit.search.return_value = sample_discussions

    topic_generator = Mock()
    topic_generator.generate_topics.return_value = ["python", "web apis", "testing", "docker", "async"]

    idea_generator = Mock()
    idea_generator.generate_ideas.return_value = model_ideas

    return {
        "youtube_client": youtube,
        "news_client": news,
        "reddit_client": reddit,
        "topic_generator": topic_generator,
        "idea_generator": idea_generator,
    }
