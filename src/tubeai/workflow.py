"""
LangGraph workflow orchestration for tubeai.

This module sequences a channel analysis run: resolve the channel, fetch channel
info and recent uploads in parallel, extract topics, fetch news and Reddit
discussions in parallel, generate ideas, and assemble the result.

Only the first three nodes can end a run with an error. The two parallel joins
behave differently: channel info and uploads must both succeed, while news and
discussions each degrade to an empty list on their own.
"""

import asyncio
import logging
from typing import Dict, Any, List, Optional, Callable
from functools import wraps
from datetime import datetime

from langgraph.graph import StateGraph, END

from .models import AnalysisState, AnalysisResult, IDEA_COUNT
from .config import Configuration
from .youtube_client import YouTubeClient, is_youtube_url
from .news_client import NewsClient
from .reddit_client import RedditClient
from .llm import OpenAIJSONClient
from .topic_extractor import OpenAITopicGenerator, extract_topics, GENERIC_TOPICS
from .idea_generator import OpenAIIdeaGenerator, synthesize_ideas, template_ideas
from .error_handling import InputError, NotFoundError

logger = logging.getLogger(__name__)


def log_node(node_name: str):
    """
    Decorator that logs a node's start, duration and failure.

    Exceptions are logged and re-raised; recovery is the node's own business.
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            start_time = datetime.now()
            logger.debug(f"Starting {node_name} node")
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                duration = (datetime.now() - start_time).total_seconds()
                logger.error(f"{node_name} node failed after {duration:.2f}s: {e}")
                raise

            duration = (datetime.now() - start_time).total_seconds()
            logger.info(f"Completed {node_name} node in {duration:.2f}s")
            return result

        return wrapper
    return decorator


class ChannelAnalyzer:
    """
    Runs channel analyses against injected or configured collaborators.

    Collaborators not passed in are built from the configuration. One instance
    may serve many requests; each run keeps its data in its own graph state.
    """

    def __init__(
        self,
        config: Configuration,
        youtube_client: Optional[YouTubeClient] = None,
        news_client: Optional[NewsClient] = None,
        reddit_client: Optional[RedditClient] = None,
        topic_generator: Optional[OpenAITopicGenerator] = None,
        idea_generator: Optional[OpenAIIdeaGenerator] = None
    ):
        """
        Initialize the analyzer.

        Args:
            config: Configuration instance
            youtube_client: Optional YouTube collaborator
            news_client: Optional news collaborator
            reddit_client: Optional Reddit collaborator
            topic_generator: Optional topic generator
            idea_generator: Optional idea generator
        """
        self.config = config
        self.youtube = youtube_client
        self.news = news_client
        self.reddit = reddit_client
        self.topic_generator = topic_generator
        self.idea_generator = idea_generator

        self.workflow = create_analysis_workflow(self)

    def ensure_collaborators(self) -> None:
        """Build any collaborator that was not injected."""
        if self.youtube is None:
            self.youtube = YouTubeClient(self.config)
        if self.news is None:
            self.news = NewsClient(self.config)
        if self.reddit is None:
            self.reddit = RedditClient(self.config)
        if self.topic_generator is None or self.idea_generator is None:
            llm = OpenAIJSONClient(self.config)
            if self.topic_generator is None:
                self.topic_generator = OpenAITopicGenerator(llm)
            if self.idea_generator is None:
                self.idea_generator = OpenAIIdeaGenerator(llm)

    def _prepare(self, channel_url: Any, channel_id: Optional[str]) -> Dict[str, Any]:
        """
        Check configuration and input, returning the initial graph state.

        Raises:
            ConfigurationError: If a required API key is missing
            InputError: If the channel URL is missing or not a YouTube URL
        """
        self.config.require_youtube_api_key()
        self.config.require_openai_api_key()

        if not channel_url or not isinstance(channel_url, str):
            raise InputError("Valid channel URL is required")
        if not is_youtube_url(channel_url):
            raise InputError("Invalid YouTube URL format")
        if channel_id is not None and not isinstance(channel_id, str):
            raise InputError("Channel ID must be a string")

        self.ensure_collaborators()

        return {
            "channel_url": channel_url.strip(),
            "channel_id": channel_id.strip() if channel_id and channel_id.strip() else None,
        }

    def analyze(self, channel_url: str, channel_id: Optional[str] = None) -> AnalysisResult:
        """
        Analyze a channel and generate content ideas.

        Args:
            channel_url: YouTube channel URL
            channel_id: Optional pre-resolved channel ID

        Returns:
            Complete AnalysisResult with exactly five ideas

        Raises:
            ConfigurationError: If a required API key is missing
            InputError: If the URL is invalid or cannot be resolved
            NotFoundError: If channel info or uploads are unavailable
            RateLimitError: If the YouTube quota is exceeded
        """
        initial_state = self._prepare(channel_url, channel_id)
        logger.info(f"Starting channel analysis for {initial_state['channel_url']}")

        start_time = datetime.now()
        final_state = self.workflow.invoke(initial_state)
        return self._finish(final_state, start_time)

    async def aanalyze(
        self,
        channel_url: str,
        channel_id: Optional[str] = None,
        timeout: Optional[float] = None
    ) -> AnalysisResult:
        """
        Analyze a channel under a time limit.

        Args:
            channel_url: YouTube channel URL
            channel_id: Optional pre-resolved channel ID
            timeout: Seconds before the run is abandoned (defaults to request_timeout)

        Returns:
            Complete AnalysisResult with exactly five ideas

        Raises:
            asyncio.TimeoutError: If the run exceeds the timeout
        """
        initial_state = self._prepare(channel_url, channel_id)
        logger.info(f"Starting channel analysis for {initial_state['channel_url']}")

        start_time = datetime.now()
        final_state = await asyncio.wait_for(
            self.workflow.ainvoke(initial_state),
            timeout=timeout or self.config.request_timeout
        )
        return self._finish(final_state, start_time)

    def _finish(self, final_state: Any, start_time: datetime) -> AnalysisResult:
        """Pull the result out of the final graph state and log a summary."""
        if isinstance(final_state, dict):
            result = final_state.get("result")
            warnings = final_state.get("warnings") or []
        else:
            result = final_state.result
            warnings = final_state.warnings

        processing_time = (datetime.now() - start_time).total_seconds()
        if warnings:
            logger.warning(f"Analysis completed with degraded sources: {'; '.join(warnings)}")
        logger.info(f"Channel analysis completed in {processing_time:.2f} seconds: "
                    f"{len(result.videos)} videos, {len(result.topics)} topics, "
                    f"{len(result.news)} news, {len(result.discussion_items)} discussions")
        return result

    # Nodes

    @log_node("resolve_channel")
    def resolve_channel_node(self, state: AnalysisState) -> Dict[str, Any]:
        """Resolve the channel ID from the URL unless one was supplied."""
        if state.channel_id:
            return {"channel_id": state.channel_id}

        channel_id = self.youtube.resolve_channel_id(state.channel_url)
        if not channel_id:
            raise InputError("Could not extract channel ID from URL")

        logger.info(f"Resolved {state.channel_url} to channel {channel_id}")
        return {"channel_id": channel_id}

    @log_node("fetch_channel_info")
    def fetch_channel_info_node(self, state: AnalysisState) -> Dict[str, Any]:
        """Fetch the channel's title and description."""
        channel = self.youtube.get_channel_info(state.channel_id)
        if not channel:
            raise NotFoundError("Could not fetch channel data")
        return {"channel": channel}

    @log_node("fetch_recent_videos")
    def fetch_recent_videos_node(self, state: AnalysisState) -> Dict[str, Any]:
        """Fetch the channel's most recent uploads."""
        videos = self.youtube.get_recent_videos(state.channel_id, self.config.max_videos)
        if not videos:
            raise NotFoundError("No videos found for this channel")
        return {"videos": list(videos)[:self.config.max_videos]}

    @log_node("extract_topics")
    def extract_topics_node(self, state: AnalysisState) -> Dict[str, Any]:
        """Derive topics from the uploads."""
        topics = extract_topics(state.videos, self.topic_generator)
        logger.info(f"Topics: {topics}")
        return {"topics": topics}

    def _tolerant_fetch(self, key: str, label: str, fetch: Callable[[List[str]], List[Any]], topics: List[str]) -> Dict[str, Any]:
        """Run one enrichment branch, turning any failure into an empty list."""
        try:
            items = list(fetch(topics) or [])
        except Exception as e:
            logger.warning(f"{label} fetch failed, continuing without it: {e}")
            return {key: [], "warnings": [f"{label}: {e}"]}

        logger.info(f"{label}: {len(items)} items")
        return {key: items}

    @log_node("fetch_news")
    def fetch_news_node(self, state: AnalysisState) -> Dict[str, Any]:
        """Fetch news related to the topics."""
        return self._tolerant_fetch("news", "News", self.news.fetch_relevant_news, state.topics)

    @log_node("fetch_discussions")
    def fetch_discussions_node(self, state: AnalysisState) -> Dict[str, Any]:
        """Fetch Reddit discussions related to the topics."""
        return self._tolerant_fetch("discussion_items", "Reddit", self.reddit.search, state.topics)

    @log_node("generate_ideas")
    def generate_ideas_node(self, state: AnalysisState) -> Dict[str, Any]:
        """Generate exactly five ideas."""
        ideas = synthesize_ideas(
            self.idea_generator,
            state.topics,
            state.channel.title,
            state.videos,
            state.news,
            state.discussion_items
        )
        return {"ideas": ideas}

    @log_node("assemble_result")
    def assemble_result_node(self, state: AnalysisState) -> Dict[str, Any]:
        """Assemble the final result, re-checking the topic and idea guarantees."""
        topics = state.topics or list(GENERIC_TOPICS)
        ideas = list(state.ideas)

        if not ideas:
            logger.warning("No ideas reached assembly, building them from topics")
            ideas = template_ideas(topics, IDEA_COUNT)
        elif len(ideas) < IDEA_COUNT:
            ideas.extend(template_ideas(topics, IDEA_COUNT - len(ideas), start=len(ideas)))

        result = AnalysisResult(
            channel=state.channel,
            videos=state.videos,
            topics=topics,
            news=state.news,
            discussion_items=state.discussion_items,
            ideas=ideas[:IDEA_COUNT]
        )
        return {"result": result}


def create_analysis_workflow(analyzer: ChannelAnalyzer):
    """
    Create the LangGraph workflow for a channel analyzer.

    Args:
        analyzer: Analyzer whose node methods and collaborators the graph uses

    Returns:
        Compiled LangGraph workflow
    """
    workflow = StateGraph(AnalysisState)

    workflow.add_node("resolve_channel", analyzer.resolve_channel_node)
    workflow.add_node("fetch_channel_info", analyzer.fetch_channel_info_node)
    workflow.add_node("fetch_recent_videos", analyzer.fetch_recent_videos_node)
    workflow.add_node("extract_topics", analyzer.extract_topics_node)
    workflow.add_node("fetch_news", analyzer.fetch_news_node)
    workflow.add_node("fetch_discussions", analyzer.fetch_discussions_node)
    workflow.add_node("generate_ideas", analyzer.generate_ideas_node)
    workflow.add_node("assemble_result", analyzer.assemble_result_node)

    workflow.set_entry_point("resolve_channel")

    # Channel info and uploads run in parallel; both must succeed
    workflow.add_edge("resolve_channel", "fetch_channel_info")
    workflow.add_edge("resolve_channel", "fetch_recent_videos")
    workflow.add_edge(["fetch_channel_info", "fetch_recent_videos"], "extract_topics")

    # News and discussions run in parallel; each degrades independently
    workflow.add_edge("extract_topics", "fetch_news")
    workflow.add_edge("extract_topics", "fetch_discussions")
    workflow.add_edge(["fetch_news", "fetch_discussions"], "generate_ideas")

    workflow.add_edge("generate_ideas", "assemble_result")
    workflow.add_edge("assemble_result", END)

    return workflow.compile()
