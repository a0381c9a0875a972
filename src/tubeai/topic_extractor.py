"""
Topic extraction for channel analysis.

Derives a short list of topic phrases from a channel's recent uploads. The
primary strategy asks an OpenAI model for topics; when that fails or comes back
empty, a keyword-frequency ladder over the video titles takes over, ending in a
fixed list of generic topics. extract_topics never raises.
"""

import logging
from typing import List, Any, Optional

from .models import VideoSummary
from .llm import OpenAIJSONClient
from .error_handling import EnrichmentFailure

logger = logging.getLogger(__name__)


MAX_TOPICS = 8
DESCRIPTION_VIDEOS = 5
DESCRIPTION_CHARS = 200
MIN_KEYWORD_LENGTH = 5

# Keyword limits differ by failure path: 8 when the model call failed,
# 5 when the model answered with no topics.
MODEL_FAILED_KEYWORD_LIMIT = 8
EMPTY_RESULT_KEYWORD_LIMIT = 5

GENERIC_TOPICS = [
    'general content',
    'trending topics',
    'popular videos',
    'engaging content',
    'viral content',
]

STOP_WORDS = {
    'the', 'a', 'an', 'and', 'or', 'but', 'in', 'on', 'at', 'to', 'for', 'of',
    'with', 'by', 'is', 'are', 'was', 'were', 'this', 'that', 'how', 'why',
    'what', 'when', 'where',
}

SYSTEM_PROMPT = "You are a content analysis expert. Extract key topics from YouTube content."


def clean_topics(values: List[Any], limit: int = MAX_TOPICS) -> List[str]:
    """
    Keep non-blank string topics, deduplicated case-insensitively, in order.

    Args:
        values: Raw topic values
        limit: Maximum number of topics to keep

    Returns:
        Cleaned topic list
    """
    seen = set()
    topics = []
    for value in values:
        if not isinstance(value, str):
            continue
        topic = value.strip()
        if not topic or topic.lower() in seen:
            continue
        seen.add(topic.lower())
        topics.append(topic)
    return topics[:limit]


def parse_topics_payload(payload: Any) -> List[str]:
    """
    Extract the topic list from a decoded model response.

    The expected shape is {"topics": [...]}. If that key is missing, the first
    list-valued field is used instead, and that substitution is logged.

    Args:
        payload: Decoded JSON response

    Returns:
        Cleaned topic list (empty if no list was found)
    """
    if isinstance(payload, dict) and isinstance(payload.get('topics'), list):
        return clean_topics(payload['topics'])

    if isinstance(payload, list):
        logger.warning("Topic response was a bare list, using it as the topic list")
        return clean_topics(payload)

    if isinstance(payload, dict):
        for key, value in payload.items():
            if isinstance(value, list):
                logger.warning(f"Topic response had no 'topics' key, using list field '{key}' instead")
                return clean_topics(value)

    logger.warning("Topic response contained no list of topics")
    return []


def keyword_topics(videos: List[VideoSummary], limit: int) -> List[str]:
    """
    Derive topics from the most distinctive words in video titles.

    Titles are split on whitespace and lowercased; stop words and words of four
    characters or fewer are dropped. The remaining words are deduplicated in
    order of first appearance.

    Args:
        videos: Recent uploads
        limit: Maximum number of keywords to return

    Returns:
        Keyword list (may be empty)
    """
    keywords = []
    seen = set()
    for video in videos:
        for word in video.title.lower().split():
            if len(word) < MIN_KEYWORD_LENGTH or word in STOP_WORDS or word in seen:
                continue
            seen.add(word)
            keywords.append(word)
    return keywords[:limit]


def fallback_topics(videos: List[VideoSummary], limit: int) -> List[str]:
    """
    Keyword topics from titles, or the generic topic list if there are none.

    Args:
        videos: Recent uploads
        limit: Maximum number of keywords to take

    Returns:
        Non-empty topic list
    """
    topics = keyword_topics(videos, limit)
    if topics:
        logger.info(f"Using {len(topics)} title keywords as topics")
        return topics

    logger.warning("No usable title keywords, using generic topics")
    return list(GENERIC_TOPICS)


class OpenAITopicGenerator:
    """Asks an OpenAI model for the topics a channel covers."""

    def __init__(self, llm: OpenAIJSONClient):
        self.llm = llm
        self.temperature = 0.3

    def _create_prompt(self, videos: List[VideoSummary]) -> str:
        """Build the topic prompt from titles and description excerpts."""
        video_titles = "\n".join(v.title for v in videos)
        video_descriptions = "\n".join(
            v.description[:DESCRIPTION_CHARS] for v in videos[:DESCRIPTION_VIDEOS]
        )

        return f"""Analyze the following YouTube video titles and descriptions from a channel. Extract the main topics and themes covered. Return a JSON object with a "topics" array containing 5-8 key topics, each as a single short phrase (2-4 words max).

Video Titles:
{video_titles}

Video Descriptions (excerpts):
{video_descriptions}

Return a JSON object in this exact format:
{{
  "topics": ["topic1", "topic2", "topic3"]
}}"""

    def generate_topics(self, videos: List[VideoSummary]) -> List[str]:
        """
        Generate topics for a list of videos.

        Args:
            videos: Recent uploads

        Returns:
            Topic list (may be empty)

        Raises:
            EnrichmentFailure: If the response cannot be decoded
        """
        payload = self.llm.complete_json(SYSTEM_PROMPT, self._create_prompt(videos), self.temperature)
        topics = parse_topics_payload(payload)
        logger.info(f"Model returned {len(topics)} topics: {topics}")
        return topics


def extract_topics(videos: List[VideoSummary], generator: Optional[OpenAITopicGenerator]) -> List[str]:
    """
    Extract topics, falling back to title keywords and then generic topics.

    Args:
        videos: Recent uploads
        generator: Topic generator; None skips straight to the fallback

    Returns:
        Non-empty topic list
    """
    try:
        if generator is None:
            raise EnrichmentFailure("No topic generator available")
        topics = clean_topics(generator.generate_topics(videos))
    except Exception as e:
        logger.warning(f"Topic generation failed, falling back to title keywords: {e}")
        return fallback_topics(videos, MODEL_FAILED_KEYWORD_LIMIT)

    if not topics:
        logger.warning("Topic generation returned no topics, falling back to title keywords")
        return fallback_topics(videos, EMPTY_RESULT_KEYWORD_LIMIT)

    return topics
