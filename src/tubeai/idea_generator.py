"""
Video idea generation for channel analysis.

Combines the channel's identity, recent titles, topics, news headlines and
Reddit discussions into exactly five content ideas. An OpenAI model writes the
ideas; any shortfall is topped up from a deterministic template, and a failed
model call falls back to the template entirely.
"""

import logging
from typing import List, Dict, Any, Optional

from .models import Idea, VideoSummary, NewsItem, DiscussionItem, IDEA_COUNT
from .llm import OpenAIJSONClient
from .topic_extractor import GENERIC_TOPICS
from .error_handling import EnrichmentFailure

logger = logging.getLogger(__name__)


MAX_PROMPT_HEADLINES = 5

DEFAULT_TITLE = "Untitled Video"
DEFAULT_THUMB_DESIGN = "Standard thumbnail design"
DEFAULT_VIDEO_IDEA = "Video concept description"

TEMPLATE_THUMB_DESIGN = "Bold text on gradient background with relevant icon"
TEMPLATE_VIDEO_IDEA = (
    "A comprehensive video covering the latest developments in {topic}, "
    "incorporating current trends and audience interests."
)
# First pass over the topics uses the first pattern; reuse passes move down the list.
TEMPLATE_TITLES = (
    "Latest on {topic}",
    "{topic}: What You Need to Know",
    "The Future of {topic}",
)

SYSTEM_PROMPT = (
    "You are an expert YouTube content strategist who creates engaging video ideas "
    "that match channel styles and current trends."
)


def template_idea(topic: str, variant: int = 0) -> Idea:
    """Build a templated idea for a single topic."""
    title = TEMPLATE_TITLES[variant % len(TEMPLATE_TITLES)].format(topic=topic)
    return Idea(
        title=title,
        thumb_design=TEMPLATE_THUMB_DESIGN,
        video_idea=TEMPLATE_VIDEO_IDEA.format(topic=topic)
    )


def template_ideas(topics: List[str], count: int, start: int = 0) -> List[Idea]:
    """
    Build templated ideas for topics, starting at a given position.

    Topics are cycled when there are fewer than needed; each extra pass uses a
    different title pattern.

    Args:
        topics: Topic list; the generic topics are used if it is empty
        count: Number of ideas to build
        start: Position of the first topic to use

    Returns:
        List of count ideas
    """
    topics = topics or GENERIC_TOPICS
    ideas = []
    for position in range(start, start + count):
        topic = topics[position % len(topics)]
        ideas.append(template_idea(topic, variant=position // len(topics)))
    return ideas


def _field(raw: Dict[str, Any], keys: tuple, default: str) -> str:
    """First non-blank string among keys, else default."""
    for key in keys:
        value = raw.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return default


def parse_ideas_payload(payload: Any) -> List[Idea]:
    """
    Convert a decoded model response into ideas.

    Missing fields are filled with defaults rather than rejected.

    Args:
        payload: Decoded JSON response

    Returns:
        Non-empty list of ideas

    Raises:
        EnrichmentFailure: If there is no non-empty "ideas" list
    """
    raw_ideas = payload.get('ideas') if isinstance(payload, dict) else None
    if not isinstance(raw_ideas, list) or not raw_ideas:
        raise EnrichmentFailure("Invalid response format")

    ideas = [
        Idea(
            title=_field(raw, ('title',), DEFAULT_TITLE),
            thumb_design=_field(raw, ('thumbDesign', 'thumb_design'), DEFAULT_THUMB_DESIGN),
            video_idea=_field(raw, ('videoIdea', 'video_idea'), DEFAULT_VIDEO_IDEA)
        )
        for raw in raw_ideas
        if isinstance(raw, dict)
    ]
    if not ideas:
        raise EnrichmentFailure("Response contained no idea objects")
    return ideas


class OpenAIIdeaGenerator:
    """Asks an OpenAI model for content ideas."""

    def __init__(self, llm: OpenAIJSONClient):
        self.llm = llm
        self.temperature = 0.7

    def _create_prompt(
        self,
        topics: List[str],
        channel_title: str,
        videos: List[VideoSummary],
        news: List[NewsItem],
        discussions: List[DiscussionItem]
    ) -> str:
        """Build the idea prompt."""
        recent_titles = "\n- ".join(v.title for v in videos)
        news_titles = "\n- ".join(n.title for n in news[:MAX_PROMPT_HEADLINES])
        reddit_titles = "\n- ".join(
            f"{d.title} (r/{d.subreddit})" for d in discussions[:MAX_PROMPT_HEADLINES]
        )

        return f"""You are a YouTube content strategist. Generate {IDEA_COUNT} video ideas for the channel "{channel_title}".

Channel's Recent Video Titles:
- {recent_titles}

Identified Topics: {', '.join(topics)}

Relevant News Headlines:
- {news_titles or 'No recent news found'}

Relevant Reddit Discussions:
- {reddit_titles or 'No Reddit discussions found'}

Generate {IDEA_COUNT} video ideas that:
1. Match the channel's content style and topics
2. Incorporate current trends from news and Reddit
3. Are engaging and likely to perform well

For each idea, provide:
- TITLE: A compelling YouTube title (same style as the channel's recent videos)
- THUMB DESIGN: Description of thumbnail design elements (colors, text, imagery style)
- VIDEO IDEA: A detailed description of the video concept (2-3 sentences)

Return a JSON object with an "ideas" array, where each idea has "title", "thumbDesign", and "videoIdea" fields.

Example format:
{{
  "ideas": [
    {{
      "title": "Video Title Here",
      "thumbDesign": "Thumbnail design description",
      "videoIdea": "Detailed video concept description"
    }}
  ]
}}"""

    def generate_ideas(
        self,
        topics: List[str],
        channel_title: str,
        videos: List[VideoSummary],
        news: List[NewsItem],
        discussions: List[DiscussionItem]
    ) -> List[Idea]:
        """
        Generate ideas with the model.

        Raises:
            EnrichmentFailure: If there are no topics or the response is unusable
        """
        if not topics:
            raise EnrichmentFailure("No topics provided")

        prompt = self._create_prompt(topics, channel_title, videos, news, discussions)
        payload = self.llm.complete_json(SYSTEM_PROMPT, prompt, self.temperature)
        ideas = parse_ideas_payload(payload)

        logger.info(f"Model returned {len(ideas)} ideas for '{channel_title}'")
        return ideas


def synthesize_ideas(
    generator: Optional[OpenAIIdeaGenerator],
    topics: List[str],
    channel_title: str,
    videos: List[VideoSummary],
    news: List[NewsItem],
    discussions: List[DiscussionItem]
) -> List[Idea]:
    """
    Produce exactly IDEA_COUNT ideas.

    Args:
        generator: Idea generator; None skips straight to the template
        topics: Channel topics
        channel_title: Channel display title
        videos: Recent uploads
        news: News items
        discussions: Reddit discussions

    Returns:
        List of exactly IDEA_COUNT ideas
    """
    try:
        if generator is None:
            raise EnrichmentFailure("No idea generator available")
        ideas = list(generator.generate_ideas(topics, channel_title, videos, news, discussions))
    except Exception as e:
        logger.warning(f"Idea generation failed, using templated ideas: {e}")
        return template_ideas(topics, IDEA_COUNT)

    if len(ideas) < IDEA_COUNT:
        logger.warning(f"Model returned {len(ideas)} ideas, topping up with templated ideas")
        ideas.extend(template_ideas(topics, IDEA_COUNT - len(ideas), start=len(ideas)))

    return ideas[:IDEA_COUNT]
