"""
Reddit search client for topic enrichment.

Searches Reddit's public JSON endpoint for hot posts from the past week about
each of the channel's leading topics. Failures for one topic do not affect the
others.
"""

import logging
from typing import List, Dict, Optional, Any

import requests

from .models import DiscussionItem
from .config import Configuration
from .error_handling import tolerate_failure

logger = logging.getLogger(__name__)

REDDIT_SEARCH_URL = "https://www.reddit.com/search.json"
MAX_DISCUSSIONS = 10


def merge_discussions(posts: List[DiscussionItem], limit: int = MAX_DISCUSSIONS) -> List[DiscussionItem]:
    """
    Deduplicate posts by URL and order them by descending score.

    When the same URL appears more than once, the highest-scoring copy is kept.

    Args:
        posts: Posts collected across topic searches
        limit: Maximum number of posts to return

    Returns:
        Deduplicated, sorted and capped list of posts
    """
    best: Dict[str, DiscussionItem] = {}
    for post in posts:
        current = best.get(post.url)
        if current is None or post.score > current.score:
            best[post.url] = post

    return sorted(best.values(), key=lambda p: p.score, reverse=True)[:limit]


class RedditClient:
    """Searches Reddit for discussions about a topic list."""

    def __init__(self, config: Configuration, session: Optional[requests.Session] = None):
        self.user_agent = config.reddit_user_agent
        self.timeout = min(config.request_timeout, 30.0)
        self.session = session or requests.Session()

    @tolerate_failure("Reddit topic search")
    def _search_topic(self, topic: str) -> List[DiscussionItem]:
        """Search hot posts for a single topic."""
        params = {
            'q': topic,
            'sort': 'hot',
            'limit': 5,
            't': 'week',
        }
        response = self.session.get(
            REDDIT_SEARCH_URL,
            params=params,
            headers={'User-Agent': self.user_agent},
            timeout=self.timeout
        )
        response.raise_for_status()

        children = ((response.json() or {}).get('data') or {}).get('children') or []
        return [
            self._convert_to_discussion(child['data'])
            for child in children
            if child.get('data') and not child['data'].get('stickied')
        ]

    def _convert_to_discussion(self, data: Dict[str, Any]) -> DiscussionItem:
        """Convert a Reddit listing entry to a DiscussionItem."""
        return DiscussionItem(
            title=data.get('title') or 'Untitled',
            url=f"https://reddit.com{data.get('permalink', '')}",
            subreddit=data.get('subreddit') or 'unknown',
            score=int(data.get('score') or 0),
            created=data.get('created_utc')
        )

    @tolerate_failure("Reddit search")
    def search(self, topics: List[str]) -> List[DiscussionItem]:
        """
        Search Reddit for the first three topics.

        Args:
            topics: Channel topics

        Returns:
            Up to 10 posts, deduplicated by URL and sorted by descending score
        """
        posts: List[DiscussionItem] = []
        for topic in topics[:3]:
            posts.extend(self._search_topic(topic))

        discussions = merge_discussions(posts)
        logger.info(f"Found {len(discussions)} Reddit discussions for {len(topics[:3])} topics")
        return discussions
