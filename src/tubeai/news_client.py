"""
NewsAPI client for topic enrichment.

Looks up today's English-language headlines for the channel's leading topics.
This source is best-effort: a missing key or any request failure yields an
empty list.
"""

import logging
from datetime import date
from typing import List, Optional

import requests

from .models import NewsItem
from .config import Configuration
from .error_handling import tolerate_failure

logger = logging.getLogger(__name__)

NEWS_API_BASE = "https://newsapi.org/v2"


class NewsClient:
    """Fetches news articles related to a topic list."""

    def __init__(self, config: Configuration, session: Optional[requests.Session] = None):
        self.api_key = config.news_api_key
        self.timeout = min(config.request_timeout, 30.0)
        self.session = session or requests.Session()

    @tolerate_failure("News fetch")
    def fetch_relevant_news(self, topics: List[str]) -> List[NewsItem]:
        """
        Fetch today's articles matching any of the first three topics.

        Args:
            topics: Channel topics

        Returns:
            List of NewsItem objects, empty if the key is missing or the request fails
        """
        if not self.api_key:
            logger.warning("NEWS_API_KEY not set, skipping news fetch")
            return []
        if not topics:
            return []

        params = {
            'q': ' OR '.join(topics[:3]),
            'language': 'en',
            'sortBy': 'publishedAt',
            'pageSize': 10,
            'from': date.today().isoformat(),
            'apiKey': self.api_key,
        }

        response = self.session.get(f"{NEWS_API_BASE}/everything", params=params, timeout=self.timeout)
        response.raise_for_status()

        articles = response.json().get('articles') or []
        news = [
            NewsItem(
                title=article['title'],
                url=article['url'],
                source=(article.get('source') or {}).get('name') or 'Unknown',
                published_at=article.get('publishedAt')
            )
            for article in articles
            if article.get('title') and article.get('url')
        ]

        logger.info(f"Fetched {len(news)} news articles for query '{params['q']}'")
        return news
