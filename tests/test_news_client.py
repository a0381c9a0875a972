"""
Tests for the NewsAPI client.
"""

from datetime import date
from unittest.mock import Mock

import pytest
import requests

from tubeai.config import Configuration
from tubeai.news_client import NewsClient, NEWS_API_BASE


@pytest.fixture
def news_config():
    return Configuration(
        youtube_api_key="AIzaTest1234567890",
        openai_api_key="sk-test",
        news_api_key="news-test-key",
        request_timeout=10.0,
    )


@pytest.fixture
def mock_session():
    session = Mock()
    response = Mock()
    response.json.return_value = {
        'status': 'ok',
        'articles': [
            {'title': 'Space news', 'url': 'https://n.example.com/1', 'source': {'name': 'Orbit'},
             'publishedAt': '2024-05-20T08:00:00Z'},
            {'title': 'AI news', 'url': 'https://n.example.com/2', 'source': {}},
            {'title': None, 'url': 'https://n.example.com/3'},
            {'title': 'No link'},
        ]
    }
    session.get.return_value = response
    return session


class TestNewsClient:
    """Test cases for NewsClient."""

    def test_fetch_relevant_news(self, news_config, mock_session):
        client = NewsClient(news_config, session=mock_session)

        news = client.fetch_relevant_news(["space", "ai", "robots", "mars"])

        assert [n.title for n in news] == ['Space news', 'AI news']
        assert news[0].source == 'Orbit'
        assert news[1].source == 'Unknown'

        args, kwargs = mock_session.get.call_args
        assert args[0] == f"{NEWS_API_BASE}/everything"
        assert kwargs['params']['q'] == 'space OR ai OR robots'
        assert kwargs['params']['language'] == 'en'
        assert kwargs['params']['sortBy'] == 'publishedAt'
        assert kwargs['params']['pageSize'] == 10
        assert kwargs['params']['from'] == date.today().isoformat()
        assert kwargs['params']['apiKey'] == 'news-test-key'

    def test_missing_key(self, config, mock_session):
        client = NewsClient(config, session=mock_session)

        assert client.fetch_relevant_news(["space"]) == []
        mock_session.get.assert_not_called()

    def test_no_topics(self, news_config, mock_session):
        assert NewsClient(news_config, session=mock_session).fetch_relevant_news([]) == []

    def test_request_failure(self, news_config, mock_session):
        mock_session.get.side_effect = requests.ConnectionError("unreachable")

        assert NewsClient(news_config, session=mock_session).fetch_relevant_news(["space"]) == []

    def test_http_error(self, news_config, mock_session):
        mock_session.get.return_value.raise_for_status.side_effect = requests.HTTPError("426")

        assert NewsClient(news_config, session=mock_session).fetch_relevant_news(["space"]) == []
