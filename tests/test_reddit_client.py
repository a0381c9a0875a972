"""
Tests for the Reddit search client.
"""

from unittest.mock import Mock

import pytest
import requests

from tubeai.models import DiscussionItem
from tubeai.reddit_client import RedditClient, merge_discussions, REDDIT_SEARCH_URL


def listing(*posts):
    """Mock response carrying a Reddit search listing."""
    response = Mock()
    response.json.return_value = {'data': {'children': [{'data': post} for post in posts]}}
    return response


def post(permalink, score, title="Post", subreddit="space", stickied=False):
    return {
        'title': title,
        'permalink': permalink,
        'subreddit': subreddit,
        'score': score,
        'created_utc': 1716200000.0,
        'stickied': stickied,
    }


class TestMergeDiscussions:
    """Test dedupe, ordering and cap."""

    def test_duplicate_keeps_higher_score(self):
        posts = [
            DiscussionItem(title="A", url="https://reddit.com/r/x/1", score=10),
            DiscussionItem(title="A again", url="https://reddit.com/r/x/1", score=50),
            DiscussionItem(title="B", url="https://reddit.com/r/x/2", score=20),
        ]

        merged = merge_discussions(posts)

        assert [(p.url, p.score) for p in merged] == [
            ("https://reddit.com/r/x/1", 50),
            ("https://reddit.com/r/x/2", 20),
        ]

    def test_sorted_and_capped(self):
        posts = [DiscussionItem(title=f"P{i}", url=f"https://reddit.com/{i}", score=i) for i in range(15)]

        merged = merge_discussions(posts)

        assert len(merged) == 10
        assert [p.score for p in merged] == list(range(14, 4, -1))


class TestRedditClient:
    """Test cases for RedditClient."""

    def test_search(self, config):
        session = Mock()
        session.get.side_effect = [
            listing(post('/r/space/1', 100), post('/r/space/pinned', 999, stickied=True)),
            listing(post('/r/ai/2', 300, subreddit='artificial'), post('/r/space/1', 150)),
            listing(post('/r/robots/3', 50)),
        ]
        client = RedditClient(config, session=session)

        items = client.search(["space", "ai", "robots", "mars"])

        assert [i.url for i in items] == [
            'https://reddit.com/r/ai/2',
            'https://reddit.com/r/space/1',
            'https://reddit.com/r/robots/3',
        ]
        assert items[1].score == 150
        assert items[0].subreddit == 'artificial'
        assert session.get.call_count == 3

        args, kwargs = session.get.call_args_list[0]
        assert args[0] == REDDIT_SEARCH_URL
        assert kwargs['params'] == {'q': 'space', 'sort': 'hot', 'limit': 5, 't': 'week'}
        assert kwargs['headers'] == {'User-Agent': config.reddit_user_agent}

    def test_topic_failure_isolated(self, config):
        session = Mock()
        session.get.side_effect = [
            requests.Timeout("slow"),
            listing(post('/r/ai/2', 300)),
            listing(post('/r/robots/3', 50)),
        ]

        items = RedditClient(config, session=session).search(["space", "ai", "robots"])

        assert len(items) == 2

    def test_all_topics_fail(self, config):
        session = Mock()
        session.get.side_effect = requests.ConnectionError("offline")

        assert RedditClient(config, session=session).search(["space", "ai"]) == []

    def test_no_topics(self, config):
        session = Mock()

        assert RedditClient(config, session=session).search([]) == []
        session.get.assert_not_called()
