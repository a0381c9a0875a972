"""
Tests for topic extraction and its fallback ladder.
"""

import logging

import pytest
from unittest.mock import Mock

from tubeai.models import VideoSummary
from tubeai.error_handling import EnrichmentFailure
from tubeai.topic_extractor import (
    OpenAITopicGenerator, clean_topics, parse_topics_payload, keyword_topics,
    fallback_topics, extract_topics, GENERIC_TOPICS
)


def videos_with_titles(*titles):
    return [VideoSummary(id=f"v{i}", title=title) for i, title in enumerate(titles)]


class TestParseTopicsPayload:
    """Test decoding of model topic responses."""

    def test_topics_key(self):
        assert parse_topics_payload({"topics": ["python", "docker"]}) == ["python", "docker"]

    def test_other_list_field_used_and_logged(self, caplog):
        with caplog.at_level(logging.WARNING):
            topics = parse_topics_payload({"count": 2, "themes": ["python", "docker"]})

        assert topics == ["python", "docker"]
        assert "themes" in caplog.text

    def test_bare_list(self):
        assert parse_topics_payload(["python"]) == ["python"]

    def test_no_list(self):
        assert parse_topics_payload({"summary": "a channel about code"}) == []

    def test_clean_topics(self):
        topics = clean_topics(["Python", " python ", "", None, 3, "Docker"] + [f"t{i}" for i in range(10)])

        assert topics[:2] == ["Python", "Docker"]
        assert len(topics) == 8


class TestKeywordFallback:
    """Test title keyword topics."""

    def test_stop_words_and_short_words_dropped(self):
        videos = videos_with_titles("Where the Robots Learn", "Robots and Rockets")

        assert keyword_topics(videos, 8) == ["robots", "learn", "rockets"]

    def test_stop_words_cover_question_words(self):
        videos = videos_with_titles("Where Which There")

        assert keyword_topics(videos, 8) == ["which", "there"]

    def test_limit(self):
        videos = videos_with_titles("alpha bravo charlie delta echos foxtrot golfs hotel india juliet")

        assert len(keyword_topics(videos, 5)) == 5
        assert len(keyword_topics(videos, 8)) == 8

    def test_generic_when_no_keywords(self):
        videos = videos_with_titles("How to", "Why it is")

        assert fallback_topics(videos, 8) == GENERIC_TOPICS

    def test_tutorial_channel(self):
        """Repeated 'tutorial' titles yield a single 'tutorial' topic."""
        videos = videos_with_titles(*[f"Python tutorial part {i}" for i in range(1, 11)])

        topics = fallback_topics(videos, 8)

        assert "tutorial" in topics
        assert topics.count("tutorial") == 1


class TestExtractTopics:
    """Test the full extraction ladder."""

    @pytest.fixture
    def many_keyword_videos(self):
        return videos_with_titles("alpha bravo charlie delta echos foxtrot golfs hotel india juliet")

    def test_model_topics_used(self, many_keyword_videos):
        generator = Mock()
        generator.generate_topics.return_value = ["space", "ai", "robots"]

        assert extract_topics(many_keyword_videos, generator) == ["space", "ai", "robots"]

    def test_model_failure_uses_eight_keywords(self, many_keyword_videos):
        generator = Mock()
        generator.generate_topics.side_effect = EnrichmentFailure("No response from AI")

        assert len(extract_topics(many_keyword_videos, generator)) == 8

    def test_empty_model_result_uses_five_keywords(self, many_keyword_videos):
        generator = Mock()
        generator.generate_topics.return_value = []

        assert len(extract_topics(many_keyword_videos, generator)) == 5

    def test_no_generator(self, many_keyword_videos):
        assert len(extract_topics(many_keyword_videos, None)) == 8

    def test_never_empty(self):
        generator = Mock()
        generator.generate_topics.side_effect = RuntimeError("boom")

        assert extract_topics(videos_with_titles("a b c"), generator) == GENERIC_TOPICS


class TestOpenAITopicGenerator:
    """Test prompt construction and response handling."""

    def test_generate_topics(self, sample_videos):
        llm = Mock()
        llm.complete_json.return_value = {"topics": ["python", "apis"]}
        generator = OpenAITopicGenerator(llm)

        topics = generator.generate_topics(sample_videos)

        assert topics == ["python", "apis"]
        system_prompt, prompt, temperature = llm.complete_json.call_args[0]
        assert temperature == 0.3
        assert "content analysis expert" in system_prompt
        for video in sample_videos:
            assert video.title in prompt

    def test_prompt_limits_descriptions(self):
        videos = [
            VideoSummary(id=f"v{i}", title=f"Title {i}", description=f"DESC{i}" + "x" * 300)
            for i in range(7)
        ]
        prompt = OpenAITopicGenerator(Mock())._create_prompt(videos)

        assert "DESC4" in prompt
        assert "DESC5" not in prompt
        assert "x" * 201 not in prompt
