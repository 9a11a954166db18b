"""
Unit tests for the summary agent. The hosted model client is mocked.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from inspection_report.agents.summarizer import (
    NO_ITEMS_SUMMARY,
    SUMMARY_UNAVAILABLE,
    SummaryGenerator,
)
from utils.config import config
from utils.prompts import format_descriptions, get_prompt


def completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


class TestPrompts:
    """Tests for the prompt registry."""

    def test_descriptions_are_numbered(self):
        assert format_descriptions(["Door ok", "Window cracked"]) == "Item 1: Door ok\nItem 2: Window cracked"

    def test_unknown_prompt(self):
        with pytest.raises(KeyError):
            get_prompt("inspector")

    def test_unknown_version(self):
        with pytest.raises(KeyError):
            get_prompt("summary", version="v9")


class TestSummaryGenerator:
    """Tests for SummaryGenerator."""

    def test_returns_model_text(self):
        client = MagicMock()
        client.chat.completions.create.return_value = completion("  Good overall condition.  ")

        summary = SummaryGenerator(client=client).generate(["Kitchen clean", "Tiles intact"])

        assert summary == "Good overall condition."
        kwargs = client.chat.completions.create.call_args.kwargs
        assert "Item 1: Kitchen clean\nItem 2: Tiles intact" in kwargs["messages"][-1]["content"]
        assert kwargs["model"] == config.summary_model

    def test_no_items(self):
        client = MagicMock()
        assert SummaryGenerator(client=client).generate([]) == NO_ITEMS_SUMMARY
        client.chat.completions.create.assert_not_called()

    def test_client_failure_returns_fallback(self):
        client = MagicMock()
        client.chat.completions.create.side_effect = RuntimeError("503 Service Unavailable")
        assert SummaryGenerator(client=client).generate(["Door ok"]) == SUMMARY_UNAVAILABLE

    def test_empty_completion_returns_fallback(self):
        client = MagicMock()
        client.chat.completions.create.return_value = completion("   ")
        assert SummaryGenerator(client=client).generate(["Door ok"]) == SUMMARY_UNAVAILABLE

    def test_no_api_key_returns_fallback(self, monkeypatch):
        monkeypatch.setattr(config, "huggingface_api_key", None)
        generator = SummaryGenerator()
        assert generator.client is None
        assert generator.generate(["Door ok"]) == SUMMARY_UNAVAILABLE
