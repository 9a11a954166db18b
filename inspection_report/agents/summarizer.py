"""
Summary agent using a hosted Hugging Face model.
Writes the property condition summary from the item descriptions.
"""

from typing import List, Optional, Sequence

from inspection_report.exceptions import SummaryGenerationError
from utils.config import config
from utils.logger import setup_logger
from utils.prompts import format_descriptions, get_prompt


NO_ITEMS_SUMMARY = "No items were added to generate a summary."
SUMMARY_UNAVAILABLE = "The summary could not be generated. Please try again."


class SummaryGenerator:
    """
    Text-generation client for the report summary.

    Never raises to the caller: missing items or a failed model call
    produce fixed sentences the report can still print.
    """

    def __init__(self, client=None, model: Optional[str] = None):
        self.model = model or config.summary_model
        self.temperature = config.summary_temperature
        self.max_tokens = config.summary_max_tokens

        self.logger = setup_logger(
            "agent.summarizer",
            level=config.log_level,
            component="SUMMARIZER"
        )

        self.client = client if client is not None else self._init_client()

    def _init_client(self):
        """Initialize the InferenceClient, or None when no API key is configured."""
        if not config.summary_enabled:
            self.logger.warning("HUGGINGFACE_API_KEY not set; summaries will use the fallback text")
            return None

        from huggingface_hub import InferenceClient

        self.logger.info(f"Initialized Summarizer with model: {self.model}")
        return InferenceClient(api_key=config.huggingface_api_key, timeout=config.api_timeout)

    def build_messages(self, descriptions: Sequence[str]) -> List[dict]:
        prompt = get_prompt("summary").format(descriptions=format_descriptions(descriptions))
        return [
            {"role": "system", "content": get_prompt("summary_system")},
            {"role": "user", "content": prompt},
        ]

    def _call_llm(self, messages: List[dict]) -> str:
        if self.client is None:
            raise SummaryGenerationError("No summary client available")
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except Exception as e:
            raise SummaryGenerationError(str(e)) from e

        content = response.choices[0].message.content
        if not content or not content.strip():
            raise SummaryGenerationError("Model returned an empty summary")
        return content.strip()

    def generate(self, descriptions: Sequence[str]) -> str:
        """
        Generate the summary text.

        Args:
            descriptions: Item descriptions in report order

        Returns:
            Summary text, or a fixed fallback sentence
        """
        if not descriptions:
            return NO_ITEMS_SUMMARY

        try:
            summary = self._call_llm(self.build_messages(descriptions))
        except SummaryGenerationError as e:
            self.logger.error(f"Summary generation failed: {e}")
            return SUMMARY_UNAVAILABLE

        self.logger.info(f"Summary generated ({len(summary)} chars)")
        return summary


def generate_summary(descriptions: Sequence[str]) -> str:
    """Generate a summary with the configured model."""
    return SummaryGenerator().generate(descriptions)
