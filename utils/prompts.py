"""
Versioned prompt templates for the summary model.
All prompts are centralized here for easy updates.
"""

from typing import Dict

# ============================================================================
# PROMPT VERSIONS
# ============================================================================

PROMPT_VERSION = "1.0.0"

# ============================================================================
# SUMMARY PROMPT
# ============================================================================

SUMMARY_PROMPT = """Based on the following notes from a property inspection, write a concise, professional summary of the overall condition of the property.
Be objective and highlight the most relevant points, both positive and negative.

Notes:
{descriptions}

Inspection Summary:"""


SUMMARY_SYSTEM_PROMPT = """You are a property inspector writing the condition summary of an inspection report.
Write plain prose without markdown headings or bullet points."""


# ============================================================================
# PROMPT REGISTRY
# ============================================================================

PROMPT_REGISTRY: Dict[str, Dict[str, str]] = {
    "summary": {
        "v1.0.0": SUMMARY_PROMPT,
        "current": SUMMARY_PROMPT
    },
    "summary_system": {
        "v1.0.0": SUMMARY_SYSTEM_PROMPT,
        "current": SUMMARY_SYSTEM_PROMPT
    },
}


def get_prompt(prompt_name: str, version: str = "current") -> str:
    """
    Get prompt by name and version.

    Args:
        prompt_name: Name of prompt (summary, summary_system)
        version: Version string or "current"

    Returns:
        Prompt template string

    Raises:
        KeyError if prompt not found
    """
    if prompt_name not in PROMPT_REGISTRY:
        raise KeyError(f"Prompt '{prompt_name}' not found in registry")

    if version not in PROMPT_REGISTRY[prompt_name]:
        raise KeyError(f"Version '{version}' not found for prompt '{prompt_name}'")

    return PROMPT_REGISTRY[prompt_name][version]


def format_descriptions(descriptions) -> str:
    """Number item descriptions as 'Item i: description' lines."""
    return "\n".join(f"Item {i}: {d}" for i, d in enumerate(descriptions, 1))
