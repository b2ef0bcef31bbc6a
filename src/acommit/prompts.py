"""Prompt template for commit message generation."""

PROMPT_TEMPLATE = """Generate a concise, clear git commit message in English based on these file changes:

{changes}

Rules:
- Use conventional commits format (feat:, fix:, docs:, etc.)
- Be specific but concise
- Maximum 50 characters for the title
- Only return the commit message, nothing else"""


def build_prompt(diff_info: str) -> str:
    """Build the generation prompt.

    Args:
        diff_info: Name-status listing of the changed files

    Returns:
        The prompt to send to the model
    """
    return PROMPT_TEMPLATE.format(changes=diff_info.strip())
