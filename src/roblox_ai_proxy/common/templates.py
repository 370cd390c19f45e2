"""System prompt templating."""
from __future__ import annotations

NO_CONTEXT = "No context provided."

SYSTEM_PROMPT_TEMPLATE = """You are an expert Roblox Luau developer and scripter.
Your task is to help a user in Roblox Studio.
You will be given a conversation with the user and a JSON string representing their currently selected "context" (parts, scripts, etc. in their workspace).
Based on the conversation and context, provide helpful advice or complete Luau code snippets.
If you write code, wrap it in Luau markdown blocks ('''luau ... ''').
If the user asks to modify things, generate a new script they can run to perform the actions.
Be concise and helpful.

The user's selected workspace context is:
{{context}}"""


def render_prompt(template: str, context: str) -> str:
    """
    Render the workspace context into the template.

    Args:
        template: Template content containing {{context}}.
        context: Context string, inserted verbatim.

    Returns:
        Rendered prompt.
    """
    return template.replace("{{context}}", context)


def build_system_prompt(context: str | None) -> str:
    """Build the system prompt; falls back to a placeholder when context is empty."""
    return render_prompt(SYSTEM_PROMPT_TEMPLATE, context or NO_CONTEXT)
