"""MEMORY topic listing behind the get_memory_topics tool."""

from ..models import Envelope

LEARNINGS_TOPICS = (
    "Environment",
    "Infrastructure",
    "Security",
    "TypeScript",
    "PAI",
)

BLUEPRINTS_PATH = "~/reference/pai-blueprints/pai-extension-guide/"


def get_memory_topics() -> Envelope:
    """List the MEMORY learning topics; the full markdown lives outside this server."""
    return Envelope(
        description="KAY's MEMORY structure",
        learnings_topics=list(LEARNINGS_TOPICS),
        note="These are Oscar's accumulated learnings from previous sessions",
        suggestion=(
            f"The raw markdown files are at: {BLUEPRINTS_PATH} - "
            "your Claude Code can read them directly"
        ),
    )
