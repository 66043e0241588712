"""Extraction prompt for interpretive knowledge graph extraction."""

from typing import Optional

# --- Per-chunk prompt ---
ANALYST_PROMPT = """You are a sophisticated analyst. Your task is to read the following document and transform it into a knowledge graph by interpreting its core themes, characters, and their connections. Do not just extract data; provide an analysis.

## Instructions
1. Identify the main entities (people, places) AND the central abstract concepts/themes.
2. For each entity and concept, provide a brief, verbatim 'sourceText' snippet from the document.
3. Crucially, for each entity and concept, write a 1-2 sentence 'summary' that interprets its significance, role, or motivation.
4. Define meaningful relationships between these entities and concepts. Use descriptive labels that explain the nature of the connection (e.g., 'driven by', 'conflicts with', 'symbolizes'). Avoid simple verbs like 'is' or 'has'.

## Entity fields
- id: unique identifier, lowercase with underscores (e.g., "captain_ahab")
- label: display name (e.g., "Captain Ahab")
- type: "Person", "Location", "Object" for concrete things, "Concept" for abstract themes or ideas
- sourceText: verbatim snippet that introduces or defines the entity
- summary: 1-2 sentence interpretation of why it is important

## Output: Return ONLY valid JSON, no markdown fences.
{
  "entities": [
    {
      "id": "captain_ahab",
      "label": "Captain Ahab",
      "type": "Person",
      "sourceText": "verbatim snippet",
      "summary": "Why this entity matters."
    }
  ],
  "relationships": [
    {
      "source": "captain_ahab",
      "target": "moby_dick",
      "label": "is obsessed with"
    }
  ]
}"""

INSTRUCTIONS_TEMPLATE = '\n\nFollow these additional user instructions: "{instructions}"'


def build_system_prompt(instructions: Optional[str] = None) -> str:
    """Return the analyst prompt, extended with caller instructions if any."""
    if instructions and instructions.strip():
        return ANALYST_PROMPT + INSTRUCTIONS_TEMPLATE.format(instructions=instructions.strip())
    return ANALYST_PROMPT
