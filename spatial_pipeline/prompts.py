"""Vision prompts, keyed by query type."""

from typing import Dict

DEFAULT_QUERY_TYPE = "full_scene"

SCENE_PROMPTS: Dict[str, str] = {
    "full_scene": """
Analyze this scene for someone with low vision.
Use CLOCK POSITIONS:
- 12 o'clock = straight ahead
- 3 o'clock = right
- 9 o'clock = left
Provide:
1. Main objects with clock position + distance in feet
2. Any hazards (stairs, obstacles) - mark URGENT
3. Overall context (room type, indoor/outdoor)
Format: "Object at [position], [distance] [direction]. CAUTION: [hazard]."
Be concise, prioritize safety.
""",
}


def prompt_for(query_type: str) -> str:
    """Prompt for a query type; unknown types fall back to the full scene."""
    return SCENE_PROMPTS.get(query_type, SCENE_PROMPTS[DEFAULT_QUERY_TYPE]).strip()
