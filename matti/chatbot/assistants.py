import os
from typing import Callable

from loguru import logger
from pydantic import BaseModel

from matti.chatbot.prompts.system.matti_prompt import MATTI_PROMPT
from matti.chatbot.prompts.system.opvoedmaatje_prompt import OPVOEDMAATJE_PROMPT


class AssistantConfig(BaseModel):
    """Branding and persona of one deployment."""

    name: str
    logo: str
    primary_color: str
    system_prompt: str


MATTI = AssistantConfig(name="Matti", logo="/assets/matti-logo.svg", primary_color="#2F6BFF", system_prompt=MATTI_PROMPT)
OPVOEDMAATJE = AssistantConfig(name="Opvoedmaatje", logo="/assets/opvoedmaatje-logo.svg", primary_color="#2563B8", system_prompt=OPVOEDMAATJE_PROMPT)

ASSISTANTS: dict[str, AssistantConfig] = {
    "matti": MATTI,
    "opvoedmaatje": OPVOEDMAATJE,
}


def load_assistant(getenv: Callable[[str, str], str | None] = os.getenv) -> AssistantConfig:
    """
    Returns the assistant selected by ASSISTANT_TYPE.
    Unknown values fall back to Matti.
    """
    assistant_type = (getenv("ASSISTANT_TYPE", "matti") or "matti").lower()
    assistant = ASSISTANTS.get(assistant_type)
    if assistant is None:
        logger.warning("Unknown ASSISTANT_TYPE, falling back to matti", assistant_type=assistant_type)
        return MATTI
    return assistant
