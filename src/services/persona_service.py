"""
AI persona and welcome message generation.

Both generators are best-effort enrichment: they never raise, the OpenAI
client is created with a short timeout and no retries, and every failure
returns a fixed fallback string.
"""
import logging
from typing import List, Optional

import openai
from openai import OpenAI

from src.config import Settings, get_settings

logger = logging.getLogger(__name__)

NO_CREDENTIAL_PERSONA = "Tech Enthusiast"
FALLBACK_PERSONA = "Future Walker"
MAX_PERSONA_LENGTH = 60

PERSONA_PROMPT = """Create a short, cool, and slightly futuristic "Badge Persona" or "Callsign" (max 3-4 words) for an event attendee.
Attendee Name: {name}
Job Role: {role}
Ticket Type: {ticket_type}

Examples:
- "Code Ninja"
- "Visionary Architect"
- "Quantum Explorer"
- "VIP Neural Linker"

Return ONLY the persona string. No quotes."""

WELCOME_PROMPT = """Write a very short (one sentence), high-energy welcome message for an event app dashboard.
User: {name}
Persona: {persona}
Tone: Cyberpunk, excitement, professional but fun."""


def no_credential_welcome(name: str) -> str:
    return f"Welcome, {name}! Ready for the event?"


def fallback_welcome(name: str) -> str:
    return f"Welcome to the future, {name}."


def _get_client(settings: Settings) -> Optional[OpenAI]:
    """Build a time-bounded client, or None when no API key is configured."""
    if not settings.has_ai_credentials:
        logger.warning("OPENAI_API_KEY not set; using fallback persona text")
        return None
    return OpenAI(
        api_key=settings.openai_api_key,
        timeout=settings.persona_timeout_seconds,
        max_retries=0,
    )


def _complete(client: OpenAI, model: str, messages: List[dict]) -> Optional[str]:
    """Run one chat completion and return stripped text, or None on any failure."""
    try:
        response = client.chat.completions.create(model=model, messages=messages)
        content = response.choices[0].message.content if response.choices else None
    except openai.AuthenticationError as e:
        logger.warning("OpenAI authentication failed: %s", e)
        return None
    except openai.RateLimitError as e:
        logger.warning("OpenAI rate limit hit: %s", e)
        return None
    except openai.APITimeoutError as e:
        logger.warning("OpenAI request timed out: %s", e)
        return None
    except openai.APIConnectionError as e:
        logger.warning("Cannot reach OpenAI API: %s", e)
        return None
    except openai.APIError as e:
        logger.warning("OpenAI API error: %s", e)
        return None
    except Exception:
        logger.exception("Unexpected error while calling OpenAI")
        return None

    if content is None:
        return None
    return content.strip() or None


def _clean_persona(text: str) -> str:
    persona = text.splitlines()[0].strip().strip('"\'').strip()
    return persona[:MAX_PERSONA_LENGTH].strip()


def generate_persona(
    name: str,
    role: str,
    ticket_type: str,
    settings: Optional[Settings] = None,
) -> str:
    """
    Generate a short badge persona for an attendee.

    Args:
        name: Attendee full name
        role: Job role or title
        ticket_type: Ticket label shown to the model
        settings: Optional settings override (defaults to get_settings())

    Returns:
        str: Persona text; "Tech Enthusiast" without credentials,
        "Future Walker" when the call fails or returns nothing
    """
    settings = settings or get_settings()
    client = _get_client(settings)
    if client is None:
        return NO_CREDENTIAL_PERSONA

    prompt = PERSONA_PROMPT.format(name=name, role=role, ticket_type=ticket_type)
    text = _complete(client, settings.openai_model, [{"role": "user", "content": prompt}])
    if not text:
        return FALLBACK_PERSONA

    persona = _clean_persona(text)
    if not persona:
        return FALLBACK_PERSONA
    logger.info("Generated persona for %s: %s", name, persona)
    return persona


def generate_welcome(name: str, persona: str, settings: Optional[Settings] = None) -> str:
    """Generate a one-sentence welcome message for the ticket page."""
    settings = settings or get_settings()
    client = _get_client(settings)
    if client is None:
        return no_credential_welcome(name)

    prompt = WELCOME_PROMPT.format(name=name, persona=persona)
    text = _complete(client, settings.openai_model, [{"role": "user", "content": prompt}])
    return text or fallback_welcome(name)
