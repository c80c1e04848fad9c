"""
Builds the instruction text sent to the language model.

``compose`` is pure: the same mode, input and style examples always yield
the same prompt.
"""
import re
from typing import Optional, Sequence

STYLE_EXAMPLE_WINDOW = 3
_PLACEHOLDER = re.compile(r"\{(\w+)\}")

BASE_SYSTEM_PROMPT = """You are an expert communication coach. Your job is to transform raw, emotional messages into clear, constructive communication while preserving the speaker's authentic concerns and needs.

CORE PRINCIPLES:
- Transform anger, frustration, and harsh language into assertive, clear communication
- Keep the person's genuine feelings and concerns intact
- Remove blame language and personal attacks
- Focus on specific issues rather than character judgments
- Use "I" statements when possible
- Maintain the urgency or importance of the original message

DO NOT make the message overly formal or robotic - keep it human and authentic."""

PROFESSIONAL_PROMPT = BASE_SYSTEM_PROMPT + """

PROFESSIONAL MODE GUIDELINES:
- Use workplace-appropriate language
- Focus on solutions and next steps
- Remove emotional reactivity while keeping assertiveness
- Frame concerns as business issues, not personal conflicts
- Maintain professional boundaries

Examples:
"This is fucking ridiculous" → "I have serious concerns about this approach"
"John is being an idiot" → "I'd like to discuss some challenges with John's current approach"
"I'm pissed about this deadline" → "I have concerns about this timeline and would like to discuss adjustments"

Original message: "{input}"
Professional version:"""

PERSONAL_PROMPT = BASE_SYSTEM_PROMPT + """

PERSONAL MODE GUIDELINES:
- Keep warmth and emotional connection
- Express feelings clearly without attacking the person
- Focus on relationship needs and boundaries
- Remove harsh language but keep emotional honesty
- Use "I feel" and "I need" language

Examples:
"You never listen to me!" → "I feel unheard when I'm interrupted. I need us to work on this together"
"You're being selfish" → "I'm feeling hurt because I need more consideration in our decisions"
"This is bullshit" → "I'm really frustrated with this situation and need to talk through it"

Original message: "{input}"
Personal version:"""

CASUAL_PROMPT = BASE_SYSTEM_PROMPT + """

CASUAL MODE GUIDELINES:
- Keep it relaxed and friendly
- Remove harsh edges while maintaining authenticity
- Focus on being constructive rather than critical
- Use casual but respectful language
- Maintain the speaker's personality

Examples:
"That's stupid" → "I see it differently - here's my perspective"
"He's being a jerk" → "He's been pretty difficult to deal with lately"
"I hate this" → "This is really frustrating me"

Original message: "{input}"
Casual version:"""

TEMPLATES = {
    "professional": PROFESSIONAL_PROMPT,
    "personal": PERSONAL_PROMPT,
    "casual": CASUAL_PROMPT,
}

CONTEXT_INTEGRATION = """
Based on the user's communication style examples: {context}

Adapt the translation to match their preferred tone and expressions while still making it constructive.
"""

CUSTOM_PROMPT = (
    'Mode: {name}\n'
    'Description: {description}\n\n'
    'Instructions: {instructions}\n\n'
    'Original message: "{input}"\n\n'
    'Please transform this message according to the mode description and instructions above.'
)


def _style_context(style_examples: Optional[Sequence[str]]) -> str:
    return "; ".join(list(style_examples or [])[:STYLE_EXAMPLE_WINDOW])


def _fill(template: str, **values: str) -> str:
    # Single pass: substituted text is never rescanned
    return _PLACEHOLDER.sub(lambda m: values.get(m.group(1), m.group(0)), template)


def compose(
    input_text: str,
    mode_name: str,
    mode_description: str,
    custom_instruction: Optional[str] = None,
    style_examples: Optional[Sequence[str]] = None,
) -> str:
    """
    Build the final prompt for one generation call.

    Args:
        input_text: The user's original message
        mode_name: Name of the resolved mode
        mode_description: Description of the resolved mode
        custom_instruction: Active prompt text of the mode, if any
        style_examples: The user's style examples, oldest first; the first
            three are used

    Returns:
        Prompt text
    """
    context = _style_context(style_examples)
    template = TEMPLATES.get((mode_name or "").strip().lower())

    if custom_instruction or template is None:
        # Modes without a built-in template are steered by the base coaching guidelines
        prompt = _fill(
            CUSTOM_PROMPT,
            name=mode_name,
            description=mode_description,
            instructions=custom_instruction or BASE_SYSTEM_PROMPT,
            input=input_text,
        )
        if context:
            prompt = (
                f"User's communication style examples: {context}\n\n{prompt}\n\n"
                "Adapt the response to match the user's natural style."
            )
        return prompt

    prompt = _fill(template, input=input_text)
    if context:
        prompt = _fill(CONTEXT_INTEGRATION, context=context) + "\n\n" + prompt
    return prompt
