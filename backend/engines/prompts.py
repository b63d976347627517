"""Prompt and outcome message formatting."""
from stores.base import Item

# Scores up to this distance are reported as a near miss.
CLOSE_MATCH_DISTANCE = 3

_FIELD_SEPARATOR = "    "


def match_message(target: str, guess: str, score: int) -> str:
    """Human-readable outcome of a graded answer."""
    if score == 0:
        return "Perfect Match!"
    if score <= CLOSE_MATCH_DISTANCE:
        return f"Close, it was '{target}', you entered '{guess}'"
    return f"It was '{target}', you entered '{guess}'"


def build_prompt(item: Item, user_notes: str | None = None) -> str:
    """Text asking the learner to translate `item`.

    Hint, part of speech and the learner's own notes are appended in that
    order, each only when present.
    """
    prompt = f"Translate: '{item.prompt_text}'"
    if item.hint:
        prompt += f"{_FIELD_SEPARATOR}hint: {item.hint}"
    if item.pos:
        prompt += f"{_FIELD_SEPARATOR}pos: {item.pos}"
    if user_notes:
        prompt += f"{_FIELD_SEPARATOR}your notes: {user_notes}"
    return prompt
