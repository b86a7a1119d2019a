"""Prompts for card generation."""

import json
from typing import Iterable, Union

from ..models import CardShape, CardType, CardTypeDescriptor

CARD_TYPE_DESCRIPTORS: dict[CardType, CardTypeDescriptor] = {
    CardType.BASIC: CardTypeDescriptor(
        card_type=CardType.BASIC,
        label="Basic Q&A",
        shape=CardShape.PAIR,
        purpose="A simple question and answer pair",
        format_hint='{"type": "basic", "front": "question", "back": "answer"}',
        example={
            "type": "basic",
            "front": "What is photosynthesis?",
            "back": "The process by which plants turn sunlight, water and carbon dioxide "
            "into glucose and oxygen",
        },
    ),
    CardType.BASIC_REVERSE: CardTypeDescriptor(
        card_type=CardType.BASIC_REVERSE,
        label="Two-way Q&A",
        shape=CardShape.PAIR,
        purpose="A pair of concepts that should be remembered in both directions",
        format_hint='{"type": "basic-reverse", "front": "concept A", "back": "concept B"}',
        example={"type": "basic-reverse", "front": "Capital of France", "back": "Paris"},
    ),
    CardType.CLOZE: CardTypeDescriptor(
        card_type=CardType.CLOZE,
        label="Cloze deletion",
        shape=CardShape.CLOZE,
        purpose="Remember a key word or phrase inside a sentence",
        format_hint=(
            '{"type": "cloze", "front": "", "back": "", '
            '"clozeText": "sentence with the key term wrapped in {{double braces}}"}'
        ),
        example={
            "type": "cloze",
            "front": "",
            "back": "",
            "clozeText": "Photosynthesis mainly takes place in the {{chloroplasts}} of plant cells",
        },
    ),
    CardType.LIST: CardTypeDescriptor(
        card_type=CardType.LIST,
        label="List",
        shape=CardShape.LIST,
        purpose="Several related items that belong together",
        format_hint='{"type": "list", "front": "question", "back": ["item 1", "item 2", "item 3"]}',
        example={
            "type": "list",
            "front": "Name the three primary colors of light",
            "back": ["Red", "Green", "Blue"],
        },
    ),
    CardType.DESCRIPTOR: CardTypeDescriptor(
        card_type=CardType.DESCRIPTOR,
        label="Descriptor",
        shape=CardShape.PAIR,
        purpose="A specific attribute of a concept",
        format_hint='{"type": "descriptor", "front": "attribute name", "back": "attribute value"}',
        example={"type": "descriptor", "front": "Chemical formula", "back": "H2O"},
    ),
}

SYSTEM_PROMPT = (
    "You are a professional educational content analyst who is skilled at "
    "creating high-quality flashcards."
)

PROMPT_TEMPLATE = """You are a professional educational content analyst. Analyze the text below, \
extract its key knowledge points and turn them into flashcards.

## Task
1. Read the text carefully and identify important facts, concepts, definitions and relationships
2. Pick the most suitable card type for each knowledge point
3. Keep questions clear and specific, and answers accurate and concise
4. Generate at most {max_cards} cards

## Available card types
{card_type_descriptions}

## Output format
Return ONLY a JSON array in exactly this format, with no other text:
```json
{output_example}
```

## Rules
{rules}

## Text to analyze
{source_text}"""


def unique_card_types(card_types: Iterable[Union[CardType, str]]) -> list[CardType]:
    """Coerce to CardType and drop repeats, keeping first-seen order."""
    return list(dict.fromkeys(CardType(t) for t in card_types))


def format_card_type_block(descriptor: CardTypeDescriptor) -> str:
    """Describe one card type: purpose, required shape and a worked example."""
    example = json.dumps(descriptor.example, ensure_ascii=False)
    return (
        f"**{descriptor.card_type.value} ({descriptor.label})**\n"
        f"  - Use for: {descriptor.purpose}\n"
        f"  - Format: {descriptor.format_hint}\n"
        f"  - Example: {example}"
    )


def format_allowed_types(card_types: list[CardType]) -> str:
    """The closed list of acceptable type strings, e.g. '"basic", "cloze"'."""
    return ", ".join(f'"{t.value}"' for t in card_types)


def build_prompt(
    source_text: str,
    card_types: Iterable[Union[CardType, str]],
    max_cards: int,
) -> str:
    """
    Compile the instruction sent to the model.

    The source text is expected to be validated and preprocessed already.
    max_cards is only a request to the model, the parsed reply is not
    truncated to it.

    Args:
        source_text: Text to turn into flashcards
        card_types: Requested card types, in order (repeats are ignored)
        max_cards: Upper bound on the number of cards to ask for

    Returns:
        The full instruction text, with the source text last
    """
    types = unique_card_types(card_types)

    descriptions = "\n\n".join(format_card_type_block(CARD_TYPE_DESCRIPTORS[t]) for t in types)

    example_lines = ['  {"type": "card type", "front": "question/front", "back": "answer/back"}']
    if CardType.CLOZE in types:
        example_lines.append(
            '  {"type": "cloze", "front": "", "back": "", '
            '"clozeText": "full sentence with the key term wrapped in {{double braces}}"}'
        )
    output_example = "[\n" + ",\n".join(example_lines) + "\n]"

    rules = [f"- type must be one of: {format_allowed_types(types)}"]
    if CardType.CLOZE in types:
        rules.append("- cloze cards must include a clozeText field")
    if CardType.LIST in types:
        rules.append("- the back field of list cards must be an array of strings")
    rules.append("- make sure the JSON is valid and can be parsed")

    return PROMPT_TEMPLATE.format(
        max_cards=max_cards,
        card_type_descriptions=descriptions,
        output_example=output_example,
        rules="\n".join(rules),
        source_text=source_text,
    )
