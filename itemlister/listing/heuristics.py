"""Deterministic clean-up rules for generated listing text."""

import re

# A title longer than this with no description is two fields run together.
CONCATENATED_TITLE_CHARS = 150
# Export-time swap detection thresholds.
SWAP_TITLE_MIN_CHARS = 200
SWAP_DESCRIPTION_MAX_CHARS = 100

_MIN_SPLIT_TITLE_CHARS = 15


def _join(parts: list[str], sep: str = " ") -> str:
    return sep.join(part.strip() for part in parts if part and part.strip())


def split_concatenated_title(title: str, description: str) -> tuple[str, str]:
    """Split an over-long title into title + description at a comma.

    Only applies when the description is empty. The split point is the
    last comma that leaves a title of plausible length; without one the
    pair is returned unchanged.
    """
    if len(title) <= CONCATENATED_TITLE_CHARS or description.strip():
        return title, description
    for match in reversed(list(re.finditer(r",\s*", title))):
        head = title[: match.start()].strip()
        tail = title[match.end() :].strip()
        if _MIN_SPLIT_TITLE_CHARS <= len(head) <= CONCATENATED_TITLE_CHARS and tail:
            return head, tail
    return title, description


def looks_swapped(title: str, description: str) -> bool:
    return len(title) > SWAP_TITLE_MIN_CHARS and len(description) < SWAP_DESCRIPTION_MAX_CHARS


def swap_title_description(title: str, description: str) -> tuple[str, str]:
    """Exchange the two fields; applying it twice restores the input."""
    return description, title


def correct_swapped(title: str, description: str) -> tuple[str, str, bool]:
    """Return (title, description, swapped) with reversed fields put back."""
    if looks_swapped(title, description):
        new_title, new_description = swap_title_description(title, description)
        return new_title, new_description, True
    return title, description, False


def player_name(fields: dict[str, str]) -> str:
    return _join([fields.get("playerFirstName", ""), fields.get("playerLastName", "")])


def title_mentions_player(fields: dict[str, str]) -> bool:
    last_name = fields.get("playerLastName", "").strip().lower()
    card_title = fields.get("title", "").strip().lower()
    return bool(last_name and card_title and last_name in card_title)


def build_card_title(fields: dict[str, str]) -> str:
    """[year] [set] [player] [card title] [#number] [grader] [grade]."""
    if title_mentions_player(fields):
        subject = [fields.get("title", "")]
    else:
        subject = [player_name(fields), fields.get("title", "")]
    return _join(
        [
            fields.get("year", ""),
            fields.get("set", ""),
            *subject,
            fields.get("cardNumber", ""),
            fields.get("gradingCompany", ""),
            fields.get("grade", ""),
        ]
    )


def build_card_description(title: str, fields: dict[str, str]) -> str:
    player = player_name(fields)
    sentences = [_join([title, player], ", ")]
    issue = _join([fields.get("year", ""), fields.get("set", "")])
    if issue:
        sentences.append(f"Issued in the {issue} set")
    grading = _join([fields.get("gradingCompany", ""), fields.get("grade", "")])
    if grading:
        sentences.append(f"Professionally graded {grading}")
    if fields.get("cert"):
        sentences.append(f"Certification number {fields['cert']}")
    return ". ".join(sentences) + "."


def build_book_title(fields: dict[str, str]) -> str:
    return fields.get("title", "").strip() or "Untitled Book"


def build_book_description(title: str, fields: dict[str, str]) -> str:
    parts = [
        title,
        f"by {fields['author']}" if fields.get("author") else "",
        f"Published by {fields['publisherName']}" if fields.get("publisherName") else "",
        f"({fields['yearPublished']})" if fields.get("yearPublished") else "",
    ]
    summary = fields.get("description") or "Bibliographic information extracted from title page."
    return _join(parts, ". ") + ". " + summary
