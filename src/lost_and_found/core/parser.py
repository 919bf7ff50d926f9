"""Rule-based parsing of free-text item reports."""

from datetime import date, timedelta

from lost_and_found.core.entities import ParsedInput

# (keywords, item, category); first match wins
ITEM_PATTERNS: tuple[tuple[tuple[str, ...], str, str], ...] = (
    (("wallet", "purse"), "wallet", "wallet"),
    (("phone", "iphone", "android", "mobile"), "phone", "phone"),
    (("keys", "key"), "keys", "keys"),
    (("backpack", "bag", "rucksack"), "bag", "bag"),
    (("bottle", "water bottle", "thermos"), "bottle", "bottle"),
    (("laptop", "computer", "macbook"), "laptop", "electronics"),
    (("headphones", "earbuds", "airpods"), "headphones", "electronics"),
    (("sunglasses", "glasses"), "glasses", "accessories"),
    (("watch", "smartwatch"), "watch", "accessories"),
    (("card", "id", "license"), "card", "documents"),
)

COLORS = (
    "black", "white", "red", "blue", "green", "yellow", "orange", "purple",
    "pink", "brown", "gray", "grey", "silver", "gold",
)

LOCATION_PATTERNS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("library",), "Library"),
    (("cafeteria", "cafe", "food court"), "Cafeteria"),
    (("student center", "center"), "Student Center"),
    (("engineering", "eng building"), "Engineering Building"),
    (("parking", "lot"), "Parking Lot"),
    (("gym", "fitness"), "Gym"),
    (("dorm", "dormitory"), "Dormitory"),
    (("lecture", "classroom", "class"), "Lecture Hall"),
)

GHOST_SUGGESTIONS = (
    "Lost black wallet in cafeteria today",
    "Found blue water bottle near library",
    "Lost iPhone in parking lot yesterday",
    "Found red backpack in student center",
    "Lost keys with Toyota keychain in gym",
)

MIN_GHOST_INPUT = 3


def parse_smart_input(text: str, today: date) -> ParsedInput:
    """Extract item fields from a one-line report such as
    "Lost black wallet in cafeteria yesterday".

    Matching is keyword containment, so "lot" or "id" inside longer words
    also match; this mirrors how the posting form guesses fields.
    """
    lowered = text.lower()

    item, category = "unknown item", "other"
    for keywords, pattern_item, pattern_category in ITEM_PATTERNS:
        if any(keyword in lowered for keyword in keywords):
            item, category = pattern_item, pattern_category
            break

    color = next((c for c in COLORS if c in lowered), None)

    location = "unknown location"
    for keywords, pattern_location in LOCATION_PATTERNS:
        if any(keyword in lowered for keyword in keywords):
            location = pattern_location
            break

    reported = today - timedelta(days=1) if "yesterday" in lowered else today

    return ParsedInput(
        item=item,
        category=category,
        color=color,
        location=location,
        date=reported,
        description=text,
    )


def ghost_text(partial: str) -> str:
    """Completion for the first canned suggestion starting with the input."""
    if len(partial) < MIN_GHOST_INPUT:
        return ""

    lowered = partial.lower()
    for suggestion in GHOST_SUGGESTIONS:
        if suggestion.lower().startswith(lowered):
            return suggestion[len(partial):]
    return ""
