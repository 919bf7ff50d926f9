"""Verification questions and the quick claim quiz."""

from typing import Sequence

from lost_and_found.core.entities import (
    Item,
    ItemKind,
    QuestionType,
    QuizQuestion,
    QuizResult,
    VerificationQuestion,
)

CONTAINER_CATEGORIES = ("wallet", "bag", "backpack")

COLOR_DISTRACTORS = ("black", "blue", "red", "white")
CATEGORY_DISTRACTORS = ("wallet", "phone", "keys", "bag")
LOCATION_DISTRACTORS = ("Library", "Cafeteria", "Parking Lot", "Gym")


def _primary_question(category: str) -> str:
    if category in CONTAINER_CATEGORIES:
        return "What was inside this item? Please be specific."
    if category == "phone":
        return "What brand and model is this phone? Any distinctive features?"
    if category == "keys":
        return "How many keys were on the keychain and what type of keychain?"
    return "Please describe any unique features or markings on this item."


def generate_questions(item: Item) -> list[VerificationQuestion]:
    """Derive the three verification questions for an item."""
    verb = "lose" if item.kind == ItemKind.LOST else "last see"
    questions = [
        VerificationQuestion(id="1", question=_primary_question(item.category), is_required=True),
        VerificationQuestion(
            id="2",
            question=f"Where exactly did you {verb} this item? Be specific about the location.",
            is_required=True,
        ),
    ]

    if item.category == "electronics":
        questions.append(VerificationQuestion(
            id="3",
            question="What color/case does this item have? Any stickers or accessories?",
            is_required=False,
        ))
    elif item.category == "documents":
        questions.append(VerificationQuestion(
            id="3",
            question="What name is on this document/ID?",
            is_required=True,
        ))
    else:
        questions.append(VerificationQuestion(
            id="3",
            question="When did you first notice it was missing?",
            is_required=False,
        ))

    return questions


def _options(answer: str, distractors: Sequence[str]) -> tuple[str, ...]:
    # dict keeps first-seen order
    return tuple(dict.fromkeys((answer, *distractors)))


def generate_choice_quiz(item: Item) -> list[QuizQuestion]:
    """Build the two-question quick quiz for an item."""
    if item.color:
        first = QuizQuestion(
            id="1",
            question="What color is this item?",
            type=QuestionType.CHOICE,
            options=_options(item.color, COLOR_DISTRACTORS),
            correct_answer=item.color,
        )
    else:
        first = QuizQuestion(
            id="1",
            question="What type of item is this?",
            type=QuestionType.CHOICE,
            options=_options(item.category, CATEGORY_DISTRACTORS),
            correct_answer=item.category,
        )

    if item.location:
        verb = "lost" if item.kind == ItemKind.LOST else "found"
        second = QuizQuestion(
            id="2",
            question=f"Where was this item {verb}?",
            type=QuestionType.CHOICE,
            options=_options(item.location, LOCATION_DISTRACTORS),
            correct_answer=item.location,
        )
    else:
        # Free text, checked by the poster in conversation
        second = QuizQuestion(
            id="2",
            question="Can you describe a unique feature of this item?",
            type=QuestionType.TEXT,
        )

    return [first, second]


def evaluate_quiz(questions: Sequence[QuizQuestion], answers: Sequence[str]) -> QuizResult:
    """Count correct answers; one wrong answer is tolerated.

    Text questions have nothing to check against and always count as
    correct.
    """
    correct_count = 0
    for index, question in enumerate(questions):
        if question.type == QuestionType.TEXT:
            correct_count += 1
            continue
        answer = answers[index] if index < len(answers) else None
        if answer is not None and answer == question.correct_answer:
            correct_count += 1

    return QuizResult(
        passed=correct_count >= len(questions) - 1,
        correct_count=correct_count,
    )
