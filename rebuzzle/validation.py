"""Answer validation pipeline.

Cheap deterministic checks run first; the remote semantic judge is only
consulted when they are inconclusive, and any judge failure degrades to the
deterministic fuzzy verdict.

Validation flow:
1. Exact match after normalization (handles contractions)
2. Same words in a different order
3. Near-exact legacy similarity (quick accept, no judge)
4. Very close legacy similarity (minor typo)
5. Semantic judge, raced against a timeout
6. Fuzzy rejection
"""

import asyncio
import logging

from .config import (
    DEFAULT_VALIDATION_CONFIG, ValidationConfig,
    TYPO_ACCEPT_THRESHOLD, WORD_ORDER_CONFIDENCE, SUGGESTION_SIMILARITY
)
from .interfaces import SemanticJudge
from .models import GuessAttempt, ValidationVerdict
from .utils import (
    match_with_word_order_tolerance, normalize_answer, normalize_for_comparison, similarity
)

logger = logging.getLogger(__name__)


def quick_validate_answer(guess: str, correct_answer: str) -> dict:
    """Validate without the judge, using the legacy whitespace-free normalization."""
    normalized_guess = normalize_answer(guess)
    normalized_answer = normalize_answer(correct_answer)
    return {
        'is_correct': normalized_guess == normalized_answer,
        'similarity': similarity(normalized_guess, normalized_answer),
        'normalized': {
            'guess': normalized_guess,
            'answer': normalized_answer
        }
    }


def should_use_judge(quick_similarity: float, config: ValidationConfig, use_ai: bool = True) -> bool:
    if not config.enabled:
        return False
    if config.always_use_ai:
        return True
    return use_ai and quick_similarity >= config.ai_minimum_similarity


def _fuzzy_rejection(attempt: GuessAttempt, quick_similarity: float) -> ValidationVerdict:
    suggestions = None
    if quick_similarity > SUGGESTION_SIMILARITY:
        suggestions = [
            "Check your spelling",
            f"You're close! The answer has {len(attempt.correct_answer)} letters"
        ]
    return ValidationVerdict(False, quick_similarity, 'fuzzy', suggestions=suggestions)


# Judge calls that lost the race; held so they are not garbage collected mid-flight
_late_judge_calls = set()


def _discard_late_result(task: asyncio.Task) -> None:
    _late_judge_calls.discard(task)
    if not task.cancelled() and task.exception() is not None:
        logger.warning(f"Judge call failed after timing out: {type(task.exception()).__name__}")


async def _ask_judge(judge: SemanticJudge, attempt: GuessAttempt,
                     config: ValidationConfig) -> ValidationVerdict | None:
    """Race the judge against the configured timeout. Returns None on any failure.

    A judge that loses the race is left to finish on its own and its result
    is dropped, so the caller never waits on cancellation.
    """
    timeout = config.ai_timeout_ms / 1000
    task = asyncio.ensure_future(judge.judge(attempt))
    done, _ = await asyncio.wait({task}, timeout=timeout)

    if not done:
        logger.warning(f"Judge timed out after {config.ai_timeout_ms}ms, falling back to fuzzy")
        _late_judge_calls.add(task)
        task.add_done_callback(_discard_late_result)
        return None

    try:
        result = task.result()
    except Exception as e:
        logger.error(f"Judge failed, falling back to fuzzy: {type(e).__name__}: {e}")
        return None

    return ValidationVerdict(
        is_correct=bool(result.is_correct),
        confidence=result.confidence,
        method='ai',
        reasoning=result.reasoning,
        suggestions=result.suggestions
    )


async def validate_answer(attempt: GuessAttempt, judge: SemanticJudge | None = None,
                          config: ValidationConfig = DEFAULT_VALIDATION_CONFIG,
                          use_ai: bool = True) -> ValidationVerdict:
    """Validate a guess. Never raises because of the judge."""
    # Normalized exact match
    normalized_guess = normalize_for_comparison(attempt.text, config)
    normalized_answer = normalize_for_comparison(attempt.correct_answer, config)
    if normalized_guess == normalized_answer:
        return ValidationVerdict(True, 1.0, 'normalized', reasoning="Exact match after normalization")

    if match_with_word_order_tolerance(attempt.text, attempt.correct_answer, config):
        return ValidationVerdict(True, WORD_ORDER_CONFIDENCE, 'normalized',
                                 reasoning="Same words in different order")

    quick = quick_validate_answer(attempt.text, attempt.correct_answer)
    quick_similarity = quick['similarity']

    if quick_similarity >= config.quick_accept_threshold:
        return ValidationVerdict(True, quick_similarity, 'exact', reasoning="Near-exact match")

    if quick_similarity >= TYPO_ACCEPT_THRESHOLD:
        return ValidationVerdict(True, quick_similarity, 'fuzzy',
                                 reasoning="Close enough to correct answer (minor typo)")

    if judge is not None and should_use_judge(quick_similarity, config, use_ai):
        logger.info(f"Asking judge (similarity {quick_similarity:.2f})")
        verdict = await _ask_judge(judge, attempt, config)
        if verdict is not None:
            return verdict

    return _fuzzy_rejection(attempt, quick_similarity)


def generate_feedback(guess: str, correct_answer: str, similarity: float, attempts_left: int) -> str:
    """Short encouragement for a wrong answer, scaled by how close it was."""
    attempts = 'attempt' if attempts_left == 1 else 'attempts'

    if similarity < 0.3:
        return f"Not quite! {attempts_left} {attempts} remaining."

    if similarity < 0.7:
        if abs(len(guess) - len(correct_answer)) > 3:
            return f"Getting warmer, but check the length! {attempts_left} {attempts} left."
        return f"You're on the right track! {attempts_left} {attempts} remaining."

    return f"So close! Check your spelling. {attempts_left} {attempts} left."


def batch_validate(guesses: list[tuple[str, str]]) -> list[dict]:
    """Quick-validate many (guess, correct_answer) pairs, e.g. for analysis."""
    results = []
    for guess, correct_answer in guesses:
        quick = quick_validate_answer(guess, correct_answer)
        results.append({
            'guess': guess,
            'is_correct': quick['is_correct'],
            'similarity': quick['similarity']
        })
    return results
