"""Unit tests for the answer validation pipeline."""

import asyncio
import unittest
from dataclasses import replace

from rebuzzle.config import DEFAULT_VALIDATION_CONFIG
from rebuzzle.interfaces import JudgeError, SemanticJudge
from rebuzzle.models import GuessAttempt, JudgeVerdict
from rebuzzle.validation import (
    validate_answer, quick_validate_answer, should_use_judge, generate_feedback, batch_validate
)


# ============================================================================
# Mock Implementations
# ============================================================================

class MockJudge(SemanticJudge):
    """Mock judge that records calls and returns a canned verdict."""

    def __init__(self, verdict: JudgeVerdict = None):
        self.verdict = verdict or JudgeVerdict(True, 0.9, "Same meaning")
        self.calls = []

    async def judge(self, attempt: GuessAttempt) -> JudgeVerdict:
        self.calls.append(attempt)
        return self.verdict


class SlowJudge(MockJudge):
    """Mock judge that never answers in time."""

    async def judge(self, attempt: GuessAttempt) -> JudgeVerdict:
        self.calls.append(attempt)
        await asyncio.sleep(5)
        return self.verdict


class LateJudge(MockJudge):
    """Mock judge that only answers once released."""

    def __init__(self):
        super().__init__()
        self.release = asyncio.Event()
        self.finished = False

    async def judge(self, attempt: GuessAttempt) -> JudgeVerdict:
        self.calls.append(attempt)
        await self.release.wait()
        self.finished = True
        return self.verdict


class FailingJudge(MockJudge):
    """Mock judge that always raises."""

    async def judge(self, attempt: GuessAttempt) -> JudgeVerdict:
        self.calls.append(attempt)
        raise JudgeError("remote judge unavailable")


# ============================================================================
# Test Cases
# ============================================================================

class TestValidateAnswerDeterministic(unittest.IsolatedAsyncioTestCase):
    """Stages that decide without the judge."""

    async def asyncSetUp(self):
        self.judge = MockJudge()

    async def test_normalized_match_skips_judge(self):
        verdict = await validate_answer(GuessAttempt("SUNFLOWER", "sunflower"), self.judge)
        self.assertTrue(verdict.is_correct)
        self.assertEqual(verdict.method, 'normalized')
        self.assertEqual(verdict.confidence, 1.0)
        self.assertEqual(self.judge.calls, [])

    async def test_contraction_match(self):
        verdict = await validate_answer(GuessAttempt("You're it!", "you are it"), self.judge)
        self.assertTrue(verdict.is_correct)
        self.assertEqual(verdict.method, 'normalized')
        self.assertEqual(self.judge.calls, [])

    async def test_word_order_match(self):
        attempt = GuessAttempt("fun having when flies time", "time flies when having fun")
        verdict = await validate_answer(attempt, self.judge)
        self.assertTrue(verdict.is_correct)
        self.assertEqual(verdict.method, 'normalized')
        self.assertEqual(verdict.confidence, 0.95)
        self.assertEqual(self.judge.calls, [])

    async def test_near_exact_is_exact(self):
        # Only the space differs, which the legacy normalizer drops
        verdict = await validate_answer(GuessAttempt("sun flower", "sunflower"), self.judge)
        self.assertTrue(verdict.is_correct)
        self.assertEqual(verdict.method, 'exact')
        self.assertEqual(verdict.confidence, 1.0)
        self.assertEqual(self.judge.calls, [])

    async def test_minor_typo_is_fuzzy_accept(self):
        # One missing letter in twenty
        attempt = GuessAttempt("a piece of cake evry day", "a piece of cake every day")
        verdict = await validate_answer(attempt, self.judge)
        self.assertTrue(verdict.is_correct)
        self.assertEqual(verdict.method, 'fuzzy')
        self.assertAlmostEqual(verdict.confidence, 0.95)
        self.assertEqual(self.judge.calls, [])


class TestValidateAnswerJudge(unittest.IsolatedAsyncioTestCase):
    """Stages involving the semantic judge."""

    def setUp(self):
        self.attempt = GuessAttempt("flour power", "flower power", puzzle_context="A flower drawn over the word POWER")

    async def test_judge_verdict_is_used(self):
        judge = MockJudge(JudgeVerdict(True, 0.85, "Homophone of the answer", ["Nice one"]))
        verdict = await validate_answer(self.attempt, judge)
        self.assertTrue(verdict.is_correct)
        self.assertEqual(verdict.method, 'ai')
        self.assertEqual(verdict.confidence, 0.85)
        self.assertEqual(verdict.reasoning, "Homophone of the answer")
        self.assertEqual(verdict.suggestions, ["Nice one"])
        self.assertEqual(judge.calls, [self.attempt])

    async def test_judge_rejection_is_used(self):
        judge = MockJudge(JudgeVerdict(False, 0.7, "Different meaning"))
        verdict = await validate_answer(self.attempt, judge)
        self.assertFalse(verdict.is_correct)
        self.assertEqual(verdict.method, 'ai')

    async def test_timeout_falls_back_to_fuzzy(self):
        judge = SlowJudge()
        config = replace(DEFAULT_VALIDATION_CONFIG, ai_timeout_ms=50)
        verdict = await validate_answer(self.attempt, judge, config)
        self.assertFalse(verdict.is_correct)
        self.assertEqual(verdict.method, 'fuzzy')
        self.assertAlmostEqual(verdict.confidence, 9 / 11)
        self.assertEqual(len(judge.calls), 1)

    async def test_late_judge_is_not_cancelled(self):
        judge = LateJudge()
        config = replace(DEFAULT_VALIDATION_CONFIG, ai_timeout_ms=50)
        verdict = await validate_answer(self.attempt, judge, config)
        self.assertEqual(verdict.method, 'fuzzy')
        self.assertFalse(judge.finished)

        # The abandoned call keeps running and its answer is ignored
        judge.release.set()
        for _ in range(3):
            await asyncio.sleep(0)
        self.assertTrue(judge.finished)
        self.assertEqual(verdict.method, 'fuzzy')

    async def test_failure_falls_back_to_fuzzy(self):
        verdict = await validate_answer(self.attempt, FailingJudge())
        self.assertFalse(verdict.is_correct)
        self.assertEqual(verdict.method, 'fuzzy')

    async def test_close_rejection_has_suggestions(self):
        verdict = await validate_answer(self.attempt, FailingJudge())
        self.assertEqual(verdict.suggestions, [
            "Check your spelling",
            "You're close! The answer has 12 letters"
        ])

    async def test_distant_rejection_has_no_suggestions(self):
        verdict = await validate_answer(GuessAttempt("xyz", "flower power"))
        self.assertFalse(verdict.is_correct)
        self.assertEqual(verdict.method, 'fuzzy')
        self.assertIsNone(verdict.suggestions)

    async def test_no_judge(self):
        verdict = await validate_answer(self.attempt)
        self.assertEqual(verdict.method, 'fuzzy')

    async def test_disabled_skips_judge(self):
        judge = MockJudge()
        config = replace(DEFAULT_VALIDATION_CONFIG, enabled=False)
        verdict = await validate_answer(self.attempt, judge, config)
        self.assertEqual(verdict.method, 'fuzzy')
        self.assertEqual(judge.calls, [])

    async def test_low_similarity_skips_judge_without_always_use_ai(self):
        judge = MockJudge()
        config = replace(DEFAULT_VALIDATION_CONFIG, always_use_ai=False)
        verdict = await validate_answer(GuessAttempt("xyz", "flower power"), judge, config)
        self.assertEqual(verdict.method, 'fuzzy')
        self.assertEqual(judge.calls, [])

    async def test_use_ai_false_skips_judge_without_always_use_ai(self):
        judge = MockJudge()
        config = replace(DEFAULT_VALIDATION_CONFIG, always_use_ai=False)
        verdict = await validate_answer(self.attempt, judge, config, use_ai=False)
        self.assertEqual(verdict.method, 'fuzzy')
        self.assertEqual(judge.calls, [])


class TestShouldUseJudge(unittest.TestCase):
    """Tests for should_use_judge."""

    def test_always_use_ai(self):
        self.assertTrue(should_use_judge(0.0, DEFAULT_VALIDATION_CONFIG))

    def test_minimum_similarity(self):
        config = replace(DEFAULT_VALIDATION_CONFIG, always_use_ai=False)
        self.assertTrue(should_use_judge(0.3, config))
        self.assertFalse(should_use_judge(0.29, config))

    def test_disabled(self):
        config = replace(DEFAULT_VALIDATION_CONFIG, enabled=False)
        self.assertFalse(should_use_judge(0.9, config))


class TestQuickValidation(unittest.TestCase):
    """Tests for quick_validate_answer and batch_validate."""

    def test_quick_validate_match(self):
        result = quick_validate_answer("Sun-Flower", "sunflower")
        self.assertTrue(result['is_correct'])
        self.assertEqual(result['similarity'], 1.0)
        self.assertEqual(result['normalized'], {'guess': 'sunflower', 'answer': 'sunflower'})

    def test_quick_validate_mismatch(self):
        result = quick_validate_answer("flour power", "flower power")
        self.assertFalse(result['is_correct'])
        self.assertAlmostEqual(result['similarity'], 9 / 11)

    def test_batch_validate(self):
        results = batch_validate([("sunflower", "Sunflower"), ("moon", "sunflower")])
        self.assertEqual([r['guess'] for r in results], ["sunflower", "moon"])
        self.assertTrue(results[0]['is_correct'])
        self.assertFalse(results[1]['is_correct'])


class TestGenerateFeedback(unittest.TestCase):
    """Tests for generate_feedback."""

    def test_far_off(self):
        self.assertEqual(generate_feedback("moon", "sunflower", 0.1, 1), "Not quite! 1 attempt remaining.")

    def test_wrong_length(self):
        self.assertEqual(generate_feedback("ab", "abcdefgh", 0.5, 2),
                         "Getting warmer, but check the length! 2 attempts left.")

    def test_right_track(self):
        self.assertEqual(generate_feedback("abcd", "abce", 0.5, 2),
                         "You're on the right track! 2 attempts remaining.")

    def test_so_close(self):
        self.assertEqual(generate_feedback("sunflowr", "sunflower", 0.9, 2),
                         "So close! Check your spelling. 2 attempts left.")


if __name__ == '__main__':
    unittest.main()
