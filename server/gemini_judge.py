"""Gemini implementation of the semantic answer judge."""

import asyncio
import json
import logging
import re
import time
import google.generativeai as genai

from rebuzzle.interfaces import JudgeError, SemanticJudge
from rebuzzle.models import GuessAttempt, JudgeVerdict
from rebuzzle.prompts import JUDGE_SYSTEM_PROMPT, build_judge_prompt
from rebuzzle.config import (
    JUDGE_MODEL, JUDGE_TEMPERATURE, JUDGE_MAX_ATTEMPTS,
    JUDGE_RETRY_INITIAL_DELAY, JUDGE_RETRY_MAX_DELAY, JUDGE_RETRY_BACKOFF
)

logger = logging.getLogger(__name__)

REQUIRED_KEYS = ['is_correct', 'confidence', 'reasoning']


class GeminiJudge(SemanticJudge):
    """Semantic judge backed by a Gemini model.

    Transient API failures are retried with exponential backoff; a reply that
    cannot be parsed raises JudgeError straight away.
    """

    def __init__(self, api_key: str, model_name: str = JUDGE_MODEL,
                 max_attempts: int = JUDGE_MAX_ATTEMPTS,
                 initial_delay: float = JUDGE_RETRY_INITIAL_DELAY,
                 max_delay: float = JUDGE_RETRY_MAX_DELAY):
        genai.configure(api_key=api_key)
        self.model = genai.GenerativeModel(
            model_name,
            system_instruction=JUDGE_SYSTEM_PROMPT,
            generation_config={'temperature': JUDGE_TEMPERATURE}
        )
        self.model_name = model_name
        self.max_attempts = max_attempts
        self.initial_delay = initial_delay
        self.max_delay = max_delay
        self.stats = {
            'calls': 0, 'failures': 0, 'retries': 0, 'total_ms': 0,
            'prompt_tokens': 0, 'completion_tokens': 0, 'total_tokens': 0
        }

    async def _generate(self, prompt: str) -> str:
        start_time = time.time()
        response = await self.model.generate_content_async(prompt)
        ms = int((time.time() - start_time) * 1000)

        self.stats['calls'] += 1
        self.stats['total_ms'] += ms
        usage = getattr(response, 'usage_metadata', None)
        if usage is not None:
            self.stats['prompt_tokens'] += int(getattr(usage, 'prompt_token_count', 0) or 0)
            self.stats['completion_tokens'] += int(getattr(usage, 'candidates_token_count', 0) or 0)
            self.stats['total_tokens'] += int(getattr(usage, 'total_token_count', 0) or 0)
        return response.text

    async def _generate_with_retry(self, prompt: str) -> str:
        delay = self.initial_delay
        for attempt in range(1, self.max_attempts + 1):
            try:
                return await self._generate(prompt)
            except Exception as e:
                if attempt == self.max_attempts:
                    self.stats['failures'] += 1
                    raise JudgeError(f"Gemini call failed after {attempt} attempts: {e}") from e
                logger.warning(f"Gemini call failed (attempt {attempt}/{self.max_attempts}), "
                               f"retrying in {delay:.1f}s: {type(e).__name__}: {e}")
                self.stats['retries'] += 1
                await asyncio.sleep(delay)
                delay = min(delay * JUDGE_RETRY_BACKOFF, self.max_delay)

    def _parse_verdict(self, response: str) -> JudgeVerdict:
        # Strip markdown fences if present
        text = re.sub(r"^```json\s*|^```\s*|```\s*$", "", response.strip(), flags=re.MULTILINE).strip()

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse judge response: {e}")
            logger.error(f"Raw response:\n{response}")

            # Try to diagnose the issue
            if '{' not in response:
                logger.error("Diagnosis: No opening brace '{' found in response")
            elif '}' not in response:
                logger.error("Diagnosis: No closing brace '}' found in response")
            elif '"is_correct"' not in response:
                logger.error("Diagnosis: 'is_correct' key not found in response")
            else:
                logger.error("Diagnosis: Unknown parsing issue - possibly malformed JSON")
            raise JudgeError(f"Unparseable judge response: {e}") from e

        if not isinstance(data, dict):
            logger.error(f"Judge response is not an object: {type(data).__name__}")
            raise JudgeError("Judge response is not a JSON object")

        missing_keys = [k for k in REQUIRED_KEYS if k not in data]
        if missing_keys:
            logger.warning(f"Judge response missing keys: {missing_keys}")
            logger.warning(f"Raw response:\n{response}")
            raise JudgeError(f"Judge response missing keys: {missing_keys}")

        if not isinstance(data['is_correct'], bool):
            raise JudgeError(f"Invalid is_correct value: {data['is_correct']!r}")

        try:
            confidence = float(data['confidence'])
        except (TypeError, ValueError) as e:
            raise JudgeError(f"Invalid confidence value: {data['confidence']!r}") from e
        if not 0.0 <= confidence <= 1.0:
            logger.warning(f"Judge confidence out of range, clamping: {confidence}")
            confidence = min(1.0, max(0.0, confidence))

        suggestions = data.get('suggestions')
        if suggestions is not None:
            if not isinstance(suggestions, list):
                logger.warning(f"Ignoring non-list suggestions: {suggestions!r}")
                suggestions = None
            else:
                suggestions = [str(s) for s in suggestions] or None

        return JudgeVerdict(
            is_correct=data['is_correct'],
            confidence=confidence,
            reasoning=str(data['reasoning']),
            suggestions=suggestions
        )

    async def judge(self, attempt: GuessAttempt) -> JudgeVerdict:
        response = await self._generate_with_retry(build_judge_prompt(attempt))
        verdict = self._parse_verdict(response)
        logger.info(f"Judge verdict for '{attempt.text}': correct={verdict.is_correct}, "
                    f"confidence={verdict.confidence:.2f}")
        return verdict

    def get_stats(self) -> dict:
        calls = self.stats['calls']
        return {
            'model': self.model_name,
            **self.stats,
            'avg_ms': round(self.stats['total_ms'] / calls, 1) if calls > 0 else 0,
            'avg_tokens': round(self.stats['total_tokens'] / calls, 1) if calls > 0 else 0
        }
