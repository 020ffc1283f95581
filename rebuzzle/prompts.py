"""Prompts sent to the semantic answer judge."""

from .models import GuessAttempt

JUDGE_SYSTEM_PROMPT = """You are an expert at validating puzzle answers with LENIENT semantic matching.

CRITICAL: Be LENIENT and ACCEPT semantically equivalent answers:

1. CONTRACTIONS ARE EQUIVALENT:
   - "you're" = "you are"
   - "it's" = "it is"
   - "don't" = "do not"
   - Accept with or without apostrophe

2. WORD ORDER VARIATIONS:
   - Accept if all words are present and meaning is preserved
   - "Time flies when having fun" = "When having fun time flies"

3. MINOR TYPOS (1-2 characters):
   - "tiem" for "time"
   - "haivng" for "having"
   - Missing or extra letters

4. PUNCTUATION & CAPITALIZATION:
   - Completely ignore these
   - "Hello, World!" = "hello world"

5. ARTICLES (a, an, the):
   - Often can be ignored
   - "The answer" = "Answer"

ONLY REJECT if the meaning is fundamentally different or the answer is clearly wrong."""

RESPONSE_FORMAT = """Respond with ONLY a JSON object, no markdown formatting, with these keys:
  "is_correct": true or false
  "confidence": number between 0 and 1
  "reasoning": short explanation of the decision
  "suggestions": list of short tips for the player (empty list if the guess is correct)"""


def build_judge_prompt(attempt: GuessAttempt) -> str:
    """Build the user prompt for one guess."""
    prompt = (
        "Validate if this rebus puzzle answer is semantically correct.\n\n"
        f'CORRECT ANSWER: "{attempt.correct_answer}"\n'
        f"PLAYER'S GUESS: \"{attempt.text}\""
    )

    if attempt.puzzle_context:
        prompt += f'\nPUZZLE CONTEXT: "{attempt.puzzle_context}"'
    if attempt.explanation:
        prompt += f'\nEXPLANATION: "{attempt.explanation}"'

    prompt += f"""

Based on the leniency rules, should this answer be ACCEPTED or REJECTED?
Remember: Be LENIENT. Accept semantic equivalents, contractions, word order variations, and minor typos.

{RESPONSE_FORMAT}"""
    return prompt
