"""Text normalization and string matching helpers."""

import re

from .config import DEFAULT_VALIDATION_CONFIG, ValidationConfig

# Contractions and their apostrophe-less spellings
CONTRACTION_MAP = {
    # You
    "you're": 'you are', 'youre': 'you are',
    "you'll": 'you will', 'youll': 'you will',
    "you've": 'you have', 'youve': 'you have',
    "you'd": 'you would', 'youd': 'you would',
    # I
    "i'm": 'i am', 'im': 'i am',
    "i've": 'i have', 'ive': 'i have',
    "i'll": 'i will', 'ill': 'i will',
    "i'd": 'i would', 'id': 'i would',
    # We/They
    "we're": 'we are', 'were': 'we are',
    "we've": 'we have', 'weve': 'we have',
    "we'll": 'we will', 'well': 'we will',
    "they're": 'they are', 'theyre': 'they are',
    "they've": 'they have', 'theyve': 'they have',
    "they'll": 'they will', 'theyll': 'they will',
    # It/That/There/What
    "it's": 'it is', 'its': 'it is',
    "that's": 'that is', 'thats': 'that is',
    "there's": 'there is', 'theres': 'there is',
    "what's": 'what is', 'whats': 'what is',
    "who's": 'who is', 'whos': 'who is',
    "here's": 'here is', 'heres': 'here is',
    # Negatives
    "can't": 'cannot', 'cant': 'cannot',
    "won't": 'will not', 'wont': 'will not',
    "don't": 'do not', 'dont': 'do not',
    "doesn't": 'does not', 'doesnt': 'does not',
    "didn't": 'did not', 'didnt': 'did not',
    "isn't": 'is not', 'isnt': 'is not',
    "aren't": 'are not', 'arent': 'are not',
    "wasn't": 'was not', 'wasnt': 'was not',
    "weren't": 'were not', 'werent': 'were not',
    "haven't": 'have not', 'havent': 'have not',
    "hasn't": 'has not', 'hasnt': 'has not',
    "hadn't": 'had not', 'hadnt': 'had not',
    "wouldn't": 'would not', 'wouldnt': 'would not',
    "couldn't": 'could not', 'couldnt': 'could not',
    "shouldn't": 'should not', 'shouldnt': 'should not',
    # Others
    "let's": 'let us', 'lets': 'let us',
    "how's": 'how is', 'hows': 'how is',
    "where's": 'where is', 'wheres': 'where is',
    "when's": 'when is', 'whens': 'when is',
}

# Longest first so "you're" wins over any shorter overlapping entry
_CONTRACTION_RE = re.compile(
    r'\b(' + '|'.join(re.escape(c) for c in sorted(CONTRACTION_MAP, key=len, reverse=True)) + r')\b'
)
# ASCII word characters only, so accented letters are dropped like other symbols
_PUNCTUATION_RE = re.compile(r"[^A-Za-z0-9_\s']")
_WHITESPACE_RE = re.compile(r'\s+')


def expand_contractions(text: str) -> str:
    """Expand contractions, e.g. "you're" -> "you are". Lowercases the text."""
    return _CONTRACTION_RE.sub(lambda m: CONTRACTION_MAP[m.group(1)], text.lower())


def normalize_for_comparison(text: str, config: ValidationConfig = DEFAULT_VALIDATION_CONFIG) -> str:
    """Normalize text for comparison using the configured rules."""
    result = text
    if config.ignore_capitalization:
        result = result.lower()
    if config.ignore_punctuation:
        # Apostrophes stay so contractions can still be recognised
        result = _PUNCTUATION_RE.sub('', result)
    if config.expand_contractions:
        result = expand_contractions(result)
    return _WHITESPACE_RE.sub(' ', result).strip()


def normalize_answer(answer: str) -> str:
    """Legacy normalization used by the quick check: alphanumerics only, no spaces."""
    result = re.sub(r'[^a-z0-9\s]', '', answer.lower())
    return _WHITESPACE_RE.sub('', result)


def levenshtein_distance(a: str, b: str) -> int:
    """Unit-cost edit distance, keeping a single row sized by the shorter string."""
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)
    row = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        diagonal = row[0]
        row[0] = i
        for j, cb in enumerate(b, start=1):
            above = row[j]
            if ca == cb:
                row[j] = diagonal
            else:
                row[j] = min(diagonal, above, row[j - 1]) + 1
            diagonal = above
    return row[-1]


def similarity(a: str, b: str) -> float:
    """Fractional similarity in [0, 1]; two empty strings are identical."""
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return (longest - levenshtein_distance(a, b)) / longest


def match_with_word_order_tolerance(guess: str, answer: str,
                                    config: ValidationConfig = DEFAULT_VALIDATION_CONFIG) -> bool:
    """True when both strings hold the same words, in any order.

    A guess with more or fewer words than the answer never matches.
    """
    normalized_guess = normalize_for_comparison(guess, config)
    normalized_answer = normalize_for_comparison(answer, config)
    if normalized_guess == normalized_answer:
        return True
    if not config.tolerate_word_order_variations:
        return False

    guess_words = sorted(normalized_guess.split())
    answer_words = sorted(normalized_answer.split())
    if len(guess_words) != len(answer_words):
        return False
    return guess_words == answer_words
