import random
from typing import Optional

# No 0/O or 1/I/L so codes can be read aloud and typed from a screen
CODE_ALPHABET = 'ABCDEFGHJKMNPQRSTUVWXYZ23456789'
CODE_LENGTH = 6


def generate_session_code(length: int = CODE_LENGTH, rng: Optional[random.Random] = None) -> str:
    """Generate a short, human-shareable session code.

    Uniqueness is the store's job; callers retry on conflict.
    """
    rng = rng or random
    return ''.join(rng.choice(CODE_ALPHABET) for _ in range(length))


def normalize_code(code) -> str:
    return (code or '').strip().upper()
