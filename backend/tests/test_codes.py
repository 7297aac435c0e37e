import random

from lexlock.services.games.codes import CODE_ALPHABET, generate_session_code, normalize_code


def test_codes_are_six_unambiguous_characters():
    rng = random.Random(9)
    for _ in range(200):
        code = generate_session_code(rng=rng)
        assert len(code) == 6
        assert set(code) <= set(CODE_ALPHABET)
        assert not set(code) & set('0O1IL')


def test_alphabet_has_no_lookalikes():
    assert not set(CODE_ALPHABET) & set('0O1IL')
    assert len(set(CODE_ALPHABET)) == len(CODE_ALPHABET) == 31


def test_codes_vary():
    rng = random.Random(4)
    assert len({generate_session_code(rng=rng) for _ in range(50)}) > 45


def test_normalize_code():
    assert normalize_code('  ab3xyz ') == 'AB3XYZ'
    assert normalize_code(None) == ''
