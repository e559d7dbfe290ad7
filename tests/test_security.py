import pytest

from birthday_rsvp.core.security import TOKEN_ALPHABET, generate_event_tokens, generate_token


def test_token_uses_url_safe_alphabet():
    token = generate_token()
    assert len(token) == 21
    assert set(token) <= set(TOKEN_ALPHABET)


def test_alphabet_has_64_symbols():
    assert len(set(TOKEN_ALPHABET)) == 64


def test_custom_size():
    assert len(generate_token(32)) == 32


def test_non_positive_size_rejected():
    with pytest.raises(ValueError):
        generate_token(0)


def test_tokens_do_not_repeat():
    tokens = {generate_token() for _ in range(1000)}
    assert len(tokens) == 1000


def test_event_tokens_are_distinct():
    admin_token, guest_token = generate_event_tokens()
    assert admin_token and guest_token
    assert admin_token != guest_token
