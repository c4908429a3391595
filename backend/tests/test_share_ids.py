"""Tests for share id generation."""

from services.presentations.share_ids import SHARE_ID_ALPHABET, generate_share_id


def test_default_length_is_ten() -> None:
    assert len(generate_share_id()) == 10


def test_custom_length() -> None:
    assert len(generate_share_id(21)) == 21


def test_uses_url_safe_alphabet() -> None:
    for _ in range(50):
        assert set(generate_share_id()) <= set(SHARE_ID_ALPHABET)


def test_ids_are_not_repeated() -> None:
    ids = {generate_share_id() for _ in range(1000)}
    assert len(ids) == 1000
