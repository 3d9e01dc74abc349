import pytest

from keyrotor.config.loader import ConfigError
from keyrotor.crypto.key_material import (
    KeyMaterial,
    generate_fragment,
    FRAGMENT_ALPHABET,
    DEFAULT_FRAGMENT_LENGTH,
)


@pytest.mark.unit
def test_alphabet_has_58_unambiguous_characters():
    assert len(FRAGMENT_ALPHABET) == 58
    assert len(set(FRAGMENT_ALPHABET)) == 58
    for ambiguous in "0OIl":
        assert ambiguous not in FRAGMENT_ALPHABET


@pytest.mark.unit
def test_generate_fragment_default_length():
    fragment = generate_fragment()
    assert len(fragment) == DEFAULT_FRAGMENT_LENGTH == 16
    assert set(fragment) <= set(FRAGMENT_ALPHABET)


@pytest.mark.unit
@pytest.mark.parametrize("length", [1, 8, 32, 100])
def test_generate_fragment_custom_length(length):
    assert len(generate_fragment(length)) == length


@pytest.mark.unit
def test_generate_fragment_is_not_repeated():
    fragments = {generate_fragment() for _ in range(200)}
    assert len(fragments) == 200


@pytest.mark.unit
def test_generate_fragment_uses_secrets(monkeypatch):
    calls = []

    def fake_choice(seq):
        calls.append(seq)
        return seq[0]

    monkeypatch.setattr("keyrotor.crypto.key_material.secrets.choice", fake_choice)
    assert generate_fragment(4) == "1111"
    assert len(calls) == 4


@pytest.mark.unit
@pytest.mark.parametrize("length", [0, -3])
def test_generate_fragment_rejects_non_positive_length(length):
    with pytest.raises(ValueError):
        generate_fragment(length)


@pytest.mark.unit
@pytest.mark.parametrize("secret", ["", None])
def test_missing_secret_is_configuration_error(secret):
    with pytest.raises(ConfigError):
        KeyMaterial(secret=secret, current="XYZ1")


@pytest.mark.unit
def test_key_for_concatenates_secret_and_fragment():
    material = KeyMaterial(secret="abc", current="XYZ1")
    assert material.key_for("XYZ1") == "abcXYZ1"


@pytest.mark.unit
def test_candidates_priority_order():
    material = KeyMaterial(secret="abc", current="cur", previous="prev", pending="next")
    assert material.candidates() == [
        ("current", "cur"),
        ("previous", "prev"),
        ("pending", "next"),
    ]


@pytest.mark.unit
def test_candidates_skip_missing_and_duplicates():
    material = KeyMaterial(secret="abc", current="same", previous="same", pending=None)
    assert material.candidates() == [("current", "same")]

    first_run = KeyMaterial(secret="abc", current="XYZ1")
    assert first_run.candidates() == [("current", "XYZ1")]

    empty = KeyMaterial(secret="abc")
    assert empty.candidates() == []
