import pytest

from eis.codes import KeyCode, MouseCode


def test_letter_codes_match_ascii():
    assert KeyCode(ord("A")) is KeyCode.A
    assert KeyCode(ord("Z")) is KeyCode.Z
    assert KeyCode(ord("0")) is KeyCode.D0


def test_key_code_prints_as_number():
    assert str(KeyCode(32)) == "32"
    assert f"{KeyCode(256)}" == "256"


def test_key_code_lookup_by_value():
    assert KeyCode(348) is KeyCode.Menu
    with pytest.raises(ValueError):
        KeyCode(1)


def test_mouse_aliases():
    assert MouseCode(0) is MouseCode.ButtonLeft
    assert MouseCode(1) is MouseCode.ButtonRight
    assert MouseCode(2) is MouseCode.ButtonMiddle
    assert MouseCode(7) is MouseCode.ButtonLast


def test_mouse_code_prints_as_number():
    assert str(MouseCode(2)) == "2"


@pytest.mark.parametrize("code", list(KeyCode))
def test_key_values_unique_round_trip(code):
    assert KeyCode(int(code)) is code