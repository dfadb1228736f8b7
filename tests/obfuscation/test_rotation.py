import pytest

from irodsrest.obfuscation.rotation import RotationEngine

# Offsets for seq 0xd768b678 with owner id 0, cursor 0, 3, ..., 27
FIRST_PERIOD = [24, 15, 25, 27, 11, 17, 26, 27, 23, 26]


@pytest.mark.unit
def test_offsets_for_known_seq_constant():
    engine = RotationEngine()
    offsets = [engine.next_offset(0xd768b678, 0) for _ in range(10)]
    assert offsets == FIRST_PERIOD


@pytest.mark.unit
def test_offset_sequence_has_period_ten():
    engine = RotationEngine()
    offsets = [engine.next_offset(0x987098d8, 123) for _ in range(40)]
    for i in range(30):
        assert offsets[i] == offsets[i + 10]


@pytest.mark.unit
def test_cursor_cycles_and_wraps_to_zero():
    engine = RotationEngine()
    seen = []
    for _ in range(11):
        seen.append(engine.cursor)
        engine.next_offset(0, 0)
    assert seen == [0, 3, 6, 9, 12, 15, 18, 21, 24, 27, 0]


@pytest.mark.unit
def test_owner_id_is_added_to_window():
    engine = RotationEngine()
    assert engine.next_offset(0xd768b678, 840) == 24 + 840
    assert engine.next_offset(0xd768b678, 840) == 15 + 840


@pytest.mark.unit
def test_high_window_uses_unsigned_shift():
    engine = RotationEngine()
    engine.cursor = 27
    # top five bits of 0xe76d342e are 11100
    assert engine.next_offset(0xe76d342e, 0) == 0b11100
    assert engine.cursor == 0
