from hexgrid import HexCoord
from sim.safe_parse import to_float, to_hex, to_hex_set, to_level


def test_safe_parse_helpers():
    assert to_level("7") == 7
    assert to_level("bad", default=3) == 3
    assert to_level(-2) == 0
    assert to_float("1.5") == 1.5
    assert to_float(4) == 4.0
    assert to_float("nan", default=2.5) == 2.5
    assert to_float("yesterday") == 0.0
    assert to_float(None, default=1.0) == 1.0
    assert to_float(True, default=9.0) == 9.0


def test_hex_helpers():
    assert to_hex("3, 4") == HexCoord(3, 4)
    assert to_hex([1, 2]) == HexCoord(1, 2)
    assert to_hex("-1,0") is None
    assert to_hex("x") is None
    assert to_hex_set(["1,1", "bad", (2, 2), "1,1"]) == {(1, 1), (2, 2)}
