from eis.timestep import TimeStep


def test_default_is_zero():
    assert float(TimeStep()) == 0.0
    assert TimeStep().milliseconds == 0.0


def test_float_conversion():
    assert float(TimeStep(0.25)) == 0.25


def test_milliseconds():
    assert TimeStep(0.5).milliseconds == 500.0


def test_multiplication_with_speed():
    ts = TimeStep(0.5)
    assert 90.0 * ts == 45.0
    assert ts * 2.0 == 1.0