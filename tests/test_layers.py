from eis.layers import Layer, LayerStack


class Recording(Layer):
    def __init__(self, name, log):
        super().__init__(name)
        self.log = log

    def on_detach(self):
        self.log.append(self.name)


def test_default_name():
    assert Layer().name == "Layer"
    assert Layer("Game").name == "Game"


def test_layers_come_before_overlays():
    stack = LayerStack()
    a, b, o = Layer("a"), Layer("b"), Layer("o")
    stack.push_layer(a)
    stack.push_overlay(o)
    stack.push_layer(b)
    assert list(stack) == [a, b, o]
    assert list(reversed(stack)) == [o, b, a]
    assert len(stack) == 3


def test_pop_layer_detaches():
    log = []
    stack = LayerStack()
    a, b = Recording("a", log), Recording("b", log)
    stack.push_layer(a)
    stack.push_layer(b)
    assert stack.pop_layer(a) is True
    assert log == ["a"]
    assert list(stack) == [b]
    c = Layer("c")
    stack.push_layer(c)
    assert list(stack) == [b, c]


def test_pop_layer_ignores_overlays():
    log = []
    stack = LayerStack()
    o = Recording("o", log)
    stack.push_overlay(o)
    assert stack.pop_layer(o) is False
    assert log == []
    assert list(stack) == [o]


def test_pop_overlay():
    log = []
    stack = LayerStack()
    a, o = Recording("a", log), Recording("o", log)
    stack.push_layer(a)
    stack.push_overlay(o)
    assert stack.pop_overlay(a) is False
    assert stack.pop_overlay(o) is True
    assert log == ["o"]
    assert list(stack) == [a]


def test_clear_detaches_all_in_order():
    log = []
    stack = LayerStack()
    stack.push_overlay(Recording("o", log))
    stack.push_layer(Recording("a", log))
    stack.clear()
    assert log == ["a", "o"]
    assert len(stack) == 0
    stack.push_layer(Recording("b", log))
    assert [layer.name for layer in stack] == ["b"]