import pytest

from sculptor.behavior import BehaviorBuffer, JsSource, coerce_handler
from sculptor.errors import InvalidHandlerError


@pytest.mark.parametrize(
    "source",
    [
        "() => alert(1)",
        "(event) => event.preventDefault()",
        "e => console.log(e)",
        "function (event) { console.log(event); }",
        "async () => { await fetch('/x'); }",
        "(a = f()) => a",
        "(x = (1), { y } = {}) => { return x; }",
        "(s = \")\") => s",
    ],
)
def test_function_expressions_are_recognized(source: str):
    assert JsSource(source).is_function
    assert JsSource(source).as_callable() == f"({source})"


@pytest.mark.parametrize(
    "source", ["console.log(1)", "(console.log(1))", "State.count += 1", "(f()) + 1", "(a, b)"]
)
def test_bodies_are_wrapped(source: str):
    assert not JsSource(source).is_function
    assert JsSource(source).as_callable("event") == f"(function (event) {{ {source} }})"


@pytest.mark.parametrize("bad", [lambda event: None, print, None, 42, b"alert(1)"])
def test_non_source_handlers_are_rejected(bad):
    with pytest.raises(InvalidHandlerError):
        coerce_handler(bad)


def test_blank_handler_is_rejected():
    with pytest.raises(InvalidHandlerError):
        coerce_handler("   ")


def test_invalid_handler_leaves_buffer_untouched():
    buffer = BehaviorBuffer()
    with pytest.raises(InvalidHandlerError):
        buffer.record_event("sc-id-1-abc", "click", lambda: None)
    with pytest.raises(InvalidHandlerError):
        buffer.record_event("sc-id-1-abc", "", "console.log(1)")
    assert len(buffer) == 0


def test_entries_render_in_registration_order():
    buffer = BehaviorBuffer()
    buffer.record_event("btn", "click", "console.log(1)")
    buffer.record_lifecycle("() => console.log('ready')")
    buffer.record_state_watch("count", "label", "`Count: ${val}`")

    lines = buffer.render().splitlines()
    assert lines[0] == (
        'document.getElementById("btn").addEventListener("click", '
        "(function (event) { console.log(1) }));"
    )
    assert lines[1] == "(() => console.log('ready'))();"
    assert lines[2] == 'window.watchState("count", (val) => {'
    assert 'const el = document.getElementById("label");' in lines[3]
    assert "el.textContent = ((val) => (`Count: ${val}`))(val);" in lines[4]


def test_state_watch_defaults_to_identity():
    buffer = BehaviorBuffer()
    buffer.record_state_watch("name", "label")
    assert "el.textContent = ((val) => val)(val);" in buffer.render()


def test_lifecycle_body_is_invoked_once():
    buffer = BehaviorBuffer()
    buffer.record_lifecycle("console.log('boot')")
    assert buffer.flush() == "(function () { console.log('boot') })();"
    assert len(buffer) == 0
