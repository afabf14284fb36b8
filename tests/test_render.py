import json
import logging
import re
from pathlib import Path

import pytest
from bs4 import BeautifulSoup

from sculptor.engine import Phase, Sculptor
from sculptor.errors import NotRenderedError, PersistenceError, RenderError
from sculptor.models import RenderConfig


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def _runtime(html: str) -> str:
    scripts = _soup(html).body.find_all("script", recursive=False)
    assert len(scripts) == 1
    return scripts[0].string or ""


def _refs_table(script: str) -> dict:
    match = re.search(r"const refs = (\{.*?\});", script)
    assert match, script
    return json.loads(match.group(1))


@pytest.fixture
def app() -> Sculptor:
    return Sculptor(deterministic=True)


def test_end_to_end_page(app: Sculptor):
    container = app.div()
    button = app.button().set_text("Go").on_click("console.log(1)")
    container.append(app.h1().set_text("Hello"), button)

    html = app.render(container, title="T").output()
    soup = _soup(html)

    assert html.startswith("<!DOCTYPE html>")
    assert "<title>T</title>" in html
    headings = soup.find_all("h1")
    assert len(headings) == 1 and headings[0].get_text() == "Hello"
    assert len(soup.find_all("script")) == 1
    assert soup.body.find_all(recursive=False)[-1].name == "script"

    script = _runtime(html)
    assert "console.log(1)" in script
    assert f'document.getElementById("{button.id}").addEventListener("click"' in script


def test_escaped_text_never_becomes_markup(app: Sculptor):
    html = app.render(app.div().set_text("<script>alert(1)</script>")).output()
    assert "<script>alert(1)</script>" not in html
    assert "&lt;script&gt;alert(1)&lt;/script&gt;" in html


def test_flat_rendering_keeps_order_without_wrapper(app: Sculptor):
    first, second = app.div().set_id("a"), app.section().set_id("b")
    html = app.render([first, second]).output()
    children = _soup(html).body.find_all(recursive=False)
    assert [child.name for child in children] == ["div", "section", "script"]
    assert [child.get("id") for child in children[:2]] == ["a", "b"]


def test_generator_root_is_mounted_flat(app: Sculptor):
    first, second = app.div().set_id("a"), app.section().set_id("b")
    html = app.render(node for node in (first, second)).output()
    assert app.last_error is None
    children = _soup(html).body.find_all(recursive=False)
    assert [child.get("id") for child in children[:2]] == ["a", "b"]



def test_reference_round_trip(app: Sculptor):
    panel = app.div().ref("panel")
    html = app.render(panel).output()
    assert re.fullmatch(r"sc-id-1-[0-9a-z]{3}", panel.id)
    assert _refs_table(_runtime(html)) == {"panel": panel.id}
    assert _soup(html).find(id=panel.id) is not None


def test_style_flush_contains_each_rule_once(app: Sculptor):
    app.shared_class("card", {"borderRadius": "8px"})
    app.define_class("*", {"boxSizing": "border-box"}, raw=True)
    one = app.div().scoped_class({"color": "red"})
    two = app.div().scoped_class({"color": "blue"}).add_class("card")

    html = app.render([one, two]).output()
    styles = _soup(html).head.find_all("style")
    assert len(styles) == 1
    css = styles[0].get_text()
    for rule in (
        ".card { border-radius: 8px; }",
        "* { box-sizing: border-box; }",
        ".sc-cls-1 { color: red; }",
        ".sc-cls-2 { color: blue; }",
    ):
        assert css.count(rule) == 1


def test_head_order_follows_config(app: Sculptor):
    config = RenderConfig(
        title="Ordered",
        meta=[{"charset": "utf-8"}, {"name": "viewport", "content": "width=device-width"}],
        scripts="https://cdn.example/app.js",
        css=["a.css", "b.css"],
        icon="favicon.ico",
        lang="ja",
    )
    html = app.render(app.div(), config).output()
    soup = _soup(html)
    head = [child.name for child in soup.head.children]
    assert head == ["title", "meta", "meta", "script", "link", "link", "link", "style"]
    links = soup.head.find_all("link")
    assert [link["href"] for link in links] == ["a.css", "b.css", "favicon.ico"]
    assert links[-1]["rel"] == ["icon"]
    assert soup.head.script["src"] == "https://cdn.example/app.js"
    assert soup.html["lang"] == "ja"


def test_default_title_and_single_meta(app: Sculptor):
    html = app.render(app.div(), {"meta": {"name": "robots", "content": "none"}}).output()
    soup = _soup(html)
    assert soup.title.get_text() == "Sculpted Page"
    assert soup.head.meta["name"] == "robots"


def test_runtime_shape_and_state_seed(app: Sculptor):
    app.state("count", 2).state("user", {"name": "</script><b>"})
    label = app.span().bind_text("count", "`Count: ${val}`")
    html = app.render(label).output()
    script = _runtime(html)

    assert script.lstrip().startswith("(function () {")
    assert "document.addEventListener('DOMContentLoaded'" in script
    assert 'new Proxy({"count": 2, "user": {"name": "\\u003c/script\\u003e\\u003cb\\u003e"}}' in script
    assert "if (Object.is(target[key], value)) return true;" in script
    assert "window.watchState = (key, fn)" in script
    assert f'document.getElementById("{label.id}")' in script
    assert html.count("</script>") == 1


def test_behavior_follows_runtime_in_registration_order(app: Sculptor):
    app.oncreate("console.log('first')")
    button = app.button().on_click("console.log('second')")
    app.oncreate("console.log('third')")
    script = _runtime(app.render(button).output())
    positions = [script.index(marker) for marker in ("window.State", "'first'", "'second'", "'third'")]
    assert positions == sorted(positions)


def test_literal_closing_script_in_handler_is_guarded(app: Sculptor):
    button = app.button().on_click("document.body.innerHTML += '</script>'")
    html = app.render(button).output()
    assert html.count("</script>") == 1
    assert "<\\/script>" in _runtime(html)


def test_second_render_flushes_buffers_but_keeps_ids(app: Sculptor):
    app.state("n", 1)
    node = app.div().scoped_class({"color": "red"}).ref("box").on_click("console.log(1)")
    first = app.render(node, title="One").output()
    assert app.phase is Phase.COMPILED

    second = app.render(node, title="Two").output()
    assert first != second
    soup = _soup(second)
    assert soup.head.style.get_text() == ""
    script = _runtime(second)
    assert "addEventListener(\"click\"" not in script
    assert _refs_table(script) == {}
    assert "new Proxy({}" in script
    assert soup.find(id=node.id) is not None
    assert len(soup.body.find_all("div")) == 1


def test_failed_render_keeps_previous_output_and_buffers(app: Sculptor, caplog):
    good = app.render(app.div().set_text("ok")).output()
    app.shared_class("kept", {"color": "red"})

    with caplog.at_level(logging.ERROR, logger="sculptor"):
        app.render([app.div(), 42])

    assert app.output() == good
    assert isinstance(app.last_error, RenderError)
    assert app.phase is Phase.COMPILED
    assert "[Sculptor]" in caplog.text
    assert len(app.styles) == 1

    retry = app.render(app.div()).output()
    assert ".kept { color: red; }" in retry
    assert app.last_error is None


def test_invalid_config_is_contained(app: Sculptor, caplog):
    with caplog.at_level(logging.ERROR, logger="sculptor"):
        app.render(app.div(), {"titel": "typo"})
    assert isinstance(app.last_error, RenderError)
    assert app.phase is Phase.IDLE
    with pytest.raises(NotRenderedError):
        app.output()


def test_output_and_save_require_a_render(app: Sculptor, tmp_path: Path):
    with pytest.raises(NotRenderedError):
        app.output()
    with pytest.raises(NotRenderedError):
        app.save(tmp_path / "index.html")


def test_save_writes_last_render(app: Sculptor, tmp_path: Path):
    target = tmp_path / "site" / "index.html"
    html = app.render(app.p().set_text("saved")).save(target).output()
    assert target.read_text(encoding="utf-8") == html


def test_save_failure_is_logged_not_raised(app: Sculptor, tmp_path: Path, caplog):
    blocker = tmp_path / "file.txt"
    blocker.write_text("x", encoding="utf-8")
    app.render(app.div())
    with caplog.at_level(logging.ERROR, logger="sculptor"):
        app.save(blocker / "index.html")
    assert isinstance(app.last_error, PersistenceError)
    assert "Failed to write" in caplog.text


def test_deterministic_builds_are_identical():
    def build() -> str:
        app = Sculptor(deterministic=True)
        node = app.div().ref("root").scoped_class({"margin": "0"})
        node.append(app.button().on_click("console.log(1)"))
        return app.render(node, title="Same").output()

    assert build() == build()
