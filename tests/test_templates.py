import pytest
from jinja2 import Environment

from bindgen_java.codegen.core.templates import TemplateError, create_template_engine


@pytest.fixture
def engine(tmp_path):
    (tmp_path / "Greeting.java.j2").write_text(
        "class {{ name|shout }} { // {{ prefix }}\n}\n", encoding="utf-8"
    )
    (tmp_path / "Plain.java.j2").write_text("class {{ name }} {}\n", encoding="utf-8")
    return create_template_engine(tmp_path)


def test_overlay_adds_filters_and_globals(engine):
    run = engine.overlay(filters={"shout": str.upper}, globals={"prefix": "generated"})
    assert run.render_template("Greeting.java.j2", {"name": "point"}) == (
        "class POINT { // generated\n}\n"
    )


def test_overlays_do_not_leak(engine):
    engine.overlay(filters={"shout": str.upper}, globals={"prefix": "x"})
    with pytest.raises(TemplateError, match="Greeting.java.j2"):
        engine.render_template("Greeting.java.j2", {"name": "point"})


def test_undefined_variables_fail(engine):
    with pytest.raises(TemplateError, match="Plain.java.j2"):
        engine.render_template("Plain.java.j2", {})


def test_missing_template(engine):
    with pytest.raises(TemplateError):
        engine.render_template("Missing.java.j2", {})


def test_only_jinja_builtin_filters_by_default(engine):
    run = engine.overlay(filters={"shout": str.upper})
    assert set(run._env.filters) - set(Environment().filters) == {"shout"}
