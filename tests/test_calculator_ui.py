from streamlit.testing.v1 import AppTest


def conventional_app():
    from lendinghub.ui import render_calculator

    render_calculator("conventional")


def refinance_app():
    from lendinghub.ui import render_calculator

    render_calculator("refinance")


def compare_app():
    from lendinghub.ui import render_compare

    render_compare()


def test_conventional_defaults_show_payment():
    at = AppTest.from_function(conventional_app)
    at.run()
    caption = next(c.value for c in at.caption if c.value.startswith("Monthly Payment"))
    assert caption == "Monthly Payment: $1,917"
    assert at.session_state["conventional_outcome"]["ok"] is True


def test_invalid_price_shows_field_error():
    at = AppTest.from_function(conventional_app)
    at.run()
    price = next(w for w in at.number_input if w.label == "Home Price")
    price.set_value(0.0)
    at.run()
    assert any(e.value.startswith("homePrice") for e in at.error)
    assert not any(c.value.startswith("Monthly Payment") for c in at.caption)


def test_spanish_labels():
    at = AppTest.from_function(conventional_app)
    at.session_state["ui_prefs"] = {"language": "es"}
    at.run()
    assert any(c.value == "Pago mensual: $1,917" for c in at.caption)
    assert any(w.label == "Precio de la vivienda" for w in at.number_input)


def test_refinance_break_even_updates():
    at = AppTest.from_function(refinance_app)
    at.run()
    new_rate = next(w for w in at.number_input if w.label == "New Interest Rate (%)")
    new_rate.set_value(7.5)
    at.run()
    data = at.session_state["refinance_outcome"]["result"]
    assert data["monthlySavings"] < 0
    assert any("higher than the current payment" in w.value for w in at.warning)


def test_compare_tab_lists_programs():
    at = AppTest.from_function(compare_app)
    at.run()
    programs = [row["Program"] for row in at.session_state["compare_table"]]
    assert programs == ["Conventional", "FHA", "VA"]
