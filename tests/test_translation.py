from lendinghub.calculators import calculate_conventional, calculate_refinance
from lendinghub.i18n import available_languages, t
from lendinghub.summary import result_rows


def test_spanish_translation_loaded():
    assert t("Monthly Payment", "es") == "Pago mensual"
    assert t("UnknownKey", "es") == "UnknownKey"
    assert t("Monthly Payment", "fr") == "Monthly Payment"


def test_conventional_rows_follow_widget():
    res = calculate_conventional(
        {"homePrice": 300000, "downPayment": 60000, "interestRate": 6.5, "loanTerm": 30, "propertyTax": 3600, "insurance": 1200}
    ).result
    rows = dict(result_rows("conventional", res))
    assert rows["Monthly Payment"] == "$1,917"
    assert rows["Down Payment"] == "20.000%"
    assert "PMI" not in rows
    assert "HOA" not in rows


def test_refinance_rows_translated():
    res = calculate_refinance(
        {
            "currentLoanBalance": 235000,
            "homeValue": 300000,
            "newInterestRate": 0,
            "newLoanTerm": 20,
            "closingCosts": 5000,
            "currentPayment": 1250,
        }
    ).result
    rows = dict(result_rows("refinance", res, "es"))
    assert rows["Punto de equilibrio"] == "20 meses"
    assert rows["Ahorro mensual"] == "$250"


def test_refinance_rows_without_break_even():
    res = calculate_refinance(
        {
            "currentLoanBalance": 235000,
            "homeValue": 300000,
            "newInterestRate": 0,
            "newLoanTerm": 20,
            "closingCosts": 5000,
            "currentPayment": 1000,
        }
    ).result
    assert dict(result_rows("refinance", res))["Break-Even"] == "Never"


def test_estimate_labels_translated():
    for key in ["Loan Officer", "Real Estate Agent", "Contact", "Override Reason", "Code", "Severity", "Message"]:
        assert t(key, "es") != key
    assert t("Contact", "es") == "Contacto"


def test_regional_language_codes_use_base_labels():
    assert t("Monthly Payment", "es-MX") == "Pago mensual"
    assert t("Monthly Payment", "es_US") == "Pago mensual"
    assert t("Monthly Payment", "") == "Monthly Payment"


def test_available_languages():
    assert available_languages() == ["en", "es"]
