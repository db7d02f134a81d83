import logging

from lendinghub.calculators import (
    CALCULATORS,
    calculate_conventional,
    calculate_refinance,
    coerce_number,
    run_calculator,
    sanitize_payload,
)
from lendinghub.models import ConventionalInputs


def _fields(outcome):
    return {e.field: e.code for e in outcome.errors}


def test_zero_home_price_rejected():
    out = calculate_conventional({"homePrice": 0, "downPayment": 0, "interestRate": 6.5, "loanTerm": 30})
    assert not out.ok
    assert out.result is None
    assert _fields(out) == {"homePrice": "greater_than"}


def test_non_positive_term_rejected():
    out = calculate_conventional({"homePrice": 300000, "downPayment": 0, "interestRate": 6.5, "loanTerm": 0})
    assert _fields(out) == {"loanTerm": "greater_than"}


def test_down_payment_above_price_rejected():
    out = calculate_conventional(
        {"homePrice": 300000, "downPayment": 350000, "interestRate": 6.5, "loanTerm": 30}
    )
    assert _fields(out) == {"downPayment": "down_payment_exceeds_price"}


def test_non_finite_values_rejected():
    out = calculate_conventional(
        {"homePrice": float("nan"), "downPayment": 0, "interestRate": float("inf"), "loanTerm": 30}
    )
    assert not out.ok
    assert {"homePrice", "interestRate"} <= set(_fields(out))


def test_negative_amounts_rejected():
    out = calculate_refinance(
        {
            "currentLoanBalance": 200000,
            "homeValue": 300000,
            "newInterestRate": 6,
            "newLoanTerm": 30,
            "closingCosts": -100,
            "currentPayment": 1500,
        }
    )
    assert _fields(out) == {"closingCosts": "greater_than_equal"}


def test_missing_fields_reported():
    out = run_calculator("affordability", {})
    assert not out.ok
    assert set(_fields(out)) == {"annualIncome", "interestRate", "loanTerm"}
    assert set(_fields(out).values()) == {"missing"}


def test_snake_case_and_model_inputs_accepted():
    by_name = calculate_conventional(
        {"home_price": 300000, "down_payment": 60000, "interest_rate": 6.5, "loan_term": 30}
    )
    model = ConventionalInputs(home_price=300000, down_payment=60000, interest_rate=6.5, loan_term=30)
    assert by_name.ok
    assert calculate_conventional(model).result == by_name.result


def test_coerce_number_handles_form_values():
    assert coerce_number("$300,000") == 300000.0
    assert coerce_number(" 6.5% ") == 6.5
    assert coerce_number("") is None
    assert coerce_number("abc") == "abc"
    assert coerce_number(30) == 30


def test_run_calculator_sanitizes_form_strings():
    out = run_calculator(
        "conventional",
        {
            "homePrice": "$300,000",
            "downPayment": "60,000",
            "interestRate": "6.5%",
            "loanTerm": "30",
            "propertyTax": "",
            "insurance": None,
        },
    )
    assert out.ok
    assert out.result.property_tax == 0
    assert sanitize_payload({"hoa": "", "loanTerm": "15"}) == {"loanTerm": 15.0}


def test_run_calculator_reports_unparseable_field():
    out = run_calculator(
        "FHA", {"homePrice": "lots", "downPayment": 0, "interestRate": 6.5, "loanTerm": 30}
    )
    assert out.calculator == "fha"
    assert _fields(out) == {"homePrice": "float_parsing"}


def test_unknown_calculator(caplog):
    with caplog.at_level(logging.WARNING, logger="lendinghub.calculators"):
        out = run_calculator("jumbo", {"homePrice": 1})
    assert not out.ok
    assert _fields(out) == {"calculatorType": "unknown_calculator"}
    assert "Unknown calculator type" in caplog.text


def test_rejection_is_logged(caplog):
    with caplog.at_level(logging.WARNING, logger="lendinghub.calculators"):
        calculate_conventional({"homePrice": -1, "downPayment": 0, "interestRate": 6.5, "loanTerm": 30})
    assert "Rejected conventional calculation" in caplog.text


def test_outcome_serializes_with_widget_keys():
    out = run_calculator(
        "fha", {"homePrice": 300000, "downPayment": 10500, "interestRate": 6.5, "loanTerm": 30}
    )
    data = out.model_dump(by_alias=True)
    assert data["ok"] is True
    assert data["errors"] == []
    assert {"upfrontMIP", "monthlyMIP", "principalAndInterest", "loanAmount"} <= set(data["result"])
    assert data["advisories"][0]["code"] == "FHA_MIP_FINANCED"


def test_registry_covers_all_calculators():
    assert set(CALCULATORS) == {"conventional", "va", "fha", "refinance", "affordability"}


def test_out_of_range_rate_and_term_rejected():
    out = run_calculator(
        "fha", {"homePrice": 300000, "downPayment": 10500, "interestRate": "1000000", "loanTerm": 30}
    )
    assert _fields(out) == {"interestRate": "less_than_equal"}
    out = calculate_conventional(
        {"homePrice": 300000, "downPayment": 60000, "interestRate": 6.5, "loanTerm": 20000}
    )
    assert _fields(out) == {"loanTerm": "less_than_equal"}


def test_refinance_bounds_reported():
    out = calculate_refinance(
        {
            "currentLoanBalance": 200000,
            "homeValue": 300000,
            "newInterestRate": 250,
            "newLoanTerm": 75,
            "currentInterestRate": 101,
            "currentPayment": 1500,
        }
    )
    assert _fields(out) == {
        "newInterestRate": "less_than_equal",
        "newLoanTerm": "less_than_equal",
        "currentInterestRate": "less_than_equal",
    }
