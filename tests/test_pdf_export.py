import pytest

from lendinghub.calculators import calculate_affordability, calculate_conventional, run_calculator
from lendinghub.pdf_export import build_estimate_pdf


def test_estimate_pdf_written(tmp_path):
    out = calculate_conventional({"homePrice": 300000, "downPayment": 15000, "interestRate": 6.5, "loanTerm": 30})
    path = tmp_path / "estimate.pdf"
    data = build_estimate_pdf(
        out,
        {"loan_officer": "Jordan Lee", "nmls": "123456", "agent": "Sam & Co Realty", "contact": "jordan@example.com"},
        out_path=str(path),
        lang="es",
    )
    assert data.startswith(b"%PDF")
    assert path.read_bytes() == data


def test_failed_outcome_cannot_be_exported():
    out = run_calculator("conventional", {"homePrice": 0})
    with pytest.raises(ValueError):
        build_estimate_pdf(out)


def test_requires_override_with_critical():
    out = calculate_affordability(
        {"annualIncome": 60000, "monthlyDebts": 3000, "interestRate": 6.5, "loanTerm": 30}
    )
    with pytest.raises(ValueError):
        build_estimate_pdf(out)
    data = build_estimate_pdf(out, override_reason="Debts to be paid off at closing")
    assert data.startswith(b"%PDF")
