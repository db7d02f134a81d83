"""Result panel rows for the calculator page and exports."""
from __future__ import annotations

from typing import List, Tuple

from lendinghub.formatting import format_currency, format_percent
from lendinghub.i18n import t

Row = Tuple[str, str]


def _conventional(r) -> List[Row]:
    rows = [
        ("Monthly Payment", format_currency(r.monthly_payment)),
        ("Principal & Interest", format_currency(r.principal_and_interest)),
    ]
    if r.pmi > 0:
        rows.append(("PMI", format_currency(r.pmi)))
    rows += [
        ("Property Tax", format_currency(r.property_tax)),
        ("Insurance", format_currency(r.insurance)),
    ]
    if r.hoa > 0:
        rows.append(("HOA", format_currency(r.hoa)))
    rows += [
        ("Loan Amount", format_currency(r.loan_amount)),
        ("Down Payment", format_percent(r.down_payment_percent)),
        ("Total Interest", format_currency(r.total_interest)),
    ]
    return rows


def _va(r) -> List[Row]:
    rows = [
        ("Monthly Payment", format_currency(r.monthly_payment)),
        ("Principal & Interest", format_currency(r.principal_and_interest)),
        ("Property Tax", format_currency(r.property_tax)),
        ("Insurance", format_currency(r.insurance)),
    ]
    if r.hoa > 0:
        rows.append(("HOA", format_currency(r.hoa)))
    rows += [
        ("Loan Amount", format_currency(r.loan_amount)),
        ("Funding Fee", format_currency(r.funding_fee)),
        ("Total Interest", format_currency(r.total_interest)),
    ]
    return rows


def _fha(r) -> List[Row]:
    rows = [
        ("Monthly Payment", format_currency(r.monthly_payment)),
        ("Principal & Interest", format_currency(r.principal_and_interest)),
        ("Monthly MIP", format_currency(r.monthly_mip)),
        ("Property Tax", format_currency(r.property_tax)),
        ("Insurance", format_currency(r.insurance)),
    ]
    if r.hoa > 0:
        rows.append(("HOA", format_currency(r.hoa)))
    rows += [
        ("Loan Amount", format_currency(r.loan_amount)),
        ("Upfront MIP", format_currency(r.upfront_mip)),
        ("Total Interest", format_currency(r.total_interest)),
    ]
    return rows


def _refinance(r, lang: str) -> List[Row]:
    if r.break_even_months is None:
        break_even = t("Never", lang)
    else:
        break_even = f"{r.break_even_months} {t('months', lang)}"
    return [
        ("New Monthly Payment", format_currency(r.new_monthly_payment)),
        (
            "Monthly Savings" if r.monthly_savings >= 0 else "Monthly Increase",
            format_currency(abs(r.monthly_savings)),
        ),
        ("Break-Even", break_even),
        ("New Loan Amount", format_currency(r.new_loan_amount)),
        ("LTV Ratio", format_percent(r.ltv_ratio)),
        (
            "Lifetime Savings" if r.lifetime_savings >= 0 else "Lifetime Cost Increase",
            format_currency(abs(r.lifetime_savings)),
        ),
    ]


def _affordability(r) -> List[Row]:
    rows = [
        ("Max Home Price", format_currency(r.max_home_price)),
        ("Max Loan Amount", format_currency(r.max_loan_amount)),
        ("Est. Monthly Payment", format_currency(r.estimated_monthly_payment)),
        ("Down Payment", format_currency(r.down_payment)),
    ]
    if r.estimated_pmi > 0:
        rows.append(("Est. PMI", format_currency(r.estimated_pmi)))
    rows += [
        ("Front-End Ratio", format_percent(r.front_end_ratio)),
        ("Back-End Ratio", format_percent(r.back_end_ratio)),
    ]
    return rows


def result_rows(calculator_type: str, result, lang: str = "en") -> List[Row]:
    """Return translated ``(label, value)`` rows for a calculator result."""
    if calculator_type == "conventional":
        rows = _conventional(result)
    elif calculator_type == "va":
        rows = _va(result)
    elif calculator_type == "fha":
        rows = _fha(result)
    elif calculator_type == "refinance":
        rows = _refinance(result, lang)
    elif calculator_type == "affordability":
        rows = _affordability(result)
    else:
        raise ValueError(f"Unknown calculator type: {calculator_type}")
    return [(t(label, lang), value) for label, value in rows]
