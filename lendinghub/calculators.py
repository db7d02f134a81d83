from __future__ import annotations
import logging
import math
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Type

import pandas as pd
from pydantic import BaseModel, ValidationError

from lendinghub.models import (
    AffordabilityInputs,
    AffordabilityResult,
    CalculationOutcome,
    ConventionalInputs,
    ConventionalResult,
    FHAInputs,
    FHAResult,
    InputIssue,
    RefinanceInputs,
    RefinanceResult,
    VAInputs,
    VAResult,
    issues_from_error,
)
from lendinghub.presets import resolve_tables
from lendinghub.rules import evaluate_rules

logger = logging.getLogger(__name__)

_FORM_NOISE = str.maketrans("", "", "$,% \t")


def nz(x, default=0.0):
    """Return a float for ``x`` or a fallback value.

    Blank form fields arrive as ``None`` or ``NaN``; treating them as the
    default keeps the amortization helpers usable on partially filled input.
    """

    try:
        if x is None or (isinstance(x, float) and math.isnan(x)):
            return default
        return float(x)
    except (TypeError, ValueError):
        return default


def monthly_payment(principal, annual_rate_pct, term_years):
    """Calculate the fully amortizing monthly payment for a loan.

    ``principal`` is the starting loan amount, ``annual_rate_pct`` is the
    nominal yearly interest rate (e.g. ``6.5`` for 6.5%), and ``term_years`` is
    the amortization period in years.  A zero rate spreads the principal
    evenly over the payments.
    """

    L = nz(principal)
    r = nz(annual_rate_pct) / 100 / 12
    n = int(nz(term_years) * 12)
    if n <= 0:
        return 0.0
    if abs(r) < 1e-9:
        return L / n
    return (r * L) / (1 - (1 + r) ** (-n))


def principal_from_payment(payment, annual_rate_pct, term_years):
    """Reverse amortization to find the loan amount for a given payment.

    Used to qualify a borrower: given the monthly principal and interest they
    can carry, rate and term, determine the largest loan that fits.
    """

    P = nz(payment)
    r = nz(annual_rate_pct) / 100 / 12
    n = int(nz(term_years) * 12)
    if n <= 0:
        return 0.0
    if abs(r) < 1e-9:
        return P * n
    return P * (1 - (1 + r) ** (-n)) / r


def break_even_months(closing_costs, monthly_savings) -> Optional[int]:
    """Months of savings needed to recover refinance closing costs.

    Returns ``0`` when nothing was paid at closing and ``None`` when the
    savings are zero, meaning the costs are never recovered.
    """

    costs = nz(closing_costs)
    savings = nz(monthly_savings)
    if costs <= 0:
        return 0
    if savings == 0:
        return None
    return math.ceil(costs / abs(savings))


def coerce_number(value: Any) -> Any:
    """Turn a raw form value into a number where possible.

    Currency symbols, thousands separators and percent signs are stripped.
    Blank values become ``None``; text that still is not a number is returned
    unchanged so validation can report it against the field.
    """

    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, str):
        text = value.strip().translate(_FORM_NOISE)
        if not text:
            return None
        try:
            return float(text)
        except ValueError:
            return value
    return value


def sanitize_payload(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """Coerce submitted form fields, dropping blanks so defaults apply."""

    out: Dict[str, Any] = {}
    for key, val in payload.items():
        num = coerce_number(val)
        if num is not None:
            out[key] = num
    return out


def _escrow(inputs) -> Tuple[float, float, float]:
    return inputs.property_tax / 12, inputs.insurance / 12, inputs.hoa / 12


def _needs_pmi(down_pct: float, tables: Dict[str, Any]) -> bool:
    return down_pct < tables["pmi"]["down_pct_threshold"]


def _monthly_pmi(loan_amount: float, tables: Dict[str, Any]) -> float:
    return loan_amount * tables["pmi"]["annual_pct"] / 100 / 12


def conventional_breakdown(inputs: ConventionalInputs, tables: Dict[str, Any]) -> ConventionalResult:
    principal = inputs.home_price - inputs.down_payment
    down_pct = inputs.down_payment / inputs.home_price * 100
    n = inputs.loan_term * 12
    pi = monthly_payment(principal, inputs.interest_rate, inputs.loan_term)
    pmi = _monthly_pmi(principal, tables) if _needs_pmi(down_pct, tables) else 0.0
    taxes, insurance, hoa = _escrow(inputs)
    total = pi + pmi + taxes + insurance + hoa
    return ConventionalResult(
        monthly_payment=total,
        principal_and_interest=pi,
        pmi=pmi,
        property_tax=taxes,
        insurance=insurance,
        hoa=hoa,
        loan_amount=principal,
        down_payment_percent=down_pct,
        total_interest=pi * n - principal,
        total_paid=total * n,
        number_of_payments=n,
    )


def va_breakdown(inputs: VAInputs, tables: Dict[str, Any]) -> VAResult:
    fee_pct = inputs.funding_fee_percent
    if fee_pct is None:
        fee_pct = tables["va"]["funding_fee_pct"]
    funding_fee = inputs.home_price * (fee_pct / 100)
    principal = inputs.home_price - inputs.down_payment + funding_fee
    n = inputs.loan_term * 12
    pi = monthly_payment(principal, inputs.interest_rate, inputs.loan_term)
    taxes, insurance, hoa = _escrow(inputs)
    total = pi + taxes + insurance + hoa
    return VAResult(
        monthly_payment=total,
        principal_and_interest=pi,
        funding_fee=funding_fee,
        funding_fee_percent=fee_pct,
        property_tax=taxes,
        insurance=insurance,
        hoa=hoa,
        loan_amount=principal,
        total_interest=pi * n - principal,
        total_paid=total * n,
        number_of_payments=n,
    )


def fha_breakdown(inputs: FHAInputs, tables: Dict[str, Any]) -> FHAResult:
    fha = tables["fha"]
    upfront = inputs.home_price * fha["ufmip_pct"] / 100
    base_loan = inputs.home_price - inputs.down_payment
    principal = base_loan + upfront
    n = inputs.loan_term * 12
    pi = monthly_payment(principal, inputs.interest_rate, inputs.loan_term)
    # Annual MIP is charged on the base loan, not the financed amount.
    monthly_mip = base_loan * fha["annual_mip_pct"] / 100 / 12
    taxes, insurance, hoa = _escrow(inputs)
    total = pi + monthly_mip + taxes + insurance + hoa
    return FHAResult(
        monthly_payment=total,
        principal_and_interest=pi,
        upfront_mip=upfront,
        monthly_mip=monthly_mip,
        base_loan=base_loan,
        property_tax=taxes,
        insurance=insurance,
        hoa=hoa,
        loan_amount=principal,
        total_interest=pi * n - principal,
        total_paid=total * n,
        number_of_payments=n,
    )


def refinance_breakdown(inputs: RefinanceInputs, tables: Dict[str, Any]) -> RefinanceResult:
    principal = inputs.current_loan_balance + inputs.closing_costs
    n = inputs.new_loan_term * 12
    new_payment = monthly_payment(principal, inputs.new_interest_rate, inputs.new_loan_term)
    savings = inputs.current_payment - new_payment
    months = break_even_months(inputs.closing_costs, savings)
    total_new = new_payment * n
    total_current = inputs.current_payment * n
    return RefinanceResult(
        new_monthly_payment=new_payment,
        monthly_savings=savings,
        break_even_months=months,
        breaks_even=months is not None,
        lifetime_savings=total_current - total_new,
        total_new_loan_cost=total_new,
        total_current_loan_cost=total_current,
        ltv_ratio=inputs.current_loan_balance / inputs.home_value * 100,
        new_loan_amount=principal,
        total_interest=total_new - principal,
        number_of_payments=n,
    )


def affordability_breakdown(inputs: AffordabilityInputs, tables: Dict[str, Any]) -> AffordabilityResult:
    dti = tables["dti"]
    monthly_income = inputs.annual_income / 12
    max_monthly = monthly_income * dti["front_end_pct"] / 100
    max_total_debt = monthly_income * dti["back_end_pct"] / 100
    available_for_housing = min(max_monthly, max_total_debt - inputs.monthly_debts)
    taxes, insurance, hoa = _escrow(inputs)
    available_for_pi = max(0.0, available_for_housing - taxes - insurance - hoa)
    max_loan = principal_from_payment(available_for_pi, inputs.interest_rate, inputs.loan_term)
    max_price = max_loan + inputs.down_payment
    down_pct = inputs.down_payment / max_price * 100 if max_price > 0 else 0.0
    pmi = _monthly_pmi(max_loan, tables) if _needs_pmi(down_pct, tables) else 0.0
    estimated = available_for_pi + pmi + taxes + insurance + hoa
    return AffordabilityResult(
        max_home_price=max_price,
        max_loan_amount=max_loan,
        estimated_monthly_payment=estimated,
        down_payment=inputs.down_payment,
        down_payment_percent=down_pct,
        monthly_income=monthly_income,
        max_monthly_payment=max_monthly,
        max_total_debt=max_total_debt,
        available_for_housing=available_for_housing,
        available_for_pi=available_for_pi,
        monthly_taxes=taxes,
        monthly_insurance=insurance,
        monthly_hoa=hoa,
        estimated_pmi=pmi,
        front_end_ratio=estimated / monthly_income * 100,
        back_end_ratio=(estimated + inputs.monthly_debts) / monthly_income * 100,
    )


def _validate(model: Type[BaseModel], inputs) -> Tuple[Optional[BaseModel], List[InputIssue]]:
    if isinstance(inputs, model):
        return inputs, []
    data = inputs.model_dump() if isinstance(inputs, BaseModel) else inputs
    try:
        return model.model_validate(data), []
    except ValidationError as exc:
        return None, issues_from_error(model, exc)


def _run(
    calculator_type: str,
    model: Type[BaseModel],
    result_model: Type[BaseModel],
    compute: Callable[[Any, Dict[str, Any]], BaseModel],
    inputs,
    tables: Optional[Dict[str, Any]],
) -> CalculationOutcome:
    outcome_type = CalculationOutcome[result_model]
    parsed, issues = _validate(model, inputs)
    if issues:
        logger.warning(
            "Rejected %s calculation: %s",
            calculator_type,
            ", ".join(f"{i.field} ({i.code})" for i in issues),
        )
        return outcome_type(calculator=calculator_type, ok=False, errors=issues)
    result = compute(parsed, resolve_tables(tables))
    logger.debug("Computed %s calculation for %s", calculator_type, parsed)
    return outcome_type(
        calculator=calculator_type,
        ok=True,
        result=result,
        advisories=evaluate_rules(calculator_type, result),
    )


def calculate_conventional(inputs, tables=None) -> CalculationOutcome:
    """Conventional purchase: P&I, PMI under 20% down, and escrow."""
    return _run("conventional", ConventionalInputs, ConventionalResult, conventional_breakdown, inputs, tables)


def calculate_va(inputs, tables=None) -> CalculationOutcome:
    """VA purchase with the funding fee financed and no PMI."""
    return _run("va", VAInputs, VAResult, va_breakdown, inputs, tables)


def calculate_fha(inputs, tables=None) -> CalculationOutcome:
    """FHA purchase with financed upfront MIP plus monthly MIP."""
    return _run("fha", FHAInputs, FHAResult, fha_breakdown, inputs, tables)


def calculate_refinance(inputs, tables=None) -> CalculationOutcome:
    """Compare a new loan against the current payment, including break-even."""
    return _run("refinance", RefinanceInputs, RefinanceResult, refinance_breakdown, inputs, tables)


def calculate_affordability(inputs, tables=None) -> CalculationOutcome:
    """Maximum home price supported by income, debts and DTI caps."""
    return _run("affordability", AffordabilityInputs, AffordabilityResult, affordability_breakdown, inputs, tables)


CALCULATORS: Dict[str, Tuple[Type[BaseModel], Callable[..., CalculationOutcome]]] = {
    "conventional": (ConventionalInputs, calculate_conventional),
    "va": (VAInputs, calculate_va),
    "fha": (FHAInputs, calculate_fha),
    "refinance": (RefinanceInputs, calculate_refinance),
    "affordability": (AffordabilityInputs, calculate_affordability),
}


def run_calculator(calculator_type: str, payload: Optional[Mapping[str, Any]], tables=None) -> CalculationOutcome:
    """Dispatch a raw form submission to the calculator named by ``calculator_type``.

    This is the entry point for the REST endpoint and the calculator page:
    values are sanitized, validated and calculated, and the outcome serializes
    to the widget's JSON with ``model_dump(by_alias=True)``.
    """

    key = str(calculator_type or "").strip().lower()
    entry = CALCULATORS.get(key)
    if entry is None:
        logger.warning("Unknown calculator type %r", calculator_type)
        return CalculationOutcome(
            calculator=key,
            ok=False,
            errors=[
                InputIssue(
                    field="calculatorType",
                    code="unknown_calculator",
                    message=f"Unknown calculator type: {calculator_type}",
                )
            ],
        )
    _, calculate = entry
    return calculate(sanitize_payload(payload or {}), tables=tables)


def amortization_schedule(principal, annual_rate_pct, term_years) -> pd.DataFrame:
    """Month-by-month amortization aggregated by year.

    The final payment absorbs floating point drift so the last ``EndingBalance``
    is exactly zero.
    """

    n = int(nz(term_years) * 12)
    if n <= 0:
        raise ValueError("term_years must be positive")
    balance = nz(principal)
    if balance < 0:
        raise ValueError("principal cannot be negative")
    payment = monthly_payment(balance, annual_rate_pct, term_years)
    r = nz(annual_rate_pct) / 100 / 12

    rows = []
    interest_ytd = 0.0
    principal_ytd = 0.0
    for month in range(1, n + 1):
        interest = balance * r
        paid = payment - interest
        if month == n or paid > balance:
            paid = balance
        balance -= paid
        interest_ytd += interest
        principal_ytd += paid
        if month % 12 == 0 or month == n:
            rows.append(
                {
                    "Year": (month + 11) // 12,
                    "Interest": interest_ytd,
                    "Principal": principal_ytd,
                    "EndingBalance": balance,
                }
            )
            interest_ytd = 0.0
            principal_ytd = 0.0
    return pd.DataFrame(rows, columns=["Year", "Interest", "Principal", "EndingBalance"])


def compare_programs(
    home_price,
    down_payment,
    interest_rate,
    loan_term,
    property_tax=0.0,
    insurance=0.0,
    hoa=0.0,
    funding_fee_percent=None,
    tables=None,
) -> pd.DataFrame:
    """Side-by-side monthly cost of Conventional, FHA and VA for one purchase.

    Programs whose inputs do not validate are left out of the table.
    """

    base = {
        "home_price": home_price,
        "down_payment": down_payment,
        "interest_rate": interest_rate,
        "loan_term": loan_term,
        "property_tax": property_tax,
        "insurance": insurance,
        "hoa": hoa,
    }
    va_inputs = dict(base)
    if funding_fee_percent is not None:
        va_inputs["funding_fee_percent"] = funding_fee_percent

    rows = []
    for program, outcome in (
        ("Conventional", calculate_conventional(base, tables)),
        ("FHA", calculate_fha(base, tables)),
        ("VA", calculate_va(va_inputs, tables)),
    ):
        if not outcome.ok:
            continue
        res = outcome.result
        if program == "Conventional":
            insurance_monthly, upfront = res.pmi, 0.0
        elif program == "FHA":
            insurance_monthly, upfront = res.monthly_mip, res.upfront_mip
        else:
            insurance_monthly, upfront = 0.0, res.funding_fee
        rows.append(
            {
                "Program": program,
                "LoanAmount": res.loan_amount,
                "MonthlyPayment": res.monthly_payment,
                "PrincipalAndInterest": res.principal_and_interest,
                "MortgageInsurance": insurance_monthly,
                "UpfrontFee": upfront,
                "TotalInterest": res.total_interest,
            }
        )
    return pd.DataFrame(
        rows,
        columns=[
            "Program",
            "LoanAmount",
            "MonthlyPayment",
            "PrincipalAndInterest",
            "MortgageInsurance",
            "UpfrontFee",
            "TotalInterest",
        ],
    )
