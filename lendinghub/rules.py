from __future__ import annotations
from typing import Literal, List, Dict, Any, Optional
from pydantic import BaseModel, Field


class RuleResult(BaseModel):
    code: str
    severity: Literal["info", "warn", "critical"]
    message: str
    context: Dict[str, Any] = Field(default_factory=dict)


def _purchase_rules(result, res: List[RuleResult]) -> None:
    pmi = float(getattr(result, "pmi", 0.0))
    if pmi > 0:
        res.append(
            RuleResult(
                code="PMI_REQUIRED",
                severity="info",
                message="Down payment is under 20%; private mortgage insurance applies.",
                context={
                    "monthly_pmi": pmi,
                    "down_payment_percent": float(result.down_payment_percent),
                },
            )
        )


def _va_rules(result, res: List[RuleResult]) -> None:
    if result.funding_fee > 0:
        res.append(
            RuleResult(
                code="VA_FUNDING_FEE_FINANCED",
                severity="info",
                message="VA funding fee is financed into the loan amount.",
                context={"funding_fee": result.funding_fee, "funding_fee_percent": result.funding_fee_percent},
            )
        )


def _fha_rules(result, res: List[RuleResult]) -> None:
    res.append(
        RuleResult(
            code="FHA_MIP_FINANCED",
            severity="info",
            message="Upfront MIP is financed; monthly MIP is charged on the base loan.",
            context={"upfront_mip": result.upfront_mip, "monthly_mip": result.monthly_mip},
        )
    )


def _refinance_rules(result, res: List[RuleResult]) -> None:
    if result.monthly_savings < 0:
        res.append(
            RuleResult(
                code="PAYMENT_INCREASE",
                severity="warn",
                message="The new payment is higher than the current payment.",
                context={"monthly_increase": -result.monthly_savings},
            )
        )
    if not result.breaks_even:
        res.append(
            RuleResult(
                code="NO_BREAK_EVEN",
                severity="warn",
                message="Monthly savings are zero; closing costs are never recovered.",
            )
        )
    elif result.break_even_months and result.break_even_months > result.number_of_payments:
        res.append(
            RuleResult(
                code="BREAK_EVEN_AFTER_TERM",
                severity="warn",
                message="Closing costs are not recovered within the new loan term.",
                context={
                    "break_even_months": result.break_even_months,
                    "term_months": result.number_of_payments,
                },
            )
        )
    if result.ltv_ratio > 80:
        res.append(
            RuleResult(
                code="HIGH_LTV",
                severity="warn",
                message="Loan-to-value above 80% may require mortgage insurance.",
                context={"ltv_ratio": result.ltv_ratio},
            )
        )


def _affordability_rules(result, res: List[RuleResult]) -> None:
    if result.available_for_pi <= 0:
        res.append(
            RuleResult(
                code="NO_HOUSING_BUDGET",
                severity="critical",
                message="Debts and escrow leave nothing for principal and interest.",
                context={"available_for_housing": result.available_for_housing},
            )
        )
    if result.estimated_pmi > 0:
        res.append(
            RuleResult(
                code="PMI_REQUIRED",
                severity="info",
                message="Down payment is under 20% of the maximum price; PMI is estimated.",
                context={"estimated_pmi": result.estimated_pmi},
            )
        )
    if result.available_for_housing < result.max_monthly_payment:
        res.append(
            RuleResult(
                code="DEBT_LIMITED",
                severity="info",
                message="Existing monthly debts limit the housing budget below the front-end cap.",
                context={
                    "front_end_cap": result.max_monthly_payment,
                    "available_for_housing": result.available_for_housing,
                },
            )
        )


_RULES = {
    "conventional": _purchase_rules,
    "va": _va_rules,
    "fha": _fha_rules,
    "refinance": _refinance_rules,
    "affordability": _affordability_rules,
}


def evaluate_rules(calculator_type: str, result: Optional[BaseModel]) -> List[RuleResult]:
    res: List[RuleResult] = []
    check = _RULES.get(calculator_type)
    if check is None or result is None:
        return res
    check(result, res)
    return res


def has_blocking(res: List[RuleResult]) -> bool:
    return any(r.severity == "critical" for r in res)
