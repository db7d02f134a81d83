from __future__ import annotations

from typing import Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from lendinghub.presets import AFFORDABILITY_DEFAULTS
from lendinghub.rules import RuleResult

# Bounds on annual rates (%) and terms (years) accepted from the widget.
MAX_RATE_PCT = 100.0
MAX_TERM_YEARS = 50


class CalcModel(BaseModel):
    """Immutable value object exchanged with the widget as camelCase JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        allow_inf_nan=False,
    )


class PurchaseInputs(CalcModel):
    home_price: float = Field(gt=0)
    down_payment: float = Field(ge=0)
    interest_rate: float = Field(ge=0, le=MAX_RATE_PCT)
    loan_term: int = Field(gt=0, le=MAX_TERM_YEARS)
    # Annual amounts; the calculators spread them over twelve months.
    property_tax: float = Field(0.0, ge=0)
    insurance: float = Field(0.0, ge=0)
    hoa: float = Field(0.0, ge=0)

    @field_validator("down_payment")
    @classmethod
    def _down_payment_within_price(cls, value: float, info: ValidationInfo) -> float:
        price = info.data.get("home_price")
        if price is not None and value > price:
            raise PydanticCustomError(
                "down_payment_exceeds_price",
                "Down payment cannot exceed the home price",
            )
        return value


class ConventionalInputs(PurchaseInputs):
    pass


class FHAInputs(PurchaseInputs):
    pass


class VAInputs(PurchaseInputs):
    down_payment: float = Field(0.0, ge=0)
    # ``None`` uses the funding fee from the VA program table.
    funding_fee_percent: Optional[float] = Field(None, ge=0, le=MAX_RATE_PCT)


class RefinanceInputs(CalcModel):
    current_loan_balance: float = Field(gt=0)
    home_value: float = Field(gt=0)
    new_interest_rate: float = Field(ge=0, le=MAX_RATE_PCT)
    new_loan_term: int = Field(gt=0, le=MAX_TERM_YEARS)
    closing_costs: float = Field(0.0, ge=0)
    current_interest_rate: Optional[float] = Field(None, ge=0, le=MAX_RATE_PCT)
    current_payment: float = Field(ge=0)


class AffordabilityInputs(CalcModel):
    annual_income: float = Field(gt=0)
    monthly_debts: float = Field(0.0, ge=0)
    down_payment: float = Field(0.0, ge=0)
    interest_rate: float = Field(ge=0, le=MAX_RATE_PCT)
    loan_term: int = Field(gt=0, le=MAX_TERM_YEARS)
    property_tax: float = Field(AFFORDABILITY_DEFAULTS["property_tax"], ge=0)
    insurance: float = Field(AFFORDABILITY_DEFAULTS["insurance"], ge=0)
    hoa: float = Field(AFFORDABILITY_DEFAULTS["hoa"], ge=0)


class ConventionalResult(CalcModel):
    monthly_payment: float
    principal_and_interest: float
    pmi: float
    property_tax: float
    insurance: float
    hoa: float
    loan_amount: float
    down_payment_percent: float
    total_interest: float
    total_paid: float
    number_of_payments: int


class VAResult(CalcModel):
    monthly_payment: float
    principal_and_interest: float
    funding_fee: float
    funding_fee_percent: float
    property_tax: float
    insurance: float
    hoa: float
    loan_amount: float
    total_interest: float
    total_paid: float
    number_of_payments: int


class FHAResult(CalcModel):
    monthly_payment: float
    principal_and_interest: float
    upfront_mip: float = Field(alias="upfrontMIP")
    monthly_mip: float = Field(alias="monthlyMIP")
    base_loan: float
    property_tax: float
    insurance: float
    hoa: float
    loan_amount: float
    total_interest: float
    total_paid: float
    number_of_payments: int


class RefinanceResult(CalcModel):
    new_monthly_payment: float
    monthly_savings: float
    break_even_months: Optional[int]
    breaks_even: bool
    lifetime_savings: float
    total_new_loan_cost: float
    total_current_loan_cost: float
    ltv_ratio: float
    new_loan_amount: float
    total_interest: float
    number_of_payments: int


class AffordabilityResult(CalcModel):
    max_home_price: float
    max_loan_amount: float
    estimated_monthly_payment: float
    down_payment: float
    down_payment_percent: float
    monthly_income: float
    max_monthly_payment: float
    max_total_debt: float
    available_for_housing: float
    available_for_pi: float = Field(alias="availableForPI")
    monthly_taxes: float
    monthly_insurance: float
    monthly_hoa: float = Field(alias="monthlyHOA")
    estimated_pmi: float = Field(alias="estimatedPMI")
    front_end_ratio: float
    back_end_ratio: float


class InputIssue(CalcModel):
    """A field-level validation failure suitable for form display."""

    field: str
    code: str
    message: str


ResultT = TypeVar("ResultT")


class CalculationOutcome(CalcModel, Generic[ResultT]):
    """Tagged result of a calculator run: a result or a list of input issues."""

    calculator: str
    ok: bool
    result: Optional[ResultT] = None
    errors: List[InputIssue] = Field(default_factory=list)
    advisories: List[RuleResult] = Field(default_factory=list)


def issues_from_error(model: Type[BaseModel], exc: ValidationError) -> List[InputIssue]:
    """Convert a pydantic ``ValidationError`` into issues keyed by wire name."""
    issues: List[InputIssue] = []
    for err in exc.errors():
        loc = err.get("loc") or ()
        name = str(loc[0]) if loc else ""
        info = model.model_fields.get(name)
        field = info.alias if info is not None and info.alias else name
        issues.append(InputIssue(field=field, code=err["type"], message=err["msg"]))
    return issues
