import streamlit as st

from lendinghub.calculators import amortization_schedule, compare_programs, run_calculator
from lendinghub.i18n import available_languages, t
from lendinghub.pdf_export import build_estimate_pdf
from lendinghub.presets import DISCLAIMER
from lendinghub.rules import has_blocking
from lendinghub.summary import result_rows

# (wire name, label, default, step) using the widget's starting values.
FORM_FIELDS = {
    "conventional": [
        ("homePrice", "Home Price", 300000.0, 1000.0),
        ("downPayment", "Down Payment", 60000.0, 1000.0),
        ("interestRate", "Interest Rate (%)", 6.5, 0.125),
        ("loanTerm", "Loan Term (years)", 30, 1),
        ("propertyTax", "Property Tax (annual)", 3600.0, 100.0),
        ("insurance", "Insurance (annual)", 1200.0, 50.0),
        ("hoa", "HOA (annual)", 0.0, 50.0),
    ],
    "va": [
        ("homePrice", "Home Price", 300000.0, 1000.0),
        ("downPayment", "Down Payment", 0.0, 1000.0),
        ("interestRate", "Interest Rate (%)", 6.25, 0.125),
        ("loanTerm", "Loan Term (years)", 30, 1),
        ("fundingFeePercent", "Funding Fee (%)", 2.3, 0.05),
        ("propertyTax", "Property Tax (annual)", 3600.0, 100.0),
        ("insurance", "Insurance (annual)", 1200.0, 50.0),
        ("hoa", "HOA (annual)", 0.0, 50.0),
    ],
    "fha": [
        ("homePrice", "Home Price", 300000.0, 1000.0),
        ("downPayment", "Down Payment", 10500.0, 500.0),
        ("interestRate", "Interest Rate (%)", 6.5, 0.125),
        ("loanTerm", "Loan Term (years)", 30, 1),
        ("propertyTax", "Property Tax (annual)", 3600.0, 100.0),
        ("insurance", "Insurance (annual)", 1200.0, 50.0),
        ("hoa", "HOA (annual)", 0.0, 50.0),
    ],
    "refinance": [
        ("currentLoanBalance", "Current Loan Balance", 250000.0, 1000.0),
        ("homeValue", "Home Value", 300000.0, 1000.0),
        ("currentInterestRate", "Current Interest Rate (%)", 7.5, 0.125),
        ("currentPayment", "Current Monthly Payment", 1748.0, 10.0),
        ("newInterestRate", "New Interest Rate (%)", 6.25, 0.125),
        ("newLoanTerm", "New Loan Term (years)", 30, 1),
        ("closingCosts", "Closing Costs", 5000.0, 250.0),
    ],
    "affordability": [
        ("annualIncome", "Annual Income", 75000.0, 1000.0),
        ("monthlyDebts", "Monthly Debts", 500.0, 50.0),
        ("downPayment", "Down Payment", 30000.0, 1000.0),
        ("interestRate", "Interest Rate (%)", 6.5, 0.125),
        ("loanTerm", "Loan Term (years)", 30, 1),
        ("propertyTax", "Property Tax (annual)", 2400.0, 100.0),
        ("insurance", "Insurance (annual)", 1200.0, 50.0),
        ("hoa", "HOA (annual)", 0.0, 50.0),
    ],
}

TABS = [
    ("conventional", "Conventional"),
    ("va", "VA Loan"),
    ("fha", "FHA Loan"),
    ("refinance", "Refinance"),
    ("affordability", "Affordability"),
]

_PURCHASE = {"conventional", "va", "fha"}


def _lang() -> str:
    return st.session_state.get("ui_prefs", {}).get("language", "en")


def render_calculator(calculator_type: str, tables=None):
    """Render one calculator form with its results, advisories and export."""
    lang = _lang()
    payload = {}
    cols = st.columns(2)
    for i, (name, label, default, step) in enumerate(FORM_FIELDS[calculator_type]):
        payload[name] = cols[i % 2].number_input(
            t(label, lang), value=default, step=step, key=f"{calculator_type}_{name}"
        )

    outcome = run_calculator(calculator_type, payload, tables)
    st.session_state[f"{calculator_type}_outcome"] = outcome.model_dump(by_alias=True)
    if not outcome.ok:
        for issue in outcome.errors:
            st.error(f"{issue.field}: {issue.message}")
        return outcome

    for label, value in result_rows(calculator_type, outcome.result, lang):
        st.caption(f"{label}: {value}")
    for advisory in outcome.advisories:
        if advisory.severity == "critical":
            st.error(advisory.message)
        elif advisory.severity == "warn":
            st.warning(advisory.message)
        else:
            st.info(advisory.message)

    if calculator_type in _PURCHASE:
        with st.expander(t("Amortization Schedule", lang)):
            schedule = amortization_schedule(
                outcome.result.loan_amount, payload["interestRate"], payload["loanTerm"]
            )
            st.dataframe(schedule, hide_index=True)

    if not has_blocking(outcome.advisories):
        st.download_button(
            t("Download Estimate (PDF)", lang),
            data=build_estimate_pdf(outcome, st.session_state.get("branding", {}), lang=lang),
            file_name=f"{calculator_type}-estimate.pdf",
            mime="application/pdf",
            key=f"{calculator_type}_pdf",
        )
    return outcome


def render_compare(tables=None):
    """Conventional, FHA and VA side by side for a single purchase."""
    lang = _lang()
    cols = st.columns(2)
    price = cols[0].number_input(t("Home Price", lang), value=300000.0, step=1000.0, key="cmp_homePrice")
    down = cols[1].number_input(t("Down Payment", lang), value=15000.0, step=1000.0, key="cmp_downPayment")
    rate = cols[0].number_input(t("Interest Rate (%)", lang), value=6.5, step=0.125, key="cmp_interestRate")
    term = cols[1].number_input(t("Loan Term (years)", lang), value=30, step=1, key="cmp_loanTerm")
    tax = cols[0].number_input(t("Property Tax (annual)", lang), value=3600.0, step=100.0, key="cmp_propertyTax")
    ins = cols[1].number_input(t("Insurance (annual)", lang), value=1200.0, step=50.0, key="cmp_insurance")
    table = compare_programs(price, down, rate, term, tax, ins, tables=tables)
    st.session_state["compare_table"] = table.to_dict(orient="records")
    st.dataframe(table, hide_index=True)
    return table


def render_sidebar():
    prefs = st.session_state.setdefault("ui_prefs", {"language": "en"})
    languages = available_languages()
    current = prefs.get("language", "en")
    prefs["language"] = st.sidebar.selectbox(
        "Language", languages, index=languages.index(current) if current in languages else 0
    )
    branding = st.session_state.setdefault("branding", {})
    branding["loan_officer"] = st.sidebar.text_input("Loan Officer", value=branding.get("loan_officer", ""))
    branding["nmls"] = st.sidebar.text_input("NMLS #", value=branding.get("nmls", ""))
    branding["agent"] = st.sidebar.text_input("Real Estate Agent", value=branding.get("agent", ""))
    branding["contact"] = st.sidebar.text_input("Contact", value=branding.get("contact", ""))


def main(tables=None):
    st.set_page_config(page_title="Mortgage Calculator", layout="wide")
    render_sidebar()
    lang = _lang()
    st.title(t("Mortgage Calculator", lang))
    tabs = st.tabs([t(label, lang) for _, label in TABS] + [t("Compare", lang)])
    for tab, (calculator_type, _) in zip(tabs, TABS):
        with tab:
            render_calculator(calculator_type, tables)
    with tabs[-1]:
        render_compare(tables)
    st.caption(DISCLAIMER)
