import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import logging
from datetime import date, datetime

import numpy as np
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from cashcat.aggregate import STATUS_LIMIT, STATUS_OVER, STATUS_WARNING, aggregate
from cashcat.config import BUDGET_COLORS, LOG_LEVEL, SEED_PATH
from cashcat.domain import PaymentMethod
from cashcat.events import INCOME_ALERT, PURCHASE_ADDED, event_bus
from cashcat.filters import ALL, MONTH, TODAY, WEEK, FilterCriteria, by_budget, filter_purchases, iter_purchases
from cashcat.formatting import budget_type_text, format_currency, format_percent, period_label, progress_color
from cashcat.functional import safe_budget
from cashcat.resolver import FIXED, HYBRID, PERCENTAGE, resolve_ceiling, total_budgeted
from cashcat.services import default_service
from cashcat.theme import THEME_STYLES, Theme, ThemeStyle, load_theme, save_theme, style_for
from cashcat.transforms import (
    add_budget,
    add_purchase,
    load_seed,
    purchases_to_frame,
    remove_budget,
    remove_purchase,
    spent_frame,
    update_budget,
    update_profile,
)
from cashcat.validation import (
    validate_budget_create,
    validate_budget_edit,
    validate_profile,
    validate_purchase,
)

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(name)s %(levelname)s %(message)s")

st.set_page_config(page_title="CashCat", layout="wide")

if "profile" not in st.session_state:
    profile, budgets, purchases = load_seed(SEED_PATH, today=date.today())
    st.session_state.profile = profile
    st.session_state.budgets = budgets
    st.session_state.purchases = purchases
if "theme" not in st.session_state:
    st.session_state.theme = load_theme()

METHOD_ICONS = {PaymentMethod.BANK: "🏦", PaymentMethod.CREDIT: "💳", PaymentMethod.CASH: "💵"}
WINDOW_LABELS = {ALL: "All time", TODAY: "Today", WEEK: "Last 7 days", MONTH: "Last 30 days"}


def show_errors(errors) -> None:
    for e in errors:
        st.error(e.reason)


def apply_theme(style: ThemeStyle) -> None:
    st.markdown(
        f"""<style>
        .stApp {{ background-color: {style.background}; color: {style.text_primary}; }}
        .stProgress > div > div > div > div {{ background-color: {style.accent}; }}
        </style>""",
        unsafe_allow_html=True,
    )


def render_budget_card(budget, usage, style: ThemeStyle) -> None:
    with st.container(border=True):
        st.markdown(f"<span style='color:{budget.color}'>●</span> **{budget.name}**", unsafe_allow_html=True)
        st.caption(budget_type_text(budget))
        st.progress(float(np.clip(float(usage.progress) / 100, 0.0, 1.0)))
        c1, c2, c3 = st.columns(3)
        c1.metric("Spent", format_currency(usage.spent))
        c2.metric("Budget", format_currency(usage.ceiling))
        c3.metric("Remaining", format_currency(usage.remaining))
        st.markdown(
            f"<span style='color:{style.text_secondary}'>{format_percent(usage.percent_used)} used</span> "
            f"<span style='color:{progress_color(usage.status)}'>●</span>",
            unsafe_allow_html=True,
        )
        if usage.status == STATUS_OVER:
            st.error(f"Over budget by {format_currency(-usage.remaining)}")
        elif usage.status == STATUS_LIMIT:
            st.warning("Budget limit reached")
        elif usage.status == STATUS_WARNING:
            st.warning("Approaching budget limit")


def render_dashboard(style: ThemeStyle) -> None:
    profile = st.session_state.profile
    budgets = st.session_state.budgets
    report = default_service().period_report(profile, budgets, st.session_state.purchases, datetime.now())
    result = report["result"]
    totals = result["totals"]

    name = profile.display_name or profile.email
    st.title(f"🐱 Welcome back, {name}")
    st.caption(f"Tracking period: {period_label(result['period'])}")

    for entry in report["validation"]:
        for msg in entry["messages"]:
            st.warning(msg)

    k1, k2, k3, k4 = st.columns(4)
    k1.metric("Monthly Income", format_currency(profile.monthly_income))
    k2.metric("Total Budgeted", format_currency(result["total_budgeted"]))
    k3.metric("Total Spent", format_currency(totals.total_spent))
    k4.metric("Left This Month", format_currency(result["left_this_month"]))

    m1, m2, m3 = st.columns(3)
    for col, method in zip((m1, m2, m3), PaymentMethod):
        col.metric(f"{METHOD_ICONS[method]} {method.value.title()}", format_currency(totals.per_method_totals[method]))

    if not budgets:
        st.info("No budgets yet. Create one from the Budgets page.")
        return

    cols = st.columns(3)
    for i, budget in enumerate(budgets):
        with cols[i % 3]:
            render_budget_card(budget, result["usage"][budget.id], style)

    df_spent = spent_frame(totals.per_budget_spent, budgets)
    fig = px.bar(df_spent, x="budget", y="spent", title="Spent per budget", template=style.plotly_template)
    fig.add_trace(go.Scatter(
        x=[b.name for b in budgets],
        y=[float(result["ceilings"][b.id]) for b in budgets],
        mode="markers",
        name="Ceiling",
    ))
    st.plotly_chart(fig, use_container_width=True)


def render_purchases(style: ThemeStyle) -> None:
    budgets = st.session_state.budgets
    st.title("🧾 Purchases")
    if not budgets:
        st.info("Create a budget before logging purchases.")
        return

    names = {b.id: b.name for b in budgets}
    budget_id = st.selectbox("Budget", list(names), format_func=names.get)
    budget = safe_budget(budgets, budget_id).get_or_else(None)
    if budget is None:
        st.error("Budget not found")
        return
    mine = tuple(iter_purchases(st.session_state.purchases, by_budget(budget.id)))

    c1, c2, c3 = st.columns(3)
    text = c1.text_input("Search purchases")
    method = c2.selectbox("Payment method", [ALL] + [m.value for m in PaymentMethod])
    window = c3.selectbox("Date", list(WINDOW_LABELS), format_func=WINDOW_LABELS.get)
    shown = filter_purchases(mine, FilterCriteria(text=text, method=method, window=window))

    st.caption(f"{len(mine)} purchases · {format_currency(aggregate(mine).total_spent)} total")
    if shown:
        df = purchases_to_frame(shown, budgets)
        df["date"] = df["date"].dt.strftime("%b %d, %Y")
        st.dataframe(df, use_container_width=True, hide_index=True)
        by_method = df.groupby("method")["amount"].sum().reset_index()
        st.plotly_chart(
            px.pie(by_method, values="amount", names="method", template=style.plotly_template),
            use_container_width=True,
        )
        to_delete = st.selectbox(
            "Delete purchase", [""] + [p.id for p in shown],
            format_func=lambda pid: next((p.description for p in shown if p.id == pid), "-"),
        )
        if to_delete and st.button("🗑 Delete"):
            st.session_state.purchases = remove_purchase(st.session_state.purchases, to_delete)
            st.rerun()
    else:
        st.info("No purchases match your filters" if mine else "No purchases yet")

    st.subheader("➕ Add Purchase")
    with st.form("add_purchase", clear_on_submit=True):
        amount = st.text_input("Amount")
        description = st.text_input("Description")
        method = st.radio("Payment method", [m.value for m in PaymentMethod], horizontal=True)
        day = st.date_input("Date")
        if st.form_submit_button("Add Purchase"):
            outcome = validate_purchase(budget.id, amount, description, method, day)
            if outcome.is_left():
                show_errors(outcome.get_error())
            else:
                draft = outcome.get_or_else(None)
                profile = st.session_state.profile
                spent = aggregate(mine).total_spent
                for res in event_bus.publish(PURCHASE_ADDED, {
                    "budget_name": budget.name,
                    "amount": draft.amount,
                    "spent": spent,
                    "ceiling": resolve_ceiling(budget, profile.monthly_income),
                }):
                    if res.get("alert"):
                        st.warning(res["alert"])
                st.session_state.purchases = add_purchase(st.session_state.purchases, draft)
                st.success("Purchase added")


def render_budgets(style: ThemeStyle) -> None:
    profile = st.session_state.profile
    budgets = st.session_state.budgets
    st.title("💰 Budgets")

    st.subheader("Create Budget")
    with st.form("create_budget", clear_on_submit=True):
        name = st.text_input("Budget name")
        mode = st.radio("Budget type", [FIXED, PERCENTAGE, HYBRID], horizontal=True)
        fixed = st.text_input("Fixed amount")
        percent = st.text_input("Percentage of income")
        color = st.selectbox("Color", BUDGET_COLORS)
        if st.form_submit_button("Create Budget"):
            outcome = validate_budget_create(name, mode, fixed, percent, color)
            if outcome.is_left():
                show_errors(outcome.get_error())
            else:
                new_budgets = add_budget(budgets, outcome.get_or_else(None))
                for res in event_bus.publish(INCOME_ALERT, {
                    "total_budgeted": total_budgeted(new_budgets, profile.monthly_income),
                    "monthly_income": profile.monthly_income,
                }):
                    if res.get("alert"):
                        st.warning(res["alert"])
                st.session_state.budgets = new_budgets
                st.success("Budget created")

    if not budgets:
        return

    st.subheader("Edit Budget")
    names = {b.id: b.name for b in budgets}
    bid = st.selectbox("Budget to edit", list(names), format_func=names.get)
    budget = safe_budget(budgets, bid).get_or_else(None)
    if budget is None:
        return
    with st.form("edit_budget"):
        name = st.text_input("Name", value=budget.name)
        fixed = st.text_input("Fixed amount", value="" if budget.fixed_amount is None else str(budget.fixed_amount))
        percent = st.text_input(
            "Percentage", value="" if budget.percentage_amount is None else str(budget.percentage_amount)
        )
        color = st.selectbox(
            "Color", BUDGET_COLORS,
            index=BUDGET_COLORS.index(budget.color) if budget.color in BUDGET_COLORS else 0,
        )
        if st.form_submit_button("Save"):
            outcome = validate_budget_edit(name, fixed, percent, color)
            if outcome.is_left():
                show_errors(outcome.get_error())
            else:
                st.session_state.budgets = update_budget(budgets, bid, outcome.get_or_else(None))
                st.rerun()
    if st.button(f"🗑 Delete \"{budget.name}\""):
        st.session_state.budgets, st.session_state.purchases = remove_budget(
            budgets, st.session_state.purchases, bid
        )
        st.rerun()


def render_settings(style: ThemeStyle) -> None:
    profile = st.session_state.profile
    st.title("⚙️ Settings")
    with st.form("profile"):
        display_name = st.text_input("Display name", value=profile.display_name or "")
        income = st.text_input("Monthly income", value=str(profile.monthly_income))
        day = st.number_input("Tracking start day", min_value=1, max_value=31, value=profile.tracking_start_day)
        if st.form_submit_button("Save"):
            outcome = validate_profile(income, day, display_name)
            if outcome.is_left():
                show_errors(outcome.get_error())
            else:
                st.session_state.profile = update_profile(profile, outcome.get_or_else(None))
                st.success("Profile updated")

    st.subheader("Theme")
    themes = list(Theme)
    choice = st.radio(
        "Theme", themes,
        index=themes.index(st.session_state.theme),
        format_func=lambda t: f"{THEME_STYLES[t].name}: {THEME_STYLES[t].description}",
    )
    if choice != st.session_state.theme:
        st.session_state.theme = choice
        save_theme(choice)
        st.rerun()


style = style_for(st.session_state.theme)
apply_theme(style)

menu = st.sidebar.radio("Menu", ["🏠 Dashboard", "🧾 Purchases", "💰 Budgets", "⚙️ Settings"])

if menu == "🏠 Dashboard":
    render_dashboard(style)
elif menu == "🧾 Purchases":
    render_purchases(style)
elif menu == "💰 Budgets":
    render_budgets(style)
else:
    render_settings(style)
