"""Hotel Supplements: Streamlit editor for mealplan supplement values.

Run with:
    streamlit run streamlit_app/app.py

Hosts the resolution session: the orchestrator state lives in
st.session_state and every button press dispatches one action.
"""

from __future__ import annotations

from datetime import date, timedelta

import streamlit as st

from supplement_engine import config
from supplement_engine.conflict_resolution.resolver import OverlapResolver
from supplement_engine.describe import describe_conflict
from supplement_engine.editor import SupplementDraft, SupplementEditor, validate_draft
from supplement_engine.exceptions import InvalidRangeError, SupplementValidationError
from supplement_engine.models.booking import Booking
from supplement_engine.models.enums import ChargeType, DayOfWeek, SessionStatus, SupplementType
from supplement_engine.models.session import (
    AcceptAll,
    AssignPriority,
    Cancel,
    Finalize,
    SelectConflict,
)
from supplement_engine.models.supplement import MealInclusion
from supplement_engine.orchestrator import ResolutionOrchestrator
from supplement_engine.pricing import quote_stay, quote_totals
from supplement_engine.serialization.store import JsonSupplementStore

from helpers import (
    CHARGE_TYPE_LABELS,
    RATE_PLANS,
    ROOM_TYPES,
    STORE_PATH,
    SUPPLEMENT_TYPES,
    action_label,
    build_value,
    currency_index,
    default_date_range,
    short_id,
    value_row,
)

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------

st.set_page_config(page_title="Hotel Supplements", page_icon="🍽️", layout="wide")


@st.cache_resource
def get_editor() -> SupplementEditor:
    orchestrator = ResolutionOrchestrator(resolver=OverlapResolver(ROOM_TYPES, RATE_PLANS))
    return SupplementEditor(JsonSupplementStore(STORE_PATH), orchestrator)


editor = get_editor()
st.session_state.setdefault("values", [])
st.session_state.setdefault("date_ranges", [])
st.session_state.setdefault("session", None)


def _draft() -> SupplementDraft:
    supplement_type = st.session_state.get("supplement_type", SupplementType.MEALPLAN)
    meals = None
    if supplement_type == SupplementType.MEALPLAN:
        meals = MealInclusion(
            breakfast=st.session_state.get("meal_breakfast", False),
            lunch=st.session_state.get("meal_lunch", False),
            dinner=st.session_state.get("meal_dinner", False),
        )
    return SupplementDraft(
        name=st.session_state.get("supplement_name", ""),
        description=st.session_state.get("supplement_description", ""),
        type=supplement_type,
        code=st.session_state.get("supplement_code") or None,
        meal_included=meals,
        values=tuple(st.session_state["values"]),
    )


def _finish_save(values) -> None:
    supplement = editor.persist(_draft(), values)
    st.session_state["values"] = []
    st.session_state["session"] = None
    st.success(f"Saved {supplement.name} with {len(supplement.values)} value(s).")


# ---------------------------------------------------------------------------
# Sidebar: supplement header
# ---------------------------------------------------------------------------

st.sidebar.title("Supplement")
supplement_type = st.sidebar.selectbox(
    "Supplement type",
    list(SUPPLEMENT_TYPES),
    format_func=SUPPLEMENT_TYPES.get,
    key="supplement_type",
)
st.sidebar.text_input("Name *", key="supplement_name")
st.sidebar.text_input("Code", key="supplement_code")
st.sidebar.text_area("Description", key="supplement_description")
if supplement_type == SupplementType.MEALPLAN:
    st.sidebar.markdown("**Meals included**")
    st.sidebar.checkbox("Breakfast", key="meal_breakfast")
    st.sidebar.checkbox("Lunch", key="meal_lunch")
    st.sidebar.checkbox("Dinner", key="meal_dinner")

tab_edit, tab_saved = st.tabs(["Configure", "Saved supplements"])

# ---------------------------------------------------------------------------
# Resolution session
# ---------------------------------------------------------------------------


def _render_session() -> None:
    state = st.session_state["session"]
    orchestrator = editor.orchestrator

    if state.notice is not None:
        st.warning(state.notice.message)

    if state.status == SessionStatus.CANCELLED:
        st.session_state["session"] = None
        st.info("Conflict resolution cancelled; nothing was saved.")
        return
    if state.status == SessionStatus.RESOLVED:
        _finish_save(state.values)
        return
    if state.current_conflict is None:
        st.session_state["session"] = orchestrator.dispatch(state, Finalize())
        st.rerun()

    st.subheader(f"Conflicts detected ({len(state.conflicts)})")
    labels = [describe_conflict(c, i) for i, c in enumerate(state.conflicts)]
    picked = st.radio(
        "Conflicts", range(len(labels)), format_func=labels.__getitem__,
        index=state.current_index, key=f"pick_{len(state.steps)}",
    )
    if picked != state.current_index:
        st.session_state["session"] = orchestrator.dispatch(state, SelectConflict(picked))
        st.rerun()

    conflict = state.current_conflict
    pair = [v for v in state.values if conflict.involves(v.id)]
    st.dataframe([value_row(v) for v in pair], use_container_width=True)

    st.markdown("**Resolve by narrowing a scope**")
    for i, action in enumerate(orchestrator.available_actions(state)):
        if st.button(action_label(action), key=f"act_{len(state.steps)}_{i}"):
            st.session_state["session"] = orchestrator.dispatch(state, action)
            st.rerun()

    st.markdown("**…or give them explicit priorities** (higher wins)")
    cols = st.columns(len(pair))
    priorities = []
    for col, value in zip(cols, pair):
        with col:
            p = st.number_input(
                f"Priority of {short_id(value.id)}", 1, 99, int(value.priority or 1),
                key=f"prio_{len(state.steps)}_{value.id}",
            )
            priorities.append((value.id, int(p)))
    if st.button("Assign priorities"):
        st.session_state["session"] = orchestrator.dispatch(
            state, AssignPriority(priorities=tuple(priorities))
        )
        st.rerun()

    c1, c2, c3 = st.columns(3)
    if c1.button("Save"):
        st.session_state["session"] = orchestrator.dispatch(state, Finalize())
        st.rerun()
    if c2.button("Accept remaining conflicts"):
        st.session_state["session"] = orchestrator.dispatch(state, AcceptAll())
        st.rerun()
    if c3.button("Cancel"):
        st.session_state["session"] = orchestrator.dispatch(state, Cancel())
        st.rerun()


# ---------------------------------------------------------------------------
# Configure tab
# ---------------------------------------------------------------------------

with tab_edit:
    if st.session_state["session"] is not None:
        _render_session()
    else:
        st.subheader("Add mealplan value")
        col_a, col_b, col_c = st.columns(3)
        amount = col_a.number_input("Amount", 0.0, 10000.0, 0.0, step=0.5)
        currency = col_b.selectbox(
            "Currency",
            config.SUPPORTED_CURRENCIES,
            index=currency_index(config.DEFAULT_CURRENCY),
        )
        charge_type = col_c.selectbox(
            "Charge type", list(ChargeType), format_func=CHARGE_TYPE_LABELS.get,
        )

        with st.expander("Date ranges (none = all dates)", expanded=True):
            picked = st.date_input("Range", value=default_date_range())
            if st.button("Add range") and isinstance(picked, tuple) and len(picked) == 2:
                st.session_state["date_ranges"].append(picked)
            for start, end in st.session_state["date_ranges"]:
                st.markdown(f"- {start:%b %d, %Y} - {end:%b %d, %Y}")
            if st.session_state["date_ranges"] and st.button("Clear ranges"):
                st.session_state["date_ranges"] = []

        room_ids = st.multiselect(
            "Room types", [r.id for r in ROOM_TYPES],
            default=[r.id for r in ROOM_TYPES],
            format_func=lambda rid: next(r.name for r in ROOM_TYPES if r.id == rid),
        )
        plan_ids = st.multiselect(
            "Rate plans", [p.id for p in RATE_PLANS],
            default=[p.id for p in RATE_PLANS],
            format_func=lambda pid: next(p.name for p in RATE_PLANS if p.id == pid),
        )
        days = st.multiselect("Days of week (none = all)", [d.name.lower() for d in DayOfWeek])
        col_l, col_m = st.columns(2)
        lead_time = col_l.number_input("Lead time (days)", 0, 365, 0)
        min_stay = col_m.number_input("Minimum stay (nights)", 0, 60, 0)

        form: dict = {
            "amount": amount,
            "currency": currency,
            "charge_type": charge_type.value,
            "date_ranges": list(st.session_state["date_ranges"]),
            "room_type_ids": room_ids,
            "rate_plan_ids": plan_ids,
            "days_of_week": days,
            "lead_time": int(lead_time),
            "min_stay": int(min_stay),
        }
        if charge_type == ChargeType.PER_ROOM:
            form["extra_adult_amount"] = st.number_input("Extra adult", 0.0, 1000.0, 0.0)
            form["extra_child_amount"] = st.number_input("Extra child", 0.0, 1000.0, 0.0)
        elif charge_type == ChargeType.PER_ADULT_CHILD:
            form["child_amount"] = st.number_input("Child amount", 0.0, 1000.0, 0.0)
            form["infant_amount"] = st.number_input("Infant amount", 0.0, 1000.0, 0.0)
        else:
            form["occupancy_pricing"] = {
                n: st.number_input(f"{n} occupant(s)", 0.0, 5000.0, amount * n, key=f"occ_{n}")
                for n in range(1, 5)
            }

        if st.button("Add value", disabled=amount <= 0):
            try:
                st.session_state["values"].append(build_value(form))
                st.session_state["date_ranges"] = []
                st.rerun()
            except InvalidRangeError as exc:
                st.error(str(exc))

        values = st.session_state["values"]
        if values:
            st.subheader("Mealplan values")
            st.dataframe([value_row(v) for v in values], use_container_width=True)
            remove = st.selectbox("Remove value", ["-"] + [short_id(v.id) for v in values])
            if remove != "-" and st.button("Remove"):
                st.session_state["values"] = [v for v in values if short_id(v.id) != remove]
                st.rerun()

        if st.button("Save mealplan", type="primary"):
            try:
                draft = _draft()
                validate_draft(draft)
                state = editor.orchestrator.start(draft.values)
                if state.status == SessionStatus.IDLE:
                    _finish_save(state.values)
                else:
                    st.session_state["session"] = state
                    st.rerun()
            except SupplementValidationError as exc:
                st.error(str(exc))

# ---------------------------------------------------------------------------
# Saved supplements tab
# ---------------------------------------------------------------------------

with tab_saved:
    store = editor.repository
    saved = store.load_all()
    if not saved:
        st.info("No supplements saved yet.")
    for supplement in saved:
        with st.expander(
            f"{supplement.name} [{SUPPLEMENT_TYPES[supplement.type]}] ({len(supplement.values)} values)"
        ):
            st.caption(supplement.description)
            st.dataframe([value_row(v) for v in supplement.values], use_container_width=True)

            st.markdown("**Quote a stay**")
            q1, q2, q3, q4 = st.columns(4)
            check_in = q1.date_input("Check-in", date.today() + timedelta(days=30), key=f"ci_{supplement.id}")
            nights = q2.number_input("Nights", 1, 60, 3, key=f"n_{supplement.id}")
            room = q3.selectbox(
                "Room", [r.id for r in ROOM_TYPES], key=f"r_{supplement.id}",
                format_func=lambda rid: next(r.name for r in ROOM_TYPES if r.id == rid),
            )
            plan = q4.selectbox(
                "Rate plan", [p.id for p in RATE_PLANS], key=f"p_{supplement.id}",
                format_func=lambda pid: next(p.name for p in RATE_PLANS if p.id == pid),
            )
            booking = Booking(
                check_in=check_in, nights=int(nights), room_type_id=room,
                rate_plan_id=plan, booked_on=date.today(),
            )
            quote = quote_stay(supplement.values, booking)
            st.dataframe(quote, use_container_width=True)
            for cur, total in quote_totals(quote).items():
                st.markdown(f"**Total:** {total:.2f} {cur}")

    if saved and st.button("Clear all"):
        store.clear()
        st.rerun()
