# app.py
from typing import List
from urllib.parse import urlencode

import pandas as pd
import streamlit as st

from spin_core.config import (
    DEFAULT_CONFIG,
    PRESETS_PATH,
    configure_logging,
    ensure_assets_exist,
    load_presets_yaml,
    ui_css,
)
from spin_core.constants import MODE_LABELS, MODE_TEAMS, MODE_WEIGHTED, MODES, NEW_ITEM_PERCENT
from spin_core.export_pdf import render_results_pdf
from spin_core.feedback import SHUFFLE, SPIN_START, WIN, NullFeedbackSink
from spin_core.models import Constraint, Item, SelectionResult, WheelConfig
from spin_core.rng import default_source
from spin_core.scheduler import resolve_and_remove
from spin_core.segments import build_segments
from spin_core.share import (
    append_history,
    config_from_query,
    export_json_bytes,
    format_result_text,
    generate_template_csv_bytes,
    load_items_csv,
    result_to_csv_bytes,
    share_url,
)
from spin_core.validation import get_validation_status
from spin_core.weights import distribute_equally, reset_weights, total_percentage


# ---------- Page & Theme ----------
st.set_page_config(page_title="Spin Picker", layout="wide")
st.markdown(ui_css(), unsafe_allow_html=True)

configure_logging()
ensure_assets_exist()

# ---------- Session State ----------
def _init_state():
    ss = st.session_state
    ss.setdefault("config", WheelConfig(**DEFAULT_CONFIG))
    ss.setdefault("presets", load_presets_yaml(PRESETS_PATH))
    ss.setdefault("rand", default_source(ss.config.random_seed))
    ss.setdefault("feedback", NullFeedbackSink())
    ss.setdefault("current_items", None)   # remove-after-pick pool
    ss.setdefault("picks_so_far", 0)
    ss.setdefault("rotation", 0.0)
    ss.setdefault("result", None)
    ss.setdefault("history", [])
    ss.setdefault("next_id", 0)

    # shared link (?mode=...&items=...) seeds the config once
    if not ss.get("query_loaded"):
        ss.query_loaded = True
        qp = urlencode(dict(st.query_params))
        shared = config_from_query(qp) if qp else None
        if shared is not None:
            ss.config = shared

_init_state()


def _new_id() -> str:
    st.session_state.next_id += 1
    return f"item-{st.session_state.next_id}"


def _set_items(items: List[Item]):
    cfg: WheelConfig = st.session_state.config
    st.session_state.config = cfg.model_copy(update={"items": items})
    st.session_state.current_items = None
    st.session_state.picks_so_far = 0


# ---------- Sidebar ----------
with st.sidebar:
    st.header("⚙️ Setup")
    cfg: WheelConfig = st.session_state.config

    mode = st.radio("Mode", MODES, index=MODES.index(cfg.mode), format_func=lambda m: MODE_LABELS[m])
    team_count = cfg.team_count
    select_count = cfg.select_count
    remove_after = cfg.remove_after_spin
    if mode == MODE_TEAMS:
        team_count = st.number_input("Number of teams", min_value=2, max_value=20, value=max(cfg.team_count, 2), step=1)
    elif mode == "multiple":
        select_count = st.number_input("Items to select", min_value=1, max_value=50, value=cfg.select_count, step=1)
    else:
        remove_after = st.checkbox("Remove item after pick", value=cfg.remove_after_spin)

    st.session_state.config = cfg.model_copy(update={
        "mode": mode,
        "team_count": int(team_count),
        "select_count": int(select_count),
        "remove_after_spin": remove_after,
    })

    st.divider()
    st.subheader("📄 Files")
    preset = st.selectbox("Preset", ["—"] + list(st.session_state.presets.keys()))
    if preset != "—" and st.button("Load preset", use_container_width=True):
        _set_items(list(st.session_state.presets[preset]))
    up = st.file_uploader("Items CSV", type=["csv"])
    if up is not None:
        try:
            _set_items(load_items_csv(up))
        except ValueError as e:
            st.error(f"Error loading CSV: {e}")
    st.download_button("template.csv", data=generate_template_csv_bytes(), file_name="template.csv", mime="text/csv")


# ---------- Items ----------
cfg = st.session_state.config
st.markdown('<div class="card"><h2>Spin Picker</h2>'
            '<div class="small">Add items, pick a mode, then spin, pick or deal teams.</div></div>',
            unsafe_allow_html=True)

c1, c2 = st.columns([3, 1])
with c1:
    new_name = st.text_input("Add item", key="new_item")
with c2:
    st.caption(" ")
    if st.button("Add", use_container_width=True) and new_name.strip():
        weight = NEW_ITEM_PERCENT if cfg.mode == MODE_WEIGHTED else None
        _set_items(cfg.items + [Item(id=_new_id(), name=new_name.strip(), weight=weight)])
        st.rerun()

df = pd.DataFrame(
    [{"id": it.id, "name": it.name, "weight": it.weight, "locked": it.locked} for it in cfg.items],
    columns=["id", "name", "weight", "locked"],
)
edited = st.data_editor(
    df,
    num_rows="dynamic",
    use_container_width=True,
    disabled=["id"],
    column_config={"weight": st.column_config.NumberColumn("weight (%)", min_value=0.0, max_value=100.0)},
)
rows = []
for _, r in edited.iterrows():
    name = str(r.get("name") or "").strip()
    if not name:
        continue
    w = r.get("weight")
    rows.append(Item(
        id=str(r.get("id") or "") or _new_id(),
        name=name,
        weight=None if w is None or pd.isna(w) else float(w),
        locked=bool(r.get("locked") or False),
    ))
if [it.model_dump() for it in rows] != [it.model_dump() for it in cfg.items]:
    _set_items(rows)
    cfg = st.session_state.config

if cfg.mode == MODE_WEIGHTED and cfg.items:
    w1, w2, w3 = st.columns([1, 1, 2])
    with w1:
        if st.button("Distribute equally"):
            _set_items(distribute_equally(cfg.items))
            st.rerun()
    with w2:
        if st.button("Reset all"):
            _set_items(reset_weights(cfg.items))
            st.rerun()
    with w3:
        st.metric("Total", f"{total_percentage(cfg.items):.1f}%")
    segs = build_segments(cfg.items, cfg.mode)
    st.bar_chart(pd.DataFrame({"angle": [s.angle for s in segs]}, index=[it.name for it in cfg.items]))

# ---------- Constraints (teams) ----------
if cfg.mode == MODE_TEAMS and len(cfg.items) >= 2:
    st.subheader("Keep apart")
    names = {it.id: it.name for it in cfg.items}
    k1, k2, k3 = st.columns([2, 2, 1])
    with k1:
        a = st.selectbox("First", list(names), format_func=names.get, key="c_a")
    with k2:
        b = st.selectbox("Second", list(names), format_func=names.get, key="c_b")
    with k3:
        st.caption(" ")
        if st.button("Add rule", use_container_width=True) and a != b:
            rule = Constraint(id=f"constraint-{_new_id()}", item1_id=a, item2_id=b)
            st.session_state.config = cfg.model_copy(update={"team_constraints": cfg.team_constraints + [rule]})
            st.rerun()
    for c in cfg.team_constraints:
        col_t, col_x = st.columns([4, 1])
        col_t.markdown(f'<span class="chip">{cfg.name_for(c.item1_id)} ≠ {cfg.name_for(c.item2_id)}</span>',
                       unsafe_allow_html=True)
        if col_x.button("Remove", key=f"rm_{c.id}"):
            st.session_state.config = cfg.model_copy(
                update={"team_constraints": [x for x in cfg.team_constraints if x.id != c.id]})
            st.rerun()

# ---------- Validation ----------
status = get_validation_status(cfg)
for e in status.errors:
    st.error(e)
for w in status.warnings:
    st.warning(w)

# ---------- Go ----------
label = {"teams": "Deal the teams", "multiple": "Pick items"}.get(cfg.mode, "Spin")
if st.button(label, type="primary", disabled=not status.is_valid):
    sink = st.session_state.feedback
    sink.play(SHUFFLE if cfg.mode == MODE_TEAMS else SPIN_START)
    pool = st.session_state.current_items
    run_cfg = cfg if pool is None else cfg.model_copy(update={"items": pool})
    try:
        result, remaining = resolve_and_remove(
            run_cfg,
            st.session_state.rand,
            picks_so_far=st.session_state.picks_so_far,
            current_rotation=st.session_state.rotation,
        )
    except ValueError as e:
        st.error(str(e))
    else:
        sink.play(WIN)
        if result.rotation is not None:
            st.session_state.rotation = result.rotation
        if result.position is not None:
            st.session_state.picks_so_far = result.position
            st.session_state.current_items = remaining
        st.session_state.result = result
        st.session_state.history = append_history(st.session_state.history, result)

if st.session_state.current_items is not None:
    st.caption(f"{len(st.session_state.current_items)} item(s) left in the draw")
    if st.button("Reset items"):
        st.session_state.current_items = None
        st.session_state.picks_so_far = 0
        st.session_state.result = None
        st.rerun()

# ---------- Result ----------
result: SelectionResult = st.session_state.result
if result is not None:
    st.markdown('<div class="card">', unsafe_allow_html=True)
    if result.kind == "teams":
        cols = st.columns(len(result.teams))
        for i, (col, team) in enumerate(zip(cols, result.teams), start=1):
            col.markdown(f"**Team {i}**")
            for m in team:
                col.write(m.name)
        for c in result.violated_constraints:
            st.warning(f"Could not keep {cfg.name_for(c.item1_id)} and {cfg.name_for(c.item2_id)} apart.")
    else:
        prefix = f"#{result.position} " if result.position else ""
        st.markdown(f'<div class="winner">{prefix}{", ".join(it.name for it in result.items)}</div>',
                    unsafe_allow_html=True)
    st.markdown("</div>", unsafe_allow_html=True)

    st.subheader("Share & Export")
    base = st.text_input("App URL", value="http://localhost:8501")
    st.code(format_result_text(result, cfg, url=share_url(base, cfg) if base else ""), language=None)
    e1, e2, e3 = st.columns(3)
    e1.download_button("results.csv", data=result_to_csv_bytes(result), file_name="results.csv", mime="text/csv")
    e2.download_button("results.json", data=export_json_bytes(cfg, result, st.session_state.history),
                       file_name="results.json", mime="application/json")
    e3.download_button("results.pdf", data=render_results_pdf(result, "Spin Picker results"),
                       file_name="results.pdf", mime="application/pdf")

if st.session_state.history:
    st.subheader("Recent results")
    for n, h in enumerate(st.session_state.history):
        if h.kind == "teams":
            st.write(f"Deal #{len(st.session_state.history) - n}: {len(h.teams)} teams")
        else:
            st.write(f"Pick #{len(st.session_state.history) - n}: {', '.join(it.name for it in h.items)}")
