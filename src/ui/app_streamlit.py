from __future__ import annotations

import json
from datetime import datetime, timedelta
from typing import Any, Dict, List, Tuple

import pandas as pd
import streamlit as st

from schedule_merge.config import DT_FORMAT, POLICY_NAMES
from schedule_merge.engine import MergeEngine
from schedule_merge.errors import ScheduleMergeError
from schedule_merge.formatting import fmt_duration_dhm, fmt_timestamp
from schedule_merge.io_json import dumps, event_to_dict, timeline_to_dict
from schedule_merge.models import Event
from schedule_merge.parsing import parse_desirability, parse_dt


# ----------------------------
# Helpers UI
# ----------------------------

COLUMNS = ["Id", "Inicio", "Fin", "Prioridad"]


def dt_to_str(dt: datetime) -> str:
    return dt.strftime(DT_FORMAT)


def default_events_df() -> pd.DataFrame:
    base = datetime.now().replace(hour=9, minute=0, second=0, microsecond=0)
    return pd.DataFrame(
        [
            {"Id": "A", "Inicio": dt_to_str(base), "Fin": dt_to_str(base + timedelta(hours=3)), "Prioridad": "1"},
            {"Id": "B", "Inicio": dt_to_str(base + timedelta(hours=1)), "Fin": dt_to_str(base + timedelta(hours=2)), "Prioridad": "2"},
        ]
    )


def init_session_state() -> None:
    if "trim_overlaps" not in st.session_state:
        st.session_state.trim_overlaps = False

    if "events_df" not in st.session_state:
        st.session_state.events_df = default_events_df()


def _cell(value: Any) -> str:
    if value is None or pd.isna(value):
        return ""
    return str(value).strip()


def _priority(value: str) -> Any:
    # La prioridad puede ser numerica o una fecha (p.ej. fecha de creacion)
    try:
        return float(value)
    except ValueError:
        return parse_desirability(value)


def build_events() -> Tuple[List[Event], List[str]]:
    events: List[Event] = []
    errors: List[str] = []

    df = st.session_state.events_df.copy()

    # Normaliza NaNs y tipos
    for idx, row in enumerate(df.itertuples(index=False), start=1):
        values = dict(zip(df.columns, row))
        event_id = _cell(values.get("Id")) or str(idx)
        start_s = _cell(values.get("Inicio"))
        end_s = _cell(values.get("Fin"))
        prio_s = _cell(values.get("Prioridad")) or "0"

        if not start_s or not end_s:
            continue

        try:
            events.append(
                Event(
                    start=parse_dt(start_s),
                    end=parse_dt(end_s),
                    desirability=_priority(prio_s),
                    event_id=event_id,
                )
            )
        except ScheduleMergeError as e:
            errors.append(f"Evento #{idx}: {e}")

    return events, errors


def build_case_json(events: List[Event]) -> Dict[str, Any]:
    return {"events": [event_to_dict(ev) for ev in events]}


def timeline_df(events: List[Any]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "Id": ev.event_id,
                "Inicio": fmt_timestamp(ev.start),
                "Fin": fmt_timestamp(ev.end),
                "Duración": fmt_duration_dhm(int((ev.end - ev.start).total_seconds())),
            }
            for ev in events
        ],
        columns=["Id", "Inicio", "Fin", "Duración"],
    )


# ----------------------------
# App
# ----------------------------

def main() -> None:
    st.set_page_config(page_title="Fusión de agenda", layout="wide")
    init_session_state()

    st.title("Fusión de agenda: resolución de conflictos")

    st.caption(
        "Los eventos se procesan de menor a mayor prioridad; en caso de solape gana siempre el más prioritario. "
        "El perdedor se descarta o se recorta a los tramos que aún puede ocupar."
    )

    col_left, col_right = st.columns([1.1, 1.4], gap="large")

    # -------- Left: Inputs
    with col_left:
        st.subheader("1) Eventos")
        st.caption(f"Edita la tabla. Formato de fecha: {DT_FORMAT}")

        st.session_state.events_df = st.data_editor(
            st.session_state.events_df,
            num_rows="dynamic",
            use_container_width=True,
            column_config={
                "Id": st.column_config.TextColumn("Id"),
                "Inicio": st.column_config.TextColumn("Inicio", required=True),
                "Fin": st.column_config.TextColumn("Fin", required=True),
                "Prioridad": st.column_config.TextColumn("Prioridad"),
            },
        )

        st.toggle("Recortar solapes (en lugar de descartar)", key="trim_overlaps")

        if st.button("Limpiar eventos"):
            st.session_state.events_df = pd.DataFrame(columns=COLUMNS)

        st.divider()
        uploaded = st.file_uploader("Cargar caso (JSON)", type=["json"])
        if uploaded is not None:
            try:
                data = json.loads(uploaded.read().decode("utf-8"))
                st.session_state.events_df = pd.DataFrame(
                    [
                        {
                            "Id": str(e.get("id", i)),
                            "Inicio": e["start"],
                            "Fin": e["end"],
                            "Prioridad": str(e.get("desirability", 0)),
                        }
                        for i, e in enumerate(data.get("events", []))
                    ],
                    columns=COLUMNS,
                )
                st.success("Caso cargado correctamente.")
            except (ValueError, KeyError, AttributeError) as e:
                st.error(f"No se pudo cargar el caso: {e}")

    # -------- Right: Results
    with col_right:
        st.subheader("2) Agenda fusionada")

        btn_merge = st.button("Fusionar", type="primary", use_container_width=True)

        if btn_merge:
            events, errors = build_events()
            if errors:
                for err in errors:
                    st.error(err)
                return

            try:
                engine = MergeEngine(events, trim_overlaps=st.session_state.trim_overlaps)
                timeline = engine.merge()
            except (ScheduleMergeError, TypeError) as e:
                st.error(f"Error durante la fusión: {e}")
                return

            kpi_cols = st.columns(3)
            kpi_cols[0].metric("Eventos", len(events))
            kpi_cols[1].metric("Tramos resultantes", len(timeline))
            kpi_cols[2].metric("Política", POLICY_NAMES[engine.trim_overlaps])

            st.dataframe(timeline_df(timeline), use_container_width=True, hide_index=True)

            with st.expander("Evidencia (decisiones del motor)"):
                st.json(json.loads(dumps(engine.explain())))

            b1, b2 = st.columns(2)
            with b1:
                st.download_button(
                    "Exportar caso (JSON)",
                    data=dumps(build_case_json(events)),
                    file_name="case.json",
                    mime="application/json",
                    use_container_width=True,
                )
            with b2:
                st.download_button(
                    "Exportar agenda (JSON)",
                    data=dumps(timeline_to_dict(timeline, engine.policy, engine.explain())),
                    file_name="timeline.json",
                    mime="application/json",
                    use_container_width=True,
                )


if __name__ == "__main__":
    main()
