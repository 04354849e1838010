import pandas as pd
import streamlit as st

from salbp_core.alb_io import instance_to_text
from salbp_core.engine import line_metrics, ready_tasks
from salbp_core.ui_helpers import edges_dataframe, metrics_table, stations_dataframe, tasks_dataframe

st.title("Instance details")

puzzle = st.session_state.get("puzzle")
if puzzle is None:
    st.warning("Load a graph on the main page first.")
    st.stop()

instance, state = puzzle.instance, puzzle.state

st.write(f"**{puzzle.name}** - {len(instance.tasks)} tasks, {len(instance.edges)} precedence relations, "
         f"cycle time {instance.cycle_time}")
if instance.declared_task_count is not None and instance.declared_task_count != len(instance.tasks):
    st.warning(f"The file declares {instance.declared_task_count} tasks but lists {len(instance.tasks)}.")

ready = ready_tasks(instance, state)
st.write("Ready to assign:", ", ".join(ready) if ready else "-")

st.subheader("Tasks")
st.dataframe(tasks_dataframe(instance, state, puzzle.selected_task), hide_index=True, use_container_width=True)

st.subheader("Precedence relations")
st.dataframe(edges_dataframe(instance), hide_index=True, use_container_width=True)

st.subheader("Stations")
st.dataframe(stations_dataframe(instance, state.stations), hide_index=True, use_container_width=True)

st.subheader("Line metrics")
metrics = metrics_table(line_metrics(instance, state.stations))
st.table(pd.DataFrame(list(metrics.items()), columns=["Metric", "Value"]))

st.download_button("Download instance (.alb)", data=instance_to_text(instance).encode("utf-8"),
                   file_name=f"{puzzle.name}.alb", mime="text/plain")
