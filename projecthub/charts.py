from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Mapping, Sequence

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from projecthub.metrics import bucket_by_status, format_status_label
from projecthub.models import ProjectStatus, TaskStatus

PROJECT_STATUS_COLORS: Dict[ProjectStatus, str] = {
    ProjectStatus.NOT_STARTED: "rgba(54, 162, 235, 0.6)",
    ProjectStatus.IN_PROGRESS: "rgba(255, 206, 86, 0.6)",
    ProjectStatus.ON_HOLD: "rgba(255, 159, 64, 0.6)",
    ProjectStatus.COMPLETED: "rgba(75, 192, 192, 0.6)",
    ProjectStatus.CANCELLED: "rgba(255, 99, 132, 0.6)",
}

TASK_STATUS_COLORS: Dict[TaskStatus, str] = {
    TaskStatus.TODO: "rgba(54, 162, 235, 0.6)",
    TaskStatus.IN_PROGRESS: "rgba(255, 206, 86, 0.6)",
    TaskStatus.REVIEW: "rgba(153, 102, 255, 0.6)",
    TaskStatus.DONE: "rgba(75, 192, 192, 0.6)",
    TaskStatus.BLOCKED: "rgba(255, 99, 132, 0.6)",
}

_LAYOUT = dict(template="plotly_white", margin=dict(l=10, r=10, t=40, b=10), height=340)


def status_frame(counts: Mapping[Enum, int]) -> pd.DataFrame:
    """Histogram as a frame with one row per status, in enum order."""
    rows = [
        {"status": member.value, "label": format_status_label(member.value), "count": int(n)}
        for member, n in counts.items()
    ]
    return pd.DataFrame(rows, columns=["status", "label", "count"])


def project_status_pie(projects: Sequence[Mapping[str, Any]], title: str = "Project Status") -> go.Figure:
    counts = bucket_by_status(projects, ProjectStatus)
    df = status_frame(counts)
    fig = go.Figure(
        data=go.Pie(
            labels=df["label"],
            values=df["count"],
            marker=dict(colors=[PROJECT_STATUS_COLORS[m] for m in counts], line=dict(color="#ffffff", width=1)),
            sort=False,
            hole=0.35,
        )
    )
    fig.update_layout(title=title, legend=dict(orientation="h", yanchor="bottom", y=-0.2), **_LAYOUT)
    return fig


def task_status_bar(tasks: Sequence[Mapping[str, Any]], title: str = "Task Status") -> go.Figure:
    counts = bucket_by_status(tasks, TaskStatus)
    df = status_frame(counts)
    fig = px.bar(
        df,
        x="label",
        y="count",
        color="label",
        color_discrete_sequence=[TASK_STATUS_COLORS[m] for m in counts],
        category_orders={"label": list(df["label"])},
        title=title,
    )
    fig.update_layout(showlegend=False, xaxis_title=None, yaxis_title="Tasks", **_LAYOUT)
    fig.update_yaxes(rangemode="tozero", dtick=1)
    return fig
