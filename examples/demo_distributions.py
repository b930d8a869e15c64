"""Demo: distributions widget against an in-process fake backend.

Run with:
    python examples/demo_distributions.py

The fake backend bins random data with numpy and answers POST /distributions
through httpx.MockTransport, so no server is needed.
"""

from __future__ import annotations

import json

import httpx
import numpy as np
from nicegui import ui

from nicedistributions.distributions_widget import (
    DATE_TIME_FIELD,
    DistributionFetcher,
    DistributionsConfig,
    ExplorerState,
    MappingSchema,
)
from nicedistributions.utils.logging import configure_logging

configure_logging(level="DEBUG")

SCHEMA = {
    "uniqueness": "FloatField",
    "num_objects": "IntField",
    "created_at": DATE_TIME_FIELD,
    "label": "StringField",
}


def _numeric_distribution(path: str, ftype: str, values: np.ndarray, bins: int) -> dict:
    counts, edges = np.histogram(values, bins=bins)
    data = [
        {"key": float(edges[i]), "count": int(counts[i]), "edges": [float(edges[i]), float(edges[i + 1])]}
        for i in range(len(counts))
    ]
    return {"path": path, "type": ftype, "data": data, "ticks": 5}


def _fake_backend(request: httpx.Request) -> httpx.Response:
    body = json.loads(request.content)
    seed = len(json.dumps(body["filters"], sort_keys=True))
    rng = np.random.default_rng(seed)

    if body["group"] == "scalars":
        start = 1_700_000_000_000
        hour = 3_600_000
        created = [
            {
                "key": start + i * hour,
                "count": int(rng.integers(0, 50)),
                "edges": [{"$date": start + i * hour}, {"$date": start + (i + 1) * hour}],
            }
            for i in range(36)
        ]
        distributions = [
            _numeric_distribution("uniqueness", "FloatField", rng.random(500), bins=20),
            _numeric_distribution("num_objects", "IntField", rng.integers(0, 40, 500).astype(float), bins=10),
            {"path": "created_at", "type": DATE_TIME_FIELD, "data": created, "ticks": 0},
        ]
    elif body["group"] == "labels":
        names = ["cat", "dog", "bird", None, "a-very-long-category-name-that-gets-elided"]
        distributions = [
            {
                "path": "label",
                "type": "StringField",
                "data": [{"key": n, "count": int(rng.integers(1, 100))} for n in names],
                "ticks": 0,
            }
        ]
    else:
        distributions = []
    return httpx.Response(200, json={"distributions": distributions})


config = DistributionsConfig.load()
state = ExplorerState(dataset="quickstart")
fetcher = DistributionFetcher(
    httpx.AsyncClient(transport=httpx.MockTransport(_fake_backend), base_url="http://fake"),
)


@ui.page("/")
def index() -> None:
    widgets = []
    with ui.row().classes("items-center gap-2"):
        ui.button("Refresh", on_click=state.bump_refresh)
        ui.button("Toggle filter", on_click=lambda: state.set_filters({} if state.filters else {"label": ["cat"]}))

    for group in ("Scalars", "Labels", "Other"):
        ui.label(group).classes("text-lg font-bold")
        presenter = config.make_presenter(MappingSchema(SCHEMA), fetcher=fetcher)
        widget = config.make_widget(group=group, presenter=presenter, context_provider=state.snapshot)
        widget.render()
        widget.watch(state)
        widgets.append(widget)

    async def _initial_load() -> None:
        for w in widgets:
            await w.refresh()

    ui.timer(0.1, _initial_load, once=True)


ui.run(title="Distributions demo")
