from __future__ import annotations

from typing import Any, Dict, List, Optional

import requests
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .options import OPENROUTER_MODELS_URL

MODELS_TIMEOUT = 15


def fetch_models(api_key: str = "", url: str = OPENROUTER_MODELS_URL, console: Optional[Console] = None) -> List[Any]:
    """
    Fetch the provider's model list. Accepts the OpenRouter/OpenAI shape
    {"data": [...]} or a bare list; anything else yields [].
    """
    console = console or Console(stderr=True)
    headers: Dict[str, str] = {}
    if api_key:
        headers["Authorization"] = f"Bearer {api_key}"
    else:
        console.print("[yellow]No API key set; the list may omit private or paid models.[/yellow]")
    console.print(f"[cyan]Requesting model list: {url}[/cyan]")

    try:
        resp = requests.get(url, headers=headers, timeout=MODELS_TIMEOUT)
    except requests.RequestException as exc:
        console.print(f"[red]Could not fetch models[/red]: {escape(str(exc))}")
        return []
    if resp.status_code != 200:
        console.print(f"[red]Could not fetch models[/red]: http {resp.status_code}: {escape(resp.text[:300])}")
        return []
    try:
        data = resp.json()
    except ValueError:
        console.print("[red]Could not fetch models[/red]: response is not JSON")
        return []

    if isinstance(data, dict) and isinstance(data.get("data"), list):
        return data["data"]
    if isinstance(data, list):
        return data
    return []


def _model_id(model: Any) -> str:
    return model.get("id", "") if isinstance(model, dict) else str(model)


def find_model(models: List[Any], model_id: str) -> Optional[Any]:
    for m in models:
        if _model_id(m) == model_id:
            return m
    return None


def price_per_million(raw: Any) -> str:
    """OpenRouter quotes USD per token as a string; show it per 1M tokens."""
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return "-"
    if value < 0 or value != value:
        return "-"
    if value == 0:
        return "free"
    return f"${value * 1_000_000:,.2f}"


def render_models(
    models: List[Any],
    filter_text: str = "",
    selected_model: str = "",
    console: Optional[Console] = None,
) -> int:
    """
    Print the catalogue as a table and mark the model the action would send.

    Returns the number of rows shown. When ``selected_model`` is not in the
    catalogue a warning is printed, since the request would fail with a 4xx.
    """
    console = console or Console()
    if not models:
        console.print("[yellow]No models returned; check the network, the API key or TEXTACTION_MODELS_URL.[/yellow]")
        return 0

    filter_text = filter_text.lower()
    table = Table(title="Available models")
    table.add_column("", width=1)
    table.add_column("Model ID", style="cyan")
    table.add_column("Context")
    table.add_column("Prompt $/1M", justify="right")
    table.add_column("Completion $/1M", justify="right")

    rows = 0
    for m in models:
        model_id = _model_id(m)
        if filter_text and filter_text not in model_id.lower():
            continue
        ctx_len = ""
        pricing: Dict[str, Any] = {}
        if isinstance(m, dict):
            ctx_len = str(m.get("context_length") or m.get("context_window") or "")
            pricing = m.get("pricing") or {}
        marker = "*" if selected_model and model_id == selected_model else ""
        table.add_row(
            marker,
            escape(model_id),
            ctx_len or "-",
            price_per_million(pricing.get("prompt")),
            price_per_million(pricing.get("completion")),
        )
        rows += 1

    console.print(table)
    suffix = f" matching '{escape(filter_text)}'" if filter_text else ""
    console.print(f"[green]{rows} model(s){suffix}[/green]", highlight=False)
    if selected_model:
        if find_model(models, selected_model) is None:
            console.print(f"[yellow]Configured model {escape(selected_model)} is not in this catalogue.[/yellow]")
        else:
            console.print(f"* configured model: {selected_model}", markup=False, highlight=False)
    return rows
