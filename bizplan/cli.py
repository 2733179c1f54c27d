"""CLI entrypoint (Typer + Rich).

Client for the plan generator API:
- `bizplan generate --name ... --industry ...` generates a plan and caches it
- `bizplan load` / `bizplan clear` manage the single cached plan
- `bizplan export --format pdf|docx|txt` writes the cached plan to a file
- `bizplan plans` lists saved plans, `bizplan serve` runs the API
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import httpx
import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from bizplan.cache import CachedPlan, PlanCache
from bizplan.config import get_settings
from bizplan.export import PlanDocument, export_filename, render
from bizplan.schemas import ExportFormat

app = typer.Typer(help="Business plan generator CLI.")
console = Console()


def _client(base_url: str) -> httpx.Client:
    # Generation can take a while on free-tier reasoning models
    timeout = get_settings().generation_timeout_seconds + 10
    return httpx.Client(base_url=base_url, timeout=timeout)


def _cache(ctx: typer.Context) -> PlanCache:
    return PlanCache(ctx.obj["cache_path"])


@app.callback()
def main(
    ctx: typer.Context,
    api_url: Optional[str] = typer.Option(None, "--api-url", help="API base URL"),
    cache_path: Optional[Path] = typer.Option(None, "--cache", help="Plan cache file"),
):
    settings = get_settings()
    ctx.obj = {
        "api_url": api_url or settings.api_base_url,
        "cache_path": cache_path or settings.cache_path,
    }


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, help="Bind address"),
    port: Optional[int] = typer.Option(None, help="Bind port"),
):
    """Run the API server."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "bizplan.api.main:app",
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=settings.debug,
    )


@app.command()
def generate(
    ctx: typer.Context,
    name: str = typer.Option(..., "--name", "-n", help="Business name"),
    industry: str = typer.Option(..., "--industry", "-i", help="Industry"),
    target_market: str = typer.Option("", "--target-market", "-t", help="Target market"),
    usps: str = typer.Option("", "--usps", "-u", help="Unique selling points"),
):
    """Generate a plan and keep it in the local cache."""
    payload = {
        "businessName": name,
        "industry": industry,
        "targetMarket": target_market,
        "usps": usps,
    }

    with console.status("Generating plan..."):
        try:
            with _client(ctx.obj["api_url"]) as client:
                response = client.post("/generate-plan", json=payload)
        except httpx.HTTPError as e:
            console.print(f"[red]Failed to reach the API: {e}[/red]")
            raise typer.Exit(code=1)

    if response.status_code != 200:
        kind = response.headers.get("X-Error-Kind", "error")
        console.print(f"[red]Failed to generate plan ({kind}): {response.text}[/red]")
        raise typer.Exit(code=1)

    plan = response.json()["plan"]
    _cache(ctx).save(
        CachedPlan(
            business_name=name,
            industry=industry,
            target_market=target_market,
            usps=usps,
            plan=plan,
        )
    )
    console.print(Panel(Markdown(plan), title=f"Business Plan for {name}"))
    console.print("[green]Plan generated successfully![/green]")


@app.command()
def load(ctx: typer.Context):
    """Show the cached plan."""
    entry = _cache(ctx).load()
    if not entry:
        console.print("No saved plan found.")
        raise typer.Exit(code=1)

    console.print(Panel(Markdown(entry.plan), title=f"Business Plan for {entry.business_name}"))
    console.print(f"Industry: {entry.industry}")
    console.print(f"Target Market: {entry.target_market or ''}")
    console.print(f"USPs: {entry.usps or ''}")


@app.command()
def clear(ctx: typer.Context):
    """Forget the cached plan."""
    if _cache(ctx).clear():
        console.print("Saved plan cleared!")
    else:
        console.print("No saved plan found.")


@app.command()
def export(
    ctx: typer.Context,
    fmt: ExportFormat = typer.Option(ExportFormat.PDF, "--format", "-f", help="Output format"),
    output: Path = typer.Option(Path("."), "--output", "-o", help="Output directory"),
):
    """Write the cached plan as a PDF, Word or text file."""
    entry = _cache(ctx).load()
    if not entry:
        console.print("No saved plan found.")
        raise typer.Exit(code=1)

    doc = PlanDocument(
        business_name=entry.business_name,
        industry=entry.industry,
        plan=entry.plan,
        target_market=entry.target_market,
        usps=entry.usps,
    )
    output.mkdir(parents=True, exist_ok=True)
    path = output / export_filename(doc, fmt)
    path.write_bytes(render(doc, fmt))
    console.print(f"[green]{fmt.value.upper()} saved to {path}[/green]")


@app.command()
def plans(ctx: typer.Context):
    """List plans saved on the server."""
    try:
        with _client(ctx.obj["api_url"]) as client:
            response = client.get("/plans")
    except httpx.HTTPError as e:
        console.print(f"[red]Failed to reach the API: {e}[/red]")
        raise typer.Exit(code=1)

    if response.status_code != 200:
        console.print(f"[red]{response.text}[/red]")
        raise typer.Exit(code=1)

    table = Table(title="Saved plans")
    table.add_column("Business")
    table.add_column("Industry")
    table.add_column("Created")
    table.add_column("Updated")
    for item in response.json():
        table.add_row(
            item["businessName"],
            item["industry"],
            item["createdAt"],
            item.get("updatedAt") or "",
        )
    console.print(table)


if __name__ == "__main__":
    app()
