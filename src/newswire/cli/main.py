"""Newswire CLI — run the server and work with articles from a terminal.

Usage:
    newswire serve                               # Run the API with uvicorn
    newswire articles                            # List live articles
    newswire post "Title" "Body" --author Ann    # Publish an article
    newswire delete 7                            # Delete an article
    newswire listen                              # Follow the live event stream
    newswire cleanup --secret $CRON_SECRET       # Purge expired articles
"""

from __future__ import annotations

import asyncio
import json
import os
import sys
from typing import Optional

import click
import httpx

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "http://localhost:8000"

EVENT_COLORS = {
    "article:created": "green",
    "article:updated": "yellow",
    "article:deleted": "red",
}


def _api_url() -> str:
    return os.environ.get("NEWSWIRE_API_URL", DEFAULT_API_URL).rstrip("/")


def _client(timeout: Optional[float] = 30.0) -> httpx.AsyncClient:
    """Build an async HTTP client pointed at the Newswire API."""
    return httpx.AsyncClient(base_url=_api_url(), timeout=timeout)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Run an async coroutine from a synchronous click handler."""
    try:
        return asyncio.run(coro)
    except httpx.HTTPError as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)


def _pretty_json(data: dict | list) -> str:
    return json.dumps(data, indent=2, default=str)


class SSEDecoder:
    """Incremental decoder for Server-Sent Events lines.

    feed() takes one line (without its newline) and returns an
    (event, data) pair when a frame completes, else None. Comment lines
    (": ...") come back immediately as ("comment", text).
    """

    def __init__(self):
        self.event = "message"
        self.data: list[str] = []

    def feed(self, line: str) -> tuple[str, str] | None:
        if line == "":
            frame = (self.event, "\n".join(self.data)) if self.data else None
            self.event, self.data = "message", []
            return frame
        if line.startswith(":"):
            return "comment", line[1:].strip()
        if line.startswith("event:"):
            self.event = line[len("event:"):].strip()
        elif line.startswith("data:"):
            self.data.append(line[len("data:"):].removeprefix(" "))
        return None


def parse_sse_lines(lines) -> list[tuple[str, str]]:
    """Decode a complete list of SSE lines into (event, data) pairs."""
    decoder = SSEDecoder()
    frames = []
    for line in lines:
        frame = decoder.feed(line)
        if frame:
            frames.append(frame)
    return frames


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version="0.1.0", prog_name="newswire")
def main():
    """Newswire — news articles with live updates."""


@main.command()
@click.option("--host", default=None, help="Bind address (default: NEWSWIRE_HOST)")
@click.option("--port", default=None, type=int, help="Port (default: NEWSWIRE_PORT)")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Run the API server."""
    import uvicorn

    from newswire.config import settings

    uvicorn.run(
        "newswire.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON")
def articles(as_json: bool):
    """List non-expired articles, newest first."""
    _run(_articles_impl(as_json))


async def _articles_impl(as_json: bool):
    async with _client() as c:
        r = await c.get("/api/v1/articles")
        r.raise_for_status()
        items = r.json()

    if as_json:
        click.echo(_pretty_json(items))
        return
    if not items:
        click.echo("No articles.")
        return
    for a in items:
        click.echo(
            f"#{a['id']:<5} {click.style(a['category'][:12].ljust(12), fg='cyan')} "
            f"{a['title'][:60]}  — {a['author']}"
        )


@main.command()
@click.argument("title")
@click.argument("content")
@click.option("--author", "-a", required=True, help="Article author")
@click.option("--category", "-c", default="Other", show_default=True)
@click.option("--image-url", default=None)
@click.option("--source-url", default=None)
def post(title: str, content: str, author: str, category: str,
         image_url: Optional[str], source_url: Optional[str]):
    """Publish a new article (broadcast to every listener)."""
    _run(_post_impl({
        "title": title,
        "content": content,
        "author": author,
        "category": category,
        "image_url": image_url,
        "source_url": source_url,
    }))


async def _post_impl(body: dict):
    async with _client() as c:
        r = await c.post("/api/v1/articles", json=body)
        r.raise_for_status()
        article = r.json()
    click.secho(f"Article #{article['id']} created (expires {article['expires_at']})", fg="green")


@main.command()
@click.argument("article_id", type=int)
def delete(article_id: int):
    """Delete an article."""
    _run(_delete_impl(article_id))


async def _delete_impl(article_id: int):
    async with _client() as c:
        r = await c.delete(f"/api/v1/articles/{article_id}")
        if r.status_code == 404:
            click.secho(f"Article #{article_id} not found", fg="red", err=True)
            sys.exit(1)
        r.raise_for_status()
    click.secho(f"Article #{article_id} deleted", fg="green")


@main.command()
@click.option("--show-comments", is_flag=True, help="Also print connect/heartbeat comments")
def listen(show_comments: bool):
    """Follow article events as they happen (Ctrl+C to stop)."""
    try:
        _run(_listen_impl(show_comments))
    except KeyboardInterrupt:
        click.echo()


async def _listen_impl(show_comments: bool):
    async with _client(timeout=None) as c:
        async with c.stream("GET", "/api/v1/events") as r:
            r.raise_for_status()
            click.secho(f"Listening on {_api_url()}/api/v1/events", bold=True)
            decoder = SSEDecoder()
            async for line in r.aiter_lines():
                frame = decoder.feed(line)
                if frame is None:
                    continue
                event, data = frame
                if event == "comment":
                    if show_comments:
                        click.secho(f": {data}", dim=True)
                    continue
                click.echo(
                    f"{click.style(event, fg=EVENT_COLORS.get(event, 'white'))} {data}"
                )


@main.command()
@click.option("--secret", envvar="NEWSWIRE_CRON_SECRET", required=True,
              help="Cron secret (or set NEWSWIRE_CRON_SECRET)")
def cleanup(secret: str):
    """Delete expired articles via the cleanup endpoint."""
    _run(_cleanup_impl(secret))


async def _cleanup_impl(secret: str):
    async with _client() as c:
        r = await c.get(
            "/api/v1/cron/cleanup",
            headers={"Authorization": f"Bearer {secret}"},
        )
        if r.status_code == 401:
            click.secho("Unauthorized: wrong cron secret", fg="red", err=True)
            sys.exit(1)
        r.raise_for_status()
        result = r.json()
    click.secho(f"Deleted {result['deleted_count']} expired article(s)", fg="green")


if __name__ == "__main__":
    main()
