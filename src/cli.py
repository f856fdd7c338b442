"""CLI interface for postmeta."""

import json
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from postmeta.config import PostmetaConfig, load_config, merge_cli_overrides
from postmeta.logging_setup import configure_logging
from postmeta.posts import (
    DuplicateSlugError,
    PostCollection,
    PostReader,
    PostRecord,
    ReadResult,
    find_duplicate_slugs,
)

app = typer.Typer(
    name="postmeta",
    help="Validate and list blog post front matter.",
    no_args_is_help=True,
)

console = Console()

DirOption = Annotated[
    Optional[Path],
    typer.Option(
        "--dir",
        "-d",
        help="Content directory holding the Markdown posts.",
        file_okay=False,
        dir_okay=True,
    ),
]
PatternOption = Annotated[
    Optional[str],
    typer.Option("--pattern", "-p", help="Glob pattern for post files (default **/*.md)."),
]
ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to a .postmeta.toml file."),
]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from postmeta import __version__

        console.print(f"postmeta {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging."),
    ] = False,
) -> None:
    """Postmeta - blog post front matter validator."""
    configure_logging(verbose=verbose)


def _resolve_config(
    config_path: Path | None,
    content_dir: Path | None,
    pattern: str | None,
    include_drafts: bool | None = None,
) -> PostmetaConfig:
    config = load_config(config_path)
    return merge_cli_overrides(
        config,
        content_dir=content_dir,
        pattern=pattern,
        include_drafts=include_drafts,
    )


def _read_posts(config: PostmetaConfig) -> ReadResult:
    directory = config.content_dir
    if not directory.is_dir():
        console.print(f"[red]Error:[/red] Content directory not found: {escape(str(directory))}")
        raise typer.Exit(1)
    return PostReader(pattern=config.content.pattern).read_all(directory)


def _load_collection(config: PostmetaConfig) -> PostCollection:
    result = _read_posts(config)
    if result.failures:
        console.print(
            f"[yellow]Skipping {len(result.failures)} invalid post(s); "
            "run 'postmeta validate' for details.[/yellow]"
        )
    try:
        return PostCollection(result.records)
    except DuplicateSlugError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(1) from exc


@app.command()
def validate(
    content_dir: DirOption = None,
    pattern: PatternOption = None,
    config_path: ConfigOption = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print a JSON report instead of text."),
    ] = False,
) -> None:
    """Parse every post and check that slugs are unique.

    Exits with status 1 if any post is invalid or two posts share a slug.
    """
    config = _resolve_config(config_path, content_dir, pattern)
    result = _read_posts(config)
    duplicates = find_duplicate_slugs(result.records)
    checked = len(result.records) + len(result.failures)

    if as_json:
        report = {
            "checked": checked,
            "valid": len(result.records),
            "failures": [
                {
                    "path": str(f.path),
                    "error": type(f.error).__name__,
                    "message": str(f.error),
                }
                for f in result.failures
            ],
            "duplicates": [
                {"slug": d.slug, "first": d.first, "second": d.second} for d in duplicates
            ],
        }
        typer.echo(json.dumps(report, indent=2))
    else:
        for failure in result.failures:
            # validation errors already carry the path as their source
            message = str(failure.error)
            if isinstance(failure.error, OSError):
                message = f"{failure.path}: {message}"
            console.print(
                f"[red]✗[/red] [bold]{type(failure.error).__name__}[/bold] {escape(message)}"
            )
        for dup in duplicates:
            console.print(f"[red]✗[/red] [bold]DuplicateSlugError[/bold] {escape(str(dup))}")

        if checked == 0:
            console.print("[yellow]No posts found.[/yellow]")
        elif not result.failures and not duplicates:
            console.print(f"[green]All {checked} post(s) valid.[/green]")
        else:
            console.print(
                f"[red]{len(result.failures)} invalid post(s), "
                f"{len(duplicates)} duplicate slug(s) in {checked} checked.[/red]"
            )

    if result.failures or duplicates:
        raise typer.Exit(1)


@app.command(name="list")
def list_cmd(
    content_dir: DirOption = None,
    pattern: PatternOption = None,
    config_path: ConfigOption = None,
    tag: Annotated[
        Optional[str],
        typer.Option("--tag", "-t", help="Only posts carrying this tag."),
    ] = None,
    featured: Annotated[
        bool,
        typer.Option("--featured", help="Only featured posts."),
    ] = False,
    drafts: Annotated[
        Optional[bool],
        typer.Option("--drafts/--no-drafts", help="Include draft posts."),
    ] = None,
) -> None:
    """List posts, newest first. Drafts are hidden unless requested."""
    config = _resolve_config(config_path, content_dir, pattern, include_drafts=drafts)
    collection = _load_collection(config)

    posts = collection.select(
        tag=tag,
        featured=featured,
        include_drafts=config.listing.include_drafts,
    )
    if not posts:
        console.print("[yellow]No posts found.[/yellow]")
        raise typer.Exit(0)

    table = Table(title=f"Posts ({len(posts)})")
    table.add_column("Date", no_wrap=True)
    table.add_column("Slug", no_wrap=True)
    table.add_column("Title")
    table.add_column("Tags")
    table.add_column("Flags", no_wrap=True)
    for post in posts:
        flags = " ".join(
            name for name, on in (("featured", post.featured), ("draft", post.draft)) if on
        )
        table.add_row(
            post.publication_date.isoformat(),
            escape(post.slug),
            escape(post.title),
            escape(", ".join(post.sorted_tags)),
            flags,
        )
    console.print(table)


def _render_record(record: PostRecord) -> list[str]:
    return [
        f"[bold]{escape(record.title)}[/bold]",
        "",
        f"  Slug:        {escape(record.slug)}",
        f"  Author:      {escape(record.author)}",
        f"  Published:   {record.publication_date.isoformat()}",
        f"  Featured:    {'yes' if record.featured else 'no'}",
        f"  Draft:       {'yes' if record.draft else 'no'}",
        f"  Tags:        {escape(', '.join(record.sorted_tags)) or '-'}",
        f"  Image:       {escape(record.og_image) if record.has_image else '-'}",
        f"  Description: {escape(record.description)}",
        f"  Source:      {escape(record.source or '-')}",
        f"  Body:        {len(record.body.split())} words",
    ]


@app.command()
def show(
    slug: Annotated[str, typer.Argument(help="Slug of the post to show.")],
    content_dir: DirOption = None,
    pattern: PatternOption = None,
    config_path: ConfigOption = None,
) -> None:
    """Show the metadata of a single post."""
    config = _resolve_config(config_path, content_dir, pattern)
    collection = _load_collection(config)

    record = collection.get(slug)
    if record is None:
        console.print(f"[red]Error:[/red] No post with slug '{escape(slug)}'")
        raise typer.Exit(1)

    for line in _render_record(record):
        console.print(line)


@app.command()
def tags(
    content_dir: DirOption = None,
    pattern: PatternOption = None,
    config_path: ConfigOption = None,
) -> None:
    """Count published posts per tag."""
    config = _resolve_config(config_path, content_dir, pattern)
    collection = _load_collection(config)

    counts = collection.tag_counts()
    if not counts:
        console.print("[yellow]No tags found.[/yellow]")
        raise typer.Exit(0)

    table = Table(title="Tags")
    table.add_column("Tag", no_wrap=True)
    table.add_column("Posts", justify="right")
    for name, count in counts.items():
        table.add_row(escape(name), str(count))
    console.print(table)


if __name__ == "__main__":
    app()
