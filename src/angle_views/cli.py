from __future__ import annotations

import argparse
import asyncio
import logging
import re
from pathlib import Path
from typing import Sequence

from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from .clients.gemini_image import GeminiImageClient
from .config import AppConfig, load_config
from .errors import BatchGenerationError
from .ingest import load_source_image
from .tasks.angle_catalog import DEFAULT_CATALOG, AngleCatalog, load_angle_catalog
from .tasks.batch_generator import BatchGenerator, reduce_outcomes
from .types import GenerationOutcome, GenerationSuccess, SourceImage

_EXTENSIONS = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/webp": "webp",
    "image/gif": "gif",
}


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Expected an integer, got {value!r}") from exc
    if number < 1:
        raise argparse.ArgumentTypeError(f"Must be at least 1, got {number}")
    return number


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Generate new camera angles of a single photograph with Gemini."
    )
    parser.add_argument(
        "image",
        type=str,
        help="Path to the source photograph (or a base64 data: URI).",
    )
    parser.add_argument(
        "--catalog",
        type=Path,
        default=None,
        help="Optional JSON list of {label, directive} views replacing the built-in four angles.",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory for generated views (defaults to OUTPUT_ROOT_DIR/<image stem>).",
    )
    parser.add_argument(
        "--dotenv",
        type=Path,
        default=None,
        help="Optional path to a .env file containing the Gemini API key.",
    )
    parser.add_argument(
        "--max-concurrency",
        type=_positive_int,
        default=None,
        help="Cap on simultaneous requests (defaults to one per view).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show per-view diagnostics.",
    )
    return parser.parse_args(argv)


def configure_logging(console: Console, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
    # httpx logs every request at INFO.
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _slug(label: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", label.lower()).strip("-") or "view"


def save_outcomes(outcomes: Sequence[GenerationOutcome], output_dir: Path) -> list[tuple[str, Path]]:
    """Write each successful view to ``output_dir``, named after its own label."""
    output_dir.mkdir(parents=True, exist_ok=True)
    saved: list[tuple[str, Path]] = []
    for index, outcome in enumerate(outcomes, start=1):
        if not isinstance(outcome, GenerationSuccess):
            continue
        extension = _EXTENSIONS.get(outcome.image.mime_type, "bin")
        path = output_dir / f"{index:02d}-{_slug(outcome.spec.label)}.{extension}"
        path.write_bytes(outcome.image.raw_bytes())
        saved.append((outcome.spec.label, path))
    return saved


async def run_batch(
    config: AppConfig,
    source: SourceImage,
    catalog: AngleCatalog,
    *,
    max_concurrency: int | None = None,
) -> list[GenerationOutcome]:
    async with GeminiImageClient(config.gemini) as client:
        generator = BatchGenerator(
            client,
            catalog,
            max_concurrency=(
                max_concurrency if max_concurrency is not None else config.batch.max_concurrency
            ),
        )
        return await generator.run_outcomes(source)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    console = Console()
    configure_logging(console, args.verbose)

    try:
        config = load_config(args.dotenv)
        source = load_source_image(args.image)
        catalog = load_angle_catalog(args.catalog) if args.catalog else DEFAULT_CATALOG
    except (OSError, RuntimeError) as exc:
        console.print(f"[red]{exc}[/red]")
        return 1

    if args.output_dir is not None:
        output_dir = args.output_dir
    else:
        stem = Path(args.image).stem if not args.image.startswith("data:") else "upload"
        output_dir = config.output.root_dir / stem

    with Progress(
        SpinnerColumn(),
        TextColumn("[bold]Gemini[/bold]"),
        TextColumn("{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task(f"Generating {len(catalog)} new angle(s)...", total=None)
        outcomes = asyncio.run(
            run_batch(config, source, catalog, max_concurrency=args.max_concurrency)
        )

    try:
        reduce_outcomes(outcomes)
    except BatchGenerationError as exc:
        console.print(f"[red]Failed to generate images.[/red] {exc}")
        return 1

    saved = save_outcomes(outcomes, output_dir)
    table = Table(title="Generated views")
    table.add_column("View")
    table.add_column("File")
    for label, path in saved:
        table.add_row(label, str(path))
    console.print(table)
    console.print(f"[green]Outputs saved to[/green] {output_dir}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
