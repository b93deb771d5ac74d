"""chunkpy CLI - Main commands."""
import asyncio
import logging
import signal
from pathlib import Path

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, TaskProgressColumn

from chunkpy.core.utils import human_size, human_interval

app = typer.Typer(
    name="chunkpy",
    help="Resumable chunked file uploads",
    add_completion=False
)
console = Console()


@app.callback()
def cli():
    """Resumable chunked file uploads."""


def run_async(coro):
    """Run async function."""
    return asyncio.run(coro)


def format_status(status) -> str:
    """One-line summary of an UploadStatus."""
    return (
        f"{human_size(status.speed, 1)}/s ({human_size(status.chunk)}) "
        f"{human_interval(status.elapsed)} / {human_interval(status.estimate)}"
    )


@app.command()
def upload(
    file_path: Path = typer.Argument(..., help="Local file to upload", exists=True, dir_okay=False),
    url: str = typer.Option(..., "--url", "-u", help="Upload API endpoint"),
    name: str = typer.Option(None, "--name", "-n", help="File name sent to the server"),
    min_chunk: int = typer.Option(1024, "--min-chunk", help="Minimum chunk size, bytes"),
    max_chunk: int = typer.Option(20 * 1024 * 1024, "--max-chunk", help="Maximum chunk size, bytes"),
    interval: float = typer.Option(3.0, "--interval", help="Target request duration, seconds"),
    retry_limit: int = typer.Option(3, "--retry-limit", help="Retries before pausing"),
    retry_interval: float = typer.Option(1.0, "--retry-interval", help="Seconds between retries"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logs"),
):
    """Upload a file. Ctrl-C pauses; you can then resume or cancel."""
    from chunkpy import (
        UploadFacade, UploadConfig, ChunkSizeConfig, RetryConfig,
        Phase, UploadError, setup_logging
    )

    if verbose:
        logging.basicConfig(format="%(asctime)s %(name)s %(levelname)s %(message)s")
        setup_logging(logging.DEBUG)

    try:
        config = UploadConfig(
            chunk_size=ChunkSizeConfig(minimum=min_chunk, maximum=max_chunk),
            interval=interval,
            retry=RetryConfig(limit=retry_limit, interval=retry_interval)
        )
    except UploadError as e:
        console.print(f"[red]Invalid options: {e}[/red]")
        raise typer.Exit(1)

    async def do_upload():
        async with UploadFacade(url, config) as uploader:
            try:
                engine = uploader.create_engine(file_path, name=name)
            except UploadError as e:
                console.print(f"[red]{e}[/red]")
                raise typer.Exit(1)

            loop = asyncio.get_running_loop()
            try:
                loop.add_signal_handler(signal.SIGINT, engine.pause)
                handles_sigint = True
            except (NotImplementedError, RuntimeError):
                handles_sigint = False

            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                TaskProgressColumn(),
                TextColumn("{task.fields[info]}"),
                console=console
            ) as progress:
                task = progress.add_task(
                    f"Uploading {engine.source.name}",
                    total=engine.source.size or 1,
                    info=""
                )

                def on_iteration(status):
                    progress.update(task, completed=status.bytes, info=format_status(status))

                engine.on('iteration', on_iteration)
                engine.on('timeout', lambda action: progress.console.print(
                    f"[yellow]Server is not responding ({action}), upload paused[/yellow]"
                ))
                engine.on('error', lambda error: progress.console.print(f"[red]{error}[/red]"))

                try:
                    await engine.start()
                    while not engine.phase.is_terminal:
                        progress.stop()
                        if typer.confirm("Upload stopped. Resume?", default=True):
                            progress.start()
                            await engine.resume()
                        else:
                            await engine.cancel()
                except UploadError as e:
                    console.print(f"[red]Upload failed: {e}[/red]")
                    raise typer.Exit(1)
                finally:
                    if handles_sigint:
                        loop.remove_signal_handler(signal.SIGINT)
                    await engine.source.close()

            if engine.phase is Phase.FINISHED:
                status = engine.status
                console.print(
                    f"[green]Uploaded {engine.source.name}: {human_size(engine.source.size, 1)} "
                    f"in {human_interval(status.elapsed)} ({human_size(status.speed, 1)}/s)[/green]"
                )
            elif engine.phase is Phase.CANCELLED:
                console.print("[yellow]Upload cancelled[/yellow]")

    run_async(do_upload())


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
