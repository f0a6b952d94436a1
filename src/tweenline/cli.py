from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from .config import ConfigError, load_config_or_default
from .document import TimelineDocument
from .editor import TimelineEditor
from .events import names
from .io import save_document, write_jsonschema
from .log import configure_logging
from .playback import BlockingTickSource
from .rules import InvalidFormat
from .schema import Folder, Layer, TimelineData
from .validate import validate_file

app = typer.Typer(add_completion=False, no_args_is_help=True)
console = Console()


def _config(ctx: typer.Context):
    return ctx.obj["config"]


def _open(ctx: typer.Context, doc_path: Path, **kwargs) -> TimelineEditor:
    try:
        return TimelineEditor.open(doc_path, config=_config(ctx), **kwargs)
    except InvalidFormat as e:
        console.print(f"[bold red]Cannot load[/bold red] {doc_path}: {e}")
        raise typer.Exit(code=2) from e


def _finish(editor: TimelineEditor, doc_path: Path, ok: bool, what: str) -> None:
    if not ok:
        console.print(f"[bold red]Refused[/bold red] {what}")
        raise typer.Exit(code=1)
    editor.save(doc_path)
    console.print(f"[bold green]OK[/bold green] {what}")


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Optional[Path] = typer.Option(None, "--config", help="Path to tweenline.toml"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override configured log level"),
):
    try:
        config = load_config_or_default(config_path)
    except ConfigError as e:
        console.print(f"[bold red]Config error:[/bold red] {e}")
        raise typer.Exit(code=2) from e
    configure_logging((log_level or config.logging.level).upper())
    ctx.obj = {"config": config}


@app.command()
def new(
    ctx: typer.Context,
    out: Path = typer.Argument(..., dir_okay=False),
    frames: Optional[int] = typer.Option(None, "--frames", min=1),
    fps: Optional[float] = typer.Option(None, "--fps", min=0.001),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
):
    if out.exists() and not force:
        console.print(f"[bold red]Already exists:[/bold red] {out}")
        console.print("Use --force to overwrite.")
        raise typer.Exit(code=2)

    settings = _config(ctx).defaults.to_settings()
    if frames is not None:
        settings.total_frames = frames
    if fps is not None:
        settings.frame_rate = fps
    save_document(TimelineDocument(TimelineData(settings=settings)), out)
    console.print(f"[bold green]Created[/bold green] {out}")


@app.command()
def validate(
    doc_path: Path = typer.Argument(..., exists=True, dir_okay=False),
    strict: bool = typer.Option(False, "--strict", help="Fail on consistency warnings"),
):
    res = validate_file(doc_path, strict=strict)
    if res.errors:
        console.print("[bold red]Errors[/bold red]")
        for e in res.errors:
            console.print(f"- {e}")
    if res.warnings:
        console.print("[bold yellow]Warnings[/bold yellow]")
        for w in res.warnings:
            console.print(f"- {w}")
    if res.ok:
        console.print("[bold green]OK[/bold green]")
        raise typer.Exit(code=0)
    raise typer.Exit(code=2 if res.errors else 3)


@app.command()
def info(ctx: typer.Context, doc_path: Path = typer.Argument(..., exists=True, dir_okay=False)):
    editor = _open(ctx, doc_path)
    doc = editor.document
    s = doc.settings

    table = Table(title=f"{doc_path.name} (v{doc.data.version})")
    table.add_column("Id")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Flags")
    table.add_column("Keyframes", justify="right")
    table.add_column("Tweens", justify="right")

    def add_rows(nodes, depth: int) -> None:
        for node in nodes:
            flags = ("" if node.visible else "hidden ") + ("locked" if node.locked else "")
            if isinstance(node, Layer):
                table.add_row(
                    "  " * depth + node.id, node.name, "layer", flags.strip(),
                    str(len(node.keyframes)), str(len(node.tweens)),
                )
            elif isinstance(node, Folder):
                table.add_row("  " * depth + node.id, node.name, "folder", flags.strip(), "", "")
                add_rows(node.children, depth + 1)

    add_rows(doc.data.layers, 0)
    console.print(table)
    console.print(
        f"{s.total_frames} frames @ {s.frame_rate:g} fps ({doc.duration:.2f}s), "
        + ", ".join(f"{k}={v}" for k, v in doc.stats().items())
    )


@app.command("add-layer")
def add_layer(
    ctx: typer.Context,
    doc_path: Path = typer.Argument(..., exists=True, dir_okay=False),
    name: str = typer.Argument(...),
    parent: Optional[str] = typer.Option(None, "--parent", help="Folder id"),
):
    editor = _open(ctx, doc_path)
    layer = editor.layers.add_layer(name, parent)
    _finish(editor, doc_path, layer is not None, f"add layer {layer.id if layer else name}")


@app.command("add-folder")
def add_folder(
    ctx: typer.Context,
    doc_path: Path = typer.Argument(..., exists=True, dir_okay=False),
    name: str = typer.Argument(...),
    parent: Optional[str] = typer.Option(None, "--parent", help="Folder id"),
):
    editor = _open(ctx, doc_path)
    folder = editor.layers.add_folder(name, parent)
    _finish(editor, doc_path, folder is not None, f"add folder {folder.id if folder else name}")


@app.command("key")
def key(
    ctx: typer.Context,
    doc_path: Path = typer.Argument(..., exists=True, dir_okay=False),
    layer_id: str = typer.Argument(...),
    frame: int = typer.Argument(..., min=1),
    blank: bool = typer.Option(False, "--blank", help="Insert a blank keyframe"),
):
    editor = _open(ctx, doc_path)
    if blank:
        ok = editor.keyframes.insert_blank_keyframe(layer_id, frame)
    else:
        ok = editor.keyframes.insert_keyframe(layer_id, frame)
    _finish(editor, doc_path, ok, f"keyframe {layer_id}:{frame}")


@app.command("insert-frame")
def insert_frame(
    ctx: typer.Context,
    doc_path: Path = typer.Argument(..., exists=True, dir_okay=False),
    layer_id: str = typer.Argument(...),
    frame: int = typer.Argument(..., min=1),
):
    editor = _open(ctx, doc_path)
    ok = editor.keyframes.insert_frame(layer_id, frame)
    _finish(editor, doc_path, ok, f"insert frame {layer_id}:{frame}")


@app.command("delete-frames")
def delete_frames(
    ctx: typer.Context,
    doc_path: Path = typer.Argument(..., exists=True, dir_okay=False),
    layer_id: str = typer.Argument(...),
    start: int = typer.Argument(..., min=1),
    end: Optional[int] = typer.Argument(None, min=1),
):
    editor = _open(ctx, doc_path)
    end = start if end is None else end
    ok = editor.keyframes.delete_frames(layer_id, start, end)
    _finish(editor, doc_path, ok, f"delete frames {layer_id}:{start}-{end}")


@app.command("tween")
def tween(
    ctx: typer.Context,
    doc_path: Path = typer.Argument(..., exists=True, dir_okay=False),
    layer_id: str = typer.Argument(...),
    start: int = typer.Argument(..., min=1),
    end: int = typer.Argument(..., min=1),
    tween_type: str = typer.Option("linear", "--type", help="Easing label"),
):
    editor = _open(ctx, doc_path)
    ok = editor.tweens.create_motion_tween(layer_id, start, end, tween_type)
    _finish(editor, doc_path, ok, f"tween {layer_id} {start}-{end}")


@app.command("play")
def play(
    ctx: typer.Context,
    doc_path: Path = typer.Argument(..., exists=True, dir_okay=False),
    frames: Optional[int] = typer.Option(None, "--frames", min=1, help="Frame advances before stopping"),
    start_frame: int = typer.Option(1, "--from", min=1, help="Frame to start from"),
):
    """Play the timeline in real time and print every frame entered."""
    ticks = BlockingTickSource(_config(ctx).playback.refresh_hz)
    editor = _open(ctx, doc_path, tick_source=ticks)
    limit = frames or editor.document.settings.total_frames
    entered = 0

    def on_frame(payload: dict) -> None:
        nonlocal entered
        entered += 1
        hits = payload["keyframeIdsOnFrame"]
        suffix = f"  [cyan]{', '.join(hits)}[/cyan]" if hits else ""
        console.print(f"frame {payload['currentFrame']:>4}{suffix}")
        if entered >= limit:
            editor.playback.pause()

    editor.events.on(names.FRAME_ENTER, on_frame)
    editor.events.on(names.PLAYBACK_LOOP, lambda _: console.print("[dim]-- loop --[/dim]"))

    editor.playback.go_to_frame(start_frame)
    editor.playback.play()
    ticks.run()
    console.print(f"Stopped at frame {editor.playback.current_frame} after {entered} frames")


@app.command("export-jsonschema")
def export_jsonschema(out_dir: Path = typer.Option(Path("docs/jsonschema"), "--out-dir")):
    out_path = write_jsonschema(out_dir / "timeline.schema.json")
    console.print(f"Wrote {out_path}")


if __name__ == "__main__":
    app()
