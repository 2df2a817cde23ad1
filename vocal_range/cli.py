"""Command-line interface for the vocal range engine.

Provides commands for:
- tune: Per-frame tuner trace of a recording
- range: Full range test from a low and a high recording
- classify: Voice type for a range given as note names
"""

from pathlib import Path
from typing import Any, Dict, List

import typer
from rich.console import Console
from rich.table import Table

from .core import DEFAULT_FRAME_SIZE, DEFAULT_HOP_LENGTH, RegisterCategory, Zone, parse_note

app = typer.Typer(
    name="vocal-range",
    help="Pitch detection and vocal range classification",
    rich_markup_mode="markdown",
)
console = Console()


def _load(input_file: Path, verbose: bool):
    """Load a recording or exit with a readable error."""
    from .input import AudioLoader

    if not input_file.exists():
        console.print(f"[red]Error: File not found: {input_file}[/red]")
        raise typer.Exit(1)

    loader = AudioLoader()
    try:
        audio, sr = loader.load(str(input_file))
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if verbose:
        console.print(f"[blue]Loaded:[/blue] {input_file}")
        console.print(f"  Duration: {loader.get_duration(audio, sr):.2f}s, Sample rate: {sr}Hz")
    return loader, audio, sr


@app.command()
def tune(
    input_file: Path = typer.Argument(..., help="Input audio file"),
    frame_size: int = typer.Option(
        DEFAULT_FRAME_SIZE, "--frame-size", help="Samples per analysis frame"
    ),
    hop_length: int = typer.Option(
        DEFAULT_HOP_LENGTH, "--hop-length", help="Samples between frames"
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Output readings as JSON"
    ),
    verbose: bool = typer.Option(
        False, "-v", "--verbose", help="Verbose output"
    ),
):
    """Show the tuner reading for every frame of a recording.

    A note is in tune when it is within 10 cents of the tempered pitch.

    Examples:
        vocal-range tune take.wav
        vocal-range tune take.wav --json
    """
    from .analysis import Tuner

    loader, audio, sr = _load(input_file, verbose)
    tuner = Tuner()

    readings = [tuner.read(frame, sr) for frame in loader.frames(audio, frame_size, hop_length)]
    times = loader.frame_times(len(readings), sr, hop_length)

    if json_output:
        rows: List[Dict[str, Any]] = []
        for t, reading in zip(times, readings):
            note = reading.note
            rows.append({
                "time": round(float(t), 3),
                "note": note.name if note else None,
                "frequency": round(note.frequency, 2) if note else None,
                "cents": round(note.cents, 1) if note else None,
                "status": reading.status.value,
            })
        console.print_json(data={"file": str(input_file), "readings": rows})
        return

    table = Table(title=f"Tuner: {input_file.name}")
    table.add_column("Time (s)", style="green")
    table.add_column("Note", style="cyan")
    table.add_column("Hz", style="yellow")
    table.add_column("Cents", style="magenta")
    table.add_column("Status")

    status_styles = {"in_tune": "green", "flat": "red", "sharp": "red", "no_signal": "dim"}
    for t, reading in zip(times, readings):
        note = reading.note
        style = status_styles[reading.status.value]
        table.add_row(
            f"{t:.2f}",
            note.name if note else "--",
            f"{note.frequency:.1f}" if note else "",
            f"{note.cents:+.0f}" if note else "",
            f"[{style}]{reading.status.value}[/{style}]",
        )

    console.print(table)
    detected = sum(1 for r in readings if r.detected)
    console.print(f"  Pitched frames: {detected}/{len(readings)}")


@app.command("range")
def range_test(
    low_file: Path = typer.Argument(..., help="Recording of the lowest comfortable notes"),
    high_file: Path = typer.Argument(..., help="Recording of the highest comfortable notes"),
    register: RegisterCategory = typer.Option(
        RegisterCategory.MASCULINE, "--register", "-r", help="Register category"
    ),
    comfort: Zone = typer.Option(
        Zone.MID, "--comfort", "-c", help="Where the voice is most comfortable"
    ),
    difficulty: Zone = typer.Option(
        Zone.HIGH, "--difficulty", "-d", help="Where the voice breaks or strains"
    ),
    stable_frames: int = typer.Option(
        1, "--stable-frames", help="Consecutive identical notes needed to latch"
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Output result as JSON"
    ),
    verbose: bool = typer.Option(
        False, "-v", "--verbose", help="Verbose output"
    ),
):
    """Run a full range test from two recordings.

    The low phase is fed from the first file and the high phase from the
    second, then the range is classified.

    Examples:
        vocal-range range low.wav high.wav --register feminine
        vocal-range range low.wav high.wav -r masculine -c low -d high
    """
    from .session import CaptureConfig, InvalidTransitionError, RangeCaptureSession

    session = RangeCaptureSession(config=CaptureConfig(stable_frames=stable_frames))
    session.begin()
    session.select_register(register)

    try:
        for label, path in (("low", low_file), ("high", high_file)):
            loader, audio, sr = _load(path, verbose)
            if not json_output:
                console.print(f"[cyan]Capturing {label} notes from {path.name}...[/cyan]")
            for frame in loader.frames(audio):
                session.feed(frame, sr)
            if verbose:
                console.print(f"  {session.state.status}")
            session.advance()
    except InvalidTransitionError:
        console.print(f"[red]Error: No usable pitch found in {path}[/red]")
        raise typer.Exit(1)

    session.answer(comfort, difficulty)
    result = session.finish()

    if json_output:
        console.print_json(data=result.to_dict())
        return

    console.print(f"\n[bold]Range:[/bold] {result.range_label}")
    console.print(f"[bold green]Voice type:[/bold green] {result.label}")
    console.print(f"  Margin over runner-up: {result.score_margin:.1f}")
    if verbose:
        _show_scores_table(result.scores)


@app.command()
def classify(
    low: str = typer.Argument(..., help="Lowest note, e.g. A2"),
    high: str = typer.Argument(..., help="Highest note, e.g. D5"),
    register: RegisterCategory = typer.Option(
        RegisterCategory.MASCULINE, "--register", "-r", help="Register category"
    ),
    comfort: Zone = typer.Option(
        Zone.MID, "--comfort", "-c", help="Where the voice is most comfortable"
    ),
    difficulty: Zone = typer.Option(
        Zone.HIGH, "--difficulty", "-d", help="Where the voice breaks or strains"
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Output result as JSON"
    ),
):
    """Classify a range given as note names.

    Examples:
        vocal-range classify A2 D5 --register feminine
        vocal-range classify E2 G4 -r masculine -c low -d high
    """
    from .inference import VocalRangeClassifier

    try:
        low_midi = parse_note(low)
        high_midi = parse_note(high)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if low_midi > high_midi:
        console.print(f"[red]Error: Low note {low} is above high note {high}[/red]")
        raise typer.Exit(1)

    result = VocalRangeClassifier().classify(register, comfort, difficulty, low_midi, high_midi)

    if json_output:
        console.print_json(data=result.to_dict())
        return

    console.print(f"[bold]Range:[/bold] {result.range_label}")
    console.print(f"[bold green]Voice type:[/bold green] {result.label}")
    _show_scores_table(result.scores)


def _show_scores_table(scores: Dict[str, float]):
    """Display candidate scores in a table."""
    from .inference import VOICE_TYPES

    ranges = {p.name: p.description for p in VOICE_TYPES}

    table = Table(title="Candidate Scores")
    table.add_column("Voice Type", style="cyan")
    table.add_column("Reference", style="yellow")
    table.add_column("Score", style="magenta")

    for name, score in scores.items():
        table.add_row(name, ranges.get(name, ""), f"{score:.1f}")

    console.print(table)


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
