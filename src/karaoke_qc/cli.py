"""Command-line interface using Click."""

import json
import logging
import sys
from pathlib import Path
from typing import List

import click

from . import __version__
from .core.alignment import align_lyrics_to_timings
from .core.flags import generate_flags
from .core.models import FLAG_COUNT_KEYS, AlignmentEdge, EdgeType, FlagReport, SongData
from .core.serialization import (
    flag_report_to_json,
    load_song_json,
    word_timing_from_dict,
)
from .core.session import EditorSession
from .core.similarity import similarity as word_similarity
from .exceptions import KaraokeQCError, SongDataError
from .utils.logging import setup_logging
from .utils.validation import (
    find_out_of_order_words,
    validate_output_path,
    validate_word_timings,
)

EDGE_MARKERS = {
    EdgeType.MATCH: "=",
    EdgeType.MISMATCH: "~",
    EdgeType.MISSING_TIMING: "-",
    EdgeType.EXTRA_TIMING: "+",
}


def _format_summary(report: FlagReport) -> List[str]:
    lines = [f"Total flags: {report.total_flags}"]
    for key in FLAG_COUNT_KEYS:
        count = report.flag_counts.get(key, 0)
        if count:
            lines.append(f"  {key}: {count}")
    return lines


def _format_word_flags(song: SongData, report: FlagReport, show_clean: bool) -> List[str]:
    lines = []
    for i, timing in enumerate(song.word_timings):
        if report.is_clean(i):
            if not show_clean:
                continue
            label = "ok"
        else:
            label = ", ".join(f.message for f in report.word_flags[i])
        lines.append(
            f"[{i:4d}] {timing.start:8.2f}-{timing.end:8.2f}  {timing.word!r}: {label}"
        )
    return lines


def _format_edge(edge: AlignmentEdge) -> str:
    marker = EDGE_MARKERS[edge.edge_type]
    lyric = edge.lyric_word if edge.lyric_word is not None else ""
    timed = edge.timing_word if edge.timing_word is not None else ""
    index = "" if edge.timing_index is None else f"#{edge.timing_index}"
    line = f"{marker} {lyric:<20} {timed:<20} {index}"
    if edge.similarity is not None:
        line += f" ({edge.similarity:.2f})"
    return line.rstrip()


def _load_timings_file(path: Path):
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise SongDataError(f"Cannot read timings from {path}: {e}")
    if isinstance(data, dict):
        data = data.get("word_timings", [])
    if not isinstance(data, list):
        raise SongDataError(f"{path} does not contain a word timing array")
    return [word_timing_from_dict(w) for w in data]


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--log-file', type=click.Path(), help='Log to file')
@click.pass_context
def cli(ctx, verbose, log_file):
    """karaoke-qc - Check karaoke word timings against lyrics."""
    ctx.ensure_object(dict)
    logger = setup_logging(
        level="DEBUG" if verbose else "INFO",
        log_file=Path(log_file) if log_file else None,
        verbose=verbose
    )
    ctx.obj['logger'] = logger


@cli.command()
@click.argument('song_json', type=click.Path(exists=True, dir_okay=False))
@click.option('--json', 'as_json', is_flag=True, help='Print the full report as JSON')
@click.option('--show-clean', is_flag=True, help='Also list words without flags')
@click.pass_context
def check(ctx, song_json, as_json, show_clean):
    """Flag timing and text problems in a song file."""
    logger = ctx.obj['logger']
    if as_json:
        # stdout carries the report, so only errors may be logged there
        logger.setLevel(logging.ERROR)
    try:
        song = load_song_json(song_json)
        find_out_of_order_words(song.word_timings)
        report = generate_flags(song)
    except KaraokeQCError as e:
        logger.error(f"❌ {e}")
        sys.exit(1)

    if as_json:
        click.echo(flag_report_to_json(report))
        return

    click.echo(f"{song.title} - {song.artist} ({len(song.word_timings)} words)")
    for line in _format_word_flags(song, report, show_clean):
        click.echo(line)
    for line in _format_summary(report):
        click.echo(line)


@cli.command()
@click.argument('lyrics_file', type=click.Path(exists=True, dir_okay=False))
@click.argument('timings_json', type=click.Path(exists=True, dir_okay=False))
@click.option('--json', 'as_json', is_flag=True, help='Print the alignment as JSON')
@click.pass_context
def align(ctx, lyrics_file, timings_json, as_json):
    """Align a lyrics text file to a word timing file."""
    logger = ctx.obj['logger']
    if as_json:
        logger.setLevel(logging.ERROR)
    try:
        lyrics_text = Path(lyrics_file).read_text(encoding="utf-8")
        timings = _load_timings_file(Path(timings_json))
    except (OSError, KaraokeQCError) as e:
        logger.error(f"❌ {e}")
        sys.exit(1)

    edges = align_lyrics_to_timings(lyrics_text, timings)
    if as_json:
        click.echo(json.dumps([e.to_dict() for e in edges], ensure_ascii=False, indent=2))
        return
    for edge in edges:
        click.echo(_format_edge(edge))


@cli.command()
@click.argument('word_a')
@click.argument('word_b')
def similarity(word_a, word_b):
    """Print the similarity score between two words."""
    click.echo(f"{word_similarity(word_a, word_b):.4f}")


@cli.command('fix-overlaps')
@click.argument('song_json', type=click.Path(exists=True, dir_okay=False))
@click.option('-o', '--output', help='Output path (defaults to overwriting the input)')
@click.pass_context
def fix_overlaps(ctx, song_json, output):
    """Shorten words that run into the next word."""
    logger = ctx.obj['logger']
    try:
        output_path = validate_output_path(output) if output else Path(song_json)
        session = EditorSession(load_song_json(song_json))
        fixed = session.auto_fix_overlaps()
        if fixed:
            validate_word_timings(session.word_timings)
            session.save(output_path)
    except KaraokeQCError as e:
        logger.error(f"❌ {e}")
        sys.exit(1)

    click.echo(f"Fixed {fixed} overlapping word(s)")
    for line in _format_summary(session.report):
        click.echo(line)


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == '__main__':
    main()
