"""Command-line interface for Subtitle Studio.

WHY: Users need a simple way to turn an audio file — or an existing SRT
or word-list file — into subtitles from the terminal. The CLI wires
together the full chain — input validation, Gemini transcription (or
file import), optional romanization, the segmentation pipeline, the
selected export formatters, and file saving — behind a single command.

HOW: Uses argparse to accept an input file, language and romanization
options, pipeline settings (a preset plus per-field overrides), output
format selection and output directory. Audio input runs the async Gemini
client via asyncio.run(); subtitle/word-list input goes through the
importers. Status messages go to stderr; output files are saved next to
the source (or to --output-dir).

RULES:
- Positional argument: input file (audio, .srt, .json or .prtranscript)
- Settings start from --preset; --max-chars, --min-duration, --gap-frames,
  --lines and --pause-threshold override individual fields
- --formats: comma-separated export keys (default: all registered)
- Output naming: {stem}{suffix}, numeric suffix on conflict (interview-2.srt)
- Status output goes to stderr (not stdout); -v enables debug logging
- Exit code 1 on any error, 130 on Ctrl-C
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from subtitle_studio.api.client import GeminiClient
from subtitle_studio.config import (
    DEFAULT_LANGUAGE,
    DEFAULT_PRESET,
    SUPPORTED_AUDIO_FORMATS,
    SUPPORTED_IMPORT_FORMATS,
    needs_romanization,
)
from subtitle_studio.core.ir import WordToken
from subtitle_studio.core.pipeline import build_document
from subtitle_studio.core.settings import (
    LINE_MODES,
    PRESETS,
    InvalidConfiguration,
    PipelineConfig,
)
from subtitle_studio.formatters import FORMATTERS, ExportFormat, FormatterOutput
from subtitle_studio.importers import load_words

logger = logging.getLogger(__name__)


def _status(msg: str) -> None:
    """Print a status message to stderr, flushed so it shows immediately."""
    print(msg, file=sys.stderr, flush=True)


def _resolve_output_path(
    stem: str,
    suffix: str,
    output_dir: Path,
) -> Path:
    """Resolve the output file path, adding numeric suffix on conflict.

    WHY: Users may run the tool several times on the same file, and an SRT
    input would otherwise be overwritten by its own SRT export. Numeric
    suffixes (interview-2.srt) prevent data loss.

    HOW: Check if {stem}{suffix} exists. If so, insert an incrementing
    counter before the extension until a free name is found.

    Args:
        stem: Source filename stem (without extension).
        suffix: Formatter's suffix (e.g. ".srt").
        output_dir: Directory to save the output file.

    Returns:
        A Path that does not yet exist.
    """
    base_path = output_dir / "{}{}".format(stem, suffix)
    if not base_path.exists():
        return base_path

    # Split suffix into name part and extension
    # e.g. "-words.json" → ("-words", ".json"), ".srt" → ("", ".srt")
    dot_idx = suffix.rfind(".")
    if dot_idx >= 0:
        suffix_name = suffix[:dot_idx]
        suffix_ext = suffix[dot_idx:]
    else:
        suffix_name = suffix
        suffix_ext = ""

    counter = 2
    while True:
        candidate = output_dir / "{}{}-{}{}".format(stem, suffix_name, counter, suffix_ext)
        if not candidate.exists():
            return candidate
        counter += 1


def _save_output(
    output: FormatterOutput,
    stem: str,
    output_dir: Path,
) -> Path:
    """Write one formatter output as UTF-8 to a conflict-free path."""
    path = _resolve_output_path(stem, output.suffix, output_dir)
    path.write_text(output.content, encoding="utf-8")
    return path


def _parse_formats(value: Optional[str]) -> List[ExportFormat]:
    """Turn the --formats flag into ExportFormat members.

    Raises:
        ValueError: If a key is not a registered export format.
    """
    if not value:
        return list(FORMATTERS.keys())

    formats: List[ExportFormat] = []
    for key in (k.strip() for k in value.split(",")):
        if not key:
            continue
        try:
            formats.append(ExportFormat(key))
        except ValueError:
            available = ", ".join(f.value for f in ExportFormat)
            raise ValueError("Unknown format '{}'. Available formats: {}".format(key, available))
    return formats


def _build_config(args: argparse.Namespace) -> PipelineConfig:
    """Build validated pipeline settings from the preset and CLI overrides.

    Raises:
        InvalidConfiguration: On an unknown preset or out-of-range value.
    """
    config = PipelineConfig.from_preset(
        args.preset,
        max_chars=args.max_chars,
        min_duration=args.min_duration,
        gap_frames=args.gap_frames,
        lines=args.lines,
        pause_threshold=args.pause_threshold,
        disable_pause_split=args.no_pause_split,
    )
    return config.validate()


async def _transcribe(
    input_path: Path,
    language: str,
    romanize: bool,
) -> List[WordToken]:
    """Transcribe (and optionally romanize) an audio file with Gemini."""
    async with GeminiClient() as client:
        words = await client.transcribe_audio(input_path, language, on_status=_status)
        if romanize:
            if needs_romanization(language):
                words = await client.transliterate_words(words, on_status=_status)
            else:
                _status("  Skipping romanization for {}".format(language))
        return words


def _load_input_words(args: argparse.Namespace, input_path: Path) -> List[WordToken]:
    ext = input_path.suffix.lower()
    if ext in SUPPORTED_IMPORT_FORMATS:
        _status("Importing {}...".format(input_path.name))
        words = load_words(input_path)
        _status("  Imported {} words".format(len(words)))
        return words
    return asyncio.run(_transcribe(input_path, args.language, args.romanize))


def run(args: argparse.Namespace) -> List[Path]:
    """Execute the full chain for parsed CLI arguments.

    WHY: Separated from main() so tests can run the pipeline end-to-end and
    inspect the saved files without going through sys.exit.

    HOW: Validate the input and settings before any network call, load or
    transcribe the words, build the document, run each selected formatter
    and save its output.

    Returns:
        Paths of the files that were written.

    Raises:
        ValueError: For invalid input, settings, or formats (including
            InvalidConfiguration and ImportFormatError).
    """
    input_path = Path(args.input_file).resolve()

    if not input_path.is_file():
        raise ValueError("File not found: {}".format(input_path))

    ext = input_path.suffix.lower()
    supported = SUPPORTED_AUDIO_FORMATS | SUPPORTED_IMPORT_FORMATS
    if ext not in supported:
        raise ValueError("Unsupported file type '{}'. Supported formats: {}".format(
            ext, ", ".join(sorted(supported))
        ))

    output_dir = Path(args.output_dir).resolve() if args.output_dir else input_path.parent
    if not output_dir.is_dir():
        raise ValueError("Output directory does not exist: {}".format(output_dir))

    formats = _parse_formats(args.formats)
    config = _build_config(args)

    words = _load_input_words(args, input_path)

    _status("Building subtitles...")
    document = build_document(words, config, source_filename=input_path.name)
    _status("  {} words, {} blocks".format(len(document.words), len(document.blocks)))
    _status("  Settings: {}".format(", ".join(
        "{}={}".format(key, value) for key, value in config.to_dict().items()
    )))

    saved: List[Path] = []
    stem = input_path.stem
    for fmt in formats:
        formatter = FORMATTERS[fmt]()
        for output in formatter.format(document):
            path = _save_output(output, stem, output_dir)
            saved.append(path)
            _status("  Saved: {}".format(path.name))

    return saved


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    Pipeline overrides default to None so "not given" falls back to the
    preset's value.
    """
    parser = argparse.ArgumentParser(
        prog="subtitle_studio",
        description="Transcribe audio with Gemini (or import an SRT/word-list file) "
                    "and export display-ready subtitles (SRT, TXT, CSV, JSON, prtranscript).",
    )

    parser.add_argument(
        "input_file",
        help="Audio file to transcribe, or an .srt/.json/.prtranscript file to re-segment.",
    )

    parser.add_argument(
        "--language",
        default=DEFAULT_LANGUAGE,
        help="Language of the audio as a BCP-47 code (default: %(default)s).",
    )
    parser.add_argument(
        "--romanize",
        action="store_true",
        help="Convert non-English transcripts to Latin script after transcription.",
    )

    parser.add_argument(
        "--preset",
        default=DEFAULT_PRESET,
        choices=sorted(PRESETS.keys()),
        help="Starting pipeline settings (default: %(default)s).",
    )
    parser.add_argument(
        "--max-chars",
        type=int,
        default=None,
        help="Maximum characters per subtitle line.",
    )
    parser.add_argument(
        "--min-duration",
        type=float,
        default=None,
        help="Minimum subtitle duration in seconds.",
    )
    parser.add_argument(
        "--gap-frames",
        type=int,
        default=None,
        help="Minimum gap between subtitles, in frames at 30 fps.",
    )
    parser.add_argument(
        "--lines",
        choices=LINE_MODES,
        default=None,
        help="Lines per subtitle block.",
    )
    pause = parser.add_mutually_exclusive_group()
    pause.add_argument(
        "--pause-threshold",
        type=float,
        default=None,
        help="Silence in seconds that starts a new line (default: 0.7).",
    )
    pause.add_argument(
        "--no-pause-split",
        action="store_true",
        help="Break lines on length only, ignoring pauses.",
    )

    parser.add_argument(
        "--formats",
        default=None,
        help="Comma-separated list of export formats. "
             "Available: {}. Default: all.".format(", ".join(f.value for f in ExportFormat)),
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory to save output files (default: same as input file).",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for ``python -m subtitle_studio`` and the console script."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        saved = run(args)
    except KeyboardInterrupt:
        _status("\nCancelled by user.")
        sys.exit(130)
    except InvalidConfiguration as e:
        print("Error: Invalid settings: {}".format(e), file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        # Input, format, import and API-key errors
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        logger.debug("Unhandled error", exc_info=True)
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)

    _status("")
    _status("Done! Saved {} file(s).".format(len(saved)))


if __name__ == "__main__":
    main()
