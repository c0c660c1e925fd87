import argparse
import dataclasses
import json
import sys
from pathlib import Path

from .config import get_settings
from .errors import InvalidSourceError
from .log import configure_logging
from .pipeline.runner import PipelineFactory


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Transcribe an Instagram reel")
    parser.add_argument("url", help="Instagram post or reel URL")
    parser.add_argument("--output", help="Write the transcript to this file instead of stdout")
    parser.add_argument("--tmp-dir", help="Scratch directory for downloaded media")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose)

    settings = get_settings()
    if args.tmp_dir:
        settings = dataclasses.replace(settings, scratch_dir=Path(args.tmp_dir))

    runner = PipelineFactory(settings, show_progress=True).create()
    try:
        result = runner.run(args.url)
    except InvalidSourceError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    if not result.ok:
        print(json.dumps(result.as_payload(), ensure_ascii=False), file=sys.stderr)
        return 1

    text = result.transcript.text
    if args.output:
        Path(args.output).write_text(text + "\n", encoding="utf-8")
        print(f"Done. Output: {args.output}")
    else:
        print(text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
