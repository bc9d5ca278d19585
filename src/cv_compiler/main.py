# Copyright 2026 Justin Cook
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Main entry point for the CV compiler CLI.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler

from cv_compiler.compiler import compile_document
from cv_compiler.errors import CVCompilerError
from cv_compiler.identity import known_element_ids
from cv_compiler.ingest import load_content, load_descriptor, load_overrides, read_bytes, set_ca_bundle_override
from cv_compiler.inspection import layout_signature
from cv_compiler.models import ProtectionSettings, RenderMode
from cv_compiler.settings import Settings
from cv_compiler.tokens import resolve_tokens
from cv_compiler.watermark import watermark_pdf

logger = logging.getLogger(__name__)

console = Console(stderr=True)


def setup_logging(verbosity: int, quiet: bool = False, log_file: Optional[str] = None,
                  custom_handler: Optional[logging.Handler] = None):
    """
    Configures logging:
    - File: --log-file or CV_LOG_FILE, when given (DEBUG)
    - Console: default=WARNING, -v=INFO, -vv=DEBUG, -q=ERROR
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for handler in list(root.handlers):
        root.removeHandler(handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
        root.addHandler(file_handler)

    if quiet:
        level = logging.ERROR
    elif verbosity <= 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    handler = custom_handler or RichHandler(console=console, show_time=False, show_path=False)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter('%(message)s'))
    root.addHandler(handler)

    if verbosity < 2:
        logging.getLogger("urllib3").setLevel(logging.WARNING)
        logging.getLogger("pypdf").setLevel(logging.ERROR)


def _write_text(text: str, output: Optional[str]):
    if not output:
        sys.stdout.write(text)
        if not text.endswith("\n"):
            sys.stdout.write("\n")
        return
    path = Path(output)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    logger.info(f"Wrote {path}")


def _cmd_compile(args, settings: Settings) -> int:
    content = load_content(args.content)
    tokens = resolve_tokens(load_descriptor(args.style))
    overrides = load_overrides(args.overrides)
    mode = RenderMode(args.mode)
    protection = None
    if mode is RenderMode.PREVIEW_PROTECTED:
        protection = ProtectionSettings(
            watermark_text=args.watermark_text or settings.watermark_text,
            block_copy=not args.allow_copy,
        )
    logger.info(f"Compiling '{content.full_name}' ({mode.value}, style '{tokens.style_name}')")
    html = compile_document(content, tokens, overrides, mode, protection,
                            channel_id=args.channel or settings.channel_id)
    _write_text(html, args.output)
    return 0


def _cmd_resolve(args, settings: Settings) -> int:
    tokens = resolve_tokens(load_descriptor(args.style))
    if args.output:
        _write_text(json.dumps(tokens.to_dict(), indent=2), args.output)
    else:
        Console().print_json(data=tokens.to_dict())
    return 0


def _cmd_ids(args, settings: Settings) -> int:
    content = load_content(args.content)
    tokens = resolve_tokens(load_descriptor(args.style))
    _write_text("\n".join(known_element_ids(content, tokens)), args.output)
    return 0


def _cmd_watermark(args, settings: Settings) -> int:
    text = args.text or settings.watermark_text
    pdf_bytes = read_bytes(args.input)
    stamped = watermark_pdf(pdf_bytes, text)
    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(stamped)
    logger.info(f"Wrote watermarked PDF to {output}")
    return 0


def _cmd_fidelity(args, settings: Settings) -> int:
    documents = [read_bytes(path).decode("utf-8", errors="replace") for path in (args.first, args.second)]
    if layout_signature(documents[0]) == layout_signature(documents[1]):
        logger.info("Layouts match")
        console.print("[green]Layouts match[/green]")
        return 0
    logger.error(f"Layouts differ between {args.first} and {args.second}")
    return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cv-compiler", description="Compile CV content and style into HTML")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="Increase output verbosity (-v=INFO, -vv=DEBUG)")
    parser.add_argument("-q", "--quiet", action="store_true", help="Suppress status output (ERROR only)")
    parser.add_argument("--log-file", help="Also write a DEBUG log to this file (default: $CV_LOG_FILE)")
    parser.add_argument("--ca-bundle",
                        help="Path to a custom CA certificate bundle for HTTPS verification (proxy environments)")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("compile", help="Compile a CV to a self-contained HTML document")
    p.add_argument("--content", required=True, help="Path or URL to the CV content JSON")
    p.add_argument("--style", required=True, help="Path or URL to the style descriptor JSON")
    p.add_argument("--overrides", help="Path or URL to the element overrides JSON")
    p.add_argument("--mode", default=RenderMode.EXPORT.value, choices=[m.value for m in RenderMode])
    p.add_argument("--watermark-text", help="Watermark for preview-protected mode (default: $CV_WATERMARK_TEXT)")
    p.add_argument("--allow-copy", action="store_true", help="Do not block copying in preview-protected mode")
    p.add_argument("--channel", help="Message channel id for interactive mode (default: $CV_CHANNEL_ID)")
    p.add_argument("--output", help="Output file (default: stdout)")
    p.set_defaults(handler=_cmd_compile)

    p = sub.add_parser("resolve", help="Print the tokens a style descriptor resolves to")
    p.add_argument("--style", required=True, help="Path or URL to the style descriptor JSON")
    p.add_argument("--output", help="Write JSON to this file instead of the console")
    p.set_defaults(handler=_cmd_resolve)

    p = sub.add_parser("ids", help="List the element ids a CV exposes for overrides")
    p.add_argument("--content", required=True, help="Path or URL to the CV content JSON")
    p.add_argument("--style", required=True, help="Path or URL to the style descriptor JSON")
    p.add_argument("--output", help="Output file (default: stdout)")
    p.set_defaults(handler=_cmd_ids)

    p = sub.add_parser("watermark", help="Stamp a preview watermark onto an exported PDF")
    p.add_argument("--input", required=True, help="Path or URL to the exported PDF")
    p.add_argument("--output", required=True, help="Where to write the watermarked PDF")
    p.add_argument("--text", help="Watermark text (default: $CV_WATERMARK_TEXT)")
    p.set_defaults(handler=_cmd_watermark)

    p = sub.add_parser("fidelity", help="Check two compiled documents share the same layout")
    p.add_argument("first", help="First HTML document")
    p.add_argument("second", help="Second HTML document")
    p.set_defaults(handler=_cmd_fidelity)
    return parser


def main(argv: Optional[List[str]] = None):
    try:
        code = _main_cli(argv)
    except KeyboardInterrupt:
        sys.stderr.write("\n\033[31m[-] Cancelled by user\033[0m\n")
        sys.exit(130)
    sys.exit(code)


def _main_cli(argv: Optional[List[str]] = None) -> int:
    """
    Parses arguments, sets up logging and runs the chosen command.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = Settings.from_env()
    except CVCompilerError as e:
        setup_logging(args.verbose, args.quiet)
        logger.error(str(e))
        return 1

    setup_logging(args.verbose, args.quiet, args.log_file or settings.log_file)
    if args.ca_bundle:
        set_ca_bundle_override(args.ca_bundle)

    try:
        return args.handler(args, settings)
    except CVCompilerError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1


if __name__ == "__main__":
    main()
