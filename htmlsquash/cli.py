"""Command-line interface for htmlsquash."""

import argparse
from pathlib import Path
from typing import Any, Iterable, Optional

import yaml
from pydantic import ValidationError

from .io_utils import STDIO, emit, read_text, warn
from .minifier import Squasher
from .options import MinifyOptions, load_options


def _load_config(path: Optional[str]) -> dict[str, Any]:
    if not path:
        return {}
    config_path = Path(path)
    if not config_path.exists():
        raise SystemExit(f"Config file not found: {config_path}")
    try:
        options = load_options(config_path)
    except (yaml.YAMLError, ValueError) as exc:
        raise SystemExit(f"Invalid options in {config_path}: {exc}") from exc
    return options.model_dump(exclude_unset=True)


def _build_squasher(args: argparse.Namespace, **overrides: Any) -> Squasher:
    data = _load_config(args.config)
    data.update(overrides)
    try:
        return Squasher(MinifyOptions.model_validate(data))
    except ValidationError as exc:
        raise SystemExit(f"Invalid options: {exc}") from exc


def _html_overrides(args: argparse.Namespace) -> dict[str, bool]:
    overrides: dict[str, bool] = {}
    if args.keep_comments:
        overrides["remove_comments"] = False
    if args.keep_tags:
        overrides["omit_tags"] = False
    if args.keep_spaces:
        overrides["compress_spaces"] = False
    if args.no_js:
        overrides["minify_javascript"] = False
    if args.no_css:
        overrides["minify_css"] = False
    return overrides


def _output_path(args: argparse.Namespace, source: str) -> Optional[Path]:
    if args.out_dir:
        if source == STDIO:
            raise SystemExit("--out-dir cannot be used with standard input.")
        return Path(args.out_dir) / Path(source).name
    return Path(args.out) if args.out else None


def _handle_html(args: argparse.Namespace) -> None:
    if len(args.inputs) > 1 and not args.out_dir:
        raise SystemExit("Minifying several files requires --out-dir.")
    if args.out and args.out_dir:
        raise SystemExit("Use either --out or --out-dir, not both.")

    # One instance for every file so the script and style caches are shared.
    squasher = _build_squasher(args, **_html_overrides(args))
    for source in args.inputs:
        content = read_text(source)
        minified = squasher.minify_html(content)
        if minified == content:
            warn(f"{source}: left unchanged (not an HTML5 document or already minified).")
        elif args.verbose:
            warn(f"{source}: {len(content)} -> {len(minified)} characters")
        emit(minified, _output_path(args, source))


def _handle_css(args: argparse.Namespace) -> None:
    squasher = _build_squasher(args)
    emit(squasher.minify_css(read_text(args.input)), args.out)


def _handle_js(args: argparse.Namespace) -> None:
    squasher = _build_squasher(args)
    emit(squasher.minify_js(read_text(args.input)), args.out)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        help="YAML file with minifier options.",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="htmlsquash",
        description="Minify HTML documents and the JavaScript and CSS inside them.",
    )
    subparsers = parser.add_subparsers(dest="command")

    html_parser = subparsers.add_parser(
        "html",
        help="Minify HTML documents.",
        description=(
            "Minify complete HTML5 documents. Input without <!DOCTYPE html> is "
            "written out unchanged."
        ),
    )
    html_parser.add_argument(
        "inputs",
        nargs="*",
        default=[STDIO],
        help="HTML files to minify ('-' reads standard input).",
    )
    html_parser.add_argument("--out", help="File to write the minified document to.")
    html_parser.add_argument(
        "--out-dir",
        dest="out_dir",
        help="Directory to write minified files into, keeping their names.",
    )
    html_parser.add_argument(
        "--keep-comments", action="store_true", help="Do not remove comments."
    )
    html_parser.add_argument(
        "--keep-tags", action="store_true", help="Do not omit optional tags."
    )
    html_parser.add_argument(
        "--keep-spaces", action="store_true", help="Do not compress whitespace."
    )
    html_parser.add_argument(
        "--no-js", action="store_true", help="Leave embedded JavaScript alone."
    )
    html_parser.add_argument(
        "--no-css", action="store_true", help="Leave embedded CSS alone."
    )
    html_parser.add_argument(
        "--verbose", action="store_true", help="Report size savings on stderr."
    )
    _add_common_arguments(html_parser)
    html_parser.set_defaults(func=_handle_html)

    css_parser = subparsers.add_parser(
        "css", help="Minify a style sheet.", description="Minify a CSS file."
    )
    css_parser.add_argument(
        "input", nargs="?", default=STDIO, help="CSS file ('-' reads standard input)."
    )
    css_parser.add_argument("--out", help="File to write the minified CSS to.")
    _add_common_arguments(css_parser)
    css_parser.set_defaults(func=_handle_css)

    js_parser = subparsers.add_parser(
        "js", help="Minify a script.", description="Minify a JavaScript file."
    )
    js_parser.add_argument(
        "input",
        nargs="?",
        default=STDIO,
        help="JavaScript file ('-' reads standard input).",
    )
    js_parser.add_argument("--out", help="File to write the minified JavaScript to.")
    _add_common_arguments(js_parser)
    js_parser.set_defaults(func=_handle_js)

    return parser


def main(argv: Optional[Iterable[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    if hasattr(args, "func"):
        args.func(args)
    else:
        parser.print_help()


__all__ = ["build_parser", "main"]


if __name__ == "__main__":
    main()
