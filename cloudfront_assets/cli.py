"""Command line entry point for the stylesheet build step."""

from __future__ import annotations

import argparse
import os
import shutil
import sys
from pathlib import Path

from cloudfront_assets.config import ConfigurationError, Settings, configure
from cloudfront_assets.observability.logging import configure_logging
from cloudfront_assets.services.asset_index import AssetIndex
from cloudfront_assets.services.css_rewriter import (
    StylesheetRewriter,
    iter_stylesheets,
)
from cloudfront_assets.services.keys import key_for_path
from cloudfront_assets.services.rewriter import AssetPathRewriter


def print_success(message: str) -> None:
    print(f"✓ {message}")


def print_error(message: str) -> None:
    print(f"✗ {message}", file=sys.stderr)


def _build_index(settings: Settings, manifest: str | None) -> AssetIndex:
    if manifest:
        return AssetIndex.from_manifest(Path(manifest), settings.public_root)
    return AssetIndex.from_asset_dirs(settings.public_root, settings.asset_dirs)


def rewrite_css(args: argparse.Namespace, settings: Settings) -> int:
    index = _build_index(settings, args.manifest)
    rewriter = StylesheetRewriter(AssetPathRewriter(settings, index))

    stylesheets = [Path(p) for p in args.stylesheets] or list(
        iter_stylesheets(settings)
    )
    if not stylesheets:
        print_error(f"No stylesheets found under {settings.stylesheets_root}")
        return 1

    output_dir = Path(args.output_dir) if args.output_dir else None
    for stylesheet in stylesheets:
        if not stylesheet.is_file():
            print_error(f"Stylesheet not found: {stylesheet}")
            return 1
        result = rewriter.rewrite_stylesheet(stylesheet, force_ssl=args.ssl)
        if output_dir is None:
            print_success(f"{stylesheet} -> {result.path}")
            continue
        try:
            relative = Path(os.path.abspath(stylesheet)).relative_to(
                settings.public_root
            )
        except ValueError:
            relative = Path(stylesheet.name)
        dest = output_dir / relative
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(str(result.path), dest)
        print_success(f"{stylesheet} -> {dest}")
    return 0


def print_keys(args: argparse.Namespace, settings: Settings) -> int:
    status = 0
    for name in args.paths:
        try:
            print(f"{key_for_path(Path(name), settings.key_prefix)}  {name}")
        except FileNotFoundError:
            print_error(f"File not found: {name}")
            status = 1
    return status


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cloudfront-assets",
        description="Rewrite asset references for CDN hosting",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    css = commands.add_parser("rewrite-css", help="Rewrite url() references")
    css.add_argument("stylesheets", nargs="*", help="Stylesheets (default: all)")
    css.add_argument("--ssl", action="store_true", help="Use https asset URLs")
    css.add_argument(
        "--output-dir", type=str, help="Write rewritten stylesheets here"
    )
    css.add_argument(
        "--manifest", type=str, help="YAML/JSON list of uploaded asset paths"
    )
    css.set_defaults(handler=rewrite_css)

    keys = commands.add_parser("key", help="Print the content key of files")
    keys.add_argument("paths", nargs="+")
    keys.set_defaults(handler=print_keys)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = configure()
    except ConfigurationError as exc:
        print_error(f"Invalid configuration: {exc}")
        return 1
    configure_logging(settings.log_level)
    return args.handler(args, settings)


if __name__ == "__main__":
    sys.exit(main())
