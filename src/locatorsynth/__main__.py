from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import sys
from typing import Any, Sequence

from .inspector import ElementInspector
from .logging_setup import configure_logging
from .runtime_checks import check_python_version, is_missing_browser_error, is_url
from .settings import EngineSettings, load_engine_settings
from .soup_tree import SoupTree
from .tree import DocumentTree

logger = logging.getLogger("locatorsynth.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="locatorsynth",
        description="Synthesize resilient locators for elements of an HTML document or live page.",
    )
    parser.add_argument("target", help="Path to an HTML file, or an http(s)/file URL.")
    parser.add_argument("selector", help="CSS selector picking the element(s) to inspect.")
    parser.add_argument("--config", type=Path, default=None, help="Engine settings JSON file.")
    parser.add_argument("--all", action="store_true", help="Inspect every match instead of the first one.")
    parser.add_argument("--verbose", action="store_true", help="Log synthesis steps to stderr.")
    return parser


def inspect_nodes(
    tree: DocumentTree,
    nodes: Sequence[Any],
    settings: EngineSettings,
) -> list[dict[str, Any]]:
    inspector = ElementInspector(tree, settings=settings)
    return [inspector.build_record(node).to_payload() for node in nodes]


def _inspect_file(path: Path, selector: str, settings: EngineSettings, take_all: bool) -> list[dict[str, Any]]:
    tree = SoupTree.from_file(str(path))
    nodes = tree.select(selector)
    return inspect_nodes(tree, nodes if take_all else nodes[:1], settings)


def _inspect_url(url: str, selector: str, settings: EngineSettings, take_all: bool) -> list[dict[str, Any]]:
    from playwright.sync_api import sync_playwright

    from .playwright_tree import PlaywrightTree

    with sync_playwright() as playwright:
        browser = playwright.chromium.launch(headless=True)
        try:
            page = browser.new_page()
            page.goto(url, wait_until="domcontentloaded")
            tree = PlaywrightTree(page)
            nodes = tree.query(selector)
            return inspect_nodes(tree, nodes if take_all else nodes[:1], settings)
        finally:
            browser.close()


def main(argv: Sequence[str] | None = None) -> int:
    version_error = check_python_version()
    if version_error:
        raise SystemExit(version_error)

    args = build_parser().parse_args(argv)
    settings = load_engine_settings(args.config)
    configure_logging(settings)
    if args.verbose:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(logging.Formatter("%(levelname)s %(name)s %(message)s"))
        root = logging.getLogger("locatorsynth")
        root.addHandler(stream_handler)
        root.setLevel(logging.DEBUG)

    target = args.target.strip()
    try:
        if is_url(target):
            payloads = _inspect_url(target, args.selector, settings, args.all)
        else:
            path = Path(target)
            if not path.is_file():
                print(f"HTML file not found: {target}", file=sys.stderr)
                return 2
            payloads = _inspect_file(path, args.selector, settings, args.all)
    except Exception as exc:
        if is_missing_browser_error(exc):
            print(
                "Chromium is not installed for Playwright. Run `python -m playwright install chromium`.",
                file=sys.stderr,
            )
            return 3
        logger.exception("Inspection of %s failed", target)
        print(f"Inspection failed: {exc}", file=sys.stderr)
        return 1

    if not payloads:
        print(f"No element matches selector: {args.selector}", file=sys.stderr)
        return 1
    for payload in payloads:
        print(json.dumps(payload, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
