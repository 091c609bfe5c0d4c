"""
Parquet viewer app entrypoint.

This module provides the CLI entrypoint to launch the Streamlit UI. It defers
all UI composition to the app.ui package and exists solely to start Streamlit
programmatically or render directly when already running under Streamlit.

Usage:
    - Python execution (hands process to Streamlit):
        python -m app.main --file data/example.parquet --page-size 200

    - Streamlit direct:
        streamlit run src/app/main.py -- --file data/example.parquet --page-size 200
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from app.ui import streamlit_app

logger = logging.getLogger(__name__)


def _build_parser(add_help: bool = True) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Parquet Viewer", add_help=add_help)
    parser.add_argument("--file", default=None, help="Parquet file to open")
    parser.add_argument(
        "--page-size",
        type=int,
        default=100,
        help="Rows per page in the records grid.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Console entrypoint that launches Streamlit with the viewer UI.

    If already executing within a Streamlit server (environment variable
    STREAMLIT_SERVER_PORT is set), this function renders the app directly.
    Otherwise, it execs "python -m streamlit run <this_module>" to leverage
    Streamlit's reloader and argument parsing, passing through any supported
    options after "--".

    Args:
        argv (list[str] | None): Optional list of CLI arguments. If None,
            sys.argv[1:] is used.

    Examples:
        python -m app.main --file data/example.parquet
        streamlit run src/app/main.py -- --file data/example.parquet
    """
    args = list(sys.argv[1:] if argv is None else argv)
    ns = _build_parser().parse_args(args)

    if os.environ.get("STREAMLIT_SERVER_PORT"):
        streamlit_app(default_file=ns.file, default_page_size=int(ns.page_size))
        return

    app_path = Path(__file__).resolve()
    cmd = [sys.executable, "-m", "streamlit", "run", str(app_path)]

    passthrough: list[str] = []
    if ns.file:
        passthrough += ["--file", ns.file]
    if ns.page_size is not None:
        passthrough += ["--page-size", str(int(ns.page_size))]
    if passthrough:
        cmd += ["--"] + passthrough

    try:
        os.execv(sys.executable, cmd)
    except OSError as exc:
        import subprocess

        logger.warning("execv failed (%s); running streamlit as a subprocess", exc)
        subprocess.run(cmd, check=False)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    try:
        ns, _ = _build_parser(add_help=False).parse_known_args(sys.argv[1:])
        streamlit_app(default_file=ns.file, default_page_size=int(ns.page_size))
    except SystemExit:
        streamlit_app()
