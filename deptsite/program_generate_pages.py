"""Generate the department public pages.

Composes the gallery, projects, research and featured-work pages for the
configured department from the remote public API and writes one standalone
HTML file per page. Remote failures degrade to advisory copy inside the
pages; they never make the command fail.
"""

import argparse
import logging
import os
from pathlib import Path

from deptsite.config import (
    ALL_PAGES,
    DEFAULT_OUTPUT_DIR,
    LOG_DIR,
    LOG_FILENAME_GENERATE_PAGES,
    LOG_FORMAT,
    PAGE_TEMPLATE_PATH,
)
from deptsite.pipeline.website_generator.runner import run_from_config

logger = logging.getLogger(__name__)


def setup_logging(log_level: str = "INFO", enable_file: bool = True) -> None:
    for h in logging.root.handlers[:]:
        logging.root.removeHandler(h)
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if enable_file:
        try:
            LOG_DIR.mkdir(exist_ok=True)
            handlers.insert(
                0,
                logging.FileHandler(LOG_DIR / LOG_FILENAME_GENERATE_PAGES, mode="a"),
            )
        except OSError:
            pass
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments.

    Parameters
    ----------
    argv : list[str] | None
        Optional argv to parse. When ``None`` the real CLI args are used.

    Returns
    -------
    argparse.Namespace
        Parsed arguments with fields ``page``, ``output``, ``template`` and
        ``log_level``.
    """
    parser = argparse.ArgumentParser(
        description="Generate department public pages from the public API."
    )
    parser.add_argument(
        "--page",
        choices=(*ALL_PAGES, "all"),
        action="append",
        help="Page to build (repeatable); defaults to all pages.",
    )
    parser.add_argument("--output", type=Path, default=DEFAULT_OUTPUT_DIR)
    parser.add_argument("--template", type=Path, default=PAGE_TEMPLATE_PATH)
    parser.add_argument("--log-level", type=str, default="INFO")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint for page generation.

    Returns the process exit code: ``0`` when every page was written,
    ``1`` otherwise.
    """
    args = parse_args(argv)
    setup_logging(
        args.log_level,
        enable_file=not bool(os.environ.get("DISABLE_FILE_LOGS")),
    )
    pages = None if not args.page or "all" in args.page else args.page
    ok = run_from_config(
        pages=pages, output_dir=args.output, template_path=args.template
    )
    if not ok:
        logger.error("Page generation finished with errors")
    return 0 if ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
