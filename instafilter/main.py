"""Точка входа в приложение."""
from __future__ import annotations

import argparse
from typing import Optional, Sequence

from instafilter.config import AppConfig
from instafilter.models.filter_catalog import FILTER_CATALOG
from instafilter.utils.logging import get_logger, set_level


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="instafilter", description="Photo filters with adjustable parameters")
    p.add_argument("--image", type=str, default=None, help="Path to an image to open on start")
    p.add_argument(
        "--filter",
        type=str,
        default=None,
        choices=[kind.value for kind in FILTER_CATALOG],
        help="Filter to start with (overrides INSTAFILTER_DEFAULT_FILTER)",
    )
    p.add_argument("--log-level", type=str, default=None, help="DEBUG, INFO, WARNING ...")
    return p


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Создаёт и запускает главное окно приложения."""
    args = build_argparser().parse_args(argv)
    config = AppConfig.from_env()
    set_level(args.log_level or config.log_level)
    get_logger().debug("Starting with %s", config)

    # UI imports tkinter, keep it out of --help
    from instafilter.app import InstafilterApp

    app = InstafilterApp(config)
    if args.filter:
        app.controller.select_filter(args.filter)
    if args.image:
        app.controller.open_path(args.image)
    app.mainloop()


if __name__ == "__main__":
    main()
