"""Find the notes most similar to a note in a Markdown vault."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from domain.entities import BACKENDS
from domain.errors import ConfigError, DocumentNotFound
from infrastructure.config import ContainerConfig, build_default_container
from ui.logging_utils import setup_logging
from ui.presenters import LoggingPresenter


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("vault", help="Directory containing the Markdown notes.")
    parser.add_argument("document_id", nargs="?", help="Vault-relative path of the query note, e.g. ideas/alpha.md")
    parser.add_argument("--backend", choices=BACKENDS, help="Embedding backend to use and remember.")
    parser.add_argument("--top-k", type=int, dest="result_cap", help="Maximum number of similar notes.")
    parser.add_argument("--min-score", type=float, dest="similarity_floor", help="Minimum similarity (0-1).")
    parser.add_argument(
        "--ignore",
        action="append",
        dest="ignored_path_prefixes",
        help="Folder prefix to ignore. Can be passed several times.",
    )
    parser.add_argument("--expire-days", type=int, dest="cache_expiration_days", help="Cache expiration in days.")
    parser.add_argument(
        "--data-dir",
        default=None,
        help="Where the settings and embedding cache are stored (default: VAULT/.notethread).",
    )
    parser.add_argument("--workers", type=int, default=4, help="Parallel embedding workers (default: 4).")
    parser.add_argument("--clear-cache", action="store_true", help="Clear the embedding cache first.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug messages.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging("DEBUG" if args.verbose else None)

    vault = Path(args.vault).expanduser()
    config = ContainerConfig(
        vault_root=vault,
        data_root=args.data_dir or vault / ".notethread",
        max_workers=args.workers,
    )
    container = build_default_container(config, presenter=LoggingPresenter())
    presenter = container.presenter
    if isinstance(presenter, LoggingPresenter):
        presenter.set_backend_source(lambda: container.settings.backend)

    changes = {
        name: getattr(args, name)
        for name in ("backend", "result_cap", "similarity_floor", "cache_expiration_days")
        if getattr(args, name) is not None
    }
    if args.ignored_path_prefixes:
        changes["ignored_path_prefixes"] = tuple(args.ignored_path_prefixes)
    try:
        if changes:
            container.update_settings(**changes)
        if args.clear_cache:
            container.clear_cache()
        if args.document_id:
            container.find_similar(args.document_id)
    except (ConfigError, DocumentNotFound) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    finally:
        container.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
