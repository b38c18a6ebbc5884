"""Command-line entry point.

Run one incremental indexing pass
---------------------------------
    doc-indexer run --path ./docs --pattern "**/*.md" --pattern "**/*.pdf"

Check the backing stores
------------------------
    doc-indexer health
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Callable, Sequence
from concurrent.futures import TimeoutError as FutureTimeoutError

from doc_indexer.config import Settings, settings
from doc_indexer.indexing.factory import build_controller, build_fingerprint_store, build_vector_store
from doc_indexer.stores.base import FingerprintStore, VectorStoreBase

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="doc-indexer",
        description="Incrementally index changed documents into the vector store",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Run one indexing pass and print the final status as JSON")
    run.add_argument("--path", default=None, help="Document directory (default: DOCUMENT_PATH)")
    run.add_argument(
        "--pattern",
        action="append",
        default=None,
        help="Glob pattern relative to --path; repeatable (default: DOCUMENT_PATTERNS)",
    )
    run.add_argument(
        "--memory-fingerprints",
        action="store_true",
        help="Keep fingerprints in memory instead of Redis (every document counts as changed)",
    )
    run.add_argument(
        "--poll-interval",
        type=float,
        default=2.0,
        help="Seconds between progress log lines",
    )

    sub.add_parser("health", help="Check that the vector store and fingerprint store are reachable")
    return parser


def _settings_for(args: argparse.Namespace) -> Settings:
    overrides: dict[str, object] = {}
    if args.path:
        overrides["document_path"] = args.path
    if args.pattern:
        overrides["document_patterns"] = args.pattern
    if args.memory_fingerprints:
        overrides["fingerprint_backend"] = "memory"
    return settings.model_copy(update=overrides)


def _run(args: argparse.Namespace) -> int:
    cfg = _settings_for(args)
    try:
        controller = build_controller(cfg)
    except Exception as exc:
        logger.error("Could not set up indexing: %s", exc)
        return 1

    with controller:
        future = controller.start_indexing()
        while True:
            try:
                future.result(timeout=args.poll_interval)
                break
            except FutureTimeoutError:
                status = controller.status()
                logger.info(
                    "Progress: %d/%d changed documents, %d chunks committed",
                    status.changed_count,
                    status.total_count,
                    status.processed_count,
                )
            except Exception as exc:
                logger.error("Indexing failed: %s", exc)
                print(json.dumps(controller.status().model_dump()), flush=True)
                return 1

        print(json.dumps(controller.status().model_dump()), flush=True)
    return 0


def _check(name: str, build: Callable[[Settings], VectorStoreBase | FingerprintStore], cfg: Settings) -> bool:
    try:
        return bool(build(cfg).health_check())
    except Exception as exc:
        logger.error("%s unavailable: %s", name, exc)
        return False


def _health(cfg: Settings) -> int:
    checks = {
        "vector_store": _check("Vector store", build_vector_store, cfg),
        "fingerprint_store": _check("Fingerprint store", build_fingerprint_store, cfg),
    }
    print(json.dumps(checks), flush=True)
    return 0 if all(checks.values()) else 1


def main(argv: Sequence[str] | None = None) -> None:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=settings.log_level.upper())

    if args.command == "run":
        code = _run(args)
    else:
        code = _health(settings)
    if code:
        raise SystemExit(code)


if __name__ == "__main__":
    main(sys.argv[1:])
