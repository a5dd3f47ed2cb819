"""
PDF Ingestion - command line entry point.

Subcommands:
    python main.py worker                       # consume the pdf_transform queue
    python main.py submit [--source DIR] ...    # submit one (or recurring) job
    python main.py run [--source DIR] ...       # ingest synchronously, no queue
    python main.py watch                        # submit a job when PDFs arrive
    python main.py serve                        # start the HTTP API
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from config.logging import setup_logging
from config.settings import settings
from core.container import get_components
from domain.errors import IngestionError
from jobs.models import IngestionJob

logger = logging.getLogger(__name__)


def _cmd_worker(args: argparse.Namespace) -> int:
    components = get_components()
    components.worker.run()
    return 0


def _cmd_submit(args: argparse.Namespace) -> int:
    scheduler = get_components().scheduler
    if args.every:
        logger.info(f"Submitting {args.source} every {args.every}s. Ctrl+C para salir.")
        try:
            scheduler.run_every(args.every, source_directory=args.source, destination_directory=args.dest)
        except KeyboardInterrupt:
            pass
        return 0

    handle = scheduler.submit(
        args.source,
        args.dest,
        delay_ms=args.delay,
        attempts=args.attempts,
    )
    print(f"Job {handle.job_id} submitted to '{handle.queue_name}' ({handle.status.value})")
    return 0


def _cmd_run(args: argparse.Namespace) -> int:
    orchestrator = get_components().orchestrator
    job = IngestionJob.from_payload({"pdf_path": args.source, "pdf_path_dest": args.dest})
    try:
        report = orchestrator.run(job)
    except IngestionError as e:
        logger.error(f"Job failed with ID: {job.id}: {e}")
        return 1

    summary = report.summary()
    print(
        f"Processed {summary['processed']} · skipped {summary['skipped']} · "
        f"failed {summary['failed']} · vectors {summary['vectors']}"
    )
    return 0


def _cmd_watch(args: argparse.Namespace) -> int:
    from etl.watcher import ETLWatcher

    watcher = ETLWatcher(
        get_components().scheduler,
        args.source,
        args.dest,
        debounce_seconds=settings.WATCH_DEBOUNCE_SECONDS,
    )
    watcher.run_forever()
    return 0


def _cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run(
        "server:app",
        host=args.host,
        port=args.port,
        log_level=settings.LOG_LEVEL.lower(),
    )
    return 0


def _add_paths(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--source",
        metavar="DIR",
        default=settings.SOURCE_DIR,
        help="Carpeta con los PDFs (default: %(default)s)",
    )
    parser.add_argument(
        "--dest",
        metavar="DIR",
        default=settings.ARCHIVE_DIR,
        help="Carpeta de archivo (default: %(default)s)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="PDF ingestion service - extract, chunk, embed, index and archive PDFs"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    worker = sub.add_parser("worker", help="Consume the ingestion queue")
    worker.set_defaults(func=_cmd_worker)

    submit = sub.add_parser("submit", help="Submit an ingestion job")
    _add_paths(submit)
    submit.add_argument("--delay", type=int, default=None, help="Delay in ms (default: JOB_DELAY_MS)")
    submit.add_argument("--attempts", type=int, default=None, help="Max attempts (default: JOB_ATTEMPTS)")
    submit.add_argument(
        "--every",
        type=float,
        default=None,
        metavar="SECONDS",
        help="Submit the default job repeatedly every SECONDS",
    )
    submit.set_defaults(func=_cmd_submit)

    run = sub.add_parser("run", help="Ingest a directory synchronously, without the queue")
    _add_paths(run)
    run.set_defaults(func=_cmd_run)

    watch = sub.add_parser("watch", help="Submit a job whenever PDFs land in the source directory")
    _add_paths(watch)
    watch.set_defaults(func=_cmd_watch)

    serve = sub.add_parser("serve", help="Start the HTTP API")
    serve.add_argument("--host", default=settings.API_HOST)
    serve.add_argument("--port", type=int, default=settings.API_PORT)
    serve.set_defaults(func=_cmd_serve)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(settings.LOG_LEVEL)
    try:
        return args.func(args)
    except IngestionError as e:
        logger.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
