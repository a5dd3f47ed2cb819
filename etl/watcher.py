"""
ETL Watcher - envío automático de jobs de ingesta.

Monitorea la carpeta de origen con watchdog y, cada vez que aparece un PDF
nuevo, envía (con debounce) un job de ingesta para esa carpeta a la cola
``pdf_transform``. Varios PDFs copiados juntos generan un solo job.

Uso programático:
    from etl.watcher import ETLWatcher
    with ETLWatcher(scheduler, "pdf", "archive_pdf"):
        ...
"""
from __future__ import annotations

import logging
import threading
import time
from pathlib import Path
from typing import Optional, Set

from watchdog.events import (
    FileCreatedEvent,
    FileMovedEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from jobs.scheduler import JobScheduler

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS: Set[str] = {".pdf"}

# Pausa (segundos) antes de enviar el job, para que terminen de copiarse
# los archivos recién detectados.
DEBOUNCE_SECONDS: float = 2.0


class _PDFEventHandler(FileSystemEventHandler):
    """
    Responde a eventos de creación / movimiento en la carpeta vigilada y
    envía un job de ingesta luego del debounce.
    """

    def __init__(
        self,
        scheduler: JobScheduler,
        source_directory: str,
        destination_directory: str,
        debounce_seconds: float = DEBOUNCE_SECONDS,
    ) -> None:
        super().__init__()
        self._scheduler = scheduler
        self._source = source_directory
        self._destination = destination_directory
        self._debounce = debounce_seconds
        self._pending: Set[str] = set()   # PDFs detectados desde el último job
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    def on_created(self, event: FileCreatedEvent) -> None:  # type: ignore[override]
        if not event.is_directory:
            self.schedule(str(event.src_path))

    def on_moved(self, event: FileMovedEvent) -> None:  # type: ignore[override]
        if not event.is_directory:
            self.schedule(str(event.dest_path))

    # ------------------------------------------------------------------
    def schedule(self, path: str) -> bool:
        """Registra el PDF y (re)inicia el debounce. False si no es un PDF."""
        if Path(path).suffix.lower() not in SUPPORTED_EXTENSIONS:
            return False

        with self._lock:
            self._pending.add(path)
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self._debounce, self.flush)
            self._timer.daemon = True
            self._timer.start()

        logger.info(f"PDF detected: {Path(path).name}")
        return True

    def flush(self) -> None:
        """Envía un job si hay PDFs pendientes."""
        with self._lock:
            pending = sorted(self._pending)
            self._pending.clear()
            self._timer = None

        if not pending:
            return

        try:
            handle = self._scheduler.submit(self._source, self._destination, delay_ms=0)
        except Exception as e:
            logger.error(f"Could not submit ingestion job for {len(pending)} file(s): {e}")
            return
        logger.info(f"Submitted job {handle.job_id} for {len(pending)} new PDF file(s)")

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None


class ETLWatcher:
    """
    Vigila la carpeta de origen y envía jobs de ingesta automáticamente
    cuando aparecen PDFs nuevos.

    >>> watcher = ETLWatcher(scheduler, "pdf", "archive_pdf")
    >>> watcher.start()          # no bloquea
    >>> watcher.stop()
    """

    def __init__(
        self,
        scheduler: JobScheduler,
        source_directory: str | Path,
        destination_directory: str | Path,
        debounce_seconds: float = DEBOUNCE_SECONDS,
    ) -> None:
        self.watch_dir = Path(source_directory)
        self.watch_dir.mkdir(parents=True, exist_ok=True)
        self.handler = _PDFEventHandler(
            scheduler,
            str(self.watch_dir),
            str(destination_directory),
            debounce_seconds=debounce_seconds,
        )
        self._observer: Observer | None = None

    # ------------------------------------------------------------------
    def start(self) -> None:
        """Inicia el observador en un hilo de fondo (no bloqueante)."""
        if self._observer and self._observer.is_alive():
            logger.warning("ETLWatcher ya está en ejecución.")
            return

        self._observer = Observer()
        self._observer.schedule(self.handler, str(self.watch_dir), recursive=False)
        self._observer.start()
        logger.info(f"ETLWatcher activo - vigilando: {self.watch_dir.resolve()}")

    def stop(self) -> None:
        """Detiene el observador y descarta el debounce pendiente."""
        self.handler.cancel()
        if self._observer:
            self._observer.stop()
            self._observer.join()
            self._observer = None
            logger.info("ETLWatcher detenido.")

    def run_forever(self) -> None:
        """Bloquea el proceso actual mientras vigila la carpeta. Ctrl+C para salir."""
        self.start()
        try:
            while True:
                time.sleep(1)
        except KeyboardInterrupt:
            pass
        finally:
            self.stop()

    # Soporte para uso como context manager
    def __enter__(self) -> "ETLWatcher":
        self.start()
        return self

    def __exit__(self, *_: object) -> None:
        self.stop()
