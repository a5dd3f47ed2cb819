"""
Unit tests for the directory watcher.
"""
import time
from types import SimpleNamespace
from unittest.mock import Mock

from etl.watcher import ETLWatcher, _PDFEventHandler


def _scheduler():
    scheduler = Mock()
    scheduler.submit.return_value = SimpleNamespace(job_id="1")
    return scheduler


class TestPDFEventHandler:
    """Tests para el manejador de eventos"""

    def test_ignores_non_pdf(self):
        """Prueba que archivos que no son PDF no generan jobs"""
        scheduler = _scheduler()
        handler = _PDFEventHandler(scheduler, "pdf", "archive_pdf", debounce_seconds=0.01)

        assert handler.schedule("pdf/notes.txt") is False
        handler.flush()
        scheduler.submit.assert_not_called()

    def test_debounce_submits_single_job(self):
        """Prueba que varios PDFs seguidos generan un solo job"""
        scheduler = _scheduler()
        handler = _PDFEventHandler(scheduler, "pdf", "archive_pdf", debounce_seconds=0.05)

        assert handler.schedule("pdf/a.pdf")
        assert handler.schedule("pdf/B.PDF")
        time.sleep(0.3)

        scheduler.submit.assert_called_once_with("pdf", "archive_pdf", delay_ms=0)

    def test_created_and_moved_events(self):
        """Prueba eventos de creación y de movimiento"""
        scheduler = _scheduler()
        handler = _PDFEventHandler(scheduler, "pdf", "archive_pdf", debounce_seconds=10)

        handler.on_created(SimpleNamespace(is_directory=False, src_path="pdf/a.pdf"))
        handler.on_moved(SimpleNamespace(is_directory=False, src_path="tmp/x", dest_path="pdf/b.pdf"))
        handler.on_created(SimpleNamespace(is_directory=True, src_path="pdf/dir.pdf"))
        handler.cancel()
        handler.flush()

        scheduler.submit.assert_called_once()

    def test_submit_failure_is_logged(self):
        """Prueba que un error al encolar no rompe el watcher"""
        scheduler = _scheduler()
        scheduler.submit.side_effect = RuntimeError("redis down")
        handler = _PDFEventHandler(scheduler, "pdf", "archive_pdf", debounce_seconds=10)

        handler.schedule("pdf/a.pdf")
        handler.cancel()
        handler.flush()

        scheduler.submit.assert_called_once()


class TestETLWatcher:
    """Tests para ETLWatcher con watchdog real"""

    def test_creates_watch_dir(self, tmp_path):
        """Prueba que crea la carpeta vigilada"""
        watch_dir = tmp_path / "incoming"
        ETLWatcher(_scheduler(), watch_dir, tmp_path / "archive")
        assert watch_dir.is_dir()

    def test_new_pdf_submits_job(self, tmp_path):
        """Prueba que un PDF nuevo envía un job"""
        scheduler = _scheduler()
        watch_dir = tmp_path / "pdf"

        with ETLWatcher(scheduler, watch_dir, tmp_path / "archive", debounce_seconds=0.1):
            (watch_dir / "a.pdf").write_bytes(b"%PDF-1.4")
            deadline = time.time() + 5
            while not scheduler.submit.called and time.time() < deadline:
                time.sleep(0.05)

        scheduler.submit.assert_called_with(str(watch_dir), str(tmp_path / "archive"), delay_ms=0)
