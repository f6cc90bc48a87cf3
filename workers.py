import logging
import threading

from PyQt6.QtCore import QObject, QThread, pyqtSignal, pyqtSlot

from errors import MaskingError
from scanner import execute_masking

logger = logging.getLogger(__name__)


class MaskingWorker(QObject):
    """
    Виконує пакетне маскування у фоновому потоці. Сигнали з іншого потоку
    Qt доставляє у GUI-потік через чергу, тож воркер не блокується.
    """
    progressChanged = pyqtSignal(int, int)  # total, current
    finished = pyqtSignal(list)
    failed = pyqtSignal(str)

    def __init__(self, settings, continue_on_error=False):
        super().__init__()
        self.settings = settings
        self.continue_on_error = continue_on_error
        self.cancel_event = threading.Event()

    def cancel(self):
        self.cancel_event.set()

    @pyqtSlot()
    def run(self):
        try:
            results = execute_masking(
                self.settings,
                progress=lambda p: self.progressChanged.emit(p.total, p.current),
                cancel_event=self.cancel_event,
                continue_on_error=self.continue_on_error,
            )
        except (MaskingError, OSError) as e:
            logger.error("Batch failed: %s", e)
            self.failed.emit(str(e))
        else:
            self.finished.emit(results)


def start_worker(worker, parent=None):
    """Переносить воркер у новий QThread і запускає його."""
    thread = QThread(parent)
    worker.moveToThread(thread)
    thread.started.connect(worker.run)
    worker.finished.connect(thread.quit)
    worker.failed.connect(thread.quit)
    thread.finished.connect(worker.deleteLater)
    thread.start()
    return thread


def stop_worker(worker, thread):
    """Просить воркер зупинитись між файлами і чекає завершення потоку."""
    if worker is not None:
        worker.cancel()
    if thread is not None and thread.isRunning():
        thread.quit()
        thread.wait()
