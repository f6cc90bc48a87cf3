"""Точка входу. Без аргументів: GUI; з --src/--dist/--masks: пакетна обробка без вікна."""
import argparse
import logging
import sys
from logging.handlers import RotatingFileHandler

from constants import DEFAULT_FILE_PATTERN, LOG_FORMAT, LOG_MAX_BYTES, LOG_BACKUP_COUNT
from errors import MaskingError
from models import BatchSettings

logger = logging.getLogger(__name__)


def setup_logging(level=logging.INFO, log_file=None):
    formatter = logging.Formatter(LOG_FORMAT)
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    root_logger.addHandler(console)

    if log_file:
        handler = RotatingFileHandler(log_file, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT,
                                      encoding="utf-8")
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)


def build_parser():
    parser = argparse.ArgumentParser(
        description="Apply a mask set to every matching image in a folder",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument('--src', help="Source image folder")
    parser.add_argument('--dist', help="Destination folder")
    parser.add_argument('--pattern', default=DEFAULT_FILE_PATTERN, help="File name wildcard")
    parser.add_argument('--masks', help="Mask set file")
    parser.add_argument('--keep-going', action='store_true', help="Continue after a file fails")
    parser.add_argument('--log-file', help="Also write the log to this file")
    parser.add_argument('--debug', action='store_true', help="Verbose logging")
    return parser


def run_batch(args):
    from scanner import execute_masking

    settings = BatchSettings(args.src or "", args.dist or "", args.pattern or "", args.masks or "")

    def report(p):
        logger.info("Progress %d / %d", p.current, p.total)

    try:
        # Без вікна нікого питати: однакові папки дозволені
        results = execute_masking(settings, progress=report, continue_on_error=args.keep_going)
    except (MaskingError, OSError) as e:
        logger.error("%s", e)
        return 1
    failed = [r for r in results if not r.ok]
    logger.info("Done: %d ok, %d failed", len(results) - len(failed), len(failed))
    return 1 if failed else 0


def run_gui():
    from PyQt6.QtWidgets import QApplication
    from main_window import MainWindow

    app = QApplication(sys.argv)
    window = MainWindow()
    window.show()
    return app.exec()


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.debug else logging.INFO, args.log_file)
    if args.src or args.dist or args.masks:
        return run_batch(args)
    return run_gui()


if __name__ == "__main__":
    sys.exit(main())
