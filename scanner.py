import fnmatch
import logging
import os

from codec import read_mask_rows
from errors import MaskingError, ValidationError
from masking import MaskingTask
from models import FileResult, ProgressParameter
from utils import same_folder

logger = logging.getLogger(__name__)


def enumerate_source_files(folder_path, pattern):
    """Файли папки, що відповідають шаблону, у порядку файлової системи."""
    try:
        names = os.listdir(folder_path)
    except OSError as e:
        raise ValidationError(f"Не вдалося прочитати папку: {e}") from e

    files = []
    for name in names:
        full_path = os.path.join(folder_path, name)
        if os.path.isfile(full_path) and fnmatch.fnmatch(name, pattern):
            files.append(full_path)
    return files


def check_executable(settings, confirm_dist_folder=None):
    if not settings.src_folder or not os.path.isdir(settings.src_folder):
        raise ValidationError("Вхідна папка не існує")
    if not settings.dist_folder or not os.path.isdir(settings.dist_folder):
        raise ValidationError("Вихідна папка не існує")
    if not settings.file_name_pattern:
        raise ValidationError("Не задано шаблон імені файлів")
    if not settings.mask_file_path or not os.path.isfile(settings.mask_file_path):
        raise ValidationError("Файл масок не існує")

    # Якщо вхідна і вихідна папки однакові: питаємо оператора
    if same_folder(settings.src_folder, settings.dist_folder):
        if confirm_dist_folder is not None and not confirm_dist_folder():
            raise ValidationError("Оператор відмовився перезаписувати вхідну папку")


def is_executable(settings, confirm_dist_folder=None):
    try:
        check_executable(settings, confirm_dist_folder)
    except ValidationError as e:
        logger.info("Batch run refused: %s", e)
        return False
    return True


def execute_masking(settings, progress=None, cancel_event=None, continue_on_error=False,
                    fill_color=None, confirm_dist_folder=None):
    """
    Застосовує набір масок до всіх файлів вхідної папки, по одному файлу.
    progress отримує ProgressParameter(total, current): спершу (total, 0),
    потім після кожного файлу. Повертає список FileResult.
    """
    check_executable(settings, confirm_dist_folder)
    mask_rows = read_mask_rows(settings.mask_file_path)
    src_files = enumerate_source_files(settings.src_folder, settings.file_name_pattern)
    total = len(src_files)
    logger.info("Masking %d files from %s", total, settings.src_folder)

    if progress is not None:
        progress(ProgressParameter(total, 0))

    results = []
    for count, src_path in enumerate(src_files, start=1):
        if cancel_event is not None and cancel_event.is_set():
            logger.info("Batch cancelled after %d of %d files", count - 1, total)
            break

        dist_path = os.path.join(settings.dist_folder, os.path.basename(src_path))
        task = MaskingTask(src_path, dist_path, mask_rows)
        if fill_color is not None:
            task.fill_color = fill_color
        try:
            task.execute()
        except MaskingError as e:
            if not continue_on_error:
                raise
            logger.error("Failed to mask %s: %s", src_path, e)
            results.append(FileResult(src_path, dist_path, e))
        else:
            results.append(FileResult(src_path, dist_path))

        if progress is not None:
            progress(ProgressParameter(total, count))

    return results


def show_preview(settings, viewer, confirm_dist_folder=None):
    """Маскує перший відповідний файл і показує результат без запису."""
    check_executable(settings, confirm_dist_folder)
    src_files = enumerate_source_files(settings.src_folder, settings.file_name_pattern)
    if not src_files:
        raise ValidationError("Не знайдено файлів за шаблоном")
    mask_rows = read_mask_rows(settings.mask_file_path)
    return MaskingTask(src_files[0], "", mask_rows).execute(viewer)
