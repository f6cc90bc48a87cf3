import os

import cv2
import numpy as np

from errors import ImageLoadError, ImageWriteError
from models import Size


def read_image_safe(path, mode=cv2.IMREAD_COLOR):
    # cv2.imread не вміє Unicode-шляхи на Windows, тому читаємо байти самі
    if not path or not os.path.isfile(path):
        raise ImageLoadError(path, "файл не існує")
    try:
        with open(path, "rb") as stream:
            data = np.frombuffer(stream.read(), dtype=np.uint8)
    except OSError as e:
        raise ImageLoadError(path, f"не вдалося відкрити файл ({e})") from e
    image = cv2.imdecode(data, mode) if data.size else None
    if image is None:
        raise ImageLoadError(path, "файл не є зображенням")
    return image


def write_image_safe(path, image):
    """Кодує зображення за розширенням шляху і записує (imencode + write для Unicode)."""
    ext = os.path.splitext(path)[1]
    if not ext:
        raise ImageWriteError(path, "не вказано розширення файлу")
    try:
        is_success, buffer = cv2.imencode(ext, image)
    except cv2.error as e:
        raise ImageWriteError(path, f"непідтримуваний формат {ext}") from e
    if not is_success:
        raise ImageWriteError(path, f"не вдалося закодувати {ext}")
    try:
        with open(path, "wb") as f:
            f.write(buffer.tobytes())
    except OSError as e:
        raise ImageWriteError(path, f"не вдалося записати файл ({e})") from e


def read_image_size(path):
    image = read_image_safe(path, cv2.IMREAD_UNCHANGED)
    h, w = image.shape[:2]
    return Size(float(w), float(h))


def rgb_to_bgr(color):
    r, g, b = color
    return (b, g, r)


def same_folder(first, second):
    return os.path.normcase(os.path.abspath(first)) == os.path.normcase(os.path.abspath(second))
