"""
Текстовий формат набору масок: одна маска на рядок, вершини через кому,
координати вершини (в пікселях) через пробіл. Порожні рядки пропускаються.

    120.5 88,300 88,300 240
"""
import logging
import math

from errors import FormatError
from models import Mask, Point, Size

logger = logging.getLogger(__name__)


def format_coordinate(value):
    # repr дає найкоротший текст, що читається назад без втрат
    text = repr(float(value))
    if text.endswith(".0"):
        text = text[:-2]
    return text


def encode_mask(mask):
    vertices = mask.pixel_vertices if isinstance(mask, Mask) else mask
    return ",".join(f"{format_coordinate(x)} {format_coordinate(y)}" for x, y in vertices)


def encode(masks):
    return [encode_mask(mask) for mask in masks]


def split_row(line, line_number=None):
    """Ділить рядок на токени вершин. Повертає [] для порожнього рядка."""
    stripped = line.strip()
    if not stripped:
        return []
    tokens = [token.strip() for token in stripped.split(",")]
    if any(not token for token in tokens):
        raise FormatError(line, line_number, "порожня вершина")
    return tokens


def parse_coordinate(text, line, line_number):
    # float() приймає ще "nan", "inf" і "1_0"; у файлі масок лише звичайні числа
    try:
        value = float(text)
    except ValueError:
        value = None
    if value is None or "_" in text or not math.isfinite(value):
        raise FormatError(line, line_number, f"координата {text!r} не є числом")
    return value


def parse_vertex_token(token, line=None, line_number=None):
    if line is None:
        line = token
    fields = token.split()
    if len(fields) != 2:
        raise FormatError(line, line_number, f"вершина {token!r} має містити дві координати")
    return Point(parse_coordinate(fields[0], line, line_number),
                 parse_coordinate(fields[1], line, line_number))


def decode_row(line, line_number=None):
    tokens = split_row(line, line_number)
    if not tokens:
        raise FormatError(line, line_number, "немає вершин")
    return [parse_vertex_token(token, line, line_number) for token in tokens]


def decode(lines, image_size=Size(), canvas_size=Size()):
    masks = []
    for line_number, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        points = decode_row(line, line_number)
        if len(points) <= 2:
            # Збережена маска має бути трикутником щонайменше
            logger.warning("Skipping degenerate mask on line %d: %s", line_number, line.strip())
            continue
        masks.append(Mask(points, image_size, canvas_size))
    return masks


def read_mask_rows(path):
    """
    Читає файл масок як список рядків-токенів "x y".
    Так його отримує пакетна обробка.
    """
    with open(path, "r", encoding="utf-8-sig") as f:
        lines = f.read().splitlines()
    rows = []
    for line_number, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        # Перевіряємо весь файл до початку обробки
        decode_row(line, line_number)
        rows.append(split_row(line, line_number))
    return rows


def read_mask_file(path, image_size=Size(), canvas_size=Size()):
    with open(path, "r", encoding="utf-8-sig") as f:
        lines = f.read().splitlines()
    masks = decode(lines, image_size, canvas_size)
    logger.info("Loaded %d masks from %s", len(masks), path)
    return masks


def write_mask_file(path, masks):
    kept = [mask for mask in masks if len(mask) > 2]
    if len(kept) != len(masks):
        logger.warning("Not saving %d degenerate masks", len(masks) - len(kept))
    rows = encode(kept)
    with open(path, "w", encoding="utf-8", newline="\n") as f:
        for row in rows:
            f.write(row + "\n")
    logger.info("Saved %d masks to %s", len(rows), path)
