from dataclasses import dataclass
from typing import NamedTuple, Optional

from errors import MaskStateError


class Point(NamedTuple):
    x: float
    y: float


class Size(NamedTuple):
    width: float = 0.0
    height: float = 0.0

    @property
    def is_empty(self):
        return self.width <= 0 or self.height <= 0


def pixel_to_display(point, image_size, canvas_size):
    """Переводить точку з пікселів зображення в координати канви."""
    if image_size.is_empty:
        # Зображення ще не задано: проєкції немає
        return Point(0.0, 0.0)
    x = point[0] * canvas_size.width / image_size.width
    y = point[1] * canvas_size.height / image_size.height
    return Point(x, y)


def display_to_pixel(point, image_size, canvas_size):
    """Обернене до pixel_to_display."""
    if canvas_size.is_empty:
        return Point(0.0, 0.0)
    x = point[0] * image_size.width / canvas_size.width
    y = point[1] * image_size.height / canvas_size.height
    return Point(x, y)


class Mask:
    """
    Замкнений полігон. Єдине джерело правди: вершини в пікселях зображення;
    координати канви завжди обчислюються з них через image_size/canvas_size.
    """

    def __init__(self, pixel_vertices=(), image_size=Size(), canvas_size=Size(), is_editing=False):
        self._pixel_vertices = [Point(float(p[0]), float(p[1])) for p in pixel_vertices]
        self._image_size = Size(*image_size)
        self._canvas_size = Size(*canvas_size)
        self.is_editing = is_editing
        self._observers = []

    # --- OBSERVERS ---
    def subscribe(self, callback):
        self._observers.append(callback)

    def unsubscribe(self, callback):
        if callback in self._observers:
            self._observers.remove(callback)

    def _notify(self):
        for callback in list(self._observers):
            callback(self)

    # --- VERTICES ---
    @property
    def pixel_vertices(self):
        return tuple(self._pixel_vertices)

    @property
    def display_vertices(self):
        return self.project(self._image_size, self._canvas_size)

    def project(self, image_size, canvas_size):
        return tuple(pixel_to_display(p, image_size, canvas_size) for p in self._pixel_vertices)

    @property
    def is_valid_geometry(self):
        # Трикутник: мінімальний замкнений полігон
        return len(self._pixel_vertices) > 2

    def add_vertex(self, pixel_point):
        if not self.is_editing:
            raise MaskStateError("Маска вже збережена, додавати вершини не можна")
        self._pixel_vertices.append(Point(float(pixel_point[0]), float(pixel_point[1])))
        self._notify()

    def clear_vertices(self):
        if not self.is_editing:
            return
        self._pixel_vertices.clear()
        self._notify()

    def freeze(self):
        """Завершує редагування. Повертає False, якщо вершин замало."""
        if not self.is_valid_geometry:
            return False
        self.is_editing = False
        self._notify()
        return True

    # --- SIZES ---
    @property
    def image_size(self):
        return self._image_size

    @property
    def canvas_size(self):
        return self._canvas_size

    def set_image_size(self, new_size):
        new_size = Size(*new_size)
        if new_size == self._image_size:
            return False
        self._image_size = new_size
        self._notify()
        return True

    def set_canvas_size(self, new_size):
        new_size = Size(*new_size)
        if new_size == self._canvas_size:
            return False
        self._canvas_size = new_size
        self._notify()
        return True

    def __len__(self):
        return len(self._pixel_vertices)

    def __repr__(self):
        state = "editing" if self.is_editing else "frozen"
        return f"Mask({len(self._pixel_vertices)} vertices, {state})"


@dataclass(frozen=True)
class ProgressParameter:
    total: int
    current: int


@dataclass(frozen=True)
class FileResult:
    src_path: str
    dist_path: str
    error: Optional[Exception] = None

    @property
    def ok(self):
        return self.error is None


@dataclass
class BatchSettings:
    src_folder: str = ""
    dist_folder: str = ""
    file_name_pattern: str = ""
    mask_file_path: str = ""
