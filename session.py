import logging
import os

from codec import read_mask_file, write_mask_file
from constants import UNTITLED_NAME
from models import Mask, Size, display_to_pixel
from utils import read_image_size

logger = logging.getLogger(__name__)


class SessionHost:
    """Те, що сесії потрібно від вікна: розмір канви і діалог збереження."""

    def get_canvas_size(self):
        raise NotImplementedError

    def confirm_new_save_path(self):
        """Повертає (accepted, path)."""
        raise NotImplementedError


class CallbackHost(SessionHost):
    def __init__(self, get_canvas_size, confirm_new_save_path=None):
        self._get_canvas_size = get_canvas_size
        self._confirm_new_save_path = confirm_new_save_path

    def get_canvas_size(self):
        return self._get_canvas_size()

    def confirm_new_save_path(self):
        if self._confirm_new_save_path is None:
            return False, ""
        return self._confirm_new_save_path()


class EditSession:
    """
    Сесія редагування масок. Тримає збережені маски, одну маску в роботі,
    поточне зображення і файл масок.
    """

    def __init__(self, host):
        self.host = host
        self.masks = []
        self.editing_mask = None
        self.image_file_path = ""
        self.mask_file_path = ""
        self.image_size = Size()
        self.canvas_size = Size()
        self.update_canvas_size()
        self._create_editing_mask()

    @property
    def all_masks(self):
        if self.editing_mask is None:
            return list(self.masks)
        return self.masks + [self.editing_mask]

    @property
    def window_title(self):
        name = os.path.basename(self.mask_file_path) if self.mask_file_path else UNTITLED_NAME
        return f"{name} - Редагування масок"

    def _create_editing_mask(self):
        self.editing_mask = Mask((), self.image_size, self.canvas_size, is_editing=True)

    # --- EDITING ---
    def add_vertex(self, canvas_point):
        """Додає вершину за точкою канви (перераховується в пікселі)."""
        if self.editing_mask is None:
            self._create_editing_mask()
        pixel_point = display_to_pixel(canvas_point, self.image_size, self.canvas_size)
        self.editing_mask.add_vertex(pixel_point)
        return pixel_point

    def save_current_mask(self):
        if self.editing_mask is None or not self.editing_mask.freeze():
            return False
        self.masks.append(self.editing_mask)
        self._create_editing_mask()
        return True

    def clear_current_mask(self):
        if self.editing_mask is not None:
            self.editing_mask.clear_vertices()

    # --- FILES ---
    def load_mask_set(self, path):
        # Розбираємо до заміни, щоб FormatError не зачепив поточний стан
        masks = read_mask_file(path, self.image_size, self.canvas_size)
        self.masks = masks
        self._create_editing_mask()
        self.mask_file_path = path
        return masks

    def save_mask_set(self, path):
        write_mask_file(path, self.masks)
        self.mask_file_path = path

    def overwrite_mask_set(self):
        if not self.mask_file_path or not os.path.isfile(self.mask_file_path):
            return self.save_new_mask_set()
        self.save_mask_set(self.mask_file_path)
        return True

    def save_new_mask_set(self):
        accepted, path = self.host.confirm_new_save_path()
        if not accepted or not path:
            return False
        self.save_mask_set(path)
        return True

    def set_image(self, path):
        if not os.path.isfile(path):
            return False
        self.image_size = read_image_size(path)
        self.image_file_path = path
        for mask in self.all_masks:
            mask.set_image_size(self.image_size)
        logger.info("Image %s (%dx%d)", path, self.image_size.width, self.image_size.height)
        return True

    def update_canvas_size(self):
        size = self.host.get_canvas_size() if self.host is not None else None
        self.canvas_size = Size(*size) if size else Size()
        for mask in self.all_masks:
            mask.set_canvas_size(self.canvas_size)
