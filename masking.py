import logging

import cv2
import numpy as np

from codec import parse_vertex_token
from constants import FILL_COLOR
from errors import FormatError
from utils import read_image_safe, rgb_to_bgr, write_image_safe

logger = logging.getLogger(__name__)

INT32_MIN = np.iinfo(np.int32).min
INT32_MAX = np.iinfo(np.int32).max


class MaskingTask:
    """
    Маскування одного файлу: читає зображення, заливає полігони
    одним кольором (без згладжування) і записує результат.
    Маски приходять як рядки токенів "x y" у пікселях.
    """

    def __init__(self, src_file_path, dist_file_path, mask_rows, fill_color=FILL_COLOR):
        self.src_file_path = src_file_path
        self.dist_file_path = dist_file_path
        self.mask_rows = [list(row) for row in mask_rows]
        self.fill_color = fill_color

    def build_polygons(self):
        polygons = []
        for row in self.mask_rows:
            line = ",".join(row)
            points = [parse_vertex_token(token, line) for token in row]
            if len(points) <= 2:
                logger.warning("Skipping degenerate mask with %d vertices: %s", len(points), line)
                continue
            coords = np.array(points, dtype=np.float64)
            if (coords < INT32_MIN).any() or (coords > INT32_MAX).any():
                raise FormatError(line, reason="координата поза межами int32")
            # OpenCV приймає лише цілі координати; дробова частина відкидається
            polygons.append(coords.astype(np.int32))
        return polygons

    def apply(self, image):
        """Заливає всі полігони на image на місці, у порядку масок."""
        color = rgb_to_bgr(self.fill_color)
        for polygon in self.build_polygons():
            # По одному, щоб пізніші маски перекривали попередні
            cv2.fillPoly(image, [polygon], color, lineType=cv2.LINE_8)
        return image

    def execute(self, viewer=None):
        image = read_image_safe(self.src_file_path, cv2.IMREAD_COLOR)
        self.apply(image)

        if self.dist_file_path:
            write_image_safe(self.dist_file_path, image)
            logger.debug("Masked %s -> %s", self.src_file_path, self.dist_file_path)
        elif viewer is not None:
            # Попередній перегляд: блокує, доки оператор не закриє вікно
            viewer(image)
        return image
