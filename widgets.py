from PyQt6.QtWidgets import QWidget, QSizePolicy
from PyQt6.QtGui import QPainter, QPen, QPolygonF, QColor, QBrush, QPixmap
from PyQt6.QtCore import Qt, QPointF, pyqtSignal

from constants import (POINT_RADIUS, LINE_WIDTH, CANVAS_BACKGROUND,
                       SAVED_MASK_COLOR, EDITING_MASK_COLOR)


class MaskCanvas(QWidget):
    """
    Канва редактора: зображення розтягнуте на весь віджет (масштаб по X і Y
    окремий), поверх: маски в координатах канви.
    ЛКМ: вершина | Подвійний клік: зберегти маску | ПКМ: очистити маску
    """
    vertexRequested = pyqtSignal(float, float)
    maskCompleted = pyqtSignal()
    maskCleared = pyqtSignal()
    canvasResized = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        self.setMinimumSize(200, 150)
        self.pixmap = None
        self.masks = []

    def canvas_size(self):
        return (float(self.width()), float(self.height()))

    def set_image(self, path):
        pixmap = QPixmap(path)
        self.pixmap = None if pixmap.isNull() else pixmap
        self.update()

    def set_masks(self, masks):
        self.masks = masks
        self.update()

    # --- PAINTING ---
    def paintEvent(self, event):
        painter = QPainter(self)
        painter.fillRect(self.rect(), QColor(CANVAS_BACKGROUND))

        if self.pixmap is None:
            painter.setPen(Qt.GlobalColor.white)
            painter.drawText(self.rect(), Qt.AlignmentFlag.AlignCenter, "Зображення не відкрито")
            return

        painter.drawPixmap(self.rect(), self.pixmap)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)

        for mask in self.masks:
            points = [QPointF(p.x, p.y) for p in mask.display_vertices]
            if not points:
                continue
            if mask.is_editing:
                pen = QPen(QColor(*EDITING_MASK_COLOR), LINE_WIDTH)
                painter.setPen(pen)
                painter.setBrush(Qt.BrushStyle.NoBrush)
                painter.drawPolyline(QPolygonF(points))
                painter.setBrush(QBrush(QColor(*EDITING_MASK_COLOR)))
                for pt in points:
                    painter.drawEllipse(pt, POINT_RADIUS, POINT_RADIUS)
            else:
                painter.setPen(Qt.PenStyle.NoPen)
                painter.setBrush(QBrush(QColor(*SAVED_MASK_COLOR)))
                painter.drawPolygon(QPolygonF(points))

    # --- INPUT ---
    def mousePressEvent(self, event):
        pos = event.position()
        if event.button() == Qt.MouseButton.LeftButton:
            self.vertexRequested.emit(pos.x(), pos.y())
        elif event.button() == Qt.MouseButton.RightButton:
            self.maskCleared.emit()

    def mouseDoubleClickEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            self.maskCompleted.emit()

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self.canvasResized.emit()
