import cv2
from PyQt6.QtWidgets import (QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QGridLayout,
                             QPushButton, QLabel, QFileDialog, QMessageBox, QLineEdit,
                             QProgressBar, QDialog, QApplication, QCheckBox)
from PyQt6.QtGui import QPixmap, QImage, QAction, QKeySequence
from PyQt6.QtCore import Qt

from constants import DEFAULT_FILE_PATTERN, MASK_FILE_FILTER, IMAGE_FILE_FILTER, MASK_FILE_EXTENSION
from errors import MaskingError
from models import BatchSettings
from scanner import check_executable, show_preview
from session import CallbackHost, EditSession
from widgets import MaskCanvas
from workers import MaskingWorker, start_worker, stop_worker


class PreviewDialog(QDialog):
    def __init__(self, image, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Попередній перегляд")
        rgb = cv2.cvtColor(image, cv2.COLOR_BGR2RGB)
        h, w, ch = rgb.shape
        q_img = QImage(rgb.data, w, h, ch * w, QImage.Format.Format_RGB888)
        # copy(): QImage не володіє буфером numpy
        pixmap = QPixmap.fromImage(q_img.copy())

        layout = QVBoxLayout(self)
        label = QLabel()
        screen = QApplication.primaryScreen()
        if screen is not None:
            avail = screen.availableGeometry().size() * 0.9
            if pixmap.width() > avail.width() or pixmap.height() > avail.height():
                pixmap = pixmap.scaled(avail, Qt.AspectRatioMode.KeepAspectRatio,
                                       Qt.TransformationMode.SmoothTransformation)
        label.setPixmap(pixmap)
        layout.addWidget(label)


class EditMasksDialog(QDialog):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.resize(1000, 750)
        self.setStyleSheet("background-color: #2b2b2b; color: #ffffff;")

        self.canvas = MaskCanvas(self)
        self.session = EditSession(CallbackHost(self.get_canvas_size, self.confirm_new_save_path))
        self.init_ui()

        self.canvas.vertexRequested.connect(self.on_vertex_requested)
        self.canvas.maskCompleted.connect(self.on_mask_completed)
        self.canvas.maskCleared.connect(self.on_mask_cleared)
        self.canvas.canvasResized.connect(self.on_canvas_resized)
        self.refresh()

    def init_ui(self):
        layout = QVBoxLayout(self)

        toolbar = QHBoxLayout()
        btn_image = QPushButton("🖼 Зображення")
        btn_image.clicked.connect(self.choose_image)
        toolbar.addWidget(btn_image)

        btn_open = QPushButton("📂 Маски")
        btn_open.clicked.connect(self.choose_mask_file)
        toolbar.addWidget(btn_open)

        btn_save = QPushButton("💾 Зберегти")
        btn_save.clicked.connect(self.save)
        toolbar.addWidget(btn_save)

        btn_save_as = QPushButton("Зберегти як...")
        btn_save_as.clicked.connect(self.save_as)
        toolbar.addWidget(btn_save_as)

        lbl_hint = QLabel("ЛКМ: Вершина | Подвійний клік: Зберегти маску | ПКМ: Очистити")
        lbl_hint.setStyleSheet("color: #aaa; font-size: 11px;")
        toolbar.addWidget(lbl_hint)
        toolbar.addStretch()
        layout.addLayout(toolbar)

        layout.addWidget(self.canvas, stretch=1)

        save_action = QAction("Save", self)
        save_action.setShortcut(QKeySequence("Ctrl+S"))
        save_action.triggered.connect(self.save)
        self.addAction(save_action)

    # --- HOST ---
    def get_canvas_size(self):
        return self.canvas.canvas_size()

    def confirm_new_save_path(self):
        path, _ = QFileDialog.getSaveFileName(self, "Зберегти маски", self.session.mask_file_path or
                                              "mask" + MASK_FILE_EXTENSION, MASK_FILE_FILTER)
        return bool(path), path

    # --- EVENTS ---
    def refresh(self):
        self.setWindowTitle(self.session.window_title)
        self.canvas.set_masks(self.session.all_masks)

    def on_vertex_requested(self, x, y):
        self.session.add_vertex((x, y))
        self.refresh()

    def on_mask_completed(self):
        self.session.save_current_mask()
        self.refresh()

    def on_mask_cleared(self):
        self.session.clear_current_mask()
        self.refresh()

    def on_canvas_resized(self):
        self.session.update_canvas_size()
        self.refresh()

    def choose_image(self):
        path, _ = QFileDialog.getOpenFileName(self, "Виберіть зображення", self.session.image_file_path,
                                              IMAGE_FILE_FILTER)
        if not path:
            return
        try:
            if self.session.set_image(path):
                self.canvas.set_image(path)
        except MaskingError as e:
            QMessageBox.critical(self, "Помилка", str(e))
        self.refresh()

    def choose_mask_file(self):
        path, _ = QFileDialog.getOpenFileName(self, "Виберіть файл масок", self.session.mask_file_path,
                                              MASK_FILE_FILTER)
        if not path:
            return
        try:
            self.session.load_mask_set(path)
        except (MaskingError, OSError) as e:
            QMessageBox.critical(self, "Помилка", f"Не вдалося завантажити маски: {e}")
        self.refresh()

    def save(self):
        try:
            self.session.overwrite_mask_set()
        except OSError as e:
            QMessageBox.critical(self, "Помилка", str(e))
        self.refresh()

    def save_as(self):
        try:
            self.session.save_new_mask_set()
        except OSError as e:
            QMessageBox.critical(self, "Помилка", str(e))
        self.refresh()


# --- MAIN WINDOW ---
class MainWindow(QMainWindow):
    def __init__(self):
        super().__init__()
        self.worker_thread = None
        self.worker = None
        self.init_ui()

    def init_ui(self):
        self.setWindowTitle("Masking Tool")
        self.resize(700, 300)
        self.setStyleSheet("background-color: #2b2b2b; color: #ffffff;")

        menu = self.menuBar().addMenu("Маски")
        edit_action = QAction("Редагувати маски...", self)
        edit_action.triggered.connect(self.open_mask_editor)
        menu.addAction(edit_action)

        widget = QWidget()
        layout = QVBoxLayout(widget)
        grid = QGridLayout()

        self.le_src = QLineEdit()
        self.le_dist = QLineEdit()
        self.le_pattern = QLineEdit(DEFAULT_FILE_PATTERN)
        self.le_masks = QLineEdit()

        rows = [
            ("Вхідна папка:", self.le_src, self.choose_src_folder),
            ("Вихідна папка:", self.le_dist, self.choose_dist_folder),
            ("Шаблон файлів:", self.le_pattern, None),
            ("Файл масок:", self.le_masks, self.choose_mask_file),
        ]
        for i, (title, line_edit, handler) in enumerate(rows):
            grid.addWidget(QLabel(title), i, 0)
            grid.addWidget(line_edit, i, 1)
            if handler:
                btn = QPushButton("...")
                btn.setFixedWidth(30)
                btn.clicked.connect(handler)
                grid.addWidget(btn, i, 2)
        layout.addLayout(grid)

        self.cb_keep_going = QCheckBox("Не зупинятись на помилках")
        layout.addWidget(self.cb_keep_going)

        progress_row = QHBoxLayout()
        self.progress_bar = QProgressBar()
        progress_row.addWidget(self.progress_bar)
        self.lbl_progress = QLabel("0 / 0")
        progress_row.addWidget(self.lbl_progress)
        layout.addLayout(progress_row)

        buttons = QHBoxLayout()
        buttons.addStretch()
        self.btn_preview = QPushButton("👁 Перегляд")
        self.btn_preview.clicked.connect(self.preview)
        buttons.addWidget(self.btn_preview)

        self.btn_cancel = QPushButton("Скасувати")
        self.btn_cancel.setEnabled(False)
        self.btn_cancel.clicked.connect(self.cancel)
        buttons.addWidget(self.btn_cancel)

        self.btn_execute = QPushButton("▶ Виконати")
        self.btn_execute.setStyleSheet("background-color: #0078d7;")
        self.btn_execute.clicked.connect(self.execute)
        buttons.addWidget(self.btn_execute)
        layout.addLayout(buttons)

        self.setCentralWidget(widget)

    def settings(self):
        return BatchSettings(
            src_folder=self.le_src.text().strip(),
            dist_folder=self.le_dist.text().strip(),
            file_name_pattern=self.le_pattern.text().strip(),
            mask_file_path=self.le_masks.text().strip(),
        )

    def confirm_dist_folder(self):
        answer = QMessageBox.question(
            self, "Підтвердження",
            "Вхідна і вихідна папки однакові. Файли буде перезаписано. Продовжити?")
        return answer == QMessageBox.StandardButton.Yes

    def choose_src_folder(self):
        folder = QFileDialog.getExistingDirectory(self, "Виберіть вхідну папку", self.le_src.text())
        if folder: self.le_src.setText(folder)

    def choose_dist_folder(self):
        folder = QFileDialog.getExistingDirectory(self, "Виберіть вихідну папку", self.le_dist.text())
        if folder: self.le_dist.setText(folder)

    def choose_mask_file(self):
        path, _ = QFileDialog.getOpenFileName(self, "Виберіть файл масок", self.le_masks.text(), MASK_FILE_FILTER)
        if path: self.le_masks.setText(path)

    def open_mask_editor(self):
        EditMasksDialog(self).exec()

    def preview(self):
        QApplication.setOverrideCursor(Qt.CursorShape.WaitCursor)
        try:
            image = show_preview(self.settings(), None, self.confirm_dist_folder)
        except (MaskingError, OSError) as e:
            QMessageBox.critical(self, "Помилка", str(e))
            return
        finally:
            QApplication.restoreOverrideCursor()
        PreviewDialog(image, self).exec()

    def execute(self):
        settings = self.settings()
        try:
            check_executable(settings, self.confirm_dist_folder)
        except MaskingError as e:
            QMessageBox.warning(self, "Помилка", f"Параметри некоректні: {e}")
            return

        self.btn_execute.setEnabled(False)
        self.btn_preview.setEnabled(False)
        self.btn_cancel.setEnabled(True)

        # Підтвердження вже отримано, у воркері не питаємо повторно
        self.worker = MaskingWorker(settings, continue_on_error=self.cb_keep_going.isChecked())
        self.worker.progressChanged.connect(self.on_progress)
        self.worker.finished.connect(self.on_finished)
        self.worker.failed.connect(self.on_failed)
        self.worker_thread = start_worker(self.worker, self)

    def cancel(self):
        if self.worker:
            self.worker.cancel()

    def on_progress(self, total, current):
        self.progress_bar.setMaximum(max(total, 1))
        self.progress_bar.setValue(current)
        self.lbl_progress.setText(f"{current} / {total}")

    def on_finished(self, results):
        self.reset_buttons()
        failed = [r for r in results if not r.ok]
        if failed:
            details = "\n".join(f"{r.src_path}: {r.error}" for r in failed[:10])
            QMessageBox.warning(self, "Увага", f"Не вдалося обробити {len(failed)} файл(ів):\n{details}")
        else:
            QMessageBox.information(self, "Успіх", f"Оброблено файлів: {len(results)}")

    def on_failed(self, message):
        self.reset_buttons()
        QMessageBox.critical(self, "Помилка", message)

    def reset_buttons(self):
        self.btn_execute.setEnabled(True)
        self.btn_preview.setEnabled(True)
        self.btn_cancel.setEnabled(False)
        self.worker = None

    def closeEvent(self, event):
        # Потік є дочірнім об'єктом вікна: дочекатися його до знищення
        stop_worker(self.worker, self.worker_thread)
        event.accept()
