
# Колір заливки масок (RGB), однаковий для всіх файлів у пакетному запуску
FILL_COLOR = (255, 0, 0)

# Шаблон імені файлів за замовчуванням (shell-wildcard)
DEFAULT_FILE_PATTERN = "*.jpg"

MASK_FILE_EXTENSION = ".csv"
MASK_FILE_FILTER = "Mask CSV (*.csv);;All Files (*)"
IMAGE_FILE_FILTER = "Images (*.png *.jpg *.jpeg *.bmp *.tif *.tiff);;All Files (*)"

UNTITLED_NAME = "Без назви"

# Канва редактора масок
POINT_RADIUS = 4
LINE_WIDTH = 2
CANVAS_BACKGROUND = "#222"
SAVED_MASK_COLOR = (255, 0, 0, 110)
EDITING_MASK_COLOR = (0, 255, 255, 255)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_MAX_BYTES = 1024 * 1024
LOG_BACKUP_COUNT = 5
