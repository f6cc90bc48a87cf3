class MaskingError(Exception):
    pass


class ValidationError(MaskingError):
    """Умова запуску пакетної обробки не виконана. Нічого не записано."""


class FormatError(MaskingError):
    def __init__(self, line, line_number=None, reason=""):
        self.line = line
        self.line_number = line_number
        self.reason = reason
        where = f"рядок {line_number}" if line_number is not None else "рядок"
        message = f"Некоректний {where}: {line!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class ImageLoadError(MaskingError):
    def __init__(self, path, reason="не вдалося прочитати зображення"):
        self.path = path
        super().__init__(f"{reason}: {path}")


class ImageWriteError(MaskingError):
    def __init__(self, path, reason="не вдалося записати зображення"):
        self.path = path
        super().__init__(f"{reason}: {path}")


class MaskStateError(MaskingError):
    pass
