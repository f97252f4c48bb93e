"""Загрузка изображений (файл или байты) и выгрузка результата.

Принципы:
- SRP: класс отвечает только за декодирование/кодирование и базовые свойства.
- OCP: новые источники (стрим, URL) можно добавить отдельными методами.
- LSP/ISP: возвращает `ImageData` с предсказуемыми полями; интерфейс узкий и конкретный.
"""
from __future__ import annotations

import io
from pathlib import Path
from typing import Optional

from PIL import Image, UnidentifiedImageError

from instafilter.models.image_model import ImageData


class ImageService:
    def load_image(self, file_path: str | Path) -> ImageData:
        """Загружает изображение с диска и возвращает его вместе с метаданными.

        Args:
            file_path: Путь до файла изображения.

        Returns:
            `ImageData` c `PIL.Image.Image` (в режиме RGBA), размерами, режимом и размером файла.

        Raises:
            FileNotFoundError: если путь не существует или не указывает на файл.
            ValueError: если файл не распознан как изображение.
        """
        path = Path(file_path)
        if not path.exists() or not path.is_file():
            raise FileNotFoundError(f"Файл не найден: {path}")

        data = path.read_bytes()
        image_data = self.decode_image(data)
        return ImageData(
            pil_image=image_data.pil_image,
            width=image_data.width,
            height=image_data.height,
            mode=image_data.mode,
            size_bytes=image_data.size_bytes,
            path=path,
        )

    def decode_image(self, data: bytes) -> ImageData:
        """Декодирует сырые байты (например, от пикера файлов).

        Raises:
            ValueError: если байты не являются изображением.
        """
        if not data:
            raise ValueError("Пустые данные изображения")
        try:
            with Image.open(io.BytesIO(data)) as raw:
                pil_image = raw.convert("RGBA")
        except (UnidentifiedImageError, OSError) as exc:
            raise ValueError("Данные не являются изображением") from exc

        width, height = pil_image.size
        size_bytes: Optional[int] = len(data)
        return ImageData(
            pil_image=pil_image,
            width=width,
            height=height,
            mode=pil_image.mode,
            size_bytes=size_bytes,
        )

    def encode_png(self, image: Image.Image) -> bytes:
        """Кодирует изображение в PNG (для «Поделиться»)."""
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        return buffer.getvalue()

    def save_image(self, image: Image.Image, file_path: str | Path) -> Path:
        """Сохраняет изображение; формат определяется по расширению.

        JPEG не поддерживает альфа-канал, поэтому перед сохранением он
        отбрасывается.
        """
        path = Path(file_path)
        if path.suffix.lower() in (".jpg", ".jpeg") and image.mode != "RGB":
            image = image.convert("RGB")
        image.save(path)
        return path
