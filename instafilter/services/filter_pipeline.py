"""Пайплайн фильтрации: исходное изображение -> фильтр -> параметры -> результат.

Принципы:
- SRP: единственный владелец состояния (источник, фильтр, параметры, результат).
- DIP: декодирование и обработка делегируются сервисам, UI только наблюдает.

Любое изменение входов запускает пересчёт. Показывается только результат
самого позднего пересчёта (номер поколения), а ошибки декодирования и
рендеринга не выходят за пределы пайплайна: они логируются, предыдущий
результат остаётся на месте.
"""
from __future__ import annotations

from typing import Awaitable, Callable, List, Optional, Union

from PIL import Image

from instafilter.models.filter_catalog import DEFAULT_FILTER, get_descriptor
from instafilter.models.filter_model import FilterDescriptor, FilterKind, FilterParam, FilterParameters
from instafilter.models.image_model import ImageData, RenderedImage
from instafilter.services.image_service import ImageService
from instafilter.services.process_service import ProcessService
from instafilter.utils.logging import get_logger

logger = get_logger(__name__.rsplit(".", 1)[-1])

Observer = Callable[[Optional[RenderedImage]], None]
SourceFetch = Callable[[], Awaitable[Optional[bytes]]]


class FilterPipeline:
    """Состояние фильтра и операции над ним.

    Ответственности:
    - Приём исходного изображения (байты или `ImageData`), в т.ч. асинхронно.
    - Смена фильтра с сохранением значений параметров.
    - Обновление параметров с пересчётом только для объявленных фильтром.
    - Уведомление подписчиков о новом результате.
    """

    def __init__(
        self,
        descriptor: Union[FilterDescriptor, FilterKind, str, None] = None,
        parameters: Optional[FilterParameters] = None,
        image_service: Optional[ImageService] = None,
        process_service: Optional[ProcessService] = None,
    ) -> None:
        self._image_service = image_service or ImageService()
        self._process_service = process_service or ProcessService()
        self._descriptor = get_descriptor(descriptor if descriptor is not None else DEFAULT_FILTER)
        self._parameters = parameters or FilterParameters()
        self._source: Optional[ImageData] = None
        self._rendered: Optional[RenderedImage] = None
        self._generation = 0
        # _load_ticket: last requested load; _committed_ticket: last load that became the source
        self._load_ticket = 0
        self._committed_ticket = 0
        self._observers: List[Observer] = []

    # ---- State ----
    @property
    def source(self) -> Optional[ImageData]:
        return self._source

    @property
    def descriptor(self) -> FilterDescriptor:
        return self._descriptor

    @property
    def parameters(self) -> FilterParameters:
        return self._parameters

    @property
    def rendered(self) -> Optional[RenderedImage]:
        return self._rendered

    def supports(self, name: Union[FilterParam, str]) -> bool:
        """Принимает ли активный фильтр параметр `name`."""
        return self._descriptor.supports(name)

    def subscribe(self, callback: Observer) -> Callable[[], None]:
        """Подписывает наблюдателя; возвращает функцию отписки."""
        self._observers.append(callback)

        def unsubscribe() -> None:
            if callback in self._observers:
                self._observers.remove(callback)

        return unsubscribe

    # ---- Operations ----
    def set_source(self, image: Union[bytes, ImageData]) -> bool:
        """Заменяет исходное изображение и пересчитывает результат.

        Если байты декодировались, незавершённые асинхронные загрузки,
        начатые раньше, будут отброшены. Возвращает False, если байты не
        удалось декодировать; тогда остальные загрузки не затрагиваются.
        """
        self._load_ticket += 1
        return self._apply_source(image, self._load_ticket)

    async def load_source(self, fetch: SourceFetch) -> bool:
        """Асинхронно получает байты через `fetch` и применяет их как источник.

        Результат отбрасывается, только если более поздняя загрузка уже
        успешно стала источником. Неудачная поздняя загрузка (ошибка `fetch`,
        None, недекодируемые байты) не мешает этой.

        Десктопное приложение открывает файлы синхронно (`set_source`), этот
        путь предназначен для хостов, получающих байты асинхронно.
        """
        self._load_ticket += 1
        ticket = self._load_ticket
        try:
            data = await fetch()
        except Exception as exc:
            logger.warning("Failed to fetch image bytes: %s", exc)
            return False
        if ticket < self._committed_ticket:
            logger.debug("Discarding superseded image load #%d", ticket)
            return False
        if data is None:
            return False
        return self._apply_source(data, ticket)

    def set_filter(self, descriptor: Union[FilterDescriptor, FilterKind, str]) -> Optional[RenderedImage]:
        """Меняет фильтр, сохраняя значения параметров, и пересчитывает.

        Raises:
            KeyError: если фильтра нет в каталоге.
        """
        self._descriptor = get_descriptor(descriptor)
        logger.debug(
            "Filter set to %s (params: %s)",
            self._descriptor.kind.value,
            ", ".join(sorted(p.value for p in self._descriptor.params)) or "none",
        )
        return self.render()

    def set_parameter(self, name: Union[FilterParam, str], value: float) -> bool:
        """Обновляет один параметр; пересчёт только если фильтр его объявляет.

        Returns:
            True, если был запущен пересчёт.

        Raises:
            ValueError: если параметра с таким именем не существует.
        """
        param = FilterParam.parse(name)
        self._parameters = self._parameters.with_value(param, value)
        if not self._descriptor.supports(param):
            return False
        self.render()
        return True

    def clear(self) -> None:
        """Сбрасывает источник и результат; начатые раньше загрузки отбрасываются."""
        self._load_ticket += 1
        self._committed_ticket = self._load_ticket
        self._source = None
        self._rendered = None
        self._generation += 1
        self._notify(None)

    def render(self) -> Optional[RenderedImage]:
        """Применяет текущий фильтр с текущими параметрами к текущему источнику.

        Returns:
            Новый `RenderedImage` или None, если источника нет либо фильтр не
            смог построить отображаемое изображение (ошибка логируется,
            предыдущий результат не меняется).
        """
        if self._source is None:
            return None

        self._generation += 1
        generation = self._generation
        source, descriptor, parameters = self._source, self._descriptor, self._parameters

        try:
            output = self._process_service.apply(source.pil_image, descriptor, parameters)
        except Exception:
            logger.warning("Filter %s failed to produce an output", descriptor.kind.value, exc_info=True)
            return None
        displayable = self._to_displayable(output)
        if displayable is None:
            logger.warning("Filter %s output is not a displayable raster", descriptor.kind.value)
            return None

        rendered = RenderedImage(
            pil_image=displayable,
            descriptor=descriptor,
            parameters=parameters,
            generation=generation,
        )
        self._surface(rendered)
        return rendered

    # ---- Helpers ----
    def _apply_source(self, image: Union[bytes, ImageData], ticket: int) -> bool:
        if isinstance(image, ImageData):
            data = image
        else:
            try:
                data = self._image_service.decode_image(image)
            except ValueError as exc:
                logger.warning("Could not decode source image: %s", exc)
                return False
        self._committed_ticket = max(self._committed_ticket, ticket)
        self._source = data
        logger.info("Source image set: %dx%d %s", data.width, data.height, data.mode)
        self.render()
        return True

    @staticmethod
    def _to_displayable(output: Optional[Image.Image]) -> Optional[Image.Image]:
        if output is None or output.width == 0 or output.height == 0:
            return None
        try:
            return output if output.mode == "RGBA" else output.convert("RGBA")
        except (ValueError, OSError):
            return None

    def _surface(self, rendered: RenderedImage) -> None:
        # last-write-wins: a result older than the one on display is dropped
        if self._rendered is not None and rendered.generation <= self._rendered.generation:
            return
        self._rendered = rendered
        self._notify(rendered)

    def _notify(self, rendered: Optional[RenderedImage]) -> None:
        for callback in list(self._observers):
            try:
                callback(rendered)
            except Exception:
                logger.exception("Pipeline observer %r failed", callback)
