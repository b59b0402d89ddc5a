from __future__ import annotations

from pydantic import BaseModel, field_validator, model_validator

from staticmap.shared.constants import (
    CANVAS_BACKGROUND,
    DEFAULT_HEIGHT,
    DEFAULT_URL_TEMPLATE,
    DEFAULT_WIDTH,
    DOWNLOAD_CONCURRENCY,
    HTTP_RETRIES_DEFAULT,
    HTTP_RETRY_DELAY_S,
    HTTP_TIMEOUT_DEFAULT,
    MAX_LATITUDE,
    MAX_ZOOM,
    TILE_SIZE,
    URL_PLACEHOLDERS,
)


class MapSettings(BaseModel):
    """
    Unresolved view and download configuration of a static map.

    Zero width/height pass validation here and are rejected when the view is
    resolved, so that render reports InvalidSizeError.
    """

    model_config = {
        'extra': 'ignore',  # профили могут содержать аннотации и прочие секции
    }

    # Размер результирующего изображения (px)
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT

    # Отступ объектов от краёв карты (px) по x и y
    padding_x: int = 0
    padding_y: int = 0

    # Если не заданы, подбираются по аннотациям
    zoom: int | None = None
    center_lat: float | None = None
    center_lon: float | None = None

    url_template: str = DEFAULT_URL_TEMPLATE
    tile_size: int = TILE_SIZE

    # Параметры загрузки тайлов
    concurrency: int = DOWNLOAD_CONCURRENCY
    retries: int = HTTP_RETRIES_DEFAULT
    retry_delay: float = HTTP_RETRY_DELAY_S
    timeout: float = HTTP_TIMEOUT_DEFAULT

    # Цвет холста там, где нет тайлов (RGBA)
    background: tuple[int, int, int, int] = CANVAS_BACKGROUND

    @field_validator('width', 'height', 'padding_x', 'padding_y', 'tile_size')
    @classmethod
    def validate_non_negative(cls, v: int) -> int:
        if v < 0:
            msg = 'Значение не может быть отрицательным'
            raise ValueError(msg)
        return v

    @field_validator('zoom')
    @classmethod
    def validate_zoom(cls, v: int | None) -> int | None:
        if v is not None and not (0 <= v <= MAX_ZOOM):
            msg = f'Zoom должен быть в диапазоне [0, {MAX_ZOOM}]'
            raise ValueError(msg)
        return v

    @field_validator('center_lat')
    @classmethod
    def validate_center_lat(cls, v: float | None) -> float | None:
        if v is not None and abs(v) > MAX_LATITUDE:
            msg = f'Широта вне диапазона Web Mercator ±{MAX_LATITUDE}'
            raise ValueError(msg)
        return v

    @field_validator('url_template')
    @classmethod
    def validate_url_template(cls, v: str) -> str:
        missing = [p for p in URL_PLACEHOLDERS if p not in v]
        if missing:
            msg = f'Шаблон URL должен содержать {", ".join(missing)}'
            raise ValueError(msg)
        return v

    @field_validator('concurrency', 'retries')
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            msg = 'Значение должно быть не меньше 1'
            raise ValueError(msg)
        return v

    @field_validator('background')
    @classmethod
    def validate_background(
        cls, v: tuple[int, int, int, int]
    ) -> tuple[int, int, int, int]:
        if any(not (0 <= c <= 255) for c in v):  # noqa: PLR2004
            msg = 'Компоненты цвета должны быть в диапазоне [0, 255]'
            raise ValueError(msg)
        return v

    @model_validator(mode='after')
    def validate_padding(self) -> MapSettings:
        if self.width and 2 * self.padding_x >= self.width:
            msg = 'padding_x не оставляет места для карты'
            raise ValueError(msg)
        if self.height and 2 * self.padding_y >= self.height:
            msg = 'padding_y не оставляет места для карты'
            raise ValueError(msg)
        return self

    @property
    def padding(self) -> tuple[int, int]:
        return self.padding_x, self.padding_y
