# Шаблон URL тайлового сервера по умолчанию (OpenStreetMap)
DEFAULT_URL_TEMPLATE = 'https://a.tile.osm.org/{z}/{x}/{y}.png'

# Плейсхолдеры, обязательные в шаблоне URL
URL_PLACEHOLDERS = ('{z}', '{x}', '{y}')

# Размеры результирующего изображения по умолчанию (px)
DEFAULT_WIDTH = 300
DEFAULT_HEIGHT = 300

# Базовый размер тайла Web Mercator (пикселей)
TILE_SIZE = 256

# Максимальный уровень приближения для автоподбора zoom
MAX_ZOOM = 17

# Граница широты Web Mercator (градусы), за ней проекция уходит в бесконечность
MAX_LATITUDE = 85.0511287798

WORLD_LNG_SPAN_DEG = 360.0
WORLD_LNG_HALF_SPAN_DEG = 180.0

# Число одновременных загрузок тайлов за один рендер
DOWNLOAD_CONCURRENCY = 24

# Повторы загрузки тайла: число попыток и фиксированная пауза между ними (с)
HTTP_RETRIES_DEFAULT = 5
HTTP_RETRY_DELAY_S = 1.0

# Таймаут одного HTTP-запроса (с)
HTTP_TIMEOUT_DEFAULT = 20.0

HTTP_OK = 200

# User-Agent: tile.openstreetmap.org отклоняет запросы без него
HTTP_USER_AGENT = 'staticmap-py/0.1'

# Цвет фона холста там, где нет тайлов (RGBA)
CANVAS_BACKGROUND = (0, 0, 0, 0)

# Цвет аннотаций по умолчанию (RGBA)
DEFAULT_TOOL_COLOR = (0, 0, 255, 255)

# Минимальное количество точек для рисования линии (draw.line требует >= 2)
MIN_POINTS_FOR_LINE = 2

# Минимальное количество точек для многоугольника
MIN_POINTS_FOR_POLYGON = 3

# Порог упрощения полилинии: точки ближе этого расстояния (px) отбрасываются
LINE_SIMPLIFY_TOLERANCE_PX = 1.0

# Формат логов по умолчанию
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
