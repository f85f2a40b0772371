"""
Настройки проекта Slide Capture.

Значения здесь — дефолты. Пользовательские настройки хранятся в YAML
(см. src/session/infrastructure/config_store.py) и валидируются AppConfig.
"""

import os
from pathlib import Path

# =============================================================================
# ПУТИ ПРОЕКТА
# =============================================================================
PROJECT_ROOT = Path(__file__).parent.parent
DATA_DIR = PROJECT_ROOT / "data"
OUTPUT_DIR = DATA_DIR / "slides"
CONFIG_FILE = Path(os.getenv("SLIDE_CAPTURE_CONFIG", str(DATA_DIR / "slide_capture.yaml")))

# Служебный файл сигналов pause/resume/cancel (не пересекается с NN_Title.png)
CONTROL_FILE_NAME = ".slide_capture_control"

# =============================================================================
# GOOGLE CLOUD VISION API
# =============================================================================
GOOGLE_APPLICATION_CREDENTIALS = os.getenv(
    "GOOGLE_APPLICATION_CREDENTIALS",
    str(PROJECT_ROOT / "config" / "google_credentials.json")
)

# Слайды курса на английском
OCR_LANGUAGE_HINTS = ["en"]

# Максимум одновременных OCR-вызовов на один слайд
OCR_MAX_WORKERS = 4

# =============================================================================
# ГЕОМЕТРИЯ (референсный кадр 3840x2160)
# =============================================================================
REFERENCE_WIDTH = 3840
REFERENCE_HEIGHT = 2160

# (x, y, width, height) в координатах референсного кадра
REFERENCE_REGIONS = {
    "title": (160, 60, 3520, 220),        # узкая полоса заголовка
    "cover": (160, 600, 3520, 900),       # полоса титульного слайда
    "sidebar": (2880, 240, 880, 1760),    # колонка-выноска сценария
    "full": (0, 0, 3840, 2160),           # весь слайд
    "verify": (480, 300, 2880, 1560),     # область хэша для проверки перелистывания
}

# Уменьшение full-региона перед OCR
FULL_REGION_DOWNSCALE = 0.5

# =============================================================================
# НАСТРОЙКИ СЕССИИ (дефолты AppConfig)
# =============================================================================
DEFAULT_LOG_LEVEL = 1             # 0=DEBUG, 1=INFO, 2=WARNING, 3=ERROR
DEFAULT_DELAY_BETWEEN_SLIDES = 1.5
DEFAULT_CAPTURE_DELAY = 0.5
DEFAULT_MAX_TITLE_LENGTH = 60
DEFAULT_RESUME_MAX_AGE_HOURS = 24.0

MIN_DELAY_SECONDS = 0.1
MIN_TITLE_LENGTH = 10
MAX_TITLE_LENGTH = 200
CONFIG_SCHEMA_VERSION = 1

# =============================================================================
# RETRY / ВАЛИДАЦИЯ ЗАХВАТА
# =============================================================================
MIN_CAPTURE_WIDTH = 100
MIN_CAPTURE_HEIGHT = 100

CAPTURE_ATTEMPTS = 2              # первая попытка + один повтор
CAPTURE_RETRY_DELAY = 2.0         # "ждём дольше" перед повтором
ADVANCE_RETRY_DELAY = 0.5
GENERIC_ERROR_DELAY = 1.0
PAUSE_POLL_INTERVAL = 0.25

# Защита от бесконечного цикла в ensure_unique_path
UNIQUE_PATH_MAX_ATTEMPTS = 50

# Сколько замеров нужно для оценки ETA
ETA_MIN_SAMPLES = 3
