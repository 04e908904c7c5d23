"""
Пакет ShelfMarket Labels
========================

Генерация ценников для аренды полок: код EAN-13 из номера полки и цены,
и растровая этикетка (PNG) для термопринтера.

Этот пакет предоставляет:
    - Формирование 12 цифр данных (номер полки + цена в эре) и контрольной цифры
    - Проверку отсканированных кодов EAN-13 и их разбор обратно в полку и цену
    - Кодирование в 95 модулей по таблицам L/G/R стандарта EAN-13
    - Рендеринг этикетки через Pillow (пиксели или миллиметры + dpi)
    - Сервис генерации этикеток с пакетным и асинхронным режимом

Пример базового использования:
    >>> from shelfmarket import Ean13Renderer, build_ean13, get_logger
    >>>
    >>> logger = get_logger(__name__)
    >>> code = build_ean13("12", "4.56")
    >>> png = Ean13Renderer().render_png(code, scale=2, bar_height=40)
    >>> logger.info("Этикетка %s: %d байт", code, len(png))

Переменные окружения:
    SHELFMARKET_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR, CRITICAL
    SHELFMARKET_LOG_DIR: каталог для логов (пустая строка отключает файл)
"""

import json
import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

# =============================================================================
# МЕТАДАННЫЕ ВЕРСИИ
# =============================================================================

__version__ = "0.1.0"
__author__ = "ShelfMarket Development Team"
__description__ = "EAN-13 shelf label generation for shelf-rental shops"
__license__ = "MIT"
__python_requires__ = ">=3.11"

VERSION_MAJOR = 0
VERSION_MINOR = 1
VERSION_PATCH = 0

if sys.version_info < (3, 11):
    raise RuntimeError(
        f"ShelfMarket Labels требует Python 3.11 или выше. "
        f"Текущая версия: {sys.version_info.major}."
        f"{sys.version_info.minor}.{sys.version_info.micro}"
    )

# =============================================================================
# КОНФИГУРАЦИЯ ЛОГИРОВАНИЯ
# =============================================================================

_ROOT_LOGGER_NAME = "shelfmarket"


def _setup_logging() -> None:
    """
    Инициализировать общепакетную конфигурацию логирования.

    Настраивает логгер пакета с:
    - Консольным обработчиком (stderr) для WARNING и выше
    - Ротирующим файловым обработчиком для всех уровней
      (если каталог логов доступен для записи)

    Уровень: SHELFMARKET_LOG_LEVEL (по умолчанию INFO).
    Идемпотентна - повторные вызовы не имеют эффекта.
    """
    log_level_str = os.environ.get("SHELFMARKET_LOG_LEVEL", "INFO").upper()
    log_level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    log_level = log_level_map.get(log_level_str, logging.INFO)

    root_logger = logging.getLogger(_ROOT_LOGGER_NAME)
    if root_logger.handlers:
        return

    root_logger.setLevel(log_level)

    formatter = logging.Formatter(
        fmt=("[%(asctime)s] %(levelname)-8s " "[%(name)s.%(funcName)s:%(lineno)d] %(message)s"),
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    log_dir_str = os.environ.get("SHELFMARKET_LOG_DIR", "logs")
    if log_dir_str:
        try:
            log_dir = Path(log_dir_str)
            log_dir.mkdir(parents=True, exist_ok=True)

            file_handler = logging.handlers.RotatingFileHandler(
                filename=log_dir / "shelfmarket.log",
                maxBytes=10 * 1024 * 1024,  # 10 МБ
                backupCount=5,
                encoding="utf-8",
            )
            file_handler.setLevel(log_level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
        except OSError as e:
            root_logger.warning(
                "Не удалось инициализировать файловое логирование: %s. "
                "Используется только консоль.",
                e,
            )

    root_logger.propagate = False


def get_logger(module_name: str) -> logging.Logger:
    """
    Получить логгер в пространстве имён 'shelfmarket'.

    Аргументы:
        module_name: Обычно `__name__`.

    Возвращает:
        logging.Logger, наследующий обработчики пакета.

    Пример:
        >>> get_logger("__main__").name
        'shelfmarket.main'
        >>> get_logger("labels.print").name
        'shelfmarket.labels.print'
    """
    if module_name.startswith(_ROOT_LOGGER_NAME):
        full_name = module_name
    elif module_name == "__main__":
        full_name = f"{_ROOT_LOGGER_NAME}.main"
    else:
        full_name = f"{_ROOT_LOGGER_NAME}.{module_name.lstrip('.')}"
    return logging.getLogger(full_name)


# =============================================================================
# УПРАВЛЕНИЕ КОНФИГУРАЦИЕЙ
# =============================================================================

_DEFAULT_CONFIG: Dict[str, Any] = {
    "log_level": "INFO",
    "scale": 3,
    "bar_height": 60,
    "include_numbers": True,
    "shelf_digits": 6,
    "price_digits": 6,
    "label_profile": "thermal_58x30",
}


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Загрузить конфигурацию из config.json или вернуть значения по умолчанию.

    Недопустимый или нечитаемый файл не приводит к исключению: в лог
    пишется предупреждение и используются значения по умолчанию.

    Ключи конфигурации:
        - log_level: str
        - scale: int - пикселей на модуль
        - bar_height: int - высота штрихов в пикселях
        - include_numbers: bool - печатать цифры под штрихами
        - shelf_digits / price_digits: int - ширина сегментов (сумма 12)
        - label_profile: str - пресет размера этикетки

    Аргументы:
        config_path: Путь к файлу. Если None, ищет 'config.json' в текущем каталоге.

    Возвращает:
        Словарь со всеми ключами по умолчанию, переопределёнными
        пользовательскими значениями.
    """
    logger = get_logger(__name__)

    if config_path is None:
        config_path = Path("config.json")

    config = _DEFAULT_CONFIG.copy()

    if config_path.exists():
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                user_config = json.load(f)

            if not isinstance(user_config, dict):
                raise ValueError(
                    f"Файл конфигурации должен содержать JSON-объект, "
                    f"получен {type(user_config).__name__}"
                )

            config.update(user_config)
            logger.info("Конфигурация загружена из %s", config_path)
            logger.debug("Конфигурация: %s", config)

        except json.JSONDecodeError as e:
            logger.warning(
                "Не удалось разобрать %s: недопустимый JSON в строке %d, столбце %d. "
                "Используется конфигурация по умолчанию.",
                config_path,
                e.lineno,
                e.colno,
            )
        except OSError as e:
            logger.warning(
                "Не удалось прочитать %s: %s. Используется конфигурация по умолчанию.",
                config_path,
                e,
            )
        except ValueError as e:
            logger.warning(
                "Недопустимый формат конфигурации: %s. Используется конфигурация по умолчанию.",
                e,
            )
    else:
        logger.debug("Файл конфигурации %s не найден, используются значения по умолчанию", config_path)

    return config


def check_dependencies() -> Dict[str, bool]:
    """
    Проверить доступность зависимостей.

    Не вызывает исключений для отсутствующих пакетов.

    Проверяемые зависимости (только времени выполнения):
        - pillow: рендеринг этикеток (обязательная)

    Возвращает:
        Словарь: имя пакета -> доступен ли.
    """
    dependencies: Dict[str, bool] = {}

    try:
        import PIL  # noqa: F401

        dependencies["pillow"] = True
    except ImportError:
        dependencies["pillow"] = False

    return dependencies


# =============================================================================
# ПУБЛИЧНЫЙ API
# =============================================================================

# Импорты после утилит: логирование должно быть готово первым.
from shelfmarket.barcodegen import (  # noqa: E402
    Ean13Error,
    Ean13Renderer,
    build_ean13,
    compose_data12,
    compute_check_digit,
    compute_label_geometry,
    encode_modules,
    is_valid_ean13,
    split_ean13,
    validate_ean13,
)
from shelfmarket.config import LabelProfile, LabelSize, RenderConfig  # noqa: E402
from shelfmarket.model import ShelfLabel  # noqa: E402
from shelfmarket.services import LabelResult, LabelService  # noqa: E402

__all__ = [
    # Метаданные версии
    "__version__",
    "__author__",
    "__description__",
    "__license__",
    "__python_requires__",
    "VERSION_MAJOR",
    "VERSION_MINOR",
    "VERSION_PATCH",
    # Утилиты
    "get_logger",
    "load_config",
    "check_dependencies",
    # Кодирование
    "compose_data12",
    "compute_check_digit",
    "build_ean13",
    "validate_ean13",
    "is_valid_ean13",
    "split_ean13",
    "encode_modules",
    "compute_label_geometry",
    "Ean13Error",
    # Рендеринг и конфигурация
    "Ean13Renderer",
    "RenderConfig",
    "LabelSize",
    "LabelProfile",
    # Модель и сервисы
    "ShelfLabel",
    "LabelService",
    "LabelResult",
]

# =============================================================================
# ИНИЦИАЛИЗАЦИЯ ПАКЕТА
# =============================================================================

_setup_logging()

_logger = get_logger(__name__)
_logger.debug("ShelfMarket Labels v%s, Python %s", __version__, sys.version)
