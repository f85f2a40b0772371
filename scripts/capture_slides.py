#!/usr/bin/env python3
"""
Захват слайдов презентации с классификацией по OCR.

Использование:
    # Живой захват 40 слайдов (окно презентации должно быть активно)
    python scripts/capture_slides.py --total 40

    # Переименовать папку уже выгруженных скриншотов
    python scripts/capture_slides.py --replay path/to/screens --output data/slides/deck

    # Продолжить прерванную сессию без вопроса
    python scripts/capture_slides.py --resume

Управление во время работы (из соседнего терминала):
    echo pause  > <output>/.slide_capture_control
    echo resume > <output>/.slide_capture_control
    echo cancel > <output>/.slide_capture_control
"""

import sys
import argparse
from pathlib import Path

# Добавляем корень проекта в путь
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from loguru import logger

from config.settings import GOOGLE_APPLICATION_CREDENTIALS, OUTPUT_DIR
from contracts.session_dto import ProgressEvent, SessionState
from src.domain.contracts import ResumeRecord
from src.logging_setup import configure_logging
from src.session import SessionComponentFactory, SessionSignals
from src.session.domain.exceptions import CaptureError, ConfigLoadError


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Slide Capture: захват и классификация слайдов")
    parser.add_argument("--total", type=int, default=0, help="Количество слайдов (по умолчанию: все в --replay)")
    parser.add_argument("--output", type=Path, default=None, help=f"Папка для слайдов (по умолчанию: {OUTPUT_DIR})")
    parser.add_argument("--replay", type=Path, default=None, help="Папка скриншотов вместо живого экрана")
    parser.add_argument("--config", type=Path, default=None, help="YAML конфиг (по умолчанию: data/slide_capture.yaml)")
    parser.add_argument("--credentials", default=GOOGLE_APPLICATION_CREDENTIALS, help="Google Vision credentials JSON")
    parser.add_argument("--no-ocr", action="store_true", help="Без классификации: все слайды Slide_NN")
    parser.add_argument("--log-level", type=int, choices=[0, 1, 2, 3], default=None,
                        help="0=DEBUG 1=INFO 2=WARNING 3=ERROR (по умолчанию из конфига)")
    parser.add_argument("--clear-on-cancel", action="store_true", help="Очищать запись resume при отмене")
    parser.add_argument("--check-config", action="store_true", help="Проверить конфиг и выйти")

    resume_group = parser.add_mutually_exclusive_group()
    resume_group.add_argument("--resume", dest="resume", action="store_true", default=None,
                              help="Продолжить прерванную сессию без вопроса")
    resume_group.add_argument("--no-resume", dest="resume", action="store_false",
                              help="Всегда начинать новую сессию")
    return parser.parse_args(argv)


def ask_resume(record: ResumeRecord) -> bool:
    """Интерактивный вопрос о продолжении (только если stdin — терминал)."""
    if not sys.stdin.isatty():
        return False
    answer = input(
        f"Найдена незавершённая сессия: {record.current_slide}/{record.total_slides} "
        f"в {record.output_folder} ({record.timestamp:%Y-%m-%d %H:%M}). Продолжить? [y/N] "
    )
    return answer.strip().lower() in ("y", "yes", "д", "да")


def print_event(event: ProgressEvent) -> None:
    if event.message:
        print(f"[{event.state.value.upper()}] {event.message}")
        return
    eta = f", осталось ~{event.eta}" if event.eta else ""
    name = event.filename or "-"
    print(f"[{event.index:02d}/{event.total:02d}] {event.outcome.value if event.outcome else ''}: {name}{eta}")


def main(argv=None) -> int:
    """Главная функция запуска сессии захвата."""
    args = parse_args(argv)

    config_store = SessionComponentFactory.create_config_store(args.config)

    if args.check_config:
        try:
            config = config_store.validate()
        except ConfigLoadError as e:
            print(f"[ERROR] {e}")
            return 1
        print(f"[OK] Конфиг валиден: {config.model_dump(exclude={'resume_record'})}")
        return 0

    config = config_store.load()
    log_level = args.log_level if args.log_level is not None else config.log_level
    configure_logging(log_level)

    try:
        capture_source, navigator = SessionComponentFactory.create_capture(args.replay)
    except CaptureError as e:
        logger.error(f"[CLI] {e}")
        return 1

    total = args.total
    if total <= 0 and args.replay is not None:
        total = len(capture_source.images)

    output_folder = args.output or OUTPUT_DIR
    signals = SessionSignals()
    region_extractor = SessionComponentFactory.create_region_extractor(
        credentials_path=args.credentials,
        use_ocr=not args.no_ocr,
    )

    controller = SessionComponentFactory.create_controller(
        config_store=config_store,
        capture_source=capture_source,
        navigator=navigator,
        region_extractor=region_extractor,
        config=config,
        signals=signals,
        on_event=print_event,
        clear_resume_on_cancel=args.clear_on_cancel,
    )

    accept_resume = ask_resume if args.resume is None else args.resume
    try:
        session = controller.prepare(total, output_folder, accept_resume)
    except ValueError as e:
        logger.error(f"[CLI] {e}; укажите --total")
        return 1

    configure_logging(log_level, log_file=session.output_folder / "capture.log")

    signal_source = SessionComponentFactory.create_signal_source(signals, session.output_folder)
    signal_source.start()
    try:
        summary = controller.run()
    except KeyboardInterrupt:
        signals.cancel()
        logger.warning("[CLI] Прервано с клавиатуры")
        return 130
    finally:
        signal_source.stop()

    print("\n" + "=" * 60)
    print(f"  {summary.describe()}")
    print("=" * 60)
    return 0 if summary.state == SessionState.COMPLETED else 2


if __name__ == "__main__":
    sys.exit(main())
