#!/usr/bin/env python3
"""
Vendor Discovery — каталог вендоров с фильтрами и картой.

CLI для работы с локальным каталогом и запуска веб-интерфейса.
"""
import argparse
import json
import logging

from vendor_discovery.config.settings import settings
from vendor_discovery.utils.logger import setup_logger, get_logger
from vendor_discovery.engine import DiscoveryEngine, category_base
from vendor_discovery.demo import generate_demo_vendors


def cmd_stats(engine: DiscoveryEngine, args):
    """Показать статистику."""
    stats = engine.get_statistics()
    print("\n📊 Статистика:")
    print(f"  Вендоров: {stats['vendors_count']}")
    print(f"  В избранном: {stats['saved_vendors_count']}")


def cmd_seed(engine: DiscoveryEngine, args):
    """Заполнить локальный каталог демо-данными."""
    records = generate_demo_vendors(count=args.count, seed=args.seed)
    saved = engine.db.seed(records)
    print(f"\n✅ Сохранено вендоров: {saved}/{len(records)}")


def cmd_search(engine: DiscoveryEngine, args):
    """Выборка по query string, как на странице /vendors."""
    base = category_base(args.category) if args.category else None
    state, outcome, page = engine.render_page(args.query, base=base)
    if not outcome.ok:
        print(f"\n❌ Ошибка: {outcome.error.message}")
        return 1

    result = outcome.result
    print(f"\nСтраница {result.current_page}/{result.total_pages}, вендоров: {len(result.items)}")
    if args.json:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
        return 0
    for card in page.cards:
        star = "★" if card.is_recommended else " "
        print(f"  {star} {card.name:<40} {card.rating_label:>6} {card.price_label:>12}  {card.city_label or ''}")
    if page.is_empty:
        print(f"  {page.empty_title}. {page.empty_message}")
    return 0


def cmd_server(engine: DiscoveryEngine, args):
    """Запуск веб-сервера UI."""
    import uvicorn
    print(f"Запуск UI на http://{args.host}:{args.port}/vendors")
    uvicorn.run(
        "vendor_discovery.api.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload
    )


def main():
    """Главная функция."""
    parser = argparse.ArgumentParser(
        description="Vendor Discovery — каталог вендоров",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Примеры:
  vendor-discovery seed --count 60
  vendor-discovery stats
  vendor-discovery search "mainCategory=photography&minPrice=500&sort=price-low"
  vendor-discovery search "isRecommended=true" --category catering --json
  vendor-discovery server --port 8000
        """
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Подробный вывод (DEBUG уровень)'
    )

    subparsers = parser.add_subparsers(dest='command', help='Доступные команды')

    # stats
    subparsers.add_parser('stats', help='Показать статистику')

    # seed
    seed_parser = subparsers.add_parser('seed', help='Заполнить каталог демо-данными')
    seed_parser.add_argument('--count', type=int, default=60, help='Количество вендоров')
    seed_parser.add_argument('--seed', type=int, default=None, help='Seed генератора')

    # search
    search_parser = subparsers.add_parser('search', help='Выборка по query string')
    search_parser.add_argument('query', nargs='?', default='', help='Query string (без ?)')
    search_parser.add_argument('--category', type=str, default=None, help='Страница категории')
    search_parser.add_argument('--json', action='store_true', help='Вывести результат в JSON')

    # server
    server_parser = subparsers.add_parser('server', help='Запуск UI (Веб-интерфейс)')
    server_parser.add_argument('--host', type=str, default='127.0.0.1', help='Хост')
    server_parser.add_argument('--port', type=int, default=8000, help='Порт')
    server_parser.add_argument('--reload', action='store_true', help='Перезапуск при изменении кода')

    args = parser.parse_args()

    # Настраиваем логирование
    level = logging.DEBUG if args.verbose else settings.log_level
    setup_logger(level=level, log_file=settings.log_file)
    logger = get_logger("main")
    logger.debug(f"Command: {args.command}")

    # Инициализируем движок (кроме команды server)
    engine = None
    if args.command not in (None, 'server'):
        engine = DiscoveryEngine()
        engine.init_database()

    # Выполняем команду
    commands = {
        'stats': cmd_stats,
        'seed': cmd_seed,
        'search': cmd_search,
        'server': cmd_server,
    }

    if args.command in commands:
        return commands[args.command](engine, args) or 0

    parser.print_help()
    return 0


if __name__ == "__main__":
    exit(main())
