"""
OrderGuard CLI — catalog bootstrap and dry-run validation commands.

Commands:
- orderguard init      — Create catalog tables, optionally seed from YAML
- orderguard check     — Run the bicycle_order triggers for one order
- orderguard triggers  — List registered triggers
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from decimal import Decimal, InvalidOperation
from typing import Optional

logger = logging.getLogger("orderguard.cli")


def main(argv: Optional[list] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="orderguard",
        description="OrderGuard — bicycle order stock validation",
    )
    parser.add_argument(
        "--config", default=None, help="Path to orderguard.yaml (default: auto-discover)"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # orderguard init
    init_parser = subparsers.add_parser("init", help="Create catalog tables")
    init_parser.add_argument("--seed", help="YAML file with a 'models:' list to load")

    # orderguard check
    check_parser = subparsers.add_parser("check", help="Validate one order against stock")
    check_parser.add_argument("--product", required=True, help="Bicycle model name")
    check_parser.add_argument("--manufacturer", required=True, help="Manufacturer name")
    check_parser.add_argument("--quantity", required=True, help="Order quantity")
    check_parser.add_argument("--lang", help="Message language (default: configured)")
    check_parser.add_argument(
        "--update", action="store_true", help="Fire before_update instead of before_insert"
    )

    # orderguard triggers
    subparsers.add_parser("triggers", help="List registered triggers")

    args = parser.parse_args(argv)

    if args.command == "init":
        return cmd_init(args)
    elif args.command == "check":
        return cmd_check(args)
    elif args.command == "triggers":
        return cmd_triggers(args)
    else:
        parser.print_help()
        return 0


def _load_config(args: argparse.Namespace):
    from orderguard.engine.config import load_platform_config
    from orderguard.engine.errors import OrderGuardConfigError

    try:
        return load_platform_config(args.config)
    except OrderGuardConfigError as e:
        print(f"[ERROR] {e.message}")
        return None


def cmd_init(args: argparse.Namespace) -> int:
    """Create the catalog tables and load seed data."""
    import yaml

    from orderguard.db.session import catalog_session_scope, init_catalog_db, seed_catalog

    config = _load_config(args)
    if config is None:
        return 1

    init_catalog_db(config.database.url, create_tables=True, echo=config.database.echo)
    print(f"[OK] Catalog tables ready ({config.database.url})")

    if args.seed:
        try:
            with open(args.seed, "r", encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            print(f"[ERROR] Cannot read seed file: {e}")
            return 1
        with catalog_session_scope() as session:
            count = seed_catalog(session, raw.get("models", []))
        print(f"[OK] Seeded {count} bicycle model(s)")
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    """
    Fire the bicycle_order triggers for a single order and print the outcome.

    Exit code 0 when the order would be written, 1 when it is rejected.
    """
    from orderguard.engine.context import ExecutionContext, set_execution_context
    from orderguard.engine.errors import OrderGuardError
    from orderguard.engine.runtime import build_runtime
    from orderguard.records import BICYCLE_ORDER, BicycleOrder, RecordEvent

    config = _load_config(args)
    if config is None:
        return 1

    try:
        quantity = Decimal(args.quantity)
    except InvalidOperation:
        quantity = None
    if quantity is None or not quantity.is_finite():
        print(f"[ERROR] Invalid quantity: {args.quantity}")
        return 2

    set_execution_context(ExecutionContext(
        username="cli",
        preferred_language=args.lang or config.translations.default_language,
    ))

    order = BicycleOrder(
        product=args.product,
        bicycle_manufacturer=args.manufacturer,
        order_quantity=quantity,
    )
    event = RecordEvent.BEFORE_UPDATE if args.update else RecordEvent.BEFORE_INSERT

    try:
        runtime = build_runtime(config)
        context = runtime.fire(BICYCLE_ORDER, event, [order.to_change()])
    except OrderGuardError as e:
        print(f"[ERROR] {e.message}")
        return 1

    change = context.record_changes[0]
    result = {
        "product": order.product,
        "manufacturer": order.bicycle_manufacturer,
        "order_quantity": str(order.order_quantity),
        "accepted": not change.has_error,
        "error_code": change.error_code,
        "message": change.error_message,
    }
    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 1 if change.has_error else 0


def cmd_triggers(args: argparse.Namespace) -> int:
    """List the triggers declared in configuration."""
    from orderguard.engine.errors import OrderGuardConfigError
    from orderguard.engine.registry import TriggerRegistry

    config = _load_config(args)
    if config is None:
        return 1

    registry = TriggerRegistry()
    try:
        registry.register_from_config(config.triggers)
    except OrderGuardConfigError as e:
        print(f"[ERROR] {e.message}")
        return 1

    for trigger in registry.get_all():
        state = "" if trigger.enabled else " (disabled)"
        events = ", ".join(sorted(trigger.events))
        print(f"{trigger.object_name:<20} #{trigger.order} {trigger.name} [{events}]{state}")
    print(f"\n{registry.count} trigger(s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
