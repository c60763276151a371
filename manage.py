#!/usr/bin/env python3
"""
Operator commands against the shared badge cache.

Usage:
    python manage.py refresh vencord    # Force refresh one service
    python manage.py refresh all        # Force refresh every service, one at a time
    python manage.py clear              # Clear every cached service
    python manage.py clear nekocord     # Clear one service
    python manage.py check              # Report whether the cache is stale
"""

import asyncio
import sys

from app.container import Container
from app.errors import StoreError, UnknownSourceError
from settings import verify_required_variables
from settings.logging import setup_logging

logger = setup_logging(level="INFO", to_file=False)


async def run_refresh(container: Container, service: str) -> bool:
    report = await container.orchestrator.force_refresh(service)

    print("\n" + "=" * 60)
    print("REFRESH REPORT")
    print("=" * 60)
    for name, entry in report.items():
        status = "✅" if entry.success else "❌"
        detail = entry.outcome or entry.error
        print(f"  {status} {name:<12} {detail}")
    print("=" * 60 + "\n")

    return all(entry.success for entry in report.values())


async def run_clear(container: Container, service: str | None) -> bool:
    deleted = await container.orchestrator.clear(service)
    logger.info("Cleared {} ({} keys)", service or "all services", deleted)
    return True


async def run_check(container: Container) -> bool:
    stale = await container.orchestrator.needs_refresh()
    logger.info("Cache is {}", "STALE" if stale else "valid")
    return not stale


async def _main(args: list[str]) -> int:
    container = Container()
    try:
        await container.init()
        command, rest = args[0], args[1:]
        if command == "refresh" and rest:
            ok = await run_refresh(container, rest[0])
        elif command == "clear":
            ok = await run_clear(container, rest[0] if rest else None)
        elif command == "check":
            ok = await run_check(container)
        else:
            print(__doc__)
            return 1
    except UnknownSourceError as e:
        logger.error("{}", e)
        return 1
    except StoreError as e:
        logger.error("Cache store unavailable: {}", e)
        return 1
    finally:
        await container.redis.aclose()

    return 0 if ok else 1


def main():
    args = sys.argv[1:]
    if not args:
        print(__doc__)
        sys.exit(1)

    verify_required_variables()
    sys.exit(asyncio.run(_main(args)))


if __name__ == "__main__":
    main()
