"""
Repair company context versions.

    python -m app.maintenance.contexts diagnose <companyId>
    python -m app.maintenance.contexts repair <companyId>
    python -m app.maintenance.contexts backfill

``backfill`` creates version 1 for companies created before versioned
contexts existed. ``repair`` also collapses several active versions into the
highest one.
"""
import argparse
import asyncio
import json
from typing import Optional

from app.core.config import settings
from app.core.logging import configure_logging
from app.db.session import dispose_engine, get_session_factory, init_engine
from app.services.company_service import CompanyService


async def diagnose(company_id: str) -> dict:
    async with get_session_factory()() as session:
        return await CompanyService(session).diagnose(company_id)


async def repair(company_id: str) -> Optional[str]:
    async with get_session_factory()() as session:
        return await CompanyService(session).repair(company_id)


async def backfill() -> list:
    async with get_session_factory()() as session:
        return await CompanyService(session).backfill()


async def _run(args: argparse.Namespace) -> dict:
    init_engine(args.database_url)
    try:
        if args.command == "diagnose":
            return await diagnose(args.company_id)
        if args.command == "repair":
            return {"companyId": args.company_id, "applied": await repair(args.company_id)}
        repaired = await backfill()
        return {"repaired": repaired, "count": len(repaired)}
    finally:
        await dispose_engine()


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(description="Diagnose and repair company context versions.")
    parser.add_argument("--database-url", default=None, help="Override DATABASE_URL.")
    sub = parser.add_subparsers(dest="command", required=True)
    for name in ("diagnose", "repair"):
        cmd = sub.add_parser(name)
        cmd.add_argument("company_id")
    sub.add_parser("backfill")
    args = parser.parse_args(argv)

    configure_logging(settings.app.env, settings.app.log_level)
    report = asyncio.run(_run(args))
    print(json.dumps(report, default=str, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
