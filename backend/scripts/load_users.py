"""Load users into Alma from a CSV file using a saved import profile.

Usage: python scripts/load_users.py users.csv [--profile NAME] [--settings PATH]
"""
import argparse
import asyncio
import logging
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from app.core.config import settings
from app.core.errors import LoaderError
from app.core.logging import setup_logging
from app.services.alma import AlmaUsersClient
from app.services.csv_reader import parse_csv
from app.services.importer import ImportRun
from app.services.settings_store import SettingsStore


def confirm(count: int) -> bool:
    answer = input(f"Are you sure you want to create {count} users in Alma? [y/N] ")
    return answer.strip().lower() in ("y", "yes")


async def load(path: str, profile_name: str | None, settings_path: str | None) -> int:
    profile_settings = SettingsStore(settings_path).load()
    profile = (
        profile_settings.get_profile(profile_name)
        if profile_name else profile_settings.profiles[0]
    )

    print("Parsing CSV file")
    with open(path, "rb") as f:
        parsed = parse_csv(f.read())
    for error in parsed.errors:
        print(f"  line {error.row}: {error.message}", file=sys.stderr)

    run = ImportRun(on_line=print)
    async with AlmaUsersClient.from_settings() as client:
        summary = await run.run(
            parsed.data, profile, client.create_user, confirm, settings.IMPORT_CHUNK_SIZE,
        )

    if summary is None:
        print("Cancelled.")
        return 1
    return 0 if summary.failed == 0 else 2


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("file")
    parser.add_argument("--profile")
    parser.add_argument("--settings", help=f"settings file (default {settings.SETTINGS_PATH})")
    args = parser.parse_args()

    setup_logging()
    try:
        code = asyncio.run(load(args.file, args.profile, args.settings))
    except LoaderError as exc:
        logging.getLogger(__name__).error("%s", exc)
        code = 1
    sys.exit(code)


if __name__ == "__main__":
    main()
