"""
Seed the games table from data/games.json.
"""
import json
from datetime import datetime
from pathlib import Path

from loguru import logger
from sqlmodel import Session, select

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in __import__("sys").path:
    __import__("sys").path.insert(0, str(PROJECT_ROOT))

from pool_api.database import create_db_and_tables, engine
from pool_api.logging_config import setup_logging
from pool_api.models.game import Game


def load_games_from_json(json_path: Path) -> list[dict]:
    """Load game data from JSON file."""
    with open(json_path, "r", encoding="utf-8") as f:
        return json.load(f)


def seed_games(json_path: Path | None = None, bind=None) -> int:
    """
    Seed games table from JSON file.

    A game is identified by its date and both country codes, so re-running
    the script does not duplicate games. Returns the number inserted.
    """
    if json_path is None:
        json_path = PROJECT_ROOT / "data" / "games.json"

    games_data = load_games_from_json(json_path)
    count = 0

    with Session(bind or engine) as session:
        for game in games_data:
            date = datetime.fromisoformat(game["date"].replace("Z", "+00:00"))
            first = game["first_team_country_code"].upper()
            second = game["second_team_country_code"].upper()

            existing = session.exec(
                select(Game)
                .where(Game.date == date)
                .where(Game.first_team_country_code == first)
                .where(Game.second_team_country_code == second)
            ).first()

            if existing:
                continue

            session.add(
                Game(
                    date=date,
                    first_team_country_code=first,
                    second_team_country_code=second,
                )
            )
            count += 1

        session.commit()

    return count


def main():
    setup_logging()
    logger.info("Creating database tables...")
    create_db_and_tables()

    logger.info("Seeding games from data/games.json...")
    count = seed_games()
    logger.info("Done! {} games seeded.", count)


if __name__ == "__main__":
    main()
