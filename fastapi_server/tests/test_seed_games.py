import json

from sqlmodel import select

from pool_api.models import Game
from scripts.seed_games import seed_games


def test_seed_games_is_idempotent(tmp_path, engine, session):
    json_path = tmp_path / "games.json"
    json_path.write_text(
        json.dumps(
            [
                {"date": "2026-06-11T19:00:00Z", "first_team_country_code": "mx", "second_team_country_code": "za"},
                {"date": "2026-06-12T22:00:00Z", "first_team_country_code": "US", "second_team_country_code": "PY"},
            ]
        )
    )

    assert seed_games(json_path, bind=engine) == 2
    assert seed_games(json_path, bind=engine) == 0

    games = session.exec(select(Game).order_by(Game.date)).all()
    assert [(g.first_team_country_code, g.second_team_country_code) for g in games] == [
        ("MX", "ZA"),
        ("US", "PY"),
    ]
