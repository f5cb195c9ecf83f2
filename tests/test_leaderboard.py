"""Tests for leaderboard ranking."""
from connections import ConnectionGraph
from database import PERFORMANCE, set_document
from leaderboard import LeaderboardRanker


def add_record(db, athlete_id, wins, losses, total_matches=None):
    set_document(db, PERFORMANCE, athlete_id, {
        "total_matches": total_matches if total_matches is not None else wins + losses,
        "wins": wins,
        "losses": losses,
        "practice_sessions_per_week": 3,
    })


def test_rank_orders_by_win_rate(db, seed):
    for athlete_id in ("a1", "a2", "a3"):
        seed("Athlete", athlete_id, sport="Chess")
    add_record(db, "a1", 8, 2)
    add_record(db, "a2", 5, 5)
    add_record(db, "a3", 0, 0)

    board = LeaderboardRanker(db).rank()

    assert [e["winRate"] for e in board] == [80.0, 50.0, 0.0]
    assert [e["rank"] for e in board] == [1, 2, 3]
    assert [e["athleteId"] for e in board] == ["a1", "a2", "a3"]


def test_rank_uses_wins_plus_losses_not_total_matches(db, seed):
    seed("Athlete", "a1")
    add_record(db, "a1", wins=6, losses=2, total_matches=20)

    board = LeaderboardRanker(db).rank()

    assert board[0]["winRate"] == 75.0


def test_rank_skips_records_without_athlete(db, seed):
    seed("Athlete", "a1")
    add_record(db, "a1", 1, 1)
    add_record(db, "orphan", 10, 0)

    board = LeaderboardRanker(db).rank()

    assert [e["athleteId"] for e in board] == ["a1"]


def test_ties_are_broken_deterministically(db, seed):
    for athlete_id in ("b", "a", "c"):
        seed("Athlete", athlete_id)
    add_record(db, "b", 1, 1)
    add_record(db, "a", 1, 1)
    add_record(db, "c", 2, 2)

    board = LeaderboardRanker(db).rank()

    assert [e["athleteId"] for e in board] == ["c", "a", "b"]
    assert [e["rank"] for e in board] == [1, 2, 3]


def test_entry_fields_and_name(db, seed):
    seed("Athlete", "a1", firstName="Serena", lastName="Williams", sport="Tennis")
    add_record(db, "a1", 3, 1)

    entry = LeaderboardRanker(db).rank()[0]

    assert entry["name"] == "Serena Williams"
    assert entry["sport"] == "Tennis"
    assert entry["wins"] == 3 and entry["losses"] == 1
    assert "connectionStatus" not in entry


def test_connection_status_for_requester(db, seed):
    for athlete_id in ("me", "friend", "stranger"):
        seed("Athlete", athlete_id)
        add_record(db, athlete_id, 1, 1)
    graph = ConnectionGraph(db)
    graph.send_request("friend", "Athlete", "me", "Athlete")
    graph.resolve_request("friend", "me", "accept")

    board = {e["athleteId"]: e for e in LeaderboardRanker(db, graph).rank("me")}

    assert board["friend"]["connectionStatus"] == "accepted"
    assert board["stranger"]["connectionStatus"] is None
    assert board["me"]["connectionStatus"] is None


def test_leaderboard_route(client, auth_headers, db, seed):
    seed("Athlete", "a1")
    add_record(db, "a1", 4, 1)

    response = client.post("/all/getLeaderboardStats", json={"userId": "requester"}, headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["leaderboard"][0]["winRate"] == 80.0
    assert body["leaderboard"][0]["connectionStatus"] is None


def test_empty_leaderboard_route(client, auth_headers):
    response = client.post("/all/getLeaderboardStats", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["leaderboard"] == []
