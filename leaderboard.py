"""
Leaderboard ranking over the performance collection.

Win rate is recomputed here from wins + losses; the `win_rate` stored on the
performance document is written against total_matches and is left alone.
"""
from typing import List, Optional

from pymongo.database import Database

from connections import ConnectionGraph
from database import ATHLETE, PERFORMANCE
from metrics import win_rate


class LeaderboardRanker:
    def __init__(self, db: Database, graph: Optional[ConnectionGraph] = None):
        self.db = db
        self.graph = graph or ConnectionGraph(db)

    def rank(self, requester_id: Optional[str] = None) -> List[dict]:
        entries = []
        for record in self.db[PERFORMANCE].find({}):
            athlete_id = str(record["_id"])
            athlete = self.db[ATHLETE].find_one({"_id": athlete_id})
            if athlete is None:
                continue
            wins = int(record.get("wins") or 0)
            losses = int(record.get("losses") or 0)
            entry = {
                "athleteId": athlete_id,
                "name": f"{athlete.get('firstName', '')} {athlete.get('lastName', '')}".strip(),
                "sport": athlete.get("sport"),
                "wins": wins,
                "losses": losses,
                "winRate": win_rate(wins, wins + losses),
            }
            if requester_id:
                entry["connectionStatus"] = (
                    None if requester_id == athlete_id else self.graph.status_between(requester_id, athlete_id)
                )
            entries.append(entry)

        entries.sort(key=lambda e: (-e["winRate"], -e["wins"], e["athleteId"]))
        for position, entry in enumerate(entries, start=1):
            entry["rank"] = position
        return entries
