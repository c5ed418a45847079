"""
SQLite database manager for SmackTrack.

Persists the scalar inputs of each shot: distance, bearing and the
weather at the time. Wind/temperature analysis is never stored; it is
recomputed from these columns on load.
Database file: ~/.smacktrack/smacktrack.db
"""

import logging
import sqlite3
from pathlib import Path
from typing import Optional

from src.models.club import Club
from src.models.shot import ShotResult
from src.utils.config import Config

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS shots (
    id                     INTEGER PRIMARY KEY AUTOINCREMENT,
    club                   TEXT    NOT NULL,
    distance_yards         INTEGER NOT NULL,
    distance_meters        INTEGER NOT NULL,
    weather_description    TEXT    NOT NULL DEFAULT 'Unknown',
    temperature_f          INTEGER NOT NULL,
    temperature_c          INTEGER NOT NULL,
    wind_speed_kmh         REAL    NOT NULL DEFAULT 0,
    wind_direction_compass TEXT    NOT NULL DEFAULT 'N',
    wind_direction_degrees INTEGER NOT NULL DEFAULT 0,
    shot_bearing_degrees   REAL    NOT NULL DEFAULT 0,
    timestamp_ms           INTEGER NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_shots_timestamp ON shots (timestamp_ms);

CREATE TABLE IF NOT EXISTS achievements (
    storage_key  TEXT    PRIMARY KEY,
    unlocked_ms  INTEGER NOT NULL
);
"""


class Database:
    """SQLite database wrapper for SmackTrack shot history."""

    def __init__(self, db_path: Optional[Path | str] = None):
        self.db_path = db_path or Config.get_db_path()
        self.conn: Optional[sqlite3.Connection] = None
        self._init_db()

    def _init_db(self):
        """Initialize database connection and create tables."""
        self.conn = sqlite3.connect(str(self.db_path))
        self.conn.row_factory = sqlite3.Row
        if str(self.db_path) != ":memory:":
            self.conn.execute("PRAGMA journal_mode=WAL")
        self.conn.executescript(SCHEMA)
        self.conn.commit()
        logger.info(f"Database initialized at {self.db_path}")

    def close(self):
        """Close the database connection."""
        if self.conn:
            self.conn.close()
            self.conn = None

    # =========================================================================
    # Shots
    # =========================================================================

    def save_shot(self, shot: ShotResult) -> int:
        """Save a shot to the database and return its ID."""
        cur = self.conn.execute("""
            INSERT INTO shots (
                club, distance_yards, distance_meters,
                weather_description, temperature_f, temperature_c,
                wind_speed_kmh, wind_direction_compass, wind_direction_degrees,
                shot_bearing_degrees, timestamp_ms
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """, (
            shot.club.name, shot.distance_yards, shot.distance_meters,
            shot.weather_description, shot.temperature_f, shot.temperature_c,
            shot.wind_speed_kmh, shot.wind_direction_compass,
            shot.wind_direction_degrees,
            shot.shot_bearing_degrees, shot.timestamp_ms,
        ))
        self.conn.commit()
        shot.id = cur.lastrowid
        logger.debug(f"Shot saved: id={shot.id}")
        return shot.id

    def get_shots(self, club: Optional[Club] = None,
                  limit: Optional[int] = None) -> list[ShotResult]:
        """Get shots in chronological order, optionally for one club."""
        query = "SELECT * FROM shots"
        params: list = []
        if club is not None:
            query += " WHERE club = ?"
            params.append(club.name)
        query += " ORDER BY timestamp_ms"
        if limit is not None:
            query += " LIMIT ?"
            params.append(limit)

        rows = self.conn.execute(query, params).fetchall()
        shots = []
        for r in rows:
            try:
                shot_club = Club[r["club"]]
            except KeyError:
                logger.warning(f"Skipping shot {r['id']} with unknown club {r['club']!r}")
                continue
            shots.append(ShotResult(
                club=shot_club,
                distance_yards=r["distance_yards"],
                distance_meters=r["distance_meters"],
                weather_description=r["weather_description"],
                temperature_f=r["temperature_f"],
                temperature_c=r["temperature_c"],
                wind_speed_kmh=r["wind_speed_kmh"],
                wind_direction_compass=r["wind_direction_compass"],
                wind_direction_degrees=r["wind_direction_degrees"],
                shot_bearing_degrees=r["shot_bearing_degrees"],
                timestamp_ms=r["timestamp_ms"],
                id=r["id"],
            ))
        return shots

    def delete_shot(self, shot_id: int) -> bool:
        """Delete a shot by ID. Returns True if a row was removed."""
        cur = self.conn.execute("DELETE FROM shots WHERE id = ?", (shot_id,))
        self.conn.commit()
        return cur.rowcount > 0

    def clear_shots(self):
        """Delete all shot history."""
        self.conn.execute("DELETE FROM shots")
        self.conn.commit()
        logger.info("Shot history cleared")

    def get_club_summary(self) -> list[dict]:
        """Raw (unadjusted) distance summary per club."""
        rows = self.conn.execute("""
            SELECT
                club,
                COUNT(*) as num_shots,
                AVG(distance_yards) as avg_yards,
                MIN(distance_yards) as min_yards,
                MAX(distance_yards) as max_yards
            FROM shots
            GROUP BY club
        """).fetchall()
        return [dict(r) for r in rows]

    # =========================================================================
    # Achievements
    # =========================================================================

    def save_achievements(self, storage_keys: list[str], unlocked_ms: int):
        """Record newly unlocked achievement tiers; known keys keep their time."""
        self.conn.executemany(
            "INSERT OR IGNORE INTO achievements (storage_key, unlocked_ms) VALUES (?, ?)",
            [(key, unlocked_ms) for key in storage_keys],
        )
        self.conn.commit()

    def get_unlocked_achievements(self) -> dict[str, int]:
        """Storage key → unlock time (epoch ms)."""
        rows = self.conn.execute(
            "SELECT storage_key, unlocked_ms FROM achievements ORDER BY unlocked_ms"
        ).fetchall()
        return {r["storage_key"]: r["unlocked_ms"] for r in rows}
