import json
import sqlite3
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import Any

from pydantic import ValidationError

from src.domain.entities import Credential, Post, Profile, RoleType
from src.domain.errors import CollaboratorUnavailable, InvalidInput, NotFound


# Helper to convert sqlite rows to dicts
def dict_factory(cursor: sqlite3.Cursor, row: Any) -> dict[str, Any]:
    d = {}
    for idx, col in enumerate(cursor.description):
        d[col[0]] = row[idx]
    return d


class _SQLiteRepo:
    def __init__(self, db_path: str):
        self.db_path = db_path

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = dict_factory
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn

    @contextmanager
    def _conn(self) -> Iterator[sqlite3.Connection]:
        """Open a connection, commit on success, and map driver errors."""
        try:
            conn = self._get_conn()
        except sqlite3.Error as e:
            raise CollaboratorUnavailable(f"Database unavailable: {e}") from e
        try:
            yield conn
            conn.commit()
        except sqlite3.IntegrityError as e:
            conn.rollback()
            raise InvalidInput(f"Constraint violated: {e}") from e
        except sqlite3.Error as e:
            conn.rollback()
            raise CollaboratorUnavailable(f"Database error: {e}") from e
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()


class SQLitePostStore(_SQLiteRepo):
    def _row_to_post(self, row: dict[str, Any]) -> Post:
        try:
            return Post(
                id=row["id"],
                title=row["title"],
                content=row["content"],
                author_id=row["author_id"],
                is_reviewed=bool(row["is_reviewed"]),
                created_at=datetime.fromisoformat(row["created_at"]),
                updated_at=datetime.fromisoformat(row["updated_at"]),
            )
        except (TypeError, ValueError, ValidationError) as e:
            raise CollaboratorUnavailable(
                f"Stored post {row.get('id')} is unreadable: {e}"
            ) from e

    def query_posts(self, is_reviewed: bool) -> list[Post]:
        with self._conn() as conn:
            rows = conn.execute(
                "SELECT * FROM posts WHERE is_reviewed = ? ORDER BY created_at DESC, seq ASC",
                (int(is_reviewed),),
            ).fetchall()
        return [self._row_to_post(r) for r in rows]

    def get_post(self, post_id: str) -> Post | None:
        with self._conn() as conn:
            row = conn.execute("SELECT * FROM posts WHERE id = ?", (post_id,)).fetchone()
        return self._row_to_post(row) if row else None

    def insert_post(self, post: Post) -> str:
        with self._conn() as conn:
            conn.execute(
                """
                INSERT INTO posts (
                    id, title, content, author_id, is_reviewed, created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    post.id,
                    post.title,
                    post.content,
                    post.author_id,
                    int(post.is_reviewed),
                    post.created_at.isoformat(),
                    post.updated_at.isoformat(),
                ),
            )
        return post.id

    def update_post_review_flag(
        self, post_id: str, is_reviewed: bool, updated_at: datetime
    ) -> None:
        with self._conn() as conn:
            cursor = conn.execute(
                "UPDATE posts SET is_reviewed = ?, updated_at = ? WHERE id = ?",
                (int(is_reviewed), updated_at.isoformat(), post_id),
            )
            if cursor.rowcount == 0:
                raise NotFound(f"Post {post_id} not found")


class SQLiteProfileStore(_SQLiteRepo):
    def _row_to_profile(self, row: dict[str, Any]) -> Profile:
        try:
            return Profile(
                id=row["id"],
                email=row["email"],
                full_name=row["full_name"],
                roles=json.loads(row["roles"]),
                created_at=datetime.fromisoformat(row["created_at"]),
                updated_at=datetime.fromisoformat(row["updated_at"]),
            )
        except (TypeError, ValueError, ValidationError) as e:
            raise CollaboratorUnavailable(
                f"Stored profile {row.get('id')} is unreadable: {e}"
            ) from e

    def get_profile(self, user_id: str) -> Profile | None:
        with self._conn() as conn:
            row = conn.execute("SELECT * FROM profiles WHERE id = ?", (user_id,)).fetchone()
        return self._row_to_profile(row) if row else None

    def list_profiles(self, ids: Iterable[str]) -> list[Profile]:
        wanted = list(dict.fromkeys(ids))
        if not wanted:
            return []
        placeholders = ", ".join("?" for _ in wanted)
        with self._conn() as conn:
            rows = conn.execute(
                f"SELECT * FROM profiles WHERE id IN ({placeholders})", wanted
            ).fetchall()
        return [self._row_to_profile(r) for r in rows]

    def list_all_profiles(self) -> list[Profile]:
        with self._conn() as conn:
            rows = conn.execute("SELECT * FROM profiles ORDER BY created_at DESC").fetchall()
        return [self._row_to_profile(r) for r in rows]

    def save_profile(self, profile: Profile) -> Profile:
        with self._conn() as conn:
            conn.execute(
                """
                INSERT INTO profiles (id, email, full_name, roles, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    email=excluded.email,
                    full_name=excluded.full_name,
                    roles=excluded.roles,
                    updated_at=excluded.updated_at
                """,
                (
                    profile.id,
                    profile.email,
                    profile.full_name,
                    json.dumps(profile.roles),
                    profile.created_at.isoformat(),
                    profile.updated_at.isoformat(),
                ),
            )
        return profile

    def update_profile_roles(
        self, user_id: str, roles: list[RoleType], updated_at: datetime
    ) -> Profile:
        with self._conn() as conn:
            cursor = conn.execute(
                "UPDATE profiles SET roles = ?, updated_at = ? WHERE id = ?",
                (json.dumps(list(roles)), updated_at.isoformat(), user_id),
            )
            if cursor.rowcount == 0:
                raise NotFound(f"Profile {user_id} not found")
            row = conn.execute("SELECT * FROM profiles WHERE id = ?", (user_id,)).fetchone()
        return self._row_to_profile(row)


class SQLiteCredentialStore(_SQLiteRepo):
    def get_by_email(self, email: str) -> Credential | None:
        with self._conn() as conn:
            row = conn.execute(
                "SELECT * FROM credentials WHERE email = ?", (email.lower(),)
            ).fetchone()
        if not row:
            return None
        return Credential(
            user_id=row["user_id"],
            email=row["email"],
            password_hash=row["password_hash"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    def save(self, credential: Credential) -> None:
        with self._conn() as conn:
            conn.execute(
                """
                INSERT INTO credentials (user_id, email, password_hash, created_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(user_id) DO UPDATE SET
                    email=excluded.email,
                    password_hash=excluded.password_hash
                """,
                (
                    credential.user_id,
                    credential.email.lower(),
                    credential.password_hash,
                    credential.created_at.isoformat(),
                ),
            )
