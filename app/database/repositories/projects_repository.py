from typing import Any

import psycopg
from psycopg.rows import dict_row

from app.database.connection import get_connection
from app.database.models import ProjectRecord

_COLUMNS = """
    id, user_id, name, description, knowledge_base, total_characters,
    document_count, updated_at
"""


def _to_record(row: dict[str, Any]) -> ProjectRecord:
    return ProjectRecord(
        id=str(row["id"]),
        owner_id=str(row["user_id"]),
        name=row["name"],
        description=row["description"],
        knowledge_base=row["knowledge_base"],
        total_characters=row["total_characters"] or 0,
        document_count=row["document_count"] or 0,
        updated_at=row["updated_at"],
    )


class ProjectsRepository:
    """Database operations for the projects table."""

    def find_owned(self, project_id: str, owner_id: str) -> ProjectRecord | None:
        """Find a project only if it belongs to ``owner_id``."""
        try:
            with get_connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(
                        f"SELECT {_COLUMNS} FROM projects WHERE id = %s AND user_id = %s",
                        (project_id, owner_id),
                    )
                    row = cur.fetchone()
        except psycopg.errors.InvalidTextRepresentation:
            return None
        return _to_record(row) if row is not None else None

    def lock_for_update(self, conn: psycopg.Connection[Any], project_id: str) -> bool:
        """Row-lock a project inside the caller's transaction.

        Returns False when the project does not exist.
        """
        with conn.cursor() as cur:
            cur.execute("SELECT id FROM projects WHERE id = %s FOR UPDATE", (project_id,))
            return cur.fetchone() is not None

    def update_knowledge_base(
        self,
        conn: psycopg.Connection[Any],
        project_id: str,
        knowledge_base: str,
        document_count: int,
    ) -> None:
        """Write the rebuilt knowledge base inside the caller's transaction."""
        conn.execute(
            """
            UPDATE projects
            SET knowledge_base = %s,
                total_characters = %s,
                document_count = %s,
                updated_at = NOW()
            WHERE id = %s
            """,
            (knowledge_base, len(knowledge_base), document_count, project_id),
        )
