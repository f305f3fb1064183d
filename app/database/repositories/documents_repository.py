from typing import Any

import psycopg
from psycopg.rows import dict_row

from app.database.connection import get_connection
from app.database.models import (
    STATUS_COMPLETED,
    STATUS_FAILED,
    STATUS_PENDING,
    STATUS_PROCESSING,
    DocumentRecord,
)
from app.processor.exceptions import DocumentNotFoundError

_COLUMNS = """
    id, project_id, user_id, storage_path, original_filename, file_type,
    file_size, file_url, extracted_text, text_length, processing_status,
    processing_error, processing_notes, created_at, updated_at
"""


def _to_record(row: dict[str, Any]) -> DocumentRecord:
    return DocumentRecord(
        id=str(row["id"]),
        project_id=str(row["project_id"]),
        owner_id=str(row["user_id"]),
        storage_path=row["storage_path"],
        original_filename=row["original_filename"],
        mime_type=row["file_type"],
        byte_size=row["file_size"],
        access_url=row["file_url"],
        extracted_text=row["extracted_text"],
        text_length=row["text_length"],
        processing_status=row["processing_status"],
        processing_error=row["processing_error"],
        processing_notes=row["processing_notes"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class DocumentsRepository:
    """Database operations for the project_documents table."""

    def find_by_id(self, document_id: str) -> DocumentRecord:
        """Find a document by ID.

        Raises:
            DocumentNotFoundError: if no document with this ID exists.
        """
        try:
            with get_connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(
                        f"SELECT {_COLUMNS} FROM project_documents WHERE id = %s",
                        (document_id,),
                    )
                    row = cur.fetchone()
        except psycopg.errors.InvalidTextRepresentation as exc:
            raise DocumentNotFoundError(f"Document {document_id} not found") from exc

        if row is None:
            raise DocumentNotFoundError(f"Document {document_id} not found")
        return _to_record(row)

    def create_pending(
        self,
        *,
        project_id: str,
        owner_id: str,
        storage_path: str,
        original_filename: str,
        mime_type: str,
        byte_size: int,
        access_url: str | None,
    ) -> DocumentRecord:
        """Insert a freshly uploaded document in the pending state."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    INSERT INTO project_documents
                    (project_id, user_id, storage_path, original_filename,
                     file_type, file_size, file_url, processing_status)
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                    RETURNING {_COLUMNS}
                    """,
                    (
                        project_id,
                        owner_id,
                        storage_path,
                        original_filename,
                        mime_type,
                        byte_size,
                        access_url,
                        STATUS_PENDING,
                    ),
                )
                row = cur.fetchone()
            conn.commit()

        assert row is not None
        return _to_record(row)

    def list_for_project(self, project_id: str, owner_id: str) -> list[DocumentRecord]:
        """List a user's documents in a project, newest first."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    SELECT {_COLUMNS} FROM project_documents
                    WHERE project_id = %s AND user_id = %s
                    ORDER BY created_at DESC, id DESC
                    """,
                    (project_id, owner_id),
                )
                rows = cur.fetchall()
        return [_to_record(row) for row in rows]

    def list_completed_for_project(
        self, conn: psycopg.Connection[Any], project_id: str
    ) -> list[DocumentRecord]:
        """Completed documents of a project in stable creation order."""
        with conn.cursor(row_factory=dict_row) as cur:
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM project_documents
                WHERE project_id = %s
                  AND processing_status = %s
                  AND extracted_text IS NOT NULL
                ORDER BY created_at, id
                """,
                (project_id, STATUS_COMPLETED),
            )
            rows = cur.fetchall()
        return [_to_record(row) for row in rows]

    def mark_processing(self, document_id: str) -> str | None:
        """Enter processing and clear any result of an earlier run.

        The transition is refused while another run holds the document in
        processing. Returns the status the document had before, or None if
        nothing was updated.
        """
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE project_documents AS d
                    SET processing_status = %s,
                        extracted_text = NULL,
                        text_length = NULL,
                        processing_error = NULL,
                        processing_notes = NULL,
                        updated_at = NOW()
                    FROM (
                        SELECT id, processing_status FROM project_documents
                        WHERE id = %s
                        FOR UPDATE
                    ) AS previous
                    WHERE d.id = previous.id AND previous.processing_status <> %s
                    RETURNING previous.processing_status
                    """,
                    (STATUS_PROCESSING, document_id, STATUS_PROCESSING),
                )
                row = cur.fetchone()
            conn.commit()
        return None if row is None else row[0]

    def mark_completed(self, document_id: str, extracted_text: str, notes: str) -> None:
        self._update(
            document_id,
            """
            UPDATE project_documents
            SET processing_status = %s,
                extracted_text = %s,
                text_length = %s,
                processing_error = NULL,
                processing_notes = %s,
                updated_at = NOW()
            WHERE id = %s
            """,
            (STATUS_COMPLETED, extracted_text, len(extracted_text), notes, document_id),
        )

    def mark_failed(self, document_id: str, error: str) -> None:
        self._update(
            document_id,
            """
            UPDATE project_documents
            SET processing_status = %s,
                extracted_text = NULL,
                text_length = NULL,
                processing_error = %s,
                processing_notes = NULL,
                updated_at = NOW()
            WHERE id = %s
            """,
            (STATUS_FAILED, error, document_id),
        )

    def next_pending(
        self, conn: psycopg.Connection[Any], grace_seconds: int = 0
    ) -> DocumentRecord | None:
        """Oldest document left pending for at least ``grace_seconds``.

        Nothing is locked here; the caller claims the document through
        ``mark_processing``, which lets only one run through.
        """
        with conn.cursor(row_factory=dict_row) as cur:
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM project_documents
                WHERE processing_status = %s
                  AND created_at <= NOW() - %s * INTERVAL '1 second'
                ORDER BY created_at, id
                LIMIT 1
                """,
                (STATUS_PENDING, grace_seconds),
            )
            row = cur.fetchone()
        conn.commit()

        if row is None:
            return None
        return _to_record(row)

    @staticmethod
    def _update(document_id: str, query: str, params: tuple[object, ...]) -> None:
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(query, params)
                if cur.rowcount == 0:
                    raise DocumentNotFoundError(f"Document {document_id} not found")
            conn.commit()
