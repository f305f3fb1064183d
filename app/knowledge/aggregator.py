"""Rebuilds a project's knowledge base from its completed documents."""

from collections.abc import Iterable
from dataclasses import dataclass

from app.database.connection import get_connection
from app.database.models import DocumentRecord
from app.database.repositories.documents_repository import DocumentsRepository
from app.database.repositories.projects_repository import ProjectsRepository
from app.logging.logger import Log
from app.processor.exceptions import ProjectNotFoundError

BLOCK_SEPARATOR = "\n\n"


@dataclass(frozen=True)
class KnowledgeBaseSnapshot:
    project_id: str
    knowledge_base: str
    document_count: int

    @property
    def total_characters(self) -> int:
        return len(self.knowledge_base)


def document_block(document: DocumentRecord) -> str:
    return f"--- Document: {document.original_filename} ---\n{document.extracted_text}"


def compose_knowledge_base(documents: Iterable[DocumentRecord]) -> tuple[str, int]:
    """Concatenate document blocks in the given order.

    Returns the knowledge base text and the number of documents included.
    """
    blocks = [document_block(doc) for doc in documents if doc.extracted_text]
    return BLOCK_SEPARATOR.join(blocks), len(blocks)


class KnowledgeBaseAggregator:
    """Full, idempotent rebuild of ``projects.knowledge_base``.

    The project row is locked for the duration of the read-then-write cycle,
    so concurrent rebuilds of one project run one after the other.
    """

    def __init__(
        self,
        documents_repo: DocumentsRepository,
        projects_repo: ProjectsRepository,
    ) -> None:
        self._documents_repo = documents_repo
        self._projects_repo = projects_repo

    def rebuild(self, project_id: str) -> KnowledgeBaseSnapshot:
        """Recompute and persist the knowledge base of ``project_id``.

        Raises:
            ProjectNotFoundError: if the project does not exist.
        """
        with get_connection() as conn:
            if not self._projects_repo.lock_for_update(conn, project_id):
                conn.rollback()
                raise ProjectNotFoundError(f"Project {project_id} not found")
            documents = self._documents_repo.list_completed_for_project(conn, project_id)
            knowledge_base, document_count = compose_knowledge_base(documents)
            self._projects_repo.update_knowledge_base(
                conn, project_id, knowledge_base, document_count
            )
            conn.commit()

        Log.info(
            f"Rebuilt knowledge base for project {project_id}",
            documents=document_count,
            chars=len(knowledge_base),
        )
        return KnowledgeBaseSnapshot(
            project_id=project_id,
            knowledge_base=knowledge_base,
            document_count=document_count,
        )
