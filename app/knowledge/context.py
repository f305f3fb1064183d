EMPTY_KNOWLEDGE_BASE = "No documents have been processed yet."

PROMPT_TEMPLATE = """You are an AI assistant with access to a specific project's documents. \
You have been given a knowledge base containing the full text of all documents in the project "{name}".
{description}
KNOWLEDGE BASE:
{knowledge_base}

END OF KNOWLEDGE BASE

Instructions:
1. Answer questions based ONLY on the information provided in the knowledge base above
2. If a question cannot be answered from the knowledge base, clearly state that the information is not available in the provided documents
3. When citing information, indicate which document it comes from if possible
4. If the user asks for summaries or analysis, base them on the available content

Your knowledge is limited to the documents in this project's knowledge base. Do not use external \
knowledge unless specifically requested and clearly distinguished from the document-based information."""


def build_knowledge_prompt(
    project_name: str,
    description: str | None,
    knowledge_base: str | None,
) -> str:
    """Render the grounding system prompt chat consumers send with each request."""
    description_line = f"\nProject Description: {description}\n" if description else ""
    return PROMPT_TEMPLATE.format(
        name=project_name,
        description=description_line,
        knowledge_base=knowledge_base or EMPTY_KNOWLEDGE_BASE,
    )
