"""Construction helpers for messages."""

from typing import List, Optional, Sequence, Union

from ..exceptions import ConfigurationError
from ..logger import get_logger
from ..tools.models import ToolCall
from .documents import DocumentCollection
from .models import (
    AssistantMessage,
    AssistantWithToolsMessage,
    MessageMeta,
    SystemMessage,
    UserMessage,
    generate_unique_id,
)

logger = get_logger(__name__)

DOCUMENTS_PLACEHOLDER = "{{documents}}"


def generate_user_message(content: str) -> UserMessage:
    return UserMessage(content=content)


def generate_system_message(
    system_message: str,
    document_template: Optional[str] = None,
    documents: Optional[DocumentCollection] = None,
) -> SystemMessage:
    """Build a system message, optionally grounded on documents.

    Args:
        system_message: Base instructions.
        document_template: Text containing the ``{{documents}}`` placeholder. Required
            when documents are given.
        documents: Documents to render into the template.

    Raises:
        ConfigurationError: If documents are given without a usable template.
    """
    if documents is not None and len(documents) > 0:
        if not document_template:
            msg = "Document system message must be provided when documents are provided."
            logger.error(msg)
            raise ConfigurationError(msg)
        if DOCUMENTS_PLACEHOLDER not in document_template:
            msg = f"System message must include '{DOCUMENTS_PLACEHOLDER}' placeholder when documents are provided."
            logger.error(msg)
            raise ConfigurationError(msg)
        rendered = document_template.replace(DOCUMENTS_PLACEHOLDER, documents.system_message_representation, 1)
        return SystemMessage(content=f"{system_message}\n{rendered}")
    return SystemMessage(content=system_message)


def generate_assistant_message(
    content: Optional[str],
    reasoning_content: Optional[str] = None,
    tool_calls: Optional[Sequence[ToolCall]] = None,
    message_id: Optional[str] = None,
    meta: Optional[MessageMeta] = None,
) -> Union[AssistantMessage, AssistantWithToolsMessage]:
    """Build an assistant message.

    Without tool calls the result is an AssistantMessage whose content is never None;
    with tool calls it is an AssistantWithToolsMessage whose empty content becomes None.
    """
    message_id = message_id or generate_unique_id()
    if not tool_calls:
        return AssistantMessage(
            id=message_id, content=content or "", reasoning_content=reasoning_content, meta=meta
        )
    return AssistantWithToolsMessage(
        id=message_id,
        content=content or None,
        reasoning_content=reasoning_content,
        meta=meta,
        tool_calls=list(tool_calls),
    )


def generate_messages(content: str, system_message: str = "") -> List[Union[SystemMessage, UserMessage]]:
    """The user message, preceded by a system message when one is given."""
    messages: List[Union[SystemMessage, UserMessage]] = [generate_user_message(content)]
    if system_message:
        messages.insert(0, generate_system_message(system_message))
    return messages
