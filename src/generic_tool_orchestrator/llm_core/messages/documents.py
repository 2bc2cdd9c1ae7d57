"""Grounding documents rendered into system messages."""

import re
from typing import Dict, Iterable, Iterator, List, Optional

from pydantic import BaseModel, Field

from .models import generate_unique_id

_SEMANTIC_TYPE = re.compile(r"^[A-Z]")


class Document(BaseModel):
    """A piece of text the model should ground its answer on.

    Types starting with a capital letter (``Product``, ``CustomerProfile``) are used as the
    XML tag name when rendered; anything else renders as ``<Document type='...'>``.
    """

    id: str = Field(default_factory=generate_unique_id)
    type: str = "text"
    title: str
    content: str
    source: Optional[str] = None
    attributes: Dict[str, str] = Field(default_factory=dict)

    def to_xml(self) -> str:
        semantic = bool(_SEMANTIC_TYPE.match(self.type))
        tag = self.type if semantic else "Document"
        attrs = [f"id='{self.id}'"]
        if not semantic:
            attrs.append(f"type='{self.type}'")
        attrs.append(f"title='{self.title}'")
        attrs.append(f"source='{self.source or 'n/a'}'")
        attrs.extend(f"{key}='{value}'" for key, value in self.attributes.items())
        return f"<{tag} {' '.join(attrs)}>{self.content}</{tag}>"


class DocumentCollection:
    """An ordered set of documents keyed by id."""

    def __init__(self, documents: Iterable[Document] = ()) -> None:
        self._documents: Dict[str, Document] = {doc.id: doc for doc in documents}

    def __len__(self) -> int:
        return len(self._documents)

    def __iter__(self) -> Iterator[Document]:
        return iter(self._documents.values())

    @property
    def all(self) -> List[Document]:
        return list(self._documents.values())

    def add(self, document: Document) -> None:
        self._documents[document.id] = document

    def remove(self, document_id: str) -> None:
        self._documents.pop(document_id, None)

    @property
    def system_message_representation(self) -> str:
        """XML rendering used for the ``{{documents}}`` placeholder; ``-`` when empty."""
        if not self._documents:
            return "-"
        rendered = "\n".join(doc.to_xml() for doc in self._documents.values())
        return f"<Documents>\n{rendered}\n</Documents>"
