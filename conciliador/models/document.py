"""Document models produced by the text-extraction collaborator."""

from dataclasses import dataclass
from typing import Optional, Dict, Any, Iterable, List

from .enums import DocumentKey


@dataclass(frozen=True)
class Document:
    """
    Extracted text of one uploaded report.
    Immutable within a reconciliation run.
    """
    key: DocumentKey
    full_text: str = ""
    preview: str = ""
    original_name: Optional[str] = None
    kind: Optional[str] = None  # "pdf", "excel", ...
    length_chars: int = 0

    @property
    def searchable_text(self) -> str:
        """Full text when extraction produced one, otherwise the preview."""
        return self.full_text or self.preview or ""

    def excerpt(self, max_chars: int) -> Optional[str]:
        if not self.full_text:
            return None
        return self.full_text[:max_chars]

    @classmethod
    def from_payload(
        cls,
        payload: Dict[str, Any],
        preview_max_chars: int = 1000,
    ) -> Optional["Document"]:
        """
        Build a document from the extraction contract
        ``{key, fullText, preview, lengthChars}``.

        Returns None when the key is not a known document kind.
        """
        try:
            key = DocumentKey(str(payload.get("key", "")).strip().lower())
        except ValueError:
            return None

        full_text = payload.get("fullText") or ""
        preview = payload.get("preview") or full_text[:preview_max_chars]
        length = payload.get("lengthChars")
        if not isinstance(length, int):
            length = len(full_text)

        return cls(
            key=key,
            full_text=str(full_text),
            preview=str(preview),
            original_name=payload.get("originalName"),
            kind=payload.get("kind"),
            length_chars=length,
        )


def build_documents(
    payloads: Iterable[Optional[Dict[str, Any]]],
    preview_max_chars: int = 1000,
) -> Dict[DocumentKey, Document]:
    """Index extraction payloads by document key, skipping absent ones."""
    documents: Dict[DocumentKey, Document] = {}
    for payload in payloads:
        if not payload:
            continue
        document = Document.from_payload(payload, preview_max_chars)
        if document is not None:
            documents[document.key] = document
    return documents


def texts_by_key(documents: Dict[DocumentKey, Document]) -> Dict[DocumentKey, str]:
    return {key: doc.searchable_text for key, doc in documents.items()}


def all_texts(documents: Dict[DocumentKey, Document]) -> List[str]:
    return [doc.searchable_text for doc in documents.values() if doc.searchable_text]
