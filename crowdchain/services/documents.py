# crowdchain/services/documents.py
# Inline encoding of verification documents.
#
# Uploads are stored inside the application record as data URIs
# ("data:<mime>;base64,<payload>") instead of in a separate blob store.

import base64
from dataclasses import dataclass

from crowdchain.errors import ValidationError

DEFAULT_MIMETYPE = 'application/octet-stream'


@dataclass(frozen=True)
class UploadedDocument:
    filename: str
    mimetype: str
    content: bytes

    @property
    def size(self):
        return len(self.content)


def from_file_storage(file_storage):
    """Reads a werkzeug FileStorage into an UploadedDocument."""
    return UploadedDocument(
        filename=file_storage.filename or '',
        mimetype=file_storage.mimetype or DEFAULT_MIMETYPE,
        content=file_storage.read(),
    )


def to_data_uri(document):
    encoded = base64.b64encode(document.content).decode('ascii')
    return f"data:{document.mimetype or DEFAULT_MIMETYPE};base64,{encoded}"


def encode_documents(documents, max_count, max_bytes):
    """
    Validates the upload limits and returns the encoded documents in order.

    Raises:
        ValidationError: Too many documents, or one exceeds max_bytes
    """
    documents = list(documents or [])
    if len(documents) > max_count:
        raise ValidationError(f"Too many verification documents. Maximum is {max_count}.")

    for document in documents:
        if document.size > max_bytes:
            raise ValidationError(
                f"Verification document '{document.filename}' exceeds the "
                f"size limit of {max_bytes} bytes."
            )

    return [to_data_uri(document) for document in documents]
