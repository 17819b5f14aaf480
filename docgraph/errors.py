"""Run-level exceptions.

Problems with individual documents never raise across a batch; they are
collected as findings. The exceptions here abort a run or mark a
programming error at a module seam.
"""


class DocGraphError(Exception):
    """Base class for docgraph errors."""


class ConfigurationError(DocGraphError):
    """Raised when validation options are invalid. Aborts before parsing."""


class CorpusLoadError(DocGraphError):
    """Raised when the content root cannot be read at all."""


class DuplicateIdentityError(DocGraphError):
    """Raised by the registry when a (phase, topic, depth) triple is already taken."""

    def __init__(self, doc_id: str, existing_path: str, duplicate_path: str):
        self.doc_id = doc_id
        self.existing_path = existing_path
        self.duplicate_path = duplicate_path
        super().__init__(
            f"{doc_id} is declared by both {existing_path} and {duplicate_path}"
        )


class RegistrySealedError(DocGraphError):
    """Raised when registering into a registry that has already been sealed."""


class ReportVerifyError(DocGraphError):
    """Raised when a stored report cannot be loaded for verification."""


__all__ = [
    "DocGraphError",
    "ConfigurationError",
    "CorpusLoadError",
    "DuplicateIdentityError",
    "RegistrySealedError",
    "ReportVerifyError",
]
