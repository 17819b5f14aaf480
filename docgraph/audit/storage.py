"""Storage for validation reports."""

from pathlib import Path

from docgraph.contracts.findings import Report
from docgraph.errors import ReportVerifyError


class ReportStorage:
    """
    Storage for validation reports.

    Saves reports as canonical JSON next to a SHA-256 digest file, so a CI
    job can tell whether a later run changed anything.
    """

    def __init__(self, storage_path: Path | str):
        self.storage_path = Path(storage_path)
        self.storage_path.mkdir(parents=True, exist_ok=True)

    def _json_path(self, name: str) -> Path:
        return self.storage_path / f"{name}.json"

    def _hash_path(self, name: str) -> Path:
        return self.storage_path / f"{name}.sha256"

    def save(self, report: Report, name: str) -> Path:
        """
        Save a report.

        Args:
            report: The report to save
            name: Base file name (without extension)

        Returns:
            Path to the saved JSON file
        """
        file_path = self._json_path(name)
        file_path.write_text(report.canonical_json() + "\n", encoding="utf-8")
        self._hash_path(name).write_text(report.digest(), encoding="utf-8")
        return file_path

    def load(self, name: str) -> Report | None:
        """Load a report by name, or None if it does not exist."""
        file_path = self._json_path(name)

        if not file_path.exists():
            return None

        return Report.model_validate_json(file_path.read_text(encoding="utf-8"))

    def verify(self, name: str) -> tuple[bool, str]:
        """
        Verify a stored report against its digest file.

        Returns:
            (is_valid, message) tuple

        Raises:
            ReportVerifyError: If the stored JSON cannot be parsed as a report.
        """
        try:
            report = self.load(name)
        except ValueError as e:
            raise ReportVerifyError(f"Stored report {name} is not valid: {e}") from e

        if report is None:
            return False, f"Report {name} not found"

        hash_path = self._hash_path(name)
        if not hash_path.exists():
            return False, "Hash file missing"

        stored_hash = hash_path.read_text(encoding="utf-8").strip()

        if stored_hash == report.digest():
            return True, "Report integrity verified"
        return False, "Hash mismatch - report may have been modified"

    def matches(self, name: str, report: Report) -> bool:
        """Whether ``report`` is identical to the stored one."""
        hash_path = self._hash_path(name)
        if not hash_path.exists():
            return False
        return hash_path.read_text(encoding="utf-8").strip() == report.digest()

    def list_reports(self) -> list[str]:
        return sorted(p.stem for p in self.storage_path.glob("*.json"))
