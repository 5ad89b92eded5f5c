"""Export layer exceptions."""

from workbench.exceptions import WorkbenchError


class ExportError(WorkbenchError):
    """Raised when an export file cannot be written."""

    pass
