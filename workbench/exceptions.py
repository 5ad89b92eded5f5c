"""Root exceptions shared by every layer of the workbench."""


class WorkbenchError(Exception):
    """Base exception for all workbench errors.

    Layer-specific exceptions (extraction, persistence, configuration) inherit
    from this class so the CLI can report any expected failure with a single
    except clause.
    """

    pass


class InvalidArgumentError(WorkbenchError, ValueError):
    """A required input was missing, empty, or out of range.

    Raised by the extractors (bad page range, unknown encoding), the résumé
    parser (empty text) and the matching engine (missing candidate or job).
    """

    pass
