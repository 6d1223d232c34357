"""Custom exceptions."""


class ProcformError(Exception):
    """Base class for all custom exceptions.

    Useful to catch all of them.
    """


class HostedZoneRequiredError(ProcformError):
    """A process needs a DNS record but no hosted zone is configured."""

    def __init__(self, process_type: str):
        """Raise the HostedZoneRequiredError.

        Args:
            process_type (str): Primary process that requires the CNAME.
        """
        self.process_type = process_type
        msg = (
            f"Process '{process_type}' is exposed and needs a CNAME record, "
            "but no hosted zone was configured."
        )
        super().__init__(msg)


class ResourceCollisionError(ProcformError):
    """Two resources were assigned the same logical id."""

    def __init__(self, logical_id: str, owner: str | None = None, other: str | None = None):
        self.logical_id = logical_id
        msg = f"Logical id '{logical_id}' is already defined"
        if owner and other:
            msg += f" by process '{other}'; process '{owner}' normalizes to the same id"
        super().__init__(msg + ".")


class DanglingReferenceError(ProcformError):
    """A reference points to a logical id that is not declared in the graph."""

    def __init__(self, source: str, target: str):
        self.source = source
        self.target = target
        super().__init__(f"Resource '{source}' references undeclared logical id '{target}'.")


class TemplateSerializationError(ProcformError):
    """The assembled graph could not be encoded."""


class HostedZoneLookupError(ProcformError):
    """The Route53 hosted zone could not be fetched."""
