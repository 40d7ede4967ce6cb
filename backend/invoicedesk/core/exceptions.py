"""Application error types."""


class InvoiceDeskError(Exception):
    """Base class for errors raised by invoicedesk."""


class ConfigurationError(InvoiceDeskError):
    """Database configuration is missing or invalid."""


class DataFetchError(InvoiceDeskError):
    """A read query failed. The message names the fetch that failed."""


class MutationError(InvoiceDeskError):
    """A write outside the form-state contract failed."""
