"""
Error types shared by the ETL components.

Only ConfigurationError is allowed to stop the process. Provider and store
errors are caught per record by the enrichers and turned into failed counts.
"""


class EtlError(Exception):
    """Base class for ETL errors."""


class ConfigurationError(EtlError):
    """Mandatory configuration is missing or invalid."""


class ProviderError(EtlError):
    """An external provider call failed at the transport or HTTP level."""


class ProviderResponseError(ProviderError):
    """A provider answered, but the body did not decode to the expected shape."""


class StoreError(EtlError):
    """A read or write against the store failed."""
