from __future__ import annotations


class CardiacSimError(Exception):
    """Base class for errors raised by the simulator."""


class ConfigurationError(CardiacSimError, ValueError):
    """Invalid run or model configuration."""


class ResourceExhaustedError(CardiacSimError, MemoryError):
    """Grid or device memory could not be allocated."""


class TransferError(CardiacSimError, RuntimeError):
    """A host/device copy or a device synchronisation failed."""


class BackendUnavailableError(CardiacSimError, RuntimeError):
    """The selected kernel backend cannot run in this environment."""
