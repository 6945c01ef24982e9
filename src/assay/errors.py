"""Exception types raised by the engine."""


class AssayError(Exception):
    """Base class for engine errors."""


class FatalError(AssayError):
    """A condition that ends the run, e.g. a fixture that cannot get its resource."""


class RegistryError(AssayError):
    """A suite target could not be resolved to a callable."""
