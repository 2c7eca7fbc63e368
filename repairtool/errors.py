class RepairError(Exception):
    """Base class for every failure that ends a repair run."""


class ConfigurationError(RepairError):
    pass


class HealthQueryUnavailable(RepairError):
    pass


class EmptyClusterView(RepairError):
    pass


class StatusUnavailable(RepairError):
    pass


class InvalidStatusFormat(RepairError):
    pass


class InvokeFailure(RepairError):
    pass


class IdentityUnresolvable(RepairError):
    pass
