"""Exception types raised by the wizard, config store and bridge controller."""


class MomentumError(Exception):
    """Base class for all Momentum errors."""


class ValidationError(MomentumError):
    """A required credential is missing; the save was not attempted.

    Attributes:
        missing: Keys of the empty fields (``"ngrokToken"`` for the token).
    """

    def __init__(self, message: str, missing: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.missing = missing


class PersistenceError(MomentumError):
    """Reading or writing the configuration file failed."""


class BridgeStartError(MomentumError):
    """The bridge could not be started. Logged by the controller, not raised to the UI."""


class BridgeStopTimeout(MomentumError):
    """The bridge did not confirm a stop within the grace period."""


class WizardTransitionError(MomentumError):
    """A wizard trigger was fired from a view where it is not allowed."""
