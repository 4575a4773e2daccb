class ClearError(Exception):
    """Base exception for all clear-txt errors."""
    pass

class RecoverableError(ClearError):
    """An error the app can report and carry on from with its in-memory list intact."""
    pass

class FatalError(ClearError):
    """An error that stops the command that hit it."""
    pass

class FileOperationError(RecoverableError):
    """Reading or writing the todo file failed; the list in memory is unaffected."""

    def __init__(self, message: str, path=None):
        super().__init__(message)
        self.path = path

class ConfigError(FatalError):
    """ settings.yml could not be parsed or holds invalid values """
    pass
