"""Error types shared by the tako commands.

Filesystem failures are left as the builtin OSError family; everything
else a command can fail with derives from TakoError.
"""


class TakoError(Exception):
    """Base class for tako failures (also used for plain misuse errors)."""

    pass


class ProjectExistsError(TakoError):
    """Raised when a new project would overwrite an existing directory."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Project '{name}' already exists")


class InvalidTemplateError(TakoError):
    """Raised when an unknown template name is requested."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Invalid template: {name}")


class BuildFailedError(TakoError):
    """Raised when building, locating or verifying a contract fails."""

    def __init__(self, message: str):
        self.detail = message
        super().__init__(f"Build failed: {message}")


class TestFailedError(TakoError):
    """Raised when the contract test run fails."""

    __test__ = False

    def __init__(self, message: str):
        self.detail = message
        super().__init__(f"Tests failed: {message}")


class ConfigError(TakoError):
    """Raised for malformed configuration files."""

    def __init__(self, message: str):
        self.detail = message
        super().__init__(f"Configuration error: {message}")
