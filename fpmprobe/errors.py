"""Exception types raised by the probe, the marker parser and the freshness check."""


class ProbeError(Exception):
    """Base class for all fpm-probe failures."""


class OwnershipError(ProbeError, PermissionError):
    def __init__(self, path, euid: int, owner_uid: int):
        super().__init__("You must be the owner of this file to execute it")
        self.path = path
        self.euid = euid
        self.owner_uid = owner_uid


class ProbeWriteError(ProbeError, OSError):
    def __init__(self, path):
        super().__init__(f"The permissions on the file '{path}' are incorrect")
        self.path = path


class MarkerError(ProbeError, LookupError):
    pass


class MarkerNotFoundError(MarkerError):
    def __init__(self, path, declaration: str):
        super().__init__(f"No line starting with {declaration} found in '{path}'")
        self.path = path


class MalformedMarkerError(MarkerError):
    def __init__(self, path, line: str, values):
        super().__init__(
            f"Marker line in '{path}' carries none of {', '.join(values)}: {line.strip()!r}"
        )
        self.path = path
        self.line = line


class ProbeCommandError(ProbeError):
    def __init__(self, command, returncode: int, stderr: str = ""):
        super().__init__(
            f"Probe command {' '.join(command)!r} exited with {returncode}: {stderr.strip()}"
        )
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
