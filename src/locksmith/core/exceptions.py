"""
Exceptions for Locksmith
This is placed such that there is a general error catcher
"""


class LocksmithError(Exception):
    # general container for errors
    pass


class MalformedKeyFileError(LocksmithError):
    # raised when the key file is a directory, fails a marker or size check,
    # or cannot be decrypted with the expected key
    def __init__(self, filename: str = "", reason: str = ""):
        message = f"malformed key file: {filename}" if filename else "malformed key file"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.filename = filename
        self.reason = reason


class CipherError(LocksmithError):
    # raised when the cipher primitive rejects its input (bad padding, bad base64)
    pass


class InvalidKeyError(CipherError):
    # raised when a key is not exactly 32 bytes
    pass


class PathResolutionError(LocksmithError):
    # raised when no key file name is given and the executable path is unknown
    pass


class KeyFileExistsError(LocksmithError):
    # raised when creating a key file where one already exists
    def __init__(self, filename: str):
        super().__init__(f"key file must not exist: {filename}")
        self.filename = filename


class ConfigurationError(LocksmithError):
    # raised when settings from the environment are missing or unusable
    pass
