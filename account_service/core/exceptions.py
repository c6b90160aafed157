from typing import Optional


class AccountServiceError(Exception):
    """Base error. ``path`` accumulates the call chain, outermost frame first."""

    kind = "account-service-error"

    def __init__(self, message: str, path: str = "", cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.path = path
        self.cause = cause

    def prepend_path(self, frame: str) -> "AccountServiceError":
        self.path = frame + self.path
        return self

    def to_dict(self) -> dict:
        return {"type": self.kind, "message": self.message, "path": self.path}

    def __str__(self):
        if self.path:
            return f"{self.path}: {self.message}"
        return self.message


# ------------------ Validation ------------------ #

class ValidationError(AccountServiceError):
    kind = "validation-error"


class PhoneAlreadyExists(ValidationError):
    def __init__(self, path: str = ""):
        super().__init__("Phone Already Exists", path=path)


class WrongPhone(ValidationError):
    def __init__(self, path: str = ""):
        super().__init__("wrong phone", path=path)


class WrongPassword(ValidationError):
    def __init__(self, path: str = ""):
        super().__init__("wrong password", path=path)


# ------------------ Storage ------------------ #

class StorageError(AccountServiceError):
    kind = "storage-error"


class NotFoundError(StorageError):
    kind = "not-found"

    def __init__(self, entity: str = "user", path: str = ""):
        super().__init__(f"{entity} not found", path=path)


# ------------------ Crypto ------------------ #

class CryptoError(AccountServiceError):
    kind = "crypto-error"


class HashingError(CryptoError):
    pass


class TokenSigningError(CryptoError):
    pass


class InvalidToken(AccountServiceError):
    kind = "invalid-token"

    def __init__(self, message: str = "Invalid Token", path: str = "", cause: Optional[BaseException] = None):
        super().__init__(message, path=path, cause=cause)
