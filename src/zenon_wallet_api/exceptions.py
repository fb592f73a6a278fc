# src/zenon_wallet_api/exceptions.py

class WalletApiError(Exception):
    """Base exception class for wallet service errors"""
    status_code = 500
    title = "Internal Server Error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.title)
        self.message = message or self.title

class Unauthorized(WalletApiError):
    """Raised on a bad password or when key material is not accessible"""
    status_code = 401
    title = "Unauthorized"

class WalletLocked(Unauthorized):
    """Raised when an operation needs an unlocked wallet"""
    title = "Wallet is locked"

class StaleSession(Unauthorized):
    """Raised when an account handle outlived the session that issued it"""
    title = "Account handle belongs to an expired wallet session"

class Forbidden(WalletApiError):
    """Raised when the caller's policy does not allow the operation"""
    status_code = 403
    title = "Forbidden"

class InvalidArgument(WalletApiError):
    """Raised on a bad index, address or amount"""
    status_code = 400
    title = "Bad Request"

class NotFound(WalletApiError):
    """Raised when an account index is outside the derivable range"""
    status_code = 404
    title = "Not Found"

class Conflict(WalletApiError):
    """Raised when a state transition is not allowed"""
    status_code = 409
    title = "Conflict"

class ChainHeadConflict(Conflict):
    """Raised when the node rejects a block built on a stale chain head"""
    title = "Stale chain head"

class NodeUnavailable(WalletApiError):
    """Raised when the node cannot be reached"""
    status_code = 503
    title = "Node unavailable"

class NodeError(WalletApiError):
    """Raised when the node answers with an unrecognised error"""
    status_code = 502
    title = "Node error"

class KeyStoreCorrupted(WalletApiError):
    """Raised when the persisted key store cannot be read"""
    status_code = 500
    title = "Key store corrupted"
