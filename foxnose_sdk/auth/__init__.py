"""Authentication strategies for the FoxNose APIs."""

from foxnose_sdk.auth.anonymous import AnonymousAuth
from foxnose_sdk.auth.protocols import AuthStrategy, RequestData, TokenProvider
from foxnose_sdk.auth.secure import SecureKeyAuth
from foxnose_sdk.auth.simple import SimpleKeyAuth
from foxnose_sdk.auth.token import JWTAuth, StaticTokenProvider


__all__ = [
    # Protocols
    "AuthStrategy",
    "RequestData",
    "TokenProvider",
    # Strategies
    "AnonymousAuth",
    "JWTAuth",
    "SecureKeyAuth",
    "SimpleKeyAuth",
    "StaticTokenProvider",
]
