"""
HMAC signing algorithms accepted by jwt_hashed_token.
A closed set: HS256, HS384, HS512. Asymmetric names are recognised only to point users
at the jwt_signed_token resource.
"""
import enum
from typing import Any

from jwt.algorithms import requires_cryptography

from jwt_provider.errors import InvalidAttribute, ProviderError, UnsupportedAlgorithm


class HashingAlgorithm(enum.Enum):
    HS256 = "HS256"
    HS384 = "HS384"
    HS512 = "HS512"

    @classmethod
    def choices(cls) -> list[str]:
        return [m.value for m in cls]


def _choices_text() -> str:
    return ", ".join(HashingAlgorithm.choices())


def resolve_algorithm(name: str) -> HashingAlgorithm:
    """Map an algorithm name to HashingAlgorithm or raise UnsupportedAlgorithm."""
    try:
        return HashingAlgorithm(name)
    except ValueError:
        pass
    if name in requires_cryptography:
        raise UnsupportedAlgorithm(
            f"{name} is an asymmetric algorithm. For RSA/ECDSA signing, please use the jwt_signed_token resource.",
            attribute="algorithm",
        )
    if name == "none":
        raise UnsupportedAlgorithm(
            "Unsigned tokens (none) are not supported. Choices are " + _choices_text() + ".",
            attribute="algorithm",
        )
    raise UnsupportedAlgorithm(
        f"{name} is not a supported signing algorithm. Choices are {_choices_text()}.",
        attribute="algorithm",
    )


def validate_algorithm(value: Any, key: str = "algorithm") -> tuple[list[str], list[ProviderError]]:
    """
    Config-time check for the algorithm attribute. Returns (warnings, errors); never raises.
    Non-strings get InvalidAttribute; unknown and non-HMAC names get UnsupportedAlgorithm.
    """
    warnings: list[str] = []
    errors: list[ProviderError] = []
    if not isinstance(value, str):
        errors.append(InvalidAttribute(f"{key} must be a string.", attribute=key))
        return warnings, errors
    try:
        resolve_algorithm(value)
    except UnsupportedAlgorithm as e:
        e.attribute = key
        errors.append(e)
    return warnings, errors
