"""
jwt_hashed_token resource: signs a JWT with an HMAC secret from configuration.
Every input forces replacement, so there is no update; read is a no-op because the token
is a pure function of its inputs and nothing remote can drift.
"""
import base64
import binascii
import json
import logging
import warnings
from dataclasses import dataclass
from typing import Any

import jwt

from jwt_provider.algorithms import HashingAlgorithm, resolve_algorithm, validate_algorithm
from jwt_provider.config import DEFAULT_HASHING_ALGORITHM
from jwt_provider.errors import InvalidAttribute, MalformedClaims, MalformedSecret, SigningFailure
from jwt_provider.resource import Resource, ResourceData
from jwt_provider.schema import TYPE_STRING, Attribute

logger = logging.getLogger(__name__)

HASHED_TOKEN_SCHEMA: dict[str, Attribute] = {
    "algorithm": Attribute(
        type=TYPE_STRING,
        optional=True,
        default=DEFAULT_HASHING_ALGORITHM,
        description="Signing algorithm to use. Defaults to `HS512`. Supported algorithms are `HS256`, `HS384`, `HS512`.",
        validate_func=validate_algorithm,
        force_new=True,
    ),
    "secret_base64": Attribute(
        type=TYPE_STRING,
        required=True,
        description="HMAC secret as base64 string to sign the JWT with.",
        force_new=True,
        sensitive=True,
    ),
    "claims_json": Attribute(
        type=TYPE_STRING,
        required=True,
        description="The token's claims, as a JSON document.",
        force_new=True,
    ),
    "token": Attribute(
        type=TYPE_STRING,
        computed=True,
        description="The JWT token, as a string.",
        sensitive=True,
    ),
}


@dataclass(frozen=True)
class HashedTokenConfig:
    algorithm: str
    secret_base64: str
    claims_json: str

    @classmethod
    def from_resource_data(cls, data: ResourceData) -> "HashedTokenConfig":
        """Read and type-check the inputs once; missing or non-string values raise InvalidAttribute."""
        values = {}
        for key in ("algorithm", "secret_base64", "claims_json"):
            value = data.get(key)
            if value is None:
                raise InvalidAttribute(f"{key} is required.", attribute=key)
            if not isinstance(value, str):
                raise InvalidAttribute(f"{key} must be a string.", attribute=key)
            values[key] = value
        return cls(**values)


def _reject_constant(name: str):
    raise ValueError(f"{name} is not valid JSON")


def parse_claims(claims_json: str) -> dict[str, Any]:
    """Parse claims text into a dict. Non-objects and NaN/Infinity raise MalformedClaims."""
    try:
        claims = json.loads(claims_json, parse_constant=_reject_constant)
    except ValueError as e:
        raise MalformedClaims(f"claims_json is not valid JSON: {e}", attribute="claims_json") from e
    if not isinstance(claims, dict):
        raise MalformedClaims("claims_json must be a JSON object.", attribute="claims_json")
    return claims


def decode_secret(secret_base64: str) -> bytes:
    """Strict standard base64 (alphabet and padding enforced). An empty key is rejected."""
    try:
        secret = base64.b64decode(secret_base64, validate=True)
    except (binascii.Error, ValueError) as e:
        # Do not echo the input; it is secret material.
        raise MalformedSecret(f"secret_base64 is not valid base64: {e}", attribute="secret_base64") from e
    if not secret:
        raise MalformedSecret("secret_base64 must decode to a non-empty HMAC key.", attribute="secret_base64")
    return secret


def canonical_claims(claims: dict[str, Any]) -> str:
    """Compact JSON with keys sorted at every level; used as the resource id and the signed payload."""
    try:
        return json.dumps(claims, sort_keys=True, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise SigningFailure(f"could not serialize claims: {e}", attribute="claims_json") from e


def sign_payload(payload: str, secret: bytes, algorithm: HashingAlgorithm) -> str:
    """
    Compact JWS over the payload bytes with header {"alg", "typ": "JWT"}.
    Signs at the JWS layer so registered claims (iss, sub, aud, ...) are not type-checked:
    claims are arbitrary JSON. Short-key warnings from PyJWT are sent to the log.
    """
    try:
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            token = jwt.api_jws.encode(
                payload.encode("utf-8"),
                secret,
                algorithm=algorithm.value,
                headers={"typ": "JWT"},
            )
    except (jwt.PyJWTError, TypeError, ValueError) as e:
        raise SigningFailure(f"signing failed: {e}") from e
    for w in caught:
        logger.warning("%s signing: %s", algorithm.value, w.message)
    if isinstance(token, bytes):
        token = token.decode("utf-8")
    return token


class HashedTokenResource(Resource):
    type_name = "jwt_hashed_token"
    description = "A JWT signed with an HMAC secret (HS256, HS384, HS512)."
    schema = HASHED_TOKEN_SCHEMA

    def create(self, data: ResourceData) -> None:
        config = HashedTokenConfig.from_resource_data(data)
        algorithm = resolve_algorithm(config.algorithm)
        claims = parse_claims(config.claims_json)
        secret = decode_secret(config.secret_base64)

        resource_id = canonical_claims(claims)
        token = sign_payload(resource_id, secret, algorithm)

        # Nothing is set until signing and serialization have both succeeded.
        data.set("token", token)
        data.set_id(resource_id)
        logger.info("Signed %s token with claims %s", algorithm.value, sorted(claims))

    def read(self, data: ResourceData) -> None:
        logger.debug("read is a no-op for %s id=%s", self.type_name, data.id)

    def delete(self, data: ResourceData) -> None:
        data.set_id("")
