"""
JWT Credential Service.

Issues and validates signed, time-bounded admin identity tokens using PyJWT.
The service holds nothing but an immutable JwtConfig and a clock, so a single
instance is safe to share across concurrent requests.
"""

import json
import logging
import time
import uuid
from typing import Any, Callable, Dict, Mapping, Optional

import jwt
from jwt.utils import base64url_decode, base64url_encode

from core.jwt.config import JwtConfig
from core.jwt.exceptions import (
    ConfigError,
    InvalidClaimError,
    MalformedTokenError,
    SignatureInvalidError,
    SigningError,
    TokenExpiredError,
    TokenNotYetValidError,
)

logger = logging.getLogger(__name__)

STANDARD_CLAIMS = ("iss", "aud", "sub", "jti", "iat", "exp", "nbf")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class JwtService:
    """
    JWT issuance and validation bound to one configuration.

    Args:
        config: The signing configuration.
        clock: Returns the current UNIX time in seconds (default: time.time).
    """

    def __init__(
        self,
        config: JwtConfig,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self._config = config
        self._clock = clock or time.time

    @property
    def config(self) -> JwtConfig:
        """The configuration this service signs with."""
        return self._config

    def now(self) -> int:
        """Current time in whole seconds."""
        return int(self._clock())

    # =========================================================================
    # Issue
    # =========================================================================

    def issue(self, claims: Optional[Mapping[str, Any]] = None) -> str:
        """
        Issue a signed token.

        Custom claims are merged beneath the standard claim set; on a key
        collision the standard claim wins.

        Args:
            claims: Custom claims to embed.

        Returns:
            str: The compact header.payload.signature token.

        Raises:
            ConfigError: If the configuration cannot issue tokens.
            SigningError: If the signing primitive rejects the key.
        """
        config = self._config
        key = config.signing_key()

        payload: Dict[str, Any] = dict(claims or {})
        payload.update(self._standard_claims())

        try:
            token = jwt.encode(
                payload,
                key,
                algorithm=config.alg,
                headers={"typ": "JWT"},
            )
        except (jwt.PyJWTError, TypeError, ValueError) as e:
            raise SigningError(f"Failed to sign token with {config.alg}: {e}") from e

        logger.debug(f"Issued JWT jti={payload.get('jti')} exp={payload['exp']}")
        return token

    def _standard_claims(self) -> Dict[str, Any]:
        config = self._config
        now = self.now()

        standard: Dict[str, Any] = {}
        for name in ("iss", "aud", "sub"):
            value = getattr(config, name)
            if value:
                standard[name] = value
        standard["jti"] = config.jti or uuid.uuid4().hex
        standard["iat"] = now
        standard["exp"] = now + config.exptime
        standard["nbf"] = now + config.notbeforetime
        return standard

    # =========================================================================
    # Validate
    # =========================================================================

    def validate(self, token: str) -> Dict[str, Any]:
        """
        Validate a token and return its claims.

        Checks run in order: configuration, structure, expiry and not-before
        against the clock, signature, then issuer and audience.

        Args:
            token: The compact token string.

        Returns:
            dict: All claims, standard and custom.

        Raises:
            ConfigError: If the configuration cannot validate tokens.
            MalformedTokenError: If the token cannot be parsed.
            TokenExpiredError: If now > exp.
            TokenNotYetValidError: If now < nbf.
            SignatureInvalidError: If the signature does not verify.
            InvalidClaimError: If iss or aud do not match the configuration.
        """
        config = self._config
        key = config.verification_key()

        unverified = self._parse(token)
        self._check_times(unverified)
        self._check_signature_segment(token.rsplit(".", 1)[1])

        try:
            claims = jwt.decode(
                token,
                key,
                algorithms=[config.alg],
                options={
                    "verify_exp": False,
                    "verify_nbf": False,
                    "verify_iat": False,
                    "verify_aud": False,
                    "verify_iss": False,
                    "verify_sub": False,
                    "verify_jti": False,
                },
            )
        except (jwt.InvalidSignatureError, jwt.InvalidAlgorithmError) as e:
            raise SignatureInvalidError(str(e)) from e
        except (jwt.InvalidKeyError, TypeError) as e:
            raise ConfigError(f"JWT verification key rejected: {e}") from e
        except jwt.PyJWTError as e:
            raise MalformedTokenError(str(e)) from e

        self._check_claims(claims)
        return claims

    def get_claim(self, token: str, name: str, default: Any = None) -> Any:
        """Validate a token and return one of its claims."""
        return self.validate(token).get(name, default)

    def _parse(self, token: str) -> Dict[str, Any]:
        if not isinstance(token, str) or token.count(".") != 2:
            raise MalformedTokenError("Token must have three dot-separated segments")

        header_segment, payload_segment, _ = token.split(".")
        self._decode_segment(header_segment, "header")
        payload = self._decode_segment(payload_segment, "payload")

        if not _is_int(payload.get("exp")):
            raise MalformedTokenError("Token 'exp' claim must be an integer")
        if "nbf" in payload and not _is_int(payload["nbf"]):
            raise MalformedTokenError("Token 'nbf' claim must be an integer")
        return payload

    @staticmethod
    def _decode_segment(segment: str, name: str) -> Dict[str, Any]:
        try:
            data = json.loads(base64url_decode(segment.encode("ascii")))
        except ValueError as e:
            raise MalformedTokenError(f"Token {name} could not be decoded: {e}") from e
        if not isinstance(data, dict):
            raise MalformedTokenError(f"Token {name} must be a JSON object")
        return data

    @staticmethod
    def _check_signature_segment(segment: str) -> None:
        # Only the canonical encoding of the decoded bytes is accepted.
        try:
            raw = base64url_decode(segment.encode("ascii"))
        except ValueError as e:
            raise SignatureInvalidError(f"Token signature could not be decoded: {e}") from e
        if base64url_encode(raw).decode("ascii") != segment:
            raise SignatureInvalidError("Token signature is not canonically encoded")

    def _check_times(self, payload: Mapping[str, Any]) -> None:
        now = self.now()
        if now > payload["exp"]:
            raise TokenExpiredError(f"Token expired at {payload['exp']}")
        nbf = payload.get("nbf")
        if nbf is not None and now < nbf:
            raise TokenNotYetValidError(f"Token not valid before {nbf}")

    def _check_claims(self, claims: Mapping[str, Any]) -> None:
        config = self._config
        if config.iss and claims.get("iss") != config.iss:
            raise InvalidClaimError("Token issuer does not match")
        if config.aud:
            aud = claims.get("aud")
            audiences = aud if isinstance(aud, list) else [aud]
            if config.aud not in audiences:
                raise InvalidClaimError("Token audience does not match")
