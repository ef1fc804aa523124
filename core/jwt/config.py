"""
JWT Configuration.

Immutable description of how tokens are signed and verified. Built once from
the ``jwt`` section of the host configuration; the ``with_*`` helpers return
copies so a running service never observes a change.
"""

from dataclasses import dataclass, replace
import logging
from enum import Enum
from typing import Any, Mapping, Optional

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization

from core.jwt.exceptions import ConfigError


SYMMETRIC_ALGORITHMS = ("HS256", "HS384", "HS512")
ASYMMETRIC_ALGORITHMS = ("RS256", "RS384", "RS512", "ES256", "ES384", "ES512")
SUPPORTED_ALGORITHMS = SYMMETRIC_ALGORITHMS + ASYMMETRIC_ALGORITHMS

# Minimum HMAC secret length in bytes, matching the digest size
HMAC_MIN_KEY_BYTES = {"HS256": 32, "HS384": 48, "HS512": 64}

logger = logging.getLogger(__name__)


class SignerType(str, Enum):
    """Whether tokens are signed with a shared secret or a key pair."""

    SYMMETRIC = "symmetric"
    ASYMMETRIC = "asymmetric"


def _to_int(key: str, value: Any) -> int:
    if value is None or value == "":
        raise ConfigError(f"JWT '{key}' is required")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"JWT '{key}' must be an integer, got {value!r}")


@dataclass(frozen=True)
class JwtConfig:
    """JWT signing and claim configuration."""

    alg: str = "HS256"
    iss: str = ""
    aud: str = ""
    sub: str = ""
    jti: str = ""
    exptime: int = 3600
    notbeforetime: int = 0
    signer_type: str = SignerType.SYMMETRIC.value
    secrect: str = ""
    private_key: str = ""
    public_key: str = ""

    @classmethod
    def from_mapping(cls, mapping: Optional[Mapping[str, Any]]) -> "JwtConfig":
        """
        Build a config from a host configuration mapping.

        Accepts the keys ``alg, iss, aud, sub, jti, exptime, notbeforetime,
        signer_type, secrect, private_key, public_key``. Missing keys keep
        their defaults.

        Raises:
            ConfigError: If exptime or notbeforetime is not an integer.
        """
        mapping = dict(mapping or {})
        defaults = cls()

        def _str(key: str) -> str:
            value = mapping.get(key)
            if value is None:
                return getattr(defaults, key)
            return str(value)

        exptime = mapping.get("exptime", defaults.exptime)
        notbeforetime = mapping.get("notbeforetime", defaults.notbeforetime)
        if notbeforetime in (None, ""):
            notbeforetime = 0

        return cls(
            alg=_str("alg"),
            iss=_str("iss"),
            aud=_str("aud"),
            sub=_str("sub"),
            jti=_str("jti"),
            exptime=_to_int("exptime", exptime),
            notbeforetime=_to_int("notbeforetime", notbeforetime),
            signer_type=_str("signer_type"),
            secrect=_str("secrect"),
            private_key=_str("private_key"),
            public_key=_str("public_key"),
        )

    # -------------------------------------------------------------------------
    # Copy setters
    # -------------------------------------------------------------------------

    def with_alg(self, alg: str) -> "JwtConfig":
        return replace(self, alg=alg)

    def with_iss(self, iss: str) -> "JwtConfig":
        return replace(self, iss=iss)

    def with_aud(self, aud: str) -> "JwtConfig":
        return replace(self, aud=aud)

    def with_sub(self, sub: str) -> "JwtConfig":
        return replace(self, sub=sub)

    def with_jti(self, jti: str) -> "JwtConfig":
        return replace(self, jti=jti)

    def with_exptime(self, exptime: int) -> "JwtConfig":
        return replace(self, exptime=_to_int("exptime", exptime))

    def with_notbeforetime(self, notbeforetime: int) -> "JwtConfig":
        return replace(self, notbeforetime=_to_int("notbeforetime", notbeforetime))

    def with_signer_type(self, signer_type: str) -> "JwtConfig":
        return replace(self, signer_type=signer_type)

    def with_secrect(self, secrect: str) -> "JwtConfig":
        return replace(self, secrect=secrect)

    def with_private_key(self, private_key: str) -> "JwtConfig":
        return replace(self, private_key=private_key)

    def with_public_key(self, public_key: str) -> "JwtConfig":
        return replace(self, public_key=public_key)

    # -------------------------------------------------------------------------
    # Checks
    # -------------------------------------------------------------------------

    @property
    def normalized_signer_type(self) -> SignerType:
        """
        Return the signer type as an enum member.

        Raises:
            ConfigError: If the signer type is unknown.
        """
        try:
            return SignerType(str(self.signer_type).strip().lower())
        except ValueError:
            raise ConfigError(
                f"Unsupported JWT signer type '{self.signer_type}' "
                f"(expected 'symmetric' or 'asymmetric')"
            )

    def check_algorithm(self) -> SignerType:
        """
        Verify the algorithm is supported and agrees with the signer type.

        Returns:
            SignerType: The resolved signer type.
        """
        if self.alg not in SUPPORTED_ALGORITHMS:
            raise ConfigError(f"Unsupported JWT algorithm '{self.alg}'")

        signer_type = self.normalized_signer_type
        if signer_type is SignerType.SYMMETRIC and self.alg not in SYMMETRIC_ALGORITHMS:
            raise ConfigError(f"Algorithm '{self.alg}' requires an asymmetric signer")
        if signer_type is SignerType.ASYMMETRIC and self.alg not in ASYMMETRIC_ALGORITHMS:
            raise ConfigError(f"Algorithm '{self.alg}' requires a symmetric signer")
        return signer_type

    def signing_key(self) -> Any:
        """
        Resolve the key used to sign tokens.

        Raises:
            ConfigError: If the configuration cannot issue tokens.
        """
        signer_type = self.check_algorithm()
        if self.exptime <= 0:
            raise ConfigError(f"JWT 'exptime' must be positive, got {self.exptime}")

        if signer_type is SignerType.SYMMETRIC:
            if not self.secrect:
                raise ConfigError("JWT secret is required for symmetric signing")
            minimum = HMAC_MIN_KEY_BYTES[self.alg]
            if len(self.secrect.encode("utf-8")) < minimum:
                logger.warning(
                    f"JWT secret is shorter than {minimum} bytes, "
                    f"the recommended minimum for {self.alg}"
                )
            return self.secrect

        if not self.private_key:
            raise ConfigError("JWT private key is required for asymmetric signing")
        try:
            return serialization.load_pem_private_key(
                self.private_key.encode("utf-8"), password=None
            )
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise ConfigError(f"JWT private key could not be loaded: {e}")

    def verification_key(self) -> Any:
        """
        Resolve the key used to verify token signatures.

        Raises:
            ConfigError: If the configuration cannot validate tokens.
        """
        signer_type = self.check_algorithm()

        if signer_type is SignerType.SYMMETRIC:
            if not self.secrect:
                raise ConfigError("JWT secret is required for symmetric verification")
            return self.secrect

        if not self.public_key:
            raise ConfigError("JWT public key is required for asymmetric verification")
        try:
            return serialization.load_pem_public_key(self.public_key.encode("utf-8"))
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise ConfigError(f"JWT public key could not be loaded: {e}")
