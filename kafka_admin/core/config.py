# kafka_admin/core/config.py
import json
import os
import ssl
import tempfile
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from kafka_admin.core.exceptions import ConfigurationError

# Oldest broker release the client addresses; request versions are pinned to it.
MINIMUM_API_VERSION = (2, 0)
CLIENT_ID = "kafka-admin-client"


# ---------- Certificate sources ----------

class InlineCertificate(BaseModel):
    """PEM-encoded CA certificate(s) held in memory."""

    source: Literal["inline"] = "inline"
    pem: str


class CertificateFile(BaseModel):
    """CA certificate bundle stored on disk."""

    source: Literal["file"] = "file"
    path: Path


class InlineKeyPair(BaseModel):
    """Client certificate and private key, both PEM-encoded in memory."""

    source: Literal["inline"] = "inline"
    cert_pem: str
    key_pem: str


class KeyPairFiles(BaseModel):
    """Client certificate and private key stored on disk."""

    source: Literal["file"] = "file"
    cert_file: Path
    key_file: Path


CACertificate = Annotated[
    Union[InlineCertificate, CertificateFile], Field(discriminator="source")
]
ClientCertificate = Annotated[
    Union[InlineKeyPair, KeyPairFiles], Field(discriminator="source")
]


class ConnectionConfig(BaseSettings):
    """
    Cluster connection parameters, loaded from ``KAFKA_*`` environment
    variables (and .env) or passed explicitly.

    Notes
    -----
    - `bootstrap_servers` accepts a JSON array or a comma-separated string.
    - `timeout` (seconds) is the broker-side timeout baked into create,
      delete and partition requests.
    - SASL is switched on as soon as a username or password is set.
    - Certificates are tagged unions: ``{"source": "inline", ...}`` or
      ``{"source": "file", ...}``; absent means not configured.
    """
    model_config = SettingsConfigDict(
        env_prefix="KAFKA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    bootstrap_servers: Annotated[List[str], NoDecode] = Field(..., min_length=1)
    timeout: int = Field(120, ge=0)
    request_timeout_ms: int = 30_000

    # ---------- TLS ----------
    tls_enabled: bool = False
    skip_tls_verify: bool = False
    ca_cert: Optional[CACertificate] = None
    client_cert: Optional[ClientCertificate] = None

    # ---------- SASL/PLAIN ----------
    sasl_username: str = ""
    sasl_password: str = ""

    @field_validator("bootstrap_servers", mode="before")
    def _parse_bootstrap(cls, v):
        """Accept JSON array or comma-separated string."""
        if isinstance(v, str):
            v = v.strip()
            if v.startswith("["):
                v = json.loads(v)
            else:
                v = v.split(",")
        return [str(s).strip() for s in v if str(s).strip()]

    def __str__(self) -> str:
        return (
            f"BootstrapServers: {self.bootstrap_servers}, Timeout: {self.timeout}, "
            f"TLS: {self.tls_enabled}, SkipVerify: {self.skip_tls_verify}"
        )

    def is_sasl_enabled(self) -> bool:
        return self.sasl_username != "" or self.sasl_password != ""

    @property
    def security_protocol(self) -> str:
        if self.tls_enabled:
            return "SASL_SSL" if self.is_sasl_enabled() else "SSL"
        return "SASL_PLAINTEXT" if self.is_sasl_enabled() else "PLAINTEXT"

    # ---------- kafka-python client kwargs ----------
    def derive_client_config(self) -> dict:
        """Return keyword arguments for ``kafka.KafkaClient``.

        Raises
        ------
        ConfigurationError
            If TLS is enabled and a certificate or key cannot be loaded.
        """
        kw: dict[str, Any] = dict(
            bootstrap_servers=list(self.bootstrap_servers),
            client_id=CLIENT_ID,
            api_version=MINIMUM_API_VERSION,
            # must outlive the broker-side timeout of mutation requests
            request_timeout_ms=max(self.request_timeout_ms, (self.timeout + 5) * 1000),
            security_protocol=self.security_protocol,
        )
        if self.is_sasl_enabled():
            kw.update(
                sasl_mechanism="PLAIN",
                sasl_plain_username=self.sasl_username,
                sasl_plain_password=self.sasl_password,
            )
        if self.tls_enabled:
            kw.update(ssl_context=self.build_ssl_context())
        return kw

    def build_ssl_context(self) -> ssl.SSLContext:
        ctx = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
        self._load_client_cert(ctx)
        self._load_trusted_roots(ctx)
        if self.skip_tls_verify:
            ctx.check_hostname = False
            ctx.verify_mode = ssl.CERT_NONE
        return ctx

    def _load_client_cert(self, ctx: ssl.SSLContext) -> None:
        cert = self.client_cert
        if cert is None:
            return
        try:
            if isinstance(cert, InlineKeyPair):
                # the ssl module only loads key material from files
                with tempfile.TemporaryDirectory() as tmp:
                    certfile = os.path.join(tmp, "client.crt")
                    keyfile = os.path.join(tmp, "client.key")
                    Path(certfile).write_text(cert.cert_pem)
                    Path(keyfile).write_text(cert.key_pem)
                    os.chmod(keyfile, 0o600)
                    ctx.load_cert_chain(certfile=certfile, keyfile=keyfile)
            else:
                ctx.load_cert_chain(certfile=str(cert.cert_file), keyfile=str(cert.key_file))
        except (OSError, ssl.SSLError) as exc:
            raise ConfigurationError(f"Unable to load client certificate: {exc}") from exc

    def _load_trusted_roots(self, ctx: ssl.SSLContext) -> None:
        ca = self.ca_cert
        if ca is None:
            ctx.load_default_certs()
            return
        try:
            if isinstance(ca, InlineCertificate):
                pem = ca.pem
            else:
                pem = ca.path.read_text()
            ctx.load_verify_locations(cadata=pem)
        except (OSError, ssl.SSLError, ValueError) as exc:
            raise ConfigurationError(f"Unable to load CA certificate: {exc}") from exc


@lru_cache
def get_settings() -> ConnectionConfig:
    """Return a cached ConnectionConfig built from the environment."""
    return ConnectionConfig()  # pragma: no cover
