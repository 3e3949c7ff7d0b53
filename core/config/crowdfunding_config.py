#!/usr/bin/env python3
"""Crowdfunding service configuration

Settings for the campaign ledger service and its event bus connection.
"""
import os
from dataclasses import dataclass, field

from .logging_config import LoggingConfig


def _bool(val: str) -> bool:
    return val.lower() == "true"

def _int(val: str, default: int) -> int:
    try:
        return int(val) if val else default
    except ValueError:
        return default


@dataclass
class NATSConfig:
    """NATS JetStream connection settings"""
    enabled: bool = False
    url: str = "nats://localhost:4222"
    stream: str = "campaign-stream"
    connect_timeout: int = 5

    @classmethod
    def from_env(cls) -> 'NATSConfig':
        return cls(
            enabled=_bool(os.getenv("NATS_ENABLED", "false")),
            url=os.getenv("NATS_URL", "nats://localhost:4222"),
            stream=os.getenv("NATS_STREAM", "campaign-stream"),
            connect_timeout=_int(os.getenv("NATS_CONNECT_TIMEOUT", "5"), 5),
        )


@dataclass
class CrowdfundingConfig:
    """Main configuration for crowdfunding_service"""

    service_name: str = "crowdfunding_service"
    service_port: int = 8250
    service_version: str = "1.0.0"
    environment: str = "development"

    # Textual form of the anonymous principal issued by the identity provider
    anonymous_principal: str = "2vxsx-fae"

    nats: NATSConfig = field(default_factory=NATSConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls) -> 'CrowdfundingConfig':
        """Load crowdfunding configuration from environment variables"""
        return cls(
            service_name=os.getenv("SERVICE_NAME", "crowdfunding_service"),
            service_port=_int(os.getenv("SERVICE_PORT", "8250"), 8250),
            service_version=os.getenv("SERVICE_VERSION", "1.0.0"),
            environment=os.getenv("ENV") or os.getenv("ENVIRONMENT", "development"),
            anonymous_principal=os.getenv("ANONYMOUS_PRINCIPAL", "2vxsx-fae"),
            nats=NATSConfig.from_env(),
            logging=LoggingConfig.from_env(),
        )
