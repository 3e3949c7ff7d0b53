#!/usr/bin/env python3
"""
Core Module for Microservices Architecture

Shared components for the microservices in this repository.

COMPONENTS:
    - config/: Environment-driven configuration (service, NATS, logging)
    - nats_client.py: NATS JetStream event bus for event-driven architecture
    - auth_dependencies.py: FastAPI dependencies that read the caller principal

USAGE:
    from core.config import get_settings
    from core.nats_client import NATSEventBus

    settings = get_settings()
    bus = NATSEventBus("crowdfunding_service", settings.nats)
"""

__version__ = "2.0.0"
