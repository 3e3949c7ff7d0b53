#!/usr/bin/env python3
"""Modular configuration system for the crowdfunding platform

Configuration hierarchy:
- crowdfunding_config: Service identity, principal rules, NATS connection
- logging_config: Logging configuration
"""
import os
from dotenv import load_dotenv
from .logging_config import LoggingConfig, configure_logging
from .crowdfunding_config import CrowdfundingConfig, NATSConfig

# Load environment file based on ENV
env = os.getenv("ENV") or os.getenv("ENVIRONMENT", "development")
env_files = {
    "development": "deployment/environments/dev.env",
    "dev": "deployment/environments/dev.env",
    "testing": "deployment/environments/test.env",
    "test": "deployment/environments/test.env",
    "staging": "deployment/environments/staging.env",
    "production": "deployment/environments/production.env",
}
env_file = env_files.get(env, "deployment/environments/dev.env")
load_dotenv(env_file, override=False)

# Create global settings instance
settings = CrowdfundingConfig.from_env()

def get_settings() -> CrowdfundingConfig:
    """Get global settings instance"""
    return settings

def reload_settings() -> CrowdfundingConfig:
    """Reload settings from environment"""
    global settings
    settings = CrowdfundingConfig.from_env()
    return settings

__all__ = [
    # Main config
    'CrowdfundingConfig',
    'get_settings',
    'reload_settings',
    'settings',
    # Sub-configs
    'LoggingConfig',
    'NATSConfig',
    'configure_logging',
]
