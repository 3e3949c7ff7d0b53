"""
Unit Test Fixtures for Crowdfunding Service

Pure functions only; campaigns come from CrowdfundingTestDataFactory.
"""

import os
import sys

import pytest

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../../.."))

from tests.contracts.crowdfunding.data_contract import T0, CrowdfundingTestDataFactory


@pytest.fixture
def now() -> int:
    return T0


@pytest.fixture
def make_campaign():
    """Campaign builder with factory defaults"""
    return CrowdfundingTestDataFactory.make_campaign
