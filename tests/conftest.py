"""Shared fixtures"""

import threading

import pytest

from azure_quick_review.core.filters import Filters
from azure_quick_review.core.models import ScanContext, ScannerConfig

from .fakes import SUB_ID


@pytest.fixture
def scanner_config():
    return ScannerConfig(subscription_id=SUB_ID, subscription_name="Test Subscription")


@pytest.fixture
def empty_context():
    return ScanContext(filters=Filters())


@pytest.fixture
def cancel():
    return threading.Event()
