"""Shared fixtures."""

import pytest
from profile_model import Profile


@pytest.fixture
def profile() -> Profile:
    return Profile(first_name="Ann", note=None, age=21)
