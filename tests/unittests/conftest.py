# This file is part of oci-vnic. See LICENSE file for license information.

from unittest import mock

import pytest

from tests.unittests.helpers import FakeClock


@pytest.fixture
def fake_clock():
    """Drive ocivnic.backoff from a clock that sleep() advances instantly."""
    clock = FakeClock()
    with mock.patch(
        "ocivnic.backoff.time.monotonic", side_effect=clock.monotonic
    ), mock.patch("ocivnic.backoff.time.sleep", side_effect=clock.sleep):
        yield clock


@pytest.fixture
def profile_dir(tmp_path):
    path = tmp_path / "network-scripts"
    path.mkdir()
    return path
