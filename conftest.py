"""Global conftest.py

Fixtures shared by everything under ``tests/``. Top-level imports here must
be listed in ``test-requirements.txt``.
"""
from unittest import mock

import pytest

from ocivnic import subp

SUBP_MARKERS = {
    "allow_all_subp": "allow_all_subp: let the test run any command",
    "allow_subp_for": (
        "allow_subp_for(*cmds): let the test run only the named commands"
    ),
}


def pytest_configure(config):
    for description in SUBP_MARKERS.values():
        config.addinivalue_line("markers", description)


class UnexpectedSubpError(BaseException):
    """Raised when a test runs a command it did not ask to run.

    A BaseException, so the error handling around ``ip link show`` in
    ocivnic.net cannot turn it into a ResolutionError.
    """


def _marker_args(request, name):
    """Return the args of the closest ``name`` marker, or None if unmarked."""
    marker = request.node.get_closest_marker(name)
    return None if marker is None else marker.args


def _refuse(message):
    def side_effect(args, *_args, **_kwargs):
        raise UnexpectedSubpError(message.format(cmd=args[0]))

    return side_effect


@pytest.fixture(autouse=True)
def disable_subp_usage(request):
    """Make ocivnic.subp.subp raise UnexpectedSubpError unless allowed.

    Tests that patch ``ocivnic.subp.subp`` themselves override this. Mark a
    test ``allow_all_subp`` to run real commands, or
    ``allow_subp_for("sh")`` to run only ``sh``.
    """
    allow_all = _marker_args(request, "allow_all_subp")
    allowed = _marker_args(request, "allow_subp_for")

    if allowed is None:
        if allow_all is not None:
            yield
            return
        side_effect = _refuse("Unexpectedly used subp.subp to call {cmd}")
    elif allow_all is not None:
        side_effect = _refuse(
            "Test marked both allow_all_subp and allow_subp_for; keep one"
        )
    else:
        real_subp = subp.subp
        refuse = _refuse(
            "Unexpectedly used subp.subp to call {cmd} (allowed: %s)"
            % ",".join(allowed)
        )

        def side_effect(args, *other_args, **kwargs):
            if args[0] not in allowed:
                refuse(args)
            return real_subp(args, *other_args, **kwargs)

    with mock.patch("ocivnic.subp.subp", autospec=True) as m_subp:
        m_subp.side_effect = side_effect
        yield


@pytest.fixture
def mocked_responses():
    import responses as _responses

    with _responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps
