import logging

import pytest

from saferide.services.geolocation import GeolocationUnavailable, ReportedPositionProvider, resolve_position


class DeniedProvider:
    def current_position(self):
        raise GeolocationUnavailable("permission denied")


def test_reported_position_preferred():
    provider = ReportedPositionProvider((139.7, 35.68))

    assert resolve_position(provider, (137.7, 34.7)) == (139.7, 35.68)


def test_missing_position_raises():
    with pytest.raises(GeolocationUnavailable):
        ReportedPositionProvider(None).current_position()


@pytest.mark.parametrize("provider", [ReportedPositionProvider(None, reason="timeout"), DeniedProvider()])
def test_unavailable_position_uses_fallback(provider, caplog):
    with caplog.at_level(logging.WARNING, logger="saferide.services.geolocation"):
        position = resolve_position(provider, (137.7, 34.7))

    assert position == (137.7, 34.7)
    assert "fallback" in caplog.text
