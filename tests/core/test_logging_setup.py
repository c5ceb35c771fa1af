from __future__ import annotations

import pytest

from talentalloc.logging import RENDERERS, configure_logging


@pytest.mark.parametrize("renderer", RENDERERS)
def test_configure_logging_accepts_known_renderers(renderer):
    configure_logging("DEBUG", renderer=renderer)


def test_configure_logging_rejects_unknown_renderer():
    with pytest.raises(ValueError):
        configure_logging("INFO", renderer="xml")
