"""
qa_config -- default QA check catalogue.

Responsibility:
    Ships the YAML catalogue of default check definitions and setting values
    used to seed an empty store.  ``load_default_catalogue()`` is the single
    entry point; everything else is loader tooling.

Architecture position:
    Configuration -- sits above ``qa_kernel`` and below ``qa_services``.
    The kernel MUST NEVER import from ``qa_config``.
"""

from pathlib import Path

from qa_config.loader import Catalogue, load_catalogue, parse_catalogue, parse_check_definition

DEFAULT_CATALOGUE_PATH = Path(__file__).parent / "defaults" / "catalogue.yaml"


def load_default_catalogue() -> Catalogue:
    """Parse the bundled default catalogue."""
    return load_catalogue(DEFAULT_CATALOGUE_PATH)


__all__ = [
    "Catalogue",
    "DEFAULT_CATALOGUE_PATH",
    "load_catalogue",
    "load_default_catalogue",
    "parse_catalogue",
    "parse_check_definition",
]
