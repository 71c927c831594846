# tests/conftest.py
import pytest

from derivation.bounds import SearchSettings
from derivation.proof import Proof
from derivation.verification import ProofVerifier
from formula.parser import parse


@pytest.fixture
def small_settings() -> SearchSettings:
    """Tight bounds so failing searches terminate quickly."""
    return SearchSettings(
        max_line_length=2,
        iterations=200,
        sub_max_line_length=2,
        sub_iterations=20,
    )


@pytest.fixture
def default_settings() -> SearchSettings:
    return SearchSettings()


@pytest.fixture
def verifier() -> ProofVerifier:
    return ProofVerifier()


@pytest.fixture
def make_proof():
    """Build a Proof from formula strings, e.g. ``make_proof(["P", "P>Q"], "Q")``."""

    def _make(assumptions, conclusion, settings=None):
        return Proof([parse(a) for a in assumptions], parse(conclusion), settings)

    return _make
