"""Natural-deduction proof search package."""

from .bounds import DEFAULT_SETTINGS_PATH, SearchSettings, SettingsError, load_settings
from .lines import Line, Rule
from .possible import Possible, PossibleFinder
from .proof import InputError, Proof, create_assumption_lines, split_input
from .search import (
    SearchDriver,
    SearchError,
    SearchNode,
    SearchOutcome,
    SearchState,
    SearchStats,
)
from .verification import ProofVerifier, VerificationOutcome

__all__: list[str] = [
    # Configuration
    "DEFAULT_SETTINGS_PATH",
    "SearchSettings",
    "SettingsError",
    "load_settings",

    # Core types
    "Line",
    "Possible",
    "PossibleFinder",
    "Proof",
    "Rule",
    "SearchDriver",
    "SearchError",
    "SearchNode",
    "SearchOutcome",
    "SearchState",
    "SearchStats",

    # Input handling
    "InputError",
    "create_assumption_lines",
    "split_input",

    # Verification
    "ProofVerifier",
    "VerificationOutcome",
]
