"""Command-line front ends for the prover."""
