"""
Solagent - Solana operations for LLM agents.

This package provides a single-wallet agent facade (``solagent.agent.SolAgent``)
for Jupiter swaps and staking, SOL/SPL transfers, token deployment, pump.fun
launches, faucet requests, balances and price lookups, plus the matching
agent tools.

Tools are registered as plugins via entry points in pyproject.toml.
"""

__version__ = "0.1.0"
