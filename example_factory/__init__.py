"""FHEVM example factory.

Builds standalone Hardhat projects from a catalog of FHEVM examples, or adds a
single example to an existing project with transactional rollback.
"""

__version__ = "0.1.0"
