"""Inject mode: add one example to an existing Hardhat project.

Key classes:
    InjectionEngine  - Plans, applies and (on failure) rolls back an injection
    TransactionLog   - Reverse-replayable record of applied mutations
    Decision         - Skip / overwrite / rename answer for a conflicting path
"""

from .decisions import Decision, DecisionFn, fixed_policy, mapping_policy, prompt_policy
from .engine import (
    FileOperation,
    InjectionEngine,
    InjectionPlan,
    InjectionState,
    InjectionSummary,
    OperationKind,
    RenamedFile,
    UpdatedDependency,
)
from .transaction import RecordKind, TransactionLog, TransactionRecord

__all__ = [
    "Decision",
    "DecisionFn",
    "FileOperation",
    "InjectionEngine",
    "InjectionPlan",
    "InjectionState",
    "InjectionSummary",
    "OperationKind",
    "RecordKind",
    "RenamedFile",
    "TransactionLog",
    "TransactionRecord",
    "UpdatedDependency",
    "fixed_policy",
    "mapping_policy",
    "prompt_policy",
]
