from __future__ import annotations

from enum import Enum


class IssueKind(Enum):
    # structural
    INVALID_EXTENSION = "INVALID_EXTENSION"
    INVALID_YAML = "INVALID_YAML"
    # schema: top level
    UNSUPPORTED_KEY = "UNSUPPORTED_KEY"
    MISSING_KEY = "MISSING_KEY"
    INVALID_REFERENCE = "INVALID_REFERENCE"
    REFERENCE_MISMATCH = "REFERENCE_MISMATCH"
    INVALID_PACKAGE = "INVALID_PACKAGE"
    REGISTRY_UNAVAILABLE = "REGISTRY_UNAVAILABLE"
    BRANCHES_NOT_MAPPING = "BRANCHES_NOT_MAPPING"
    # schema: per branch
    INVALID_BRANCH_NAME = "INVALID_BRANCH_NAME"
    BRANCH_NOT_MAPPING = "BRANCH_NOT_MAPPING"
    UNSUPPORTED_BRANCH_KEY = "UNSUPPORTED_BRANCH_KEY"
    MISSING_BRANCH_KEY = "MISSING_BRANCH_KEY"
    VERSIONS_NOT_SEQUENCE = "VERSIONS_NOT_SEQUENCE"
    # branch consistency
    INVALID_CONSTRAINT = "INVALID_CONSTRAINT"
    MISSING_UPPER_BOUND = "MISSING_UPPER_BOUND"
    MISSING_LOWER_BOUND = "MISSING_LOWER_BOUND"


class LookupStatus(Enum):
    """Outcome of a registry lookup.

    NOT_FOUND and UNAVAILABLE look the same through ``RegistryPort.resolve``;
    ``RegistryPort.lookup`` keeps them apart.
    """

    FOUND = "FOUND"
    NOT_FOUND = "NOT_FOUND"
    UNAVAILABLE = "UNAVAILABLE"


class OutcomeKind(Enum):
    EXPORTED = "EXPORTED"
    SKIPPED = "SKIPPED"


class SkipReason(Enum):
    NOT_YAML = "NOT_YAML"
    INVALID_ADVISORY = "INVALID_ADVISORY"
    CUSTOM_REPOSITORY = "CUSTOM_REPOSITORY"
    PACKAGE_NOT_FOUND = "PACKAGE_NOT_FOUND"
    REGISTRY_UNAVAILABLE = "REGISTRY_UNAVAILABLE"
    NO_AFFECTED_VERSIONS = "NO_AFFECTED_VERSIONS"
    TIMESTAMPS_UNAVAILABLE = "TIMESTAMPS_UNAVAILABLE"


class ReferenceType(Enum):
    ADVISORY = "ADVISORY"
    PACKAGE = "PACKAGE"
