from dataclasses import dataclass

@dataclass(frozen=True)
class RetentionSummary:
    kept: int = 0
    deleted: int = 0
    failed_deletions: int = 0 # execute mode only
    failed_repositories: int = 0
