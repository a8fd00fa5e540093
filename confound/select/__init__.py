from ._select import (
    is_qualified,
    select_confounded_snp,
    NoQualifyingSnpError,
    MIN_DOSAGE_SUM,
)

__all__ = ["is_qualified", "select_confounded_snp", "NoQualifyingSnpError"]
