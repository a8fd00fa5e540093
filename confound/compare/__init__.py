from ._compare import compare, drop_snp, max_discrepancy, agreement, rank
from ._pipeline import reproduce, N_INDIV, INDIV_SEED, SNP_SEED, PHENO_SEED

__all__ = ["compare", "drop_snp", "max_discrepancy", "agreement", "rank", "reproduce"]
