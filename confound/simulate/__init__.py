from ._pheno import normal_pheno, PHENO_MEAN, PHENO_SD
from ._geno import geno

__all__ = ["normal_pheno", "geno"]
