from ._plot import geno_pheno, volcano, compare_methods, qq


__all__ = ["geno_pheno", "volcano", "compare_methods", "qq"]
