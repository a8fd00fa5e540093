"""
Load existing data sets
"""
import confound
from ._dataset import Dataset


def load_toy() -> Dataset:
    """Load the toy reference dataset

    173 individuals and 2,000 SNPs on 2 chromosomes, simulated with a fixed seed
    so that repeated calls return identical genotypes. The dimensions follow the
    HapMap ASW/MXL sample commonly used to illustrate association tests.

    Returns
    -------
    Dataset
    """
    return confound.simulate.geno(
        n_indiv=173,
        n_snp=2000,
        n_chrom=2,
        missing_rate=0.005,
        seed=1234,
    )
