import numpy as np
import pandas as pd
import confound

PHENO_MEAN = 150.0
PHENO_SD = 50.0


def normal_pheno(
    indiv: pd.Index,
    mean: float = PHENO_MEAN,
    sd: float = PHENO_SD,
    seed: int = None,
    name: str = "PHENO",
) -> pd.Series:
    """Simulate a continuous phenotype independent of any genotype

    Parameters
    ----------
    indiv : pd.Index
        individual identifiers, e.g., `dset.indiv.index`
    mean : float
        mean of the phenotype, by default 150
    sd : float
        standard deviation of the phenotype, by default 50
    seed : int, optional
        random seed, by default None
    name : str
        name of the returned series

    Returns
    -------
    pd.Series
        (n_indiv, ) phenotype indexed by individual identifier
    """
    assert sd > 0, "sd must be positive"
    if seed is not None:
        np.random.seed(seed)
    pheno = np.random.normal(loc=mean, scale=sd, size=len(indiv))
    confound.logger.info(
        f"confound.simulate.normal_pheno: {len(indiv)} individuals, "
        f"mean={mean}, sd={sd}, seed={seed}"
    )
    return pd.Series(pheno, index=pd.Index(indiv), name=name)
