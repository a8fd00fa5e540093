import numpy as np
import pandas as pd
import dask.array as da
import confound


def geno(
    n_indiv: int,
    n_snp: int,
    n_chrom: int = 1,
    freq_range=(0.01, 0.5),
    missing_rate: float = 0.0,
    snp_chunk: int = 1024,
    seed: int = None,
) -> confound.Dataset:
    """Simulate genotype dosages of unrelated individuals

    For each SNP, the allele frequency is drawn uniformly from `freq_range` and the
    dosage of each individual is drawn from Binomial(2, freq) (Hardy-Weinberg
    equilibrium). Each call is then set to missing with probability `missing_rate`.

    Parameters
    ----------
    n_indiv : int
        Number of individuals
    n_snp : int
        Number of SNPs
    n_chrom : int
        Number of chromosomes the SNPs are spread over
    freq_range : Tuple[float, float]
        Range of allele frequencies
    missing_rate : float
        Probability of a missing call
    snp_chunk : int
        Number of SNPs per dask chunk
    seed : int, optional
        random seed, by default None

    Returns
    -------
    confound.Dataset
        dataset with integer SNP and individual identifiers, and CHROM, POS and
        FREQ (simulated frequency) SNP annotations
    """
    assert 0 <= freq_range[0] <= freq_range[1] <= 1, "invalid `freq_range`"
    assert 0 <= missing_rate < 1, "`missing_rate` must be in [0, 1)"
    if seed is not None:
        np.random.seed(seed)

    freq = np.random.uniform(freq_range[0], freq_range[1], size=n_snp)
    mat = np.random.binomial(2, freq[:, np.newaxis], size=(n_snp, n_indiv)).astype(
        float
    )
    if missing_rate > 0:
        mat[np.random.rand(n_snp, n_indiv) < missing_rate] = np.nan

    chrom = np.sort(np.random.randint(1, n_chrom + 1, size=n_snp))
    pos = np.zeros(n_snp, dtype=int)
    for c in np.unique(chrom):
        mask = chrom == c
        pos[mask] = np.sort(
            np.random.choice(np.arange(1, 10 * n_snp + 1), size=mask.sum(), replace=False)
        )

    df_snp = pd.DataFrame(
        {"CHROM": chrom, "POS": pos, "FREQ": freq},
        index=pd.Index(np.arange(1, n_snp + 1), name="snp"),
    )
    df_indiv = pd.DataFrame(index=pd.Index(np.arange(1, n_indiv + 1), name="indiv"))
    confound.logger.info(
        f"confound.simulate.geno: {n_snp} SNPs and {n_indiv} individuals simulated"
    )
    return confound.Dataset(
        geno=da.from_array(mat, chunks=(snp_chunk, -1)), snp=df_snp, indiv=df_indiv
    )
