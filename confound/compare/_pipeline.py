import pandas as pd
import confound
from typing import Any, Dict

N_INDIV = 150
INDIV_SEED = 32
SNP_SEED = 32
PHENO_SEED = 28


def _lambda_gc(dict_assoc: Dict[str, pd.DataFrame]) -> pd.DataFrame:
    dict_rls = {}
    for name, df in dict_assoc.items():
        est, ci = confound.data.lambda_gc(df["P"], bootstrap_ci=True)
        dict_rls[name] = {"LAMBDA_GC": est, "CI_LOW": ci[0], "CI_HIGH": ci[1]}
        confound.logger.info(
            f"{name}: lambda GC {est:.3g} [{ci[0]:.3g}, {ci[1]:.3g}]"
        )
    return pd.DataFrame(dict_rls).T


def _analyze(
    dset: confound.Dataset, snp_seed: int, pheno_seed: int, max_iter: int
) -> Dict[str, Any]:
    # the selection and both scans read the genotypes
    dset.persist()
    snp_id, snp_geno = confound.select.select_confounded_snp(
        dset, seed=snp_seed, max_iter=max_iter
    )
    covar = confound.data.synthesize_covar(snp_geno)
    pheno = confound.simulate.normal_pheno(dset.indiv.index, seed=pheno_seed)
    df_indiv = confound.data.join_indiv(pheno, covar, snp_geno.rename("GENO"))

    null = confound.assoc.null_model(pheno, covar, indiv=dset.indiv.index)
    df_mixed = confound.assoc.score_test(null, dset)
    df_ols = confound.assoc.marginal(dset, pheno, covar)
    df_compare = confound.compare.compare(df_mixed, df_ols)
    df_agreement = confound.compare.agreement(df_compare, outlier=snp_id)
    df_lambda_gc = _lambda_gc({"MIXED": df_mixed, "OLS": df_ols})
    confound.logger.info(
        f"SNP {snp_id}: score test P={df_mixed.loc[snp_id, 'P']:.3g}, "
        f"OLS P={df_ols.loc[snp_id, 'P']:.3g}"
    )
    return {
        "snp": snp_id,
        "indiv": df_indiv,
        "null": null,
        "mixed": df_mixed,
        "ols": df_ols,
        "compare": df_compare,
        "agreement": df_agreement,
        "lambda_gc": df_lambda_gc,
    }


def reproduce(
    dset: confound.Dataset,
    n_indiv: int = N_INDIV,
    indiv_seed: int = INDIV_SEED,
    snp_seed: int = SNP_SEED,
    pheno_seed: int = PHENO_SEED,
    max_iter: int = 100_000,
    subset_path: str = None,
) -> Dict[str, Any]:
    """Reproduce the spurious association of a SNP confounded with a covariate

    1. subsample `n_indiv` individuals of `dset`
    2. select a SNP with two distinct dosages and synthesize an A/B covariate
       from it
    3. simulate a phenotype ~ N(150, 50^2)
    4. fit the null model pheno ~ covariate and score test every SNP
    5. fit pheno ~ SNP + covariate with OLS for every SNP and compare

    Parameters
    ----------
    dset : confound.Dataset
        reference dataset
    n_indiv : int
        number of individuals to subsample
    indiv_seed, snp_seed, pheno_seed : int
        random seeds of the subsampling, the SNP selection and the phenotype
    max_iter : int
        maximum number of SNP draws
    subset_path : str, optional
        if given, the subsampled dataset is written to this zarr store and
        analyzed from there

    Returns
    -------
    Dict[str, Any]
        snp: identifier of the confounded SNP
        indiv: PHENO, COVAR, GENO per individual
        null: the fitted null model
        mixed: score test results
        ols: OLS results
        compare: comparison of both methods
        agreement: max discrepancies with and without the confounded SNP
        lambda_gc: genomic control factor of each method with its bootstrap
            confidence interval
    """
    dset_sub = confound.dataset.sample_indiv(dset, n_indiv, seed=indiv_seed)
    if subset_path is None:
        return _analyze(dset_sub, snp_seed=snp_seed, pheno_seed=pheno_seed, max_iter=max_iter)

    confound.io.write_dataset(dset_sub, subset_path)
    with confound.io.open_dataset(subset_path) as dset_sub:
        return _analyze(
            dset_sub, snp_seed=snp_seed, pheno_seed=pheno_seed, max_iter=max_iter
        )
