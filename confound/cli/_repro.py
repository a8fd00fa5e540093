import matplotlib.pyplot as plt
import confound
from ._utils import log_params


def _plot(res, out: str):
    snp_id = res["snp"]
    df_indiv = res["indiv"]
    df_mixed, df_ols = res["mixed"], res["ols"]

    fig, ax = plt.subplots(figsize=(4, 4), dpi=150)
    confound.plot.geno_pheno(
        df_indiv["GENO"],
        df_indiv["PHENO"],
        covar=df_indiv["COVAR"],
        title=f"{snp_id}\nscore test P={df_mixed.loc[snp_id, 'P']:.2g}, "
        f"OLS P={df_ols.loc[snp_id, 'P']:.2g}",
        ax=ax,
    )
    fig.tight_layout()
    fig.savefig(f"{out}.geno_pheno.png")
    plt.close(fig)

    fig, axes = plt.subplots(figsize=(8, 4), dpi=150, ncols=2)
    for ax, (name, df) in zip(axes, [("score test", df_mixed), ("OLS", df_ols)]):
        confound.plot.volcano(df["BETA"], df["P"], highlight=snp_id, ax=ax)
        ax.set_title(name)
    fig.tight_layout()
    fig.savefig(f"{out}.volcano.png")
    plt.close(fig)

    df_compare = res["compare"]
    fig, axes = plt.subplots(figsize=(8, 8), dpi=150, nrows=2, ncols=2)
    for row, stat in enumerate(["LOGP", "BETA"]):
        confound.plot.compare_methods(
            df_compare, outlier=snp_id, stat=stat, ax=axes[row, 0]
        )
        axes[row, 0].set_title("all SNPs")
        confound.plot.compare_methods(
            confound.compare.drop_snp(df_compare, snp_id), stat=stat, ax=axes[row, 1]
        )
        axes[row, 1].set_title(f"without {snp_id}")
    fig.tight_layout()
    fig.savefig(f"{out}.compare.png")
    plt.close(fig)

    fig, ax = plt.subplots(figsize=(4, 4), dpi=150)
    df_lambda_gc = res["lambda_gc"]
    for name, key, df in [("score test", "MIXED", df_mixed), ("OLS", "OLS", df_ols)]:
        lgc = df_lambda_gc.loc[key]
        confound.plot.qq(
            df["P"],
            label=f"{name}: $\\lambda_{{GC}}$={lgc.LAMBDA_GC:.2f} "
            f"[{lgc.CI_LOW:.2f}, {lgc.CI_HIGH:.2f}]",
            ax=ax,
        )
    ax.legend()
    fig.tight_layout()
    fig.savefig(f"{out}.qq.png")
    plt.close(fig)


def repro(
    path: str,
    out: str,
    n_indiv: int = confound.compare.N_INDIV,
    indiv_seed: int = confound.compare.INDIV_SEED,
    snp_seed: int = confound.compare.SNP_SEED,
    pheno_seed: int = confound.compare.PHENO_SEED,
    max_iter: int = 100_000,
    plot: bool = True,
    log_level: str = "info",
):
    """
    Reproduce the spurious association of a SNP confounded with a covariate,
    comparing the score test against per-SNP OLS

    Parameters
    ----------
    path : str
        path to the reference zarr store
    out : str
        prefix of the outputs: <out>.subset.zarr, <out>.pheno.tsv,
        <out>.null.tsv, <out>.mixed.assoc, <out>.ols.assoc, <out>.compare.tsv,
        <out>.agreement.tsv, <out>.lambda_gc.tsv and, with `plot`, <out>.*.png
        figures
    n_indiv : int
        number of individuals to subsample
    indiv_seed : int
        random seed of the subsampling
    snp_seed : int
        random seed of the SNP selection
    pheno_seed : int
        random seed of the phenotype
    max_iter : int
        maximum number of SNP draws
    plot : bool
        whether to draw the figures
    log_level : str
        one of "debug", "info", "warning", "error"
    """
    log_params("repro", locals())
    confound.set_log_level(log_level)

    with confound.io.open_dataset(path) as dset:
        res = confound.compare.reproduce(
            dset,
            n_indiv=n_indiv,
            indiv_seed=indiv_seed,
            snp_seed=snp_seed,
            pheno_seed=pheno_seed,
            max_iter=max_iter,
            subset_path=f"{out}.subset.zarr",
        )

    confound.io.write_assoc(res["indiv"], f"{out}.pheno.tsv")
    confound.io.write_assoc(res["null"].fixef, f"{out}.null.tsv")
    confound.io.write_assoc(confound.compare.rank(res["mixed"]), f"{out}.mixed.assoc")
    confound.io.write_assoc(confound.compare.rank(res["ols"]), f"{out}.ols.assoc")
    confound.io.write_assoc(res["compare"], f"{out}.compare.tsv")
    confound.io.write_assoc(res["agreement"], f"{out}.agreement.tsv")
    confound.io.write_assoc(res["lambda_gc"], f"{out}.lambda_gc.tsv")

    if plot:
        _plot(res, out)
