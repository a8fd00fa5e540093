import confound
from ._utils import log_params


def simulate_geno(
    out: str,
    n_indiv: int = 173,
    n_snp: int = 2000,
    n_chrom: int = 2,
    missing_rate: float = 0.005,
    seed: int = 1234,
):
    """
    Simulate a reference genotype dataset and write it to a zarr store

    Parameters
    ----------
    out : str
        path to the output zarr store
    n_indiv : int
        number of individuals
    n_snp : int
        number of SNPs
    n_chrom : int
        number of chromosomes the SNPs are spread over
    missing_rate : float
        proportion of missing calls
    seed : int
        random seed
    """
    log_params("simulate-geno", locals())
    dset = confound.simulate.geno(
        n_indiv=n_indiv,
        n_snp=n_snp,
        n_chrom=n_chrom,
        missing_rate=missing_rate,
        seed=seed,
    )
    confound.io.write_dataset(dset, out)


def import_pfile(pfile: str, out: str):
    """
    Convert a PLINK2 pgen/pvar/psam fileset to a zarr store

    Parameters
    ----------
    pfile : str
        prefix of the PLINK2 fileset
    out : str
        path to the output zarr store
    """
    log_params("import-pfile", locals())
    dset = confound.io.read_pfile(pfile)
    confound.io.write_dataset(dset, out)


def subset(path: str, out: str, n_indiv: int = 150, seed: int = 32):
    """
    Randomly subsample individuals of a dataset

    Parameters
    ----------
    path : str
        path to the input zarr store
    out : str
        path to the output zarr store
    n_indiv : int
        number of individuals to keep
    seed : int
        random seed
    """
    log_params("subset", locals())
    with confound.io.open_dataset(path) as dset:
        dset_sub = confound.dataset.sample_indiv(dset, n_indiv=n_indiv, seed=seed)
        confound.io.write_dataset(dset_sub, out)
