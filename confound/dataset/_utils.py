import numpy as np
import confound
from ._dataset import Dataset


def sample_indiv(
    dset: Dataset, n_indiv: int, seed: int = None
) -> Dataset:
    """Randomly subsample individuals without replacement

    Parameters
    ----------
    dset : confound.Dataset
        dataset to subsample
    n_indiv : int
        number of individuals to keep
    seed : int, optional
        random seed, by default None

    Returns
    -------
    confound.Dataset
        dataset with `n_indiv` individuals, kept in the order of `dset`
    """
    if n_indiv > dset.n_indiv:
        raise ValueError(
            f"Cannot sample {n_indiv} individuals from a dataset with "
            f"{dset.n_indiv} individuals"
        )
    if seed is not None:
        np.random.seed(seed)
    indiv_idx = np.sort(np.random.choice(dset.n_indiv, size=n_indiv, replace=False))
    confound.logger.info(
        f"confound.dataset.sample_indiv: {n_indiv}/{dset.n_indiv} individuals sampled"
    )
    return dset[:, indiv_idx]
