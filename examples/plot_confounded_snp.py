"""
Spurious association of a SNP confounded with a covariate
=========================================================

We derive a covariate from the dosages of one SNP, so that the SNP is perfectly
confounded with it, and compare the score test to per-SNP OLS.
"""

import confound
import matplotlib.pyplot as plt

# %%
# Toy reference genotypes: 173 individuals and 2,000 SNPs
dset = confound.dataset.load_toy()
print(dset)

# %%
# Subsample 150 individuals, select a SNP with two distinct dosages, map its
# dosages to an A/B covariate, simulate a phenotype ~ N(150, 50^2), then run
# the score test and OLS on every SNP.
res = confound.compare.reproduce(dset, n_indiv=150)
snp_id = res["snp"]
print(res["null"].fixef)
print(res["mixed"].loc[snp_id])
print(res["ols"].loc[snp_id])

# %%
# The confounded SNP is the only one where the two methods disagree
print(res["agreement"])

fig, axes = plt.subplots(figsize=(8, 4), dpi=150, ncols=2)
confound.plot.compare_methods(res["compare"], outlier=snp_id, ax=axes[0])
confound.plot.compare_methods(
    confound.compare.drop_snp(res["compare"], snp_id), ax=axes[1]
)
fig.tight_layout()
plt.show()

# %%
# Phenotype by dosage of the confounded SNP, colored by covariate
confound.plot.geno_pheno(
    res["indiv"]["GENO"], res["indiv"]["PHENO"], covar=res["indiv"]["COVAR"]
)
plt.show()
