#!/usr/bin/env python
# coding: utf-8

"""
Learning a Metric from Chunklets
================================
"""
# %%
#

import numpy as np
from matplotlib import pyplot as plt

from skrca.datasets import make_chunklets, make_rca_blobs
from skrca.decomposition import RCA

colors = np.array(["#E41A1C", "#377EB8", "#4DAF4A"])
markers = ["s", "o", "v"]

# %%
#
# Three elongated gaussian classes, which can only be told apart along a
# direction that is not aligned with the axes.

X, y = make_rca_blobs(n_samples_per_class=100, random_state=42)

fig, (axX, axT) = plt.subplots(1, 2, figsize=(10, 4))
for k in range(3):
    axX.scatter(X[y == k, 0], X[y == k, 1], c=colors[k], marker=markers[k], s=20)
axX.set_title("Original data")

# %%
#
# We only know that some small groups of samples belong to the same class,
# without knowing which. Here we draw 60 chunklets of 5 samples each.

chunks = make_chunklets(y, chunklet_size=5, n_chunklets=60, random_state=42)

rca = RCA()
T = rca.fit_transform(X, chunks)

print("Learned transformation:\n", rca.rca_)
print("Learned Mahalanobis matrix:\n", rca.get_mahalanobis_matrix())

for k in range(3):
    axT.scatter(T[y == k, 0], T[y == k, 1], c=colors[k], marker=markers[k], s=20)
axT.set_title("After RCA")

fig.tight_layout()
plt.show()

# %%
#
# With ``n_components=1`` the whitening is preceded by a constrained Fisher
# discriminant, reducing the data to a single direction.

rca_1d = RCA(n_components=1)
T1 = rca_1d.fit_transform(X, chunks)

fig, ax = plt.subplots(figsize=(6, 3))
for k in range(3):
    ax.hist(T1[y == k, 0], bins=20, color=colors[k], alpha=0.6)
ax.set_xlabel(r"$RCA_1$")
fig.tight_layout()
plt.show()
