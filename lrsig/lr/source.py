
from __future__ import annotations
import numpy as np
import pandas as pd
import anndata

from lrsig.ansi import error, warning
from lrsig.configuration import default as cfg
from lrsig.utils import choose_layer, choose_var_names, densify
from lrsig.lr.utils import default_params as V, internal_values as I


class expression_source:
    """
    Read-only access to the expression of a single sample, keyed by gene name.

    Cells without a cluster label are dropped on construction. Gene presence is a
    checked query (:meth:`has_gene`), and :meth:`mean_by_cluster` returns ``None``
    rather than raising when a gene is absent.
    """

    def __init__(
        self, adata: anndata.AnnData, groupby: str,
        layer: str | None = V.layer, use_raw: bool = V.use_raw,
        max_dense: int | None = None
    ):
        if not isinstance(adata, anndata.AnnData):
            error(f"expression dataset must be an `AnnData`, got `{type(adata).__name__}`.")
        if groupby not in adata.obs.columns:
            error(f"`{groupby}` not found in obs.columns.")

        labels = adata.obs[groupby]
        self.mask = np.asarray(labels.notna())
        self.labels = np.asarray(labels[self.mask].astype(str))
        self.X = choose_layer(adata, use_raw = use_raw, layer = layer)
        self.var_names = pd.Index(choose_var_names(adata, use_raw = use_raw, layer = layer))
        self.max_dense = cfg['lr.max.dense'] if max_dense is None else max_dense

        if not self.var_names.is_unique:
            warning("variable names are not unique, the first occurrence of each gene is used.")

        self.positions = {}
        for i, name in enumerate(self.var_names):
            if name not in self.positions: self.positions[name] = i


    @property
    def n_cells(self):
        return len(self.labels)


    @property
    def clusters(self):
        return np.unique(self.labels)


    def has_gene(self, name) -> bool:
        return name in self.positions


    def fetch(self, genes) -> pd.DataFrame:
        """
        One row per labeled cell, with the cluster label in `.label` and one column
        per requested gene. Genes absent from the dataset are omitted silently, the
        caller is responsible for checking the returned columns.
        """

        present = [g for g in dict.fromkeys(genes) if self.has_gene(g)]
        n_elements = self.n_cells * len(present)
        if n_elements > self.max_dense:
            error(
                f"fetching {len(present)} genes over {self.n_cells} cells requires "
                f"{n_elements} dense elements, exceeding the limit of {self.max_dense}. "
                f"query fewer genes at a time."
            )

        cols = [self.positions[g] for g in present]
        rows = np.flatnonzero(self.mask)
        block = densify(self.X[rows][:, cols]) if len(cols) > 0 \
            else np.zeros((self.n_cells, 0))

        if not np.all(np.isfinite(block[~ np.isnan(block)])):
            warning("fetched expression contains infinite values.")

        frame = pd.DataFrame(block, columns = present)
        frame.insert(0, I.label, self.labels)
        return frame


    def mean_by_cluster(self, name) -> pd.Series | None:
        if not self.has_gene(name): return None
        frame = self.fetch([name])
        means = frame.groupby(I.label, sort = True)[name].mean()
        means.name = name
        means.index.name = None
        return means


def fetch(adata: anndata.AnnData, groupby: str, genes, layer = V.layer, use_raw = V.use_raw):
    ''' Per-cell cluster label and expression of the requested genes. '''
    return expression_source(adata, groupby, layer = layer, use_raw = use_raw).fetch(genes)
