
import numpy as np
import pandas as pd
import anndata
import pytest
from scipy.sparse import csr_matrix

import lrsig.ansi

lrsig.ansi.SILENT = True


def build_sample(labels, genes: dict, groupby = 'cluster', sparse = False):
    X = np.column_stack([np.asarray(v, dtype = float) for v in genes.values()])
    obs = pd.DataFrame(
        { groupby: pd.Categorical(labels) },
        index = [f'cell.{i}' for i in range(len(labels))]
    )
    var = pd.DataFrame(index = list(genes.keys()))
    return anndata.AnnData(X = csr_matrix(X) if sparse else X, obs = obs, var = var)


@pytest.fixture
def make_sample():
    return build_sample


@pytest.fixture
def two_cluster_sample():
    ''' 10 cells in A expressing L and R, 10 cells in B expressing neither. '''
    labels = ['A'] * 10 + ['B'] * 10
    expr = [1.0] * 10 + [0.0] * 10
    return build_sample(labels, { 'L': expr, 'R': expr, 'X': np.linspace(0, 1, 20) })
