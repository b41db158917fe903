
import os
import anndata
import pandas as pd

from lrsig.ansi import error, info


def read_interactions(path: str) -> pd.DataFrame:
    ''' Read an interaction reference table (tab or comma separated). '''

    if not os.path.exists(path):
        error(f"interaction reference `{path}` not found.")

    sep = ',' if path.lower().endswith('.csv') else '\t'
    return pd.read_table(path, sep = sep, index_col = False)


def read_samples(paths: dict, verbose: bool = False) -> dict:
    """
    Load the per-sample expression datasets.

    Parameters
    ----------

    paths : dict
        Mapping from sample name to the path of an ``.h5ad`` file.
    """

    if len(paths) == 0: error("no expression datasets are given.")

    samples = {}
    for sample, path in paths.items():
        if not os.path.exists(path):
            error(f"expression dataset of sample `{sample}` not found at `{path}`.")
        if verbose: info(f"reading sample [{sample}] from {path} ...")
        samples[sample] = anndata.read_h5ad(path)

    return samples


def write_results(frame: pd.DataFrame, path: str) -> None:
    frame.to_csv(path, sep = '\t', index = False)
