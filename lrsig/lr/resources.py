
from __future__ import annotations
from pandas import DataFrame

from lrsig.ansi import error, warning, info
from lrsig.lr.utils import default_resource_columns as R


def handle_resource(
    resource: DataFrame | None = None, interactions = None,
    merged_sep = '_', verbose = False
) -> DataFrame:
    """
    Validate the ligand-receptor reference table.

    Parameters
    ----------

    resource : DataFrame
        Table with columns `Ligand`, `Receptor` and (optionally) `Merged`, one candidate
        pair per row. `Merged` is the name of the interaction, and is derived as
        ``Ligand + merged_sep + Receptor`` when the column is absent.

    interactions : list[tuple]
        Alternative to `resource`, a list of ``(ligand, receptor)`` tuples.

    Returns
    -------
    A copy of the table with a fresh integer index, columns ``[Ligand, Receptor, Merged]``.
    """

    if interactions is not None:
        if not isinstance(interactions, list) or any(len(item) != 2 for item in interactions):
            error("'interactions' should be a list of tuples in the format [(x1, y1), (x2, y2), ...].")
        resource = DataFrame(
            list(dict.fromkeys(tuple(x) for x in interactions)),
            columns = [R.ligand, R.receptor]
        )

    if resource is None:
        error("either 'resource' or 'interactions' must be provided.")

    if not isinstance(resource, DataFrame):
        error(f"'resource' must be a data frame, got `{type(resource).__name__}`.")

    missing = [x for x in R.required if x not in resource.columns]
    if len(missing) > 0:
        error(
            "malformed interaction reference, missing required column(s): "
            "[{0}]. columns present: [{1}]"
            .format(", ".join(missing), ", ".join(map(str, resource.columns)))
        )

    resource = resource.copy()
    n_total = len(resource)
    resource = resource.dropna(subset = R.required)
    if len(resource) < n_total:
        warning(f"{n_total - len(resource)} interactions with missing gene names are removed.")

    resource[R.ligand] = resource[R.ligand].astype(str).str.strip()
    resource[R.receptor] = resource[R.receptor].astype(str).str.strip()

    if R.merged not in resource.columns:
        if verbose: info(f"deriving `{R.merged}` as ligand and receptor joined by `{merged_sep}`.")
        resource[R.merged] = resource[R.ligand] + merged_sep + resource[R.receptor]
    else:
        no_name = resource[R.merged].isna()
        resource.loc[no_name, R.merged] = \
            resource.loc[no_name, R.ligand] + merged_sep + resource.loc[no_name, R.receptor]
        resource[R.merged] = resource[R.merged].astype(str)

    resource = resource[[R.ligand, R.receptor, R.merged]].drop_duplicates()

    # the merged name is the key of every downstream table.
    duplicated = resource[R.merged].duplicated(keep = False)
    if duplicated.any():
        error(
            "interaction names in `{0}` must be unique, duplicated: [{1}]"
            .format(R.merged, ", ".join(resource.loc[duplicated, R.merged].unique()))
        )

    if len(resource) == 0:
        error("the interaction reference is empty.")

    resource.index = range(len(resource))
    resource.index.name = None
    return resource
