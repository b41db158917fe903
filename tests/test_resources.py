
import pandas as pd
import pytest

from lrsig.ansi import lrsig_error
from lrsig.lr.resources import handle_resource


def test_reference_table_is_validated():
    resource = pd.DataFrame({
        'Ligand': ['CD70', 'CD80', 'CD70', None],
        'Receptor': ['CD27', 'CTLA4', 'CD27', 'CD28'],
        'Merged': ['CD70_CD27', 'CD80_CTLA4', 'CD70_CD27', 'x'],
    })
    checked = handle_resource(resource)
    assert checked['Merged'].tolist() == ['CD70_CD27', 'CD80_CTLA4']
    assert list(checked.index) == [0, 1]


def test_merged_name_is_derived():
    checked = handle_resource(pd.DataFrame({ 'Ligand': ['CD40LG'], 'Receptor': ['CD40'] }))
    assert checked['Merged'].tolist() == ['CD40LG_CD40']


def test_missing_columns_are_fatal():
    with pytest.raises(lrsig_error, match = 'Receptor'):
        handle_resource(pd.DataFrame({ 'Ligand': ['CD70'], 'Merged': ['CD70_CD27'] }))


def test_duplicated_names_are_fatal():
    resource = pd.DataFrame({
        'Ligand': ['CD70', 'CD80'],
        'Receptor': ['CD27', 'CTLA4'],
        'Merged': ['pair', 'pair'],
    })
    with pytest.raises(lrsig_error, match = 'unique'):
        handle_resource(resource)


def test_interaction_list():
    checked = handle_resource(interactions = [('CD70', 'CD27'), ('CD70', 'CD27'), ('PDCD1', 'CD274')])
    assert checked['Merged'].tolist() == ['CD70_CD27', 'PDCD1_CD274']

    with pytest.raises(lrsig_error):
        handle_resource(interactions = [('CD70',)])
    with pytest.raises(lrsig_error):
        handle_resource()
