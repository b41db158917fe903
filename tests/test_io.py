
import pandas as pd
import pytest

from lrsig.ansi import lrsig_error
from lrsig.lr.io import read_interactions, read_samples, write_results


def test_read_interactions(tmp_path):
    path = tmp_path / 'interactions.tsv'
    path.write_text('Ligand\tReceptor\tMerged\nCD70\tCD27\tCD70_CD27\n')
    resource = read_interactions(str(path))
    assert resource['Merged'].tolist() == ['CD70_CD27']

    csv = tmp_path / 'interactions.csv'
    csv.write_text('Ligand,Receptor\nCD80,CTLA4\n')
    assert read_interactions(str(csv))['Receptor'].tolist() == ['CTLA4']

    with pytest.raises(lrsig_error, match = 'not found'):
        read_interactions(str(tmp_path / 'missing.tsv'))


def test_read_samples(tmp_path, two_cluster_sample):
    path = tmp_path / 's1.h5ad'
    two_cluster_sample.write_h5ad(path)

    samples = read_samples({ 's1': str(path) })
    assert list(samples.keys()) == ['s1']
    assert samples['s1'].shape == (20, 3)

    with pytest.raises(lrsig_error):
        read_samples({})
    with pytest.raises(lrsig_error, match = 'not found'):
        read_samples({ 's2': str(tmp_path / 's2.h5ad') })


def test_write_results(tmp_path):
    frame = pd.DataFrame({ 'interaction': ['CD70_CD27'], 'p.adjusted': [0.001] })
    path = tmp_path / 'results.tsv'
    write_results(frame, str(path))
    pd.testing.assert_frame_equal(pd.read_table(path), frame)
