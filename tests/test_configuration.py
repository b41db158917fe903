
from lrsig.configuration import Configuration
from lrsig.lr.utils import default_params as V


def test_defaults():
    config = Configuration()
    assert config['lr.min.expr'] == 0.05
    assert config['lr.n.perms'] == 30
    assert config['lr.fisher.floor'] == 0.001
    assert config['lr.alpha'] == 0.01
    assert V.n_perms == 30


def test_update_ignores_unknown_keys():
    config = Configuration()
    config.update({ 'lr.n.perms': 100, 'unknown': 1 })
    assert config['lr.n.perms'] == 100
    assert 'unknown' not in config.config
