
import os
import json
import pathlib
import importlib.metadata

from lrsig.configuration import default as config
from lrsig.ansi import info


# load configuration. this must happen before importing the pipeline modules, since
# their default parameters are read from the configuration at import time.
default_finders = [
    'lrsig.config',
    '.lrsig.config',
    '.lrsigrc',
    os.path.join(str(pathlib.Path.home()), 'lrsig.config'),
    os.path.join(str(pathlib.Path.home()), '.lrsig.config'),
    os.path.join(str(pathlib.Path.home()), '.lrsigrc')
]

for finder in default_finders:
    if os.path.exists(finder):
        info(f'load configuration from {finder}')
        with open(finder, 'r') as f:
            workspace_config = json.load(f)
            config.update(workspace_config)
            break


from lrsig.lr import (
    permutation_test, lr_result,
    read_interactions, read_samples, write_results
)


def version():
    try: ver_string = importlib.metadata.version("lrsig")
    except importlib.metadata.PackageNotFoundError: ver_string = 'unknown'
    info(f'lrsig {ver_string}')
    return ver_string


__all__ = [
    'config',
    'permutation_test',
    'lr_result',
    'read_interactions',
    'read_samples',
    'write_results',
    'version'
]
