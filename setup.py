
from setuptools import setup, find_packages

setup(
    name                 = 'lrsig',
    version              = '0.1.0',
    description          = 'permutation testing of ligand-receptor interactions between cell populations',
    author               = 'Zheng Yang',
    author_email         = 'xornent@outlook.com',
    license              = 'GPLv3',
    packages             = find_packages(include = ['lrsig', 'lrsig.*']),
    python_requires      = '>=3.9',
    install_requires     = [
        'anndata',
        'pandas',
        'numpy',
        'scipy',
        'statsmodels',
        'joblib',
        'tqdm'
    ],
    extras_require       = {
        'test': ['pytest']
    },
    include_package_data = False,
    zip_safe             = False
)
