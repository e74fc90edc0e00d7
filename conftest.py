"""Root conftest.

Its presence makes pytest treat the checkout root as rootdir and insert it
on sys.path, so ``import xcheck`` works without installing the package.
"""
