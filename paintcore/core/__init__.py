"""paintcore.core: foundation layer.

Contains the colour model, error taxonomy, canvas types, configuration and
report builder. This package has NO dependencies on paintcore.loaders or
paintcore.importer. Only stdlib, numpy and PIL are allowed here.
"""
