"""Format loaders.

Each loader takes a path (and optional ImportSettings) and returns a
LayerStack, raising ImageImportError on failure. paintcore.importer picks
the loader from the file extension.
"""
