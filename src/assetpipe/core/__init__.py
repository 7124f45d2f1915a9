"""assetpipe core: configuration, preprocessors and shared utilities."""
