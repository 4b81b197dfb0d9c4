"""Buildpack command implementations (bin/detect, bin/compile, bin/release)."""
