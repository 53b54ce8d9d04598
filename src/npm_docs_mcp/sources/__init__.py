"""Documentation sources: npm registry, GitHub raw files, package tarballs."""
