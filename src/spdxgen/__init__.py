"""Generate SPDX documents describing package catalogs."""
