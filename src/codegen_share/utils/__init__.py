"""Utility modules for codegen-share."""
