"""API routes for codegen-share."""
