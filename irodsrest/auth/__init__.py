"""Credential resolution for iRODS REST clients."""
