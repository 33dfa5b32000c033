"""Adapters connecting the reconciler to catalogues and permission stores."""
